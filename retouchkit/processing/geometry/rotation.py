"""
Rotation onto a bounding canvas

The rotated source is drawn about its own centre into the centre of the
smallest axis-aligned canvas that contains it, so nothing is clipped.
"""

import math
import logging
from typing import Optional, Tuple

import numpy as np
import cv2

from ..models import RasterImage, allocate_pixels, DEFAULT_MAX_CANVAS_AREA
from ...exceptions import AllocationError

logger = logging.getLogger(__name__)


def _normalized_radians(angle: float) -> float:
    # Sign follows the dividend, so -90 stays -90 rather than becoming 270
    return math.fmod(angle, 360.0) * math.pi / 180.0


def rotated_canvas_size(width: int, height: int, angle: float) -> Tuple[int, int]:
    """
    Compute the canvas size that fully contains a rotated image.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        angle: Rotation in degrees

    Returns:
        (canvas_width, canvas_height)
    """
    rad = _normalized_radians(angle)
    sin = abs(math.sin(rad))
    cos = abs(math.cos(rad))

    new_width = math.floor(width * cos + height * sin)
    new_height = math.floor(width * sin + height * cos)
    return new_width, new_height


def rotation_matrix(width: int, height: int, canvas_width: int, canvas_height: int,
                    angle: float) -> np.ndarray:
    """
    Affine matrix mapping source pixel indices to canvas pixel indices.

    Rotation is clockwise on screen (y axis pointing down). Pixel centres sit
    at index + 0.5 in canvas space, hence the half-pixel terms.
    """
    rad = _normalized_radians(angle)
    cos = math.cos(rad)
    sin = math.sin(rad)

    src_cx = width / 2.0 - 0.5
    src_cy = height / 2.0 - 0.5
    dst_cx = canvas_width / 2.0 - 0.5
    dst_cy = canvas_height / 2.0 - 0.5

    return np.array([
        [cos, -sin, dst_cx - (cos * src_cx - sin * src_cy)],
        [sin, cos, dst_cy - (sin * src_cx + cos * src_cy)],
    ], dtype=np.float64)


class RotationSizer:
    """Rotates rasters onto their bounding canvas."""

    def __init__(self, max_canvas_area: Optional[int] = DEFAULT_MAX_CANVAS_AREA):
        """
        Args:
            max_canvas_area: Largest canvas area to allocate, None for no limit
        """
        self.max_canvas_area = max_canvas_area

    def canvas_size(self, width: int, height: int, angle: float) -> Tuple[int, int]:
        return rotated_canvas_size(width, height, angle)

    def rotate(self, raster: RasterImage, angle: float) -> RasterImage:
        """
        Draw ``raster`` rotated by ``angle`` degrees on a new canvas.

        Area of the canvas not covered by the source is transparent black.

        Raises:
            AllocationError: If the canvas cannot be allocated
        """
        canvas_width, canvas_height = rotated_canvas_size(raster.width, raster.height, angle)
        canvas = allocate_pixels(canvas_width, canvas_height, self.max_canvas_area)

        if math.fmod(angle, 360.0) == 0:
            canvas[:, :, :] = raster.pixels
            return RasterImage(canvas)

        matrix = rotation_matrix(raster.width, raster.height, canvas_width, canvas_height, angle)
        try:
            canvas = cv2.warpAffine(
                raster.pixels,
                matrix,
                (canvas_width, canvas_height),
                dst=canvas,
                flags=cv2.INTER_LINEAR,
                borderMode=cv2.BORDER_CONSTANT,
                borderValue=(0, 0, 0, 0),
            )
        except cv2.error as e:
            logger.error(f"Rotation onto {canvas_width}x{canvas_height} canvas failed: {e}")
            raise AllocationError(f"Cannot rotate onto a {canvas_width}x{canvas_height} canvas") from e

        logger.debug(
            f"Rotated {raster.width}x{raster.height} by {angle} degrees "
            f"onto {canvas_width}x{canvas_height}"
        )
        return RasterImage(canvas)


def rotate_raster(raster: RasterImage, angle: float) -> RasterImage:
    """Rotate with the default canvas limit."""
    return RotationSizer().rotate(raster, angle)
