"""
Scale-corrected rectangular extraction

Crop rectangles are drawn against the displayed (possibly zoomed) image and
converted to natural pixel coordinates before extraction.
"""

import math
import logging
from typing import Union

import numpy as np
import cv2

from ..models import RasterImage, Rect, ScaleFactors
from ...exceptions import ValidationError

logger = logging.getLogger(__name__)


def _choose_interpolation(source_width: int, source_height: int,
                          target_width: int, target_height: int) -> int:
    """Area filter when shrinking, cubic when enlarging, bilinear when mixed."""
    if target_width <= source_width and target_height <= source_height:
        return cv2.INTER_AREA
    if target_width >= source_width and target_height >= source_height:
        return cv2.INTER_CUBIC
    return cv2.INTER_LINEAR


def resample(pixels: np.ndarray, target_width: int, target_height: int) -> np.ndarray:
    """Resample an RGBA buffer to the target size, copying when already that size."""
    height, width = pixels.shape[:2]
    if (width, height) == (target_width, target_height):
        return pixels.copy()
    interpolation = _choose_interpolation(width, height, target_width, target_height)
    return cv2.resize(np.ascontiguousarray(pixels), (target_width, target_height), interpolation=interpolation)


class CropExtractor:
    """Extracts a display-space rectangle from a raster in natural pixels."""

    def natural_rect(self, raster: RasterImage, display_rect: Rect,
                     scale_x: float, scale_y: float) -> Rect:
        """
        Convert a display-space rectangle to natural coordinates.

        The result is clipped to the raster bounds so small rounding errors
        at the image edge are tolerated rather than rejected.
        """
        scaled = display_rect.scaled(scale_x, scale_y)
        clamped = scaled.clamped(raster.width, raster.height)
        if clamped != scaled:
            logger.debug(f"Crop rectangle {scaled} clamped to {clamped}")
        return clamped

    def crop(self, raster: RasterImage, display_rect: Rect,
             scale_x: float = 1.0, scale_y: float = 1.0) -> RasterImage:
        """
        Extract the sub-rectangle of ``raster`` selected by ``display_rect``.

        Args:
            raster: Source raster
            display_rect: Rectangle in displayed-image coordinates
            scale_x: Natural width / displayed width
            scale_y: Natural height / displayed height

        Returns:
            New raster of the scaled rectangle's size

        Raises:
            ValidationError: If the rectangle resolves to zero area
        """
        rect = self.natural_rect(raster, display_rect, scale_x, scale_y)
        out_width = int(rect.width)
        out_height = int(rect.height)

        if out_width <= 0 or out_height <= 0:
            raise ValidationError(
                f"Crop rectangle {display_rect} resolves to zero area "
                f"on a {raster.width}x{raster.height} image"
            )

        left = math.floor(rect.x)
        top = math.floor(rect.y)
        right = min(raster.width, math.ceil(rect.x + rect.width))
        bottom = min(raster.height, math.ceil(rect.y + rect.height))

        region = raster.pixels[top:bottom, left:right]
        pixels = resample(region, out_width, out_height)

        logger.debug(
            f"Cropped {raster.width}x{raster.height} at ({rect.x:.1f}, {rect.y:.1f}) "
            f"to {out_width}x{out_height}"
        )
        return RasterImage(np.ascontiguousarray(pixels))


def crop_raster(raster: RasterImage, display_rect: Rect,
                scale_x: Union[float, ScaleFactors] = 1.0,
                scale_y: float = 1.0) -> RasterImage:
    """
    Crop with explicit scale factors or a ScaleFactors value.
    """
    if isinstance(scale_x, ScaleFactors):
        scale_x, scale_y = scale_x.scale_x, scale_x.scale_y
    return CropExtractor().crop(raster, display_rect, scale_x, scale_y)
