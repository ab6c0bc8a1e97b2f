"""
Raster resampling to arbitrary target dimensions, plus named size presets.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .crop import resample
from ..models import RasterImage, DEFAULT_MAX_CANVAS_AREA
from ...config import get_config_value
from ...exceptions import AllocationError, ValidationError

logger = logging.getLogger(__name__)

RESIZE_PRESETS: Dict[str, Tuple[int, int]] = {
    'IG Square': (1080, 1080),
    'IG Portrait': (1080, 1350),
    'IG Story': (1080, 1920),
    'Facebook Post': (1200, 630),
    'Twitter Post': (1600, 900),
}


def validate_dimensions(width: Any, height: Any) -> Tuple[int, int]:
    """
    Check that a resize target is two positive whole numbers.

    Raises:
        ValidationError: On non-integer or non-positive values
    """
    for name, value in (('width', width), ('height', height)):
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ValidationError(f"Resize {name} must be a whole number, got {value!r}")
        if value <= 0:
            raise ValidationError(f"Resize {name} must be positive, got {value}")
    return int(width), int(height)


class Resizer:
    """Resamples rasters to target sizes; aspect ratio is the caller's concern."""

    def __init__(self, presets: Optional[Dict[str, Tuple[int, int]]] = None,
                 max_canvas_area: Optional[int] = DEFAULT_MAX_CANVAS_AREA):
        self.presets = dict(presets) if presets is not None else dict(RESIZE_PRESETS)
        self.max_canvas_area = max_canvas_area

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'Resizer':
        presets = get_config_value(config, 'resize.presets')
        if presets is not None:
            presets = {name: tuple(size) for name, size in presets.items()}
        return cls(
            presets=presets,
            max_canvas_area=get_config_value(config, 'pipeline.max_canvas_area', DEFAULT_MAX_CANVAS_AREA),
        )

    def resize(self, raster: RasterImage, target_width: int, target_height: int) -> RasterImage:
        """
        Resample ``raster`` to exactly ``target_width`` x ``target_height``.

        Raises:
            ValidationError: If either dimension is not a positive integer
            AllocationError: If the target canvas cannot be allocated
        """
        target_width, target_height = validate_dimensions(target_width, target_height)
        if self.max_canvas_area is not None and target_width * target_height > self.max_canvas_area:
            logger.error(f"Resize target {target_width}x{target_height} exceeds the canvas limit")
            raise AllocationError(
                f"Canvas {target_width}x{target_height} exceeds the maximum area of "
                f"{self.max_canvas_area} pixels"
            )

        try:
            pixels = resample(raster.pixels, target_width, target_height)
        except MemoryError as e:
            logger.error(f"Out of memory resizing to {target_width}x{target_height}")
            raise AllocationError(f"Out of memory resizing to {target_width}x{target_height}") from e
        logger.debug(
            f"Resized {raster.width}x{raster.height} to {target_width}x{target_height}"
        )
        return RasterImage(np.ascontiguousarray(pixels))

    def preset_size(self, name: str) -> Tuple[int, int]:
        try:
            return self.presets[name]
        except KeyError:
            raise ValidationError(
                f"Unknown resize preset '{name}'. Available: {', '.join(self.presets)}"
            ) from None

    def resize_to_preset(self, raster: RasterImage, name: str) -> RasterImage:
        width, height = self.preset_size(name)
        return self.resize(raster, width, height)


def resize_raster(raster: RasterImage, target_width: int, target_height: int) -> RasterImage:
    """Resize with the default presets and canvas limit."""
    return Resizer().resize(raster, target_width, target_height)


def resize_to_preset(raster: RasterImage, name: str) -> RasterImage:
    return Resizer().resize_to_preset(raster, name)
