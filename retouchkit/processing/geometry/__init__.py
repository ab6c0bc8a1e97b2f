"""
Geometry processing modules for RetouchKit

Includes rotation onto a bounding canvas, scale-corrected cropping and resizing.
"""

from .rotation import RotationSizer, rotated_canvas_size, rotate_raster
from .crop import CropExtractor, crop_raster
from .resize import Resizer, RESIZE_PRESETS, resize_raster, resize_to_preset, validate_dimensions

__all__ = [
    "RotationSizer",
    "rotated_canvas_size",
    "rotate_raster",
    "CropExtractor",
    "crop_raster",
    "Resizer",
    "RESIZE_PRESETS",
    "resize_raster",
    "resize_to_preset",
    "validate_dimensions",
]
