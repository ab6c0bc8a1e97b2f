"""
RetouchKit: local raster adjustment and coordinate-mapped masking

Brightness/contrast/gamma, rotation and sharpening of RGBA rasters,
scale-corrected cropping and resizing, and freehand mask painting aligned
with the natural pixels of a displayed image.
"""

__version__ = "0.1.0"

# Core imports for easy access
from .config import load_config
from .exceptions import RetouchError, ValidationError, DecodeError, AllocationError
from .processing import RasterImage, AdjustmentParams, AdjustmentPipeline, apply_adjustments
from .masking import MaskPainter, MaskMode

__all__ = [
    "load_config",
    "RetouchError",
    "ValidationError",
    "DecodeError",
    "AllocationError",
    "RasterImage",
    "AdjustmentParams",
    "AdjustmentPipeline",
    "apply_adjustments",
    "MaskPainter",
    "MaskMode",
]
