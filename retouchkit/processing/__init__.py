"""
Raster processing modules for RetouchKit

Includes the adjustment pipeline (rotation, tone, sharpening), cropping and resizing.
"""

from .models import (
    RasterImage,
    AdjustmentParams,
    NEUTRAL_PARAMS,
    Rect,
    ScaleFactors,
    param_ranges_from_config,
)
from .adjustment_pipeline import AdjustmentPipeline, apply_adjustments
from .background import AdjustmentWorker

__all__ = [
    "RasterImage",
    "AdjustmentParams",
    "NEUTRAL_PARAMS",
    "Rect",
    "ScaleFactors",
    "param_ranges_from_config",
    "AdjustmentPipeline",
    "apply_adjustments",
    "AdjustmentWorker",
]
