"""
Adjustment pipeline for RetouchKit

Rotation, tone mapping and sharpening combined into one raster-to-raster
transform. The input raster is never modified.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from .models import (
    RasterImage, AdjustmentParams, DEFAULT_MAX_CANVAS_AREA, PARAM_RANGES, param_ranges_from_config,
)
from .geometry.rotation import RotationSizer
from .tone.tone_mapper import ToneMapper
from .sharpening import ConvolutionSharpener, SharpeningSettings
from ..config import get_config_value
from ..utils.logging import log_timing

logger = logging.getLogger(__name__)


class AdjustmentPipeline:
    """
    Applies slider adjustments to a raster.

    Steps, in order:
    1. Neutral parameters short-circuit and return the input as is
    2. Rotate onto the bounding canvas
    3. Brightness/contrast then gamma
    4. Sharpen against a snapshot of step 3's output (only when sharpness > 0)
    """

    def __init__(self, max_canvas_area: Optional[int] = DEFAULT_MAX_CANVAS_AREA,
                 param_ranges: Optional[Dict[str, Tuple[float, float, float]]] = None):
        """
        Args:
            max_canvas_area: Largest output canvas area, None for no limit
            param_ranges: Accepted (min, max, neutral) per slider, defaults to PARAM_RANGES
        """
        self.param_ranges = param_ranges or PARAM_RANGES
        self.rotation = RotationSizer(max_canvas_area=max_canvas_area)
        self.tone_mapper = ToneMapper()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'AdjustmentPipeline':
        return cls(
            max_canvas_area=get_config_value(config, 'pipeline.max_canvas_area', DEFAULT_MAX_CANVAS_AREA),
            param_ranges=param_ranges_from_config(config),
        )

    def adjust(self, raster: RasterImage, params: AdjustmentParams) -> RasterImage:
        """
        Apply ``params`` to ``raster``.

        Args:
            raster: Source raster
            params: Slider values

        Returns:
            The adjusted raster, or ``raster`` itself for neutral params

        Raises:
            ValidationError: If a slider is outside the configured range
            AllocationError: If an output buffer cannot be allocated
        """
        if params.is_neutral:
            return raster

        params.validate(self.param_ranges)

        logger.debug(f"Adjusting {raster.width}x{raster.height} with {params.to_dict()}")

        with log_timing(logger, "rotation"):
            rotated = self.rotation.rotate(raster, params.angle)

        with log_timing(logger, "tone mapping"):
            pixels = self.tone_mapper.map_pixels(
                rotated.pixels,
                brightness=params.brightness,
                contrast=params.contrast,
                gamma=params.gamma,
            )

        if params.sharpness > 0:
            with log_timing(logger, "sharpening"):
                sharpener = ConvolutionSharpener(SharpeningSettings(sharpness=params.sharpness))
                pixels = sharpener.sharpen_pixels(pixels)

        return RasterImage(pixels)


def apply_adjustments(raster: RasterImage, params: AdjustmentParams) -> RasterImage:
    """Run the default pipeline once."""
    return AdjustmentPipeline().adjust(raster, params)
