"""
Brightness, contrast and gamma correction for RGBA rasters.

Each stage writes back into 8-bit storage, exactly like a clamped byte
buffer: values are clipped to [0, 255] and rounded half to even before the
next stage reads them.
"""

import logging
from functools import lru_cache

import numpy as np

from ..models import RasterImage, AdjustmentParams
from ...exceptions import AllocationError

logger = logging.getLogger(__name__)


def _store_u8(values: np.ndarray) -> np.ndarray:
    """Clip and round to 8-bit the way a clamped byte array stores floats."""
    return np.rint(np.clip(values, 0.0, 255.0))


@lru_cache(maxsize=32)
def build_tone_lut(brightness: float, contrast: float, gamma: float) -> np.ndarray:
    """
    Build the 256-entry lookup table for one parameter set.

    Contrast and brightness are applied first, then gamma.

    Args:
        brightness: 0-200, 100 is neutral
        contrast: 0-200, 100 is neutral
        gamma: 10-300, gamma exponent is 1 / (gamma / 100)

    Returns:
        uint8 array of shape (256,)
    """
    values = np.arange(256, dtype=np.float64)

    # Contrast pivots around mid-grey, brightness is an additive offset
    leveled = _store_u8((values - 128.0) * (contrast / 100.0) + 128.0 + (brightness - 100.0))

    gamma_correction = 1.0 / (gamma / 100.0)
    corrected = _store_u8(np.power(leveled / 255.0, gamma_correction) * 255.0)

    lut = corrected.astype(np.uint8)
    lut.flags.writeable = False
    return lut


class ToneMapper:
    """Per-pixel brightness/contrast/gamma correction on RGB, alpha untouched."""

    def map_pixels(self, pixels: np.ndarray, brightness: float = 100.0,
                   contrast: float = 100.0, gamma: float = 100.0) -> np.ndarray:
        """
        Tone map an RGBA buffer.

        Returns:
            New uint8 buffer of the same shape

        Raises:
            AllocationError: If the output buffer cannot be allocated
        """
        lut = build_tone_lut(float(brightness), float(contrast), float(gamma))
        try:
            result = pixels.copy()
            result[:, :, :3] = lut[pixels[:, :, :3]]
        except MemoryError as e:
            height, width = pixels.shape[:2]
            logger.error(f"Out of memory tone mapping a {width}x{height} canvas")
            raise AllocationError(f"Out of memory tone mapping a {width}x{height} canvas") from e
        return result

    def apply(self, raster: RasterImage, params: AdjustmentParams) -> RasterImage:
        """Tone map ``raster`` with the brightness, contrast and gamma of ``params``."""
        return RasterImage(self.map_pixels(
            raster.pixels,
            brightness=params.brightness,
            contrast=params.contrast,
            gamma=params.gamma,
        ))

    @staticmethod
    def map_value(value: int, brightness: float = 100.0, contrast: float = 100.0,
                  gamma: float = 100.0) -> int:
        """Tone map a single channel value."""
        return int(build_tone_lut(float(brightness), float(contrast), float(gamma))[value])
