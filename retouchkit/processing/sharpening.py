"""
Convolution sharpening for RetouchKit.

A 3x3 Laplacian-style kernel is applied to each colour channel:

     0   -s    0
    -s  1+4s  -s
     0   -s    0

with s = sharpness / 250. The kernel reads from a snapshot of its input so
already-sharpened neighbours are never sampled. The outermost row and column
on every side are left as they were.
"""

import logging
from dataclasses import dataclass

import numpy as np
from scipy import ndimage

from .models import RasterImage
from ..exceptions import AllocationError

logger = logging.getLogger(__name__)

KERNEL_DIVISOR = 250.0


@dataclass(frozen=True)
class SharpeningSettings:
    """Settings for convolution sharpening."""
    sharpness: float = 0.0  # 0-300

    @property
    def enabled(self) -> bool:
        return self.sharpness > 0


def sharpen_kernel(sharpness: float) -> np.ndarray:
    """Build the 3x3 kernel for a sharpness value."""
    s = sharpness / KERNEL_DIVISOR
    return np.array([
        [0.0, -s, 0.0],
        [-s, 1.0 + 4.0 * s, -s],
        [0.0, -s, 0.0],
    ], dtype=np.float64)


class ConvolutionSharpener:
    """Applies the sharpening kernel to interior pixels of an RGBA buffer."""

    def __init__(self, settings: SharpeningSettings):
        self.settings = settings

    def sharpen_pixels(self, pixels: np.ndarray) -> np.ndarray:
        """
        Sharpen an RGBA buffer.

        Args:
            pixels: uint8 (height, width, 4) buffer, read only

        Returns:
            New buffer; border pixels and alpha are copied unchanged
        """
        height, width = pixels.shape[:2]
        try:
            result = pixels.copy()
            if not self.settings.enabled or height < 3 or width < 3:
                # Nothing to do, or no interior pixels to convolve
                return result

            kernel = sharpen_kernel(self.settings.sharpness)

            # One channel at a time; each snapshot is read only by the kernel
            for c in range(3):
                snapshot = pixels[:, :, c].astype(np.float64)
                filtered = ndimage.correlate(snapshot, kernel, mode='nearest')
                interior = filtered[1:-1, 1:-1]
                result[1:-1, 1:-1, c] = np.rint(np.clip(interior, 0.0, 255.0)).astype(np.uint8)
        except MemoryError as e:
            logger.error(f"Out of memory sharpening a {width}x{height} canvas")
            raise AllocationError(f"Out of memory sharpening a {width}x{height} canvas") from e

        return result

    def apply(self, raster: RasterImage) -> RasterImage:
        return RasterImage(self.sharpen_pixels(raster.pixels))


def sharpen(raster: RasterImage, sharpness: float) -> RasterImage:
    """Sharpen ``raster`` with the given sharpness (0-300)."""
    return ConvolutionSharpener(SharpeningSettings(sharpness=sharpness)).apply(raster)
