"""
Data models for the RetouchKit raster pipeline.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Tuple, Optional
import logging

import numpy as np

from ..config import get_config_value
from ..exceptions import AllocationError, ValidationError

logger = logging.getLogger(__name__)

CHANNELS = 4  # RGBA8

# Largest canvas area accepted by default (16384 x 16384)
DEFAULT_MAX_CANVAS_AREA = 268435456

# (min, max, neutral) for each adjustment slider
PARAM_RANGES: Dict[str, Tuple[float, float, float]] = {
    'brightness': (0.0, 200.0, 100.0),
    'contrast': (0.0, 200.0, 100.0),
    'gamma': (10.0, 300.0, 100.0),
    'sharpness': (0.0, 300.0, 0.0),
    'angle': (-180.0, 180.0, 0.0),
}


def allocate_pixels(width: int, height: int,
                    max_area: Optional[int] = DEFAULT_MAX_CANVAS_AREA) -> np.ndarray:
    """
    Allocate a zeroed (fully transparent) RGBA buffer.

    Args:
        width: Canvas width in pixels
        height: Canvas height in pixels
        max_area: Largest accepted width*height, None for no limit

    Returns:
        uint8 array of shape (height, width, 4)

    Raises:
        AllocationError: If the dimensions are unusable or memory runs out
    """
    if width <= 0 or height <= 0:
        logger.error(f"Cannot allocate a {width}x{height} canvas")
        raise AllocationError(f"Unsupported canvas dimensions: {width}x{height}")

    if max_area is not None and width * height > max_area:
        logger.error(f"Canvas {width}x{height} exceeds the area limit of {max_area} pixels")
        raise AllocationError(
            f"Canvas {width}x{height} exceeds the maximum area of {max_area} pixels"
        )

    try:
        return np.zeros((height, width, CHANNELS), dtype=np.uint8)
    except MemoryError as e:
        logger.error(f"Out of memory allocating a {width}x{height} canvas")
        raise AllocationError(f"Out of memory allocating a {width}x{height} canvas") from e


@dataclass(eq=False)
class RasterImage:
    """
    An RGBA8 raster.

    ``pixels`` has shape (height, width, 4) and dtype uint8. Transforms never
    modify it in place; they return a new RasterImage.
    """
    pixels: np.ndarray

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise ValidationError("Raster pixels must be a numpy array")
        if self.pixels.dtype != np.uint8:
            raise ValidationError(f"Raster pixels must be uint8, got {self.pixels.dtype}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != CHANNELS:
            raise ValidationError(
                f"Raster pixels must have shape (height, width, 4), got {self.pixels.shape}"
            )
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise ValidationError("Raster dimensions must be positive")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        """(width, height)"""
        return self.width, self.height

    @classmethod
    def blank(cls, width: int, height: int,
              max_area: Optional[int] = DEFAULT_MAX_CANVAS_AREA) -> 'RasterImage':
        """Create a fully transparent raster."""
        return cls(allocate_pixels(width, height, max_area))

    @classmethod
    def from_array(cls, array: np.ndarray) -> 'RasterImage':
        """
        Wrap an RGB or RGBA uint8 array, copying it.

        RGB input gets an opaque alpha channel.
        """
        array = np.asarray(array)
        if array.dtype != np.uint8:
            raise ValidationError(f"Expected a uint8 array, got {array.dtype}")
        if array.ndim == 3 and array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        return cls(np.ascontiguousarray(array).copy())

    def copy(self) -> 'RasterImage':
        return RasterImage(self.pixels.copy())

    def to_bytes(self) -> bytes:
        """Raw RGBA bytes in row-major order (length width*height*4)."""
        return self.pixels.tobytes()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterImage):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    def __repr__(self) -> str:
        return f"RasterImage(width={self.width}, height={self.height})"


@dataclass(frozen=True)
class AdjustmentParams:
    """Slider values for the adjustment pipeline."""
    brightness: float = 100.0  # 0-200, 100 is neutral
    contrast: float = 100.0    # 0-200, 100 is neutral
    gamma: float = 100.0       # 10-300, value/100 is the gamma exponent
    sharpness: float = 0.0     # 0-300
    angle: float = 0.0         # -180 to 180 degrees

    def __post_init__(self):
        """Validate slider values."""
        self.validate(PARAM_RANGES)

    def validate(self, ranges: Dict[str, Tuple[float, float, float]]) -> None:
        """
        Check every slider against ``ranges``.

        Raises:
            ValidationError: On a non-numeric or out-of-range value
        """
        for key, (min_val, max_val, _) in ranges.items():
            value = getattr(self, key)
            if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
                raise ValidationError(f"Adjustment '{key}' must be a number, got {value!r}")
            if not min_val <= value <= max_val:
                raise ValidationError(
                    f"Adjustment '{key}' value {value} out of range [{min_val}, {max_val}]"
                )

    @property
    def is_neutral(self) -> bool:
        """True when every slider sits at its neutral value."""
        return all(getattr(self, key) == neutral for key, (_, _, neutral) in PARAM_RANGES.items())

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AdjustmentParams':
        """Build params from the UI parameter surface; missing keys stay neutral."""
        unknown = set(data) - set(PARAM_RANGES)
        if unknown:
            raise ValidationError(f"Unknown adjustment keys: {', '.join(sorted(unknown))}")
        return cls(**data)


NEUTRAL_PARAMS = AdjustmentParams()


def param_ranges_from_config(config: Dict[str, Any]) -> Dict[str, Tuple[float, float, float]]:
    """
    Slider ranges from the ``adjustments`` config section.

    Configured limits can only narrow the built-in ones; neutral values are fixed.
    """
    ranges = {}
    for key, (min_val, max_val, neutral) in PARAM_RANGES.items():
        section = get_config_value(config, f'adjustments.{key}') or {}
        low = max(min_val, float(section.get('min', min_val)))
        high = min(max_val, float(section.get('max', max_val)))
        if low > high:
            raise ValidationError(f"Configured range for '{key}' is empty: [{low}, {high}]")
        ranges[key] = (low, high, neutral)
    return ranges


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in display or natural coordinates."""
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return max(0.0, self.width) * max(0.0, self.height)

    def scaled(self, scale_x: float, scale_y: float) -> 'Rect':
        return Rect(
            x=self.x * scale_x,
            y=self.y * scale_y,
            width=self.width * scale_x,
            height=self.height * scale_y,
        )

    def clamped(self, max_width: float, max_height: float) -> 'Rect':
        """Clip to the region [0, max_width] x [0, max_height]."""
        left = min(max(self.x, 0.0), max_width)
        top = min(max(self.y, 0.0), max_height)
        right = min(max(self.x + self.width, 0.0), max_width)
        bottom = min(max(self.y + self.height, 0.0), max_height)
        return Rect(left, top, max(0.0, right - left), max(0.0, bottom - top))


@dataclass(frozen=True)
class ScaleFactors:
    """Ratio of natural size to displayed size on each axis."""
    scale_x: float = 1.0
    scale_y: float = 1.0

    @classmethod
    def from_dimensions(cls, natural_width: float, natural_height: float,
                        displayed_width: float, displayed_height: float) -> 'ScaleFactors':
        if displayed_width <= 0 or displayed_height <= 0:
            raise ValidationError(
                f"Displayed size must be positive, got {displayed_width}x{displayed_height}"
            )
        return cls(natural_width / displayed_width, natural_height / displayed_height)
