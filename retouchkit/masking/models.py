"""
Data models for freehand mask painting.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

RgbaColor = Tuple[int, int, int, int]

PRIMARY_MASK_COLOR: RgbaColor = (255, 0, 0, 255)      # Marks regions to remove
SECONDARY_MASK_COLOR: RgbaColor = (255, 255, 255, 255)  # Marks regions to keep or recolor


class MaskMode(Enum):
    """Masking tools and the colour each one paints with."""
    REMOVE = "remove"
    KEEP_IN_FOCUS = "background-blur"
    RECOLOR = "change-color"

    @property
    def uses_primary_color(self) -> bool:
        return self is MaskMode.REMOVE


class PointerPhase(Enum):
    """Phase of a pointer or touch event."""
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"


class PainterState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer/touch sample in client (screen) coordinates."""
    client_x: float
    client_y: float
    phase: PointerPhase


@dataclass(frozen=True)
class BoundingBox:
    """On-screen rectangle of the displayed image element, measured after layout and zoom."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class Stroke:
    """A freehand stroke in natural pixel coordinates."""
    width: float
    color: RgbaColor
    points: List[Tuple[float, float]] = field(default_factory=list)
