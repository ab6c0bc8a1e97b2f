"""
Mapping between rendered (letterboxed, zoomed) space and natural pixel space.

An image shown with "contain" fitting is scaled to fit entirely inside its
box with its aspect ratio preserved, leaving equal margins on one axis.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .models import BoundingBox, PointerEvent
from ..config import get_config_value
from ..processing.models import ScaleFactors

logger = logging.getLogger(__name__)

Point = Tuple[float, float]

DEFAULT_MIN_ZOOM = 0.2
DEFAULT_MAX_ZOOM = 3.0
DEFAULT_ZOOM_STEP = 0.1


@dataclass(frozen=True)
class RenderGeometry:
    """
    Where an image lands inside its box.

    Offsets are relative to the box's top-left corner. The rendered aspect
    ratio always equals the natural aspect ratio.
    """
    natural_width: float
    natural_height: float
    rendered_width: float
    rendered_height: float
    offset_x: float
    offset_y: float

    @classmethod
    def compute(cls, natural_width: float, natural_height: float,
                box_width: float, box_height: float, zoom: float = 1.0) -> 'RenderGeometry':
        """
        Fit the natural size inside the box, then scale by ``zoom`` about the box centre.

        Args:
            natural_width: Decoded image width
            natural_height: Decoded image height
            box_width: Container width
            box_height: Container height
            zoom: Uniform zoom factor (1.0 = fitted)
        """
        natural_aspect = natural_width / natural_height
        box_aspect = box_width / box_height

        if natural_aspect > box_aspect:
            # Wider than the box: fill width, letterbox top and bottom
            rendered_width = box_width
            rendered_height = box_width / natural_aspect
            offset_x = 0.0
            offset_y = (box_height - rendered_height) / 2
        else:
            # Taller than the box: fill height, letterbox left and right
            rendered_height = box_height
            rendered_width = box_height * natural_aspect
            offset_x = (box_width - rendered_width) / 2
            offset_y = 0.0

        if zoom != 1.0:
            center_x = box_width / 2
            center_y = box_height / 2
            offset_x = center_x + (offset_x - center_x) * zoom
            offset_y = center_y + (offset_y - center_y) * zoom
            rendered_width *= zoom
            rendered_height *= zoom

        return cls(
            natural_width=natural_width,
            natural_height=natural_height,
            rendered_width=rendered_width,
            rendered_height=rendered_height,
            offset_x=offset_x,
            offset_y=offset_y,
        )

    @property
    def scale_factors(self) -> ScaleFactors:
        """Natural-per-rendered pixel ratios, for converting display rectangles."""
        return ScaleFactors.from_dimensions(
            self.natural_width, self.natural_height,
            self.rendered_width, self.rendered_height,
        )

    def contains(self, x: float, y: float) -> bool:
        """True if box-relative (x, y) lies on the rendered image, edges included."""
        return (self.offset_x <= x <= self.offset_x + self.rendered_width and
                self.offset_y <= y <= self.offset_y + self.rendered_height)

    def to_natural(self, x: float, y: float) -> Optional[Point]:
        """Convert a box-relative point to natural pixels, or None if it is off the image."""
        if not self.contains(x, y):
            return None
        relative_x = (x - self.offset_x) / self.rendered_width
        relative_y = (y - self.offset_y) / self.rendered_height
        return relative_x * self.natural_width, relative_y * self.natural_height


def map_pointer_to_image_space(client_x: float, client_y: float, box: BoundingBox,
                               natural_width: float, natural_height: float) -> Optional[Point]:
    """
    Map a client-space pointer position to natural image coordinates.

    The box is the on-screen rectangle of the image element as measured
    after layout, so it already reflects any container zoom.

    Returns:
        (x, y) in natural pixels, or None when the pointer is outside the
        rendered image or the image has no size yet
    """
    if natural_width <= 0 or natural_height <= 0 or box.width <= 0 or box.height <= 0:
        return None

    geometry = RenderGeometry.compute(natural_width, natural_height, box.width, box.height)
    return geometry.to_natural(client_x - box.left, client_y - box.top)


class CoordinateMapper:
    """Maps pointer events on one displayed image to natural pixels."""

    def __init__(self, natural_width: int, natural_height: int, box: BoundingBox):
        self.natural_width = natural_width
        self.natural_height = natural_height
        self.box = box

    def update_box(self, box: BoundingBox) -> None:
        """Record a new on-screen rectangle after layout, resize or zoom."""
        self.box = box

    @property
    def geometry(self) -> RenderGeometry:
        return RenderGeometry.compute(
            self.natural_width, self.natural_height, self.box.width, self.box.height
        )

    @property
    def rendered_width(self) -> float:
        return self.geometry.rendered_width

    def map(self, client_x: float, client_y: float) -> Optional[Point]:
        return map_pointer_to_image_space(
            client_x, client_y, self.box, self.natural_width, self.natural_height
        )

    def map_event(self, event: PointerEvent) -> Optional[Point]:
        return self.map(event.client_x, event.client_y)

    def brush_scale(self) -> float:
        """Natural pixels per rendered pixel along the width."""
        rendered = self.rendered_width
        if rendered <= 0:
            return 1.0
        return self.natural_width / rendered


@dataclass(frozen=True)
class ZoomSettings:
    """Zoom limits for the image viewer."""
    minimum: float = DEFAULT_MIN_ZOOM
    maximum: float = DEFAULT_MAX_ZOOM
    step: float = DEFAULT_ZOOM_STEP

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'ZoomSettings':
        return cls(
            minimum=float(get_config_value(config, 'viewer.zoom.min', DEFAULT_MIN_ZOOM)),
            maximum=float(get_config_value(config, 'viewer.zoom.max', DEFAULT_MAX_ZOOM)),
            step=float(get_config_value(config, 'viewer.zoom.step', DEFAULT_ZOOM_STEP)),
        )

    def clamp(self, zoom: float) -> float:
        # 1.1 + 0.1 -> 1.2, not 1.2000000000000002
        return round(min(self.maximum, max(self.minimum, zoom)), 6)

    def zoom_in(self, zoom: float) -> float:
        return self.clamp(zoom + self.step)

    def zoom_out(self, zoom: float) -> float:
        return self.clamp(zoom - self.step)

    @staticmethod
    def reset() -> float:
        return 1.0


def clamp_zoom(zoom: float, minimum: float = DEFAULT_MIN_ZOOM,
               maximum: float = DEFAULT_MAX_ZOOM) -> float:
    return ZoomSettings(minimum=minimum, maximum=maximum).clamp(zoom)


def zoom_in(zoom: float) -> float:
    """One step closer, capped at the maximum zoom."""
    return ZoomSettings().zoom_in(zoom)


def zoom_out(zoom: float) -> float:
    """One step further, floored at the minimum zoom."""
    return ZoomSettings().zoom_out(zoom)


def reset_zoom() -> float:
    return ZoomSettings.reset()
