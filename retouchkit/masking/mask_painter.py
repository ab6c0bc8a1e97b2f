"""
Freehand mask painting driven by pointer events.

A MaskPainter owns one mask raster, sized to the natural dimensions of the
source image, for one masking session. Strokes are rasterised segment by
segment as pointer moves arrive.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import cv2

from .models import (
    MaskMode, PainterState, PointerEvent, PointerPhase, BoundingBox, Stroke,
    RgbaColor, PRIMARY_MASK_COLOR, SECONDARY_MASK_COLOR,
)
from .coordinate_mapper import RenderGeometry, map_pointer_to_image_space
from ..config import get_config_value
from ..exceptions import ValidationError
from ..io.codec import encode_data_url
from ..processing.models import RasterImage, allocate_pixels

logger = logging.getLogger(__name__)

DEFAULT_BRUSH_WIDTH = 20.0  # display pixels

# Fractional bits passed to cv2.line so sub-pixel positions survive
_SHIFT_BITS = 4
_SHIFT_SCALE = 1 << _SHIFT_BITS


class MaskPainter:
    """
    Two-state (Idle/Drawing) painter for a same-size mask raster.

    - DOWN on the image starts a stroke
    - MOVE on the image extends it and paints the new segment
    - MOVE off the image, UP or LEAVE ends it; painted pixels stay
    """

    def __init__(self, width: int, height: int, mode: MaskMode = MaskMode.REMOVE,
                 base_brush_width: float = DEFAULT_BRUSH_WIDTH,
                 primary_color: RgbaColor = PRIMARY_MASK_COLOR,
                 secondary_color: RgbaColor = SECONDARY_MASK_COLOR,
                 antialias: bool = False):
        """
        Args:
            width: Natural width of the source image
            height: Natural height of the source image
            mode: Masking tool, fixes the stroke colour for the session
            base_brush_width: Brush width in display pixels
            primary_color: Colour painted in REMOVE mode
            secondary_color: Colour painted in KEEP_IN_FOCUS and RECOLOR modes
            antialias: Smooth stroke edges (partial alpha at the rim)
        """
        self.mode = mode
        self.base_brush_width = base_brush_width
        self.primary_color = tuple(int(c) for c in primary_color)
        self.secondary_color = tuple(int(c) for c in secondary_color)
        self.antialias = antialias

        self.state = PainterState.IDLE
        self.strokes: List[Stroke] = []
        self._current: Optional[Stroke] = None
        self._mask = allocate_pixels(width, height, max_area=None)

    @classmethod
    def from_config(cls, config: Dict[str, Any], width: int, height: int,
                    mode: MaskMode = MaskMode.REMOVE) -> 'MaskPainter':
        return cls(
            width, height, mode,
            base_brush_width=float(get_config_value(config, 'masking.base_brush_width', DEFAULT_BRUSH_WIDTH)),
            primary_color=tuple(get_config_value(config, 'masking.colors.primary', PRIMARY_MASK_COLOR)),
            secondary_color=tuple(get_config_value(config, 'masking.colors.secondary', SECONDARY_MASK_COLOR)),
            antialias=bool(get_config_value(config, 'masking.antialias', False)),
        )

    @property
    def width(self) -> int:
        return int(self._mask.shape[1])

    @property
    def height(self) -> int:
        return int(self._mask.shape[0])

    @property
    def color(self) -> RgbaColor:
        return self.primary_color if self.mode.uses_primary_color else self.secondary_color

    @property
    def is_drawing(self) -> bool:
        return self.state is PainterState.DRAWING

    def stroke_width(self, rendered_width: float) -> float:
        """Brush width in natural pixels for an image rendered ``rendered_width`` wide."""
        if rendered_width <= 0:
            return self.base_brush_width
        return self.base_brush_width * (self.width / rendered_width)

    # Event handling

    def handle_event(self, event: PointerEvent, box: BoundingBox) -> bool:
        """
        Feed one pointer event.

        Args:
            event: Pointer sample in client coordinates
            box: Current on-screen rectangle of the image element

        Returns:
            True if the event started a stroke or painted a segment
        """
        if event.phase in (PointerPhase.UP, PointerPhase.LEAVE):
            self.end_stroke()
            return False

        point = map_pointer_to_image_space(event.client_x, event.client_y, box, self.width, self.height)

        if event.phase is PointerPhase.DOWN:
            if point is None:
                return False
            geometry = RenderGeometry.compute(self.width, self.height, box.width, box.height)
            return self.begin_stroke(point, geometry.rendered_width)

        return self.extend_stroke(point)

    def begin_stroke(self, point: Tuple[float, float], rendered_width: float) -> bool:
        """Start a stroke at ``point`` (natural pixels). Idle -> Drawing."""
        if self.is_drawing:
            self.end_stroke()

        stroke = Stroke(width=self.stroke_width(rendered_width), color=self.color, points=[point])
        self._current = stroke
        self.strokes.append(stroke)
        self.state = PainterState.DRAWING
        logger.debug(f"Stroke started at ({point[0]:.1f}, {point[1]:.1f}) width {stroke.width:.1f}")
        return True

    def extend_stroke(self, point: Optional[Tuple[float, float]]) -> bool:
        """
        Extend the current stroke to ``point`` and paint the new segment.

        A None point (pointer left the image) ends the stroke.
        """
        if not self.is_drawing or self._current is None:
            return False

        if point is None:
            self.end_stroke()
            return False

        last = self._current.points[-1]
        self._current.points.append(point)
        if point == last:
            return False

        self._paint_segment(last, point, self._current.width, self._current.color)
        return True

    def end_stroke(self) -> None:
        """Drawing -> Idle. Painted pixels are kept."""
        if self.is_drawing:
            logger.debug(f"Stroke ended with {len(self._current.points)} points")
        self._current = None
        self.state = PainterState.IDLE

    def _paint_segment(self, start: Tuple[float, float], end: Tuple[float, float],
                       width: float, color: RgbaColor) -> None:
        # cv2 draws thick lines with round ends, so consecutive segments join round
        thickness = max(1, int(round(width)))
        line_type = cv2.LINE_AA if self.antialias else cv2.LINE_8
        cv2.line(
            self._mask,
            (int(round(start[0] * _SHIFT_SCALE)), int(round(start[1] * _SHIFT_SCALE))),
            (int(round(end[0] * _SHIFT_SCALE)), int(round(end[1] * _SHIFT_SCALE))),
            color,
            thickness=thickness,
            lineType=line_type,
            shift=_SHIFT_BITS,
        )

    # Mask state

    def clear(self) -> None:
        """Reset the whole mask to transparent. The drawing state is left as is."""
        self._mask[:, :, :] = 0
        self.strokes = [self._current] if self._current is not None else []
        logger.debug("Mask cleared")

    def is_empty(self) -> bool:
        """True when no channel of any pixel is non-zero."""
        return not np.any(self._mask)

    def require_painted(self) -> None:
        """
        Gate for mask-dependent actions.

        Raises:
            ValidationError: If nothing has been painted
        """
        if self.is_empty():
            raise ValidationError("Mask is empty: paint the area to edit first")

    def reset_source(self, width: int, height: int) -> None:
        """
        Resize the mask for a new source image, discarding its content.

        Any stroke in progress ends.
        """
        self.end_stroke()
        self._mask = allocate_pixels(width, height, max_area=None)
        self.strokes = []
        logger.debug(f"Mask reset to {width}x{height}")

    def to_raster(self) -> RasterImage:
        """Copy of the mask as a raster of the source's natural size."""
        return RasterImage(self._mask.copy())

    def to_data_url(self) -> str:
        """PNG data URL of the mask for the generative backend."""
        return encode_data_url(self.to_raster())
