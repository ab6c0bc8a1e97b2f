"""
Masking Framework for RetouchKit

Maps pointer input on a displayed image to natural pixels and paints
freehand masks aligned with the source image.
"""

from .models import (
    MaskMode,
    PointerPhase,
    PointerEvent,
    PainterState,
    BoundingBox,
    Stroke,
    PRIMARY_MASK_COLOR,
    SECONDARY_MASK_COLOR,
)
from .coordinate_mapper import (
    RenderGeometry,
    CoordinateMapper,
    ZoomSettings,
    map_pointer_to_image_space,
    clamp_zoom,
    zoom_in,
    zoom_out,
    reset_zoom,
)
from .mask_painter import MaskPainter

__all__ = [
    'MaskMode',
    'PointerPhase',
    'PointerEvent',
    'PainterState',
    'BoundingBox',
    'Stroke',
    'PRIMARY_MASK_COLOR',
    'SECONDARY_MASK_COLOR',
    'RenderGeometry',
    'CoordinateMapper',
    'ZoomSettings',
    'map_pointer_to_image_space',
    'clamp_zoom',
    'zoom_in',
    'zoom_out',
    'reset_zoom',
    'MaskPainter',
]
