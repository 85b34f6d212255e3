"""
CodeCanvas - Data Models

Pure data for the overlay editor. No Qt imports, no rendering logic.
"""

from .transform import Vec2
from .overlay import Overlay, TextOverlay, ImageOverlay, FontSpec, new_overlay_id
from .layers import LayerModel
from .drag_context import DragContext, HitResult, Selection, PointerEvent

__all__ = [
    'Vec2', 'Overlay', 'TextOverlay', 'ImageOverlay', 'FontSpec', 'new_overlay_id',
    'LayerModel', 'DragContext', 'HitResult', 'Selection', 'PointerEvent',
]
