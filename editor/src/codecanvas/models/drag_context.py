"""Drag context dataclasses for the drag controller.

Unified drag state management: one object per drag session instead of a set
of loose flags.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .transform import Vec2


@dataclass(frozen=True)
class Selection:
    """The active overlay, if any."""
    overlay_id: str
    kind: str


@dataclass(frozen=True)
class HitResult:
    """Topmost overlay under the pointer and the interaction it exposes there."""
    overlay_id: str
    mode: str  # 'move', 'resize', 'rotate'


@dataclass
class DragContext:
    """State of one drag session, alive from pointer down to up/cancel.

    anchor is the grab offset (pointer - overlay position) for 'move', and
    the initial pointer position for 'resize' and 'rotate'.

    start_frame and start_font_size capture the overlay as it was at pointer
    down, so text resize is a function of the pointer alone.
    """
    overlay_id: str
    mode: str
    anchor: Vec2
    start_frame: Any = None  # OverlayFrame
    start_font_size: Optional[float] = None
    # Latest pointer position waiting for the next frame tick
    pending_point: Optional[Vec2] = None


# Pointer event kinds
POINTER_DOWN = 'down'
POINTER_MOVE = 'move'
POINTER_UP = 'up'
POINTER_CANCEL = 'cancel'


@dataclass(frozen=True)
class PointerEvent:
    """Minimal pointer/touch event: client position plus what happened."""
    x: float
    y: float
    kind: str
