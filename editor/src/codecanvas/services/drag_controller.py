"""
Drag Controller - move/resize/rotate state machine

States:
    Idle                              no drag session
    Dragging(overlay_id, mode, anchor)  one overlay being edited

Transitions:
    Idle     + down         -> hit test; Dragging on hit, clear selection on miss
    Dragging + move         -> buffer pointer, apply on the next frame tick
    Dragging + up/cancel    -> Idle (a pending frame becomes a no-op)
    Dragging + down         -> ignored (unless the target is gone)
    Dragging + target removed -> Idle

Pointer moves are coalesced: only the newest position buffered before a frame
tick is applied. flush() applies it immediately, which the session does
before every paint, property edit and export.
"""

import logging

from ..components.transform_widgets import SELECTION_MODE, overlay_frame
from ..models.drag_context import DragContext
from ..constants import MODE_MOVE
from .hit_tester import hit_test

logger = logging.getLogger(__name__)


class DragController:
    """Turns pointer events into geometry edits on one overlay."""

    def __init__(self, session, scheduler):
        """
        Args:
            session: EditorSession owning layers, selection, fonts and config
            scheduler: FrameScheduler used to coalesce pointer moves
        """
        self.session = session
        self.scheduler = scheduler
        self.context = None
        self._frame_handle = None

    @property
    def is_dragging(self):
        return self.context is not None

    # ========================================
    # Pointer events (logical coordinates)
    # ========================================

    def pointer_down(self, point):
        """Start a drag session on the topmost overlay under the pointer.

        Returns:
            HitResult, or None when nothing was hit or a drag is already active
        """
        if self.is_dragging:
            if self.session.layers.get(self.context.overlay_id) is not None:
                logger.debug("Pointer down ignored, drag already active on %s", self.context.overlay_id)
                return None
            self._end_drag("stale")

        config = self.session.config
        hit = hit_test(point, self.session.layers, config.handle_radius,
                       config.handle_hit_scale, self.session.fonts, config.leader_length)
        if hit is None:
            self.session.clear_selection()
            return None

        overlay = self.session.layers.get(hit.overlay_id)
        self.session.select(hit.overlay_id)

        if hit.mode == MODE_MOVE:
            anchor = point - overlay.position
        else:
            anchor = point
        self.context = DragContext(hit.overlay_id, hit.mode, anchor,
                                   start_frame=overlay_frame(overlay, self.session.fonts),
                                   start_font_size=getattr(overlay, 'font_size', None))
        logger.debug("Drag started: %s on %s", hit.mode, hit.overlay_id)
        return hit

    def pointer_move(self, point):
        """Buffer the newest pointer position and make sure a frame is scheduled."""
        if not self.is_dragging:
            return False
        self.context.pending_point = point
        if self._frame_handle is None:
            self._frame_handle = self.scheduler.request_frame(self._on_frame)
        return True

    def pointer_up(self):
        self._end_drag("up")

    def pointer_cancel(self):
        self._end_drag("cancel")

    def overlay_removed(self, overlay_id):
        """End the drag if its target was just deleted."""
        if self.context is not None and self.context.overlay_id == overlay_id:
            self._end_drag("stale")

    # ========================================
    # Frame handling
    # ========================================

    def flush(self):
        """Apply any buffered pointer position now and drop the scheduled frame."""
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        self._apply_pending()

    def _on_frame(self):
        self._frame_handle = None
        self._apply_pending()

    def _apply_pending(self):
        # Session may have ended between scheduling and this tick
        if self.context is None or self.context.pending_point is None:
            return

        point = self.context.pending_point
        self.context.pending_point = None

        overlay = self.session.layers.get(self.context.overlay_id)
        if overlay is None:
            logger.debug("Drag target %s no longer exists, ending drag", self.context.overlay_id)
            self._end_drag("stale")
            return

        handle = SELECTION_MODE.get_handle(self.context.mode)
        changes = handle.drag(overlay, point, self.context)
        if changes:
            self.session.layers.update(overlay.id, **changes)

    def _end_drag(self, reason):
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None
        if self.context is not None:
            logger.debug("Drag ended (%s) on %s", reason, self.context.overlay_id)
        self.context = None
