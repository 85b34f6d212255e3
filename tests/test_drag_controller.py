"""
Tests for the drag state machine: move/resize/rotate, frame coalescing and
drag termination.
"""
import pytest

from codecanvas.components.transform_widgets import overlay_frame
from codecanvas.constants import MIN_OVERLAY_SIZE
from codecanvas.models.layers import EVENT_UPDATED
from codecanvas.models.transform import Vec2

from conftest import make_png


def _drag(session, scheduler, start, end):
    session.on_pointer_down(*start)
    session.on_pointer_move(*end)
    scheduler.run_pending()
    session.on_pointer_up(*end)


# ══════════════════════════════════════════════════════════════════════════
# Pointer down
# ══════════════════════════════════════════════════════════════════════════

class TestPointerDown:

    def test_hit_selects_and_starts_drag(self, session, overlay_o):
        hit = session.on_pointer_down(150, 150)
        assert hit.mode == 'move'
        assert session.selection.overlay_id == overlay_o.id
        assert session.selection.kind == 'image'
        assert session.controller.is_dragging

    def test_miss_clears_selection(self, session, overlay_o):
        session.select(overlay_o.id)
        assert session.on_pointer_down(400, 400) is None
        assert session.selection is None
        assert not session.controller.is_dragging

    def test_down_while_dragging_is_ignored(self, session, overlay_o):
        session.on_pointer_down(150, 150)
        context = session.controller.context
        assert session.on_pointer_down(200, 200) is None
        assert session.controller.context is context
        assert context.mode == 'move'

    def test_no_canvas_is_noop(self, session, overlay_o):
        session.select(overlay_o.id)
        session.canvas_rect = None
        assert session.on_pointer_down(150, 150) is None
        assert not session.controller.is_dragging
        assert session.selection.overlay_id == overlay_o.id


# ══════════════════════════════════════════════════════════════════════════
# Move
# ══════════════════════════════════════════════════════════════════════════

class TestMove:

    def test_drag_from_center(self, session, scheduler, overlay_o):
        _drag(session, scheduler, (150, 150), (250, 180))
        assert overlay_o.position == Vec2(250, 180)

    def test_grab_offset_is_kept(self, session, scheduler, overlay_o):
        _drag(session, scheduler, (160, 170), (260, 190))
        assert overlay_o.position == Vec2(250, 170)

    def test_move_outside_drag_is_ignored(self, session, scheduler, overlay_o):
        session.on_pointer_move(10, 10)
        assert scheduler.pending_count == 0
        assert overlay_o.position == Vec2(150, 150)


# ══════════════════════════════════════════════════════════════════════════
# Frame coalescing
# ══════════════════════════════════════════════════════════════════════════

class TestFrameCoalescing:

    def test_moves_wait_for_frame(self, session, scheduler, overlay_o):
        session.on_pointer_down(150, 150)
        session.on_pointer_move(200, 200)
        assert overlay_o.position == Vec2(150, 150)
        scheduler.run_pending()
        assert overlay_o.position == Vec2(200, 200)

    def test_only_latest_move_applied(self, session, scheduler, overlay_o):
        updates = []

        def on_change(event, overlay_id):
            if event == EVENT_UPDATED:
                updates.append(overlay_id)

        session.layers.subscribe(on_change)
        session.on_pointer_down(150, 150)
        for x in range(151, 181):
            session.on_pointer_move(x, 150)
        assert scheduler.pending_count == 1

        scheduler.run_pending()
        assert overlay_o.position == Vec2(180, 150)
        assert len(updates) == 1

    def test_pointer_up_cancels_pending_frame(self, session, scheduler, overlay_o):
        session.on_pointer_down(150, 150)
        session.on_pointer_move(250, 250)
        session.on_pointer_up(250, 250)
        assert scheduler.pending_count == 0
        assert scheduler.run_pending() == 0
        assert overlay_o.position == Vec2(150, 150)
        assert not session.controller.is_dragging

    def test_pointer_cancel_cancels_pending_frame(self, session, scheduler, overlay_o):
        session.on_pointer_down(150, 150)
        session.on_pointer_move(250, 250)
        session.on_pointer_cancel()
        scheduler.run_pending()
        assert overlay_o.position == Vec2(150, 150)
        assert not session.controller.is_dragging

    def test_stale_callback_after_up_is_noop(self, session, scheduler, overlay_o):
        session.on_pointer_down(150, 150)
        session.on_pointer_move(250, 250)
        callback = list(scheduler._pending.values())[0]
        session.on_pointer_up(250, 250)
        callback()
        assert overlay_o.position == Vec2(150, 150)

    def test_preview_flushes_pending_move(self, session, scheduler, overlay_o):
        session.on_pointer_down(150, 150)
        session.on_pointer_move(170, 160)
        session.render_preview()
        assert overlay_o.position == Vec2(170, 160)
        assert scheduler.pending_count == 0
        assert session.controller.is_dragging


# ══════════════════════════════════════════════════════════════════════════
# Resize
# ══════════════════════════════════════════════════════════════════════════

class TestResize:

    def test_resize_is_symmetric_about_center(self, session, scheduler, overlay_o):
        _drag(session, scheduler, (200, 200), (230, 170))
        assert overlay_o.width == pytest.approx(160)
        assert overlay_o.height == pytest.approx(160)
        assert overlay_o.position == Vec2(150, 150)

    def test_resize_keeps_natural_aspect(self, session, scheduler, wide_overlay):
        assert wide_overlay.height == pytest.approx(50)
        _drag(session, scheduler, (200, 175), (250, 175))
        assert wide_overlay.width == pytest.approx(200)
        assert wide_overlay.height == pytest.approx(100)

        # Handle is now at local (100, 50)
        for target in ((222.2, 190), (181.7, 160), (263.9, 171.3)):
            _drag(session, scheduler, (150 + wide_overlay.width / 2, 150 + wide_overlay.height / 2), target)
            assert wide_overlay.height / wide_overlay.width == pytest.approx(0.5)

    def test_resize_uses_rotated_frame(self, session, scheduler, overlay_o):
        session.update_overlay(overlay_o.id, rotation=90)
        # Local (50, 50) after a quarter turn
        assert session.on_pointer_down(100, 200).mode == 'resize'
        session.on_pointer_move(150, 250)
        scheduler.run_pending()
        assert overlay_o.width == pytest.approx(200)

    def test_resize_clamps_to_minimum(self, session, scheduler, overlay_o):
        _drag(session, scheduler, (200, 200), (150, 150))
        assert overlay_o.width == MIN_OVERLAY_SIZE
        assert overlay_o.height == MIN_OVERLAY_SIZE

    def test_minimum_keeps_aspect(self, session, scheduler, wide_overlay):
        _drag(session, scheduler, (200, 175), (150, 150))
        assert wide_overlay.height >= MIN_OVERLAY_SIZE
        assert wide_overlay.height / wide_overlay.width == pytest.approx(0.5)

    def test_text_resize_scales_font(self, session, scheduler):
        text = session.add_text_overlay("Hello", position=Vec2(150, 150))
        frame = overlay_frame(text, session.fonts)
        start = (150 + frame.right, 150 + frame.bottom)
        assert session.on_pointer_down(*start).mode == 'resize'

        # Pointer at twice the half-width: box width doubles
        session.on_pointer_move(150 + frame.width, start[1])
        scheduler.run_pending()
        assert text.font_size == pytest.approx(40)

    @pytest.mark.parametrize("align", ['left', 'center', 'right'])
    def test_text_resize_is_stable_across_frames(self, session, scheduler, align):
        text = session.add_text_overlay("Hello", position=Vec2(150, 150), text_align=align)
        frame = overlay_frame(text, session.fonts)
        start = (150 + frame.right, 150 + frame.bottom)
        assert session.on_pointer_down(*start).mode == 'resize'

        sizes = []
        for _ in range(4):
            session.on_pointer_move(start[0] + 30, start[1])
            scheduler.run_pending()
            sizes.append(text.font_size)
        assert sizes == pytest.approx([sizes[0]] * 4)
        assert sizes[0] > 20

    def test_left_aligned_text_resize_follows_pointer(self, session, scheduler):
        text = session.add_text_overlay("Hello", position=Vec2(100, 150), text_align='left')
        frame = overlay_frame(text, session.fonts)
        assert frame.left == 0
        _drag(session, scheduler, (100 + frame.right, 150 + frame.bottom),
              (100 + frame.width * 1.5, 150 + frame.bottom))
        assert text.font_size == pytest.approx(30)

    def test_right_aligned_text_resize_pivots_on_left_edge(self, session, scheduler):
        text = session.add_text_overlay("Hello", position=Vec2(200, 150), text_align='right')
        frame = overlay_frame(text, session.fonts)
        assert frame.right == 0
        _drag(session, scheduler, (200, 150 + frame.bottom), (200 + frame.width, 150 + frame.bottom))
        assert text.font_size == pytest.approx(40)


# ══════════════════════════════════════════════════════════════════════════
# Rotate
# ══════════════════════════════════════════════════════════════════════════

class TestRotate:

    def test_rotate_to_the_right(self, session, scheduler, overlay_o):
        _drag(session, scheduler, (150, 80), (250, 150))
        assert overlay_o.rotation == pytest.approx(90)

    def test_rotate_straight_down(self, session, scheduler, overlay_o):
        _drag(session, scheduler, (150, 80), (150, 300))
        assert overlay_o.rotation == pytest.approx(180)

    def test_rotate_keeps_position_and_size(self, session, scheduler, overlay_o):
        _drag(session, scheduler, (150, 80), (90, 90))
        assert overlay_o.position == Vec2(150, 150)
        assert overlay_o.width == 100


# ══════════════════════════════════════════════════════════════════════════
# Stale targets
# ══════════════════════════════════════════════════════════════════════════

class TestStaleTarget:

    def test_deleted_target_ends_drag(self, session, scheduler, overlay_o):
        session.on_pointer_down(150, 150)
        session.delete_overlay(overlay_o.id)
        session.on_pointer_move(200, 200)
        scheduler.run_pending()
        assert not session.controller.is_dragging
        assert len(session.layers) == 0

    def test_deleting_target_returns_to_idle(self, session, scheduler, overlay_o):
        session.on_pointer_down(150, 150)
        session.delete_overlay(overlay_o.id)
        assert not session.controller.is_dragging

        replacement = session.add_image_overlay(make_png(), width=100, position=Vec2(150, 150))
        hit = session.on_pointer_down(150, 150)
        assert hit.overlay_id == replacement.id
        assert hit.mode == 'move'

    def test_deleting_other_overlay_keeps_drag(self, session, scheduler, overlay_o):
        other = session.add_image_overlay(make_png(), width=50, position=Vec2(50, 50))
        session.on_pointer_down(150, 150)
        session.delete_overlay(other.id)
        assert session.controller.context.overlay_id == overlay_o.id
