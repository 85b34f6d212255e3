"""
Tests for overlay records and the LayerModel.

Covers:
- Overlay defaults and validation
- Stack order (append, remove, reorder)
- In-place updates with clamping and field checks
- Observer notifications
"""
import pytest

from codecanvas.constants import MIN_OVERLAY_SIZE, MIN_FONT_SIZE
from codecanvas.models import Vec2, TextOverlay, ImageOverlay, LayerModel
from codecanvas.models.layers import (
    EVENT_ADDED, EVENT_REMOVED, EVENT_UPDATED, EVENT_REORDERED
)


def _image(x=150, y=150, width=100, height=100, natural=(100, 100)):
    return ImageOverlay(position=Vec2(x, y), natural_width=natural[0],
                        natural_height=natural[1], width=width, height=height)


# ══════════════════════════════════════════════════════════════════════════
# Overlay records
# ══════════════════════════════════════════════════════════════════════════

class TestOverlayRecords:

    def test_text_defaults(self):
        text = TextOverlay(position=Vec2(0, 0))
        assert text.kind == 'text'
        assert text.text == "New Text"
        assert text.color == "#000000"
        assert text.font_size == 20
        assert text.text_align == 'center'
        assert text.rotation == 0

    def test_ids_are_unique(self):
        ids = {TextOverlay(position=Vec2(0, 0)).id for _ in range(50)}
        assert len(ids) == 50

    def test_tuple_position_is_converted(self):
        overlay = TextOverlay(position=(10, 20))
        assert isinstance(overlay.position, Vec2)
        assert overlay.position == Vec2(10, 20)

    def test_sizes_clamped_on_creation(self):
        overlay = _image(width=0, height=-5)
        assert overlay.width == MIN_OVERLAY_SIZE
        assert overlay.height == MIN_OVERLAY_SIZE
        assert TextOverlay(position=Vec2(0, 0), font_size=0).font_size == MIN_FONT_SIZE

    def test_aspect_ratio_from_natural_size(self):
        assert _image(natural=(200, 100)).aspect_ratio == 0.5

    def test_invalid_alignment_rejected(self):
        with pytest.raises(ValueError):
            TextOverlay(position=Vec2(0, 0), text_align='justify')

    def test_invalid_color_rejected(self):
        with pytest.raises(ValueError):
            TextOverlay(position=Vec2(0, 0), color='not-a-colour')


# ══════════════════════════════════════════════════════════════════════════
# Stack order
# ══════════════════════════════════════════════════════════════════════════

class TestLayerOrder:

    @pytest.fixture
    def stack(self):
        model = LayerModel()
        overlays = _image(), _image(), _image()
        for overlay in overlays:
            model.append(overlay)
        return (model,) + overlays

    def test_iteration_is_bottom_to_top(self, stack):
        model, a, b, c = stack
        assert [o.id for o in model] == [a.id, b.id, c.id]

    def test_topmost_first(self, stack):
        model, a, b, c = stack
        assert [o.id for o in model.topmost_first()] == [c.id, b.id, a.id]

    def test_duplicate_id_rejected(self, stack):
        model, a, b, c = stack
        with pytest.raises(ValueError):
            model.append(a)

    def test_remove(self, stack):
        model, a, b, c = stack
        removed = model.remove(b.id)
        assert removed is b
        assert b.id not in model
        assert len(model) == 2

    def test_remove_unknown_is_noop(self, stack):
        model, a, b, c = stack
        assert model.remove('missing') is None
        assert len(model) == 3

    def test_bring_forward(self, stack):
        model, a, b, c = stack
        assert model.bring_forward(a.id)
        assert model.ids() == [b.id, a.id, c.id]

    def test_bring_forward_at_top_is_noop(self, stack):
        model, a, b, c = stack
        assert not model.bring_forward(c.id)
        assert model.ids() == [a.id, b.id, c.id]

    def test_send_backward(self, stack):
        model, a, b, c = stack
        assert model.send_backward(c.id)
        assert model.ids() == [a.id, c.id, b.id]

    def test_send_backward_at_bottom_is_noop(self, stack):
        model, a, b, c = stack
        assert not model.send_backward(a.id)

    def test_move_to_clamps_index(self, stack):
        model, a, b, c = stack
        assert model.move_to(a.id, 99)
        assert model.index_of(a.id) == 2


# ══════════════════════════════════════════════════════════════════════════
# Updates
# ══════════════════════════════════════════════════════════════════════════

class TestLayerUpdates:

    def test_update_in_place(self):
        model = LayerModel()
        overlay = model.get(model.append(_image()))
        result = model.update(overlay.id, position=Vec2(10, 20), rotation=45)
        assert result is overlay
        assert overlay.position == Vec2(10, 20)
        assert overlay.rotation == 45.0

    def test_update_clamps_size(self):
        model = LayerModel()
        overlay = _image()
        model.append(overlay)
        model.update(overlay.id, width=0.01, height=-3)
        assert overlay.width == MIN_OVERLAY_SIZE
        assert overlay.height == MIN_OVERLAY_SIZE

    def test_update_unknown_field(self):
        model = LayerModel()
        overlay = TextOverlay(position=Vec2(0, 0))
        model.append(overlay)
        with pytest.raises(AttributeError):
            model.update(overlay.id, width=10)

    def test_update_immutable_field(self):
        model = LayerModel()
        overlay = _image()
        model.append(overlay)
        with pytest.raises(AttributeError):
            model.update(overlay.id, natural_width=5)

    def test_invalid_update_leaves_overlay_unchanged(self):
        model = LayerModel()
        overlay = TextOverlay(position=Vec2(0, 0), text="Hi")
        model.append(overlay)
        with pytest.raises(ValueError):
            model.update(overlay.id, text="Changed", text_align='diagonal')
        assert overlay.text == "Hi"
        assert overlay.text_align == 'center'

    def test_update_unknown_id_is_noop(self):
        assert LayerModel().update('missing', rotation=10) is None


# ══════════════════════════════════════════════════════════════════════════
# Observers
# ══════════════════════════════════════════════════════════════════════════

class TestLayerObservers:

    def test_events_in_order(self):
        model = LayerModel()
        events = []
        model.subscribe(lambda event, overlay_id: events.append((event, overlay_id)))

        a, b = _image(), _image()
        model.append(a)
        model.append(b)
        model.update(a.id, rotation=10)
        model.bring_forward(a.id)
        model.remove(b.id)

        assert events == [
            (EVENT_ADDED, a.id),
            (EVENT_ADDED, b.id),
            (EVENT_UPDATED, a.id),
            (EVENT_REORDERED, a.id),
            (EVENT_REMOVED, b.id),
        ]

    def test_unsubscribe(self):
        model = LayerModel()
        events = []
        callback = lambda event, overlay_id: events.append(event)
        model.subscribe(callback)
        model.unsubscribe(callback)
        model.append(_image())
        assert events == []

    def test_noops_do_not_notify(self):
        model = LayerModel()
        overlay = _image()
        model.append(overlay)
        events = []
        model.subscribe(lambda event, overlay_id: events.append(event))
        model.remove('missing')
        model.send_backward(overlay.id)
        assert events == []
