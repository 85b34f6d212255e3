"""Pointer-to-overlay hit testing under rotation."""

import logging

from ..components.transform_widgets import SELECTION_MODE, HandleGeometry, overlay_frame
from ..models.drag_context import HitResult
from ..utils.coordinate_transforms import to_local
from ..constants import ROTATE_LEADER_LENGTH

logger = logging.getLogger(__name__)


def hit_test(point, layers, handle_radius, scale, fonts, leader_length=ROTATE_LEADER_LENGTH):
    """Find the topmost overlay under a logical point.

    Overlays are searched from the top of the stack down. For each one the
    point is moved into the overlay's local frame and tested against the
    resize handle, the rotate handle and the body, in that order. The first
    overlay with any hit wins; lower overlays are not tested.

    Args:
        point: Vec2 pointer position in logical space
        layers: LayerModel or sequence of overlays, bottom to top
        handle_radius: Handle radius in logical units
        scale: Multiplier applied to handle radius and leader length
        fonts: FontService for measuring text overlays
        leader_length: Gap between the top edge and the rotate handle

    Returns:
        HitResult(overlay_id, mode) or None
    """
    geometry = HandleGeometry(handle_radius * scale, leader_length * scale)

    for overlay in reversed(list(layers)):
        local = to_local(point, overlay.position, overlay.rotation)
        frame = overlay_frame(overlay, fonts)
        handle = SELECTION_MODE.get_handle_at_pos(local, frame, geometry)
        if handle is not None:
            logger.debug("Hit %s overlay %s (%s)", overlay.kind, overlay.id, handle.mode)
            return HitResult(overlay.id, handle.mode)

    return None
