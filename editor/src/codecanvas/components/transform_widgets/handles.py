"""Transform handle system - ABC-based handle architecture.

Each handle type is a class that knows:
- How to test if a local-space point hits it
- How to draw its selection decoration
- How a drag on it changes the overlay

All geometry is in the overlay's local frame (unrotated, origin at the
overlay position) in logical units. Drawing maps local points to surface
pixels through a caller-supplied function, so the render scale is applied
exactly once.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...models.transform import Vec2
from ...utils.coordinate_transforms import to_local, pointer_angle
from ...constants import (
    MODE_MOVE, MODE_RESIZE, MODE_ROTATE,
    MIN_OVERLAY_SIZE, MIN_FONT_SIZE,
    SELECTION_STROKE_COLOR, HANDLE_FILL_COLOR
)


@dataclass(frozen=True)
class OverlayFrame:
    """Axis-aligned box of an overlay in its local frame."""
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self):
        return self.left + self.width

    @property
    def bottom(self):
        return self.top + self.height

    @property
    def center_x(self):
        return self.left + self.width / 2

    def contains(self, point):
        return (self.left <= point.x <= self.right and
                self.top <= point.y <= self.bottom)


@dataclass(frozen=True)
class HandleGeometry:
    """Handle radius and rotate-leader length, in logical units."""
    radius: float
    leader: float


def overlay_frame(overlay, fonts):
    """Compute the local box of an overlay.

    Image overlays are centred on their position. Text overlays sit on their
    baseline with the box shifted left by 0, width/2 or width depending on
    alignment, and extend from the ink ascent to the ink descent.

    Args:
        overlay: ImageOverlay or TextOverlay
        fonts: FontService used to measure text

    Returns:
        OverlayFrame
    """
    if overlay.kind == 'image':
        return OverlayFrame(-overlay.width / 2, -overlay.height / 2, overlay.width, overlay.height)

    metrics = fonts.measure(overlay.font_spec, overlay.text)
    box_x = 0.0
    if overlay.text_align == 'center':
        box_x = -metrics.width / 2
    elif overlay.text_align == 'right':
        box_x = -metrics.width
    return OverlayFrame(box_x, -metrics.ascent, metrics.width, metrics.height)


def _distance(a, b):
    return math.hypot(a.x - b.x, a.y - b.y)


def _draw_circle(draw, center, radius, stroke):
    x, y = center
    draw.ellipse([x - radius, y - radius, x + radius, y + radius],
                 fill=HANDLE_FILL_COLOR, outline=SELECTION_STROKE_COLOR, width=stroke)


class Handle(ABC):
    """Abstract base class for transform handles."""

    mode = None
    cursor = 'ArrowCursor'  # Qt.CursorShape attribute name

    @abstractmethod
    def hit_test(self, local, frame, geometry) -> bool:
        """Test if a local-space point hits this handle.

        Args:
            local: Vec2 pointer position in the overlay's local frame
            frame: OverlayFrame of the overlay
            geometry: HandleGeometry (already scaled for hit testing)

        Returns:
            bool: True if the point hits this handle
        """

    @abstractmethod
    def draw(self, draw, to_surface, frame, geometry, scale, stroke):
        """Draw this handle's decoration.

        Args:
            draw: PIL ImageDraw for the destination surface
            to_surface: Callable mapping a local Vec2 to surface (x, y) pixels
            frame: OverlayFrame of the overlay
            geometry: HandleGeometry in logical units
            scale: Surface pixels per logical unit (for radii)
            stroke: Outline width in pixels
        """

    @abstractmethod
    def drag(self, overlay, point, context):
        """Compute the overlay changes for a pointer position.

        Args:
            overlay: Overlay being dragged (current geometry)
            point: Vec2 pointer position in logical space
            context: DragContext recorded at pointer down

        Returns:
            dict: field name -> new value (empty for no change)
        """


class ResizeHandle(Handle):
    """Bottom-right handle. Resizes symmetrically about the overlay centre."""

    mode = MODE_RESIZE
    cursor = 'SizeFDiagCursor'

    def position(self, frame, geometry):
        return Vec2(frame.right, frame.bottom)

    def hit_test(self, local, frame, geometry):
        return _distance(local, self.position(frame, geometry)) <= geometry.radius

    def draw(self, draw, to_surface, frame, geometry, scale, stroke):
        _draw_circle(draw, to_surface(self.position(frame, geometry)), geometry.radius * scale, stroke)

    def drag(self, overlay, point, context):
        local = to_local(point, overlay.position, overlay.rotation)

        if overlay.kind == 'image':
            # Aspect ratio comes from the bitmap, never from the current size
            aspect = overlay.aspect_ratio
            min_width = max(MIN_OVERLAY_SIZE, MIN_OVERLAY_SIZE / aspect)
            new_width = max(min_width, abs(local.x) * 2)
            return {'width': new_width, 'height': new_width * aspect}

        # Text: font size follows the pointer relative to the pointer-down box.
        # The pivot is the overlay position, except for right-aligned text whose
        # right edge sits on it; there the start box's left edge is used.
        start = context.start_frame
        if start is None or start.width <= 0:
            return {}
        pivot = start.left if overlay.text_align == 'right' else 0.0
        ratio = (local.x - pivot) / (start.right - pivot)
        return {'font_size': max(MIN_FONT_SIZE, context.start_font_size * ratio)}


class RotationHandle(Handle):
    """Rotation handle (circle above the top edge on a leader line)."""

    mode = MODE_ROTATE
    cursor = 'CrossCursor'

    def position(self, frame, geometry):
        return Vec2(frame.center_x, frame.top - geometry.leader)

    def hit_test(self, local, frame, geometry):
        return _distance(local, self.position(frame, geometry)) <= geometry.radius

    def draw(self, draw, to_surface, frame, geometry, scale, stroke):
        handle_pos = self.position(frame, geometry)
        draw.line([to_surface(Vec2(frame.center_x, frame.top)), to_surface(handle_pos)],
                  fill=SELECTION_STROKE_COLOR, width=stroke)
        _draw_circle(draw, to_surface(handle_pos), geometry.radius * scale, stroke)

    def drag(self, overlay, point, context):
        """Absolute angle from the overlay position to the pointer."""
        return {'rotation': pointer_angle(point, overlay.position)}


class BodyHandle(Handle):
    """The overlay body - full box hit area for translation."""

    mode = MODE_MOVE
    cursor = 'SizeAllCursor'

    def hit_test(self, local, frame, geometry):
        return frame.contains(local)

    def draw(self, draw, to_surface, frame, geometry, scale, stroke):
        """Draw the rotated bounding box outline."""
        corners = [
            Vec2(frame.left, frame.top),
            Vec2(frame.right, frame.top),
            Vec2(frame.right, frame.bottom),
            Vec2(frame.left, frame.bottom),
        ]
        points = [to_surface(c) for c in corners]
        draw.line(points + [points[0]], fill=SELECTION_STROKE_COLOR, width=stroke, joint='curve')

    def drag(self, overlay, point, context):
        """Keep the initial grab offset instead of snapping the centre to the pointer."""
        return {'position': point - context.anchor}
