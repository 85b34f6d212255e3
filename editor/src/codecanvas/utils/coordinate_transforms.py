"""Coordinate transformation utilities for overlay manipulation.

Provides conversion between the coordinate systems the editor works in:
- Client space (pointer pixels relative to the viewport, Y-down)
- Backing-store pixels (the rendered preview image)
- Logical space (document units, independent of zoom and export size)
- Local space (an overlay's own unrotated frame, origin at its position)

Local transforms are always recomputed from absolute geometry, never
accumulated, so repeated calls cannot drift.
"""

import math
from dataclasses import dataclass

from ..models.transform import Vec2


@dataclass(frozen=True)
class CanvasRect:
	"""On-screen placement of the preview canvas.

	left/top/width/height are the displayed rectangle in client pixels;
	backing_width/backing_height are the pixel size of the rendered image
	shown in that rectangle.
	"""
	left: float
	top: float
	width: float
	height: float
	backing_width: float
	backing_height: float


def to_logical(client_x, client_y, canvas_rect, logical_scale):
	"""Convert a client coordinate to logical canvas space.

	Args:
		client_x, client_y: Pointer position in client pixels
		canvas_rect: CanvasRect of the displayed preview (None if not shown)
		logical_scale: Backing-store pixels per logical unit (preview scale)

	Returns:
		Vec2 in logical space, or None when there is no usable canvas
	"""
	if canvas_rect is None or canvas_rect.width <= 0 or canvas_rect.height <= 0:
		return None
	if logical_scale <= 0:
		return None

	# Client -> backing-store pixels (CSS size vs. real pixel size)
	backing_x = (client_x - canvas_rect.left) * (canvas_rect.backing_width / canvas_rect.width)
	backing_y = (client_y - canvas_rect.top) * (canvas_rect.backing_height / canvas_rect.height)

	# Backing-store pixels -> logical units
	return Vec2(backing_x / logical_scale, backing_y / logical_scale)


def to_local(point, center, rotation_degrees):
	"""Express a logical point in an overlay's unrotated frame.

	Translates by -center, then rotates by -rotation_degrees.

	Args:
		point: Vec2 in logical space
		center: Vec2 overlay position in logical space
		rotation_degrees: Overlay rotation (clockwise on screen)

	Returns:
		Vec2 in local space
	"""
	dx = point.x - center.x
	dy = point.y - center.y

	rad = -math.radians(rotation_degrees)  # Inverse rotation
	cos_r = math.cos(rad)
	sin_r = math.sin(rad)

	return Vec2(dx * cos_r - dy * sin_r, dx * sin_r + dy * cos_r)


def to_world(local_point, center, rotation_degrees):
	"""Inverse of to_local: map a local point back to logical space."""
	rad = math.radians(rotation_degrees)
	cos_r = math.cos(rad)
	sin_r = math.sin(rad)

	x = local_point.x * cos_r - local_point.y * sin_r
	y = local_point.x * sin_r + local_point.y * cos_r
	return Vec2(center.x + x, center.y + y)


def pointer_angle(point, center):
	"""Rotation angle that points the rotate handle at `point`.

	The rotate handle sits above the overlay, so a pointer straight above the
	centre gives 0 degrees (atan2 measures from +X, hence the +90).
	"""
	dx = point.x - center.x
	dy = point.y - center.y
	return math.degrees(math.atan2(dy, dx)) + 90.0
