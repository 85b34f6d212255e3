"""Selection handle set - which handles an overlay exposes and in what order."""

from .handles import ResizeHandle, RotationHandle, BodyHandle


class SelectionMode:
	"""Handles of a selectable overlay, in hit-test priority order.

	Manipulation handles always win over the body: resize, then rotate,
	then body.
	"""

	def __init__(self):
		self.handles = {
			'resize': ResizeHandle(),
			'rotate': RotationHandle(),
			'move': BodyHandle(),
		}
		self.check_order = ['resize', 'rotate', 'move']

	def get_handles(self):
		"""Return handles in hit-test priority order."""
		return [self.handles[mode] for mode in self.check_order]

	def get_handle(self, mode):
		"""Return the handle that drives a drag mode."""
		return self.handles[mode]

	def get_handle_at_pos(self, local, frame, geometry):
		"""Find which handle (if any) is at a local-space position.

		Returns:
			Handle object or None
		"""
		for mode in self.check_order:
			if self.handles[mode].hit_test(local, frame, geometry):
				return self.handles[mode]
		return None

	def get_decorations(self):
		"""Handles in paint order: outline first, then leader and circles."""
		return [self.handles['move'], self.handles['rotate'], self.handles['resize']]


SELECTION_MODE = SelectionMode()
