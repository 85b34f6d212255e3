"""
CodeCanvas - Layer Model

Ordered collection of overlays. List order is the single source of truth for
both paint order and hit-test priority:
- index 0 is the bottom layer (painted first)
- the last index is the top layer (hit-tested first)

There is no separate z-index; reordering a layer means moving it in the list.

The model is INDEPENDENT of UI:
- No Qt imports
- No selection state (that's EditorSession)
Views subscribe to mutation notifications instead.
"""

import logging
from dataclasses import replace, fields

logger = logging.getLogger(__name__)

# Set once at creation, never edited
IMMUTABLE_FIELDS = frozenset(('id', 'bitmap', 'natural_width', 'natural_height'))

# Notification event names
EVENT_ADDED = 'added'
EVENT_REMOVED = 'removed'
EVENT_UPDATED = 'updated'
EVENT_REORDERED = 'reordered'


class LayerModel:
    """Mutable ordered store of Overlay records with an observer hook."""

    def __init__(self):
        self._overlays = []
        self._observers = []

    # ========================================
    # Observers
    # ========================================

    def subscribe(self, callback):
        """Register callback(event, overlay_id), called after every mutation."""
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback):
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, event, overlay_id):
        for callback in list(self._observers):
            callback(event, overlay_id)

    # ========================================
    # Queries
    # ========================================

    def __len__(self):
        return len(self._overlays)

    def __iter__(self):
        """Iterate bottom to top (paint order)."""
        return iter(list(self._overlays))

    def __contains__(self, overlay_id):
        return self.index_of(overlay_id) is not None

    def topmost_first(self):
        """Overlays in hit-test order (top to bottom)."""
        return list(reversed(self._overlays))

    def get(self, overlay_id):
        """Return the overlay with this id, or None."""
        for overlay in self._overlays:
            if overlay.id == overlay_id:
                return overlay
        return None

    def index_of(self, overlay_id):
        for index, overlay in enumerate(self._overlays):
            if overlay.id == overlay_id:
                return index
        return None

    def ids(self):
        return [overlay.id for overlay in self._overlays]

    # ========================================
    # Mutations
    # ========================================

    def append(self, overlay):
        """Add an overlay on top of the stack.

        Raises:
            ValueError: If an overlay with the same id already exists
        """
        if overlay.id in self:
            raise ValueError(f"Duplicate overlay id: {overlay.id}")
        self._overlays.append(overlay)
        logger.debug("Added %s overlay %s", overlay.kind, overlay.id)
        self._notify(EVENT_ADDED, overlay.id)
        return overlay.id

    def remove(self, overlay_id):
        """Remove an overlay. Returns the removed overlay, or None if unknown."""
        index = self.index_of(overlay_id)
        if index is None:
            logger.debug("Remove ignored, unknown overlay %s", overlay_id)
            return None
        overlay = self._overlays.pop(index)
        self._notify(EVENT_REMOVED, overlay_id)
        return overlay

    def update(self, overlay_id, **changes):
        """Edit overlay fields in place.

        Values go through the overlay's own validation, so sizes are clamped
        to their minimum and enumerated style values are checked.

        Args:
            overlay_id: Overlay to edit
            **changes: Field name -> new value

        Returns:
            The edited overlay, or None if the id is unknown

        Raises:
            AttributeError: On unknown or immutable fields
            ValueError: On invalid style values
        """
        overlay = self.get(overlay_id)
        if overlay is None:
            logger.debug("Update ignored, unknown overlay %s", overlay_id)
            return None

        known = {f.name for f in fields(overlay)}
        for name in changes:
            if name in IMMUTABLE_FIELDS:
                raise AttributeError(f"Overlay field '{name}' cannot be changed")
            if name not in known:
                raise AttributeError(f"{type(overlay).__name__} has no field '{name}'")

        # replace() re-runs __post_init__ which validates and clamps
        candidate = replace(overlay, **changes)
        for name in changes:
            setattr(overlay, name, getattr(candidate, name))

        self._notify(EVENT_UPDATED, overlay_id)
        return overlay

    def move_to(self, overlay_id, index):
        """Move an overlay to a new stack index (clamped to the list bounds)."""
        current = self.index_of(overlay_id)
        if current is None:
            return False
        index = max(0, min(len(self._overlays) - 1, index))
        if index == current:
            return False
        overlay = self._overlays.pop(current)
        self._overlays.insert(index, overlay)
        self._notify(EVENT_REORDERED, overlay_id)
        return True

    def bring_forward(self, overlay_id):
        """Move one step towards the top."""
        index = self.index_of(overlay_id)
        if index is None:
            return False
        return self.move_to(overlay_id, index + 1)

    def send_backward(self, overlay_id):
        """Move one step towards the bottom."""
        index = self.index_of(overlay_id)
        if index is None:
            return False
        return self.move_to(overlay_id, index - 1)
