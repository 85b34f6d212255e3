"""Frame scheduling for coalescing pointer moves.

The drag controller asks for at most one frame callback at a time and
cancels it when the drag ends. Any timer can back this: the Qt canvas uses a
single-shot QTimer, headless code and tests tick a ManualFrameScheduler.
"""

import itertools
from abc import ABC, abstractmethod


class FrameScheduler(ABC):
    """Schedules callbacks for the next frame tick."""

    @abstractmethod
    def request_frame(self, callback):
        """Schedule callback() for the next tick.

        Returns:
            Opaque handle accepted by cancel_frame
        """

    @abstractmethod
    def cancel_frame(self, handle):
        """Cancel a scheduled callback. Unknown or spent handles are ignored."""


class ManualFrameScheduler(FrameScheduler):
    """Queues callbacks until run_pending() is called."""

    def __init__(self):
        self._pending = {}
        self._handles = itertools.count(1)

    def request_frame(self, callback):
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle):
        self._pending.pop(handle, None)

    @property
    def pending_count(self):
        return len(self._pending)

    def run_pending(self):
        """Run every queued callback once. Returns how many ran."""
        callbacks = list(self._pending.values())
        self._pending.clear()
        for callback in callbacks:
            callback()
        return len(callbacks)
