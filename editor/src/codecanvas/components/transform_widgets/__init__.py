"""
CodeCanvas - Transform Handle Components

- handles.py: ABC-based handle classes (ResizeHandle, RotationHandle, BodyHandle)
- modes.py: handle set and hit-test priority order
"""

from .handles import (
    Handle, ResizeHandle, RotationHandle, BodyHandle,
    OverlayFrame, HandleGeometry, overlay_frame
)
from .modes import SelectionMode, SELECTION_MODE

__all__ = [
    'Handle', 'ResizeHandle', 'RotationHandle', 'BodyHandle',
    'OverlayFrame', 'HandleGeometry', 'overlay_frame',
    'SelectionMode', 'SELECTION_MODE',
]
