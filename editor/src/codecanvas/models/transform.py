"""Vector data structure for coordinate representation."""
from dataclasses import dataclass


@dataclass
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Client pixels (pointer events)
    - Logical canvas space (overlay positions)
    - Overlay local space (unrotated, centred on the overlay)
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other):
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vec2(self.x - other.x, self.y - other.y)

    def scaled(self, factor):
        """Return this vector multiplied by a scalar."""
        return Vec2(self.x * factor, self.y * factor)
