"""
2D point primitives.

PointI32 addresses pixels, PointF64 carries sub-pixel curve coordinates.
Both are immutable and hashable so they can be used in sets and as dict keys.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PointI32:
    """Integer point."""
    x: int
    y: int

    def __add__(self, other):
        return PointI32(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return PointI32(self.x - other.x, self.y - other.y)

    def __neg__(self):
        return PointI32(-self.x, -self.y)

    def to_point_f64(self):
        return PointF64(float(self.x), float(self.y))

    def distance_to(self, other):
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class PointF64:
    """Floating point point."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other):
        return PointF64(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return PointF64(self.x - other.x, self.y - other.y)

    def __neg__(self):
        return PointF64(-self.x, -self.y)

    def distance_to(self, other):
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_point_i32(self):
        """Truncate both coordinates toward zero."""
        return PointI32(int(self.x), int(self.y))

    def floor(self):
        """Round both coordinates down to the containing pixel."""
        return PointI32(math.floor(self.x), math.floor(self.y))
