"""
Compound paths produced by curve interpolation.

A CompoundPath is a sequence of elements, each one of:
- PathI32: integer polyline
- PathF64: floating point polyline
- Spline: chain of cubic Bezier segments sharing end points

Consumers dispatch on the element type with isinstance; PATH_ELEMENT_TYPES
lists every kind.
"""

from dataclasses import dataclass, field
from typing import List

from shapecompletion.geometry.points import PointF64, PointI32


@dataclass
class PathI32:
    points: List[PointI32] = field(default_factory=list)

    def offset(self, delta):
        """Translate in place by an integer offset."""
        self.points = [p + delta for p in self.points]

    def copy(self):
        return PathI32(list(self.points))

    def __iter__(self):
        return iter(self.points)

    def __len__(self):
        return len(self.points)


@dataclass
class PathF64:
    points: List[PointF64] = field(default_factory=list)

    def offset(self, delta):
        """Translate in place by a floating point offset."""
        self.points = [p + delta for p in self.points]

    def copy(self):
        return PathF64(list(self.points))

    def __iter__(self):
        return iter(self.points)

    def __len__(self):
        return len(self.points)


@dataclass
class Spline:
    """
    Cubic Bezier chain stored as a flat list of points:
    start, (handle, handle, end) for each segment.
    """
    points: List[PointF64] = field(default_factory=list)

    @classmethod
    def from_segments(cls, segments):
        """Build a spline from [start, handle, handle, end] segments."""
        points = []
        for segment in segments:
            if not points:
                points.append(segment[0])
            points.extend(segment[1:])
        return cls(points)

    def offset(self, delta):
        self.points = [p + delta for p in self.points]

    def copy(self):
        return Spline(list(self.points))

    def get_control_points(self):
        """
        Group points into per-segment control point lists.

        Well-formed splines (3k + 1 points) yield lists of exactly four
        points; a trailing incomplete group is returned as is.
        """
        return [self.points[i:i + 4] for i in range(0, len(self.points) - 1, 3)]

    def __iter__(self):
        return iter(self.points)

    def __len__(self):
        return len(self.points)


PATH_ELEMENT_TYPES = (PathI32, PathF64, Spline)


@dataclass
class CompoundPath:
    paths: list = field(default_factory=list)

    def add(self, path):
        self.paths.append(path)

    def offset(self, delta):
        """
        Translate every element in place.

        delta is a PointI32; floating point elements receive it widened.
        """
        delta_f64 = delta.to_point_f64() if isinstance(delta, PointI32) else delta
        for path in self.paths:
            if isinstance(path, PathI32):
                path.offset(delta)
            else:
                path.offset(delta_f64)

    def copy(self):
        return CompoundPath([path.copy() for path in self.paths])

    def __iter__(self):
        return iter(self.paths)

    def __len__(self):
        return len(self.paths)
