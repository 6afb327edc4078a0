"""
Integer bounding rectangle describing a hole.

The hole covers the pixels [left, right) x [top, bottom). Its boundary is the
closed outline through the four corners, so right and bottom edge points lie
one pixel outside the hole area.
"""

from dataclasses import dataclass

from shapely.geometry import Point, box

from shapecompletion.errors import PreconditionViolation
from shapecompletion.geometry.points import PointI32


@dataclass(frozen=True)
class BoundingRect:
    left: int
    top: int
    right: int
    bottom: int

    @property
    def width(self):
        return self.right - self.left

    @property
    def height(self):
        return self.bottom - self.top

    def top_left(self):
        return PointI32(self.left, self.top)

    def top_right(self):
        return PointI32(self.right, self.top)

    def bottom_left(self):
        return PointI32(self.left, self.bottom)

    def bottom_right(self):
        return PointI32(self.right, self.bottom)

    def is_degenerate(self):
        return self.width <= 0 or self.height <= 0

    def to_shapely(self):
        return box(self.left, self.top, self.right, self.bottom)

    def have_point_on_boundary(self, point, tolerance=0):
        """Whether point lies within tolerance of the rectangle outline."""
        outline = self.to_shapely().exterior
        return outline.distance(Point(point.x, point.y)) <= tolerance

    def _clockwise_boundary(self):
        """Outline points clockwise (y pointing down) from the top-left corner."""
        if self.width == 0 and self.height == 0:
            return [self.top_left()]

        points = []
        for x in range(self.left, self.right):
            points.append(PointI32(x, self.top))
        for y in range(self.top, self.bottom):
            points.append(PointI32(self.right, y))
        for x in range(self.right, self.left, -1):
            points.append(PointI32(x, self.bottom))
        for y in range(self.bottom, self.top, -1):
            points.append(PointI32(self.left, y))
        return points

    def get_boundary_points_from(self, point, clockwise=True):
        """
        Enumerate the outline as a cyclic sequence starting at point.

        Raises PreconditionViolation if point is not on the outline.
        """
        points = self._clockwise_boundary()
        try:
            start = points.index(point)
        except ValueError:
            raise PreconditionViolation(
                f"boundary walk must start on the rectangle boundary, got ({point.x}, {point.y})"
            ) from None

        ordered = points[start:] + points[:start]
        if not clockwise:
            ordered = ordered[:1] + ordered[:0:-1]
        return ordered

    def get_closest_point_outside(self, point):
        """
        Nearest point strictly outside the closed rectangle.

        Points already outside are returned unchanged. Ties between sides are
        resolved in the order left, top, right, bottom.
        """
        if not (self.left <= point.x <= self.right and self.top <= point.y <= self.bottom):
            return point

        candidates = [
            (point.x - self.left, PointI32(self.left - 1, point.y)),
            (point.y - self.top, PointI32(point.x, self.top - 1)),
            (self.right - point.x, PointI32(self.right + 1, point.y)),
            (self.bottom - point.y, PointI32(point.x, self.bottom + 1)),
        ]
        return min(candidates, key=lambda c: c[0])[1]

    def get_closest_point_inside(self, point):
        """Nearest pixel of the hole area [left, right) x [top, bottom)."""
        x = min(max(point.x, self.left), self.right - 1)
        y = min(max(point.y, self.top), self.bottom - 1)
        return PointI32(x, y)
