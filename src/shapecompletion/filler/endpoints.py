"""
Snap curve endpoints onto the hole boundary.

Upstream curve fitting can leave endpoints a few pixels off the rectangle;
the boundary walk needs them exactly on it.
"""

from shapecompletion.geometry.points import PointI32


def adjust_endpoints(hole_rect, endpoints):
    """Return endpoints with every off-boundary point moved onto the boundary."""
    return [adjust_endpoint(hole_rect, endpoint) for endpoint in endpoints]


def adjust_endpoint(hole_rect, endpoint):
    """
    Move a single point onto the boundary of hole_rect.

    - Already on the boundary: unchanged.
    - Within the horizontal span: to the nearer of top/bottom.
    - Within the vertical span: to the nearer of left/right.
    - Otherwise: to the nearest corner, ties going to the first of
      top-left, top-right, bottom-left, bottom-right.
    """
    if hole_rect.have_point_on_boundary(endpoint, 0):
        return endpoint

    if hole_rect.left <= endpoint.x <= hole_rect.right:
        if abs(hole_rect.top - endpoint.y) < abs(hole_rect.bottom - endpoint.y):
            return PointI32(endpoint.x, hole_rect.top)
        return PointI32(endpoint.x, hole_rect.bottom)

    if hole_rect.top <= endpoint.y <= hole_rect.bottom:
        if abs(hole_rect.left - endpoint.x) < abs(hole_rect.right - endpoint.x):
            return PointI32(hole_rect.left, endpoint.y)
        return PointI32(hole_rect.right, endpoint.y)

    corners = [
        hole_rect.top_left(),
        hole_rect.top_right(),
        hole_rect.bottom_left(),
        hole_rect.bottom_right(),
    ]
    # min() keeps the first of equally distant corners
    return min(corners, key=endpoint.distance_to)
