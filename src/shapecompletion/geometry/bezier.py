"""
Cubic Bezier helpers: evaluation, subdivision and arc length estimation.
"""

import numpy as np

from shapecompletion.geometry.points import PointF64


def _as_array(control_points):
    return np.array([[p.x, p.y] for p in control_points], dtype=float)


def _bernstein(i, t):
    """Compute Bernstein basis polynomial value B_i,3(t)."""
    if i == 0:
        return (1 - t) ** 3
    elif i == 1:
        return 3 * (1 - t) ** 2 * t
    elif i == 2:
        return 3 * (1 - t) * t ** 2
    else:
        return t ** 3


def evaluate_bezier(control_points, t):
    """Point of the cubic Bezier [p0, p1, p2, p3] at parameter t."""
    pts = _as_array(control_points)
    x, y = sum(_bernstein(i, t) * pts[i] for i in range(4))
    return PointF64(float(x), float(y))


def split_bezier(pts, t=0.5):
    """
    De Casteljau subdivision of a 4x2 control point array.

    Returns the control arrays of the two halves.
    """
    p01 = pts[0] + (pts[1] - pts[0]) * t
    p12 = pts[1] + (pts[2] - pts[1]) * t
    p23 = pts[2] + (pts[3] - pts[2]) * t
    p012 = p01 + (p12 - p01) * t
    p123 = p12 + (p23 - p12) * t
    mid = p012 + (p123 - p012) * t

    left = np.array([pts[0], p01, p012, mid])
    right = np.array([mid, p123, p23, pts[3]])
    return left, right


def estimate_length(control_points, tolerance=0.05, max_depth=12):
    """
    Estimate the arc length of a cubic Bezier.

    The curve is subdivided until the control polygon and the chord agree
    within tolerance; each piece then contributes the Gravesen estimate
    (chord + polygon) / 2.
    """
    return _subdivided_length(_as_array(control_points), tolerance, max_depth)


def _subdivided_length(pts, tolerance, depth):
    chord = np.linalg.norm(pts[3] - pts[0])
    polygon = np.sum(np.linalg.norm(np.diff(pts, axis=0), axis=1))

    if polygon - chord <= tolerance or depth <= 0:
        return float(chord + polygon) / 2

    left, right = split_bezier(pts)
    return (
        _subdivided_length(left, tolerance, depth - 1)
        + _subdivided_length(right, tolerance, depth - 1)
    )
