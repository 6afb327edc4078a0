"""
Rasterization of interpolated curves into a hole grid.

Polylines contribute only their vertices. Bezier segments are sampled
densely enough (quantization_factor samples per unit of estimated length)
to produce a connected line of STRUCTURE cells.

The grid covers [left, right) x [top, bottom) of the hole, so a polyline
vertex lying on the right or bottom edge of the hole rectangle is outside it
and raises PreconditionViolation. Curves ending on those edges must have that
last vertex trimmed by the caller. Bezier samples are clamped into the grid
instead.
"""

from shapecompletion.errors import PreconditionViolation
from shapecompletion.filler.matrix import FilledHoleElement
from shapecompletion.geometry.bezier import estimate_length, evaluate_bezier
from shapecompletion.geometry.paths import PATH_ELEMENT_TYPES, PathF64, PathI32, Spline
from shapecompletion.geometry.points import PointI32
from shapecompletion.tracer import get_tracer, trace


@trace(label="rasterize_intrapolated_curves")
def rasterize_intrapolated_curves(matrix, curves, origin, quantization_factor=4):
    """
    Mark every curve of curves as STRUCTURE in matrix.

    Args:
        matrix: FilledHoleMatrix covering the hole
        curves: iterable of CompoundPath in image coordinates
        origin: PointI32, top-left corner of the hole
        quantization_factor: Bezier samples per unit of estimated length

    Returns:
        the same matrix, updated

    The caller's paths are not modified; each one is copied before being
    moved into hole-local coordinates.
    """
    tracer = get_tracer()
    offset = -origin

    vertex_count = 0
    segment_count = 0

    for compound_path in curves:
        for path_elem in compound_path:
            if not isinstance(path_elem, PATH_ELEMENT_TYPES):
                raise PreconditionViolation(
                    f"unsupported path element type: {type(path_elem).__name__}"
                )

        compound_path = compound_path.copy()
        compound_path.offset(offset)

        for path_elem in compound_path:
            if isinstance(path_elem, (PathI32, PathF64)):
                for point in path_elem:
                    cell = point if isinstance(point, PointI32) else point.floor()
                    matrix.set(cell, FilledHoleElement.STRUCTURE)
                    vertex_count += 1
            elif isinstance(path_elem, Spline):
                for control_points in path_elem.get_control_points():
                    if len(control_points) != 4:
                        raise PreconditionViolation(
                            f"spline segment must have exactly 4 control points, got {len(control_points)}"
                        )
                    rasterize_bezier_curve(matrix, control_points, quantization_factor)
                    segment_count += 1

    tracer.event(f"Rasterized {vertex_count} polyline vertices and {segment_count} Bezier segments")

    return matrix


def rasterize_bezier_curve(matrix, control_points, quantization_factor=4):
    """
    Sample one cubic Bezier and mark the samples as STRUCTURE.

    Samples are taken at t = i / q for i in [0, q) with
    q = quantization_factor * floor(length), so the end point itself is not
    sampled. Samples falling outside the grid are clamped onto its edge.
    """
    quantization_levels = quantization_factor * int(estimate_length(control_points))

    for i in range(quantization_levels):
        t = i / quantization_levels
        p = evaluate_bezier(control_points, t)
        clipped = PointI32(
            min(max(int(p.x), 0), matrix.width - 1),
            min(max(int(p.y), 0), matrix.height - 1),
        )
        matrix.set(clipped, FilledHoleElement.STRUCTURE)

    return quantization_levels
