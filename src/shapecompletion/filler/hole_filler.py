"""
Hole filling for images whose structural information has been recovered.

The recovered curves are rasterized into a fresh grid, then the hole's
rectangular boundary is walked from endpoint to endpoint. Each boundary arc
whose outside neighbourhood is mostly foreground is treated as a real gap in
the drawing, and the region behind it is flood filled.
"""

from shapecompletion.config import ShapeCompletionConfig
from shapecompletion.errors import PreconditionViolation
from shapecompletion.filler.endpoints import adjust_endpoints
from shapecompletion.filler.flood_fill import fill_hole_iterative
from shapecompletion.filler.matrix import FilledHoleElement, FilledHoleMatrix
from shapecompletion.filler.rasterize import rasterize_intrapolated_curves
from shapecompletion.models import FillResult
from shapecompletion.tracer import configure_tracer_from_config, get_tracer, trace


class HoleFiller:
    """Fills the inside of a hole once its curves and endpoints are known."""

    @classmethod
    @trace(label="hole_fill", arg_names=["hole_rect", "endpoints"])
    def fill(
        cls,
        image,
        hole_rect,
        intrapolated_curves,
        endpoints,
        blank_boundary_pixels_threshold=None,
        config=None,
        debug_writer=None,
    ):
        """
        Classify every pixel of hole_rect as BLANK, STRUCTURE or TEXTURE.

        Args:
            image: BinaryImage at least as large as hole_rect
            hole_rect: BoundingRect of the hole in image coordinates
            intrapolated_curves: list of CompoundPath in image coordinates.
                Polyline vertices must lie inside the hole: a vertex on the
                right or bottom edge falls one cell past the grid and raises
                PreconditionViolation, so callers trim such vertices.
            endpoints: list of PointI32 on (or near) the hole boundary
            blank_boundary_pixels_threshold: arc length / blank pixel
                threshold, defaults to config.hole_fill value
            config: ShapeCompletionConfig, defaults are used when omitted.
                A given config also applies its tracing section.
            debug_writer: optional DebugArtifactWriter

        Returns:
            FillResult holding the classified FilledHoleMatrix, or an error
            message for holes that cannot be processed.
        """
        if config is None:
            config = ShapeCompletionConfig()
        else:
            configure_tracer_from_config(config)
        threshold = blank_boundary_pixels_threshold
        if threshold is None:
            threshold = config.hole_fill.blank_boundary_pixels_threshold
        if threshold < 0:
            raise PreconditionViolation(f"blank boundary pixels threshold must be non-negative, got {threshold}")

        if hole_rect.is_degenerate():
            return FillResult.failure(
                f"hole rectangle must have positive size, got {hole_rect.width}x{hole_rect.height}"
            )
        if not endpoints:
            return FillResult.failure("hole fill needs at least one boundary endpoint")

        matrix = FilledHoleMatrix(hole_rect.width, hole_rect.height)
        origin = hole_rect.top_left()

        matrix = rasterize_intrapolated_curves(
            matrix,
            intrapolated_curves,
            origin,
            quantization_factor=config.hole_fill.quantization_factor,
        )
        if debug_writer:
            debug_writer.save_matrix(matrix, "rasterize", "01_structure.png")

        matrix = fill_holes(
            matrix,
            image,
            hole_rect,
            origin,
            endpoints,
            threshold,
            clockwise=config.hole_fill.clockwise,
            debug_writer=debug_writer,
        )

        return FillResult.success(matrix)


def cyclic_midpoint(from_idx, to_idx, num_points):
    """Index halfway from from_idx to to_idx going forward around the cycle."""
    if to_idx >= from_idx:
        cyclic_dist = to_idx - from_idx
    else:
        cyclic_dist = num_points - (from_idx - to_idx)
    return (from_idx + cyclic_dist // 2) % num_points


@trace(label="fill_holes")
def fill_holes(
    matrix,
    image,
    hole_rect,
    offset,
    endpoints,
    blank_boundary_pixels_threshold,
    clockwise=True,
    debug_writer=None,
):
    """
    Walk the boundary arc by arc and flood fill the qualifying ones.

    offset must be the top-left corner of hole_rect. An arc qualifies when it
    is longer than the threshold and at most threshold of the pixels just
    outside it are background.
    """
    tracer = get_tracer()

    endpoints = adjust_endpoints(hole_rect, endpoints)
    endpoints_set = set(endpoints)

    bounding_points = hole_rect.get_boundary_points_from(endpoints[0], clockwise)
    num_points = len(bounding_points)

    def eval_outside_point(point_idx):
        # right and bottom edge points are already outside the hole area
        point = bounding_points[point_idx]
        if point.x == hole_rect.right or point.y == hole_rect.bottom:
            return point
        return hole_rect.get_closest_point_outside(point)

    def eval_inside_point(point_idx):
        # left and top edge points are already inside the hole area
        point = bounding_points[point_idx]
        if point.x == hole_rect.left or point.y == hole_rect.top:
            return point
        return hole_rect.get_closest_point_inside(point)

    arcs = []
    current_point = 0
    while True:
        prev_endpoint = current_point
        total_outside_pixels = 0
        blank_outside_pixels = 0
        while True:
            current_point = (current_point + 1) % num_points
            total_outside_pixels += 1
            if not image.get_pixel_at_safe(eval_outside_point(current_point)):
                blank_outside_pixels += 1
            if bounding_points[current_point] in endpoints_set:
                break

        fillable = (
            total_outside_pixels > blank_boundary_pixels_threshold
            and blank_outside_pixels <= blank_boundary_pixels_threshold
        )

        filled = 0
        if fillable:
            # A lone endpoint closes a full lap, so the midpoint comes from
            # the arc length rather than from the two indices.
            sampled_mid_point = (prev_endpoint + total_outside_pixels // 2) % num_points
            sampled_points = [
                cyclic_midpoint(prev_endpoint, sampled_mid_point, num_points),
                sampled_mid_point,
                cyclic_midpoint(sampled_mid_point, current_point, num_points),
            ]
            for sampled_point in sampled_points:
                inside_point = eval_inside_point(sampled_point)
                filled += fill_hole_iterative(matrix, inside_point - offset)

        tracer.event(
            f"Arc {prev_endpoint}->{current_point}: total={total_outside_pixels} "
            f"blank={blank_outside_pixels} fillable={fillable} filled={filled}",
            level="DEBUG",
        )
        arcs.append({
            "from": prev_endpoint,
            "to": current_point,
            "total_outside_pixels": total_outside_pixels,
            "blank_outside_pixels": blank_outside_pixels,
            "fillable": fillable,
            "filled_cells": filled,
        })

        if current_point == 0:
            break

    tracer.event(
        f"Walked {len(arcs)} arcs, filled {sum(1 for arc in arcs if arc['fillable'])}",
        texture=matrix.count(FilledHoleElement.TEXTURE),
    )

    if debug_writer:
        debug_writer.save_matrix(matrix, "fill", "02_filled.png")
        debug_writer.save_json(
            {
                "threshold": blank_boundary_pixels_threshold,
                "boundary_points": num_points,
                "endpoints": [[p.x, p.y] for p in endpoints],
                "arcs": arcs,
            },
            "fill",
            "fill_metrics.json",
        )

    return matrix


def apply_to_image(image, hole_rect, matrix):
    """
    Copy of image with the hole replaced by the classified grid.

    STRUCTURE and TEXTURE cells become foreground, BLANK cells background.
    Cells falling outside the image are dropped.
    """
    result = image.copy()

    x0 = max(hole_rect.left, 0)
    y0 = max(hole_rect.top, 0)
    x1 = min(hole_rect.left + matrix.width, image.width)
    y1 = min(hole_rect.top + matrix.height, image.height)
    if x0 >= x1 or y0 >= y1:
        return result

    cells = matrix.elems[y0 - hole_rect.top:y1 - hole_rect.top, x0 - hole_rect.left:x1 - hole_rect.left]
    result.pixels[y0:y1, x0:x1] = cells != FilledHoleElement.BLANK
    return result
