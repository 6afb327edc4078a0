"""Tests for the boundary-walk hole filler."""

import json
import os

import numpy as np
import pytest

from shapecompletion.errors import HoleFillError, PreconditionViolation
from shapecompletion.filler.hole_filler import HoleFiller, apply_to_image, cyclic_midpoint
from shapecompletion.filler.matrix import FilledHoleElement
from shapecompletion.geometry.binary_image import BinaryImage
from shapecompletion.geometry.paths import CompoundPath, PathI32
from shapecompletion.geometry.points import PointI32
from shapecompletion.geometry.rect import BoundingRect
from shapecompletion.io.save_artifacts import DebugArtifactWriter
from shapecompletion.tracer import configure_tracer


@pytest.fixture
def left_half_image():
    """8x8 image whose columns x < 4 are foreground."""
    pixels = np.zeros((8, 8), dtype=np.uint8)
    pixels[:, :4] = 1
    return BinaryImage.from_array(pixels)


@pytest.fixture
def splitting_curve():
    """Vertical polyline through image column 4, crossing the whole hole."""
    return CompoundPath([PathI32([PointI32(4, y) for y in range(2, 6)])])


def fill_arcs(image, hole_rect, endpoints, threshold, temp_dir):
    """Run a fill with debug output and return the result and its recorded arcs."""
    writer = DebugArtifactWriter(temp_dir, "arcs", enabled=True, scale=1)
    result = HoleFiller.fill(image, hole_rect, [], endpoints, threshold, debug_writer=writer)

    metrics_path = os.path.join(temp_dir, "debug", "arcs", "fill", "fill_metrics.json")
    with open(metrics_path, encoding="utf-8") as f:
        return result, json.load(f)["arcs"]


class TestCyclicMidpoint:

    def test_forward(self):
        assert cyclic_midpoint(2, 6, 16) == 4

    def test_wraparound(self):
        assert cyclic_midpoint(14, 2, 16) == 0
        assert cyclic_midpoint(12, 0, 16) == 14

    def test_same_index(self):
        assert cyclic_midpoint(3, 3, 16) == 3


class TestHoleFill:
    """Hole rect fixture spans (2, 2) - (6, 6) in an 8x8 image."""

    def test_opposite_corners_on_foreground(self, foreground_image, hole_rect):
        """Test that a 4x4 hole surrounded by foreground is filled as texture."""
        result = HoleFiller.fill(
            foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 0
        )

        assert result.ok
        matrix = result.unwrap()
        assert (matrix.width, matrix.height) == (4, 4)
        assert matrix.count(FilledHoleElement.STRUCTURE) == 0
        assert matrix.count(FilledHoleElement.TEXTURE) == 16

    def test_background_surroundings_left_blank(self, background_image, hole_rect):
        result = HoleFiller.fill(
            background_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 0
        )

        assert result.unwrap().count(FilledHoleElement.BLANK) == 16

    def test_threshold_longer_than_arcs(self, foreground_image, hole_rect):
        """Test that arcs not longer than the threshold are skipped."""
        result = HoleFiller.fill(
            foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 8
        )

        assert result.unwrap().count(FilledHoleElement.TEXTURE) == 0

    def test_curve_splits_hole(self, left_half_image, hole_rect, splitting_curve):
        """Test that only the side facing foreground is filled."""
        result = HoleFiller.fill(
            left_half_image, hole_rect, [splitting_curve], [PointI32(4, 2), PointI32(4, 6)], 2
        )

        matrix = result.unwrap()
        for y in range(4):
            assert matrix.get(PointI32(0, y)) == FilledHoleElement.TEXTURE
            assert matrix.get(PointI32(1, y)) == FilledHoleElement.TEXTURE
            assert matrix.get(PointI32(2, y)) == FilledHoleElement.STRUCTURE
            assert matrix.get(PointI32(3, y)) == FilledHoleElement.BLANK

    def test_counter_clockwise_walk_same_result(self, left_half_image, hole_rect, splitting_curve, default_config):
        endpoints = [PointI32(4, 2), PointI32(4, 6)]
        clockwise = HoleFiller.fill(left_half_image, hole_rect, [splitting_curve], endpoints, 2).unwrap()

        default_config.hole_fill.clockwise = False
        counter = HoleFiller.fill(
            left_half_image, hole_rect, [splitting_curve], endpoints, 2, config=default_config
        ).unwrap()

        assert clockwise == counter

    def test_single_endpoint_walks_full_lap(self, foreground_image, hole_rect):
        result = HoleFiller.fill(foreground_image, hole_rect, [], [PointI32(2, 2)], 0)

        assert result.unwrap().count(FilledHoleElement.TEXTURE) == 16

    def test_off_boundary_endpoints_adjusted(self, foreground_image, hole_rect):
        result = HoleFiller.fill(
            foreground_image, hole_rect, [], [PointI32(0, 0), PointI32(9, 9)], 0
        )

        assert result.unwrap().count(FilledHoleElement.TEXTURE) == 16

    def test_threshold_defaults_to_config(self, foreground_image, hole_rect, default_config):
        default_config.hole_fill.blank_boundary_pixels_threshold = 8

        result = HoleFiller.fill(
            foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], config=default_config
        )

        assert result.unwrap().count(FilledHoleElement.TEXTURE) == 0


class TestBoundaryWalk:
    """
    The 4x4 hole has 16 boundary points, walked clockwise from the first
    endpoint; index 15 is (2, 3), just before (2, 2).
    """

    def test_endpoint_just_before_start_terminates(self, foreground_image, hole_rect, temp_dir):
        result, arcs = fill_arcs(foreground_image, hole_rect, [PointI32(2, 2), PointI32(2, 3)], 0, temp_dir)

        assert result.unwrap().count(FilledHoleElement.TEXTURE) == 16
        assert [(arc["from"], arc["to"]) for arc in arcs] == [(0, 15), (15, 0)]

    def test_adjacent_endpoints(self, foreground_image, hole_rect, temp_dir):
        """Test that a one-step arc is walked but not longer than the threshold."""
        result, arcs = fill_arcs(
            foreground_image, hole_rect, [PointI32(2, 2), PointI32(4, 2), PointI32(5, 2)], 1, temp_dir
        )

        assert result.unwrap().count(FilledHoleElement.TEXTURE) == 16
        assert [arc["total_outside_pixels"] for arc in arcs] == [2, 1, 13]
        assert [arc["fillable"] for arc in arcs] == [True, False, True]

    def test_duplicate_endpoints_walked_once(self, foreground_image, hole_rect, temp_dir):
        result, arcs = fill_arcs(
            foreground_image, hole_rect, [PointI32(2, 2), PointI32(6, 6), PointI32(2, 2)], 0, temp_dir
        )

        assert result.unwrap().count(FilledHoleElement.TEXTURE) == 16
        assert len(arcs) == 2

    def test_every_boundary_point_visited_once(self, foreground_image, hole_rect, temp_dir):
        endpoints = [PointI32(2, 2), PointI32(5, 2), PointI32(6, 4), PointI32(3, 6), PointI32(2, 3)]

        _, arcs = fill_arcs(foreground_image, hole_rect, endpoints, 0, temp_dir)

        assert len(arcs) == len(endpoints)
        assert sum(arc["total_outside_pixels"] for arc in arcs) == 16
        assert arcs[-1]["to"] == 0


class TestHoleFillTracing:

    def test_config_enables_tracing(self, foreground_image, hole_rect, default_config, capsys):
        default_config.tracing.enabled = True
        try:
            HoleFiller.fill(
                foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 0, config=default_config
            )
        finally:
            configure_tracer(enabled=False)

        assert "Walked 2 arcs" in capsys.readouterr().err

    def test_shared_config_keeps_trace_file(self, foreground_image, hole_rect, default_config, temp_dir):
        """Test that a second fill with the same config appends to the trace file."""
        default_config.tracing.enabled = True
        default_config.tracing.file_path = os.path.join(temp_dir, "trace.log")
        try:
            for _ in range(2):
                HoleFiller.fill(
                    foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 0, config=default_config
                )
        finally:
            configure_tracer(enabled=False)

        with open(default_config.tracing.file_path, encoding="utf-8") as f:
            assert f.read().count("Walked 2 arcs") == 2


class TestHoleFillErrors:

    def test_no_endpoints_is_failure_result(self, foreground_image, hole_rect):
        result = HoleFiller.fill(foreground_image, hole_rect, [], [], 0)

        assert not result.ok
        assert "endpoint" in result.error
        with pytest.raises(HoleFillError):
            result.unwrap()

    def test_degenerate_rect_is_failure_result(self, foreground_image):
        result = HoleFiller.fill(foreground_image, BoundingRect(2, 2, 2, 6), [], [PointI32(2, 2)], 0)

        assert not result.ok

    def test_polyline_vertex_on_right_edge_raises(self, foreground_image, hole_rect):
        """Test that a vertex at x == right falls outside the grid."""
        curve = CompoundPath([PathI32([PointI32(4, 3), PointI32(6, 3)])])

        with pytest.raises(PreconditionViolation):
            HoleFiller.fill(foreground_image, hole_rect, [curve], [PointI32(2, 2)], 0)

    def test_trimmed_edge_vertex_accepted(self, foreground_image, hole_rect):
        curve = CompoundPath([PathI32([PointI32(4, 3), PointI32(5, 3)])])

        result = HoleFiller.fill(foreground_image, hole_rect, [curve], [PointI32(2, 2)], 0)

        assert result.unwrap().count(FilledHoleElement.STRUCTURE) == 2

    def test_negative_threshold_raises(self, foreground_image, hole_rect):
        with pytest.raises(PreconditionViolation):
            HoleFiller.fill(foreground_image, hole_rect, [], [PointI32(2, 2)], -1)


class TestApplyToImage:

    def test_filled_hole_written_back(self, background_image, foreground_image, hole_rect):
        matrix = HoleFiller.fill(
            foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 0
        ).unwrap()

        result = apply_to_image(background_image, hole_rect, matrix)

        expected = np.zeros((8, 8), dtype=bool)
        expected[2:6, 2:6] = True
        assert np.array_equal(result.pixels, expected)
        # the input image is not modified
        assert not background_image.pixels.any()

    def test_blank_cells_clear_foreground(self, foreground_image, hole_rect, splitting_curve, left_half_image):
        matrix = HoleFiller.fill(
            left_half_image, hole_rect, [splitting_curve], [PointI32(4, 2), PointI32(4, 6)], 2
        ).unwrap()

        result = apply_to_image(foreground_image, hole_rect, matrix)

        assert not result.get_pixel(5, 3)
        assert result.get_pixel(4, 3)
        assert result.get_pixel(7, 7)


class TestDebugArtifacts:

    def test_debug_writer_outputs(self, foreground_image, hole_rect, temp_dir):
        writer = DebugArtifactWriter(temp_dir, "hole_0", enabled=True, scale=2)

        HoleFiller.fill(
            foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 0,
            debug_writer=writer,
        )

        hole_dir = os.path.join(temp_dir, "debug", "hole_0")
        assert os.path.exists(os.path.join(hole_dir, "rasterize", "01_structure.png"))
        assert os.path.exists(os.path.join(hole_dir, "fill", "02_filled.png"))
        assert os.path.exists(os.path.join(hole_dir, "fill", "fill_metrics.json"))

    def test_disabled_writer_outputs_nothing(self, foreground_image, hole_rect, temp_dir):
        writer = DebugArtifactWriter(temp_dir, "hole_0", enabled=False)

        HoleFiller.fill(
            foreground_image, hole_rect, [], [PointI32(2, 2), PointI32(6, 6)], 0,
            debug_writer=writer,
        )

        assert not os.path.exists(os.path.join(temp_dir, "debug"))
