"""Pytest fixtures for shape completion tests."""

import tempfile

import numpy as np
import pytest

from shapecompletion.geometry.binary_image import BinaryImage
from shapecompletion.geometry.points import PointF64
from shapecompletion.geometry.rect import BoundingRect


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def foreground_image():
    """8x8 image where every pixel is foreground."""
    return BinaryImage.from_array(np.ones((8, 8), dtype=np.uint8))


@pytest.fixture
def background_image():
    """8x8 image where every pixel is background."""
    return BinaryImage(8, 8)


@pytest.fixture
def hole_rect():
    """4x4 hole in the middle of an 8x8 image."""
    return BoundingRect(2, 2, 6, 6)


@pytest.fixture
def default_config():
    """Create default configuration."""
    from shapecompletion.config import ShapeCompletionConfig
    return ShapeCompletionConfig()


@pytest.fixture
def six_points_a():
    return [
        PointF64(0.0, 0.0),
        PointF64(0.0, 2.0),
        PointF64(3.199, 82.3),
        PointF64(9.8, 2.7177),
        PointF64(76.2, 35.89),
        PointF64(19.84, 85.8),
    ]


@pytest.fixture
def six_points_b():
    return [
        PointF64(12.68, 29.86),
        PointF64(84.6, 20.46),
        PointF64(16.2, 214.5),
        PointF64(89.64, 23.5),
        PointF64(64.7, 29.75),
        PointF64(49.72, 83.0),
    ]
