"""
Classified pixel grid for a hole.

Cells start BLANK; rasterized curves turn cells into STRUCTURE and flood fill
turns the remaining reachable BLANK cells into TEXTURE.
"""

from enum import IntEnum

import numpy as np

from shapecompletion.errors import PreconditionViolation


class FilledHoleElement(IntEnum):
    BLANK = 0
    STRUCTURE = 1
    TEXTURE = 2


class FilledHoleMatrix:
    """
    Row-major grid of FilledHoleElement codes, shape (height, width).

    Use row() for whole rows and get()/set() for single cells.
    """

    def __init__(self, width, height):
        self.width = width
        self.height = height
        self.elems = np.full((height, width), FilledHoleElement.BLANK, dtype=np.uint8)

    @classmethod
    def from_array(cls, array):
        array = np.asarray(array, dtype=np.uint8)
        matrix = cls(array.shape[1], array.shape[0])
        matrix.elems = array.copy()
        return matrix

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_bounds(self, point):
        if not self.in_bounds(point.x, point.y):
            raise PreconditionViolation(
                f"cell ({point.x}, {point.y}) outside {self.width}x{self.height} grid"
            )

    def row(self, index):
        """Writable view of row index. The caller guarantees index < height."""
        return self.elems[index]

    def get(self, point):
        self._check_bounds(point)
        return FilledHoleElement(int(self.elems[point.y, point.x]))

    def set(self, point, value):
        self._check_bounds(point)
        self.elems[point.y, point.x] = value

    def new_without_column(self, col):
        """Copy with column col removed; later columns shift left."""
        return FilledHoleMatrix.from_array(np.delete(self.elems, col, axis=1))

    def new_without_row(self, row):
        """Copy with row removed; later rows shift up."""
        return FilledHoleMatrix.from_array(np.delete(self.elems, row, axis=0))

    def count(self, element):
        return int(np.count_nonzero(self.elems == element))

    def copy(self):
        return FilledHoleMatrix.from_array(self.elems)

    def to_array(self):
        return self.elems.copy()

    def __eq__(self, other):
        if not isinstance(other, FilledHoleMatrix):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and np.array_equal(self.elems, other.elems)
        )

    __hash__ = None

    def __repr__(self):
        return f"FilledHoleMatrix({self.width}x{self.height})"
