"""
Pydantic data models for shape completion.

Covers the directional points being paired across a gap, the resulting
Matching, and the outcome of a hole fill.
"""

from collections import Counter
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from shapecompletion.errors import HoleFillError, PreconditionViolation
from shapecompletion.filler.matrix import FilledHoleMatrix
from shapecompletion.geometry.points import PointF64


class MatchItem(BaseModel):
    """A point with a direction, e.g. a curve endpoint and its tangent."""
    id: int = 0
    point: PointF64
    direction: PointF64 = Field(default_factory=PointF64)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def new_with_default_id(cls, point, direction):
        return cls(point=point, direction=direction)

    def distance_to(self, other):
        """Euclidean distance between locations; directions are ignored."""
        return self.point.distance_to(other.point)


class MatchItemSet(BaseModel):
    """
    Ordered collection of MatchItems.

    Ids are either assigned by the set (from_match_items_and_set_ids,
    push_and_set_id) or kept from the caller (push_as_is). Using both modes on
    one set can produce duplicate ids; this is not checked.
    """
    items: List[MatchItem] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def new(cls):
        return cls()

    @classmethod
    def from_match_items_and_set_ids(cls, items):
        items = [item.model_copy(update={"id": i}) for i, item in enumerate(items)]
        return cls(items=items)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __iter__(self):
        return iter(self.items)

    def is_empty(self):
        return not self.items

    def remove(self, index):
        """Remove and return the item at position index."""
        return self.items.pop(index)

    def push_and_set_id(self, match_item):
        """Append with id equal to the current length."""
        self.items.append(match_item.model_copy(update={"id": len(self.items)}))

    def push_as_is(self, match_item):
        """Append keeping the caller's id."""
        self.items.append(match_item)


def sort_index_pair(pair):
    a, b = pair
    return (a, b) if a <= b else (b, a)


def get_sorted_index_pairs(index_pairs):
    """Canonicalize each pair; the list order is left untouched."""
    return [sort_index_pair(pair) for pair in index_pairs]


class Matching(BaseModel):
    """
    A set of (i, j) index pairs, i from the first point set, j from the second.

    Equality ignores the order of pairs and the order inside each pair. The
    hash sums the canonical pair elements, so distinct matchings such as
    {(0, 3), (1, 2)} and {(0, 2), (1, 3)} collide; equality still tells them
    apart.
    """
    index_pairs: List[Tuple[int, int]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def new(cls):
        return cls()

    @classmethod
    def from_pairs(cls, pairs):
        return cls(index_pairs=[(int(i), int(j)) for i, j in pairs])

    @classmethod
    def from_hungarian_result(cls, hungarian_result):
        """
        Build from a row-indexed assignment: entry i is the column assigned
        to row i, or None when the solver left the row unassigned.
        """
        pairs = []
        for i, j in enumerate(hungarian_result):
            if j is None:
                raise PreconditionViolation(f"assignment left row {i} unmatched")
            pairs.append((i, int(j)))
        return cls(index_pairs=pairs)

    def __len__(self):
        return len(self.index_pairs)

    def __iter__(self):
        return iter(self.index_pairs)

    def __eq__(self, other):
        if not isinstance(other, Matching):
            return NotImplemented
        # Multisets of canonical pairs: canonical pairs of a bijection can
        # share their smaller element, e.g. (0, 1) and (0, 2), and repeated
        # pairs must be counted for equality to stay symmetric.
        return Counter(get_sorted_index_pairs(self.index_pairs)) == Counter(
            get_sorted_index_pairs(other.index_pairs)
        )

    def __hash__(self):
        sorted_pairs = get_sorted_index_pairs(self.index_pairs)
        sum_a = sum(a for a, _ in sorted_pairs)
        sum_b = sum(b for _, b in sorted_pairs)
        return hash((sum_a, sum_b))

    def total_cost(self, distance_matrix):
        """Sum of the matrix entries selected by the pairs."""
        return sum(distance_matrix.at(i, j) for i, j in self.index_pairs)

    def is_bijection(self, n):
        """Whether every index in [0, n) appears exactly once on each side."""
        rows = Counter(i for i, _ in self.index_pairs)
        cols = Counter(j for _, j in self.index_pairs)
        expected = {k: 1 for k in range(n)}
        return dict(rows) == expected and dict(cols) == expected


class FillResult(BaseModel):
    """Outcome of a hole fill: a classified grid or a failure message."""
    matrix: Optional[FilledHoleMatrix] = None
    error: Optional[str] = None

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    @classmethod
    def success(cls, matrix):
        return cls(matrix=matrix)

    @classmethod
    def failure(cls, message):
        return cls(error=message)

    @property
    def ok(self):
        return self.error is None

    def unwrap(self):
        """Return the matrix, raising HoleFillError for a failed fill."""
        if self.error is not None:
            raise HoleFillError(self.error)
        return self.matrix
