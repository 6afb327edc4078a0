"""
Pairwise distances between two point sets and their optimal assignment.

The assignment is a minimum-cost perfect matching on the complete bipartite
graph between the two sets, with integer edge costs.
"""

import networkx as nx
import numpy as np

from shapecompletion.errors import PreconditionViolation
from shapecompletion.models import Matching
from shapecompletion.config import ShapeCompletionConfig
from shapecompletion.tracer import configure_tracer_from_config, get_tracer, trace


class SquareDistanceMatrix:
    """
    n x n matrix of Euclidean distances, row i for item i of the first set
    and column j for item j of the second.
    """

    def __init__(self, distances):
        distances = np.asarray(distances, dtype=float)
        if distances.ndim != 2 or distances.shape[0] != distances.shape[1]:
            raise PreconditionViolation(f"distance matrix must be square, got shape {distances.shape}")
        self.n = distances.shape[0]
        self.distances = distances

    @classmethod
    def from_two_sets(cls, set1, set2):
        """
        Distances between the locations of set1 and set2 (directions ignored).

        Both sets must hold the same number of items.
        """
        if len(set1) != len(set2):
            raise PreconditionViolation(
                f"point sets must have equal sizes to build a distance matrix, got {len(set1)} and {len(set2)}"
            )

        points1 = np.array([[item.point.x, item.point.y] for item in set1], dtype=float).reshape(-1, 2)
        points2 = np.array([[item.point.x, item.point.y] for item in set2], dtype=float).reshape(-1, 2)

        deltas = points1[:, np.newaxis, :] - points2[np.newaxis, :, :]
        return cls(np.sqrt(np.sum(deltas ** 2, axis=2)))

    def row(self, index):
        return self.distances[index]

    def at(self, i, j):
        return float(self.distances[i, j])

    def cost_matrix(self, distance_unit=1.0):
        """Distances floored to whole distance units."""
        return np.floor(self.distances / distance_unit).astype(np.int64)

    @trace(label="into_matching")
    def into_matching(self, distance_unit=None, config=None):
        """
        Minimum-cost bijection between rows and columns.

        Costs are distances truncated to whole units, so the total can exceed
        the true optimum by less than one unit per pair. distance_unit
        defaults to config.matching.distance_unit; a given config also
        applies its tracing section.
        """
        if config is None:
            config = ShapeCompletionConfig()
        else:
            configure_tracer_from_config(config)
        if distance_unit is None:
            distance_unit = config.matching.distance_unit
        if distance_unit <= 0:
            raise PreconditionViolation(f"distance unit must be positive, got {distance_unit}")

        tracer = get_tracer()

        if self.n == 0:
            return Matching.new()

        costs = self.cost_matrix(distance_unit)
        graph = build_assignment_graph(costs)
        rows = [("row", i) for i in range(self.n)]

        try:
            assignment = nx.bipartite.minimum_weight_full_matching(graph, top_nodes=rows, weight="weight")
        except ValueError as e:
            raise PreconditionViolation(f"assignment solver found no complete pairing: {e}") from e

        hungarian_result = []
        for row in rows:
            col = assignment.get(row)
            hungarian_result.append(col[1] if col is not None else None)

        matching = Matching.from_hungarian_result(hungarian_result)
        tracer.event(f"Assigned {len(matching)} pairs", cost=int(sum(costs[i, j] for i, j in matching)))

        return matching


def build_assignment_graph(costs):
    """Complete bipartite graph with ("row", i) and ("col", j) nodes."""
    graph = nx.Graph()
    n_rows, n_cols = costs.shape
    graph.add_nodes_from((("row", i) for i in range(n_rows)), bipartite=0)
    graph.add_nodes_from((("col", j) for j in range(n_cols)), bipartite=1)
    for i in range(n_rows):
        for j in range(n_cols):
            graph.add_edge(("row", i), ("col", j), weight=int(costs[i, j]))
    return graph
