import math
import random
from typing import List

import numpy as np

from ..errors import IndexOutOfBounds, InvalidArgument
from ..graph import DistanceGraph
from .base import Solver
from .tour import Tour


def _extend_nearest(rows: List[List[float]], order: List[int], start: int) -> None:
    # order[:start + 1] is placed; pull the nearest remaining city forward each step.
    n = len(order)
    for i in range(start, n - 1):
        row = rows[order[i]]
        nearest = i + 1
        best = math.inf
        for j in range(i + 1, n):
            dist = row[order[j]]
            if dist < best:
                best = dist
                nearest = j
        order[i + 1], order[nearest] = order[nearest], order[i + 1]


def nearest_neighbor_tour(graph: DistanceGraph, start: int) -> Tour:
    n = graph.vertex_count
    if not 0 <= start < max(n, 1):
        raise IndexOutOfBounds(f"start city {start} outside [0, {n})")
    order = list(range(n))
    if n:
        order[0], order[start] = order[start], order[0]
        _extend_nearest(graph.rows, order, 0)
    return Tour(graph, order)


def nearest_neighbor(graph: DistanceGraph, rng: random.Random) -> Tour:
    if graph is None:
        raise InvalidArgument("nearest neighbor needs a graph")
    start = rng.randrange(graph.vertex_count) if graph.vertex_count else 0
    return nearest_neighbor_tour(graph, start)


def loneliness_adjusted(graph: DistanceGraph) -> np.ndarray:
    """
    Distances blended with each origin city's inverted loneliness.

    Loneliness is a city's mean distance to the others. Reflecting it about
    the midpoint of its range makes the loneliest cities the cheapest to
    leave from, so greedy construction visits them early instead of
    stranding one for an expensive closing edge.
    """
    n = graph.vertex_count
    if n < 2:
        raise InvalidArgument(f"loneliness needs at least two cities, got {n}")
    dist = graph.matrix
    loneliness = dist.sum(axis=1) / (n - 1)
    midpoint = (loneliness.min() + loneliness.max()) / 2
    inverted = 2 * midpoint - loneliness
    return (dist + inverted[:, None]) / 2


def nearest_loneliest_neighbor(graph: DistanceGraph) -> Tour:
    if graph is None:
        raise InvalidArgument("nearest loneliest neighbor needs a graph")
    n = graph.vertex_count
    if n < 2:
        return Tour(graph)
    adjusted = loneliness_adjusted(graph)
    iu, ju = np.triu_indices(n, k=1)
    cheapest = int(np.argmin(adjusted[iu, ju]))
    first, second = int(iu[cheapest]), int(ju[cheapest])
    order = [first, second] + [c for c in range(n) if c != first and c != second]
    _extend_nearest(adjusted.tolist(), order, 1)
    return Tour(graph, order)


def random_tour(graph: DistanceGraph, rng: random.Random) -> Tour:
    tour = Tour(graph)
    tour.shuffle(rng)
    return tour


STRATEGIES = ("nearest_neighbor", "nearest_loneliest_neighbor", "random")


class ConstructiveSolver(Solver):
    name = "constructive"

    def __init__(self, strategy: str):
        if strategy not in STRATEGIES:
            raise InvalidArgument(f"unknown strategy {strategy!r}; expected one of {STRATEGIES}")
        self.strategy = strategy

    def solve(self, graph: DistanceGraph, rng: random.Random) -> Tour:
        if self.strategy == "nearest_neighbor":
            return nearest_neighbor(graph, rng)
        if self.strategy == "nearest_loneliest_neighbor":
            return nearest_loneliest_neighbor(graph)
        return random_tour(graph, rng)
