import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Sequence

from ..graph import DistanceGraph

if TYPE_CHECKING:
    from .tour import Tour


def tour_length(graph: DistanceGraph, order: Sequence[int]) -> float:
    rows = graph.rows
    dist = 0.0
    n = len(order)
    for i in range(n):
        a = order[i]
        b = order[(i + 1) % n]
        dist += rows[a][b]
    return float(dist)


class Solver(ABC):
    name: str = "base"

    @abstractmethod
    def solve(self, graph: DistanceGraph, rng: random.Random) -> "Tour":
        raise NotImplementedError
