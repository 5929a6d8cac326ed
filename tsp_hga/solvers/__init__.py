from .base import Solver, tour_length
from .tour import Tour, is_permutation
from .heuristics import (
    STRATEGIES,
    ConstructiveSolver,
    loneliness_adjusted,
    nearest_loneliest_neighbor,
    nearest_neighbor,
    nearest_neighbor_tour,
    random_tour,
)

__all__ = [
    "Solver",
    "tour_length",
    "Tour",
    "is_permutation",
    "STRATEGIES",
    "ConstructiveSolver",
    "loneliness_adjusted",
    "nearest_loneliest_neighbor",
    "nearest_neighbor",
    "nearest_neighbor_tour",
    "random_tour",
]
