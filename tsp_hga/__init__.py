"""
Genetic search for short TSP tours: PMX crossover and 2-opt mutation over a
population seeded by nearest-neighbor construction heuristics.
"""

from .errors import IndexOutOfBounds, InvalidArgument, InvalidState
from .evolutionary import GeneticSearch, SearchSettings, load_settings
from .generation import Generation
from .graph import DistanceGraph
from .solvers.tour import Tour

__all__ = [
    "data",
    "evaluation",
    "evolutionary",
    "generation",
    "DistanceGraph",
    "Generation",
    "GeneticSearch",
    "IndexOutOfBounds",
    "InvalidArgument",
    "InvalidState",
    "SearchSettings",
    "Tour",
    "load_settings",
]
