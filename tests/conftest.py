import random

import pytest

from tsp_hga.graph import DistanceGraph


def random_graph(rng: random.Random, n: int) -> DistanceGraph:
    points = [(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(n)]
    return DistanceGraph.from_coordinates(points)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def square_graph():
    # Corners of a unit square, numbered around the perimeter.
    return DistanceGraph.from_coordinates([(0, 0), (1, 0), (1, 1), (0, 1)], name="square")


@pytest.fixture
def single_city_graph():
    return DistanceGraph([[0.0]])


@pytest.fixture
def graph_factory():
    return random_graph
