import random

import pytest

from tsp_hga.evaluation import TrialResult, aggregate_trials, run_trials
from tsp_hga.evolutionary import SearchSettings
from tsp_hga.solvers import Tour


CFG = SearchSettings(generations=15, population=6, elite_count=1, tournament_size=2)


def test_run_trials_returns_one_result_per_trial(graph_factory, rng):
    graph = graph_factory(rng, 12)
    results = run_trials(graph, CFG, trials=3, rng=random.Random(4))
    assert len(results) == 3
    for result in results:
        result.tour.validate_permutation()
        assert result.length == result.tour.length
        assert result.runtime >= 0
        assert result.gap == float("inf")


def test_run_trials_is_reproducible(graph_factory, rng):
    graph = graph_factory(rng, 12)
    a = run_trials(graph, CFG, trials=2, rng=random.Random(9))
    b = run_trials(graph, CFG, trials=2, rng=random.Random(9))
    assert [r.tour.order for r in a] == [r.tour.order for r in b]


def test_improve_never_hurts(graph_factory, rng):
    graph = graph_factory(rng, 20)
    plain = run_trials(graph, CFG, trials=2, rng=random.Random(1))
    improved = run_trials(graph, CFG, trials=2, rng=random.Random(1), improve=True)
    for p, i in zip(plain, improved):
        assert i.length <= p.length + 1e-9


def test_gap_against_optimum(square_graph):
    results = run_trials(square_graph, CFG, trials=2, optimum=4.0, rng=random.Random(0))
    for result in results:
        assert result.gap == pytest.approx(0.0)


def test_aggregate(square_graph):
    tour = Tour(square_graph)
    results = [
        TrialResult(length=4.0, runtime=1.0, tour=tour, optimum=4.0),
        TrialResult(length=6.0, runtime=3.0, tour=tour, optimum=4.0),
        TrialResult(length=5.0, runtime=2.0, tour=tour),
    ]
    summary = aggregate_trials(results)
    assert summary["best"] == 4.0
    assert summary["worst"] == 6.0
    assert summary["mean"] == pytest.approx(5.0)
    assert summary["gap"] == pytest.approx(0.25)
    assert summary["runtime"] == pytest.approx(2.0)
    assert aggregate_trials([])["best"] == float("inf")
