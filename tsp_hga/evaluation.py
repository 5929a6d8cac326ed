import math
import random
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from .evolutionary import GeneticSearch, SearchSettings
from .graph import DistanceGraph
from .solvers.tour import Tour


@dataclass
class TrialResult:
    length: float
    runtime: float
    tour: Tour
    optimum: Optional[float] = None

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum


def run_trial(
    graph: DistanceGraph,
    settings: SearchSettings,
    rng: random.Random,
    optimum: Optional[float] = None,
    improve: bool = False,
) -> TrialResult:
    start = time.perf_counter()
    search = GeneticSearch(graph, settings, rng=rng)
    tour = search.run()
    if improve:
        tour.local_search_two_opt()
    runtime = time.perf_counter() - start
    return TrialResult(length=tour.length, runtime=runtime, tour=tour, optimum=optimum)


def run_trials(
    graph: DistanceGraph,
    settings: SearchSettings,
    trials: int,
    optimum: Optional[float] = None,
    rng: Optional[random.Random] = None,
    improve: bool = False,
) -> List[TrialResult]:
    rng = rng or random.Random(settings.random_seed)
    # Each trial gets its own stream so one trial's draws never shift another's.
    seeds = [rng.getrandbits(32) for _ in range(trials)]
    return [
        run_trial(graph, settings, random.Random(seed), optimum=optimum, improve=improve)
        for seed in seeds
    ]


def aggregate_trials(results: List[TrialResult]) -> Dict[str, float]:
    if not results:
        return {
            "best": float("inf"),
            "mean": float("inf"),
            "worst": float("inf"),
            "gap": float("inf"),
            "runtime": float("inf"),
        }
    lengths = [r.length for r in results]
    finite_gaps = [r.gap for r in results if r.gap != float("inf")]
    return {
        "best": min(lengths),
        "mean": sum(lengths) / len(lengths),
        "worst": max(lengths),
        "gap": sum(finite_gaps) / len(finite_gaps) if finite_gaps else float("inf"),
        "runtime": sum(r.runtime for r in results) / len(results),
    }
