import json
import logging
import random
from dataclasses import asdict, dataclass, fields
from numbers import Real
from pathlib import Path
from typing import Dict, List, Optional

from .errors import InvalidArgument, InvalidState
from .generation import Generation
from .graph import DistanceGraph
from .solvers.heuristics import nearest_loneliest_neighbor, nearest_neighbor, random_tour
from .solvers.tour import Tour


logger = logging.getLogger(__name__)


def _check_int(name: str, value, low: int, high: Optional[int] = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} should be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        bound = f"[{low}, {high}]" if high is not None else f">= {low}"
        raise InvalidArgument(f"{name} should be {bound}, got {value}")


def _check_probability(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgument(f"{name} should be a number, got {value!r}")
    if not 0.0 <= value <= 1.0:
        raise InvalidArgument(f"{name} should be in [0, 1], got {value}")


@dataclass(frozen=True)
class SearchSettings:
    generations: int = 1000
    population: int = 10
    elite_count: int = 1
    tournament_size: int = 3
    crossover_probability: float = 0.7
    mutation_probability: float = 0.1
    random_seed: Optional[int] = None

    def __post_init__(self):
        _check_int("generations", self.generations, 0)
        _check_int("population", self.population, 0)
        _check_int("elite_count", self.elite_count, 0, self.population)
        _check_int("tournament_size", self.tournament_size, 0, self.population)
        _check_probability("crossover_probability", self.crossover_probability)
        _check_probability("mutation_probability", self.mutation_probability)
        if self.random_seed is not None:
            _check_int("random_seed", self.random_seed, 0)

    def to_dict(self) -> Dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict) -> "SearchSettings":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidArgument(f"unknown settings: {', '.join(sorted(unknown))}")
        return cls(**data)


def load_settings(path: Path) -> SearchSettings:
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        raise InvalidArgument(f"{path}: settings file must hold a JSON object")
    return SearchSettings.from_dict(data)


class GeneticSearch:
    """
    Generational GA with elitism, tournament selection, PMX crossover and a
    single 2-opt mutation. The best tour ever seen survives across runs.
    """

    def __init__(self, graph: DistanceGraph, settings: SearchSettings, rng: random.Random = None):
        if graph is None:
            raise InvalidArgument("search requires a graph")
        if settings is None:
            raise InvalidArgument("search requires settings")
        if settings.crossover_probability > 0 and settings.tournament_size < 1:
            raise InvalidArgument("crossover needs a tournament size of at least 1")
        self.graph = graph
        self.cfg = settings
        self.rng = rng or random.Random(settings.random_seed)
        self.generation = 0
        self.history: List[float] = []
        self._champion: Optional[Tour] = None

    def run(self) -> Tour:
        generation = Generation(self.graph, self.cfg.population)
        self.generation = 0
        self.history = []
        self.initialize(generation)
        self.evaluate(generation)
        for _ in range(self.cfg.generations):
            self.evolve(generation)
            self.evaluate(generation)
        logger.info(
            "search finished: V=%d generations=%d best=%.4f",
            self.graph.vertex_count,
            self.generation,
            self._champion.length,
        )
        return self.champion()

    def initialize(self, generation: Generation) -> None:
        tours = [nearest_neighbor(self.graph, self.rng), nearest_loneliest_neighbor(self.graph)]
        if len(tours) > generation.size:
            raise InvalidArgument(
                f"population {generation.size} cannot hold the {len(tours)} heuristic seed tours"
            )
        while len(tours) < generation.size:
            tours.append(random_tour(self.graph, self.rng))
        generation.populate(tours)

    def evaluate(self, generation: Generation) -> None:
        contender = generation.champion()
        if self._champion is None or contender.length < self._champion.length:
            self._champion = contender
        self.history.append(self._champion.length)
        logger.debug(
            "generation %d: champion=%.4f best=%.4f",
            self.generation,
            contender.length,
            self._champion.length,
        )

    def evolve(self, generation: Generation) -> None:
        if not generation.is_full:
            raise InvalidState("generation should be full")
        tours: List[Tour] = []
        if self.cfg.elite_count:
            tours.extend(generation.k_smallest(self.cfg.elite_count))
        while len(tours) < generation.size:
            tours.append(self.create_offspring(generation))
        generation.populate(tours)
        self.generation += 1

    def create_offspring(self, generation: Generation) -> Tour:
        offspring = generation.clone_tour(self.rng.randrange(generation.size))
        if self.rng.random() < self.cfg.crossover_probability:
            parent1 = generation.tournament_winner(self.cfg.tournament_size, self.rng)
            parent2 = generation.tournament_winner(self.cfg.tournament_size, self.rng)
            offspring = parent1.partially_mapped_crossover(parent2, self.rng)
        if self.rng.random() < self.cfg.mutation_probability:
            self.mutate(offspring)
        return offspring

    def mutate(self, tour: Tour) -> None:
        n = len(tour)
        if n < 2:
            return
        i = self.rng.randrange(n)
        j = self.rng.randrange(n)
        while i == j:
            i = self.rng.randrange(n)
            j = self.rng.randrange(n)
        tour.segment_reversal(i, j)

    def champion(self) -> Tour:
        if self._champion is None:
            raise InvalidState("genetic search has not been run yet")
        return self._champion.copy()

    def validate_solution(self) -> None:
        if self._champion is None:
            raise InvalidState("genetic search has not been run yet")
        self._champion.validate_permutation()
