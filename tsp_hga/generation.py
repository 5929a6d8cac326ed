import heapq
import random
from typing import List, Optional, Sequence

from .errors import IndexOutOfBounds, InvalidArgument, InvalidState
from .graph import DistanceGraph
from .solvers.tour import Tour


class Generation:
    """
    Fixed-size population of tours over one graph.

    The champion is tracked as tours are inserted, so querying it never
    rescans the population.
    """

    def __init__(self, graph: DistanceGraph, size: int):
        if graph is None:
            raise InvalidArgument("generation requires a graph")
        if size < 0:
            raise InvalidArgument(f"population size must be nonnegative, got {size}")
        self.graph = graph
        self._size = size
        self._tours: List[Optional[Tour]] = [None] * size
        self._count = 0
        self._champion: Optional[Tour] = None

    @property
    def size(self) -> int:
        return self._size

    @property
    def vertex_count(self) -> int:
        return self.graph.vertex_count

    @property
    def is_full(self) -> bool:
        return self._count == self._size

    def populate(self, tours: Sequence[Tour]) -> None:
        if tours is None:
            raise InvalidArgument("populate() needs a sequence of tours")
        tours = list(tours)
        if len(tours) != self._size:
            raise InvalidArgument(
                f"expected {self._size} tours to match the population, got {len(tours)}"
            )
        for tour in tours:
            if tour is None:
                raise InvalidArgument("populate() received a missing tour")
            if tour.graph is not self.graph:
                raise InvalidArgument("tour refers to a different graph")
        self._champion = None
        self._count = 0
        for i, tour in enumerate(tours):
            self._set(i, tour)

    def _set(self, i: int, tour: Tour) -> None:
        self._tours[i] = tour
        self._count += 1
        # Strict comparison: ties keep the earliest inserted tour.
        if self._champion is None or tour.length < self._champion.length:
            self._champion = tour

    def champion(self) -> Tour:
        if not self.is_full or self._champion is None:
            raise InvalidState("generation has not been populated yet")
        return self._champion.copy()

    def length_at(self, i: int) -> float:
        self._check_index(i)
        tour = self._tours[i]
        if tour is None:
            raise InvalidState(f"slot {i} is empty")
        return tour.length

    def k_smallest(self, k: int) -> List[Tour]:
        """The k shortest tours, in no particular order."""
        if not 1 <= k <= self._size:
            raise IndexOutOfBounds(f"k must be in [1, {self._size}], got {k}")
        self._require_full()
        # Max-heap by negated length; the index breaks ties between equal lengths.
        heap = [(-self._tours[i].length, -i, self._tours[i]) for i in range(k)]
        heapq.heapify(heap)
        for i in range(k, self._size):
            tour = self._tours[i]
            if tour.length < -heap[0][0]:
                heapq.heapreplace(heap, (-tour.length, -i, tour))
        return [tour for _, _, tour in heap]

    def clone_tour(self, i: int) -> Tour:
        self._check_index(i)
        tour = self._tours[i]
        if tour is None:
            raise InvalidState(f"slot {i} is empty; cannot be cloned")
        return tour.copy()

    def tournament_winner(self, t: int, rng: random.Random) -> Tour:
        """Shortest of ``t`` distinct tours drawn without replacement."""
        if not 1 <= t <= self._size:
            raise IndexOutOfBounds(f"tournament size must be in [1, {self._size}], got {t}")
        self._require_full()
        indices = self.sample_indices(t, rng)
        winner = self._tours[indices[0]]
        for idx in indices[1:]:
            participant = self._tours[idx]
            if participant.length < winner.length:
                winner = participant
        return winner

    def sample_indices(self, t: int, rng: random.Random) -> List[int]:
        # Partial Fisher-Yates: only the first t positions are shuffled.
        indices = list(range(self._size))
        for i in range(t):
            j = rng.randrange(i, self._size)
            indices[i], indices[j] = indices[j], indices[i]
        return indices[:t]

    def _require_full(self) -> None:
        if not self.is_full:
            raise InvalidState("generation should be full")

    def _check_index(self, i: int) -> None:
        if not 0 <= i < self._size:
            raise IndexOutOfBounds(f"index {i} outside [0, {self._size})")

    def __len__(self) -> int:
        return self._size

    def __str__(self) -> str:
        lines = [f"POPULATION: {self._size}", f"DIMENSION: {self.vertex_count}", "GENERATION_SECTION"]
        for i, tour in enumerate(self._tours):
            lines.append(f"{i} null" if tour is None else f"{i} |{tour.length}|")
        return "\n".join(lines)
