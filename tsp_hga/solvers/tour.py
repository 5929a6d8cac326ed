import math
import operator
import random
from itertools import chain
from typing import Iterator, List, Optional, Sequence, Tuple

from ..errors import IndexOutOfBounds, InvalidArgument, InvalidState
from ..graph import DistanceGraph
from .base import tour_length


EPS = 1e-9
MAX_TWO_OPT_MOVES = 1000


def is_permutation(order: Sequence[int]) -> bool:
    # Cycle-following: every swap parks one value at its own index.
    n = len(order)
    arr = list(order)
    for i in range(n):
        while arr[i] != i:
            j = arr[i]
            if not 0 <= j < n or arr[j] == j:
                return False
            arr[i], arr[j] = arr[j], arr[i]
    return True


class Tour:
    """
    Closed tour over every vertex of a DistanceGraph, stored as a permutation
    of vertex indices with its cyclic length cached.

    Swap and 2-opt moves update the cached length incrementally; shuffle and
    crossover recompute it. The incremental updates assume a symmetric graph.
    """

    __slots__ = ("_graph", "_rows", "_order", "_length")

    def __init__(self, graph: DistanceGraph, order: Optional[Sequence[int]] = None):
        if graph is None:
            raise InvalidArgument("tour requires a graph")
        n = graph.vertex_count
        if order is None:
            cities = list(range(n))
        else:
            if len(order) != n:
                raise InvalidArgument(f"order has {len(order)} cities, graph has {n}")
            try:
                cities = [operator.index(c) for c in order]
            except TypeError as exc:
                raise InvalidArgument("order must contain integer vertex indices") from exc
            if not is_permutation(cities):
                raise InvalidArgument(f"order is not a permutation of 0..{n - 1}")
        self._graph = graph
        self._rows = graph.rows
        self._order = cities
        self._length = tour_length(graph, cities)

    @classmethod
    def _trusted(cls, graph: DistanceGraph, order: List[int], length: Optional[float] = None) -> "Tour":
        tour = cls.__new__(cls)
        tour._graph = graph
        tour._rows = graph.rows
        tour._order = order
        tour._length = tour_length(graph, order) if length is None else length
        return tour

    @classmethod
    def from_text(cls, text: str, graph: DistanceGraph) -> "Tour":
        """Parse the summary produced by ``str(tour)`` or a TSPLIB tour file."""
        if graph is None:
            raise InvalidArgument("tour requires a graph")
        header, sep, body = text.partition("TOUR_SECTION")
        if not sep:
            raise InvalidArgument("tour text has no TOUR_SECTION")
        for line in header.splitlines():
            key, colon, value = line.partition(":")
            if not colon or key.strip().upper() != "DIMENSION":
                continue
            try:
                dimension = int(value.strip())
            except ValueError as exc:
                raise InvalidArgument(f"could not parse dimension {value.strip()!r}") from exc
            if dimension != graph.vertex_count:
                raise InvalidArgument(
                    f"tour dimension {dimension} does not match graph with {graph.vertex_count} vertices"
                )
        cities = []
        for token in body.split():
            if token in ("-1", "EOF"):
                break
            try:
                cities.append(int(token) - 1)
            except ValueError as exc:
                raise InvalidArgument(f"could not parse city {token!r}") from exc
        return cls(graph, cities)

    def copy(self) -> "Tour":
        return Tour._trusted(self._graph, self._order[:], self._length)

    @property
    def length(self) -> float:
        return self._length

    @property
    def graph(self) -> DistanceGraph:
        return self._graph

    @property
    def order(self) -> Tuple[int, ...]:
        return tuple(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[int]:
        return iter(self._order)

    def city_at(self, position: int) -> int:
        self._check(position)
        return self._order[position]

    def shuffle(self, rng: random.Random) -> None:
        order = self._order
        n = len(order)
        for i in range(n - 1):
            j = rng.randrange(i, n)
            order[i], order[j] = order[j], order[i]
        self._length = tour_length(self._graph, order)

    def position_swap(self, i: int, j: int) -> None:
        self._check(i)
        self._check(j)
        if i == j:
            return
        self._length += self._swap_delta(i, j, commit=True)

    def segment_reversal(self, i: int, j: int) -> None:
        """2-opt move: reverse positions min(i, j)..max(i, j) inclusive."""
        self._check(i)
        self._check(j)
        lo, hi = (i, j) if i < j else (j, i)
        if lo == hi:
            return
        order = self._order
        rows = self._rows
        n = len(order)
        # Reversing the whole cycle keeps every edge of a symmetric graph.
        if hi - lo + 1 < n:
            before = rows[order[lo - 1]][order[lo]] + rows[order[hi]][order[(hi + 1) % n]]
            after = rows[order[lo - 1]][order[hi]] + rows[order[lo]][order[(hi + 1) % n]]
            self._length += after - before
        order[lo:hi + 1] = order[lo:hi + 1][::-1]

    def partially_mapped_crossover(self, other: "Tour", rng: random.Random) -> "Tour":
        if other is None or other._graph is not self._graph:
            raise InvalidArgument("crossover needs two tours over the same graph")
        n = len(self._order)
        if n < 2:
            return self.copy()
        swath = rng.randint(1, n - 1)
        lo = rng.randrange(n - swath + 1)
        hi = lo + swath - 1

        p1, p2 = self._order, other._order
        mapping = {p1[k]: p2[k] for k in range(lo, hi + 1)}
        child = p2[:]
        child[lo:hi + 1] = p1[lo:hi + 1]
        for k in chain(range(lo), range(hi + 1, n)):
            val = p2[k]
            while val in mapping:
                val = mapping[val]
            child[k] = val
        return Tour._trusted(self._graph, child)

    def local_search_two_opt(self, max_moves: int = MAX_TWO_OPT_MOVES) -> int:
        """
        Best-improvement 2-opt. Each full scan commits only the move with the
        shortest new boundary; stops when a scan finds nothing or after
        ``max_moves`` committed moves. Returns the number of moves applied.
        """
        order = self._order
        rows = self._rows
        n = len(order)
        moves = 0
        while moves < max_moves:
            best_after = math.inf
            best = None
            for lo in range(n - 3):
                a = order[lo]
                b = order[lo + 1]
                row_a = rows[a]
                row_b = rows[b]
                d_ab = row_a[b]
                for hi in range(lo + 3, n):
                    c = order[hi - 1]
                    e = order[hi]
                    after = row_a[c] + row_b[e]
                    if after + EPS < d_ab + rows[c][e] and after < best_after:
                        best_after = after
                        best = (lo + 1, hi - 1)
            if best is None:
                break
            self.segment_reversal(*best)
            moves += 1
        return moves

    def local_search_swap(self) -> int:
        """First-improvement swaps until a full scan finds none. Returns swaps applied."""
        n = len(self._order)
        swaps = 0
        improved = True
        while improved:
            improved = False
            for lo in range(n - 1):
                for hi in range(lo + 1, n):
                    if self._swap_delta(lo, hi, commit=False) < -EPS:
                        self.position_swap(lo, hi)
                        swaps += 1
                        improved = True
        return swaps

    def validate_permutation(self) -> None:
        if len(self._order) != self._graph.vertex_count or not is_permutation(self._order):
            raise InvalidState("tour is not a permutation of the graph's vertices")

    def _swap_delta(self, i: int, j: int, commit: bool) -> float:
        order = self._order
        n = len(order)
        # Edge k joins positions k and k+1; adjacent i, j share an edge.
        edges = {(i - 1) % n, i, (j - 1) % n, j}
        before = sum(self._edge(k) for k in edges)
        order[i], order[j] = order[j], order[i]
        after = sum(self._edge(k) for k in edges)
        if not commit:
            order[i], order[j] = order[j], order[i]
        return after - before

    def _edge(self, k: int) -> float:
        order = self._order
        return self._rows[order[k]][order[(k + 1) % len(order)]]

    def _check(self, position: int) -> None:
        if not 0 <= position < len(self._order):
            raise IndexOutOfBounds(f"position {position} outside [0, {len(self._order)})")

    def __lt__(self, other: "Tour") -> bool:
        return self._length < other._length

    def __le__(self, other: "Tour") -> bool:
        return self._length <= other._length

    def __gt__(self, other: "Tour") -> bool:
        return self._length > other._length

    def __ge__(self, other: "Tour") -> bool:
        return self._length >= other._length

    def __str__(self) -> str:
        lines = [
            "TYPE: TOUR",
            f"DIMENSION: {len(self._order)}",
            f"DISTANCE: {self._length}",
            "TOUR_SECTION",
            " ".join(str(c + 1) for c in self._order),
            "-1",
            "EOF",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<Tour V={len(self._order)} length={self._length:.4f}>"
