from typing import List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np

from .errors import IndexOutOfBounds, InvalidArgument, InvalidState


Coordinate = Tuple[float, ...]

METRICS = ("euclidean", "manhattan", "maximum")


class DistanceGraph:
    """
    Weighted complete symmetric graph over vertices 0..V-1, backed by a
    dense matrix. Immutable once built; tours share a single instance by
    reference.
    """

    def __init__(
        self,
        matrix,
        coordinates: Optional[Sequence[Sequence[float]]] = None,
        name: Optional[str] = None,
    ):
        mat = np.array(matrix, dtype=float)
        if mat.ndim == 1 and mat.size == 0:
            mat = mat.reshape(0, 0)
        if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
            raise InvalidArgument(f"distance matrix must be square, got shape {mat.shape}")
        if not np.all(np.isfinite(mat)):
            raise InvalidArgument("distance matrix contains non-finite values")
        np.fill_diagonal(mat, 0.0)
        if np.any(mat < 0):
            raise InvalidArgument("distance matrix contains negative values")
        if not np.allclose(mat, mat.T):
            raise InvalidArgument("distance matrix must be symmetric")
        mat = (mat + mat.T) / 2
        mat.setflags(write=False)
        self._matrix = mat
        self._rows: List[List[float]] = mat.tolist()
        self._coords: Optional[List[Coordinate]] = None
        if coordinates is not None:
            coords = [tuple(float(c) for c in point) for point in coordinates]
            if len(coords) != mat.shape[0]:
                raise InvalidArgument(
                    f"got {len(coords)} coordinates for {mat.shape[0]} vertices"
                )
            self._coords = coords
        self.name = name

    @property
    def vertex_count(self) -> int:
        return self._matrix.shape[0]

    def __len__(self) -> int:
        return self.vertex_count

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def rows(self) -> List[List[float]]:
        # Plain lists: scalar indexing is much cheaper than on the ndarray.
        return self._rows

    def distance(self, i: int, j: int) -> float:
        self._check(i)
        self._check(j)
        return self._rows[i][j]

    def is_symmetric(self) -> bool:
        return bool(np.allclose(self._matrix, self._matrix.T))

    def has_coordinates(self) -> bool:
        return self._coords is not None

    def coordinate_of(self, i: int) -> Coordinate:
        if self._coords is None:
            raise InvalidState("graph has no vertex coordinates")
        self._check(i)
        return self._coords[i]

    def to_networkx(self) -> nx.Graph:
        graph = nx.Graph()
        for i in range(self.vertex_count):
            if self._coords is not None:
                graph.add_node(i, coord=self._coords[i])
            else:
                graph.add_node(i)
        for i in range(self.vertex_count):
            for j in range(i + 1, self.vertex_count):
                graph.add_edge(i, j, weight=self._rows[i][j])
        return graph

    @classmethod
    def from_networkx(cls, graph: nx.Graph, weight: str = "weight", name: Optional[str] = None) -> "DistanceGraph":
        nodes = list(graph.nodes())
        n = len(nodes)
        mat = np.zeros((n, n), dtype=float)
        for a in range(n):
            for b in range(n):
                if a == b:
                    continue
                u, v = nodes[a], nodes[b]
                if not graph.has_edge(u, v):
                    raise InvalidArgument(f"graph is not complete: missing edge {u}-{v}")
                mat[a, b] = graph[u][v][weight]
        coords = None
        if n and all(graph.nodes[u].get("coord") is not None for u in nodes):
            coords = [graph.nodes[u]["coord"] for u in nodes]
        return cls(mat, coordinates=coords, name=name or graph.graph.get("name"))

    @classmethod
    def from_coordinates(
        cls, points: Sequence[Sequence[float]], metric: str = "euclidean", name: Optional[str] = None
    ) -> "DistanceGraph":
        pts = np.asarray(points, dtype=float)
        if pts.size == 0:
            return cls(np.zeros((0, 0)), coordinates=[], name=name)
        if pts.ndim != 2 or pts.shape[1] not in (2, 3):
            raise InvalidArgument("points must be a sequence of 2D or 3D coordinates")
        diff = pts[:, None, :] - pts[None, :, :]
        if metric == "euclidean":
            mat = np.sqrt((diff ** 2).sum(axis=-1))
        elif metric == "manhattan":
            mat = np.abs(diff).sum(axis=-1)
        elif metric == "maximum":
            mat = np.abs(diff).max(axis=-1)
        else:
            raise InvalidArgument(f"unknown metric {metric!r}; expected one of {METRICS}")
        return cls(mat, coordinates=pts.tolist(), name=name)

    def _check(self, i: int) -> None:
        if not 0 <= i < self.vertex_count:
            raise IndexOutOfBounds(f"vertex {i} outside [0, {self.vertex_count})")

    def __repr__(self) -> str:
        label = f" {self.name!r}" if self.name else ""
        return f"<DistanceGraph{label} V={self.vertex_count}>"
