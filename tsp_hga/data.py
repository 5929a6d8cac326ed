import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import tsplib95

from .errors import InvalidArgument
from .graph import DistanceGraph
from .solvers.tour import Tour


logger = logging.getLogger(__name__)


@dataclass
class Instance:
    name: str
    path: Path
    graph: DistanceGraph
    optimum: Optional[float]


def _optimum_paths(path: Path) -> List[Path]:
    # Sibling `<stem>.opt.tour` first, then a `solutions/` directory next to the problem.
    solutions = path.parent / "solutions"
    return [path.with_suffix(".opt.tour")] + [
        solutions / f"{path.stem}{suffix}" for suffix in (".opt.tour", ".opt", ".tour")
    ]


def _header_dimension(path: Path) -> Optional[int]:
    """DIMENSION from the header of a TSPLIB file, without parsing its data."""
    with path.open("r") as f:
        for line in f:
            key, colon, value = line.partition(":")
            if "SECTION" in key.upper():
                break
            if colon and key.strip().upper() == "DIMENSION":
                value = value.strip()
                return int(value) if value.isdigit() else None
    return None


def _load_optimum(graph: DistanceGraph, path: Path) -> Optional[float]:
    for candidate in _optimum_paths(path):
        if not candidate.exists():
            continue
        try:
            return load_tour(candidate, graph).length
        except (InvalidArgument, OSError) as exc:
            logger.warning("ignoring unreadable tour file %s: %s", candidate, exc)
    return None


def load_tour(path: Path, graph: DistanceGraph) -> Tour:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"tour file not found: {path}")
    return Tour.from_text(path.read_text(), graph)


def save_tour(tour: Tour, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(str(tour) + "\n")


def load_instance(path: Path) -> Instance:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"problem file not found: {path}")
    problem = tsplib95.load(str(path))
    graph = DistanceGraph.from_networkx(problem.get_graph(), name=problem.name)
    coords = getattr(problem, "node_coords", None) or getattr(problem, "display_data", None)
    if not graph.has_coordinates() and coords and len(coords) == graph.vertex_count:
        nodes = list(problem.get_nodes())
        graph = DistanceGraph(graph.matrix, coordinates=[coords[n] for n in nodes], name=problem.name)
    optimum = _load_optimum(graph, path)
    logger.info("loaded %s: V=%d optimum=%s", problem.name, graph.vertex_count, optimum)
    return Instance(name=problem.name or path.stem, path=path, graph=graph, optimum=optimum)


def load_tsplib_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None
) -> List[Instance]:
    """Every ``*.tsp`` under ``root`` in name order; files with an unknown dimension are kept."""
    paths = sorted(Path(root).glob("*.tsp"))
    if max_nodes is not None:
        paths = [p for p in paths if (_header_dimension(p) or 0) <= max_nodes]
    if max_instances is not None:
        paths = paths[:max_instances]
    return [load_instance(p) for p in paths]
