import pytest

from tsp_hga.data import load_instance, load_tour, load_tsplib_instances, save_tour
from tsp_hga.errors import InvalidArgument
from tsp_hga.solvers import Tour


SQUARE_TSP = """NAME: square
TYPE: TSP
COMMENT: four corners of a 10x10 square
DIMENSION: 4
EDGE_WEIGHT_TYPE: EUC_2D
NODE_COORD_SECTION
1 0 0
2 10 0
3 10 10
4 0 10
EOF
"""

LINE_TSP = """NAME: line
TYPE: TSP
DIMENSION: 6
EDGE_WEIGHT_TYPE: EUC_2D
NODE_COORD_SECTION
1 0 0
2 1 0
3 2 0
4 3 0
5 4 0
6 5 0
EOF
"""

SQUARE_OPT = """NAME: square.opt.tour
TYPE: TOUR
DIMENSION: 4
TOUR_SECTION
1
4
3
2
-1
EOF
"""


@pytest.fixture
def problem_dir(tmp_path):
    (tmp_path / "square.tsp").write_text(SQUARE_TSP)
    (tmp_path / "square.opt.tour").write_text(SQUARE_OPT)
    (tmp_path / "line.tsp").write_text(LINE_TSP)
    return tmp_path


def test_load_instance_with_optimum(problem_dir):
    inst = load_instance(problem_dir / "square.tsp")
    assert inst.name == "square"
    assert inst.graph.vertex_count == 4
    # EUC_2D rounds to the nearest integer.
    assert inst.graph.distance(0, 1) == 10
    assert inst.graph.distance(0, 2) == 14
    assert inst.optimum == pytest.approx(40.0)
    assert inst.graph.has_coordinates()
    assert inst.graph.coordinate_of(2) == (10.0, 10.0)


def test_load_instance_without_optimum(problem_dir):
    inst = load_instance(problem_dir / "line.tsp")
    assert inst.optimum is None
    assert inst.graph.distance(0, 5) == 5


def test_unreadable_optimum_is_ignored(problem_dir):
    (problem_dir / "line.opt.tour").write_text("TOUR_SECTION\n1 2 3\n-1\n")
    inst = load_instance(problem_dir / "line.tsp")
    assert inst.optimum is None


def test_missing_problem(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_instance(tmp_path / "nope.tsp")


def test_load_directory(problem_dir):
    instances = load_tsplib_instances(problem_dir)
    assert [inst.name for inst in instances] == ["line", "square"]
    small = load_tsplib_instances(problem_dir, max_nodes=4)
    assert [inst.name for inst in small] == ["square"]
    first = load_tsplib_instances(problem_dir, max_instances=1)
    assert len(first) == 1


def test_tour_file_round_trip(problem_dir, tmp_path):
    inst = load_instance(problem_dir / "square.tsp")
    tour = Tour(inst.graph, [3, 1, 2, 0])
    path = tmp_path / "out" / "best.tour"
    save_tour(tour, path)
    loaded = load_tour(path, inst.graph)
    assert loaded.order == tour.order
    assert loaded.length == pytest.approx(tour.length)


def test_load_tour_errors(problem_dir, tmp_path):
    inst = load_instance(problem_dir / "square.tsp")
    with pytest.raises(FileNotFoundError):
        load_tour(tmp_path / "missing.tour", inst.graph)
    bad = tmp_path / "bad.tour"
    bad.write_text("TYPE: TOUR\nDIMENSION: 6\nTOUR_SECTION\n1 2 3 4 5 6\n-1\n")
    with pytest.raises(InvalidArgument):
        load_tour(bad, inst.graph)


def test_optimum_from_solutions_directory(tmp_path):
    (tmp_path / "square.tsp").write_text(SQUARE_TSP)
    (tmp_path / "solutions").mkdir()
    (tmp_path / "solutions" / "square.opt").write_text(SQUARE_OPT)
    inst = load_instance(tmp_path / "square.tsp")
    assert inst.optimum == pytest.approx(40.0)


def test_dimension_filter_reads_spaced_header(tmp_path):
    (tmp_path / "square.tsp").write_text(SQUARE_TSP.replace("DIMENSION: 4", "DIMENSION : 4"))
    (tmp_path / "line.tsp").write_text(LINE_TSP)
    assert [inst.name for inst in load_tsplib_instances(tmp_path, max_nodes=5)] == ["square"]
    assert load_tsplib_instances(tmp_path, max_nodes=3) == []


def test_asymmetric_problem_is_rejected(tmp_path):
    path = tmp_path / "tri.atsp"
    path.write_text(
        "NAME: tri\nTYPE: ATSP\nDIMENSION: 3\nEDGE_WEIGHT_TYPE: EXPLICIT\n"
        "EDGE_WEIGHT_FORMAT: FULL_MATRIX\nEDGE_WEIGHT_SECTION\n0 1 9\n9 0 1\n1 9 0\nEOF\n"
    )
    with pytest.raises(InvalidArgument):
        load_instance(path)
