import argparse
import logging
import random
import time
from pathlib import Path
from typing import List

from tsp_hga.data import Instance, load_instance, load_tour, load_tsplib_instances, save_tour
from tsp_hga.errors import IndexOutOfBounds, InvalidArgument, InvalidState
from tsp_hga.evaluation import aggregate_trials, run_trials
from tsp_hga.evolutionary import SearchSettings, load_settings


SETTING_FLAGS = {
    "generations": "generations",
    "population": "population",
    "elite": "elite_count",
    "tournament": "tournament_size",
    "crossover": "crossover_probability",
    "mutation": "mutation_probability",
    "seed": "random_seed",
}


def log(msg: str) -> None:
    ts = time.strftime("%H:%M:%S")
    print(f"[{ts}] {msg}", flush=True)


def build_settings(args) -> SearchSettings:
    values = {}
    if args.config:
        values.update(load_settings(Path(args.config)).to_dict())
    for flag, field_name in SETTING_FLAGS.items():
        value = getattr(args, flag)
        if value is not None:
            values[field_name] = value
    return SearchSettings.from_dict(values)


def _instances(path: Path, max_nodes=None) -> List[Instance]:
    if path.is_dir():
        instances = load_tsplib_instances(path, max_nodes=max_nodes)
        if not instances:
            raise FileNotFoundError(f"No TSPLIB instances found in {path}")
        return instances
    return [load_instance(path)]


def run(args) -> None:
    settings = build_settings(args)
    if args.trials < 1:
        raise InvalidArgument(f"--trials should be at least 1, got {args.trials}")
    t0 = time.perf_counter()
    instances = _instances(Path(args.path), max_nodes=args.max_nodes)
    log(f"loaded {len(instances)} instance(s) in {time.perf_counter() - t0:.2f}s")
    log(f"settings: {settings.to_dict()}")
    rng = random.Random(settings.random_seed)
    for inst in instances:
        log(f"{inst.name}: V={inst.graph.vertex_count} optimum={inst.optimum}, {args.trials} trial(s)")
        results = run_trials(
            inst.graph,
            settings,
            args.trials,
            optimum=inst.optimum,
            rng=rng,
            improve=args.improve,
        )
        for idx, result in enumerate(results, start=1):
            log(f"trial {idx}: length={result.length:.2f} runtime={result.runtime:.2f}s")
        summary = aggregate_trials(results)
        log(
            f"{inst.name}: best={summary['best']:.2f} mean={summary['mean']:.2f} "
            f"worst={summary['worst']:.2f} gap={summary['gap']:.4f} runtime={summary['runtime']:.2f}s"
        )
        best = min(results, key=lambda r: r.length).tour
        print(best)
        if args.output:
            out = Path(args.output)
            if len(instances) > 1 or out.is_dir():
                out = out / f"{inst.name}.tour"
            save_tour(best, out)
            log(f"wrote {out}")


def show(args) -> None:
    inst = load_instance(Path(args.problem))
    tour = load_tour(Path(args.tour), inst.graph)
    print(tour)
    if inst.optimum:
        print(f"GAP: {(tour.length - inst.optimum) / inst.optimum:.4f}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Hybrid genetic algorithm for the TSP")
    parser.add_argument("--verbose", action="store_true", help="Log every generation")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Search a TSPLIB file, or every .tsp file in a directory")
    run_parser.add_argument("path")
    run_parser.add_argument("--config", help="JSON file with search settings")
    run_parser.add_argument("--generations", type=int)
    run_parser.add_argument("--population", type=int)
    run_parser.add_argument("--elite", type=int)
    run_parser.add_argument("--tournament", type=int)
    run_parser.add_argument("--crossover", type=float)
    run_parser.add_argument("--mutation", type=float)
    run_parser.add_argument("--seed", type=int)
    run_parser.add_argument("--trials", type=int, default=1)
    run_parser.add_argument("--max-nodes", type=int, dest="max_nodes")
    run_parser.add_argument("--improve", action="store_true", help="Finish each champion with 2-opt local search")
    run_parser.add_argument("--output", help="Write the best tour here")
    run_parser.set_defaults(func=run)

    show_parser = subparsers.add_parser("show", help="Print a stored tour against its problem")
    show_parser.add_argument("problem")
    show_parser.add_argument("tour")
    show_parser.set_defaults(func=show)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(asctime)s] %(message)s", datefmt="%H:%M:%S")
    try:
        args.func(args)
    except (InvalidArgument, IndexOutOfBounds, InvalidState, FileNotFoundError) as exc:
        raise SystemExit(f"error: {exc}")


if __name__ == "__main__":
    main()
