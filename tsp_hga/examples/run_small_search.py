import random

from tsp_hga.evaluation import aggregate_trials, run_trials
from tsp_hga.evolutionary import SearchSettings
from tsp_hga.graph import DistanceGraph


def main():
    rng = random.Random(7)
    points = [(rng.uniform(0, 100), rng.uniform(0, 100)) for _ in range(30)]
    graph = DistanceGraph.from_coordinates(points, name="random30")

    cfg = SearchSettings(
        generations=200,
        population=12,
        elite_count=2,
        tournament_size=3,
        crossover_probability=0.7,
        mutation_probability=0.1,
        random_seed=7,
    )
    results = run_trials(graph, cfg, trials=3, improve=True)
    for idx, result in enumerate(results, start=1):
        print(f"trial {idx}: length={result.length:.2f} runtime={result.runtime:.2f}s")
    summary = aggregate_trials(results)
    print(f"best={summary['best']:.2f} mean={summary['mean']:.2f} worst={summary['worst']:.2f}")


if __name__ == "__main__":
    main()
