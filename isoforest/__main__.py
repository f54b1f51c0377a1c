"""
Command line demo: build a forest over a sample population and print the
items with the highest anomaly scores.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import numpy as np

from . import datasets, report
from .exceptions import InvalidConfiguration
from .isolation import IsolationForest
from .logging_utils import setup_logger

logger = logging.getLogger("isoforest.cli")

DATASETS = ("multivariate", "generated", "simple", "hbk")


def load_dataset(name: str, size: int, rng: np.random.Generator) -> list[datasets.Point]:
    if name == "multivariate":
        points = datasets.generate_multivariate_points(size, rng)
        points.append(datasets.Point(10.0, 10.0, 10.0))
        return points
    if name == "generated":
        return datasets.generate_points(size, max(1, size // 100), rng)
    if name == "simple":
        return datasets.simple()
    return datasets.hbk()


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="isoforest", description="Isolation Forest outlier ranking")
    parser.add_argument("--dataset", choices=DATASETS, default="multivariate")
    parser.add_argument("--size", type=int, default=200, help="population size for generated datasets")
    parser.add_argument("--trees", type=int, default=IsolationForest.DEFAULT_ENSEMBLE_SIZE)
    parser.add_argument("--subsample-size", type=int, default=None)
    parser.add_argument("--top", type=int, default=20, help="number of items to print")
    parser.add_argument("--n-jobs", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument("--plot", action="store_true", help="scatter the scores in the xy-plane")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logger("isoforest", args.log_level)

    rng = np.random.default_rng(args.seed)
    points = load_dataset(args.dataset, args.size, rng)
    print(f"Using {len(points)} points...")

    try:
        forest = IsolationForest(
            points,
            datasets.POINT_ATTRIBUTES,
            ensemble_size=args.trees,
            subsample_size=args.subsample_size,
            n_jobs=args.n_jobs,
            random_state=args.seed,
        )
    except InvalidConfiguration as exc:
        logger.error("Invalid configuration: %s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(
        f"Building iForest [ensemble_size={forest.ensemble_size}, "
        f"subsample_size={forest.subsample_size}] ..."
    )
    forest.build()

    scores = forest.scores(points)
    print(f"{args.top} highest anomaly scored values (possible outliers):")
    print("-" * 40)
    print(report.format_ranking(report.top_n(points, scores, args.top)))

    if args.plot:
        report.plot_scores_2D(points, scores)
    return 0


if __name__ == "__main__":
    sys.exit(main())
