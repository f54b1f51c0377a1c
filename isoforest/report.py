"""
Ranking and reporting of anomaly scores.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple, Sequence, TypeVar

import matplotlib.pyplot as plt
import numpy as np
import numpy.typing as npt

from .datasets import Point

T = TypeVar("T")


class RankedItem(NamedTuple):
    index: int  # position in the scored population
    item: Any
    score: float


def rank(items: Sequence[T], scores: npt.ArrayLike) -> list[RankedItem]:
    """
    Items sorted by descending anomaly score. Ties keep the population order.
    """
    scores_arr = np.asarray(scores, dtype=np.float64)
    if scores_arr.shape != (len(items),):
        raise ValueError(f"expected {len(items)} scores, got shape {scores_arr.shape}")

    order = np.argsort(-scores_arr, kind="stable")
    return [RankedItem(int(i), items[i], float(scores_arr[i])) for i in order]


def top_n(items: Sequence[T], scores: npt.ArrayLike, n: int) -> list[RankedItem]:
    return rank(items, scores)[:n]


def format_point(point: Point) -> str:
    return f"({point.x:.3f}, {point.y:.3f}, {point.z:.3f})"


def format_ranking(
    ranking: Sequence[RankedItem],
    describe: Callable[[Any], str] = format_point,
) -> str:
    """
    One line per entry: 1-based population position, item description and score.
    """
    return "\n".join(
        f"{entry.index + 1:3d} - {describe(entry.item)} = {entry.score:.3f}" for entry in ranking
    )


def plot_scores_2D(points: Sequence[Point], scores: npt.ArrayLike) -> None:
    """
    Scatter the points of the xy-plane, coloured by anomaly score.
    """
    scores_arr = np.asarray(scores, dtype=np.float64)

    plt.figure(figsize=(8, 6))
    plt.scatter(
        [p.x for p in points], [p.y for p in points],
        c=scores_arr, cmap="coolwarm", s=30, edgecolors="k", vmin=0.0, vmax=1.0,
    )
    plt.title("Isolation Forest anomaly scores")
    plt.xlabel("X")
    plt.ylabel("Y")
    plt.colorbar(label="Anomaly score")
    plt.show()
