"""Uniform subsampling without replacement."""

from __future__ import annotations

from typing import Any

import numpy as np
import numpy.typing as npt


def sample_indices(
    population_size: int,
    sample_size: int,
    rng: np.random.Generator,
) -> npt.NDArray[np.intp]:
    """
    Draw sample_size distinct positions out of range(population_size),
    every subset being equally likely.

    Small samples are drawn by rejecting repeated positions. When more than
    half of the population is requested, the excluded positions are drawn
    instead and the complement is returned, so rejections stay rare.

    Args:
        population_size: Number of items to draw from.
        sample_size: Number of distinct positions to draw.
        rng: Generator driving the draw.
    Returns:
        Sorted array of sample_size distinct positions.
    """
    if not 0 <= sample_size <= population_size:
        raise ValueError(
            f"cannot draw {sample_size} items out of {population_size}"
        )

    if sample_size > population_size // 2:
        excluded = sample_indices(population_size, population_size - sample_size, rng)
        mask = np.ones(population_size, dtype=bool)
        mask[excluded] = False
        return np.flatnonzero(mask)

    chosen: set[int] = set()
    while len(chosen) < sample_size:
        chosen.add(int(rng.integers(population_size)))
    return np.array(sorted(chosen), dtype=np.intp)


def sample_rows(
    Xs: npt.NDArray[np.floating[Any]],
    sample_size: int,
    rng: np.random.Generator,
) -> npt.NDArray[np.floating[Any]]:
    """
    Args:
        Xs: Feature matrix of shape (n_items, n_attributes).
        sample_size: Number of rows to keep.
        rng: Generator driving the draw.
    Returns:
        Feature matrix of shape (sample_size, n_attributes).
    """
    return Xs[sample_indices(Xs.shape[0], sample_size, rng)]
