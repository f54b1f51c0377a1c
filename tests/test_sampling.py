from collections import Counter
from itertools import combinations

import numpy as np
import pytest

from isoforest.isolation.sampling import sample_indices, sample_rows


@pytest.mark.parametrize(
    "population_size, sample_size",
    [(10, 0), (10, 1), (10, 5), (10, 6), (10, 10), (1000, 256), (300, 256), (1, 1)],
)
def test_sample_is_distinct_and_complete(rng, population_size, sample_size):
    indices = sample_indices(population_size, sample_size, rng)

    assert len(indices) == sample_size
    assert len(set(indices.tolist())) == sample_size
    assert np.all(np.diff(indices) > 0)
    if sample_size:
        assert 0 <= indices.min() and indices.max() < population_size


@pytest.mark.parametrize("sample_size", [-1, 11])
def test_sample_out_of_range(rng, sample_size):
    with pytest.raises(ValueError):
        sample_indices(10, sample_size, rng)


@pytest.mark.parametrize("sample_size", [2, 4])
def test_every_subset_is_equally_likely(sample_size):
    rng = np.random.default_rng(0)
    n_draws = 20_000

    counts = Counter(
        tuple(sample_indices(5, sample_size, rng).tolist()) for _ in range(n_draws)
    )

    subsets = list(combinations(range(5), sample_size))
    assert set(counts) == set(subsets)
    for subset in subsets:
        assert counts[subset] / n_draws == pytest.approx(1 / len(subsets), abs=0.015)


def test_sample_rows(rng):
    Xs = np.arange(20, dtype=np.float64).reshape(10, 2)

    sample = sample_rows(Xs, 4, rng)

    assert sample.shape == (4, 2)
    for row in sample:
        assert row.tolist() in Xs.tolist()
