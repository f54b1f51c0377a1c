"""Sequential and parallel builds with the same random_state must agree."""

import numpy as np
import pytest

from isoforest import IsolationForest
from isoforest.datasets import POINT_ATTRIBUTES, Point


def generate_test_data(n_samples=1000, random_state=42):
    """Synthetic points with 10% anomalies, shuffled."""
    rng = np.random.default_rng(random_state)

    normal = rng.standard_normal((int(n_samples * 0.9), 3))
    anomalies = rng.standard_normal((int(n_samples * 0.1), 3)) * 3 + 5

    Xs = np.vstack([normal, anomalies])
    rng.shuffle(Xs)
    return [Point(*map(float, row)) for row in Xs]


@pytest.fixture(scope="module")
def train_test():
    return generate_test_data(1000, random_state=42), generate_test_data(200, random_state=43)


def _fit(points, n_jobs):
    forest = IsolationForest(points, POINT_ATTRIBUTES, ensemble_size=50, n_jobs=n_jobs, random_state=12345)
    return forest.build(contamination=0.1)


def test_sequential_and_parallel_builds_agree(train_test):
    train, test = train_test

    forest_seq = _fit(train, n_jobs=1)
    forest_par = _fit(train, n_jobs=-1)

    for tree_seq, tree_par in zip(forest_seq.trees, forest_par.trees):
        assert tree_seq.root == tree_par.root

    np.testing.assert_allclose(forest_seq.scores(test), forest_par.scores(test), rtol=1e-9, atol=1e-12)
    np.testing.assert_array_equal(forest_seq.predict(test), forest_par.predict(test))
    assert forest_seq.anomaly_threshold == pytest.approx(forest_par.anomaly_threshold)


def test_parallel_scoring_matches_sequential(train_test):
    train, test = train_test
    forest = _fit(train, n_jobs=1)
    sequential = forest.scores(test)

    forest.n_jobs = 2

    np.testing.assert_allclose(forest.scores(test), sequential, rtol=1e-12)
