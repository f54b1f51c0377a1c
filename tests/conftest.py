import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pytest  # noqa: E402

from isoforest.datasets import Point  # noqa: E402


@pytest.fixture
def no_show(monkeypatch):
    monkeypatch.setattr(plt, "show", lambda: None)
    yield
    plt.close("all")


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def cluster_with_outliers():
    """200 inliers from a standard bivariate normal plus 5 far away points at the end."""
    rng = np.random.default_rng(7)
    inliers = [Point(float(x), float(y), 0.0) for x, y in rng.normal(0.0, 1.0, size=(200, 2))]
    outliers = [
        Point(12.0, 12.0, 0.0),
        Point(-12.0, 12.0, 0.0),
        Point(12.0, -12.0, 0.0),
        Point(-12.0, -12.0, 0.0),
        Point(0.0, 15.0, 0.0),
    ]
    return inliers + outliers
