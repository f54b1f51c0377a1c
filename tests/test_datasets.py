import pytest

from isoforest.datasets import (
    POINT_ATTRIBUTES,
    Point,
    clustered_with_outlier,
    generate_multivariate_points,
    generate_points,
    hbk,
    simple,
)


def test_point_attributes():
    point = Point(3.0, 4.0, 0.0)
    assert [attribute(point) for attribute in POINT_ATTRIBUTES] == [3.0, 4.0, 0.0, 5.0]


def test_fixed_datasets():
    assert len(simple()) == 20
    assert simple()[16] == Point(-100.0, 3.0, 0.0)
    assert len(hbk()) == 75
    assert hbk()[0] == Point(10.1, 19.6, 28.3)


def test_generate_points(rng):
    points = generate_points(100, 5, rng)

    assert len(points) == 105
    assert sum(1 for p in points if p.y > 100) == 5
    assert all(p.z == 0.0 for p in points)


def test_generate_multivariate_points(rng):
    points = generate_multivariate_points(50, rng)
    assert len(points) == 50
    assert all(p.z == 0.0 for p in points)


def test_clustered_with_outlier(rng):
    points = clustered_with_outlier(14, rng)

    assert len(points) == 15
    assert points[-1] == Point(10.0, 10.0, 10.0)
    assert max(p.norm() for p in points[:-1]) < 1.0


def test_points_are_hashable():
    assert len({Point(1.0, 2.0, 3.0), Point(1.0, 2.0, 3.0)}) == 1
    with pytest.raises(AttributeError):
        Point(1.0, 2.0, 3.0).x = 2.0
