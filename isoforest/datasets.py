"""
Sample populations of three dimensional points used to exercise the forest.
"""

from __future__ import annotations

import operator
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    z: float

    def norm(self) -> float:
        return float(np.sqrt(self.x * self.x + self.y * self.y + self.z * self.z))


# x, y, z and the Euclidean norm
POINT_ATTRIBUTES = (
    operator.attrgetter("x"),
    operator.attrgetter("y"),
    operator.attrgetter("z"),
    Point.norm,
)


def generate_point(
    rng: np.random.Generator,
    x_mean: float,
    x_std: float,
    y_mean: float,
    y_std: float,
) -> Point:
    """Point of the xy-plane with independent normal coordinates."""
    return Point(float(rng.normal(x_mean, x_std)), float(rng.normal(y_mean, y_std)), 0.0)


def generate_points(normal_count: int, outlier_count: int, rng: np.random.Generator) -> list[Point]:
    """
    Tight cluster around the origin plus a far away group of outliers, shuffled.
    Args:
        normal_count: Number of points drawn around (0, 0) with deviation 0.2.
        outlier_count: Number of points drawn around (-50.5, 135).
        rng: Generator driving the draw.
    """
    points = [generate_point(rng, 0.0, 0.2, 0.0, 0.2) for _ in range(normal_count)]
    points += [generate_point(rng, -50.5, 1.0, 135.0, 5.0) for _ in range(outlier_count)]
    rng.shuffle(points)  # type: ignore[arg-type]
    return points


def generate_multivariate_points(n: int, rng: np.random.Generator) -> list[Point]:
    """n points of the xy-plane drawn from a standard bivariate normal."""
    samples = rng.multivariate_normal([0.0, 0.0], [[1.0, 0.0], [0.0, 1.0]], size=n)
    return [Point(float(x), float(y), 0.0) for x, y in samples]


def clustered_with_outlier(
    n: int,
    rng: np.random.Generator,
    jitter: float = 0.1,
    outlier: Point = Point(10.0, 10.0, 10.0),
) -> list[Point]:
    """n points jittered around the origin followed by a single outlier."""
    cluster = rng.normal(0.0, jitter, size=(n, 3))
    return [Point(float(x), float(y), float(z)) for x, y, z in cluster] + [outlier]


def simple() -> list[Point]:
    """Small grid around the origin followed by five scattered outliers."""
    return [Point(*map(float, coordinates)) for coordinates in _SIMPLE]


def hbk() -> list[Point]:
    """Hawkins, Bradu and Kass artificial data; the first 14 points are outliers."""
    return [Point(*map(float, coordinates)) for coordinates in _HBK]


_SIMPLE = [
    (0, 0, 0),
    (0, -0.1, 0),
    (0, 0.1, 0),
    (0, 0.2, 0),
    (0, -0.2, 0),
    (0.1, 0, 0),
    (0.1, 0.1, 0),
    (0.1, -0.1, 0),
    (0.1, 0.2, 0),
    (0.1, -0.2, 0),
    (0.2, 0, 0),
    (0.2, 0.1, 0),
    (0.2, -0.1, 0),
    (0.2, 0.2, 0),
    (0.2, -0.2, 0),
    (-3, 3, 0),
    (-100, 3, 0),
    (5, 2, 0),
    (-10, -5, 0),
    (8, 8, 0),
]

_HBK = [
    (10.1, 19.6, 28.3),
    (9.5, 20.5, 28.9),
    (10.7, 20.2, 31),
    (9.9, 21.5, 31.7),
    (10.3, 21.1, 31.1),
    (10.8, 20.4, 29.2),
    (10.5, 20.9, 29.1),
    (9.9, 19.6, 28.8),
    (9.7, 20.7, 31),
    (9.3, 19.7, 30.3),
    (11, 24, 35),
    (12, 23, 37),
    (12, 26, 34),
    (11, 34, 34),
    (3.4, 2.9, 2.1),
    (3.1, 2.2, 0.3),
    (0, 1.6, 0.2),
    (2.3, 1.6, 2),
    (0.8, 2.9, 1.6),
    (3.1, 3.4, 2.2),
    (2.6, 2.2, 1.9),
    (0.4, 3.2, 1.9),
    (2, 2.3, 0.8),
    (1.3, 2.3, 0.5),
    (1, 0, 0.4),
    (0.9, 3.3, 2.5),
    (3.3, 2.5, 2.9),
    (1.8, 0.8, 2),
    (1.2, 0.9, 0.8),
    (1.2, 0.7, 3.4),
    (3.1, 1.4, 1),
    (0.5, 2.4, 0.3),
    (1.5, 3.1, 1.5),
    (0.4, 0, 0.7),
    (3.1, 2.4, 3),
    (1.1, 2.2, 2.7),
    (0.1, 3, 2.6),
    (1.5, 1.2, 0.2),
    (2.1, 0, 1.2),
    (0.5, 2, 1.2),
    (3.4, 1.6, 2.9),
    (0.3, 1, 2.7),
    (0.1, 3.3, 0.9),
    (1.8, 0.5, 3.2),
    (1.9, 0.1, 0.6),
    (1.8, 0.5, 3),
    (3, 0.1, 0.8),
    (3.1, 1.6, 3),
    (3.1, 2.5, 1.9),
    (2.1, 2.8, 2.9),
    (2.3, 1.5, 0.4),
    (3.3, 0.6, 1.2),
    (0.3, 0.4, 3.3),
    (1.1, 3, 0.3),
    (0.5, 2.4, 0.9),
    (1.8, 3.2, 0.9),
    (1.8, 0.7, 0.7),
    (2.4, 3.4, 1.5),
    (1.6, 2.1, 3),
    (0.3, 1.5, 3.3),
    (0.4, 3.4, 3),
    (0.9, 0.1, 0.3),
    (1.1, 2.7, 0.2),
    (2.8, 3, 2.9),
    (2, 0.7, 2.7),
    (0.2, 1.8, 0.8),
    (1.6, 2, 1.2),
    (0.1, 0, 1.1),
    (2, 0.6, 0.3),
    (1, 2.2, 2.9),
    (2.2, 2.5, 2.3),
    (0.6, 2, 1.5),
    (0.3, 1.7, 2.2),
    (0, 2.2, 1.6),
    (0.3, 0.4, 2.6),
]
