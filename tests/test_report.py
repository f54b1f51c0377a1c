import numpy as np
import pytest

from isoforest.datasets import Point
from isoforest.report import RankedItem, format_ranking, plot_scores_2D, rank, top_n


@pytest.fixture
def points():
    return [Point(0.0, 0.0, 0.0), Point(1.0, 2.0, 3.0), Point(-1.5, 0.25, 0.0), Point(9.0, 9.0, 9.0)]


def test_rank_is_descending_and_stable(points):
    ranking = rank(points, [0.4, 0.75, 0.4, 0.9])

    assert [entry.index for entry in ranking] == [3, 1, 0, 2]
    assert ranking[0] == RankedItem(3, points[3], 0.9)


def test_top_n(points):
    assert [entry.index for entry in top_n(points, np.array([0.1, 0.2, 0.3, 0.4]), 2)] == [3, 2]
    assert len(top_n(points, [0.1, 0.2, 0.3, 0.4], 10)) == 4


def test_rank_requires_one_score_per_item(points):
    with pytest.raises(ValueError):
        rank(points, [0.5, 0.5])


def test_format_ranking(points):
    text = format_ranking(rank(points, [0.4, 0.75, 0.4, 0.9])[:2])

    assert text.splitlines() == [
        "  4 - (9.000, 9.000, 9.000) = 0.900",
        "  2 - (1.000, 2.000, 3.000) = 0.750",
    ]


def test_format_ranking_custom_description():
    text = format_ranking([RankedItem(0, "a", 0.5)], describe=str.upper)
    assert text == "  1 - A = 0.500"


def test_plot_scores(points, no_show):
    plot_scores_2D(points, [0.4, 0.75, 0.4, 0.9])
