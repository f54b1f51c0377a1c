"""
This module contains the correction factor c(n): the average path length of an
unsuccessful search in a binary search tree built from n items.

It is used both when a traversal stops at a node that still holds several
items, and to normalize the average path length into an anomaly score.
"""

from __future__ import annotations

import numpy as np

EULER_MASCHERONI = 0.5772156649


def harmonic_number(i: float) -> float:
    """
    Asymptotic approximation of the i-th harmonic number, ln(i) + gamma.
    """
    return float(np.log(i)) + EULER_MASCHERONI


def correction_factor(n: float) -> float:
    """
    Expected path length of an unsuccessful search among n items.
    Args:
        n: Number of items left unresolved.
    Returns:
        0 for n <= 1, 1 for n == 2, 2*H(n-1) - 2*(n-1)/n otherwise.
    """
    if n > 2:
        return 2.0 * harmonic_number(n - 1) - 2.0 * (n - 1) / n
    return 1.0 if n == 2 else 0.0
