"""Anomaly Detection package.

This package provides an Isolation Forest over arbitrary items described by
user supplied attribute functions:
- isolation: Standard Isolation Forest using random partitioning
- datasets: Sample point populations
- report: Ranking and printing of anomaly scores
"""

from . import isolation
from .exceptions import InvalidConfiguration, InvalidState, IsolationForestError
from .isolation import IsolationForest

__all__ = [
    "InvalidConfiguration",
    "InvalidState",
    "IsolationForest",
    "IsolationForestError",
    "isolation",
]
