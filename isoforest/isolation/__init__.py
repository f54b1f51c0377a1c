"""Isolation Forest implementation for anomaly detection.

This package provides the standard Isolation Forest algorithm using random
partitioning of the attribute space.
"""

from .correction import correction_factor
from .forest import Attribute, IsolationForest, evaluate_attributes
from .tree import (
    ExternalNode,
    InternalNode,
    IsolationTree,
    SplitNode,
    build_node,
    path_length,
    path_lengths_batch,
)

__all__ = [
    "Attribute",
    "ExternalNode",
    "InternalNode",
    "IsolationForest",
    "IsolationTree",
    "SplitNode",
    "build_node",
    "correction_factor",
    "evaluate_attributes",
    "path_length",
    "path_lengths_batch",
]
