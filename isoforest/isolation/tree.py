"""
This module contains the split nodes and the IsolationTree class that
implement the standard Isolation Forest algorithm using random partitioning.

A split node is either an InternalNode (one attribute, one threshold and two
children) or an ExternalNode (the number of items left when partitioning
stopped). Trees work on feature matrices: row i holds the value of every
attribute for item i.

Trees can be as deep as the number of samples they are built from, so
construction and traversals use explicit stacks instead of recursion.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
import numpy.typing as npt

from .correction import correction_factor
from .sampling import sample_rows


@dataclass(frozen=True)
class ExternalNode:
    """
    Leaf of an Isolation Tree.
    Attributes:
        size: Number of training items that ended up in this leaf.
    """
    size: int


@dataclass(frozen=True)
class InternalNode:
    """
    Split of an Isolation Tree.
    Attributes:
        idx_attribute: Index of the attribute used for splitting.
        split_threshold: Samples with attribute value < threshold go left, the rest go right.
        left: Child holding the lower part of the split.
        right: Child holding the upper part of the split.
    """
    idx_attribute: int
    split_threshold: float
    left: SplitNode
    right: SplitNode


SplitNode = Union[InternalNode, ExternalNode]

# (idx_attribute, split_threshold, id of left child, id of right child)
_Split = Tuple[int, float, int, int]


def _draw_split(
    Xs: npt.NDArray[np.floating[Any]],
    rng: np.random.Generator,
) -> tuple[int, float, npt.NDArray[np.bool_]] | None:
    """
    Draw a random attribute and a threshold in [min, max] of that attribute.
    Returns:
        (idx_attribute, split_threshold, mask of the lower part), or None if
        the samples cannot be separated with the draw.
    """
    n_samples = Xs.shape[0]

    idx_attribute = int(rng.integers(Xs.shape[1]))
    values = Xs[:, idx_attribute]
    low, high = float(values.min()), float(values.max())
    if low == high:
        return None

    split_threshold = float(rng.uniform(low, high))
    mask_lower = values < split_threshold
    n_lower = int(np.count_nonzero(mask_lower))
    if n_lower == 0 or n_lower == n_samples:
        return None

    return idx_attribute, split_threshold, mask_lower


def build_node(
    Xs: npt.NDArray[np.floating[Any]],
    rng: np.random.Generator,
) -> SplitNode:
    """
    Partition a non-empty set of samples using random splits until every part
    is isolated. Partitioning stops when the chosen attribute is constant over
    the samples or when the drawn threshold leaves one side empty.

    Splits are drawn in pre-order, lower part first, then the nodes are
    assembled children first.

    Args:
        Xs: Feature matrix of shape (n_samples, n_attributes), n_samples >= 1.
        rng: Generator driving attribute and threshold selection.
    Returns:
        Root of the built tree.
    """
    sizes = [Xs.shape[0]]
    splits: list[Optional[_Split]] = [None]

    pending = [(Xs, 0)]
    while pending:
        Xs_node, node_id = pending.pop()
        split = _draw_split(Xs_node, rng)
        if split is None:
            continue

        idx_attribute, split_threshold, mask_lower = split
        left_id, right_id = len(sizes), len(sizes) + 1
        n_lower = int(np.count_nonzero(mask_lower))
        sizes += [n_lower, Xs_node.shape[0] - n_lower]
        splits += [None, None]
        splits[node_id] = (idx_attribute, split_threshold, left_id, right_id)

        pending.append((Xs_node[~mask_lower], right_id))
        pending.append((Xs_node[mask_lower], left_id))

    # Children always get larger ids than their parent
    nodes: list[Optional[SplitNode]] = [None] * len(sizes)
    for node_id in reversed(range(len(sizes))):
        split = splits[node_id]
        if split is None:
            nodes[node_id] = ExternalNode(size=sizes[node_id])
        else:
            idx_attribute, split_threshold, left_id, right_id = split
            nodes[node_id] = InternalNode(
                idx_attribute=idx_attribute,
                split_threshold=split_threshold,
                left=nodes[left_id],  # type: ignore[arg-type]
                right=nodes[right_id],  # type: ignore[arg-type]
            )
    return nodes[0]  # type: ignore[return-value]


def path_length(
    node: SplitNode,
    x: npt.NDArray[np.floating[Any]],
    height_limit: float,
) -> float:
    """
    Length of the path followed by a single sample. A path ending in a leaf
    gets the correction for the items left in that leaf; a path cut at the
    height limit stops at the depth reached.
    Args:
        node: Root of the tree.
        x: Attribute values of the sample, shape (n_attributes,).
        height_limit: Depth at which the traversal stops.
    """
    depth = 0
    while isinstance(node, InternalNode):
        if depth >= height_limit:
            return float(depth)
        if x[node.idx_attribute] < node.split_threshold:
            node = node.left
        else:
            node = node.right
        depth += 1
    return depth + correction_factor(node.size)


def path_lengths_batch(
    node: SplitNode,
    Xs: npt.NDArray[np.floating[Any]],
    height_limit: float,
) -> npt.NDArray[np.floating[Any]]:
    """
    Vectorized path_length.
    Args:
        node: Root of the tree.
        Xs: Feature matrix of shape (n_samples, n_attributes).
        height_limit: Depth at which traversals stop.
    Returns:
        Path lengths for each sample of shape (n_samples,).
    """
    path_lengths = np.zeros(Xs.shape[0], dtype=np.float64)

    stack = [(node, np.arange(Xs.shape[0]), 0)]
    while stack:
        current, rows, depth = stack.pop()
        if isinstance(current, ExternalNode):
            path_lengths[rows] = depth + correction_factor(current.size)
            continue
        if depth >= height_limit:
            path_lengths[rows] = depth
            continue

        mask_lower = Xs[rows, current.idx_attribute] < current.split_threshold
        if np.any(mask_lower):
            stack.append((current.left, rows[mask_lower], depth + 1))
        if np.any(~mask_lower):
            stack.append((current.right, rows[~mask_lower], depth + 1))

    return path_lengths


def iter_nodes(node: SplitNode) -> Iterator[SplitNode]:
    """Pre-order traversal of a tree."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        if isinstance(current, InternalNode):
            stack.append(current.right)
            stack.append(current.left)


def tree_depth(node: SplitNode) -> int:
    """Depth of the deepest leaf (a single leaf has depth 0)."""
    deepest = 0
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        if isinstance(current, InternalNode):
            stack.append((current.left, depth + 1))
            stack.append((current.right, depth + 1))
        else:
            deepest = max(deepest, depth)
    return deepest


class IsolationTree:
    """
    Single Isolation Tree for anomaly detection.
    Attributes:
        root: Root node of the tree.
        data: Subsample the tree was built from.
        PADDING: Padding added to feature limits when plotting.
    """

    def __init__(self) -> None:
        """Initialize an IsolationTree."""
        self.root: SplitNode | None = None
        self.data: npt.NDArray[np.floating[Any]] | None = None

        self.PADDING = 1.0

    def fit(
        self,
        Xs: npt.NDArray[np.floating[Any]],
        subsample_size: int,
        rng: np.random.Generator,
    ) -> None:
        """
        Builds the tree structure by partitioning a subsample of the data.
        Args:
            Xs: Training data of shape (n_samples, n_attributes).
            subsample_size: Number of samples to draw, without replacement,
                for building the tree.
            rng: Generator driving sampling, attribute and threshold selection.
        """
        self.data = sample_rows(Xs, subsample_size, rng)
        self.root = build_node(self.data, rng)

    @property
    def subsample_size(self) -> int:
        assert self.data is not None

        return self.data.shape[0]

    @property
    def feature_limits(self) -> list[list[float]]:
        """Boundaries of each attribute over the subsample, padded."""
        assert self.data is not None

        mins = np.min(self.data, axis=0) - self.PADDING
        maxs = np.max(self.data, axis=0) + self.PADDING
        return [[float(mins[i]), float(maxs[i])] for i in range(len(mins))]

    def get_path_lengths(
        self,
        Xs: npt.NDArray[np.floating[Any]],
        height_limit: float = np.inf,
    ) -> npt.NDArray[np.floating[Any]]:
        """
        Args:
            Xs: Data samples of shape (n_samples, n_attributes).
            height_limit: Depth at which traversals stop.
        Returns:
            Path lengths for each sample of shape (n_samples,).
        """
        assert self.root is not None

        return path_lengths_batch(self.root, Xs, height_limit)

    def path_length(
        self,
        x: npt.NDArray[np.floating[Any]],
        height_limit: float = np.inf,
    ) -> float:
        assert self.root is not None

        return path_length(self.root, x, height_limit)

    @property
    def depth(self) -> int:
        assert self.root is not None

        return tree_depth(self.root)

    def leaf_sizes(self) -> list[int]:
        assert self.root is not None

        return [node.size for node in iter_nodes(self.root) if isinstance(node, ExternalNode)]

    def plot_partition_space_2D(
        self,
        Xs: npt.NDArray[np.floating[Any]] | None = None,
    ) -> None:
        """
        Visualize the space partitioning created by this tree, using the first
        two attributes as axes. Splits on any other attribute are not drawn.
        Args:
            Xs: Samples to scatter under the partition lines. Defaults to the
                subsample the tree was built from.
        Raises:
            ValueError: If the tree was built from fewer than two attributes.
        """
        assert self.root is not None
        assert self.data is not None

        if self.data.shape[1] < 2:
            raise ValueError(
                f"plotting needs at least two attributes, the tree has {self.data.shape[1]}"
            )

        plt.title("Space Partition Isolation Tree")
        plt.xlabel("Attribute 0")
        plt.ylabel("Attribute 1")

        feature_limits = self.feature_limits
        (x_min, x_max), (y_min, y_max) = feature_limits[0], feature_limits[1]
        plt.plot([x_min, x_max], [y_min, y_min], c="gray")
        plt.plot([x_min, x_max], [y_max, y_max], c="gray")
        plt.plot([x_min, x_min], [y_min, y_max], c="gray")
        plt.plot([x_max, x_max], [y_min, y_max], c="gray")

        points = self.data if Xs is None else Xs
        plt.scatter(points[:, 0], points[:, 1], c="lightgray", s=5)

        _plot_splits_2D(self.root, [[x_min, x_max], [y_min, y_max]])
        plt.show()


def _plot_splits_2D(node: SplitNode, limits: list[list[float]]) -> None:
    """Plots vertical/horizontal lines for each split on attribute 0 or 1."""
    stack = [(node, limits)]
    while stack:
        current, current_limits = stack.pop()
        if isinstance(current, ExternalNode):
            continue

        limits_lower = [list(limit) for limit in current_limits]
        limits_upper = [list(limit) for limit in current_limits]

        if current.idx_attribute == 0:
            plt.plot([current.split_threshold] * 2, current_limits[1], c="gray")
        elif current.idx_attribute == 1:
            plt.plot(current_limits[0], [current.split_threshold] * 2, c="gray")

        if current.idx_attribute < 2:
            limits_lower[current.idx_attribute][1] = current.split_threshold
            limits_upper[current.idx_attribute][0] = current.split_threshold

        stack.append((current.right, limits_upper))
        stack.append((current.left, limits_lower))
