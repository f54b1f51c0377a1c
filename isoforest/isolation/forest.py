"""
This module contains the IsolationForest class that implements an ensemble
of isolation trees for robust anomaly detection.

The forest is generic over the item type: it only needs a list of attributes,
deterministic functions mapping an item to a real number. Attributes are
evaluated once per item into a feature matrix the trees are built from.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

import numpy as np
import numpy.typing as npt
from joblib import Parallel, delayed

from ..exceptions import InvalidConfiguration, InvalidState
from .correction import correction_factor
from .tree import IsolationTree

logger = logging.getLogger(__name__)

T = TypeVar("T")

Attribute = Callable[[T], float]


def evaluate_attributes(
    items: Iterable[T],
    attributes: Sequence[Attribute[T]],
) -> npt.NDArray[np.floating[Any]]:
    """
    Args:
        items: Items to evaluate.
        attributes: Attribute functions.
    Returns:
        Feature matrix of shape (n_items, n_attributes).
    """
    rows = [[float(attribute(item)) for attribute in attributes] for item in items]
    return np.array(rows, dtype=np.float64).reshape(len(rows), len(attributes))


def _fit_single_tree(
    seed: int,
    Xs: npt.NDArray[np.floating[Any]],
    subsample_size: int,
) -> IsolationTree:
    """
    Worker function to fit an isolation tree with a given seed.
    This function is designed to be called in parallel using joblib.
    Each worker builds its own generator from the seed, so trees never share
    a random source and the result does not depend on the execution order.

    Args:
        seed: Random seed for this tree (integer).
        Xs: Training data of shape (n_samples, n_attributes).
        subsample_size: Number of samples to use for building the tree.
    Returns:
        Fitted IsolationTree instance.
    """
    rng = np.random.default_rng(seed)

    tree = IsolationTree()
    tree.fit(Xs, subsample_size=subsample_size, rng=rng)
    return tree


def _score_single_tree(
    tree: IsolationTree,
    Xs: npt.NDArray[np.floating[Any]],
    height_limit: float,
) -> npt.NDArray[np.floating[Any]]:
    """
    Worker function to score samples on a single tree.
    This function is designed to be called in parallel using joblib.
    Args:
        tree: Fitted IsolationTree instance.
        Xs: Data samples of shape (n_samples, n_attributes).
        height_limit: Depth at which traversals stop.
    Returns:
        Path lengths for each sample of shape (n_samples,).
    """
    return tree.get_path_lengths(Xs, height_limit)


class IsolationForest(Generic[T]):
    """
    Ensemble of Isolation Trees for anomaly detection.

    Each tree is trained on a random subsample of the items,
    and scores are computed from the path length averaged across all trees.

    Attributes:
        items: Population the trees are sampled from.
        attributes: Functions mapping an item to a real number.
        n_jobs: Number of parallel jobs to run. -1 means using all processors.
        random_state: Random seed for reproducibility.
        contamination: Expected proportion of anomalies in the population.
        anomaly_threshold: Score threshold above which items are classified as anomalies.
    """

    DEFAULT_ENSEMBLE_SIZE = 100

    # Beyond 256 samples per tree the precision gained is not worth the cost.
    DEFAULT_SUBSAMPLE_SIZE = 256

    def __init__(
        self,
        items: Iterable[T],
        attributes: Sequence[Attribute[T]],
        ensemble_size: int = DEFAULT_ENSEMBLE_SIZE,
        subsample_size: int | None = None,
        height_limit: int | None = None,
        n_jobs: int = 1,
        random_state: int | None = None,
        clamp_subsample: bool = False,
        round_to_power_of_two: bool = False,
    ) -> None:
        """
        Initialize an IsolationForest.
        Args:
            items: Population to build the trees from.
            attributes: Deterministic functions mapping an item to a real number.
            ensemble_size: Number of isolation trees to create in the ensemble.
            subsample_size: Number of items drawn, without replacement, for each tree.
                If None, min(256, number of items) is used.
            height_limit: Depth at which path length evaluation stops.
                If None, subsample_size - 1, which no tree can exceed.
            n_jobs: Number of parallel jobs to run for tree building and scoring.
                - If 1 (default): sequential execution (no parallelization)
                - If -1: use all available processors
                - If > 1: use specified number of processors
            random_state: Random seed for reproducibility. If None, results will
                vary between runs. If an integer, same seed produces identical results
                in both sequential (n_jobs=1) and parallel (n_jobs=-1) modes.
            clamp_subsample: If True, a subsample_size larger than the population
                is reduced to the population size instead of being rejected.
            round_to_power_of_two: If True, the subsample size is rounded down
                to a power of two.
        Raises:
            InvalidConfiguration: If the parameters cannot produce a forest.
        """
        self.items: list[T] = list(items)
        self.attributes: list[Attribute[T]] = list(attributes)

        if not self.items:
            raise InvalidConfiguration("at least one item is required")
        if not self.attributes:
            raise InvalidConfiguration("at least one attribute is required")
        if ensemble_size < 1:
            raise InvalidConfiguration(f"ensemble_size must be positive, got {ensemble_size}")
        if height_limit is not None and height_limit < 0:
            raise InvalidConfiguration(f"height_limit must be non-negative, got {height_limit}")

        self._ensemble_size = ensemble_size
        self._subsample_size = self._resolve_subsample_size(
            subsample_size, clamp_subsample, round_to_power_of_two,
        )
        self._height_limit = self._subsample_size - 1 if height_limit is None else height_limit
        self._expected_path_length = correction_factor(self._subsample_size)

        self.n_jobs = n_jobs
        self.random_state = random_state

        self.contamination: float | None = None
        self.anomaly_threshold: float | None = None

        self._trees: tuple[IsolationTree, ...] = ()

    def _resolve_subsample_size(
        self,
        subsample_size: int | None,
        clamp_subsample: bool,
        round_to_power_of_two: bool,
    ) -> int:
        n_items = len(self.items)

        if subsample_size is None:
            resolved = min(self.DEFAULT_SUBSAMPLE_SIZE, n_items)
        elif subsample_size < 1:
            raise InvalidConfiguration(f"subsample_size must be positive, got {subsample_size}")
        elif subsample_size > n_items:
            if not clamp_subsample:
                raise InvalidConfiguration(
                    f"subsample_size ({subsample_size}) exceeds the number of items ({n_items})"
                )
            logger.warning("Clamping subsample_size %d to the %d available items", subsample_size, n_items)
            resolved = n_items
        else:
            resolved = subsample_size

        if round_to_power_of_two:
            resolved = 1 << (int(resolved).bit_length() - 1)
        return resolved

    @property
    def ensemble_size(self) -> int:
        """Number of trees in the ensemble."""
        return self._ensemble_size

    @property
    def subsample_size(self) -> int:
        """Number of items each tree is built from."""
        return self._subsample_size

    @property
    def height_limit(self) -> int:
        """Depth at which path length evaluation stops."""
        return self._height_limit

    @property
    def expected_path_length(self) -> float:
        """Average path length of an unsuccessful search among subsample_size items."""
        return self._expected_path_length

    @property
    def trees(self) -> tuple[IsolationTree, ...]:
        return self._trees

    @property
    def is_built(self) -> bool:
        return bool(self._trees)

    def build(self, contamination: float | None = None) -> IsolationForest[T]:
        """
        Creates the isolation trees, each trained on a random subsample of the
        items, replacing any previously built ensemble. If contamination is
        given, the anomaly threshold is the score quantile matching it over
        the whole population.

        Args:
            contamination: Expected proportion of anomalies (0 < contamination <= 0.5).
                If None, the threshold is 0.5.
        Returns:
            The forest itself.
        Raises:
            InvalidConfiguration: If the contamination is out of range or an
                attribute evaluates to a non-finite value.
        """
        if contamination is not None and not 0.0 < contamination <= 0.5:
            raise InvalidConfiguration(f"contamination must be in (0, 0.5], got {contamination}")

        Xs = evaluate_attributes(self.items, self.attributes)
        if not np.all(np.isfinite(Xs)):
            raise InvalidConfiguration("attributes must evaluate to finite values on every item")

        logger.info(
            "Building isolation forest [ensemble_size=%d, subsample_size=%d, height_limit=%d, n_jobs=%d]",
            self.ensemble_size, self.subsample_size, self.height_limit, self.n_jobs,
        )

        rng = np.random.RandomState(self.random_state)
        MAX_INT = np.iinfo(np.int32).max
        seeds = rng.randint(MAX_INT, size=self.ensemble_size)

        # Build trees in parallel or sequentially
        if self.n_jobs == 1:
            trees = [_fit_single_tree(seed, Xs, self.subsample_size) for seed in seeds]
        else:
            trees = Parallel(n_jobs=self.n_jobs, backend="loky")(
                delayed(_fit_single_tree)(seed, Xs, self.subsample_size) for seed in seeds
            )
        self._trees = tuple(trees)  # type: ignore[arg-type]

        if logger.isEnabledFor(logging.DEBUG):
            for tree_idx, tree in enumerate(self._trees):
                logger.debug("Tree %d: depth=%d, leaves=%d", tree_idx, tree.depth, len(tree.leaf_sizes()))

        self.contamination = contamination
        if self.contamination is None:
            self.anomaly_threshold = 0.5
        else:
            Xs_scores = self._scores_from_matrix(Xs)
            self.anomaly_threshold = float(np.quantile(Xs_scores, 1.0 - self.contamination))

        logger.info("Isolation forest built, anomaly threshold %.4f", self.anomaly_threshold)
        return self

    def _require_built(self) -> None:
        if not self._trees:
            raise InvalidState("the forest must be built before scoring")

    def _features(self, item: T) -> npt.NDArray[np.floating[Any]]:
        return np.array([float(attribute(item)) for attribute in self.attributes], dtype=np.float64)

    def _normalize(self, mean_depths: npt.NDArray[np.floating[Any]]) -> npt.NDArray[np.floating[Any]]:
        # A single-item subsample can never isolate anything.
        if self.expected_path_length == 0.0:
            return np.full(mean_depths.shape, 0.5, dtype=np.float64)
        return 2.0 ** (-mean_depths / self.expected_path_length)

    def path_length(
        self,
        item: T,
        tree: IsolationTree,
        height_limit: int | None = None,
    ) -> float:
        """
        Args:
            item: Query item.
            tree: Fitted tree, usually one of self.trees.
            height_limit: Depth at which the traversal stops. Defaults to the
                forest's height limit.
        Returns:
            Path length of the item in the tree.
        """
        limit = self.height_limit if height_limit is None else height_limit
        return tree.path_length(self._features(item), limit)

    def anomaly_score(self, item: T) -> float:
        """
        Anomaly score in (0, 1] where higher scores indicate anomalies.
        Based on the formula: 2^(-mean_path_length / expected_path_length).
        Raises:
            InvalidState: If the forest has not been built.
        """
        self._require_built()

        x = self._features(item)
        mean_depth = np.mean([tree.path_length(x, self.height_limit) for tree in self._trees])
        return float(self._normalize(np.array([mean_depth]))[0])

    def _scores_from_matrix(
        self, Xs: npt.NDArray[np.floating[Any]],
    ) -> npt.NDArray[np.floating[Any]]:
        if self.n_jobs == 1:
            # Sequential execution
            depth_matrix = np.zeros((Xs.shape[0], len(self._trees)))
            for tree_idx, tree in enumerate(self._trees):
                depth_matrix[:, tree_idx] = tree.get_path_lengths(Xs, self.height_limit)
        else:
            # Parallel execution using joblib
            depth_results = Parallel(n_jobs=self.n_jobs, backend="loky")(
                delayed(_score_single_tree)(tree, Xs, self.height_limit) for tree in self._trees
            )
            depth_matrix = np.column_stack(list(depth_results))

        mean_depths = np.mean(depth_matrix, axis=1)
        return self._normalize(mean_depths)

    def scores(self, items: Iterable[T]) -> npt.NDArray[np.floating[Any]]:
        """
        Anomaly scores are in (0, 1] where higher scores indicate anomalies.
        Args:
            items: Query items.
        Returns:
            Anomaly scores for each item of shape (n_items,).
        Raises:
            InvalidState: If the forest has not been built.
        """
        self._require_built()

        return self._scores_from_matrix(evaluate_attributes(items, self.attributes))

    def predict(self, items: Iterable[T]) -> npt.NDArray[np.int_]:
        """
        Predict anomaly labels for items.
        Args:
            items: Query items.
        Returns:
            Binary labels (0=normal, 1=anomaly) of shape (n_items,).
        """
        scores_arr = self.scores(items)
        return (scores_arr >= self.anomaly_threshold).astype(int)
