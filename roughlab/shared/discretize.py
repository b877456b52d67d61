#!/usr/bin/env python3
"""Supervised entropy/MDL discretization (Fayyad & Irani).

Each numeric column is split recursively at the boundary that minimises the
class entropy of the two halves, and a split is only kept when its
information gain pays for its description length. With ``use_better_encoding``
the cost of choosing a cut counts only the boundaries actually available
between distinct values instead of every gap between instances.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

import numpy as np

logger = logging.getLogger(__name__)

_LN2 = math.log(2.0)


def _x_log_x(counts: np.ndarray) -> np.ndarray:
    counts = np.asarray(counts, dtype=np.float64)
    safe = np.where(counts < 1e-6, 1.0, counts)
    return np.where(counts < 1e-6, 0.0, counts * np.log(safe))


def entropy(counts: np.ndarray) -> float:
    """Entropy in bits of a vector of class counts."""
    counts = np.asarray(counts, dtype=np.float64)
    total = float(counts.sum())
    if total <= 0.0:
        return 0.0
    value = -float(_x_log_x(counts).sum()) + float(_x_log_x(np.array([total]))[0])
    return value / (total * _LN2)


def entropy_conditioned_on_rows(matrix: np.ndarray) -> np.ndarray:
    """Class entropy conditioned on the rows of ``matrix``, in bits.

    ``matrix`` has shape ``(..., n_rows, n_classes)``; leading axes are
    evaluated independently so every candidate split can be scored at once.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    row_totals = matrix.sum(axis=-1)
    total = row_totals.sum(axis=-1)
    value = _x_log_x(row_totals).sum(axis=-1) - _x_log_x(matrix).sum(axis=(-2, -1))
    safe_total = np.where(total <= 0.0, 1.0, total)
    return np.where(total <= 0.0, 0.0, value / (safe_total * _LN2))


def fayyad_irani_accepts(
    prior_counts: np.ndarray,
    split_counts: np.ndarray,
    n_instances: float,
    n_cut_points: int,
) -> bool:
    """MDL stopping rule: accept the split iff its gain beats the encoding cost."""
    prior_counts = np.asarray(prior_counts, dtype=np.float64)
    split_counts = np.asarray(split_counts, dtype=np.float64)

    k = int(np.count_nonzero(prior_counts > 0))
    k_left = int(np.count_nonzero(split_counts[0] > 0))
    k_right = int(np.count_nonzero(split_counts[1] > 0))

    prior_entropy = entropy(prior_counts)
    left_entropy = entropy(split_counts[0])
    right_entropy = entropy(split_counts[1])
    gain = prior_entropy - float(entropy_conditioned_on_rows(split_counts))

    # Exact integer power: 3.0**k overflows a float once k reaches 647.
    delta = math.log2(3**k - 2) - (
        k * prior_entropy - k_right * right_entropy - k_left * left_entropy
    )
    return gain > (math.log2(n_cut_points) + delta) / n_instances


def _cut_points_for_subset(
    values: np.ndarray,
    classes: np.ndarray,
    use_better_encoding: bool,
) -> List[float]:
    n = values.shape[0]
    if n < 2:
        return []

    # Count only the classes present in this partition.
    present, classes = np.unique(classes, return_inverse=True)
    n_classes = int(present.size)
    one_hot = np.zeros((n, n_classes), dtype=np.float64)
    one_hot[np.arange(n), classes] = 1.0
    prior_counts = one_hot.sum(axis=0)
    left = np.cumsum(one_hot, axis=0)[:-1]
    right = prior_counts - left

    boundaries = np.flatnonzero(values[:-1] < values[1:])
    if boundaries.size == 0:
        return []

    prior_entropy = entropy(prior_counts)
    candidates = np.stack([left[boundaries], right[boundaries]], axis=1)
    conditional = entropy_conditioned_on_rows(candidates)
    best = int(np.argmin(conditional))
    best_index = int(boundaries[best])

    if use_better_encoding:
        n_cut_points = int(boundaries.size)
    else:
        n_cut_points = n - 1

    gain = prior_entropy - float(conditional[best])
    if gain <= 0.0:
        return []
    if not fayyad_irani_accepts(prior_counts, candidates[best], float(n), n_cut_points):
        return []

    cut = (float(values[best_index]) + float(values[best_index + 1])) / 2.0
    split = best_index + 1
    left_cuts = _cut_points_for_subset(values[:split], classes[:split], use_better_encoding)
    right_cuts = _cut_points_for_subset(values[split:], classes[split:], use_better_encoding)
    return left_cuts + [cut] + right_cuts


def mdl_cut_points(
    column: np.ndarray,
    classes: np.ndarray,
    *,
    use_better_encoding: bool = True,
) -> np.ndarray:
    """Ascending cut points for one column; missing (NaN) values are ignored."""
    column = np.asarray(column, dtype=np.float64).ravel()
    classes = np.asarray(classes, dtype=np.int64).ravel()
    if column.shape != classes.shape:
        raise ValueError("column and classes must have matching length")

    present = ~np.isnan(column)
    values = column[present]
    labels = classes[present]
    if values.size == 0:
        return np.zeros(0, dtype=np.float64)

    order = np.argsort(values, kind="stable")
    cuts = _cut_points_for_subset(values[order], labels[order], use_better_encoding)
    return np.asarray(cuts, dtype=np.float64)


def apply_cut_points(column: np.ndarray, cut_points: np.ndarray) -> np.ndarray:
    """Replace values by bin indices; NaN stays NaN."""
    column = np.asarray(column, dtype=np.float64)
    bins = np.searchsorted(cut_points, column, side="left").astype(np.float64)
    return np.where(np.isnan(column), np.nan, bins)


@dataclass
class MDLDiscretizer:
    """Supervised discretizer with fit/transform on a 2-D float matrix."""

    use_better_encoding: bool = True
    cut_points_: Dict[int, np.ndarray] = field(default_factory=dict)

    def fit(self, values: np.ndarray, classes: np.ndarray, columns: Iterable[int]) -> "MDLDiscretizer":
        values = np.asarray(values, dtype=np.float64)
        classes = np.asarray(classes, dtype=np.int64)
        if values.ndim != 2:
            raise ValueError("values must be a 2D array")
        if values.shape[0] != classes.shape[0]:
            raise ValueError("values and classes must have matching first dimension")

        self.cut_points_ = {}
        for col in columns:
            cuts = mdl_cut_points(values[:, col], classes, use_better_encoding=self.use_better_encoding)
            self.cut_points_[int(col)] = cuts
            logger.debug("column %d: %d cut point(s) %s", col, cuts.size, cuts.tolist())
        return self

    def transform(self, values: np.ndarray) -> np.ndarray:
        out = np.array(values, dtype=np.float64, copy=True)
        for col, cuts in self.cut_points_.items():
            out[:, col] = apply_cut_points(out[:, col], cuts)
        return out

    def fit_transform(self, values: np.ndarray, classes: np.ndarray, columns: Iterable[int]) -> np.ndarray:
        return self.fit(values, classes, columns).transform(values)
