#!/usr/bin/env python3
"""Hashed index of row signatures and their label consistency.

A row's signature is its values restricted to an attribute subset. Rows are
grouped by a 64-bit hash of the signature rather than by the signature
itself, so two different signatures that happen to share a hash are counted
as one group. With a well-mixed 64-bit hash that is rare, and it keeps the
index down to one small entry per distinct hash. Switching to an exact index
keyed by ``tuple(signature)`` removes the approximation at the cost of
storing every key.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence

import numpy as np

DEFAULT_LOAD_FACTOR = 0.75

_SEED = np.uint64(0x9E3779B97F4A7C15)
_MULTIPLIER = np.uint64(31)


def _mix64(h: np.ndarray) -> np.ndarray:
    """splitmix64 finalizer, element-wise on a uint64 array."""
    h = h ^ (h >> np.uint64(30))
    h = h * np.uint64(0xBF58476D1CE4E5B9)
    h = h ^ (h >> np.uint64(27))
    h = h * np.uint64(0x94D049BB133111EB)
    return h ^ (h >> np.uint64(31))


def canonical_bits(column: np.ndarray) -> np.ndarray:
    """IEEE-754 bit patterns with ``-0.0`` folded into ``0.0`` and one NaN pattern."""
    column = np.asarray(column, dtype=np.float64) + 0.0
    column = np.ascontiguousarray(np.where(np.isnan(column), np.nan, column))
    return column.view(np.uint64)


def signature_hashes(signatures: np.ndarray) -> np.ndarray:
    """Order-sensitive 64-bit hash of every row of ``signatures``.

    ``signatures`` has shape ``(n_rows, n_attributes)``. Equal rows always
    hash equal; swapping two values in a row changes its hash.
    """
    signatures = np.asarray(signatures, dtype=np.float64)
    if signatures.ndim != 2:
        raise ValueError("signatures must be a 2D array")
    h = np.full(signatures.shape[0], _SEED, dtype=np.uint64)
    for col in range(signatures.shape[1]):
        h = h * _MULTIPLIER + _mix64(canonical_bits(signatures[:, col]))
    return _mix64(h ^ np.uint64(signatures.shape[1]))


def initial_capacity(n_rows: int, load_factor: float = DEFAULT_LOAD_FACTOR) -> int:
    return int(math.ceil(n_rows * (1.0 / load_factor)))


@dataclass
class SignatureEntry:
    """Statistics for every row whose signature landed on one hash."""

    first_label: float
    consistent: bool = True
    count: int = 1

    def observe(self, label: float) -> None:
        # Once inconsistent, always inconsistent.
        if label != self.first_label:
            self.consistent = False
        self.count += 1


class SignatureIndex:
    """Mapping from signature hash to :class:`SignatureEntry`.

    Built fresh for every subset evaluation and dropped afterwards.
    ``capacity`` is only a sizing hint recorded for diagnostics; Python dicts
    grow on demand.
    """

    def __init__(self, capacity: int = 0) -> None:
        self.capacity = int(capacity)
        self._entries: Dict[int, SignatureEntry] = {}

    def add(self, key: int, label: float) -> None:
        entry = self._entries.get(key)
        if entry is None:
            self._entries[key] = SignatureEntry(first_label=label)
        else:
            entry.observe(label)

    def add_all(self, keys: Iterable[int], labels: Iterable[float]) -> None:
        for key, label in zip(keys, labels):
            self.add(key, label)

    def __len__(self) -> int:
        return len(self._entries)

    def consistent_total(self) -> int:
        """Number of rows whose signature never met a conflicting label."""
        return sum(entry.count for entry in self._entries.values() if entry.consistent)

    def inconsistent_signatures(self) -> int:
        return sum(1 for entry in self._entries.values() if not entry.consistent)


def index_rows(signatures: np.ndarray, labels: Sequence[float], capacity: int = 0) -> SignatureIndex:
    """Hash every signature row and feed it, in order, into a new index."""
    keys = signature_hashes(signatures)
    labels = np.asarray(labels, dtype=np.float64)
    if keys.shape[0] != labels.shape[0]:
        raise ValueError("signatures and labels must have matching first dimension")
    index = SignatureIndex(capacity)
    index.add_all(keys.tolist(), labels.tolist())
    return index
