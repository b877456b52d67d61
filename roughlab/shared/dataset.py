#!/usr/bin/env python3
"""Read-only discretized training data consumed by the subset scorer."""

from __future__ import annotations

import datetime as dt
import logging
import types
from dataclasses import dataclass, field
from typing import List, Mapping, Sequence, Tuple

import numpy as np

from roughlab.shared.capabilities import (
    RSAR_CAPABILITIES,
    AttributeKind,
    Capabilities,
    infer_attribute_kind,
    is_missing,
)
from roughlab.shared.discretize import MDLDiscretizer
from roughlab.shared.errors import InvalidDataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Dataset:
    """Discretized rows plus the label position.

    ``values`` holds one row per instance, including the label column, as a
    read-only float64 array. Labels are stored as class codes; ``label_values``
    maps each code back to the raw label. ``cut_points`` is a read-only
    mapping from discretized column to its read-only cut point array.
    """

    values: np.ndarray
    label_index: int
    attribute_names: Tuple[str, ...] = ()
    attribute_kinds: Tuple[AttributeKind, ...] = ()
    label_values: Tuple[object, ...] = ()
    cut_points: Mapping[int, np.ndarray] = field(default_factory=dict)

    def __post_init__(self) -> None:
        values = np.array(self.values, dtype=np.float64, copy=True)
        if values.ndim != 2:
            raise InvalidDataError("values must be a 2D array")
        if not 0 <= self.label_index < values.shape[1]:
            raise InvalidDataError(
                f"label_index {self.label_index} out of range for width {values.shape[1]}"
            )
        if np.isnan(values[:, self.label_index]).any():
            raise InvalidDataError("rows with a missing label must be removed before storage")
        values.flags.writeable = False
        object.__setattr__(self, "values", values)
        if not self.attribute_names:
            names = tuple(f"attr{idx}" for idx in range(values.shape[1]))
            object.__setattr__(self, "attribute_names", names)
        elif len(self.attribute_names) != values.shape[1]:
            raise InvalidDataError("attribute_names must name every column")

        cut_points = {}
        for idx, cuts in self.cut_points.items():
            cuts = np.array(cuts, dtype=np.float64, copy=True)
            cuts.flags.writeable = False
            cut_points[int(idx)] = cuts
        object.__setattr__(self, "cut_points", types.MappingProxyType(cut_points))

    @property
    def n_rows(self) -> int:
        return int(self.values.shape[0])

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def labels(self) -> np.ndarray:
        return self.values[:, self.label_index]

    @property
    def attribute_indices(self) -> Tuple[int, ...]:
        """Every column index except the label's."""
        return tuple(idx for idx in range(self.width) if idx != self.label_index)

    def project(self, indices: Sequence[int]) -> np.ndarray:
        """Signatures of every row restricted to ``indices`` (one row each)."""
        return self.values[:, list(indices)]


def _encode_nominal(column: Sequence[object]) -> Tuple[np.ndarray, Tuple[object, ...]]:
    present = sorted({value for value in column if not is_missing(value)}, key=str)
    codes = {value: float(code) for code, value in enumerate(present)}
    encoded = [np.nan if is_missing(value) else codes[value] for value in column]
    return np.asarray(encoded, dtype=np.float64), tuple(present)


def _encode_date(value: object) -> float:
    if isinstance(value, dt.datetime):
        # Naive datetimes are UTC, like plain dates.
        if value.tzinfo is None:
            value = value.replace(tzinfo=dt.timezone.utc)
        return value.timestamp()
    return dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc).timestamp()


def _encode_column(column: Sequence[object], kind: AttributeKind) -> np.ndarray:
    if kind is AttributeKind.NOMINAL:
        return _encode_nominal(column)[0]
    if kind is AttributeKind.DATE:
        encoded = [np.nan if is_missing(value) else _encode_date(value) for value in column]
    else:
        encoded = [np.nan if is_missing(value) else float(value) for value in column]
    return np.asarray(encoded, dtype=np.float64)


def _encode_labels(column: Sequence[object], kind: AttributeKind) -> Tuple[np.ndarray, Tuple[object, ...]]:
    if kind is AttributeKind.NOMINAL:
        present = sorted(set(column), key=str)
    else:
        present = sorted(set(column))
    codes = {value: float(code) for code, value in enumerate(present)}
    return np.asarray([codes[value] for value in column], dtype=np.float64), tuple(present)


def build(
    raw_rows: Sequence[Sequence[object]],
    label_index: int,
    *,
    attribute_names: Sequence[str] | None = None,
    use_better_encoding: bool = True,
    capabilities: Capabilities = RSAR_CAPABILITIES,
) -> Dataset:
    """Validate, encode and discretize ``raw_rows`` into a :class:`Dataset`.

    Rows with a missing label are dropped before discretization. Numeric and
    date attributes are binned with :class:`MDLDiscretizer`; nominal
    attributes keep their (sorted) value codes. ``raw_rows`` is not modified.
    """
    rows: List[Tuple[object, ...]] = [tuple(row) for row in raw_rows]
    if not rows:
        raise InvalidDataError("Dataset has no instances.")

    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise InvalidDataError("All rows must have the same number of attributes.")
    if not 0 <= label_index < width:
        raise InvalidDataError(f"label_index {label_index} out of range for width {width}.")
    if attribute_names is not None and len(attribute_names) != width:
        raise InvalidDataError("attribute_names must name every column.")

    columns = list(zip(*rows))
    kinds = tuple(infer_attribute_kind(column) for column in columns)
    has_missing = any(
        is_missing(value)
        for idx, column in enumerate(columns)
        if idx != label_index
        for value in column
    )
    capabilities.test_with_fail(kinds, label_index, has_missing=has_missing)

    kept = [row for row in rows if not is_missing(row[label_index])]
    dropped = len(rows) - len(kept)
    if not kept:
        raise InvalidDataError("No instances left after removing rows with a missing label.")
    if dropped:
        logger.info("Dropped %d row(s) with a missing label", dropped)

    columns = list(zip(*kept))
    values = np.empty((len(kept), width), dtype=np.float64)
    label_codes, label_values = _encode_labels(columns[label_index], kinds[label_index])
    for idx, column in enumerate(columns):
        if idx == label_index:
            values[:, idx] = label_codes
        else:
            values[:, idx] = _encode_column(column, kinds[idx])

    numeric_columns = [
        idx
        for idx, kind in enumerate(kinds)
        if idx != label_index and kind in (AttributeKind.NUMERIC, AttributeKind.DATE)
    ]
    discretizer = MDLDiscretizer(use_better_encoding=use_better_encoding)
    values = discretizer.fit_transform(values, label_codes.astype(np.int64), numeric_columns)

    names = tuple(attribute_names) if attribute_names is not None else ()
    dataset = Dataset(
        values=values,
        label_index=label_index,
        attribute_names=names,
        attribute_kinds=kinds,
        label_values=label_values,
        cut_points=dict(discretizer.cut_points_),
    )
    logger.info(
        "Built dataset | rows=%d width=%d classes=%d discretized=%s",
        dataset.n_rows,
        dataset.width,
        len(label_values),
        {dataset.attribute_names[idx]: int(cuts.size) for idx, cuts in dataset.cut_points.items()},
    )
    return dataset
