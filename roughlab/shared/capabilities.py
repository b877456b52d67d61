#!/usr/bin/env python3
"""Attribute kinds and the static capability declaration of the subset scorer.

The declaration is informational for a hosting search framework, but
:func:`roughlab.shared.dataset.build` also checks raw data against it before
anything is encoded.
"""

from __future__ import annotations

import datetime as dt
import enum
import math
import numbers
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Sequence

import numpy as np

from roughlab.shared.errors import InvalidDataError


class AttributeKind(enum.Enum):
    NOMINAL = "nominal"
    NUMERIC = "numeric"
    DATE = "date"


class Capability(enum.Enum):
    MISSING_VALUES = "missing values"
    NOMINAL_ATTRIBUTES = "nominal attributes"
    NUMERIC_ATTRIBUTES = "numeric attributes"
    DATE_ATTRIBUTES = "date attributes"
    NOMINAL_CLASS = "nominal class"
    NUMERIC_CLASS = "numeric class"
    DATE_CLASS = "date class"


_ATTRIBUTE_CAPABILITY = {
    AttributeKind.NOMINAL: Capability.NOMINAL_ATTRIBUTES,
    AttributeKind.NUMERIC: Capability.NUMERIC_ATTRIBUTES,
    AttributeKind.DATE: Capability.DATE_ATTRIBUTES,
}

_CLASS_CAPABILITY = {
    AttributeKind.NOMINAL: Capability.NOMINAL_CLASS,
    AttributeKind.NUMERIC: Capability.NUMERIC_CLASS,
    AttributeKind.DATE: Capability.DATE_CLASS,
}


def is_missing(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, (float, np.floating)) and math.isnan(value)


def value_kind(value: object) -> AttributeKind:
    """Classify a single non-missing raw value."""
    if isinstance(value, (str, bool, np.bool_)):
        return AttributeKind.NOMINAL
    if isinstance(value, (dt.date, dt.datetime)):
        return AttributeKind.DATE
    if isinstance(value, numbers.Real):
        return AttributeKind.NUMERIC
    raise InvalidDataError(f"Unsupported attribute value {value!r} of type {type(value).__name__}.")


def infer_attribute_kind(column: Iterable[object]) -> AttributeKind:
    """Infer a column's kind from its non-missing values.

    A column with no observed values is treated as numeric; a column that
    mixes kinds is rejected.
    """
    kinds = {value_kind(value) for value in column if not is_missing(value)}
    if not kinds:
        return AttributeKind.NUMERIC
    if len(kinds) > 1:
        names = sorted(kind.value for kind in kinds)
        raise InvalidDataError(f"Column mixes attribute kinds: {', '.join(names)}.")
    return kinds.pop()


@dataclass(frozen=True)
class Capabilities:
    enabled: FrozenSet[Capability]

    def supports(self, capability: Capability) -> bool:
        return capability in self.enabled

    def test_with_fail(
        self,
        kinds: Sequence[AttributeKind],
        label_index: int,
        *,
        has_missing: bool,
    ) -> None:
        """Raise :class:`InvalidDataError` if the data needs a capability we lack."""
        for idx, kind in enumerate(kinds):
            if idx == label_index:
                needed = _CLASS_CAPABILITY[kind]
            else:
                needed = _ATTRIBUTE_CAPABILITY[kind]
            if not self.supports(needed):
                raise InvalidDataError(f"Cannot handle {needed.value} (column {idx}).")
        if has_missing and not self.supports(Capability.MISSING_VALUES):
            raise InvalidDataError(f"Cannot handle {Capability.MISSING_VALUES.value}.")

    def __str__(self) -> str:
        names = sorted(cap.value for cap in self.enabled)
        return "Capabilities: " + ", ".join(names)


RSAR_CAPABILITIES = Capabilities(
    frozenset(
        {
            Capability.MISSING_VALUES,
            Capability.NOMINAL_ATTRIBUTES,
            Capability.NUMERIC_ATTRIBUTES,
            Capability.DATE_ATTRIBUTES,
            Capability.NOMINAL_CLASS,
            Capability.NUMERIC_CLASS,
        }
    )
)
