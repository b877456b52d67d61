import datetime as dt

import numpy as np

from roughlab.shared.capabilities import (
    RSAR_CAPABILITIES,
    AttributeKind,
    Capability,
    infer_attribute_kind,
    is_missing,
)


def test_rsar_capability_declaration():
    for cap in (
        Capability.MISSING_VALUES,
        Capability.NOMINAL_ATTRIBUTES,
        Capability.NUMERIC_ATTRIBUTES,
        Capability.DATE_ATTRIBUTES,
        Capability.NOMINAL_CLASS,
        Capability.NUMERIC_CLASS,
    ):
        assert RSAR_CAPABILITIES.supports(cap)
    assert not RSAR_CAPABILITIES.supports(Capability.DATE_CLASS)
    assert "numeric class" in str(RSAR_CAPABILITIES)


def test_missing_values():
    assert is_missing(None)
    assert is_missing(float("nan"))
    assert is_missing(np.float32("nan"))
    assert not is_missing(0.0)
    assert not is_missing("")


def test_infer_attribute_kind():
    assert infer_attribute_kind([1, 2.5, None]) is AttributeKind.NUMERIC
    assert infer_attribute_kind([np.int64(3), np.float64(1.0)]) is AttributeKind.NUMERIC
    assert infer_attribute_kind(["a", None, "b"]) is AttributeKind.NOMINAL
    assert infer_attribute_kind([True, False]) is AttributeKind.NOMINAL
    assert infer_attribute_kind([dt.date(2020, 1, 1), dt.datetime(2021, 5, 2, 3, 4)]) is AttributeKind.DATE
    assert infer_attribute_kind([None, None]) is AttributeKind.NUMERIC
