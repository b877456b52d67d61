import datetime as dt

import numpy as np
import pytest

from roughlab.shared.capabilities import AttributeKind, Capabilities, Capability
from roughlab.shared.dataset import Dataset, _encode_column, build
from roughlab.shared.errors import InvalidDataError


def test_build_rejects_empty_input():
    with pytest.raises(InvalidDataError, match="no instances"):
        build([], 0)


def test_build_rejects_ragged_rows():
    with pytest.raises(InvalidDataError):
        build([("a", "x"), ("b",)], 1)


def test_build_rejects_label_index_out_of_range():
    with pytest.raises(InvalidDataError):
        build([("a", "x")], 2)


def test_build_rejects_when_every_label_is_missing():
    with pytest.raises(InvalidDataError):
        build([("a", None), ("b", float("nan"))], 1)


def test_build_drops_rows_with_missing_label_without_mutating_input():
    raw = [["a", "yes"], ["b", None], ["a", "no"]]
    snapshot = [list(row) for row in raw]
    dataset = build(raw, 1)

    assert raw == snapshot
    assert dataset.n_rows == 2
    assert dataset.width == 2
    assert dataset.label_values == ("no", "yes")
    np.testing.assert_array_equal(dataset.labels, [1.0, 0.0])


def test_nominal_attributes_are_coded_in_sorted_order():
    dataset = build([("b", "x"), ("a", "y"), ("b", "y"), (None, "x")], 1)
    np.testing.assert_array_equal(dataset.values[:3, 0], [1.0, 0.0, 1.0])
    assert np.isnan(dataset.values[3, 0])
    assert dataset.attribute_kinds == (AttributeKind.NOMINAL, AttributeKind.NOMINAL)
    assert dataset.cut_points == {}


def test_numeric_labels_become_class_codes():
    dataset = build([("a", 2.5), ("b", -1.0), ("c", 2.5)], 1)
    assert dataset.label_values == (-1.0, 2.5)
    np.testing.assert_array_equal(dataset.labels, [1.0, 0.0, 1.0])


def test_numeric_attributes_are_discretized():
    rows = [(float(x), "hi" if x > 5 else "lo") for x in range(1, 11)]
    dataset = build(rows, 1, attribute_names=["x", "band"])

    assert dataset.attribute_names == ("x", "band")
    np.testing.assert_allclose(dataset.cut_points[0], [5.5])
    np.testing.assert_array_equal(dataset.values[:, 0], [0] * 5 + [1] * 5)


def test_date_attributes_are_discretized_like_numbers():
    start = dt.date(2024, 1, 1)
    rows = [(start + dt.timedelta(days=i), "late" if i >= 5 else "early") for i in range(10)]
    dataset = build(rows, 1)
    assert dataset.attribute_kinds[0] is AttributeKind.DATE
    assert dataset.cut_points[0].size == 1
    np.testing.assert_array_equal(dataset.values[:, 0], [0] * 5 + [1] * 5)


def test_plain_encoding_is_forwarded_to_the_discretizer():
    rows = [(0.0, "a")] * 4 + [(0.0, "b")] * 2 + [(1.0, "b")] * 6
    assert build(rows, 1).cut_points[0].size == 1
    assert build(rows, 1, use_better_encoding=False).cut_points[0].size == 0


def test_mixed_column_kinds_are_rejected():
    with pytest.raises(InvalidDataError, match="mixes"):
        build([(1.0, "a"), ("x", "b")], 1)


def test_unsupported_value_types_are_rejected():
    with pytest.raises(InvalidDataError, match="Unsupported"):
        build([({"k": 1}, "a")], 1)


def test_capabilities_are_checked():
    no_dates = Capabilities(frozenset({Capability.NOMINAL_ATTRIBUTES, Capability.NOMINAL_CLASS}))
    with pytest.raises(InvalidDataError, match="date attributes"):
        build([(dt.date(2024, 1, 1), "a")], 1, capabilities=no_dates)
    with pytest.raises(InvalidDataError, match="missing values"):
        build([(None, "a"), ("x", "b")], 1, capabilities=no_dates)


def test_date_labels_are_not_supported():
    with pytest.raises(InvalidDataError, match="date class"):
        build([("a", dt.date(2024, 1, 1))], 1)


def test_attribute_names_must_match_width():
    with pytest.raises(InvalidDataError):
        build([("a", "b")], 1, attribute_names=["only-one"])


def test_dataset_values_are_read_only():
    dataset = Dataset(values=np.array([[1.0, 0.0], [2.0, 1.0]]), label_index=1)
    assert not dataset.values.flags.writeable
    with pytest.raises(ValueError):
        dataset.values[0, 0] = 5.0
    assert dataset.attribute_names == ("attr0", "attr1")
    assert dataset.attribute_indices == (0,)


def test_dataset_copies_its_input():
    source = np.array([[1.0, 0.0], [2.0, 1.0]])
    dataset = Dataset(values=source, label_index=1)
    source[0, 0] = 9.0
    assert dataset.values[0, 0] == 1.0


def test_dataset_rejects_missing_labels_and_bad_label_index():
    with pytest.raises(InvalidDataError):
        Dataset(values=np.array([[1.0, np.nan]]), label_index=1)
    with pytest.raises(InvalidDataError):
        Dataset(values=np.array([[1.0, 0.0]]), label_index=2)


def test_project_returns_signatures_in_given_order():
    dataset = Dataset(values=np.array([[1.0, 2.0, 3.0, 0.0]]), label_index=3)
    np.testing.assert_array_equal(dataset.project((0, 2)), [[1.0, 3.0]])


def test_build_with_hundreds_of_numeric_labels():
    dataset = build([(float(i), float(i)) for i in range(700)], 1)
    assert dataset.n_rows == 700
    assert len(dataset.label_values) == 700
    assert np.all(np.diff(dataset.cut_points[0]) > 0)


def test_naive_datetimes_are_encoded_as_utc_like_dates():
    column = [dt.date(2024, 1, 2), dt.datetime(2024, 1, 2, 1, 0), None]
    encoded = _encode_column(column, AttributeKind.DATE)
    np.testing.assert_array_equal(encoded[:2], [1704153600.0, 1704157200.0])
    assert np.isnan(encoded[2])
    aware = dt.datetime(2024, 1, 2, 3, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
    assert _encode_column([aware], AttributeKind.DATE)[0] == 1704157200.0


def test_dataset_cut_points_are_read_only():
    cuts = np.array([0.5])
    dataset = Dataset(values=np.array([[0.0, 0.0], [1.0, 1.0]]), label_index=1, cut_points={0: cuts})
    cuts[0] = 9.0
    np.testing.assert_array_equal(dataset.cut_points[0], [0.5])
    with pytest.raises(TypeError):
        dataset.cut_points[1] = np.array([2.0])
    with pytest.raises(ValueError):
        dataset.cut_points[0][0] = 3.0

    built = build([(float(x), "hi" if x > 5 else "lo") for x in range(1, 11)], 1)
    assert not built.cut_points[0].flags.writeable
