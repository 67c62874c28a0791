"""Tests for histogram binning and histogram views."""

from __future__ import annotations

import pytest

from flatplane import Bin, Dataset, DimensionError, Schema, ValueType, bin_ranges

pytestmark = pytest.mark.unit


def test_integer_bins_round_their_width_up() -> None:
    """Integer dimensions get whole-number bins; only the last one is closed."""

    assert bin_ranges([1, 2, 3], 3, ValueType.integer) == (
        Bin(1, 2),
        Bin(2, 3),
        Bin(3, 4, closed=True),
    )
    assert bin_ranges([1, 5], 3, ValueType.uint) == (
        Bin(1, 3),
        Bin(3, 5),
        Bin(5, 7, closed=True),
    )


def test_float_bins_split_the_range_evenly() -> None:
    """Float dimensions split `[minimum, maximum]` into equal widths."""

    ranges = bin_ranges([15.0, 70.0, 20.0], 2, ValueType.real)

    assert ranges == (Bin(15.0, 42.5), Bin(42.5, 70.0, closed=True))
    weight = Schema.two(("weight", "float"), ("name", "string"))[0]
    assert [item.label(weight) for item in ranges] == ["[15, 42.5)", "[42.5, 70]"]


def test_degenerate_inputs() -> None:
    """No values means no bins; a single value or a bin count below one means one bin."""

    assert bin_ranges([], 4, ValueType.integer) == ()
    assert bin_ranges([7, 7], 4, ValueType.integer) == (Bin(7, 7, closed=True),)
    assert bin_ranges([1, 3], 0, ValueType.integer) == (Bin(1, 3, closed=True),)


def test_bin_contains_respects_its_bounds() -> None:
    """Half-open bins exclude their upper bound, closed bins include it."""

    assert Bin(1, 3).contains(1)
    assert not Bin(1, 3).contains(3)
    assert Bin(1, 3, closed=True).contains(3)


def test_histogram_counts_rows_per_bin(animal_dataset: Dataset) -> None:
    """Each row counts once towards the bin holding its value."""

    view = animal_dataset.histogram("length", 3)

    assert view.title == "Sum(Count)"
    assert [dimension.name for dimension in view.grouping] == ["length"]
    assert [(group.label, group.aggregates) for group in view.groups] == [
        ("[1, 3)", (7.0,)),
        ("[3, 5)", (4.0,)),
        ("[5, 7]", (6.0,)),
    ]
    assert sum(group.row_count for group in view.groups) == len(animal_dataset)


def test_histogram_with_breakdown(animal_dataset: Dataset) -> None:
    """A breakdown dimension splits every bin into columns."""

    view = animal_dataset.histogram("length", 3, breakdown="stable")

    assert view.title == "Sum(Breakdown(stable))"
    assert view.breakdown_labels == ("false", "true")
    assert [group.aggregates for group in view.groups] == [(4.0, 3.0), (3.0, 1.0), (0.0, 6.0)]


def test_histogram_keeps_empty_bins_and_may_measure_itself() -> None:
    """Bins without rows aggregate to zero; the binned dimension can also be the measure."""

    schema = Schema.two(("delta", "int"), ("team", "string"))
    dataset = Dataset.builder(schema).extend([(-1, "ants"), (1, "bees"), (1, "ants")]).build()

    view = dataset.histogram("delta", 3, measure="delta")

    assert view.title == "Sum(delta)"
    assert [(group.label, group.aggregates, group.row_count) for group in view.groups] == [
        ("[-1, 0)", (-1.0,), 1),
        ("[0, 1)", (0.0,), 0),
        ("[1, 2]", (2.0,), 2),
    ]


def test_histogram_of_empty_dataset_has_no_bins(animal_schema: Schema) -> None:
    """An empty dataset produces a histogram without bins."""

    view = Dataset.builder(animal_schema).build().histogram("length", 4)

    assert view.groups == ()
    assert view.row_count == 0


def test_histogram_rejects_invalid_selections(animal_dataset: Dataset) -> None:
    """Only numeric dimensions bin, and the binned dimension cannot be the breakdown."""

    with pytest.raises(DimensionError, match="numeric"):
        animal_dataset.histogram("animal", 2)
    with pytest.raises(DimensionError, match="binned"):
        animal_dataset.histogram("length", 2, breakdown="length")
    with pytest.raises(DimensionError):
        animal_dataset.histogram("length", 2, breakdown="stable", measure="stable")
