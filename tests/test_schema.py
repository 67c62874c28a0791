"""Tests for Schema construction, dimension lookup, and row validation."""

from __future__ import annotations

import math

import pytest

from flatplane import Dimension, DimensionError, RowTypeError, Schema, SchemaError, ValueType

pytestmark = pytest.mark.unit


def test_schema_with_names_pairs_names_and_types() -> None:
    """Schema.with_names accepts ValueTypes and their string identifiers."""

    schema = Schema.with_names(["animal", "length"], ["string", ValueType.uint])

    assert schema.names == ("animal", "length")
    assert schema[1] == Dimension(name="length", value_type=ValueType.uint)
    assert len(schema) == 2


def test_schema_factories_cover_two_to_four_dimensions() -> None:
    """Fixed-arity factories build schemas in declaration order."""

    assert Schema.two(("a", "string"), ("b", "int")).names == ("a", "b")
    assert Schema.three(("a", "string"), ("b", "int"), ("c", "bool")).names == ("a", "b", "c")
    four = Schema.four(("a", "string"), ("b", "int"), ("c", "bool"), ("d", "float"))
    assert [dimension.value_type for dimension in four] == [
        ValueType.string,
        ValueType.integer,
        ValueType.boolean,
        ValueType.real,
    ]


def test_schema_rejects_duplicate_names() -> None:
    """Duplicate dimension names are a construction error."""

    with pytest.raises(SchemaError, match="Duplicate"):
        Schema.two(("animal", "string"), ("animal", "uint"))


def test_schema_rejects_single_dimension_and_arity_mismatch() -> None:
    """Schemas need two dimensions and one type per name."""

    with pytest.raises(SchemaError):
        Schema.with_names(["animal"], ["string"])
    with pytest.raises(SchemaError, match="2 names but 3 types"):
        Schema.with_names(["animal", "length"], ["string", "uint", "bool"])


def test_schema_rejects_unknown_value_type() -> None:
    """Unknown type identifiers are reported with the supported set."""

    with pytest.raises(SchemaError, match="Unknown value type"):
        Schema.two(("animal", "string"), ("length", "decimal"))


def test_index_of_resolves_names_and_positions() -> None:
    """Dimension selections resolve by name or zero-based position."""

    schema = Schema.three(("animal", "string"), ("length", "uint"), ("stable", "bool"))

    assert schema.index_of("stable") == 2
    assert schema.index_of(0) == 0
    with pytest.raises(DimensionError):
        schema.index_of(3)
    with pytest.raises(DimensionError):
        schema.index_of("colour")
    with pytest.raises(DimensionError):
        schema.index_of(True)


def test_validate_row_normalizes_floats() -> None:
    """Integers are accepted for float dimensions and stored as floats."""

    schema = Schema.two(("name", "string"), ("weight", "float"))

    row = schema.validate_row(("cat", 4))

    assert row == ("cat", 4.0)
    assert isinstance(row[1], float)


@pytest.mark.parametrize("weight", [math.inf, -math.inf, math.nan, 10**400])
def test_validate_row_rejects_non_finite_floats(weight: object) -> None:
    """Float dimensions only store finite numbers."""

    schema = Schema.three(("animal", "string"), ("weight", "float"), ("stable", "bool"))

    with pytest.raises(RowTypeError, match="finite") as excinfo:
        schema.validate_row(("whale", weight, True))

    assert excinfo.value.dimension == "weight"


@pytest.mark.parametrize(
    "row",
    [
        ("whale", -1, True),
        ("whale", True, True),
        ("whale", 4, "yes"),
        (4, 4, True),
        ("whale", 4),
        "whale",
    ],
)
def test_validate_row_rejects_mismatches(row: object) -> None:
    """Wrong types, negative uints, bools as numbers, and wrong arity are rejected."""

    schema = Schema.three(("animal", "string"), ("length", "uint"), ("stable", "bool"))

    with pytest.raises(RowTypeError):
        schema.validate_row(row)


def test_row_type_error_records_position_and_dimension() -> None:
    """Field-level failures report where they happened."""

    schema = Schema.three(("animal", "string"), ("length", "uint"), ("stable", "bool"))

    with pytest.raises(RowTypeError) as excinfo:
        schema.validate_row(("whale", "four", True))

    assert excinfo.value.position == 1
    assert excinfo.value.dimension == "length"
    assert isinstance(excinfo.value, TypeError)


def test_value_type_format() -> None:
    """Display strings are stable for every value type."""

    assert ValueType.boolean.format(True) == "true"
    assert ValueType.boolean.format(False) == "false"
    assert ValueType.real.format(4.0) == "4"
    assert ValueType.real.format(1.5) == "1.5"
    assert ValueType.integer.format(-3) == "-3"
