"""Pytest fixtures and marker enforcement shared across the test suite."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from flatplane import Dataset, Schema

ANIMAL_ROWS: tuple[tuple[str, int, bool], ...] = (
    ("whale", 4, True),
    ("shark", 4, False),
    ("shark", 1, False),
    ("shark", 1, True),
    ("shark", 1, True),
    ("shark", 1, True),
    ("tiger", 4, False),
    ("tiger", 4, False),
    ("tiger", 5, True),
    ("tiger", 5, True),
    ("tiger", 5, True),
    ("tiger", 5, True),
    ("tiger", 5, True),
    ("tiger", 5, True),
    ("tiger", 1, False),
    ("tiger", 1, False),
    ("tiger", 1, False),
)


@pytest.fixture
def animal_schema() -> Schema:
    """Return the `(animal, length, stable)` schema."""

    return Schema.three(("animal", "string"), ("length", "uint"), ("stable", "bool"))


@pytest.fixture
def animal_dataset(animal_schema: Schema) -> Dataset:
    """Return the 17-row animal dataset."""

    return Dataset.builder(animal_schema).extend(ANIMAL_ROWS).build()


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no filesystem access.
    - `integration`: tests touching the filesystem or the full pipeline.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
