"""Datasets and their append-only builder.

A Dataset is built once through a DatasetBuilder and is immutable afterwards,
so any number of views may share it without copying or synchronization.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass

from .aggregate import Aggregate, Aggregator
from .histogram import build_histogram
from .schema import Schema
from .values import Value
from .view import BreakdownView, build_breakdown_view

logger = logging.getLogger(__name__)

Row = tuple[Value, ...]


@dataclass(frozen=True, slots=True)
class Dataset:
    """Immutable, ordered rows validated against one Schema.

    Args:
        schema: Schema every row conforms to.
        rows: Rows in insertion order (duplicates preserved).
    """

    schema: Schema
    rows: tuple[Row, ...] = ()

    @staticmethod
    def builder(schema: Schema) -> DatasetBuilder:
        """Return a new builder bound to `schema`."""

        return DatasetBuilder(schema)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    def column(self, selection: int | str) -> tuple[Value, ...]:
        """Return every value of one dimension, in row order."""

        index = self.schema.index_of(selection)
        return tuple(row[index] for row in self.rows)

    def breakdown(
        self,
        dimension: int | str,
        *,
        measure: int | str | None = None,
        aggregate: Aggregator = Aggregate.sum,
    ) -> BreakdownView:
        """Derive a breakdown view of this dataset.

        Args:
            dimension: Breakdown dimension (position or name); its values become chart columns.
            measure: Optional numeric dimension whose values are aggregated instead of row counts.
            aggregate: Aggregate statistic applied per (group, breakdown value).

        Returns:
            A BreakdownView grouped by the remaining dimensions in schema order.

        Raises:
            DimensionError: When the selection is invalid or leaves no grouping dimension.
        """

        return build_breakdown_view(self, dimension, measure=measure, aggregate=aggregate)

    def view(
        self,
        *,
        measure: int | str | None = None,
        aggregate: Aggregator = Aggregate.sum,
    ) -> BreakdownView:
        """Derive a single-column view grouped by every non-measure dimension.

        Rows are counted unless `measure` names a numeric dimension, so the
        default title is `Sum(Count)`.

        Raises:
            DimensionError: When the measure is invalid or leaves no grouping dimension.
        """

        return build_breakdown_view(self, None, measure=measure, aggregate=aggregate)

    def histogram(
        self,
        dimension: int | str,
        bins: int,
        *,
        breakdown: int | str | None = None,
        measure: int | str | None = None,
        aggregate: Aggregator = Aggregate.sum,
    ) -> BreakdownView:
        """Bin a numeric dimension into `bins` equal-width ranges (see `build_histogram`)."""

        return build_histogram(
            self, dimension, bins, breakdown=breakdown, measure=measure, aggregate=aggregate
        )


class DatasetBuilder:
    """Append-only accumulator producing an immutable Dataset.

    Rows are validated on every `add`; a rejected row leaves the builder
    untouched so it remains usable. Once `build()` has been called the builder
    is finalized and any further use is a programming error.
    """

    def __init__(self, schema: Schema) -> None:
        """Initialize a builder bound to a schema."""

        self._schema = schema
        self._rows: list[Row] = []
        self._finalized = False

    @property
    def schema(self) -> Schema:
        """Return the schema rows are validated against."""

        return self._schema

    def __len__(self) -> int:
        return len(self._rows)

    def update(self, row: Sequence[object]) -> None:
        """Validate and append a row.

        Raises:
            RowTypeError: When the row does not match the schema.
            RuntimeError: When the builder has already been finalized.
        """

        self._ensure_open()
        self._rows.append(self._schema.validate_row(row))

    def add(self, row: Sequence[object]) -> DatasetBuilder:
        """Validate and append a row, returning the builder for chaining."""

        self.update(row)
        return self

    def extend(self, rows: Iterable[Sequence[object]]) -> DatasetBuilder:
        """Append rows in order, stopping at the first invalid row."""

        for row in rows:
            self.update(row)
        return self

    def build(self) -> Dataset:
        """Finalize the builder into an immutable Dataset.

        Raises:
            RuntimeError: When the builder has already been finalized.
        """

        self._ensure_open()
        self._finalized = True
        dataset = Dataset(schema=self._schema, rows=tuple(self._rows))
        logger.debug("Built dataset with %d rows over %s", len(dataset), self._schema.names)
        return dataset

    def _ensure_open(self) -> None:
        if self._finalized:
            raise RuntimeError("DatasetBuilder has already been built; create a new builder to add rows.")
