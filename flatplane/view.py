"""Breakdown views: hierarchical aggregation of a Dataset.

A breakdown view picks one dimension whose distinct values become chart
columns and groups the rows by the remaining dimensions in schema order. The
first grouping dimension is the outermost level; the last one is the inner
(leaf) level.

Without a breakdown dimension every row of a group lands in one column, so the
view holds a single aggregate per node (`Sum(Count)` by default).

Ordering is defined purely by natural value order, so equal inputs always
produce equal views regardless of hash iteration order.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .aggregate import Aggregate, Aggregator
from .errors import DimensionError
from .schema import Dimension, Schema
from .values import Value

if TYPE_CHECKING:
    from .dataset import Dataset, Row

logger = logging.getLogger(__name__)

Contribution = tuple["Row", float]


@dataclass(frozen=True, slots=True)
class ViewNode:
    """One distinct grouping value within a BreakdownView.

    Attributes:
        value: The grouping value.
        label: Display string for `value`.
        depth: Grouping level (0 is the outermost level).
        children: Child nodes at `depth + 1`, in natural order (empty for leaves).
        aggregates: Aggregate per view column, aligned with `BreakdownView.column_labels`.
        total: Aggregate statistic applied to `aggregates`.
        row_count: Number of dataset rows under this node.
    """

    value: Value
    label: str
    depth: int
    children: tuple[ViewNode, ...]
    aggregates: tuple[float, ...]
    total: float
    row_count: int

    @property
    def is_leaf(self) -> bool:
        """Return True for nodes of the inner grouping level."""

        return not self.children

    @property
    def leaf_count(self) -> int:
        """Return the number of leaves (rendered rows) under this node."""

        if self.is_leaf:
            return 1
        return sum(child.leaf_count for child in self.children)

    @property
    def label_row(self) -> int:
        """Return the row offset, within this node's rows, that carries its label.

        The middle row is used; for an even number of rows the upper of the
        two middle rows is chosen.
        """

        return (self.leaf_count - 1) // 2

    def paths(self) -> Iterator[tuple[ViewNode, ...]]:
        """Yield root-to-leaf node paths starting at this node."""

        if self.is_leaf:
            yield (self,)
            return
        for child in self.children:
            for path in child.paths():
                yield (self, *path)


@dataclass(frozen=True, slots=True)
class BreakdownView:
    """A read-only hierarchical aggregation of a Dataset.

    Attributes:
        breakdown: The breakdown dimension, or None for a single-column view.
        grouping: Grouping dimensions, outermost first.
        measure: Optional numeric dimension aggregated instead of row counts.
        aggregate: Aggregate statistic applied per bucket.
        breakdown_values: Distinct breakdown values in natural order (empty without a breakdown).
        breakdown_labels: Display strings aligned with `breakdown_values`.
        groups: Outermost grouping nodes in natural order.
        row_count: Number of dataset rows the view was built from.
    """

    breakdown: Dimension | None
    grouping: tuple[Dimension, ...]
    measure: Dimension | None
    aggregate: Aggregator
    breakdown_values: tuple[Value, ...]
    breakdown_labels: tuple[str, ...]
    groups: tuple[ViewNode, ...]
    row_count: int

    @property
    def value_header(self) -> str:
        """Return the label describing what is aggregated."""

        if self.breakdown is None:
            return "Count" if self.measure is None else self.measure.name
        if self.measure is None:
            return f"Breakdown({self.breakdown.name})"
        return f"Breakdown({self.breakdown.name}, {self.measure.name})"

    @property
    def title(self) -> str:
        """Return the chart title, e.g. `Sum(Breakdown(stable))` or `Sum(Count)`."""

        return f"{self.aggregate.label}({self.value_header})"

    @property
    def column_labels(self) -> tuple[str, ...]:
        """Return one header per aggregate column.

        A view without a breakdown has a single, unlabelled column.
        """

        if self.breakdown is None:
            return ("",)
        return self.breakdown_labels

    def paths(self) -> Iterator[tuple[ViewNode, ...]]:
        """Yield every root-to-leaf path in rendering order."""

        for group in self.groups:
            yield from group.paths()

    def breakdown_of(self, node: ViewNode) -> dict[Value, float]:
        """Return a node's aggregates keyed by breakdown value."""

        return dict(zip(self.breakdown_values, node.aggregates))

    def peak(self, index: int) -> float:
        """Return the largest finite absolute outer-group aggregate of one column."""

        return max(
            (abs(group.aggregates[index]) for group in self.groups if math.isfinite(group.aggregates[index])),
            default=0.0,
        )


def build_breakdown_view(
    dataset: Dataset,
    dimension: int | str | None,
    *,
    measure: int | str | None = None,
    aggregate: Aggregator = Aggregate.sum,
) -> BreakdownView:
    """Group and aggregate a dataset along a breakdown dimension.

    Args:
        dataset: Source dataset (read only).
        dimension: Breakdown dimension, by position or name. None groups by
            every non-measure dimension and aggregates into a single column.
        measure: Optional numeric dimension to aggregate; each row counts as 1 when omitted.
        aggregate: Aggregate statistic applied per (group, breakdown value) bucket.

    Returns:
        A BreakdownView whose levels follow the remaining dimensions in schema order.

    Raises:
        DimensionError: When a selection is invalid or no grouping dimension remains.
    """

    schema = dataset.schema
    breakdown_index = None if dimension is None else schema.index_of(dimension)
    measure_index = resolve_measure(schema, measure, exclude=breakdown_index)

    grouping_indices = tuple(
        index for index in range(len(schema)) if index != breakdown_index and index != measure_index
    )
    if not grouping_indices:
        raise DimensionError("A breakdown view requires at least one grouping dimension.")

    breakdown: Dimension | None = None
    breakdown_values: tuple[Value, ...] = ()
    if breakdown_index is not None:
        breakdown = schema[breakdown_index]
        breakdown_values = tuple(
            sorted({row[breakdown_index] for row in dataset.rows}, key=breakdown.value_type.sort_key)
        )

    builder = _NodeBuilder(
        grouping=tuple(schema[index] for index in grouping_indices),
        grouping_indices=grouping_indices,
        breakdown_index=breakdown_index,
        breakdown_values=breakdown_values,
        aggregate=aggregate,
    )
    groups = builder.build(contributions(dataset, measure_index), depth=0)

    view = BreakdownView(
        breakdown=breakdown,
        grouping=builder.grouping,
        measure=None if measure_index is None else schema[measure_index],
        aggregate=aggregate,
        breakdown_values=breakdown_values,
        breakdown_labels=tuple(breakdown.format(value) for value in breakdown_values) if breakdown else (),
        groups=groups,
        row_count=len(dataset.rows),
    )
    logger.debug(
        "Built breakdown view %s: %d groups, %d leaves, %d columns",
        view.title,
        len(groups),
        sum(group.leaf_count for group in groups),
        len(view.column_labels),
    )
    return view


def resolve_measure(schema: Schema, measure: int | str | None, *, exclude: int | None) -> int | None:
    """Resolve the optional measure selection to a numeric dimension's position.

    Raises:
        DimensionError: When the measure is unknown, not numeric, or the excluded dimension.
    """

    if measure is None:
        return None
    index = schema.index_of(measure)
    if index == exclude:
        raise DimensionError(f"Dimension {schema[index].name!r} cannot be both breakdown and measure.")
    if not schema[index].value_type.is_numeric:
        raise DimensionError(
            f"Measure dimension {schema[index].name!r} must be numeric, got {schema[index].value_type.value}."
        )
    return index


def contributions(dataset: Dataset, measure_index: int | None) -> list[Contribution]:
    """Pair every row with what it adds to its bucket: 1 per row, or its measure value."""

    return [(row, 1.0 if measure_index is None else float(row[measure_index])) for row in dataset.rows]


def aggregate_columns(
    members: Sequence[Contribution],
    *,
    breakdown_index: int | None,
    breakdown_values: Sequence[Value],
    aggregate: Aggregator,
) -> tuple[float, ...]:
    """Aggregate contributions per breakdown value, or into one column without a breakdown.

    Breakdown values with no contributions aggregate the empty sequence.
    """

    if breakdown_index is None:
        return (aggregate.apply([contribution for _, contribution in members]),)

    buckets: dict[Value, list[float]] = defaultdict(list)
    for row, contribution in members:
        buckets[row[breakdown_index]].append(contribution)
    return tuple(aggregate.apply(buckets.get(value, [])) for value in breakdown_values)


@dataclass(frozen=True, slots=True)
class _NodeBuilder:
    """Recursive partitioner producing ViewNodes for one view."""

    grouping: tuple[Dimension, ...]
    grouping_indices: tuple[int, ...]
    breakdown_index: int | None
    breakdown_values: tuple[Value, ...]
    aggregate: Aggregator

    def build(self, members: Sequence[Contribution], *, depth: int) -> tuple[ViewNode, ...]:
        dimension = self.grouping[depth]
        column = self.grouping_indices[depth]

        partitions: dict[Value, list[Contribution]] = defaultdict(list)
        for row, contribution in members:
            partitions[row[column]].append((row, contribution))

        nodes: list[ViewNode] = []
        for value in sorted(partitions, key=dimension.value_type.sort_key):
            partition = partitions[value]
            children: tuple[ViewNode, ...] = ()
            if depth + 1 < len(self.grouping):
                children = self.build(partition, depth=depth + 1)
            aggregates = aggregate_columns(
                partition,
                breakdown_index=self.breakdown_index,
                breakdown_values=self.breakdown_values,
                aggregate=self.aggregate,
            )
            nodes.append(
                ViewNode(
                    value=value,
                    label=dimension.format(value),
                    depth=depth,
                    children=children,
                    aggregates=aggregates,
                    total=self.aggregate.apply(aggregates),
                    row_count=len(partition),
                )
            )
        return tuple(nodes)
