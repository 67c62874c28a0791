"""Histograms: a numeric dimension binned into equal-width ranges.

A histogram is an ordinary BreakdownView with a single grouping level whose
nodes are the bins, so BarChart renders it like any other view:

            Sum(Count)
    length
    [1, 3)  *******
    [3, 5)  ****
    [5, 7]  ******

Bins cover `[minimum, maximum]` of the binned dimension. Every bin is
half-open except the last one, which also holds the maximum. Integer
dimensions round the bin width up so bounds stay whole numbers.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .aggregate import Aggregate, Aggregator
from .errors import DimensionError
from .schema import Dimension
from .values import Value, ValueType
from .view import (
    BreakdownView,
    Contribution,
    ViewNode,
    aggregate_columns,
    contributions,
    resolve_measure,
)

if TYPE_CHECKING:
    from .dataset import Dataset

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Bin:
    """One range of a histogram.

    Attributes:
        lower: Inclusive lower bound.
        upper: Upper bound, exclusive unless `closed`.
        closed: Whether `upper` itself belongs to the bin.
    """

    lower: int | float
    upper: int | float
    closed: bool = False

    def contains(self, value: int | float) -> bool:
        """Return True when `value` falls within this bin."""

        if self.closed:
            return self.lower <= value <= self.upper
        return self.lower <= value < self.upper

    def label(self, dimension: Dimension) -> str:
        """Return the range as text, e.g. `[15, 42.5)` or `[70, 70]`."""

        closing = "]" if self.closed else ")"
        return f"[{dimension.format(self.lower)}, {dimension.format(self.upper)}{closing}"


def bin_ranges(values: list[int | float], bins: int, value_type: ValueType) -> tuple[Bin, ...]:
    """Split the range of `values` into `bins` equal-width bins.

    Args:
        values: Observed values of the binned dimension.
        bins: Requested number of bins; anything below 1 means a single bin.
        value_type: Type of the binned dimension. Integer types get whole-number widths.

    Returns:
        The bins in ascending order. No values yields no bins, and a single
        distinct value yields the one closed bin `[value, value]`.
    """

    if not values:
        return ()
    bins = max(bins, 1)
    minimum, maximum = min(values), max(values)
    if minimum == maximum:
        return (Bin(minimum, maximum, closed=True),)

    if value_type is ValueType.real:
        size: int | float = (maximum - minimum) / bins
    else:
        size = math.ceil((maximum - minimum) / bins)
    return tuple(
        Bin(minimum + size * index, minimum + size * (index + 1), closed=index + 1 == bins)
        for index in range(bins)
    )


def build_histogram(
    dataset: Dataset,
    dimension: int | str,
    bins: int,
    *,
    breakdown: int | str | None = None,
    measure: int | str | None = None,
    aggregate: Aggregator = Aggregate.sum,
) -> BreakdownView:
    """Bin a numeric dimension and aggregate each bin.

    Args:
        dataset: Source dataset (read only).
        dimension: Numeric dimension to bin, by position or name.
        bins: Number of equal-width bins.
        breakdown: Optional breakdown dimension whose values become chart columns.
        measure: Optional numeric dimension to aggregate; it may be the binned
            dimension itself. Each row counts as 1 when omitted.
        aggregate: Aggregate statistic applied per (bin, breakdown value) bucket.

    Returns:
        A BreakdownView with one leaf node per bin, including empty bins.

    Raises:
        DimensionError: When a selection is invalid or the binned dimension is not numeric.
    """

    schema = dataset.schema
    binned_index = schema.index_of(dimension)
    binned = schema[binned_index]
    if not binned.value_type.is_numeric:
        raise DimensionError(f"Histogram dimension {binned.name!r} must be numeric, got {binned.value_type.value}.")

    breakdown_index = None if breakdown is None else schema.index_of(breakdown)
    if breakdown_index == binned_index:
        raise DimensionError(f"Dimension {binned.name!r} cannot be both binned and breakdown.")
    measure_index = resolve_measure(schema, measure, exclude=breakdown_index)

    breakdown_dimension: Dimension | None = None
    breakdown_values: tuple[Value, ...] = ()
    if breakdown_index is not None:
        breakdown_dimension = schema[breakdown_index]
        breakdown_values = tuple(
            sorted({row[breakdown_index] for row in dataset.rows}, key=breakdown_dimension.value_type.sort_key)
        )

    ranges = bin_ranges([row[binned_index] for row in dataset.rows], bins, binned.value_type)
    members: list[list[Contribution]] = [[] for _ in ranges]
    for row, contribution in contributions(dataset, measure_index):
        index = next(
            (position for position, item in enumerate(ranges) if item.contains(row[binned_index])),
            len(ranges) - 1,
        )
        members[index].append((row, contribution))

    groups: list[ViewNode] = []
    for item, partition in zip(ranges, members):
        aggregates = aggregate_columns(
            partition,
            breakdown_index=breakdown_index,
            breakdown_values=breakdown_values,
            aggregate=aggregate,
        )
        groups.append(
            ViewNode(
                value=item.lower,
                label=item.label(binned),
                depth=0,
                children=(),
                aggregates=aggregates,
                total=aggregate.apply(aggregates),
                row_count=len(partition),
            )
        )

    view = BreakdownView(
        breakdown=breakdown_dimension,
        grouping=(binned,),
        measure=None if measure_index is None else schema[measure_index],
        aggregate=aggregate,
        breakdown_values=breakdown_values,
        breakdown_labels=tuple(breakdown_dimension.format(value) for value in breakdown_values)
        if breakdown_dimension
        else (),
        groups=tuple(groups),
        row_count=len(dataset.rows),
    )
    logger.debug("Built histogram %s over %s: %d bins", view.title, binned.name, len(groups))
    return view
