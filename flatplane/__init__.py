"""flatplane: text bar charts over grouped tabular data.

Typical use:

    schema = Schema.three(("animal", "string"), ("length", "uint"), ("stable", "bool"))
    dataset = Dataset.builder(schema).add(("whale", 4, True)).build()
    print(render_breakdown(dataset, "stable"))

Everything here is pure and deterministic: equal inputs always render the same
text, and no module touches IO apart from `load_render_config`.
"""

from __future__ import annotations

from .abbreviate import find_abbreviations
from .aggregate import Aggregate, Aggregator, CustomAggregate, minimal_precision_string
from .barchart import BarChart
from .config import (
    BracketGlyphs,
    RenderConfig,
    encode_render_config,
    load_render_config,
    render_config_from_mapping,
)
from .dataset import Dataset, DatasetBuilder, Row
from .errors import ConfigError, DimensionError, RowTypeError, SchemaError
from .histogram import Bin, bin_ranges, build_histogram
from .schema import Dimension, Schema
from .values import Value, ValueType
from .view import BreakdownView, ViewNode, build_breakdown_view

__all__ = [
    "Aggregate",
    "Aggregator",
    "BarChart",
    "Bin",
    "BracketGlyphs",
    "BreakdownView",
    "ConfigError",
    "CustomAggregate",
    "Dataset",
    "DatasetBuilder",
    "Dimension",
    "DimensionError",
    "RenderConfig",
    "Row",
    "RowTypeError",
    "Schema",
    "SchemaError",
    "Value",
    "ValueType",
    "ViewNode",
    "bin_ranges",
    "build_breakdown_view",
    "build_histogram",
    "encode_render_config",
    "find_abbreviations",
    "load_render_config",
    "minimal_precision_string",
    "render_breakdown",
    "render_config_from_mapping",
    "render_histogram",
]


def render_breakdown(
    dataset: Dataset,
    dimension: int | str | None,
    config: RenderConfig | None = None,
    *,
    measure: int | str | None = None,
    aggregate: Aggregator = Aggregate.sum,
) -> str:
    """Break a dataset down along one dimension and render it as a bar chart.

    Args:
        dataset: Source dataset.
        dimension: Breakdown dimension, by position or name. None renders a
            single `Sum(Count)` column grouped by every non-measure dimension.
        config: Render options; defaults to `RenderConfig()`.
        measure: Optional numeric dimension aggregated instead of row counts.
        aggregate: Aggregate statistic applied per bucket.

    Returns:
        The rendered chart.

    Raises:
        DimensionError: When the dimension selection is invalid.
        ConfigError: When `config` is invalid.
    """

    if dimension is None:
        view = dataset.view(measure=measure, aggregate=aggregate)
    else:
        view = dataset.breakdown(dimension, measure=measure, aggregate=aggregate)
    return BarChart(view).render(config)


def render_histogram(
    dataset: Dataset,
    dimension: int | str,
    bins: int,
    config: RenderConfig | None = None,
    *,
    breakdown: int | str | None = None,
    measure: int | str | None = None,
    aggregate: Aggregator = Aggregate.sum,
) -> str:
    """Bin a numeric dimension into equal-width ranges and render it as a bar chart.

    Raises:
        DimensionError: When a selection is invalid or the binned dimension is not numeric.
        ConfigError: When `config` is invalid.
    """

    view = dataset.histogram(dimension, bins, breakdown=breakdown, measure=measure, aggregate=aggregate)
    return BarChart(view).render(config)
