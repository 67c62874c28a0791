"""Text bar chart rendering for breakdown views.

Layout, left to right: grouping columns from the inner level to the outer
level (each followed by a bracket connector, the outer one by a plain gap), an
optional aggregate column, then one centered bar column per breakdown value
between two column delimiters. Example:

                      Sum(Breakdown(stable))
    length   animal  |false  true |
    1      - shark   | **    ***  |
    4      ┘
    1      ┐
    4      - tiger   |***** ******|
    5      ┘
    4      - whale   |        *   |

A view without a breakdown dimension has a single left-aligned bar column and
no delimiters, titled e.g. `Sum(Count)`.
"""

from __future__ import annotations

import logging
import math

from .abbreviate import ABBREVIATION_MONIKER, find_abbreviations
from .aggregate import minimal_precision_string
from .config import RenderConfig
from .render import Alignment, Cell, Column, Grid
from .view import BreakdownView, ViewNode

logger = logging.getLogger(__name__)

OUTER_GAP = "  "
BAR_SEPARATOR = " "


class BarChart:
    """Renders a BreakdownView as a monospaced text bar chart."""

    def __init__(self, view: BreakdownView) -> None:
        self.view = view

    def render(self, config: RenderConfig | None = None) -> str:
        """Render the chart.

        Args:
            config: Render options; defaults to `RenderConfig()`.

        Returns:
            The chart as newline-joined lines without trailing whitespace.

        Raises:
            ConfigError: When `config` is invalid. Nothing is rendered in that case.
        """

        config = config or RenderConfig()
        config.validate()

        layout = _Layout(self.view, config)
        grid = layout.grid()
        lines = [layout.title_line(grid), *grid.lines()]
        logger.debug(
            "Rendered %s: %d lines, %d columns wide",
            self.view.title,
            len(lines),
            max((len(line) for line in lines), default=0),
        )
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


class _Layout:
    """Column bookkeeping for one render call."""

    def __init__(self, view: BreakdownView, config: RenderConfig) -> None:
        self.view = view
        self.config = config
        self.levels = len(view.grouping)
        self.delimited = view.breakdown is not None

        columns: list[Column] = []
        for level in reversed(range(self.levels)):
            columns.append(Column(Alignment.left))
            if level == 0:
                columns.append(Column(Alignment.left, min_width=len(OUTER_GAP)))
            else:
                columns.append(Column(Alignment.left, min_width=config.bracket_glyphs.width + 2))

        self.aggregate_column: int | None = None
        if config.show_aggregate:
            self.aggregate_column = len(columns)
            columns.append(Column(Alignment.left))
            columns.append(Column(Alignment.left, min_width=len(OUTER_GAP)))

        # A view without a breakdown draws one left-aligned bar column and no delimiters.
        bar_alignment = Alignment.center if self.delimited else Alignment.left
        self.open_delimiter: int | None = None
        if self.delimited:
            self.open_delimiter = len(columns)
            columns.append(Column(Alignment.center))
        self.bar_columns: list[int] = []
        for index in range(len(view.column_labels)):
            if index:
                columns.append(Column(Alignment.left, min_width=len(BAR_SEPARATOR)))
            self.bar_columns.append(len(columns))
            columns.append(Column(bar_alignment))
        self.close_delimiter: int | None = None
        if self.delimited:
            self.close_delimiter = len(columns)
            columns.append(Column(Alignment.center))

        self.columns = tuple(columns)
        self.abbreviations = self._abbreviations()
        self.peaks = tuple(self._peak(index) for index in range(len(self.bar_columns)))
        self.column_labels = self._column_labels()
        self.total_width = max(
            (len(minimal_precision_string(group.total)) for group in view.groups), default=0
        )

    def value_column(self, level: int) -> int:
        return 2 * (self.levels - 1 - level)

    def grid(self) -> Grid:
        grid = Grid(self.columns)
        grid.add(self._header())
        for group in self.view.groups:
            for row in self._group_rows(group):
                grid.add(row)
        return grid

    def title_line(self, grid: Grid) -> str:
        if self.open_delimiter is not None and self.close_delimiter is not None:
            start = grid.offset(self.open_delimiter + 1)
            area = grid.offset(self.close_delimiter) - start
        else:
            start = grid.offset(self.bar_columns[0])
            area = grid.widths()[self.bar_columns[0]]
        title = self.view.title
        if len(title) <= area:
            start += (area - len(title)) // 2
        return " " * start + title

    def _header(self) -> list[Cell]:
        cells: list[Cell] = [None] * len(self.columns)
        for level, dimension in enumerate(self.view.grouping):
            cells[self.value_column(level)] = dimension.name
        if self.aggregate_column is not None:
            cells[self.aggregate_column] = self.view.aggregate.label
        if self.delimited:
            self._fill_delimiters(cells)
            for column, label in zip(self.bar_columns, self.column_labels):
                cells[column] = label
        return cells

    def _group_rows(self, group: ViewNode) -> list[list[Cell]]:
        starts: dict[int, int] = {}
        rows: list[list[Cell]] = []
        for row, path in enumerate(group.paths()):
            for node in path:
                starts.setdefault(id(node), row)

            cells: list[Cell] = [None] * len(self.columns)
            for level, node in enumerate(path):
                if row != starts[id(node)] + node.label_row:
                    continue
                column = self.value_column(level)
                cells[column] = self.abbreviations[level].get(node.label, node.label)
                if level == 0:
                    cells[column + 1] = OUTER_GAP
                else:
                    parent = path[level - 1]
                    cells[column + 1] = self._connector(row, starts[id(parent)] + parent.label_row)

            if row == group.label_row:
                self._fill_bars(cells, group)
            rows.append(cells)
        return rows

    def _connector(self, row: int, parent_row: int) -> str:
        glyphs = self.config.bracket_glyphs
        if row < parent_row:
            glyph = glyphs.top
        elif row == parent_row:
            glyph = glyphs.mid
        else:
            glyph = glyphs.bottom
        return f" {glyph.ljust(glyphs.width)} "

    def _fill_delimiters(self, cells: list[Cell]) -> None:
        if self.open_delimiter is not None and self.close_delimiter is not None:
            cells[self.open_delimiter] = self.config.column_delimiter
            cells[self.close_delimiter] = self.config.column_delimiter

    def _fill_bars(self, cells: list[Cell], group: ViewNode) -> None:
        if self.aggregate_column is not None:
            total = minimal_precision_string(group.total).rjust(self.total_width)
            cells[self.aggregate_column] = f"[{total}]"
            cells[self.aggregate_column + 1] = OUTER_GAP
        self._fill_delimiters(cells)
        for index, column in enumerate(self.bar_columns):
            if index:
                cells[column - 1] = BAR_SEPARATOR
            cells[column] = self._bar(group.aggregates[index], self.peaks[index])

    def _bar(self, value: float, peak: float | None) -> str:
        if value == 0 or math.isnan(value):
            return ""
        if math.isinf(value):
            length = self.config.max_bar_width
        else:
            magnitude = abs(value)
            if peak is not None:
                magnitude = magnitude * self.config.max_bar_width / peak
            length = max(1, min(self.config.max_bar_width, math.floor(magnitude)))
        glyph = self.config.bar_glyph if value > 0 else self.config.negative_glyph
        return glyph * length

    def _peak(self, index: int) -> float | None:
        """Return the peak a column is scaled against, or None when drawn literally.

        Infinite aggregates are drawn at the full budget and never set the peak.
        """

        peak = self.view.peak(index)
        if peak == 0:
            return None
        if self.config.scaling == "down" and peak <= self.config.max_bar_width:
            return None
        return peak

    def _abbreviations(self) -> list[dict[str, str]]:
        abbreviations: list[dict[str, str]] = [{} for _ in range(self.levels)]
        if not self.config.abbreviate or not self.view.groups:
            return abbreviations

        longest_header = max(len(dimension.name) for dimension in self.view.grouping)
        labels: list[set[str]] = [set() for _ in range(self.levels)]
        for path in self.view.paths():
            for level, node in enumerate(path):
                labels[level].add(node.label)
        for level, dimension in enumerate(self.view.grouping):
            _, abbreviations[level] = find_abbreviations(len(dimension.name), longest_header, labels[level])
        return abbreviations

    def _column_labels(self) -> tuple[str, ...]:
        """Return bar column headings, abbreviated down to the widest bar when asked."""

        labels = self.view.column_labels
        if not self.config.abbreviate_breakdown or not self.delimited or not labels:
            return labels

        widest_bar = max(
            (
                len(self._bar(group.aggregates[index], self.peaks[index]))
                for group in self.view.groups
                for index in range(len(labels))
            ),
            default=0,
        )
        minimum = max(widest_bar, len(ABBREVIATION_MONIKER) + 1)
        longest = max(len(label) for label in labels)
        if minimum > longest:
            return labels
        _, abbreviations = find_abbreviations(minimum, longest, labels)
        return tuple(abbreviations.get(label, label) for label in labels)
