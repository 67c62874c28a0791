"""Column-aligned text grid used by chart renderers.

Cells are plain strings, or None for a blank cell. Each column is as wide as
its widest cell; a row is padded only up to its last non-blank cell and
trailing whitespace is stripped, so rows that stop early do not drag invisible
padding along.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

Cell = str | None


class Alignment(StrEnum):
    """Horizontal alignment of a cell within its column."""

    left = "left"
    center = "center"
    right = "right"


def align(text: str, width: int, alignment: Alignment) -> str:
    """Pad `text` to `width` characters.

    Centering puts `(width - len(text)) // 2` spaces on the left, so any odd
    remainder lands on the right.
    """

    padding = max(0, width - len(text))
    if alignment is Alignment.right:
        return " " * padding + text
    if alignment is Alignment.center:
        left = padding // 2
        return " " * left + text + " " * (padding - left)
    return text + " " * padding


@dataclass(frozen=True, slots=True)
class Column:
    """Layout rules for one grid column."""

    alignment: Alignment = Alignment.left
    min_width: int = 0


@dataclass(slots=True)
class Grid:
    """Rows of cells laid out over a fixed list of columns."""

    columns: tuple[Column, ...]
    rows: list[tuple[Cell, ...]] = field(default_factory=list)

    def add(self, cells: Sequence[Cell]) -> None:
        """Append a row.

        Raises:
            ValueError: When the row does not have one cell per column.
        """

        if len(cells) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} cells, got {len(cells)}.")
        self.rows.append(tuple(cells))

    def widths(self) -> tuple[int, ...]:
        """Return the rendered width of every column."""

        widths = [column.min_width for column in self.columns]
        for row in self.rows:
            for index, cell in enumerate(row):
                if cell is not None:
                    widths[index] = max(widths[index], len(cell))
        return tuple(widths)

    def offset(self, index: int) -> int:
        """Return the character offset at which column `index` starts."""

        return sum(self.widths()[:index])

    def lines(self) -> list[str]:
        """Render every row as a right-stripped line."""

        widths = self.widths()
        rendered: list[str] = []
        for row in self.rows:
            last = max((index for index, cell in enumerate(row) if cell is not None), default=-1)
            parts = [
                align(cell or "", widths[index], self.columns[index].alignment)
                for index, cell in enumerate(row[: last + 1])
            ]
            rendered.append("".join(parts).rstrip())
        return rendered
