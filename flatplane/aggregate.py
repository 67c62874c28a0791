"""Aggregate statistics applied to grouped values.

The grouping code only depends on the `Aggregator` protocol, so the statistic
can be swapped (built-in `Aggregate` members or a `CustomAggregate`) without
touching grouping or rendering.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import Protocol, runtime_checkable


@runtime_checkable
class Aggregator(Protocol):
    """Interface for an aggregate statistic."""

    @property
    def label(self) -> str:
        """Display label used in chart titles (e.g. "Sum")."""
        ...

    def apply(self, values: Sequence[float]) -> float:
        """Reduce values to a single scalar; empty input must return a number."""
        ...


class Aggregate(StrEnum):
    """Built-in aggregate statistics.

    Every member reduces an empty sequence to 0.0.
    """

    sum = "Sum"
    average = "Average"
    max = "Max"
    min = "Min"

    @property
    def label(self) -> str:
        """Return the display label for this statistic."""

        return self.value

    def apply(self, values: Sequence[float]) -> float:
        """Reduce values according to this statistic.

        Args:
            values: Contributions collected for one bucket.

        Returns:
            The aggregate value, or 0.0 when `values` is empty.
        """

        if not values:
            return 0.0
        if self is Aggregate.sum:
            return float(math.fsum(values))
        if self is Aggregate.average:
            return float(math.fsum(values)) / len(values)
        if self is Aggregate.max:
            return float(max(values))
        return float(min(values))


@dataclass(frozen=True, slots=True)
class CustomAggregate:
    """Adapter turning a plain callable into an Aggregator.

    Args:
        label: Display label used in chart titles.
        function: Callable reducing a sequence of floats to a float.
    """

    label: str
    function: Callable[[Sequence[float]], float]

    def apply(self, values: Sequence[float]) -> float:
        """Apply the wrapped function."""

        return float(self.function(values))


def minimal_precision_string(value: float) -> str:
    """Format a value with as few decimals as keep it visually distinct.

    Integers render without decimals, fractions keep their first significant
    decimal digit (rounded half away from zero), and magnitudes of one billion
    or more use a compact exponent form.

    Examples:
        `1.1234 -> "1.1"`, `0.0019 -> "0.002"`, `2 / 3 -> "0.7"`,
        `1234567891 -> "1.2e9"`.
    """

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if abs(value) >= 1e9:
        mantissa, exponent = f"{value:.1e}".split("e")
        return f"{mantissa}e{int(exponent)}"
    if float(value).is_integer():
        return str(int(value))

    magnitude = abs(value)
    fraction = magnitude - math.floor(magnitude)
    places = max(1, -math.floor(math.log10(fraction)))
    quantized = Decimal(repr(float(value))).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    text = format(quantized, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"-0", ""}:
        return "0"
    return text
