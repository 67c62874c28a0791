"""Supported dimension value types.

Every dimension declares one ValueType. The type owns three concerns so the
rest of the package stays type-agnostic:

- validation and normalization of incoming row values,
- the display string used by renderers,
- the natural sort key used for grouping and column order.
"""

from __future__ import annotations

import math
from enum import StrEnum

Value = str | int | bool | float


class ValueType(StrEnum):
    """Closed set of value types a Dimension may declare.

    Values are the stable identifiers accepted by `Schema.with_names` and
    configuration payloads.
    """

    string = "string"
    uint = "uint"
    integer = "int"
    boolean = "bool"
    real = "float"

    @property
    def is_numeric(self) -> bool:
        """Return True when values of this type can be aggregated as numbers."""

        return self in (ValueType.uint, ValueType.integer, ValueType.real)

    def normalize(self, value: object) -> Value:
        """Validate a raw value and return its stored form.

        Args:
            value: Candidate value for a dimension of this type.

        Returns:
            The value to store. `int` inputs for float dimensions become `float`.
            NaN and infinities are rejected for float dimensions.

        Raises:
            TypeError: When the value does not belong to this type.
        """

        if self is ValueType.string:
            if isinstance(value, str):
                return value
        elif self is ValueType.boolean:
            if isinstance(value, bool):
                return value
        elif isinstance(value, bool):
            pass
        elif self is ValueType.uint:
            if isinstance(value, int) and value >= 0:
                return value
        elif self is ValueType.integer:
            if isinstance(value, int):
                return value
        elif self is ValueType.real:
            if isinstance(value, (int, float)):
                try:
                    number = float(value)
                except OverflowError:
                    number = math.inf
                if math.isfinite(number):
                    return number
                raise TypeError(f"Expected a finite {self.value} value, got {value!r}.")
        raise TypeError(f"Expected a {self.value} value, got {value!r} ({type(value).__name__}).")

    def format(self, value: Value) -> str:
        """Return the display string for a stored value."""

        if self is ValueType.boolean:
            return "true" if value else "false"
        if self is ValueType.real:
            number = float(value)
            if math.isfinite(number) and number.is_integer():
                return str(int(number))
            return repr(number)
        return str(value)

    def sort_key(self, value: Value) -> Value:
        """Return the natural-order key for a stored value.

        Stored values within one dimension share a single Python type (and
        non-finite floats are rejected by `normalize`), so the native ordering is total.
        """

        return value
