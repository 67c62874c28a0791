"""Error types raised by flatplane.

Each error extends the closest builtin exception so callers may catch either
the specific class or the builtin (e.g. `except TypeError`).
"""

from __future__ import annotations


class SchemaError(ValueError):
    """Raised when a Schema cannot be constructed (duplicate names, arity mismatch)."""


class RowTypeError(TypeError):
    """Raised when a row does not conform to the schema bound to a builder."""

    def __init__(self, message: str, *, position: int | None = None, dimension: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable description of the violation.
            position: Zero-based field position at fault, when a single field is wrong.
            dimension: Dimension name at fault, when a single field is wrong.
        """

        super().__init__(message)
        self.position = position
        self.dimension = dimension


class DimensionError(ValueError):
    """Raised when a breakdown or measure selection is missing or unsuitable."""


class ConfigError(ValueError):
    """Raised when a RenderConfig value is out of range."""

    def __init__(self, errors: tuple[str, ...] | list[str] | str) -> None:
        """Initialize the error.

        Args:
            errors: One violation message, or several to be reported together.
        """

        if isinstance(errors, str):
            errors = (errors,)
        self.errors = tuple(errors)
        if len(self.errors) == 1:
            super().__init__(self.errors[0])
        else:
            joined = "\n".join(f"- {error}" for error in self.errors)
            super().__init__(f"Invalid RenderConfig:\n{joined}")
