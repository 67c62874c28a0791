"""Schema types describing the shape of a Dataset.

A Schema is an ordered, immutable sequence of named and typed Dimensions. It
defines the positional layout of every row and the default grouping order of
views derived from a dataset.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from .errors import DimensionError, RowTypeError, SchemaError
from .values import Value, ValueType

DimensionSpec = tuple[str, "ValueType | str"]


@dataclass(frozen=True, slots=True)
class Dimension:
    """A named, typed axis of a dataset.

    Args:
        name: Display name, unique within a schema.
        value_type: Type every value in this dimension must satisfy.
    """

    name: str
    value_type: ValueType

    def format(self, value: Value) -> str:
        """Return the display string for a value of this dimension."""

        return self.value_type.format(value)


@dataclass(frozen=True, slots=True)
class Schema:
    """Ordered collection of two or more uniquely named dimensions.

    Args:
        dimensions: Dimensions in row order.
    """

    dimensions: tuple[Dimension, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        if len(self.dimensions) < 2:
            raise SchemaError(f"A schema requires at least 2 dimensions, got {len(self.dimensions)}.")

        seen: set[str] = set()
        for dimension in self.dimensions:
            if not isinstance(dimension, Dimension):
                raise SchemaError(f"Schema entries must be Dimension instances, got {dimension!r}.")
            if not isinstance(dimension.name, str) or not dimension.name.strip():
                raise SchemaError(f"Dimension names must be non-empty strings, got {dimension.name!r}.")
            if not isinstance(dimension.value_type, ValueType):
                raise SchemaError(
                    f"Dimension {dimension.name!r} has invalid value_type={dimension.value_type!r}; expected ValueType."
                )
            if dimension.name in seen:
                raise SchemaError(f"Duplicate dimension name: {dimension.name!r}.")
            seen.add(dimension.name)

    @classmethod
    def with_names(cls, names: Sequence[str], types: Sequence[ValueType | str]) -> Schema:
        """Build a schema by pairing names with value types positionally.

        Args:
            names: Distinct dimension names.
            types: ValueTypes (or their string identifiers, e.g. "uint").

        Returns:
            A validated Schema.

        Raises:
            SchemaError: When arities differ, names repeat, or a type is unknown.
        """

        if isinstance(names, str):
            raise SchemaError("names must be a sequence of strings, not a single string.")
        if len(names) != len(types):
            raise SchemaError(f"Got {len(names)} names but {len(types)} types.")
        return cls(dimensions=tuple(_dimension(name, value_type) for name, value_type in zip(names, types)))

    @classmethod
    def two(cls, first: DimensionSpec, second: DimensionSpec) -> Schema:
        """Build a 2-dimensional schema from `(name, type)` pairs."""

        return cls._of(first, second)

    @classmethod
    def three(cls, first: DimensionSpec, second: DimensionSpec, third: DimensionSpec) -> Schema:
        """Build a 3-dimensional schema from `(name, type)` pairs."""

        return cls._of(first, second, third)

    @classmethod
    def four(
        cls,
        first: DimensionSpec,
        second: DimensionSpec,
        third: DimensionSpec,
        fourth: DimensionSpec,
    ) -> Schema:
        """Build a 4-dimensional schema from `(name, type)` pairs."""

        return cls._of(first, second, third, fourth)

    @classmethod
    def _of(cls, *specs: DimensionSpec) -> Schema:
        names: list[str] = []
        types: list[ValueType | str] = []
        for spec in specs:
            if not isinstance(spec, tuple) or len(spec) != 2:
                raise SchemaError(f"Dimension specs must be (name, type) pairs, got {spec!r}.")
            names.append(spec[0])
            types.append(spec[1])
        return cls.with_names(names, types)

    def __len__(self) -> int:
        return len(self.dimensions)

    def __iter__(self) -> Iterator[Dimension]:
        return iter(self.dimensions)

    def __getitem__(self, index: int) -> Dimension:
        return self.dimensions[index]

    @property
    def names(self) -> tuple[str, ...]:
        """Return the dimension names in row order."""

        return tuple(dimension.name for dimension in self.dimensions)

    def index_of(self, selection: int | str) -> int:
        """Resolve a dimension selection (position or name) to a position.

        Args:
            selection: Zero-based position or dimension name.

        Returns:
            The zero-based position of the selected dimension.

        Raises:
            DimensionError: When the selection does not name a dimension.
        """

        if isinstance(selection, bool):
            raise DimensionError(f"Dimension selection must be an index or a name, got {selection!r}.")
        if isinstance(selection, int):
            if 0 <= selection < len(self.dimensions):
                return selection
            raise DimensionError(
                f"Dimension index {selection} is out of range for a schema of {len(self.dimensions)} dimensions."
            )
        if isinstance(selection, str):
            for index, dimension in enumerate(self.dimensions):
                if dimension.name == selection:
                    return index
            raise DimensionError(f"Unknown dimension name: {selection!r}; expected one of {list(self.names)}.")
        raise DimensionError(f"Dimension selection must be an index or a name, got {selection!r}.")

    def validate_row(self, row: object) -> tuple[Value, ...]:
        """Validate a row against this schema and return its normalized tuple.

        Args:
            row: Candidate row; any non-string sequence with one value per dimension.

        Returns:
            The normalized row tuple.

        Raises:
            RowTypeError: When the arity or any field type does not match.
        """

        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            raise RowTypeError(f"Rows must be sequences of values, got {type(row).__name__}.")
        if len(row) != len(self.dimensions):
            raise RowTypeError(f"Expected a row of {len(self.dimensions)} values, got {len(row)}.")

        normalized: list[Value] = []
        for position, (dimension, value) in enumerate(zip(self.dimensions, row)):
            try:
                normalized.append(dimension.value_type.normalize(value))
            except TypeError as exc:
                raise RowTypeError(
                    f"Invalid value for dimension {dimension.name!r} at position {position}: {exc}",
                    position=position,
                    dimension=dimension.name,
                ) from exc
        return tuple(normalized)


def _dimension(name: object, value_type: object) -> Dimension:
    """Build a Dimension, coercing string type identifiers to ValueType."""

    if not isinstance(name, str):
        raise SchemaError(f"Dimension names must be strings, got {name!r}.")
    if isinstance(value_type, ValueType):
        return Dimension(name=name, value_type=value_type)
    try:
        return Dimension(name=name, value_type=ValueType(str(value_type)))
    except ValueError as exc:
        supported = [member.value for member in ValueType]
        raise SchemaError(
            f"Unknown value type {value_type!r} for dimension {name!r}; expected one of {supported}."
        ) from exc
