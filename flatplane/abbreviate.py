"""Unique abbreviations for long display values.

Values longer than a target length are cut down and marked with a `..`
moniker, first keeping their prefix (`metallick -> meta..`) and, when prefixes
collide, their suffix (`cataclysm -> ..ysm`). Values that already fit are kept
as they are.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

ABBREVIATION_MONIKER = ".."


def find_abbreviations(
    minimum_length: int,
    maximum_length: int,
    values: Iterable[str],
) -> tuple[int, dict[str, str]]:
    """Find the shortest target length at which every value abbreviates uniquely.

    Args:
        minimum_length: Smallest target length to try.
        maximum_length: Largest target length to try.
        values: Distinct display values.

    Returns:
        `(width, abbreviations)`. When no length in range yields unique
        abbreviations, `width` is the longest value and every value maps to
        itself.

    Raises:
        ValueError: When `minimum_length` exceeds `maximum_length`.
    """

    if minimum_length > maximum_length:
        raise ValueError(f"minimum_length={minimum_length} exceeds maximum_length={maximum_length}.")

    distinct = set(values)
    if not distinct:
        return minimum_length, {}

    shortest = min(len(value) for value in distinct)
    longest = max(len(value) for value in distinct)

    # Next to an unabbreviated value, an abbreviation must be long enough to carry the moniker.
    start = minimum_length
    if shortest <= minimum_length < longest:
        start = max(minimum_length, shortest + len(ABBREVIATION_MONIKER))

    for target in range(start, maximum_length + 1):
        abbreviations = generate_abbreviations(target, distinct)
        if abbreviations is not None:
            return target, abbreviations

    return longest, {value: value for value in distinct}


def generate_abbreviations(target_length: int, values: Iterable[str]) -> dict[str, str] | None:
    """Abbreviate every value to at most `target_length` characters.

    Returns:
        A mapping of value to abbreviation, or None when neither prefix nor
        suffix abbreviation is unique.
    """

    distinct = set(values)
    keep = max(0, target_length - len(ABBREVIATION_MONIKER))

    prefixes = _abbreviate(distinct, target_length, lambda value: value[:keep], lambda stem: stem + ABBREVIATION_MONIKER)
    if prefixes is not None:
        return prefixes

    return _abbreviate(
        distinct,
        target_length,
        lambda value: value[len(value) - keep :],
        lambda stem: ABBREVIATION_MONIKER + stem,
    )


def _abbreviate(
    values: set[str],
    target_length: int,
    cut: Callable[[str], str],
    mark: Callable[[str], str],
) -> dict[str, str] | None:
    # Uniqueness is judged on the kept text, so "cat.." collides with a literal "cat".
    stems: dict[str, tuple[str, bool]] = {}
    for value in values:
        if len(value) <= target_length:
            stems[value] = (value, False)
        else:
            stems[value] = (cut(value), True)

    if len({stem for stem, _ in stems.values()}) != len(stems):
        return None
    return {value: mark(stem) if shortened else stem for value, (stem, shortened) in stems.items()}
