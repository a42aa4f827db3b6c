"""Locate every occurrence of a target substring inside a leaf value."""

import math
from collections.abc import Collection
from typing import NamedTuple

from .normalize import create_context_snippet, fold_case

# Snippets kept per leaf; count still reflects every occurrence
MAX_SNIPPETS = 3


class LocateResult(NamedTuple):
    """Occurrences of a target within one leaf."""

    count: int
    snippets: list[str]
    positions: list[int]


def locate(
    normalized_text: str,
    normalized_target: str,
    excluded_positions: Collection[int] | None = None,
) -> LocateResult:
    """
    Find every non-overlapping, case-insensitive occurrence of a target.

    Args:
        normalized_text: Leaf text, already passed through normalize_text
        normalized_target: Target, already passed through normalize_text
        excluded_positions: Offsets already claimed by another pattern; an
            occurrence starting at one of these is skipped entirely

    Returns:
        LocateResult with the total count, up to MAX_SNIPPETS snippets and
        the offset of every counted occurrence
    """
    if not normalized_target:
        return LocateResult(0, [], [])

    haystack = fold_case(normalized_text)
    needle = fold_case(normalized_target)
    step = len(needle)

    count = 0
    snippets: list[str] = []
    positions: list[int] = []

    index = haystack.find(needle)
    while index != -1:
        if not excluded_positions or index not in excluded_positions:
            count += 1
            positions.append(index)
            if len(snippets) < MAX_SNIPPETS:
                snippets.append(create_context_snippet(normalized_text, index, step))
        index = haystack.find(needle, index + step)

    return LocateResult(count, snippets, positions)


def stringify_scalar(value: bool | int | float) -> str:
    """Render a number or boolean the way it appears in the source JSON."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def locate_scalar(value: bool | int | float, target: str) -> LocateResult:
    """Match a number or boolean leaf by plain stringified containment.

    Scalars are not normalized and contribute at most one occurrence, whose
    snippet is the stringified value itself.
    """
    if not target:
        return LocateResult(0, [], [])

    string_value = stringify_scalar(value)
    if target.lower() in string_value.lower():
        return LocateResult(1, [string_value], [])
    return LocateResult(0, [], [])
