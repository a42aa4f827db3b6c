"""Resolve overlapping generic and specific pattern matches.

A literal ``data-contrast="auto"`` matches both ``data-contrast`` and the
generic ``data-``. It must be reported once, under the specific pattern.
"""

from typing import Any

from .patterns import generic_pattern_specifics, pattern_strings
from .walker import MatchAccumulator, walk_record

PatternMatches = dict[str, dict[str, MatchAccumulator]]


def find_bloat_matches(
    record: Any,
    patterns: tuple[str, ...] | None = None,
) -> PatternMatches:
    """
    Match every catalog pattern against one record.

    Specific patterns are walked first and every offset they match is claimed
    for its Path. Generic patterns are walked second and skip claimed offsets.
    Two generic patterns do not exclude each other.

    Args:
        record: The record to audit
        patterns: Catalog substrings; defaults to the markup bloat catalog

    Returns:
        Mapping of pattern to its per-Path matches, for patterns with at
        least one match. Specific patterns come first, each group in
        catalog order.
    """
    if patterns is None:
        patterns = pattern_strings()

    generic = generic_pattern_specifics(patterns)
    all_matches: PatternMatches = {}
    claimed: dict[str, set[int]] = {}

    for pattern in patterns:
        if pattern in generic:
            continue
        match_map = walk_record(record, pattern)
        if not match_map:
            continue
        all_matches[pattern] = match_map
        for path, acc in match_map.items():
            claimed.setdefault(path, set()).update(acc.positions)

    for pattern in generic:
        match_map = walk_record(record, pattern, excluded_positions=claimed)
        if match_map:
            all_matches[pattern] = match_map

    return all_matches
