"""Recursive traversal of fetched records.

Records are arbitrary JSON-like trees (None, bool, int, float, str, lists and
mappings). The walker visits every scalar leaf, applies the match locator and
collects one MatchAccumulator per matching Path.
"""

import json
from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from typing import Any

from .locator import locate, locate_scalar
from .normalize import normalize_text

MAX_DEPTH = 10

ROOT_PATH = "root"


@dataclass
class MatchAccumulator:
    """Matches of one target at one Path inside one record."""

    path: str
    count: int
    snippets: list[str] = field(default_factory=list)
    # Offsets within the normalized leaf text; empty for number/boolean leaves
    positions: list[int] = field(default_factory=list)

    @property
    def value(self) -> str:
        """First snippet, or an empty string when there is none."""
        return self.snippets[0] if self.snippets else ""


_PATH_SEPARATORS = frozenset(".[]")


def _child_path(path: str, key: Any) -> str:
    """Path of a mapping entry; keys that are empty or contain separators are quoted."""
    key = str(key)
    if not key or _PATH_SEPARATORS.intersection(key):
        return f"{path}[{json.dumps(key)}]"
    return f"{path}.{key}" if path else key


def walk_record(
    record: Any,
    target: str,
    path: str = "",
    depth: int = 0,
    visited: set[int] | None = None,
    excluded_positions: Mapping[str, Collection[int]] | None = None,
) -> dict[str, MatchAccumulator]:
    """
    Collect every occurrence of target within record, keyed by Path.

    Recursion stops silently below MAX_DEPTH and at mappings already seen on
    this walk (identity, not equality). Lists are not tracked in visited; a
    list that contains itself is bounded by the depth guard.

    Args:
        record: The record or sub-tree to traverse
        target: Raw search term or pattern; normalized here
        path: Path of record within the enclosing record ("" at the top)
        depth: Nesting level of record (0 for the record body)
        visited: ids of mappings already entered during this walk
        excluded_positions: Per-Path offsets to skip, used for generic audit
            patterns whose positions were claimed by a specific pattern

    Returns:
        Mapping of Path to MatchAccumulator, in traversal order
    """
    if visited is None:
        visited = set()

    normalized_target = normalize_text(target)
    if not normalized_target.strip():
        return {}

    matches: dict[str, MatchAccumulator] = {}
    _walk(
        record,
        normalized_target,
        target.strip(),
        path,
        depth,
        visited,
        excluded_positions,
        matches,
    )
    return matches


def _walk(
    node: Any,
    normalized_target: str,
    scalar_target: str,
    path: str,
    depth: int,
    visited: set[int],
    excluded_positions: Mapping[str, Collection[int]] | None,
    matches: dict[str, MatchAccumulator],
) -> None:
    if depth > MAX_DEPTH or node is None:
        return

    if isinstance(node, str):
        path_key = path or ROOT_PATH
        excluded = excluded_positions.get(path_key) if excluded_positions else None
        result = locate(normalize_text(node), normalized_target, excluded)
        if result.count > 0:
            matches[path_key] = MatchAccumulator(
                path=path_key,
                count=result.count,
                snippets=result.snippets,
                positions=result.positions,
            )

    elif isinstance(node, (bool, int, float)):
        result = locate_scalar(node, scalar_target)
        if result.count > 0:
            path_key = path or ROOT_PATH
            matches[path_key] = MatchAccumulator(
                path=path_key,
                count=result.count,
                snippets=result.snippets,
            )

    elif isinstance(node, (list, tuple)):
        for index, item in enumerate(node):
            _walk(
                item,
                normalized_target,
                scalar_target,
                f"{path}[{index}]",
                depth + 1,
                visited,
                excluded_positions,
                matches,
            )

    elif isinstance(node, Mapping):
        if id(node) in visited:
            return
        visited.add(id(node))
        for key, value in node.items():
            _walk(
                value,
                normalized_target,
                scalar_target,
                _child_path(path, key),
                depth + 1,
                visited,
                excluded_positions,
                matches,
            )
