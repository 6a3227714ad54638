"""
Formcheck Field Paths
=====================

Resolve dotted field paths against nested input.

    resolve("name.first", data)       -> one entry
    resolve("address.*.city", data)   -> one entry per address

Literal segments descend into dicts by key and into lists by index.
The ``*`` segment expands over every element of a list (or a dict
whose keys are all integer-like). A missing key resolves to the
``MISSING`` sentinel so that implicit rules such as ``required``
can still report it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple, Union

WILDCARD = "*"
SEPARATOR = "."

Segment = Union[str, int]


class _Missing:
    """Marker for a path that does not exist in the input."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class ResolvedField:
    """A concrete path and the value found there."""

    path: str
    segments: Tuple[Segment, ...]
    value: Any

    @property
    def missing(self) -> bool:
        return self.value is MISSING


def split_path(path: str) -> List[str]:
    """Split a dotted path into segments."""
    return path.split(SEPARATOR)


def is_wildcard(path: str) -> bool:
    """Check if path contains a wildcard segment."""
    return WILDCARD in split_path(path)


def join_segments(segments: Sequence[Segment]) -> str:
    return SEPARATOR.join(str(s) for s in segments)


def _is_index(segment: str) -> bool:
    return segment.isdigit()


def _wildcard_items(node: Any) -> List[Tuple[Segment, Any]]:
    """Children a wildcard expands into; empty for non-containers."""
    if isinstance(node, (list, tuple)):
        return list(enumerate(node))
    if isinstance(node, dict) and all(
        isinstance(k, int) or (isinstance(k, str) and _is_index(k))
        for k in node
    ):
        return list(node.items())
    return []


def _child(node: Any, segment: str) -> Tuple[Segment, Any]:
    """Descend one literal segment."""
    if isinstance(node, dict):
        if segment in node:
            return segment, node[segment]
        if _is_index(segment) and int(segment) in node:
            return int(segment), node[int(segment)]
        return segment, MISSING
    if isinstance(node, (list, tuple)) and _is_index(segment):
        index = int(segment)
        if index < len(node):
            return index, node[index]
        return index, MISSING
    return segment, MISSING


def resolve(path: str, data: Any) -> List[ResolvedField]:
    """
    Resolve a field path to concrete (path, value) entries.

    Args:
        path: Dotted path, may contain ``*`` segments
        data: Input tree

    Returns:
        Resolved entries in input order. Empty when a wildcard
        meets anything other than a list or index-keyed dict.
    """
    results: List[ResolvedField] = []
    _resolve(split_path(path), 0, data, (), results)
    return results


def _resolve(
    segments: List[str],
    position: int,
    node: Any,
    prefix: Tuple[Segment, ...],
    results: List[ResolvedField],
) -> None:
    if position == len(segments):
        results.append(ResolvedField(join_segments(prefix), prefix, node))
        return

    segment = segments[position]

    if segment == WILDCARD:
        for key, child in _wildcard_items(node):
            _resolve(segments, position + 1, child, prefix + (key,), results)
        return

    key, child = _child(node, segment)
    if child is MISSING:
        rest = segments[position + 1:]
        if WILDCARD in rest:
            return
        full = prefix + (key,) + tuple(rest)
        results.append(ResolvedField(join_segments(full), full, MISSING))
        return

    _resolve(segments, position + 1, child, prefix + (key,), results)


def pattern_to_regex(pattern: str) -> "re.Pattern[str]":
    """Compile a wildcard path into a regex matching concrete paths."""
    parts = [
        r"[^.]+" if segment == WILDCARD else re.escape(segment)
        for segment in split_path(pattern)
    ]
    return re.compile("^" + r"\.".join(parts) + "$")


def matches(pattern: str, concrete: str) -> bool:
    """
    Check if a concrete path matches a (possibly wildcard) pattern.

    Example:
        >>> matches("address.*.city", "address.1.city")
        True
    """
    if WILDCARD not in pattern:
        return pattern == concrete
    return bool(pattern_to_regex(pattern).match(concrete))


def assign(target: Dict[str, Any], segments: Sequence[Segment], value: Any) -> None:
    """
    Set value in a nested structure, creating containers on the way.

    Integer segments create lists, string segments create dicts.
    """
    current: Any = target

    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        if last:
            container_value = value
        else:
            container_value = [] if isinstance(segments[i + 1], int) else {}

        if isinstance(current, list):
            index = int(segment)
            while len(current) <= index:
                current.append(None)
            if last or current[index] is None:
                current[index] = container_value
            current = current[index]
        else:
            key = str(segment)
            if last or key not in current:
                current[key] = container_value
            current = current[key]
