"""Schema-tolerant numeric lookup over program records.

Program records come from several versions of the collection form, so the
same quantity can live under different names or nesting. Lookups here never
raise: a value that cannot be found is ``None`` for presence checks and 0
for arithmetic.

Resolution order:
    1. Exact dotted paths, in the order given.
    2. Breadth-first token scans over key names (case-insensitive).
    3. Nothing found -> absent.
"""

from __future__ import annotations

import math
from collections import deque
from typing import Any, Iterable, Mapping, Sequence


def as_number(value: Any) -> float | None:
    """Return a finite float for numbers and numeric strings, else ``None``."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_number(value: Any) -> float:
    """Arithmetic view of :func:`as_number`: absent becomes 0."""
    number = as_number(value)
    return 0.0 if number is None else number


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0", ""}


def as_flag(value: Any) -> bool | None:
    """Read a section toggle: real bools, numbers, or words like "true"/"off".

    ``None`` when the value says nothing either way.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_WORDS:
            return True
        if text in _FALSE_WORDS:
            return False
        return None
    number = as_number(value)
    return None if number is None else number != 0


def deep_get(record: Any, path: str) -> Any:
    """Follow a dotted path through mappings (and lists by integer index)."""
    current = record
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return None
            current = current[segment]
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def resolve_number(record: Any, paths: Iterable[str]) -> float | None:
    """First present finite number among the exact ``paths``."""
    for path in paths:
        number = as_number(deep_get(record, path))
        if number is not None:
            return number
    return None


def scan_for_tokens(record: Any, tokens: Sequence[str]) -> float | None:
    """Breadth-first search for a numeric value under a matching key.

    A key matches when its lower-cased qualified name (the dotted chain of
    mapping keys leading to it, e.g. ``schoolthings.disabilitycount``)
    contains every token and the key itself contains at least one of them,
    so ``schoolVisit.sessionsPerWeek`` is not a school count. Only
    mapping/list containers are descended into; each container is visited
    once, so cyclic structures terminate.
    """
    if not record or not tokens:
        return None

    wanted = [t.lower() for t in tokens]
    queue: deque[tuple[Any, str]] = deque([(record, "")])
    visited: set[int] = set()

    while queue:
        current, prefix = queue.popleft()
        if id(current) in visited:
            continue
        visited.add(id(current))

        if isinstance(current, list):
            queue.extend((item, prefix) for item in current)
            continue
        if not isinstance(current, Mapping):
            continue

        for key, value in current.items():
            leaf = str(key).lower()
            name = f"{prefix}.{leaf}" if prefix else leaf
            if any(token in leaf for token in wanted) and all(token in name for token in wanted):
                number = as_number(value)
                if number is not None:
                    return number
            if isinstance(value, (Mapping, list)):
                queue.append((value, name))
    return None


def first_number(*candidates: float | None) -> float:
    """First defined candidate, or 0 when none resolved."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return 0.0
