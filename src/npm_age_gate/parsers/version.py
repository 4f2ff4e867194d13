"""Loose npm version helpers.

Only what the age gate needs:
- leading-integer parsing of a version token ("9" -> 9, "9.9.9" -> 9)
- numeric dotted-component ordering (missing or non-numeric components count as 0)
- stripping a leading range operator from a manifest entry

Range resolution (^, ~, comparator sets) is deliberately not performed.
"""

from __future__ import annotations

import re
from functools import cmp_to_key
from collections.abc import Iterable

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
_RANGE_OPERATOR = re.compile(r"^(>=|<=|\^|~|>|<|=)")


def parse_leading_int(token: str) -> int | None:
    """Return the integer a version token starts with, or None."""
    match = _LEADING_INT.match(token)
    if match is None:
        return None
    return int(match.group(1))


def _component(part: str) -> int:
    try:
        return int(part)
    except ValueError:
        return 0


def version_key(version: str) -> tuple[int, ...]:
    return tuple(_component(part) for part in version.split("."))


def compare_versions(a: str, b: str) -> int:
    """Compare dotted versions component by component, padding with zeros."""
    a_parts = version_key(a)
    b_parts = version_key(b)
    width = max(len(a_parts), len(b_parts))
    a_parts += (0,) * (width - len(a_parts))
    b_parts += (0,) * (width - len(b_parts))
    if a_parts == b_parts:
        return 0
    return -1 if a_parts < b_parts else 1


def sort_versions(versions: Iterable[str], *, descending: bool = False) -> list[str]:
    return sorted(versions, key=cmp_to_key(compare_versions), reverse=descending)


def strip_range_operator(expr: str) -> str:
    """Drop a single leading range operator (``^ ~ >= <= > < =``)."""
    return _RANGE_OPERATOR.sub("", expr, count=1)
