"""Total ordering of asset records for table sorting.

String fields use a numeric-aware, case-insensitive collation so that
``"Asset 2"`` sorts before ``"Asset 10"``. Records whose sort field
compares equal are ordered by ``id``, so the order is total and the
descending order is the exact reverse of the ascending one.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable
from enum import StrEnum
from typing import Any

from assetdash.models.asset import SORTABLE_FIELDS, AssetRecord

# Split on ASCII digit runs; odd indices of the result are the digit runs.
_DIGIT_RUN = re.compile(r"([0-9]+)")


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


def _collation_key(value: str) -> tuple[tuple[int, int, str], ...]:
    # Digit runs sort before letters and compare by numeric value.
    parts: list[tuple[int, int, str]] = []
    for index, part in enumerate(_DIGIT_RUN.split(value)):
        if not part:
            continue
        if index % 2:
            parts.append((0, int(part), ""))
        else:
            parts.append((1, 0, part.casefold()))
    return tuple(parts)


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def natural_compare(a: str, b: str) -> int:
    """Three-way compare two strings with numeric-aware collation.

    Strings that differ only in case compare lowercase first; identical
    strings compare equal.
    """
    primary = _cmp(_collation_key(a), _collation_key(b))
    if primary:
        return primary
    # Lowercase before uppercase on a case-only difference.
    return _cmp(a.swapcase(), b.swapcase())


def compare_values(a: Any, b: Any) -> int:
    """Three-way compare two field values. ``None`` sorts first."""
    if a is None or b is None:
        return _cmp(a is not None, b is not None)
    if isinstance(a, str) and isinstance(b, str):
        return natural_compare(a, b)
    if type(a) is type(b):
        return _cmp(a, b)
    return natural_compare(str(a), str(b))


def _check_sort_key(sort_key: str) -> None:
    if sort_key not in SORTABLE_FIELDS:
        raise ValueError(f"sort key must be one of {SORTABLE_FIELDS}, got {sort_key!r}")


def compare_records(
    a: AssetRecord,
    b: AssetRecord,
    sort_key: str,
    direction: SortDirection = SortDirection.ASC,
) -> int:
    """Three-way compare two records by *sort_key*, then by ``id``."""
    _check_sort_key(sort_key)
    result = compare_values(getattr(a, sort_key), getattr(b, sort_key))
    if result == 0 and sort_key != "id":
        result = natural_compare(a.id, b.id)
    return result if direction is SortDirection.ASC else -result


def sort_records(
    records: Iterable[AssetRecord],
    sort_key: str,
    direction: SortDirection = SortDirection.ASC,
) -> list[AssetRecord]:
    """Return *records* sorted by *sort_key* in *direction*."""
    _check_sort_key(sort_key)
    direction = SortDirection(direction)
    compare = functools.partial(compare_records, sort_key=sort_key, direction=direction)
    return sorted(records, key=functools.cmp_to_key(compare))
