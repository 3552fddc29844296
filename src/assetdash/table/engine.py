"""Derived table views over an asset collection.

:func:`derive_view` is a pure function of ``(records, state)``. User
actions never mutate a :class:`ViewState`; they return a new one, and
the owning view re-derives. :class:`TableView` keeps the last
``(inputs, output)`` pair so re-deriving unchanged inputs is free.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator

from assetdash._constants import PAGE_SIZE, STATUS_ALL
from assetdash.models.asset import SORTABLE_FIELDS, AssetRecord, AssetSortKey
from assetdash.table.matching import matches_query, matches_status
from assetdash.table.ordering import SortDirection, sort_records


class ViewState(BaseModel):
    """User-controlled table parameters.

    Changing the query, the status filter or the sort column resets
    ``page`` to 1 because the old page position no longer refers to the
    same rows.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    query: str = ""
    status_filter: str = STATUS_ALL
    sort_key: AssetSortKey = "name"
    sort_direction: SortDirection = SortDirection.ASC
    page: int = Field(default=1, ge=1)

    @field_validator("status_filter")
    @classmethod
    def _status_non_empty(cls, value: str) -> str:
        return value or STATUS_ALL

    def with_query(self, query: str) -> ViewState:
        return self.model_copy(update={"query": query, "page": 1})

    def with_status_filter(self, status_filter: str) -> ViewState:
        return self.model_copy(update={"status_filter": status_filter or STATUS_ALL, "page": 1})

    def toggle_sort(self, sort_key: str) -> ViewState:
        """Sort by *sort_key*.

        Clicking the active column flips its direction; any other column
        becomes active in ascending order.
        """
        if sort_key not in SORTABLE_FIELDS:
            raise ValueError(f"sort key must be one of {SORTABLE_FIELDS}, got {sort_key!r}")
        if sort_key == self.sort_key:
            direction = self.sort_direction.flipped()
        else:
            direction = SortDirection.ASC
        return self.model_copy(update={"sort_key": sort_key, "sort_direction": direction, "page": 1})

    def with_page(self, page: int, page_count: int) -> ViewState:
        return self.model_copy(update={"page": _clamp(page, page_count)})

    def clamped(self, page_count: int) -> ViewState:
        """Return a state whose page lies within ``[1, page_count]``."""
        page = _clamp(self.page, page_count)
        if page == self.page:
            return self
        return self.model_copy(update={"page": page})


def _clamp(page: int, page_count: int) -> int:
    return min(max(1, page), max(1, page_count))


@dataclass(frozen=True)
class DerivedView:
    """One derived table page and the numbers needed to render around it."""

    page: tuple[AssetRecord, ...]
    page_count: int
    total_after_filter: int
    status_options: tuple[str, ...]


def status_options(records: Iterable[AssetRecord]) -> tuple[str, ...]:
    """``"all"`` followed by the distinct record statuses, sorted.

    Records with an empty status get no tab of their own; they are only
    listed under ``"all"``.
    """
    distinct = {record.status for record in records if record.status}
    distinct.discard(STATUS_ALL)
    return (STATUS_ALL, *sorted(distinct))


def filter_records(records: Iterable[AssetRecord], state: ViewState) -> list[AssetRecord]:
    """Apply the status filter, then the free-text query."""
    by_status = [record for record in records if matches_status(record, state.status_filter)]
    return [record for record in by_status if matches_query(record, state.query)]


def page_count_for(total: int, page_size: int = PAGE_SIZE) -> int:
    return max(1, math.ceil(total / page_size))


def paginate(records: Sequence[AssetRecord], page: int, page_size: int = PAGE_SIZE) -> tuple[AssetRecord, ...]:
    """Slice ``[(page-1)*page_size, page*page_size)``; no clamping."""
    start = (page - 1) * page_size
    return tuple(records[start : start + page_size])


def derive_view(
    records: Sequence[AssetRecord],
    state: ViewState,
    *,
    page_size: int = PAGE_SIZE,
) -> DerivedView:
    """Derive the visible page of *records* for *state*."""
    filtered = filter_records(records, state)
    ordered = sort_records(filtered, state.sort_key, state.sort_direction)
    return DerivedView(
        page=paginate(ordered, state.page, page_size),
        page_count=page_count_for(len(ordered), page_size),
        total_after_filter=len(ordered),
        status_options=status_options(records),
    )


class TableView:
    """Per-table memo of the last :func:`derive_view` call."""

    def __init__(self, *, page_size: int = PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self._page_size = page_size
        self._last_records: tuple[AssetRecord, ...] | None = None
        self._last_state: ViewState | None = None
        self._last_view: DerivedView | None = None

    @property
    def page_size(self) -> int:
        return self._page_size

    def derive(self, records: Sequence[AssetRecord], state: ViewState) -> DerivedView:
        snapshot = tuple(records)
        if (
            self._last_view is not None
            and self._last_state == state
            and self._last_records is not None
            and _same_records(self._last_records, snapshot)
        ):
            return self._last_view
        view = derive_view(snapshot, state, page_size=self._page_size)
        self._last_records = snapshot
        self._last_state = state
        self._last_view = view
        return view

    def invalidate(self) -> None:
        self._last_records = None
        self._last_state = None
        self._last_view = None


def _same_records(a: tuple[AssetRecord, ...], b: tuple[AssetRecord, ...]) -> bool:
    if len(a) != len(b):
        return False
    return all(x is y or x == y for x, y in zip(a, b))
