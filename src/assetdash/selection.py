"""Selection coordination between the asset table and the trend chart.

The chart follows one asset: the operator's explicit choice while that
asset still exists, otherwise the first asset of the default order (name
ascending, unfiltered), which is what the table shows first on load.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from assetdash.models.asset import AssetRecord
from assetdash.table.ordering import SortDirection, sort_records

_logger = logging.getLogger(__name__)


def default_candidate(records: Sequence[AssetRecord]) -> str | None:
    """Id of the first record by name ascending, or ``None`` when empty."""
    if not records:
        return None
    return sort_records(records, "name", SortDirection.ASC)[0].id


def effective_selection(records: Sequence[AssetRecord], explicit: str | None) -> str | None:
    """Resolve the emphasized asset id for *records*.

    An explicit selection wins while it is still a member of *records*;
    otherwise the default candidate is used.
    """
    if not records:
        return None
    if explicit is not None and any(record.id == explicit for record in records):
        return explicit
    return default_candidate(records)


class SelectionCoordinator:
    """Holds the explicit selection and memoizes the effective one.

    Call :meth:`resolve` with the current collection whenever it may have
    changed; a stale explicit selection then falls back to the default.
    """

    def __init__(self) -> None:
        self._explicit: str | None = None
        self._last_records: tuple[AssetRecord, ...] | None = None
        self._last_explicit: str | None = None
        self._last_result: str | None = None

    @property
    def explicit(self) -> str | None:
        return self._explicit

    def select(self, asset_id: str | None) -> None:
        self._explicit = asset_id

    def clear(self) -> None:
        self._explicit = None

    def resolve(self, records: Sequence[AssetRecord]) -> str | None:
        snapshot = tuple(records)
        if (
            self._last_records is not None
            and self._last_explicit == self._explicit
            and (self._last_records is snapshot or self._last_records == snapshot)
        ):
            return self._last_result
        result = effective_selection(snapshot, self._explicit)
        if self._explicit is not None and result != self._explicit:
            _logger.debug("Explicit selection %s no longer present; using %s", self._explicit, result)
        self._last_records = snapshot
        self._last_explicit = self._explicit
        self._last_result = result
        return result
