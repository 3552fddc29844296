"""Record predicates used by the table filter stages."""

from __future__ import annotations

from assetdash._constants import STATUS_ALL
from assetdash.models.asset import AssetRecord

#: Fields searched by the free-text query.
SEARCH_FIELDS: tuple[str, ...] = ("name", "type", "location", "status", "id")


def matches_query(record: AssetRecord, query: str) -> bool:
    """Whether *record* matches a free-text *query*.

    The query is trimmed and compared case-insensitively as a substring of
    any of :data:`SEARCH_FIELDS`. A blank query matches every record.
    """
    needle = query.strip().casefold()
    if not needle:
        return True
    return any(needle in str(getattr(record, name) or "").casefold() for name in SEARCH_FIELDS)


def matches_status(record: AssetRecord, status_filter: str) -> bool:
    return status_filter == STATUS_ALL or record.status == status_filter
