"""Tabular presentation pipeline: search, status filter, sort, paginate."""

from assetdash.table.engine import (
    DerivedView,
    TableView,
    ViewState,
    derive_view,
    filter_records,
    page_count_for,
    paginate,
    status_options,
)
from assetdash.table.matching import matches_query, matches_status
from assetdash.table.ordering import SortDirection, compare_records, natural_compare, sort_records

__all__ = [
    "DerivedView",
    "SortDirection",
    "TableView",
    "ViewState",
    "compare_records",
    "derive_view",
    "filter_records",
    "matches_query",
    "matches_status",
    "natural_compare",
    "page_count_for",
    "paginate",
    "sort_records",
    "status_options",
]
