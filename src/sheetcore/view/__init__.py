"""
Row views: the filter -> group pipeline and the destructive row sort.
"""

from sheetcore.view.pipeline import (
    GroupHeader,
    RowItem,
    ViewItem,
    build_view,
    filter_rows,
    group_rows,
    item_rows,
)
from sheetcore.view.sort import SortOrder, SortResult, sort_permutation, sort_rows

__all__ = [
    "GroupHeader",
    "RowItem",
    "ViewItem",
    "build_view",
    "filter_rows",
    "group_rows",
    "item_rows",
    "SortOrder",
    "SortResult",
    "sort_permutation",
    "sort_rows",
]
