"""
Derived row views: filter, then group.

The pipeline is a pure function of the cell store and the sheet's view state;
it never modifies either. Its output is a sequence of view items, each either
a data row or a synthetic group header.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Union

import pandas as pd

from sheetcore.spreadsheet.model import Address
from sheetcore.spreadsheet.store import CellStore


@dataclass(frozen=True)
class RowItem:
    """A data row, by its row index in the cell store."""
    row: int


@dataclass(frozen=True)
class GroupHeader:
    """Header preceding the rows of one group; ``label`` is their shared text."""
    label: str


ViewItem = Union[RowItem, GroupHeader]


def filter_rows(cells: CellStore, row_count: int, filters: Mapping[int, str]) -> list[int]:
    """Rows in [0, row_count) whose cells contain every filter substring.

    Matching is case-insensitive; an empty substring matches every cell,
    including empty ones.
    """
    needles = [(col, text.lower()) for col, text in filters.items()]
    return [
        row for row in range(row_count)
        if all(needle in cells.get(Address(row, col)).lower() for col, needle in needles)
    ]


def group_rows(
    cells: CellStore,
    rows: Sequence[int],
    grouping_column: Optional[int]
) -> list[ViewItem]:
    """Wrap rows as view items, bucketed by the grouping column if set.

    Buckets keep the order in which their value is first seen; empty text is
    a bucket of its own. Rows inside a bucket keep their input order.
    """
    if grouping_column is None:
        return [RowItem(row) for row in rows]
    if not rows:
        return []

    values = pd.Series(
        [cells.get(Address(row, grouping_column)) for row in rows],
        index=list(rows),
        dtype=object,
    )
    items: list[ViewItem] = []
    for label, members in values.groupby(values, sort=False):
        items.append(GroupHeader(str(label)))
        items.extend(RowItem(int(row)) for row in members.index)
    return items


def build_view(
    cells: CellStore,
    row_count: int,
    filters: Mapping[int, str],
    grouping_column: Optional[int]
) -> list[ViewItem]:
    """Filter then group: the displayed row sequence of a sheet."""
    return group_rows(cells, filter_rows(cells, row_count, filters), grouping_column)


def item_rows(items: Sequence[ViewItem]) -> list[int]:
    """Data row indices of a view, in display order, headers skipped."""
    rows = []
    for item in items:
        match item:
            case RowItem(row=row):
                rows.append(row)
            case GroupHeader():
                pass
    return rows
