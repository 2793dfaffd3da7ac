"""
Destructive row sort.

Sorting materializes the whole sheet as a dense array, stable-sorts its rows by
one column and writes the result back. Unlike the view pipeline it physically
moves row content; the returned permutation lets the caller move anything
else that is keyed by row (formulas, row heights) the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

import pandas as pd

from sheetcore.spreadsheet.model import Address, parse_number
from sheetcore.spreadsheet.store import CellStore


class SortOrder(Enum):
    """Sort state of a column header, cycled none -> asc -> desc -> none."""
    NONE = "none"
    ASC = "asc"
    DESC = "desc"

    def next(self) -> "SortOrder":
        return _NEXT_ORDER[self]


_NEXT_ORDER = {
    SortOrder.NONE: SortOrder.ASC,
    SortOrder.ASC: SortOrder.DESC,
    SortOrder.DESC: SortOrder.NONE,
}


@dataclass
class SortResult:
    """Sorted cells plus the row permutation that produced them.

    Attributes:
        cells: The new cell store
        permutation: ``permutation[new_row]`` is the row the content came from
    """
    cells: CellStore
    permutation: List[int]

    def new_positions(self) -> Dict[int, int]:
        """Map each old row index to the row it moved to."""
        return {old: new for new, old in enumerate(self.permutation)}


def sort_permutation(column_values: List[str], order: SortOrder) -> List[int]:
    """Stable row order for one column of text.

    Numbers sort before text and compare by value; text compares
    lexicographically. Descending reverses both rules while rows that compare
    equal keep their original relative order.
    """
    if order is SortOrder.NONE:
        return list(range(len(column_values)))

    numbers = [parse_number(text) for text in column_values]
    frame = pd.DataFrame({
        "is_text": [number is None for number in numbers],
        "number": [0.0 if number is None else number for number in numbers],
        "text": ["" if number is not None else text for text, number in zip(column_values, numbers)],
    })
    ascending = order is SortOrder.ASC
    ordered = frame.sort_values(
        ["is_text", "number", "text"],
        ascending=ascending,
        kind="mergesort",
    )
    return [int(row) for row in ordered.index]


def sort_rows(
    cells: CellStore,
    row_count: int,
    col_count: int,
    column: int,
    order: SortOrder
) -> SortResult:
    """Sort the rows of a sheet by the text in ``column``.

    Only cells inside the ``row_count`` x ``col_count`` bounds take part;
    entries outside them stay where they are.
    """
    data = cells.to_dense(row_count, col_count)
    permutation = sort_permutation([row[column] for row in data], order)
    sorted_cells = CellStore.from_dense([data[old] for old in permutation])

    for address, text in cells:
        if address.row >= row_count or address.col >= col_count:
            sorted_cells.set(address, text)
    return SortResult(cells=sorted_cells, permutation=permutation)


def remap_rows(mapping: Dict[int, int], address: Address) -> Address:
    """Address after a row move; rows missing from ``mapping`` stay put."""
    return Address(mapping.get(address.row, address.row), address.col)


def toggle_order(current_column: Optional[int], current_order: SortOrder, column: int) -> SortOrder:
    """Next sort state after a header click on ``column``.

    Clicking a different column than the sorted one starts over at ascending.
    """
    if current_column != column:
        return SortOrder.ASC
    return current_order.next()
