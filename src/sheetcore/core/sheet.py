"""
Sheet: one tab of a document.

A Sheet aggregates the cell and formula stores, the grid layout, interaction
state (focus and selection) and view state (filters, grouping, sort). It is
the single place where raw input enters the stores, so the sparsity and
formula-classification rules are enforced here and the sheet is recalculated
after every change to either store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sheetcore.config import GridSettings, get_settings
from sheetcore.engine.recalc import RecalcResult, recalculate
from sheetcore.exceptions import ImportDataError
from sheetcore.layout.grid import GridLayout
from sheetcore.layout.virtual import offsets, visible_range
from sheetcore.spreadsheet.model import Address, CellRange, Formula
from sheetcore.spreadsheet.store import CellStore, FormulaStore
from sheetcore.view.pipeline import GroupHeader, RowItem, ViewItem, build_view
from sheetcore.view.sort import SortOrder, remap_rows, sort_rows, toggle_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewport:
    """Visible area of the data region, in layout units."""
    top: float
    height: float
    left: float = 0
    width: float = float("inf")


@dataclass(frozen=True)
class CellView:
    address: Address
    display_text: str
    is_selected: bool
    is_focused: bool


@dataclass
class WindowRow:
    """One visible view item.

    Attributes:
        item: The row or group header being shown
        top: Offset of the item from the top of the data region
        height: Item height
        cells: Visible cells of a data row in display order (empty for headers)
    """
    item: ViewItem
    top: int
    height: int
    cells: List[CellView] = field(default_factory=list)


@dataclass
class WindowView:
    """Resolved content of a viewport.

    Attributes:
        rows: Visible items with their cells
        item_range: Half-open range of view item indices shown
        column_range: Half-open range of display columns shown
        column_lefts: Left offset of each shown display column
        column_widths: Width of each shown display column
        total_height: Height of the whole view
        total_width: Width of all data columns
    """
    rows: List[WindowRow]
    item_range: tuple
    column_range: tuple
    column_lefts: List[int]
    column_widths: List[int]
    total_height: int
    total_width: int


class Sheet:
    """A named grid of cells with its layout and view state.

    Attributes:
        name: The sheet name (must be non-empty)
        cells: Displayed text of every non-empty cell
        formulas: Raw text of every formula cell
        layout: Bounds, sizes and column order
        focused: Address being edited, if any
        selection_start: Anchor of the selection rectangle
        selection_end: Moving corner of the selection rectangle
        is_selecting: True while a selection drag is in progress
        sort_column: Column of the last header sort, if any
        sort_order: Sort state of ``sort_column``
        filters: Column -> substring every shown row must contain
        grouping_column: Column whose text groups the view, if any
    """

    def __init__(
        self,
        name: str,
        cells: Optional[CellStore] = None,
        formulas: Optional[FormulaStore] = None,
        layout: Optional[GridLayout] = None,
        settings: Optional[GridSettings] = None,
    ) -> None:
        """Initialize a Sheet with default bounds unless a layout is given.

        Raises:
            ValueError: If name is empty
        """
        if not name or not isinstance(name, str):
            raise ValueError("Sheet name must be a non-empty string")

        self.settings = settings or get_settings()
        self.name = name
        self.cells = cells if cells is not None else CellStore()
        self.formulas = formulas if formulas is not None else FormulaStore()
        self.layout = layout if layout is not None else GridLayout.default(self.settings)

        self.focused: Optional[Address] = None
        self.selection_start: Optional[Address] = None
        self.selection_end: Optional[Address] = None
        self.is_selecting = False

        self.sort_column: Optional[int] = None
        self.sort_order = SortOrder.NONE
        self.filters: Dict[int, str] = {}
        self.grouping_column: Optional[int] = None

    def __repr__(self) -> str:
        return (
            f"Sheet(name={self.name!r}, rows={self.row_count}, cols={self.col_count}, "
            f"cells={len(self.cells)}, formulas={len(self.formulas)})"
        )

    @property
    def row_count(self) -> int:
        return self.layout.row_count

    @property
    def col_count(self) -> int:
        return self.layout.col_count

    def clone(self) -> "Sheet":
        """Copy every piece of mutable sub-state."""
        other = Sheet(
            self.name,
            cells=self.cells.copy(),
            formulas=self.formulas.copy(),
            layout=self.layout.copy(),
            settings=self.settings,
        )
        other.focused = self.focused
        other.selection_start = self.selection_start
        other.selection_end = self.selection_end
        other.is_selecting = self.is_selecting
        other.sort_column = self.sort_column
        other.sort_order = self.sort_order
        other.filters = dict(self.filters)
        other.grouping_column = self.grouping_column
        return other

    # Cells

    def edit_cell(self, address: Address, raw: str) -> RecalcResult:
        """Enter raw input at an address.

        The address becomes a formula cell iff ``raw`` starts with ``=``. The
        raw text is stored as the cell's text and then the sheet is
        recalculated, which replaces formula text with its value.
        """
        self.layout.ensure_capacity(address.row, address.col)
        self.formulas.classify(address, raw)
        self.cells.set(address, raw)
        return self.recalculate()

    def recalculate(self) -> RecalcResult:
        result = recalculate(self.cells, self.formulas, settings=self.settings)
        self.cells = result.cells
        return result

    def get(self, address: Address) -> str:
        return self.cells.get(address)

    def display_text(self, address: Address) -> str:
        """Text shown at an address: formula text while it is being edited."""
        if address == self.focused:
            formula = self.formulas.get(address)
            if formula is not None:
                return formula
        return self.cells.get(address)

    # Focus and selection

    def focus(self, address: Address) -> None:
        self.focused = address

    def blur(self, draft: Optional[str] = None) -> None:
        """Leave the focused cell, committing ``draft`` as its raw input if given."""
        if self.focused is not None and draft is not None:
            self.edit_cell(self.focused, draft)
        self.focused = None

    def begin_selection(self, address: Address) -> None:
        self.selection_start = address
        self.selection_end = address
        self.is_selecting = True

    def extend_selection(self, address: Address) -> None:
        if self.is_selecting:
            self.selection_end = address

    def end_selection(self) -> None:
        self.is_selecting = False

    def selection(self) -> Optional[CellRange]:
        if self.selection_start is None or self.selection_end is None:
            return None
        return CellRange.spanning(self.selection_start, self.selection_end)

    def is_selected(self, address: Address) -> bool:
        selection = self.selection()
        return selection is not None and selection.contains(address)

    # View state

    def set_filter(self, column: int, text: str) -> None:
        """Show only rows whose ``column`` contains ``text``; "" removes the filter."""
        if not 0 <= column < self.col_count:
            logger.debug("Rejected filter on column %d", column)
            return
        if text == "":
            self.filters.pop(column, None)
        else:
            self.filters[column] = text

    def clear_filters(self) -> None:
        self.filters = {}

    def set_grouping(self, column: Optional[int]) -> None:
        if column is not None and not 0 <= column < self.col_count:
            logger.debug("Rejected grouping on column %d", column)
            return
        self.grouping_column = column

    def view(self) -> List[ViewItem]:
        """Filtered and grouped items in display order."""
        return build_view(self.cells, self.row_count, self.filters, self.grouping_column)

    def toggle_sort(self, column: int) -> SortOrder:
        """Advance the header sort state of a column and sort if it is now active.

        Returning to ``none`` leaves the rows where the last sort put them.
        """
        if not 0 <= column < self.col_count:
            logger.debug("Rejected sort on column %d", column)
            return self.sort_order
        order = toggle_order(self.sort_column, self.sort_order, column)
        self.sort_column = column if order is not SortOrder.NONE else None
        self.sort_order = order
        if order is not SortOrder.NONE:
            self.sort(column, order)
        return order

    def sort(self, column: int, order: SortOrder) -> None:
        """Reorder rows by one column.

        Formula cells and row heights move with their rows. Formula text is
        not rewritten, so references keep pointing at the same addresses.
        """
        result = sort_rows(self.cells, self.row_count, self.col_count, column, order)
        moved = result.new_positions()
        self.formulas = FormulaStore({
            remap_rows(moved, address): raw for address, raw in self.formulas
        })
        self.cells = result.cells
        self.layout.permute_rows(result.permutation)
        self.recalculate()

    # Layout

    def resize_row(self, row: int, height: int) -> bool:
        return self.layout.resize_row(row, height)

    def resize_column(self, display_col: int, width: int) -> bool:
        return self.layout.resize_column(display_col, width)

    def move_column(self, from_display: int, to_display: int) -> bool:
        return self.layout.move_column(from_display, to_display)

    def item_sizes(self, items: List[ViewItem]) -> List[int]:
        sizes = []
        for item in items:
            match item:
                case RowItem(row=row):
                    sizes.append(self.layout.row_height(row))
                case GroupHeader():
                    sizes.append(self.settings.group_header_height)
        return sizes

    def render_window(self, viewport: Viewport, overscan: Optional[int] = None) -> WindowView:
        """Resolve the cells a viewport shows.

        Rows are virtualized over the view items (group headers included) and
        columns over the display order.
        """
        if overscan is None:
            overscan = self.settings.overscan
        items = self.view()
        heights = self.item_sizes(items)
        widths = self.layout.display_widths()

        item_start, item_stop = visible_range(heights, viewport.top, viewport.height, overscan)
        col_start, col_stop = visible_range(widths, viewport.left, viewport.width, overscan)
        tops = offsets(heights)
        lefts = offsets(widths)

        rows = []
        for i in range(item_start, item_stop):
            item = items[i]
            window_row = WindowRow(item=item, top=int(tops[i]), height=heights[i])
            match item:
                case RowItem(row=row):
                    for display_col in range(col_start, col_stop):
                        address = Address(row, self.layout.logical_column(display_col))
                        window_row.cells.append(CellView(
                            address=address,
                            display_text=self.display_text(address),
                            is_selected=self.is_selected(address),
                            is_focused=address == self.focused,
                        ))
                case GroupHeader():
                    pass
            rows.append(window_row)

        return WindowView(
            rows=rows,
            item_range=(item_start, item_stop),
            column_range=(col_start, col_stop),
            column_lefts=[int(lefts[c]) for c in range(col_start, col_stop)],
            column_widths=widths[col_start:col_stop],
            total_height=sum(heights),
            total_width=sum(widths),
        )

    # Bulk import

    def import_dense(self, data: Any) -> None:
        """Replace the sheet's contents with a rectangular array of text.

        Cells starting with ``=`` become formulas. Bounds grow to fit the
        data and never shrink. The whole array is validated first, so a
        rejected import leaves the sheet untouched.

        Raises:
            ImportDataError: If data is not a list of lists of strings
        """
        validate_dense(data)

        cells = CellStore.from_dense(data)
        formulas = FormulaStore()
        for address, text in cells:
            if Formula.is_formula(text):
                formulas.set(address, text)

        width = max((len(row) for row in data), default=0)
        self.layout.grow_to(len(data), width)
        self.cells = cells
        self.formulas = formulas
        self.recalculate()


def validate_dense(data: Any) -> None:
    """Check that ``data`` is a list of rows, each a list of strings.

    Raises:
        ImportDataError: Naming the first offending row or cell
    """
    if not isinstance(data, list):
        raise ImportDataError(f"Expected a list of rows, got {type(data).__name__}")
    for r, row in enumerate(data):
        if not isinstance(row, list):
            raise ImportDataError(f"Row {r} is not a list (got {type(row).__name__})")
        for c, cell in enumerate(row):
            if not isinstance(cell, str):
                raise ImportDataError(
                    f"Cell at row {r}, column {c} is not a string (got {type(cell).__name__})"
                )
