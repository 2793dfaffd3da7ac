"""
Document: an ordered collection of sheets with one active sheet.

Every mutation goes through the document and is applied copy-on-write: the
active sheet is cloned, the clone is changed, and only then swapped in. A
mutation that raises leaves the document exactly as it was.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar

from sheetcore.config import GridSettings, get_settings
from sheetcore.core.sheet import Sheet, Viewport, WindowView
from sheetcore.spreadsheet.model import Address
from sheetcore.spreadsheet.operations import (
    AddSheet,
    DeleteSheet,
    EditCell,
    MoveColumn,
    ResizeColumn,
    ResizeRow,
    SetFilter,
    SetGrouping,
    SheetEvent,
    SwitchSheet,
    ToggleSort,
)
from sheetcore.view.sort import SortOrder

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Document:
    """Sheets plus the index of the active one.

    Attributes:
        sheets: Sheets in tab order (never empty)
        active_index: Index of the sheet that mutations apply to
    """

    def __init__(
        self,
        sheets: Optional[List[Sheet]] = None,
        active_index: int = 0,
        settings: Optional[GridSettings] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.sheets = list(sheets) if sheets else [Sheet("Sheet1", settings=self.settings)]
        if not 0 <= active_index < len(self.sheets):
            raise ValueError(
                f"active_index {active_index} out of range for {len(self.sheets)} sheets"
            )
        self.active_index = active_index

    def __repr__(self) -> str:
        names = [sheet.name for sheet in self.sheets]
        return f"Document(sheets={names!r}, active_index={self.active_index})"

    @property
    def active_sheet(self) -> Sheet:
        return self.sheets[self.active_index]

    def _update(self, mutate: Callable[[Sheet], T]) -> T:
        draft = self.active_sheet.clone()
        result = mutate(draft)
        sheets = list(self.sheets)
        sheets[self.active_index] = draft
        self.sheets = sheets
        return result

    # Sheet tabs

    def add_sheet(self, name: Optional[str] = None) -> Sheet:
        """Append a sheet with default bounds and make it active."""
        if name is None:
            taken = {sheet.name for sheet in self.sheets}
            n = len(self.sheets) + 1
            while f"Sheet{n}" in taken:
                n += 1
            name = f"Sheet{n}"
        sheet = Sheet(name, settings=self.settings)
        self.sheets = [*self.sheets, sheet]
        self.active_index = len(self.sheets) - 1
        return sheet

    def delete_sheet(self, index: int) -> bool:
        """Remove a sheet; the last remaining sheet cannot be removed.

        The active index stays on the same position, or moves to the nearest
        lower one that still exists.
        """
        if len(self.sheets) <= 1 or not 0 <= index < len(self.sheets):
            logger.debug("Rejected deletion of sheet %d of %d", index, len(self.sheets))
            return False
        self.sheets = self.sheets[:index] + self.sheets[index + 1:]
        if self.active_index > index:
            self.active_index -= 1
        self.active_index = min(self.active_index, len(self.sheets) - 1)
        return True

    def switch_sheet(self, index: int) -> bool:
        if not 0 <= index < len(self.sheets):
            logger.debug("Rejected switch to sheet %d of %d", index, len(self.sheets))
            return False
        self.active_index = index
        return True

    # Active-sheet mutations

    def edit_cell(self, address: Address, raw: str) -> None:
        self._update(lambda sheet: sheet.edit_cell(address, raw))

    def focus(self, address: Address) -> None:
        self._update(lambda sheet: sheet.focus(address))

    def blur(self, draft: Optional[str] = None) -> None:
        self._update(lambda sheet: sheet.blur(draft))

    def begin_selection(self, address: Address) -> None:
        self._update(lambda sheet: sheet.begin_selection(address))

    def extend_selection(self, address: Address) -> None:
        self._update(lambda sheet: sheet.extend_selection(address))

    def end_selection(self) -> None:
        self._update(lambda sheet: sheet.end_selection())

    def set_filter(self, column: int, text: str) -> None:
        self._update(lambda sheet: sheet.set_filter(column, text))

    def clear_filters(self) -> None:
        self._update(lambda sheet: sheet.clear_filters())

    def set_grouping(self, column: Optional[int]) -> None:
        self._update(lambda sheet: sheet.set_grouping(column))

    def toggle_sort(self, column: int) -> SortOrder:
        return self._update(lambda sheet: sheet.toggle_sort(column))

    def resize_row(self, row: int, height: int) -> bool:
        return self._update(lambda sheet: sheet.resize_row(row, height))

    def resize_column(self, display_col: int, width: int) -> bool:
        return self._update(lambda sheet: sheet.resize_column(display_col, width))

    def move_column(self, from_display: int, to_display: int) -> bool:
        return self._update(lambda sheet: sheet.move_column(from_display, to_display))

    def import_dense(self, data: Any) -> None:
        """Replace the active sheet's contents; see ``Sheet.import_dense``.

        Raises:
            ImportDataError: If data is malformed (the document is unchanged)
        """
        self._update(lambda sheet: sheet.import_dense(data))

    def render_window(self, viewport: Viewport) -> WindowView:
        return self.active_sheet.render_window(viewport)

    def apply(self, event: SheetEvent) -> Any:
        """Apply one presentation event."""
        match event:
            case EditCell(row=row, col=col, raw=raw):
                return self.edit_cell(Address(row, col), raw)
            case ResizeRow(row=row, height=height):
                return self.resize_row(row, height)
            case ResizeColumn(column=column, width=width):
                return self.resize_column(column, width)
            case MoveColumn(from_column=from_column, to_column=to_column):
                return self.move_column(from_column, to_column)
            case ToggleSort(column=column):
                return self.toggle_sort(column)
            case SetFilter(column=column, value=value):
                return self.set_filter(column, value)
            case SetGrouping(column=column):
                return self.set_grouping(column)
            case AddSheet(name=name):
                return self.add_sheet(name)
            case DeleteSheet(index=index):
                return self.delete_sheet(index)
            case SwitchSheet(index=index):
                return self.switch_sheet(index)
            case _:
                raise TypeError(f"Unknown event type: {type(event).__name__}")
