"""
Spreadsheet data model.

This module provides addresses and ranges, the sparse cell and formula
stores, and the events a presentation layer sends into a document.
"""

from sheetcore.spreadsheet.model import (
    Address,
    CellRange,
    Formula,
    col_to_letter,
    letter_to_col,
    parse_number,
)
from sheetcore.spreadsheet.store import CellStore, FormulaStore
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
    event_from_dict,
)

__all__ = [
    "Address",
    "CellRange",
    "Formula",
    "col_to_letter",
    "letter_to_col",
    "parse_number",
    "CellStore",
    "FormulaStore",
    "AddSheet",
    "DeleteSheet",
    "EditCell",
    "MoveColumn",
    "ResizeColumn",
    "ResizeRow",
    "SetFilter",
    "SetGrouping",
    "SheetEvent",
    "SwitchSheet",
    "ToggleSort",
    "event_from_dict",
]
