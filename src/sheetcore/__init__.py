"""
sheetcore - the editing core of a spreadsheet grid.

This package models a sparse grid of cells holding literal text and formulas,
recalculates formulas to a fixed point, derives filtered and grouped row
views, sorts rows in place and lays out a resizable, virtualized grid.

Usage:
    >>> from sheetcore import Document, Address
    >>> doc = Document()
    >>> doc.edit_cell(Address.from_a1("A1"), "5")
    >>> doc.edit_cell(Address.from_a1("B1"), "=A1*2")
    >>> doc.active_sheet.get(Address.from_a1("B1"))
    '10'

Key components:
- CellStore / FormulaStore: sparse raw-text and formula storage
- recalculate: fixed-point formula evaluation with cycle detection
- build_view / sort_rows: filter, group and sort pipeline
- GridLayout / visible_range: sizes, column order and virtualization
- Sheet / Document: the mutation API presentation layers call into
"""

from .config import GridSettings, get_settings
from .core import Document, Sheet, Viewport, WindowView, CellView
from .engine import ERROR_MARKER, RecalcResult, compute_formula, evaluate_expression, recalculate
from .exceptions import *
from .layout import GridLayout, visible_range
from .spreadsheet import Address, CellRange, CellStore, FormulaStore, event_from_dict
from .view import GroupHeader, RowItem, SortOrder, build_view, sort_rows

# Version
__version__ = "0.1.0"

__all__ = [
    'Address',
    'CellRange',
    'CellStore',
    'FormulaStore',
    'Document',
    'Sheet',
    'Viewport',
    'WindowView',
    'CellView',
    'GridLayout',
    'GridSettings',
    'get_settings',
    'visible_range',
    'RowItem',
    'GroupHeader',
    'SortOrder',
    'build_view',
    'sort_rows',
    'recalculate',
    'RecalcResult',
    'compute_formula',
    'evaluate_expression',
    'event_from_dict',
    'ERROR_MARKER',
    'SheetcoreError',
    'ExpressionError',
    'ImportDataError',
    'DocumentFormatError',
]
