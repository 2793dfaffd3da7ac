"""
Document serialization utilities.

Provides JSON serialization and deserialization for documents. The record
mirrors the document model (``sheets`` plus ``activeSheetIndex``) with the
sheet keys of the stored documents the grid has always written, and adds a
version key for forward compatibility.

Loading repairs layout arrays: sheets with missing or short ``rowHeights``,
``columnWidths`` or ``columnOrder`` are padded to their declared bounds.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from sheetcore.config import GridSettings, get_settings
from sheetcore.core.document import Document
from sheetcore.core.sheet import Sheet
from sheetcore.exceptions import DocumentFormatError
from sheetcore.layout.grid import GridLayout
from sheetcore.spreadsheet.model import Address
from sheetcore.spreadsheet.store import CellStore, FormulaStore
from sheetcore.view.sort import SortOrder

# Current serialization format version
SERIALIZATION_VERSION = "1.0"


def _address_to_dict(address: Optional[Address]) -> Optional[Dict[str, int]]:
    if address is None:
        return None
    return {"row": address.row, "col": address.col}


def _address_from_dict(data: Optional[Dict[str, Any]]) -> Optional[Address]:
    if data is None:
        return None
    return Address(int(data["row"]), int(data["col"]))


def sheet_to_dict(sheet: Sheet) -> Dict[str, Any]:
    """Convert a sheet to its stored record."""
    return {
        "name": sheet.name,
        "cells": sheet.cells.to_dict(),
        "formulas": sheet.formulas.to_dict(),
        "maxRows": sheet.row_count,
        "maxCols": sheet.col_count,
        "focusedCell": _address_to_dict(sheet.focused),
        "selectionStart": _address_to_dict(sheet.selection_start),
        "selectionEnd": _address_to_dict(sheet.selection_end),
        "isSelecting": sheet.is_selecting,
        "sortColumn": sheet.sort_column,
        "sortOrder": None if sheet.sort_order is SortOrder.NONE else sheet.sort_order.value,
        "filters": {str(col): text for col, text in sheet.filters.items()},
        "groupingColumn": sheet.grouping_column,
        "columnWidths": list(sheet.layout.column_widths),
        "rowHeights": list(sheet.layout.row_heights),
        "columnOrder": list(sheet.layout.column_order),
    }


def sheet_from_dict(data: Dict[str, Any], settings: Optional[GridSettings] = None) -> Sheet:
    """Rebuild a sheet from its stored record, repairing layout arrays.

    Raises:
        KeyError, ValueError, TypeError: If the record is malformed
    """
    settings = settings or get_settings()
    layout = GridLayout(
        row_count=int(data.get("maxRows", settings.default_rows)),
        col_count=int(data.get("maxCols", settings.default_cols)),
        row_heights=[int(h) for h in data.get("rowHeights") or []],
        column_widths=[int(w) for w in data.get("columnWidths") or []],
        column_order=[int(c) for c in data.get("columnOrder") or []],
        settings=settings,
    )
    sheet = Sheet(
        data["name"],
        cells=CellStore.from_dict(data.get("cells") or {}),
        formulas=FormulaStore.from_dict(data.get("formulas") or {}),
        layout=layout,
        settings=settings,
    )
    sheet.focused = _address_from_dict(data.get("focusedCell"))
    sheet.selection_start = _address_from_dict(data.get("selectionStart"))
    sheet.selection_end = _address_from_dict(data.get("selectionEnd"))
    sheet.is_selecting = bool(data.get("isSelecting", False))
    sheet.sort_column = data.get("sortColumn")
    sheet.sort_order = SortOrder(data.get("sortOrder") or "none")
    sheet.filters = {int(col): str(text) for col, text in (data.get("filters") or {}).items()}
    sheet.grouping_column = data.get("groupingColumn")
    return sheet


def serialize(document: Document) -> Dict[str, Any]:
    """Serialize a document to a JSON-serializable dictionary.

    Raises:
        TypeError: If document is not a Document instance
    """
    if not isinstance(document, Document):
        raise TypeError(f"Expected Document, got {type(document)}")

    return {
        "version": SERIALIZATION_VERSION,
        "sheets": [sheet_to_dict(sheet) for sheet in document.sheets],
        "activeSheetIndex": document.active_index,
    }


def deserialize(data: Dict[str, Any], settings: Optional[GridSettings] = None) -> Document:
    """Deserialize a document from a dictionary.

    Records without a version key are accepted as version 1.0. An out of
    range ``activeSheetIndex`` is clamped to the last sheet.

    Raises:
        DocumentFormatError: If data is missing required fields or has
            invalid structure
        TypeError: If data is not a dictionary
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    version = data.get("version", SERIALIZATION_VERSION)
    if version != SERIALIZATION_VERSION:
        raise DocumentFormatError(
            f"Unsupported serialization version: {version}. "
            f"Expected {SERIALIZATION_VERSION}"
        )

    raw_sheets = data.get("sheets")
    if not isinstance(raw_sheets, list) or not raw_sheets:
        raise DocumentFormatError("Serialized document must have a non-empty 'sheets' array")

    settings = settings or get_settings()
    try:
        sheets = [sheet_from_dict(sheet_data, settings) for sheet_data in raw_sheets]
    except KeyError as e:
        raise DocumentFormatError(f"Missing required field in sheet: {e}") from e
    except (ValueError, TypeError, AttributeError) as e:
        raise DocumentFormatError(f"Failed to deserialize sheet: {e}") from e

    active_index = data.get("activeSheetIndex", 0)
    if not isinstance(active_index, int):
        raise DocumentFormatError(f"activeSheetIndex must be an integer, got {active_index!r}")
    active_index = min(max(active_index, 0), len(sheets) - 1)
    return Document(sheets, active_index=active_index, settings=settings)


def to_json(document: Document, **kwargs) -> str:
    """Serialize a document to a JSON string.

    Args:
        document: The document to serialize
        **kwargs: Additional arguments to pass to json.dumps (e.g., indent=2)
    """
    return json.dumps(serialize(document), **kwargs)


def from_json(json_str: str, settings: Optional[GridSettings] = None) -> Document:
    """Deserialize a document from a JSON string.

    Raises:
        DocumentFormatError: If JSON is invalid or the document structure is invalid
    """
    if not isinstance(json_str, str):
        raise TypeError(f"Expected str, got {type(json_str)}")

    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Invalid JSON: {e}") from e

    return deserialize(data, settings)


def save(document: Document, path: Union[str, Path]) -> None:
    Path(path).write_text(to_json(document, indent=2), encoding="utf-8")


def load(path: Union[str, Path], settings: Optional[GridSettings] = None) -> Document:
    return from_json(Path(path).read_text(encoding="utf-8"), settings)
