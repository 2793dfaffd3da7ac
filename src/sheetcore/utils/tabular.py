"""
CSV import and export.

CSV text is read and written with pandas, treating every field as text: no
header row, no type inference and no NA conversion, so ``"007"`` and ``""``
survive a round trip unchanged.
"""

from __future__ import annotations

import io
from typing import IO, Optional, Union

import pandas as pd

from sheetcore.core.sheet import Sheet
from sheetcore.exceptions import ImportDataError

PathOrBuffer = Union[str, "io.PathLike[str]", IO[str]]


def read_csv(filepath_or_buffer: PathOrBuffer) -> list[list[str]]:
    """Read CSV into a rectangular array of text.

    Short rows are padded with empty cells. An empty input yields ``[]``.

    Raises:
        ImportDataError: If pandas cannot parse the input
    """
    try:
        frame = pd.read_csv(
            filepath_or_buffer,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
        )
    except pd.errors.EmptyDataError:
        return []
    except (pd.errors.ParserError, UnicodeDecodeError, ValueError) as e:
        raise ImportDataError(f"Failed to parse CSV: {e}") from e

    return frame.fillna("").astype(str).values.tolist()


def read_csv_text(text: str) -> list[list[str]]:
    return read_csv(io.StringIO(text))


def _trim_trailing_empty_rows(matrix: list[list[str]]) -> list[list[str]]:
    while matrix and all(cell == "" for cell in matrix[-1]):
        matrix.pop()
    return matrix


def _trim_trailing_empty_columns(matrix: list[list[str]]) -> list[list[str]]:
    width = 0
    for row in matrix:
        for c in range(len(row) - 1, -1, -1):
            if row[c] != "":
                width = max(width, c + 1)
                break
    return [row[:width] for row in matrix]


def sheet_to_dense(sheet: Sheet) -> list[list[str]]:
    """Sheet contents as text, columns in display order, empty margins trimmed."""
    data = sheet.cells.to_dense(sheet.row_count, sheet.col_count)
    order = sheet.layout.column_order
    data = [[row[col] for col in order] for row in data]
    return _trim_trailing_empty_columns(_trim_trailing_empty_rows(data))


def write_csv(sheet: Sheet, path_or_buffer: Optional[PathOrBuffer] = None) -> Optional[str]:
    """Write a sheet's displayed values as CSV.

    Returns:
        The CSV text when no destination is given, otherwise None
    """
    frame = pd.DataFrame(sheet_to_dense(sheet), dtype=str)
    return frame.to_csv(path_or_buffer, header=False, index=False, lineterminator="\n")


def import_csv(sheet: Sheet, filepath_or_buffer: PathOrBuffer) -> None:
    """Parse CSV and replace the sheet's contents with it.

    Raises:
        ImportDataError: If parsing fails (the sheet is unchanged)
    """
    sheet.import_dense(read_csv(filepath_or_buffer))
