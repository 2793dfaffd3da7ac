"""
Sheet visualization utilities.

Provides a plain-text rendering of a sheet's current view: column letters in
display order, one line per data row and a marker line per group header. It
is meant for logs, doctests and debugging sessions, not for end users.
"""

from typing import List, Optional

from sheetcore.core.sheet import Sheet
from sheetcore.spreadsheet.model import Address, col_to_letter
from sheetcore.view.pipeline import GroupHeader, RowItem


def visualize(sheet: Sheet, max_rows: Optional[int] = None, max_width: int = 12) -> str:
    """Render the filtered, grouped view of a sheet as a text table.

    Only columns holding at least one non-empty cell are shown. Rows without
    any text are skipped.

    Args:
        sheet: The sheet to render
        max_rows: Stop after this many lines of rows and headers
        max_width: Truncate cell text to this many characters

    Example:
        >>> sheet = Sheet("Data")
        >>> _ = sheet.edit_cell(Address.from_a1("A1"), "x")
        >>> print(visualize(sheet))
          | A
        1 | x
    """
    if not isinstance(sheet, Sheet):
        raise TypeError(f"Expected Sheet, got {type(sheet)}")

    used = {address.col for address, _ in sheet.cells}
    columns = [col for col in sheet.layout.column_order if col in used]

    items = sheet.view()
    body: List[List[str]] = []
    for item in items:
        match item:
            case GroupHeader(label=label):
                body.append(["▸", label or "(Empty)"])
            case RowItem(row=row):
                texts = [_clip(sheet.get(Address(row, col)), max_width) for col in columns]
                if any(texts):
                    body.append([str(row + 1), *texts])
        if max_rows is not None and len(body) >= max_rows:
            break

    header = ["", *[col_to_letter(col) for col in columns]]
    gutter = max([1, *(len(line[0]) for line in body)])
    lines = [_format_line(header, gutter)]
    lines.extend(_format_line(line, gutter) for line in body)
    return "\n".join(lines)


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[:width - 1] + "…"


def _format_line(cells: List[str], gutter: int) -> str:
    return f"{cells[0]:>{gutter}} | " + " | ".join(cells[1:])
