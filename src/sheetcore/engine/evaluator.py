"""
Formula evaluation backed by formualizer.

Two kinds of formulas are understood:

* ``=SUM(A1:B2)`` on its own is summed directly from the cell store, reading
  non-numeric and empty cells as 0.
* Anything else is an arithmetic expression over cell references. Every
  referenced address, and every non-empty cell inside a referenced range, is
  bound to its numeric value and the expression is handed to formualizer, the
  same Excel-compatible engine used to evaluate whole workbooks.

References must lie inside the workbook grid (columns A..XFD, rows
1..1048576); anything further out is an evaluation error. Names directly
followed by ``(`` are functions, never references.

Evaluation never raises to callers of ``compute_formula``: failures become
the ``#ERROR`` marker.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping

import formualizer as fz

from sheetcore.exceptions import ExpressionError
from sheetcore.spreadsheet.model import Address, CellRange, Formula, parse_number
from sheetcore.spreadsheet.store import CellStore

ERROR_MARKER = "#ERROR"

# Workbook grid limits shared with formualizer
MAX_ROWS = 1_048_576
MAX_COLS = 16_384

_SCRATCH_SHEET = "Scratch"

_SUM_RE = re.compile(r"^=SUM\(([A-Z]+\d+):([A-Z]+\d+)\)$", re.IGNORECASE)
_REF_RE = re.compile(r"\b[A-Za-z]+\d+\b(?!\s*\()")
_RANGE_RE = re.compile(r"\b([A-Za-z]+\d+)\s*:\s*([A-Za-z]+\d+)\b")
_ERROR_CODES = frozenset({"#DIV/0!", "#VALUE!", "#REF!", "#NAME?", "#NUM!", "#N/A", "#NULL!"})


def format_number(value: float) -> str:
    """Stringify a number the way a spreadsheet shows it (``6``, not ``6.0``)."""
    value = float(value)
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def numeric_value(cells: CellStore, address: Address) -> float:
    """Numeric reading of a cell; empty and non-numeric cells read as 0."""
    number = parse_number(cells.get(address))
    return 0.0 if number is None else number


def in_grid(address: Address) -> bool:
    return address.row < MAX_ROWS and address.col < MAX_COLS


def _grid_range(start: str, end: str) -> CellRange:
    """Parse a range and check both corners lie inside the grid.

    Raises:
        ValueError: If a corner is malformed or outside the grid
    """
    cell_range = CellRange.from_a1(f"{start}:{end}")
    if not in_grid(Address(cell_range.row_end, cell_range.col_end)):
        raise ValueError(f"Range {start}:{end} is outside the grid")
    return cell_range


def formula_references(raw: str) -> tuple[list[Address], list[CellRange]]:
    """Single-cell references and ranges a formula reads.

    Ranges are returned unexpanded. Cell references come in first-mention
    order without duplicates; range corners are listed among them. References
    that do not name a cell inside the grid (``A0``, ``ZZZ1``) are skipped;
    evaluation reports them.
    """
    sum_match = _SUM_RE.match(raw)
    if sum_match:
        range_texts = [sum_match.group(1, 2)]
        refs: list[str] = []
    else:
        range_texts = _RANGE_RE.findall(raw)
        refs = _REF_RE.findall(raw)

    ranges = []
    for start, end in range_texts:
        try:
            ranges.append(_grid_range(start, end))
        except ValueError:
            continue

    found: dict[Address, None] = {}
    for ref in refs:
        try:
            address = Address.from_a1(ref)
        except ValueError:
            continue
        if in_grid(address):
            found.setdefault(address)
    return list(found), ranges


def _expression_references(expression: str) -> tuple[set[Address], list[CellRange]]:
    """Cells and ranges named in an expression, all inside the grid.

    Raises:
        ExpressionError: If a reference is malformed or outside the grid
    """
    points = set()
    for ref in _REF_RE.findall(expression):
        try:
            address = Address.from_a1(ref)
        except ValueError as e:
            raise ExpressionError(f"Invalid reference {ref!r} in {expression!r}") from e
        if not in_grid(address):
            raise ExpressionError(f"Reference {ref} is outside the grid")
        points.add(address)

    ranges = []
    for start, end in _RANGE_RE.findall(expression):
        try:
            ranges.append(_grid_range(start, end))
        except ValueError as e:
            raise ExpressionError(f"Invalid range {start}:{end} in {expression!r}") from e
    return points, ranges


def _free_cell(points: set[Address], ranges: Iterable[CellRange]) -> Address:
    """A cell that is neither one of ``points`` nor inside any of ``ranges``.

    Candidates are A1 and the cells just right of and just below every
    occupied point and range.
    """
    ranges = list(ranges)
    candidates = [Address(0, 0)]
    for point in points:
        candidates += [Address(point.row, point.col + 1), Address(point.row + 1, point.col)]
    for region in ranges:
        candidates += [Address(region.row, region.col_end + 1), Address(region.row_end + 1, region.col)]

    for candidate in sorted(candidates):
        if (
            in_grid(candidate)
            and candidate not in points
            and not any(region.contains(candidate) for region in ranges)
        ):
            return candidate
    raise ExpressionError("No free cell for the expression")


def evaluate_expression(expression: str, scope: Mapping[str, float]) -> Any:
    """Evaluate an expression with cell-named variables bound to numbers.

    Args:
        expression: Formula body without the leading ``=`` (e.g. ``"A1*2"``)
        scope: Mapping of A1 names to numbers (e.g. ``{"A1": 5.0}``)

    Returns:
        The result as a float, str or bool

    Raises:
        ExpressionError: If the expression is malformed, references a cell
            outside the grid, yields an error value, or produces a
            non-finite or array result
    """
    if not expression.strip():
        raise ExpressionError("Empty expression")
    points, ranges = _expression_references(expression)

    bound: dict[Address, float] = {}
    for name, number in scope.items():
        try:
            address = Address.from_a1(name)
        except ValueError as e:
            raise ExpressionError(f"Invalid bound name {name!r}") from e
        if not in_grid(address):
            raise ExpressionError(f"Bound name {name} is outside the grid")
        bound[address] = float(number)

    # Bound names sit at their own coordinates in a scratch sheet; the
    # expression goes in a cell it neither names nor covers with a range.
    target = _free_cell(points | set(bound), ranges)
    wb = fz.Workbook()
    wb.add_sheet(_SCRATCH_SHEET)
    try:
        sheet = wb.sheet(_SCRATCH_SHEET)
        for address, number in bound.items():
            sheet.set_value(address.row + 1, address.col + 1, fz.LiteralValue.number(number))
        wb.set_formula(_SCRATCH_SHEET, target.row + 1, target.col + 1, f"={expression}")
        value = wb.evaluate_cell(_SCRATCH_SHEET, target.row + 1, target.col + 1)
    except Exception as e:
        raise ExpressionError(f"Failed to evaluate {expression!r}: {e}") from e

    if value is None:
        return 0.0
    if isinstance(value, dict) or (isinstance(value, str) and value in _ERROR_CODES):
        raise ExpressionError(f"Expression {expression!r} produced an error value: {value}")
    if isinstance(value, list):
        raise ExpressionError(f"Expression {expression!r} produced an array")
    if isinstance(value, float) and not math.isfinite(value):
        raise ExpressionError(f"Expression {expression!r} produced a non-finite number")
    return value


def compute_formula(raw: str, cells: CellStore) -> str:
    """Compute the display value of one formula against a cell snapshot.

    Args:
        raw: Raw formula text including the leading ``=``
        cells: Snapshot the formula reads its operands from

    Returns:
        The stringified result, or ``#ERROR``
    """
    sum_match = _SUM_RE.match(raw)
    if sum_match:
        try:
            cell_range = _grid_range(sum_match.group(1), sum_match.group(2))
        except ValueError:
            return ERROR_MARKER
        total = sum(
            numeric_value(cells, address) for address, _ in cells if cell_range.contains(address)
        )
        return format_number(total)

    refs, ranges = formula_references(raw)
    scope = {address.to_a1(): numeric_value(cells, address) for address in refs}
    # Empty cells inside a range stay unbound and read as blank
    for address, _ in cells:
        if any(cell_range.contains(address) for cell_range in ranges):
            scope.setdefault(address.to_a1(), numeric_value(cells, address))
    try:
        result = evaluate_expression(Formula.body(raw), scope)
    except ExpressionError:
        return ERROR_MARKER
    return format_value(result)
