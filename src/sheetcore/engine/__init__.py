"""
Formula engine.

``compute_formula`` evaluates one formula against a cell snapshot and
``recalculate`` drives all of a sheet's formulas to a fixed point.
"""

from sheetcore.engine.evaluator import (
    ERROR_MARKER,
    compute_formula,
    evaluate_expression,
    format_number,
    formula_references,
)
from sheetcore.engine.recalc import RecalcResult, dependency_graph, find_cycles, recalculate

__all__ = [
    "ERROR_MARKER",
    "compute_formula",
    "evaluate_expression",
    "format_number",
    "formula_references",
    "RecalcResult",
    "dependency_graph",
    "find_cycles",
    "recalculate",
]
