"""
Exception classes for sheetcore.

These exceptions are used throughout the sheetcore package to signal the error
conditions that are reported to a caller. Formula evaluation failures are not
among them: those are absorbed into cell state as the ``#ERROR`` marker.
"""


class SheetcoreError(Exception):
    """Base class for all sheetcore errors."""
    pass


class ExpressionError(SheetcoreError):
    """Raised when an expression cannot be evaluated.

    This error is raised by the expression evaluation boundary and caught by
    the formula engine, which stores ``#ERROR`` in place of the cell value.
    Common causes include:
        - Malformed expressions (unbalanced parentheses, dangling operators)
        - Unknown function names
        - Division by zero and other error results
        - Non-finite numeric results
    """
    pass


class ImportDataError(SheetcoreError):
    """Raised when tabular data cannot be imported into a sheet.

    Imports are atomic: when this error is raised the target sheet has not
    been modified. Examples:
        - Rows that are not lists
        - Cells that are not strings
        - CSV text that pandas cannot parse
    """
    pass


class DocumentFormatError(SheetcoreError):
    """Raised when a persisted document record is invalid.

    Examples:
        - Missing ``sheets`` array or an empty one
        - Unsupported serialization version
        - Cell keys that are not ``"row,col"`` pairs
    """
    pass
