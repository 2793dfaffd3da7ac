"""
Spreadsheet model classes.

This module provides the value types shared by every other component:
- Address: A single (row, col) cell coordinate
- CellRange: An inclusive rectangular cell region (e.g., A1:B10)
- Formula: Raw formula text and the sigil rule that classifies it

It also provides the numeric reading of cell text used by formulas and sort.
"""

import math
import re
from dataclasses import dataclass
from typing import Iterator, Optional

FORMULA_SIGIL = "="

_A1_RE = re.compile(r"^([A-Z]+)(\d+)$")
_NUMBER_PREFIX_RE = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def col_to_letter(col: int) -> str:
    """Convert column number (0-indexed internal) to letter(s) for A1 notation.

    Args:
        col: Column number (0-indexed: 0 = A, 25 = Z, 26 = AA, etc.)

    Returns:
        Column letter(s) in A1 notation
    """
    # Convert 0-indexed to 1-indexed for A1 notation
    col_1indexed = col + 1
    result = ""
    while col_1indexed > 0:
        col_1indexed -= 1
        result = chr(65 + (col_1indexed % 26)) + result
        col_1indexed //= 26
    return result


def letter_to_col(letters: str) -> int:
    """Convert column letter(s) to number (0-indexed internal).

    Args:
        letters: Column letter(s) in A1 notation (A, Z, AA, etc.)

    Returns:
        Column number (0-indexed: A = 0, Z = 25, AA = 26, etc.)
    """
    col_1indexed = 0
    for char in letters.upper():
        col_1indexed = col_1indexed * 26 + (ord(char) - 64)
    return col_1indexed - 1


def parse_number(text: str) -> Optional[float]:
    """Read the leading decimal number of a cell's text.

    ``"12"`` and ``"12abc"`` both read as 12.0; ``""``, ``"abc"`` and
    ``"#ERROR"`` have no numeric reading and return None, as do values
    that overflow to infinity.
    """
    match = _NUMBER_PREFIX_RE.match(text)
    if not match:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True, order=True)
class Address:
    """A cell coordinate.

    IMPORTANT: Address uses 0-indexed coordinates internally (Python convention),
    but converts to 1-indexed A1 notation via to_a1().

    Attributes:
        row: Row index (0-indexed, non-negative)
        col: Column index (0-indexed, non-negative)
    """
    row: int
    col: int

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise ValueError("Row and column must be non-negative (0-indexed)")

    @property
    def key(self) -> str:
        """Composite map key, e.g. ``"3,1"``."""
        return f"{self.row},{self.col}"

    @classmethod
    def from_key(cls, key: str) -> "Address":
        """Parse a ``"row,col"`` composite key.

        Raises:
            ValueError: If key is not two comma-separated integers
        """
        parts = key.split(",")
        if len(parts) != 2:
            raise ValueError(f"Invalid cell key: {key!r}")
        return cls(int(parts[0]), int(parts[1]))

    @classmethod
    def from_a1(cls, notation: str) -> "Address":
        """Parse a single-cell A1 reference (case-insensitive).

        Raises:
            ValueError: If notation is not a single cell reference
        """
        match = _A1_RE.match(notation.strip().upper())
        if not match:
            raise ValueError(f"Invalid cell notation: {notation}")
        col_letter, row_str = match.groups()
        row_1indexed = int(row_str)
        if row_1indexed < 1:
            raise ValueError(f"Invalid cell notation: {notation}")
        return cls(row=row_1indexed - 1, col=letter_to_col(col_letter))

    def to_a1(self) -> str:
        return f"{col_to_letter(self.col)}{self.row + 1}"

    def __repr__(self) -> str:
        return f"Address({self.to_a1()})"


class CellRange:
    """An inclusive rectangular cell region.

    Attributes:
        row: Starting row (0-indexed)
        col: Starting column (0-indexed)
        row_end: Ending row (0-indexed, inclusive)
        col_end: Ending column (0-indexed, inclusive)
    """

    def __init__(
        self,
        row: int,
        col: int,
        row_end: Optional[int] = None,
        col_end: Optional[int] = None
    ) -> None:
        """Initialize a CellRange with 0-indexed coordinates.

        Raises:
            ValueError: If coordinates are invalid
        """
        if row < 0 or col < 0:
            raise ValueError("Row and column must be non-negative (0-indexed)")

        self.row = row
        self.col = col
        self.row_end = row_end if row_end is not None else row
        self.col_end = col_end if col_end is not None else col

        if self.row_end < self.row or self.col_end < self.col:
            raise ValueError("End coordinates must be >= start coordinates")

    @classmethod
    def spanning(cls, a: Address, b: Address) -> "CellRange":
        """Build the smallest range containing two corners given in any order."""
        return cls(
            row=min(a.row, b.row),
            col=min(a.col, b.col),
            row_end=max(a.row, b.row),
            col_end=max(a.col, b.col),
        )

    @classmethod
    def from_a1(cls, notation: str) -> "CellRange":
        """Parse ``A1`` or ``A1:B10`` notation.

        The two corners of a range may be given in any order (``B2:A1`` is
        the same region as ``A1:B2``).

        Raises:
            ValueError: If notation is invalid
        """
        notation = notation.strip()
        if not notation:
            raise ValueError("Empty range notation")

        parts = notation.split(":")
        if len(parts) > 2:
            raise ValueError(f"Invalid range notation: {notation}")
        try:
            corners = [Address.from_a1(part) for part in parts]
        except ValueError as e:
            raise ValueError(f"Invalid range notation: {notation}") from e
        return cls.spanning(corners[0], corners[-1])

    def contains(self, address: Address) -> bool:
        return (
            self.row <= address.row <= self.row_end
            and self.col <= address.col <= self.col_end
        )

    def addresses(self) -> Iterator[Address]:
        """Iterate the addresses of the range in row-major order."""
        for r in range(self.row, self.row_end + 1):
            for c in range(self.col, self.col_end + 1):
                yield Address(r, c)

    def to_a1(self) -> str:
        start_cell = Address(self.row, self.col).to_a1()
        if self.row == self.row_end and self.col == self.col_end:
            return start_cell
        return f"{start_cell}:{Address(self.row_end, self.col_end).to_a1()}"

    def __iter__(self) -> Iterator[Address]:
        return self.addresses()

    def __repr__(self) -> str:
        return f"CellRange({self.to_a1()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellRange):
            return NotImplemented
        return (
            self.row == other.row
            and self.col == other.col
            and self.row_end == other.row_end
            and self.col_end == other.col_end
        )


class Formula:
    """Classifies raw cell input as formula or literal.

    Raw input is a formula when its first character is the ``=`` sigil; the
    body is everything after the sigil.
    """

    @staticmethod
    def is_formula(raw: str) -> bool:
        return raw.startswith(FORMULA_SIGIL)

    @staticmethod
    def body(raw: str) -> str:
        if not raw.startswith(FORMULA_SIGIL):
            raise ValueError(f"Not a formula: {raw!r}")
        return raw[len(FORMULA_SIGIL):]
