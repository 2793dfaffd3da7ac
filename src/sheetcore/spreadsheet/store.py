"""
Sparse cell storage.

CellStore maps addresses to raw cell text and keeps only non-empty cells.
FormulaStore maps addresses to the raw formula text entered there; its
insertion order is the order formulas are evaluated within a pass.
"""

from typing import Dict, Iterator, List, Optional, Tuple

from sheetcore.spreadsheet.model import Address, Formula


class CellStore:
    """Sparse mapping from Address to raw text.

    An address is present iff its text is non-empty after trimming.
    """

    def __init__(self, entries: Optional[Dict[Address, str]] = None) -> None:
        self._cells: Dict[Address, str] = {}
        for address, text in (entries or {}).items():
            self.set(address, text)

    def get(self, address: Address) -> str:
        return self._cells.get(address, "")

    def set(self, address: Address, text: str) -> None:
        if text.strip() == "":
            self._cells.pop(address, None)
        else:
            self._cells[address] = text

    def __contains__(self, address: object) -> bool:
        return address in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Tuple[Address, str]]:
        return iter(list(self._cells.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellStore):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"CellStore({len(self._cells)} cells)"

    def keys(self) -> List[Address]:
        return list(self._cells)

    def copy(self) -> "CellStore":
        clone = CellStore()
        clone._cells = dict(self._cells)
        return clone

    def to_dense(self, rows: int, cols: int) -> List[List[str]]:
        """Materialize a rows x cols array of text.

        Entries outside the rectangle are ignored; missing cells are "".
        """
        data = [[""] * cols for _ in range(rows)]
        for address, text in self._cells.items():
            if address.row < rows and address.col < cols:
                data[address.row][address.col] = text
        return data

    @classmethod
    def from_dense(cls, data: List[List[str]]) -> "CellStore":
        """Build a store from a dense array, omitting empty cells.

        Only the raw-text plane is rebuilt; formula classification is the
        caller's concern.
        """
        store = cls()
        for r, row in enumerate(data):
            for c, text in enumerate(row):
                store.set(Address(r, c), text)
        return store

    def to_dict(self) -> Dict[str, str]:
        """Convert to ``{"row,col": text}``."""
        return {address.key: text for address, text in self._cells.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "CellStore":
        """Create from ``{"row,col": text}``.

        Raises:
            ValueError: If a key is not a valid composite key
        """
        return cls({Address.from_key(key): text for key, text in data.items()})


class FormulaStore:
    """Ordered mapping from Address to raw formula text (with leading ``=``)."""

    def __init__(self, entries: Optional[Dict[Address, str]] = None) -> None:
        self._formulas: Dict[Address, str] = {}
        for address, raw in (entries or {}).items():
            self.set(address, raw)

    def get(self, address: Address) -> Optional[str]:
        return self._formulas.get(address)

    def set(self, address: Address, raw: str) -> None:
        if not Formula.is_formula(raw):
            raise ValueError(f"Formula text must start with '=': {raw!r}")
        self._formulas[address] = raw

    def remove(self, address: Address) -> None:
        self._formulas.pop(address, None)

    def classify(self, address: Address, raw: str) -> None:
        """Apply the sigil rule to the latest raw input at address.

        Formula input registers (or updates) the address; anything else
        drops it.
        """
        if Formula.is_formula(raw):
            self._formulas[address] = raw
        else:
            self._formulas.pop(address, None)

    def __contains__(self, address: object) -> bool:
        return address in self._formulas

    def __len__(self) -> int:
        return len(self._formulas)

    def __iter__(self) -> Iterator[Tuple[Address, str]]:
        return iter(list(self._formulas.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FormulaStore):
            return NotImplemented
        return list(self._formulas.items()) == list(other._formulas.items())

    def __repr__(self) -> str:
        return f"FormulaStore({len(self._formulas)} formulas)"

    def keys(self) -> List[Address]:
        return list(self._formulas)

    def copy(self) -> "FormulaStore":
        clone = FormulaStore()
        clone._formulas = dict(self._formulas)
        return clone

    def to_dict(self) -> Dict[str, str]:
        return {address.key: raw for address, raw in self._formulas.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "FormulaStore":
        return cls({Address.from_key(key): raw for key, raw in data.items()})
