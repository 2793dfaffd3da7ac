"""
Unit tests for the spreadsheet model, stores and events.

Tests cover:
- Address: A1 notation parsing/formatting, composite keys
- CellRange: parsing, corner normalization, iteration
- parse_number: leading-number reading of cell text
- CellStore: sparsity, dense round trip
- FormulaStore: sigil classification, insertion order
- Events: dictionary round trip and unknown types
"""

import pytest

from sheetcore.spreadsheet import (
    Address,
    CellRange,
    CellStore,
    EditCell,
    Formula,
    FormulaStore,
    MoveColumn,
    SetGrouping,
    ToggleSort,
    event_from_dict,
    parse_number,
)


class TestAddress:
    """Test suite for Address."""

    def test_from_a1_single_letter(self):
        assert Address.from_a1("A1") == Address(0, 0)
        assert Address.from_a1("C10") == Address(9, 2)

    def test_from_a1_multi_letter(self):
        """Multi-letter columns continue past Z (0-indexed: AA = 26)."""
        assert Address.from_a1("AA1") == Address(0, 26)
        assert Address.from_a1("ZZ100") == Address(99, 701)

    def test_from_a1_case_insensitive(self):
        assert Address.from_a1("b2") == Address.from_a1("B2")

    def test_from_a1_invalid(self):
        with pytest.raises(ValueError, match="Invalid"):
            Address.from_a1("A0")
        with pytest.raises(ValueError, match="Invalid"):
            Address.from_a1("1A")
        with pytest.raises(ValueError, match="Invalid"):
            Address.from_a1("A1:B2")

    def test_negative_coordinates_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            Address(-1, 0)

    def test_to_a1(self):
        assert Address(0, 0).to_a1() == "A1"
        assert Address(9, 26).to_a1() == "AA10"

    def test_key_round_trip(self):
        address = Address(3, 1)
        assert address.key == "3,1"
        assert Address.from_key("3,1") == address

    def test_from_key_invalid(self):
        with pytest.raises(ValueError):
            Address.from_key("3")
        with pytest.raises(ValueError):
            Address.from_key("a,b")

    def test_structural_equality_and_hashing(self):
        assert Address(1, 2) == Address(1, 2)
        assert len({Address(1, 2), Address(1, 2), Address(2, 1)}) == 2


class TestCellRange:
    """Test suite for CellRange."""

    def test_from_a1_range(self):
        r = CellRange.from_a1("A2:C100")
        assert (r.row, r.col, r.row_end, r.col_end) == (1, 0, 99, 2)

    def test_from_a1_single_cell(self):
        r = CellRange.from_a1("B5")
        assert (r.row, r.col, r.row_end, r.col_end) == (4, 1, 4, 1)

    def test_reversed_corners_normalize(self):
        assert CellRange.from_a1("B2:A1") == CellRange.from_a1("A1:B2")

    def test_invalid_notation(self):
        with pytest.raises(ValueError, match="Empty"):
            CellRange.from_a1("")
        with pytest.raises(ValueError, match="Invalid"):
            CellRange.from_a1("A1:B2:C3")
        with pytest.raises(ValueError, match="Invalid"):
            CellRange.from_a1("A1:XYZ")

    def test_end_before_start_rejected(self):
        with pytest.raises(ValueError, match="End coordinates"):
            CellRange(row=5, col=5, row_end=1, col_end=1)

    def test_addresses_row_major(self):
        addresses = list(CellRange.from_a1("A1:B2"))
        assert addresses == [Address(0, 0), Address(0, 1), Address(1, 0), Address(1, 1)]

    def test_contains(self):
        r = CellRange.spanning(Address(3, 3), Address(1, 1))
        assert r.contains(Address(2, 2))
        assert not r.contains(Address(0, 2))

    def test_to_a1(self):
        assert CellRange.from_a1("A2:C100").to_a1() == "A2:C100"
        assert CellRange.from_a1("B5:B5").to_a1() == "B5"


class TestParseNumber:
    """Test suite for the numeric reading of cell text."""

    @pytest.mark.parametrize("text,expected", [
        ("12", 12.0),
        ("-3.5", -3.5),
        (" 7", 7.0),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("12abc", 12.0),
    ])
    def test_numeric(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", "#ERROR", "=A1", "-", "."])
    def test_non_numeric(self, text):
        assert parse_number(text) is None

    def test_overflow_is_non_numeric(self):
        assert parse_number("1e999") is None


class TestFormula:
    """Test suite for the sigil rule."""

    def test_is_formula(self):
        assert Formula.is_formula("=A1")
        assert not Formula.is_formula("A1")
        assert not Formula.is_formula(" =A1")
        assert not Formula.is_formula("")

    def test_body(self):
        assert Formula.body("=A1*2") == "A1*2"
        with pytest.raises(ValueError, match="Not a formula"):
            Formula.body("A1")


class TestCellStore:
    """Test suite for CellStore."""

    def test_get_absent_is_empty(self):
        assert CellStore().get(Address(5, 5)) == ""

    def test_set_and_get(self):
        store = CellStore()
        store.set(Address(0, 0), "hello")
        assert store.get(Address(0, 0)) == "hello"
        assert len(store) == 1

    @pytest.mark.parametrize("blank", ["", "   ", "\t\n"])
    def test_blank_removes_entry(self, blank):
        """Sparsity: blank text leaves no storage footprint."""
        store = CellStore()
        store.set(Address(2, 3), "value")
        store.set(Address(2, 3), blank)
        assert store.get(Address(2, 3)) == ""
        assert Address(2, 3) not in store
        assert len(store) == 0

    def test_blank_on_absent_address_is_harmless(self):
        store = CellStore()
        store.set(Address(1, 1), "")
        assert len(store) == 0

    def test_constructor_applies_sparsity(self):
        store = CellStore({Address(0, 0): "a", Address(0, 1): " "})
        assert store.keys() == [Address(0, 0)]

    def test_to_dense(self, cells):
        assert cells.to_dense(3, 2) == [["1", "3"], ["2", "x"], ["", ""]]

    def test_to_dense_ignores_out_of_bounds(self, cells):
        cells.set(Address(10, 10), "far")
        assert cells.to_dense(1, 1) == [["1"]]

    def test_from_dense_omits_empty(self):
        store = CellStore.from_dense([["a", ""], ["", "b"]])
        assert len(store) == 2
        assert store.get(Address(1, 1)) == "b"

    def test_dense_round_trip(self, cells):
        """Every non-empty entry within bounds survives to_dense/from_dense."""
        restored = CellStore.from_dense(cells.to_dense(2, 2))
        assert restored == cells

    def test_copy_is_independent(self, cells):
        clone = cells.copy()
        clone.set(Address(0, 0), "changed")
        assert cells.get(Address(0, 0)) == "1"

    def test_dict_round_trip(self, cells):
        data = cells.to_dict()
        assert data["1,1"] == "x"
        assert CellStore.from_dict(data) == cells


class TestFormulaStore:
    """Test suite for FormulaStore."""

    @pytest.mark.parametrize("raw,is_formula", [
        ("=A1+1", True),
        ("=", True),
        ("42", False),
        ("", False),
        ("text =A1", False),
    ])
    def test_classification(self, raw, is_formula):
        """An address is tracked iff its latest raw input starts with '='."""
        formulas = FormulaStore()
        formulas.classify(Address(0, 0), raw)
        assert (Address(0, 0) in formulas) is is_formula

    def test_formula_to_literal_transition(self):
        formulas = FormulaStore()
        formulas.classify(Address(0, 0), "=1+1")
        formulas.classify(Address(0, 0), "2")
        assert Address(0, 0) not in formulas

    def test_set_requires_sigil(self):
        with pytest.raises(ValueError, match="must start with"):
            FormulaStore().set(Address(0, 0), "1+1")

    def test_insertion_order(self):
        formulas = FormulaStore()
        formulas.set(Address(5, 0), "=1")
        formulas.set(Address(0, 0), "=2")
        formulas.set(Address(5, 0), "=3")
        assert formulas.keys() == [Address(5, 0), Address(0, 0)]
        assert formulas.get(Address(5, 0)) == "=3"


class TestEvents:
    """Test suite for event serialization."""

    @pytest.mark.parametrize("event", [
        EditCell(row=1, col=2, raw="=A1"),
        MoveColumn(from_column=0, to_column=3),
        ToggleSort(column=1),
        SetGrouping(column=None),
    ])
    def test_round_trip(self, event):
        assert event_from_dict(event.to_dict()) == event

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown event type"):
            event_from_dict({"type": "Explode"})
