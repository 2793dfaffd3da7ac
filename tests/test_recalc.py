"""
Tests for fixed-point recalculation and cycle detection.
"""

from sheetcore.engine import ERROR_MARKER, dependency_graph, find_cycles, recalculate
from sheetcore.spreadsheet import Address, CellStore, FormulaStore


def a1(name: str) -> Address:
    return Address.from_a1(name)


def sheet_state(entries):
    """Build matching stores from (name, raw) pairs, formulas in the given order."""
    cells = CellStore()
    formulas = FormulaStore()
    for name, raw in entries:
        cells.set(a1(name), raw)
        formulas.classify(a1(name), raw)
    return cells, formulas


class TestRecalculate:
    def test_no_formulas(self):
        cells, formulas = sheet_state([("A1", "5")])
        result = recalculate(cells, formulas)
        assert result.passes == 0
        assert result.cells.get(a1("A1")) == "5"

    def test_single_formula(self):
        cells, formulas = sheet_state([("A1", "5"), ("B1", "=A1*2")])
        result = recalculate(cells, formulas)
        assert result.cells.get(a1("B1")) == "10"
        assert result.converged

    def test_chain_converges_against_insertion_order(self):
        """A1 reads B1 which reads C1; A1 is evaluated first in every pass."""
        cells, formulas = sheet_state([("A1", "=B1+1"), ("B1", "=C1+1"), ("C1", "5")])
        result = recalculate(cells, formulas)
        assert result.cells.get(a1("B1")) == "6"
        assert result.cells.get(a1("A1")) == "7"
        # One pass per hop plus a confirming pass
        assert result.passes == 3
        assert result.converged

    def test_input_snapshot_untouched(self):
        cells, formulas = sheet_state([("A1", "5"), ("B1", "=A1*2")])
        recalculate(cells, formulas)
        assert cells.get(a1("B1")) == "=A1*2"

    def test_pass_bound(self):
        cells, formulas = sheet_state([("A1", "=B1+1"), ("B1", "=C1+1"), ("C1", "5")])
        result = recalculate(cells, formulas, max_passes=1)
        assert not result.converged
        assert result.passes == 1

    def test_settings_cap_passes(self, settings):
        capped = settings.model_copy(update={"max_recalc_passes": 2})
        cells, formulas = sheet_state([("A1", "=B1+1"), ("B1", "=C1+1"), ("C1", "5")])
        result = recalculate(cells, formulas, settings=capped)
        assert result.passes == 2
        assert not result.converged

    def test_self_reference_is_error(self):
        cells, formulas = sheet_state([("A1", "=A1+1")])
        result = recalculate(cells, formulas)
        assert result.cells.get(a1("A1")) == ERROR_MARKER
        assert result.cycles == {a1("A1")}
        assert result.converged

    def test_two_cell_cycle_and_dependent(self):
        cells, formulas = sheet_state([("A1", "=B1"), ("B1", "=A1"), ("C1", "=A1+1")])
        result = recalculate(cells, formulas)
        assert result.cells.get(a1("A1")) == ERROR_MARKER
        assert result.cells.get(a1("B1")) == ERROR_MARKER
        # Error text reads as 0 for the formula outside the cycle
        assert result.cells.get(a1("C1")) == "1"
        assert result.cycles == {a1("A1"), a1("B1")}

    def test_cycle_through_sum_range(self):
        cells, formulas = sheet_state([("A1", "1"), ("A3", "=SUM(A1:A3)")])
        result = recalculate(cells, formulas)
        assert result.cells.get(a1("A3")) == ERROR_MARKER


class TestFindCycles:
    def test_acyclic(self):
        _, formulas = sheet_state([("A1", "=B1"), ("B1", "=C1"), ("C1", "=1")])
        assert find_cycles(dependency_graph(formulas)) == set()

    def test_every_member_of_a_component_is_found(self):
        """A1 -> B1 -> A1 and A1 -> C1 -> B1: C1 lies on a cycle too."""
        _, formulas = sheet_state([("A1", "=B1+C1"), ("B1", "=A1"), ("C1", "=B1")])
        assert find_cycles(dependency_graph(formulas)) == {a1("A1"), a1("B1"), a1("C1")}

    def test_node_between_cycles_is_not_cyclic(self):
        graph = {
            a1("A1"): [a1("B1")],
            a1("B1"): [a1("A1"), a1("C1")],
            a1("C1"): [a1("D1")],
            a1("D1"): [a1("E1")],
            a1("E1"): [a1("D1")],
        }
        assert find_cycles(graph) == {a1("A1"), a1("B1"), a1("D1"), a1("E1")}

    def test_graph_ignores_literal_references(self):
        _, formulas = sheet_state([("A1", "=B1+C1"), ("B1", "=2")])
        assert dependency_graph(formulas) == {a1("A1"): [a1("B1")], a1("B1"): []}

    def test_wide_range_matched_against_formulas(self):
        cells, formulas = sheet_state([("A2", "=1"), ("C1", "=SUM(A1:A1000000)"), ("D1", "=C1*2")])
        assert dependency_graph(formulas) == {
            a1("A2"): [],
            a1("C1"): [a1("A2")],
            a1("D1"): [a1("C1")],
        }
        result = recalculate(cells, formulas)
        assert result.cells.get(a1("D1")) == "2"

    def test_formula_inside_its_own_wide_range(self):
        _, formulas = sheet_state([("B7", "=SUM(A1:Z1000000)")])
        assert find_cycles(dependency_graph(formulas)) == {a1("B7")}
