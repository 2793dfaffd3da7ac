"""
Fixed-point recalculation of a sheet's formulas.

A pass evaluates every formula, in insertion order, against the snapshot the
pass started from and produces a candidate snapshot. Passes repeat until a
candidate equals its input (one pass per dependency hop, plus one to confirm)
or the pass bound is reached.

Formulas that take part in a reference cycle are found before the first pass
and pinned to ``#ERROR`` so that the loop always settles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from sheetcore.config import GridSettings, get_settings
from sheetcore.engine.evaluator import ERROR_MARKER, compute_formula, formula_references
from sheetcore.spreadsheet.model import Address
from sheetcore.spreadsheet.store import CellStore, FormulaStore

logger = logging.getLogger(__name__)


@dataclass
class RecalcResult:
    """Outcome of a recalculation.

    Attributes:
        cells: The settled cell snapshot
        passes: Number of passes run
        cycles: Formula addresses that take part in a reference cycle
        converged: False when the pass bound was hit before settling
    """
    cells: CellStore
    passes: int
    cycles: Set[Address] = field(default_factory=set)
    converged: bool = True


def dependency_graph(formulas: FormulaStore) -> Dict[Address, List[Address]]:
    """Map each formula address to the formula addresses it reads.

    Ranges are matched against the formula addresses rather than expanded,
    so a wide range costs one containment test per formula.
    """
    graph = {}
    for address, raw in formulas:
        refs, ranges = formula_references(raw)
        deps = dict.fromkeys(dep for dep in refs if dep in formulas)
        if ranges:
            for other in formulas.keys():
                if any(cell_range.contains(other) for cell_range in ranges):
                    deps.setdefault(other)
        graph[address] = list(deps)
    return graph


def find_cycles(graph: Dict[Address, List[Address]]) -> Set[Address]:
    """Return every address that lies on a reference cycle.

    Tarjan's strongly connected components, walked iteratively: the chain of
    addresses being resolved is kept on a stack, and revisiting an address
    still on the stack closes a cycle through everything above it. Components
    of two or more addresses, and single addresses that read themselves, are
    cycles.
    """
    index: Dict[Address, int] = {}
    lowlink: Dict[Address, int] = {}
    chain: List[Address] = []
    on_chain: Set[Address] = set()
    cyclic: Set[Address] = set()
    counter = 0

    for root in graph:
        if root in index:
            continue
        index[root] = lowlink[root] = counter
        counter += 1
        chain.append(root)
        on_chain.add(root)
        work = [(root, iter(graph[root]))]

        while work:
            node, children = work[-1]
            child = next(children, None)
            if child is not None:
                if child not in index:
                    index[child] = lowlink[child] = counter
                    counter += 1
                    chain.append(child)
                    on_chain.add(child)
                    work.append((child, iter(graph[child])))
                elif child in on_chain:
                    lowlink[node] = min(lowlink[node], index[child])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                component = []
                while True:
                    member = chain.pop()
                    on_chain.discard(member)
                    component.append(member)
                    if member == node:
                        break
                if len(component) > 1 or node in graph[node]:
                    cyclic.update(component)

    return cyclic


def run_pass(cells: CellStore, formulas: FormulaStore, pinned: Set[Address]) -> CellStore:
    """Evaluate every formula once against ``cells`` and return the candidate."""
    candidate = cells.copy()
    for address, raw in formulas:
        if address in pinned:
            candidate.set(address, ERROR_MARKER)
        else:
            candidate.set(address, compute_formula(raw, cells))
    return candidate


def recalculate(
    cells: CellStore,
    formulas: FormulaStore,
    max_passes: Optional[int] = None,
    settings: Optional[GridSettings] = None
) -> RecalcResult:
    """Run passes until the cell snapshot stops changing.

    Args:
        cells: Current cell snapshot (not modified)
        formulas: Formula addresses and their raw text
        max_passes: Upper bound on passes; defaults to one more than the
            number of formulas, capped by ``max_recalc_passes``
        settings: Settings supplying the pass cap; defaults to
            ``get_settings()``

    Returns:
        RecalcResult with the settled snapshot
    """
    if not len(formulas):
        return RecalcResult(cells=cells, passes=0)

    cycles = find_cycles(dependency_graph(formulas))
    if cycles:
        logger.warning(
            "Circular references at %s; marking them %s",
            ", ".join(address.to_a1() for address in sorted(cycles)),
            ERROR_MARKER,
        )

    if max_passes is None:
        settings = settings or get_settings()
        max_passes = min(len(formulas) + 1, settings.max_recalc_passes)

    current = cells
    passes = 0
    while passes < max_passes:
        candidate = run_pass(current, formulas, cycles)
        passes += 1
        if candidate == current:
            logger.debug("Recalculation settled after %d passes", passes)
            return RecalcResult(cells=current, passes=passes, cycles=cycles)
        current = candidate

    logger.warning("Recalculation stopped after %d passes without settling", passes)
    return RecalcResult(cells=current, passes=passes, cycles=cycles, converged=False)
