"""
Grid layout model: row heights, column widths and column display order.

Row heights are indexed by row. Column widths are indexed by display
position with slot 0 reserved for the row-header column, so the width of the
column displayed at position ``d`` is ``column_widths[d + 1]``. The display
order is a permutation of logical column indices; reordering changes only
how columns are shown, never which cells they hold.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sheetcore.config import GridSettings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class GridLayout:
    """Per-sheet sizes and bounds.

    Attributes:
        row_count: Number of addressable rows
        col_count: Number of addressable columns
        row_heights: Height of each row (length >= row_count)
        column_widths: Header slot plus width of each display column
            (length >= col_count + 1)
        column_order: Logical column shown at each display position
    """
    row_count: int
    col_count: int
    row_heights: List[int] = field(default_factory=list)
    column_widths: List[int] = field(default_factory=list)
    column_order: List[int] = field(default_factory=list)
    settings: GridSettings = field(default_factory=get_settings, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.row_count <= 0 or self.col_count <= 0:
            raise ValueError("Sheet dimensions must be positive integers")
        self.repair()

    @classmethod
    def default(cls, settings: Optional[GridSettings] = None) -> "GridLayout":
        settings = settings or get_settings()
        return cls(row_count=settings.default_rows, col_count=settings.default_cols, settings=settings)

    def repair(self) -> None:
        """Pad size arrays and the column order up to the current bounds.

        Missing logical columns are appended to the display order in
        ascending order; duplicates and out-of-range entries are dropped.
        """
        pad_rows = self.row_count - len(self.row_heights)
        if pad_rows > 0:
            self.row_heights.extend([self.settings.default_row_height] * pad_rows)

        pad_cols = self.col_count + 1 - len(self.column_widths)
        if pad_cols > 0:
            self.column_widths.extend([self.settings.default_column_width] * pad_cols)

        seen = set()
        order = []
        for col in self.column_order:
            if 0 <= col < self.col_count and col not in seen:
                seen.add(col)
                order.append(col)
        order.extend(col for col in range(self.col_count) if col not in seen)
        self.column_order = order

    def copy(self) -> "GridLayout":
        return GridLayout(
            row_count=self.row_count,
            col_count=self.col_count,
            row_heights=list(self.row_heights),
            column_widths=list(self.column_widths),
            column_order=list(self.column_order),
            settings=self.settings,
        )

    def ensure_capacity(self, row: int, col: int) -> bool:
        """Grow the bounds when an edit lands near their edge.

        Rows grow in steps of ``growth_step`` until
        ``row < row_count - growth_margin``; columns likewise, with the new
        logical columns appended to the display order. An edit far past the
        edge therefore grows the bounds by as many steps as it takes.

        Returns:
            True if either bound grew
        """
        step = self.settings.growth_step
        margin = self.settings.growth_margin
        grew = False
        while row >= self.row_count - margin:
            self.row_count += step
            grew = True
        while col >= self.col_count - margin:
            self.col_count += step
            grew = True
        if grew:
            self.repair()
            logger.debug("Grid grew to %d rows x %d cols", self.row_count, self.col_count)
        return grew

    def grow_to(self, row_count: int, col_count: int) -> None:
        """Raise the bounds to at least the given size; never shrinks."""
        self.row_count = max(self.row_count, row_count)
        self.col_count = max(self.col_count, col_count)
        self.repair()

    def row_height(self, row: int) -> int:
        return self.row_heights[row]

    def column_width(self, display_col: int) -> int:
        return self.column_widths[display_col + 1]

    @property
    def header_width(self) -> int:
        return self.column_widths[0]

    def display_widths(self) -> List[int]:
        """Widths of the data columns in display order (header slot excluded)."""
        return self.column_widths[1:self.col_count + 1]

    def resize_row(self, row: int, height: int) -> bool:
        """Set one row's height. Heights below the floor are rejected."""
        if not 0 <= row < self.row_count or height < self.settings.min_row_height:
            logger.debug("Rejected row resize row=%d height=%s", row, height)
            return False
        self.row_heights[row] = height
        return True

    def resize_column(self, display_col: int, width: int) -> bool:
        """Set the width of the column at a display position."""
        if not 0 <= display_col < self.col_count or width < self.settings.min_column_width:
            logger.debug("Rejected column resize col=%d width=%s", display_col, width)
            return False
        self.column_widths[display_col + 1] = width
        return True

    def move_column(self, from_display: int, to_display: int) -> bool:
        """Move the column shown at one display position to another.

        The column keeps its width.
        """
        if not (0 <= from_display < self.col_count and 0 <= to_display < self.col_count):
            logger.debug("Rejected column move %d -> %d", from_display, to_display)
            return False
        if from_display == to_display:
            return True
        logical = self.column_order.pop(from_display)
        self.column_order.insert(to_display, logical)
        width = self.column_widths.pop(from_display + 1)
        self.column_widths.insert(to_display + 1, width)
        return True

    def logical_column(self, display_col: int) -> int:
        return self.column_order[display_col]

    def display_position(self, logical_col: int) -> int:
        return self.column_order.index(logical_col)

    def permute_rows(self, permutation: List[int]) -> None:
        """Reorder the first ``len(permutation)`` row heights.

        ``permutation[new_row]`` is the row whose height moves to ``new_row``.
        """
        moved = [self.row_heights[old] for old in permutation]
        self.row_heights[:len(permutation)] = moved
