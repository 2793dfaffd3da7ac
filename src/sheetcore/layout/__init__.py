"""
Grid layout: sizes, column order, auto-expansion and virtualization.
"""

from sheetcore.layout.grid import GridLayout
from sheetcore.layout.virtual import offsets, total_size, visible_range

__all__ = ["GridLayout", "offsets", "total_size", "visible_range"]
