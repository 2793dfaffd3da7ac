"""
Windowed iteration over variable-size rows or columns.

Given the size of every item along one axis, these helpers find the
contiguous run of items that intersects a viewport, so only those need to be
resolved and drawn.
"""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np


def offsets(sizes: Sequence[int]) -> np.ndarray:
    """Start position of every item (``offsets[i]`` = sum of sizes before i)."""
    ends = np.cumsum(np.asarray(sizes, dtype=np.int64))
    return np.concatenate(([0], ends[:-1])) if len(ends) else np.zeros(0, dtype=np.int64)


def total_size(sizes: Sequence[int]) -> int:
    return int(np.sum(np.asarray(sizes, dtype=np.int64)))


def visible_range(
    sizes: Sequence[int],
    offset: float,
    extent: float,
    overscan: int = 0
) -> Tuple[int, int]:
    """Half-open index range of the items intersecting a viewport.

    Args:
        sizes: Size of each item along the axis
        offset: Scroll position of the viewport's leading edge
        extent: Viewport length along the axis
        overscan: Extra items to include on each side

    Returns:
        ``(start, stop)`` with ``0 <= start <= stop <= len(sizes)``; empty when
        nothing intersects the viewport
    """
    count = len(sizes)
    if count == 0 or extent <= 0:
        return (0, 0)

    ends = np.cumsum(np.asarray(sizes, dtype=np.int64))
    starts = ends - np.asarray(sizes, dtype=np.int64)

    # First item ending after the leading edge, last item starting before
    # the trailing edge.
    first = int(np.searchsorted(ends, offset, side="right"))
    last = int(np.searchsorted(starts, offset + extent, side="left")) - 1
    if first >= count or last < first:
        return (0, 0)

    return (max(0, first - overscan), min(count, last + 1 + overscan))
