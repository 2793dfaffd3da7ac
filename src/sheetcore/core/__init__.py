"""Sheet and document containers."""

from .sheet import CellView, Sheet, Viewport, WindowRow, WindowView
from .document import Document

__all__ = ['CellView', 'Document', 'Sheet', 'Viewport', 'WindowRow', 'WindowView']
