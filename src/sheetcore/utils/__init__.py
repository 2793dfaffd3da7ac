"""
Utility functions for sheetcore.

This module provides utilities for moving documents in and out of the core:
- serialization: JSON save/load of whole documents
- tabular: CSV import/export of a sheet
- visualization: Text rendering of a sheet's current view
"""

from .visualization import visualize
from .serialization import (
    serialize,
    deserialize,
    to_json,
    from_json,
    save,
    load,
    SERIALIZATION_VERSION
)
from .tabular import read_csv, read_csv_text, write_csv, import_csv, sheet_to_dense

__all__ = [
    'visualize',
    'serialize',
    'deserialize',
    'to_json',
    'from_json',
    'save',
    'load',
    'SERIALIZATION_VERSION',
    'read_csv',
    'read_csv_text',
    'write_csv',
    'import_csv',
    'sheet_to_dense',
]
