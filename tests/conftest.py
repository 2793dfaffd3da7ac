"""Shared pytest configuration and fixtures for sheetcore tests."""

import pytest

from sheetcore.config import GridSettings
from sheetcore.core import Document, Sheet
from sheetcore.spreadsheet import Address, CellStore


@pytest.fixture
def settings() -> GridSettings:
    return GridSettings(
        default_rows=22,
        default_cols=14,
        default_row_height=34,
        default_column_width=126,
        group_header_height=34,
        min_row_height=20,
        min_column_width=50,
        growth_step=10,
        growth_margin=2,
        overscan=5,
        max_recalc_passes=1000,
    )


@pytest.fixture
def sheet(settings: GridSettings) -> Sheet:
    return Sheet("Sheet1", settings=settings)


@pytest.fixture
def document(settings: GridSettings) -> Document:
    return Document(settings=settings)


@pytest.fixture
def people(sheet: Sheet) -> Sheet:
    """Name / dept / salary rows starting at row 0."""
    rows = [
        ["Alice", "eng", "90000"],
        ["Bob", "sales", "65000"],
        ["Charlie", "eng", "120000"],
        ["Diana", "", "70000"],
        ["Eve", "sales", "80000"],
    ]
    for r, row in enumerate(rows):
        for c, text in enumerate(row):
            sheet.edit_cell(Address(r, c), text)
    return sheet


@pytest.fixture
def cells() -> CellStore:
    return CellStore({
        Address(0, 0): "1",
        Address(1, 0): "2",
        Address(0, 1): "3",
        Address(1, 1): "x",
    })
