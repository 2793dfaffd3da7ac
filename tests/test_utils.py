"""
Tests for document serialization, CSV import/export and text rendering.
"""

import io
import json

import pytest

from sheetcore.core import Document, Sheet
from sheetcore.exceptions import DocumentFormatError, ImportDataError
from sheetcore.spreadsheet import Address
from sheetcore.utils import (
    SERIALIZATION_VERSION,
    deserialize,
    from_json,
    import_csv,
    load,
    read_csv_text,
    save,
    serialize,
    sheet_to_dense,
    to_json,
    visualize,
    write_csv,
)
from sheetcore.view import SortOrder


def a1(name: str) -> Address:
    return Address.from_a1(name)


@pytest.fixture
def populated(document) -> Document:
    document.edit_cell(a1("A1"), "5")
    document.edit_cell(a1("B1"), "=A1*2")
    document.resize_row(2, 70)
    document.resize_column(1, 200)
    document.move_column(0, 3)
    document.set_filter(0, "5")
    document.set_grouping(1)
    document.toggle_sort(0)
    document.focus(a1("B1"))
    document.add_sheet("Notes")
    document.edit_cell(a1("C3"), "hello")
    return document


class TestSerialize:
    def test_record_shape(self, populated):
        data = serialize(populated)
        assert data["version"] == SERIALIZATION_VERSION
        assert data["activeSheetIndex"] == 1
        first = data["sheets"][0]
        assert first["name"] == "Sheet1"
        assert first["cells"] == {"0,0": "5", "0,1": "10"}
        assert first["formulas"] == {"0,1": "=A1*2"}
        assert first["maxRows"] == 22 and first["maxCols"] == 14
        assert first["sortColumn"] == 0 and first["sortOrder"] == "asc"
        assert first["filters"] == {"0": "5"}
        assert first["focusedCell"] == {"row": 0, "col": 1}

    def test_unsorted_sheet_has_null_order(self, document):
        assert serialize(document)["sheets"][0]["sortOrder"] is None

    def test_rejects_non_document(self):
        with pytest.raises(TypeError):
            serialize({"sheets": []})

    def test_round_trip(self, populated, settings):
        restored = from_json(to_json(populated), settings)
        assert restored.active_index == 1
        assert [s.name for s in restored.sheets] == ["Sheet1", "Notes"]

        original, copy = populated.sheets[0], restored.sheets[0]
        assert copy.cells == original.cells
        assert copy.formulas == original.formulas
        assert copy.layout.row_heights == original.layout.row_heights
        assert copy.layout.column_widths == original.layout.column_widths
        assert copy.layout.column_order == original.layout.column_order
        assert copy.filters == {0: "5"}
        assert copy.grouping_column == 1
        assert copy.sort_order is SortOrder.ASC
        assert copy.focused == a1("B1")
        assert restored.active_sheet.get(a1("C3")) == "hello"

    def test_save_and_load(self, populated, settings, tmp_path):
        path = tmp_path / "book.json"
        save(populated, path)
        assert json.loads(path.read_text())["version"] == SERIALIZATION_VERSION
        restored = load(path, settings)
        assert restored.sheets[0].get(a1("B1")) == "10"


class TestDeserialize:
    def test_missing_layout_arrays_are_repaired(self, settings):
        data = {"sheets": [{"name": "S", "maxRows": 3, "maxCols": 2, "rowHeights": [50]}]}
        sheet = deserialize(data, settings).active_sheet
        assert sheet.layout.row_heights == [50, 34, 34]
        assert sheet.layout.column_widths == [126, 126, 126]
        assert sheet.layout.column_order == [0, 1]

    def test_defaults_for_missing_bounds(self, settings):
        sheet = deserialize({"sheets": [{"name": "S"}]}, settings).active_sheet
        assert (sheet.row_count, sheet.col_count) == (22, 14)
        assert sheet.sort_order is SortOrder.NONE
        assert sheet.filters == {}

    def test_active_index_is_clamped(self, settings):
        data = {"sheets": [{"name": "A"}, {"name": "B"}], "activeSheetIndex": 9}
        assert deserialize(data, settings).active_index == 1

    def test_unsupported_version(self, settings):
        with pytest.raises(DocumentFormatError, match="Unsupported serialization version"):
            deserialize({"version": "2.0", "sheets": [{"name": "S"}]}, settings)

    @pytest.mark.parametrize("data", [
        {},
        {"sheets": []},
        {"sheets": "Sheet1"},
        {"sheets": [{"cells": {}}]},
        {"sheets": [{"name": "S", "cells": {"A1": "x"}}]},
        {"sheets": [{"name": "S", "maxRows": 0}]},
        {"sheets": [{"name": "S"}], "activeSheetIndex": "0"},
    ])
    def test_malformed_records(self, settings, data):
        with pytest.raises(DocumentFormatError):
            deserialize(data, settings)

    def test_rejects_non_dict(self):
        with pytest.raises(TypeError):
            deserialize([])

    def test_invalid_json(self):
        with pytest.raises(DocumentFormatError, match="Invalid JSON"):
            from_json("{not json")


class TestReadCsv:
    def test_everything_is_text(self):
        assert read_csv_text("007,x\n1.50,\n") == [["007", "x"], ["1.50", ""]]

    def test_short_rows_are_padded(self):
        assert read_csv_text("a,b\nc\n") == [["a", "b"], ["c", ""]]

    def test_quoted_fields(self):
        assert read_csv_text('"a,b",c\n') == [["a,b", "c"]]

    def test_empty_input(self):
        assert read_csv_text("") == []

    def test_ragged_long_row_rejected(self):
        with pytest.raises(ImportDataError, match="Failed to parse CSV"):
            read_csv_text("a\nb,c,d\n")


class TestImportCsv:
    def test_import_recalculates(self, sheet):
        import_csv(sheet, io.StringIO("1,2\n=A1+B1,\n"))
        assert sheet.get(a1("A2")) == "3"
        assert sheet.formulas.get(a1("A2")) == "=A1+B1"

    def test_failed_import_leaves_sheet(self, sheet):
        sheet.edit_cell(a1("A1"), "keep")
        with pytest.raises(ImportDataError):
            import_csv(sheet, io.StringIO("a\nb,c,d\n"))
        assert sheet.get(a1("A1")) == "keep"

    def test_import_from_file(self, sheet, tmp_path):
        path = tmp_path / "data.csv"
        path.write_text("x,y\n", encoding="utf-8")
        import_csv(sheet, path)
        assert sheet.get(a1("B1")) == "y"


class TestWriteCsv:
    def test_writes_displayed_values(self, sheet):
        sheet.edit_cell(a1("A1"), "x")
        sheet.edit_cell(a1("B1"), "a,b")
        sheet.edit_cell(a1("A2"), "=1+1")
        assert write_csv(sheet) == 'x,"a,b"\n2,\n'

    def test_columns_in_display_order(self, sheet):
        sheet.edit_cell(a1("A1"), "a")
        sheet.edit_cell(a1("B1"), "b")
        sheet.move_column(1, 0)
        assert sheet_to_dense(sheet) == [["b", "a"]]

    def test_write_to_path(self, sheet, tmp_path):
        sheet.edit_cell(a1("A1"), "007")
        path = tmp_path / "out.csv"
        assert write_csv(sheet, path) is None
        assert path.read_text() == "007\n"


class TestVisualize:
    def test_table(self, people):
        lines = visualize(people).splitlines()
        assert lines[0] == "  | A | B | C"
        assert lines[1] == "1 | Alice | eng | 90000"
        assert lines[4] == "4 | Diana |  | 70000"
        assert len(lines) == 6

    def test_group_headers(self, people):
        people.set_grouping(1)
        lines = visualize(people).splitlines()
        assert lines[1] == "▸ | eng"
        assert "▸ | (Empty)" in lines

    def test_max_rows_and_clipping(self, people):
        lines = visualize(people, max_rows=3, max_width=4).splitlines()
        assert len(lines) == 4
        assert lines[3] == "3 | Cha… | eng | 120…"

    def test_rejects_non_sheet(self):
        with pytest.raises(TypeError):
            visualize("Sheet1")

    def test_empty_sheet(self, settings):
        assert visualize(Sheet("Empty", settings=settings)) == "  | "
