"""Unit tests for the column-mapping and worksheet data sources."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import json

import pytest
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from dto.coordinate import CellCoordinate
from engine.errors import ShapeError
from sources.columns import columns_from_json, columns_from_records
from sources.worksheet import load_workbook_table, read_style, table_from_worksheet, value_bounds


def _style(table, group, row, column):
    return table.cell(CellCoordinate(group=group, row=row, column=column)).style


@pytest.fixture
def worksheet():
    wb = Workbook()
    ws = wb.active
    ws.title = "Prices"
    ws.append(["Group", "Item", "Price"])
    ws.append(["fruit", "apple", 1.5])
    ws.append([None, "pear", 2.25])
    ws.append(["veg", "leek", 0.8])
    ws.merge_cells("A2:A3")
    ws["A1"].font = Font(bold=True, color="FF0000")
    ws["B2"].fill = PatternFill("solid", fgColor="FFFF00")
    ws["C2"].alignment = Alignment(horizontal="right", vertical="top")
    ws["C4"].border = Border(bottom=Side(style="medium", color="00FF00"))
    return ws


# ===========================================================================
# Column mappings
# ===========================================================================


class TestRecords:

    def test_pivot(self):
        columns = columns_from_records([{"a": 1}, {"a": 2, "b": 3}])
        assert columns == {"a": [1, 2], "b": [None, 3]}

    def test_not_a_mapping(self):
        with pytest.raises(ShapeError):
            columns_from_records([{"a": 1}, [2]])


class TestJson:

    def test_object_of_columns(self, tmp_path):
        path = tmp_path / "cols.json"
        path.write_text(json.dumps({"a": [1, 2], "b": ["x", "y"]}))
        assert columns_from_json(path) == {"a": [1, 2], "b": ["x", "y"]}

    def test_list_of_records(self, tmp_path):
        path = tmp_path / "rows.json"
        path.write_text(json.dumps([{"a": 1, "b": "x"}, {"a": 2, "b": "y"}]))
        assert columns_from_json(path) == {"a": [1, 2], "b": ["x", "y"]}

    def test_column_not_a_list(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"a": 1}))
        with pytest.raises(ShapeError):
            columns_from_json(path)

    def test_scalar_payload(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("42")
        with pytest.raises(ShapeError):
            columns_from_json(path)


# ===========================================================================
# Worksheets
# ===========================================================================


class TestReadStyle:

    def test_font_and_fill(self, worksheet):
        header = read_style(worksheet["A1"])
        assert header.font_bold is True
        assert header.font_color == "#FF0000"
        assert read_style(worksheet["B2"]).background_color == "#FFFF00"

    def test_alignment(self, worksheet):
        style = read_style(worksheet["C2"])
        assert style.text_align == "right"
        assert style.vertical_align == "top"

    def test_border(self, worksheet):
        side = read_style(worksheet["C4"]).border_bottom
        assert side.width == 2.0
        assert side.color == "#00FF00"
        assert read_style(worksheet["C4"]).border_top is None

    def test_plain_cell(self, worksheet):
        style = read_style(worksheet["B3"])
        assert style.font_bold is None
        assert style.background_color is None


class TestTableFromWorksheet:

    def test_keys_labels_and_values(self, worksheet):
        table = table_from_worksheet(worksheet)
        assert table.keys == ["A", "B", "C"]
        assert table.labels == {"A": "Group", "B": "Item", "C": "Price"}
        assert table.nrow("body") == 3
        assert table.row_values("body", 2) == {"A": "veg", "B": "leek", "C": 0.8}

    def test_styles_carried(self, worksheet):
        table = table_from_worksheet(worksheet)
        assert _style(table, "header", 0, "A").font_bold is True
        assert _style(table, "body", 0, "B").background_color == "#FFFF00"
        assert _style(table, "body", 2, "C").border_bottom.width == 2.0

    def test_merges_carried(self, worksheet):
        table = table_from_worksheet(worksheet)
        regions = table.regions("body")
        assert [(r.min_row, r.max_row, r.min_col, r.max_col) for r in regions] == [(0, 1, 0, 0)]

    def test_header_row_option(self, worksheet):
        table = table_from_worksheet(worksheet, header_row=2)
        assert table.labels["B"] == "apple"
        assert table.nrow("body") == 2
        assert table.regions() == []

    def test_formatted_empty_cells_ignored(self, worksheet):
        worksheet["E9"].fill = PatternFill("solid", fgColor="CCCCCC")
        assert worksheet.calculate_dimension() == "A1:E9"
        assert value_bounds(worksheet) == (1, 1, 4, 3)
        table = table_from_worksheet(worksheet)
        assert table.keys == ["A", "B", "C"]
        assert table.nrow("body") == 3

    def test_empty_sheet(self):
        assert value_bounds(Workbook().active) == (1, 1, 1, 1)

    def test_header_row_outside_range(self, worksheet):
        with pytest.raises(ShapeError):
            table_from_worksheet(worksheet, header_row=9)


class TestLoadWorkbook:

    def test_round_trip_through_file(self, tmp_path, worksheet):
        path = tmp_path / "prices.xlsx"
        worksheet.parent.save(path)
        table = load_workbook_table(path, sheet_name="Prices")
        assert table.labels["C"] == "Price"
        assert len(table.regions("body")) == 1

    def test_unknown_sheet(self, tmp_path, worksheet):
        path = tmp_path / "prices.xlsx"
        worksheet.parent.save(path)
        with pytest.raises(ValueError, match="Missing"):
            load_workbook_table(path, sheet_name="Missing")
