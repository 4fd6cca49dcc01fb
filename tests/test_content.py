"""Unit tests for header labels, extra header/footer rows, footnotes and compose."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from dto.cell_data import ImageRun, TextRun
from dto.coordinate import CellCoordinate
from engine import content, merging
from engine.errors import SelectorError, ShapeError


def _cell(table, group, row, column):
    return table.cell(CellCoordinate(group=group, row=row, column=column))


class TestHeaderLabels:

    def test_labels_change_display_not_keys(self, table):
        content.set_header_labels(table, {"item": "Item"}, price="Price")
        assert table.keys == ["group", "item", "price"]
        assert _cell(table, "header", 0, "item").text == "Item"
        assert _cell(table, "header", 0, "price").text == "Price"

    def test_unknown_key(self, table):
        with pytest.raises(SelectorError):
            content.set_header_labels(table, colour="Colour")
        assert _cell(table, "header", 0, "group").text == "group"


class TestHeaderRows:

    def test_spanning_header_above(self, table):
        content.add_header_row(table, ["Produce", "Cost"], widths=[2, 1])
        assert table.nrow("header") == 2
        assert _cell(table, "header", 0, "group").text == "Produce"
        assert _cell(table, "header", 0, "price").text == "Cost"
        region = table.regions("header")[0]
        assert (region.min_row, region.min_col, region.max_col) == (0, 0, 1)
        assert table.label_row == 1

    def test_header_below(self, table):
        content.add_header_row(table, {"price": "USD"}, top=False)
        assert _cell(table, "header", 1, "price").text == "USD"
        assert _cell(table, "header", 1, "group").text == ""
        assert table.label_row == 0

    def test_spans_must_cover_table(self, table):
        with pytest.raises(ShapeError):
            content.add_header_row(table, ["A", "B"], widths=[1, 1])
        assert table.nrow("header") == 1

    def test_values_must_match_spans(self, table):
        with pytest.raises(ShapeError):
            content.add_header_row(table, ["A"], widths=[2, 1])

    def test_spans_need_sequence(self, table):
        with pytest.raises(ShapeError):
            content.add_header_row(table, {"group": "A"}, widths=[3])


class TestFooter:

    def test_lines_span_all_columns(self, table):
        content.add_footer_lines(table, ["Source: market", "Prices in USD"])
        assert table.nrow("footer") == 2
        regions = table.regions("footer")
        assert [(r.min_row, r.min_col, r.max_col) for r in regions] == [(0, 0, 2), (1, 0, 2)]
        assert _cell(table, "footer", 1, "group").text == "Prices in USD"

    def test_single_string(self, table):
        content.add_footer_lines(table, "Note")
        assert table.nrow("footer") == 1

    def test_footnote_numbering(self, table):
        content.footnote(table, 0, "item", "Seasonal")
        content.footnote(table, 2, "price", "Estimate")
        assert _cell(table, "body", 0, "item").text == "apple1"
        assert _cell(table, "body", 2, "price").text == "0.802"
        assert _cell(table, "footer", 0, "group").text == "1 Seasonal"
        assert _cell(table, "footer", 1, "group").text == "2 Estimate"

    def test_footnote_marker_is_superscript(self, table):
        content.footnote(table, 0, "item", "Seasonal")
        marker = _cell(table, "body", 0, "item").content[-1].runs[-1]
        assert marker.vertical_align == "superscript"

    def test_no_visible_cell_adds_nothing(self, table):
        merging.merge_range(table, "body", (0, 1), "item")
        content.footnote(table, 1, "item", "Hidden")
        content.footnote(table, lambda row: False, "item", "Empty")
        assert table.nrow("footer") == 0
        assert table.footnote_count == 0
        content.footnote(table, 0, "item", "Seasonal")
        assert _cell(table, "footer", 0, "group").text == "1 Seasonal"

    def test_custom_symbol_keeps_count(self, table):
        content.footnote(table, 0, "item", "Seasonal", symbol="*")
        content.footnote(table, 1, "item", "Imported")
        assert _cell(table, "body", 0, "item").text == "apple*"
        assert _cell(table, "body", 1, "item").text == "pear1"


class TestCompose:

    def test_text(self, table):
        content.compose(table, 0, "item", "Apple")
        assert _cell(table, "body", 0, "item").text == "Apple"
        assert _cell(table, "body", 0, "item").value == "apple"

    def test_callable_receives_row_values(self, table):
        content.compose(table, j="item", value=lambda row: f"{row['item']} ({row['group']})")
        assert _cell(table, "body", 2, "item").text == "leek (veg)"

    def test_paragraphs(self, table):
        paragraphs = [content.as_paragraph("a"), content.as_paragraph(content.as_chunk("b", font_bold=True))]
        content.compose(table, 0, "item", paragraphs)
        cell = _cell(table, "body", 0, "item")
        assert cell.text == "a\nb"
        assert cell.content[1].runs[0].font_bold is True

    def test_image_run(self, table):
        content.compose(table, 0, "item", content.as_image("logo.png", 16, 16))
        run = _cell(table, "body", 0, "item").content[0].runs[0]
        assert isinstance(run, ImageRun)

    def test_append_chunks(self, table):
        content.append_chunks(table, 0, "price", " USD", TextRun(text="!", font_italic=True))
        cell = _cell(table, "body", 0, "price")
        assert cell.text == "1.50 USD!"
        assert len(cell.content) == 1

    def test_failed_callable_writes_nothing(self, table):
        def label(row):
            if row["item"] == "leek":
                raise KeyError("leek")
            return "x"

        with pytest.raises(KeyError):
            content.compose(table, j="item", value=label)
        assert _cell(table, "body", 0, "item").text == "apple"
