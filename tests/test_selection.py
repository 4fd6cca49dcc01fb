"""Unit tests for selector coercion and resolution."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import pytest

from dto.coordinate import CellCoordinate
from dto.selectors import AllRows, ColumnPattern, RowIndices, RowPredicate
from engine.errors import SelectorError
from engine.selection import (
    as_column_selector,
    as_row_selector,
    resolve,
    resolve_columns,
    resolve_part,
    resolve_rows,
    stacked_rows,
)


class TestCoercion:

    def test_none_selects_everything(self):
        assert isinstance(as_row_selector(None), AllRows)
        assert as_column_selector(None).kind == "all"

    def test_int_and_list(self):
        assert as_row_selector(2) == RowIndices(indices=[2])
        assert as_row_selector(range(2)).indices == [0, 1]
        assert as_column_selector(1).positions == [1]
        assert as_column_selector(["a", "b"]).keys == ["a", "b"]

    def test_callable(self):
        assert isinstance(as_row_selector(lambda row: True), RowPredicate)
        assert as_column_selector(lambda key: True).kind == "predicate"

    def test_selector_passes_through(self):
        selector = ColumnPattern(pattern="^p")
        assert as_column_selector(selector) is selector

    @pytest.mark.parametrize("value", [1.5, "0", True, [0, "a"]])
    def test_rejects_bad_row_selector(self, value):
        with pytest.raises(SelectorError):
            as_row_selector(value)

    def test_rejects_mixed_columns(self):
        with pytest.raises(SelectorError):
            as_column_selector(["a", 1])


class TestResolveRows:

    def test_sorted_and_unique(self, table):
        assert resolve_rows(table, "body", RowIndices(indices=[2, 0, 2])) == [0, 2]

    def test_negative_index(self, table):
        assert resolve_rows(table, "body", RowIndices(indices=[-1])) == [3]

    def test_out_of_range(self, table):
        with pytest.raises(SelectorError):
            resolve_rows(table, "body", RowIndices(indices=[4]))

    def test_predicate_sees_raw_values(self, table):
        selector = as_row_selector(lambda row: row["price"] > 2)
        assert resolve_rows(table, "body", selector) == [1, 3]

    def test_predicate_attribute_access(self, table):
        selector = as_row_selector(lambda row: row.group == "veg")
        assert resolve_rows(table, "body", selector) == [2, 3]

    def test_predicate_unknown_field(self, table):
        selector = as_row_selector(lambda row: row["colour"] == "red")
        with pytest.raises(SelectorError, match="colour"):
            resolve_rows(table, "body", selector)

    def test_predicate_membership_test(self, table):
        selector = as_row_selector(lambda row: "colour" in row or row["price"] > 2)
        assert resolve_rows(table, "body", selector) == [1, 3]

    def test_empty_group(self, table):
        assert resolve_rows(table, "footer", AllRows()) == []


class TestResolveColumns:

    def test_key_order_regardless_of_request(self, table):
        assert resolve_columns(table, as_column_selector(["price", "group"])) == ["group", "price"]

    def test_positions(self, table):
        assert resolve_columns(table, as_column_selector([-1, 0])) == ["group", "price"]

    def test_pattern(self, table):
        assert resolve_columns(table, ColumnPattern(pattern="^(item|price)$")) == ["item", "price"]

    def test_invalid_pattern(self, table):
        with pytest.raises(SelectorError):
            resolve_columns(table, ColumnPattern(pattern="("))

    def test_unknown_key(self, table):
        with pytest.raises(SelectorError):
            resolve_columns(table, as_column_selector("colour"))

    def test_position_out_of_range(self, table):
        with pytest.raises(SelectorError):
            resolve_columns(table, as_column_selector(3))


class TestResolve:

    def test_row_major(self, table):
        coords = resolve(table, "body", [1, 0], ["price", "item"])
        assert [(c.row, c.column) for c in coords] == [
            (0, "item"),
            (0, "price"),
            (1, "item"),
            (1, "price"),
        ]

    def test_returns_coordinates(self, table):
        assert resolve(table, "header", 0, "group") == [
            CellCoordinate(group="header", row=0, column="group")
        ]

    def test_unknown_part(self, table):
        with pytest.raises(SelectorError):
            resolve_part(table, "sidebar")

    def test_all_stacks_groups(self, table):
        coords = resolve_part(table, "all", j="item")
        assert [c.group for c in coords] == ["header", "body", "body", "body", "body"]

    def test_all_rejects_row_indices(self, table):
        with pytest.raises(SelectorError):
            resolve_part(table, "all", i=0)

    def test_all_accepts_predicate(self, table):
        coords = resolve_part(table, "all", i=lambda row: row["item"] == "item", j="item")
        assert coords == [CellCoordinate(group="header", row=0, column="item")]

    def test_stacked_rows(self, table):
        assert stacked_rows(table, "all")[:2] == [("header", 0), ("body", 0)]
        assert len(stacked_rows(table, "body")) == 4
