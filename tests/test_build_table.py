"""Unit tests for the build_table pipeline and CLI."""

# pylint: disable=missing-class-docstring,missing-function-docstring

import json

import pytest
from openpyxl import Workbook

import build_table


@pytest.fixture
def columns_file(tmp_path):
    path = tmp_path / "produce.json"
    path.write_text(
        json.dumps(
            {
                "group": ["fruit", "fruit", "veg"],
                "item": ["apple", "pear", "leek"],
                "price": [1.5, 2.25, 0.8],
            }
        )
    )
    return path


class TestBuildTable:

    def test_pipeline(self, columns_file):
        table = build_table.build_table(
            str(columns_file),
            theme="zebra",
            merge_columns=["group"],
            footer_lines=["Source: market"],
        )
        assert len(table.regions("body")) == 1
        assert table.nrow("footer") == 1
        assert table.fit_layout is True

    def test_without_autofit(self, columns_file):
        table = build_table.build_table(str(columns_file), autofit=False)
        assert table.fit_layout is False

    def test_workbook_input(self, tmp_path):
        wb = Workbook()
        wb.active.append(["Name", "Qty"])
        wb.active.append(["bolt", 4])
        path = tmp_path / "parts.xlsx"
        wb.save(path)
        table = build_table.load_table(str(path))
        assert table.labels == {"A": "Name", "B": "Qty"}


class TestMain:

    def test_writes_snapshot(self, tmp_path, columns_file):
        output = tmp_path / "out.json"
        build_table.main(
            [
                str(columns_file),
                "-o",
                str(output),
                "--theme",
                "box",
                "--merge-v",
                "group",
                "--footer",
                "Source: market",
            ]
        )
        snapshot = json.loads(output.read_text())
        assert [c["key"] for c in snapshot["columns"]] == ["group", "item", "price"]
        assert snapshot["body"][0]["cells"][0]["row_span"] == 2
        assert snapshot["body"][1]["cells"][0]["hidden"] is True
        assert snapshot["footer"][0]["cells"][0]["col_span"] == 3
        assert all(c["width"] for c in snapshot["columns"])

    def test_default_output_name(self, tmp_path, columns_file, monkeypatch):
        monkeypatch.chdir(tmp_path)
        build_table.main([str(columns_file), "--no-autofit"])
        snapshot = json.loads((tmp_path / "produce_table.json").read_text())
        assert snapshot["columns"][0]["width"] is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            build_table.main([str(tmp_path / "nope.json")])
        assert info.value.code == 1

    def test_bad_merge_column(self, tmp_path, columns_file):
        with pytest.raises(SystemExit) as info:
            build_table.main([str(columns_file), "-o", str(tmp_path / "out.json"), "--merge-v", "colour"])
        assert info.value.code == 1
        assert not (tmp_path / "out.json").exists()
