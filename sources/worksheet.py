"""
Worksheet data source: builds a Table from an openpyxl worksheet.

One row of the used range (the first, unless *header_row* says otherwise)
supplies the column labels; every row below it becomes a body row.  Column
keys are the sheet's column letters, so they stay unique whatever the
labels say.  Fonts, fills, alignment, borders and merged ranges are
carried over.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import openpyxl
from openpyxl.cell.cell import Cell
from openpyxl.utils import get_column_letter, range_boundaries
from openpyxl.worksheet.worksheet import Worksheet

from dto.coordinate import CellCoordinate
from dto.style import BorderSide, CellStyle
from engine.content import set_header_labels
from engine.errors import ShapeError
from engine.merging import merge_range
from engine.model import Table, format_value
from engine.styling import apply_style

logger = logging.getLogger(__name__)

_HORIZONTAL = {
    "left": "left",
    "center": "center",
    "centerContinuous": "center",
    "right": "right",
    "justify": "justify",
    "distributed": "justify",
}

_VERTICAL = {"top": "top", "center": "center", "bottom": "bottom"}

_BORDER_WIDTHS = {
    "hair": 0.5,
    "thin": 1.0,
    "dotted": 1.0,
    "dashed": 1.0,
    "dashDot": 1.0,
    "dashDotDot": 1.0,
    "medium": 2.0,
    "mediumDashed": 2.0,
    "mediumDashDot": 2.0,
    "mediumDashDotDot": 2.0,
    "slantDashDot": 2.0,
    "double": 3.0,
    "thick": 3.0,
}


# ------------------------------------------------------------------
# Used range & merges
# ------------------------------------------------------------------

def value_bounds(ws: Worksheet) -> Tuple[int, int, int, int]:
    """
    Return (min_row, min_col, max_row, max_col), all 1-based, of the cells
    holding a value.  The sheet's stored dimension also counts cells that
    only carry formatting, so it is trimmed to the filled cells.
    """
    min_col, min_row, max_col, max_row = range_boundaries(ws.calculate_dimension())
    rows: List[int] = []
    cols: List[int] = []
    for row in ws.iter_rows(min_row=min_row, max_row=max_row, min_col=min_col, max_col=max_col):
        for cell in row:
            if cell.value is not None:
                rows.append(cell.row)
                cols.append(cell.column)
    if not rows:
        return min_row, min_col, min_row, min_col
    return min(rows), min(cols), max(rows), max(cols)


def merged_ranges(ws: Worksheet) -> List[Tuple[int, int, int, int]]:
    """Every merged range as (min_row, min_col, max_row, max_col)."""
    return [
        (mr.min_row, mr.min_col, mr.max_row, mr.max_col)
        for mr in ws.merged_cells.ranges
    ]


# ------------------------------------------------------------------
# Style reading
# ------------------------------------------------------------------

def _color_hex(color_obj) -> Optional[str]:
    """``#rrggbb`` for an explicit RGB colour; theme and indexed colours give None."""
    if color_obj is None or color_obj.type != "rgb":
        return None
    rgb = str(color_obj.rgb or "")
    if len(rgb) < 6 or rgb == "00000000":
        return None
    return f"#{rgb[-6:]}"


def _border_side(side) -> Optional[BorderSide]:
    if side is None or not side.style:
        return None
    name = side.style
    if name in ("dotted", "hair"):
        line = "dotted"
    elif "ash" in name:
        line = "dashed"
    elif name == "double":
        line = "double"
    else:
        line = "solid"
    return BorderSide(
        width=_BORDER_WIDTHS.get(name, 1.0),
        color=_color_hex(side.color) or "#000000",
        style=line,
    )


def read_style(cell: Cell) -> CellStyle:
    """Translate a worksheet cell's formatting into a ``CellStyle`` delta."""
    font = cell.font
    fill = cell.fill
    alignment = cell.alignment
    border = cell.border

    background: Optional[str] = None
    if getattr(fill, "patternType", None) == "solid":
        background = _color_hex(fill.fgColor)

    return CellStyle(
        border_top=_border_side(border.top) if border else None,
        border_bottom=_border_side(border.bottom) if border else None,
        border_left=_border_side(border.left) if border else None,
        border_right=_border_side(border.right) if border else None,
        background_color=background,
        font_color=_color_hex(font.color) if font else None,
        font_size=font.size if font else None,
        font_name=font.name if font else None,
        font_bold=True if font and font.bold else None,
        font_italic=True if font and font.italic else None,
        font_underline=(
            True if font and font.underline and font.underline != "none" else None
        ),
        text_align=_HORIZONTAL.get(alignment.horizontal) if alignment else None,
        vertical_align=_VERTICAL.get(alignment.vertical) if alignment else None,
    )


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def table_from_worksheet(ws: Worksheet, header_row: Optional[int] = None) -> Table:
    """
    Build a Table from the used range of *ws*.

    Rows above *header_row* are ignored, as are merged ranges that straddle
    the header and the body.
    """
    min_row, min_col, max_row, max_col = value_bounds(ws)
    header_row = header_row or min_row
    if not min_row <= header_row <= max_row:
        raise ShapeError(
            f"Header row {header_row} is outside the used range rows {min_row}-{max_row}"
        )

    letters = [get_column_letter(c) for c in range(min_col, max_col + 1)]
    columns: Dict[str, list] = {
        letter: [ws.cell(row=r, column=c).value for r in range(header_row + 1, max_row + 1)]
        for letter, c in zip(letters, range(min_col, max_col + 1))
    }
    table = Table.from_columns(columns)

    labels = {}
    for letter, c in zip(letters, range(min_col, max_col + 1)):
        value = ws.cell(row=header_row, column=c).value
        labels[letter] = format_value(value) if value is not None else letter
    set_header_labels(table, labels)

    # Formatting: the header row maps to header row 0, sheet rows below to body rows.
    for r in range(header_row, max_row + 1):
        group, row = ("header", 0) if r == header_row else ("body", r - header_row - 1)
        for letter, c in zip(letters, range(min_col, max_col + 1)):
            delta = read_style(ws.cell(row=r, column=c))
            if delta.set_fields():
                apply_style(table, [CellCoordinate(group=group, row=row, column=letter)], delta)

    for r1, c1, r2, c2 in merged_ranges(ws):
        if c1 < min_col or c2 > max_col or r2 < header_row:
            continue
        if r1 == r2 == header_row:
            merge_range(table, "header", 0, (c1 - min_col, c2 - min_col))
        elif r1 > header_row:
            merge_range(
                table, "body", (r1 - header_row - 1, r2 - header_row - 1), (c1 - min_col, c2 - min_col)
            )
        else:
            logger.warning(
                "Skipping merged range %s%d:%s%d across the header and the body",
                get_column_letter(c1), r1, get_column_letter(c2), r2,
            )

    logger.info(
        "Read sheet '%s': %d column(s), %d body row(s), %d merged region(s)",
        ws.title, table.ncol, table.nrow("body"), len(table.regions()),
    )
    return table


def load_workbook_table(
    file_path: Union[str, Path],
    sheet_name: Optional[str] = None,
    header_row: Optional[int] = None,
) -> Table:
    """
    Open a workbook with Excel's cached formula results (``data_only=True``)
    and build a Table from one worksheet (the active one by default).
    """
    logger.info("Loading workbook: %s", file_path)
    workbook = openpyxl.load_workbook(file_path, data_only=True)
    try:
        if sheet_name is not None and sheet_name not in workbook.sheetnames:
            logger.error(
                "Worksheet '%s' not found. Available sheets: %s",
                sheet_name,
                workbook.sheetnames,
            )
            raise ValueError(f"Worksheet '{sheet_name}' not found in workbook")
        ws = workbook[sheet_name] if sheet_name is not None else workbook.active
        return table_from_worksheet(ws, header_row=header_row)
    finally:
        workbook.close()
