"""
Layout: column widths and row heights computed from content and style.

Text is measured with Pillow's built-in default font and scaled linearly
to the cell's font size, so results do not depend on fonts installed on the
machine.  All sizes are in points.

Cells of a region spanning several columns do not contribute to any column
width; cells of a region spanning several rows do not contribute to any row
height.  Hidden cells never contribute.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Dict, List, Tuple

from PIL import ImageFont

from dto.cell_data import CellData, ImageRun
from dto.coordinate import ROW_GROUPS
from dto.style import ResolvedStyle
from dto.table_data import TableLayout
from engine.constants import LINE_SPACING
from engine.selection import as_column_selector, as_row_selector, resolve_columns, resolve_rows

if TYPE_CHECKING:
    from engine.model import Table

logger = logging.getLogger(__name__)

# Nominal size of Pillow's bitmap fallback font.
_BITMAP_FONT_SIZE = 11.0
# Bold glyphs are wider than the regular face we measure with.
_BOLD_FACTOR = 1.1
# Super/subscript runs are drawn smaller.
_SCRIPT_FACTOR = 0.7


# ---------------------------------------------------------------------------
# Text measurement
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def _reference_font():
    return ImageFont.load_default()


def text_width(text: str, size: float, bold: bool = False) -> float:
    """Width in points of one line of *text* at font *size*."""
    if not text:
        return 0.0
    font = _reference_font()
    reference_size = float(getattr(font, "size", _BITMAP_FONT_SIZE))
    width = font.getlength(text) * size / reference_size
    return width * _BOLD_FACTOR if bold else width


def _lines(cell: CellData, style: ResolvedStyle) -> List[Tuple[float, float]]:
    """``(width, height)`` of every rendered line of the cell."""
    lines: List[Tuple[float, float]] = []
    empty_height = style.font_size * LINE_SPACING
    for paragraph in cell.content:
        width, height = 0.0, 0.0
        for run in paragraph.runs:
            if isinstance(run, ImageRun):
                width += run.width
                height = max(height, run.height)
                continue
            size = run.font_size or style.font_size
            if run.vertical_align in ("superscript", "subscript"):
                size *= _SCRIPT_FACTOR
            bold = run.font_bold if run.font_bold is not None else style.font_bold
            pieces = run.text.split("\n")
            for n, piece in enumerate(pieces):
                if n:
                    lines.append((width, height or empty_height))
                    width, height = 0.0, 0.0
                width += text_width(piece, size, bold)
                height = max(height, size * LINE_SPACING)
        lines.append((width, height or empty_height))
    return lines or [(0.0, empty_height)]


def measure_cell(cell: CellData, defaults: ResolvedStyle) -> Tuple[float, float]:
    """Rendered ``(width, height)`` of a cell including padding on both sides."""
    style = cell.style.resolve(defaults)
    lines = _lines(cell, style)
    width = max(w for w, _ in lines) + 2 * style.padding
    height = sum(h for _, h in lines) + 2 * style.padding
    return width, height


# ---------------------------------------------------------------------------
# Autofit
# ---------------------------------------------------------------------------


def autofit(table: Table) -> TableLayout:
    """
    Compute column widths and row heights for the current table state.
    Pure: the table is not modified and equal states give equal layouts.
    """
    empty_width, empty_height = measure_cell(CellData(), table.defaults)
    widths: Dict[str, float] = {key: empty_width for key in table.keys}
    heights: Dict[str, List[float]] = {}

    for group in ROW_GROUPS:
        heights[group] = []
        for row in range(table.nrow(group)):
            row_height = empty_height
            for col, key in enumerate(table.keys):
                region = table.region_at(group, row, col)
                if region is not None and region.owner != (row, col):
                    continue
                width, height = measure_cell(table.cell_at(group, row, col), table.defaults)
                if region is None or region.num_cols == 1:
                    widths[key] = max(widths[key], width)
                if region is None or region.num_rows == 1:
                    row_height = max(row_height, height)
            heights[group].append(row_height)

    logger.debug("Autofit widths: %s", widths)
    return TableLayout(column_widths=widths, row_heights=heights)


def apply_autofit(table: Table) -> Table:
    """
    Size the table's snapshots with ``autofit``.  The layout is computed
    when the snapshot is taken, so rows and content added afterwards are
    measured too.
    """
    table.fit_layout = True
    return table


# ---------------------------------------------------------------------------
# Explicit sizes
# ---------------------------------------------------------------------------


def set_width(table: Table, j: Any = None, width: float = 72.0) -> Table:
    """Fix the width of the selected columns; takes precedence over autofit."""
    if width <= 0:
        raise ValueError(f"Column width must be positive, got {width}")
    for key in resolve_columns(table, as_column_selector(j)):
        table.widths[key] = float(width)
    return table


def set_height(table: Table, i: Any = None, height: float = 18.0, part: str = "body") -> Table:
    """Fix the height of the selected rows of *part*; takes precedence over autofit."""
    if height <= 0:
        raise ValueError(f"Row height must be positive, got {height}")
    for row in resolve_rows(table, part, as_row_selector(i)):
        table.heights[(part, row)] = float(height)
    return table
