"""
Style operations.

``apply_style`` is the single primitive: it overlays a ``CellStyle`` delta
field by field onto every targeted cell.  Everything else here (``bold``,
``bg``, border helpers, themes) resolves selectors and calls it.

Styles are stored on hidden cells of a merged region as well; only their
border sides reach the rendered region (see ``Table.snapshot``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional, Tuple, Union

from dto.coordinate import CellCoordinate
from dto.style import NO_BORDER, BorderSide, CellStyle
from engine.constants import BORDER_COLOR, BORDER_WIDTH
from engine.selection import resolve, resolve_part, stacked_rows

if TYPE_CHECKING:
    from engine.model import Table

logger = logging.getLogger(__name__)

StyleDelta = Union[CellStyle, Mapping[str, Any]]


def default_border(border: Optional[BorderSide] = None) -> BorderSide:
    return border if border is not None else BorderSide(width=BORDER_WIDTH, color=BORDER_COLOR)


# ---------------------------------------------------------------------------
# Primitive
# ---------------------------------------------------------------------------


def apply_style(table: Table, coords: Iterable[CellCoordinate], delta: StyleDelta) -> Table:
    """
    Merge *delta* onto the style of each coordinate, last writer wins per
    field.  An empty coordinate set is a no-op.
    """
    if not isinstance(delta, CellStyle):
        delta = CellStyle.model_validate(delta)

    # Look every cell up before touching any, so a bad coordinate changes nothing.
    cells = [table.cell(coord) for coord in coords]
    for cell in cells:
        cell.style = cell.style.merged(delta)

    logger.debug("Applied %s to %d cell(s)", delta.set_fields(), len(cells))
    return table


def style(table: Table, i: Any = None, j: Any = None, part: str = "body", **fields: Any) -> Table:
    delta = CellStyle(**fields)
    return apply_style(table, resolve_part(table, part, i, j), delta)


# ---------------------------------------------------------------------------
# Text & fill
# ---------------------------------------------------------------------------


def bold(table: Table, i: Any = None, j: Any = None, bold: bool = True, part: str = "body") -> Table:
    return style(table, i, j, part, font_bold=bold)


def italic(table: Table, i: Any = None, j: Any = None, italic: bool = True, part: str = "body") -> Table:
    return style(table, i, j, part, font_italic=italic)


def underline(table: Table, i: Any = None, j: Any = None, underline: bool = True, part: str = "body") -> Table:
    return style(table, i, j, part, font_underline=underline)


def color(table: Table, i: Any = None, j: Any = None, color: str = "#000000", part: str = "body") -> Table:
    return style(table, i, j, part, font_color=color)


def bg(table: Table, i: Any = None, j: Any = None, bg: str = "transparent", part: str = "body") -> Table:
    return style(table, i, j, part, background_color=bg)


def font_size(table: Table, i: Any = None, j: Any = None, size: float = 11, part: str = "body") -> Table:
    return style(table, i, j, part, font_size=size)


def font(table: Table, i: Any = None, j: Any = None, fontname: str = "Arial", part: str = "body") -> Table:
    return style(table, i, j, part, font_name=fontname)


def align(table: Table, i: Any = None, j: Any = None, align: str = "left", part: str = "body") -> Table:
    return style(table, i, j, part, text_align=align)


def valign(table: Table, i: Any = None, j: Any = None, valign: str = "center", part: str = "body") -> Table:
    return style(table, i, j, part, vertical_align=valign)


def padding(table: Table, i: Any = None, j: Any = None, padding: float = 4, part: str = "body") -> Table:
    return style(table, i, j, part, padding=padding)


# ---------------------------------------------------------------------------
# Borders
# ---------------------------------------------------------------------------


def border(
    table: Table,
    i: Any = None,
    j: Any = None,
    border: Optional[BorderSide] = None,
    border_top: Optional[BorderSide] = None,
    border_bottom: Optional[BorderSide] = None,
    border_left: Optional[BorderSide] = None,
    border_right: Optional[BorderSide] = None,
    part: str = "body",
) -> Table:
    """Set borders on each selected cell; *border* fills every side not given explicitly."""
    delta = CellStyle(
        border_top=border_top or border,
        border_bottom=border_bottom or border,
        border_left=border_left or border,
        border_right=border_right or border,
    )
    return apply_style(table, resolve_part(table, part, i, j), delta)


def hline(table: Table, i: Any = None, j: Any = None, border: Optional[BorderSide] = None, part: str = "body") -> Table:
    """Bottom border under the selected rows."""
    delta = CellStyle(border_bottom=default_border(border))
    return apply_style(table, resolve_part(table, part, i, j), delta)


def hline_top(table: Table, j: Any = None, border: Optional[BorderSide] = None, part: str = "body") -> Table:
    """Top border over the first row of *part*."""
    rows = stacked_rows(table, part)
    if not rows:
        return table
    group, row = rows[0]
    delta = CellStyle(border_top=default_border(border))
    return apply_style(table, resolve(table, group, row, j), delta)


def vline(table: Table, i: Any = None, j: Any = None, border: Optional[BorderSide] = None, part: str = "all") -> Table:
    """Right border along the selected columns."""
    delta = CellStyle(border_right=default_border(border))
    return apply_style(table, resolve_part(table, part, i, j), delta)


def _row_coords(rows: List[Tuple[str, int]], keys: List[str]) -> List[CellCoordinate]:
    return [
        CellCoordinate(group=group, row=row, column=key)
        for group, row in rows
        for key in keys
    ]


def border_outer(table: Table, border: Optional[BorderSide] = None, part: str = "all") -> Table:
    """Frame the rows of *part* (header, body and footer stacked for ``"all"``)."""
    rows = stacked_rows(table, part)
    if not rows:
        return table
    side = default_border(border)
    keys = table.keys
    apply_style(table, _row_coords(rows[:1], keys), CellStyle(border_top=side))
    apply_style(table, _row_coords(rows[-1:], keys), CellStyle(border_bottom=side))
    apply_style(table, _row_coords(rows, keys[:1]), CellStyle(border_left=side))
    apply_style(table, _row_coords(rows, keys[-1:]), CellStyle(border_right=side))
    return table


def border_inner_h(table: Table, border: Optional[BorderSide] = None, part: str = "all") -> Table:
    """Horizontal rules between the stacked rows of *part*."""
    rows = stacked_rows(table, part)
    delta = CellStyle(border_bottom=default_border(border))
    return apply_style(table, _row_coords(rows[:-1], table.keys), delta)


def border_inner_v(table: Table, border: Optional[BorderSide] = None, part: str = "all") -> Table:
    """Vertical rules between columns."""
    rows = stacked_rows(table, part)
    delta = CellStyle(border_right=default_border(border))
    return apply_style(table, _row_coords(rows, table.keys[:-1]), delta)


def border_remove(table: Table, part: str = "all") -> Table:
    delta = CellStyle(
        border_top=NO_BORDER,
        border_bottom=NO_BORDER,
        border_left=NO_BORDER,
        border_right=NO_BORDER,
    )
    return apply_style(table, resolve_part(table, part), delta)


# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------


def theme_box(table: Table) -> Table:
    border_remove(table)
    border_outer(table)
    border_inner_h(table)
    border_inner_v(table)
    return bold(table, part="header")


def theme_zebra(table: Table, odd_body: str = "#EFEFEF", even_body: str = "transparent", header: str = "#CFCFCF") -> Table:
    """Alternating body backgrounds; the first body row counts as odd."""
    border_remove(table)
    n = table.nrow("body")
    bg(table, list(range(0, n, 2)), bg=odd_body)
    bg(table, list(range(1, n, 2)), bg=even_body)
    bg(table, bg=header, part="header")
    return bold(table, part="header")


def theme_booktabs(table: Table) -> Table:
    """Thick rules above the header and below the body, a thin one under the header."""
    border_remove(table)
    thick = BorderSide(width=2 * BORDER_WIDTH, color=BORDER_COLOR)
    hline_top(table, border=thick, part="header")
    if table.nrow("header"):
        hline(table, i=table.nrow("header") - 1, part="header")
    if table.nrow("body"):
        hline(table, i=table.nrow("body") - 1, border=thick)
    return bold(table, part="header")


THEMES = {
    "box": theme_box,
    "zebra": theme_zebra,
    "booktabs": theme_booktabs,
}
