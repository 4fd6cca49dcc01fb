"""
Content operations: header labels, extra header/footer rows, footnotes and
paragraph composition.

Content written to a hidden cell of a merged region is skipped (the owner
renders the region); see ``Table.set_content``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence, Union

from dto.cell_data import ImageRun, Paragraph, Run, TextRun
from dto.coordinate import CellCoordinate
from engine.errors import SelectorError, ShapeError
from engine.merging import merge_range
from engine.model import Table, format_value, text_content
from engine.selection import resolve

logger = logging.getLogger(__name__)

Chunk = Union[str, Run]
ComposeValue = Union[str, Run, Paragraph, Sequence[Paragraph], Callable[[Mapping[str, Any]], Any]]


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def as_chunk(value: Any, **font: Any) -> TextRun:
    """A text run from any value; *font* holds run-level overrides (``font_bold=True``...)."""
    return TextRun(text=format_value(value), **font)


def as_image(src: str, width: float, height: float) -> ImageRun:
    return ImageRun(src=src, width=width, height=height)


def as_paragraph(*chunks: Chunk) -> Paragraph:
    return Paragraph(runs=[TextRun(text=c) if isinstance(c, str) else c for c in chunks])


def _as_content(value: Any) -> List[Paragraph]:
    if isinstance(value, Paragraph):
        return [value]
    if isinstance(value, (TextRun, ImageRun)):
        return [Paragraph(runs=[value])]
    if isinstance(value, (list, tuple)) and all(isinstance(p, Paragraph) for p in value):
        return list(value)
    return text_content(value)


# ---------------------------------------------------------------------------
# Cell content
# ---------------------------------------------------------------------------


def compose(table: Table, i: Any = None, j: Any = None, value: ComposeValue = "", part: str = "body") -> Table:
    """
    Replace the content of the selected cells.

    *value* may be text, a run, a paragraph, a list of paragraphs, or a
    callable receiving the row's raw values and returning any of those.
    All content is built before the first cell is written.
    """
    coords = resolve(table, part, i, j)
    planned = []
    for coord in coords:
        raw = value(table.row_values(coord.group, coord.row)) if callable(value) else value
        planned.append((coord, _as_content(raw)))

    written = sum(table.set_content(coord, content) for coord, content in planned)
    logger.debug("Composed %d of %d selected cell(s) in %s", written, len(coords), part)
    return table


def append_chunks(table: Table, i: Any = None, j: Any = None, *chunks: Chunk, part: str = "body") -> Table:
    """Append runs to the last paragraph of each selected cell."""
    runs = as_paragraph(*chunks).runs
    for coord in resolve(table, part, i, j):
        if table.is_hidden(coord):
            continue
        cell = table.cell(coord)
        paragraphs = [p.model_copy(deep=True) for p in cell.content] or [Paragraph()]
        paragraphs[-1].runs.extend(r.model_copy() for r in runs)
        table.set_content(coord, paragraphs)
    return table


# ---------------------------------------------------------------------------
# Header rows & labels
# ---------------------------------------------------------------------------


def set_header_labels(table: Table, labels: Optional[Mapping[str, str]] = None, **kwargs: str) -> Table:
    """Set displayed labels by column key; keys stay unchanged."""
    updates = {**(labels or {}), **kwargs}
    unknown = [k for k in updates if k not in table.labels]
    if unknown:
        raise SelectorError(f"Unknown column key(s) {unknown}")

    for key, label in updates.items():
        table.labels[key] = label
        if table.label_row is not None:
            coord = CellCoordinate(group="header", row=table.label_row, column=key)
            table.cell(coord).value = label
            table.set_content(coord, text_content(label))
    return table


def _spans(table: Table, widths: Sequence[int]) -> List[int]:
    widths = list(widths)
    if any(not isinstance(w, int) or w < 1 for w in widths):
        raise ShapeError(f"Column spans must be positive integers, got {widths}")
    if sum(widths) != table.ncol:
        raise ShapeError(
            f"Column spans {widths} cover {sum(widths)} column(s), table has {table.ncol}"
        )
    return widths


def add_header_row(
    table: Table,
    values: Union[Mapping[str, Any], Sequence[Any]],
    widths: Optional[Sequence[int]] = None,
    top: bool = True,
) -> Table:
    """
    Add a header row above (``top=True``) or below the existing header rows.

    *values* is either a mapping of column key to value, or a sequence with
    one value per span in *widths*; each value then spans that many columns
    as a merged region.  Without *widths* a sequence needs one value per
    column.
    """
    keys = table.keys
    if isinstance(values, Mapping):
        if widths is not None:
            raise ShapeError("Column spans apply to a sequence of values, not a mapping")
        row_values = dict(values)
        spans = [1] * table.ncol
    else:
        values = list(values)
        spans = _spans(table, widths if widths is not None else [1] * len(values))
        if len(values) != len(spans):
            raise ShapeError(f"{len(values)} value(s) for {len(spans)} column span(s)")
        row_values = {}
        start = 0
        for value, span in zip(values, spans):
            row_values[keys[start]] = value
            start += span

    row = table.insert_row("header", row_values, position=0 if top else None)

    start = 0
    for span in spans:
        if span > 1:
            merge_range(table, "header", row, (start, start + span - 1))
        start += span
    return table


def add_footer_lines(table: Table, lines: Union[str, Sequence[Any]]) -> Table:
    """Append one footer row per line, each merged across every column."""
    if isinstance(lines, str):
        lines = [lines]
    first_key = table.keys[0]
    for line in lines:
        content = _as_content(line)
        text = "\n".join(p.text for p in content)
        row = table.insert_row("footer", {first_key: text})
        table.cell_at("footer", row, 0).content = content
        merge_range(table, "footer", row, (0, table.ncol - 1))
    return table


def footnote(
    table: Table,
    i: Any = None,
    j: Any = None,
    text: Any = "",
    symbol: Optional[str] = None,
    part: str = "body",
) -> Table:
    """
    Mark the selected cells with a superscript *symbol* and add a footer
    line ``symbol text``.  Symbols default to a running count starting at 1.
    Nothing is added when no visible cell is selected.
    """
    coords = [c for c in resolve(table, part, i, j) if not table.is_hidden(c)]
    if not coords:
        logger.debug("No visible cell selected for footnote %r", text)
        return table
    if symbol is None:
        table.footnote_count += 1
        symbol = str(table.footnote_count)

    marker = TextRun(text=symbol, vertical_align="superscript")
    for coord in coords:
        append_chunks(table, coord.row, coord.column, marker, part=part)

    add_footer_lines(table, [as_paragraph(marker, TextRun(text=f" {format_value(text)}"))])
    return table
