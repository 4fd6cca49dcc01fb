"""
Merged regions.

A region is a rectangle inside one row group collapsed to a single rendered
cell.  The top-left cell owns the content; the others are hidden and their
content is cleared when the region is created.  Unmerging does not bring
that content back: hidden cells return as empty, independent cells.

Regions of a group never overlap; every request is checked against the
existing regions before anything is recorded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Union

from dto.region import MergedRegion
from engine.errors import MergeConflictError
from engine.selection import as_column_selector, as_row_selector, part_groups, resolve_columns, resolve_rows

if TYPE_CHECKING:
    from engine.model import Table

logger = logging.getLogger(__name__)

RowRange = Union[int, Tuple[int, int]]
ColumnRef = Union[int, str]
ColumnRange = Union[ColumnRef, Tuple[ColumnRef, ColumnRef]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _row_bounds(table: Table, group: str, rows: RowRange) -> Tuple[int, int]:
    first, last = (rows, rows) if isinstance(rows, int) else rows
    first, last = table.check_row(group, first), table.check_row(group, last)
    return min(first, last), max(first, last)


def _col_position(table: Table, ref: ColumnRef) -> int:
    if isinstance(ref, str):
        return table.column_position(ref)
    return table.column_position(table.column_key(ref))


def _col_bounds(table: Table, columns: ColumnRange) -> Tuple[int, int]:
    first, last = (columns, columns) if isinstance(columns, (int, str)) else columns
    first, last = _col_position(table, first), _col_position(table, last)
    return min(first, last), max(first, last)


def _check_free(table: Table, region: MergedRegion) -> None:
    conflicts = [r for r in table.regions(region.group) if r.intersects(region)]
    if conflicts:
        raise MergeConflictError(
            f"Region {region} intersects existing merged region(s) {conflicts}"
        )


def _add_regions(table: Table, regions: List[MergedRegion]) -> Table:
    for region in regions:
        table.register_region(region)
        logger.debug(
            "Merged %s rows %d-%d, columns %d-%d",
            region.group, region.min_row, region.max_row, region.min_col, region.max_col,
        )
    return table


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def merge_range(table: Table, group: str, rows: RowRange, columns: ColumnRange) -> Table:
    """
    Merge rows ``rows`` (an index or inclusive ``(first, last)``) by columns
    ``columns`` (a key/position or inclusive pair of them) of *group*.

    Raises ``MergeConflictError`` if the rectangle intersects an existing
    region; a single-cell request does nothing.
    """
    group = table.check_group(group)
    min_row, max_row = _row_bounds(table, group, rows)
    min_col, max_col = _col_bounds(table, columns)
    region = MergedRegion(
        group=group, min_row=min_row, max_row=max_row, min_col=min_col, max_col=max_col
    )
    if region.num_rows == 1 and region.num_cols == 1:
        return table

    _check_free(table, region)
    return _add_regions(table, [region])


def _runs(texts: List[Optional[str]]) -> List[Tuple[int, int]]:
    """
    Inclusive ``(start, end)`` runs of equal, non-empty text longer than one.
    ``None`` marks a cell that cannot join a run.
    """
    runs: List[Tuple[int, int]] = []
    start = 0
    for n in range(1, len(texts) + 1):
        if n < len(texts) and texts[n] is not None and texts[n] == texts[start]:
            continue
        if texts[start] and n - 1 > start:
            runs.append((start, n - 1))
        start = n
    return runs


def merge_v(table: Table, j: Any = None, part: str = "body") -> Table:
    """
    In each selected column, merge vertically adjacent cells showing the
    same non-empty text.  Cells that are already merged break a run.
    """
    columns = resolve_columns(table, as_column_selector(j))
    regions: List[MergedRegion] = []
    for group in part_groups(table, part):
        for key in columns:
            col = table.column_position(key)
            texts = [
                None if table.region_at(group, row, col) else table.cell_at(group, row, col).text
                for row in range(table.nrow(group))
            ]
            for start, end in _runs(texts):
                regions.append(
                    MergedRegion(group=group, min_row=start, max_row=end, min_col=col, max_col=col)
                )
    return _add_regions(table, regions)


def merge_h(table: Table, i: Any = None, part: str = "header") -> Table:
    """In each selected row, merge horizontally adjacent cells showing the same non-empty text."""
    regions: List[MergedRegion] = []
    for group in part_groups(table, part):
        for row in resolve_rows(table, group, as_row_selector(i)):
            texts = [
                None if table.region_at(group, row, col) else table.cell_at(group, row, col).text
                for col in range(table.ncol)
            ]
            for start, end in _runs(texts):
                regions.append(
                    MergedRegion(group=group, min_row=row, max_row=row, min_col=start, max_col=end)
                )
    return _add_regions(table, regions)


# ---------------------------------------------------------------------------
# Unmerge
# ---------------------------------------------------------------------------


def unmerge(
    table: Table,
    group: str,
    rows: Optional[RowRange] = None,
    columns: Optional[ColumnRange] = None,
) -> Table:
    """
    Remove every region of *group* intersecting the given range (the whole
    group when both are omitted).  Hidden cells come back empty.
    """
    group = table.check_group(group)
    if not table.nrow(group):
        return table
    min_row, max_row = _row_bounds(table, group, rows) if rows is not None else (0, table.nrow(group) - 1)
    min_col, max_col = _col_bounds(table, columns) if columns is not None else (0, table.ncol - 1)
    area = MergedRegion(group=group, min_row=min_row, max_row=max_row, min_col=min_col, max_col=max_col)

    removed = [r for r in table.regions(group) if r.intersects(area)]
    for region in removed:
        table.drop_region(region)
    logger.debug("Removed %d merged region(s) from %s", len(removed), group)
    return table


def merge_none(table: Table, part: str = "all") -> Table:
    for group in part_groups(table, part):
        unmerge(table, group)
    return table

