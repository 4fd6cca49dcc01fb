"""
Table: column keys, three row groups of cells, and the merged-region table.

Cells live in a flat arena (``_cells``); each row group is a list of rows
holding arena indices.  Merges are kept apart from the cells:
``_regions`` maps a region id to its ``MergedRegion`` and
``_region_index`` maps a ``(group, row, col)`` position to the id of the
region covering it.  No cell ever points at another cell.

Usage::

    table = Table.from_columns({"name": ["a", "b"], "qty": [1, 2]})
    styling.bold(table, part="header")
    merging.merge_range(table, "body", (0, 1), "name")
    snapshot = table.snapshot()
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from dto.cell_data import CellData, Paragraph, TextRun
from dto.coordinate import ROW_GROUPS, CellCoordinate, RowGroupName
from dto.region import MergedRegion
from dto.style import CellStyle, ResolvedStyle
from dto.table_data import (
    ColumnSnapshot,
    RenderedCell,
    RowSnapshot,
    TableLayout,
    TableSnapshot,
)
from engine.constants import DEFAULT_STYLE, FLOAT_DIGITS
from engine.errors import MergeConflictError, SelectorError, ShapeError
from engine.layout import autofit

logger = logging.getLogger(__name__)

ColumnData = Union[Mapping[str, Sequence[Any]], Iterable[Tuple[str, Sequence[Any]]]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def format_value(value: Any) -> str:
    """Default display text of a raw datum."""
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:.{FLOAT_DIGITS}f}"
    return str(value)


def text_content(value: Any) -> List[Paragraph]:
    return [Paragraph(runs=[TextRun(text=format_value(value))])]


def validate_columns(columns: ColumnData) -> List[Tuple[str, List[Any]]]:
    """
    Check that *columns* can form a table and return it as a list of
    ``(key, values)`` pairs in the original key order.

    Accepts a mapping or an iterable of pairs; the latter is how duplicate
    keys can reach us at all.
    """
    if isinstance(columns, Mapping):
        pairs = list(columns.items())
    else:
        pairs = list(columns)
    if not pairs:
        raise ShapeError("A table needs at least one column")

    validated: List[Tuple[str, List[Any]]] = []
    seen = set()
    length: Optional[int] = None
    for item in pairs:
        try:
            key, values = item
        except (TypeError, ValueError) as exc:
            raise ShapeError(f"Expected a (key, values) pair, got {item!r}") from exc
        if not isinstance(key, str):
            raise ShapeError(f"Column key must be a string, got {key!r}")
        if key in seen:
            raise ShapeError(f"Duplicate column key {key!r}")
        if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
            raise ShapeError(f"Column {key!r} must be a sequence of values")
        values = list(values)
        if length is None:
            length = len(values)
        elif len(values) != length:
            raise ShapeError(
                f"Column {key!r} has {len(values)} values, expected {length}"
            )
        seen.add(key)
        validated.append((key, values))
    return validated


# =====================================================================
# Table
# =====================================================================


class Table:
    """
    Mutable table model.  Every public operation in ``engine`` validates
    first and mutates second, so a failed call leaves the table untouched.
    """

    def __init__(self, keys: Sequence[str], defaults: ResolvedStyle = DEFAULT_STYLE):
        keys = list(keys)
        if not keys:
            raise ShapeError("A table needs at least one column")
        if len(set(keys)) != len(keys):
            raise ShapeError(f"Duplicate column keys in {keys}")
        if not all(isinstance(k, str) for k in keys):
            raise ShapeError("Column keys must be strings")

        self._keys: List[str] = keys
        self._positions: Dict[str, int] = {k: n for n, k in enumerate(keys)}
        self.defaults = defaults
        self.labels: Dict[str, str] = {k: k for k in keys}
        # Header row holding the column labels, if any.
        self.label_row: Optional[int] = None

        self._cells: List[CellData] = []
        self._groups: Dict[str, List[List[int]]] = {g: [] for g in ROW_GROUPS}
        self._regions: Dict[int, MergedRegion] = {}
        self._region_index: Dict[Tuple[str, int, int], int] = {}
        self._next_region_id = 0

        # Autofit is recomputed at every snapshot while this is set.
        self.fit_layout = False
        self.widths: Dict[str, float] = {}
        self.heights: Dict[Tuple[str, int], float] = {}
        self.footnote_count = 0

    @classmethod
    def from_columns(cls, columns: ColumnData, defaults: ResolvedStyle = DEFAULT_STYLE) -> Table:
        """
        Build a table with one header row of labels and one body row per
        datum.  Raises ``ShapeError`` for unequal lengths, duplicate or
        non-string keys.
        """
        validated = validate_columns(columns)
        table = cls([key for key, _ in validated], defaults=defaults)
        table.insert_row("header", dict(table.labels))
        table.label_row = 0

        n_rows = len(validated[0][1])
        for r in range(n_rows):
            table.insert_row("body", {key: values[r] for key, values in validated})

        logger.debug("Built table with %d column(s) and %d body row(s)", table.ncol, n_rows)
        return table

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def keys(self) -> List[str]:
        return list(self._keys)

    @property
    def ncol(self) -> int:
        return len(self._keys)

    def nrow(self, group: str) -> int:
        return len(self._groups[self.check_group(group)])

    def check_group(self, group: str) -> RowGroupName:
        if group not in self._groups:
            raise SelectorError(f"Unknown row group {group!r}; expected one of {ROW_GROUPS}")
        return group

    def column_position(self, key: str) -> int:
        try:
            return self._positions[key]
        except KeyError:
            raise SelectorError(f"Unknown column key {key!r}") from None

    def column_key(self, position: int) -> str:
        if not -self.ncol <= position < self.ncol:
            raise SelectorError(
                f"Column position {position} out of range for {self.ncol} column(s)"
            )
        return self._keys[position]

    def check_row(self, group: str, row: int) -> int:
        """Normalise a (possibly negative) row index, raising if out of range."""
        n = self.nrow(group)
        if not -n <= row < n:
            raise SelectorError(f"Row {row} out of range for {n} {group} row(s)")
        return row % n

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    def cell_at(self, group: str, row: int, col: int) -> CellData:
        """Live arena cell at a pre-merge position."""
        return self._cells[self._groups[group][row][col]]

    def cell(self, coord: CellCoordinate) -> CellData:
        row = self.check_row(coord.group, coord.row)
        return self.cell_at(coord.group, row, self.column_position(coord.column))

    def row_values(self, group: str, row: int) -> Dict[str, Any]:
        row = self.check_row(group, row)
        return {key: self.cell_at(group, row, n).value for n, key in enumerate(self._keys)}

    def rows(self, group: str) -> List[List[CellData]]:
        """Copies of the cells of *group*, row by row in column key order."""
        self.check_group(group)
        return [
            [self._cells[idx].model_copy(deep=True) for idx in row]
            for row in self._groups[group]
        ]

    def body_rows(self) -> List[List[CellData]]:
        return self.rows("body")

    def set_content(self, coord: CellCoordinate, content: List[Paragraph]) -> bool:
        """
        Replace a cell's content.  Hidden cells of a merged region are
        skipped; returns whether the content was written.
        """
        if self.is_hidden(coord):
            logger.debug("Skipping content write to hidden cell %s", coord)
            return False
        self.cell(coord).content = content
        return True

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def insert_row(
        self,
        group: str,
        values: Mapping[str, Any],
        position: Optional[int] = None,
    ) -> int:
        """
        Insert a row whose cells hold *values* (missing keys are empty) and
        return its index.  Rows at or below *position* move down one, along
        with their merged regions.
        """
        group = self.check_group(group)
        unknown = [k for k in values if k not in self._positions]
        if unknown:
            raise SelectorError(f"Unknown column key(s) {unknown}")

        n = len(self._groups[group])
        if position is None:
            position = n
        if not 0 <= position <= n:
            raise SelectorError(f"Cannot insert at row {position} of {n} {group} row(s)")
        for region in self.regions(group):
            if region.min_row < position <= region.max_row:
                raise MergeConflictError(
                    f"Inserting at {group} row {position} would split merged region {region}"
                )

        indices: List[int] = []
        for key in self._keys:
            value = values.get(key)
            self._cells.append(CellData(value=value, content=text_content(value)))
            indices.append(len(self._cells) - 1)
        self._groups[group].insert(position, indices)

        if position < n:
            self._shift_rows(group, position)
        return position

    def _shift_rows(self, group: str, position: int) -> None:
        for region_id, region in list(self._regions.items()):
            if region.group == group and region.min_row >= position:
                self._regions[region_id] = region.shifted(1)
        self._reindex()

        self.heights = {
            (g, r + 1 if g == group and r >= position else r): h
            for (g, r), h in self.heights.items()
        }
        if group == "header" and self.label_row is not None and self.label_row >= position:
            self.label_row += 1

    # ------------------------------------------------------------------
    # Region table
    # ------------------------------------------------------------------

    def _reindex(self) -> None:
        self._region_index = {
            (region.group, row, col): region_id
            for region_id, region in self._regions.items()
            for row, col in region.cells()
        }

    def register_region(self, region: MergedRegion) -> int:
        """
        Record a validated region and clear the content of its hidden cells.
        Callers check bounds and overlaps first (see ``engine.merging``).
        """
        region_id = self._next_region_id
        self._next_region_id += 1
        self._regions[region_id] = region
        for row, col in region.cells():
            self._region_index[(region.group, row, col)] = region_id
            if (row, col) != region.owner:
                self.cell_at(region.group, row, col).content = []
        return region_id

    def drop_region(self, region: MergedRegion) -> None:
        """Forget *region*; its hidden cells become independent, empty cells."""
        region_id = self._region_index.get((region.group, region.min_row, region.min_col))
        if region_id is None or self._regions.get(region_id) != region:
            raise SelectorError(f"No merged region {region}")
        del self._regions[region_id]
        for row, col in region.cells():
            self._region_index.pop((region.group, row, col), None)

    def regions(self, group: Optional[str] = None) -> List[MergedRegion]:
        order = {g: n for n, g in enumerate(ROW_GROUPS)}
        found = [r for r in self._regions.values() if group is None or r.group == group]
        return sorted(found, key=lambda r: (order[r.group], r.min_row, r.min_col))

    def region_at(self, group: str, row: int, col: int) -> Optional[MergedRegion]:
        region_id = self._region_index.get((group, row, col))
        return self._regions[region_id] if region_id is not None else None

    def is_hidden(self, coord: CellCoordinate) -> bool:
        row = self.check_row(coord.group, coord.row)
        region = self.region_at(coord.group, row, self.column_position(coord.column))
        return region is not None and region.owner != (row, self.column_position(coord.column))

    def owner_of(self, coord: CellCoordinate) -> CellCoordinate:
        """Coordinate of the cell that renders *coord* (itself unless hidden)."""
        row = self.check_row(coord.group, coord.row)
        region = self.region_at(coord.group, row, self.column_position(coord.column))
        if region is None:
            return coord.model_copy(update={"row": row})
        return CellCoordinate(
            group=coord.group, row=region.min_row, column=self._keys[region.min_col]
        )

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def _region_style(self, region: MergedRegion) -> CellStyle:
        """
        Owner style, with the right and bottom borders taken from the cells
        on the region's right and bottom edges when those are set.
        """
        style = self.cell_at(region.group, region.min_row, region.min_col).style
        right = self.cell_at(region.group, region.min_row, region.max_col).style.border_right
        bottom = self.cell_at(region.group, region.max_row, region.min_col).style.border_bottom
        return style.merged(CellStyle(border_right=right, border_bottom=bottom))

    def _row_height(self, group: str, row: int, layout: Optional[TableLayout]) -> Optional[float]:
        if (group, row) in self.heights:
            return self.heights[(group, row)]
        if layout is not None:
            heights = layout.row_heights.get(group, [])
            if row < len(heights):
                return heights[row]
        return None

    def _column_width(self, key: str, layout: Optional[TableLayout]) -> Optional[float]:
        if key in self.widths:
            return self.widths[key]
        if layout is not None:
            return layout.column_widths.get(key)
        return None

    def _render_row(self, group: str, row: int, layout: Optional[TableLayout]) -> RowSnapshot:
        cells: List[RenderedCell] = []
        for col, key in enumerate(self._keys):
            cell = self.cell_at(group, row, col)
            region = self.region_at(group, row, col)
            if region is None:
                cells.append(
                    RenderedCell(
                        column=key,
                        value=cell.value,
                        text=cell.text,
                        content=cell.content,
                        style=cell.style.resolve(self.defaults),
                    )
                )
            elif region.owner == (row, col):
                cells.append(
                    RenderedCell(
                        column=key,
                        value=cell.value,
                        text=cell.text,
                        content=cell.content,
                        style=self._region_style(region).resolve(self.defaults),
                        row_span=region.num_rows,
                        col_span=region.num_cols,
                    )
                )
            else:
                cells.append(
                    RenderedCell(
                        column=key,
                        value=cell.value,
                        style=cell.style.resolve(self.defaults),
                        row_span=0,
                        col_span=0,
                        hidden=True,
                    )
                )
        return RowSnapshot(height=self._row_height(group, row, layout), cells=cells)

    def snapshot(self) -> TableSnapshot:
        """Read-only view for a rendering backend; later mutations do not leak into it."""
        layout = autofit(self) if self.fit_layout else None
        groups = {
            group: [self._render_row(group, row, layout) for row in range(self.nrow(group))]
            for group in ROW_GROUPS
        }
        snapshot = TableSnapshot(
            columns=[
                ColumnSnapshot(key=key, label=self.labels[key], width=self._column_width(key, layout))
                for key in self._keys
            ],
            defaults=self.defaults,
            **groups,
        )
        return snapshot.model_copy(deep=True)

    def __repr__(self) -> str:
        return (
            f"Table(columns={self._keys}, header={self.nrow('header')}, "
            f"body={self.nrow('body')}, footer={self.nrow('footer')}, "
            f"regions={len(self._regions)})"
        )
