"""
Selector resolution.

Turns a row selector and a column selector into the concrete cell
coordinates of one row group (or of every group, for ``part="all"``).
Loose arguments are coerced first::

    None                      -> AllRows / AllColumns
    3                         -> RowIndices([3])       / ColumnPositions([3])
    "price"                   -> ColumnKeys(["price"])
    [0, 2] / range(2)         -> RowIndices            / ColumnPositions
    ["a", "b"]                -> ColumnKeys
    callable                  -> RowPredicate          / ColumnPredicate

Coordinates are always returned row-major (rows in table order, columns in
key order) and without duplicates.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Iterator, List, Mapping, Tuple

from dto.coordinate import ROW_GROUPS, CellCoordinate
from dto.selectors import (
    AllColumns,
    AllRows,
    ColumnKeys,
    ColumnPattern,
    ColumnPositions,
    ColumnPredicate,
    ColumnSelector,
    RowIndices,
    RowPredicate,
    RowSelector,
)
from engine.errors import SelectorError

if TYPE_CHECKING:
    from engine.model import Table

logger = logging.getLogger(__name__)

_ROW_SELECTORS = (AllRows, RowIndices, RowPredicate)
_COLUMN_SELECTORS = (AllColumns, ColumnKeys, ColumnPositions, ColumnPredicate, ColumnPattern)


class RowView(Mapping[str, Any]):
    """
    Read-only mapping of one row's raw values, handed to row predicates.

    Reading a field that is not a column key raises ``SelectorError``
    (``.get`` included, since it is not a ``KeyError``).
    """

    def __init__(self, values: Mapping[str, Any]):
        self._values = values

    def __getitem__(self, key: str) -> Any:
        if key not in self._values:
            raise SelectorError(f"Row predicate references unknown field {key!r}")
        return self._values[key]

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)


# ------------------------------------------------------------------
# Coercion
# ------------------------------------------------------------------


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def as_row_selector(i: Any) -> RowSelector:
    if isinstance(i, _ROW_SELECTORS):
        return i
    if i is None:
        return AllRows()
    if _is_int(i):
        return RowIndices(indices=[i])
    if callable(i):
        return RowPredicate(predicate=i)
    if isinstance(i, (list, tuple, range)) and all(_is_int(n) for n in i):
        return RowIndices(indices=list(i))
    raise SelectorError(f"Cannot use {i!r} as a row selector")


def as_column_selector(j: Any) -> ColumnSelector:
    if isinstance(j, _COLUMN_SELECTORS):
        return j
    if j is None:
        return AllColumns()
    if isinstance(j, str):
        return ColumnKeys(keys=[j])
    if _is_int(j):
        return ColumnPositions(positions=[j])
    if callable(j):
        return ColumnPredicate(predicate=j)
    if isinstance(j, (list, tuple, range)):
        items = list(j)
        if all(isinstance(k, str) for k in items):
            return ColumnKeys(keys=items)
        if all(_is_int(k) for k in items):
            return ColumnPositions(positions=items)
    raise SelectorError(f"Cannot use {j!r} as a column selector")


# ------------------------------------------------------------------
# Resolution
# ------------------------------------------------------------------


def resolve_rows(table: Table, group: str, selector: RowSelector) -> List[int]:
    """Return the selected row indices of *group*, ascending and unique."""
    group = table.check_group(group)
    n = table.nrow(group)

    if isinstance(selector, AllRows):
        return list(range(n))
    if isinstance(selector, RowIndices):
        return sorted({table.check_row(group, i) for i in selector.indices})
    if isinstance(selector, RowPredicate):
        selected: List[int] = []
        for row in range(n):
            if selector.predicate(RowView(table.row_values(group, row))):
                selected.append(row)
        return selected
    raise SelectorError(f"Unsupported row selector {selector!r}")


def resolve_columns(table: Table, selector: ColumnSelector) -> List[str]:
    """Return the selected column keys in table key order."""
    keys = table.keys

    if isinstance(selector, AllColumns):
        return keys
    if isinstance(selector, ColumnKeys):
        wanted = {keys[table.column_position(k)] for k in selector.keys}
    elif isinstance(selector, ColumnPositions):
        wanted = {table.column_key(p) for p in selector.positions}
    elif isinstance(selector, ColumnPredicate):
        wanted = {k for k in keys if selector.predicate(k)}
    elif isinstance(selector, ColumnPattern):
        try:
            pattern = re.compile(selector.pattern)
        except re.error as exc:
            raise SelectorError(f"Invalid column pattern {selector.pattern!r}: {exc}") from exc
        wanted = {k for k in keys if pattern.search(k)}
    else:
        raise SelectorError(f"Unsupported column selector {selector!r}")
    return [k for k in keys if k in wanted]


def resolve(table: Table, group: str, i: Any = None, j: Any = None) -> List[CellCoordinate]:
    """Resolve row selector *i* and column selector *j* within one row group."""
    rows = resolve_rows(table, group, as_row_selector(i))
    columns = resolve_columns(table, as_column_selector(j))
    return [CellCoordinate(group=group, row=r, column=c) for r in rows for c in columns]


def part_groups(table: Table, part: str) -> List[str]:
    if part == "all":
        return list(ROW_GROUPS)
    return [table.check_group(part)]


def resolve_part(
    table: Table,
    part: str = "body",
    i: Any = None,
    j: Any = None,
) -> List[CellCoordinate]:
    """
    Like ``resolve`` but *part* may also be ``"all"``, stacking header, body
    and footer.  Row indices are per group, so with ``"all"`` only
    ``None`` or a predicate is accepted for *i*.
    """
    row_selector = as_row_selector(i)
    if part == "all" and isinstance(row_selector, RowIndices):
        raise SelectorError("Row indices need a single part, not 'all'")

    coords: List[CellCoordinate] = []
    for group in part_groups(table, part):
        coords.extend(resolve(table, group, row_selector, j))
    logger.debug("Resolved %d coordinate(s) in part %r", len(coords), part)
    return coords


def stacked_rows(table: Table, part: str) -> List[Tuple[str, int]]:
    """``(group, row)`` for every row of *part*, top to bottom."""
    return [
        (group, row)
        for group in part_groups(table, part)
        for row in range(table.nrow(group))
    ]
