"""
Row and column selector DTOs.

Selectors are small tagged unions, resolved into concrete coordinates once
before any mutation (see ``engine.selection``).

    RowSelector     = AllRows | RowIndices | RowPredicate
    ColumnSelector  = AllColumns | ColumnKeys | ColumnPositions
                      | ColumnPredicate | ColumnPattern
"""

from __future__ import annotations

from typing import Any, Callable, List, Literal, Mapping, Union

from pydantic import BaseModel


# -------------------------------------------------------------------
# Rows
# -------------------------------------------------------------------

class AllRows(BaseModel):
    kind: Literal["all"] = "all"


class RowIndices(BaseModel):
    kind: Literal["indices"] = "indices"
    indices: List[int]


class RowPredicate(BaseModel):
    """Keeps the rows whose raw values (keyed by column) satisfy *predicate*."""
    kind: Literal["predicate"] = "predicate"
    predicate: Callable[[Mapping[str, Any]], bool]


# -------------------------------------------------------------------
# Columns
# -------------------------------------------------------------------

class AllColumns(BaseModel):
    kind: Literal["all"] = "all"


class ColumnKeys(BaseModel):
    kind: Literal["keys"] = "keys"
    keys: List[str]


class ColumnPositions(BaseModel):
    kind: Literal["positions"] = "positions"
    positions: List[int]


class ColumnPredicate(BaseModel):
    kind: Literal["predicate"] = "predicate"
    predicate: Callable[[str], bool]


class ColumnPattern(BaseModel):
    """Keeps the columns whose key matches the regular expression."""
    kind: Literal["pattern"] = "pattern"
    pattern: str


RowSelector = Union[AllRows, RowIndices, RowPredicate]
ColumnSelector = Union[AllColumns, ColumnKeys, ColumnPositions, ColumnPredicate, ColumnPattern]
