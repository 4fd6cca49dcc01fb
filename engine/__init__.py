"""
Table formatting engine.

Modules, in dependency order:
  model      -- Table: cell arena, row groups, region table, snapshot
  selection  -- row/column selectors resolved to coordinates
  styling    -- apply_style and the helpers/themes built on it
  merging    -- merge_range, merge_v/merge_h, unmerge
  content    -- labels, header/footer rows, footnotes, compose
  layout     -- autofit and explicit sizes
"""

from engine.errors import MergeConflictError, SelectorError, ShapeError, TableError
from engine.model import Table
from engine.selection import resolve, resolve_part
from engine.styling import apply_style
from engine.merging import merge_range, unmerge
from engine.layout import autofit

__all__ = [
    "Table",
    "TableError",
    "SelectorError",
    "MergeConflictError",
    "ShapeError",
    "resolve",
    "resolve_part",
    "apply_style",
    "merge_range",
    "unmerge",
    "autofit",
]
