"""
Read-only snapshot DTOs handed to a rendering backend.

    TableSnapshot
      ├─ columns: List[ColumnSnapshot]          (key, label, width)
      ├─ header / body / footer: List[RowSnapshot]
      │     └─ cells: List[RenderedCell]         (one per column key)
      └─ defaults: ResolvedStyle

Hidden cells are listed with ``hidden=True`` and zero spans so every row
keeps one entry per column.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from dto.cell_data import Paragraph
from dto.style import ResolvedStyle


class RenderedCell(BaseModel):
    column: str
    value: Any = None
    text: str = ""
    content: List[Paragraph] = []
    style: ResolvedStyle
    row_span: int = 1
    col_span: int = 1
    hidden: bool = False


class RowSnapshot(BaseModel):
    height: Optional[float] = None
    cells: List[RenderedCell] = []


class ColumnSnapshot(BaseModel):
    key: str
    label: str
    width: Optional[float] = None


class TableLayout(BaseModel):
    """Column widths by key and row heights by group, in points."""
    column_widths: Dict[str, float] = {}
    row_heights: Dict[str, List[float]] = {}


class TableSnapshot(BaseModel):
    columns: List[ColumnSnapshot]
    header: List[RowSnapshot] = []
    body: List[RowSnapshot] = []
    footer: List[RowSnapshot] = []
    defaults: ResolvedStyle
