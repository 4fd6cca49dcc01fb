"""
Cell content DTOs.

A cell's content is a list of paragraphs; each paragraph is a list of runs.
A run is either a piece of text (optionally overriding the cell font) or an
inline image with a size in points.
"""

from __future__ import annotations

from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel

from dto.style import CellStyle


class TextRun(BaseModel):
    kind: Literal["text"] = "text"
    text: str
    font_bold: Optional[bool] = None
    font_italic: Optional[bool] = None
    font_color: Optional[str] = None
    font_size: Optional[float] = None
    vertical_align: Optional[Literal["baseline", "superscript", "subscript"]] = None


class ImageRun(BaseModel):
    kind: Literal["image"] = "image"
    src: str
    width: float
    height: float


Run = Union[TextRun, ImageRun]


class Paragraph(BaseModel):
    runs: List[Run] = []

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs if isinstance(r, TextRun))


class CellData(BaseModel):
    """One slot of the cell arena."""

    value: Any = None  # raw datum, visible to row predicates
    content: List[Paragraph] = []
    style: CellStyle = CellStyle()

    @property
    def text(self) -> str:
        return "\n".join(p.text for p in self.content)
