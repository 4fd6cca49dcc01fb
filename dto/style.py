"""
Style records.

``CellStyle`` is what a cell carries: every field is optional and ``None``
means "not set".  A ``CellStyle`` is also the delta passed to style
operations, so merging one onto another is a field-by-field overwrite.

``ResolvedStyle`` is the fully specified record a rendering backend sees,
produced by filling the unset fields from the table-level defaults.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel

BorderLineStyle = Literal["solid", "dashed", "dotted", "double", "none"]
TextAlign = Literal["left", "center", "right", "justify"]
VerticalAlign = Literal["top", "center", "bottom"]

BORDER_SIDES = ("border_top", "border_bottom", "border_left", "border_right")


class BorderSide(BaseModel):
    width: float = 1.0
    color: str = "#000000"
    style: BorderLineStyle = "solid"

    model_config = {"frozen": True}


# A side with nothing drawn on it.
NO_BORDER = BorderSide(width=0.0, style="none")


class ResolvedStyle(BaseModel):
    border_top: BorderSide = NO_BORDER
    border_bottom: BorderSide = NO_BORDER
    border_left: BorderSide = NO_BORDER
    border_right: BorderSide = NO_BORDER
    background_color: str = "transparent"
    font_color: str
    font_size: float
    font_name: str
    font_bold: bool = False
    font_italic: bool = False
    font_underline: bool = False
    text_align: TextAlign = "left"
    vertical_align: VerticalAlign = "center"
    padding: float

    model_config = {"frozen": True}


class CellStyle(BaseModel):
    border_top: Optional[BorderSide] = None
    border_bottom: Optional[BorderSide] = None
    border_left: Optional[BorderSide] = None
    border_right: Optional[BorderSide] = None
    background_color: Optional[str] = None
    font_color: Optional[str] = None
    font_size: Optional[float] = None
    font_name: Optional[str] = None
    font_bold: Optional[bool] = None
    font_italic: Optional[bool] = None
    font_underline: Optional[bool] = None
    text_align: Optional[TextAlign] = None
    vertical_align: Optional[VerticalAlign] = None
    padding: Optional[float] = None

    model_config = {"frozen": True, "extra": "forbid"}

    def set_fields(self) -> dict:
        """Return ``{field: value}`` for every field that is not ``None``."""
        return {
            name: getattr(self, name)
            for name in CellStyle.model_fields
            if getattr(self, name) is not None
        }

    def merged(self, delta: CellStyle) -> CellStyle:
        """Overlay *delta* onto this style; set fields in *delta* win."""
        updates = delta.set_fields()
        if not updates:
            return self
        return self.model_copy(update=updates)

    def resolve(self, defaults: ResolvedStyle) -> ResolvedStyle:
        """Fill every unset field from *defaults*."""
        return defaults.model_copy(update=self.set_fields())
