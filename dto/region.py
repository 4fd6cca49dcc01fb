"""
MergedRegion: a rectangle of cells inside one row group rendered as a
single cell.

Bounds are inclusive row indices and inclusive column positions (0-based).
The top-left cell owns the content; every other cell is hidden.
"""

from __future__ import annotations

from typing import Iterator, Tuple

from pydantic import BaseModel, model_validator

from dto.coordinate import RowGroupName


class MergedRegion(BaseModel):
    group: RowGroupName
    min_row: int
    max_row: int
    min_col: int
    max_col: int

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_bounds(self) -> "MergedRegion":
        if self.min_row < 0 or self.min_col < 0:
            raise ValueError("Region bounds must be non-negative")
        if self.min_row > self.max_row or self.min_col > self.max_col:
            raise ValueError(
                f"Empty region rows {self.min_row}-{self.max_row}, "
                f"columns {self.min_col}-{self.max_col}"
            )
        return self

    # ------------------------------------------------------------------
    # Convenience helpers
    # ------------------------------------------------------------------

    @property
    def num_rows(self) -> int:
        return self.max_row - self.min_row + 1

    @property
    def num_cols(self) -> int:
        return self.max_col - self.min_col + 1

    @property
    def owner(self) -> Tuple[int, int]:
        return self.min_row, self.min_col

    def contains(self, row: int, col: int) -> bool:
        return self.min_row <= row <= self.max_row and self.min_col <= col <= self.max_col

    def intersects(self, other: MergedRegion) -> bool:
        if self.group != other.group:
            return False
        return not (
            other.max_row < self.min_row
            or other.min_row > self.max_row
            or other.max_col < self.min_col
            or other.min_col > self.max_col
        )

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Yield every (row, col) of the region in row-major order."""
        for row in range(self.min_row, self.max_row + 1):
            for col in range(self.min_col, self.max_col + 1):
                yield row, col

    def shifted(self, rows: int) -> MergedRegion:
        return self.model_copy(
            update={"min_row": self.min_row + rows, "max_row": self.max_row + rows}
        )
