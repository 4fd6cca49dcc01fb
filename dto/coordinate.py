from typing import Literal

from pydantic import BaseModel

RowGroupName = Literal["header", "body", "footer"]

# Stacking order of the row groups when a table is read top to bottom.
ROW_GROUPS = ("header", "body", "footer")


class CellCoordinate(BaseModel):
    """Pre-merge address of a cell: (row group, row index, column key)."""

    group: RowGroupName
    row: int
    column: str

    model_config = {"frozen": True}
