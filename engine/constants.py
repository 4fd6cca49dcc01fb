import os

import dotenv

from dto.style import ResolvedStyle

dotenv.load_dotenv()

DEFAULT_FONT_NAME: str = os.getenv("TABLE_FONT_NAME", "Arial")
DEFAULT_FONT_SIZE: float = float(os.getenv("TABLE_FONT_SIZE", "11"))
DEFAULT_FONT_COLOR: str = os.getenv("TABLE_FONT_COLOR", "#000000")
DEFAULT_PADDING: float = float(os.getenv("TABLE_PADDING", "4"))
LINE_SPACING: float = float(os.getenv("TABLE_LINE_SPACING", "1.2"))
BORDER_COLOR: str = os.getenv("TABLE_BORDER_COLOR", "#666666")
BORDER_WIDTH: float = float(os.getenv("TABLE_BORDER_WIDTH", "1"))
FLOAT_DIGITS: int = int(os.getenv("TABLE_FLOAT_DIGITS", "2"))

# Single immutable table-level default every unset style field falls back to.
DEFAULT_STYLE = ResolvedStyle(
    font_color=DEFAULT_FONT_COLOR,
    font_size=DEFAULT_FONT_SIZE,
    font_name=DEFAULT_FONT_NAME,
    padding=DEFAULT_PADDING,
)
