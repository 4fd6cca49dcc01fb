"""
Error types raised by the table engine.

Every error is a local validation failure raised before the table is
touched, so the table keeps its prior state.
"""


class TableError(Exception):
    """Base class for all table engine errors."""


class SelectorError(TableError):
    """A selector referenced an unknown column, field, group or index."""


class MergeConflictError(TableError):
    """A merge request intersects an existing merged region."""


class ShapeError(TableError, ValueError):
    """Column data cannot form a table (unequal lengths, duplicate keys...)."""
