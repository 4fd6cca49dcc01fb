"""Shared test configuration and fixtures."""

import pytest

from engine.model import Table


@pytest.fixture
def table() -> Table:
    """Three columns, four body rows; 'group' repeats so it can be merged."""
    return Table.from_columns(
        {
            "group": ["fruit", "fruit", "veg", "veg"],
            "item": ["apple", "pear", "leek", "kale"],
            "price": [1.5, 2.25, 0.8, 3.0],
        }
    )


@pytest.fixture
def small() -> Table:
    """The two-column, three-row table from the round-trip example."""
    return Table.from_columns({"a": [1, 2, 3], "b": ["x", "y", "z"]})
