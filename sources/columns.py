"""
Column-mapping data sources.

The engine only accepts ``{column key: values}``; these helpers turn
record lists and JSON files into that shape.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence, Union

from engine.errors import ShapeError

logger = logging.getLogger(__name__)


def columns_from_records(records: Sequence[Mapping[str, Any]]) -> Dict[str, List[Any]]:
    """
    Pivot a list of records into columns.  Keys appear in first-seen order;
    a record missing a key contributes ``None`` to that column.
    """
    keys: List[str] = []
    seen = set()
    for n, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise ShapeError(f"Record {n} is not a mapping: {record!r}")
        for key in record:
            if key not in seen:
                seen.add(key)
                keys.append(key)
    return {key: [record.get(key) for record in records] for key in keys}


def columns_from_json(path: Union[str, Path]) -> Dict[str, List[Any]]:
    """
    Read a JSON file holding either ``{"key": [values...]}`` or a list of
    record objects.
    """
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)

    if isinstance(payload, list):
        columns = columns_from_records(payload)
    elif isinstance(payload, dict):
        for key, values in payload.items():
            if not isinstance(values, list):
                raise ShapeError(f"Column {key!r} in {path} is not a list")
        columns = payload
    else:
        raise ShapeError(f"{path} must hold an object of columns or a list of records")

    logger.info("Read %d column(s) from %s", len(columns), path)
    return columns
