"""Render mapped batch rows for download (CSV or JSON)."""

from __future__ import annotations

import json
from typing import Any, Sequence

from integration_service.mapping.models import JSONObject


def _csv_cell(value: Any) -> str:
    """Quote one value; nested structures are written as JSON."""
    if value is None:
        text = ""
    elif isinstance(value, (dict, list)):
        text = json.dumps(value, ensure_ascii=False)
    elif isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return '"' + text.replace('"', '""') + '"'


def export_csv(rows: Sequence[JSONObject]) -> str:
    """
    CSV with a header taken from the first row's keys.

    Every cell is double-quoted.  Rows missing a header field get an
    empty cell; fields not in the header are not written.
    """
    if not rows:
        return ""

    header = list(rows[0].keys())
    lines = [",".join(header)]
    for row in rows:
        lines.append(",".join(_csv_cell(row.get(column)) for column in header))
    return "\n".join(lines) + "\n"


def export_json(rows: Sequence[JSONObject]) -> str:
    """Pretty-printed JSON array."""
    return json.dumps(list(rows), indent=2, ensure_ascii=False)
