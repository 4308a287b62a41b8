"""CSV output for report endpoints (``?format=csv``)."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Any

from rest_framework.renderers import BaseRenderer  # type: ignore


def flatten(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """``{"a": {"b": 1}}`` -> ``{"a.b": 1}``."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten(value, f"{name}."))
        else:
            flat[name] = "" if value is None else value
    return flat


class CSVRenderer(BaseRenderer):
    """A list renders as a table, a mapping as ``key,value`` lines.

    The BOM keeps spreadsheet applications from guessing the encoding.
    """

    media_type = "text/csv"
    format = "csv"
    charset = "utf-8"

    def render(self, data, accepted_media_type=None, renderer_context=None):  # type: ignore
        if data is None:
            return b""

        buffer = StringIO()
        writer = csv.writer(buffer)
        if isinstance(data, dict):
            writer.writerow(["field", "value"])
            for key, value in flatten(data).items():
                writer.writerow([key, value])
        else:
            rows = [flatten(row) for row in data]
            header: list[str] = []
            for row in rows:
                header.extend(key for key in row if key not in header)
            writer.writerow(header)
            for row in rows:
                writer.writerow([row.get(key, "") for key in header])
        return buffer.getvalue().encode("utf-8-sig")
