"""
Output formatters for CLI display.

Supports human-readable, JSON, and markdown output modes for database
rows. NULL columns are always shown as ``NULL``.
"""

import json
import sqlite3
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional


class OutputFormat(str, Enum):
    HUMAN = "human"
    JSON = "json"
    MARKDOWN = "markdown"


def _to_dict(row: Any) -> Dict[str, Any]:
    if isinstance(row, sqlite3.Row):
        return {k: row[k] for k in row.keys()}
    if isinstance(row, Mapping):
        return dict(row)
    return {"value": row}


def _cell(value: Any) -> str:
    return "NULL" if value is None else str(value)


def format_record(row: Any) -> str:
    """One ``column : value`` line per field."""
    return "\n".join(f"{k} : {_cell(v)}" for k, v in _to_dict(row).items())


def format_rows(
    rows: Iterable[Any],
    fmt: OutputFormat = OutputFormat.HUMAN,
    title: Optional[str] = None,
) -> str:
    """Format a sequence of rows for display."""
    data = [_to_dict(r) for r in rows]
    if fmt == OutputFormat.JSON:
        return json.dumps(data, indent=2, default=str)
    elif fmt == OutputFormat.MARKDOWN:
        return _format_markdown(data, title)
    else:
        return _format_human(data, title)


def _format_human(data: List[Dict[str, Any]], title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines.extend([title, "=" * len(title), ""])

    if not data:
        lines.append("(none)")
    for record in data:
        lines.append(format_record(record))
        lines.append("")

    return "\n".join(lines).rstrip("\n")


def _format_markdown(data: List[Dict[str, Any]], title: Optional[str] = None) -> str:
    lines = []
    if title:
        lines.extend([f"# {title}", ""])

    if not data:
        lines.append("_No rows._")
        return "\n".join(lines)

    headers = list(data[0].keys())
    lines.append("| " + " | ".join(headers) + " |")
    lines.append("|" + "|".join("---" for _ in headers) + "|")
    for record in data:
        lines.append("| " + " | ".join(_cell(record.get(h)) for h in headers) + " |")

    return "\n".join(lines)
