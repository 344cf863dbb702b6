"""Report formatting for comparisons and status.

Provides human-readable and machine-readable output:

- ``format_changes_table`` -- Collection / Config / Operation table.
- ``format_status_table`` -- Name / State table.
- ``format_status_list`` -- bare names, one per line.
- ``changelist_to_json`` / ``status_to_json`` -- structured dicts for
  JSON output and MCP ``structuredContent``.
- ``format_value`` -- render a configuration value as YAML, JSON or text.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models import ChangeList, StatusRow

from ..storage.codec import encode
from .models import ChangeOperation, ConfigState

_RED = "\033[31;40m\033[1m{}\033[0m"
_YELLOW = "\033[1;33;40m\033[1m{}\033[0m"
_GREEN = "\033[1;32;40m\033[1m{}\033[0m"

_OPERATION_COLORS = {
    ChangeOperation.DELETE: _RED,
    ChangeOperation.UPDATE: _YELLOW,
    ChangeOperation.CREATE: _GREEN,
}

_STATE_COLORS = {
    ConfigState.ONLY_IN_DB: _GREEN,
    ConfigState.ONLY_IN_SYNC_DIR: _YELLOW,
    ConfigState.DIFFERENT: _RED,
}


# ------------------------------------------------------------------
# Tables
# ------------------------------------------------------------------


def _render_table(
    header: list[str], rows: list[list[str]], colored: list[list[str]]
) -> str:
    """Align plain cells into columns, then swap in the coloured text.

    Widths come from the plain text so escape codes never skew alignment.
    """
    widths = [len(h) for h in header]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def _line(plain: list[str], shown: list[str]) -> str:
        parts = [
            s + " " * (widths[i] - len(p))
            for i, (p, s) in enumerate(zip(plain, shown))
        ]
        return "  ".join(parts).rstrip()

    lines = [_line(header, header)]
    lines.append("  ".join("-" * w for w in widths))
    for plain, shown in zip(rows, colored):
        lines.append(_line(plain, shown))
    return "\n".join(lines)


def format_changes_table(
    changelist: ChangeList, use_color: bool = False
) -> str:
    """Format a changelist as a Collection / Config / Operation table.

    Returns a one-line notice instead of an empty table when nothing
    changed.
    """
    if not changelist.has_changes():
        return "There are no changes."

    rows: list[list[str]] = []
    colored: list[list[str]] = []
    for collection, op, name in changelist.iter_changes():
        rows.append([collection, name, op.value])
        shown = _OPERATION_COLORS[op].format(op.value) if use_color else op.value
        colored.append([collection, name, shown])
    return _render_table(["Collection", "Config", "Operation"], rows, colored)


def format_status_table(rows: list[StatusRow], use_color: bool = False) -> str:
    """Format status rows as a Name / State table."""
    if not rows:
        return "No differences between DB and sync directory."

    plain = [[r.name, r.state.value] for r in rows]
    colored: list[list[str]] = []
    for r in rows:
        state = r.state.value
        if use_color and r.state in _STATE_COLORS:
            state = _STATE_COLORS[r.state].format(state)
        colored.append([r.name, state])
    return _render_table(["Name", "State"], plain, colored)


def format_status_list(rows: list[StatusRow]) -> str:
    return "\n".join(r.name for r in rows)


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def changelist_to_json(changelist: ChangeList) -> dict:
    """Convert a changelist to a structured dict.

    Only collections with at least one change are included.
    """
    return {
        "has_changes": changelist.has_changes(),
        "collections": {
            name: changes.to_dict()
            for name, changes in changelist.collections.items()
            if changes.has_changes()
        },
    }


def status_to_json(rows: list[StatusRow]) -> dict:
    """Convert status rows to a structured dict with per-state counts."""
    counts = {state.value: 0 for state in ConfigState}
    for r in rows:
        counts[r.state.value] += 1
    return {
        "rows": [{"name": r.name, "state": r.state.value} for r in rows],
        "counts": counts,
    }


# ------------------------------------------------------------------
# Values
# ------------------------------------------------------------------


def format_value(value: Any, fmt: str = "yaml") -> str:
    """Render a configuration value.

    Args:
        value: Value tree.
        fmt: ``yaml``, ``json`` or ``string``.

    Raises:
        ValueError: On an unknown format.
    """
    match fmt:
        case "yaml":
            return encode(value).rstrip("\n")
        case "json":
            return json.dumps(value, indent=2, ensure_ascii=False)
        case "string":
            if isinstance(value, (dict, list)):
                return encode(value).rstrip("\n")
            if value is None:
                return ""
            if isinstance(value, bool):
                return "true" if value else "false"
            return str(value)
        case _:
            raise ValueError(
                f"Unknown format '{fmt}'. Use yaml, json or string."
            )
