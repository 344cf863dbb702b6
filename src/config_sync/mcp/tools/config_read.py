"""Read-only configuration tools.

- ``config_get`` -- show an object or one key of it.
- ``config_status`` -- name/state table against a sync directory.
- ``config_diff`` -- per-collection changelist against a sync directory.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import mcp.types as types

from ...core.async_utils import run_sync
from ...editor import get_config
from ...sync import (
    StatusOptions,
    changelist_to_json,
    compare,
    config_status,
    format_changes_table,
    format_status_table,
    status_to_json,
)
from ...sync.reporter import format_value
from .registry import CONFIG_VIEW, ToolSpec

if TYPE_CHECKING:
    from ..lifespan import ServerContext

logger = logging.getLogger(__name__)

_LOCATION_PROPERTIES = {
    "label": {
        "type": "string",
        "description": "Sync directory label from settings (optional)",
    },
    "directory": {
        "type": "string",
        "description": "Explicit sync directory path; wins over label (optional)",
    },
}

CONFIG_READ_TOOLS = [
    types.Tool(
        name="config_get",
        description="Display a configuration object, or a single dotted key of it (e.g. name='system.site', key='page.front').",
        annotations=types.ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Configuration object name (required)",
                },
                "key": {
                    "type": "string",
                    "description": "Dotted key inside the object (optional)",
                },
                "format": {
                    "type": "string",
                    "enum": ["yaml", "json"],
                    "default": "yaml",
                },
            },
            "required": ["name"],
        },
    ),
    types.Tool(
        name="config_status",
        description="Show which configuration names differ between the active store and a sync directory. States: Identical, Only in DB, Only in sync dir, Different.",
        annotations=types.ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "state": {
                    "type": "string",
                    "description": "Comma-separated states to include, or 'Any' (default: Only in DB,Only in sync dir,Different)",
                },
                "prefix": {
                    "type": "string",
                    "description": "Only names starting with this prefix",
                },
                "label": _LOCATION_PROPERTIES["label"],
            },
            "required": [],
        },
    ),
    types.Tool(
        name="config_diff",
        description="List per-collection changes an export would make to a sync directory: create (only in the active store), update, delete (only in the sync directory).",
        annotations=types.ToolAnnotations(
            readOnlyHint=True,
            destructiveHint=False,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": dict(_LOCATION_PROPERTIES),
            "required": [],
        },
    ),
]


async def _handle_config_get(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    name = args.get("name")
    if not name:
        raise ValueError("name is required")
    key = args.get("key") or ""
    fmt = args.get("format", "yaml")

    value = await run_sync(get_config, ctx.active, name, key)
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=format_value(value, fmt))],
        structuredContent={"name": name, "key": key, "value": value},
    )


async def _handle_config_status(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    defaults = ctx.unified.status
    options = StatusOptions(
        state=args.get("state") or defaults.state,
        prefix=args.get("prefix") or defaults.prefix,
        label=args.get("label") or defaults.label,
    )
    target = ctx.sync_storage(label=options.label or None)
    rows = await run_sync(config_status, ctx.active, target, options)
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=format_status_table(rows))],
        structuredContent=status_to_json(rows),
    )


async def _handle_config_diff(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    target = ctx.sync_storage(args.get("label"), args.get("directory"))
    changes = await run_sync(compare, ctx.active, target)
    return types.CallToolResult(
        content=[
            types.TextContent(type="text", text=format_changes_table(changes))
        ],
        structuredContent=changelist_to_json(changes),
    )


_HANDLERS = {
    "config_get": _handle_config_get,
    "config_status": _handle_config_status,
    "config_diff": _handle_config_diff,
}

CONFIG_READ_SPECS = [
    ToolSpec(
        tool=tool,
        permissions=frozenset({CONFIG_VIEW}),
        handler=_HANDLERS[tool.name],
    )
    for tool in CONFIG_READ_TOOLS
]
