"""Whole-store transfer tools.

- ``config_export`` -- write the active store into a sync directory.
- ``config_import`` -- apply a sync directory to the active store.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import mcp.types as types

from ...confirm import always_confirm
from ...core.async_utils import run_sync
from ...sync import changelist_to_json, export_config, import_config
from ...sync.reporter import format_changes_table
from .registry import CONFIG_SYNC, ToolSpec

if TYPE_CHECKING:
    from ..lifespan import ServerContext

logger = logging.getLogger(__name__)

TRANSFER_TOOLS = [
    types.Tool(
        name="config_export",
        description="Export the active store to a sync directory. By default sync documents the active store lacks are removed so the directory mirrors it.",
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "label": {"type": "string", "description": "Sync directory label"},
                "destination": {
                    "type": "string",
                    "description": "Explicit destination directory; wins over label",
                },
                "clean": {
                    "type": "boolean",
                    "default": True,
                    "description": "Remove stale documents from the destination",
                },
            },
            "required": [],
        },
    ),
    types.Tool(
        name="config_import",
        description="Import a sync directory into the active store. Use dry_run to preview; partial skips deletions.",
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=True,
            openWorldHint=False,
        ),
        inputSchema={
            "type": "object",
            "properties": {
                "label": {"type": "string", "description": "Sync directory label"},
                "source": {
                    "type": "string",
                    "description": "Explicit source directory; wins over label",
                },
                "partial": {
                    "type": "boolean",
                    "default": False,
                    "description": "Only create and update, never delete",
                },
                "dry_run": {
                    "type": "boolean",
                    "default": False,
                    "description": "Preview changes without applying them",
                },
            },
            "required": [],
        },
    ),
]


async def _handle_config_export(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    target = ctx.sync_storage(args.get("label"), args.get("destination"))
    changes = await run_sync(
        export_config, ctx.active, target, args.get("clean", True)
    )
    text = format_changes_table(changes)
    text += f"\n\nConfiguration exported to {target.directory}."
    structured = changelist_to_json(changes)
    structured["destination"] = str(target.directory)
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=structured,
    )


async def _handle_config_import(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    source = ctx.sync_storage(args.get("label"), args.get("source"))
    dry_run = bool(args.get("dry_run", False))
    changes = await run_sync(
        import_config,
        source,
        ctx.active,
        bool(args.get("partial", False)),
        always_confirm,
        dry_run,
    )
    text = format_changes_table(changes)
    if dry_run:
        text = "DRY RUN -- No changes will be made\n\n" + text
    structured = changelist_to_json(changes)
    structured["dry_run"] = dry_run
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        structuredContent=structured,
    )


_HANDLERS = {
    "config_export": _handle_config_export,
    "config_import": _handle_config_import,
}

TRANSFER_SPECS = [
    ToolSpec(
        tool=tool,
        permissions=frozenset({CONFIG_SYNC}),
        handler=_HANDLERS[tool.name],
    )
    for tool in TRANSFER_TOOLS
]
