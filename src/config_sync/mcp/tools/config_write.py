"""Configuration write tools.

- ``config_set`` -- set a dotted key, creating the object if needed.
- ``config_delete`` -- clear a key, or delete a whole object.

The agent's call is the decision, so both run with ``always_confirm``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import mcp.types as types

from ...confirm import always_confirm
from ...core.async_utils import run_sync
from ...editor import delete_config, set_config
from .registry import CONFIG_EDIT, ToolSpec

if TYPE_CHECKING:
    from ..lifespan import ServerContext

CONFIG_WRITE_TOOLS = [
    types.Tool(
        name="config_set",
        description="Set a configuration key directly (does not run an import). Creates the object or key when missing. With format='yaml' the value is parsed as YAML; a mapping sets several keys at once.",
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
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
                    "description": "Dotted key, e.g. 'page.front' (required)",
                },
                "value": {
                    "type": "string",
                    "description": "Value to assign (required)",
                },
                "format": {
                    "type": "string",
                    "enum": ["string", "yaml"],
                    "default": "string",
                },
            },
            "required": ["name", "key", "value"],
        },
    ),
    types.Tool(
        name="config_delete",
        description="Delete a configuration key, or the whole object when no key is given. Clearing the last key deletes the object.",
        annotations=types.ToolAnnotations(
            readOnlyHint=False,
            destructiveHint=True,
            idempotentHint=False,
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
                    "description": "Dotted key to clear (optional)",
                },
            },
            "required": ["name"],
        },
    ),
]


def _text(message: str, **structured: Any) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=message)],
        structuredContent=structured,
    )


async def _handle_config_set(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    name = args.get("name")
    key = args.get("key")
    if not name or key is None:
        raise ValueError("name and key are required")

    await run_sync(
        set_config,
        ctx.active,
        name,
        key,
        args.get("value"),
        always_confirm,
        args.get("format", "string"),
    )
    return _text(f"Set {name}:{key}", name=name, key=key, saved=True)


async def _handle_config_delete(
    ctx: ServerContext, args: dict[str, Any]
) -> types.CallToolResult:
    name = args.get("name")
    if not name:
        raise ValueError("name is required")
    key = args.get("key") or None

    await run_sync(delete_config, ctx.active, name, key, always_confirm)
    target = f"{name}:{key}" if key else name
    return _text(f"Deleted {target}", name=name, key=key, deleted=True)


_HANDLERS = {
    "config_set": _handle_config_set,
    "config_delete": _handle_config_delete,
}

CONFIG_WRITE_SPECS = [
    ToolSpec(
        tool=tool,
        permissions=frozenset({CONFIG_EDIT}),
        handler=_HANDLERS[tool.name],
    )
    for tool in CONFIG_WRITE_TOOLS
]
