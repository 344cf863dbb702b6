"""MCP server for configuration sync using stdio transport.

Exposes the get/set/delete/status/diff/export/import operations as MCP
tools so an agent can inspect and synchronize configuration stores.

Transport: stdio
Protocol: JSON-RPC 2.0 over MCP
"""

import argparse
import asyncio
import logging
import sys

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from .. import __version__
from ..core.async_utils import run_sync
from ..logger import setup_logging
from ..version import check_version_consistency
from .lifespan import ServerContext, server_lifespan
from .tools import (
    ALL_SPECS,
    ToolRegistry,
    build_error_response,
    load_permissions_file,
)
from .tools.registry import ToolSpec

logger = logging.getLogger(__name__)

server = Server("config-sync-mcp")

# Initialized in main() from the lifespan context
_context: ServerContext | None = None
_registry: ToolRegistry | None = None


# ---------------------------------------------------------------------------
# Ping tool (always available, no permission required)
# ---------------------------------------------------------------------------


async def _handle_ping(
    ctx: ServerContext, args: dict
) -> types.CallToolResult:
    """Report the server version and active store contents."""
    names = await run_sync(ctx.active.list_all)
    return types.CallToolResult(
        content=[
            types.TextContent(
                type="text",
                text=(
                    f"config-sync MCP server {__version__} ready. "
                    f"Active store {ctx.active.directory} holds "
                    f"{len(names)} objects."
                ),
            )
        ]
    )


PING_SPEC = ToolSpec(
    tool=types.Tool(
        name="ping",
        description="Test server readiness and report the active store location",
        inputSchema={
            "type": "object",
            "properties": {},
            "required": [],
        },
    ),
    permissions=frozenset(),
    handler=_handle_ping,
)


# ---------------------------------------------------------------------------
# Global accessors
# ---------------------------------------------------------------------------


def get_context() -> ServerContext:
    """Get the global ServerContext.

    Raises:
        RuntimeError: If the server lifespan has not started.
    """
    if _context is None:
        raise RuntimeError(
            "ServerContext not initialized. Server lifespan not started."
        )
    return _context


def set_context(context: ServerContext | None) -> None:
    global _context
    _context = context


def get_registry() -> ToolRegistry:
    """Get the global ToolRegistry.

    Raises:
        RuntimeError: If registry is not initialized
    """
    if _registry is None:
        raise RuntimeError("ToolRegistry not initialized.")
    return _registry


def set_registry(registry: ToolRegistry | None) -> None:
    global _registry
    _registry = registry


# ---------------------------------------------------------------------------
# MCP protocol handlers
# ---------------------------------------------------------------------------


@server.list_tools()
async def handle_list_tools() -> list[types.Tool]:
    """List the registered (and permitted) tools."""
    return get_registry().list_tools()


@server.call_tool()
async def handle_call_tool(
    name: str, arguments: dict | None
) -> types.CallToolResult:
    """Handle tool execution via ToolRegistry dispatch."""
    context = get_context()
    try:
        return await get_registry().call_tool(name, arguments, context)
    except ValueError as e:
        return build_error_response(
            "unknown_tool",
            str(e),
            "Use list_tools to see available tools.",
        )


# ---------------------------------------------------------------------------
# Server lifecycle
# ---------------------------------------------------------------------------


def build_registry(permissions_file: str | None = None) -> ToolRegistry:
    """Build the registry, filtered by *permissions_file* when given."""
    allowed_permissions = None
    if permissions_file:
        allowed_permissions = load_permissions_file(permissions_file)
        logger.info(
            "Loaded %d permissions from %s",
            len(allowed_permissions),
            permissions_file,
        )
    all_specs = [PING_SPEC] + ALL_SPECS
    registry = ToolRegistry(all_specs, allowed_permissions)
    logger.info(
        "Registered %d tools (of %d total)",
        registry.tool_count(),
        len(all_specs),
    )
    return registry


async def main(config_overrides: dict | None = None):
    """Run the MCP server with stdio transport.

    Args:
        config_overrides: Optional dict with values from the command line
            (active_dir, sync_dir, log_file, permissions_file).
    """
    overrides = config_overrides or {}

    # Must run before stdio_server so nothing reaches stdout.
    setup_logging(mode="mcp", log_file=overrides.get("log_file"))

    is_consistent, message = check_version_consistency()
    if not is_consistent:
        logger.warning(message)
        sys.stderr.write(f"Warning: {message}\n")
    else:
        logger.info(message)

    permissions_file = overrides.get("permissions_file")
    registry = build_registry(permissions_file)
    if permissions_file:
        print(
            f"Permissions file: {permissions_file} "
            f"({registry.tool_count()} of {len(ALL_SPECS) + 1} tools enabled)",
            file=sys.stderr,
        )
    set_registry(registry)

    async with server_lifespan(config_overrides=overrides) as ctx:
        set_context(ctx)
        try:
            async with mcp.server.stdio.stdio_server() as (
                read_stream,
                write_stream,
            ):
                init_options = InitializationOptions(
                    server_name="config-sync-mcp",
                    server_version=__version__,
                    capabilities=server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                )
                await server.run(read_stream, write_stream, init_options)
        finally:
            set_context(None)
            set_registry(None)


def run() -> None:
    """Entry point that handles errors gracefully and parses CLI arguments."""
    parser = argparse.ArgumentParser(
        description="config-sync MCP server - configuration tools over the Model Context Protocol",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run with settings from .env / .config_sync/config.yml
  config-sync-mcp

  # Point at explicit stores
  config-sync-mcp --active-dir /srv/site/config/active --sync-dir /srv/site/config/sync

  # Read-only server (permissions file containing CONFIG_VIEW)
  config-sync-mcp --permissions-file /etc/config-sync/read-only.permissions

Note: This server uses stdio transport for JSON-RPC communication with MCP clients.
All user-facing messages are written to stderr.
        """,
    )
    parser.add_argument(
        "--active-dir",
        help="Active store directory (overrides CONFIG_SYNC_ACTIVE_DIR and settings files)",
    )
    parser.add_argument(
        "--sync-dir",
        help="Default sync directory (overrides CONFIG_SYNC_SYNC_DIR and settings files)",
    )
    parser.add_argument(
        "--log-file",
        default="/tmp/config-sync-mcp.log",
        help="Log file path (default: /tmp/config-sync-mcp.log)",
    )
    parser.add_argument(
        "--permissions-file",
        help="Path to permissions file restricting available tools. "
        "One of CONFIG_VIEW, CONFIG_EDIT, CONFIG_SYNC per line, # for comments.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"config-sync-mcp version {__version__}",
    )

    args = parser.parse_args()

    config_overrides = {
        key: value
        for key, value in {
            "active_dir": args.active_dir,
            "sync_dir": args.sync_dir,
            "log_file": args.log_file,
            "permissions_file": args.permissions_file,
        }.items()
        if value
    }

    try:
        asyncio.run(main(config_overrides=config_overrides))
    except RuntimeError:
        # Already reported on stderr by the lifespan manager
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
