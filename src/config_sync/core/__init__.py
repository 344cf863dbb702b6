"""Helpers shared between the CLI and the MCP server."""

from .async_utils import run_sync

__all__ = ["run_sync"]
