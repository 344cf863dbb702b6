"""Lifespan management for MCP server startup and shutdown."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from ..config import (
    Settings,
    get_active_storage,
    get_storage,
    load_settings,
    resolve_directory,
)
from ..config_loader import discover_config_files, load_hierarchical_config
from ..config_schema import UnifiedConfig, build_config
from ..storage.file import FileStorage

logger = logging.getLogger(__name__)


@dataclass
class ServerContext:
    """Resolved settings and the active store, shared by all tool calls."""

    settings: Settings
    unified: UnifiedConfig
    active: FileStorage

    def sync_storage(
        self, label: str | None = None, directory: str | Path | None = None
    ) -> FileStorage:
        """Resolve a sync store: explicit directory > label > default."""
        return get_storage(resolve_directory(self.settings, label, directory))


def _stderr_print(msg: str) -> None:
    """Print message to stderr for user feedback (safe in MCP mode)."""
    print(msg, file=sys.stderr, flush=True)


@asynccontextmanager
async def server_lifespan(
    config_overrides: dict[str, Any] | None = None,
) -> AsyncIterator[ServerContext]:
    """
    Manage server startup and shutdown lifecycle.

    On startup:
    - Load .env file (so values are available for env var lookups and YAML interpolation)
    - Load YAML settings if present
    - Merge all sources via load_settings(): CLI > env vars > .env > YAML > defaults
    - Build the active store and fail fast if its directory is unusable

    Args:
        config_overrides: Optional dict with values from CLI (active_dir, sync_dir)

    Yields:
        The ServerContext used by every tool call

    Raises:
        RuntimeError: If configuration is invalid or the active directory
            is not a directory.
    """
    logger.info("MCP server starting...")
    _stderr_print("config-sync MCP server starting...")

    try:
        load_dotenv()

        sources = []
        config_files = discover_config_files()
        unified = build_config(load_hierarchical_config())
        if config_files:
            sources.append(f"config file: {config_files[0]}")

        overrides = config_overrides or {}
        settings = load_settings(
            active_dir=overrides.get("active_dir"),
            sync_dir=overrides.get("sync_dir"),
            yaml_fallbacks=unified.storage.model_dump(),
        )
        if overrides:
            sources.append("CLI arguments")
        sources.append("environment variables")
        source_desc = ", ".join(sources)
        logger.info("Configuration loaded from: %s", source_desc)
        _stderr_print(f"  Configuration loaded from: {source_desc}")
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: Configuration error: {e}")
        raise RuntimeError(f"Configuration error: {e}") from e

    active = get_active_storage(settings)
    if active.directory.exists() and not active.directory.is_dir():
        msg = f"Active store path {active.directory} is not a directory"
        logger.error(msg)
        _stderr_print(f"ERROR: {msg}")
        raise RuntimeError(msg)

    logger.info("Active store: %s", active.directory)
    _stderr_print(f"  Active store: {active.directory}")
    _stderr_print(f"  Default sync directory: {settings.sync_dir}")
    _stderr_print("Server ready. Waiting for MCP client connection...")

    yield ServerContext(settings=settings, unified=unified, active=active)

    logger.info("MCP server shutting down")
    _stderr_print("config-sync MCP server shutting down.")
