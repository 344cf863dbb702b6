"""Unified configuration schema for config_sync.

Defines Pydantic models for the unified config structure with dedicated
sections for store locations, status defaults and logging.

Usage:
    from config_sync.config_schema import UnifiedConfig, build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
    unified.storage.directories["staging"]
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, field_validator

from .sync.models import DEFAULT_STATUS_STATES

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class StorageConfig(BaseModel):
    """Store locations.

    Attributes:
        active_dir: Directory of the active (live) store.
        sync_dir: Default sync directory, used when no label or explicit
            directory is given.
        directories: Extra sync directories keyed by label.
    """

    active_dir: str = Field(
        default="config/active", description="Active store directory"
    )
    sync_dir: str = Field(
        default="config/sync", description="Default sync directory"
    )
    directories: dict[str, str] = Field(
        default_factory=dict,
        description="Sync directories keyed by label",
    )

    model_config = {"frozen": True}

    @field_validator("directories")
    @classmethod
    def _labels_not_blank(cls, value: dict[str, str]) -> dict[str, str]:
        for label, path in value.items():
            if not label.strip():
                raise ValueError("Directory labels cannot be blank")
            if not str(path).strip():
                raise ValueError(f"Directory for label '{label}' is empty")
        return value


class StatusConfig(BaseModel):
    """Defaults for ``config-sync status``."""

    state: str = Field(
        default=DEFAULT_STATUS_STATES,
        description="Comma-separated states to show, or 'Any'",
    )
    prefix: str = Field(default="", description="Name prefix filter")
    label: str = Field(default="", description="Sync directory label")

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has sensible defaults, so ``UnifiedConfig()``
    (zero-config) is always valid.
    """

    storage: StorageConfig = Field(default_factory=StorageConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Handles missing sections gracefully; anything absent gets defaults.
    Unknown top-level sections are ignored with a warning.
    """
    if not raw_data:
        return UnifiedConfig()

    known = set(UnifiedConfig.model_fields)
    unknown = sorted(set(raw_data) - known)
    if unknown:
        logger.warning("Ignoring unknown config sections: %s", unknown)
    return UnifiedConfig(**{k: v for k, v in raw_data.items() if k in known})
