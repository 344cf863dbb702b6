"""Runtime settings and sync directory resolution.

Reads store locations from CLI args, environment variables, .env files
and YAML settings fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML settings > Built-in defaults

Environment variables:
    CONFIG_SYNC_ACTIVE_DIR: Directory of the active store.
    CONFIG_SYNC_SYNC_DIR: Default sync directory.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .config_schema import StorageConfig
from .storage.file import FileStorage

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    active_dir: str
    sync_dir: str
    directories: dict[str, str] = field(default_factory=dict)


def load_settings(
    active_dir: str | None = None,
    sync_dir: str | None = None,
    yaml_fallbacks: dict | None = None,
) -> Settings:
    """Load settings with unified precedence.

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        active_dir: Override active store directory.
        sync_dir: Override default sync directory.
        yaml_fallbacks: The ``storage`` section of the YAML settings.

    Returns:
        Settings instance.

    Raises:
        ValueError: If a resolved directory is blank.
    """
    fb = yaml_fallbacks or {}
    defaults = StorageConfig()

    final_active = (
        active_dir
        or os.getenv("CONFIG_SYNC_ACTIVE_DIR")
        or fb.get("active_dir")
        or defaults.active_dir
    )
    final_sync = (
        sync_dir
        or os.getenv("CONFIG_SYNC_SYNC_DIR")
        or fb.get("sync_dir")
        or defaults.sync_dir
    )
    if not final_active.strip():
        raise ValueError("Active store directory cannot be empty.")
    if not final_sync.strip():
        raise ValueError("Sync directory cannot be empty.")

    return Settings(
        active_dir=final_active.strip(),
        sync_dir=final_sync.strip(),
        directories=dict(fb.get("directories") or {}),
    )


def resolve_directory(
    settings: Settings,
    label: str | None = None,
    directory: str | Path | None = None,
) -> Path:
    """Decide which sync directory an operation uses.

    Precedence:
        1. *directory*, created if it does not exist.
        2. The directory mapped to *label* in ``settings.directories``.
        3. ``settings.sync_dir``.

    Raises:
        ValueError: If *label* is not configured.
    """
    if directory:
        path = Path(directory).expanduser()
        path.mkdir(parents=True, exist_ok=True)
        return path
    if label:
        if label not in settings.directories:
            available = sorted(settings.directories)
            raise ValueError(
                f"Unknown config directory label '{label}'. "
                f"Configured labels: {available}"
            )
        return Path(settings.directories[label]).expanduser()
    return Path(settings.sync_dir).expanduser()


def get_storage(directory: str | Path) -> FileStorage:
    """Return the file store for a resolved directory."""
    logger.debug("Using file storage at %s", directory)
    return FileStorage(directory)


def get_active_storage(settings: Settings) -> FileStorage:
    return get_storage(Path(settings.active_dir).expanduser())
