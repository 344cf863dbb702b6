"""Shared pytest fixtures for config-sync tests."""

import pytest

from config_sync.storage import FileStorage, MemoryStorage

_ENV_VARS = (
    "CONFIG_SYNC_ACTIVE_DIR",
    "CONFIG_SYNC_SYNC_DIR",
    "CONFIG_SYNC_CONFIG",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, tmp_path_factory, monkeypatch):
    """Keep the developer's env vars and settings files out of every test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path_factory.mktemp("home")))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def active_store(tmp_path):
    """File store standing in for the live configuration."""
    return FileStorage(tmp_path / "active")


@pytest.fixture
def sync_store(tmp_path):
    """File store standing in for the sync directory."""
    return FileStorage(tmp_path / "sync")


@pytest.fixture
def memory_store():
    return MemoryStorage()


@pytest.fixture
def seed():
    """Factory fixture writing ``{name: value}`` (optionally into a collection)."""

    def _seed(storage, documents, collection=""):
        target = storage.create_collection(collection)
        for name, value in documents.items():
            target.write(name, value)
        return storage

    return _seed


@pytest.fixture
def server_context(tmp_path):
    """ServerContext over file stores with one labelled extra directory."""
    from config_sync.config import Settings
    from config_sync.config_schema import UnifiedConfig
    from config_sync.mcp.lifespan import ServerContext

    settings = Settings(
        active_dir=str(tmp_path / "active"),
        sync_dir=str(tmp_path / "sync"),
        directories={"staging": str(tmp_path / "staging")},
    )
    return ServerContext(
        settings=settings,
        unified=UnifiedConfig(),
        active=FileStorage(tmp_path / "active"),
    )
