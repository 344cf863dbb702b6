"""Exception hierarchy for config_sync.

Absence is never an exception on the read path (see
``config_sync.storage.values.MISSING``); the classes below cover the
conditions a caller has to handle explicitly.
"""


class ConfigSyncError(Exception):
    """Base class for all config_sync errors."""


class StorageError(ConfigSyncError, OSError):
    """A store could not read, write or delete a document."""


class InvalidNameError(ConfigSyncError, ValueError):
    """A document or collection name is not usable by a store."""


class InvalidValueError(ConfigSyncError, TypeError):
    """A value falls outside the null/bool/number/string/list/mapping grammar."""


class TypeMismatchError(ConfigSyncError, TypeError):
    """A dotted path tried to descend through a non-mapping value."""

    def __init__(self, path: str, segment: str, actual: object) -> None:
        self.path = path
        self.segment = segment
        self.actual_type = type(actual).__name__
        super().__init__(
            f"Cannot descend into '{segment}' of path '{path}': "
            f"value is {self.actual_type}, not a mapping"
        )


class KeyNotFoundError(ConfigSyncError, LookupError):
    """A dotted key does not exist in a configuration object."""

    def __init__(self, key: str, name: str | None = None) -> None:
        self.key = key
        self.name = name
        if name:
            msg = f"Configuration key '{key}' not found in '{name}'"
        else:
            msg = f"Configuration key '{key}' not found"
        super().__init__(msg)

    def __str__(self) -> str:
        return self.args[0]


class ConfigNotFoundError(ConfigSyncError, LookupError):
    """A configuration object does not exist in the store."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Config {name} does not exist")

    def __str__(self) -> str:
        return self.args[0]


class ImportAborted(ConfigSyncError):
    """The operator declined to apply an import."""
