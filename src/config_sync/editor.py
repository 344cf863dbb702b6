"""Read and mutate single configuration objects.

``Config`` wraps one named document of a store and applies dotted-path
edits in memory until ``save()``.  The module-level functions implement
the operator-facing get/set/delete/edit workflows on top of it; each
takes the store it works on and a ``Confirm`` collaborator instead of
prompting itself.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .accessor import (
    DELETE_DOCUMENT,
    clear_value,
    get_value,
    has_value,
    set_value,
)
from .confirm import Confirm, always_confirm
from .exceptions import ConfigNotFoundError, KeyNotFoundError
from .storage.base import StorageInterface
from .storage.codec import parse_value
from .storage.file import FileStorage
from .storage.values import is_missing
from .sync.copier import import_config
from .sync.models import ChangeList

logger = logging.getLogger(__name__)


class Config:
    """Editable view of the configuration object *name* in *storage*.

    The object is read once on construction.  A name with no stored
    document starts as an empty mapping and reports ``is_new``.
    """

    def __init__(self, name: str, storage: StorageInterface) -> None:
        self.name = name
        self.storage = storage
        data = storage.read(name)
        self._is_new = is_missing(data)
        self._data: Any = {} if self._is_new else data

    @property
    def is_new(self) -> bool:
        return self._is_new

    @property
    def data(self) -> Any:
        return self._data

    def get(self, key: str = "") -> Any:
        return get_value(self._data, key)

    def set(self, key: str, value: Any) -> Config:
        self._data = set_value(self._data, key, value)
        return self

    def clear(self, key: str) -> Config:
        result = clear_value(self._data, key)
        self._data = {} if result is DELETE_DOCUMENT else result
        return self

    def save(self) -> None:
        """Write the object back; an emptied existing object is deleted."""
        if self._data == {} and not self._is_new:
            logger.info("Last key cleared, deleting %s", self.name)
            self.storage.delete(self.name)
            self._is_new = True
            return
        self.storage.write(self.name, self._data)
        self._is_new = False
        logger.info("Saved %s", self.name)

    def delete(self) -> bool:
        deleted = self.storage.delete(self.name)
        self._data = {}
        self._is_new = True
        return deleted


# ---------------------------------------------------------------------------
# Operator workflows
# ---------------------------------------------------------------------------


def get_config(storage: StorageInterface, name: str, key: str = "") -> Any:
    """Return a whole object, or ``{"name:key": value}`` for one key.

    A missing key yields ``None`` as its value, the way a display of an
    unset key does.

    Raises:
        ConfigNotFoundError: If the object does not exist.
    """
    config = Config(name, storage)
    if config.is_new:
        raise ConfigNotFoundError(name)
    if not key:
        return config.data
    value = config.get(key)
    return {f"{name}:{key}": None if is_missing(value) else value}


def set_config(
    storage: StorageInterface,
    name: str,
    key: str,
    value: Any,
    confirm: Confirm = always_confirm,
    value_format: str = "string",
) -> bool:
    """Set *key* of object *name* to *value* after confirmation.

    Args:
        storage: Store holding the object.
        name: Object name; created when absent.
        key: Dotted key; ``""`` addresses the object root.
        value: Raw value.  Parsed as YAML when *value_format* is ``yaml``.
        confirm: Decision collaborator.
        value_format: ``string`` or ``yaml``.

    Returns:
        ``True`` if the object was saved, ``False`` if the operator declined.

    Raises:
        ValueError: If no value is given or the format is unknown.
    """
    if value is None:
        raise ValueError("No config value specified.")
    if value_format == "yaml":
        value = parse_value(value)
    elif value_format != "string":
        raise ValueError(
            f"Unknown value format '{value_format}'. Use 'string' or 'yaml'."
        )

    config = Config(name, storage)

    # Declining the multi-key question falls through to storing the
    # mapping as a single value under *key*.
    if (
        isinstance(value, dict)
        and value
        and confirm(
            f"Do you want to update or set multiple keys on {name} config?"
        )
    ):
        for sub_key, sub_value in value.items():
            config.set(f"{key}.{sub_key}" if key else sub_key, sub_value)
        config.save()
        return True

    if config.is_new:
        question = (
            f"{name} config does not exist. "
            "Do you want to create a new config object?"
        )
    elif not has_value(config.data, key):
        question = (
            f"{key} key does not exist in {name} config. "
            "Do you want to create a new config key?"
        )
    else:
        question = f"Do you want to update {key} key in {name} config?"

    if not confirm(question):
        logger.info("Declined: %s", question)
        return False
    config.set(key, value).save()
    return True


def delete_config(
    storage: StorageInterface,
    name: str,
    key: str | None = None,
    confirm: Confirm = always_confirm,
) -> bool:
    """Delete one key of an object, or the whole object.

    Returns:
        ``True`` if something was deleted, ``False`` if declined.

    Raises:
        ConfigNotFoundError: If the object does not exist.
        KeyNotFoundError: If *key* is given and not present.
    """
    config = Config(name, storage)
    if config.is_new:
        raise ConfigNotFoundError(name)
    if key:
        if not has_value(config.data, key):
            raise KeyNotFoundError(key, name)
        if not confirm(f"Do you want to delete {key} key from {name} config?"):
            return False
        config.clear(key).save()
        return True
    if not confirm(f"Do you want to delete the {name} config object?"):
        return False
    return config.delete()


def edit_config(
    active: StorageInterface,
    name: str,
    launch_editor: Callable[[Path], None],
    confirm: Confirm = always_confirm,
    work_dir: str | Path | None = None,
) -> ChangeList:
    """Round-trip one object through a text editor and import the result.

    The object is written to a temporary file store, *launch_editor* is
    called with the file path and blocks until editing ends, then the
    temporary store is imported into *active* as a partial import.

    Returns:
        The changes that were applied.

    Raises:
        ConfigNotFoundError: If the object does not exist in *active*.
    """
    data = active.read(name)
    if is_missing(data):
        raise ConfigNotFoundError(name)

    with tempfile.TemporaryDirectory(
        prefix="config-edit-", dir=work_dir
    ) as tmp:
        temp_storage = FileStorage(tmp)
        temp_storage.write(name, data)
        path = temp_storage.get_file_path(name)
        logger.debug("Opening editor on %s", path)
        launch_editor(path)
        return import_config(
            temp_storage, active, partial=True, confirm=confirm
        )
