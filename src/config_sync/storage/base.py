"""Abstract contract for collection-aware document stores.

A store holds named documents partitioned into collections.  The default
collection has the empty name; every other collection is reached through
``create_collection()``, which returns a view of the same underlying
storage scoped to that collection.
"""

from __future__ import annotations

import abc
from collections.abc import Iterable
from typing import Any

from .values import MISSING, is_missing

DEFAULT_COLLECTION = ""


class StorageInterface(abc.ABC):
    """Operations every store implements.

    Implementations must return absence as ``MISSING`` / ``False`` rather
    than raising, and raise ``StorageError`` only for real I/O failures.
    """

    @property
    @abc.abstractmethod
    def collection_name(self) -> str:
        """Name of the collection this view is scoped to."""

    @abc.abstractmethod
    def list_all(self, prefix: str = "") -> list[str]:
        """Return sorted document names in this collection starting with *prefix*."""

    @abc.abstractmethod
    def read(self, name: str) -> Any:
        """Return the document stored under *name*, or ``MISSING``."""

    @abc.abstractmethod
    def write(self, name: str, data: Any) -> None:
        """Create or overwrite the document *name*."""

    @abc.abstractmethod
    def delete(self, name: str) -> bool:
        """Delete *name*; return ``False`` when it did not exist."""

    @abc.abstractmethod
    def create_collection(self, collection: str) -> StorageInterface:
        """Return a view of this store scoped to *collection*."""

    @abc.abstractmethod
    def get_all_collection_names(self) -> list[str]:
        """Return sorted names of non-empty, non-default collections."""

    # ------------------------------------------------------------------
    # Derived helpers
    # ------------------------------------------------------------------

    def exists(self, name: str) -> bool:
        return not is_missing(self.read(name))

    def read_multiple(self, names: Iterable[str]) -> dict[str, Any]:
        """Read several documents, omitting the ones that are absent."""
        found: dict[str, Any] = {}
        for name in names:
            data = self.read(name)
            if data is not MISSING:
                found[name] = data
        return found

    def rename(self, name: str, new_name: str) -> bool:
        """Move *name* to *new_name*, overwriting any existing target."""
        data = self.read(name)
        if is_missing(data):
            return False
        self.write(new_name, data)
        self.delete(name)
        return True

    def delete_all(self, prefix: str = "") -> bool:
        """Delete every document in this collection starting with *prefix*."""
        names = self.list_all(prefix)
        for name in names:
            self.delete(name)
        return bool(names)

    def default_view(self) -> StorageInterface:
        """Return this store scoped to the default collection."""
        if self.collection_name == DEFAULT_COLLECTION:
            return self
        return self.create_collection(DEFAULT_COLLECTION)
