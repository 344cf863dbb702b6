"""In-memory document store.

All collection views created from one ``MemoryStorage`` share the same
backing dict, mirroring how views of a file store share one directory.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from ..exceptions import InvalidNameError
from .base import DEFAULT_COLLECTION, StorageInterface
from .values import MISSING, validate_value

logger = logging.getLogger(__name__)


class MemoryStorage(StorageInterface):
    """Store documents in nested dicts keyed by collection then name.

    Args:
        collection: Collection this view is scoped to.
        initial: Optional ``{name: value}`` seed for the default collection.
    """

    def __init__(
        self,
        collection: str = DEFAULT_COLLECTION,
        initial: dict[str, Any] | None = None,
        *,
        _data: dict[str, dict[str, Any]] | None = None,
    ) -> None:
        self._collection = collection
        self._data: dict[str, dict[str, Any]] = (
            _data if _data is not None else {}
        )
        for name, value in (initial or {}).items():
            self.create_collection(DEFAULT_COLLECTION).write(name, value)

    @property
    def collection_name(self) -> str:
        return self._collection

    def list_all(self, prefix: str = "") -> list[str]:
        docs = self._data.get(self._collection, {})
        return sorted(n for n in docs if n.startswith(prefix))

    def read(self, name: str) -> Any:
        docs = self._data.get(self._collection, {})
        if name not in docs:
            return MISSING
        return copy.deepcopy(docs[name])

    def write(self, name: str, data: Any) -> None:
        if not name:
            raise InvalidNameError("Document name cannot be empty")
        validate_value(data)
        self._data.setdefault(self._collection, {})[name] = copy.deepcopy(
            data
        )
        logger.debug("memory write %s [%s]", name, self._collection)

    def delete(self, name: str) -> bool:
        docs = self._data.get(self._collection, {})
        if name not in docs:
            return False
        del docs[name]
        return True

    def create_collection(self, collection: str) -> MemoryStorage:
        return MemoryStorage(collection, _data=self._data)

    def get_all_collection_names(self) -> list[str]:
        return sorted(
            c
            for c, docs in self._data.items()
            if c != DEFAULT_COLLECTION and docs
        )
