"""Compare two stores collection by collection.

For each collection in the union of both stores' collections (always
including the default collection):

1. ``S`` = names in the source view, ``T`` = names in the target view.
2. ``S - T`` is classified **create**: copying the source onto the target
   would create it there.
3. ``T - S`` is classified **delete**: copying the source onto the target
   would remove it there.
4. ``S & T`` whose documents differ structurally is classified **update**.

Name lists are sorted so output does not depend on store iteration order.
Both stores are assumed not to change while a comparison runs.
"""

from __future__ import annotations

import logging

from ..storage.base import DEFAULT_COLLECTION, StorageInterface
from ..storage.values import values_equal
from .models import ChangeList, CollectionChanges

logger = logging.getLogger(__name__)


class StorageComparer:
    """Compute the changelist between a *source* and a *target* store.

    Args:
        source: Store whose contents would be applied.
        target: Store that would receive them.
    """

    def __init__(
        self, source: StorageInterface, target: StorageInterface
    ) -> None:
        self.source = source.default_view()
        self.target = target.default_view()
        self._changelist: ChangeList | None = None

    @property
    def changelist(self) -> ChangeList:
        """The computed changelist (computed on first access)."""
        if self._changelist is None:
            return self.create_changelist()
        return self._changelist

    def get_all_collection_names(self) -> list[str]:
        """Default collection first, then the sorted union of both stores."""
        names = set(self.source.get_all_collection_names())
        names.update(self.target.get_all_collection_names())
        names.discard(DEFAULT_COLLECTION)
        return [DEFAULT_COLLECTION] + sorted(names)

    def create_changelist(self) -> ChangeList:
        """Compare every collection and cache the result."""
        collections: dict[str, CollectionChanges] = {}
        for collection in self.get_all_collection_names():
            collections[collection] = self._compare_collection(collection)
        self._changelist = ChangeList(collections=collections)
        logger.debug(
            "Compared %d collections, changes=%s",
            len(collections),
            self._changelist.has_changes(),
        )
        return self._changelist

    def has_changes(self) -> bool:
        return self.changelist.has_changes()

    def _compare_collection(self, collection: str) -> CollectionChanges:
        source = self.source.create_collection(collection)
        target = self.target.create_collection(collection)
        source_names = set(source.list_all())
        target_names = set(target.list_all())

        updates = [
            name
            for name in sorted(source_names & target_names)
            if not values_equal(source.read(name), target.read(name))
        ]
        return CollectionChanges(
            create=sorted(source_names - target_names),
            update=updates,
            delete=sorted(target_names - source_names),
        )


def compare(source: StorageInterface, target: StorageInterface) -> ChangeList:
    """Return the changes that applying *source* to *target* would make."""
    return StorageComparer(source, target).create_changelist()
