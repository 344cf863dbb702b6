"""Copy configuration between stores.

- ``copy_config`` -- overwrite/merge every document of a source store into
  a destination store.  Destination-only documents are left alone.
- ``export_config`` -- active store -> sync store, optionally removing
  documents the active store no longer has.
- ``import_config`` -- sync store -> active store, applying the changelist.

None of these are transactional.  Writes happen one document at a time;
the first ``StorageError`` propagates to the caller and the remaining
documents are never attempted, leaving the destination partially
synchronized.
"""

from __future__ import annotations

import logging

from ..confirm import Confirm, always_confirm
from ..exceptions import ImportAborted
from ..storage.base import StorageInterface
from ..storage.values import is_missing
from .comparer import compare
from .models import ChangeList, ChangeOperation

logger = logging.getLogger(__name__)


def _copy_collection(
    source: StorageInterface, destination: StorageInterface
) -> int:
    count = 0
    for name in source.list_all():
        destination.write(name, source.read(name))
        count += 1
    return count


def copy_config(
    source: StorageInterface, destination: StorageInterface
) -> int:
    """Copy every document and collection from *source* to *destination*.

    Args:
        source: Store to read from.
        destination: Store to write into (overwrite semantics).

    Returns:
        Number of documents written.

    Raises:
        StorageError: On the first failed read or write.  Documents copied
            before the failure stay written.
    """
    source = source.default_view()
    destination = destination.default_view()

    count = _copy_collection(source, destination)
    for collection in source.get_all_collection_names():
        count += _copy_collection(
            source.create_collection(collection),
            destination.create_collection(collection),
        )
    logger.info("Copied %d configuration objects", count)
    return count


def export_config(
    active: StorageInterface,
    sync: StorageInterface,
    clean: bool = True,
) -> ChangeList:
    """Write the active store's configuration into the sync store.

    Args:
        active: The live store.
        sync: The snapshot store to write into.
        clean: Also delete sync documents the active store lacks, so the
            sync store mirrors the active one.

    Returns:
        The changes the export makes to the sync store
        (``compare(active, sync)``), computed before anything is written.
    """
    changes = compare(active, sync)
    if clean:
        sync_root = sync.default_view()
        for collection, op, name in changes.iter_changes():
            if op is ChangeOperation.DELETE:
                sync_root.create_collection(collection).delete(name)
                logger.info("Removed stale %s [%s]", name, collection)
    copy_config(active, sync)
    return changes


def import_config(
    sync: StorageInterface,
    active: StorageInterface,
    partial: bool = False,
    confirm: Confirm = always_confirm,
    dry_run: bool = False,
) -> ChangeList:
    """Apply the sync store's configuration to the active store.

    Args:
        sync: Store to import from.
        active: Live store to change.
        partial: Only create and update; never delete active documents
            missing from *sync*.
        confirm: Decision collaborator asked once before writing.
        dry_run: Compute and return the changes without applying them.

    Returns:
        The changes that were (or, for *dry_run*, would be) applied.

    Raises:
        ImportAborted: If *confirm* declines.
        StorageError: On the first failed write or delete.
    """
    changes = compare(sync, active)
    if partial:
        changes = changes.without(ChangeOperation.DELETE)
    if not changes.has_changes():
        logger.info("There are no changes to import.")
        return changes
    if dry_run:
        return changes
    if not confirm("Import the listed configuration changes?"):
        raise ImportAborted("Import cancelled.")

    sync_root = sync.default_view()
    active_root = active.default_view()
    for collection, op, name in changes.iter_changes():
        target = active_root.create_collection(collection)
        if op is ChangeOperation.DELETE:
            target.delete(name)
            logger.info("Deleted %s [%s]", name, collection)
            continue
        data = sync_root.create_collection(collection).read(name)
        if is_missing(data):
            # Vanished from the sync store since the comparison.
            logger.warning("Skipping %s [%s]: no longer present", name, collection)
            continue
        target.write(name, data)
        logger.info("Imported %s (%s) [%s]", name, op.value, collection)
    return changes
