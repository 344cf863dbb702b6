"""Pydantic models for comparison and status results.

Defines the data contracts shared by the comparer, copier, status
reporter and output formatting:

- ``ChangeOperation``: Enum of change kinds (create/update/delete).
- ``CollectionChanges``: Sorted name lists for one collection.
- ``ChangeList``: Per-collection changes for a whole store pair.
- ``ConfigState``: Display states of the status report.
- ``StatusRow``: One ``{name, state}`` row of the status report.
- ``StatusOptions``: Filters accepted by the status report.

All models are frozen (immutable) for safety.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class ChangeOperation(str, Enum):
    """Kinds of change between a source and a target store."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class CollectionChanges(BaseModel):
    """Changes within a single collection.

    Attributes:
        create: Names only the target has.
        update: Names both stores have with different content.
        delete: Names only the source has.
    """

    create: list[str] = []
    update: list[str] = []
    delete: list[str] = []

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_disjoint(self) -> CollectionChanges:
        seen: set[str] = set()
        for op in ChangeOperation:
            names = getattr(self, op.value)
            if list(names) != sorted(names):
                raise ValueError(f"{op.value} names must be sorted")
            overlap = seen.intersection(names)
            if overlap:
                raise ValueError(
                    f"Names listed under more than one operation: "
                    f"{sorted(overlap)}"
                )
            seen.update(names)
        return self

    def names(self, operation: ChangeOperation) -> list[str]:
        return list(getattr(self, ChangeOperation(operation).value))

    def has_changes(self) -> bool:
        return bool(self.create or self.update or self.delete)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "create": list(self.create),
            "update": list(self.update),
            "delete": list(self.delete),
        }


class ChangeList(BaseModel):
    """Per-collection changes between two stores.

    Attributes:
        collections: Collection name -> changes.  The default collection is
            keyed by the empty string.
    """

    collections: dict[str, CollectionChanges] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def has_changes(self) -> bool:
        """True if any collection has at least one change."""
        return any(c.has_changes() for c in self.collections.values())

    def get_changelist(
        self,
        operation: ChangeOperation | str | None = None,
        collection: str = "",
    ) -> dict[str, list[str]] | list[str]:
        """Return one collection's changes.

        Args:
            operation: If given, return only that operation's names.
            collection: Collection name (default collection by default).

        Returns:
            ``{operation: [names]}`` or ``[names]`` when *operation* is set.
        """
        changes = self.collections.get(collection, CollectionChanges())
        if operation is None:
            return changes.to_dict()
        return changes.names(ChangeOperation(operation))

    def iter_changes(self):
        """Yield ``(collection, operation, name)`` in deterministic order."""
        for collection in sorted(self.collections):
            changes = self.collections[collection]
            for op in ChangeOperation:
                for name in changes.names(op):
                    yield collection, op, name

    def without(self, operation: ChangeOperation) -> ChangeList:
        """Return a copy with *operation* emptied in every collection."""
        return ChangeList(
            collections={
                name: changes.model_copy(
                    update={ChangeOperation(operation).value: []}
                )
                for name, changes in self.collections.items()
            }
        )

    def to_dict(self) -> dict[str, dict[str, list[str]]]:
        """Return ``{collection: {operation: [names]}}``."""
        return {
            name: changes.to_dict()
            for name, changes in self.collections.items()
        }


class ConfigState(str, Enum):
    """Status labels shown for one configuration name."""

    IDENTICAL = "Identical"
    ONLY_IN_DB = "Only in DB"
    ONLY_IN_SYNC_DIR = "Only in sync dir"
    DIFFERENT = "Different"


class StatusRow(BaseModel):
    """One row of the status report."""

    name: str
    state: ConfigState

    model_config = {"frozen": True}


DEFAULT_STATUS_STATES = "Only in DB,Only in sync dir,Different"


class StatusOptions(BaseModel):
    """Filters for the status report.

    Attributes:
        state: Comma-separated allow-list of state labels, or ``Any``.
        prefix: Only names starting with this prefix.
        label: Sync directory label to compare against.
    """

    state: str = DEFAULT_STATUS_STATES
    prefix: str = ""
    label: str = ""

    model_config = {"frozen": True}
