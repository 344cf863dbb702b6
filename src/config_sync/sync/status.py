"""Status report: which configuration names differ between two stores.

The comparison runs with the active store as source and the sync store as
target, so the operations map onto display states as follows:

- ``create`` (only the active store has it) -> ``Only in DB``
- ``delete`` (only the sync store has it) -> ``Only in sync dir``
- ``update`` (both have it, content differs) -> ``Different``

Every other name of the active store is ``Identical``.
"""

from __future__ import annotations

import logging

from ..storage.base import StorageInterface
from .comparer import compare
from .models import (
    ChangeOperation,
    ConfigState,
    StatusOptions,
    StatusRow,
)

logger = logging.getLogger(__name__)

STATE_MAP: dict[ChangeOperation, ConfigState] = {
    ChangeOperation.CREATE: ConfigState.ONLY_IN_DB,
    ChangeOperation.DELETE: ConfigState.ONLY_IN_SYNC_DIR,
    ChangeOperation.UPDATE: ConfigState.DIFFERENT,
}

ANY_STATE = "any"


def parse_states(text: str) -> set[ConfigState] | None:
    """Parse a comma-separated state filter.

    Returns:
        The allowed states, or ``None`` when every state is allowed
        (empty text or ``Any``).

    Raises:
        ValueError: On an unknown state label.
    """
    labels = [part.strip() for part in text.split(",") if part.strip()]
    if not labels or any(label.lower() == ANY_STATE for label in labels):
        return None
    by_label = {s.value.lower(): s for s in ConfigState}
    states: set[ConfigState] = set()
    for label in labels:
        state = by_label.get(label.lower())
        if state is None:
            valid = ", ".join(s.value for s in ConfigState)
            raise ValueError(
                f"Unknown state '{label}'. Valid states: {valid}, Any"
            )
        states.add(state)
    return states


def config_status(
    active: StorageInterface,
    target: StorageInterface,
    options: StatusOptions | None = None,
) -> list[StatusRow]:
    """Build the filtered, name-sorted status table.

    Args:
        active: The live store; its names form the baseline universe.
        target: The resolved sync store to compare against.
        options: Prefix and state filters.

    Returns:
        One ``StatusRow`` per name that passes both filters.
    """
    options = options or StatusOptions()
    allowed = parse_states(options.state)

    states: dict[str, ConfigState] = {
        name: ConfigState.IDENTICAL
        for name in active.default_view().list_all(options.prefix)
    }
    for _collection, op, name in compare(active, target).iter_changes():
        if name.startswith(options.prefix):
            states[name] = STATE_MAP[op]

    rows = [
        StatusRow(name=name, state=state)
        for name, state in sorted(states.items())
        if allowed is None or state in allowed
    ]
    logger.debug("Status: %d of %d names after filtering", len(rows), len(states))
    return rows
