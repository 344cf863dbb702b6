"""Comparison and synchronization engine.

Public API for comparing two collection-partitioned stores and copying
one into the other.

Modules:

- ``comparer``  -- ``StorageComparer``: per-collection create/update/delete
  classification.
- ``copier``    -- ``copy_config``, ``export_config``, ``import_config``.
- ``status``    -- ``config_status``: filtered ``{name, state}`` table.
- ``models``    -- ``ChangeList``, ``CollectionChanges``,
  ``ChangeOperation``, ``ConfigState``, ``StatusRow``, ``StatusOptions``.
- ``reporter``  -- table and JSON formatting.

Usage example
-------------
::

    from config_sync.storage import FileStorage
    from config_sync.sync import compare, copy_config, format_changes_table

    active = FileStorage("config/active")
    sync = FileStorage("config/sync")

    print(format_changes_table(compare(active, sync)))
    copy_config(active, sync)
"""

from .comparer import StorageComparer, compare
from .copier import copy_config, export_config, import_config
from .models import (
    ChangeList,
    ChangeOperation,
    CollectionChanges,
    ConfigState,
    StatusOptions,
    StatusRow,
)
from .reporter import (
    changelist_to_json,
    format_changes_table,
    format_status_table,
    status_to_json,
)
from .status import config_status, parse_states

__all__ = [
    "ChangeList",
    "ChangeOperation",
    "CollectionChanges",
    "ConfigState",
    "StatusOptions",
    "StatusRow",
    "StorageComparer",
    "changelist_to_json",
    "compare",
    "config_status",
    "copy_config",
    "export_config",
    "format_changes_table",
    "format_status_table",
    "import_config",
    "parse_states",
    "status_to_json",
]
