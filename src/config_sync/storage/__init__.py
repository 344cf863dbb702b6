"""Document stores.

- ``base``    -- ``StorageInterface`` contract and ``DEFAULT_COLLECTION``.
- ``memory``  -- ``MemoryStorage``: dict-backed store.
- ``file``    -- ``FileStorage``: one YAML file per document.
- ``codec``   -- YAML encode/decode used by ``FileStorage``.
- ``values``  -- value grammar, ``MISSING`` and deep equality.
"""

from .base import DEFAULT_COLLECTION, StorageInterface
from .file import FileStorage
from .memory import MemoryStorage
from .values import MISSING, is_missing, validate_value, values_equal

__all__ = [
    "DEFAULT_COLLECTION",
    "FileStorage",
    "MISSING",
    "MemoryStorage",
    "StorageInterface",
    "is_missing",
    "validate_value",
    "values_equal",
]
