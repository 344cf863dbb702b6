"""File-backed document store.

Each document is one YAML file named ``<name>.yml``.  The default
collection lives directly in the base directory; a collection such as
``language.fr`` lives in ``<base>/language/fr/``.

Key design choices:

* **Atomic writes** -- ``write()`` writes to a temp file in the target
  directory then calls ``os.replace()`` so readers never see partial data.
* **No caching** -- every call goes to the filesystem, so two stores
  opened on the same directory always agree.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import InvalidNameError, InvalidValueError, StorageError
from .base import DEFAULT_COLLECTION, StorageInterface
from .codec import FILE_EXTENSION, decode, encode
from .values import MISSING, validate_value

logger = logging.getLogger(__name__)


class FileStorage(StorageInterface):
    """Store documents as YAML files under *directory*.

    Args:
        directory: Base directory of the store (the default collection).
        collection: Collection this view is scoped to.
    """

    def __init__(
        self,
        directory: str | Path,
        collection: str = DEFAULT_COLLECTION,
    ) -> None:
        self.directory = Path(directory)
        self._collection = collection

    def __repr__(self) -> str:
        return (
            f"FileStorage({str(self.directory)!r}, "
            f"collection={self._collection!r})"
        )

    @property
    def collection_name(self) -> str:
        return self._collection

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def get_collection_directory(self) -> Path:
        """Return the directory holding this collection's files."""
        if self._collection == DEFAULT_COLLECTION:
            return self.directory
        return self.directory.joinpath(*self._collection.split("."))

    def get_file_path(self, name: str) -> Path:
        """Return the file path for document *name* in this collection."""
        _check_name(name)
        return self.get_collection_directory() / f"{name}{FILE_EXTENSION}"

    # ------------------------------------------------------------------
    # StorageInterface
    # ------------------------------------------------------------------

    def list_all(self, prefix: str = "") -> list[str]:
        folder = self.get_collection_directory()
        if not folder.is_dir():
            return []
        names = [
            p.name[: -len(FILE_EXTENSION)]
            for p in folder.iterdir()
            if p.is_file() and p.name.endswith(FILE_EXTENSION)
        ]
        return sorted(n for n in names if n and n.startswith(prefix))

    def read(self, name: str) -> Any:
        path = self.get_file_path(name)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return MISSING
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}") from exc
        try:
            return decode(text)
        except (yaml.YAMLError, InvalidValueError) as exc:
            raise StorageError(
                f"Invalid data in {path}: {exc}"
            ) from exc

    def write(self, name: str, data: Any) -> None:
        path = self.get_file_path(name)
        validate_value(data)
        text = encode(data)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(path.parent), suffix=".tmp"
            )
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp_path, path)
        except BaseException as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            if isinstance(exc, OSError):
                raise StorageError(
                    f"Failed to write {path}: {exc}"
                ) from exc
            raise
        logger.debug("Wrote %s", path)

    def delete(self, name: str) -> bool:
        path = self.get_file_path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Failed to delete {path}: {exc}") from exc
        logger.debug("Deleted %s", path)
        return True

    def create_collection(self, collection: str) -> FileStorage:
        return FileStorage(self.directory, collection)

    def get_all_collection_names(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        found: list[str] = []
        for root, dirs, files in os.walk(self.directory):
            # A dot in a directory name cannot map back through
            # get_collection_directory(), so the subtree is unreachable.
            for skipped in [d for d in dirs if "." in d]:
                logger.warning(
                    "Ignoring directory %s: name contains '.'",
                    Path(root) / skipped,
                )
            dirs[:] = sorted(d for d in dirs if "." not in d)
            if Path(root) == self.directory:
                continue
            if any(f.endswith(FILE_EXTENSION) for f in files):
                rel = Path(root).relative_to(self.directory)
                found.append(".".join(rel.parts))
        return sorted(found)


def _check_name(name: str) -> None:
    if not name or name in (".", ".."):
        raise InvalidNameError(f"Invalid config name: {name!r}")
    if "/" in name or "\\" in name or "\0" in name:
        raise InvalidNameError(
            f"Config name {name!r} cannot contain path separators"
        )
