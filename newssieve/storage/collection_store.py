"""
Collection Store
================

File-system backed key/value collections: a collection is a directory under
the store root, a key is a file name inside it. Writes replace the file
atomically so readers never see a half-written record.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from ..utils.exceptions import PersistenceError, ErrorCode
from ..utils.logging import get_logger_for_component


class FileCollectionStore:
    """Directory-per-collection, file-per-key store."""

    def __init__(self, root_dir):
        self.root = Path(root_dir)
        self.logger = get_logger_for_component("collection_store")

    def collection_path(self, collection: str) -> Path:
        path = (self.root / collection).resolve()
        root = self.root.resolve()
        if path != root and root not in path.parents:
            raise PersistenceError(
                f"Collection escapes store root: {collection}",
                collection=collection,
                error_code=ErrorCode.STORAGE_PERMISSION_DENIED,
                recoverable=False,
            )
        return path

    def ensure_collection(self, collection: str) -> Path:
        path = self.collection_path(collection)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def find_by_key(self, collection: str, key: str) -> bool:
        """Check whether ``key`` exists in ``collection``."""
        return (self.collection_path(collection) / key).is_file()

    def write_or_replace(self, collection: str, key: str, content: str) -> bool:
        """
        Create or overwrite an entry.

        Returns:
            True on success

        Raises:
            PersistenceError: If the entry cannot be written
        """
        target = self.ensure_collection(collection) / key
        existed = target.is_file()

        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as fh:
                fh.write(content)
            os.replace(tmp_name, target)
        except OSError as e:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise PersistenceError(
                f"Failed to write {key}: {e}", collection=collection, key=key
            ) from e

        self.logger.debug(f"{'Updated' if existed else 'Created'} {collection}/{key}")
        return True

    def read(self, collection: str, key: str) -> Optional[str]:
        """Return an entry's content, or None when it does not exist."""
        path = self.collection_path(collection) / key
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(
                f"Failed to read {key}: {e}",
                collection=collection,
                key=key,
                error_code=ErrorCode.STORAGE_READ_FAILED,
            ) from e

    def list_keys(self, collection: str) -> List[str]:
        """Keys in ``collection``, sorted."""
        path = self.collection_path(collection)
        if not path.is_dir():
            return []
        return sorted(
            p.name for p in path.iterdir() if p.is_file() and not p.name.startswith(".tmp-")
        )
