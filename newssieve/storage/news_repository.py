"""
News Repository
===============

Turns NewsRecords into text entries keyed by a filesystem-safe version of
the title. Saving the same title twice overwrites the first entry.

Record layout::

    Source: <source>
    Category: <category>

    <title>

    AI-summarized:|original:
    <body>
"""

import re
from typing import Optional

from ..config.settings import get_settings
from ..models import CONTENT_EMPTY, NewsRecord
from ..utils.exceptions import ErrorCode, PersistenceError, ValidationError
from ..utils.logging import get_logger_for_component
from .collection_store import FileCollectionStore


ILLEGAL_KEY_CHARS = re.compile(r'[\\/:*?"<>|]')
# Longest single file name most filesystems accept, in bytes
MAX_NAME_BYTES = 255

CONDENSED_MARKER = "AI-summarized:"
ORIGINAL_MARKER = "original:"


def safe_key(title: str, max_length: int = 100, max_bytes: int = MAX_NAME_BYTES) -> str:
    """Strip characters illegal in file names, cap the length, trim.

    The key is capped both in characters and in UTF-8 bytes; the byte cut
    never splits a character.
    """
    key = ILLEGAL_KEY_CHARS.sub("", title or "")[:max_length]
    key = key.encode("utf-8")[:max_bytes].decode("utf-8", "ignore")
    return key.strip()


def format_record(record: NewsRecord) -> str:
    """Render the four-field text layout."""
    marker = CONDENSED_MARKER if record.is_condensed else ORIGINAL_MARKER
    return (
        f"Source: {record.source or 'unknown'}\n"
        f"Category: {record.category or 'uncategorized'}\n"
        f"\n"
        f"{record.title or '[no title]'}\n"
        f"\n"
        f"{marker}\n"
        f"{record.body or CONTENT_EMPTY}"
    )


class NewsRepository:
    """Idempotent writer of news records."""

    def __init__(self, store: Optional[FileCollectionStore] = None, settings=None):
        self.settings = settings or get_settings()
        self.store = store or FileCollectionStore(self.settings.storage.root_dir)
        self.logger = get_logger_for_component("news_repository")

    def derive_key(self, title: str) -> str:
        """Storage key for a title: safe name plus record extension.

        Raises:
            ValidationError: If nothing usable is left of the title
        """
        extension = self.settings.storage.record_extension
        key = safe_key(
            title,
            self.settings.storage.max_key_length,
            max_bytes=MAX_NAME_BYTES - len(extension.encode("utf-8")),
        )
        if not key:
            raise ValidationError(
                f"Title '{title}' yields an empty storage key",
                field_name="title",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
            )
        return f"{key}{extension}"

    def save(self, collection: str, record: NewsRecord) -> bool:
        """
        Create or overwrite the entry for ``record``.

        Args:
            collection: Target collection
            record: Record to persist

        Returns:
            True when written, False on any storage failure
        """
        try:
            key = self.derive_key(record.title)
        except ValidationError as e:
            self.logger.error(str(e))
            return False

        try:
            existed = self.store.find_by_key(collection, key)
            self.store.write_or_replace(collection, key, format_record(record))
        except (PersistenceError, OSError) as e:
            self.logger.error(
                f"Failed to save '{record.title}': {e}",
                extra={"collection": collection, "key": key},
            )
            return False

        self.logger.info(f"{'Updated' if existed else 'Saved'} {key}")
        return True
