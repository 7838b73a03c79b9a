"""
Unit Tests for News Persistence
===============================

Tests for key derivation, record layout and idempotent saving.
"""

import pytest
from unittest.mock import Mock

from newssieve.models import NewsRecord
from newssieve.storage.collection_store import FileCollectionStore
from newssieve.storage.news_repository import MAX_NAME_BYTES, NewsRepository, format_record, safe_key
from newssieve.utils.exceptions import ErrorCode, PersistenceError, ValidationError


COLLECTION = "news_feed/text"


class TestKeyDerivation:

    def test_illegal_characters_are_removed(self):
        assert safe_key('Rates: "cut" by 0.25% / what next?') == "Rates cut by 0.25%  what next"

    def test_key_is_truncated_then_trimmed(self):
        title = "a" * 99 + " " + "b" * 50

        assert safe_key(title, max_length=100) == "a" * 99

    def test_title_of_only_illegal_characters(self):
        assert safe_key('<>:"/\\|?*') == ""

    def test_byte_cap_never_splits_a_character(self):
        assert safe_key("\u4e2d" * 100, max_bytes=10) == "\u4e2d" * 3


class TestFormatRecord:

    def test_original_layout(self):
        record = NewsRecord(source="China News", category="finance", title="Rates cut", body="Body text")

        assert format_record(record) == (
            "Source: China News\nCategory: finance\n\nRates cut\n\noriginal:\nBody text"
        )

    def test_condensed_marker(self):
        record = NewsRecord(source="S", category="tech", title="T", body="Summary", is_condensed=True)

        assert "\n\nAI-summarized:\nSummary" in format_record(record)

    def test_missing_values_get_placeholders(self):
        record = NewsRecord(source="", category="", title="", body="")

        assert format_record(record) == (
            "Source: unknown\nCategory: uncategorized\n\n[no title]\n\noriginal:\n[content empty]"
        )


class TestNewsRepository:

    @pytest.fixture(autouse=True)
    def _setup(self, settings):
        self.settings = settings
        self.repository = NewsRepository(settings=settings)

    def _record(self, body="First body", title="Central bank cuts rates"):
        return NewsRecord(source="China News", category="finance", title=title, body=body)

    def test_save_creates_entry(self):
        assert self.repository.save(COLLECTION, self._record()) is True

        content = self.repository.store.read(COLLECTION, "Central bank cuts rates.txt")
        assert content.startswith("Source: China News\n")

    def test_saving_same_title_overwrites(self):
        self.repository.save(COLLECTION, self._record(body="First body"))
        self.repository.save(COLLECTION, self._record(body="Second body"))

        keys = self.repository.store.list_keys(COLLECTION)
        assert keys == ["Central bank cuts rates.txt"]
        content = self.repository.store.read(COLLECTION, keys[0])
        assert content.endswith("Second body")
        assert "First body" not in content

    def test_repeat_save_is_idempotent(self):
        record = self._record()

        self.repository.save(COLLECTION, record)
        first = self.repository.store.read(COLLECTION, "Central bank cuts rates.txt")
        self.repository.save(COLLECTION, record)
        second = self.repository.store.read(COLLECTION, "Central bank cuts rates.txt")

        assert first == second

    def test_empty_key_is_rejected(self):
        assert self.repository.save(COLLECTION, self._record(title='???')) is False
        assert self.repository.store.list_keys(COLLECTION) == []

    def test_write_failure_returns_false(self):
        store = Mock(spec=FileCollectionStore)
        store.find_by_key.return_value = False
        store.write_or_replace.side_effect = PersistenceError("disk full", collection=COLLECTION)
        repository = NewsRepository(store=store, settings=self.settings)

        assert repository.save(COLLECTION, self._record()) is False

    def test_derive_key_uses_settings(self):
        self.settings.storage.record_extension = ".md"

        assert self.repository.derive_key("A/B") == "AB.md"

    def test_long_cjk_title_fits_file_name_limit(self):
        title = "中国" * 50
        record = self._record(title=title, body="body " * 10)

        assert self.repository.save(COLLECTION, record) is True

        keys = self.repository.store.list_keys(COLLECTION)
        assert len(keys) == 1
        assert len(keys[0].encode("utf-8")) <= MAX_NAME_BYTES
        assert keys[0].endswith(".txt")
        assert title.startswith(keys[0][:-len(".txt")])

    def test_empty_key_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            self.repository.derive_key("???")

        assert exc_info.value.error_code == ErrorCode.VALIDATION_REQUIRED_FIELD
        assert exc_info.value.context["field_name"] == "title"
