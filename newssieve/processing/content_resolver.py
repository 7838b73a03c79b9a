"""
Content Resolver
================

Chooses the best available article body for one feed item.

Priority: detail page, then the first non-empty feed-embedded field
(encoded content, content, description, summary), then a failure sentinel.
The chosen body always passes through the footer scrubber.
"""

from typing import Optional

from ..config.settings import get_settings
from ..ingestion.content_cleaner import ContentCleaner, FEED_ALLOWED_TAGS
from ..models import (
    CLEANING_FAILED,
    CONTENT_EMPTY,
    EXTRACTION_FAILED,
    ContentSource,
    FeedItem,
    FeedSource,
    ResolvedContent,
)
from ..utils.exceptions import ContentExtractionError
from ..utils.logging import get_logger_for_component
from .detail_page import DetailPageExtractor
from .footer_scrubber import FooterScrubber


class ContentResolver:
    """Resolves a FeedItem to a ResolvedContent."""

    def __init__(
        self,
        detail_extractor: Optional[DetailPageExtractor] = None,
        cleaner: Optional[ContentCleaner] = None,
        scrubber: Optional[FooterScrubber] = None,
        settings=None,
    ):
        self.settings = settings or get_settings()
        self.cleaner = cleaner or ContentCleaner()
        self.detail_extractor = detail_extractor or DetailPageExtractor(
            cleaner=self.cleaner, settings=self.settings
        )
        self.scrubber = scrubber or FooterScrubber(
            window_lines=self.settings.content.footer_window_lines
        )
        self.logger = get_logger_for_component("content_resolver")

    def should_try_detail_page(self, item: FeedItem, source: FeedSource) -> bool:
        """Detail pages need the global switch and a link; a source may opt out."""
        if not self.settings.content.detail_page_enabled:
            return False
        if source.detail_page is not None and not source.detail_page.enabled:
            return False
        return bool(item.link)

    def resolve(self, item: FeedItem, source: FeedSource) -> ResolvedContent:
        """
        Resolve the article body for ``item``.

        Args:
            item: Parsed feed entry
            source: Feed configuration the entry came from

        Returns:
            ResolvedContent whose body is cleaned text or a failure sentinel
        """
        detail_text = ""
        if self.should_try_detail_page(item, source):
            detail_text = self.detail_extractor.extract(item.link, source.detail_page)
            if detail_text:
                return self._finish(detail_text, ContentSource.DETAIL_PAGE)
            self.logger.debug(f"Detail page gave nothing for '{item.title}', using feed content")

        raw = next((field for field in item.raw_content_fields() if field and field.strip()), "")
        if not raw:
            if detail_text:
                return self._finish(detail_text, ContentSource.DETAIL_PAGE_FALLBACK)
            self.logger.warning(f"No content found for '{item.title}'")
            return ResolvedContent(body=EXTRACTION_FAILED, source=ContentSource.FAILED)

        try:
            cleaned = self.cleaner.clean(
                raw, keep_paragraphs=True, remove_images=True, allowed_tags=FEED_ALLOWED_TAGS
            )
        except ContentExtractionError as e:
            self.logger.warning(f"Cleaning failed for '{item.title}': {e}")
            if detail_text:
                return self._finish(detail_text, ContentSource.DETAIL_PAGE_FALLBACK_ERROR)
            return ResolvedContent(body=CLEANING_FAILED, source=ContentSource.FAILED)

        return self._finish(cleaned, ContentSource.RSS)

    def _finish(self, body: str, source: ContentSource) -> ResolvedContent:
        body = self.scrubber.scrub(body)
        if not body:
            return ResolvedContent(body=CONTENT_EMPTY, source=ContentSource.FAILED)
        return ResolvedContent(body=body, source=source)
