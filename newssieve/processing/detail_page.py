"""
Detail-Page Extractor
=====================

Fetches the article page an item links to and extracts its body text.

Extraction order:
1. first configured content selector whose fragment is longer than
   ``content.min_fragment_length``
2. the document ``<body>``
3. the whole document

Configured exclusion selectors are then removed and the fragment is cleaned.
Any failure yields an empty string.
"""

from typing import Optional, Union

from ..config.settings import get_settings
from ..ingestion.content_cleaner import ContentCleaner, PAGE_ALLOWED_TAGS
from ..ingestion.http_client import HTML_ACCEPT, HttpClient
from ..models import DetailPageConfig
from ..utils.logging import get_logger_for_component


class DetailPageExtractor:
    """Scrapes article bodies from detail pages."""

    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        cleaner: Optional[ContentCleaner] = None,
        settings=None,
    ):
        self.settings = settings or get_settings()
        self.http_client = http_client or HttpClient(self.settings)
        self.cleaner = cleaner or ContentCleaner()
        self.logger = get_logger_for_component("detail_page")

    def extract(self, url: str, config: Optional[DetailPageConfig] = None) -> str:
        """
        Extract cleaned article text from a detail page.

        Args:
            url: Article URL
            config: Source-specific selectors and timeout

        Returns:
            Cleaned text, or "" when the page cannot be fetched or processed
        """
        config = config or DetailPageConfig()
        timeout = config.timeout or self.settings.content.detail_page_timeout

        try:
            response = self.http_client.fetch(
                url,
                timeout=timeout,
                max_redirects=self.settings.processing.max_redirects,
                headers={"Accept": HTML_ACCEPT},
            )
            if not response.ok:
                self.logger.warning(f"Detail page {url} returned HTTP {response.status}")
                return ""

            # Without a declared charset the parser reads <meta charset> from the bytes
            markup = response.text if response.encoding else response.body
            fragment = self.select_body(markup, config)
            if config.exclude_selectors:
                fragment = self.cleaner.remove_elements(fragment, config.exclude_selectors)

            text = self.cleaner.clean(
                fragment,
                keep_paragraphs=True,
                remove_images=True,
                allowed_tags=PAGE_ALLOWED_TAGS,
            )
            self.logger.debug(f"Extracted {len(text)} chars from {url}")
            return text

        except Exception as e:
            self.logger.warning(f"Detail page extraction failed for {url}: {e}")
            return ""

    def select_body(self, page_html: Union[str, bytes], config: DetailPageConfig) -> str:
        """Pick the article fragment: selectors, then <body>, then everything."""
        soup = self.cleaner.parse(page_html)
        selectors = config.content_selectors or self.settings.content.default_content_selectors

        fragment = self.cleaner.select_fragment(
            soup, selectors, min_length=self.settings.content.min_fragment_length
        )
        if fragment is not None:
            return fragment

        self.logger.debug("No content selector matched, falling back to <body>")
        if soup.body is not None:
            return soup.body.decode_contents()
        return soup.decode()
