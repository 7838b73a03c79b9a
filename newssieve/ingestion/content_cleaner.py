"""
Content Cleaner
===============

HTML to plain-text conversion and CSS-selector fragment handling built on
BeautifulSoup.

Selector semantics follow CSS as implemented by soupsieve: ``.class``,
``#id``, ``tag``, ``[attr]`` and ``tag[attr*="value"]``. Matching happens on
the parsed tree, so a ``<div>`` that contains other ``<div>`` elements is
returned whole, up to its own closing tag.
"""

import re
import html
from typing import Iterable, Optional, Sequence, Union

from bs4 import BeautifulSoup, Comment, NavigableString
from bs4.element import CData, ProcessingInstruction, Doctype, Tag

from ..utils.logging import get_logger_for_component
from ..utils.exceptions import ContentExtractionError, ErrorCode


# Removed together with everything inside them
NOISE_ELEMENTS = ["script", "style", "noscript", "iframe"]
IMAGE_ELEMENTS = ["img", "figure", "picture"]

# Block elements rendered as blank-line separated paragraphs
PARAGRAPH_ELEMENTS = {"p", "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "li"}

# Other block containers only get a line break so their text does not run together
LINE_ELEMENTS = ["div", "section", "article", "header", "footer", "tr", "ul", "ol", "table"]

FEED_ALLOWED_TAGS = ("p", "br", "strong", "em")
PAGE_ALLOWED_TAGS = ("p", "br", "strong", "em", "h1", "h2", "h3", "h4")


class ContentCleaner:
    """Deterministic HTML cleaner and selector helper."""

    SPACE_PATTERN = re.compile(r"[ \t\f\v\r\u00a0\u3000]+")
    INVISIBLE_PATTERN = re.compile(r"[\u200b\u200c\u200d\ufeff]")
    MULTIPLE_NEWLINES_PATTERN = re.compile(r"\n{3,}")

    def __init__(self, parser: str = "html.parser"):
        self.parser = parser  # Built-in parser, no external deps
        self.logger = get_logger_for_component("content_cleaner")

    def clean(
        self,
        html_content: str,
        keep_paragraphs: bool = True,
        remove_images: bool = True,
        allowed_tags: Sequence[str] = FEED_ALLOWED_TAGS,
    ) -> str:
        """
        Convert HTML to normalized plain text.

        Args:
            html_content: Raw HTML (entity-encoded HTML is decoded first)
            keep_paragraphs: Separate paragraphs with a blank line and keep
                ``<br>`` as a line break; otherwise flatten to one block
            remove_images: Drop image, figure and picture elements
            allowed_tags: Tags whose boundaries survive as line structure;
                all markup is removed from the output regardless

        Returns:
            Plain text, possibly empty

        Raises:
            ContentExtractionError: If the markup cannot be processed
        """
        if not html_content or not html_content.strip():
            return ""

        try:
            # Feeds frequently double-encode markup; decode before parsing
            soup = BeautifulSoup(html.unescape(html_content), self.parser)

            self._remove_non_content_elements(soup)
            for element in soup.find_all(NOISE_ELEMENTS):
                element.decompose()
            if remove_images:
                for element in soup.find_all(IMAGE_ELEMENTS):
                    element.decompose()

            if keep_paragraphs:
                self._mark_structure(soup, set(allowed_tags))

            text = soup.get_text()
        except Exception as e:
            raise ContentExtractionError(
                f"Failed to clean HTML content: {e}",
                error_code=ErrorCode.CONTENT_CLEANING_FAILED,
            ) from e

        if not keep_paragraphs:
            text = text.replace("\n", " ")
        return self.normalize_text(text)

    def normalize_text(self, text: str) -> str:
        """Normalize whitespace: trim lines, collapse spaces and blank runs."""
        if not text:
            return ""

        text = text.replace("\r\n", "\n").replace("\r", "\n")
        text = self.INVISIBLE_PATTERN.sub("", text)
        text = self.SPACE_PATTERN.sub(" ", text)
        text = "\n".join(line.strip() for line in text.split("\n"))
        text = self.MULTIPLE_NEWLINES_PATTERN.sub("\n\n", text)
        return text.strip()

    def parse(self, html_content: Union[str, bytes]) -> BeautifulSoup:
        return BeautifulSoup(html_content, self.parser)

    def select_fragment(
        self, soup: BeautifulSoup, selectors: Iterable[str], min_length: int = 0
    ) -> Optional[str]:
        """
        Return the inner HTML of the first selector match longer than min_length.

        Each selector contributes only its first match, in document order.
        A selector that is not valid CSS is logged and skipped.

        Args:
            soup: Parsed document
            selectors: Candidate selectors, tried in order
            min_length: Fragment must be strictly longer than this (stripped)

        Returns:
            Inner HTML of the accepted match, or None
        """
        for selector in selectors:
            try:
                element = soup.select_one(selector)
            except Exception as e:
                self.logger.warning(f"Skipping invalid selector '{selector}': {e}")
                continue

            if element is None:
                continue

            fragment = element.decode_contents().strip()
            if len(fragment) > min_length:
                self.logger.debug(
                    f"Selector '{selector}' matched {len(fragment)} chars"
                )
                return fragment

            self.logger.debug(
                f"Selector '{selector}' matched only {len(fragment)} chars, trying next"
            )

        return None

    def remove_elements(self, html_content: str, selectors: Iterable[str]) -> str:
        """
        Remove every element matching any of the selectors.

        Args:
            html_content: HTML fragment
            selectors: Exclusion selectors

        Returns:
            The fragment re-serialized without the excluded elements
        """
        selectors = [s for s in selectors if s and s.strip()]
        if not selectors or not html_content:
            return html_content

        soup = self.parse(html_content)
        removed = 0
        for selector in selectors:
            try:
                matches = soup.select(selector)
            except Exception as e:
                self.logger.warning(f"Skipping invalid exclusion selector '{selector}': {e}")
                continue
            for element in matches:
                element.decompose()
                removed += 1

        if removed:
            self.logger.debug(f"Removed {removed} excluded elements")
        return soup.decode()

    def _remove_non_content_elements(self, soup: BeautifulSoup) -> None:
        """Remove comments, CDATA, and processing instructions."""
        for element in soup.find_all(
            string=lambda text: isinstance(
                text, (Comment, CData, ProcessingInstruction, Doctype)
            )
        ):
            element.extract()

    def _mark_structure(self, soup: BeautifulSoup, allowed_tags: set) -> None:
        """Turn allowed block/break tags into newlines before text extraction."""
        if "br" in allowed_tags:
            for br in soup.find_all("br"):
                br.replace_with(NavigableString("\n"))

        for tag_name in PARAGRAPH_ELEMENTS & allowed_tags:
            for element in soup.find_all(tag_name):
                if isinstance(element, Tag):
                    element.insert_before(NavigableString("\n\n"))
                    element.insert_after(NavigableString("\n\n"))

        for element in soup.find_all(LINE_ELEMENTS):
            element.insert_before(NavigableString("\n"))
            element.insert_after(NavigableString("\n"))
