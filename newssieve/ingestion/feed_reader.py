"""
Feed Reader
===========

Fetches a syndication feed and turns it into FeedItem objects using
feedparser.

The reader never raises: fetch failures, bad status codes and unparsable
documents are logged and reported as an empty list. Callers treat "no items"
and "fetch failed" the same way.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser

from ..config.settings import get_settings
from ..models import FeedFormat, FeedItem
from ..utils.exceptions import FeedParseError, handle_exception
from ..utils.logging import get_logger_for_component
from .http_client import FEED_ACCEPT, HttpClient


class FeedReader:
    """RSS/Atom reader with fail-soft error handling."""

    def __init__(self, http_client: Optional[HttpClient] = None, settings=None):
        self.settings = settings or get_settings()
        self.http_client = http_client or HttpClient(self.settings)
        self.logger = get_logger_for_component("feed_reader")

    def fetch_and_parse(self, url: str, feed_format: FeedFormat = FeedFormat.RSS) -> List[FeedItem]:
        """
        Fetch and parse one feed.

        Args:
            url: Feed URL
            feed_format: Configured wire format; Atom is still detected from
                the document itself when the root element says so

        Returns:
            Items in feed order, or an empty list on any failure
        """
        try:
            response = self.http_client.fetch(
                url,
                timeout=self.settings.processing.request_timeout,
                max_redirects=self.settings.processing.max_redirects,
                headers={"Accept": FEED_ACCEPT},
            )
            if not response.ok:
                self.logger.error(f"Feed {url} returned HTTP {response.status}")
                return []

            return self.parse(response.body, url, feed_format, response.headers)

        except Exception as e:
            handle_exception(e, self.logger, "fetch_feed", {"feed_url": url})
            return []

    def parse(
        self,
        document: Any,
        url: str = "",
        feed_format: FeedFormat = FeedFormat.RSS,
        response_headers: Optional[dict] = None,
    ) -> List[FeedItem]:
        """
        Parse raw feed bytes or text into items.

        Raises:
            FeedParseError: If the document is not a feed at all
        """
        parsed = feedparser.parse(document, response_headers=response_headers or {})

        if parsed.bozo and not parsed.entries:
            raise FeedParseError(
                f"Unparsable feed: {parsed.get('bozo_exception')}", feed_url=url
            )
        if parsed.bozo:
            # Many feeds have minor formatting issues
            self.logger.warning(
                f"Feed parsing warning for {url}: {parsed.get('bozo_exception')}"
            )

        is_atom = self._is_atom(parsed, feed_format)

        items = []
        for entry in parsed.entries:
            try:
                items.append(self._extract_item(entry, is_atom))
            except Exception as e:
                self.logger.warning(f"Failed to parse entry in {url}: {e}")
                continue

        self.logger.info(
            f"Parsed {len(items)} {'atom' if is_atom else 'rss'} entries from {url}"
        )
        return items

    def _is_atom(self, parsed: Any, feed_format: FeedFormat) -> bool:
        """The document's own root element wins over the configured format."""
        version = parsed.get("version") or ""
        if version.startswith("atom"):
            return True
        if version.startswith("rss"):
            return False
        return FeedFormat(feed_format) == FeedFormat.ATOM

    def _extract_item(self, entry: Any, is_atom: bool) -> FeedItem:
        """Map one feedparser entry onto a FeedItem."""
        embedded = ""
        if entry.get("content"):
            embedded = entry.content[0].get("value", "") or ""
        summary = entry.get("summary", "") or ""

        # feedparser stores RSS <content:encoded> and Atom <content> in the
        # same place, and RSS <description> and Atom <summary> likewise
        if is_atom:
            content_encoded, content, description, summary_field = "", embedded, "", summary
        else:
            content_encoded, content, description, summary_field = embedded, "", summary, ""

        published = entry.get("published", "") or ""
        updated = entry.get("updated", "") or ""

        return FeedItem(
            title=(entry.get("title", "") or "").strip(),
            link=self._entry_link(entry),
            content_encoded=content_encoded,
            content=content,
            description=description,
            summary=summary_field,
            published=published or updated,
            updated=updated,
            identifier=entry.get("id", "") or "",
            published_at=self._entry_datetime(entry),
        )

    def _entry_link(self, entry: Any) -> str:
        """Prefer the alternate link, then any link without rel, then the first."""
        links = entry.get("links") or []
        for link in links:
            if link.get("rel") == "alternate" and link.get("href"):
                return link["href"].strip()
        for link in links:
            if not link.get("rel") and link.get("href"):
                return link["href"].strip()
        if links and links[0].get("href"):
            return links[0]["href"].strip()
        return (entry.get("link", "") or "").strip()

    def _entry_datetime(self, entry: Any) -> Optional[datetime]:
        for key in ("published_parsed", "updated_parsed"):
            value = entry.get(key)
            if value:
                try:
                    return datetime(*value[:6], tzinfo=timezone.utc)
                except (ValueError, TypeError):
                    continue
        return None
