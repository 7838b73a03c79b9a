"""
Processing Pipeline Orchestrator
================================

Drives configured feeds through classification, content resolution, the
length gate and persistence.

Feeds run sequentially in configuration order and items in feed order. A
failing item is counted and skipped; a failing feed is logged and the run
moves on to the next feed. Only this module updates RunSummary counters.
"""

from enum import Enum
from typing import Iterable, List, Optional

from ..ai.classifier import NewsClassifier
from ..ai.summarizer import NewsSummarizer
from ..config.settings import get_settings, load_feed_sources
from ..ingestion.feed_reader import FeedReader
from ..ingestion.http_client import HttpClient
from ..models import FeedItem, FeedSource, NewsRecord, RunSummary
from ..storage.news_repository import NewsRepository
from ..utils.logging import PerformanceLogger, get_logger_for_component
from .content_resolver import ContentResolver
from .detail_page import DetailPageExtractor
from .length_gate import GateAction, LengthGate


class ItemOutcome(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"
    ERRORED = "errored"
    IGNORED = "ignored"  # no usable title, not counted


class NewsPipeline:
    """Group-based batch orchestrator."""

    def __init__(
        self,
        sources: Optional[List[FeedSource]] = None,
        feed_reader: Optional[FeedReader] = None,
        resolver: Optional[ContentResolver] = None,
        classifier: Optional[NewsClassifier] = None,
        summarizer: Optional[NewsSummarizer] = None,
        repository: Optional[NewsRepository] = None,
        settings=None,
    ):
        """Initialize pipeline; every collaborator defaults to the configured one.

        Args:
            sources: Feed sources; loaded from ``settings.feeds_file`` when None
            feed_reader: Feed fetcher/parser
            resolver: Content resolver
            classifier: Title classifier
            summarizer: Body summarizer used by the length gate
            repository: Record persistence
            settings: Application settings
        """
        self.settings = settings or get_settings()
        self.sources = sources if sources is not None else load_feed_sources(self.settings.feeds_file)

        # Feed and detail-page requests share one session
        http_client = None
        if feed_reader is None or resolver is None:
            http_client = HttpClient(self.settings)

        self.feed_reader = feed_reader or FeedReader(http_client, settings=self.settings)
        self.resolver = resolver or ContentResolver(
            detail_extractor=DetailPageExtractor(http_client, settings=self.settings),
            settings=self.settings,
        )
        self.classifier = classifier or NewsClassifier(settings=self.settings)
        self.summarizer = summarizer or NewsSummarizer(settings=self.settings)
        self.length_gate = LengthGate(self.summarizer, settings=self.settings)
        self.repository = repository or NewsRepository(settings=self.settings)
        self.collection = self.settings.storage.collection
        self.logger = get_logger_for_component("pipeline")

    def sources_for_group(self, group_id) -> List[FeedSource]:
        """Sources belonging to ``group_id``, in configuration order."""
        return [source for source in self.sources if source.in_group(group_id)]

    def groups(self) -> List[str]:
        """Distinct group ids in order of first appearance."""
        seen: List[str] = []
        for source in self.sources:
            for group in source.groups:
                if group not in seen:
                    seen.append(group)
        return seen

    def run_group(self, group_id) -> RunSummary:
        """
        Process every feed of one group.

        Args:
            group_id: Group identifier (compared as a string)

        Returns:
            RunSummary for the group; empty if the group has no feeds
        """
        group_id = str(group_id).strip()
        sources = self.sources_for_group(group_id)
        if not sources:
            self.logger.warning(f"No feeds configured for group {group_id}")
            return RunSummary(group=group_id)

        return self._run(sources, group_id)

    def run_all(self) -> RunSummary:
        """Process every configured feed in one run, ignoring groups."""
        return self._run(self.sources, None)

    def run_all_groups(self) -> List[RunSummary]:
        """Run each group in turn; a feed in several groups runs once per group."""
        return [self.run_group(group) for group in self.groups()]

    def _run(self, sources: Iterable[FeedSource], group_id: Optional[str]) -> RunSummary:
        summary = RunSummary(group=group_id)
        logger = self.logger.bind(group=group_id)

        label = f"group {group_id}" if group_id is not None else "all feeds"
        with PerformanceLogger(logger, f"news run for {label}") as perf:
            for source in sources:
                summary.feeds_total += 1
                try:
                    self.process_feed(source, summary, group_id)
                except Exception as e:
                    summary.feeds_failed += 1
                    summary.failed_feeds.append(source.name)
                    logger.error(f"Feed {source.name} failed, skipping: {e}", exc_info=True)

        summary.elapsed_seconds = perf.duration
        logger.info(
            f"Run finished for {label}: seen={summary.items_seen} saved={summary.items_saved} "
            f"skipped={summary.items_skipped} errored={summary.items_errored} "
            f"feeds_failed={summary.feeds_failed}/{summary.feeds_total}"
        )
        return summary

    def process_feed(self, source: FeedSource, summary: RunSummary, group_id: Optional[str] = None) -> None:
        """Fetch one feed and process its items, updating ``summary``."""
        logger = self.logger.bind(feed=source.name, group=group_id)
        limit = source.max_entries or self.settings.processing.max_entries_per_feed

        with PerformanceLogger(logger, f"feed {source.name}"):
            items = self.feed_reader.fetch_and_parse(source.url, source.format)[:limit]
            logger.info(f"Processing {len(items)} items from {source.name}")

            for item in items:
                try:
                    outcome = self.process_item(item, source)
                except Exception as e:
                    outcome = ItemOutcome.ERRORED
                    logger.error(f"Error processing '{item.title}': {e}", exc_info=True)

                if outcome == ItemOutcome.IGNORED:
                    continue
                summary.items_seen += 1
                if outcome == ItemOutcome.SAVED:
                    summary.items_saved += 1
                elif outcome == ItemOutcome.SKIPPED:
                    summary.items_skipped += 1
                else:
                    summary.items_errored += 1

    def process_item(self, item: FeedItem, source: FeedSource) -> ItemOutcome:
        """
        Run one item through the pipeline.

        The title is classified first so discarded items never cost a
        detail-page fetch.
        """
        title = (item.title or "").strip()
        if not title:
            return ItemOutcome.IGNORED

        logger = self.logger.bind(feed=source.name)

        classification = self.classifier.classify(title)
        if not classification.keep:
            logger.info(f"Skipped [{classification.category}] {title}")
            return ItemOutcome.SKIPPED

        resolved = self.resolver.resolve(item, source)
        if resolved.is_failure:
            logger.info(f"Skipped '{title}': {resolved.body}")
            return ItemOutcome.SKIPPED

        decision = self.length_gate.apply(resolved.body, classification)
        if decision.action == GateAction.DISCARD_TOO_SHORT:
            logger.debug(f"Skipped '{title}': body too short ({len(decision.body)} chars)")
            return ItemOutcome.SKIPPED

        record = NewsRecord(
            source=source.name,
            category=classification.category,
            title=title,
            body=decision.body,
            is_condensed=decision.is_condensed,
        )
        if not self.repository.save(self.collection, record):
            return ItemOutcome.ERRORED

        logger.info(
            f"Saved [{classification.category}] {title} "
            f"({resolved.source.value}{', summarized' if decision.is_condensed else ''})"
        )
        return ItemOutcome.SAVED
