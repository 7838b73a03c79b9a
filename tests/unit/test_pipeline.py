"""
Unit Tests for Pipeline Orchestration
=====================================

Tests for group selection, ordering, failure isolation and counters.
"""

import pytest
from unittest.mock import Mock

from newssieve.ai.classifier import NewsClassifier
from newssieve.models import ContentSource, FeedItem, ResolvedContent, RunSummary, EXTRACTION_FAILED
from newssieve.processing.pipeline import ItemOutcome, NewsPipeline
from newssieve.storage.news_repository import NewsRepository

from conftest import FakeOracle


BODY = "A perfectly ordinary article body that is comfortably within limits."


def _classify_by_title(prompt: str) -> str:
    """Keep titles mentioning 'bank', discard the rest as sports."""
    title = prompt.rsplit("News title: ", 1)[1]
    if "explode" in title:
        raise RuntimeError("oracle exploded")
    return "1,finance" if "bank" in title.lower() else "0,sports"


class TestNewsPipeline:

    @pytest.fixture(autouse=True)
    def _setup(self, settings, sample_sources):
        self.settings = settings
        self.sources = sample_sources
        self.feeds = {}

        self.feed_reader = Mock()
        self.feed_reader.fetch_and_parse.side_effect = self._fetch
        self.resolver = Mock()
        self.resolver.resolve.side_effect = lambda item, source: ResolvedContent(BODY, ContentSource.RSS)
        self.summarizer = Mock()
        self.summarizer.summarize.side_effect = lambda body: body[:100]
        self.oracle = FakeOracle(_classify_by_title)
        self.repository = NewsRepository(settings=settings)

        self.pipeline = NewsPipeline(
            sources=self.sources,
            feed_reader=self.feed_reader,
            resolver=self.resolver,
            classifier=NewsClassifier(oracle=self.oracle, settings=settings),
            summarizer=self.summarizer,
            repository=self.repository,
            settings=settings,
        )

    def _fetch(self, url, feed_format):
        result = self.feeds.get(url, [])
        if isinstance(result, Exception):
            raise result
        return result

    def _saved(self):
        return self.repository.store.list_keys(self.settings.storage.collection)

    def test_group_selection_and_order(self):
        self.feeds["http://alpha.example.com/rss"] = [FeedItem(title="Bank news A")]
        self.feeds["http://beta.example.com/rss"] = [FeedItem(title="Bank news B")]
        self.feeds["http://gamma.example.com/atom"] = [FeedItem(title="Bank news C")]

        summary = self.pipeline.run_group(1)

        fetched = [call.args[0] for call in self.feed_reader.fetch_and_parse.call_args_list]
        assert fetched == ["http://alpha.example.com/rss", "http://beta.example.com/rss"]
        assert summary.group == "1"
        assert summary.feeds_total == 2
        assert summary.items_saved == 2
        assert self._saved() == ["Bank news A.txt", "Bank news B.txt"]

    def test_unknown_group_is_empty_summary(self):
        summary = self.pipeline.run_group("99")

        assert summary.feeds_total == 0
        assert summary.items_seen == 0
        self.feed_reader.fetch_and_parse.assert_not_called()

    def test_counters_add_up(self):
        self.feeds["http://alpha.example.com/rss"] = [
            FeedItem(title="Bank raises rates"),
            FeedItem(title="Team wins derby"),
            FeedItem(title="Bank merger explode"),
            FeedItem(title="   "),
        ]

        summary = self.pipeline.run_group(1)

        assert summary.items_saved == 1
        assert summary.items_skipped == 2
        assert summary.items_errored == 0
        assert summary.items_seen == 3
        assert summary.items_seen == summary.items_saved + summary.items_skipped + summary.items_errored

    def test_failing_item_does_not_stop_feed(self):
        self.feeds["http://alpha.example.com/rss"] = [
            FeedItem(title="Bank item one"),
            FeedItem(title="Bank item two"),
            FeedItem(title="Bank item three"),
        ]

        def resolve(item, source):
            if item.title == "Bank item two":
                raise RuntimeError("resolver bug")
            return ResolvedContent(BODY, ContentSource.RSS)

        self.resolver.resolve.side_effect = resolve

        summary = self.pipeline.run_group(1)

        assert summary.items_errored == 1
        assert summary.items_saved == 2
        assert self._saved() == ["Bank item one.txt", "Bank item three.txt"]

    def test_failing_feed_does_not_stop_group(self):
        self.feed_reader.fetch_and_parse.side_effect = [
            RuntimeError("feed exploded"),
            [FeedItem(title="Bank item from beta")],
        ]

        summary = self.pipeline.run_group(1)

        assert summary.feeds_failed == 1
        assert summary.failed_feeds == ["Alpha"]
        assert summary.items_saved == 1

    def test_discarded_item_never_resolved(self):
        self.feeds["http://alpha.example.com/rss"] = [FeedItem(title="Team wins derby", link="http://x/1")]

        self.pipeline.run_group(1)

        self.resolver.resolve.assert_not_called()
        assert self._saved() == []

    def test_failure_sentinel_is_skipped(self):
        self.feeds["http://alpha.example.com/rss"] = [FeedItem(title="Bank with no content")]
        self.resolver.resolve.side_effect = lambda item, source: ResolvedContent(
            EXTRACTION_FAILED, ContentSource.FAILED
        )

        summary = self.pipeline.run_group(1)

        assert summary.items_skipped == 1
        assert self._saved() == []

    def test_long_body_saved_condensed(self):
        self.feeds["http://alpha.example.com/rss"] = [FeedItem(title="Bank annual report")]
        self.resolver.resolve.side_effect = lambda item, source: ResolvedContent("x" * 900, ContentSource.RSS)

        self.pipeline.run_group(1)

        content = self.repository.store.read(self.settings.storage.collection, "Bank annual report.txt")
        assert "AI-summarized:\n" + "x" * 100 in content

    def test_per_source_entry_cap(self, sample_sources):
        capped = sample_sources[0].model_copy(update={"max_entries": 2})
        pipeline = NewsPipeline(
            sources=[capped],
            feed_reader=self.feed_reader,
            resolver=self.resolver,
            classifier=NewsClassifier(oracle=self.oracle, settings=self.settings),
            summarizer=self.summarizer,
            repository=self.repository,
            settings=self.settings,
        )
        self.feeds[capped.url] = [FeedItem(title=f"Bank item {i}") for i in range(5)]

        summary = pipeline.run_group(1)

        assert summary.items_seen == 2

    def test_save_failure_counts_as_error(self):
        self.feeds["http://alpha.example.com/rss"] = [FeedItem(title="Bank item")]
        self.pipeline.repository = Mock()
        self.pipeline.repository.save.return_value = False

        summary = self.pipeline.run_group(1)

        assert summary.items_errored == 1

    def test_empty_title_is_ignored(self):
        source = self.sources[0]

        assert self.pipeline.process_item(FeedItem(title=""), source) == ItemOutcome.IGNORED

    def test_run_all_groups_visits_each_group(self):
        self.feeds["http://beta.example.com/rss"] = [FeedItem(title="Bank shared item")]

        summaries = self.pipeline.run_all_groups()

        assert [s.group for s in summaries] == ["1", "2"]
        assert all(s.items_saved == 1 for s in summaries)
        assert self._saved() == ["Bank shared item.txt"]


class TestRunSummary:

    def test_success_rate_of_empty_run_is_zero(self):
        assert RunSummary(group="1").success_rate == 0.0

    def test_merge_adds_counters_and_failed_feeds(self):
        total = RunSummary(group="total")
        total.merge(RunSummary(group="1", feeds_total=2, items_seen=4, items_saved=1, items_skipped=3))
        total.merge(RunSummary(group="2", feeds_total=1, feeds_failed=1, failed_feeds=["Gamma"]))

        assert total.feeds_total == 3
        assert total.feeds_failed == 1
        assert total.items_seen == 4
        assert total.success_rate == 0.25
        assert total.failed_feeds == ["Gamma"]
