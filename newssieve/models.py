"""
NewsSieve Data Models
=====================

Configuration entities (pydantic) and per-run value objects (dataclasses)
that flow through the pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class FeedFormat(str, Enum):
    """Syndication wire formats."""
    RSS = "rss"
    ATOM = "atom"


class ContentSource(str, Enum):
    """Where a resolved article body came from."""
    DETAIL_PAGE = "detail_page"
    RSS = "rss"
    DETAIL_PAGE_FALLBACK = "detail_page_fallback"
    DETAIL_PAGE_FALLBACK_ERROR = "detail_page_fallback_error"
    FAILED = "failed"


# Bodies that mark a resolution failure instead of real text
EXTRACTION_FAILED = "[content extraction failed]"
CLEANING_FAILED = "[content cleaning failed]"
CONTENT_EMPTY = "[content empty]"

FAILURE_SENTINELS = frozenset({EXTRACTION_FAILED, CLEANING_FAILED, CONTENT_EMPTY})

CATEGORY_VOCABULARY = (
    "politics",
    "finance",
    "military",
    "tech",
    "society",
    "entertainment",
    "sports",
    "weather",
    "other",
)
FAILURE_CATEGORY = "classification failed"


class DetailPageConfig(BaseModel):
    """Per-source detail-page scraping options."""
    enabled: bool = Field(default=True, description="Scrape the linked article page")
    content_selectors: List[str] = Field(
        default_factory=list, description="Candidate body selectors, tried in order"
    )
    exclude_selectors: List[str] = Field(
        default_factory=list, description="Sub-fragments removed from the accepted body"
    )
    timeout: Optional[int] = Field(
        default=None, ge=1, le=300, description="Request timeout in seconds"
    )

    model_config = {"frozen": True}


class FeedSource(BaseModel):
    """One configured syndication feed."""
    name: str = Field(..., min_length=1, description="Display name, used as record source")
    url: str = Field(..., description="Feed URL")
    format: FeedFormat = Field(default=FeedFormat.RSS, description="Wire format")
    groups: List[str] = Field(default_factory=list, description="Processing groups")
    max_entries: Optional[int] = Field(
        default=None, ge=1, description="Per-source item cap; global default when unset"
    )
    detail_page: Optional[DetailPageConfig] = Field(default=None)

    model_config = {"frozen": True}

    @field_validator("groups", mode="before")
    @classmethod
    def normalize_groups(cls, v):
        """Accept a scalar group and compare groups as strings."""
        if v is None:
            return []
        if not isinstance(v, (list, tuple)):
            v = [v]
        return [str(g).strip() for g in v]

    @field_validator("url")
    @classmethod
    def validate_url(cls, v):
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError("feed url must start with http:// or https://")
        return v

    def in_group(self, group_id) -> bool:
        """Check group membership."""
        return str(group_id).strip() in self.groups


@dataclass(frozen=True)
class FeedItem:
    """One parsed feed entry. Absent fields are empty strings."""

    title: str
    link: str = ""
    content_encoded: str = ""
    content: str = ""
    description: str = ""
    summary: str = ""
    published: str = ""
    updated: str = ""
    identifier: str = ""
    published_at: Optional[datetime] = None

    def raw_content_fields(self) -> List[str]:
        """Embedded content fields in resolution priority order."""
        return [self.content_encoded, self.content, self.description, self.summary]


@dataclass(frozen=True)
class ResolvedContent:
    """Article body chosen by content resolution."""

    body: str
    source: ContentSource

    @property
    def is_failure(self) -> bool:
        return self.source == ContentSource.FAILED or self.body in FAILURE_SENTINELS


@dataclass(frozen=True)
class Classification:
    """Keep/discard decision with its category label."""

    keep: bool
    category: str

    def __post_init__(self):
        if self.keep and self.category == FAILURE_CATEGORY:
            raise ValueError("a kept item cannot carry the failure category")

    @classmethod
    def failed(cls) -> "Classification":
        """Fail-closed result used whenever the oracle cannot be trusted."""
        return cls(keep=False, category=FAILURE_CATEGORY)


@dataclass(frozen=True)
class NewsRecord:
    """The persisted unit."""

    source: str
    category: str
    title: str
    body: str
    is_condensed: bool = False


@dataclass
class RunSummary:
    """Aggregate counters for one group execution."""

    group: Optional[str] = None
    feeds_total: int = 0
    feeds_failed: int = 0
    items_seen: int = 0
    items_saved: int = 0
    items_skipped: int = 0
    items_errored: int = 0
    elapsed_seconds: float = 0.0
    failed_feeds: List[str] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Saved items as a share of items seen."""
        if self.items_seen == 0:
            return 0.0
        return self.items_saved / self.items_seen

    def merge(self, other: "RunSummary") -> None:
        """Fold another run's counters into this one."""
        self.feeds_total += other.feeds_total
        self.feeds_failed += other.feeds_failed
        self.items_seen += other.items_seen
        self.items_saved += other.items_saved
        self.items_skipped += other.items_skipped
        self.items_errored += other.items_errored
        self.elapsed_seconds += other.elapsed_seconds
        self.failed_feeds.extend(other.failed_feeds)
