"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for NewsSieve tests.

Network and AI access are replaced with in-process fakes: ``FakeHttpClient``
serves canned responses by URL and ``FakeOracle`` replays scripted replies.
"""

import pytest
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Union

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
os.environ["NEWSSIEVE_AI__GROQ_API_KEY"] = "test-groq-key-for-unit-testing"
os.environ["NEWSSIEVE_AI__GEMINI_API_KEY"] = "test-gemini-key-for-unit-testing"
os.environ["NEWSSIEVE_LOGGING__FILE_PATH"] = ""
os.environ["NEWSSIEVE_LOGGING__CONSOLE_LOGGING"] = "false"
os.environ["NEWSSIEVE_DEBUG"] = "true"


# ============================================================================
# Sample Feed Documents
# ============================================================================

SAMPLE_RSS_FEED = '''<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
    <channel>
        <title>Test RSS Feed</title>
        <link>http://example.com</link>
        <description>Test feed for unit testing</description>
        <item>
            <title>Central bank cuts rates</title>
            <link>http://example.com/article1</link>
            <description>Short description of the rate cut decision</description>
            <content:encoded><![CDATA[<p>The central bank lowered its benchmark rate by 25 basis points on Thursday.</p><p>Markets rallied on the news.</p>]]></content:encoded>
            <pubDate>Thu, 05 Sep 2024 12:00:00 GMT</pubDate>
            <guid>article-1-guid</guid>
        </item>
        <item>
            <title>Local team wins the cup</title>
            <link>http://example.com/article2</link>
            <description>&lt;p&gt;The home side won &lt;strong&gt;3-1&lt;/strong&gt; in the final.&lt;/p&gt;</description>
            <pubDate>Wed, 04 Sep 2024 15:30:00 GMT</pubDate>
            <guid>article-2-guid</guid>
        </item>
    </channel>
</rss>'''

SAMPLE_ATOM_FEED = '''<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
    <title>Test Atom Feed</title>
    <link href="http://example.com"/>
    <id>http://example.com/feed</id>
    <updated>2024-09-07T00:00:01Z</updated>

    <entry>
        <title>Atom Test Article</title>
        <link rel="alternate" href="http://example.com/atom-article"/>
        <link rel="enclosure" href="http://example.com/atom-article.mp3"/>
        <id>http://example.com/atom-article</id>
        <updated>2024-09-05T12:00:00Z</updated>
        <published>2024-09-05T12:00:00Z</published>
        <summary>This is an Atom article summary</summary>
        <content type="html">&lt;p&gt;Full content with &lt;em&gt;formatting&lt;/em&gt;&lt;/p&gt;</content>
    </entry>
</feed>'''


# ============================================================================
# Fakes
# ============================================================================


class FakeOracle:
    """Scripted text oracle.

    ``replies`` is either a list consumed in order or a callable taking the
    prompt. An Exception instance in the list is raised instead of returned.
    """

    provider_name = "fake"

    def __init__(self, replies=None):
        self.replies = replies if replies is not None else []
        self.prompts: List[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if callable(self.replies):
            reply = self.replies(prompt)
        else:
            reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeHttpClient:
    """Serves canned HttpResponses (or raises canned exceptions) by URL.

    A route is ``(status, payload)`` or ``(status, payload, encoding)``; the
    declared encoding defaults to UTF-8 and None means undeclared.
    """

    def __init__(self, routes: Optional[Dict[str, Union[tuple, Exception]]] = None):
        self.routes = routes or {}
        self.requests: List[dict] = []

    def fetch(self, url, timeout=None, max_redirects=None, headers=None, method="GET", body=None):
        from newssieve.ingestion.http_client import HttpResponse

        self.requests.append({"url": url, "timeout": timeout, "headers": headers or {}})
        if url not in self.routes:
            return HttpResponse(status=404, url=url)

        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        status, payload, *rest = route
        encoding = rest[0] if rest else "utf-8"
        if isinstance(payload, str):
            payload = payload.encode(encoding or "utf-8")
        return HttpResponse(status=status, body=payload, url=url, encoding=encoding)

    def fetched_urls(self) -> List[str]:
        return [request["url"] for request in self.requests]


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def settings(tmp_path):
    """Fresh settings with storage and feeds pointed at a temp directory."""
    from newssieve.config.settings import NewsSieveSettings

    test_settings = NewsSieveSettings()
    test_settings.storage.root_dir = str(tmp_path / "app_data")
    test_settings.feeds_file = str(tmp_path / "feeds.yaml")
    test_settings.logging.file_path = None
    return test_settings


@pytest.fixture
def sample_sources():
    """Three feeds across two groups; the second belongs to both."""
    from newssieve.models import FeedSource

    return [
        FeedSource(name="Alpha", url="http://alpha.example.com/rss", groups=[1]),
        FeedSource(name="Beta", url="http://beta.example.com/rss", groups=["1", "2"]),
        FeedSource(name="Gamma", url="http://gamma.example.com/atom", format="atom", groups=[2]),
    ]
