"""
HTTP Transport
==============

Thin requests wrapper shared by the feed reader and the detail-page
extractor. Redirects are followed up to a cap; a non-2xx status is returned
to the caller, never raised. Network failures raise TransportError.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

import requests
from requests.adapters import HTTPAdapter

from ..config.settings import get_settings
from ..utils.exceptions import TransportError, ErrorCode
from ..utils.logging import get_logger_for_component


FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml"
HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


@dataclass
class HttpResponse:
    """Status, headers and raw body of one HTTP exchange.

    ``encoding`` is the charset the server declared; ``detected_encoding`` is
    a guess from the bytes, used only when nothing was declared.
    """

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    url: str = ""
    encoding: Optional[str] = None
    detected_encoding: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == 200

    @property
    def text(self) -> str:
        """Body decoded with the declared or detected charset, falling back to UTF-8."""
        try:
            return self.body.decode(self.encoding or self.detected_encoding or "utf-8", errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")


class HttpClient:
    """Blocking HTTP client with per-call timeout and redirect cap."""

    def __init__(self, settings=None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.logger = get_logger_for_component("http_client")

        self.session = session or requests.Session()
        # No automatic retries; failure isolation happens in the pipeline.
        adapter = HTTPAdapter(max_retries=0)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": self.settings.processing.user_agent})

    def fetch(
        self,
        url: str,
        timeout: Optional[float] = None,
        max_redirects: Optional[int] = None,
        headers: Optional[Dict[str, str]] = None,
        method: str = "GET",
        body: Optional[bytes] = None,
    ) -> HttpResponse:
        """Perform one request.

        Args:
            url: Target URL
            timeout: Seconds before giving up; settings default when None
            max_redirects: Redirects to follow; settings default when None
            headers: Extra request headers
            method: HTTP method
            body: Request payload

        Returns:
            HttpResponse for the final hop

        Raises:
            TransportError: On connection failure, timeout or redirect overflow
        """
        timeout = timeout or self.settings.processing.request_timeout
        if max_redirects is None:
            max_redirects = self.settings.processing.max_redirects

        self.session.max_redirects = max_redirects
        try:
            response = self.session.request(
                method.upper(),
                url,
                headers=headers,
                data=body,
                timeout=timeout,
                allow_redirects=True,
            )
        except requests.TooManyRedirects as e:
            raise TransportError(
                f"Too many redirects (>{max_redirects}) for {url}",
                url=url,
                error_code=ErrorCode.FEED_TOO_MANY_REDIRECTS,
            ) from e
        except requests.Timeout as e:
            raise TransportError(
                f"Request to {url} timed out after {timeout}s",
                url=url,
                error_code=ErrorCode.FEED_FETCH_TIMEOUT,
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        self.logger.debug(
            f"{method.upper()} {url} -> {response.status_code} "
            f"({len(response.content)} bytes, {len(response.history)} redirects)"
        )
        # requests assumes ISO-8859-1 for text/* without a charset
        content_type = response.headers.get("Content-Type", "")
        encoding = response.encoding if "charset" in content_type.lower() else None

        return HttpResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=response.content,
            url=response.url,
            encoding=encoding,
            detected_encoding=None if encoding else response.apparent_encoding,
        )

    def close(self) -> None:
        self.session.close()
