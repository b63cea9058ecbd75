"""GitHub REST transport for release and tag listings.

Fetches a URL and hands back a :class:`FileResult`, the same shape any other
transport would produce. Listing URLs are followed across ``Link`` pages and
their arrays concatenated, so downstream code sees one JSON payload.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

from requests.utils import parse_header_links

from constants import Constants, EndpointKind
from common.http_client import robust_get
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer
from .errors import TransportError
from .models import FileResult

logger = logging.getLogger(__name__)

_LISTING_NAMES = {kind.value for kind in EndpointKind}


def _last_segment(url: str) -> str:
    path = urlsplit(url).path.rstrip("/")
    return path.rsplit("/", 1)[-1]


def _next_link(headers) -> Optional[str]:
    link = headers.get("Link") if headers else None
    if not link:
        return None
    for entry in parse_header_links(link):
        if entry.get("rel") == "next" and entry.get("url"):
            return entry["url"]
    return None


class GitHubClient:
    """Lightweight REST client for GitHub listing endpoints.

    Authentication is optional; the token, when given, is sent as a bearer
    header and never placed in the URL.
    """

    def __init__(self, token: Optional[str] = None):
        self.token = token

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers including authorization if token is available."""
        headers = {
            "Accept": Constants.GITHUB_ACCEPT,
            "User-Agent": Constants.USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def __call__(self, url: str) -> FileResult:
        return self.fetch(url)

    def fetch(self, url: str) -> FileResult:
        """Fetch ``url`` and return its body as a file result.

        Raises:
            TransportError: request failed, non-200 status, or body too large.
        """
        filename = _last_segment(url)
        if filename in _LISTING_NAMES:
            return self._fetch_listing(url, filename)
        _, body = self._get(url)
        return FileResult(filename=filename, content=body)

    def _get(self, url: str):
        status, headers, body = robust_get(url, headers=self._get_headers())
        if status == 0:
            raise TransportError(body.decode("utf-8", "replace"))
        if status != 200:
            raise TransportError(self._status_message(url, status, headers), status_code=status)
        if len(body) > Constants.MAX_RESPONSE_BYTES:
            raise TransportError(
                f"response from {safe_url(url)} exceeds {Constants.MAX_RESPONSE_BYTES} bytes",
                status_code=status,
            )
        return headers, body

    @staticmethod
    def _status_message(url: str, status: int, headers) -> str:
        if status in (403, 429) and headers.get("X-RateLimit-Remaining") == "0":
            reset = headers.get("X-RateLimit-Reset", "unknown")
            return (
                f"GitHub API rate limit exceeded for {safe_url(url)} (resets at {reset}); "
                "configure a token to raise the limit"
            )
        return f"GET {safe_url(url)} returned HTTP {status}"

    def _fetch_listing(self, url: str, filename: str) -> FileResult:
        """Fetch every page of a listing endpoint.

        A page that is not a JSON array stops pagination and is returned
        verbatim so the normalizer can report it.
        """
        separator = "&" if urlsplit(url).query else "?"
        current_url: Optional[str] = f"{url}{separator}per_page={Constants.REPO_API_PER_PAGE}"
        entries: List[Any] = []
        pages = 0

        with Timer() as t:
            while current_url and pages < Constants.MAX_LISTING_PAGES:
                headers, body = self._get(current_url)
                pages += 1
                try:
                    page = json.loads(body)
                except ValueError:
                    page = None
                if not isinstance(page, list):
                    return FileResult(filename=filename, content=body)
                entries.extend(page)
                current_url = _next_link(headers)

        if current_url:
            logger.warning(
                "Listing %s truncated after %d pages",
                safe_url(url),
                Constants.MAX_LISTING_PAGES,
            )
        if is_debug_enabled(logger):
            logger.debug(
                "Fetched listing",
                extra=extra_context(
                    event="listing_fetched",
                    component="github_client",
                    target=safe_url(url),
                    pages=pages,
                    entries=len(entries),
                    duration_ms=t.duration_ms(),
                )
            )
        return FileResult(filename=filename, content=json.dumps(entries))
