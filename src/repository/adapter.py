"""Pipeline glue between a fetch transport and the listing normalizer.

The transport knows nothing about releases: it returns a file result for
whatever URL it was asked for. :class:`ListingAdapter` recognises the file
that is the listing endpoint response and swaps it for a list result of
normalized candidates; every other result passes through untouched.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from common.logging_utils import extra_context, safe_url, Timer
from .config import ForgeSourceConfig
from .errors import ConfigurationError, MalformedResponse
from .github import GitHubClient
from .models import Candidate, FetchResult, FileResult, ListResult
from .normalizer import decode_payload, normalize

logger = logging.getLogger(__name__)

FetchFunction = Callable[[str], FetchResult]


class ListingAdapter:
    """Turns the listing endpoint response into a candidate list."""

    def __init__(self, config: ForgeSourceConfig):
        self.config = config

    def is_listing(self, result: FetchResult) -> bool:
        """True when ``result`` is the raw response of the active listing endpoint."""
        return (
            isinstance(result, FileResult)
            and result.filename == self.config.endpoint_kind.value
        )

    def maybe_normalize(self, result: FetchResult) -> FetchResult:
        """Normalize the listing response; pass anything else through."""
        if not self.is_listing(result):
            return result
        payload = decode_payload(content=result.content, path=result.path)
        candidates = normalize(
            self.config.endpoint_kind,
            payload,
            self.config.version_pattern,
            self.config.asset_policy,
        )
        return ListResult(candidates=candidates)

    def wrap_fetch(self, fetch: FetchFunction) -> FetchFunction:
        """Compose a transport fetch function with :meth:`maybe_normalize`."""
        def fetch_and_normalize(url: str) -> FetchResult:
            return self.maybe_normalize(fetch(url))
        return fetch_and_normalize


class ReleasePipeline:
    """Fetch, normalize and order the candidates of one forge source."""

    def __init__(self, config: ForgeSourceConfig, fetch: Optional[FetchFunction] = None):
        self.config = config
        self.adapter = ListingAdapter(config)
        self.fetch = self.adapter.wrap_fetch(fetch or GitHubClient(token=config.token))

    def candidates(self) -> List[Candidate]:
        """All candidates in preference order.

        Raises:
            MalformedResponse: the listing could not be normalized.
            ConfigurationError: a custom prefer policy returned a non-list.
            TransportError: the reference transport failed to fetch it.
        """
        url = self.config.listing_url
        logger.info("Fetching %s for %s", self.config.endpoint_kind.value, self.config.ref.slug)
        with Timer() as t:
            result = self.fetch(url)
        if not isinstance(result, ListResult):
            raise MalformedResponse(
                f"response for {safe_url(url)} was not recognised as a "
                f"{self.config.endpoint_kind.value} listing"
            )
        ranked = self.config.prefer_policy(list(result.candidates))
        if not isinstance(ranked, (list, tuple)):
            raise ConfigurationError(
                f"prefer policy must return a list of candidates, got {type(ranked).__name__}"
            )
        ordered = list(ranked)
        logger.info(
            "Found %d candidate(s) for %s",
            len(ordered),
            self.config.ref.slug,
            extra=extra_context(
                event="candidates",
                component="pipeline",
                repo=self.config.ref.slug,
                endpoint=self.config.endpoint_kind.value,
                count=len(ordered),
                duration_ms=t.duration_ms(),
            )
        )
        return ordered

    def select(self) -> Optional[Candidate]:
        """The preferred candidate, or None when the listing is empty."""
        ordered = self.candidates()
        return ordered[0] if ordered else None
