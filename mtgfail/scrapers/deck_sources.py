"""
Deck list retrieval from third-party deck sites.

Each supported host has an adapter that knows its export endpoint:
- tappedout.net serves plain text at "<deck url>?fmt=txt"
- deckbox.org serves an HTML export at "<deck url>/export", normalized
  into canonical text before it is returned

Attempts are sequential with a per-attempt timeout. Network errors and
retryable statuses (5xx, 429) are retried; any other non-200 status fails
at once. Every failure carries a status code for the API layer.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import ClassVar
from urllib.parse import urlsplit, urlunsplit

import httpx

from mtgfail.config import settings
from mtgfail.models.failure import (
    TransientFetchError,
    UnsupportedSourceError,
    UpstreamStatusError,
)
from mtgfail.parsers.deckbox import normalize_export

logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


async def get_with_retry(
    client: httpx.AsyncClient,
    url: str,
    *,
    attempts: int,
    timeout: float,
    retry_delay: float,
) -> str:
    """
    GET a URL, retrying transient failures.

    Args:
        client: HTTP client for requests
        url: URL to fetch
        attempts: Total attempts, at least 1
        timeout: Seconds allowed per attempt, from connect to the last body byte
        retry_delay: Base delay between attempts, grows linearly

    Returns:
        Response body text

    Raises:
        UpstreamStatusError: If the last answer was a non-200 status
        TransientFetchError: If every attempt failed at the transport level
    """
    last_status: int | None = None
    last_error: Exception | None = None

    for attempt in range(1, attempts + 1):
        try:
            # One deadline for the whole attempt, body included
            async with asyncio.timeout(timeout):
                response = await client.get(url, timeout=timeout)
        except (httpx.TransportError, TimeoutError) as e:
            last_error, last_status = e, None
            logger.debug("Attempt %d/%d for %s failed: %s", attempt, attempts, url, e)
        else:
            if response.status_code == 200:
                return response.text

            last_error, last_status = None, response.status_code
            if response.status_code not in RETRYABLE_STATUSES:
                break
            logger.debug(
                "Attempt %d/%d for %s returned %d", attempt, attempts, url, response.status_code
            )

        if attempt < attempts:
            await asyncio.sleep(retry_delay * attempt)

    if last_status is not None:
        logger.error("Unexpected response status %d from %s", last_status, url)
        raise UpstreamStatusError(
            f"Unexpected status {last_status} from upstream",
            upstream_status=last_status,
            detail=url,
        )

    logger.error("Cannot get deck list from %s: %s", url, last_error)
    raise TransientFetchError(
        f"Cannot reach deck source after {attempts} attempts",
        detail=str(last_error),
    )


class DeckSource(ABC):
    """A deck site adapter bound to one deck URL."""

    host: ClassVar[str]

    def __init__(
        self,
        url: str,
        *,
        attempts: int,
        timeout: float,
        retry_delay: float | None = None,
    ):
        if attempts < 1:
            raise ValueError(f"attempts must be at least 1, got {attempts}")
        self.url = url
        self.attempts = attempts
        self.timeout = timeout
        self.retry_delay = settings.fetch_retry_delay if retry_delay is None else retry_delay

    @abstractmethod
    def export_url(self) -> str:
        """URL of the site's export endpoint for this deck."""

    def transform(self, body: str) -> str:
        """Turn the export body into canonical text."""
        return body

    async def fetch(self, client: httpx.AsyncClient) -> str:
        """
        Fetch the deck list as canonical plain text.

        Raises:
            UpstreamStatusError: On a non-200 response after retries
            TransientFetchError: On repeated network failure
            NormalizationError: If the export cannot be normalized
        """
        url = self.export_url()
        logger.debug("Fetching %s deck from %s", self.host, url)
        body = await get_with_retry(
            client,
            url,
            attempts=self.attempts,
            timeout=self.timeout,
            retry_delay=self.retry_delay,
        )
        return self.transform(body)


def _without_query(url: str) -> tuple[str, str, str]:
    parts = urlsplit(url)
    return parts.scheme or "https", parts.netloc, parts.path


class TappedOutSource(DeckSource):
    """tappedout.net, e.g. https://tappedout.net/mtg-decks/22-01-20-kess-storm/"""

    host = "tappedout.net"

    def __init__(
        self,
        url: str,
        *,
        attempts: int | None = None,
        timeout: float | None = None,
        retry_delay: float | None = None,
    ):
        super().__init__(
            url,
            attempts=settings.tappedout_fetch_attempts if attempts is None else attempts,
            timeout=settings.tappedout_timeout if timeout is None else timeout,
            retry_delay=retry_delay,
        )

    def export_url(self) -> str:
        scheme, netloc, path = _without_query(self.url)
        return urlunsplit((scheme, netloc, path, "fmt=txt", ""))


class DeckboxSource(DeckSource):
    """deckbox.org, e.g. https://deckbox.org/sets/2649137"""

    host = "deckbox.org"

    def __init__(
        self,
        url: str,
        *,
        attempts: int | None = None,
        timeout: float | None = None,
        retry_delay: float | None = None,
    ):
        super().__init__(
            url,
            attempts=settings.deckbox_fetch_attempts if attempts is None else attempts,
            timeout=settings.deckbox_timeout if timeout is None else timeout,
            retry_delay=retry_delay,
        )

    def export_url(self) -> str:
        scheme, netloc, path = _without_query(self.url)
        return urlunsplit((scheme, netloc, path.rstrip("/") + "/export", "", ""))

    def transform(self, body: str) -> str:
        return normalize_export(body)


SOURCES: dict[str, type[DeckSource]] = {
    TappedOutSource.host: TappedOutSource,
    DeckboxSource.host: DeckboxSource,
}


def source_for_url(url: str, **options: float | int | None) -> DeckSource:
    """
    Pick the adapter for a deck URL by host.

    Args:
        url: Deck page URL
        **options: attempts, timeout or retry_delay overrides

    Raises:
        UnsupportedSourceError: If no adapter handles the host
    """
    host = (urlsplit(url).hostname or "").lower().removeprefix("www.")
    source_cls = SOURCES.get(host)
    if source_cls is None:
        logger.debug("Unexpected deck host %r for %s", host, url)
        raise UnsupportedSourceError(
            f"Unsupported deck source: {host or url}",
            detail=f"Supported hosts: {', '.join(sorted(SOURCES))}",
        )
    return source_cls(url, **options)  # type: ignore[arg-type]


async def fetch_deck_list(
    url: str,
    client: httpx.AsyncClient | None = None,
    **options: float | int | None,
) -> str:
    """
    Fetch a deck list from a supported site as canonical plain text.

    Args:
        url: Deck page URL
        client: Optional httpx client for connection reuse
        **options: attempts, timeout or retry_delay overrides

    Raises:
        UnsupportedSourceError: Unknown host, no request is made
        UpstreamStatusError, TransientFetchError, NormalizationError
    """
    source = source_for_url(url, **options)

    if client:
        return await source.fetch(client)

    async with httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    ) as client:
        return await source.fetch(client)
