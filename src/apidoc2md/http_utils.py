"""HTTP utilities for fetching API documents with retry logic and connection pooling."""

from __future__ import annotations

import asyncio
import logging
from typing import Final

import httpx

from apidoc2md.config import (
    APIDOC2MD_FETCH_BACKOFF_S,
    APIDOC2MD_FETCH_MAX_RETRIES,
    APIDOC2MD_FETCH_TIMEOUT_S,
    APIDOC2MD_USER_AGENT,
)
from apidoc2md.exceptions import DocumentNotFoundError, FetchError, RateLimitError

logger = logging.getLogger(__name__)

RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429, 500, 502, 503, 504})

_MAX_REDIRECTS: Final[int] = 5


async def fetch_text_with_retries(
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    max_retries: int = APIDOC2MD_FETCH_MAX_RETRIES,
    backoff_s: float = APIDOC2MD_FETCH_BACKOFF_S,
) -> str:
    """Fetch a text document from a URL, retrying transient failures.

    Args:
        url: The URL to fetch.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        max_retries: Number of retries after the first attempt.
        backoff_s: Base delay for the exponential backoff between attempts.

    Returns:
        The decoded response body.

    Raises:
        DocumentNotFoundError: If the server answers 404.
        RateLimitError: If the last attempt was answered with 429.
        FetchError: If the fetch fails after all retries.
    """
    timeout = httpx.Timeout(APIDOC2MD_FETCH_TIMEOUT_S)
    headers = {"User-Agent": APIDOC2MD_USER_AGENT}

    async def do_fetch(http_client: httpx.AsyncClient) -> str:
        last_exc: Exception | None = None

        for attempt in range(max_retries + 1):
            try:
                response = await http_client.get(url)

                if response.status_code == 404:
                    raise DocumentNotFoundError(f"API document not found at {url}")

                if response.status_code == 429:
                    last_exc = RateLimitError(f"Rate limited by {url}")
                elif response.status_code in RETRY_STATUS_CODES:
                    last_exc = FetchError(f"HTTP {response.status_code} from {url}")
                else:
                    response.raise_for_status()
                    return response.text
            except (httpx.RequestError, httpx.HTTPStatusError) as exc:
                last_exc = exc

            if attempt < max_retries:
                backoff = backoff_s * (2**attempt)
                logger.debug(
                    "Retrying %s in %.2fs after attempt %d failed: %s",
                    url,
                    backoff,
                    attempt + 1,
                    last_exc,
                )
                await asyncio.sleep(backoff)

        if isinstance(last_exc, RateLimitError):
            raise last_exc
        raise FetchError(f"Failed to fetch {url}: {last_exc}") from last_exc

    if client is not None:
        return await do_fetch(client)

    async with httpx.AsyncClient(
        timeout=timeout,
        headers=headers,
        follow_redirects=True,
        max_redirects=_MAX_REDIRECTS,
    ) as new_client:
        return await do_fetch(new_client)
