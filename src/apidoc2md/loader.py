"""Resolve API doc sources (local files or URLs) into ApiDocuments."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Awaitable

import httpx

from apidoc2md.cache_utils import (
    cache_path_for,
    is_cache_fresh,
    mkdir_async,
    read_text_async,
    write_text_async,
)
from apidoc2md.config import APIDOC2MD_CACHE_PATH, APIDOC2MD_CACHE_TTL_SECONDS
from apidoc2md.exceptions import ResolutionError
from apidoc2md.http_utils import fetch_text_with_retries
from apidoc2md.schemas import ApiDocument

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def is_url(source: str) -> bool:
    return bool(_URL_RE.match(source))


async def load_api_doc(path: str | Path, *, encoding: str = "utf-8") -> ApiDocument:
    """Read an API doc from the local filesystem.

    Raises:
        ResolutionError: If the file is missing, unreadable or not valid text.
    """
    file_path = Path(path)
    try:
        text = await read_text_async(file_path, encoding=encoding)
    except (OSError, UnicodeDecodeError) as exc:
        raise ResolutionError(f"Could not read API doc {file_path}: {exc}") from exc
    return ApiDocument(path=str(file_path), text=text)


async def fetch_api_doc(
    url: str,
    *,
    use_cache: bool = True,
    client: httpx.AsyncClient | None = None,
) -> ApiDocument:
    """Fetch an API doc over HTTP and cache it locally.

    Args:
        url: URL of the raw Markdown document.
        use_cache: Whether to use a cached copy younger than the cache TTL.
        client: Optional shared httpx.AsyncClient.

    Returns:
        The fetched document, identified by its URL.

    Raises:
        DocumentNotFoundError: If the server answers 404.
        FetchError: If the document cannot be fetched after retries.
    """
    cache_path = cache_path_for(url, APIDOC2MD_CACHE_PATH)

    if use_cache and is_cache_fresh(cache_path, APIDOC2MD_CACHE_TTL_SECONDS):
        logger.debug("Using cached copy of %s", url)
        return ApiDocument(path=url, text=await read_text_async(cache_path))

    text = await fetch_text_with_retries(url, client=client)
    try:
        await mkdir_async(cache_path.parent, parents=True, exist_ok=True)
        await write_text_async(cache_path, text)
    except OSError as exc:
        logger.warning("Could not cache %s at %s: %s", url, cache_path, exc)
    return ApiDocument(path=url, text=text)


def resolve_api_doc(source: str, *, use_cache: bool = True) -> Awaitable[ApiDocument]:
    """Return a pending resolution of a path or URL, for ``parse_api_doc``."""
    if is_url(source):
        return fetch_api_doc(source, use_cache=use_cache)
    return load_api_doc(source)
