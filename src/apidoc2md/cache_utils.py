"""Cache utilities for storing fetched API documents locally."""

from __future__ import annotations

import asyncio
import hashlib
import re
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import urlsplit

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]+")


def is_cache_fresh(path: Path, ttl_seconds: int) -> bool:
    """Check if a cached file is still fresh based on its modification time.

    Args:
        path: Path to the cached file.
        ttl_seconds: Time-to-live in seconds. If <= 0, cache is considered
            fresh indefinitely (cache forever mode).

    Returns:
        True if the cache is fresh and usable, False otherwise.
    """
    if not path.exists():
        return False
    if ttl_seconds <= 0:
        return True
    mtime = datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    age_seconds = (datetime.now(timezone.utc) - mtime).total_seconds()
    return age_seconds <= ttl_seconds


def cache_path_for(url: str, base_path: Path) -> Path:
    """Get the cache file path for a remote API document.

    The file name keeps the last path segment of the URL for readability and
    prefixes it with a short digest of the full URL, so two documents with the
    same name on different hosts never collide.

    Args:
        url: The document URL.
        base_path: The base cache directory path.

    Returns:
        Path to the cache file for this URL.
    """
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()[:16]
    name = Path(urlsplit(url).path).name or "index"
    safe_name = _UNSAFE_CHARS_RE.sub("_", name)
    return base_path / f"{digest}__{safe_name}"


async def read_text_async(path: Path, encoding: str = "utf-8") -> str:
    """Read text from a file asynchronously using a thread pool."""
    return await asyncio.to_thread(path.read_text, encoding=encoding)


async def write_text_async(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Write text to a file asynchronously using a thread pool."""
    await asyncio.to_thread(path.write_text, content, encoding=encoding)


async def mkdir_async(
    path: Path, parents: bool = False, exist_ok: bool = False
) -> None:
    """Create a directory asynchronously using a thread pool."""
    await asyncio.to_thread(path.mkdir, parents=parents, exist_ok=exist_ok)
