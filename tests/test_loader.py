"""Tests for resolving API doc sources."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from apidoc2md.exceptions import DocumentNotFoundError, ResolutionError
from apidoc2md.loader import fetch_api_doc, is_url, load_api_doc, resolve_api_doc
from apidoc2md.schemas import ApiDocument

URL = "https://example.com/doc/api/fs.md"


class TestIsUrl:
    """Tests for is_url."""

    @pytest.mark.parametrize("source", ["https://example.com/fs.md", "HTTP://example.com/fs.md"])
    def test_urls(self, source: str) -> None:
        """http(s) sources are URLs."""
        assert is_url(source)

    @pytest.mark.parametrize("source", ["doc/api/fs.md", "/abs/fs.md", "ftp://example.com/fs.md"])
    def test_paths(self, source: str) -> None:
        """Anything else is treated as a local path."""
        assert not is_url(source)


class TestLoadApiDoc:
    """Tests for load_api_doc."""

    @pytest.mark.asyncio
    async def test_reads_file(self, tmp_path: Path) -> None:
        """Reads the document and keeps its path."""
        path = tmp_path / "fs.md"
        path.write_text("# fs\n", encoding="utf-8")

        document = await load_api_doc(path)

        assert document == ApiDocument(path=str(path), text="# fs\n")
        assert document.name == "fs"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a resolution error."""
        with pytest.raises(ResolutionError, match="Could not read API doc"):
            await load_api_doc(tmp_path / "missing.md")

    @pytest.mark.asyncio
    async def test_undecodable_file(self, tmp_path: Path) -> None:
        """Bytes that are not valid text are a resolution error."""
        path = tmp_path / "binary.md"
        path.write_bytes(b"\xff\xfe\xfa")

        with pytest.raises(ResolutionError):
            await load_api_doc(path)


class TestFetchApiDoc:
    """Tests for fetch_api_doc."""

    @pytest.mark.asyncio
    async def test_fetches_and_caches(self, tmp_path: Path) -> None:
        """The first fetch hits the network and fills the cache."""
        with (
            patch("apidoc2md.loader.APIDOC2MD_CACHE_PATH", tmp_path),
            patch(
                "apidoc2md.loader.fetch_text_with_retries", new=AsyncMock(return_value="# fs\n")
            ) as mock_fetch,
        ):
            document = await fetch_api_doc(URL)
            again = await fetch_api_doc(URL)

        assert document == ApiDocument(path=URL, text="# fs\n")
        assert again == document
        assert mock_fetch.await_count == 1
        assert len(list(tmp_path.iterdir())) == 1

    @pytest.mark.asyncio
    async def test_bypasses_cache(self, tmp_path: Path) -> None:
        """use_cache=False always refetches."""
        with (
            patch("apidoc2md.loader.APIDOC2MD_CACHE_PATH", tmp_path),
            patch(
                "apidoc2md.loader.fetch_text_with_retries", new=AsyncMock(return_value="# fs\n")
            ) as mock_fetch,
        ):
            await fetch_api_doc(URL, use_cache=False)
            await fetch_api_doc(URL, use_cache=False)

        assert mock_fetch.await_count == 2

    @pytest.mark.asyncio
    async def test_stale_cache_is_refetched(self, tmp_path: Path) -> None:
        """Cached copies older than the TTL are ignored."""
        with (
            patch("apidoc2md.loader.APIDOC2MD_CACHE_PATH", tmp_path),
            patch("apidoc2md.loader.APIDOC2MD_CACHE_TTL_SECONDS", 1),
            patch("apidoc2md.loader.is_cache_fresh", return_value=False),
            patch(
                "apidoc2md.loader.fetch_text_with_retries", new=AsyncMock(return_value="new")
            ) as mock_fetch,
        ):
            document = await fetch_api_doc(URL)

        assert document.text == "new"
        mock_fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cache_write_failure(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A cache that cannot be written is logged and the document still returned."""
        with (
            patch("apidoc2md.loader.APIDOC2MD_CACHE_PATH", tmp_path),
            patch(
                "apidoc2md.loader.fetch_text_with_retries",
                new=AsyncMock(return_value="# fs"),
            ),
            patch(
                "apidoc2md.loader.write_text_async",
                new=AsyncMock(side_effect=PermissionError("read-only")),
            ),
            caplog.at_level(logging.WARNING, logger="apidoc2md.loader"),
        ):
            document = await fetch_api_doc(URL)

        assert document == ApiDocument(path=URL, text="# fs")
        assert "Could not cache" in caplog.text
        assert "read-only" in caplog.text

    @pytest.mark.asyncio
    async def test_propagates_not_found(self, tmp_path: Path) -> None:
        """Fetch errors propagate and nothing is cached."""
        with (
            patch("apidoc2md.loader.APIDOC2MD_CACHE_PATH", tmp_path),
            patch(
                "apidoc2md.loader.fetch_text_with_retries",
                new=AsyncMock(side_effect=DocumentNotFoundError("API document not found")),
            ),
        ):
            with pytest.raises(DocumentNotFoundError):
                await fetch_api_doc(URL)

        assert list(tmp_path.iterdir()) == []


class TestResolveApiDoc:
    """Tests for resolve_api_doc."""

    @pytest.mark.asyncio
    async def test_local_path(self, tmp_path: Path) -> None:
        """Paths resolve through the filesystem."""
        path = tmp_path / "fs.md"
        path.write_text("# fs\n", encoding="utf-8")

        document = await resolve_api_doc(str(path))

        assert document.text == "# fs\n"

    @pytest.mark.asyncio
    async def test_url(self) -> None:
        """URLs resolve through fetch_api_doc."""
        expected = ApiDocument(path=URL, text="# fs\n")
        with patch("apidoc2md.loader.fetch_api_doc", new=AsyncMock(return_value=expected)) as mock_fetch:
            document = await resolve_api_doc(URL, use_cache=False)

        assert document is expected
        mock_fetch.assert_awaited_once_with(URL, use_cache=False)
