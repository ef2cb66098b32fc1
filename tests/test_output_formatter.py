"""Tests for output formatting."""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from apidoc2md.output_formatter import entries_to_json, format_entries
from apidoc2md.parser import parse_api_doc
from apidoc2md.schemas import ApiDocMetadataEntry, ApiDocument

TEXT = "# fs\n> Stability: 2 - Stable\n\nIntro\n## `fs.readFile(path)`\nReads.\n"


@pytest.fixture
def entries() -> list[ApiDocMetadataEntry]:
    return asyncio.run(parse_api_doc(ApiDocument(path="doc/api/fs.md", text=TEXT)))


class TestFormatEntries:
    """Tests for format_entries."""

    def test_content(self, entries: list[ApiDocMetadataEntry]) -> None:
        """Entries are rendered with headings and stability lines."""
        with patch("apidoc2md.output_formatter.tiktoken", None):
            result = format_entries(entries)

        assert result.content == (
            "# fs\n\n> Stability: 2 - Stable\n\nIntro\n\n## fs.readFile(path)\n\nReads."
        )

    def test_summary(self, entries: list[ApiDocMetadataEntry]) -> None:
        """The summary lists APIs, counts and stability information."""
        with patch("apidoc2md.output_formatter.tiktoken", None):
            result = format_entries(entries)

        assert result.summary == "APIs: fs\nEntries: 2\nEntries with stability index: 1"

    def test_sections_tree(self, entries: list[ApiDocMetadataEntry]) -> None:
        """Deeper headings are indented under their parents."""
        with patch("apidoc2md.output_formatter.tiktoken", None):
            result = format_entries(entries)

        assert result.sections_tree == "Sections:\nfs\n    fs.readFile(path)"

    def test_table_of_contents(self, entries: list[ApiDocMetadataEntry]) -> None:
        """The optional table of contents links every entry slug."""
        with patch("apidoc2md.output_formatter.tiktoken", None):
            result = format_entries(entries, include_toc=True)

        assert result.content.startswith(
            "## Contents\n- [fs](#fs)\n  - [fs.readFile(path)](#fsreadfilepath)\n\n# fs"
        )

    def test_token_estimate(self, entries: list[ApiDocMetadataEntry]) -> None:
        """The token estimate is appended when tiktoken is available."""
        fake_tiktoken = MagicMock()
        fake_tiktoken.get_encoding.return_value.encode.return_value = [0] * 1500

        with patch("apidoc2md.output_formatter.tiktoken", fake_tiktoken):
            result = format_entries(entries)

        assert result.summary.endswith("Estimated tokens: 1.5k")

    def test_no_entries(self) -> None:
        """An empty entry list still produces a summary."""
        with patch("apidoc2md.output_formatter.tiktoken", None):
            result = format_entries([])

        assert result.summary == "Entries: 0"
        assert result.content == ""


class TestEntriesToJson:
    """Tests for entries_to_json."""

    def test_serializes_entries(self, entries: list[ApiDocMetadataEntry]) -> None:
        """Entries become plain dicts with Markdown content."""
        data = entries_to_json(entries)

        assert [item["slug"] for item in data] == ["fs", "fsreadfilepath"]
        assert data[0]["stability"] == {"index": 2.0, "description": "Stable"}
        assert data[0]["content"] == "Intro"
        assert data[1]["heading_type"] == "method"
        assert data[1]["name"] == "readFile"
