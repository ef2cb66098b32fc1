"""Tests for heading slugs."""

from __future__ import annotations

import pytest

from apidoc2md.slugger import Slugger, slugify


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("File system", "file-system"),
            ("Class: fs.Stats", "class-fsstats"),
            ("fs.readFile(path[, options], callback)", "fsreadfilepath-options-callback"),
            ("Event: 'close'", "event-close"),
            ("  Padded  ", "padded"),
            ("snake_case-name", "snake_case-name"),
        ],
    )
    def test_github_style(self, title: str, expected: str) -> None:
        """Titles are lowercased, punctuation dropped and spaces dashed."""
        assert slugify(title) == expected


class TestSlugger:
    """Tests for Slugger."""

    def test_repeated_titles_get_suffixes(self) -> None:
        """Duplicates get -1, -2 in order of appearance."""
        slugger = Slugger()
        assert [slugger.slug("Options") for _ in range(3)] == ["options", "options-1", "options-2"]

    def test_suffix_does_not_collide_with_real_title(self) -> None:
        """A generated suffix skips slugs already handed out."""
        slugger = Slugger()
        assert slugger.slug("foo-1") == "foo-1"
        assert slugger.slug("foo") == "foo"
        assert slugger.slug("foo") == "foo-2"

    def test_instances_are_independent(self) -> None:
        """Separate sluggers never see each other's slugs."""
        assert Slugger().slug("a") == Slugger().slug("a") == "a"
