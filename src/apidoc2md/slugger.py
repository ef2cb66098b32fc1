"""GitHub-style anchor slugs for headings."""

from __future__ import annotations

import re

_STRIP_RE = re.compile(r"[^\w\- ]", re.UNICODE)


def slugify(value: str) -> str:
    """Turn a heading title into a URL-safe anchor (``Class: Foo`` -> ``class-foo``)."""
    return _STRIP_RE.sub("", value.strip().lower()).replace(" ", "-")


class Slugger:
    """Hands out slugs that are unique for the lifetime of the instance.

    Repeated titles get a numeric suffix in order of appearance (``foo``,
    ``foo-1``, ``foo-2``), so one instance must be shared by every heading of
    a document and never across documents.
    """

    def __init__(self) -> None:
        self._occurrences: dict[str, int] = {}

    def slug(self, value: str) -> str:
        base = slugify(value)
        candidate = base
        while candidate in self._occurrences:
            self._occurrences[base] += 1
            candidate = f"{base}-{self._occurrences[base]}"
        self._occurrences[candidate] = 0
        return candidate
