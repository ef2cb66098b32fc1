"""Lazily rendered section content."""

from __future__ import annotations

from apidoc2md import markdown
from apidoc2md.schemas.tree import Node


class ApiDocContent:
    """Transformed content tree of one API doc entry.

    The tree is only serialized back to Markdown when asked for, so parsing a
    large document does not stringify every section up front.
    """

    __slots__ = ("_tree",)

    def __init__(self, tree: Node) -> None:
        self._tree = tree

    @property
    def tree(self) -> Node:
        return self._tree

    @property
    def is_empty(self) -> bool:
        return not self._tree.children

    def to_markdown(self) -> str:
        """Serialize the content tree to Markdown."""
        return markdown.stringify(self._tree)

    def __str__(self) -> str:
        return self.to_markdown()

    def __repr__(self) -> str:
        return f"ApiDocContent(children={len(self._tree.children)})"
