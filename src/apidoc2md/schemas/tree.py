"""Markdown document tree models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NodeType(str, Enum):
    """Kinds of nodes in a Markdown document tree."""

    ROOT = "root"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    DELETE = "delete"
    INLINE_CODE = "inline_code"
    BREAK = "break"
    LINK = "link"
    LINK_REFERENCE = "link_reference"
    IMAGE = "image"
    DEFINITION = "definition"
    HTML = "html"
    CODE = "code"
    BLOCKQUOTE = "blockquote"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    TABLE_ROW = "table_row"
    TABLE_CELL = "table_cell"
    THEMATIC_BREAK = "thematic_break"


@dataclass(eq=False)
class Node:
    """A mutable node of a Markdown document tree.

    Only the payload fields relevant to ``type`` are populated:

    - ``value``: text, inline code, code block and HTML content
    - ``depth``: heading level (1-6)
    - ``url`` / ``title``: links, images and definitions
    - ``label``: normalized reference id of link references and definitions
    - ``alt``: image alternative text
    - ``lang``: info string of fenced code blocks
    - ``ordered`` / ``start`` / ``spread``: lists
    - ``align``: per-column alignment of tables

    Nodes compare by identity so that the same node can be located and
    removed from its parent's children.
    """

    type: NodeType
    children: list[Node] = field(default_factory=list)
    value: str | None = None
    depth: int | None = None
    url: str | None = None
    title: str | None = None
    label: str | None = None
    alt: str | None = None
    lang: str | None = None
    ordered: bool = False
    start: int | None = None
    spread: bool = False
    align: list[str | None] = field(default_factory=list)

    def __repr__(self) -> str:
        details = f" {self.value!r}" if self.value is not None else ""
        return f"Node({self.type.value}{details}, children={len(self.children)})"
