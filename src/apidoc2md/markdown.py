"""Parse Markdown into a document tree and serialize it back with a custom serializer."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from apidoc2md.exceptions import ParseError
from apidoc2md.schemas.tree import Node, NodeType

logger = logging.getLogger(__name__)

# CommonMark plus the GFM table and strikethrough extensions. Labels and
# definitions are kept so reference links can be resolved on the tree.
_MARKDOWN_IT = MarkdownIt(
    "commonmark", {"store_labels": True, "inline_definitions": True}
).enable(["table", "strikethrough"])

_INLINE_TYPES = frozenset(
    {
        NodeType.TEXT,
        NodeType.EMPHASIS,
        NodeType.STRONG,
        NodeType.DELETE,
        NodeType.INLINE_CODE,
        NodeType.BREAK,
        NodeType.LINK,
        NodeType.LINK_REFERENCE,
        NodeType.IMAGE,
    }
)

_ALIGN_RE = re.compile(r"text-align:\s*(left|right|center)")
_ESCAPE_RE = re.compile(r"([\\`*\[\]<~]|&(?=#?\w+;)|(?<![\w])_|_(?![\w]))")
# Brackets that cannot open a link stay unescaped: `[x]` not followed by `(`, `[` or `:`.
_PLAIN_BRACKETS_RE = re.compile(r"\[[^\[\]\\]*\](?![(\[:])")
# Line starts that would open a block: headings, quotes, bullets, ordered
# list markers and setext underlines.
_LINE_START_ESCAPE_RE = re.compile(
    r"^(?:(?P<mark>[#>])|(?P<bullet>[-+])(?=[ \t]|$)|(?P<number>\d{1,9})(?P<delim>[.)])(?=[ \t]|$)"
    r"|(?P<underline>(?:=+|-+)[ \t]*$))",
    re.MULTILINE,
)
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_BACKTICK_RUN_RE = re.compile(r"`+")


def parse_markdown(text: str) -> Node:
    """Parse Markdown text into a document tree rooted at a ``root`` node."""
    try:
        tokens = _MARKDOWN_IT.parse(text, {})
        syntax_tree = SyntaxTreeNode(tokens)
    except ValueError as exc:
        raise ParseError(f"Could not build a document tree: {exc}") from exc
    return Node(NodeType.ROOT, children=_convert_blocks(syntax_tree.children))


def run_transforms(tree: Node) -> Node:
    """Normalize a document tree in place and return it.

    Adjacent text runs are merged, paragraphs left empty by earlier edits are
    dropped and table rows are padded or truncated to the header width.
    """
    _normalize(tree)
    return tree


def stringify(tree: Node) -> str:
    """Serialize a document tree (or any subtree) back to Markdown."""
    if tree.type in _INLINE_TYPES:
        return _serialize_inline(tree)
    if tree.type is NodeType.ROOT:
        return _serialize_flow(tree.children)
    return _serialize_block(tree)


def _convert_blocks(nodes: Iterable[SyntaxTreeNode]) -> list[Node]:
    blocks: list[Node] = []
    for node in nodes:
        converted = _convert_block(node)
        if converted is not None:
            blocks.append(converted)
    return blocks


def _convert_block(node: SyntaxTreeNode) -> Node | None:
    kind = node.type

    if kind == "heading":
        return Node(
            NodeType.HEADING,
            depth=int(node.tag[1]),
            children=_convert_inline_container(node),
        )

    if kind == "paragraph":
        return Node(NodeType.PARAGRAPH, children=_convert_inline_container(node))

    if kind == "blockquote":
        return Node(NodeType.BLOCKQUOTE, children=_convert_blocks(node.children))

    if kind in {"bullet_list", "ordered_list"}:
        ordered = kind == "ordered_list"
        start = int(node.attrs.get("start", 1)) if ordered else None
        items = [
            Node(NodeType.LIST_ITEM, children=_convert_blocks(item.children))
            for item in node.children
        ]
        return Node(
            NodeType.LIST,
            ordered=ordered,
            start=start,
            spread=_is_loose_list(node),
            children=items,
        )

    if kind in {"fence", "code_block"}:
        lang = node.info.strip() if kind == "fence" else ""
        return Node(
            NodeType.CODE,
            value=node.content.rstrip("\n"),
            lang=lang or None,
        )

    if kind == "html_block":
        return Node(NodeType.HTML, value=node.content.rstrip("\n"))

    if kind == "hr":
        return Node(NodeType.THEMATIC_BREAK)

    if kind == "definition":
        return Node(
            NodeType.DEFINITION,
            label=node.meta.get("label") or node.meta.get("id"),
            url=node.meta.get("url", ""),
            title=node.meta.get("title") or None,
        )

    if kind == "table":
        return _convert_table(node)

    logger.debug("Skipping unsupported block token %s", kind)
    return None


def _is_loose_list(node: SyntaxTreeNode) -> bool:
    for item in node.children:
        for child in item.children:
            if child.type == "paragraph" and not child.hidden:
                return True
    return False


def _convert_table(node: SyntaxTreeNode) -> Node:
    rows: list[Node] = []
    align: list[str | None] = []
    for section in node.children:
        for row in section.children:
            cells: list[Node] = []
            for cell in row.children:
                if not rows:
                    match = _ALIGN_RE.search(str(cell.attrs.get("style", "")))
                    align.append(match.group(1) if match else None)
                cells.append(
                    Node(NodeType.TABLE_CELL, children=_convert_inline_container(cell))
                )
            rows.append(Node(NodeType.TABLE_ROW, children=cells))
    return Node(NodeType.TABLE, align=align, children=rows)


def _convert_inline_container(node: SyntaxTreeNode) -> list[Node]:
    inline_nodes: list[Node] = []
    for child in node.children:
        if child.type == "inline":
            inline_nodes.extend(_convert_inline(child.children))
    return _merge_text(inline_nodes)


def _convert_inline(nodes: Iterable[SyntaxTreeNode]) -> list[Node]:
    converted: list[Node] = []
    for node in nodes:
        kind = node.type
        if kind in {"text", "text_special"}:
            converted.append(Node(NodeType.TEXT, value=node.content))
        elif kind == "softbreak":
            converted.append(Node(NodeType.TEXT, value="\n"))
        elif kind == "hardbreak":
            converted.append(Node(NodeType.BREAK))
        elif kind == "code_inline":
            converted.append(Node(NodeType.INLINE_CODE, value=node.content))
        elif kind == "em":
            converted.append(Node(NodeType.EMPHASIS, children=_convert_inline(node.children)))
        elif kind == "strong":
            converted.append(Node(NodeType.STRONG, children=_convert_inline(node.children)))
        elif kind == "s":
            converted.append(Node(NodeType.DELETE, children=_convert_inline(node.children)))
        elif kind == "link":
            children = _merge_text(_convert_inline(node.children))
            label = node.meta.get("label")
            if label:
                converted.append(
                    Node(NodeType.LINK_REFERENCE, label=label, children=children)
                )
            else:
                title = node.attrs.get("title")
                converted.append(
                    Node(
                        NodeType.LINK,
                        url=str(node.attrs.get("href", "")),
                        title=str(title) if title else None,
                        children=children,
                    )
                )
        elif kind == "image":
            title = node.attrs.get("title")
            converted.append(
                Node(
                    NodeType.IMAGE,
                    url=str(node.attrs.get("src", "")),
                    alt=node.content,
                    title=str(title) if title else None,
                )
            )
        elif kind == "html_inline":
            converted.append(Node(NodeType.HTML, value=node.content))
        else:
            logger.debug("Skipping unsupported inline token %s", kind)
    return converted


def _merge_text(nodes: list[Node]) -> list[Node]:
    merged: list[Node] = []
    for node in nodes:
        if (
            node.type is NodeType.TEXT
            and merged
            and merged[-1].type is NodeType.TEXT
        ):
            merged[-1].value = (merged[-1].value or "") + (node.value or "")
            continue
        merged.append(node)
    return merged


def _normalize(node: Node) -> None:
    for child in node.children:
        _normalize(child)

    node.children = _merge_text(node.children)
    node.children = [
        child
        for child in node.children
        if not (child.type is NodeType.PARAGRAPH and _is_blank(child))
    ]

    if node.type is NodeType.TABLE and node.children:
        width = len(node.children[0].children)
        for row in node.children[1:]:
            missing = width - len(row.children)
            if missing > 0:
                row.children.extend(Node(NodeType.TABLE_CELL) for _ in range(missing))
            elif missing < 0:
                del row.children[width:]
        node.align = (node.align + [None] * width)[:width]


def _is_blank(paragraph: Node) -> bool:
    return all(
        child.type is NodeType.TEXT and not (child.value or "").strip()
        for child in paragraph.children
    )


def _serialize_flow(nodes: list[Node], separator: str = "\n\n") -> str:
    """Serialize a mixed run of nodes; consecutive inline nodes share a line."""
    blocks: list[str] = []
    inline_run: list[Node] = []
    for node in nodes:
        if node.type in _INLINE_TYPES or (
            node.type is NodeType.HTML and inline_run
        ):
            inline_run.append(node)
            continue
        if inline_run:
            blocks.append(_serialize_inline_children(inline_run))
            inline_run = []
        blocks.append(_serialize_block(node))
    if inline_run:
        blocks.append(_serialize_inline_children(inline_run))
    return separator.join(block for block in blocks if block)


def _serialize_block(node: Node) -> str:
    kind = node.type

    if kind is NodeType.HEADING:
        return f"{'#' * min(node.depth or 1, 6)} {_serialize_inline_children(node.children)}".rstrip()

    if kind is NodeType.PARAGRAPH:
        return _escape_line_starts(_serialize_inline_children(node.children))

    if kind is NodeType.BLOCKQUOTE:
        inner = _serialize_flow(node.children)
        return "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))

    if kind is NodeType.LIST:
        return _serialize_list(node)

    if kind is NodeType.CODE:
        value = node.value or ""
        longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(value)), default=0)
        fence = "`" * max(3, longest + 1)
        return f"{fence}{node.lang or ''}\n{value}\n{fence}" if value else f"{fence}{node.lang or ''}\n{fence}"

    if kind is NodeType.HTML:
        return node.value or ""

    if kind is NodeType.THEMATIC_BREAK:
        return "***"

    if kind is NodeType.DEFINITION:
        return f"[{node.label}]: {_format_destination(node.url or '')}{_format_title(node.title)}"

    if kind is NodeType.TABLE:
        return _serialize_table(node)

    if kind in {NodeType.LIST_ITEM, NodeType.TABLE_ROW, NodeType.TABLE_CELL, NodeType.ROOT}:
        return _serialize_flow(node.children)

    return _serialize_inline(node)


def _serialize_list(node: Node) -> str:
    items: list[str] = []
    number = node.start if node.start is not None else 1
    for item in node.children:
        marker = f"{number}." if node.ordered else "-"
        number += 1
        body = _serialize_flow(item.children, "\n\n" if node.spread else "\n")
        indent = " " * (len(marker) + 1)
        lines = body.split("\n") if body else [""]
        rendered = [f"{marker} {lines[0]}".rstrip()]
        rendered.extend(f"{indent}{line}" if line else "" for line in lines[1:])
        items.append("\n".join(rendered))
    return ("\n\n" if node.spread else "\n").join(items)


def _serialize_table(node: Node) -> str:
    rows = [
        [
            _serialize_inline_children(cell.children).replace("|", "\\|").replace("\n", " ")
            for cell in row.children
        ]
        for row in node.children
    ]
    if not rows:
        return ""
    width = max(len(row) for row in rows)
    normalized = [row + [""] * (width - len(row)) for row in rows]
    align = (node.align + [None] * width)[:width]
    delimiters = []
    for value in align:
        if value == "left":
            delimiters.append(":--")
        elif value == "right":
            delimiters.append("--:")
        elif value == "center":
            delimiters.append(":-:")
        else:
            delimiters.append("---")
    lines = [
        "| " + " | ".join(normalized[0]) + " |",
        "| " + " | ".join(delimiters) + " |",
    ]
    for row in normalized[1:]:
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def _serialize_inline_children(nodes: list[Node]) -> str:
    return "".join(_serialize_inline(node) for node in nodes)


def _serialize_inline(node: Node) -> str:
    kind = node.type

    if kind is NodeType.TEXT:
        return _escape_text(node.value or "")

    if kind is NodeType.EMPHASIS:
        return f"*{_serialize_inline_children(node.children)}*"

    if kind is NodeType.STRONG:
        return f"**{_serialize_inline_children(node.children)}**"

    if kind is NodeType.DELETE:
        return f"~~{_serialize_inline_children(node.children)}~~"

    if kind is NodeType.INLINE_CODE:
        return _format_inline_code(node.value or "")

    if kind is NodeType.BREAK:
        return "\\\n"

    if kind is NodeType.LINK:
        url = node.url or ""
        text = _serialize_inline_children(node.children)
        if (
            not node.title
            and _SCHEME_RE.match(url)
            and len(node.children) == 1
            and node.children[0].type is NodeType.TEXT
            and node.children[0].value == url
        ):
            return f"<{url}>"
        return f"[{text}]({_format_destination(url)}{_format_title(node.title)})"

    if kind is NodeType.LINK_REFERENCE:
        text = _serialize_inline_children(node.children)
        label = node.label or ""
        if _normalize_label(text) == _normalize_label(label):
            return f"[{text}]"
        return f"[{text}][{label}]"

    if kind is NodeType.IMAGE:
        alt = (node.alt or "").replace("]", "\\]")
        return f"![{alt}]({_format_destination(node.url or '')}{_format_title(node.title)})"

    if kind is NodeType.HTML:
        return node.value or ""

    return _serialize_flow(node.children)


def _escape_text(text: str) -> str:
    pieces: list[str] = []
    position = 0
    for match in _PLAIN_BRACKETS_RE.finditer(text):
        pieces.append(_escape_chars(text[position : match.start()]))
        pieces.append("[" + _escape_chars(match.group(0)[1:-1]) + "]")
        position = match.end()
    pieces.append(_escape_chars(text[position:]))
    return "".join(pieces)


def _escape_chars(text: str) -> str:
    return _ESCAPE_RE.sub(r"\\\1", text)


def _escape_line_starts(text: str) -> str:
    def _escape(match: re.Match[str]) -> str:
        if match.group("number") is not None:
            return f"{match.group('number')}\\{match.group('delim')}"
        return "\\" + match.group(0)

    return _LINE_START_ESCAPE_RE.sub(_escape, text)


def _format_inline_code(value: str) -> str:
    longest = max((len(run) for run in _BACKTICK_RUN_RE.findall(value)), default=0)
    fence = "`" * (longest + 1)
    if value.startswith("`") or value.endswith("`"):
        return f"{fence} {value} {fence}"
    return f"{fence}{value}{fence}"


def _format_destination(url: str) -> str:
    if not url or re.search(r"[\s()<>]", url):
        return f"<{url}>"
    return url


def _format_title(title: str | None) -> str:
    if not title:
        return ""
    escaped = title.replace("\\", "\\\\").replace('"', '\\"')
    return f' "{escaped}"'


def _normalize_label(label: str) -> str:
    return re.sub(r"\s+", " ", label.strip()).casefold()
