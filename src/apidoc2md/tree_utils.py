"""Shared document tree utilities."""

from __future__ import annotations

from typing import Callable, Iterator, Sequence

from apidoc2md.schemas.tree import Node, NodeType

Predicate = Callable[[Node], bool]


def create_root(children: Sequence[Node] = ()) -> Node:
    """Create a new ``root`` node holding ``children`` (not copied)."""
    return Node(NodeType.ROOT, children=list(children))


def walk(tree: Node) -> Iterator[Node]:
    """Yield every node of ``tree`` in document order, the root included."""
    yield tree
    for child in list(tree.children):
        yield from walk(child)


def select_all(tree: Node, test: Predicate) -> list[Node]:
    """Collect the nodes matching ``test`` in document order.

    Matching nodes are not descended into, so a match never contains another
    match. The root itself is never returned.
    """
    matches: list[Node] = []

    def _collect(node: Node) -> None:
        for child in list(node.children):
            if test(child):
                matches.append(child)
            else:
                _collect(child)

    _collect(tree)
    return matches


def remove(tree: Node, test: Predicate) -> int:
    """Detach every descendant of ``tree`` matching ``test``.

    Returns:
        The number of removed nodes.
    """
    removed = 0
    kept: list[Node] = []
    for child in list(tree.children):
        if test(child):
            removed += 1
            continue
        removed += remove(child, test)
        kept.append(child)
    tree.children[:] = kept
    return removed


def replace_child(parent: Node, child: Node, replacements: Sequence[Node]) -> None:
    """Replace ``child`` of ``parent`` in place with ``replacements``."""
    for index, candidate in enumerate(parent.children):
        if candidate is child:
            parent.children[index : index + 1] = list(replacements)
            return
    raise ValueError("node is not a child of the given parent")


def find_index_after(
    parent: Node, index: int, test: Predicate
) -> int | None:
    """Return the index of the first child after ``index`` matching ``test``."""
    for position in range(index + 1, len(parent.children)):
        if test(parent.children[position]):
            return position
    return None


def to_plain_text(node: Node) -> str:
    """Concatenate the textual content of a node and its descendants."""
    if node.type in {NodeType.TEXT, NodeType.INLINE_CODE}:
        return node.value or ""
    if node.type is NodeType.IMAGE:
        return node.alt or ""
    if node.type is NodeType.BREAK:
        return "\n"
    return "".join(to_plain_text(child) for child in node.children)
