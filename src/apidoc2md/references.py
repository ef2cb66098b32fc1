"""Rewrite references, type annotations and doc links into canonical links."""

from __future__ import annotations

import logging
import re
from typing import Mapping

from apidoc2md.classifiers import DEFAULT_CLASSIFIER, NodeClassifier, markdown_url_re
from apidoc2md.config import APIDOC2MD_OUTPUT_EXTENSION, APIDOC2MD_SOURCE_EXTENSION
from apidoc2md.schemas.tree import Node, NodeType
from apidoc2md.tree_utils import remove, replace_child, select_all
from apidoc2md.type_links import split_typed_text

logger = logging.getLogger(__name__)

# Subtrees whose text must not be turned into type links.
_NO_TYPE_LINK_TYPES = frozenset(
    {NodeType.LINK, NodeType.LINK_REFERENCE, NodeType.IMAGE, NodeType.DEFINITION}
)


def normalize_label(label: str) -> str:
    """Normalize a reference label for matching (case and whitespace)."""
    return re.sub(r"\s+", " ", label.strip()).casefold()


def normalize_references(
    tree: Node,
    classifier: NodeClassifier = DEFAULT_CLASSIFIER,
    *,
    extra_types: Mapping[str, str] | None = None,
) -> Node:
    """Canonicalize every link of a document tree in place.

    Link references are inlined from their definitions before the definitions
    are dropped; type annotations and links to other API doc sources are
    rewritten afterwards so that inlined targets get rewritten too.
    """
    definitions = select_all(tree, classifier.is_definition)
    lookup: dict[str, Node] = {}
    for definition in definitions:
        # First definition wins, as in CommonMark.
        lookup.setdefault(normalize_label(definition.label or ""), definition)

    for node in select_all(tree, classifier.is_link_reference):
        update_link_reference(node, lookup)

    defined = set(definitions)
    remove(tree, lambda node: node in defined)

    _link_type_annotations(tree, classifier, extra_types)

    for node in select_all(tree, classifier.is_markdown_url):
        update_markdown_link(node)

    return tree


def update_link_reference(node: Node, definitions: Mapping[str, Node]) -> bool:
    """Turn a link reference into a direct link using its definition.

    Returns:
        False when no definition matches; the node is then left untouched.
    """
    definition = definitions.get(normalize_label(node.label or ""))
    if definition is None:
        logger.debug("No definition found for link reference [%s]", node.label)
        return False
    node.type = NodeType.LINK
    node.url = definition.url
    node.title = definition.title
    node.label = None
    return True


def update_markdown_link(
    node: Node,
    *,
    source_extension: str = APIDOC2MD_SOURCE_EXTENSION,
    output_extension: str = APIDOC2MD_OUTPUT_EXTENSION,
) -> None:
    """Point a link at the published page instead of the Markdown source."""
    match = markdown_url_re(source_extension).match(node.url or "")
    if match:
        node.url = f"{match.group('path')}{output_extension}{match.group('suffix') or ''}"


def _link_type_annotations(
    node: Node,
    classifier: NodeClassifier,
    extra_types: Mapping[str, str] | None,
) -> None:
    for child in list(node.children):
        if child.type in _NO_TYPE_LINK_TYPES:
            continue
        if classifier.is_text_with_type(child):
            replace_child(node, child, split_typed_text(child.value or "", extra_types))
            continue
        _link_type_annotations(child, classifier, extra_types)
