"""Node predicates used to classify document tree nodes by their role."""

from __future__ import annotations

import re
from dataclasses import dataclass

from apidoc2md.config import APIDOC2MD_SOURCE_EXTENSION
from apidoc2md.schemas.tree import Node, NodeType
from apidoc2md.tree_utils import Predicate, to_plain_text

# `{string}`, `{string|Buffer}`, `{fs.Stats[]}`
TYPE_ANNOTATION_RE = re.compile(r"\{[A-Za-z_$][\w.$|\[\]]*\}")

STABILITY_RE = re.compile(
    r"^Stability:\s*(?P<index>\d+(?:\.\d+)?)\s*(?:-\s*)?(?P<description>.*)$",
    re.DOTALL,
)

# `<!-- YAML ... -->` blocks and one-line `<!-- key=value -->` comments
FRONT_MATTER_RE = re.compile(
    r"^<!--\s*(?:YAML\b(?P<yaml>[\s\S]*?)|(?P<pairs>[\w-]+=[^\n]*?))\s*-->$"
)

_EXTERNAL_URL_RE = re.compile(r"^(?:[A-Za-z][A-Za-z0-9+.-]*:|//)")


def markdown_url_re(extension: str = APIDOC2MD_SOURCE_EXTENSION) -> re.Pattern[str]:
    """Pattern matching local links to documents with ``extension``."""
    return re.compile(rf"^(?P<path>[^#?]+){re.escape(extension)}(?P<suffix>[?#].*)?$")


_MARKDOWN_URL_RE = markdown_url_re()


def is_heading(node: Node) -> bool:
    return node.type is NodeType.HEADING


def is_link_reference(node: Node) -> bool:
    return node.type is NodeType.LINK_REFERENCE


def is_definition(node: Node) -> bool:
    return node.type is NodeType.DEFINITION


def is_text_with_type(node: Node) -> bool:
    """Text spans holding at least one ``{Type}`` annotation."""
    return node.type is NodeType.TEXT and bool(
        TYPE_ANNOTATION_RE.search(node.value or "")
    )


def is_markdown_url(node: Node) -> bool:
    """Links pointing at another API doc source file."""
    if node.type is not NodeType.LINK or not node.url:
        return False
    if _EXTERNAL_URL_RE.match(node.url):
        return False
    return bool(_MARKDOWN_URL_RE.match(node.url))


def is_stability_index(node: Node) -> bool:
    """Blockquotes opening with a ``Stability: <index>`` paragraph."""
    if node.type is not NodeType.BLOCKQUOTE or not node.children:
        return False
    first = node.children[0]
    if first.type is not NodeType.PARAGRAPH:
        return False
    return bool(STABILITY_RE.match(to_plain_text(first).strip()))


def is_front_matter(node: Node) -> bool:
    """HTML comments carrying YAML or ``key=value`` metadata."""
    return node.type is NodeType.HTML and bool(
        FRONT_MATTER_RE.match((node.value or "").strip())
    )


@dataclass(frozen=True)
class NodeClassifier:
    """Table of the predicates the parsing pipeline dispatches on.

    Swap individual predicates to adapt the pipeline to a different flavour of
    API documentation without touching the pipeline itself.
    """

    is_heading: Predicate = is_heading
    is_link_reference: Predicate = is_link_reference
    is_definition: Predicate = is_definition
    is_text_with_type: Predicate = is_text_with_type
    is_markdown_url: Predicate = is_markdown_url
    is_stability_index: Predicate = is_stability_index
    is_front_matter: Predicate = is_front_matter

    def is_metadata(self, node: Node) -> bool:
        """Nodes that only carry entry metadata and never render as content."""
        return self.is_stability_index(node) or self.is_front_matter(node)


DEFAULT_CLASSIFIER = NodeClassifier()
