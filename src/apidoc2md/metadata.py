"""Accumulate the metadata of one API doc entry and seal it into a record."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from apidoc2md.classifiers import FRONT_MATTER_RE, STABILITY_RE
from apidoc2md.content import ApiDocContent
from apidoc2md.schemas import ApiDocMetadataEntry, ApiDocument, HeadingType, StabilityIndex
from apidoc2md.schemas.tree import Node
from apidoc2md.slugger import Slugger
from apidoc2md.tree_utils import to_plain_text

logger = logging.getLogger(__name__)

# Front matter keys holding version lists (`added: v1.0.0` or `added: [v1, v2]`).
VERSION_KEYS = ("added", "deprecated", "removed", "napiVersion")

_IDENTIFIER = r"[A-Za-z_$][\w$]*"
_PATH = rf"{_IDENTIFIER}(?:\.{_IDENTIFIER})*"

# Tried in order; the first match decides the heading type.
_HEADING_RULES: tuple[tuple[HeadingType, re.Pattern[str]], ...] = (
    (HeadingType.CLASS, re.compile(rf"^Class:\s+(?P<name>{_PATH})(?:\s+extends\s+\S+)?$")),
    (HeadingType.CTOR, re.compile(rf"^(?:Constructor:\s+)?new\s+(?P<name>{_PATH})\s*\(")),
    (HeadingType.CLASS_METHOD, re.compile(rf"^Static method:\s+(?P<name>{_PATH})\s*\(")),
    (HeadingType.EVENT, re.compile(r"^Event:\s+['\"]?(?P<name>[^'\"]+?)['\"]?$")),
    (HeadingType.METHOD, re.compile(rf"^(?P<name>{_PATH})\s*\(.*\)$")),
    (
        HeadingType.PROPERTY,
        re.compile(
            rf"^(?:Class property:\s+)?(?P<name>{_IDENTIFIER}(?:\.{_IDENTIFIER})+|{_PATH}\[[^\]]+\])$"
        ),
    ),
)

_MEMBER_TYPES = frozenset(
    {HeadingType.CLASS_METHOD, HeadingType.METHOD, HeadingType.PROPERTY}
)
_INLINE_PAIR_RE = re.compile(r"([\w-]+)=(\S+)")


def classify_heading(title: str, depth: int) -> tuple[HeadingType, str]:
    """Work out the kind of API member a heading documents, and its name.

    Methods and properties are named after their last path segment
    (``fs.readFile(path)`` -> ``readFile``); classes and constructors keep the
    full path. Unmatched depth-1 headings document a module.
    """
    text = title.strip()
    for heading_type, pattern in _HEADING_RULES:
        match = pattern.match(text)
        if not match:
            continue
        name = match.group("name").strip()
        if heading_type in _MEMBER_TYPES:
            name = re.sub(r"\[[^\]]+\]$", "", name).rsplit(".", 1)[-1]
        return heading_type, name
    if depth == 1:
        return HeadingType.MODULE, text
    return HeadingType.MISC, text


def parse_stability_index(text: str) -> StabilityIndex | None:
    """Parse ``Stability: 2 - Stable`` into a StabilityIndex."""
    match = STABILITY_RE.match(text.strip())
    if not match:
        return None
    description = re.sub(r"\s+", " ", match.group("description")).strip()
    return StabilityIndex(index=float(match.group("index")), description=description)


def parse_front_matter(value: str) -> dict[str, Any]:
    """Extract the key-value pairs of a front matter comment.

    Malformed YAML and non-mapping documents yield an empty dict.
    """
    match = FRONT_MATTER_RE.match(value.strip())
    if not match:
        return {}

    if match.group("pairs") is not None:
        return dict(_INLINE_PAIR_RE.findall(match.group("pairs")))

    try:
        data = yaml.safe_load(match.group("yaml") or "")
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed YAML front matter: %s", exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Ignoring YAML front matter that is not a mapping (%s)", type(data).__name__
        )
        return {}
    return _normalize_front_matter(data)


def _normalize_front_matter(data: dict[Any, Any]) -> dict[str, Any]:
    normalized = {str(key): value for key, value in data.items()}
    for key in VERSION_KEYS:
        if key not in normalized or normalized[key] is None:
            continue
        value = normalized[key]
        values = value if isinstance(value, list) else [value]
        normalized[key] = [str(item) for item in values]
    return normalized


@dataclass
class MetadataBuilder:
    """Mutable accumulator for one API doc entry.

    The slugger must be shared by all builders of a document so that slugs
    stay unique across the document.
    """

    slugger: Slugger
    title: str = ""
    slug: str = ""
    depth: int = 1
    heading_type: HeadingType = HeadingType.MISC
    name: str = ""
    stability: StabilityIndex | None = None
    front_matter: dict[str, Any] = field(default_factory=dict)
    _sealed: bool = field(default=False, init=False, repr=False)

    def add_heading(self, heading: Node) -> None:
        self.title = to_plain_text(heading).strip()
        self.depth = heading.depth or 1
        self.slug = self.slugger.slug(self.title)
        self.heading_type, self.name = classify_heading(self.title, self.depth)

    def add_stability_index(self, payload: Node) -> None:
        """Merge a stability marker's paragraph content; the last one wins."""
        stability = parse_stability_index(to_plain_text(payload))
        if stability is None:
            logger.warning("Ignoring malformed stability marker under %r", self.title)
            return
        self.stability = stability

    def add_front_matter(self, node: Node) -> None:
        """Merge a front matter block; later keys override earlier ones."""
        self.front_matter.update(parse_front_matter(node.value or ""))

    def create(self, document: ApiDocument, content: ApiDocContent) -> ApiDocMetadataEntry:
        """Seal the accumulated metadata together with the entry content."""
        if self._sealed:
            raise RuntimeError(f"Metadata for {self.slug!r} has already been sealed")
        self._sealed = True
        return ApiDocMetadataEntry(
            api=document.name,
            source=document.path,
            title=self.title,
            slug=self.slug,
            depth=self.depth,
            heading_type=self.heading_type,
            name=self.name,
            stability=self.stability,
            front_matter=dict(self.front_matter) or None,
            content=content,
        )
