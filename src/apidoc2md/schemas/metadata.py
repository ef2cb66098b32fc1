"""API doc entry metadata models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from apidoc2md.content import ApiDocContent


class HeadingType(str, Enum):
    """Kind of API member a heading documents."""

    MODULE = "module"
    CLASS = "class"
    CTOR = "ctor"
    CLASS_METHOD = "class_method"
    METHOD = "method"
    EVENT = "event"
    PROPERTY = "property"
    MISC = "misc"


class StabilityIndex(BaseModel):
    """Stability level of an API entry (e.g. ``2 - Stable``)."""

    model_config = ConfigDict(frozen=True)

    index: float
    description: str = ""


class ApiDocMetadataEntry(BaseModel):
    """A sealed API doc entry: one heading, its metadata and its content.

    Attributes:
        api: Name of the API document the entry belongs to.
        source: Path or URL of the API document.
        title: Plain text of the heading.
        slug: Anchor slug, unique within the document.
        depth: Heading level.
        heading_type: Kind of API member documented by the heading.
        name: API member name derived from the heading (e.g. ``readFile``).
        stability: Stability index, if the section declares one.
        front_matter: Key-value metadata from the section's YAML blocks.
        content: The section content, rendered to Markdown on demand.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    api: str
    source: str
    title: str
    slug: str
    depth: int = Field(..., ge=1, le=6)
    heading_type: HeadingType = HeadingType.MISC
    name: str
    stability: StabilityIndex | None = None
    front_matter: dict[str, Any] | None = None
    content: ApiDocContent

    @field_serializer("content")
    def _serialize_content(self, content: ApiDocContent) -> str:
        return content.to_markdown()
