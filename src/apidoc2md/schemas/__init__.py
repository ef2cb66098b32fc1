"""Shared schemas for apidoc2md."""

from apidoc2md.schemas.tree import Node, NodeType
from apidoc2md.schemas.document import ApiDocument
from apidoc2md.schemas.metadata import (
    ApiDocMetadataEntry,
    HeadingType,
    StabilityIndex,
)
from apidoc2md.schemas.output import FormattedOutput

__all__ = [
    "ApiDocMetadataEntry",
    "ApiDocument",
    "FormattedOutput",
    "HeadingType",
    "Node",
    "NodeType",
    "StabilityIndex",
]
