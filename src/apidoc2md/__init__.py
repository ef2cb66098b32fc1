"""apidoc2md: split Markdown API docs into metadata-rich entries."""

from apidoc2md.exceptions import (
    Apidoc2mdError,
    DocumentNotFoundError,
    FetchError,
    ParseError,
    RateLimitError,
    ResolutionError,
)
from apidoc2md.schemas import (
    ApiDocMetadataEntry,
    ApiDocument,
    HeadingType,
    StabilityIndex,
)
from apidoc2md.classifiers import DEFAULT_CLASSIFIER, NodeClassifier
from apidoc2md.content import ApiDocContent
from apidoc2md.loader import fetch_api_doc, load_api_doc, resolve_api_doc
from apidoc2md.parser import parse_api_doc, parse_api_docs

__all__ = [
    "DEFAULT_CLASSIFIER",
    "ApiDocContent",
    "ApiDocMetadataEntry",
    "ApiDocument",
    "Apidoc2mdError",
    "DocumentNotFoundError",
    "FetchError",
    "HeadingType",
    "NodeClassifier",
    "ParseError",
    "RateLimitError",
    "ResolutionError",
    "StabilityIndex",
    "fetch_api_doc",
    "load_api_doc",
    "parse_api_doc",
    "parse_api_docs",
    "resolve_api_doc",
]
