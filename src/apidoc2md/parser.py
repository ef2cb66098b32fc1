"""Parsing pipeline for Markdown API docs -> API doc entries."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Awaitable, Mapping, Sequence, Union

from apidoc2md.classifiers import DEFAULT_CLASSIFIER, NodeClassifier
from apidoc2md.enrichment import enrich_section
from apidoc2md.exceptions import ResolutionError
from apidoc2md.markdown import parse_markdown
from apidoc2md.references import normalize_references
from apidoc2md.schemas import ApiDocMetadataEntry, ApiDocument
from apidoc2md.sections import segment_sections
from apidoc2md.slugger import Slugger

logger = logging.getLogger(__name__)

ApiDocInput = Union[ApiDocument, Awaitable[ApiDocument]]


async def parse_api_doc(
    api_doc: ApiDocInput,
    *,
    classifier: NodeClassifier = DEFAULT_CLASSIFIER,
    extra_types: Mapping[str, str] | None = None,
) -> list[ApiDocMetadataEntry]:
    """Parse one API doc into its entries, one per heading, in document order.

    Args:
        api_doc: The document, or an awaitable resolving to it.
        classifier: Node predicates the pipeline dispatches on.
        extra_types: Additional type name -> URL mappings for type links.

    Returns:
        The sealed entries; empty if the document has no headings.

    Raises:
        ResolutionError: If the input does not resolve to an ApiDocument.
        ParseError: If the Markdown cannot be turned into a tree.
    """
    document = await _resolve_api_doc(api_doc)

    # Slugs must be unique per document, so every document gets its own slugger.
    slugger = Slugger()

    tree = parse_markdown(document.text)
    normalize_references(tree, classifier, extra_types=extra_types)

    entries = [
        enrich_section(
            section, slugger=slugger, document=document, classifier=classifier
        )
        for section in segment_sections(tree, classifier)
    ]

    logger.debug("Parsed %d entries from %s", len(entries), document.path)
    return entries


async def parse_api_docs(
    api_docs: Sequence[ApiDocInput],
    *,
    classifier: NodeClassifier = DEFAULT_CLASSIFIER,
    extra_types: Mapping[str, str] | None = None,
) -> list[ApiDocMetadataEntry]:
    """Parse several API docs concurrently and concatenate their entries.

    Entries are returned in input order whatever order the documents resolve
    in. A single failing document fails the whole batch and cancels the
    documents still pending.
    """
    tasks = [
        asyncio.ensure_future(
            parse_api_doc(api_doc, classifier=classifier, extra_types=extra_types)
        )
        for api_doc in api_docs
    ]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    return [entry for entries in results for entry in entries]


async def _resolve_api_doc(api_doc: ApiDocInput) -> ApiDocument:
    resolved = await api_doc if inspect.isawaitable(api_doc) else api_doc
    if not isinstance(resolved, ApiDocument):
        raise ResolutionError(
            f"Expected an ApiDocument, got {type(resolved).__name__}"
        )
    return resolved
