"""Turn raw sections into sealed API doc entries."""

from __future__ import annotations

from apidoc2md.classifiers import DEFAULT_CLASSIFIER, NodeClassifier
from apidoc2md.content import ApiDocContent
from apidoc2md.markdown import run_transforms
from apidoc2md.metadata import MetadataBuilder
from apidoc2md.schemas import ApiDocMetadataEntry, ApiDocument
from apidoc2md.sections import RawSection
from apidoc2md.slugger import Slugger
from apidoc2md.tree_utils import create_root, remove, select_all


def enrich_section(
    section: RawSection,
    *,
    slugger: Slugger,
    document: ApiDocument,
    classifier: NodeClassifier = DEFAULT_CLASSIFIER,
) -> ApiDocMetadataEntry:
    """Extract a section's metadata nodes and seal it into an entry.

    The section tree is edited in place: stability markers and front matter
    blocks are merged into the entry metadata, detached, and only then is the
    remaining content normalized.
    """
    builder = MetadataBuilder(slugger)
    builder.add_heading(section.heading)

    for marker in select_all(section.tree, classifier.is_stability_index):
        builder.add_stability_index(create_root(marker.children[0].children))

    for block in select_all(section.tree, classifier.is_front_matter):
        builder.add_front_matter(block)

    remove(section.tree, classifier.is_metadata)

    content = ApiDocContent(run_transforms(section.tree))
    return builder.create(document, content)
