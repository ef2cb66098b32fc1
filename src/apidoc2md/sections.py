"""Section segmentation and filtering."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Literal

from apidoc2md.classifiers import DEFAULT_CLASSIFIER, NodeClassifier
from apidoc2md.schemas import ApiDocMetadataEntry
from apidoc2md.schemas.tree import Node
from apidoc2md.tree_utils import create_root, find_index_after


@dataclass
class RawSection:
    """A heading and the top-level nodes it owns, before enrichment."""

    heading: Node
    tree: Node


def segment_sections(
    tree: Node, classifier: NodeClassifier = DEFAULT_CLASSIFIER
) -> list[RawSection]:
    """Split a document tree into one section per top-level heading.

    A section holds the siblings strictly between its heading and the next
    heading of any depth, or the end of the document. Adjacent headings give
    an empty section. Nodes before the first heading belong to no section.
    """
    sections: list[RawSection] = []
    index = find_index_after(tree, -1, classifier.is_heading)
    while index is not None:
        next_index = find_index_after(tree, index, classifier.is_heading)
        stop = len(tree.children) if next_index is None else next_index
        sections.append(
            RawSection(
                heading=tree.children[index],
                tree=create_root(tree.children[index + 1 : stop]),
            )
        )
        index = next_index
    return sections


def normalize_section_title(title: str) -> str:
    """Normalize section titles for comparison."""
    title = title.strip().lower()
    title = re.sub(r"^(?:class|event|static method|constructor):\s+", "", title)
    return re.sub(r"\s+", " ", title.strip("`"))


def filter_entries(
    entries: list[ApiDocMetadataEntry],
    *,
    mode: Literal["include", "exclude"] = "exclude",
    selected: Iterable[str] | None = None,
) -> list[ApiDocMetadataEntry]:
    """Filter entries by title or slug using include or exclude mode.

    Entries are flat, so selecting an entry does not pull in the entries of
    deeper headings that follow it.
    """
    selected_titles = {
        normalize_section_title(title) for title in (selected or []) if title.strip()
    }
    if not selected_titles:
        return entries

    def _is_selected(entry: ApiDocMetadataEntry) -> bool:
        return (
            normalize_section_title(entry.title) in selected_titles
            or entry.slug in selected_titles
        )

    if mode == "include":
        return [entry for entry in entries if _is_selected(entry)]
    return [entry for entry in entries if not _is_selected(entry)]
