"""Format API doc entries into JSON, summary, tree, and content outputs."""

from __future__ import annotations

from typing import Any, Iterable

try:
    import tiktoken
except ImportError:  # pragma: no cover - optional dependency
    tiktoken = None

from apidoc2md.schemas import ApiDocMetadataEntry, FormattedOutput


def entries_to_json(entries: Iterable[ApiDocMetadataEntry]) -> list[dict[str, Any]]:
    """Serialize entries to JSON-compatible dicts, content rendered to Markdown."""
    return [entry.model_dump(mode="json") for entry in entries]


def format_entries(
    entries: list[ApiDocMetadataEntry], *, include_toc: bool = False
) -> FormattedOutput:
    """Create summary, section tree, and content."""
    tree = "Sections:\n" + _create_sections_tree(entries)
    content = _render_content(entries, include_toc=include_toc)

    apis = list(dict.fromkeys(entry.api for entry in entries))
    summary_lines = []
    if apis:
        summary_lines.append(f"APIs: {', '.join(apis)}")
    summary_lines.append(f"Entries: {len(entries)}")
    stable = sum(1 for entry in entries if entry.stability is not None)
    if stable:
        summary_lines.append(f"Entries with stability index: {stable}")

    token_estimate = _format_token_count(tree + "\n" + content)
    if token_estimate:
        summary_lines.append(f"Estimated tokens: {token_estimate}")

    return FormattedOutput(
        summary="\n".join(summary_lines), sections_tree=tree, content=content
    )


def _render_content(entries: list[ApiDocMetadataEntry], *, include_toc: bool) -> str:
    blocks: list[str] = []
    if include_toc:
        toc = _render_toc(entries)
        if toc:
            blocks.append("## Contents\n" + toc)

    for entry in entries:
        blocks.extend(_render_entry(entry))

    return "\n\n".join(block for block in blocks if block).strip()


def _render_entry(entry: ApiDocMetadataEntry) -> list[str]:
    blocks = [f"{'#' * entry.depth} {entry.title}"]
    if entry.stability is not None:
        index = f"{entry.stability.index:g}"
        description = f" - {entry.stability.description}" if entry.stability.description else ""
        blocks.append(f"> Stability: {index}{description}")
    markdown = entry.content.to_markdown()
    if markdown:
        blocks.append(markdown)
    return blocks


def _render_toc(entries: list[ApiDocMetadataEntry]) -> str:
    if not entries:
        return ""
    top = min(entry.depth for entry in entries)
    return "\n".join(
        "  " * (entry.depth - top) + f"- [{entry.title}](#{entry.slug})"
        for entry in entries
    )


def _create_sections_tree(entries: list[ApiDocMetadataEntry]) -> str:
    if not entries:
        return ""
    top = min(entry.depth for entry in entries)
    return "\n".join(
        " " * ((entry.depth - top) * 4) + entry.title for entry in entries
    )


def _format_token_count(text: str) -> str | None:
    if not tiktoken:
        return None
    try:
        encoding = tiktoken.get_encoding("o200k_base")
        total_tokens = len(encoding.encode(text, disallowed_special=()))
    except Exception:
        return None

    if total_tokens >= 1_000_000:
        return f"{total_tokens / 1_000_000:.1f}M"
    if total_tokens >= 1_000:
        return f"{total_tokens / 1_000:.1f}k"
    return str(total_tokens)
