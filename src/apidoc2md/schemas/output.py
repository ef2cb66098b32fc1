"""Formatted output model."""

from __future__ import annotations

from pydantic import BaseModel


class FormattedOutput(BaseModel):
    """Human-readable rendering of a set of API doc entries."""

    summary: str
    sections_tree: str
    content: str
