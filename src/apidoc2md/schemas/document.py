"""API document input model."""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import BaseModel, ConfigDict


class ApiDocument(BaseModel):
    """A resolved API document ready to be parsed.

    Attributes:
        path: Identifying path or URL of the document; its stem names the API
            and is used when resolving link targets.
        text: Raw Markdown source.
    """

    model_config = ConfigDict(frozen=True)

    path: str
    text: str

    @property
    def name(self) -> str:
        """API name derived from the document path (``fs.md`` -> ``fs``)."""
        return PurePosixPath(self.path.replace("\\", "/")).stem
