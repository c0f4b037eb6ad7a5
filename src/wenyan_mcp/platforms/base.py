"""Base contracts for content publishing platforms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True, frozen=True)
class UploadResult:
    """Represents the outcome of a single media upload."""

    media_id: str
    url: str


@dataclass(slots=True, frozen=True)
class DraftResult:
    """Identifier of a draft created on the remote platform."""

    media_id: str


class MediaUploader(Protocol):
    """Uploads an image, given as a local path or a remote URL, to a remote platform."""

    def upload_image(
        self, source: str, token: str, *, file_name: str | None = None
    ) -> UploadResult:
        """Upload ``source`` and return the hosted location."""


class ImageDocument(Protocol):
    """Finds and rewrites image references inside a parsed HTML document."""

    def image_sources(self) -> list[str | None]:
        """Return every image ``src`` in document order (``None`` when missing)."""

    def set_image_source(self, index: int, src: str) -> None:
        """Point the image at ``index`` to ``src``."""

    def serialize(self) -> str:
        """Render the document back to HTML."""
