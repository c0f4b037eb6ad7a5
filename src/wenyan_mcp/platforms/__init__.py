"""Platform integration package."""

from __future__ import annotations

from .base import DraftResult, ImageDocument, MediaUploader, UploadResult

__all__ = [
    "DraftResult",
    "ImageDocument",
    "MediaUploader",
    "UploadResult",
]
