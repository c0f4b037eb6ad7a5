"""Error taxonomy for the publishing pipeline."""

from __future__ import annotations

import json
from typing import Any, Mapping


class PublishError(RuntimeError):
    """Base class for every failure that aborts a publish operation."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | 详情: {detail_repr}"


class CredentialError(PublishError):
    """Raised when no usable AppID/AppSecret pair can be resolved."""


class RemoteApiError(PublishError):
    """Raised when WeChat answers with a structured ``errcode``."""

    def __init__(
        self,
        message: str,
        *,
        code: int | str,
        remote_message: str | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        merged = {"errcode": code, "errmsg": remote_message}
        merged.update(details or {})
        super().__init__(message, details=merged)
        self.code = code
        self.remote_message = remote_message


class UploadError(PublishError):
    """Raised when the material upload endpoint answers with a non-success status."""

    def __init__(self, message: str, *, status: int, body: str) -> None:
        super().__init__(message, details={"status": status, "body": body[:200]})
        self.status = status
        self.body = body


class UnexpectedResponseError(PublishError):
    """Raised when a remote response matches neither the success nor the error shape."""


class RemoteConnectionError(PublishError):
    """Raised when the WeChat servers cannot be reached at all."""


class ImageFetchError(PublishError):
    """Raised when an image cannot be downloaded or read from disk."""


class MissingCoverError(PublishError):
    """Raised when no cover image can be resolved for a draft."""


class InvalidThemeError(PublishError):
    """Raised when a theme id or name does not match any registered theme."""


__all__ = [
    "CredentialError",
    "ImageFetchError",
    "InvalidThemeError",
    "MissingCoverError",
    "PublishError",
    "RemoteApiError",
    "RemoteConnectionError",
    "UnexpectedResponseError",
    "UploadError",
]
