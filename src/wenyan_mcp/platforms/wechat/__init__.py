"""WeChat platform adapters."""

from __future__ import annotations

from .api import AccessToken, WeChatApiClient
from .credentials import WeChatCredentials, WeChatCredentialStore
from .draft import WeChatDraftClient
from .media import ImageSource, ImageSourceResolver, WeChatMediaUploader, ensure_https
from .publisher import COVER_FILE_NAME, WeChatDraftPublisher

__all__ = [
    "AccessToken",
    "COVER_FILE_NAME",
    "ImageSource",
    "ImageSourceResolver",
    "WeChatApiClient",
    "WeChatCredentialStore",
    "WeChatCredentials",
    "WeChatDraftClient",
    "WeChatDraftPublisher",
    "WeChatMediaUploader",
    "ensure_https",
]
