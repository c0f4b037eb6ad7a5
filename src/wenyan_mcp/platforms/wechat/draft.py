"""WeChat draft management."""

from __future__ import annotations

import json
from typing import Any

from wenyan_mcp.errors import UnexpectedResponseError
from wenyan_mcp.utils.logging import get_logger

from .api import WeChatApiClient

LOGGER = get_logger(__name__)


class WeChatDraftClient:
    """Client for creating drafts via the WeChat API."""

    def __init__(self, api_client: WeChatApiClient) -> None:
        self._api = api_client

    def build_payload(
        self,
        title: str,
        content: str,
        thumb_media_id: str,
        *,
        digest: str | None = None,
        author: str | None = None,
    ) -> dict[str, Any]:
        article: dict[str, Any] = {
            "title": title,
            "content": content,
            "thumb_media_id": thumb_media_id,
        }
        if author:
            article["author"] = author
        digest = _truncate_utf8(digest, max_bytes=256) if digest else None
        if digest:
            article["digest"] = digest
        return {"articles": [article]}

    def create_draft(self, payload: dict[str, Any], token: str) -> str:
        """Submit a draft payload and return the new draft's ``media_id``."""
        # Escaped unicode would show up verbatim in the WeChat editor.
        body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        response = self._api.request(
            "POST",
            WeChatApiClient.DRAFT_URL,
            params={"access_token": token},
            data=body,
            headers={"Content-Type": "application/json; charset=utf-8"},
        )
        data = self._api.decode_json(response, context="上传到公众号草稿")

        media_id = data.get("media_id")
        if media_id:
            LOGGER.info("Draft published", extra={"event": "draft.created", "media_id": media_id})
            return str(media_id)

        self._api.raise_for_errcode(data, context="上传到公众号草稿失败")
        LOGGER.error("Draft publish unknown error", extra={"event": "draft.unexpected", "response": data})
        raise UnexpectedResponseError("上传到公众号草稿失败: 响应缺少 media_id", details=data)


def _truncate_utf8(text: str, *, max_bytes: int) -> str:
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    truncated = encoded[:max_bytes]
    while truncated and (truncated[-1] & 0xC0) == 0x80:
        truncated = truncated[:-1]
    return truncated.decode("utf-8", errors="ignore")
