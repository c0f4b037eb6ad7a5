"""Publishes rendered articles to the WeChat draft box."""

from __future__ import annotations

from wenyan_mcp.errors import MissingCoverError
from wenyan_mcp.platforms.base import DraftResult, MediaUploader
from wenyan_mcp.services.images import ImageRelocator, is_platform_hosted
from wenyan_mcp.utils.logging import get_logger

from .credentials import WeChatCredentialStore
from .draft import WeChatDraftClient

LOGGER = get_logger(__name__)

COVER_FILE_NAME = "cover.jpg"


class WeChatDraftPublisher:
    """Coordinates token retrieval, image relocation, cover selection and draft creation."""

    def __init__(
        self,
        credential_store: WeChatCredentialStore,
        media_uploader: MediaUploader,
        image_relocator: ImageRelocator,
        draft_client: WeChatDraftClient,
    ) -> None:
        self._credentials = credential_store
        self._media_uploader = media_uploader
        self._relocator = image_relocator
        self._draft_client = draft_client

    def publish_to_draft(
        self,
        title: str,
        html: str,
        cover: str | None = None,
        app_id: str | None = None,
        app_secret: str | None = None,
        *,
        digest: str | None = None,
        author: str | None = None,
    ) -> DraftResult:
        LOGGER.info(
            "Publishing to draft",
            extra={"event": "draft.publish", "title": title, "cover": cover, "appid": app_id},
        )
        token = self._credentials.fetch_access_token(app_id, app_secret).token
        relocated = self._relocator.relocate(html, token)
        thumb_media_id = self._resolve_cover(cover, relocated.first_media_id, token)

        payload = self._draft_client.build_payload(
            title,
            relocated.html,
            thumb_media_id,
            digest=digest,
            author=author,
        )
        media_id = self._draft_client.create_draft(payload, token)
        return DraftResult(media_id=media_id)

    def _resolve_cover(self, cover: str | None, fallback_media_id: str, token: str) -> str:
        if cover:
            return self._media_uploader.upload_image(cover, token, file_name=COVER_FILE_NAME).media_id
        if is_platform_hosted(fallback_media_id):
            # CDN images carry no media id, so the cover has to be uploaded again.
            return self._media_uploader.upload_image(
                fallback_media_id, token, file_name=COVER_FILE_NAME
            ).media_id
        if fallback_media_id:
            return fallback_media_id

        LOGGER.error("No cover image found", extra={"event": "draft.missing_cover"})
        raise MissingCoverError("你必须指定一张封面图或者在正文中至少出现一张图片。")
