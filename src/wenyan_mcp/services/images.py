"""Moves images embedded in rendered HTML onto the WeChat media CDN."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Mapping

from wenyan_mcp.platforms.base import ImageDocument, MediaUploader, UploadResult
from wenyan_mcp.utils.html import SoupImageDocument
from wenyan_mcp.utils.logging import get_logger

LOGGER = get_logger(__name__)

CDN_PREFIX = "https://mmbiz.qpic.cn"


def is_platform_hosted(src: str) -> bool:
    return src.startswith(CDN_PREFIX)


@dataclass(slots=True, frozen=True)
class RelocationResult:
    """Rewritten HTML plus the media id (or CDN URL) of the first image in document order."""

    html: str
    first_media_id: str


class ImageRelocator:
    """Uploads every non-CDN ``<img>`` and points it at the uploaded copy."""

    def __init__(
        self,
        uploader: MediaUploader,
        *,
        max_workers: int = 4,
        document_factory: Callable[[str], ImageDocument] = SoupImageDocument,
    ) -> None:
        self._uploader = uploader
        self._max_workers = max(1, max_workers)
        self._document_factory = document_factory

    def relocate(self, html: str, token: str) -> RelocationResult:
        """Upload embedded images and rewrite their ``src`` attributes.

        Uploads run concurrently, but ``first_media_id`` always belongs to the first
        image in document order. When any upload fails nothing is rewritten and the
        first failure (in document order) is raised once every upload has settled.
        """
        if "<img" not in html.lower():
            LOGGER.info("No images found in content", extra={"event": "images.none"})
            return RelocationResult(html=html, first_media_id="")

        document = self._document_factory(html)
        sources = document.image_sources()
        pending = {
            index: src
            for index, src in enumerate(sources)
            if src and not is_platform_hosted(src)
        }
        uploads = self._upload_all(pending, token)

        media_ids: list[str] = []
        for index, src in enumerate(sources):
            if not src:
                continue
            upload = uploads.get(index)
            if upload is None:
                media_ids.append(src)
                continue
            document.set_image_source(index, upload.url)
            media_ids.append(upload.media_id)

        first_media_id = media_ids[0] if media_ids else ""
        LOGGER.info(
            "Images uploaded",
            extra={
                "event": "images.relocated",
                "count": len(sources),
                "uploaded": len(uploads),
                "first_media_id": first_media_id,
            },
        )
        return RelocationResult(html=document.serialize(), first_media_id=first_media_id)

    def _upload_all(self, pending: Mapping[int, str], token: str) -> dict[int, UploadResult]:
        if not pending:
            return {}

        workers = min(self._max_workers, len(pending))
        futures: dict[int, Future[UploadResult]] = {}
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="wenyan-upload") as pool:
            for index, src in pending.items():
                futures[index] = pool.submit(self._uploader.upload_image, src, token)

        results: dict[int, UploadResult] = {}
        for index in sorted(futures):
            error = futures[index].exception()
            if error is not None:
                LOGGER.error(
                    "Image upload failed",
                    extra={"event": "images.upload_failed", "src": pending[index], "error": str(error)},
                )
                raise error
            results[index] = futures[index].result()
        return results
