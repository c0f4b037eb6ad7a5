"""WeChat image upload implementation."""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO
from urllib.parse import unquote, urlsplit

import requests

from wenyan_mcp.errors import ImageFetchError, UnexpectedResponseError, UploadError
from wenyan_mcp.platforms.base import UploadResult
from wenyan_mcp.utils.http import ThreadLocalSession
from wenyan_mcp.utils.logging import get_logger

from .api import WeChatApiClient

LOGGER = get_logger(__name__)

_INSECURE_PREFIX = "http://"
_SECURE_PREFIX = "https://"
_DEFAULT_EXTENSION = ".jpg"


def ensure_https(url: str) -> str:
    """Swap a leading ``http://`` for ``https://``; leave the rest of the URL alone."""
    if url.startswith(_INSECURE_PREFIX):
        return _SECURE_PREFIX + url[len(_INSECURE_PREFIX) :]
    return url


def is_remote(source: str) -> bool:
    return source.startswith("http")


def _with_extension(name: str) -> str:
    name = name or "image"
    if not PurePosixPath(name).suffix:
        return f"{name}{_DEFAULT_EXTENSION}"
    return name


@dataclass(slots=True, frozen=True)
class ImageSource:
    """Bytes of an image together with the file name it is uploaded under."""

    data: bytes
    file_name: str


class ImageSourceResolver:
    """Loads image bytes from a remote URL or the local filesystem."""

    def __init__(
        self,
        *,
        session: requests.Session | ThreadLocalSession | None = None,
        host_image_path: str = "",
        container_image_path: str = "/mnt/host-downloads",
        timeout: float = 30.0,
    ) -> None:
        self._session = session or ThreadLocalSession()
        self._host_image_path = host_image_path
        self._container_image_path = container_image_path
        self._timeout = timeout

    def resolve(self, source: str, *, file_name: str | None = None) -> ImageSource:
        if is_remote(source):
            return self._download(source, file_name=file_name)
        return self._read_local(source, file_name=file_name)

    def local_path(self, source: str) -> str:
        """Map a host path onto the container mount when a mapping is configured."""
        if self._host_image_path and source.startswith(self._host_image_path):
            return self._container_image_path + source[len(self._host_image_path) :]
        return source

    def _download(self, url: str, *, file_name: str | None) -> ImageSource:
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as exc:
            raise ImageFetchError(
                f"Failed to download image from URL: {url}", details={"reason": str(exc)}
            ) from exc

        if not response.ok or not response.content:
            LOGGER.error(
                "Failed to download image from URL",
                extra={"event": "image.download_failed", "url": url, "status": response.status_code},
            )
            raise ImageFetchError(
                f"Failed to download image from URL: {url}",
                details={"status": response.status_code},
            )

        derived = unquote(PurePosixPath(urlsplit(url).path).name)
        return ImageSource(data=response.content, file_name=file_name or _with_extension(derived))

    def _read_local(self, source: str, *, file_name: str | None) -> ImageSource:
        path = Path(self.local_path(source))
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ImageFetchError(
                f"无法读取本地图片: {path}", details={"source": source, "reason": str(exc)}
            ) from exc
        derived = os.path.basename(str(path))
        return ImageSource(data=data, file_name=file_name or _with_extension(derived))


class WeChatMediaUploader:
    """Uploads images to the WeChat permanent material library."""

    def __init__(self, api_client: WeChatApiClient, resolver: ImageSourceResolver) -> None:
        self._api = api_client
        self._resolver = resolver

    def upload_image(self, source: str, token: str, *, file_name: str | None = None) -> UploadResult:
        """Upload an image referenced by local path or URL."""
        LOGGER.info(
            "Uploading image",
            extra={"event": "media.upload_image", "source": source, "file_name": file_name},
        )
        image = self._resolver.resolve(source, file_name=file_name)
        return self.upload_material("image", image.data, image.file_name, token)

    def upload_material(
        self,
        kind: str,
        data: bytes | BinaryIO,
        file_name: str,
        token: str,
    ) -> UploadResult:
        """Send one multipart upload to the material endpoint."""
        mime_type = mimetypes.guess_type(file_name)[0] or "image/jpeg"
        files = {"media": (file_name, data, mime_type)}
        response = self._api.request(
            "POST",
            WeChatApiClient.UPLOAD_URL,
            params={"access_token": token, "type": kind},
            files=files,
        )

        if not response.ok:
            LOGGER.error(
                "Upload failed",
                extra={"event": "media.upload_failed", "status": response.status_code},
            )
            raise UploadError(
                f"上传失败: {response.status_code} {response.text[:200]}",
                status=response.status_code,
                body=response.text,
            )

        payload = self._api.decode_json(response, context="上传素材")
        self._api.raise_for_errcode(payload, context=f"上传失败 ({file_name})")

        media_id = payload.get("media_id")
        if not media_id:
            raise UnexpectedResponseError(
                "上传成功但缺少 media_id", details={"file_name": file_name, "response": payload}
            )

        result = UploadResult(media_id=str(media_id), url=ensure_https(str(payload.get("url") or "")))
        LOGGER.info(
            "Upload success",
            extra={"event": "media.uploaded", "media_id": result.media_id, "url": result.url},
        )
        return result
