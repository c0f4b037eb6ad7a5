"""WeChat API helpers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping

import requests

from wenyan_mcp.errors import RemoteApiError, RemoteConnectionError, UnexpectedResponseError
from wenyan_mcp.utils.http import ThreadLocalSession
from wenyan_mcp.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class AccessToken:
    """Parsed access token response. Expiry is informational only."""

    token: str
    expires_in: int | None = None


class WeChatApiClient:
    """Minimal client for interacting with WeChat Official Account APIs."""

    TOKEN_URL = "https://api.weixin.qq.com/cgi-bin/token"
    UPLOAD_URL = "https://api.weixin.qq.com/cgi-bin/material/add_material"
    DRAFT_URL = "https://api.weixin.qq.com/cgi-bin/draft/add"

    def __init__(
        self,
        *,
        session: requests.Session | ThreadLocalSession | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._session = session or ThreadLocalSession()
        self._timeout = timeout

    def fetch_access_token(self, app_id: str, app_secret: str) -> AccessToken:
        """Exchange application credentials for a fresh access token."""
        params = {
            "grant_type": "client_credential",
            "appid": app_id,
            "secret": app_secret,
        }
        response = self.request("GET", self.TOKEN_URL, params=params)
        data = self.decode_json(response, context="获取 Access Token")

        token = data.get("access_token")
        if token:
            expires_in = data.get("expires_in")
            try:
                expires = int(expires_in) if expires_in is not None else None
            except (TypeError, ValueError):
                expires = None
            return AccessToken(token=str(token), expires_in=expires)

        self.raise_for_errcode(data, context="获取 Access Token 失败")
        raise UnexpectedResponseError("获取 Access Token 失败: 响应缺少 access_token", details=data)

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Issue an HTTP request, translating connection failures."""
        kwargs.setdefault("timeout", self._timeout)
        try:
            return self._session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            LOGGER.error(
                "WeChat request failed",
                extra={"event": "wechat.request_failed", "url": url, "reason": str(exc)},
            )
            raise RemoteConnectionError(
                "无法连接至微信服务器",
                details={"url": url, "reason": str(exc)},
            ) from exc

    @staticmethod
    def decode_json(response: requests.Response, *, context: str) -> dict[str, Any]:
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise UnexpectedResponseError(
                f"{context}: 解析微信响应失败",
                details={"status": response.status_code, "response": response.text[:200]},
            ) from exc
        if not isinstance(data, dict):
            raise UnexpectedResponseError(
                f"{context}: 微信响应格式不正确", details={"response": str(data)[:200]}
            )
        return data

    @staticmethod
    def raise_for_errcode(data: Mapping[str, Any], *, context: str) -> None:
        """Raise ``RemoteApiError`` when ``data`` carries a non-zero ``errcode``."""
        errcode = data.get("errcode")
        if errcode in (None, 0, "0"):
            return
        errmsg = data.get("errmsg")
        LOGGER.error(
            context,
            extra={"event": "wechat.api_error", "errcode": errcode, "errmsg": errmsg},
        )
        raise RemoteApiError(
            f"{context}，错误码：{errcode}，{errmsg}",
            code=errcode,
            remote_message=errmsg,
        )
