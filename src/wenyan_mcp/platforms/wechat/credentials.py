"""Credential resolution for WeChat integrations."""

from __future__ import annotations

from dataclasses import dataclass

from wenyan_mcp.errors import CredentialError
from wenyan_mcp.settings import WeChatSettings
from wenyan_mcp.utils.logging import get_logger

from .api import AccessToken, WeChatApiClient

LOGGER = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class WeChatCredentials:
    app_id: str
    app_secret: str


class WeChatCredentialStore:
    """Resolves AppID/AppSecret and exchanges them for access tokens.

    Values supplied per call win over the configured defaults. Tokens are not
    cached: every publish asks WeChat for a fresh one.
    """

    def __init__(
        self,
        *,
        api_client: WeChatApiClient,
        defaults: WeChatSettings | None = None,
    ) -> None:
        self._api_client = api_client
        self._defaults = defaults or WeChatSettings()

    def resolve(self, app_id: str | None = None, app_secret: str | None = None) -> WeChatCredentials:
        resolved_id = (app_id or self._defaults.app_id or "").strip()
        resolved_secret = (app_secret or self._defaults.app_secret or "").strip()
        missing = [
            name
            for name, value in (("appid", resolved_id), ("appsecret", resolved_secret))
            if not value
        ]
        if missing:
            raise CredentialError(
                "缺少微信公众号凭证，请通过参数或 WECHAT_APP_ID/WECHAT_APP_SECRET 提供",
                details={"missing": missing},
            )
        return WeChatCredentials(app_id=resolved_id, app_secret=resolved_secret)

    def fetch_access_token(
        self, app_id: str | None = None, app_secret: str | None = None
    ) -> AccessToken:
        """Resolve credentials and fetch a fresh token from WeChat."""
        credentials = self.resolve(app_id, app_secret)
        LOGGER.info(
            "Fetching access token",
            extra={"event": "wechat.token.fetch", "appid": credentials.app_id},
        )
        token = self._api_client.fetch_access_token(credentials.app_id, credentials.app_secret)
        LOGGER.info("Access token fetched", extra={"event": "wechat.token.fetched"})
        return token
