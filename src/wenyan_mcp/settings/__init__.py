"""Settings package exports."""

from .loader import (
    AppConfig,
    ArticleSettings,
    HttpSettings,
    ImageSettings,
    LoggingSettings,
    ServerSettings,
    WeChatSettings,
    load_config,
)

__all__ = [
    "AppConfig",
    "ArticleSettings",
    "HttpSettings",
    "ImageSettings",
    "LoggingSettings",
    "ServerSettings",
    "WeChatSettings",
    "load_config",
]
