"""Helpers for loading configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomllib

DEFAULT_CONFIG_NAME = "config.toml"
CONFIG_ENV_VAR = "WENYAN_CONFIG"
DEFAULT_CONTAINER_IMAGE_PATH = "/mnt/host-downloads"
DEFAULT_LOG_FILE = "wenyan-mcp.log"


@dataclass(slots=True, frozen=True)
class WeChatSettings:
    app_id: str = ""
    app_secret: str = ""


@dataclass(slots=True, frozen=True)
class ImageSettings:
    host_image_path: str = ""
    container_image_path: str = DEFAULT_CONTAINER_IMAGE_PATH
    max_workers: int = 4


@dataclass(slots=True, frozen=True)
class HttpSettings:
    timeout: float = 30.0


@dataclass(slots=True, frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 3000
    path: str = "/mcp"
    json_response: bool = True


@dataclass(slots=True, frozen=True)
class LoggingSettings:
    file: Path | None = Path(DEFAULT_LOG_FILE)
    structured: bool = True
    level: str = "INFO"


@dataclass(slots=True, frozen=True)
class ArticleSettings:
    default_title: str = "Untitled"
    default_theme: str = "default"


@dataclass(slots=True, frozen=True)
class AppConfig:
    wechat: WeChatSettings = WeChatSettings()
    images: ImageSettings = ImageSettings()
    http: HttpSettings = HttpSettings()
    server: ServerSettings = ServerSettings()
    logging: LoggingSettings = LoggingSettings()
    article: ArticleSettings = ArticleSettings()


def _config_path(explicit: str | os.PathLike[str] | None, env: Mapping[str, str]) -> tuple[Path, bool]:
    """Return the config path and whether the caller insisted on it."""
    if explicit:
        return Path(explicit), True
    env_value = env.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value), True
    return Path.cwd() / DEFAULT_CONFIG_NAME, False


def _load_toml(path: Path, *, required: bool) -> dict[str, Any]:
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        return {}
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _to_path(value: str | None, *, base: Path, fallback: Path | None) -> Path | None:
    if value is None:
        return fallback
    if not value:
        return None
    candidate = Path(value)
    return candidate if candidate.is_absolute() else base / candidate


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def load_config(
    config_path: str | os.PathLike[str] | None = None,
    *,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load settings from TOML, then apply environment overrides.

    The file is optional unless it was named explicitly, either as an argument or
    through ``WENYAN_CONFIG``.
    """
    env = env if env is not None else os.environ
    path, required = _config_path(config_path, env)
    data = _load_toml(path, required=required)
    base = path.parent

    wechat_section = data.get("wechat", {})
    images_section = data.get("images", {})
    http_section = data.get("http", {})
    server_section = data.get("server", {})
    logging_section = data.get("logging", {})
    article_section = data.get("article", {})

    wechat = WeChatSettings(
        app_id=env.get("WECHAT_APP_ID") or str(wechat_section.get("app_id", "")),
        app_secret=env.get("WECHAT_APP_SECRET") or str(wechat_section.get("app_secret", "")),
    )

    images = ImageSettings(
        host_image_path=env.get("HOST_IMAGE_PATH") or str(images_section.get("host_image_path", "")),
        container_image_path=str(
            images_section.get("container_image_path", DEFAULT_CONTAINER_IMAGE_PATH)
        ),
        max_workers=max(1, int(images_section.get("max_workers", 4))),
    )

    http = HttpSettings(timeout=float(http_section.get("timeout", 30)))

    server = ServerSettings(
        host=str(server_section.get("host", "0.0.0.0")),
        port=int(server_section.get("port", 3000)),
        path="/" + str(server_section.get("path", "/mcp")).lstrip("/"),
        json_response=_as_bool(server_section.get("json_response"), True),
    )

    logging_settings = LoggingSettings(
        file=_to_path(logging_section.get("file"), base=base, fallback=Path(DEFAULT_LOG_FILE)),
        structured=_as_bool(logging_section.get("structured"), True),
        level=str(logging_section.get("level", "INFO")).upper(),
    )

    article = ArticleSettings(
        default_title=str(article_section.get("default_title", "Untitled")),
        default_theme=str(article_section.get("default_theme", "default")),
    )

    return AppConfig(
        wechat=wechat,
        images=images,
        http=http,
        server=server,
        logging=logging_settings,
        article=article,
    )
