"""Command-line interface for the wenyan MCP server."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, Sequence

from ..errors import PublishError
from ..services.themes import list_themes
from ..settings import AppConfig, load_config
from ..utils.logging import configure_logging, get_logger
from .bootstrap import build_app, build_workflow

LOGGER = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    handler: Callable[[argparse.Namespace, AppConfig], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1

    config = load_config(args.config)
    configure_logging(
        level=config.logging.level,
        structured=config.logging.structured and not args.log_plain,
        log_file=config.logging.file,
    )
    return handler(args, config)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wenyan-mcp",
        description="Publish Markdown articles to the WeChat Official Account draft box",
    )
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )

    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser("serve", help="Run the MCP server over HTTP")
    serve_parser.add_argument("--host", default=None, help="Bind address; defaults to config")
    serve_parser.add_argument("--port", type=int, default=None, help="Port; defaults to config")
    serve_parser.set_defaults(handler=_handle_serve)

    publish_parser = subparsers.add_parser("publish", help="Publish a Markdown file as a draft")
    publish_parser.add_argument("file", type=Path, help="Markdown file, optionally with front matter")
    publish_parser.add_argument("--theme", dest="theme_id", default=None, help="Theme id or name")
    publish_parser.add_argument("--appid", default=None, help="WeChat AppID override")
    publish_parser.add_argument("--appsecret", default=None, help="WeChat AppSecret override")
    publish_parser.set_defaults(handler=_handle_publish)

    themes_parser = subparsers.add_parser("themes", help="List available themes")
    themes_parser.set_defaults(handler=_handle_themes)

    return parser


def _handle_serve(args: argparse.Namespace, config: AppConfig) -> int:
    import uvicorn

    host = args.host or config.server.host
    port = args.port or config.server.port
    LOGGER.info(
        "MCP Server (HTTP) listening",
        extra={"event": "server.start", "host": host, "port": port, "path": config.server.path},
    )
    uvicorn.run(build_app(config), host=host, port=port, log_config=None)
    return 0


def _handle_publish(args: argparse.Namespace, config: AppConfig) -> int:
    try:
        content = args.file.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"无法读取文章: {exc}", file=sys.stderr)
        return 1

    workflow = build_workflow(config)
    try:
        result = workflow.publish(
            content,
            theme_id=args.theme_id,
            app_id=args.appid,
            app_secret=args.appsecret,
        )
    except PublishError as exc:
        print(f"发布失败: {exc}", file=sys.stderr)
        return 1

    print("草稿创建成功")
    print("media_id:", result.media_id)
    return 0


def _handle_themes(args: argparse.Namespace, config: AppConfig) -> int:
    for theme in list_themes():
        print(json.dumps(theme.as_record(), ensure_ascii=False))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
