"""MCP tool server exposing ``publish_article`` and ``list_themes``."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Mapping

from mcp.server.lowlevel import Server
from mcp.shared.exceptions import McpError
from mcp.types import (
    INVALID_PARAMS,
    CallToolRequest,
    ErrorData,
    ServerResult,
    TextContent,
    Tool,
)

from wenyan_mcp import __version__
from wenyan_mcp.errors import PublishError
from wenyan_mcp.services.article_workflow import ArticleWorkflow
from wenyan_mcp.services.themes import list_themes
from wenyan_mcp.utils.logging import get_logger

LOGGER = get_logger(__name__)

SERVER_NAME = "wenyan-mcp"

PUBLISH_ARTICLE = Tool(
    name="publish_article",
    description="Format a Markdown article using a selected theme and publish it to '微信公众号'.",
    inputSchema={
        "type": "object",
        "properties": {
            "content": {
                "type": "string",
                "description": "The original Markdown content to publish, preserving its frontmatter (if present).",
            },
            "theme_id": {
                "type": "string",
                "description": "ID of the theme to use (e.g., default, orangeheart, rainbow, lapis, pie, maize, purple, phycat).",
            },
            "appid": {
                "type": "string",
                "description": "WeChat AppID; defaults to the server configuration.",
            },
            "appsecret": {
                "type": "string",
                "description": "WeChat AppSecret; defaults to the server configuration.",
            },
        },
        "required": ["content"],
    },
)

LIST_THEMES = Tool(
    name="list_themes",
    description="List the themes compatible with the 'publish_article' tool to publish an article to '微信公众号'.",
    inputSchema={"type": "object", "properties": {}},
)

TOOLS = (PUBLISH_ARTICLE, LIST_THEMES)


def _optional_str(arguments: Mapping[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def theme_records() -> list[TextContent]:
    return [
        TextContent(type="text", text=json.dumps(theme.as_record(), ensure_ascii=False))
        for theme in list_themes()
    ]


async def publish_article(workflow: ArticleWorkflow, arguments: Mapping[str, Any]) -> list[TextContent]:
    """Run the publish workflow off the event loop.

    A ``PublishError`` propagates; the SDK turns it into an ``isError`` result
    carrying the error text.
    """
    content = arguments.get("content")
    if not isinstance(content, str) or not content:
        raise ValueError("Missing required argument: content")

    try:
        draft = await asyncio.to_thread(
            workflow.publish,
            content,
            theme_id=_optional_str(arguments, "theme_id"),
            app_id=_optional_str(arguments, "appid"),
            app_secret=_optional_str(arguments, "appsecret"),
        )
    except PublishError as exc:
        LOGGER.error(
            "publish_article failed",
            extra={
                "event": "tool.publish_failed",
                "error_type": type(exc).__name__,
                "error": str(exc),
            },
        )
        raise

    return [
        TextContent(
            type="text",
            text=(
                "Your article was successfully published to '公众号草稿箱'. "
                f"The media ID is {draft.media_id}."
            ),
        )
    ]


def build_server(workflow: ArticleWorkflow, *, version: str = __version__) -> Server:
    """Create the MCP server answering one session's tool calls."""
    server: Server = Server(SERVER_NAME, version=version)

    @server.list_tools()
    async def handle_list_tools() -> list[Tool]:
        return list(TOOLS)

    @server.call_tool()
    async def handle_call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
        if name == LIST_THEMES.name:
            return theme_records()
        return await publish_article(workflow, arguments)

    # Tool failures become ``isError`` results, but an unknown tool name is a
    # protocol error, so it is rejected before the SDK's tool handler runs.
    call_tool = server.request_handlers[CallToolRequest]
    known = {tool.name for tool in TOOLS}

    async def reject_unknown_tools(request: CallToolRequest) -> ServerResult:
        if request.params.name not in known:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=f"Unknown tool: {request.params.name}"))
        return await call_tool(request)

    server.request_handlers[CallToolRequest] = reject_unknown_tools
    return server
