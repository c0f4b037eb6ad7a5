"""Wire configuration into the publishing workflow and the protocol server."""

from __future__ import annotations

import requests
from fastapi import FastAPI

from wenyan_mcp.platforms.wechat import (
    ImageSourceResolver,
    WeChatApiClient,
    WeChatCredentialStore,
    WeChatDraftClient,
    WeChatDraftPublisher,
    WeChatMediaUploader,
)
from wenyan_mcp.server import SessionDispatcher, build_server, create_app
from wenyan_mcp.services.article_workflow import ArticleWorkflow
from wenyan_mcp.services.images import ImageRelocator
from wenyan_mcp.settings import AppConfig
from wenyan_mcp.utils.http import ThreadLocalSession


def build_workflow(
    config: AppConfig,
    *,
    session: requests.Session | ThreadLocalSession | None = None,
) -> ArticleWorkflow:
    """Assemble the publish pipeline from configuration."""
    http_session = session or ThreadLocalSession()
    api_client = WeChatApiClient(session=http_session, timeout=config.http.timeout)
    resolver = ImageSourceResolver(
        session=http_session,
        host_image_path=config.images.host_image_path,
        container_image_path=config.images.container_image_path,
        timeout=config.http.timeout,
    )
    uploader = WeChatMediaUploader(api_client, resolver)
    publisher = WeChatDraftPublisher(
        WeChatCredentialStore(api_client=api_client, defaults=config.wechat),
        uploader,
        ImageRelocator(uploader, max_workers=config.images.max_workers),
        WeChatDraftClient(api_client),
    )
    return ArticleWorkflow(publisher, settings=config.article)


def build_app(config: AppConfig, *, workflow: ArticleWorkflow | None = None) -> FastAPI:
    """Create the HTTP application with a fresh session store."""
    shared_workflow = workflow or build_workflow(config)
    dispatcher = SessionDispatcher(
        lambda: build_server(shared_workflow),
        json_response=config.server.json_response,
    )
    return create_app(dispatcher, path=config.server.path)
