"""Workflow for publishing a Markdown article as a WeChat draft."""

from __future__ import annotations

from bs4 import BeautifulSoup

from wenyan_mcp.platforms.base import DraftResult
from wenyan_mcp.platforms.wechat import WeChatDraftPublisher
from wenyan_mcp.services.frontmatter import ParsedArticle, split_front_matter
from wenyan_mcp.services.renderer import MarkdownRenderer
from wenyan_mcp.services.themes import resolve_theme
from wenyan_mcp.settings import ArticleSettings
from wenyan_mcp.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ArticleWorkflow:
    """Splits front matter, renders the body and hands the HTML to the publisher."""

    def __init__(
        self,
        publisher: WeChatDraftPublisher,
        renderer: MarkdownRenderer | None = None,
        settings: ArticleSettings | None = None,
    ) -> None:
        self._publisher = publisher
        self._renderer = renderer or MarkdownRenderer()
        self._settings = settings or ArticleSettings()

    def publish(
        self,
        content: str,
        *,
        theme_id: str | None = None,
        app_id: str | None = None,
        app_secret: str | None = None,
    ) -> DraftResult:
        theme = resolve_theme(theme_id, default=self._settings.default_theme)
        article = split_front_matter(content)
        html = self._renderer.render(article.body, theme)
        title = self.resolve_title(article, html)
        LOGGER.info(
            "Article rendered",
            extra={"event": "article.rendered", "theme": theme.id.value, "title": title},
        )
        return self._publisher.publish_to_draft(
            title,
            html,
            article.cover,
            app_id,
            app_secret,
            digest=article.description,
        )

    def resolve_title(self, article: ParsedArticle, html: str) -> str:
        """Front-matter title, else the first rendered level-one heading, else the configured default."""
        if article.title:
            return article.title
        heading = BeautifulSoup(html, "html.parser").find("h1")
        if heading is not None:
            text = " ".join(heading.get_text().split())
            if text:
                return text
        return self._settings.default_title
