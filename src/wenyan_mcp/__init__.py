"""Publish Markdown articles to the WeChat Official Account draft box over MCP."""

__version__ = "0.1.0"
