"""Helpers for parsing HTML content."""

from __future__ import annotations

from bs4 import BeautifulSoup


class SoupImageDocument:
    """``ImageDocument`` backed by BeautifulSoup."""

    def __init__(self, html: str, *, parser: str = "html.parser") -> None:
        self._soup = BeautifulSoup(html, parser)
        self._images = self._soup.find_all("img")

    def image_sources(self) -> list[str | None]:
        return [img.get("src") for img in self._images]

    def set_image_source(self, index: int, src: str) -> None:
        self._images[index]["src"] = src

    def serialize(self) -> str:
        return str(self._soup)
