from __future__ import annotations

from bs4 import BeautifulSoup

from wenyan_mcp.services.renderer import MarkdownRenderer
from wenyan_mcp.services.themes import resolve_theme


def _render(markdown_text: str, theme_id: str = "default") -> BeautifulSoup:
    html = MarkdownRenderer().render(markdown_text, resolve_theme(theme_id))
    return BeautifulSoup(html, "html.parser")


def test_output_is_wrapped_in_themed_section() -> None:
    soup = _render("# Hello\n\nWorld", "lapis")

    section = soup.find("section", id="wenyan")
    assert section is not None
    assert section["data-theme"] == "lapis"
    assert section.find("h1").get_text() == "Hello"


def test_inline_styles_follow_theme_palette() -> None:
    default_h3 = _render("### Sub").find("h3")["style"]
    orange_h3 = _render("### Sub", "orangeheart").find("h3")["style"]

    assert "#ef7060" in orange_h3
    assert default_h3 != orange_h3


def test_raw_img_tags_survive_rendering() -> None:
    soup = _render("# Hello\n<img src='https://example.com/a.png'>")

    img = soup.find("img")
    assert img["src"] == "https://example.com/a.png"
    assert "max-width:100%" in img["style"]


def test_tables_and_fenced_code_render() -> None:
    soup = _render("| a | b |\n|---|---|\n| 1 | 2 |\n\n```python\nprint('hi')\n```\n")

    assert soup.find("table") is not None
    assert soup.find("pre") is not None
    assert "print" in soup.find("pre").get_text()


def test_render_is_deterministic() -> None:
    renderer = MarkdownRenderer()
    theme = resolve_theme("maize")

    assert renderer.render("*a* **b**", theme) == renderer.render("*a* **b**", theme)
