"""Render Markdown into WeChat-ready HTML with inline theme styles."""

from __future__ import annotations

from bs4 import BeautifulSoup
from markdown import Markdown

from wenyan_mcp.services.themes import Palette, Theme

_EXTENSIONS = ["extra", "sane_lists", "codehilite"]
_EXTENSION_CONFIGS = {"codehilite": {"noclasses": True, "guess_lang": False}}


def _element_styles(palette: Palette) -> dict[str, str]:
    link = palette.link or palette.accent
    return {
        "h1": f"font-size:1.6em; font-weight:bold; text-align:center; margin:1.2em 0 0.8em; color:{palette.heading};",
        "h2": (
            f"font-size:1.35em; font-weight:bold; margin:1.2em 0 0.8em; padding-bottom:0.3em; "
            f"color:{palette.heading}; border-bottom:2px solid {palette.accent};"
        ),
        "h3": f"font-size:1.15em; font-weight:bold; margin:1em 0 0.6em; color:{palette.accent};",
        "h4": f"font-size:1em; font-weight:bold; margin:1em 0 0.6em; color:{palette.heading};",
        "p": f"margin:1em 0; line-height:1.75; letter-spacing:0.05em; color:{palette.text};",
        "blockquote": (
            f"margin:1em 0; padding:0.8em 1em; border-left:4px solid {palette.accent}; "
            f"background:{palette.quote_background}; color:#666666;"
        ),
        "a": f"color:{link}; text-decoration:none; border-bottom:1px solid {link};",
        "strong": f"font-weight:bold; color:{palette.accent};",
        "ul": f"margin:1em 0; padding-left:1.5em; color:{palette.text};",
        "ol": f"margin:1em 0; padding-left:1.5em; color:{palette.text};",
        "li": "margin:0.3em 0; line-height:1.75;",
        "code": (
            f"font-family:Menlo, Consolas, monospace; font-size:0.9em; padding:0.1em 0.3em; "
            f"border-radius:3px; background:{palette.code_background}; color:{palette.accent};"
        ),
        "pre": (
            f"margin:1em 0; padding:1em; overflow-x:auto; border-radius:6px; "
            f"background:{palette.code_background}; font-size:0.85em; line-height:1.5;"
        ),
        "img": "display:block; max-width:100%; margin:1em auto; border-radius:4px;",
        "table": "border-collapse:collapse; width:100%; margin:1em 0; font-size:0.9em;",
        "th": f"border:1px solid #dfdfdf; padding:0.5em; background:{palette.quote_background};",
        "td": "border:1px solid #dfdfdf; padding:0.5em;",
        "hr": f"border:none; border-top:1px solid {palette.accent}; margin:2em 0;",
    }


class MarkdownRenderer:
    """Pure ``(markdown, theme) -> html`` rendering."""

    def render(self, body: str, theme: Theme) -> str:
        converter = Markdown(extensions=_EXTENSIONS, extension_configs=_EXTENSION_CONFIGS)
        html = converter.convert(body)
        return self._apply_theme(html, theme)

    def _apply_theme(self, html: str, theme: Theme) -> str:
        soup = BeautifulSoup(html, "html.parser")
        for tag_name, style in _element_styles(theme.palette).items():
            for element in soup.find_all(tag_name):
                if tag_name == "code" and element.parent is not None and element.parent.name == "pre":
                    element["style"] = "font-family:Menlo, Consolas, monospace; background:none;"
                    continue
                existing = element.get("style")
                element["style"] = f"{style} {existing}" if existing else style

        section = soup.new_tag(
            "section",
            attrs={
                "id": "wenyan",
                "data-theme": theme.id.value,
                "style": f"font-size:16px; color:{theme.palette.text}; word-break:break-word;",
            },
        )
        for child in list(soup.contents):
            section.append(child.extract())
        soup.append(section)
        return str(soup)
