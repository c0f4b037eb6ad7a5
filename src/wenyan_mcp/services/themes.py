"""Statically registered article themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from wenyan_mcp.errors import InvalidThemeError


class ThemeId(str, Enum):
    DEFAULT = "default"
    ORANGEHEART = "orangeheart"
    RAINBOW = "rainbow"
    LAPIS = "lapis"
    PIE = "pie"
    MAIZE = "maize"
    PURPLE = "purple"
    PHYCAT = "phycat"


@dataclass(slots=True, frozen=True)
class Palette:
    """Colours the renderer turns into inline styles."""

    accent: str
    text: str = "#3f3f3f"
    heading: str = "#222222"
    quote_background: str = "#f7f7f7"
    code_background: str = "#f6f8fa"
    link: str | None = None


@dataclass(slots=True, frozen=True)
class Theme:
    id: ThemeId
    name: str
    description: str
    palette: Palette

    def as_record(self) -> dict[str, str]:
        return {"id": self.id.value, "name": self.name, "description": self.description}


_THEMES: tuple[Theme, ...] = (
    Theme(
        ThemeId.DEFAULT,
        "Default",
        "A clean, neutral layout suited to most articles.",
        Palette(accent="#0f4c81"),
    ),
    Theme(
        ThemeId.ORANGEHEART,
        "OrangeHeart",
        "Warm orange headings with soft rounded quotes.",
        Palette(accent="#ef7060", quote_background="#fff5f2"),
    ),
    Theme(
        ThemeId.RAINBOW,
        "Rainbow",
        "Colourful headings for light-hearted posts.",
        Palette(accent="#e8594a", heading="#3b8cde", quote_background="#fbf9e7"),
    ),
    Theme(
        ThemeId.LAPIS,
        "Lapis",
        "Cool lapis-blue accents with generous spacing.",
        Palette(accent="#4870ac", quote_background="#f0f4fa"),
    ),
    Theme(
        ThemeId.PIE,
        "Pie",
        "Compact, sober styling inspired by print magazines.",
        Palette(accent="#da5a4d", text="#333333", quote_background="#f8f8f8"),
    ),
    Theme(
        ThemeId.MAIZE,
        "Maize",
        "Soft yellow highlights on a paper-like background.",
        Palette(accent="#d4a72c", quote_background="#fcf8e8"),
    ),
    Theme(
        ThemeId.PURPLE,
        "Purple",
        "Elegant purple accents for long-form writing.",
        Palette(accent="#8064a9", quote_background="#f6f3fa"),
    ),
    Theme(
        ThemeId.PHYCAT,
        "物理猫-薄荷",
        "Mint green theme with clear section headings.",
        Palette(accent="#14a88d", quote_background="#effaf7", link="#0d8a72"),
    ),
)

THEMES: Mapping[ThemeId, Theme] = MappingProxyType({theme.id: theme for theme in _THEMES})
_NAME_INDEX: Mapping[str, Theme] = MappingProxyType({theme.name.lower(): theme for theme in _THEMES})


def list_themes() -> list[Theme]:
    return list(_THEMES)


def resolve_theme(theme_id: str | None, *, default: str = ThemeId.DEFAULT.value) -> Theme:
    """Look a theme up by exact id, then by case-insensitive name.

    An empty ``theme_id`` selects ``default``.
    """
    key = (theme_id or "").strip() or default
    try:
        return THEMES[ThemeId(key)]
    except ValueError:
        pass
    theme = _NAME_INDEX.get(key.lower())
    if theme is None:
        raise InvalidThemeError(
            f"Invalid theme ID: {key}",
            details={"available": [t.id.value for t in _THEMES]},
        )
    return theme
