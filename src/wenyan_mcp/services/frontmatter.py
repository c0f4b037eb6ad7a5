"""Split a leading YAML front-matter block off Markdown text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Mapping

import yaml

from wenyan_mcp.utils.logging import get_logger

LOGGER = get_logger(__name__)

_FRONT_MATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?P<meta>.*?)^(?:---|\.\.\.)[ \t]*\r?$\n?",
    re.DOTALL | re.MULTILINE,
)


@dataclass(slots=True, frozen=True)
class ParsedArticle:
    """Markdown body plus the metadata taken from its front matter."""

    body: str
    title: str | None = None
    cover: str | None = None
    description: str | None = None


def _field(metadata: Mapping[str, Any], key: str) -> str | None:
    value = metadata.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def split_front_matter(text: str) -> ParsedArticle:
    """Return the body without its front matter, plus ``title``/``cover``/``description``.

    Text without a front-matter block, or whose block is not a YAML mapping, is
    returned verbatim.
    """
    match = _FRONT_MATTER_PATTERN.match(text)
    if not match:
        return ParsedArticle(body=text)

    try:
        metadata = yaml.safe_load(match.group("meta"))
    except yaml.YAMLError as exc:
        LOGGER.warning(
            "Failed to parse front matter, keeping content verbatim",
            extra={"event": "frontmatter.invalid", "reason": str(exc)},
        )
        return ParsedArticle(body=text)

    if metadata is None:
        metadata = {}
    if not isinstance(metadata, dict):
        LOGGER.warning(
            "Front matter is not a mapping, keeping content verbatim",
            extra={"event": "frontmatter.not_mapping", "type": type(metadata).__name__},
        )
        return ParsedArticle(body=text)

    return ParsedArticle(
        body=text[match.end() :],
        title=_field(metadata, "title"),
        cover=_field(metadata, "cover"),
        description=_field(metadata, "description"),
    )
