from __future__ import annotations

import pytest

from wenyan_mcp.services.frontmatter import split_front_matter


@pytest.mark.parametrize(
    "text",
    [
        "",
        "# Hello\n\nworld\n",
        "  leading spaces\n\n\ntrailing newlines\n\n",
        "---\n\nA horizontal rule opens this document.\n",
        "Body first\n---\ntitle: not front matter\n---\n",
    ],
)
def test_text_without_front_matter_passes_through(text: str) -> None:
    article = split_front_matter(text)

    assert article.body == text
    assert article.title is None
    assert article.cover is None


def test_extracts_title_and_cover() -> None:
    text = "---\ntitle: 你好\ncover: /local/path/x.jpg\ndescription: 摘要\n---\n# Heading\n\nBody  \n"

    article = split_front_matter(text)

    assert article.title == "你好"
    assert article.cover == "/local/path/x.jpg"
    assert article.description == "摘要"
    assert article.body == "# Heading\n\nBody  \n"


def test_empty_block_is_removed() -> None:
    article = split_front_matter("---\n---\nbody")

    assert article.body == "body"
    assert article.title is None


def test_windows_line_endings() -> None:
    article = split_front_matter("---\r\ntitle: T\r\n---\r\nbody\r\n")

    assert article.title == "T"
    assert article.body == "body\r\n"


def test_non_mapping_block_is_kept_verbatim() -> None:
    text = "---\n- just\n- a list\n---\nbody"

    article = split_front_matter(text)

    assert article.body == text
    assert article.title is None


def test_invalid_yaml_is_kept_verbatim() -> None:
    text = "---\ntitle: [unclosed\n---\nbody"

    article = split_front_matter(text)

    assert article.body == text


def test_blank_values_are_treated_as_absent() -> None:
    article = split_front_matter("---\ntitle: '  '\ncover:\n---\nbody")

    assert article.title is None
    assert article.cover is None
