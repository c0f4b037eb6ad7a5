"""Tests for cover resolution and draft submission."""

from __future__ import annotations

from pathlib import Path

import pytest

from wenyan_mcp.errors import MissingCoverError, RemoteApiError, UnexpectedResponseError
from wenyan_mcp.platforms.wechat import (
    ImageSourceResolver,
    WeChatApiClient,
    WeChatCredentialStore,
    WeChatDraftClient,
    WeChatDraftPublisher,
    WeChatMediaUploader,
)
from wenyan_mcp.services.images import ImageRelocator
from wenyan_mcp.settings import WeChatSettings

from .fakes import DRAFT_URL, UPLOAD_URL, FakeResponse, FakeSession, draft_body


def _publisher(session: FakeSession) -> WeChatDraftPublisher:
    client = WeChatApiClient(session=session)  # type: ignore[arg-type]
    uploader = WeChatMediaUploader(client, ImageSourceResolver(session=session))  # type: ignore[arg-type]
    return WeChatDraftPublisher(
        WeChatCredentialStore(api_client=client, defaults=WeChatSettings("id", "secret")),
        uploader,
        ImageRelocator(uploader),
        WeChatDraftClient(client),
    )


def _uploaded_names(session: FakeSession) -> list[str]:
    return [call["files"]["media"][0] for call in session.calls_to(UPLOAD_URL)]


def test_first_embedded_image_becomes_cover(fake_session: FakeSession) -> None:
    fake_session.route("GET", "https://example.com/a.png", FakeResponse(content=b"png"))

    result = _publisher(fake_session).publish_to_draft("Title", '<p><img src="https://example.com/a.png"></p>')

    assert result.media_id == "DRAFT_ID"
    article = draft_body(fake_session.calls_to(DRAFT_URL)[0])["articles"][0]
    assert article["thumb_media_id"] == "MEDIA_a.png"
    assert 'src="https://mmbiz.qpic.cn/uploaded/a.png"' in article["content"]
    assert _uploaded_names(fake_session) == ["a.png"]


def test_explicit_cover_is_uploaded_as_cover_jpg(fake_session: FakeSession, tmp_path: Path) -> None:
    cover = tmp_path / "x.png"
    cover.write_bytes(b"cover")

    _publisher(fake_session).publish_to_draft("Title", "<p>text only</p>", str(cover))

    article = draft_body(fake_session.calls_to(DRAFT_URL)[0])["articles"][0]
    assert article["thumb_media_id"] == "MEDIA_cover.jpg"
    assert article["content"] == "<p>text only</p>"


def test_cdn_first_image_is_reuploaded_as_cover(fake_session: FakeSession) -> None:
    cdn = "https://mmbiz.qpic.cn/existing/pic"
    fake_session.route("GET", cdn, FakeResponse(content=b"cdn"))

    _publisher(fake_session).publish_to_draft("Title", f'<img src="{cdn}">')

    assert _uploaded_names(fake_session) == ["cover.jpg"]
    article = draft_body(fake_session.calls_to(DRAFT_URL)[0])["articles"][0]
    assert article["thumb_media_id"] == "MEDIA_cover.jpg"


def test_missing_cover_raises_before_draft_call(fake_session: FakeSession) -> None:
    with pytest.raises(MissingCoverError):
        _publisher(fake_session).publish_to_draft("Title", "<p>no images</p>")

    assert fake_session.calls_to(DRAFT_URL) == []


def test_draft_body_keeps_unicode_and_optional_fields(fake_session: FakeSession, tmp_path: Path) -> None:
    cover = tmp_path / "c.jpg"
    cover.write_bytes(b"c")

    _publisher(fake_session).publish_to_draft("中文标题", "<p>正文</p>", str(cover), digest="摘要", author="作者")

    call = fake_session.calls_to(DRAFT_URL)[0]
    assert "中文标题".encode("utf-8") in call["data"]
    assert call["params"] == {"access_token": "TOKEN"}
    article = draft_body(call)["articles"][0]
    assert article["digest"] == "摘要"
    assert article["author"] == "作者"


def test_draft_errcode_raises(fake_session: FakeSession, tmp_path: Path) -> None:
    cover = tmp_path / "c.jpg"
    cover.write_bytes(b"c")
    fake_session.route("POST", DRAFT_URL, FakeResponse(json_data={"errcode": 45009, "errmsg": "reach max api daily quota limit"}))

    with pytest.raises(RemoteApiError) as excinfo:
        _publisher(fake_session).publish_to_draft("Title", "<p/>", str(cover))

    assert excinfo.value.code == 45009


def test_draft_without_media_id_or_errcode_is_unexpected(fake_session: FakeSession, tmp_path: Path) -> None:
    cover = tmp_path / "c.jpg"
    cover.write_bytes(b"c")
    fake_session.route("POST", DRAFT_URL, FakeResponse(json_data={"something": "else"}))

    with pytest.raises(UnexpectedResponseError):
        _publisher(fake_session).publish_to_draft("Title", "<p/>", str(cover))


def test_digest_is_truncated_to_256_bytes() -> None:
    payload = WeChatDraftClient(WeChatApiClient(session=FakeSession())).build_payload(  # type: ignore[arg-type]
        "T", "<p/>", "THUMB", digest="文" * 200
    )

    digest = payload["articles"][0]["digest"]
    assert len(digest.encode("utf-8")) <= 256
    assert set(digest) == {"文"}
