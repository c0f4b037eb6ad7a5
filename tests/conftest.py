from __future__ import annotations

import pytest

from .fakes import DRAFT_URL, TOKEN_URL, UPLOAD_URL, FakeResponse, FakeSession, upload_handler


@pytest.fixture
def fake_session() -> FakeSession:
    session = FakeSession()
    session.route("GET", TOKEN_URL, FakeResponse(json_data={"access_token": "TOKEN", "expires_in": 7200}))
    session.route("POST", UPLOAD_URL, upload_handler)
    session.route("POST", DRAFT_URL, FakeResponse(json_data={"media_id": "DRAFT_ID"}))
    return session
