from __future__ import annotations

import pytest

from wenyan_mcp.errors import CredentialError, RemoteApiError, UnexpectedResponseError
from wenyan_mcp.platforms.wechat import WeChatApiClient, WeChatCredentialStore
from wenyan_mcp.settings import WeChatSettings

from .fakes import TOKEN_URL, FakeResponse, FakeSession


def _store(session: FakeSession, **defaults: str) -> WeChatCredentialStore:
    client = WeChatApiClient(session=session)  # type: ignore[arg-type]
    return WeChatCredentialStore(api_client=client, defaults=WeChatSettings(**defaults))


def test_explicit_values_override_defaults(fake_session: FakeSession) -> None:
    store = _store(fake_session, app_id="default-id", app_secret="default-secret")

    token = store.fetch_access_token("call-id", "call-secret")

    assert token.token == "TOKEN"
    assert token.expires_in == 7200
    params = fake_session.calls_to(TOKEN_URL)[0]["params"]
    assert params == {"grant_type": "client_credential", "appid": "call-id", "secret": "call-secret"}


def test_defaults_fill_missing_values(fake_session: FakeSession) -> None:
    store = _store(fake_session, app_id="default-id", app_secret="default-secret")

    store.fetch_access_token(None, "call-secret")

    params = fake_session.calls_to(TOKEN_URL)[0]["params"]
    assert params["appid"] == "default-id"
    assert params["secret"] == "call-secret"


def test_missing_credentials_raise_without_remote_call(fake_session: FakeSession) -> None:
    store = _store(fake_session, app_id="only-id")

    with pytest.raises(CredentialError) as excinfo:
        store.fetch_access_token()

    assert excinfo.value.details["missing"] == ["appsecret"]
    assert fake_session.calls == []


def test_errcode_response_raises_remote_api_error() -> None:
    session = FakeSession()
    session.route("GET", TOKEN_URL, FakeResponse(json_data={"errcode": 40125, "errmsg": "invalid appsecret"}))

    with pytest.raises(RemoteApiError) as excinfo:
        _store(session).fetch_access_token("id", "secret")

    assert excinfo.value.code == 40125
    assert "40125" in str(excinfo.value)


@pytest.mark.parametrize(
    "response",
    [FakeResponse(json_data={"expires_in": 7200}), FakeResponse(500, content=b"<html>oops</html>")],
)
def test_unexpected_shapes_raise(response: FakeResponse) -> None:
    session = FakeSession()
    session.route("GET", TOKEN_URL, response)

    with pytest.raises(UnexpectedResponseError):
        _store(session).fetch_access_token("id", "secret")


def test_each_call_fetches_a_fresh_token(fake_session: FakeSession) -> None:
    store = _store(fake_session, app_id="id", app_secret="secret")

    store.fetch_access_token()
    store.fetch_access_token()

    assert len(fake_session.calls_to(TOKEN_URL)) == 2
