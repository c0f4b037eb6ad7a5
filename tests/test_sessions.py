from __future__ import annotations

import pytest

from wenyan_mcp.server import SessionState, SessionStore


def test_created_session_waits_for_activation() -> None:
    store = SessionStore(id_factory=iter(["a", "b"]).__next__)
    session_id = store.new_id()

    session = store.create(session_id, object(), object())  # type: ignore[arg-type]

    assert session.state is SessionState.UNINITIALIZED
    assert store.activate(session_id) is session
    assert session.state is SessionState.ACTIVE


def test_delete_closes_and_forgets() -> None:
    store = SessionStore()
    session = store.create("s1", object(), object())  # type: ignore[arg-type]

    assert store.delete("s1") is session
    assert session.state is SessionState.CLOSED
    assert "s1" not in store
    assert store.delete("s1") is None
    assert store.activate("s1") is None


def test_duplicate_id_is_refused() -> None:
    store = SessionStore()
    store.create("s1", object(), object())  # type: ignore[arg-type]

    with pytest.raises(ValueError):
        store.create("s1", object(), object())  # type: ignore[arg-type]


def test_new_id_skips_registered_ids() -> None:
    store = SessionStore(id_factory=iter(["s1", "", "s2"]).__next__)
    store.create("s1", object(), object())  # type: ignore[arg-type]

    assert store.new_id() == "s2"
