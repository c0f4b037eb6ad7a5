"""In-memory session registry owned by the protocol dispatcher."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator

from mcp.server.lowlevel import Server
from mcp.server.streamable_http import StreamableHTTPServerTransport


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSED = "closed"


@dataclass(slots=True)
class Session:
    """One caller conversation: an MCP server paired with its HTTP transport."""

    id: str
    server: Server
    transport: StreamableHTTPServerTransport
    state: SessionState = SessionState.UNINITIALIZED


def _uuid4() -> str:
    return str(uuid.uuid4())


class SessionStore:
    """Maps session ids to their server/transport pair."""

    def __init__(self, id_factory: Callable[[], str] = _uuid4) -> None:
        self._id_factory = id_factory
        self._sessions: dict[str, Session] = {}

    def new_id(self) -> str:
        """Mint an id that is not currently registered."""
        while True:
            candidate = self._id_factory()
            if candidate and candidate not in self._sessions:
                return candidate

    def create(self, session_id: str, server: Server, transport: StreamableHTTPServerTransport) -> Session:
        if session_id in self._sessions:
            raise ValueError(f"Session already registered: {session_id}")
        session = Session(
            id=session_id,
            server=server,
            transport=transport,
        )
        self._sessions[session_id] = session
        return session

    def activate(self, session_id: str) -> Session | None:
        """Mark a registered session as ready to accept follow-up requests."""
        session = self._sessions.get(session_id)
        if session is not None and session.state is SessionState.UNINITIALIZED:
            session.state = SessionState.ACTIVE
        return session

    def get(self, session_id: str | None) -> Session | None:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> Session | None:
        session = self._sessions.pop(session_id, None)
        if session is not None:
            session.state = SessionState.CLOSED
        return session

    def ids(self) -> list[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))
