"""HTTP entry point routing MCP requests to per-session servers."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

import anyio
from anyio.abc import TaskGroup, TaskStatus
from fastapi import FastAPI
from mcp.server.lowlevel import Server
from mcp.server.streamable_http import MCP_SESSION_ID_HEADER, StreamableHTTPServerTransport
from mcp.types import PARSE_ERROR
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from wenyan_mcp.utils.logging import get_logger

from .sessions import Session, SessionState, SessionStore

LOGGER = get_logger(__name__)

SESSION_HEADER = MCP_SESSION_ID_HEADER
BAD_REQUEST = -32000


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "error": {"code": code, "message": message},
        "id": request_id,
    }


def is_initialize_request(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and payload.get("jsonrpc") == "2.0"
        and payload.get("method") == "initialize"
        and "id" in payload
    )


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Hand an already-read body to the next reader, then fall back to ``receive``."""
    delivered = False

    async def replay() -> Message:
        nonlocal delivered
        if not delivered:
            delivered = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


async def _serve_watching_status(
    app: ASGIApp,
    scope: Scope,
    receive: Receive,
    send: Send,
    on_status: Callable[[int], None],
) -> None:
    """Run ``app``, reporting its status code before the response reaches the client."""

    async def watch(message: Message) -> None:
        if message["type"] == "http.response.start":
            on_status(message["status"])
        await send(message)

    await app(scope, receive, watch)


class SessionDispatcher:
    """Routes requests by session id and owns the session lifecycle.

    Each session pairs an MCP ``Server`` with a ``StreamableHTTPServerTransport``;
    the server runs as a task in the dispatcher's task group until its transport
    terminates.
    """

    def __init__(
        self,
        server_factory: Callable[[], Server],
        store: SessionStore | None = None,
        *,
        json_response: bool = True,
    ) -> None:
        self._server_factory = server_factory
        self._json_response = json_response
        self.store = store if store is not None else SessionStore()
        self._task_group: TaskGroup | None = None

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        async with anyio.create_task_group() as task_group:
            self._task_group = task_group
            try:
                yield
            finally:
                await self.close_all()
                task_group.cancel_scope.cancel()
                self._task_group = None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        if request.method == "POST":
            await self._handle_post(request, scope, receive, send)
        elif request.method in ("GET", "DELETE"):
            await self._handle_session_request(request, scope, receive, send)
        else:
            response = PlainTextResponse("Method Not Allowed", status_code=405, headers={"Allow": "GET, POST, DELETE"})
            await response(scope, receive, send)

    async def close_all(self) -> None:
        for session in self.store:
            await self._discard(session.id, session.transport)

    async def _handle_post(self, request: Request, scope: Scope, receive: Receive, send: Send) -> None:
        body = await request.body()
        receive = _replay_body(body, receive)
        session_id = request.headers.get(SESSION_HEADER)

        session = self._lookup(session_id)
        if session is not None:
            await self._forward(session, scope, receive, send)
            return

        if not session_id:
            try:
                payload = json.loads(body)
            except (json.JSONDecodeError, UnicodeDecodeError):
                response = JSONResponse(error_response(None, PARSE_ERROR, "Parse error"), status_code=400)
                await response(scope, receive, send)
                return
            if is_initialize_request(payload):
                await self._open_session(scope, receive, send)
                return

        LOGGER.warning(
            "Rejected request without a valid session",
            extra={"event": "session.rejected", "session_id": session_id},
        )
        response = JSONResponse(
            error_response(None, BAD_REQUEST, "Bad Request: No valid session ID provided"),
            status_code=400,
        )
        await response(scope, receive, send)

    async def _handle_session_request(self, request: Request, scope: Scope, receive: Receive, send: Send) -> None:
        session = self._lookup(request.headers.get(SESSION_HEADER))
        if session is None:
            response = PlainTextResponse("Invalid or missing session ID", status_code=400)
            await response(scope, receive, send)
            return
        await self._forward(session, scope, receive, send)

    async def _forward(self, session: Session, scope: Scope, receive: Receive, send: Send) -> None:
        await session.transport.handle_request(scope, receive, send)
        if session.transport.is_terminated:
            await self._discard(session.id, session.transport)

    async def _open_session(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self._task_group is None:
            raise RuntimeError("SessionDispatcher.run() must be entered before serving requests")

        session_id = self.store.new_id()
        transport = StreamableHTTPServerTransport(
            mcp_session_id=session_id,
            is_json_response_enabled=self._json_response,
        )
        session = self.store.create(session_id, self._server_factory(), transport)
        await self._task_group.start(self._run_session, session)

        def activate(status: int) -> None:
            if status < 400:
                self.store.activate(session_id)
                LOGGER.info("Session initialized", extra={"event": "session.created", "session_id": session_id})

        try:
            await _serve_watching_status(transport.handle_request, scope, receive, send, activate)
        finally:
            if session.state is not SessionState.ACTIVE:
                await self._discard(session_id, transport)

    async def _run_session(
        self,
        session: Session,
        *,
        task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        server = session.server
        async with session.transport.connect() as (read_stream, write_stream):
            task_status.started()
            try:
                await server.run(read_stream, write_stream, server.create_initialization_options())
            except Exception:
                LOGGER.exception("Session crashed", extra={"event": "session.crashed", "session_id": session.id})
            finally:
                await self._discard(session.id, session.transport)

    async def _discard(self, session_id: str, transport: StreamableHTTPServerTransport) -> None:
        if self.store.delete(session_id) is not None:
            LOGGER.info("Session closed", extra={"event": "session.closed", "session_id": session_id})
        if not transport.is_terminated:
            with anyio.CancelScope(shield=True):
                await transport.terminate()

    def _lookup(self, session_id: str | None) -> Session | None:
        session = self.store.get(session_id)
        if session is None or session.state is not SessionState.ACTIVE:
            return None
        return session


def create_app(dispatcher: SessionDispatcher, *, path: str = "/mcp") -> FastAPI:
    """Build the FastAPI application serving ``dispatcher`` at ``path``."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        async with dispatcher.run():
            yield

    app = FastAPI(title="wenyan-mcp", lifespan=lifespan)
    app.state.dispatcher = dispatcher
    app.router.routes.append(Route(path, endpoint=dispatcher))
    return app
