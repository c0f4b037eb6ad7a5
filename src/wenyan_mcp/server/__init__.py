"""MCP protocol surface: session routing and tool handlers."""

from .app import SESSION_HEADER, SessionDispatcher, create_app, error_response, is_initialize_request
from .sessions import Session, SessionState, SessionStore
from .tools import build_server

__all__ = [
    "SESSION_HEADER",
    "Session",
    "SessionDispatcher",
    "SessionState",
    "SessionStore",
    "build_server",
    "create_app",
    "error_response",
    "is_initialize_request",
]
