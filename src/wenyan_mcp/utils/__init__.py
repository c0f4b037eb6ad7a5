"""Utility exports."""

from .html import SoupImageDocument
from .http import ThreadLocalSession
from .logging import configure_logging, get_logger

__all__ = [
    "SoupImageDocument",
    "ThreadLocalSession",
    "configure_logging",
    "get_logger",
]
