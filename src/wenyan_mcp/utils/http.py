"""HTTP session helpers."""

from __future__ import annotations

import threading
from typing import Any, Callable

import requests


class ThreadLocalSession:
    """Hands each thread its own ``requests.Session``.

    ``requests.Session`` is not safe to share between threads, while image
    uploads run on a thread pool and tool calls run through ``asyncio.to_thread``.
    """

    def __init__(self, factory: Callable[[], requests.Session] = requests.Session) -> None:
        self._factory = factory
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._factory()
            self._local.session = session
        return session

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        return self.session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        return self.session.get(url, **kwargs)
