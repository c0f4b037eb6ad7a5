from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from wenyan_mcp.utils.http import ThreadLocalSession

from .fakes import FakeResponse, FakeSession


class CountingFactory:
    def __init__(self) -> None:
        self.created: list[FakeSession] = []
        self._lock = threading.Lock()

    def __call__(self) -> FakeSession:
        session = FakeSession()
        session.route("GET", "https://example.com/a.png", FakeResponse(content=b"png"))
        with self._lock:
            self.created.append(session)
        return session


def test_same_thread_reuses_its_session() -> None:
    factory = CountingFactory()
    shared = ThreadLocalSession(factory)  # type: ignore[arg-type]

    assert shared.session is shared.session
    shared.get("https://example.com/a.png")
    shared.request("GET", "https://example.com/a.png")

    assert len(factory.created) == 1
    assert len(factory.created[0].calls) == 2


def test_each_worker_thread_gets_its_own_session() -> None:
    factory = CountingFactory()
    shared = ThreadLocalSession(factory)  # type: ignore[arg-type]
    barrier = threading.Barrier(3)

    def fetch(_: int) -> int:
        barrier.wait()
        shared.get("https://example.com/a.png")
        return id(shared.session)

    with ThreadPoolExecutor(max_workers=3) as pool:
        owners = set(pool.map(fetch, range(3)))

    assert len(owners) == 3
    assert len(factory.created) == 3
    assert all(len(session.calls) == 1 for session in factory.created)
