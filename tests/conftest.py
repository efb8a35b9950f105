from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest
import requests

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from invoicekit.client import ApiClient  # noqa: E402
from invoicekit.config import ClientConfig  # noqa: E402

API_BASE = "http://api.test/api"


class DummyResponse:
    def __init__(
        self,
        status_code: int = 200,
        payload: Any | None = None,
        *,
        content: bytes = b"",
        text: str = "",
        reason: str = "",
    ):
        self.status_code = status_code
        self._payload = payload
        self.content = content
        self.text = text
        self.reason = reason
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self.closed = True

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def iter_content(self, chunk_size: int = 1):
        for start in range(0, len(self.content), chunk_size):
            yield self.content[start : start + chunk_size]


class BrokenStreamResponse(DummyResponse):
    """Streams one chunk and then loses the connection."""

    def iter_content(self, chunk_size: int = 1):
        yield b"partial"
        raise requests.ConnectionError("connection reset by peer")


def ok(data: Any = None) -> DummyResponse:
    return DummyResponse(200, {"success": True, "data": data})


class DummySession:
    """Routes ``(method, path)`` to canned responses.

    A route value may be a response, an exception to raise, or a list of
    those consumed in order (the last one repeats).
    """

    def __init__(self, routes: dict[tuple[str, str], Any] | None = None):
        self.routes: dict[tuple[str, str], Any] = dict(routes or {})
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.closed = False

    def request(self, method: str, url: str, **kwargs: Any):
        path = url[len(API_BASE) :] if url.startswith(API_BASE) else url
        self.calls.append((method, path, kwargs))
        route = self.routes.get((method, path))
        if route is None:
            return DummyResponse(404, {"success": False, "error": "Not found"}, reason="Not Found")
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]
        if isinstance(route, Exception):
            raise route
        return route

    def paths(self, method: str | None = None) -> list[str]:
        return [path for verb, path, _ in self.calls if method is None or verb == method]

    def close(self):
        self.closed = True


@pytest.fixture
def session() -> DummySession:
    return DummySession({("GET", "/health"): DummyResponse(200, {"status": "ok"})})


@pytest.fixture
def client(session: DummySession) -> ApiClient:
    api = ApiClient(ClientConfig(api_base=API_BASE), session=session)  # type: ignore[arg-type]
    api.connect_backoff = 0
    return api


@pytest.fixture
def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")
