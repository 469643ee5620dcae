from __future__ import annotations

import json
from typing import Any

import pytest
import requests


class FakeResponse:
    def __init__(self, payload: Any = None, *, status_code: int = 200, content: bytes | None = None) -> None:
        self.status_code = status_code
        if content is None:
            content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self.content = content

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")

    def json(self) -> Any:
        return json.loads(self.content.decode("utf-8"))

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    """Routes GET requests to canned payloads; unknown URLs answer 404."""

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.calls: list[str] = []
        self.timeouts: list[float | None] = []

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.calls.append(url)
        self.timeouts.append(timeout)
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(status_code=404, content=b"not found")
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()
