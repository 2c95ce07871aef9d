from __future__ import annotations

import json
from typing import Any, Callable, Union

import httpx
import pytest

BASE_URL = "http://backend.test/api"

Route = Union[tuple, type, Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """In-memory attendance backend behind an httpx.MockTransport."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []
        self.routes: dict[str, Route] = {
            "/api/session/validate": (200, {"valid": True}),
            "/api/presences": (201, {"id": 1}),
            "/api/users": (201, {"id": 10}),
        }

    def respond(self, path: str, route: Route) -> None:
        self.routes["/api" + path] = route

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.url.path, body))
        route = self.routes[request.url.path]
        if isinstance(route, type) and issubclass(route, Exception):
            raise route("simulated failure", request=request)
        if callable(route):
            return route(request)
        status, payload = route
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)

    def paths(self) -> list[str]:
        return [p for p, _ in self.calls]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()
