from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
from cryptography.fernet import Fernet

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from client.context import ClientContext, build_context  # noqa: E402
from client.settings import Settings  # noqa: E402
from flows.notifications import NotificationLog  # noqa: E402

BASE_URL = "https://api.test"

ALICE_PROFILE = {
    "id": 7,
    "username": "alice",
    "email": "a@x.com",
    "full_name": "Alice A",
    "account_type": "pregnant",
}


class FakeService:
    """
    Route table for httpx.MockTransport.

    ``routes[(method, path)]`` is either a (status, json_body) tuple or a
    callable taking the request and returning an httpx.Response.  Every
    request is recorded in ``calls``.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Any] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)

    def paths(self) -> list[str]:
        return [call.url.path for call in self.calls]

    def body_of(self, index: int) -> Any:
        return json.loads(self.calls[index].content)


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def fernet() -> Fernet:
    return Fernet(Fernet.generate_key())


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(api_base_url=BASE_URL, store_path=tmp_path / "client.db")


@pytest.fixture
def make_context(settings, service, fernet) -> Callable[[], ClientContext]:
    """Build a fresh context on the same store file (a new one simulates a reload)."""

    def _make() -> ClientContext:
        return build_context(settings, transport=httpx.MockTransport(service.handler), fernet=fernet)

    return _make


@pytest.fixture
def ctx(make_context) -> ClientContext:
    context = make_context()
    context.sessions.restore()
    return context


@pytest.fixture
def alice_profile() -> dict[str, Any]:
    return dict(ALICE_PROFILE)


@pytest.fixture
def notes() -> NotificationLog:
    return NotificationLog()


@pytest.fixture
def signed_in(ctx, service) -> ClientContext:
    """Context with ``alice`` already holding token ``tok1``."""
    service.on("POST", "/api/v1/auth/login", body={"access_token": "tok1"})
    service.on("GET", "/api/v1/auth/me", body=ALICE_PROFILE)
    asyncio.run(ctx.sessions.login("alice", "secret"))
    service.calls.clear()
    return ctx
