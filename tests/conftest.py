"""Shared fixtures: a fake network built on httpx.MockTransport."""

from __future__ import annotations

import asyncio
import os
from typing import Awaitable, Callable, Dict, List, Union

import httpx
import pytest

from feed_eater import Configuration, Url

Responder = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class FakeNetwork:
    """Routes requests by host and remembers every request it saw."""

    def __init__(self) -> None:
        self.routes: Dict[str, Responder] = {}
        self.requests: List[httpx.Request] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def route(self, host: str, responder: Responder) -> None:
        self.routes[host] = responder

    def body(self, host: str, text: str, status: int = 200) -> None:
        self.route(host, lambda request: httpx.Response(status, text=text))

    def slow(self, host: str, seconds: float, text: str = "late") -> None:
        async def responder(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(seconds)
            return httpx.Response(200, text=text)

        self.route(host, responder)

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            responder = self.routes.get(request.url.host)
            if responder is None:
                raise httpx.ConnectError(f"no route to {request.url.host}", request=request)
            response = responder(request)
            if not isinstance(response, httpx.Response):
                response = await response
            return response
        finally:
            self.in_flight -= 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def hosts(self) -> List[str]:
        return [r.url.host for r in self.requests]


@pytest.fixture
def network() -> FakeNetwork:
    return FakeNetwork()


@pytest.fixture
def make_config() -> Callable[..., Configuration]:
    def _make(*pairs: tuple[str, str], **overrides) -> Configuration:
        values = {"timeout": 2000}
        values.update(overrides)
        return Configuration(urls=[Url(category=c, link=l) for c, l in pairs], **values)

    return _make


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep FEED_EATER_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("FEED_EATER_"):
            monkeypatch.delenv(name, raising=False)
