"""Deadline-bound async HTTP client used by the fetch workers."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import httpx

from feed_eater.config import Configuration
from feed_eater.constants import CONNECT_TIMEOUT, DEFAULT_METHOD, MAX_REDIRECTS

logger = logging.getLogger(__name__)

# Failures that only drop the affected url; anything else is a fault.
REQUEST_ERRORS = (
    httpx.HTTPError,       # transport, timeout, redirect overflow, bad scheme
    httpx.InvalidURL,      # the request could not be built
    asyncio.TimeoutError,  # the absolute deadline ran out
    OSError,
)


def request_deadline(config: Configuration) -> float:
    """Seconds a single request, body included, may take."""
    return config.timeout / 1000.0


def build_client(
    config: Configuration,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return an :class:`httpx.AsyncClient` configured from ``config``.

    * redirects are followed up to :data:`MAX_REDIRECTS`; one more raises
      :class:`httpx.TooManyRedirects`;
    * connecting may take at most :data:`CONNECT_TIMEOUT` seconds, every
      other phase at most the request deadline;
    * certificate checks are skipped only with ``insecure_skip_verify``.
    """
    deadline = request_deadline(config)
    limit = config.concurrency
    return httpx.AsyncClient(
        follow_redirects=True,
        max_redirects=MAX_REDIRECTS,
        timeout=httpx.Timeout(deadline, connect=min(CONNECT_TIMEOUT, deadline)),
        verify=not config.insecure_skip_verify,
        limits=httpx.Limits(max_connections=limit, max_keepalive_connections=limit),
        transport=transport,
    )


class EaterClient:
    """Issues the configured request for one link at a time."""

    def __init__(
        self,
        config: Configuration,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Create a client for ``config``.

        Parameters
        ----------
        config:
            Verified run configuration; method, headers and deadlines are
            taken from it.
        transport:
            Optional transport handed to :mod:`httpx`, mainly for tests.
        """
        self._config = config
        self._transport = transport
        self._method = (config.method or DEFAULT_METHOD).upper()
        self._headers = dict(config.headers)
        self._deadline = request_deadline(config)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "EaterClient":
        if self._client is None:
            self._client = build_client(self._config, self._transport)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("Client not initialized; use 'async with EaterClient()'")
        return self._client

    async def fetch(self, link: str) -> httpx.Response:
        """Request ``link`` and read the whole body.

        The connect, send and body read together must finish within the
        request deadline or :class:`asyncio.TimeoutError` is raised. Any
        status code counts as a response.
        """
        client = self._require_client()
        return await asyncio.wait_for(self._send(client, link), timeout=self._deadline)

    async def _send(self, client: httpx.AsyncClient, link: str) -> httpx.Response:
        request = client.build_request(self._method, link, headers=self._headers)
        response = await client.send(request)
        logger.debug(
            "%s %s -> %d (%d bytes, %d redirects)",
            self._method, link, response.status_code, len(response.content), len(response.history),
        )
        return response
