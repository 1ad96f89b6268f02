"""
REST transport to an UND node.

Every call returns the uniform shape ``{"status": int, "result": ...}``
whatever the HTTP status; only connection-level failures raise
:class:`~und_core.errors.TransportError`.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Iterable, Mapping

import aiohttp

from und_core.errors import TransportError

logger = logging.getLogger("und_core.http")


class HttpRequest:
    """Thin aiohttp wrapper bound to one node base URL."""

    def __init__(self, server: str, timeout: float = 30.0,
                 session: aiohttp.ClientSession | None = None):
        self.server = server.rstrip("/")
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            self._owns_session = True
        return self._session

    async def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None,
        data: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict:
        url = self.server + path
        if params is not None:
            items = params.items() if isinstance(params, Mapping) else params
            params = [(str(k), str(v)) for k, v in items]
        if data is not None and not isinstance(data, (str, bytes)):
            data = json.dumps(data)

        session = self._get_session()
        try:
            async with session.request(method, url, params=params, data=data,
                                       headers=headers) as resp:
                body = await resp.read()
                charset = resp.charset or "utf-8"
                status = resp.status
                reason = resp.reason or ""
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.debug("%s %s failed: %s", method, url, exc)
            raise TransportError(f"{method} {url} failed: {exc or type(exc).__name__}") from exc

        try:
            text = body.decode(charset, errors="replace")
        except LookupError:
            # Unknown charset label
            text = body.decode("utf-8", errors="replace")
        try:
            result = json.loads(text) if text else {"error": reason}
        except ValueError:
            result = {"error": text or reason}
        logger.debug("%s %s -> %d", method, url, status)
        return {"status": status, "result": result}

    async def get(self, path: str, params=None) -> dict:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Any = None, headers=None) -> dict:
        return await self.request("POST", path, data=data, headers=headers)

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> HttpRequest:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
