"""
HTTP transport.

Translators only shape and interpret bytes; the transport sends an
``HttpRequest`` and hands back the status and body.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import aiohttp
from loguru import logger

from errors import TranslationFailure


@dataclass(slots=True)
class HttpRequest:
    method: str
    url: str
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value


@dataclass(slots=True)
class HttpResponse:
    status: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class Transport(Protocol):
    async def send(self, request: HttpRequest) -> HttpResponse: ...


class AiohttpTransport:
    def __init__(self, *, timeout: float = 60.0, proxy: str | None = None) -> None:
        self.timeout = timeout
        self.proxy = proxy
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session with connection pooling."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(limit=64, ttl_dns_cache=300)
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(connector=connector, timeout=timeout)
        return self._session

    async def send(self, request: HttpRequest) -> HttpResponse:
        session = await self._get_session()
        try:
            async with session.request(
                request.method,
                request.url,
                data=request.body or None,
                headers=request.headers,
                proxy=self.proxy,
            ) as resp:
                body = await resp.text()
                return HttpResponse(status=resp.status, body=body)
        except asyncio.TimeoutError as exc:
            raise TranslationFailure(f"Request to {request.url} timed out", retryable=True) from exc
        except aiohttp.ClientError as exc:
            raise TranslationFailure(f"Connection error for {request.url}: {exc}", retryable=True) from exc

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            logger.debug("HTTP session closed")
        self._session = None

    async def __aenter__(self) -> "AiohttpTransport":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
