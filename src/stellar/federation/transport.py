"""HTTP transport used by discovery and federation queries.

The resolver and client only depend on the ``Transport`` protocol: an HTTPS
GET with optional query parameters returning a status code and body bytes, or
raising ``TransportError``. ``AiohttpTransport`` is the production
implementation on top of a shared ``aiohttp.ClientSession``.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Sequence, Tuple, Union

from aiohttp import ClientError, ClientSession, ClientTimeout

logger = logging.getLogger(__name__)

QueryParams = Union[Mapping[str, str], Sequence[Tuple[str, str]]]

DEFAULT_TIMEOUT = 10.0


@dataclass
class TransportResponse:
    status: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self, limit: Optional[int] = None) -> str:
        text = self.body.decode("utf-8", errors="replace")
        if limit is not None:
            return text[:limit]
        return text


class TransportError(Exception):
    """Raised when a request could not be completed (connection, TLS, timeout)."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"GET {url} failed: {reason}")


class Transport(Protocol):
    async def get(
        self, url: str, params: Optional[QueryParams] = None
    ) -> TransportResponse: ...


class AiohttpTransport:
    """Transport backed by an ``aiohttp.ClientSession``.

    The session is owned by the caller; this class never closes it.
    """

    def __init__(
        self,
        session: ClientSession,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
    ) -> None:
        self._session = session
        self._timeout = ClientTimeout(total=timeout)
        self._headers = {"User-Agent": user_agent} if user_agent else None

    async def get(
        self, url: str, params: Optional[QueryParams] = None
    ) -> TransportResponse:
        logger.debug("GET %s params=%s", url, params)
        try:
            async with self._session.get(
                url, params=params, headers=self._headers, timeout=self._timeout
            ) as resp:
                body = await resp.read()
                return TransportResponse(status=resp.status, body=body)
        except asyncio.TimeoutError as e:
            raise TransportError(url, "timed out") from e
        except ClientError as e:
            raise TransportError(url, str(e) or type(e).__name__) from e
        except ValueError as e:
            # Invalid URL or host name, e.g. an IDNA label over 63 characters.
            raise TransportError(url, f"invalid URL: {e}") from e
