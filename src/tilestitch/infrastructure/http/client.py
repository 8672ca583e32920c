from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Protocol

import aiohttp

from tilestitch.domain.errors import TileFetchError
from tilestitch.shared.constants import (
    HTTP_OK,
    USER_AGENT_TEMPLATE,
    USER_AGENT_VERSION,
)

if TYPE_CHECKING:
    from collections.abc import Mapping
    from types import TracebackType

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r'.+@.+')


class TileTransport(Protocol):
    """Fetch-by-URL primitive used by the tile fetcher."""

    async def get(self, url: str, headers: Mapping[str, str]) -> bytes: ...


def looks_like_email(contact: str) -> bool:
    return '://' not in contact and _EMAIL_RE.search(contact) is not None


def build_request_headers(
    contact: str,
    extra: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Headers identifying this client to tile servers.

    ``User-Agent`` always carries the contact string; ``From`` is added when
    the contact is an e-mail address. ``extra`` headers override both.
    """
    headers = {
        'User-Agent': USER_AGENT_TEMPLATE.format(
            version=USER_AGENT_VERSION, contact=contact
        ),
    }
    if looks_like_email(contact):
        headers['From'] = contact
    if extra:
        headers.update(extra)
    return headers


def make_http_session() -> aiohttp.ClientSession:
    # No explicit timeout: aiohttp defaults apply
    return aiohttp.ClientSession()


class AiohttpTransport:
    """
    :class:`TileTransport` backed by an ``aiohttp.ClientSession``.

    Used as an async context manager; a session passed in by the caller is
    left open on exit.
    """

    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> AiohttpTransport:
        if self._session is None:
            self._session = make_http_session()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def get(self, url: str, headers: Mapping[str, str]) -> bytes:
        if self._session is None:
            msg = 'transport is not open; use "async with AiohttpTransport()"'
            raise RuntimeError(msg)
        try:
            async with self._session.get(url, headers=dict(headers)) as resp:
                if resp.status != HTTP_OK:
                    raise TileFetchError(url, f'HTTP {resp.status}')
                return await resp.read()
        except (aiohttp.ClientError, TimeoutError, OSError) as e:
            logger.debug('Request to %s failed: %r', url, e)
            raise TileFetchError(url, str(e) or type(e).__name__) from e
