from __future__ import annotations

import logging
import random
import re
from pathlib import Path
from typing import TYPE_CHECKING

from tilestitch.domain.errors import TileFetchError
from tilestitch.shared.constants import RESOLUTION_SUFFIX
from tilestitch.tiles.cache import TileCache
from tilestitch.tiles.coverage import iter_tiles

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from tilestitch.domain.models import Provider, TileRange
    from tilestitch.infrastructure.http.client import TileTransport

    SubdomainChooser = Callable[[Sequence[str]], str]

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r'\{(\w+)\}')


def random_subdomain(subdomains: Sequence[str]) -> str:
    """Spread requests over mirrored hosts."""
    return random.choice(subdomains)


def fixed_subdomain(value: str) -> SubdomainChooser:
    """Chooser that always returns ``value`` (deterministic URLs)."""

    def _choose(subdomains: Sequence[str]) -> str:
        return value

    return _choose


def resolve_tile_url(
    provider: Provider,
    x: int,
    y: int,
    zoom: int,
    subdomain: str = '',
) -> str:
    """Fill the provider URL template; unknown placeholders stay as they are."""
    values: dict[str, str] = {
        's': subdomain,
        'x': str(x),
        'y': str(y),
        'z': str(zoom),
        'r': RESOLUTION_SUFFIX,
    }
    api_key = provider.resolved_api_key()
    if api_key is not None:
        values['apikey'] = api_key
    values.update(provider.url_params)
    return _PLACEHOLDER_RE.sub(lambda m: values.get(m.group(1), m.group(0)), provider.url)


class TileFetcher:
    """
    Download tiles into a working directory, one request at a time.

    A tile already present in the directory is not downloaded again unless
    ``overwrite`` is set. Failures are not retried.
    """

    def __init__(
        self,
        transport: TileTransport,
        *,
        headers: Mapping[str, str] | None = None,
        overwrite: bool = False,
        choose_subdomain: SubdomainChooser = random_subdomain,
        debug: bool = False,
    ) -> None:
        self.transport = transport
        self.headers = dict(headers or {})
        self.overwrite = overwrite
        self._choose_subdomain = choose_subdomain
        self._log_level = logging.INFO if debug else logging.DEBUG
        self._stats_downloads = 0
        self._stats_cache_hits = 0

    @property
    def stats(self) -> dict[str, int]:
        return {
            'downloads': self._stats_downloads,
            'cache_hits': self._stats_cache_hits,
        }

    def tile_url(self, provider: Provider, x: int, y: int, zoom: int) -> str:
        subdomain = ''
        if '{s}' in provider.url and provider.subdomains:
            subdomain = self._choose_subdomain(provider.subdomains)
        return resolve_tile_url(provider, x, y, zoom, subdomain)

    async def fetch(
        self,
        provider: Provider,
        x: int,
        y: int,
        zoom: int,
        directory: str | Path,
    ) -> Path:
        """
        Return the path of tile (x, y, zoom) in ``directory``, downloading it if needed.

        Raises:
            TileFetchError: the download failed or the file could not be written.

        """
        cache = TileCache(directory)
        suffix = provider.tile_suffix
        path = cache.path_for(x, y, zoom, suffix)
        if not self.overwrite and cache.exists(x, y, zoom, suffix):
            logger.info('"%s" already exists, skipping download', path)
            self._stats_cache_hits += 1
            return path

        url = self.tile_url(provider, x, y, zoom)
        logger.log(self._log_level, 'Fetching %s', url)
        data = await self.transport.get(url, self.headers)
        try:
            path = cache.put(x, y, zoom, data, suffix)
        except OSError as e:
            raise TileFetchError(url, f'cannot write {path}: {e}') from e
        self._stats_downloads += 1
        return path

    async def fetch_range(
        self,
        provider: Provider,
        tile_range: TileRange,
        directory: str | Path,
    ) -> list[Path]:
        """Fetch every tile of ``tile_range`` sequentially, in row-major order."""
        return [
            await self.fetch(provider, tile.x, tile.y, tile.zoom, directory)
            for tile in iter_tiles(tile_range)
        ]
