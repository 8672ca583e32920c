"""Render service - orchestrates the tile-to-image pipeline."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tilestitch.domain.errors import TooManyTilesError, ZoomTooHighError
from tilestitch.domain.models import GeoBox, RenderOptions
from tilestitch.domain.providers import ProviderRegistry
from tilestitch.geo.tiles import tile_range_for
from tilestitch.imaging.composer import GridAssembler
from tilestitch.infrastructure.http.client import (
    AiohttpTransport,
    build_request_headers,
)
from tilestitch.shared.constants import DEFAULT_ZOOM, WORKDIR_PREFIX
from tilestitch.tiles.fetcher import TileFetcher, random_subdomain

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from tilestitch.domain.models import Provider, TileRange
    from tilestitch.domain.providers import ProviderRef
    from tilestitch.infrastructure.http.client import TileTransport
    from tilestitch.tiles.fetcher import SubdomainChooser

logger = logging.getLogger(__name__)


class TileMapRenderer:
    """
    Render a bounding box into one image from slippy-map tiles.

    Validation (provider, tile count, zoom) happens before any directory is
    created or any request is sent. Tiles are then fetched one by one into
    the working directory and stitched by the grid assembler.

    Usage:
        renderer = TileMapRenderer(RenderOptions(contact='me@example.org'))
        renderer.render(GeoBox(52.52, 13.40, 52.50, 13.43), 'berlin.png', zoom=15)
    """

    def __init__(
        self,
        options: RenderOptions,
        *,
        registry: ProviderRegistry | None = None,
        transport: TileTransport | None = None,
        choose_subdomain: SubdomainChooser = random_subdomain,
        assembler: GridAssembler | None = None,
    ) -> None:
        self.options = options
        self.registry = registry if registry is not None else ProviderRegistry.default()
        self.assembler = assembler or GridAssembler()
        self.headers = build_request_headers(options.contact, options.http_headers)
        self._transport = transport
        self._choose_subdomain = choose_subdomain
        self._log_level = logging.INFO if options.debug else logging.DEBUG
        # Persistent working directory (caller supplied or kept scratch dir)
        self._kept_dir: Path | None = options.tiles_dir
        self.last_stats: dict[str, int] = {}

    @property
    def tiles_dir(self) -> Path | None:
        """Directory kept between renders, if any."""
        return self._kept_dir

    def plan(
        self,
        box: GeoBox,
        zoom: int = DEFAULT_ZOOM,
        provider: ProviderRef | None = None,
    ) -> tuple[Provider, TileRange]:
        """
        Resolve the provider and the tile range; no side effects.

        Raises:
            UnknownProviderError: provider key not in the registry.
            TooManyTilesError: the range exceeds the tile cap.
            ZoomTooHighError: zoom beyond the provider's maximum.

        """
        if zoom < 0:
            msg = f'zoom must not be negative, got {zoom}'
            raise ValueError(msg)
        resolved = self.registry.resolve(
            provider if provider is not None else self.options.provider
        )

        tile_range = tile_range_for(box, zoom)
        logger.log(
            self._log_level,
            'xr = %d..%d, yr = %d..%d, zoom = %d',
            tile_range.x_min,
            tile_range.x_max,
            tile_range.y_min,
            tile_range.y_max,
            zoom,
        )

        limit = resolved.tile_limit(zoom, self.options.max_tiles)
        if tile_range.count > limit:
            raise TooManyTilesError(tile_range.count, limit)

        if resolved.max_zoom is not None and zoom > resolved.max_zoom:
            raise ZoomTooHighError(zoom, resolved.max_zoom, resolved.label)

        if '{apikey}' in resolved.url and resolved.resolved_api_key() is None:
            logger.warning('Provider %s expects an API key but none is set', resolved.label)
        return resolved, tile_range

    @contextlib.contextmanager
    def working_directory(self) -> Iterator[Path]:
        """
        Directory the tiles are fetched into.

        Persistent (never deleted) when ``tiles_dir`` or ``keep_tiles_dir`` is
        set; otherwise a fresh scratch directory removed on exit, whether the
        render succeeded or not.
        """
        opts = self.options
        tmp_root = opts.tmp_dir
        if tmp_root is not None:
            tmp_root.mkdir(parents=True, exist_ok=True)

        if opts.tiles_dir is not None or opts.keep_tiles_dir:
            if self._kept_dir is None:
                self._kept_dir = Path(tempfile.mkdtemp(prefix=WORKDIR_PREFIX, dir=tmp_root))
                logger.info('Keeping tiles in %s', self._kept_dir)
            self._kept_dir.mkdir(parents=True, exist_ok=True)
            yield self._kept_dir
            return

        workdir = Path(tempfile.mkdtemp(prefix=WORKDIR_PREFIX, dir=tmp_root))
        logger.debug('Created working directory %s', workdir)
        try:
            yield workdir
        finally:
            shutil.rmtree(workdir, ignore_errors=True)
            logger.debug('Removed working directory %s', workdir)

    @contextlib.asynccontextmanager
    async def _open_transport(self) -> AsyncIterator[TileTransport]:
        if self._transport is not None:
            yield self._transport
            return
        async with AiohttpTransport() as transport:
            yield transport

    async def render_async(
        self,
        box: GeoBox,
        output_path: str | Path,
        zoom: int = DEFAULT_ZOOM,
        provider: ProviderRef | None = None,
    ) -> Path:
        """Fetch the tiles covering ``box`` and write the stitched image."""
        resolved, tile_range = self.plan(box, zoom, provider)

        with self.working_directory() as workdir:
            async with self._open_transport() as transport:
                fetcher = TileFetcher(
                    transport,
                    headers=self.headers,
                    overwrite=self.options.overwrite_tiles,
                    choose_subdomain=self._choose_subdomain,
                    debug=self.options.debug,
                )
                try:
                    tiles = await fetcher.fetch_range(resolved, tile_range, workdir)
                finally:
                    self.last_stats = fetcher.stats
            logger.info(
                'Tiles: %d downloaded, %d from cache',
                self.last_stats['downloads'],
                self.last_stats['cache_hits'],
            )
            return self.assembler.assemble(
                tiles,
                tile_range.columns,
                tile_range.rows,
                output_path,
                resolved.attribution,
            )

    def render(
        self,
        box: GeoBox,
        output_path: str | Path,
        zoom: int = DEFAULT_ZOOM,
        provider: ProviderRef | None = None,
    ) -> Path:
        """Blocking wrapper around :meth:`render_async`."""
        return asyncio.run(self.render_async(box, output_path, zoom, provider))


def render_map(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    output_path: str | Path,
    *,
    zoom: int = DEFAULT_ZOOM,
    provider: ProviderRef | None = None,
    registry: ProviderRegistry | None = None,
    transport: TileTransport | None = None,
    **options: Any,
) -> Path:
    """One-shot render; ``options`` are :class:`RenderOptions` fields."""
    renderer = TileMapRenderer(
        RenderOptions(**options), registry=registry, transport=transport
    )
    return renderer.render(GeoBox(lat1, lon1, lat2, lon2), output_path, zoom, provider)
