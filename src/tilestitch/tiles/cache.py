"""Directory-based tile cache.

Each tile is one file named ``{x}-{y}-{zoom}{suffix}`` inside the working
directory. The name carries no provider key: switching providers against the
same directory reuses tiles downloaded from the previous provider.
"""

from __future__ import annotations

import contextlib
import logging
from pathlib import Path

from tilestitch.shared.constants import DEFAULT_TILE_SUFFIX, PARTIAL_SUFFIX

logger = logging.getLogger(__name__)


def tile_filename(x: int, y: int, zoom: int, suffix: str = DEFAULT_TILE_SUFFIX) -> str:
    return f'{x}-{y}-{zoom}{suffix}'


class TileCache:
    """
    Tile files in one directory.

    Files are created once and replaced atomically when overwritten, never
    modified in place. Concurrent processes sharing the directory are not
    coordinated.

    Usage:
        cache = TileCache(workdir)
        path = cache.put(x=100, y=200, zoom=15, data=tile_bytes)
        cache.exists(x=100, y=200, zoom=15)
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        logger.debug('TileCache initialized at %s', self.cache_dir)

    def path_for(
        self, x: int, y: int, zoom: int, suffix: str = DEFAULT_TILE_SUFFIX
    ) -> Path:
        return self.cache_dir / tile_filename(x, y, zoom, suffix)

    def exists(
        self, x: int, y: int, zoom: int, suffix: str = DEFAULT_TILE_SUFFIX
    ) -> bool:
        return self.path_for(x, y, zoom, suffix).is_file()

    def put(
        self,
        x: int,
        y: int,
        zoom: int,
        data: bytes,
        suffix: str = DEFAULT_TILE_SUFFIX,
    ) -> Path:
        """Write ``data`` verbatim and return the tile path.

        The bytes go to a temporary file first, so an interrupted write never
        leaves a truncated tile that later counts as cached.
        """
        path = self.path_for(x, y, zoom, suffix)
        partial = path.with_name(path.name + PARTIAL_SUFFIX)
        try:
            partial.write_bytes(data)
            partial.replace(path)
        except OSError:
            with contextlib.suppress(OSError):
                partial.unlink()
            raise
        return path

