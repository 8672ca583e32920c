"""Tile download and caching.

This module provides:
- TileCache: directory of tile files named by (x, y, zoom)
- TileFetcher: sequential HTTP fetcher writing into a TileCache
- iter_tiles: row-major iteration over a tile range
"""

from tilestitch.tiles.cache import TileCache
from tilestitch.tiles.coverage import iter_tiles
from tilestitch.tiles.fetcher import TileFetcher, resolve_tile_url

__all__ = [
    'TileCache',
    'TileFetcher',
    'iter_tiles',
    'resolve_tile_url',
]
