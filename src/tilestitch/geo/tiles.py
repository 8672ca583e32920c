"""Slippy-map tile arithmetic (Web Mercator, OSM tile naming).

Formulas follow https://wiki.openstreetmap.org/wiki/Slippy_map_tilenames.
"""

from __future__ import annotations

import math

from tilestitch.domain.models import GeoBox, TileCoordinate, TileRange


def tile_for(lat_deg: float, lon_deg: float, zoom: int) -> TileCoordinate:
    """
    Return the tile containing (lat_deg, lon_deg) at ``zoom``.

    Indices are truncated toward zero. Latitude is not clamped: at |lat| >= 90
    (or beyond the Mercator limit of ~85.0511) the result is meaningless.
    """
    lat_rad = math.radians(lat_deg)
    n = 2.0**zoom
    x = int((lon_deg + 180.0) / 360.0 * n)
    y = int(
        (1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi)
        / 2.0
        * n
    )
    return TileCoordinate(x=x, y=y, zoom=zoom)


def tile_range_for(box: GeoBox, zoom: int) -> TileRange:
    """Normalized range of tiles covering ``box``.

    x and y are ordered independently, so a box crossing the antimeridian
    yields the complementary (wrong) range.
    """
    a = tile_for(box.lat1, box.lon1, zoom)
    b = tile_for(box.lat2, box.lon2, zoom)
    return TileRange(
        x_min=min(a.x, b.x),
        x_max=max(a.x, b.x),
        y_min=min(a.y, b.y),
        y_max=max(a.y, b.y),
        zoom=zoom,
    )


def tile_center(x: int, y: int, zoom: int) -> tuple[float, float]:
    """Inverse projection: (lat, lon) of the centre of tile (x, y)."""
    n = 2.0**zoom
    lon = (x + 0.5) / n * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * (y + 0.5) / n))))
    return lat, lon
