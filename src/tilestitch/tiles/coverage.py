from __future__ import annotations

from typing import TYPE_CHECKING

from tilestitch.domain.models import TileCoordinate

if TYPE_CHECKING:
    from collections.abc import Iterator

    from tilestitch.domain.models import TileRange


def iter_tiles(tile_range: TileRange) -> Iterator[TileCoordinate]:
    """
    Yield the tiles of ``tile_range`` in row-major order.

    Rows go north to south (y outer), tiles within a row west to east (x
    inner), which is the order the grid assembler pastes them in.
    """
    for y in range(tile_range.y_min, tile_range.y_max + 1):
        for x in range(tile_range.x_min, tile_range.x_max + 1):
            yield TileCoordinate(x=x, y=y, zoom=tile_range.zoom)


def grid_position(index: int, columns: int) -> tuple[int, int]:
    """(column, row) of the ``index``-th tile in a row-major grid."""
    return index % columns, index // columns
