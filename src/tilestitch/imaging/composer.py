"""Image composition utilities - tile grid assembly."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PIL import Image

from tilestitch.domain.errors import AssemblyError
from tilestitch.imaging.text import draw_attribution
from tilestitch.shared.constants import (
    ATTRIBUTION_ANCHOR,
    ATTRIBUTION_FONT_SIZE,
    OPAQUE_OUTPUT_SUFFIXES,
)
from tilestitch.tiles.coverage import grid_position

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


def stitch_tiles(
    tiles: Sequence[str | Path],
    columns: int,
    rows: int,
) -> Image.Image:
    """
    Paste ``tiles`` (row-major) into one ``columns`` x ``rows`` image.

    Tiles are placed edge to edge without blending or resizing; all of them
    must have the size of the first one.

    Raises:
        AssemblyError: wrong tile count, unreadable tile or size mismatch.

    """
    if columns < 1 or rows < 1 or len(tiles) != columns * rows:
        msg = f'cannot place {len(tiles)} tiles in a {columns}x{rows} grid'
        raise AssemblyError(msg)

    result: Image.Image | None = None
    tile_w = tile_h = 0
    try:
        for idx, tile_path in enumerate(tiles):
            try:
                with Image.open(tile_path) as tile:
                    tile.load()
                    if result is None:
                        tile_w, tile_h = tile.size
                        result = Image.new('RGBA', (tile_w * columns, tile_h * rows))
                    elif tile.size != (tile_w, tile_h):
                        msg = (
                            f'tile {tile_path} is {tile.size[0]}x{tile.size[1]}, '
                            f'expected {tile_w}x{tile_h}'
                        )
                        raise AssemblyError(msg)
                    col, row = grid_position(idx, columns)
                    result.paste(tile.convert('RGBA'), (col * tile_w, row * tile_h))
            except OSError as e:
                msg = f'cannot read tile {tile_path}: {e}'
                raise AssemblyError(msg) from e
    except AssemblyError:
        if result is not None:
            result.close()
        raise

    assert result is not None
    # Drop the alpha channel when no tile was transparent
    if result.getchannel('A').getextrema() == (255, 255):
        opaque = result.convert('RGB')
        result.close()
        result = opaque
    logger.debug(
        'Stitched %d tiles (%dx%d) into %dx%d image',
        len(tiles),
        columns,
        rows,
        result.width,
        result.height,
    )
    return result


def save_image(img: Image.Image, output_path: str | Path) -> Path:
    """Save ``img``; the format follows the file suffix."""
    path = Path(output_path)
    if path.suffix.lower() in OPAQUE_OUTPUT_SUFFIXES and img.mode != 'RGB':
        img = img.convert('RGB')
    try:
        img.save(path)
    except (OSError, ValueError) as e:
        msg = f'cannot write {path}: {e}'
        raise AssemblyError(msg) from e
    return path


class GridAssembler:
    """
    Stitch fetched tiles into the output image and caption it.

    The caller supplies tiles in row-major order (north row first, west to
    east); the assembler does not reorder them. A failed save may leave a
    partial output file behind.
    """

    def __init__(
        self,
        *,
        font_size: int = ATTRIBUTION_FONT_SIZE,
        anchor: str = ATTRIBUTION_ANCHOR,
    ) -> None:
        self.font_size = font_size
        self.anchor = anchor

    def assemble(
        self,
        tiles: Sequence[str | Path],
        columns: int,
        rows: int,
        output_path: str | Path,
        attribution: str | None = None,
    ) -> Path:
        img = stitch_tiles(tiles, columns, rows)
        try:
            if attribution:
                try:
                    draw_attribution(
                        img, attribution, font_size=self.font_size, anchor=self.anchor
                    )
                except (OSError, ValueError) as e:
                    msg = f'cannot draw attribution: {e}'
                    raise AssemblyError(msg) from e
            path = save_image(img, output_path)
        finally:
            img.close()
        logger.info('Map saved to %s (%dx%d tiles)', path, columns, rows)
        return path
