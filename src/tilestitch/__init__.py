"""Stitch slippy-map tiles covering a bounding box into a single image."""

__version__ = '0.3.0'

from tilestitch.domain.errors import (  # noqa: E402
    AssemblyError,
    TileFetchError,
    TileStitchError,
    TooManyTilesError,
    UnknownProviderError,
    ZoomTooHighError,
)
from tilestitch.domain.models import GeoBox, Provider, RenderOptions  # noqa: E402
from tilestitch.domain.providers import ProviderRegistry  # noqa: E402
from tilestitch.service import TileMapRenderer, render_map  # noqa: E402

__all__ = [
    'AssemblyError',
    'GeoBox',
    'Provider',
    'ProviderRegistry',
    'RenderOptions',
    'TileFetchError',
    'TileMapRenderer',
    'TileStitchError',
    'TooManyTilesError',
    'UnknownProviderError',
    'ZoomTooHighError',
    '__version__',
    'render_map',
]
