"""Domain layer - models, provider registry and config files."""
from tilestitch.domain.errors import (
    AssemblyError,
    TileFetchError,
    TileStitchError,
    TooManyTilesError,
    UnknownProviderError,
    ZoomTooHighError,
)
from tilestitch.domain.models import (
    GeoBox,
    Provider,
    ProviderPolicy,
    RenderOptions,
    TileCoordinate,
    TileRange,
)
from tilestitch.domain.profiles import load_config, save_config
from tilestitch.domain.providers import DEFAULT_PROVIDERS, ProviderRegistry

__all__ = [
    'DEFAULT_PROVIDERS',
    'AssemblyError',
    'GeoBox',
    'Provider',
    'ProviderPolicy',
    'ProviderRegistry',
    'RenderOptions',
    'TileCoordinate',
    'TileFetchError',
    'TileRange',
    'TileStitchError',
    'TooManyTilesError',
    'UnknownProviderError',
    'ZoomTooHighError',
    'load_config',
    'save_config',
]
