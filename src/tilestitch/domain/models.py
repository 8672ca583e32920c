from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tilestitch.shared.constants import (
    DEFAULT_MAX_TILES,
    DEFAULT_PROVIDER_KEY,
    DEFAULT_SUBDOMAINS,
    DEFAULT_TILE_SUFFIX,
)

# Placeholders a tile URL template must carry
REQUIRED_PLACEHOLDERS = ('{x}', '{y}', '{z}')


@dataclass(frozen=True)
class GeoBox:
    """Two arbitrary corners of the requested area (decimal degrees)."""

    lat1: float
    lon1: float
    lat2: float
    lon2: float


@dataclass(frozen=True)
class TileCoordinate:
    x: int
    y: int
    zoom: int


@dataclass(frozen=True)
class TileRange:
    """Inclusive, normalized tile range at one zoom level."""

    x_min: int
    x_max: int
    y_min: int
    y_max: int
    zoom: int

    @property
    def columns(self) -> int:
        return self.x_max - self.x_min + 1

    @property
    def rows(self) -> int:
        return self.y_max - self.y_min + 1

    @property
    def count(self) -> int:
        return self.columns * self.rows


class ProviderPolicy(BaseModel):
    """Usage policy published by a tile provider."""

    model_config = ConfigDict(frozen=True, extra='ignore', populate_by_name=True)

    url: str | None = None
    # Zoom from which the policy tile cap applies
    min_zoom: int = Field(
        default=0, validation_alias=AliasChoices('min_zoom', 'minZoom')
    )
    max_tiles: int | None = Field(
        default=None, validation_alias=AliasChoices('max_tiles', 'maxtiles')
    )

    def applies_to(self, zoom: int) -> bool:
        return zoom >= self.min_zoom


class Provider(BaseModel):
    """
    Tile source definition.

    The URL template may contain ``{s}`` (subdomain), ``{x}``, ``{y}``, ``{z}``,
    ``{r}`` (resolution suffix, always empty), ``{apikey}`` and any key of
    ``url_params``.
    """

    model_config = ConfigDict(frozen=True, extra='ignore', populate_by_name=True)

    key: str = ''
    name: str = ''
    url: str
    # None means the provider declares no limit
    max_zoom: int | None = Field(
        default=None, validation_alias=AliasChoices('max_zoom', 'maxZoom')
    )
    attribution: str | None = None
    policy: ProviderPolicy | None = None
    subdomains: tuple[str, ...] = DEFAULT_SUBDOMAINS
    api_key: str | None = Field(
        default=None, validation_alias=AliasChoices('api_key', 'apikey')
    )
    # Environment variable consulted when api_key is not set
    api_key_env: str | None = None
    url_params: dict[str, str] = Field(default_factory=dict)

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: str) -> str:
        missing = [p for p in REQUIRED_PLACEHOLDERS if p not in v]
        if missing:
            msg = f'URL template {v!r} lacks placeholders: {", ".join(missing)}'
            raise ValueError(msg)
        return v

    @field_validator('subdomains', mode='before')
    @classmethod
    def split_subdomains(cls, v: object) -> object:
        # Leaflet style 'abc'
        if isinstance(v, str):
            return tuple(v)
        return v

    @property
    def label(self) -> str:
        return self.key or self.name or self.url

    @property
    def tile_suffix(self) -> str:
        suffix = PurePosixPath(urlsplit(self.url).path).suffix
        return suffix or DEFAULT_TILE_SUFFIX

    def resolved_api_key(self) -> str | None:
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env) or None
        return None

    def tile_limit(self, zoom: int, default: int) -> int:
        """Tile cap for ``zoom``: ``default`` tightened by the provider policy."""
        policy = self.policy
        if policy is None or policy.max_tiles is None or not policy.applies_to(zoom):
            return default
        return min(default, policy.max_tiles)


class RenderOptions(BaseModel):
    """Construction options of a renderer."""

    model_config = {
        'extra': 'ignore',
    }

    # Registry key or inline provider definition
    provider: str | Provider = DEFAULT_PROVIDER_KEY
    max_tiles: int = DEFAULT_MAX_TILES
    # Root for ephemeral working directories (system temp dir when None)
    tmp_dir: Path | None = None
    # Persistent tile directory; tiles accumulate there as a cache
    tiles_dir: Path | None = None
    keep_tiles_dir: bool = False
    overwrite_tiles: bool = False
    debug: bool = False
    # Contact information sent with every request (e-mail or URL)
    contact: str
    http_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator('max_tiles')
    @classmethod
    def validate_max_tiles(cls, v: int) -> int:
        if v < 1:
            msg = 'max_tiles must be at least 1'
            raise ValueError(msg)
        return v

    @field_validator('contact')
    @classmethod
    def validate_contact(cls, v: str) -> str:
        v = v.strip()
        if not v:
            msg = 'contact must not be empty'
            raise ValueError(msg)
        return v
