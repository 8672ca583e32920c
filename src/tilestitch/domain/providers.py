"""Registry of known tile providers.

The registry is an immutable value built explicitly (``ProviderRegistry.default()``)
and handed to the renderer; extending it returns a new registry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Union

from pydantic import ValidationError

from tilestitch.domain.errors import UnknownProviderError
from tilestitch.domain.models import Provider, ProviderPolicy
from tilestitch.shared.constants import THUNDERFOREST_APIKEY_ENV

logger = logging.getLogger(__name__)

# Registry key, explicit provider or a mapping with at least 'url'
ProviderRef = Union[str, Provider, Mapping[str, object]]

_OSM_ATTRIBUTION = 'ⓒ OpenStreetMap contributors'
_STADIA_ATTRIBUTION = 'ⓒ Stadia Maps, OpenMapTiles, OpenStreetMap contributors'
_STAMEN_ATTRIBUTION = (
    'ⓒ OpenStreetMap contributors, map tiles by Stamen Design, CC-BY 3.0'
)
_STAMEN_URL = 'https://stamen-tiles-{s}.a.ssl.fastly.net'

DEFAULT_PROVIDERS: tuple[Provider, ...] = (
    Provider(
        key='osm',
        name='OpenStreetMap',
        url='https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png',
        max_zoom=19,
        attribution=_OSM_ATTRIBUTION,
        policy=ProviderPolicy(
            url='https://operations.osmfoundation.org/policies/tiles/',
            min_zoom=13,
            max_tiles=250,
        ),
    ),
    Provider(
        key='osmde',
        name='OpenStreetMap DE',
        url='https://{s}.tile.openstreetmap.de/tiles/osmde/{z}/{x}/{y}.png',
        max_zoom=18,
        attribution=_OSM_ATTRIBUTION,
    ),
    Provider(
        key='osmfr',
        name='OpenStreetMap FR',
        url='https://{s}.tile.openstreetmap.fr/osmfr/{z}/{x}/{y}.png',
        max_zoom=20,
        attribution='ⓒ OpenStreetMap France, OpenStreetMap contributors',
    ),
    Provider(
        key='osmhot',
        name='OpenStreetMap HOT',
        url='https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png',
        max_zoom=19,
        attribution=(
            'ⓒ OpenStreetMap contributors, tiles style by Humanitarian '
            'OpenStreetMap Team, hosted by OpenStreetMap France'
        ),
    ),
    Provider(
        key='otm',
        name='OpenTopoMap',
        url='https://{s}.tile.opentopomap.org/{z}/{x}/{y}.png',
        max_zoom=17,
        attribution='ⓒ OpenStreetMap contributors, tiles style by OpenTopoMap',
    ),
    Provider(
        key='stadia_as',
        name='Stadia Alidade smooth',
        url='https://tiles.stadiamaps.com/tiles/alidade_smooth/{z}/{x}/{y}{r}.png',
        max_zoom=20,
        attribution=_STADIA_ATTRIBUTION,
    ),
    Provider(
        key='stadia_osmb',
        name='Stadia OSM bright',
        url='https://tiles.stadiamaps.com/tiles/osm_bright/{z}/{x}/{y}{r}.png',
        max_zoom=20,
        attribution=_STADIA_ATTRIBUTION,
    ),
    Provider(
        key='stadia_out',
        name='Stadia Outdoors',
        url='https://tiles.stadiamaps.com/tiles/outdoors/{z}/{x}/{y}{r}.png',
        max_zoom=20,
        attribution=_STADIA_ATTRIBUTION,
    ),
    Provider(
        key='stamen_toner',
        name='Stamen Toner',
        url=_STAMEN_URL + '/toner/{z}/{x}/{y}{r}.png',
        max_zoom=20,
        attribution=_STAMEN_ATTRIBUTION,
    ),
    Provider(
        key='stamen_toner_bg',
        name='Stamen Toner background',
        url=_STAMEN_URL + '/toner-background/{z}/{x}/{y}{r}.png',
        max_zoom=20,
        attribution=_STAMEN_ATTRIBUTION,
    ),
    Provider(
        key='stamen_toner_lite',
        name='Stamen Toner lite',
        url=_STAMEN_URL + '/toner-lite/{z}/{x}/{y}{r}.png',
        max_zoom=20,
        attribution=_STAMEN_ATTRIBUTION,
    ),
    Provider(
        key='stamen_wc',
        name='Stamen Watercolor',
        url=_STAMEN_URL + '/watercolor/{z}/{x}/{y}.png',
        max_zoom=20,
        attribution=_STAMEN_ATTRIBUTION,
    ),
    Provider(
        key='stamen_terrain',
        name='Stamen Terrain',
        url=_STAMEN_URL + '/terrain/{z}/{x}/{y}.png',
        max_zoom=20,
        attribution=_STAMEN_ATTRIBUTION,
    ),
    Provider(
        key='stamen_terrain_bg',
        name='Stamen Terrain background',
        url=_STAMEN_URL + '/terrain-background/{z}/{x}/{y}.png',
        max_zoom=20,
        attribution=_STAMEN_ATTRIBUTION,
    ),
    Provider(
        key='tf_pio',
        name='Thunderforest Pioneer',
        url='https://{s}.tile.thunderforest.com/pioneer/{z}/{x}/{y}.png?apikey={apikey}',
        max_zoom=22,
        attribution='ⓒ Thunderforest, OpenStreetMap contributors',
        api_key_env=THUNDERFOREST_APIKEY_ENV,
    ),
    Provider(
        key='carto_pos',
        name='CartoDB Positron',
        url='https://{s}.basemaps.cartocdn.com/light_all/{z}/{x}/{y}{r}.png',
        max_zoom=19,
        attribution='ⓒ OpenStreetMap contributors, CARTO',
    ),
    Provider(
        key='basemap_at',
        name='Basemap AT',
        url='https://maps.wien.gv.at/basemap/geolandbasemap/{type}/google3857/{z}/{y}/{x}.png',
        max_zoom=20,
        attribution='Datenquelle: https://basemap.at',
        url_params={'type': 'normal'},
    ),
)


class ProviderRegistry(Mapping[str, Provider]):
    """Read-only mapping of provider key to :class:`Provider`."""

    def __init__(self, providers: Mapping[str, Provider] | None = None) -> None:
        self._providers = MappingProxyType(dict(providers or {}))

    @classmethod
    def default(cls) -> ProviderRegistry:
        return cls.from_providers(DEFAULT_PROVIDERS)

    @classmethod
    def from_providers(cls, providers: tuple[Provider, ...] | list[Provider]) -> ProviderRegistry:
        return cls({p.key: p for p in providers})

    def __getitem__(self, key: str) -> Provider:
        return self._providers[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self) -> str:
        return f'ProviderRegistry({sorted(self._providers)!r})'

    def with_providers(self, *providers: Provider) -> ProviderRegistry:
        """Return a new registry with ``providers`` added (same key replaces)."""
        merged = dict(self._providers)
        for provider in providers:
            if not provider.key:
                msg = f'provider {provider.label!r} needs a key to be registered'
                raise ValueError(msg)
            if provider.key in merged:
                logger.info('Provider %s overridden', provider.key)
            merged[provider.key] = provider
        return ProviderRegistry(merged)

    def resolve(self, ref: ProviderRef) -> Provider:
        """
        Map a provider reference to a concrete :class:`Provider`.

        Raises:
            UnknownProviderError: ``ref`` is a key missing from the registry.
            ValueError: ``ref`` is a mapping that is not a valid provider.
            TypeError: ``ref`` has an unsupported type.

        """
        if isinstance(ref, Provider):
            return ref
        if isinstance(ref, str):
            try:
                return self._providers[ref]
            except KeyError:
                raise UnknownProviderError(ref) from None
        if isinstance(ref, Mapping):
            try:
                return Provider.model_validate(dict(ref))
            except ValidationError as e:
                msg = f'wrong provider format: {e}'
                raise ValueError(msg) from e
        msg = f'wrong provider format: {ref!r}'
        raise TypeError(msg)
