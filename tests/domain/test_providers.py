"""Tests for the provider registry."""

from __future__ import annotations

import pytest

from tilestitch.domain.errors import UnknownProviderError
from tilestitch.domain.models import Provider
from tilestitch.domain.providers import DEFAULT_PROVIDERS, ProviderRegistry

EXPECTED_KEYS = {
    'osm',
    'osmde',
    'osmfr',
    'osmhot',
    'otm',
    'stadia_as',
    'stadia_osmb',
    'stadia_out',
    'stamen_toner',
    'stamen_toner_bg',
    'stamen_toner_lite',
    'stamen_wc',
    'stamen_terrain',
    'stamen_terrain_bg',
    'tf_pio',
    'carto_pos',
    'basemap_at',
}


@pytest.fixture
def default_registry():
    return ProviderRegistry.default()


class TestDefaultProviders:
    """Tests for the built-in provider table."""

    def test_keys(self, default_registry):
        """All built-in providers are registered."""
        assert set(default_registry) == EXPECTED_KEYS
        assert len(default_registry) == len(DEFAULT_PROVIDERS)

    def test_every_provider_has_attribution(self, default_registry):
        """Built-in providers all carry attribution text."""
        for provider in default_registry.values():
            assert provider.attribution, provider.key

    def test_osm(self, default_registry):
        """OSM is capped at zoom 19 and has a usage policy."""
        osm = default_registry['osm']
        assert osm.max_zoom == 19
        assert osm.policy is not None
        assert osm.policy.min_zoom == 13
        assert osm.policy.max_tiles == 250
        assert '{s}' in osm.url

    def test_thunderforest_key_from_env(self, default_registry, monkeypatch):
        """tf_pio reads its API key from THUNDERFOREST_APIKEY."""
        monkeypatch.setenv('THUNDERFOREST_APIKEY', 'tf-key')
        assert default_registry['tf_pio'].resolved_api_key() == 'tf-key'

    def test_basemap_at_params(self, default_registry):
        """basemap.at fills {type} from its parameters."""
        assert default_registry['basemap_at'].url_params == {'type': 'normal'}


class TestProviderRegistry:
    """Tests for ProviderRegistry."""

    def test_read_only(self, default_registry):
        """Registries cannot be mutated in place."""
        with pytest.raises(TypeError):
            default_registry['x'] = default_registry['osm']  # type: ignore[index]

    def test_with_providers_returns_new(self, default_registry):
        """Extending yields a new registry, leaving the original unchanged."""
        extra = Provider(key='local', url='http://localhost/{z}/{x}/{y}.png')
        extended = default_registry.with_providers(extra)
        assert 'local' in extended
        assert 'local' not in default_registry

    def test_with_providers_override(self, default_registry):
        """A provider with an existing key replaces it."""
        mirror = Provider(key='osm', url='http://mirror/{z}/{x}/{y}.png')
        assert default_registry.with_providers(mirror)['osm'] is mirror

    def test_with_providers_needs_key(self, default_registry):
        """Unkeyed providers cannot be registered."""
        with pytest.raises(ValueError, match='needs a key'):
            default_registry.with_providers(Provider(url='http://x/{z}/{x}/{y}.png'))

    def test_resolve_key(self, default_registry):
        """A key resolves to the registered provider."""
        assert default_registry.resolve('otm') is default_registry['otm']

    def test_resolve_unknown_key(self, default_registry):
        """An unknown key raises UnknownProviderError."""
        with pytest.raises(UnknownProviderError) as exc_info:
            default_registry.resolve('bogus')
        assert exc_info.value.key == 'bogus'

    def test_resolve_provider_passthrough(self, default_registry):
        """An explicit Provider is used as is."""
        provider = Provider(url='http://x/{z}/{x}/{y}.png')
        assert default_registry.resolve(provider) is provider

    def test_resolve_mapping(self, default_registry):
        """A mapping is validated into a Provider."""
        provider = default_registry.resolve(
            {'url': 'http://x/{z}/{x}/{y}.png', 'maxZoom': 12, 'attribution': 'me'}
        )
        assert provider.max_zoom == 12
        assert provider.attribution == 'me'

    def test_resolve_bad_mapping(self, default_registry):
        """A mapping without a usable URL is rejected."""
        with pytest.raises(ValueError, match='wrong provider format'):
            default_registry.resolve({'name': 'no url'})

    def test_resolve_bad_type(self, default_registry):
        """Other types are rejected."""
        with pytest.raises(TypeError):
            default_registry.resolve(42)  # type: ignore[arg-type]
