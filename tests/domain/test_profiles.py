"""Tests for TOML config loading and saving."""

from __future__ import annotations

from pathlib import Path

import pytest
import tomlkit
from pydantic import ValidationError

from tilestitch.domain.models import Provider, RenderOptions
from tilestitch.domain.profiles import (
    load_config,
    parse_providers,
    read_config,
    save_config,
)

CONFIG_TEXT = """\
[render]
provider = "local"
contact = "me@example.org"
max_tiles = 40

[cache]
tiles_dir = "tiles"
overwrite = true

[http.headers]
Referer = "https://example.org"

[providers.local]
name = "Local mirror"
url = "http://localhost:8080/{z}/{x}/{y}.png"
maxZoom = 16
attribution = "Local tiles"
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'tilestitch.toml'
    path.write_text(CONFIG_TEXT, encoding='utf-8')
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_options(self, config_file):
        """Sections map onto RenderOptions fields."""
        options, _ = load_config(config_file)
        assert options.provider == 'local'
        assert options.contact == 'me@example.org'
        assert options.max_tiles == 40
        assert options.tiles_dir == Path('tiles')
        assert options.overwrite_tiles is True
        assert options.keep_tiles_dir is False
        assert options.http_headers == {'Referer': 'https://example.org'}

    def test_providers(self, config_file):
        """[providers.<key>] tables become providers keyed by table name."""
        _, providers = load_config(config_file)
        assert len(providers) == 1
        local = providers[0]
        assert local.key == 'local'
        assert local.max_zoom == 16
        assert local.attribution == 'Local tiles'

    def test_overrides_win(self, config_file):
        """Overrides replace file values; None overrides are ignored."""
        options, _ = load_config(config_file, max_tiles=5, contact=None)
        assert options.max_tiles == 5
        assert options.contact == 'me@example.org'

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'nope.toml')

    def test_invalid_options(self, tmp_path):
        """Invalid values fail validation."""
        path = tmp_path / 'bad.toml'
        path.write_text('[render]\ncontact = "x"\nmax_tiles = 0\n', encoding='utf-8')
        with pytest.raises(ValidationError):
            load_config(path)

    def test_read_config_plain_values(self, config_file):
        """Parsed data is plain Python (no tomlkit items)."""
        data = read_config(config_file)
        assert type(data) is dict
        assert type(data['render']) is dict


class TestParseProviders:
    """Tests for parse_providers."""

    def test_empty(self):
        """No [providers] table yields no providers."""
        assert parse_providers({}) == []

    def test_table_required(self):
        """Non-table entries are rejected."""
        with pytest.raises(ValueError, match='must be a table'):
            parse_providers({'providers': {'x': 'http://x'}})

    def test_invalid_url(self):
        """Provider URLs are validated."""
        with pytest.raises(ValidationError):
            parse_providers({'providers': {'x': {'url': 'http://x/{z}.png'}}})


class TestSaveConfig:
    """Tests for save_config."""

    def test_round_trip(self, tmp_path):
        """Saved options load back unchanged."""
        options = RenderOptions(
            provider='otm',
            contact='me@example.org',
            max_tiles=12,
            tiles_dir=tmp_path / 'tiles',
            keep_tiles_dir=True,
            http_headers={'X-Test': '1'},
        )
        path = save_config(tmp_path / 'cfg' / 'out.toml', options)
        loaded, providers = load_config(path)
        assert loaded == options
        assert providers == []

    def test_sectioned_layout(self, tmp_path):
        """The file uses [render]/[cache] sections and omits unset paths."""
        path = save_config(tmp_path / 'out.toml', RenderOptions(contact='x'))
        data = tomlkit.parse(path.read_text(encoding='utf-8')).unwrap()
        assert data['render']['provider'] == 'osm'
        assert data['cache']['keep'] is False
        assert 'tiles_dir' not in data['cache']

    def test_inline_provider_saved(self, tmp_path):
        """An inline provider is written as a provider table."""
        inline = Provider(url='http://x/{z}/{x}/{y}.png', attribution='X')
        path = save_config(tmp_path / 'out.toml', RenderOptions(contact='x', provider=inline))
        loaded, providers = load_config(path)
        assert loaded.provider == 'custom'
        assert [p.key for p in providers] == ['custom']
        assert providers[0].url == inline.url
        assert providers[0].attribution == 'X'
