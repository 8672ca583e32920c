"""Tests for the flat <-> sectioned TOML mapping."""

from __future__ import annotations

from tilestitch.domain.toml_sections import (
    SECTION_MAP,
    flat_to_sectioned,
    sectioned_to_flat,
)


class TestFlatToSectioned:
    """Tests for flat_to_sectioned."""

    def test_fields_grouped(self):
        """Fields land in their section under the short name."""
        result = flat_to_sectioned(
            {
                'provider': 'otm',
                'contact': 'me@example.org',
                'keep_tiles_dir': True,
                'overwrite_tiles': False,
                'http_headers': {'Referer': 'https://example.org'},
            }
        )
        assert result == {
            'render': {'provider': 'otm', 'contact': 'me@example.org'},
            'cache': {'keep': True, 'overwrite': False},
            'http': {'headers': {'Referer': 'https://example.org'}},
        }

    def test_none_dropped(self):
        """None values are omitted (TOML has no null)."""
        assert flat_to_sectioned({'tiles_dir': None, 'max_tiles': 5}) == {
            'render': {'max_tiles': 5}
        }

    def test_unknown_field_in_render(self):
        """Unmapped fields go to [render]."""
        assert flat_to_sectioned({'other': 1}) == {'render': {'other': 1}}


class TestSectionedToFlat:
    """Tests for sectioned_to_flat."""

    def test_known_sections(self):
        """Short names expand to flat field names."""
        flat = sectioned_to_flat(
            {
                'render': {'provider': 'osm', 'max_tiles': 20},
                'cache': {'tiles_dir': '/tmp/t', 'keep': True},
                'http': {'headers': {'X-Test': '1'}},
            }
        )
        assert flat == {
            'provider': 'osm',
            'max_tiles': 20,
            'tiles_dir': '/tmp/t',
            'keep_tiles_dir': True,
            'http_headers': {'X-Test': '1'},
        }

    def test_flat_top_level(self):
        """Top-level keys pass through."""
        assert sectioned_to_flat({'contact': 'x'}) == {'contact': 'x'}

    def test_providers_section_skipped(self):
        """[providers] is not part of the options."""
        flat = sectioned_to_flat({'providers': {'local': {'url': 'x'}}, 'contact': 'x'})
        assert flat == {'contact': 'x'}

    def test_round_trip_all_mapped_fields(self):
        """Every mapped field survives a round trip."""
        flat = {name: name for fields in SECTION_MAP.values() for name in fields}
        assert sectioned_to_flat(flat_to_sectioned(flat)) == flat
