"""Mapping layer between flat RenderOptions fields and sectioned TOML format.

RenderOptions remains a flat Pydantic model. This module provides two functions:
- flat_to_sectioned(): flat dict -> sectioned dict (for TOML save)
- sectioned_to_flat(): sectioned dict -> flat dict (for TOML load)

The ``[providers]`` table is not an options section; it is handled by
:mod:`tilestitch.domain.profiles`.
"""

from __future__ import annotations

PROVIDERS_SECTION = 'providers'

# {section_name: {flat_field_name: short_name_in_toml}}
SECTION_MAP: dict[str, dict[str, str]] = {
    'render': {
        'provider': 'provider',
        'max_tiles': 'max_tiles',
        'contact': 'contact',
        'debug': 'debug',
    },
    'cache': {
        'tiles_dir': 'tiles_dir',
        'tmp_dir': 'tmp_dir',
        'keep_tiles_dir': 'keep',
        'overwrite_tiles': 'overwrite',
    },
    'http': {
        'http_headers': 'headers',
    },
}

# Reverse index: flat_field -> (section, short_name)
_FLAT_TO_SECTION: dict[str, tuple[str, str]] = {}
for _section, _fields in SECTION_MAP.items():
    for _flat, _short in _fields.items():
        _FLAT_TO_SECTION[_flat] = (_section, _short)

# Reverse index: (section, short_name) -> flat_field
_SECTION_TO_FLAT: dict[str, dict[str, str]] = {}
for _section, _fields in SECTION_MAP.items():
    _SECTION_TO_FLAT[_section] = {v: k for k, v in _fields.items()}


def flat_to_sectioned(flat: dict) -> dict:
    """Convert flat RenderOptions dict to sectioned dict for TOML output."""
    result: dict = {}
    for key, value in flat.items():
        if value is None:
            # TOML has no null
            continue
        section, short_name = _FLAT_TO_SECTION.get(key, ('render', key))
        result.setdefault(section, {})[short_name] = value
    return result


def sectioned_to_flat(data: dict) -> dict:
    """Convert sectioned TOML dict to flat dict for RenderOptions validation."""
    flat: dict = {}
    for key, value in data.items():
        if key == PROVIDERS_SECTION:
            continue
        if isinstance(value, dict) and key in _SECTION_TO_FLAT:
            # Known section: expand short names to flat names
            mapping = _SECTION_TO_FLAT[key]
            for short_name, field_value in value.items():
                flat[mapping.get(short_name, short_name)] = field_value
        elif isinstance(value, dict):
            # Unknown section: pass through keys as-is
            flat.update(value)
        else:
            # Top-level key (flat TOML)
            flat[key] = value
    return flat
