from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomlkit

from tilestitch.domain.models import Provider, RenderOptions
from tilestitch.domain.toml_sections import (
    PROVIDERS_SECTION,
    flat_to_sectioned,
    sectioned_to_flat,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Registry key used when an inline provider without a key is saved
INLINE_PROVIDER_KEY = 'custom'


def read_config(path: str | Path) -> dict[str, Any]:
    """Parse a TOML config file into plain Python values."""
    path = Path(path)
    if not path.exists():
        msg = f'Config file not found: {path}'
        raise FileNotFoundError(msg)
    text = path.read_text(encoding='utf-8')
    return tomlkit.parse(text).unwrap()


def parse_providers(data: dict[str, Any]) -> list[Provider]:
    """
    Provider definitions from the ``[providers.<key>]`` tables.

    The table name is the registry key; a ``key`` inside the table is ignored.
    """
    tables = data.get(PROVIDERS_SECTION) or {}
    providers = []
    for key, table in tables.items():
        if not isinstance(table, dict):
            msg = f'[{PROVIDERS_SECTION}.{key}] must be a table'
            raise ValueError(msg)
        providers.append(Provider.model_validate({**table, 'key': key}))
    return providers


def load_config(
    path: str | Path, **overrides: Any
) -> tuple[RenderOptions, list[Provider]]:
    """
    Load render options and extra providers from a TOML file.

    ``overrides`` (flat RenderOptions field names) win over the file; ``None``
    values are skipped so unset command line flags keep the file's value.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        pydantic.ValidationError: invalid options or provider tables.

    """
    data = read_config(path)
    flat = sectioned_to_flat(data)
    flat.update({k: v for k, v in overrides.items() if v is not None})
    options = RenderOptions.model_validate(flat)
    providers = parse_providers(data)
    logger.info(
        'Loaded config %s (%d extra provider(s))', path, len(providers)
    )
    return options, providers


def save_config(
    path: str | Path,
    options: RenderOptions,
    providers: Iterable[Provider] = (),
) -> Path:
    """Write ``options`` (and extra providers) as sectioned TOML."""
    path = Path(path)
    extra = list(providers)
    flat = options.model_dump(mode='json', exclude={'provider'})
    if isinstance(options.provider, Provider):
        inline = options.provider
        if not inline.key:
            inline = inline.model_copy(update={'key': INLINE_PROVIDER_KEY})
        extra.append(inline)
        flat['provider'] = inline.key
    else:
        flat['provider'] = options.provider

    data = flat_to_sectioned(flat)
    if extra:
        data[PROVIDERS_SECTION] = {
            p.key: p.model_dump(mode='json', exclude_none=True, exclude={'key'})
            for p in extra
        }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomlkit.dumps(data), encoding='utf-8')
    return path
