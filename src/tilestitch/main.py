"""Command line entry point: render a bounding box to an image file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from tilestitch import __version__
from tilestitch.domain.errors import TileStitchError
from tilestitch.domain.models import GeoBox, RenderOptions
from tilestitch.domain.profiles import load_config, parse_providers, read_config
from tilestitch.domain.providers import ProviderRegistry
from tilestitch.service import TileMapRenderer
from tilestitch.shared.constants import DEFAULT_ZOOM, LOG_FORMAT

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RENDER_FAILED = 1
EXIT_BAD_OPTIONS = 2


def setup_logging(debug: bool = False, log_file: Path | None = None) -> None:
    """Configure application logging to stdout and, optionally, a file."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding='utf-8'))
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tilestitch',
        description='Stitch slippy-map tiles covering a bounding box into one image',
    )
    parser.add_argument('lat1', type=float, nargs='?', help='Latitude of the first corner')
    parser.add_argument('lon1', type=float, nargs='?', help='Longitude of the first corner')
    parser.add_argument('lat2', type=float, nargs='?', help='Latitude of the opposite corner')
    parser.add_argument('lon2', type=float, nargs='?', help='Longitude of the opposite corner')
    parser.add_argument('output', type=Path, nargs='?', help='Output image (format from suffix)')
    parser.add_argument('--zoom', '-z', type=int, default=DEFAULT_ZOOM, help='Zoom level')
    parser.add_argument('--provider', '-p', help='Provider key (default: osm)')
    parser.add_argument('--config', '-c', type=Path, help='TOML config file')
    parser.add_argument('--contact', help='E-mail or URL sent to the tile servers')
    parser.add_argument('--tiles-dir', type=Path, help='Keep tiles in this directory')
    parser.add_argument('--tmp-dir', type=Path, help='Root for scratch directories')
    parser.add_argument(
        '--keep', action='store_true', help='Keep the scratch tile directory'
    )
    parser.add_argument(
        '--overwrite', action='store_true', help='Download tiles even if present'
    )
    parser.add_argument('--max-tiles', type=int, help='Tile count limit')
    parser.add_argument('--debug', action='store_true', help='Verbose logging')
    parser.add_argument('--log-file', type=Path, help='Also log to this file')
    parser.add_argument(
        '--list-providers', action='store_true', help='Print known providers and exit'
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def build_options(args: argparse.Namespace) -> tuple[RenderOptions, ProviderRegistry]:
    """
    Merge the config file (if any) with command line flags.

    Flags that were not given leave the config value untouched.
    """
    overrides = {
        'provider': args.provider,
        'contact': args.contact,
        'tiles_dir': args.tiles_dir,
        'tmp_dir': args.tmp_dir,
        'keep_tiles_dir': True if args.keep else None,
        'overwrite_tiles': True if args.overwrite else None,
        'max_tiles': args.max_tiles,
        'debug': True if args.debug else None,
    }
    registry = ProviderRegistry.default()
    if args.config is not None:
        options, providers = load_config(args.config, **overrides)
        registry = registry.with_providers(*providers)
    else:
        options = RenderOptions.model_validate(
            {k: v for k, v in overrides.items() if v is not None}
        )
    return options, registry


def list_providers(registry: ProviderRegistry) -> None:
    for key, provider in sorted(registry.items()):
        max_zoom = '-' if provider.max_zoom is None else str(provider.max_zoom)
        print(f'{key:<16} {max_zoom:>3}  {provider.name}')


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.debug, args.log_file)

    if args.list_providers:
        registry = ProviderRegistry.default()
        if args.config is not None:
            try:
                registry = registry.with_providers(
                    *parse_providers(read_config(args.config))
                )
            except (OSError, ValueError) as e:
                logger.error('Invalid config: %s', e)
                return EXIT_BAD_OPTIONS
        list_providers(registry)
        return EXIT_OK

    coords = (args.lat1, args.lon1, args.lat2, args.lon2)
    if None in coords or args.output is None:
        parser.error('lat1, lon1, lat2, lon2 and output are required')

    try:
        options, registry = build_options(args)
    except (OSError, ValueError) as e:
        logger.error('Invalid options: %s', e)
        return EXIT_BAD_OPTIONS

    renderer = TileMapRenderer(options, registry=registry)
    try:
        path = renderer.render(GeoBox(*coords), args.output, zoom=args.zoom)
    except TileStitchError as e:
        logger.error('Render failed: %s', e)
        return EXIT_RENDER_FAILED
    except ValueError as e:
        logger.error('Invalid options: %s', e)
        return EXIT_BAD_OPTIONS

    logger.info('Done: %s', path)
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
