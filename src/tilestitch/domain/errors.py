"""Exceptions raised by the render pipeline.

Pre-flight errors (unknown provider, too many tiles, zoom too high) are raised
before any directory is created or any request is sent. Fetch and assembly
errors abort the render; tiles already downloaded stay in the cache.
"""

from __future__ import annotations


class TileStitchError(Exception):
    """Base class for all render failures."""


class UnknownProviderError(TileStitchError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f'unknown provider {key!r}')


class TooManyTilesError(TileStitchError):
    def __init__(self, requested: int, limit: int) -> None:
        self.requested = requested
        self.limit = limit
        super().__init__(
            f'would need to request {requested} tiles > {limit}, aborting'
        )


class ZoomTooHighError(TileStitchError):
    def __init__(self, zoom: int, max_zoom: int, provider: str = '') -> None:
        self.zoom = zoom
        self.max_zoom = max_zoom
        self.provider = provider
        where = f' for provider {provider!r}' if provider else ''
        super().__init__(f'zoom level {zoom} too high{where} (max {max_zoom})')


class TileFetchError(TileStitchError):
    """Download or write of a single tile failed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f'failed to fetch {url}: {reason}')


class AssemblyError(TileStitchError):
    """Stitching, annotating or saving the output image failed."""
