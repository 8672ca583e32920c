"""Pytest configuration and fixtures for tilestitch tests."""

from __future__ import annotations

import io
import re
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from tilestitch.domain.errors import TileFetchError  # noqa: E402
from tilestitch.domain.models import Provider, RenderOptions  # noqa: E402
from tilestitch.domain.providers import ProviderRegistry  # noqa: E402

TEST_TILE_SIZE = 64
TEST_CONTACT = 'tests@example.org'

_ZXY_RE = re.compile(r'/(\d+)/(\d+)/(\d+)\.png')


class FakeTransport:
    """
    In-memory tile server.

    Answers ``.../{z}/{x}/{y}.png`` URLs with a solid PNG whose colour
    depends on (x, y) and records every request.
    """

    def __init__(self, tile_size: int = TEST_TILE_SIZE, fail_on: str | None = None) -> None:
        self.tile_size = tile_size
        self.fail_on = fail_on
        self.calls: list[tuple[str, dict[str, str]]] = []

    @staticmethod
    def color_for(x: int, y: int) -> tuple[int, int, int]:
        return ((x * 37) % 256, (y * 53) % 256, 128)

    @property
    def urls(self) -> list[str]:
        return [url for url, _ in self.calls]

    async def get(self, url: str, headers) -> bytes:
        self.calls.append((url, dict(headers)))
        if self.fail_on is not None and self.fail_on in url:
            raise TileFetchError(url, 'HTTP 503')
        m = _ZXY_RE.search(url)
        x, y = (int(m.group(2)), int(m.group(3))) if m else (0, 0)
        img = Image.new('RGB', (self.tile_size, self.tile_size), self.color_for(x, y))
        buf = io.BytesIO()
        img.save(buf, format='PNG')
        return buf.getvalue()


@pytest.fixture
def transport():
    """Recording fake transport."""
    return FakeTransport()


@pytest.fixture
def make_transport():
    """Factory for fake transports (e.g. failing on some URL)."""
    return FakeTransport


@pytest.fixture
def stub_provider():
    """Provider served by FakeTransport."""
    return Provider(
        key='test',
        name='Test tiles',
        url='https://tiles.test/{z}/{x}/{y}.png',
        max_zoom=19,
        attribution='ⓒ Test contributors',
    )


@pytest.fixture
def registry(stub_provider):
    """Default registry plus the test provider."""
    return ProviderRegistry.default().with_providers(stub_provider)


@pytest.fixture
def options(tmp_path):
    """Render options using the test provider and a private temp root."""
    return RenderOptions(
        provider='test',
        contact=TEST_CONTACT,
        tmp_dir=tmp_path / 'tmp',
    )


def make_tile(path: Path, color: tuple[int, int, int], size: int = TEST_TILE_SIZE) -> Path:
    """Write a solid PNG tile to ``path``."""
    Image.new('RGB', (size, size), color).save(path)
    return path


@pytest.fixture
def tile_factory(tmp_path):
    """Create solid tiles inside a temp directory."""
    tiles_dir = tmp_path / 'tiles'
    tiles_dir.mkdir()

    def _make(name: str, color: tuple[int, int, int], size: int = TEST_TILE_SIZE) -> Path:
        return make_tile(tiles_dir / name, color, size)

    return _make
