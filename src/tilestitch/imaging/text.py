"""Text rendering utilities - caption font and outlined text."""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw, ImageFont

from tilestitch.shared.constants import (
    ATTRIBUTION_ANCHOR,
    ATTRIBUTION_FONT_CANDIDATES,
    ATTRIBUTION_FONT_SIZE,
    ATTRIBUTION_MARGIN_PX,
    ATTRIBUTION_OUTLINE_COLOR,
    ATTRIBUTION_OUTLINE_WIDTH,
    ATTRIBUTION_TEXT_COLOR,
)

logger = logging.getLogger(__name__)


def load_caption_font(font_size: int = ATTRIBUTION_FONT_SIZE) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """
    Load a scalable font for captions.

    Tries the candidates in ATTRIBUTION_FONT_CANDIDATES, then falls back to
    Pillow's built-in font at the requested size.
    """
    for name in ATTRIBUTION_FONT_CANDIDATES:
        try:
            return ImageFont.truetype(name, font_size)
        except OSError:
            logger.debug('Font %s not found, trying next', name)
    return ImageFont.load_default(size=font_size)


def draw_text_with_outline(
    draw: ImageDraw.ImageDraw,
    xy: tuple[float, float],
    text: str,
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    fill: tuple[int, int, int] = ATTRIBUTION_TEXT_COLOR,
    outline: tuple[int, int, int] = ATTRIBUTION_OUTLINE_COLOR,
    outline_width: int = ATTRIBUTION_OUTLINE_WIDTH,
    anchor: str | None = None,
) -> None:
    """Draw text with an outline so it stays readable on any background."""
    x, y = xy
    if outline_width > 0:
        for dx in range(-outline_width, outline_width + 1):
            for dy in range(-outline_width, outline_width + 1):
                if dx == 0 and dy == 0:
                    continue
                draw.text((x + dx, y + dy), text, font=font, fill=outline, anchor=anchor)
    draw.text((x, y), text, font=font, fill=fill, anchor=anchor)


def anchor_point(
    size: tuple[int, int], anchor: str, margin: int = ATTRIBUTION_MARGIN_PX
) -> tuple[int, int]:
    """Corner of an image of ``size`` matching a two-letter Pillow anchor."""
    if len(anchor) != 2 or anchor[0] not in 'lmr' or anchor[1] not in 'tmb':
        msg = f'unsupported anchor {anchor!r}'
        raise ValueError(msg)
    w, h = size
    x = {'l': margin, 'm': w // 2, 'r': w - 1 - margin}[anchor[0]]
    y = {'t': margin, 'm': h // 2, 'b': h - 1 - margin}[anchor[1]]
    return x, y


def draw_attribution(
    img: Image.Image,
    text: str,
    *,
    font_size: int = ATTRIBUTION_FONT_SIZE,
    anchor: str = ATTRIBUTION_ANCHOR,
    margin: int = ATTRIBUTION_MARGIN_PX,
) -> None:
    """Burn ``text`` into ``img`` (in place), bottom-right by default."""
    draw = ImageDraw.Draw(img)
    font = load_caption_font(font_size)
    # Position from the bbox; the bitmap fallback font does not accept anchors
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    text_w, text_h = right - left, bottom - top
    x, y = anchor_point(img.size, anchor, margin)
    x -= {'l': 0, 'm': text_w // 2, 'r': text_w}[anchor[0]] + left
    y -= {'t': 0, 'm': text_h // 2, 'b': text_h}[anchor[1]] + top
    draw_text_with_outline(draw, (x, y), text, font=font)
