"""Imaging package - tile grid assembly and captions."""

from tilestitch.imaging.composer import GridAssembler, save_image, stitch_tiles
from tilestitch.imaging.text import (
    draw_attribution,
    draw_text_with_outline,
    load_caption_font,
)

__all__ = [
    'GridAssembler',
    'draw_attribution',
    'draw_text_with_outline',
    'load_caption_font',
    'save_image',
    'stitch_tiles',
]
