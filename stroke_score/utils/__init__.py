"""Rendering utilities for the scoring pipeline.

Rendering utilities:
    RasterBackend: Capability interface consumed by the scorer.
    PilRasterBackend: Pillow implementation of RasterBackend.
    fit_text_font_size: Auto-fit font size search for the target glyph.
    buffer_to_png: Encode an opacity buffer for inspection.
    compose_preview: Overlay user and target buffers in one image.
"""

from .rendering import (
    PilRasterBackend,
    RasterBackend,
    buffer_to_image,
    buffer_to_png,
    compose_preview,
    find_system_font,
    fit_text_font_size,
    resolve_font_path,
)

__all__ = [
    'RasterBackend', 'PilRasterBackend',
    'fit_text_font_size', 'resolve_font_path', 'find_system_font',
    'buffer_to_image', 'buffer_to_png', 'compose_preview',
]
