"""Raster capability for the scoring pipeline.

The scorer never talks to an imaging toolkit directly. It consumes a
RasterBackend that can stroke polylines into an opacity buffer, measure text
and draw text centered into an opacity buffer. Buffers are plain
``numpy.ndarray`` objects of shape ``(size, size)`` and dtype ``uint8``,
where each value is an opacity in 0..255.

PilRasterBackend implements the capability with Pillow. Fonts are resolved
in this order:
    1. An explicit ``font_path`` (relative paths resolve against the
       current working directory).
    2. The ``STROKE_SCORE_FONT`` environment variable.
    3. The first existing entry of SYSTEM_FONT_CANDIDATES (CJK capable
       fonts shipped by common platforms), unless disabled.
    4. Pillow's bundled default font via ``ImageFont.load_default(size)``.

Typical usage:
    from stroke_score.utils.rendering import PilRasterBackend, fit_text_font_size

    backend = PilRasterBackend()
    size = fit_text_font_size(backend, '你好', config)
    buf = backend.draw_centered_text('你好', size, 200, outline_width=15)
"""

from __future__ import annotations

import io
import logging
import os
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

if TYPE_CHECKING:
    from ..config import ScoringConfig

logger = logging.getLogger(__name__)

Polyline = Sequence[Tuple[float, float]]

FONT_ENV_VAR = 'STROKE_SCORE_FONT'

SYSTEM_FONT_CANDIDATES = (
    '/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc',
    '/usr/share/fonts/noto-cjk/NotoSansCJK-Regular.ttc',
    '/usr/share/fonts/google-noto-cjk/NotoSansCJK-Regular.ttc',
    '/usr/share/fonts/truetype/droid/DroidSansFallbackFull.ttf',
    '/usr/share/fonts/truetype/wqy/wqy-microhei.ttc',
    '/System/Library/Fonts/PingFang.ttc',
    '/System/Library/Fonts/STHeiti Light.ttc',
    '/Library/Fonts/Arial Unicode.ttf',
    'C:/Windows/Fonts/msyh.ttc',
    'C:/Windows/Fonts/simhei.ttf',
)

# LRU cache size for font objects, one entry per (path, size) pair
FONT_CACHE_SIZE = 256


@lru_cache(maxsize=FONT_CACHE_SIZE)
def _cached_font(font_path: str, size: int) -> ImageFont.FreeTypeFont:
    """Load a font with caching to avoid repeated disk I/O."""
    return ImageFont.truetype(font_path, size)


@lru_cache(maxsize=FONT_CACHE_SIZE)
def _default_font(size: int):
    return ImageFont.load_default(size=size)


def find_system_font() -> Optional[str]:
    """Return the first installed CJK font from SYSTEM_FONT_CANDIDATES."""
    for candidate in SYSTEM_FONT_CANDIDATES:
        if os.path.isfile(candidate):
            return candidate
    return None


def resolve_font_path(font_path: Optional[str] = None,
                      use_system_fonts: bool = True) -> Optional[str]:
    """Pick the font file used for glyph rendering.

    Args:
        font_path: Explicit font file, absolute or relative to the cwd.
        use_system_fonts: Consult the environment variable and the system
            candidate list when no explicit path is given.

    Returns:
        Absolute font path, or None to use Pillow's default font.
    """
    if font_path:
        return os.path.abspath(font_path)
    if not use_system_fonts:
        return None
    env_path = os.environ.get(FONT_ENV_VAR)
    if env_path:
        return os.path.abspath(env_path)
    return find_system_font()


class RasterBackend(ABC):
    """Rendering capability consumed by the scorer.

    Implementations produce square opacity buffers; the scorer only ever
    reads those arrays, so any 2D imaging library can back this interface.
    """

    @abstractmethod
    def stroke_polyline(self, subpaths: Sequence[Polyline], width: float,
                        size: int) -> np.ndarray:
        """Stroke connected segments into a new ``size`` x ``size`` buffer.

        Each entry of ``subpaths`` is drawn as one connected polyline with
        round joins and caps. A single-point entry leaves a round dot.
        """

    @abstractmethod
    def measure_text(self, text: str, font_size: int) -> float:
        """Advance width of ``text`` at ``font_size`` in buffer pixels."""

    @abstractmethod
    def draw_centered_text(self, text: str, font_size: int, size: int,
                           outline_width: float) -> np.ndarray:
        """Draw filled and outlined ``text`` centered in a new buffer."""


class PilRasterBackend(RasterBackend):
    """RasterBackend built on Pillow's ImageDraw.

    Polylines are drawn on a supersampled canvas and box-filtered down, which
    gives antialiased edges. Text uses FreeType antialiasing directly.

    Attributes:
        font_path: Resolved font file, or None for Pillow's default font.
        supersample: Polyline antialiasing factor.

    Raises:
        OSError: If an explicit or configured font file cannot be loaded.
    """

    def __init__(self, font_path: Optional[str] = None, supersample: int = 4,
                 use_system_fonts: bool = True):
        self.font_path = resolve_font_path(font_path, use_system_fonts)
        self.supersample = max(1, int(supersample))
        if self.font_path is None:
            logger.debug("No CJK font found, using Pillow default font")
        else:
            # Validate font can be loaded
            _cached_font(self.font_path, 10)

    def font(self, font_size: int):
        """Font object for ``font_size`` points."""
        if self.font_path is None:
            return _default_font(font_size)
        return _cached_font(self.font_path, font_size)

    def stroke_polyline(self, subpaths: Sequence[Polyline], width: float,
                        size: int) -> np.ndarray:
        ss = self.supersample
        img = Image.new('L', (size * ss, size * ss), 0)
        draw = ImageDraw.Draw(img)
        line_width = max(1, int(round(width * ss)))
        r = width * ss / 2

        for sub in subpaths:
            pts = [(x * ss, y * ss) for x, y in sub]
            if not pts:
                continue
            if len(pts) > 1:
                draw.line(pts, fill=255, width=line_width, joint='curve')
            # Round caps
            for x, y in (pts[0], pts[-1]):
                draw.ellipse([x - r, y - r, x + r, y + r], fill=255)

        if ss > 1:
            img = img.resize((size, size), Image.Resampling.BOX)
        return np.array(img, dtype=np.uint8)

    def measure_text(self, text: str, font_size: int) -> float:
        return float(self.font(font_size).getlength(text))

    def draw_centered_text(self, text: str, font_size: int, size: int,
                           outline_width: float) -> np.ndarray:
        img = Image.new('L', (size, size), 0)
        draw = ImageDraw.Draw(img)
        # 'mm' centers on the middle of the ascender/descender box
        draw.text(
            (size / 2, size / 2), text, fill=255, font=self.font(font_size),
            anchor='mm', stroke_width=int(round(outline_width / 2)), stroke_fill=255,
        )
        return np.array(img, dtype=np.uint8)


def fit_text_font_size(backend: RasterBackend, text: str,
                       config: ScoringConfig) -> int:
    """Largest font size (on the step grid) whose text fits the buffer.

    Starts at ``config.start_font_size`` and shrinks by ``config.font_step``
    while the measured width exceeds ``config.text_max_width``. The loop
    never goes below ``config.min_font_size``, so it always terminates even
    for text that cannot fit.
    """
    font_size = config.start_font_size
    while (backend.measure_text(text, font_size) > config.text_max_width
           and font_size - config.font_step >= config.min_font_size):
        font_size -= config.font_step
    return font_size


def buffer_to_image(buffer: np.ndarray) -> Image.Image:
    """Render an opacity buffer as black ink on white for inspection."""
    return Image.fromarray(255 - buffer)


def buffer_to_png(buffer: np.ndarray) -> bytes:
    """Encode an opacity buffer as PNG bytes (black ink on white)."""
    out = io.BytesIO()
    buffer_to_image(buffer).save(out, format='PNG')
    return out.getvalue()


def compose_preview(user: np.ndarray, target: np.ndarray) -> Image.Image:
    """Overlay both buffers in one RGB image.

    Target ink is drawn in gray, user ink in purple, overlap in black.
    """
    h, w = target.shape
    rgb = np.full((h, w, 3), 255, dtype=np.uint8)
    t = target > 0
    u = user > 0
    rgb[t] = (170, 170, 170)
    rgb[u] = (0x7B, 0x1F, 0xA2)
    rgb[t & u] = (0, 0, 0)
    return Image.fromarray(rgb)
