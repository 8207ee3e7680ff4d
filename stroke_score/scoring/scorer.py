"""Handwriting similarity scorer.

Pipeline for one scoring call:
    1. Fit the user path's bounding box, centered and aspect preserving,
       into the interior of the buffer.
    2. Stroke the fitted path into a user opacity buffer.
    3. Shrink the target glyph's font until it fits, then draw it centered
       into a target opacity buffer.
    4. Compare the buffers with a sampled, neighborhood-tolerant test.
    5. Scale coverage into an integer score and clamp it.

Only spatial coverage is measured. Stroke order, direction and stroke count
are not checked, so a drawing with the right shape scores well regardless
of how it was written.

Typical usage:
    from stroke_score import StrokeScorer

    scorer = StrokeScorer()
    score = scorer.score([(12, 40), (180, 44)], '一')
    result = scorer.evaluate(path, '永')
    print(result.score, result.matches, result.target_pixels)
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple, Union

import numpy as np

from ..config import ScoringConfig
from ..domain.geometry import BBox, FitTransform, PointLike, StrokePath
from ..utils.rendering import PilRasterBackend, RasterBackend, fit_text_font_size
from .comparison import CoverageCounts, compare_buffers, coverage_score

logger = logging.getLogger(__name__)

PathInput = Union[StrokePath, Iterable[PointLike]]


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of one scoring call.

    Attributes:
        score: Integer score in [0, max_score].
        has_drawing: Whether the path contained any usable point.
        matches: Sampled target ink pixels with user ink nearby.
        target_pixels: Sampled target ink pixels in total.
        raw_score: Unclamped coverage ratio times the multiplier.
        font_size: Font size the target glyph was rendered at, or None if
            no rendering happened.
    """
    score: int
    has_drawing: bool
    matches: int = 0
    target_pixels: int = 0
    raw_score: float = 0.0
    font_size: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            'score': self.score,
            'has_drawing': self.has_drawing,
            'matches': self.matches,
            'target_pixels': self.target_pixels,
            'raw_score': round(self.raw_score, 3),
            'font_size': self.font_size,
        }


def fit_path(path: StrokePath, config: ScoringConfig) -> StrokePath:
    """Map ``path`` into the buffer interior, centered, aspect preserved.

    A single point or straight line keeps its position, moved only as far
    as needed to stay inside the buffer.
    """
    size, margin = config.buffer_size, config.margin
    dst = BBox(margin, margin, size - margin, size - margin)
    transform = FitTransform.fit(path.bounds(), dst, config.min_extent,
                                 bounds=BBox(0, 0, size, size))
    return transform.apply_path(path)


def render_user_buffer(backend: RasterBackend, path: StrokePath,
                       config: ScoringConfig) -> np.ndarray:
    """Fit ``path`` and stroke it into a fresh opacity buffer."""
    fitted = fit_path(path, config)
    subpaths = [[p.to_tuple() for p in sub] for sub in fitted.subpaths]
    return backend.stroke_polyline(subpaths, config.user_stroke_width,
                                   config.buffer_size)


def render_target_buffer(backend: RasterBackend, text: str,
                         config: ScoringConfig) -> Tuple[np.ndarray, int]:
    """Render ``text`` at its auto-fit size into a fresh opacity buffer.

    Returns:
        Tuple of (buffer, font_size).
    """
    font_size = fit_text_font_size(backend, text, config)
    buffer = backend.draw_centered_text(text, font_size, config.buffer_size,
                                        config.glyph_stroke_width)
    return buffer, font_size


class StrokeScorer:
    """Scores a drawn path against a target glyph by ink coverage.

    The scorer holds no per-call state; buffers are created for each call
    and discarded afterwards, so one instance can be shared freely.

    Attributes:
        config: ScoringConfig with buffer geometry and thresholds.
        backend: RasterBackend used to draw both buffers.

    Example:
        >>> scorer = StrokeScorer()
        >>> scorer.score([], '好')
        0
    """

    def __init__(self, config: Optional[ScoringConfig] = None,
                 backend: Optional[RasterBackend] = None):
        self.config = config or ScoringConfig()
        self.backend = backend or PilRasterBackend(supersample=self.config.supersample)

    def score(self, path: PathInput, target: str) -> int:
        """Integer similarity score in ``[0, config.max_score]``."""
        return self.evaluate(path, target).score

    def evaluate(self, path: PathInput, target: str) -> ScoreResult:
        """Score ``path`` against ``target`` and report the details.

        Args:
            path: StrokePath, or a flat sequence of (x, y) points treated as
                one continuous polyline. May be empty.
            target: Glyph string to compare against. May be empty.

        Returns:
            ScoreResult. Empty inputs and glyphs without visible ink yield a
            score of 0; no input raises.
        """
        path = StrokePath.coerce(path).finite()
        has_drawing = not path.is_empty
        if not target or not has_drawing:
            return ScoreResult(score=0, has_drawing=has_drawing)

        user_buf, (target_buf, font_size) = self._render(path, target)

        cfg = self.config
        counts: CoverageCounts = compare_buffers(
            user_buf, target_buf,
            threshold=cfg.ink_threshold,
            radius=cfg.neighbor_radius,
            stride=cfg.sample_stride,
        )
        score = coverage_score(counts, cfg.score_multiplier, cfg.max_score)
        raw = counts.ratio * cfg.score_multiplier

        logger.debug(
            "Scored %r: matches=%d target_pixels=%d raw=%.1f score=%d font_size=%d",
            target, counts.matches, counts.target_pixels, raw, score, font_size,
        )
        return ScoreResult(
            score=score,
            has_drawing=True,
            matches=counts.matches,
            target_pixels=counts.target_pixels,
            raw_score=raw,
            font_size=font_size,
        )

    def render_buffers(self, path: PathInput,
                       target: str) -> Tuple[np.ndarray, np.ndarray]:
        """Render the (user, target) buffers without comparing them.

        Used for debugging previews. Empty inputs give blank buffers.
        """
        size = self.config.buffer_size
        path = StrokePath.coerce(path).finite()
        if path.is_empty:
            user_buf = np.zeros((size, size), dtype=np.uint8)
        else:
            user_buf = render_user_buffer(self.backend, path, self.config)
        if not target:
            target_buf = np.zeros((size, size), dtype=np.uint8)
        else:
            target_buf, _ = render_target_buffer(self.backend, target, self.config)
        return user_buf, target_buf

    def _render(self, path: StrokePath, target: str):
        if not self.config.parallel_render:
            return (render_user_buffer(self.backend, path, self.config),
                    render_target_buffer(self.backend, target, self.config))

        # The two buffers have no data dependency
        with ThreadPoolExecutor(max_workers=2) as pool:
            user_future = pool.submit(render_user_buffer, self.backend, path, self.config)
            target_future = pool.submit(render_target_buffer, self.backend, target, self.config)
            return user_future.result(), target_future.result()


def score(path: PathInput, target: str,
          config: Optional[ScoringConfig] = None) -> int:
    """Score with a default-configured StrokeScorer.

    Convenience wrapper; build a StrokeScorer directly to reuse its backend
    across many calls.
    """
    return StrokeScorer(config).score(path, target)
