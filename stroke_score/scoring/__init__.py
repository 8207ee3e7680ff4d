"""Coverage-based handwriting scoring.

Classes:
    StrokeScorer: Full pipeline from pen path and glyph to a score.
    ScoreResult: Score plus match counts and the rendered font size.
    CoverageCounts: Raw counts from the buffer comparison.

Functions:
    score: One-shot scoring with the default configuration.
    compare_buffers: Sampled neighborhood comparison of two buffers.
    coverage_score: Counts to clamped integer score.
    fit_path: Fit a path into the buffer interior.
"""

from .comparison import CoverageCounts, compare_buffers, coverage_score, dilate, ink_mask
from .scorer import (
    ScoreResult,
    StrokeScorer,
    fit_path,
    render_target_buffer,
    render_user_buffer,
    score,
)

__all__ = [
    'StrokeScorer', 'ScoreResult', 'score',
    'fit_path', 'render_user_buffer', 'render_target_buffer',
    'CoverageCounts', 'compare_buffers', 'coverage_score', 'dilate', 'ink_mask',
]
