"""Handwriting similarity scoring for Chinese character practice.

A learner draws a character on a canvas; this package measures how much of
the target glyph's ink the drawing covers and reports an integer score from
0 to 100. Stroke order and direction are not checked.

The package is organized into the following modules:
    config: Named constants and the ScoringConfig dataclass.
    domain: Point, BBox, StrokePath and the fit-to-rect transform.
    utils: Raster capability (RasterBackend) and its Pillow implementation.
    scoring: Buffer comparison and the StrokeScorer pipeline.
    api: Drawing surface, debounced scoring and reward feedback.
    flask_app, routes: JSON HTTP API.
    cli: Command line entry point.

Example usage::

    from stroke_score import StrokeScorer, StrokePath

    path = StrokePath()
    path.move_to(20, 100)
    path.line_to(180, 100)
    print(StrokeScorer().score(path, '一'))

Attributes:
    __version__ (str): Package version string.
"""

from .api import DrawingSurface, ScoreDebouncer, ScoreFeedback
from .config import ScoringConfig
from .domain import BBox, FitTransform, Point, StrokePath
from .scoring import ScoreResult, StrokeScorer, score
from .utils import PilRasterBackend, RasterBackend

__all__ = [
    # Domain objects
    'Point', 'BBox', 'StrokePath', 'FitTransform',
    # Scoring
    'ScoringConfig', 'StrokeScorer', 'ScoreResult', 'score',
    'RasterBackend', 'PilRasterBackend',
    # Services
    'DrawingSurface', 'ScoreDebouncer', 'ScoreFeedback',
]

__version__ = '1.0.0'
