"""Caller-facing services for practice canvases.

Classes:
    DrawingSurface: Pen path, target glyph, guide sizing and preview.
    ScoreDebouncer: Idle-delay trigger for scoring.
    ScoreFeedback: Reward decision derived from a score.
"""

from .services import DrawingSurface, ScoreDebouncer, ScoreFeedback

__all__ = ['DrawingSurface', 'ScoreDebouncer', 'ScoreFeedback']
