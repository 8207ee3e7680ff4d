"""Flask application setup for the scoring API.

This module provides:

    - The Flask application instance shared by the route module
    - Application-wide logging configuration
    - The shared StrokeScorer and request validation helpers

Architecture:
    - flask_app.py: App instance, logging and helpers (this module)
    - routes.py: JSON scoring routes, registered on import

Example:
    Serve the API locally::

        from stroke_score.flask_app import app, configure_logging
        import stroke_score.routes  # noqa: F401 - registers routes

        configure_logging('DEBUG')
        app.run(port=5000)

Attributes:
    app (Flask): The Flask application instance.
    MAX_TARGET_LENGTH (int): Longest accepted target glyph string.
    MAX_POINTS (int): Most pen points accepted in one request.
"""

from __future__ import annotations

import logging
import math
import os
from typing import Any

from flask import Flask, jsonify

from .config import ScoringConfig
from .scoring.scorer import StrokeScorer

# Module logger
logger = logging.getLogger(__name__)

# Flask application
app = Flask(__name__)

MAX_TARGET_LENGTH = 8
MAX_POINTS = 20000

_scorer: StrokeScorer | None = None


def configure_logging(level: str = 'INFO', log_file: str | None = None) -> None:
    """Configure application-wide logging.

    Sets up a consistent log format on the root logger, replacing any
    existing handlers.

    Args:
        level: Log level name ('DEBUG', 'INFO', 'WARNING', 'ERROR').
            Unknown names fall back to INFO.
        log_file: Optional path of a file to log to in addition to stderr.

    Example:
        Enable debug logging to a file::

            from stroke_score.flask_app import configure_logging
            configure_logging(level='DEBUG', log_file='stroke_score.log')
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Set third-party loggers to WARNING to reduce noise
    logging.getLogger('werkzeug').setLevel(logging.WARNING)
    logging.getLogger('PIL').setLevel(logging.WARNING)

    logger.info("Logging configured: level=%s, file=%s", level, log_file or 'stderr')


def get_scorer() -> StrokeScorer:
    """Return the scorer shared by all requests, creating it on first use.

    The font can be chosen with the ``STROKE_SCORE_FONT`` environment
    variable before the first request.
    """
    global _scorer
    if _scorer is None:
        _scorer = StrokeScorer(ScoringConfig())
        logger.info("Scorer ready (font: %s)", _scorer.backend.font_path or 'Pillow default')
    return _scorer


def set_scorer(scorer: StrokeScorer | None) -> None:
    """Replace the shared scorer (None resets to lazy creation)."""
    global _scorer
    _scorer = scorer


def error_response(message: str, status: int = 400):
    return jsonify(error=message), status


def validate_target_param(target: Any) -> tuple[bool, tuple | None]:
    """Validate the target glyph string of a request.

    An empty string is valid (it scores 0); a missing or non-string value
    is not.

    Args:
        target: Value of the ``target`` field or ``t`` query parameter.

    Returns:
        tuple: (is_valid, error_response) where error_response is None when
            valid, otherwise a (json, status) tuple ready to return.
    """
    if target is None:
        return False, error_response("Missing target")
    if not isinstance(target, str):
        return False, error_response("Target must be a string")
    if len(target) > MAX_TARGET_LENGTH:
        return False, error_response(f"Target longer than {MAX_TARGET_LENGTH} characters")
    return True, None


def _is_point(value: Any) -> bool:
    if not (isinstance(value, (list, tuple)) and len(value) == 2
            and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)):
        return False
    try:
        return all(math.isfinite(v) for v in value)
    except OverflowError:
        # JSON integers beyond the float range
        return False


def parse_strokes(data: dict) -> tuple[list | None, tuple | None]:
    """Extract pen strokes from a request body.

    Accepts either ``points`` (one continuous polyline) or ``strokes`` (a
    list of polylines, one per pen-down).

    Returns:
        tuple: (strokes, error_response). ``strokes`` is a list of point
            lists when valid, otherwise None with an error response.
    """
    if 'strokes' in data:
        strokes = data['strokes']
        if not isinstance(strokes, list) or not all(isinstance(s, list) for s in strokes):
            return None, error_response("'strokes' must be a list of point lists")
    elif 'points' in data:
        if not isinstance(data['points'], list):
            return None, error_response("'points' must be a list of [x, y] pairs")
        strokes = [data['points']]
    else:
        return None, error_response("Missing 'points' or 'strokes'")

    if sum(len(s) for s in strokes) > MAX_POINTS:
        return None, error_response(f"More than {MAX_POINTS} points")
    for stroke in strokes:
        for point in stroke:
            if not _is_point(point):
                return None, error_response(f"Invalid point: {point!r}")
    return strokes, None


def create_app() -> Flask:
    """Return the app with routes registered."""
    from . import routes  # noqa: F401 - registers routes
    if os.environ.get('STROKE_SCORE_LOG_LEVEL'):
        configure_logging(os.environ['STROKE_SCORE_LOG_LEVEL'])
    return app
