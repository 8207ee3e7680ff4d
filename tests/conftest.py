"""Shared pytest fixtures for the stroke_score test suite.

Fixtures:
    shape_backend: ShapeBackend drawing known glyph polylines
    shape_scorer: StrokeScorer using shape_backend
    pil_backend: PilRasterBackend on Pillow's bundled default font
    pil_scorer: StrokeScorer using pil_backend
    restore_logging: Saves and restores root logger handlers and level

Markers:
    slow: Mark test as slow-running (skip with -m "not slow")
    integration: Mark test as integration test

Only ink coverage is scored. No test here expects stroke order, direction
or stroke count to affect a score.
"""

import logging
import sys
from pathlib import Path

import pytest

# Make tests/fakes.py importable from every test directory
sys.path.insert(0, str(Path(__file__).parent))

from fakes import ShapeBackend  # noqa: E402
from stroke_score.config import ScoringConfig  # noqa: E402
from stroke_score.scoring.scorer import StrokeScorer  # noqa: E402
from stroke_score.utils.rendering import PilRasterBackend  # noqa: E402


# -----------------------------------------------------------------------------
# Pytest Markers
# -----------------------------------------------------------------------------

def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow-running (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )


# -----------------------------------------------------------------------------
# Backends and scorers
# -----------------------------------------------------------------------------

@pytest.fixture
def shape_backend():
    return ShapeBackend()


@pytest.fixture
def shape_scorer(shape_backend):
    return StrokeScorer(ScoringConfig(), shape_backend)


@pytest.fixture
def pil_backend():
    """Pillow backend pinned to the bundled default font.

    System CJK fonts are ignored so results do not depend on the machine.
    """
    return PilRasterBackend(use_system_fonts=False)


@pytest.fixture
def pil_scorer(pil_backend):
    return StrokeScorer(ScoringConfig(), pil_backend)


@pytest.fixture
def restore_logging():
    root_logger = logging.getLogger()
    handlers = root_logger.handlers.copy()
    level = root_logger.level
    yield root_logger
    root_logger.handlers = handlers
    root_logger.setLevel(level)
