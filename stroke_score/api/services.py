"""Service layer around the scorer.

This module provides the pieces a drawing UI needs around StrokeScorer:

    DrawingSurface: Owns the pen path and the target glyph, sizes the guide
        text for the canvas, renders a preview image and scores on demand.
    ScoreDebouncer: Runs a callback once input has been idle for a delay,
        so scoring happens after the learner stops drawing.
    ScoreFeedback: Turns a score into the caller-facing reward decision.

The reward side effect (awarding gold, showing a message) stays with the
caller; ScoreFeedback only reports what should happen.

Example usage::

    from stroke_score.api import DrawingSurface

    def show(feedback):
        print(feedback.score, feedback.message)

    surface = DrawingSurface(800, 800, on_score=show, debounce=2.0)
    surface.set_target_text('好')
    surface.touch_down(120, 200)
    surface.touch_move(300, 220)
    surface.touch_up()        # show() runs 2 seconds later
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from PIL import Image, ImageDraw

from ..config import (
    GUIDE_FONT_STEP,
    GUIDE_MIN_FONT_SIZE,
    GUIDE_START_FONT_SIZE,
    GUIDE_TEXT_ALPHA,
    GUIDE_TEXT_COLOR,
    GUIDE_TEXT_MARGIN,
    PATH_COLOR,
    REWARD_GOLD,
    REWARD_THRESHOLD,
    SCORE_DEBOUNCE_SECONDS,
    USER_STROKE_WIDTH,
)
from ..domain.geometry import StrokePath
from ..scoring.scorer import ScoreResult, StrokeScorer
from ..utils.rendering import PilRasterBackend

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreFeedback:
    """What the caller should do with a score.

    Attributes:
        score: The score being reported.
        has_drawing: Whether anything was drawn.
        is_reward: True when the score reaches the reward threshold.
        gold: Gold to award (0 unless ``is_reward``).
        message: Short encouragement text for display.
    """
    score: int
    has_drawing: bool
    is_reward: bool
    gold: int
    message: str

    @classmethod
    def from_score(cls, score: int, has_drawing: bool = True,
                   threshold: int = REWARD_THRESHOLD,
                   reward: int = REWARD_GOLD) -> ScoreFeedback:
        is_reward = score >= threshold
        if not has_drawing:
            message = "Draw the character first"
        elif is_reward:
            message = "Excellent!"
        else:
            message = "Keep practicing"
        return cls(
            score=score,
            has_drawing=has_drawing,
            is_reward=is_reward,
            gold=reward if is_reward else 0,
            message=message,
        )

    @classmethod
    def from_result(cls, result: ScoreResult, **kwargs) -> ScoreFeedback:
        return cls.from_score(result.score, result.has_drawing, **kwargs)

    def to_dict(self) -> dict:
        return {
            'score': self.score,
            'has_drawing': self.has_drawing,
            'is_reward': self.is_reward,
            'gold': self.gold,
            'message': self.message,
        }


class ScoreDebouncer:
    """Call ``callback`` once no ``touch()`` happened for ``delay`` seconds.

    Every ``touch()`` cancels the pending call and schedules a new one on a
    ``threading.Timer``. The callback runs on the timer thread.

    Attributes:
        delay: Idle time in seconds before the callback runs.
    """

    def __init__(self, callback: Callable[[], None],
                 delay: float = SCORE_DEBOUNCE_SECONDS):
        self._callback = callback
        self.delay = delay
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def touch(self) -> None:
        """Restart the idle countdown."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def flush(self) -> bool:
        """Run the pending call now on the calling thread.

        Returns:
            True if a call was pending and has run.
        """
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
        self._callback()
        return True

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or threading.current_thread() is not self._timer:
                return
            self._timer = None
        self._callback()


class DrawingSurface:
    """Pen input and target glyph for one practice canvas.

    Pen-down starts a sub-path and pen-move extends it. Setting a new target
    clears the path. When ``on_score`` is given, lifting the pen schedules a
    debounced evaluation and ``on_score`` receives a ScoreFeedback.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        path: StrokePath drawn so far.
        target_text: Glyph string the learner is practicing.
        show_guide_text: Whether the preview shows the gray guide glyph.
        scorer: StrokeScorer used for evaluation.
    """

    def __init__(self, width: int = 800, height: int = 800,
                 scorer: Optional[StrokeScorer] = None,
                 on_score: Optional[Callable[[ScoreFeedback], None]] = None,
                 debounce: float = SCORE_DEBOUNCE_SECONDS):
        self.width = width
        self.height = height
        self.path = StrokePath()
        self.target_text = ''
        self.show_guide_text = True
        self.scorer = scorer or StrokeScorer()
        self._on_score = on_score
        self._debouncer = ScoreDebouncer(self._deliver_score, debounce) if on_score else None

    # --- pen input -------------------------------------------------------

    def touch_down(self, x: float, y: float) -> None:
        if self._debouncer:
            self._debouncer.cancel()
        self.path.move_to(x, y)

    def touch_move(self, x: float, y: float) -> None:
        self.path.line_to(x, y)

    def touch_up(self) -> None:
        if self._debouncer:
            self._debouncer.touch()

    # --- target and state ------------------------------------------------

    def set_target_text(self, text: str) -> None:
        self.target_text = text
        self.clear()

    def set_show_guide_text(self, show: bool) -> None:
        self.show_guide_text = show

    def clear(self) -> None:
        if self._debouncer:
            self._debouncer.cancel()
        self.path.clear()

    # --- scoring ---------------------------------------------------------

    def evaluate(self) -> ScoreResult:
        return self.scorer.evaluate(self.path, self.target_text)

    def calculate_score(self) -> int:
        return self.evaluate().score

    def flush_score(self) -> bool:
        """Deliver a pending debounced score immediately."""
        return bool(self._debouncer and self._debouncer.flush())

    def _deliver_score(self) -> None:
        feedback = ScoreFeedback.from_result(self.evaluate())
        _logger.debug("Delivering score %d for %r", feedback.score, self.target_text)
        self._on_score(feedback)

    # --- preview ---------------------------------------------------------

    def _preview_backend(self) -> PilRasterBackend:
        backend = self.scorer.backend
        if isinstance(backend, PilRasterBackend):
            return backend
        return PilRasterBackend()

    def guide_font_size(self) -> int:
        """Font size for the guide glyph on this canvas.

        Starts large and shrinks until the text fits the canvas width minus
        a margin, but never below the guide minimum.
        """
        backend = self._preview_backend()
        max_width = self.width - GUIDE_TEXT_MARGIN
        font_size = GUIDE_START_FONT_SIZE
        while (backend.measure_text(self.target_text, font_size) > max_width
               and font_size > GUIDE_MIN_FONT_SIZE):
            font_size -= GUIDE_FONT_STEP
        return font_size

    def render_preview(self) -> Image.Image:
        """RGBA image of the canvas: guide glyph under the drawn path."""
        img = Image.new('RGBA', (self.width, self.height), (255, 255, 255, 0))

        if self.target_text and self.show_guide_text:
            font = self._preview_backend().font(self.guide_font_size())
            overlay = Image.new('RGBA', img.size, (0, 0, 0, 0))
            ImageDraw.Draw(overlay).text(
                (self.width / 2, self.height / 2), self.target_text,
                fill=GUIDE_TEXT_COLOR + (GUIDE_TEXT_ALPHA,), font=font, anchor='mm',
            )
            img = Image.alpha_composite(img, overlay)

        draw = ImageDraw.Draw(img)
        r = USER_STROKE_WIDTH / 2
        for sub in self.path.subpaths:
            pts = [p.to_tuple() for p in sub]
            if len(pts) > 1:
                draw.line(pts, fill=PATH_COLOR, width=int(USER_STROKE_WIDTH), joint='curve')
            for x, y in (pts[0], pts[-1]):
                draw.ellipse([x - r, y - r, x + r, y + r], fill=PATH_COLOR)
        return img
