"""Configuration constants for handwriting scoring.

This module centralizes the tunable values used by the scoring pipeline and
the drawing surface. Module-level constants hold the reference defaults;
ScoringConfig bundles them so a scorer can be built with overrides (for
example from a JSON file passed to the CLI).

Typical usage:
    from stroke_score.config import ScoringConfig

    config = ScoringConfig()                       # reference defaults
    strict = ScoringConfig(score_multiplier=150)   # harder to saturate
    config = ScoringConfig.from_dict(json.load(f))
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

# Raster buffers
BUFFER_SIZE = 200  # Side length of both square opacity buffers
FIT_MARGIN = 30  # User path is fitted into [margin, size - margin]
MIN_EXTENT = 1.0  # Thinner path bounding boxes keep their position

# Strokes
USER_STROKE_WIDTH = 25.0  # Same width as live drawing feedback
GLYPH_STROKE_WIDTH = 15.0  # Outline width around filled glyph shapes
SUPERSAMPLE = 4  # Antialiasing factor for polyline rendering

# Target glyph auto-fit
START_FONT_SIZE = 180
FONT_STEP = 5
MIN_FONT_SIZE = 5  # Shrink loop stops here even if text is still too wide
TEXT_MARGIN = 60  # Text must fit within size - margin horizontally

# Comparison
SAMPLE_STRIDE = 2
INK_THRESHOLD = 50  # Alpha strictly above this counts as ink
NEIGHBOR_RADIUS = 2  # Chebyshev radius, i.e. a 5x5 window
SCORE_MULTIPLIER = 220.0
MAX_SCORE = 100

# Caller-side feedback
REWARD_THRESHOLD = 80
REWARD_GOLD = 2
SCORE_DEBOUNCE_SECONDS = 2.0

# Drawing surface guide text
GUIDE_START_FONT_SIZE = 550
GUIDE_FONT_STEP = 10
GUIDE_MIN_FONT_SIZE = 80
GUIDE_TEXT_MARGIN = 100
GUIDE_TEXT_ALPHA = 110
GUIDE_TEXT_COLOR = (204, 204, 204)  # light gray
PATH_COLOR = (0x7B, 0x1F, 0xA2)  # purple


@dataclass(frozen=True)
class ScoringConfig:
    """Parameters for one StrokeScorer.

    Attributes:
        buffer_size: Width and height of both raster buffers in pixels.
        margin: Interior margin the user path is fitted inside.
        min_extent: Bounding-box width/height below which a path is not
            rescaled but keeps its position inside the buffer.
        user_stroke_width: Width of the user polyline in buffer pixels.
        glyph_stroke_width: Outline width applied around glyph fills.
        supersample: Polyline antialiasing factor (1 disables it).
        start_font_size: First font size tried for the target glyph.
        font_step: Decrement applied while the text is too wide.
        min_font_size: Lower bound that terminates the shrink loop.
        text_margin: Horizontal space the glyph text must leave free.
        sample_stride: Sampling step in both axes during comparison.
        ink_threshold: Opacity strictly above this is ink (0-255).
        neighbor_radius: Chebyshev radius of the user-ink search window.
        score_multiplier: Coverage ratio multiplier before clamping.
        max_score: Upper clamp of the score.
        parallel_render: Render the two buffers on worker threads.
    """
    buffer_size: int = BUFFER_SIZE
    margin: int = FIT_MARGIN
    min_extent: float = MIN_EXTENT
    user_stroke_width: float = USER_STROKE_WIDTH
    glyph_stroke_width: float = GLYPH_STROKE_WIDTH
    supersample: int = SUPERSAMPLE
    start_font_size: int = START_FONT_SIZE
    font_step: int = FONT_STEP
    min_font_size: int = MIN_FONT_SIZE
    text_margin: int = TEXT_MARGIN
    sample_stride: int = SAMPLE_STRIDE
    ink_threshold: int = INK_THRESHOLD
    neighbor_radius: int = NEIGHBOR_RADIUS
    score_multiplier: float = SCORE_MULTIPLIER
    max_score: int = MAX_SCORE
    parallel_render: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError if any parameter is out of range."""
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}")
        if self.margin < 0 or 2 * self.margin >= self.buffer_size:
            raise ValueError(
                f"margin {self.margin} leaves no interior in a "
                f"{self.buffer_size}px buffer"
            )
        if self.min_extent <= 0:
            raise ValueError(f"min_extent must be positive, got {self.min_extent}")
        if self.user_stroke_width <= 0 or self.glyph_stroke_width < 0:
            raise ValueError("stroke widths must be positive")
        if self.supersample < 1:
            raise ValueError(f"supersample must be >= 1, got {self.supersample}")
        if self.font_step <= 0:
            raise ValueError(f"font_step must be positive, got {self.font_step}")
        if not 0 < self.min_font_size <= self.start_font_size:
            raise ValueError(
                f"need 0 < min_font_size <= start_font_size, got "
                f"{self.min_font_size} and {self.start_font_size}"
            )
        if self.sample_stride < 1:
            raise ValueError(f"sample_stride must be >= 1, got {self.sample_stride}")
        if not 0 <= self.ink_threshold < 255:
            raise ValueError(f"ink_threshold must be in [0, 255), got {self.ink_threshold}")
        if self.neighbor_radius < 0:
            raise ValueError(f"neighbor_radius must be >= 0, got {self.neighbor_radius}")
        if self.score_multiplier <= 0 or self.max_score <= 0:
            raise ValueError("score_multiplier and max_score must be positive")

    @property
    def text_max_width(self) -> int:
        """Widest measured text accepted by the auto-fit loop."""
        return self.buffer_size - self.text_margin

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScoringConfig:
        """Build a config from a mapping, e.g. a parsed JSON file.

        Args:
            data: Field names to values. Missing fields keep their defaults.

        Returns:
            A validated ScoringConfig.

        Raises:
            ValueError: If the mapping contains unknown keys or any value is
                out of range.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")
        return cls(**data)
