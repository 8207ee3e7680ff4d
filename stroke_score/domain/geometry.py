"""Geometric value objects for handwriting paths."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Point:
    """Immutable 2D point."""
    x: float
    y: float

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple for compatibility."""
        return (self.x, self.y)

    def to_list(self) -> List[float]:
        """Convert to list for JSON serialization."""
        return [float(self.x), float(self.y)]

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> Point:
        """Create from an (x, y) pair."""
        return cls(float(t[0]), float(t[1]))


@dataclass(frozen=True)
class BBox:
    """Immutable axis-aligned bounding box."""
    x_min: float
    y_min: float
    x_max: float
    y_max: float

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> Point:
        return Point(
            self.x_min / 2 + self.x_max / 2,
            self.y_min / 2 + self.y_max / 2
        )

    def contains(self, point: Point) -> bool:
        """Check if point is inside bounding box."""
        return (self.x_min <= point.x <= self.x_max and
                self.y_min <= point.y <= self.y_max)

    def to_tuple(self) -> Tuple[float, float, float, float]:
        """Convert to tuple for compatibility."""
        return (self.x_min, self.y_min, self.x_max, self.y_max)

    @classmethod
    def from_points(cls, points: Iterable[Point]) -> BBox:
        """Create bounding box containing all points."""
        points = list(points)
        if not points:
            return cls(0, 0, 0, 0)
        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))


PointLike = Union[Point, Sequence[float]]


@dataclass
class StrokePath:
    """Pen path made of one or more sub-paths.

    Each ``move_to`` (pen down) starts a new sub-path and each ``line_to``
    (pen move) extends the current one, so pen-up gaps are never inked. For
    fitting, all sub-paths are treated as one point set.

    Example:
        >>> path = StrokePath()
        >>> path.move_to(10, 10)
        >>> path.line_to(90, 10)
        >>> path.point_count
        2
    """
    subpaths: List[List[Point]] = field(default_factory=list)

    def move_to(self, x: float, y: float) -> None:
        self.subpaths.append([Point(float(x), float(y))])

    def line_to(self, x: float, y: float) -> None:
        # A move event without a preceding down event starts a sub-path
        if not self.subpaths:
            self.move_to(x, y)
            return
        self.subpaths[-1].append(Point(float(x), float(y)))

    def clear(self) -> None:
        self.subpaths.clear()

    @property
    def point_count(self) -> int:
        return sum(len(s) for s in self.subpaths)

    @property
    def is_empty(self) -> bool:
        return self.point_count == 0

    def points(self) -> Iterator[Point]:
        """Iterate over every point in drawing order."""
        for sub in self.subpaths:
            yield from sub

    def bounds(self) -> BBox:
        return BBox.from_points(self.points())

    def finite(self) -> StrokePath:
        """Copy of this path without NaN or infinite points."""
        cleaned = [[p for p in sub if p.is_finite()] for sub in self.subpaths]
        dropped = self.point_count - sum(len(s) for s in cleaned)
        if dropped:
            logger.warning("Dropped %d non-finite path point(s)", dropped)
        return StrokePath([s for s in cleaned if s])

    def to_list(self) -> List[List[List[float]]]:
        """Convert to nested lists for JSON serialization."""
        return [[p.to_list() for p in sub] for sub in self.subpaths]

    @classmethod
    def from_points(cls, points: Iterable[PointLike]) -> StrokePath:
        """Build a single continuous path from a flat point sequence."""
        sub = [p if isinstance(p, Point) else Point.from_tuple(p) for p in points]
        return cls([sub] if sub else [])

    @classmethod
    def from_strokes(cls, strokes: Iterable[Iterable[PointLike]]) -> StrokePath:
        """Build a path with one sub-path per stroke, skipping empty ones."""
        path = cls()
        for stroke in strokes:
            sub = [p if isinstance(p, Point) else Point.from_tuple(p) for p in stroke]
            if sub:
                path.subpaths.append(sub)
        return path

    @classmethod
    def coerce(cls, path: Union[StrokePath, Iterable[PointLike]]) -> StrokePath:
        """Accept a StrokePath as-is, or treat a point sequence as one polyline."""
        if isinstance(path, StrokePath):
            return path
        return cls.from_points(path)


@dataclass(frozen=True)
class FitTransform:
    """Uniform scale + translate mapping one box centered into another.

    Mirrors a "fit to rect, centered" policy: the source box is scaled by
    the largest factor that keeps it inside the destination while
    preserving aspect ratio, then centered on both axes.

    A source box thinner than ``min_extent`` on either axis (a single point,
    a straight line) has no meaningful fit. It keeps its position instead:
    scale 1, shrunk only if its long axis would not fit, and shifted just
    enough to lie inside the clamp bounds.

    Points are mapped about the box centers using half coordinates, so
    extents near the float range never overflow to inf.

    Attributes:
        scale: Uniform scale factor (always finite and positive).
        src_cx, src_cy: Source box center.
        dst_cx, dst_cy: Destination position of the source center.
    """
    scale: float
    src_cx: float
    src_cy: float
    dst_cx: float
    dst_cy: float

    @classmethod
    def fit(cls, src: BBox, dst: BBox, min_extent: float = 1.0,
            bounds: Optional[BBox] = None) -> FitTransform:
        """Build the transform fitting ``src`` centered inside ``dst``.

        Args:
            src: Bounding box of the input points.
            dst: Destination rectangle (must have positive size).
            min_extent: Source width/height below which the box counts as
                degenerate and keeps its position.
            bounds: Region a degenerate box is clamped into. Defaults to
                ``dst``.

        Returns:
            FitTransform mapping ``src`` into ``dst``.
        """
        half_w = src.x_max / 2 - src.x_min / 2
        half_h = src.y_max / 2 - src.y_min / 2
        src_cx, src_cy = src.center.to_tuple()

        thin_x = 2 * half_w < min_extent
        thin_y = 2 * half_h < min_extent
        if not (thin_x or thin_y):
            scale = min(dst.width / 2 / half_w, dst.height / 2 / half_h)
            return cls(scale, src_cx, src_cy, dst.center.x, dst.center.y)

        bounds = bounds or dst
        scale = 1.0
        if not thin_x:
            scale = min(scale, bounds.width / 2 / half_w)
        if not thin_y:
            scale = min(scale, bounds.height / 2 / half_h)
        reach_x = half_w * scale
        reach_y = half_h * scale
        dst_cx = min(max(src_cx, bounds.x_min + reach_x), bounds.x_max - reach_x)
        dst_cy = min(max(src_cy, bounds.y_min + reach_y), bounds.y_max - reach_y)
        return cls(scale, src_cx, src_cy, dst_cx, dst_cy)

    def apply(self, p: Point) -> Point:
        return Point(
            (p.x / 2 - self.src_cx / 2) * self.scale * 2 + self.dst_cx,
            (p.y / 2 - self.src_cy / 2) * self.scale * 2 + self.dst_cy,
        )

    def apply_path(self, path: StrokePath) -> StrokePath:
        return StrokePath([[self.apply(p) for p in sub] for sub in path.subpaths])
