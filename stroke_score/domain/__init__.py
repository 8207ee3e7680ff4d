"""Domain objects for handwriting scoring.

Geometry classes:
    Point: Immutable 2D point.
    BBox: Immutable axis-aligned bounding box.
    StrokePath: Mutable pen path made of pen-down sub-paths.
    FitTransform: Centered, aspect-preserving fit of one box into another.

Example usage::

    from stroke_score.domain import BBox, FitTransform, StrokePath

    path = StrokePath.from_points([(0, 0), (50, 80), (100, 0)])
    fit = FitTransform.fit(path.bounds(), BBox(30, 30, 170, 170))
    fitted = fit.apply_path(path)
"""

from .geometry import BBox, FitTransform, Point, StrokePath

__all__ = ['Point', 'BBox', 'StrokePath', 'FitTransform']
