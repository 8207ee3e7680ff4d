"""Neighborhood-tolerant comparison of two opacity buffers.

A target ink pixel counts as matched when the user buffer has any ink pixel
within a Chebyshev radius of it. Instead of scanning a window around every
sampled pixel, the user ink mask is dilated once with a square structuring
element of side ``2 * radius + 1`` (``scipy.ndimage.binary_dilation``) and
then read pointwise; pixels outside the buffer are treated as empty, which
matches clipping the window at the edges.

Only every ``stride``-th pixel in both axes (starting at 0) is sampled, to
bound cost on larger buffers.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import ndimage


@dataclass(frozen=True)
class CoverageCounts:
    """Result of comparing a user buffer against a target buffer.

    Attributes:
        matches: Sampled target ink pixels with user ink nearby.
        target_pixels: Sampled target ink pixels in total.
    """
    matches: int
    target_pixels: int

    @property
    def ratio(self) -> float:
        if self.target_pixels <= 0:
            return 0.0
        return self.matches / self.target_pixels


def ink_mask(buffer: np.ndarray, threshold: int) -> np.ndarray:
    """Boolean mask of pixels whose opacity is strictly above ``threshold``."""
    return np.asarray(buffer) > threshold


def dilate(mask: np.ndarray, radius: int) -> np.ndarray:
    """Grow ``mask`` by ``radius`` pixels in Chebyshev distance."""
    if radius <= 0:
        return mask.copy()
    structure = np.ones((2 * radius + 1, 2 * radius + 1), dtype=bool)
    return ndimage.binary_dilation(mask, structure=structure, border_value=0)


def compare_buffers(user: np.ndarray, target: np.ndarray, *,
                    threshold: int, radius: int, stride: int) -> CoverageCounts:
    """Count sampled target ink pixels that have user ink nearby.

    Args:
        user: Opacity buffer of the fitted user drawing.
        target: Opacity buffer of the rendered target glyph, same shape.
        threshold: Opacity strictly above this is ink.
        radius: Chebyshev search radius around each target ink pixel.
        stride: Sampling step in both axes.

    Returns:
        CoverageCounts with the match and total counts.

    Raises:
        ValueError: If the buffers differ in shape.
    """
    if user.shape != target.shape:
        raise ValueError(
            f"Buffer shapes differ: user {user.shape}, target {target.shape}"
        )

    target_ink = ink_mask(target, threshold)[::stride, ::stride]
    user_near = dilate(ink_mask(user, threshold), radius)[::stride, ::stride]

    total = int(np.count_nonzero(target_ink))
    matches = int(np.count_nonzero(target_ink & user_near))
    return CoverageCounts(matches=matches, target_pixels=total)


def coverage_score(counts: CoverageCounts, multiplier: float,
                   max_score: int) -> int:
    """Turn coverage counts into an integer score in ``[0, max_score]``.

    The score saturates once the coverage ratio reaches
    ``max_score / multiplier`` (about 45% with the defaults).
    """
    if counts.target_pixels <= 0:
        return 0
    raw = counts.ratio * multiplier
    return max(0, min(max_score, int(np.floor(raw))))
