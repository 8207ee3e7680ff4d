#!/usr/bin/env python3
"""Unit tests for stroke_score.scoring.comparison.

Tests the buffer comparison on hand-built numpy buffers:
- ink_mask: strict opacity threshold
- dilate: Chebyshev neighborhood growth
- compare_buffers: sampling, neighborhood tolerance, edge clipping
- coverage_score: multiplier, floor and clamping

Example:
    Run all comparison tests::

        $ python3 -m pytest tests/unit/test_comparison.py -v
"""

import unittest

import numpy as np

from stroke_score.scoring.comparison import (
    CoverageCounts,
    compare_buffers,
    coverage_score,
    dilate,
    ink_mask,
)

SIZE = 200


def bar(column: int, rows=slice(50, 150), value: int = 255) -> np.ndarray:
    """Buffer with a one-pixel-wide vertical bar of ink."""
    buf = np.zeros((SIZE, SIZE), dtype=np.uint8)
    buf[rows, column] = value
    return buf


def compare(user, target, radius=2, stride=2, threshold=50):
    return compare_buffers(user, target, threshold=threshold, radius=radius, stride=stride)


class TestInkMask(unittest.TestCase):
    """Tests for ink_mask."""

    def test_threshold_is_strict(self):
        buf = np.array([[49, 50, 51, 255]], dtype=np.uint8)
        np.testing.assert_array_equal(ink_mask(buf, 50), [[False, False, True, True]])


class TestDilate(unittest.TestCase):
    """Tests for dilate."""

    def test_single_pixel_grows_to_square(self):
        mask = np.zeros((11, 11), dtype=bool)
        mask[5, 5] = True
        grown = dilate(mask, 2)
        self.assertEqual(np.count_nonzero(grown), 25)
        self.assertTrue(grown[3:8, 3:8].all())

    def test_zero_radius_is_identity(self):
        mask = np.eye(5, dtype=bool)
        np.testing.assert_array_equal(dilate(mask, 0), mask)

    def test_edge_pixel_is_clipped(self):
        mask = np.zeros((5, 5), dtype=bool)
        mask[0, 0] = True
        self.assertEqual(np.count_nonzero(dilate(mask, 2)), 9)


class TestCompareBuffers(unittest.TestCase):
    """Tests for compare_buffers."""

    def test_identical_buffers_match_fully(self):
        target = bar(100)
        counts = compare(target, target)
        # Rows 50..148 step 2 on an even column
        self.assertEqual(counts.target_pixels, 50)
        self.assertEqual(counts.matches, 50)

    def test_offset_within_radius_matches(self):
        counts = compare(bar(102), bar(100))
        self.assertEqual(counts.matches, counts.target_pixels)

    def test_offset_beyond_radius_does_not_match(self):
        counts = compare(bar(103), bar(100))
        self.assertEqual(counts.matches, 0)
        self.assertEqual(counts.target_pixels, 50)

    def test_small_offset_beats_large_offset(self):
        target = bar(100)
        near = compare(bar(101), target)
        far = compare(bar(140), target)
        self.assertGreater(near.matches, far.matches)

    def test_only_sampled_pixels_count(self):
        # Odd column is never sampled with stride 2
        counts = compare(bar(101), bar(101))
        self.assertEqual(counts.target_pixels, 0)

    def test_stride_one_samples_every_pixel(self):
        counts = compare(bar(101), bar(101), stride=1)
        self.assertEqual(counts.target_pixels, 100)

    def test_faint_target_is_not_ink(self):
        counts = compare(bar(100), bar(100, value=50))
        self.assertEqual(counts.target_pixels, 0)

    def test_faint_user_is_not_ink(self):
        counts = compare(bar(100, value=40), bar(100))
        self.assertEqual(counts.matches, 0)

    def test_window_is_clipped_at_buffer_edge(self):
        user = np.zeros((SIZE, SIZE), dtype=np.uint8)
        target = np.zeros((SIZE, SIZE), dtype=np.uint8)
        target[0, 0] = 255
        user[1, 1] = 255
        counts = compare(user, target)
        self.assertEqual((counts.matches, counts.target_pixels), (1, 1))

    def test_empty_user_matches_nothing(self):
        counts = compare(np.zeros((SIZE, SIZE), dtype=np.uint8), bar(100))
        self.assertEqual(counts.matches, 0)

    def test_shape_mismatch_raises(self):
        with self.assertRaises(ValueError):
            compare(np.zeros((10, 10), dtype=np.uint8), np.zeros((12, 12), dtype=np.uint8))


class TestCoverageScore(unittest.TestCase):
    """Tests for coverage_score."""

    def test_no_target_pixels_scores_zero(self):
        self.assertEqual(coverage_score(CoverageCounts(0, 0), 220, 100), 0)

    def test_multiplier_and_floor(self):
        # 10 / 100 * 220 = 22
        self.assertEqual(coverage_score(CoverageCounts(10, 100), 220, 100), 22)
        # 1 / 3 * 220 = 73.33
        self.assertEqual(coverage_score(CoverageCounts(1, 3), 220, 100), 73)

    def test_clamped_to_max(self):
        self.assertEqual(coverage_score(CoverageCounts(50, 100), 220, 100), 100)
        self.assertEqual(coverage_score(CoverageCounts(100, 100), 220, 100), 100)

    def test_negative_counts_clamp_to_zero(self):
        self.assertEqual(coverage_score(CoverageCounts(-5, 10), 220, 100), 0)

    def test_ratio(self):
        self.assertEqual(CoverageCounts(3, 4).ratio, 0.75)
        self.assertEqual(CoverageCounts(0, 0).ratio, 0.0)


if __name__ == '__main__':
    unittest.main()
