"""Unit tests for stroke_score.config."""

import unittest

from stroke_score import config as cfg
from stroke_score.config import ScoringConfig


class TestDefaults(unittest.TestCase):
    """The default config carries the reference constants."""

    def test_reference_values(self):
        c = ScoringConfig()
        self.assertEqual(c.buffer_size, 200)
        self.assertEqual(c.margin, 30)
        self.assertEqual(c.start_font_size, 180)
        self.assertEqual(c.font_step, 5)
        self.assertEqual(c.text_margin, 60)
        self.assertEqual(c.sample_stride, 2)
        self.assertEqual(c.ink_threshold, 50)
        self.assertEqual(c.neighbor_radius, 2)
        self.assertEqual(c.score_multiplier, 220)
        self.assertEqual(c.max_score, 100)
        self.assertEqual(c.glyph_stroke_width, 15)
        self.assertEqual(c.user_stroke_width, cfg.USER_STROKE_WIDTH)

    def test_text_max_width(self):
        self.assertEqual(ScoringConfig().text_max_width, 140)

    def test_frozen(self):
        with self.assertRaises(AttributeError):
            ScoringConfig().margin = 10


class TestValidation(unittest.TestCase):
    """Out-of-range parameters raise ValueError."""

    def test_invalid_values(self):
        bad = [
            {'buffer_size': 0},
            {'margin': 100},
            {'margin': -1},
            {'min_extent': 0},
            {'user_stroke_width': 0},
            {'supersample': 0},
            {'font_step': 0},
            {'min_font_size': 0},
            {'min_font_size': 200},
            {'sample_stride': 0},
            {'ink_threshold': 255},
            {'neighbor_radius': -1},
            {'score_multiplier': 0},
        ]
        for kwargs in bad:
            with self.subTest(**kwargs):
                with self.assertRaises(ValueError):
                    ScoringConfig(**kwargs)

    def test_zero_radius_is_allowed(self):
        self.assertEqual(ScoringConfig(neighbor_radius=0).neighbor_radius, 0)


class TestFromDict(unittest.TestCase):
    """Tests for ScoringConfig.from_dict / to_dict."""

    def test_partial_override(self):
        c = ScoringConfig.from_dict({'score_multiplier': 150, 'neighbor_radius': 3})
        self.assertEqual(c.score_multiplier, 150)
        self.assertEqual(c.neighbor_radius, 3)
        self.assertEqual(c.buffer_size, 200)

    def test_unknown_key_rejected(self):
        with self.assertRaisesRegex(ValueError, 'bogus'):
            ScoringConfig.from_dict({'bogus': 1})

    def test_to_dict_round_trip(self):
        c = ScoringConfig(margin=20)
        self.assertEqual(ScoringConfig.from_dict(c.to_dict()), c)


if __name__ == '__main__':
    unittest.main()
