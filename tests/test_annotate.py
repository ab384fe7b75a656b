"""Tests for annotation helpers."""

import unittest

import numpy as np

from _helpers import make_jpeg

from street_scanner.config import AnnotatorConfig
from street_scanner.detectors.base import Detection
from street_scanner.utils.annotate import annotate, draw_detections, format_label, label_band_geometry
from street_scanner.utils.io import decode_image


def is_green(pixel) -> bool:
    b, g, r = (int(v) for v in pixel)
    return g > 80 and r < 60 and b < 60


class TestLabelBandGeometry(unittest.TestCase):
    def test_box_at_top_edge_puts_label_below(self):
        place = label_band_geometry((10, 0, 30, 40), 110)
        self.assertTrue(place.below)
        self.assertEqual(place.band_y, 40)
        self.assertEqual(place.text_y, 52)

    def test_box_clear_of_top_puts_label_above(self):
        place = label_band_geometry((10, 100, 30, 40), 110)
        self.assertFalse(place.below)
        self.assertEqual(place.band_y, 84)
        self.assertEqual(place.text_y, 96)

    def test_threshold_is_band_height(self):
        self.assertTrue(label_band_geometry((0, 15, 5, 5), 110).below)
        self.assertFalse(label_band_geometry((0, 16, 5, 5), 110).below)

    def test_fractional_top_compared_before_rounding(self):
        place = label_band_geometry((10, 15.6, 30, 40), 110)
        self.assertTrue(place.below)
        self.assertEqual(place.band_y, 56)
        self.assertEqual(place.text_y, 68)
        self.assertFalse(label_band_geometry((0, 16.0, 5, 5), 110).below)

    def test_band_width_never_below_minimum(self):
        self.assertEqual(label_band_geometry((0, 50, 30, 10), 110).band_width, 110)
        self.assertEqual(label_band_geometry((0, 50, 250, 10), 110).band_width, 250)
        self.assertEqual(label_band_geometry((0, 50, 30, 10), 220).band_width, 220)

    def test_text_is_inset(self):
        place = label_band_geometry((12, 50, 30, 10), 110)
        self.assertEqual(place.band_x, 12)
        self.assertEqual(place.text_x, 16)
        self.assertEqual(place.band_height, 16)


class TestFormatLabel(unittest.TestCase):
    def test_percent_then_class(self):
        self.assertEqual(format_label(Detection("dog", (0, 0, 1, 1), 0.9)), "90% dog")
        self.assertEqual(format_label(Detection("traffic light", (0, 0, 1, 1), 0.876)), "88% traffic light")


class TestAnnotate(unittest.TestCase):
    def setUp(self):
        self.source = make_jpeg(width=320, height=240)
        self.detections = [
            Detection("dog", (10, 100, 30, 40), 0.9),
            Detection("cat", (200, 20, 50, 50), 0.7),
        ]

    def test_none_when_class_absent(self):
        self.assertIsNone(annotate(self.source, self.detections, "car"))
        self.assertIsNone(annotate(self.source, [], "dog"))

    def test_returns_image_with_source_dimensions(self):
        out = annotate(self.source, self.detections, "dog")
        self.assertIsNotNone(out)
        self.assertTrue(len(out) > 0)
        self.assertEqual(decode_image(out).shape, decode_image(self.source).shape)

    def test_source_bytes_unchanged(self):
        before = bytes(self.source)
        annotate(self.source, self.detections, "dog")
        self.assertEqual(self.source, before)

    def test_only_target_class_drawn(self):
        image = decode_image(annotate(self.source, self.detections, "dog"))
        # the cat band would span y 4..20, x 200..310
        self.assertLess(int(image[12, 290].sum()), 40)


class TestDrawDetections(unittest.TestCase):
    def setUp(self):
        self.image = np.zeros((240, 320, 3), dtype=np.uint8)
        self.cfg = AnnotatorConfig()

    def test_band_drawn_above_box(self):
        out = draw_detections(self.image, [Detection("dog", (10, 100, 30, 40), 0.9)], self.cfg)
        # band spans x 10..119, y 84..99; sample right of the text
        self.assertTrue(is_green(out[92, 110]))
        self.assertFalse(is_green(out[108, 110]))

    def test_band_extent_matches_geometry(self):
        out = draw_detections(self.image, [Detection("dog", (10, 100, 30, 40), 0.9)], self.cfg)
        # column right of the text and the box, top row of the band above the text
        rows = [y for y in range(out.shape[0]) if is_green(out[y, 115])]
        self.assertEqual(rows, list(range(84, 100)))
        cols = [x for x in range(out.shape[1]) if is_green(out[84, x])]
        self.assertEqual(cols, list(range(10, 120)))

    def test_band_drawn_below_box_at_top_edge(self):
        out = draw_detections(self.image, [Detection("dog", (10, 0, 30, 40), 0.9)], self.cfg)
        self.assertTrue(is_green(out[48, 110]))

    def test_box_outline_unfilled(self):
        out = draw_detections(self.image, [Detection("dog", (10, 100, 30, 40), 0.9)], self.cfg)
        self.assertTrue(is_green(out[120, 10]))
        self.assertEqual(int(out[120, 25].sum()), 0)

    def test_min_label_width_override(self):
        out = draw_detections(
            self.image, [Detection("dog", (10, 100, 30, 40), 0.9)], self.cfg, min_label_width=40
        )
        self.assertTrue(is_green(out[85, 48]))
        self.assertEqual(int(out[92, 110].sum()), 0)

    def test_draws_on_copy(self):
        image = np.zeros((120, 160, 3), dtype=np.uint8)
        out = draw_detections(image, [Detection("dog", (20, 40, 30, 30), 0.8)], AnnotatorConfig())
        self.assertEqual(out.shape, image.shape)
        self.assertEqual(int(image.sum()), 0)
        self.assertGreater(int(out.sum()), 0)


if __name__ == "__main__":
    unittest.main()
