"""
Unit tests for the quantizing histogram builder.

Tests:
- sparse RGB histogram with cached chroma
- HSV filtering (monotone floor, hue/saturation exclusion, wraparound)
- merging of independently built histograms
"""

import numpy as np
import pytest

from pricolor.services.colors.histogram import (
    ColorHistogram, HueWindow, build_rgb_histogram, build_hsv_histogram, hsv_filter_mask
)
from pricolor.services.colors.quantize import pack_rgb_key


def _hsv_pixels(*triples):
    return np.array(triples, dtype=np.uint8)


class TestColorHistogram:
    """Sparse histogram container"""

    def test_add_accumulates_counts(self):
        hist = ColorHistogram()
        hist.add(5, 2, 0.4)
        hist.add(5, 3, 0.9)
        assert hist.counts[5] == 5
        assert hist.total == 5

    def test_first_chroma_wins(self):
        hist = ColorHistogram()
        hist.add(7, 1, 0.0)
        hist.add(7, 1, 0.8)
        assert hist.chromas[7] == 0.0

    def test_items_in_ascending_key_order(self):
        hist = ColorHistogram()
        for key in (30, 2, 17):
            hist.add(key, 1, 0.1)
        assert [key for key, _, _ in hist.items()] == [2, 17, 30]

    def test_merge_sums_counts(self):
        left = ColorHistogram()
        left.add(1, 4, 0.5)
        right = ColorHistogram()
        right.add(1, 6, 0.5)
        right.add(2, 1, 0.1)

        merged = left.merge(right)
        assert merged.counts == {1: 10, 2: 1}
        assert merged.chromas == {1: 0.5, 2: 0.1}

    def test_empty_histogram_is_falsy(self):
        assert not ColorHistogram()
        assert len(ColorHistogram()) == 0


class TestRgbHistogram:
    """Policy A: RGB direct"""

    def test_counts_every_pixel(self, red_gray_4x4):
        hist = build_rgb_histogram(red_gray_4x4, depth=4)
        assert hist.total == 16

        red_key = pack_rgb_key(15, 0, 0, 4)
        gray_key = pack_rgb_key(8, 8, 8, 4)
        assert hist.counts == {red_key: 12, gray_key: 4}

    def test_chroma_cached_per_bin(self, red_gray_4x4):
        hist = build_rgb_histogram(red_gray_4x4, depth=4)
        assert hist.chromas[pack_rgb_key(15, 0, 0, 4)] == 1.0
        assert hist.chromas[pack_rgb_key(8, 8, 8, 4)] == 0.0
        assert set(hist.chromas) == set(hist.counts)

    def test_nearby_values_share_a_bin(self):
        img = np.array([[[240, 10, 0], [255, 15, 15]]], dtype=np.uint8)
        hist = build_rgb_histogram(img, depth=4)
        assert hist.counts == {pack_rgb_key(15, 0, 0, 4): 2}

    def test_depth_eight_keeps_full_resolution(self):
        img = np.array([[[1, 2, 3], [1, 2, 4]]], dtype=np.uint8)
        hist = build_rgb_histogram(img, depth=8)
        assert len(hist) == 2

    def test_depth_zero_single_bin(self, red_gray_4x4):
        hist = build_rgb_histogram(red_gray_4x4, depth=0)
        assert hist.counts == {0: 16}
        assert hist.chromas == {0: 0.0}

    def test_bins_within_axis_range(self):
        rng = np.random.default_rng(42)
        img = rng.integers(0, 256, size=(32, 32, 3), dtype=np.uint8)
        for depth in (1, 3, 4, 6):
            hist = build_rgb_histogram(img, depth=depth)
            assert hist.total == 32 * 32
            assert max(hist.counts) < 1 << (3 * depth)

    def test_columnar_model(self):
        img = np.array([[[144, 0, 0]]], dtype=np.uint8)
        conic = build_rgb_histogram(img, depth=4, model="conic")
        columnar = build_rgb_histogram(img, depth=4, model="columnar")
        key = pack_rgb_key(9, 0, 0, 4)
        assert conic.chromas[key] == pytest.approx(0.6)
        assert columnar.chromas[key] == 1.0


class TestHueWindow:
    """Hue exclusion window with wraparound"""

    def test_plain_interval(self):
        window = HueWindow(10, 20)
        hue = np.array([9, 10, 15, 20, 21])
        np.testing.assert_array_equal(window.contains(hue), [False, True, True, True, False])

    def test_negative_start_wraps(self):
        window = HueWindow(-3, 24)
        hue = np.array([176, 177, 178, 179, 0, 10, 24, 25, 90])
        np.testing.assert_array_equal(
            window.contains(hue),
            [False, True, True, True, True, True, True, False, False]
        )


class TestHsvFilter:
    """Policy B pixel filters"""

    def test_wrapped_hue_excluded_like_plain_hue(self):
        hsv = _hsv_pixels((178, 100, 200), (10, 100, 200), (60, 100, 200))
        keep = hsv_filter_mask(hsv, HueWindow(-3, 24), (40, 180), 16)
        np.testing.assert_array_equal(keep, [False, False, True])

    def test_hue_exclusion_needs_saturation_band(self):
        hsv = _hsv_pixels((10, 30, 200), (10, 100, 200), (10, 220, 200))
        keep = hsv_filter_mask(hsv, HueWindow(-3, 24), (40, 180), 16)
        np.testing.assert_array_equal(keep, [True, False, True])

    def test_monotone_floor(self):
        hsv = _hsv_pixels((60, 0, 200), (60, 15, 200), (60, 16, 200))
        keep = hsv_filter_mask(hsv, HueWindow(-3, 24), (40, 180), 16)
        np.testing.assert_array_equal(keep, [False, False, True])


class TestHsvHistogram:
    """Policy B histogram construction"""

    @pytest.fixture
    def mixed_image(self):
        img = np.zeros((10, 10, 3), dtype=np.uint8)
        img[:4] = (0, 0, 255)        # blue, counted
        img[4:7] = (200, 150, 120)   # skin-like, excluded by window
        img[7:] = (100, 100, 100)    # gray, below monotone floor
        return img

    def test_total_equals_surviving_pixels(self, mixed_image):
        hist = build_hsv_histogram(mixed_image)
        assert hist.total == 40

    def test_peak_only_counts_everything(self, mixed_image):
        hist = build_hsv_histogram(mixed_image, peak_only=True)
        assert hist.total == 100

    def test_monochrome_yields_empty_histogram(self, gray_image):
        hist = build_hsv_histogram(gray_image)
        assert not hist
        assert hist.total == 0

    def test_keys_are_quantized_tuples(self):
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[:] = (0, 0, 255)  # OpenCV HSV (120, 255, 255)
        hist = build_hsv_histogram(img, hbins=2, sbins=5)
        assert hist.counts == {(30, 7, 7): 4}

    def test_saturated_red_survives_skin_window(self):
        img = np.zeros((2, 2, 3), dtype=np.uint8)
        img[:] = (255, 0, 0)  # hue 0, saturation 255 lies outside the band
        hist = build_hsv_histogram(img, hbins=0, sbins=0)
        assert hist.counts == {(0, 255, 255): 4}
