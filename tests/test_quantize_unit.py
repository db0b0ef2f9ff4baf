"""
Unit tests for channel quantization helpers.
"""

import numpy as np
import pytest

from pricolor.services.colors.quantize import (
    to_level, from_level, quantize, bins_per_axis, pack_rgb_key, unpack_rgb_key,
    full_scale, chroma, CONIC, COLUMNAR
)


class TestQuantize:
    """Level reduction and expansion"""

    @pytest.mark.parametrize("shift", [0, 1, 4, 7])
    def test_quantize_idempotent(self, shift):
        values = np.arange(256, dtype=np.int64)
        once = quantize(values, shift)
        np.testing.assert_array_equal(quantize(once, shift), once)

    def test_to_level_drops_low_bits(self):
        assert to_level(255, 4) == 15
        assert to_level(128, 4) == 8
        assert to_level(15, 4) == 0

    def test_from_level_is_inverse_shift(self):
        assert from_level(15, 4) == 240
        assert to_level(from_level(15, 4), 4) == 15

    def test_bins_per_axis(self):
        assert bins_per_axis(256, 4) == 16
        assert bins_per_axis(256, 0) == 256
        assert bins_per_axis(180, 2) == 45
        assert bins_per_axis(180, 5) == 6

    def test_levels_stay_in_range(self):
        values = np.arange(256, dtype=np.int64)
        for shift in range(8):
            levels = to_level(values, shift)
            assert levels.min() >= 0
            assert levels.max() < bins_per_axis(256, shift)


class TestRgbKeys:
    """Packing of RGB levels into a single bin key"""

    def test_pack_unpack(self):
        key = pack_rgb_key(15, 3, 9, 4)
        assert key == (15 << 8) | (3 << 4) | 9
        assert unpack_rgb_key(key, 4) == (15, 3, 9)

    @pytest.mark.parametrize("depth", [1, 2, 3, 4, 5, 6, 7, 8])
    def test_full_scale_round_trip(self, depth):
        shift = 8 - depth
        for level in range(1 << depth):
            assert to_level(full_scale(level, depth), shift) == level

    def test_full_scale_extremes(self):
        assert full_scale(15, 4) == 255
        assert full_scale(0, 4) == 0
        assert full_scale(8, 4) == 136
        assert full_scale(0, 0) == 0


class TestChroma:
    """Chroma scores for quantized RGB bins"""

    @pytest.mark.parametrize("model", [CONIC, COLUMNAR])
    @pytest.mark.parametrize("level", [0, 1, 8, 15])
    def test_achromatic_is_zero(self, model, level):
        assert chroma(level, level, level, 4, model) == 0.0

    def test_conic_uses_fixed_denominator(self):
        assert chroma(15, 0, 0, 4, CONIC) == 1.0
        assert chroma(9, 0, 0, 4, CONIC) == pytest.approx(0.6)
        assert chroma(12, 6, 6, 4, CONIC) == pytest.approx(0.4)

    def test_columnar_divides_by_max(self):
        assert chroma(9, 0, 0, 4, COLUMNAR) == 1.0
        assert chroma(12, 6, 6, 4, COLUMNAR) == pytest.approx(0.5)

    def test_chroma_in_unit_interval(self):
        for model in (CONIC, COLUMNAR):
            for r in range(0, 16, 3):
                for g in range(0, 16, 5):
                    for b in range(0, 16, 7):
                        assert 0.0 <= chroma(r, g, b, 4, model) <= 1.0
