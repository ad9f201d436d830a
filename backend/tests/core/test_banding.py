"""
Unit tests for damage-band scoring.
"""

import pytest
from numpy.testing import assert_allclose

from vibration_wizard.core.banding import (
    DEFAULT_BAND_COUNT,
    FREQUENCY_WEIGHT_EXPONENT,
    build_bands,
    top_damage_bands,
)
from vibration_wizard.core.octave import integrate_psd
from vibration_wizard.core.types import PsdPoint


class TestBuildBands:
    """Test log-spaced band construction."""

    def test_default_band_count(self, flat_psd):
        bands = build_bands(flat_psd)
        assert len(bands) == DEFAULT_BAND_COUNT

    def test_bands_tile_the_range(self, sloped_psd):
        bands = build_bands(sloped_psd, 8)
        assert bands[0].f_start == 10.0
        assert bands[-1].f_end == 600.0
        for a, b in zip(bands, bands[1:]):
            assert a.f_end == b.f_start

    def test_energy_sums_to_total_area(self, sloped_psd):
        bands = build_bands(sloped_psd, 10)
        assert_allclose(sum(b.energy for b in bands), integrate_psd(sloped_psd), rtol=1e-10)

    def test_weight_and_score(self, flat_psd):
        bands = build_bands(flat_psd, 4)
        for band in bands:
            assert_allclose(band.weight, (band.f_center / 20.0) ** FREQUENCY_WEIGHT_EXPONENT)
            assert_allclose(band.score, band.energy * band.weight)

    def test_degenerate_input(self):
        assert build_bands([PsdPoint(100, 0.01)]) == []
        assert build_bands([PsdPoint(10, 0.01), PsdPoint(100, 0.01)], 0) == []


class TestTopDamageBands:
    """Test ranking of bands."""

    def test_sorted_by_score(self, sloped_psd):
        top = top_damage_bands(sloped_psd, count=5)
        scores = [b.score for b in top]
        assert scores == sorted(scores, reverse=True)
        assert len(top) == 5

    def test_flat_psd_favours_high_frequency(self, flat_psd):
        # Wider log bands at high frequency carry more energy and more weight.
        top = top_damage_bands(flat_psd, count=1)
        assert top[0].f_end == pytest.approx(2000.0)

    def test_count_zero(self, flat_psd):
        assert top_damage_bands(flat_psd, count=0) == []
