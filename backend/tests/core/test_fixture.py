"""
Unit tests for the fixture feasibility advisor.

Tests cover:
- Fixture frequency and mass targets
- Critical and regular warnings
- Damage-band risk classification
- Stiffness and plate thickness estimates
"""

import math
from dataclasses import replace

import pytest
from numpy.testing import assert_allclose

from vibration_wizard.core.fixture import (
    MATERIAL_PROPERTIES,
    MOUNTING_GUIDANCE,
    band_risk_warning,
    evaluate_fixture,
    plate_thickness_m,
)
from vibration_wizard.core.types import (
    DamageBand,
    DutInputs,
    FixtureMaterial,
    MountingType,
    WarningLevel,
)


def _band(f_center):
    return DamageBand(f_center / 1.2, f_center * 1.2, f_center, 1.0, 1.0, 1.0)


class TestTargets:
    """Test derived targets."""

    def test_fixture_frequency(self, dut_inputs):
        result = evaluate_fixture(dut_inputs)
        assert_allclose(result.f_fixture_min_hz, 1.5 * 400.0)

    def test_target_mass(self, dut_inputs):
        result = evaluate_fixture(dut_inputs)
        assert_allclose(result.target_fixture_mass_kg, 6.0)

    def test_mass_ratio_met(self, dut_inputs):
        result = evaluate_fixture(dut_inputs)
        assert_allclose(result.mass_ratio, 4.0)
        assert result.meets_mass_ratio is True
        assert result.warnings == ()

    def test_mass_ratio_not_met(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, fixture_mass_kg=3.0))
        assert result.meets_mass_ratio is False
        assert [w.level for w in result.warnings] == [WarningLevel.WARNING]
        assert "1.5x" in result.warnings[0].message

    def test_no_fixture_mass(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, fixture_mass_kg=None))
        assert result.mass_ratio is None
        assert result.meets_mass_ratio is None

    @pytest.mark.parametrize("field", ["k_safety", "fn_dut_hz_max", "m_dut_kg"])
    def test_targets_monotonic(self, dut_inputs, field):
        low = evaluate_fixture(dut_inputs)
        high = evaluate_fixture(replace(dut_inputs, **{field: getattr(dut_inputs, field) * 2}))
        assert high.k_fixture_min_n_per_m >= low.k_fixture_min_n_per_m
        assert high.plate_thickness_mm >= low.plate_thickness_mm


class TestStiffness:
    """Test stiffness and plate estimates."""

    def test_stiffness_uses_fixture_mass(self, dut_inputs):
        result = evaluate_fixture(dut_inputs)
        assert_allclose(result.k_fixture_min_n_per_m, (2 * math.pi * 600.0) ** 2 * 8.0)

    def test_stiffness_falls_back_to_target_mass(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, fixture_mass_kg=None))
        assert_allclose(result.k_fixture_min_n_per_m, (2 * math.pi * 600.0) ** 2 * 6.0)

    def test_plate_thickness_formula(self):
        k, span = 1.0e8, 0.2
        t = plate_thickness_m(k, span, FixtureMaterial.AL6061)
        assert_allclose(0.3 * 69e9 * t ** 3 / span ** 3, k, rtol=1e-12)

    def test_stiffer_material_thinner_plate(self, dut_inputs):
        al = evaluate_fixture(dut_inputs)
        steel = evaluate_fixture(replace(dut_inputs, material=FixtureMaterial.STEEL))
        assert steel.plate_thickness_mm < al.plate_thickness_mm

    def test_plate_mass(self, dut_inputs):
        result = evaluate_fixture(dut_inputs)
        density = MATERIAL_PROPERTIES[FixtureMaterial.AL6061].density_kg_m3
        assert_allclose(
            result.plate_mass_estimate_kg,
            density * 0.2 ** 2 * result.plate_thickness_mm / 1000.0,
        )

    def test_no_span_no_plate(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, span_mm=None))
        assert result.k_fixture_min_n_per_m is None
        assert result.plate_thickness_mm is None
        assert result.plate_mass_estimate_kg is None


class TestWarnings:
    """Test warning generation."""

    def test_missing_mass_is_critical(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, m_dut_kg=0.0))
        assert result.has_critical
        assert any("mass" in w.message for w in result.warnings if w.level == WarningLevel.CRITICAL)

    def test_missing_frequency_is_critical(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, fn_dut_hz_min=0.0, fn_dut_hz_max=0.0))
        assert result.has_critical

    def test_low_safety_factor_is_critical(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, k_safety=0.8))
        assert result.has_critical

    def test_inverted_range_uses_larger_value(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, fn_dut_hz_min=400.0, fn_dut_hz_max=150.0))
        assert_allclose(result.f_fixture_min_hz, 600.0)
        assert not result.has_critical
        assert any("inverted" in w.message for w in result.warnings)

    def test_mounting_mismatch(self, dut_inputs):
        inputs = replace(
            dut_inputs,
            field_mounting_type=MountingType.ISOLATOR_MOUNTED,
            test_mounting_type=MountingType.RIGID_BOLT_DOWN,
        )
        result = evaluate_fixture(inputs)
        assert any("mismatch" in w.message for w in result.warnings)
        assert not result.has_critical

    @pytest.mark.parametrize("f_center,fragment", [
        (30.0, "Rigid-body"),
        (100.0, "Plate mode"),
        (500.0, "Local resonance"),
    ])
    def test_band_risk(self, f_center, fragment):
        warning = band_risk_warning(_band(f_center))
        assert warning.level == WarningLevel.WARNING
        assert fragment in warning.message

    def test_high_frequency_band_goes_to_checklist(self, dut_inputs):
        result = evaluate_fixture(dut_inputs, [_band(1200.0)])
        assert band_risk_warning(_band(1200.0)) is None
        assert result.warnings == ()
        assert any("High-frequency band" in item for item in result.checklist)

    def test_band_warnings_added(self, dut_inputs):
        result = evaluate_fixture(dut_inputs, [_band(30.0), _band(500.0)])
        assert len(result.warnings) == 2
        assert not result.has_critical


class TestChecklist:

    def test_notch_limit_in_checklist(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, notch_limit_pct=15.0))
        assert any("15%" in item for item in result.checklist)

    def test_mounting_guidance(self, dut_inputs):
        result = evaluate_fixture(replace(dut_inputs, mounting_type=MountingType.CANTILEVERED))
        assert MOUNTING_GUIDANCE[MountingType.CANTILEVERED] in result.checklist

    def test_every_mounting_has_guidance(self):
        assert set(MOUNTING_GUIDANCE) == set(MountingType)
