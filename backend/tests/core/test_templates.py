"""
Unit tests for built-in PSD templates and mission profiles.
"""

import pytest

from vibration_wizard.core.psd import PsdTemplateLibrary, UnknownTemplateError, resolve_psd
from vibration_wizard.core.templates import (
    MISSION_TEMPLATES,
    PSD_TEMPLATES,
    get_default_mission_template,
    get_mission_template,
    list_mission_templates,
    load_default_library,
)
from vibration_wizard.core.types import CycleThermal, Industry, PsdPoint, PsdTemplate, TemplatePsd


class TestPsdLibrary:
    """Test the default PSD template library."""

    def test_all_templates_loaded(self, library):
        assert len(library) == len(PSD_TEMPLATES)
        assert "random-transport" in library
        assert "shock-event" in library

    def test_templates_sorted_and_positive(self, library):
        for template in library:
            freqs = [p.f_hz for p in template.points]
            assert freqs == sorted(freqs)
            assert len(set(freqs)) == len(freqs)
            assert all(p.g2_per_hz > 0 for p in template.points)

    def test_unknown_template(self, library):
        with pytest.raises(UnknownTemplateError) as exc_info:
            library.get("nope")
        assert exc_info.value.template_id == "nope"

    def test_duplicate_ids_rejected(self):
        template = PsdTemplate("a", "A", (PsdPoint(10, 0.01),))
        with pytest.raises(ValueError, match="Duplicate"):
            PsdTemplateLibrary([template, template])

    def test_fresh_library_per_call(self):
        assert load_default_library() is not load_default_library()


class TestMissionTemplates:
    """Test industry mission templates."""

    def test_count(self):
        assert len(MISSION_TEMPLATES) == 18
        assert len({t.id for t in MISSION_TEMPLATES}) == 18

    def test_referenced_psds_exist(self, library):
        for template in MISSION_TEMPLATES:
            for state in template.profile.states:
                assert isinstance(state.psd, TemplatePsd)
                assert resolve_psd(state.psd, library)

    def test_state_ids_unique_within_profile(self):
        for template in MISSION_TEMPLATES:
            ids = [s.id for s in template.profile.states]
            assert len(ids) == len(set(ids)), template.id

    def test_durations_sum_to_intended_life(self):
        for template in MISSION_TEMPLATES:
            profile = template.profile
            assert profile.total_hours == pytest.approx(profile.intended_life_h), template.id

    def test_cycle_states_valid(self):
        for template in MISSION_TEMPLATES:
            for state in template.profile.states:
                if isinstance(state.thermal, CycleThermal):
                    assert state.thermal.tmax_c >= state.thermal.tmin_c
                    assert state.thermal.ramp_c_per_min > 0
                    assert state.thermal.cycles_per_hour > 0

    @pytest.mark.parametrize("industry,count", [
        (Industry.AUTOMOTIVE, 5),
        (Industry.DATA_CENTER_AI, 1),
        (Industry.INDUSTRIAL, 5),
        (Industry.CONSUMER, 6),
        (Industry.HEALTHCARE, 1),
        (Industry.CUSTOM, 0),
    ])
    def test_filter_by_industry(self, industry, count):
        templates = list_mission_templates(industry)
        assert len(templates) == count
        assert all(t.industry == industry for t in templates)
        assert all(t.profile.industry == industry for t in templates)

    def test_lookup(self):
        template = get_mission_template("datacenter-rack")
        assert template.name == "Rack Server / Fan Vibration"
        assert template.profile.name == "Rack Server"
        assert get_mission_template("missing") is None

    def test_default_per_industry(self):
        assert get_default_mission_template(Industry.AUTOMOTIVE).id == "auto-body-ecu"
        assert get_default_mission_template(Industry.HEALTHCARE).id == "health-wearable"

    def test_default_for_empty_industry(self):
        assert get_default_mission_template(Industry.CUSTOM) is MISSION_TEMPLATES[0]
