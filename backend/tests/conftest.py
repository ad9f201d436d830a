"""
Pytest configuration and shared fixtures.

This module provides common fixtures for all test modules.
"""

import pytest
from typing import List

from vibration_wizard.core.psd import PsdTemplateLibrary
from vibration_wizard.core.templates import load_default_library
from vibration_wizard.core.types import (
    CycleThermal,
    DutInputs,
    MissionProfile,
    MissionState,
    PsdPoint,
    SteadyThermal,
    TemplatePsd,
)


# PSD fixtures
@pytest.fixture
def library() -> PsdTemplateLibrary:
    """Built-in PSD template library."""
    return load_default_library()


@pytest.fixture
def flat_psd() -> List[PsdPoint]:
    """Flat 0.01 g²/Hz from 20 to 2000 Hz (area 19.8 g²)."""
    return [PsdPoint(20.0, 0.01), PsdPoint(2000.0, 0.01)]


@pytest.fixture
def sloped_psd() -> List[PsdPoint]:
    """+3 dB/oct rise, plateau, -6 dB/oct roll-off."""
    return [
        PsdPoint(10.0, 0.001),
        PsdPoint(40.0, 0.004),
        PsdPoint(150.0, 0.004),
        PsdPoint(600.0, 0.00025),
    ]


# Mission fixtures
@pytest.fixture
def transport_state() -> MissionState:
    """1000 h of random transport at a steady 35 °C."""
    return MissionState(
        id="transport",
        name="Transport",
        duration_h=1000.0,
        psd=TemplatePsd("random-transport", 1.0),
        thermal=SteadyThermal(35.0),
    )


@pytest.fixture
def shock_state() -> MissionState:
    """200 h of handling shock, 20-70 °C at 2 °C/min, 15 min soak, 1 cycle/h."""
    return MissionState(
        id="shock",
        name="Shock",
        duration_h=200.0,
        psd=TemplatePsd("shock-event", 1.5),
        thermal=CycleThermal(20.0, 70.0, 2.0, 15.0, 1.0),
    )


@pytest.fixture
def two_state_profile(transport_state, shock_state) -> MissionProfile:
    """Two-state mission used for end-to-end checks (1200 h total)."""
    return MissionProfile(
        name="Transport and handling",
        states=(transport_state, shock_state),
        intended_life_h=1200.0,
    )


@pytest.fixture
def dut_inputs() -> DutInputs:
    """Plausible 2 kg DUT with resonances between 150 and 400 Hz."""
    return DutInputs(
        m_dut_kg=2.0,
        fn_dut_hz_min=150.0,
        fn_dut_hz_max=400.0,
        fixture_mass_kg=8.0,
        span_mm=200.0,
    )


# API payload fixtures
@pytest.fixture
def two_state_payload() -> dict:
    """JSON form of the two-state mission."""
    return {
        "name": "Transport and handling",
        "industry": "Custom",
        "intended_life_h": 1200.0,
        "states": [
            {
                "id": "transport",
                "name": "Transport",
                "duration_h": 1000.0,
                "psd": {"kind": "Template", "template_id": "random-transport", "scale": 1.0},
                "thermal": {"kind": "Steady", "t_c": 35.0},
            },
            {
                "id": "shock",
                "name": "Shock",
                "duration_h": 200.0,
                "psd": {"kind": "Template", "template_id": "shock-event", "scale": 1.5},
                "thermal": {
                    "kind": "Cycle",
                    "tmin_c": 20.0,
                    "tmax_c": 70.0,
                    "ramp_c_per_min": 2.0,
                    "soak_min": 15.0,
                    "cycles_per_hour": 1.0,
                },
            },
        ],
    }
