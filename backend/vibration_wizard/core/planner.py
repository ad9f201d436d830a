"""
Test-plan orchestration.

Runs the whole derivation for one set of inputs in a single deterministic
pass: equivalency, thermal cycle, sample size, damage bands, fixture check and
octave view of the test PSD.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .banding import top_damage_bands
from .equivalency import AccelSettings, EquivalencyResult, solve_equivalency
from .fixture import evaluate_fixture
from .octave import DEFAULT_OCTAVE_TOLERANCE, OctaveResult, psd_to_octave
from .psd import PsdTemplateLibrary
from .reliability_demo import SAMPLE_SIZE_CAP, SampleSizePlan, plan_sample_size
from .thermal import (
    DEFAULT_MIN_CYCLES,
    DEFAULT_MIN_SEGMENT_MIN,
    MissionThermalCycle,
    build_mission_representative_thermal_cycle,
)
from .types import DamageBand, DutInputs, FixtureEvaluation, MissionProfile, ReliabilityDemo


logger = logging.getLogger(__name__)


@dataclass
class VibrationPlan:
    """Complete accelerated vibration test plan."""
    profile: MissionProfile
    accel: AccelSettings
    reliability: ReliabilityDemo
    sample_plan: SampleSizePlan
    equivalency: EquivalencyResult
    thermal_cycle: MissionThermalCycle
    damage_bands: List[DamageBand]
    fixture: Optional[FixtureEvaluation]
    test_octave: OctaveResult
    acceptance_rule: str
    notes: List[str] = field(default_factory=list)

    @property
    def has_critical_warnings(self) -> bool:
        return self.fixture is not None and self.fixture.has_critical


def build_vibration_plan(
    profile: MissionProfile,
    accel: AccelSettings,
    reliability: ReliabilityDemo,
    library: PsdTemplateLibrary,
    dut: Optional[DutInputs] = None,
    octave_fraction: int = 3,
    octave_tolerance: float = DEFAULT_OCTAVE_TOLERANCE,
    sample_size_cap: int = SAMPLE_SIZE_CAP,
    min_cycles: int = DEFAULT_MIN_CYCLES,
    min_segment_min: float = DEFAULT_MIN_SEGMENT_MIN
) -> VibrationPlan:
    """Build a test plan from a mission profile.

    The thermal cycle is laid out over the solved test duration, so it follows
    whatever ``solve_for`` mode produced.

    Args:
        profile: Mission profile.
        accel: Acceleration settings.
        reliability: Reliability demonstration target.
        library: PSD template library.
        dut: Fixture advisor inputs; the fixture check is skipped when None.
        octave_fraction: Bands per octave for the test PSD view.
        octave_tolerance: Energy deviation that triggers a note.
        sample_size_cap: Sample-size search cap.
        min_cycles: Minimum thermal cycle repeats.
        min_segment_min: Minimum thermal segment length in minutes.

    Returns:
        VibrationPlan
    """
    equivalency = solve_equivalency(profile.states, accel, library)
    notes = list(equivalency.notes)

    thermal_cycle = build_mission_representative_thermal_cycle(
        profile.states, equivalency.t_test_h, min_cycles, min_segment_min
    )
    sample_plan = plan_sample_size(reliability, sample_size_cap)
    if not sample_plan.solvable or not sample_plan.converged:
        notes.append(sample_plan.message)

    damage_bands = top_damage_bands(equivalency.test_psd)
    fixture = evaluate_fixture(dut, damage_bands) if dut is not None else None

    test_octave = psd_to_octave(equivalency.test_psd, octave_fraction, tolerance=octave_tolerance)
    if test_octave.exceeds_tolerance:
        notes.append(
            f"1/{octave_fraction}-octave view changes gRMS by {test_octave.deviation * 100:.1f}%."
        )

    acceptance_rule = (
        f"Test {sample_plan.sample_size} units for {equivalency.t_test_h:.1f} h each; "
        f"accept if failures <= {max(0, reliability.c_allowed)}."
    )
    logger.info(
        f"Built plan for '{profile.name}': {len(profile.states)} states, "
        f"n={sample_plan.sample_size}, t_test={equivalency.t_test_h:.1f} h"
    )

    return VibrationPlan(
        profile=profile,
        accel=accel,
        reliability=reliability,
        sample_plan=sample_plan,
        equivalency=equivalency,
        thermal_cycle=thermal_cycle,
        damage_bands=damage_bands,
        fixture=fixture,
        test_octave=test_octave,
        acceptance_rule=acceptance_rule,
        notes=notes,
    )
