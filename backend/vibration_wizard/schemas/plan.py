"""
Pydantic schemas for building a complete vibration test plan.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from vibration_wizard.core.planner import VibrationPlan
from vibration_wizard.schemas.equivalency import AccelSettingsSchema, EquivalencyResponse
from vibration_wizard.schemas.fixture import DutInputsSchema, FixtureEvaluationResponse
from vibration_wizard.schemas.mission import MissionProfileSchema
from vibration_wizard.schemas.psd import DamageBandSchema, OctaveResponse
from vibration_wizard.schemas.reliability import ReliabilityDemoSchema, SampleSizeResponse
from vibration_wizard.schemas.thermal import ThermalCycleResponse


class AcknowledgmentSchema(BaseModel):
    """Acknowledgment of Critical fixture warnings."""
    acknowledged: bool = Field(default=False)
    reason: str = Field(default="", description="Why the plan proceeds despite Critical warnings")


class PlanRequest(BaseModel):
    """Inputs for one test plan."""
    profile: MissionProfileSchema
    accel: AccelSettingsSchema = Field(default_factory=AccelSettingsSchema)
    reliability: ReliabilityDemoSchema = Field(default_factory=ReliabilityDemoSchema)
    dut: Optional[DutInputsSchema] = Field(None, description="Skip the fixture check when omitted")
    octave_fraction: Optional[int] = Field(None, ge=1, le=24)
    rescale_to_intended_life: bool = Field(
        default=False,
        description="Scale state durations to the intended life before solving"
    )


class PlanResponse(BaseModel):
    """Complete accelerated test plan."""
    profile_name: str
    sample_size: SampleSizeResponse
    equivalency: EquivalencyResponse
    thermal_cycle: ThermalCycleResponse
    damage_bands: List[DamageBandSchema]
    fixture: Optional[FixtureEvaluationResponse] = None
    test_octave: OctaveResponse
    acceptance_rule: str
    has_critical_warnings: bool
    notes: List[str]

    @classmethod
    def from_domain(cls, plan: VibrationPlan) -> "PlanResponse":
        return cls(
            profile_name=plan.profile.name,
            sample_size=SampleSizeResponse.model_validate(plan.sample_plan),
            equivalency=EquivalencyResponse.model_validate(plan.equivalency),
            thermal_cycle=ThermalCycleResponse.from_domain(plan.thermal_cycle),
            damage_bands=[DamageBandSchema.model_validate(b) for b in plan.damage_bands],
            fixture=(
                FixtureEvaluationResponse.model_validate(plan.fixture)
                if plan.fixture is not None else None
            ),
            test_octave=OctaveResponse.model_validate(plan.test_octave),
            acceptance_rule=plan.acceptance_rule,
            has_critical_warnings=plan.has_critical_warnings,
            notes=plan.notes,
        )
