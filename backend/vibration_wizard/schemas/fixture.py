"""
Pydantic schemas for the fixture feasibility advisor.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from vibration_wizard.core.types import DutInputs, FixtureMaterial, MountingType, WarningLevel
from vibration_wizard.schemas.psd import AttributesModel, DamageBandSchema


class DutInputsSchema(BaseModel):
    """Device-under-test description.

    Physical sanity (positive mass, frequency ordering, safety factor >= 1) is
    reported as fixture warnings rather than rejected here.
    """
    m_dut_kg: float = Field(..., description="DUT mass in kg")
    fn_dut_hz_min: float = Field(..., description="Lowest DUT natural frequency in Hz")
    fn_dut_hz_max: float = Field(..., description="Highest DUT natural frequency in Hz")
    mounting_type: MountingType = Field(default=MountingType.RIGID_BOLT_DOWN)
    field_mounting_type: Optional[MountingType] = None
    test_mounting_type: Optional[MountingType] = None
    k_safety: float = Field(default=1.5, description="Frequency separation factor")
    mass_ratio_target: float = Field(default=3.0, gt=0)
    notch_limit_pct: float = Field(default=20.0, ge=0, le=100)
    fixture_mass_kg: Optional[float] = Field(None, gt=0)
    span_mm: Optional[float] = Field(None, gt=0, description="Unsupported plate span in mm")
    material: FixtureMaterial = Field(default=FixtureMaterial.AL6061)

    def to_domain(self) -> DutInputs:
        return DutInputs(**self.model_dump())


class FixtureRequest(BaseModel):
    dut: DutInputsSchema
    damage_bands: List[DamageBandSchema] = Field(default_factory=list)


class FixtureWarningSchema(AttributesModel):
    level: WarningLevel
    message: str


class FixtureEvaluationResponse(AttributesModel):
    """Fixture targets, warnings and checklist."""
    f_fixture_min_hz: float
    target_fixture_mass_kg: float
    mass_ratio: Optional[float] = None
    meets_mass_ratio: Optional[bool] = None
    k_fixture_min_n_per_m: Optional[float] = None
    plate_thickness_mm: Optional[float] = None
    plate_mass_estimate_kg: Optional[float] = None
    warnings: List[FixtureWarningSchema]
    checklist: List[str]
    has_critical: bool
