"""
Pydantic schemas for test-equivalency solving.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from vibration_wizard.config import Settings
from vibration_wizard.core.equivalency import AccelSettings, BaseShape, EquivalencyMethod, SolveFor
from vibration_wizard.schemas.mission import MissionStateSchema
from vibration_wizard.schemas.psd import AttributesModel, PsdPointSchema


class AccelSettingsSchema(BaseModel):
    """Acceleration settings. Unset engine parameters fall back to configuration."""
    method: EquivalencyMethod = Field(
        default=EquivalencyMethod.FATIGUE_DAMAGE,
        description="Equivalence criterion"
    )
    solve_for: SolveFor = Field(
        default=SolveFor.K_SCALE,
        description="k_scale keeps t_test_h fixed, t_test keeps k_scale fixed, both moves the two together"
    )
    t_test_h: float = Field(default=240.0, ge=0, allow_inf_nan=False, description="Test duration in hours")
    k_scale: float = Field(default=1.0, ge=0, allow_inf_nan=False, description="Test PSD multiplier")
    fatigue_exponent: Optional[float] = Field(None, gt=0, description="S-N slope m")
    energy_cap_gamma: Optional[float] = Field(None, gt=0, description="Hybrid energy cap")
    max_grms: Optional[float] = Field(None, gt=0, description="Test gRMS limit")
    grid_points: Optional[int] = Field(None, ge=2, le=4096, description="Merge grid density")
    base_shape: BaseShape = Field(
        default=BaseShape.DAMAGE_EQUIVALENT,
        description="Merged power-mean shape or one state's shape carrying the merged damage"
    )
    selected_state_id: Optional[str] = Field(None, description="State id for UserSelectedState")

    def to_domain(self, settings: Settings) -> AccelSettings:
        return AccelSettings(
            method=self.method,
            solve_for=self.solve_for,
            t_test_h=self.t_test_h,
            k_scale=self.k_scale,
            fatigue_exponent=(
                self.fatigue_exponent if self.fatigue_exponent is not None
                else settings.fatigue_exponent
            ),
            energy_cap_gamma=(
                self.energy_cap_gamma if self.energy_cap_gamma is not None
                else settings.energy_cap_gamma
            ),
            max_grms=self.max_grms,
            grid_points=self.grid_points if self.grid_points is not None else settings.combine_grid_points,
            base_shape=self.base_shape,
            selected_state_id=self.selected_state_id,
        )


class EquivalencyRequest(BaseModel):
    """Solve the equivalent test for a list of mission states."""
    states: List[MissionStateSchema] = Field(..., description="Mission states")
    accel: AccelSettingsSchema = Field(default_factory=AccelSettingsSchema)


class StateContributionSchema(AttributesModel):
    state_id: str
    state_name: str
    duration_h: float
    weight: float
    grms: float
    energy_per_hour: float
    damage_per_hour: float
    damage_fraction: float
    acceleration_factor: float
    psd_factor: float


class EquivalencyResponse(AttributesModel):
    """Equivalent test definition."""
    field_psd: List[PsdPointSchema]
    test_psd: List[PsdPointSchema]
    t_test_h: float
    k_scale: float
    fatigue_exponent: float
    total_field_h: float
    acceleration_factor: float
    grms_field: float
    grms_test: float
    energy_field: float
    energy_test: float
    damage_field: float
    damage_test: float
    damage_ratio: float
    energy_ratio: float
    contributions: List[StateContributionSchema]
    base_state_id: Optional[str] = None
    capped_by_energy: bool
    capped_by_grms: bool
    insufficient_data: bool
    notes: List[str]
