"""
Pydantic schemas for the mission-representative thermal cycle.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from vibration_wizard.core.thermal import MissionThermalCycle
from vibration_wizard.schemas.mission import MissionStateSchema
from vibration_wizard.schemas.psd import AttributesModel


class ThermalCycleRequest(BaseModel):
    """Compress mission thermal exposure into the test duration."""
    states: List[MissionStateSchema]
    t_test_h: float = Field(..., ge=0, allow_inf_nan=False, description="Test duration in hours; 0 gives an empty cycle")
    min_cycles: Optional[int] = Field(None, ge=1, description="Minimum cycle repeats")
    min_segment_min: Optional[float] = Field(None, gt=0, description="Minimum segment length in minutes")


class ThermalPoint(BaseModel):
    t_min: float = Field(..., description="Time from cycle start in minutes")
    temp_c: float = Field(..., description="Chamber set point in °C")


class ThermalSegmentSchema(AttributesModel):
    state_id: str
    state_name: str
    field_fraction: float
    cycle_minutes: float
    temp_c: float
    tmin_c: float
    tmax_c: float
    ramp_minutes: float
    soak_minutes: float


class ThermalCycleResponse(BaseModel):
    """One representative cycle, repeated ``repeats`` times."""
    points: List[ThermalPoint]
    segments: List[ThermalSegmentSchema]
    cycle_minutes: float
    repeats: int
    total_minutes: float

    @classmethod
    def from_domain(cls, cycle: MissionThermalCycle) -> "ThermalCycleResponse":
        return cls(
            points=[ThermalPoint(t_min=t, temp_c=temp) for t, temp in cycle.points],
            segments=[ThermalSegmentSchema.model_validate(s) for s in cycle.segments],
            cycle_minutes=cycle.cycle_minutes,
            repeats=cycle.repeats,
            total_minutes=cycle.cycle_minutes * cycle.repeats,
        )
