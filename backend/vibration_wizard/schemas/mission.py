"""
Pydantic schemas for mission profiles, mission templates and saved profiles.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Annotated, List, Literal, Optional, Union

from vibration_wizard.core.types import (
    CycleThermal,
    Industry,
    MissionProfile,
    MissionState,
    MissionTemplate,
    SteadyThermal,
)
from vibration_wizard.schemas.psd import PsdDefinitionSchema, psd_definition_from_domain


class SteadyThermalSchema(BaseModel):
    """Constant temperature exposure."""
    kind: Literal["Steady"] = "Steady"
    t_c: float = Field(..., description="Temperature in °C")

    def to_domain(self) -> SteadyThermal:
        return SteadyThermal(self.t_c)


class CycleThermalSchema(BaseModel):
    """Ramp/soak temperature cycle."""
    kind: Literal["Cycle"] = "Cycle"
    tmin_c: float = Field(..., description="Lower dwell temperature in °C")
    tmax_c: float = Field(..., description="Upper dwell temperature in °C")
    ramp_c_per_min: float = Field(..., gt=0, description="Ramp rate in °C/min")
    soak_min: float = Field(..., ge=0, description="Dwell at each extreme in minutes")
    cycles_per_hour: float = Field(..., gt=0, description="Field cycle rate")

    @model_validator(mode="after")
    def check_range(self):
        if self.tmax_c < self.tmin_c:
            raise ValueError("tmax_c must be greater than or equal to tmin_c")
        return self

    def to_domain(self) -> CycleThermal:
        return CycleThermal(
            self.tmin_c, self.tmax_c, self.ramp_c_per_min, self.soak_min, self.cycles_per_hour
        )


ThermalConditionSchema = Annotated[
    Union[SteadyThermalSchema, CycleThermalSchema],
    Field(discriminator="kind")
]


def thermal_from_domain(thermal) -> Union[SteadyThermalSchema, CycleThermalSchema]:
    if isinstance(thermal, SteadyThermal):
        return SteadyThermalSchema(t_c=thermal.t_c)
    if isinstance(thermal, CycleThermal):
        return CycleThermalSchema(
            tmin_c=thermal.tmin_c,
            tmax_c=thermal.tmax_c,
            ramp_c_per_min=thermal.ramp_c_per_min,
            soak_min=thermal.soak_min,
            cycles_per_hour=thermal.cycles_per_hour,
        )
    raise TypeError(f"Unsupported thermal condition: {type(thermal).__name__}")


class MissionStateSchema(BaseModel):
    """One phase of field life."""
    id: str = Field(..., description="State id, unique within a profile")
    name: str = Field(..., description="Display name")
    duration_h: float = Field(..., ge=0, description="Field duration in hours")
    psd: PsdDefinitionSchema
    thermal: ThermalConditionSchema

    def to_domain(self) -> MissionState:
        return MissionState(
            id=self.id,
            name=self.name,
            duration_h=self.duration_h,
            psd=self.psd.to_domain(),
            thermal=self.thermal.to_domain(),
        )

    @classmethod
    def from_domain(cls, state: MissionState) -> "MissionStateSchema":
        return cls(
            id=state.id,
            name=state.name,
            duration_h=state.duration_h,
            psd=psd_definition_from_domain(state.psd),
            thermal=thermal_from_domain(state.thermal),
        )


class MissionProfileSchema(BaseModel):
    """Mission profile: ordered states plus intended field life."""
    name: str = Field(..., description="Profile name")
    industry: Industry = Field(default=Industry.CUSTOM)
    intended_life_h: float = Field(default=0.0, ge=0, description="Intended field life in hours")
    states: List[MissionStateSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self):
        ids = [s.id for s in self.states]
        if len(ids) != len(set(ids)):
            raise ValueError("Mission state ids must be unique")
        return self

    def to_domain(self) -> MissionProfile:
        return MissionProfile(
            name=self.name,
            states=tuple(s.to_domain() for s in self.states),
            intended_life_h=self.intended_life_h,
            industry=self.industry,
        )

    @classmethod
    def from_domain(cls, profile: MissionProfile) -> "MissionProfileSchema":
        return cls(
            name=profile.name,
            industry=profile.industry,
            intended_life_h=profile.intended_life_h,
            states=[MissionStateSchema.from_domain(s) for s in profile.states],
        )


class MissionProfileResponse(MissionProfileSchema):
    total_hours: float = Field(..., description="Sum of state durations")

    @classmethod
    def from_domain(cls, profile: MissionProfile) -> "MissionProfileResponse":
        base = MissionProfileSchema.from_domain(profile)
        return cls(**base.model_dump(), total_hours=profile.total_hours)


class MissionTemplateSummary(BaseModel):
    """Template listing entry."""
    id: str
    industry: Industry
    name: str
    description: str
    intended_life_h: float
    state_count: int

    @classmethod
    def from_domain(cls, template: MissionTemplate) -> "MissionTemplateSummary":
        return cls(
            id=template.id,
            industry=template.industry,
            name=template.name,
            description=template.description,
            intended_life_h=template.profile.intended_life_h,
            state_count=len(template.profile.states),
        )


class MissionTemplateResponse(MissionTemplateSummary):
    """Template with its full profile."""
    profile: MissionProfileResponse

    @classmethod
    def from_domain(cls, template: MissionTemplate) -> "MissionTemplateResponse":
        summary = MissionTemplateSummary.from_domain(template)
        return cls(
            **summary.model_dump(),
            profile=MissionProfileResponse.from_domain(template.profile),
        )


class SavedProfileBase(BaseModel):
    """Base schema for a stored mission profile."""
    name: str = Field(..., min_length=1, max_length=255, description="Profile name")
    description: Optional[str] = Field(None, description="Free-form description")
    industry: Industry = Field(default=Industry.CUSTOM)
    intended_life_h: float = Field(default=0.0, ge=0)
    states: List[MissionStateSchema] = Field(default_factory=list)

    def to_profile(self) -> MissionProfileSchema:
        return MissionProfileSchema(
            name=self.name,
            industry=self.industry,
            intended_life_h=self.intended_life_h,
            states=self.states,
        )


class SavedProfileCreate(SavedProfileBase):
    """Schema for saving a mission profile."""
    pass


class SavedProfileUpdate(BaseModel):
    """Schema for updating a saved mission profile."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    industry: Optional[Industry] = None
    intended_life_h: Optional[float] = Field(None, ge=0)
    states: Optional[List[MissionStateSchema]] = None


class SavedProfileResponse(SavedProfileBase):
    """Schema for saved profile responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class RescaleRequest(BaseModel):
    """Rescale state durations to the intended life."""
    profile: MissionProfileSchema
