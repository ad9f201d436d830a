"""
Pydantic schemas for reliability demonstration and sample sizing.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from vibration_wizard.core.types import ReliabilityDemo
from vibration_wizard.schemas.psd import AttributesModel


class ReliabilityDemoSchema(BaseModel):
    """Reliability target to demonstrate."""
    r_target: float = Field(default=0.9, allow_inf_nan=False, description="Reliability to demonstrate, solvable in (0, 1)")
    cl: float = Field(default=0.9, allow_inf_nan=False, description="Confidence level, solvable in (0, 1)")
    c_allowed: int = Field(default=0, ge=0, description="Allowed failures")

    def to_domain(self) -> ReliabilityDemo:
        return ReliabilityDemo(self.r_target, self.cl, self.c_allowed)


class SampleSizeResponse(AttributesModel):
    """Minimum units on test."""
    sample_size: int
    achieved_confidence: float
    solvable: bool
    converged: bool
    message: str


class ConfidenceRequest(BaseModel):
    n: int = Field(..., ge=0, description="Units on test")
    c_allowed: int = Field(default=0, ge=0)
    r_target: float = Field(..., allow_inf_nan=False)


class ConfidenceResponse(BaseModel):
    n: int
    c_allowed: int
    r_target: float
    confidence: float


class DemonstratedReliabilityRequest(BaseModel):
    n: int = Field(..., ge=0, description="Units on test")
    c_allowed: int = Field(default=0, ge=0)
    cl: float = Field(..., allow_inf_nan=False)


class DemonstratedReliabilityResponse(BaseModel):
    n: int
    c_allowed: int
    cl: float
    reliability: Optional[float] = Field(None, description="None when no solution exists")


class ConfidenceCurveRequest(BaseModel):
    r_target: float = Field(..., allow_inf_nan=False)
    c_allowed: int = Field(default=0, ge=0)
    n_center: int = Field(..., ge=1)
    spread: float = Field(default=0.2, gt=0, le=1)
    max_points: int = Field(default=50, ge=2, le=500)


class CurvePoint(BaseModel):
    n: int
    confidence: float


class ConfidenceCurveResponse(BaseModel):
    points: List[CurvePoint]
