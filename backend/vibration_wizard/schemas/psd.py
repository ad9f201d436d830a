"""
Pydantic schemas for PSD resolution, integration and octave resampling.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Optional, Union

from vibration_wizard.core.types import CsvPsd, PsdPoint, TemplatePsd


class AttributesModel(BaseModel):
    """Base for responses built from core dataclasses."""
    model_config = ConfigDict(from_attributes=True)


class PsdPointSchema(AttributesModel):
    """Single PSD breakpoint."""
    f_hz: float = Field(..., gt=0, description="Frequency in Hz")
    g2_per_hz: float = Field(..., ge=0, description="Spectral density in g²/Hz")

    def to_domain(self) -> PsdPoint:
        return PsdPoint(self.f_hz, self.g2_per_hz)


def points_to_domain(points: List[PsdPointSchema]) -> List[PsdPoint]:
    return [p.to_domain() for p in points]


class TemplatePsdSchema(BaseModel):
    """PSD taken from the template library."""
    kind: Literal["Template"] = "Template"
    template_id: str = Field(..., description="Template id")
    scale: float = Field(default=1.0, gt=0, description="Multiplier on spectral density")

    def to_domain(self) -> TemplatePsd:
        return TemplatePsd(self.template_id, self.scale)


class CsvPsdSchema(BaseModel):
    """User-supplied PSD points."""
    kind: Literal["Csv"] = "Csv"
    name: str = Field(..., description="Source name, e.g. the uploaded file name")
    points: List[PsdPointSchema] = Field(..., description="Resolved PSD points")

    def to_domain(self) -> CsvPsd:
        return CsvPsd(self.name, tuple(points_to_domain(self.points)))


PsdDefinitionSchema = Annotated[
    Union[TemplatePsdSchema, CsvPsdSchema],
    Field(discriminator="kind")
]


def psd_definition_from_domain(definition) -> Union[TemplatePsdSchema, CsvPsdSchema]:
    if isinstance(definition, TemplatePsd):
        return TemplatePsdSchema(template_id=definition.template_id, scale=definition.scale)
    if isinstance(definition, CsvPsd):
        return CsvPsdSchema(
            name=definition.name,
            points=[PsdPointSchema.model_validate(p) for p in definition.points],
        )
    raise TypeError(f"Unsupported PSD definition: {type(definition).__name__}")


class PsdTemplateResponse(AttributesModel):
    """Library template with its overall level."""
    id: str
    name: str
    points: List[PsdPointSchema]
    grms: float = Field(..., description="Overall gRMS of the template")


class ResolvePsdRequest(BaseModel):
    """Request to resolve a PSD definition into points."""
    definition: PsdDefinitionSchema


class PsdCurveResponse(BaseModel):
    """Resolved PSD curve."""
    points: List[PsdPointSchema]
    area: float = Field(..., description="Area under the curve in g²")
    grms: float = Field(..., description="Overall gRMS")


class PsdUploadResponse(PsdCurveResponse):
    """Parsed CSV upload."""
    name: str
    rows: int = Field(..., description="Number of valid rows kept")


class IntegrateRequest(BaseModel):
    """Band integration request. Missing edges default to the curve range."""
    points: List[PsdPointSchema] = Field(..., min_length=2)
    f1: Optional[float] = Field(None, description="Lower band edge in Hz")
    f2: Optional[float] = Field(None, description="Upper band edge in Hz")


class IntegrateResponse(BaseModel):
    """Band integration result."""
    f1: float
    f2: float
    area: float = Field(..., description="Band area in g²")
    grms: float = Field(..., description="Band gRMS")


class OctaveRequest(BaseModel):
    """1/N-octave resampling request."""
    points: List[PsdPointSchema] = Field(..., min_length=2)
    fraction: int = Field(default=3, ge=1, le=24, description="Bands per octave")
    ref_hz: float = Field(default=1.0, gt=0, description="Anchor frequency of the centre series")
    tolerance: Optional[float] = Field(None, gt=0, description="Allowed relative gRMS deviation")


class OctaveBandSchema(AttributesModel):
    f_center: float
    f1: float
    f2: float
    area: float
    g2_per_hz: float


class OctaveResponse(AttributesModel):
    """Octave-resampled PSD with energy check."""
    points: List[PsdPointSchema]
    bands: List[OctaveBandSchema]
    band_area: float
    raw_area: float
    grms: float
    raw_grms: float
    deviation: float
    exceeds_tolerance: bool
    warning: Optional[str] = None


class DamageBandSchema(AttributesModel):
    """Scored damage band."""
    f_start: float
    f_end: float
    f_center: float
    energy: float
    weight: float
    score: float


class BandsRequest(BaseModel):
    """Damage banding request."""
    points: List[PsdPointSchema] = Field(..., min_length=2)
    band_count: int = Field(default=12, ge=1, le=200)
    top: int = Field(default=3, ge=0, description="Number of top bands to return")


class BandsResponse(BaseModel):
    """All bands plus the highest-scoring ones."""
    bands: List[DamageBandSchema]
    top_bands: List[DamageBandSchema]
