"""
Pydantic schemas package.
"""
from vibration_wizard.schemas.psd import (
    PsdPointSchema,
    TemplatePsdSchema,
    CsvPsdSchema,
    PsdTemplateResponse,
    PsdCurveResponse,
    PsdUploadResponse,
    OctaveRequest,
    OctaveResponse,
    BandsRequest,
    BandsResponse
)
from vibration_wizard.schemas.mission import (
    SteadyThermalSchema,
    CycleThermalSchema,
    MissionStateSchema,
    MissionProfileSchema,
    MissionProfileResponse,
    MissionTemplateSummary,
    MissionTemplateResponse,
    SavedProfileCreate,
    SavedProfileUpdate,
    SavedProfileResponse
)
from vibration_wizard.schemas.equivalency import (
    AccelSettingsSchema,
    EquivalencyRequest,
    EquivalencyResponse
)
from vibration_wizard.schemas.thermal import ThermalCycleRequest, ThermalCycleResponse
from vibration_wizard.schemas.reliability import ReliabilityDemoSchema, SampleSizeResponse
from vibration_wizard.schemas.fixture import (
    DutInputsSchema,
    FixtureRequest,
    FixtureEvaluationResponse
)
from vibration_wizard.schemas.plan import AcknowledgmentSchema, PlanRequest, PlanResponse
from vibration_wizard.schemas.export import ExportRequest

__all__ = [
    "PsdPointSchema",
    "TemplatePsdSchema",
    "CsvPsdSchema",
    "PsdTemplateResponse",
    "PsdCurveResponse",
    "PsdUploadResponse",
    "OctaveRequest",
    "OctaveResponse",
    "BandsRequest",
    "BandsResponse",
    "SteadyThermalSchema",
    "CycleThermalSchema",
    "MissionStateSchema",
    "MissionProfileSchema",
    "MissionProfileResponse",
    "MissionTemplateSummary",
    "MissionTemplateResponse",
    "SavedProfileCreate",
    "SavedProfileUpdate",
    "SavedProfileResponse",
    "AccelSettingsSchema",
    "EquivalencyRequest",
    "EquivalencyResponse",
    "ThermalCycleRequest",
    "ThermalCycleResponse",
    "ReliabilityDemoSchema",
    "SampleSizeResponse",
    "DutInputsSchema",
    "FixtureRequest",
    "FixtureEvaluationResponse",
    "AcknowledgmentSchema",
    "PlanRequest",
    "PlanResponse",
    "ExportRequest"
]
