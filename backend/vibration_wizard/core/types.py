"""
Domain types for the vibration test-equivalency engine.

All entities are immutable dataclasses. PSD and thermal definitions are closed
tagged unions (``TemplatePsd | CsvPsd`` and ``SteadyThermal | CycleThermal``);
consumers match them with ``isinstance`` and reject anything else.
"""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple, Union


class Industry(str, Enum):
    """Industry segment a mission profile belongs to."""
    AUTOMOTIVE = "Automotive"
    DATA_CENTER_AI = "DataCenterAI"
    HEALTHCARE = "Healthcare"
    INDUSTRIAL = "Industrial"
    CONSUMER = "Consumer"
    CUSTOM = "Custom"


class MountingType(str, Enum):
    """How the DUT is attached in the field or on the shaker."""
    RIGID_BOLT_DOWN = "RigidBoltDown"
    ISOLATOR_MOUNTED = "IsolatorMounted"
    CANTILEVERED = "Cantilevered"
    MULTI_POINT_CONSTRAINED = "MultiPointConstrained"
    POTTED_ENCAPSULATED = "PottedEncapsulated"
    CUSTOM = "Custom"


class FixtureMaterial(str, Enum):
    """Fixture plate materials with tabulated properties."""
    AL6061 = "Al6061"
    STEEL = "Steel"
    MAGNESIUM = "Magnesium"


class WarningLevel(str, Enum):
    """Severity of a fixture warning. Critical warnings gate export."""
    WARNING = "Warning"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class PsdPoint:
    """A single breakpoint of a PSD curve.

    Attributes:
        f_hz: Frequency in Hz (> 0).
        g2_per_hz: Acceleration spectral density in g²/Hz (>= 0).
    """
    f_hz: float
    g2_per_hz: float


@dataclass(frozen=True)
class PsdTemplate:
    """Named library PSD curve."""
    id: str
    name: str
    points: Tuple[PsdPoint, ...]


@dataclass(frozen=True)
class TemplatePsd:
    """PSD taken from the template library, densities multiplied by ``scale``."""
    template_id: str
    scale: float = 1.0


@dataclass(frozen=True)
class CsvPsd:
    """User-supplied PSD, already parsed and normalised."""
    name: str
    points: Tuple[PsdPoint, ...]


PsdDefinition = Union[TemplatePsd, CsvPsd]


@dataclass(frozen=True)
class SteadyThermal:
    """Constant temperature exposure."""
    t_c: float


@dataclass(frozen=True)
class CycleThermal:
    """Repeated ramp/soak temperature cycle.

    Attributes:
        tmin_c: Lower dwell temperature in °C.
        tmax_c: Upper dwell temperature in °C (>= tmin_c).
        ramp_c_per_min: Ramp rate in °C/min.
        soak_min: Dwell time at each extreme in minutes.
        cycles_per_hour: Field cycle rate.
    """
    tmin_c: float
    tmax_c: float
    ramp_c_per_min: float
    soak_min: float
    cycles_per_hour: float


ThermalCondition = Union[SteadyThermal, CycleThermal]


@dataclass(frozen=True)
class MissionState:
    """One phase of field life."""
    id: str
    name: str
    duration_h: float
    psd: PsdDefinition
    thermal: ThermalCondition


@dataclass(frozen=True)
class MissionProfile:
    """Ordered sequence of mission states plus intended field life."""
    name: str
    states: Tuple[MissionState, ...] = ()
    intended_life_h: float = 0.0
    industry: Industry = Industry.CUSTOM

    @property
    def total_hours(self) -> float:
        return sum(max(0.0, s.duration_h) for s in self.states)

    def rescaled_to_intended_life(self) -> "MissionProfile":
        """Scale state durations so they sum to ``intended_life_h``.

        Returns the profile unchanged when either total is not positive.
        """
        total = self.total_hours
        if total <= 0 or self.intended_life_h <= 0:
            return self
        factor = self.intended_life_h / total
        states = tuple(
            replace(s, duration_h=max(0.0, s.duration_h) * factor)
            for s in self.states
        )
        return replace(self, states=states)


@dataclass(frozen=True)
class MissionTemplate:
    """Built-in mission profile for an industry."""
    id: str
    industry: Industry
    name: str
    description: str
    profile: MissionProfile


@dataclass(frozen=True)
class DamageBand:
    """Frequency range ranked by the damage-scoring heuristic."""
    f_start: float
    f_end: float
    f_center: float
    energy: float
    weight: float
    score: float


@dataclass(frozen=True)
class ReliabilityDemo:
    """Reliability demonstration target. Sample size is always derived."""
    r_target: float = 0.9
    cl: float = 0.9
    c_allowed: int = 0


@dataclass(frozen=True)
class DutInputs:
    """Fixture advisor inputs describing the device under test."""
    m_dut_kg: float
    fn_dut_hz_min: float
    fn_dut_hz_max: float
    mounting_type: MountingType = MountingType.RIGID_BOLT_DOWN
    field_mounting_type: Optional[MountingType] = None
    test_mounting_type: Optional[MountingType] = None
    k_safety: float = 1.5
    mass_ratio_target: float = 3.0
    notch_limit_pct: float = 20.0
    fixture_mass_kg: Optional[float] = None
    span_mm: Optional[float] = None
    material: FixtureMaterial = FixtureMaterial.AL6061


@dataclass(frozen=True)
class FixtureWarning:
    level: WarningLevel
    message: str


@dataclass(frozen=True)
class FixtureEvaluation:
    """Derived fixture design requirements.

    Attributes:
        f_fixture_min_hz: Minimum fixture natural frequency.
        target_fixture_mass_kg: Fixture mass that satisfies the mass-ratio target.
        mass_ratio: Actual fixture/DUT mass ratio, when a fixture mass is given.
        meets_mass_ratio: Whether ``mass_ratio`` reaches the target.
        k_fixture_min_n_per_m: Required fixture stiffness, when a span is given.
        plate_thickness_mm: First-pass plate thickness estimate.
        plate_mass_estimate_kg: Mass of a square plate of that thickness.
        warnings: Warning list.
        checklist: Qualitative set-up actions.
    """
    f_fixture_min_hz: float
    target_fixture_mass_kg: float
    mass_ratio: Optional[float] = None
    meets_mass_ratio: Optional[bool] = None
    k_fixture_min_n_per_m: Optional[float] = None
    plate_thickness_mm: Optional[float] = None
    plate_mass_estimate_kg: Optional[float] = None
    warnings: Tuple[FixtureWarning, ...] = field(default_factory=tuple)
    checklist: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_critical(self) -> bool:
        return any(w.level == WarningLevel.CRITICAL for w in self.warnings)
