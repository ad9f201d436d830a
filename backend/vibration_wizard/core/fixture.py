"""
Fixture feasibility advisor.

Translates DUT mass, natural-frequency range and mounting into fixture design
targets: minimum fixture natural frequency, mass loading, stiffness and a
first-pass plate thickness. Warnings marked Critical gate export.

The plate estimate treats the fixture as a square plate of side ``span`` with
effective bending stiffness ``k = 0.3 * E * t^3 / L^3`` carrying the fixture
mass, so ``t = (k * L^3 / (0.3 * E)) ** (1/3)``.
"""
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .types import (
    DamageBand,
    DutInputs,
    FixtureEvaluation,
    FixtureMaterial,
    FixtureWarning,
    MountingType,
    WarningLevel,
)


PLATE_STIFFNESS_COEFFICIENT = 0.3
HIGH_FREQUENCY_BAND_HZ = 800.0


@dataclass(frozen=True)
class MaterialProperties:
    """Elastic modulus (GPa) and density (kg/m³) of a fixture material."""
    youngs_modulus_gpa: float
    density_kg_m3: float


MATERIAL_PROPERTIES: Dict[FixtureMaterial, MaterialProperties] = {
    FixtureMaterial.AL6061: MaterialProperties(69.0, 2700.0),
    FixtureMaterial.STEEL: MaterialProperties(200.0, 7850.0),
    FixtureMaterial.MAGNESIUM: MaterialProperties(45.0, 1800.0),
}

GENERAL_CHECKLIST = (
    "Mount accelerometers near DUT COG and at fixture hot spots.",
    "Use notching limit {notch:g}% to protect DUT resonances.",
    "Verify bolt torque and joint slip control before run.",
    "Document fixture modal survey or bump test results.",
)

MOUNTING_GUIDANCE: Dict[MountingType, str] = {
    MountingType.RIGID_BOLT_DOWN: "Match field bolt pattern, fastener grade and torque; check flatness of the mounting face.",
    MountingType.ISOLATOR_MOUNTED: "Test with production isolators or hard-mount and derive isolator transmissibility separately.",
    MountingType.CANTILEVERED: "Reproduce the cantilever length and root stiffness; monitor the free end with a response accelerometer.",
    MountingType.MULTI_POINT_CONSTRAINED: "Keep all field attachment points; shim to avoid preloading the DUT on an uneven fixture.",
    MountingType.POTTED_ENCAPSULATED: "Control potting cure state and temperature; compound stiffness shifts with temperature.",
    MountingType.CUSTOM: "Document the custom mounting and justify its equivalence to field boundary conditions.",
}


def _band_label(band: DamageBand) -> str:
    return f"{band.f_start:.0f}-{band.f_end:.0f} Hz"


def band_risk_warning(band: DamageBand) -> Optional[FixtureWarning]:
    """Warning for a damage band that can interact with the fixture, if any."""
    f = band.f_center
    if f < 50:
        message = f"Rigid-body risk below 50 Hz (band {_band_label(band)})."
    elif f < 200:
        message = f"Plate mode risk in 50-200 Hz (band {_band_label(band)})."
    elif f < HIGH_FREQUENCY_BAND_HZ:
        message = f"Local resonance risk in 200-800 Hz (band {_band_label(band)})."
    else:
        return None
    return FixtureWarning(WarningLevel.WARNING, message)


def plate_thickness_m(stiffness_n_per_m: float, span_m: float, material: FixtureMaterial) -> float:
    """Plate thickness giving ``stiffness_n_per_m`` over ``span_m``."""
    modulus = MATERIAL_PROPERTIES[material].youngs_modulus_gpa * 1e9
    return (stiffness_n_per_m * span_m ** 3 / (modulus * PLATE_STIFFNESS_COEFFICIENT)) ** (1.0 / 3.0)


def evaluate_fixture(inputs: DutInputs, damage_bands: Sequence[DamageBand] = ()) -> FixtureEvaluation:
    """Evaluate fixture requirements for a DUT.

    Args:
        inputs: DUT and fixture inputs.
        damage_bands: Dominant damage bands of the test PSD; bands below
            800 Hz raise fixture-interaction warnings.

    Returns:
        FixtureEvaluation with targets, warnings and checklist.
    """
    warnings: List[FixtureWarning] = []
    checklist: List[str] = [item.format(notch=inputs.notch_limit_pct) for item in GENERAL_CHECKLIST]

    fn_max = max(inputs.fn_dut_hz_min, inputs.fn_dut_hz_max)
    f_fixture_min = inputs.k_safety * fn_max

    if inputs.m_dut_kg <= 0:
        warnings.append(FixtureWarning(
            WarningLevel.CRITICAL, "DUT mass must be provided to validate fixture loading."
        ))
    if fn_max <= 0:
        warnings.append(FixtureWarning(
            WarningLevel.CRITICAL, "DUT natural frequency range must be provided."
        ))
    elif inputs.fn_dut_hz_min > inputs.fn_dut_hz_max:
        warnings.append(FixtureWarning(
            WarningLevel.WARNING, "DUT natural frequency range is inverted (min > max)."
        ))
    if inputs.k_safety < 1:
        warnings.append(FixtureWarning(
            WarningLevel.CRITICAL,
            f"Safety factor {inputs.k_safety:g} puts the fixture resonance inside the DUT frequency band.",
        ))

    target_fixture_mass = inputs.mass_ratio_target * max(0.0, inputs.m_dut_kg)

    mass_ratio = None
    meets_mass_ratio = None
    if inputs.fixture_mass_kg is not None and inputs.fixture_mass_kg > 0 and inputs.m_dut_kg > 0:
        mass_ratio = inputs.fixture_mass_kg / inputs.m_dut_kg
        meets_mass_ratio = mass_ratio >= inputs.mass_ratio_target
        if not meets_mass_ratio:
            warnings.append(FixtureWarning(
                WarningLevel.WARNING,
                f"Fixture mass ratio {mass_ratio:.1f}x is below target {inputs.mass_ratio_target:.1f}x.",
            ))

    field_mount, test_mount = inputs.field_mounting_type, inputs.test_mounting_type
    if field_mount is not None and test_mount is not None and field_mount != test_mount:
        warnings.append(FixtureWarning(
            WarningLevel.WARNING,
            "Field vs test mounting mismatch. Expect boundary condition shifts.",
        ))

    for band in damage_bands:
        warning = band_risk_warning(band)
        if warning is not None:
            warnings.append(warning)
        else:
            checklist.append(
                f"High-frequency band {_band_label(band)} is typically manageable with notching."
            )

    checklist.append(MOUNTING_GUIDANCE[inputs.mounting_type])
    if test_mount is not None and test_mount != inputs.mounting_type:
        checklist.append(MOUNTING_GUIDANCE[test_mount])

    k_fixture_min = None
    thickness_mm = None
    plate_mass = None
    fixture_mass = inputs.fixture_mass_kg if inputs.fixture_mass_kg else target_fixture_mass
    if inputs.span_mm and inputs.span_mm > 0 and fixture_mass > 0 and f_fixture_min > 0:
        k_fixture_min = (2 * math.pi * f_fixture_min) ** 2 * fixture_mass
        span_m = inputs.span_mm / 1000.0
        thickness_m = plate_thickness_m(k_fixture_min, span_m, inputs.material)
        thickness_mm = thickness_m * 1000.0
        plate_mass = MATERIAL_PROPERTIES[inputs.material].density_kg_m3 * span_m ** 2 * thickness_m

    return FixtureEvaluation(
        f_fixture_min_hz=f_fixture_min,
        target_fixture_mass_kg=target_fixture_mass,
        mass_ratio=mass_ratio,
        meets_mass_ratio=meets_mass_ratio,
        k_fixture_min_n_per_m=k_fixture_min,
        plate_thickness_mm=thickness_mm,
        plate_mass_estimate_kg=plate_mass,
        warnings=tuple(warnings),
        checklist=tuple(checklist),
    )
