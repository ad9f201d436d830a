"""
Field-to-test vibration equivalency.

Merges the PSDs of all mission states into one damage-equivalent field PSD and
compresses it into a shorter test using the inverse power law of random
vibration fatigue (MIL-STD-810H Annex A, Method 514.8):

    t_field / t_test = (W_test / W_field) ** (m / 2)

where ``W`` is spectral density and ``m`` the fatigue exponent (S-N slope).
With ``m = 2`` the same relations give plain energy equivalence.

All spectral integrals (state energy, state damage, merged energy and damage)
are trapezoids over the same merge grid, so field and test bookkeeping agree.

Reference:
- MIL-STD-810H Method 514.8 Annex A: Vibration test time compression
- Steinberg, Vibration Analysis for Electronic Equipment, 3rd ed.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
from scipy import integrate

from .octave import integrate_psd, interpolate_psd
from .psd import PsdTemplateLibrary, UnknownTemplateError, normalize_psd, resolve_psd
from .types import MissionState, PsdPoint


logger = logging.getLogger(__name__)

DEFAULT_FATIGUE_EXPONENT = 7.5
ENERGY_EXPONENT = 2.0
DEFAULT_GRID_POINTS = 64
INSUFFICIENT_DATA_NOTE = "Insufficient profile data: no state has a positive duration and a usable PSD"

# relative offset of the zero-density samples placed just outside each PSD's band
_BAND_EDGE_OFFSET = 1e-6


class EquivalencyMethod(str, Enum):
    """How field and test are matched."""
    FATIGUE_DAMAGE = "FatigueDamage"
    ENERGY = "Energy"
    HYBRID = "Hybrid"


class SolveFor(str, Enum):
    """Free variable(s) of the equivalency."""
    K_SCALE = "k_scale"
    T_TEST = "t_test"
    BOTH = "both"


class BaseShape(str, Enum):
    """Spectral shape of the field PSD."""
    DAMAGE_EQUIVALENT = "DamageEquivalent"
    DOMINANT_DAMAGE_STATE = "DominantDamageState"
    USER_SELECTED_STATE = "UserSelectedState"


@dataclass(frozen=True)
class AccelSettings:
    """Acceleration settings.

    Attributes:
        method: Equivalence criterion.
        solve_for: ``K_SCALE`` keeps ``t_test_h`` and solves the level,
            ``T_TEST`` keeps ``k_scale`` and solves the duration, ``BOTH``
            starts from both and moves them together.
        t_test_h: Test duration in hours (input for ``K_SCALE`` and ``BOTH``).
        k_scale: PSD multiplier over the field PSD (input for ``T_TEST`` and
            ``BOTH``).
        fatigue_exponent: S-N slope ``m`` used by FatigueDamage and Hybrid.
        energy_cap_gamma: Hybrid cap on test energy relative to field energy.
        max_grms: Optional shaker or DUT limit on test gRMS.
        grid_points: Log-spaced frequencies added to the merge grid.
        base_shape: Merged power-mean shape, or one state's shape rescaled to
            the merged damage.
        selected_state_id: State used by ``USER_SELECTED_STATE``.
    """
    method: EquivalencyMethod = EquivalencyMethod.FATIGUE_DAMAGE
    solve_for: SolveFor = SolveFor.K_SCALE
    t_test_h: float = 240.0
    k_scale: float = 1.0
    fatigue_exponent: float = DEFAULT_FATIGUE_EXPONENT
    energy_cap_gamma: float = 2.0
    max_grms: Optional[float] = None
    grid_points: int = DEFAULT_GRID_POINTS
    base_shape: BaseShape = BaseShape.DAMAGE_EQUIVALENT
    selected_state_id: Optional[str] = None

    @property
    def effective_exponent(self) -> float:
        if self.method == EquivalencyMethod.ENERGY:
            return ENERGY_EXPONENT
        return self.fatigue_exponent


@dataclass
class StateContribution:
    """Per-state share of the field damage and its acceleration factors."""
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


@dataclass
class EquivalencyResult:
    """Equivalent test definition and its bookkeeping.

    Attributes:
        field_psd: Field PSD on the merge grid (damage-equivalent merge, or
            the base state's shape carrying the merged damage).
        test_psd: ``k_scale * field_psd``.
        t_test_h: Test duration in hours.
        k_scale: Density multiplier of the test over the field PSD.
        fatigue_exponent: Exponent actually used (2 for Energy).
        total_field_h: Sum of usable state durations.
        acceleration_factor: ``total_field_h / t_test_h``.
        grms_field: gRMS of ``field_psd``.
        grms_test: gRMS of ``test_psd``.
        energy_field: Sum of state energy (g² h).
        energy_test: Test energy (g² h).
        damage_field: Sum of state damage integrals.
        damage_test: Test damage integral.
        damage_ratio: ``damage_test / damage_field`` (1 when not capped).
        energy_ratio: ``energy_test / energy_field``.
        contributions: Per-state breakdown.
        base_state_id: State whose shape was used, None for the merged shape.
        capped_by_energy: Hybrid energy cap was applied.
        capped_by_grms: ``max_grms`` cap was applied.
        insufficient_data: Nothing could be computed.
        notes: Human-readable notes.
    """
    field_psd: List[PsdPoint] = field(default_factory=list)
    test_psd: List[PsdPoint] = field(default_factory=list)
    t_test_h: float = 0.0
    k_scale: float = 0.0
    fatigue_exponent: float = DEFAULT_FATIGUE_EXPONENT
    total_field_h: float = 0.0
    acceleration_factor: float = 0.0
    grms_field: float = 0.0
    grms_test: float = 0.0
    energy_field: float = 0.0
    energy_test: float = 0.0
    damage_field: float = 0.0
    damage_test: float = 0.0
    damage_ratio: float = 0.0
    energy_ratio: float = 0.0
    contributions: List[StateContribution] = field(default_factory=list)
    base_state_id: Optional[str] = None
    capped_by_energy: bool = False
    capped_by_grms: bool = False
    insufficient_data: bool = False
    notes: List[str] = field(default_factory=list)


def build_frequency_grid(point_lists: Sequence[Sequence[PsdPoint]], count: int = DEFAULT_GRID_POINTS) -> np.ndarray:
    """Union of all breakpoints, band-edge samples and ``count`` log-spaced frequencies.

    Every PSD gets a sample just below its first and just above its last
    breakpoint (when inside the overall range), so its density drops to zero
    right at its band edge instead of ramping across a whole grid interval.
    """
    freqs = [p.f_hz for points in point_lists for p in points if p.f_hz > 0]
    if not freqs:
        return np.array([])
    f_min, f_max = min(freqs), max(freqs)

    edges = []
    for points in point_lists:
        band = [p.f_hz for p in points if p.f_hz > 0]
        if not band:
            continue
        below = min(band) * (1.0 - _BAND_EDGE_OFFSET)
        above = max(band) * (1.0 + _BAND_EDGE_OFFSET)
        if below > f_min:
            edges.append(below)
        if above < f_max:
            edges.append(above)

    grid = np.asarray(freqs + edges, dtype=float)
    if f_max > f_min and count >= 2:
        grid = np.concatenate([grid, np.geomspace(f_min, f_max, count)])
    grid = np.unique(grid)
    # collapse near-duplicates from the geometric grid landing on breakpoints
    keep = np.concatenate([[True], np.diff(grid) > 1e-9 * grid[1:]])
    grid = grid[keep]
    grid[0], grid[-1] = f_min, f_max
    return grid


def resample_psd(points: Sequence[PsdPoint], grid: np.ndarray) -> np.ndarray:
    """Densities of ``points`` on ``grid``; zero outside the PSD's own range."""
    cleaned = normalize_psd(points)
    return np.array([interpolate_psd(cleaned, f) for f in grid], dtype=float)


def combine_damage_equivalent(
    densities: np.ndarray,
    weights: np.ndarray,
    exponent: float
) -> np.ndarray:
    """Merge resampled PSDs with ``W_eq = (sum w_i W_i^(m/2))^(2/m)``.

    Args:
        densities: Array of shape (n_states, n_freqs).
        weights: Time fractions, shape (n_states,), summing to 1.
        exponent: Fatigue exponent ``m``.
    """
    half = exponent / 2.0
    merged = np.einsum("i,ij->j", weights, np.power(densities, half))
    return np.power(merged, 1.0 / half)


def _grid_integral(values: np.ndarray, grid: np.ndarray) -> float:
    return float(integrate.trapezoid(values, grid))


def _damage_rate(densities: np.ndarray, grid: np.ndarray, exponent: float) -> float:
    return _grid_integral(np.power(densities, exponent / 2.0), grid)


def _usable_states(
    states: Sequence[MissionState],
    library: PsdTemplateLibrary,
    notes: List[str]
) -> List[Tuple[MissionState, List[PsdPoint]]]:
    usable = []
    for state in states:
        if not math.isfinite(state.duration_h) or state.duration_h <= 0:
            notes.append(f"State '{state.name}' skipped: duration must be positive.")
            continue
        try:
            points = normalize_psd(resolve_psd(state.psd, library))
        except UnknownTemplateError as e:
            notes.append(f"State '{state.name}' skipped: {e}.")
            continue
        if len(points) < 2 or integrate_psd(points) <= 0:
            notes.append(f"State '{state.name}' skipped: PSD has no usable energy.")
            continue
        usable.append((state, points))
    return usable


def _insufficient(notes: List[str], exponent: float) -> EquivalencyResult:
    return EquivalencyResult(
        fatigue_exponent=exponent,
        insufficient_data=True,
        notes=notes + [INSUFFICIENT_DATA_NOTE],
    )


def _pick_base_state(
    accel: AccelSettings,
    state_ids: Sequence[str],
    state_damage: Sequence[float],
    notes: List[str]
) -> Optional[int]:
    """Index of the state whose shape becomes the field PSD, None for the merged shape."""
    if accel.base_shape == BaseShape.DAMAGE_EQUIVALENT:
        return None
    if accel.base_shape == BaseShape.USER_SELECTED_STATE:
        if accel.selected_state_id in state_ids:
            return list(state_ids).index(accel.selected_state_id)
        notes.append(
            f"Selected base state '{accel.selected_state_id}' is not a usable state; "
            "using the dominant damage state."
        )
    return int(np.argmax(state_damage))


def _solve_level_and_duration(accel: AccelSettings, total_h: float, m: float) -> Tuple[float, float]:
    """``(k, t)`` satisfying ``k^(m/2) * t = total_h`` for the requested free variable(s)."""
    if accel.solve_for == SolveFor.K_SCALE:
        return (total_h / accel.t_test_h) ** (2.0 / m), accel.t_test_h
    if accel.solve_for == SolveFor.T_TEST:
        return accel.k_scale, total_h * accel.k_scale ** (-m / 2.0)
    # split the damage mismatch evenly in log space between level and duration
    ratio = total_h / (accel.k_scale ** (m / 2.0) * accel.t_test_h)
    return accel.k_scale * ratio ** (1.0 / m), accel.t_test_h * math.sqrt(ratio)


def solve_equivalency(
    states: Sequence[MissionState],
    accel: AccelSettings,
    library: PsdTemplateLibrary
) -> EquivalencyResult:
    """Compute the equivalent test PSD and duration for a mission.

    Args:
        states: Mission states. Order does not affect the result.
        accel: Acceleration settings.
        library: PSD template library for template references.

    Returns:
        EquivalencyResult. When no state has both a positive duration and a
        PSD with energy, ``insufficient_data`` is set and all values are zero.

    Examples:
        >>> result = solve_equivalency(profile.states, AccelSettings(t_test_h=48), library)
        >>> result.acceleration_factor
        25.0
    """
    m = accel.effective_exponent
    notes: List[str] = []

    if not math.isfinite(m) or m <= 0:
        return _insufficient(notes + ["Fatigue exponent must be positive."], m)
    if accel.solve_for in (SolveFor.K_SCALE, SolveFor.BOTH) and not accel.t_test_h > 0:
        return _insufficient(notes + ["Test duration must be positive."], m)
    if accel.solve_for in (SolveFor.T_TEST, SolveFor.BOTH) and not accel.k_scale > 0:
        return _insufficient(notes + ["PSD scale factor must be positive."], m)

    usable = _usable_states(states, library, notes)
    if not usable:
        logger.debug("Equivalency has no usable states")
        return _insufficient(notes, m)

    durations = np.array([s.duration_h for s, _ in usable], dtype=float)
    total_h = float(durations.sum())
    weights = durations / total_h

    grid = build_frequency_grid([points for _, points in usable], accel.grid_points)
    densities = np.vstack([resample_psd(points, grid) for _, points in usable])

    damage_rates = np.array([_damage_rate(row, grid, m) for row in densities])
    energy_rates = np.array([_grid_integral(row, grid) for row in densities])
    damage_field = float(np.dot(durations, damage_rates))
    energy_field = float(np.dot(durations, energy_rates))
    # per hour of field life; equals the damage rate of the power-mean merge
    damage_eq = damage_field / total_h

    shape = combine_damage_equivalent(densities, weights, m)
    base_idx = _pick_base_state(
        accel, [s.id for s, _ in usable], durations * damage_rates, notes
    )
    if base_idx is not None and damage_rates[base_idx] > 0:
        shape = densities[base_idx] * (damage_eq / damage_rates[base_idx]) ** (2.0 / m)
    else:
        base_idx = None

    field_psd = [PsdPoint(float(f), float(s)) for f, s in zip(grid, shape)]
    area_eq = _grid_integral(shape, grid)
    grms_field = math.sqrt(area_eq) if area_eq > 0 else 0.0

    k, t_test = _solve_level_and_duration(accel, total_h, m)

    capped_by_grms = False
    if accel.max_grms is not None and accel.max_grms > 0 and grms_field > 0:
        k_max = (accel.max_grms / grms_field) ** 2
        if k > k_max:
            k = k_max
            t_test = total_h * k ** (-m / 2.0)
            capped_by_grms = True
            notes.append(
                f"PSD level capped at {accel.max_grms:g} gRMS; "
                f"test duration extended to {t_test:.1f} h to preserve damage."
            )

    capped_by_energy = False
    if accel.method == EquivalencyMethod.HYBRID and energy_field > 0 and area_eq > 0:
        max_energy = accel.energy_cap_gamma * energy_field
        if k * area_eq * t_test > max_energy:
            excess = max_energy / (k * area_eq * t_test)
            if accel.solve_for == SolveFor.K_SCALE:
                k *= excess
            elif accel.solve_for == SolveFor.T_TEST:
                t_test *= excess
            else:
                k *= math.sqrt(excess)
                t_test *= math.sqrt(excess)
            capped_by_energy = True
            notes.append(
                f"Energy cap applied: test energy limited to {accel.energy_cap_gamma:g}x field energy."
            )

    test_psd = [PsdPoint(p.f_hz, p.g2_per_hz * k) for p in field_psd]
    energy_test = k * area_eq * t_test
    damage_test = k ** (m / 2.0) * damage_eq * t_test

    contributions = []
    for (state, _), d, rate, energy in zip(usable, durations, damage_rates, energy_rates):
        af = d / t_test if t_test > 0 else 0.0
        contributions.append(StateContribution(
            state_id=state.id,
            state_name=state.name,
            duration_h=float(d),
            weight=float(d / total_h),
            grms=math.sqrt(energy) if energy > 0 else 0.0,
            energy_per_hour=float(energy),
            damage_per_hour=float(rate),
            damage_fraction=float(d * rate / damage_field) if damage_field > 0 else 0.0,
            acceleration_factor=af,
            psd_factor=af ** (2.0 / m) if af > 0 else 0.0,
        ))

    grms_test = math.sqrt(k * area_eq) if k * area_eq > 0 else 0.0
    base_state_id = usable[base_idx][0].id if base_idx is not None else None
    logger.debug(
        f"Equivalency: T={total_h:.1f} h -> t={t_test:.2f} h, k={k:.4f}, "
        f"gRMS {grms_field:.3f} -> {grms_test:.3f}, base={base_state_id or 'merged'}"
    )

    return EquivalencyResult(
        field_psd=field_psd,
        test_psd=test_psd,
        t_test_h=t_test,
        k_scale=k,
        fatigue_exponent=m,
        total_field_h=total_h,
        acceleration_factor=total_h / t_test if t_test > 0 else 0.0,
        grms_field=grms_field,
        grms_test=grms_test,
        energy_field=energy_field,
        energy_test=energy_test,
        damage_field=damage_field,
        damage_test=damage_test,
        damage_ratio=damage_test / damage_field if damage_field > 0 else 0.0,
        energy_ratio=energy_test / energy_field if energy_field > 0 else 0.0,
        contributions=contributions,
        base_state_id=base_state_id,
        capped_by_energy=capped_by_energy,
        capped_by_grms=capped_by_grms,
        notes=notes,
    )
