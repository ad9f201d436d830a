"""
Mission-representative thermal cycle synthesis.

Compresses the thermal conditions of a mission profile into one cycle in which
every state holds a share of the cycle proportional to its share of field life.
The cycle is repeated to fill the test duration.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from .types import CycleThermal, MissionState, SteadyThermal, ThermalCondition


logger = logging.getLogger(__name__)

DEFAULT_MIN_CYCLES = 3
DEFAULT_MIN_SEGMENT_MIN = 1.0

_ROUNDING_TOL = 1e-6


@dataclass
class ThermalSegment:
    """Share of the synthesized cycle belonging to one mission state.

    Attributes:
        state_id: Mission state id.
        state_name: Mission state name.
        field_fraction: Fraction of field life (all segments sum to 1).
        cycle_minutes: Minutes of the synthesized cycle spent in this segment.
        temp_c: Representative temperature (steady value or cycle midpoint).
        tmin_c: Lowest temperature reached in the segment.
        tmax_c: Highest temperature reached in the segment.
        ramp_minutes: Duration of each ramp (0 for steady states).
        soak_minutes: Duration of each dwell at an extreme (0 for steady states).
    """
    state_id: str
    state_name: str
    field_fraction: float
    cycle_minutes: float
    temp_c: float
    tmin_c: float
    tmax_c: float
    ramp_minutes: float = 0.0
    soak_minutes: float = 0.0


@dataclass
class MissionThermalCycle:
    """Synthesized cycle.

    Attributes:
        points: ``(t_min, temp_c)`` pairs of one cycle, ready for charting.
        segments: Per-state segments in mission order.
        cycle_minutes: Length of one cycle.
        repeats: Number of whole cycles that fit in the test duration.
    """
    points: List[Tuple[float, float]] = field(default_factory=list)
    segments: List[ThermalSegment] = field(default_factory=list)
    cycle_minutes: float = 0.0
    repeats: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.segments


def representative_temperature(thermal: ThermalCondition) -> float:
    if isinstance(thermal, SteadyThermal):
        return thermal.t_c
    if isinstance(thermal, CycleThermal):
        return (thermal.tmin_c + thermal.tmax_c) / 2.0
    raise TypeError(f"Unsupported thermal condition: {type(thermal).__name__}")


def _is_flat(states: Sequence[MissionState]) -> bool:
    if not all(isinstance(s.thermal, SteadyThermal) for s in states):
        return False
    first = states[0].thermal.t_c
    return all(math.isclose(s.thermal.t_c, first, abs_tol=1e-9) for s in states)


def _allocate_segment_minutes(
    fractions: Sequence[float],
    cycle_minutes: float,
    min_segment_min: float
) -> List[float]:
    """Split ``cycle_minutes`` proportionally with a per-segment floor.

    Segments below the floor are pinned to it and the rest is shared among the
    free segments. Sharing shrinks the free segments, so pinning repeats until
    no free segment is left below the floor.
    """
    raw = [f * cycle_minutes for f in fractions]
    if min_segment_min <= 0:
        minutes = raw
    else:
        clamped = [0 < r < min_segment_min for r in raw]
        while True:
            remaining = cycle_minutes - min_segment_min * sum(clamped)
            if remaining <= 0:
                minutes = [cycle_minutes / len(raw)] * len(raw)
                break
            free_sum = sum(r for r, c in zip(raw, clamped) if not c)
            minutes = []
            for r, c in zip(raw, clamped):
                if c:
                    minutes.append(min_segment_min)
                elif free_sum > 0:
                    minutes.append(r / free_sum * remaining)
                else:
                    minutes.append(remaining / len(raw))
            below = [
                not c and 0 < m < min_segment_min - _ROUNDING_TOL
                for m, c in zip(minutes, clamped)
            ]
            if not any(below):
                break
            clamped = [c or b for c, b in zip(clamped, below)]

    diff = cycle_minutes - sum(minutes)
    if abs(diff) > _ROUNDING_TOL and minutes:
        minutes[-1] += diff
    return [max(0.0, m) for m in minutes]


def _cycle_timing(thermal: CycleThermal, segment_minutes: float) -> Tuple[float, float]:
    """Ramp and soak minutes for a cycle state fitted into its segment.

    Nominal times are scaled down (never up) to fit the field cycle period and
    then the segment; leftover segment time lengthens both soaks equally.
    """
    delta = abs(thermal.tmax_c - thermal.tmin_c)
    ramp = delta / thermal.ramp_c_per_min if thermal.ramp_c_per_min > 0 else 0.0
    soak = max(0.0, thermal.soak_min)

    nominal = 2 * ramp + 2 * soak
    if thermal.cycles_per_hour > 0 and nominal > 0:
        period = 60.0 / thermal.cycles_per_hour
        if nominal > period:
            ramp *= period / nominal
            soak *= period / nominal

    excursion = 2 * ramp + 2 * soak
    if excursion > segment_minutes and excursion > 0:
        ramp *= segment_minutes / excursion
        soak *= segment_minutes / excursion
    else:
        soak += (segment_minutes - excursion) / 2.0
    return ramp, soak


def build_mission_representative_thermal_cycle(
    states: Sequence[MissionState],
    t_test_h: float,
    min_cycles: int = DEFAULT_MIN_CYCLES,
    min_segment_min: float = DEFAULT_MIN_SEGMENT_MIN
) -> MissionThermalCycle:
    """Build one representative thermal cycle for a compressed test.

    Each state with a positive duration gets a segment whose length is its
    share of field life times the cycle length. Steady states dwell at their
    temperature; cycle states ramp from ``tmin_c`` to ``tmax_c``, soak, ramp
    back and soak again.

    Args:
        states: Mission states (order is kept for the cycle layout).
        t_test_h: Test duration in hours.
        min_cycles: Minimum number of cycle repeats in the test.
        min_segment_min: Minimum minutes per segment.

    Returns:
        MissionThermalCycle; empty when no state has a positive duration or
        the test duration is not positive.

    Examples:
        >>> cycle = build_mission_representative_thermal_cycle(states, 48)
        >>> sum(s.field_fraction for s in cycle.segments)
        1.0
    """
    valid = [s for s in states if math.isfinite(s.duration_h) and s.duration_h > 0]
    total_h = sum(s.duration_h for s in valid)
    if total_h <= 0 or not math.isfinite(t_test_h) or t_test_h <= 0:
        logger.debug("Thermal cycle not computable: no positive durations or test time")
        return MissionThermalCycle()

    test_minutes = t_test_h * 60.0
    if _is_flat(valid):
        cycle_minutes = test_minutes
        repeats = 1
    else:
        cycles = max(1, int(min_cycles))
        cycle_minutes = max(test_minutes / cycles, min_segment_min * len(valid))
        cycle_minutes = min(cycle_minutes, test_minutes)
        repeats = max(1, math.floor(test_minutes / cycle_minutes + _ROUNDING_TOL))

    fractions = [s.duration_h / total_h for s in valid]
    minutes = _allocate_segment_minutes(fractions, cycle_minutes, min_segment_min)

    result = MissionThermalCycle(cycle_minutes=cycle_minutes, repeats=repeats)
    t = 0.0
    for state, fraction, seg_minutes in zip(valid, fractions, minutes):
        thermal = state.thermal
        if isinstance(thermal, SteadyThermal):
            result.points.append((t, thermal.t_c))
            result.points.append((t + seg_minutes, thermal.t_c))
            segment = ThermalSegment(
                state_id=state.id,
                state_name=state.name,
                field_fraction=fraction,
                cycle_minutes=seg_minutes,
                temp_c=thermal.t_c,
                tmin_c=thermal.t_c,
                tmax_c=thermal.t_c,
            )
        elif isinstance(thermal, CycleThermal):
            ramp, soak = _cycle_timing(thermal, seg_minutes)
            lo, hi = thermal.tmin_c, thermal.tmax_c
            result.points.extend([
                (t, lo),
                (t + ramp, hi),
                (t + ramp + soak, hi),
                (t + 2 * ramp + soak, lo),
                (t + 2 * ramp + 2 * soak, lo),
            ])
            segment = ThermalSegment(
                state_id=state.id,
                state_name=state.name,
                field_fraction=fraction,
                cycle_minutes=seg_minutes,
                temp_c=representative_temperature(thermal),
                tmin_c=lo,
                tmax_c=hi,
                ramp_minutes=ramp,
                soak_minutes=soak,
            )
        else:
            raise TypeError(f"Unsupported thermal condition: {type(thermal).__name__}")
        result.segments.append(segment)
        t += seg_minutes

    return result
