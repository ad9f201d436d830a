"""
Band integration and 1/N-octave resampling of PSD curves.

Between adjacent breakpoints a PSD is a straight line on log-log axes, i.e.
``S(f) = Sa * (f / fa) ** alpha``. Band areas are integrated analytically on
that interpolant, so integration over any partition of a band adds up to the
integral over the whole band. Where either breakpoint density is zero the
segment falls back to linear interpolation.

Reference:
- ANSI S1.11: Octave-band and fractional-octave-band filters
- MIL-STD-810H Method 514.8: Vibration
"""
import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import List, NamedTuple, Sequence

from .psd import normalize_psd
from .types import PsdPoint


# Energy deviation above which octave resampling is flagged
DEFAULT_OCTAVE_TOLERANCE = 0.05

_ALPHA_EPS = 1e-9
_CENTER_EPS = 1e-9


class BandEdges(NamedTuple):
    f1: float
    f2: float


@dataclass
class OctaveBand:
    """A single fractional-octave band.

    Attributes:
        f_center: Band centre frequency in Hz.
        f1: Lower edge in Hz.
        f2: Upper edge in Hz.
        area: Integrated PSD area inside the band (g²).
        g2_per_hz: Mean density over the band, ``area / (f2 - f1)``.
    """
    f_center: float
    f1: float
    f2: float
    area: float
    g2_per_hz: float


@dataclass
class OctaveResult:
    """Octave-resampled PSD and its energy check.

    Attributes:
        points: One point per band centre with the band-mean density.
        bands: Band details (edges and areas).
        band_area: Sum of all band areas.
        raw_area: Area under the input curve.
        grms: ``sqrt(band_area)``.
        raw_grms: ``sqrt(raw_area)``.
        deviation: Relative gRMS difference between resampled and raw curve.
        exceeds_tolerance: True when ``deviation`` is above the tolerance.
    """
    points: List[PsdPoint] = field(default_factory=list)
    bands: List[OctaveBand] = field(default_factory=list)
    band_area: float = 0.0
    raw_area: float = 0.0
    grms: float = 0.0
    raw_grms: float = 0.0
    deviation: float = 0.0
    exceeds_tolerance: bool = False


def _segment_area(fa: float, sa: float, fb: float, sb: float, f1: float, f2: float) -> float:
    """Area of the segment [fa, fb] interpolant between f1 and f2 (inside the segment)."""
    if f2 <= f1:
        return 0.0
    if sa <= 0 or sb <= 0:
        slope = (sb - sa) / (fb - fa)
        s1 = sa + slope * (f1 - fa)
        s2 = sa + slope * (f2 - fa)
        return 0.5 * (s1 + s2) * (f2 - f1)

    alpha = math.log(sb / sa) / math.log(fb / fa)
    if abs(alpha + 1.0) < _ALPHA_EPS:
        return sa * fa * math.log(f2 / f1)
    exponent = alpha + 1.0
    return sa * fa / exponent * ((f2 / fa) ** exponent - (f1 / fa) ** exponent)


def integrate_sorted_band(points: Sequence[PsdPoint], f1: float, f2: float) -> float:
    """Band area for points that are already normalised (no re-sorting)."""
    if len(points) < 2:
        return 0.0
    lo = max(f1, points[0].f_hz)
    hi = min(f2, points[-1].f_hz)
    if hi <= lo:
        return 0.0

    area = 0.0
    for a, b in zip(points, points[1:]):
        if b.f_hz <= lo:
            continue
        if a.f_hz >= hi:
            break
        area += _segment_area(
            a.f_hz, a.g2_per_hz, b.f_hz, b.g2_per_hz,
            max(lo, a.f_hz), min(hi, b.f_hz),
        )
    return area


def interpolate_psd(points: Sequence[PsdPoint], f: float) -> float:
    """Log-log interpolated density at ``f``; zero outside the point range.

    ``points`` must be normalised (ascending, unique frequencies).
    """
    if not points or not math.isfinite(f):
        return 0.0
    if f < points[0].f_hz or f > points[-1].f_hz:
        return 0.0
    idx = bisect_right([p.f_hz for p in points], f)
    if idx >= len(points):
        return points[-1].g2_per_hz
    a, b = points[idx - 1], points[idx]
    if f == a.f_hz:
        return a.g2_per_hz
    if a.g2_per_hz <= 0 or b.g2_per_hz <= 0:
        t = (f - a.f_hz) / (b.f_hz - a.f_hz)
        return a.g2_per_hz + t * (b.g2_per_hz - a.g2_per_hz)
    alpha = math.log(b.g2_per_hz / a.g2_per_hz) / math.log(b.f_hz / a.f_hz)
    return a.g2_per_hz * (f / a.f_hz) ** alpha


def integrate_psd_over_band(points: Sequence[PsdPoint], f1: float, f2: float) -> float:
    """Integrate a PSD between two frequencies.

    Args:
        points: PSD breakpoints (any order; invalid points are ignored).
        f1: Lower band edge in Hz.
        f2: Upper band edge in Hz.

    Returns:
        Area in g². Parts of the band outside the breakpoint range contribute
        nothing; ``f2 <= f1`` or non-finite edges give 0.

    Examples:
        >>> pts = [PsdPoint(10, 0.01), PsdPoint(100, 0.01)]
        >>> integrate_psd_over_band(pts, 10, 100)
        0.9
    """
    if not math.isfinite(f1) or not math.isfinite(f2) or f2 <= f1:
        return 0.0
    return integrate_sorted_band(normalize_psd(points), f1, f2)


def integrate_psd(points: Sequence[PsdPoint]) -> float:
    """Area under the whole PSD curve (g²)."""
    sorted_points = normalize_psd(points)
    if len(sorted_points) < 2:
        return 0.0
    return integrate_sorted_band(sorted_points, sorted_points[0].f_hz, sorted_points[-1].f_hz)


def grms(points: Sequence[PsdPoint]) -> float:
    """Overall RMS acceleration in g."""
    area = integrate_psd(points)
    return math.sqrt(area) if area > 0 else 0.0


def get_octave_centers(min_f: float, max_f: float, n: int, ref: float = 1.0) -> List[float]:
    """1/N-octave centre frequencies inside ``[min_f, max_f]``.

    Centres are ``ref * 2 ** (k / n)`` for integer ``k``, so ``ref`` itself is
    a centre whenever it lies in range.

    Args:
        min_f: Lower bound in Hz (inclusive).
        max_f: Upper bound in Hz (inclusive).
        n: Bands per octave (3 for third-octave).
        ref: Anchor frequency in Hz.

    Returns:
        Ascending list of centres; empty for invalid input.
    """
    values = (min_f, max_f, ref)
    if n <= 0 or not all(math.isfinite(v) and v > 0 for v in values) or max_f < min_f:
        return []
    k_lo = math.ceil(n * math.log2(min_f / ref) - _CENTER_EPS)
    k_hi = math.floor(n * math.log2(max_f / ref) + _CENTER_EPS)
    return [ref * 2.0 ** (k / n) for k in range(k_lo, k_hi + 1)]


def octave_band_edges(fc: float, n: int) -> BandEdges:
    """Lower and upper edge of the 1/N-octave band centred on ``fc``."""
    factor = 2.0 ** (1.0 / (2 * n))
    return BandEdges(fc / factor, fc * factor)


def psd_to_octave(
    points: Sequence[PsdPoint],
    n: int = 3,
    ref: float = 1.0,
    tolerance: float = DEFAULT_OCTAVE_TOLERANCE
) -> OctaveResult:
    """Resample a PSD onto 1/N-octave band centres.

    Each centre gets the mean density of its band. Bands at the ends of the
    curve are clipped to the breakpoint range, so the resampled energy can
    differ from the raw curve; the relative gRMS deviation is reported and
    flagged when it exceeds ``tolerance``.
    """
    sorted_points = normalize_psd(points)
    if len(sorted_points) < 2 or n <= 0:
        return OctaveResult()

    raw_area = integrate_sorted_band(sorted_points, sorted_points[0].f_hz, sorted_points[-1].f_hz)
    centers = get_octave_centers(sorted_points[0].f_hz, sorted_points[-1].f_hz, n, ref)

    result = OctaveResult(raw_area=raw_area)
    for fc in centers:
        f1, f2 = octave_band_edges(fc, n)
        area = integrate_sorted_band(sorted_points, f1, f2)
        density = area / (f2 - f1)
        result.bands.append(OctaveBand(fc, f1, f2, area, density))
        result.points.append(PsdPoint(fc, density))
        result.band_area += area

    result.grms = math.sqrt(result.band_area) if result.band_area > 0 else 0.0
    result.raw_grms = math.sqrt(raw_area) if raw_area > 0 else 0.0
    if result.raw_grms > 0:
        result.deviation = abs(result.grms - result.raw_grms) / result.raw_grms
    result.exceeds_tolerance = result.deviation > tolerance
    return result
