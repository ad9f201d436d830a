"""
Damage-band scoring for PSD curves.

Splits a PSD into logarithmically equal bands and ranks them by band energy
weighted towards higher frequencies, where more stress cycles accumulate per
unit time. The weighting is a ranking heuristic, not a fatigue model.
"""
import math
from typing import List, Sequence

from .octave import integrate_sorted_band
from .psd import normalize_psd
from .types import DamageBand, PsdPoint


DEFAULT_BAND_COUNT = 12
FREQUENCY_WEIGHT_EXPONENT = 0.35


def build_bands(
    points: Sequence[PsdPoint],
    band_count: int = DEFAULT_BAND_COUNT,
    weight_exponent: float = FREQUENCY_WEIGHT_EXPONENT
) -> List[DamageBand]:
    """Split the PSD range into ``band_count`` log-spaced scored bands.

    Args:
        points: PSD breakpoints.
        band_count: Number of bands.
        weight_exponent: Exponent of the ``(f_center / f_min)`` weight.

    Returns:
        Bands in ascending frequency; empty when the PSD spans no range.
    """
    cleaned = normalize_psd(points)
    if len(cleaned) < 2 or band_count <= 0:
        return []
    f_min = cleaned[0].f_hz
    f_max = cleaned[-1].f_hz
    if f_max <= f_min:
        return []

    ratio = (f_max / f_min) ** (1.0 / band_count)
    bands: List[DamageBand] = []
    f_start = f_min
    for i in range(band_count):
        f_end = f_max if i == band_count - 1 else f_start * ratio
        f_center = math.sqrt(f_start * f_end)
        energy = integrate_sorted_band(cleaned, f_start, f_end)
        weight = (f_center / f_min) ** weight_exponent
        bands.append(DamageBand(
            f_start=f_start,
            f_end=f_end,
            f_center=f_center,
            energy=energy,
            weight=weight,
            score=energy * weight,
        ))
        f_start = f_end
    return bands


def top_damage_bands(
    points: Sequence[PsdPoint],
    count: int = 3,
    band_count: int = DEFAULT_BAND_COUNT
) -> List[DamageBand]:
    """Highest-scoring bands, best first."""
    bands = build_bands(points, band_count)
    return sorted(bands, key=lambda b: b.score, reverse=True)[:max(0, count)]
