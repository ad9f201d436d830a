"""
Binomial reliability-demonstration sample sizing.

A demonstration test runs ``n`` units and passes when at most ``c`` fail.
Passing demonstrates reliability ``R`` at confidence ``CL`` when a population
with true reliability ``R`` would pass with probability at most ``1 - CL``:

    1 - sum_{i=0..c} C(n, i) (1 - R)^i R^(n - i) >= CL

For ``c = 0`` this reduces to the success-run formula ``n = ln(1 - CL) / ln(R)``.

Reference:
- MIL-HDBK-781A: Reliability test methods
- IEC 61124: Reliability testing - Compliance tests for constant failure rate
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from scipy import optimize

from .types import ReliabilityDemo


logger = logging.getLogger(__name__)

SAMPLE_SIZE_CAP = 100_000

_NEGLIGIBLE_TERM = 1e-17
_CLOSED_FORM_EPS = 1e-9


@dataclass
class SampleSizePlan:
    """Sample-size solution with its solver status.

    Attributes:
        sample_size: Units to test; 0 when not solvable, the cap when not
            converged.
        achieved_confidence: Confidence demonstrated by ``sample_size`` units.
        solvable: False when the reliability target or confidence is outside
            (0, 1).
        converged: False when the cap was reached without meeting the target.
        message: Human-readable status.
    """
    sample_size: int
    achieved_confidence: float
    solvable: bool
    converged: bool
    message: str


def _valid_probability(p: float) -> bool:
    return math.isfinite(p) and 0.0 < p < 1.0


def binomial_cdf(n: int, c: int, r: float) -> float:
    """Probability of at most ``c`` failures in ``n`` trials.

    Terms are built from the first one (``R^n``) by the ratio
    ``(n - i)(1 - R) / ((i + 1) R)``, carried in log space so large ``n`` does
    not underflow.

    Args:
        n: Number of units.
        c: Allowed failures.
        r: Per-unit reliability.

    Returns:
        Probability clamped to [0, 1].
    """
    if n <= 0 or c >= n:
        return 1.0
    if c < 0:
        return 0.0
    if r >= 1.0:
        return 1.0
    if r <= 0.0:
        return 0.0

    log_ratio = math.log1p(-r) - math.log(r)
    log_term = n * math.log(r)
    log_sum = log_term
    mode = (n + 1) * (1.0 - r)
    for i in range(c):
        log_term += math.log((n - i) / (i + 1)) + log_ratio
        if not math.isfinite(log_term):
            break
        log_sum = max(log_sum, log_term) + math.log1p(math.exp(-abs(log_sum - log_term)))
        if i + 1 > mode and log_term - log_sum < math.log(_NEGLIGIBLE_TERM):
            break
    return min(1.0, max(0.0, math.exp(log_sum)))


def achieved_confidence(n: int, c: int, r: float) -> float:
    """Confidence that passing ``n`` units with at most ``c`` failures demonstrates ``r``."""
    if n <= 0 or not _valid_probability(r):
        return 0.0
    return min(1.0, max(0.0, 1.0 - binomial_cdf(n, c, r)))


def solve_sample_size(r_target: float, cl: float, c_allowed: int, cap: int = SAMPLE_SIZE_CAP) -> int:
    """Smallest ``n`` whose demonstrated confidence reaches ``cl``.

    Args:
        r_target: Reliability to demonstrate, in (0, 1).
        cl: Confidence level, in (0, 1).
        c_allowed: Allowed failures (negative values count as 0).
        cap: Upper bound of the search.

    Returns:
        Sample size; 0 for a target or confidence outside (0, 1), ``cap``
        when the target cannot be met within the cap.

    Examples:
        >>> solve_sample_size(0.90, 0.95, 0)
        29
    """
    if not _valid_probability(r_target) or not _valid_probability(cl):
        return 0
    c = max(0, int(c_allowed))

    if c == 0:
        n = math.ceil(math.log(1.0 - cl) / math.log(r_target) - _CLOSED_FORM_EPS)
        return min(max(1, n), cap)

    lo = max(1, c)
    if achieved_confidence(cap, c, r_target) < cl:
        logger.warning(f"Sample size cap {cap} reached for R={r_target}, CL={cl}, c={c}")
        return cap
    # confidence is non-decreasing in n, so bisection finds the first n
    hi = cap
    while lo < hi:
        mid = (lo + hi) // 2
        if achieved_confidence(mid, c, r_target) >= cl:
            hi = mid
        else:
            lo = mid + 1
    return lo


def plan_sample_size(demo: ReliabilityDemo, cap: int = SAMPLE_SIZE_CAP) -> SampleSizePlan:
    """Solve the sample size for a ``ReliabilityDemo`` and report solver status."""
    if not _valid_probability(demo.r_target) or not _valid_probability(demo.cl):
        return SampleSizePlan(
            sample_size=0,
            achieved_confidence=0.0,
            solvable=False,
            converged=False,
            message="Reliability target and confidence must both be between 0 and 1",
        )

    c = max(0, int(demo.c_allowed))
    n = solve_sample_size(demo.r_target, demo.cl, c, cap)
    confidence = achieved_confidence(n, c, demo.r_target)
    converged = confidence >= demo.cl - 1e-12
    if converged:
        message = f"Test {n} units with at most {c} failure(s)"
    else:
        message = f"No sample size up to {cap} meets the confidence target"
    return SampleSizePlan(
        sample_size=n,
        achieved_confidence=confidence,
        solvable=True,
        converged=converged,
        message=message,
    )


def solve_demonstrated_reliability(n: int, c: int, cl: float) -> Optional[float]:
    """Reliability demonstrated at confidence ``cl`` by ``n`` units with ``c`` failures.

    Returns:
        Reliability in (0, 1), or None when no solution can be bracketed.
    """
    if n <= 0 or c < 0 or c >= n or not _valid_probability(cl):
        return None
    if c == 0:
        return (1.0 - cl) ** (1.0 / n)

    def objective(r: float) -> float:
        return achieved_confidence(n, c, r) - cl

    lo, hi = 1e-12, 1.0 - 1e-12
    f_lo, f_hi = objective(lo), objective(hi)
    if not (math.isfinite(f_lo) and math.isfinite(f_hi)) or f_lo * f_hi > 0:
        logger.debug(f"Reliability root not bracketed for n={n}, c={c}, CL={cl}")
        return None
    try:
        return optimize.brentq(objective, lo, hi, xtol=1e-12)
    except (ValueError, RuntimeError) as e:
        logger.debug(f"Reliability root finding failed: {e}")
        return None


def confidence_curve(
    c: int,
    r: float,
    n_center: int,
    spread: float = 0.2,
    max_points: int = 50
) -> List[Tuple[int, float]]:
    """``(n, confidence)`` pairs around ``n_center`` for charting."""
    if n_center <= 0 or not _valid_probability(r):
        return []
    lo = max(1, int(math.floor(n_center * (1.0 - spread))))
    hi = max(lo, int(math.ceil(n_center * (1.0 + spread))))
    step = max(1, (hi - lo) // max(1, max_points - 1))
    return [(n, achieved_confidence(n, c, r)) for n in range(lo, hi + 1, step)]
