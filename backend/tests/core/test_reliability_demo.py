"""
Unit tests for reliability demonstration and sample sizing.

Tests cover:
- Binomial CDF against scipy.stats
- Closed-form zero-failure sample sizes
- Minimality and inverse consistency of the solver
- Cap and invalid-input handling
"""

import math

import pytest
from numpy.testing import assert_allclose
from scipy import stats

from vibration_wizard.core.reliability_demo import (
    achieved_confidence,
    binomial_cdf,
    confidence_curve,
    plan_sample_size,
    solve_demonstrated_reliability,
    solve_sample_size,
)
from vibration_wizard.core.types import ReliabilityDemo


class TestBinomialCdf:
    """Test the failure-count CDF."""

    @pytest.mark.parametrize("n,c,r", [
        (10, 0, 0.9),
        (29, 1, 0.9),
        (50, 3, 0.95),
        (200, 5, 0.99),
        (1000, 20, 0.98),
    ])
    def test_matches_scipy(self, n, c, r):
        assert_allclose(binomial_cdf(n, c, r), stats.binom.cdf(c, n, 1 - r), rtol=1e-9)

    def test_large_n_stays_finite(self):
        value = binomial_cdf(100_000, 50, 0.999)
        assert 0.0 <= value <= 1.0
        assert_allclose(value, stats.binom.cdf(50, 100_000, 0.001), rtol=1e-6, atol=1e-12)

    def test_edges(self):
        assert binomial_cdf(0, 0, 0.9) == 1.0
        assert binomial_cdf(5, 5, 0.9) == 1.0
        assert binomial_cdf(5, -1, 0.9) == 0.0


class TestSolveSampleSize:
    """Test minimum sample size."""

    def test_classic_zero_failure_case(self):
        assert solve_sample_size(0.90, 0.95, 0) == 29

    @pytest.mark.parametrize("r,cl,expected", [
        (0.90, 0.90, 22),
        (0.95, 0.90, 45),
        (0.99, 0.90, 230),
        (0.90, 0.50, 7),
    ])
    def test_zero_failure_closed_form(self, r, cl, expected):
        assert solve_sample_size(r, cl, 0) == expected

    @pytest.mark.parametrize("r,cl,c", [
        (0.90, 0.90, 0),
        (0.90, 0.90, 1),
        (0.90, 0.95, 2),
        (0.95, 0.80, 3),
        (0.99, 0.90, 1),
    ])
    def test_minimal_n(self, r, cl, c):
        n = solve_sample_size(r, cl, c)
        assert 1 - stats.binom.cdf(c, n, 1 - r) >= cl - 1e-12
        assert 1 - stats.binom.cdf(c, n - 1, 1 - r) < cl

    def test_one_failure_case(self):
        assert solve_sample_size(0.90, 0.90, 1) == 38

    def test_more_failures_need_more_units(self):
        sizes = [solve_sample_size(0.9, 0.9, c) for c in range(5)]
        assert sizes == sorted(sizes)
        assert len(set(sizes)) == 5

    @pytest.mark.parametrize("r,cl", [(0.0, 0.9), (1.0, 0.9), (0.9, 0.0), (0.9, 1.0), (math.nan, 0.9)])
    def test_invalid_probabilities(self, r, cl):
        assert solve_sample_size(r, cl, 0) == 0

    def test_cap_reached(self):
        assert solve_sample_size(0.9999, 0.99, 5, cap=100) == 100

    def test_negative_failures_treated_as_zero(self):
        assert solve_sample_size(0.9, 0.95, -2) == 29


class TestPlanSampleSize:
    """Test the solver status wrapper."""

    def test_converged(self):
        plan = plan_sample_size(ReliabilityDemo(0.9, 0.95, 0))
        assert plan.sample_size == 29
        assert plan.solvable
        assert plan.converged
        assert plan.achieved_confidence >= 0.95

    def test_not_converged_at_cap(self):
        plan = plan_sample_size(ReliabilityDemo(0.9999, 0.99, 5), cap=100)
        assert plan.sample_size == 100
        assert plan.solvable
        assert not plan.converged
        assert "100" in plan.message

    def test_unsolvable(self):
        plan = plan_sample_size(ReliabilityDemo(1.2, 0.9, 0))
        assert plan.sample_size == 0
        assert not plan.solvable


class TestInverse:
    """Test demonstrated reliability and confidence."""

    def test_zero_failure_closed_form(self):
        assert_allclose(solve_demonstrated_reliability(29, 0, 0.95), 0.05 ** (1 / 29))

    @pytest.mark.parametrize("n,c,cl", [(38, 1, 0.9), (100, 3, 0.95), (61, 2, 0.8)])
    def test_inverse_round_trip(self, n, c, cl):
        r = solve_demonstrated_reliability(n, c, cl)
        assert r is not None
        assert_allclose(achieved_confidence(n, c, r), cl, atol=1e-9)

    def test_solver_and_inverse_agree(self):
        n = solve_sample_size(0.9, 0.9, 2)
        assert solve_demonstrated_reliability(n, 2, 0.9) >= 0.9
        assert solve_demonstrated_reliability(n - 1, 2, 0.9) < 0.9

    @pytest.mark.parametrize("n,c,cl", [(0, 0, 0.9), (5, 5, 0.9), (5, 0, 1.0), (5, -1, 0.9)])
    def test_no_solution(self, n, c, cl):
        assert solve_demonstrated_reliability(n, c, cl) is None

    def test_achieved_confidence_increases_with_n(self):
        values = [achieved_confidence(n, 1, 0.9) for n in range(2, 60)]
        assert all(b >= a for a, b in zip(values, values[1:]))

    def test_achieved_confidence_invalid(self):
        assert achieved_confidence(0, 0, 0.9) == 0.0
        assert achieved_confidence(10, 0, 1.5) == 0.0


class TestConfidenceCurve:

    def test_curve_around_centre(self):
        points = confidence_curve(0, 0.9, 29)
        ns = [n for n, _ in points]
        assert ns[0] <= 29 <= ns[-1]
        assert all(0 <= conf <= 1 for _, conf in points)

    def test_curve_invalid(self):
        assert confidence_curve(0, 0.9, 0) == []
