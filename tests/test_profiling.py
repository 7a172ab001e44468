"""Tests for portfolio_builder.analysis.profiling -- investor archetypes and commentary."""

import pytest

from portfolio_builder.analysis.profiling import (
    LOW_SHARPE_INSIGHT,
    UNDEFINED_SHARPE_INSIGHT,
    InvestorType,
    classify_investor,
    sharpe_insight,
)
from portfolio_builder.models import Objective, RiskProfile


def _profile(tol, horizon, objective):
    return RiskProfile(
        investment_amount=10_000.0, horizon_years=horizon,
        risk_tolerance=tol, objective=objective,
    )


class TestClassifyInvestor:

    @pytest.mark.parametrize("tol,horizon,objective,expected", [
        (0.08, 4, Objective.GROWTH, InvestorType.AGGRESSIVE),
        (0.20, 10, Objective.GROWTH, InvestorType.AGGRESSIVE),
        (0.07, 4, Objective.GROWTH, InvestorType.MODERATE),
        (0.08, 3, Objective.GROWTH, InvestorType.MODERATE),
        (0.10, 5, Objective.BALANCED, InvestorType.MODERATE),
        (0.05, 2, Objective.INCOME, InvestorType.CONSERVATIVE),
        (0.00, 1, Objective.INCOME, InvestorType.CONSERVATIVE),
        (0.06, 2, Objective.INCOME, InvestorType.MODERATE),
        (0.05, 3, Objective.INCOME, InvestorType.MODERATE),
        (0.05, 2, Objective.GROWTH, InvestorType.MODERATE),
    ])
    def test_rules(self, tol, horizon, objective, expected):
        assert classify_investor(_profile(tol, horizon, objective)) is expected

    def test_form_codes(self):
        assert classify_investor(_profile(0.1, 5, "1")) is InvestorType.AGGRESSIVE
        assert classify_investor(_profile(0.03, 1, "2")) is InvestorType.CONSERVATIVE

    def test_display_value(self):
        assert InvestorType.AGGRESSIVE.value == "Aggressive Investor"


class TestObjectiveParse:

    @pytest.mark.parametrize("raw,expected", [
        ("1", Objective.GROWTH), ("2", Objective.INCOME), ("3", Objective.BALANCED),
        ("growth", Objective.GROWTH), ("INCOME", Objective.INCOME),
        (" Balanced ", Objective.BALANCED), (Objective.GROWTH, Objective.GROWTH),
    ])
    def test_accepted_values(self, raw, expected):
        assert Objective.parse(raw) is expected

    def test_unknown_raises(self):
        with pytest.raises(ValueError):
            Objective.parse("speculation")


class TestSharpeInsight:

    def test_tiers(self):
        assert sharpe_insight(2.0).startswith("Excellent")
        assert sharpe_insight(1.2).startswith("Good")
        assert sharpe_insight(0.7).startswith("Moderate")
        assert sharpe_insight(0.2) == LOW_SHARPE_INSIGHT

    def test_boundaries_are_exclusive(self):
        assert sharpe_insight(1.5).startswith("Good")
        assert sharpe_insight(1.0).startswith("Moderate")
        assert sharpe_insight(0.5) == LOW_SHARPE_INSIGHT

    def test_negative(self):
        assert sharpe_insight(-0.4) == LOW_SHARPE_INSIGHT

    def test_undefined(self):
        assert sharpe_insight(None) == UNDEFINED_SHARPE_INSIGHT
