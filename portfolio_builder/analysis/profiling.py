"""Investor archetype classification and portfolio commentary.

Display-only helpers: nothing here feeds back into the numeric pipeline.
"""

from __future__ import annotations

from enum import Enum

from portfolio_builder.models import Objective, RiskProfile

AGGRESSIVE_MIN_TOLERANCE = 0.08
AGGRESSIVE_MIN_HORIZON = 4
CONSERVATIVE_MAX_TOLERANCE = 0.05
CONSERVATIVE_MAX_HORIZON = 2

# (minimum Sharpe, commentary), checked top-down
SHARPE_INSIGHTS: list[tuple[float, str]] = [
    (1.5, "Excellent risk-adjusted return. Strong portfolio performance expected."),
    (1.0, "Good risk-return tradeoff. Solid investment strategy."),
    (0.5, "Moderate performance expected. Consider risk optimization."),
]
LOW_SHARPE_INSIGHT = "Lower risk-adjusted returns. Review strategy for better optimization."
UNDEFINED_SHARPE_INSIGHT = (
    "Risk-adjusted return is undefined: the portfolio carries no measured risk."
)


class InvestorType(str, Enum):
    AGGRESSIVE = "Aggressive Investor"
    CONSERVATIVE = "Conservative Investor"
    MODERATE = "Moderate Investor"


def classify_investor(profile: RiskProfile) -> InvestorType:
    """Rule-based archetype from tolerance, horizon and objective."""
    tol = round(profile.risk_tolerance, 6)
    if (
        tol >= AGGRESSIVE_MIN_TOLERANCE
        and profile.horizon_years >= AGGRESSIVE_MIN_HORIZON
        and profile.objective is Objective.GROWTH
    ):
        return InvestorType.AGGRESSIVE
    if (
        tol <= CONSERVATIVE_MAX_TOLERANCE
        and profile.horizon_years <= CONSERVATIVE_MAX_HORIZON
        and profile.objective is Objective.INCOME
    ):
        return InvestorType.CONSERVATIVE
    return InvestorType.MODERATE


def sharpe_insight(sharpe: float | None) -> str:
    if sharpe is None:
        return UNDEFINED_SHARPE_INSIGHT
    for threshold, text in SHARPE_INSIGHTS:
        if sharpe > threshold:
            return text
    return LOW_SHARPE_INSIGHT
