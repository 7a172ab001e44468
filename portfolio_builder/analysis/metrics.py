"""Portfolio-level performance and risk metrics."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from portfolio_builder.analysis.risk import portfolio_volatility
from portfolio_builder.models import AllocationPlan, PortfolioSummary
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("metrics")

# One-tailed 95% z-score for parametric VaR
VAR_Z_95 = 1.645


def expected_portfolio_return(weights: np.ndarray, returns: np.ndarray) -> float:
    return float(np.asarray(weights, dtype=float) @ np.asarray(returns, dtype=float))


def sharpe_ratio(portfolio_return: float, risk: float, risk_free_rate: float) -> float | None:
    """Excess return per unit of risk; ``None`` when risk is zero or non-finite."""
    if not math.isfinite(risk) or risk <= 0.0:
        return None
    ratio = (portfolio_return - risk_free_rate) / risk
    return ratio if math.isfinite(ratio) else None


def value_at_risk(capital: float, portfolio_return: float, risk: float, z: float = VAR_Z_95) -> float:
    """Parametric VaR: capital * |mu - z * sigma|."""
    return capital * abs(portfolio_return - z * risk)


def future_value(capital: float, portfolio_return: float, horizon_years: int) -> float:
    """capital * (1 + r) ** H, compounded once over the whole horizon."""
    return capital * (1.0 + portfolio_return) ** horizon_years


def percent_of_capital(spend: Sequence[float], capital: float) -> tuple[float, ...]:
    if capital <= 0:
        return tuple(0.0 for _ in spend)
    return tuple(amount / capital * 100.0 for amount in spend)


def sector_exposure(
    sectors: Sequence[str], spend: Sequence[float], capital: float
) -> dict[str, float]:
    """Percent of capital spent per sector, omitting sectors with no exposure."""
    exposure: dict[str, float] = {}
    if capital <= 0:
        return exposure
    for sector, amount in zip(sectors, spend):
        exposure[sector] = exposure.get(sector, 0.0) + amount / capital * 100.0
    return {k: v for k, v in exposure.items() if v > 0}


def summarize_portfolio(
    strategy: str,
    weights: np.ndarray,
    returns: np.ndarray,
    covariance: np.ndarray,
    plan: AllocationPlan,
    tickers: Sequence[str],
    sectors: Sequence[str],
    prices: Sequence[float],
    capital: float,
    horizon_years: int,
    risk_free_rate: float,
) -> PortfolioSummary:
    """Aggregate one strategy's weights and allocation into a PortfolioSummary."""
    w = np.asarray(weights, dtype=float)
    port_ret = expected_portfolio_return(w, returns)
    risk = portfolio_volatility(w, covariance)
    sharpe = sharpe_ratio(port_ret, risk, risk_free_rate)
    if sharpe is None:
        logger.debug("%s: zero portfolio risk, Sharpe ratio undefined", strategy)

    return PortfolioSummary(
        strategy=strategy,
        tickers=tuple(tickers),
        sectors=tuple(sectors),
        weights=tuple(float(x) for x in w),
        prices=tuple(float(x) for x in prices),
        shares=plan.shares,
        spend=plan.spend,
        percent_invested=percent_of_capital(plan.spend, capital),
        expected_return=port_ret,
        risk=risk,
        sharpe_ratio=sharpe,
        var_95=value_at_risk(capital, port_ret, risk),
        future_value=future_value(capital, port_ret, horizon_years),
        sector_exposure=sector_exposure(sectors, plan.spend, capital),
        uninvested=plan.leftover,
    )
