"""Built-in pipeline steps: filter, estimate, rank, covariance, build.

Each step is a function: (BuildContext) -> None
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from portfolio_builder.analysis.allocation import allocate_shares
from portfolio_builder.analysis.base import WeightStrategy
from portfolio_builder.analysis.metrics import summarize_portfolio
from portfolio_builder.analysis.returns import estimate_expected_returns
from portfolio_builder.analysis.risk import build_covariance
from portfolio_builder.models import PortfolioSummary
from portfolio_builder.pipeline.context import (
    BuildContext,
    EmptyUniverseError,
    NoCandidatesError,
)
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("steps")


# ============================================================
# PREPARE STEPS
# ============================================================

def filter_instruments(ctx: BuildContext) -> None:
    """Keep instruments with a positive price and a usable volatility."""
    ctx.candidates = [r for r in ctx.universe if r.is_valid]
    dropped = len(ctx.universe) - len(ctx.candidates)
    if dropped:
        logger.info("Dropped %d invalid instrument(s)", dropped)
    if not ctx.candidates:
        raise EmptyUniverseError("No valid instrument data available")


def estimate_returns(ctx: BuildContext) -> None:
    """Annualised expected return for every candidate."""
    ctx.estimates = estimate_expected_returns(ctx.candidates, ctx.profile.horizon_years)


def select_top_instruments(ctx: BuildContext) -> None:
    """Rank candidates by expected return (descending) and keep the top N."""
    finite = [i for i, est in enumerate(ctx.estimates) if np.isfinite(est)]
    # sorted() is stable: ties keep universe order
    ranked = sorted(finite, key=lambda i: -ctx.estimates[i])[: max(ctx.top_n, 0)]
    if not ranked:
        raise NoCandidatesError("Unable to find suitable instruments for a portfolio")

    ctx.selected = [ctx.candidates[i] for i in ranked]
    ctx.returns = np.array([ctx.estimates[i] for i in ranked], dtype=float)
    logger.info("Selected %d instrument(s): %s", len(ctx.selected), ", ".join(ctx.tickers))


def estimate_covariance(ctx: BuildContext) -> None:
    """Uniform-correlation covariance for the selected instruments."""
    ctx.covariance = build_covariance(
        [r.volatility for r in ctx.selected], correlation=ctx.correlation,
    )


# ============================================================
# BUILD STEP
# ============================================================

def build_portfolio(ctx: BuildContext, strategy: WeightStrategy) -> PortfolioSummary:
    """Weights -> share allocation -> metrics for one strategy."""
    weights = strategy(ctx.returns, ctx.covariance)
    plan = allocate_shares(weights, ctx.prices, ctx.profile.investment_amount)
    return summarize_portfolio(
        strategy.name,
        weights,
        ctx.returns,
        ctx.covariance,
        plan,
        tickers=ctx.tickers,
        sectors=ctx.sectors,
        prices=ctx.prices,
        capital=ctx.profile.investment_amount,
        horizon_years=ctx.profile.horizon_years,
        risk_free_rate=ctx.risk_free_rate,
    )


def build_strategy_portfolios(ctx: BuildContext) -> None:
    """Run every strategy; results keep the strategy order."""
    if ctx.max_workers > 1 and len(ctx.strategies) > 1:
        with ThreadPoolExecutor(max_workers=ctx.max_workers) as executor:
            portfolios = list(executor.map(lambda s: build_portfolio(ctx, s), ctx.strategies))
    else:
        portfolios = [build_portfolio(ctx, s) for s in ctx.strategies]

    for p in portfolios:
        logger.info(
            "%s: return=%.4f risk=%.4f holdings=%d uninvested=%.2f",
            p.strategy, p.expected_return, p.risk, p.holdings_count, p.uninvested,
        )
    ctx.portfolios = portfolios


DEFAULT_STEPS = [
    filter_instruments,
    estimate_returns,
    select_top_instruments,
    estimate_covariance,
    build_strategy_portfolios,
]
