"""PortfolioEngine: orchestrates step execution for a portfolio build."""

from __future__ import annotations

import time
from typing import Callable, Sequence

from portfolio_builder.analysis.base import WeightStrategy
from portfolio_builder.analysis.profiling import classify_investor
from portfolio_builder.analysis.risk import DEFAULT_CORRELATION
from portfolio_builder.analysis.strategies import compat_strategies
from portfolio_builder.models import InstrumentRecord, RiskProfile
from portfolio_builder.pipeline.context import (
    BuildContext,
    GenerationResult,
    PortfolioGenerationError,
)
from portfolio_builder.pipeline.steps import DEFAULT_STEPS
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("pipeline")

PipelineStep = Callable[[BuildContext], None]

DEFAULT_RISK_FREE_RATE = 0.0698
DEFAULT_TOP_N = 15


class PortfolioEngine:
    """Executes an ordered list of pipeline steps against a context.

    The first failing step aborts the run; the result then carries the
    error and no portfolios.
    """

    def __init__(self, steps: Sequence[PipelineStep] | None = None) -> None:
        self.steps = list(steps) if steps is not None else list(DEFAULT_STEPS)

    @staticmethod
    def _step_name(step: PipelineStep) -> str:
        return getattr(step, "__name__", step.__class__.__name__)

    def _failure(self, ctx: BuildContext, step_name: str, exc: Exception) -> GenerationResult:
        ctx.errors.append({"step": step_name, "error": str(exc)})
        return GenerationResult(
            profile=ctx.profile,
            error=str(exc),
            error_type=exc.__class__.__name__,
            investor_type=classify_investor(ctx.profile).value,
            risk_free_rate=ctx.risk_free_rate,
            run_id=ctx.run_id,
            started_at=ctx.started_at,
            timing=dict(ctx.timing),
        )

    def run(self, ctx: BuildContext) -> GenerationResult:
        """Execute all steps and package the outcome."""
        logger.info(
            "Pipeline started: run=%s universe=%d strategies=%d",
            ctx.run_id, len(ctx.universe), len(ctx.strategies),
        )
        pipeline_start = time.monotonic()

        for i, step in enumerate(self.steps, 1):
            step_name = self._step_name(step)
            logger.info("[%d/%d] Running: %s", i, len(self.steps), step_name)
            start = time.monotonic()
            try:
                step(ctx)
            except PortfolioGenerationError as e:
                ctx.timing[step_name] = round(time.monotonic() - start, 4)
                logger.error("Step %s failed: %s", step_name, e)
                return self._failure(ctx, step_name, e)
            except Exception as e:
                ctx.timing[step_name] = round(time.monotonic() - start, 4)
                logger.exception("Step %s raised unexpectedly", step_name)
                return self._failure(ctx, step_name, e)
            ctx.timing[step_name] = round(time.monotonic() - start, 4)
            ctx.steps_completed.append(step_name)

        ctx.timing["total"] = round(time.monotonic() - pipeline_start, 4)
        logger.info("Pipeline completed in %.3fs: %d portfolio(s)", ctx.timing["total"], len(ctx.portfolios))

        return GenerationResult(
            profile=ctx.profile,
            portfolios=tuple(ctx.portfolios),
            investor_type=classify_investor(ctx.profile).value,
            risk_free_rate=ctx.risk_free_rate,
            run_id=ctx.run_id,
            started_at=ctx.started_at,
            timing=dict(ctx.timing),
        )


def build_portfolios(
    universe: Sequence[InstrumentRecord],
    profile: RiskProfile,
    *,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    top_n: int = DEFAULT_TOP_N,
    correlation: float = DEFAULT_CORRELATION,
    strategies: Sequence[WeightStrategy] | None = None,
    max_workers: int = 1,
) -> GenerationResult:
    """Build one portfolio per strategy for *profile* from *universe*.

    Args:
        universe: Candidate instruments.
        profile: Investor inputs (capital, horizon, tolerance, objective).
        risk_free_rate: Annual rate used for Sharpe ratios.
        top_n: Number of highest-return instruments to invest in.
        correlation: Uniform pairwise correlation for the covariance model.
        strategies: Allocation strategies in reporting order. Defaults to the
            minimum-variance / return-weighted / risk-parity set.
        max_workers: Thread-pool size for evaluating strategies (1 = serial).

    Returns:
        GenerationResult holding every portfolio, or an error and none.
    """
    ctx = BuildContext(
        universe=list(universe),
        profile=profile,
        strategies=list(strategies) if strategies is not None else compat_strategies(),
        risk_free_rate=risk_free_rate,
        top_n=top_n,
        correlation=correlation,
        max_workers=max_workers,
    )
    return PortfolioEngine().run(ctx)
