"""BuildContext: state bag passed through every pipeline step, plus the run outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import numpy as np

from portfolio_builder.analysis.base import WeightStrategy
from portfolio_builder.models import InstrumentRecord, PortfolioSummary, RiskProfile


class PortfolioGenerationError(ValueError):
    """A build cannot produce portfolios from the given inputs."""


class EmptyUniverseError(PortfolioGenerationError):
    """No instrument passed validation."""


class NoCandidatesError(PortfolioGenerationError):
    """Ranking left no instrument to build portfolios from."""


@dataclass
class BuildContext:
    """Accumulates derived data as a portfolio build executes."""

    # Input
    universe: list[InstrumentRecord]
    profile: RiskProfile
    strategies: list[WeightStrategy]
    risk_free_rate: float
    top_n: int = 15
    correlation: float = 0.3
    max_workers: int = 1
    run_id: str = field(default_factory=lambda: datetime.now().strftime("%Y%m%d_%H%M%S"))

    # Derived data
    candidates: list[InstrumentRecord] = field(default_factory=list)
    estimates: np.ndarray = field(default_factory=lambda: np.array([], dtype=float))
    selected: list[InstrumentRecord] = field(default_factory=list)
    returns: np.ndarray = field(default_factory=lambda: np.array([], dtype=float))
    covariance: np.ndarray = field(default_factory=lambda: np.zeros((0, 0)))

    # Results
    portfolios: list[PortfolioSummary] = field(default_factory=list)

    # Pipeline metadata
    steps_completed: list[str] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)
    timing: dict[str, float] = field(default_factory=dict)
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def tickers(self) -> list[str]:
        return [r.ticker for r in self.selected]

    @property
    def sectors(self) -> list[str]:
        return [r.sector for r in self.selected]

    @property
    def prices(self) -> list[float]:
        return [r.current_price for r in self.selected]


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a build: all portfolios, or a named failure and none."""

    profile: RiskProfile
    portfolios: tuple[PortfolioSummary, ...] = ()
    error: str | None = None
    error_type: str | None = None
    investor_type: str | None = None
    risk_free_rate: float = 0.0
    run_id: str = ""
    started_at: datetime = field(default_factory=datetime.now)
    timing: dict[str, float] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    def get(self, strategy: str) -> PortfolioSummary | None:
        for p in self.portfolios:
            if p.strategy == strategy:
                return p
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "error_type": self.error_type,
            "run_id": self.run_id,
            "investor_type": self.investor_type,
            "risk_free_rate": self.risk_free_rate,
            "profile": {
                "investment_amount": self.profile.investment_amount,
                "horizon_years": self.profile.horizon_years,
                "risk_tolerance": self.profile.risk_tolerance,
                "objective": self.profile.objective.value,
            },
            "portfolios": [p.to_dict() for p in self.portfolios],
            "timing": self.timing,
        }
