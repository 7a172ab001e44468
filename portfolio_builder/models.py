"""Domain records shared by the estimators, allocator and pipeline.

Every record is immutable: each stage of a portfolio build produces new
records rather than updating earlier ones.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class Objective(str, Enum):
    """Investment objective chosen during profiling."""

    GROWTH = "Growth"
    INCOME = "Income"
    BALANCED = "Balanced"

    @classmethod
    def parse(cls, value: str | Objective) -> Objective:
        """Accept enum members, names (``"growth"``) or form codes (``"1"``)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        codes = {"1": cls.GROWTH, "2": cls.INCOME, "3": cls.BALANCED}
        if text in codes:
            return codes[text]
        for member in cls:
            if text.lower() == member.value.lower():
                return member
        raise ValueError(f"Unknown investment objective: {value!r}")


@dataclass(frozen=True)
class InstrumentRecord:
    """One row of the instrument universe.

    ``history`` is an ordered sequence of ``(YYYY-MM, price)`` pairs sorted
    chronologically. Missing observations may be NaN.
    """

    ticker: str
    sector: str
    current_price: float
    volatility: float
    history: tuple[tuple[str, float], ...] = ()

    @property
    def is_valid(self) -> bool:
        """Positive finite price and finite non-negative volatility."""
        return (
            math.isfinite(self.current_price)
            and self.current_price > 0
            and math.isfinite(self.volatility)
            and self.volatility >= 0
        )

    def window(self, months: int) -> list[float]:
        """Prices of the first *months* observations, gaps included."""
        return [price for _, price in self.history[:max(months, 0)]]


@dataclass(frozen=True)
class RiskProfile:
    """Investor inputs for a single portfolio build."""

    investment_amount: float
    horizon_years: int
    risk_tolerance: float
    objective: Objective = Objective.BALANCED

    def __post_init__(self) -> None:
        if not (math.isfinite(self.investment_amount) and self.investment_amount > 0):
            raise ValueError("investment_amount must be a positive number")
        if int(self.horizon_years) != self.horizon_years or self.horizon_years < 1:
            raise ValueError("horizon_years must be a whole number >= 1")
        if not 0.0 <= self.risk_tolerance <= 0.2:
            raise ValueError("risk_tolerance must be between 0.0 and 0.2")
        object.__setattr__(self, "horizon_years", int(self.horizon_years))
        object.__setattr__(self, "objective", Objective.parse(self.objective))


@dataclass(frozen=True)
class AllocationPlan:
    """Integer-share purchase plan produced by the allocator."""

    shares: tuple[int, ...]
    spend: tuple[float, ...]
    leftover: float

    @property
    def invested(self) -> float:
        return float(sum(self.spend))


@dataclass(frozen=True)
class PortfolioSummary:
    """Complete output for one allocation strategy.

    ``sharpe_ratio`` is ``None`` when portfolio risk is zero and the
    risk-adjusted return is undefined.
    """

    strategy: str
    tickers: tuple[str, ...]
    sectors: tuple[str, ...]
    weights: tuple[float, ...]
    prices: tuple[float, ...]
    shares: tuple[int, ...]
    spend: tuple[float, ...]
    percent_invested: tuple[float, ...]
    expected_return: float
    risk: float
    sharpe_ratio: float | None
    var_95: float
    future_value: float
    sector_exposure: dict[str, float] = field(default_factory=dict)
    uninvested: float = 0.0

    @property
    def sharpe_defined(self) -> bool:
        return self.sharpe_ratio is not None

    @property
    def holdings_count(self) -> int:
        return sum(1 for qty in self.shares if qty > 0)

    def holdings(self) -> list[dict[str, Any]]:
        """Rows for instruments that received at least one share."""
        rows = []
        for i, ticker in enumerate(self.tickers):
            if self.shares[i] <= 0:
                continue
            rows.append({
                "ticker": ticker,
                "sector": self.sectors[i],
                "weight": self.weights[i],
                "price": self.prices[i],
                "shares": self.shares[i],
                "spend": self.spend[i],
                "percent_invested": self.percent_invested[i],
            })
        return rows

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["holdings_count"] = self.holdings_count
        return data
