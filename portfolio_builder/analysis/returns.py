"""Expected-return estimation from monthly price history.

Each instrument's forward return is the annualised growth (CAGR) from the
current price to the average price sampled over the holding horizon:

    avg_future = mean(valid prices in the first H * 12 monthly observations)
    cagr       = (avg_future / current_price) ** (1 / H) - 1

Every invalid case degrades to 0.0; the estimator never raises.
"""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from portfolio_builder.models import InstrumentRecord
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("returns")

MONTHS_PER_YEAR = 12


def _valid_prices(prices: Iterable[float]) -> np.ndarray:
    arr = np.asarray(list(prices), dtype=float)
    return arr[np.isfinite(arr) & (arr > 0)]


def estimate_expected_return(record: InstrumentRecord, horizon_years: int) -> float:
    """Annualised expected return for one instrument over *horizon_years*."""
    price = record.current_price
    if price is None or not math.isfinite(price) or price <= 0 or horizon_years < 1:
        return 0.0

    samples = _valid_prices(record.window(horizon_years * MONTHS_PER_YEAR))
    if samples.size == 0:
        logger.debug("%s: no valid prices within %d-year window", record.ticker, horizon_years)
        return 0.0

    avg_future = float(samples.mean())
    with np.errstate(all="ignore"):
        cagr = float(np.power(avg_future / price, 1.0 / horizon_years) - 1.0)

    if not math.isfinite(cagr):
        logger.debug("%s: non-finite CAGR coerced to 0", record.ticker)
        return 0.0
    return cagr


def estimate_expected_returns(
    records: Iterable[InstrumentRecord], horizon_years: int
) -> np.ndarray:
    """Vector of expected returns aligned with *records*."""
    return np.array(
        [estimate_expected_return(r, horizon_years) for r in records], dtype=float
    )
