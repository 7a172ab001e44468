"""Convert fractional weights into whole-share purchases.

Two passes:

1. Each instrument gets ``floor(weight * capital / price)`` shares.
2. Leftover cash is spent greedily: scan instruments from cheapest to most
   expensive, buy one share of the first one that is affordable, and restart
   the scan.  The fill stops once the leftover cannot buy the cheapest
   instrument.

Leftover strictly decreases by at least the cheapest positive price per
iteration, so the fill always terminates.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from portfolio_builder.models import AllocationPlan
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("allocation")


def _initial_shares(weights: np.ndarray, prices: np.ndarray, capital: float) -> list[int]:
    shares = []
    for w, price in zip(weights, prices):
        if price <= 0 or not math.isfinite(price) or w <= 0:
            shares.append(0)
            continue
        shares.append(int(math.floor(w * capital / price)))
    return shares


def allocate_shares(
    weights: Sequence[float],
    prices: Sequence[float],
    capital: float,
) -> AllocationPlan:
    """Allocate *capital* across instruments according to *weights*.

    Args:
        weights: Target weight per instrument (sums to 1).
        prices: Current price per instrument, aligned with *weights*.
        capital: Amount to invest.

    Returns:
        AllocationPlan with share counts, spend per instrument and leftover cash.
    """
    w = np.asarray(weights, dtype=float).reshape(-1)
    p = np.asarray(prices, dtype=float).reshape(-1)
    if w.size != p.size:
        raise ValueError(f"weights ({w.size}) and prices ({p.size}) must be the same length")

    n = p.size
    if n == 0 or not math.isfinite(capital) or capital <= 0:
        return AllocationPlan(shares=(0,) * n, spend=(0.0,) * n, leftover=float(capital))

    buyable = [i for i in range(n) if math.isfinite(p[i]) and p[i] > 0]
    if not buyable:
        logger.warning("No instrument has a positive price; nothing allocated")
        return AllocationPlan(shares=(0,) * n, spend=(0.0,) * n, leftover=float(capital))

    shares = _initial_shares(w, p, capital)
    spend = [shares[i] * float(p[i]) for i in range(n)]
    leftover = capital - sum(spend)

    # ascending price, stable on ties so the earlier instrument wins
    ascending = sorted(buyable, key=lambda i: p[i])
    cheapest = float(p[ascending[0]])

    fills = 0
    while leftover >= cheapest:
        for i in ascending:
            if leftover >= p[i]:
                shares[i] += 1
                spend[i] += float(p[i])
                leftover -= float(p[i])
                fills += 1
                break

    if fills:
        logger.debug("Greedy fill bought %d extra share(s); leftover %.2f", fills, leftover)

    return AllocationPlan(shares=tuple(shares), spend=tuple(spend), leftover=float(leftover))
