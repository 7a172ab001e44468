"""Shared pytest fixtures for the Portfolio Builder test suite.

Provides small synthetic instrument universes with deterministic price
paths. All fixtures are independent of the filesystem except where
``tmp_path`` is requested.
"""

import numpy as np
import pandas as pd
import pytest

from portfolio_builder.models import InstrumentRecord, Objective, RiskProfile


def month_labels(n, start="2025-01"):
    """``n`` consecutive YYYY-MM labels."""
    return [p.strftime("%Y-%m") for p in pd.period_range(start=start, periods=n, freq="M")]


def _make_record(ticker, price, vol=0.2, sector="Tech", prices=None, n_months=36, growth=0.0):
    """InstrumentRecord with an explicit or geometric monthly price path.

    ``growth`` is the monthly compounding rate used when ``prices`` is None.
    """
    if prices is None:
        prices = [price * (1 + growth) ** (i + 1) for i in range(n_months)]
    labels = month_labels(len(prices))
    return InstrumentRecord(
        ticker=ticker,
        sector=sector,
        current_price=float(price),
        volatility=float(vol),
        history=tuple(zip(labels, (float(p) for p in prices))),
    )


# ---------------------------------------------------------------------------
# 1. Instrument universe fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def flat_record():
    """Price path equal to the current price: expected return exactly 0."""
    return _make_record("FLAT", 100.0, prices=[100.0] * 36)


@pytest.fixture
def sample_universe():
    """Five instruments across three sectors with distinct growth rates."""
    return [
        _make_record("AAA", 100.0, vol=0.18, sector="Banking", growth=0.010),
        _make_record("BBB", 250.0, vol=0.22, sector="Banking", growth=0.004),
        _make_record("CCC", 40.0, vol=0.30, sector="Energy", growth=0.015),
        _make_record("DDD", 1200.0, vol=0.15, sector="Pharma", growth=0.002),
        _make_record("EEE", 75.0, vol=0.25, sector="Energy", growth=-0.003),
    ]


@pytest.fixture
def large_universe():
    """Twenty instruments with seeded random growth rates and volatilities."""
    np.random.seed(42)
    growth = np.random.uniform(-0.005, 0.02, 20)
    vols = np.random.uniform(0.1, 0.4, 20)
    prices = np.random.uniform(20, 2000, 20)
    return [
        _make_record(f"T{i:02d}", round(prices[i], 2), vol=vols[i],
                     sector=f"S{i % 4}", growth=growth[i])
        for i in range(20)
    ]


# ---------------------------------------------------------------------------
# 2. Investor profile fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def profile():
    return RiskProfile(
        investment_amount=100_000.0,
        horizon_years=3,
        risk_tolerance=0.1,
        objective=Objective.GROWTH,
    )


@pytest.fixture
def small_profile():
    return RiskProfile(investment_amount=1_000.0, horizon_years=1, risk_tolerance=0.05)


# ---------------------------------------------------------------------------
# 3. CSV fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def universe_csv(tmp_path):
    """Universe CSV with one good row per sector plus malformed rows.

    Month columns are deliberately written out of chronological order.
    """
    path = tmp_path / "universe.csv"
    path.write_text(
        "Sector,Ticker,Current Price,Std Dev (%),2025-02,2025-01,2025-03\n"
        "Banking,AAA,100,20,110,105,115\n"
        "Energy,BBB,50,35.5,52,,54\n"
        ",CCC,10,10,11,11,11\n"
        "Energy,,20,15,21,21,21\n"
        "Pharma,BADPRICE,abc,12,1,1,1\n"
        "Pharma,ZEROPRICE,0,12,1,1,1\n"
        "Pharma,NOVOL,30,,31,31,31\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def make_record():
    """Factory fixture for ad-hoc InstrumentRecords."""
    return _make_record
