"""Instrument universe loader - CSV with monthly price columns.

Expected columns:
    Sector, Ticker, Current Price, Std Dev (%), and any number of YYYY-MM
    columns holding historical/forecast monthly prices.

Malformed rows are dropped here so they never reach the engine.
"""

from __future__ import annotations

import re
from pathlib import Path

import numpy as np
import pandas as pd

from portfolio_builder.models import InstrumentRecord
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("universe")

REQUIRED_COLUMNS = ("Sector", "Ticker", "Current Price", "Std Dev (%)")
_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")


def month_columns(columns) -> list[str]:
    """YYYY-MM column labels in chronological order."""
    return sorted(str(c).strip() for c in columns if _MONTH_RE.match(str(c).strip()))


def parse_universe(frame: pd.DataFrame) -> list[InstrumentRecord]:
    """Convert a raw universe DataFrame into validated InstrumentRecords."""
    frame = frame.rename(columns=lambda c: str(c).strip()).reset_index(drop=True)
    missing = [c for c in REQUIRED_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"Universe is missing required columns: {', '.join(missing)}")

    months = month_columns(frame.columns)
    prices = pd.to_numeric(frame["Current Price"], errors="coerce")
    stdevs = pd.to_numeric(frame["Std Dev (%)"], errors="coerce")
    history = frame[months].apply(pd.to_numeric, errors="coerce") if months else None

    records: list[InstrumentRecord] = []
    for pos, idx in enumerate(frame.index):
        ticker = str(frame.at[idx, "Ticker"] if pd.notna(frame.at[idx, "Ticker"]) else "").strip()
        if not ticker:
            logger.warning("Row %d: missing ticker, skipping", pos + 1)
            continue
        price = prices.at[idx]
        if pd.isna(price) or not np.isfinite(price) or price <= 0:
            logger.warning("Row %d (%s): invalid current price, skipping", pos + 1, ticker)
            continue
        stdev = stdevs.at[idx]
        if pd.isna(stdev) or not np.isfinite(stdev):
            logger.warning("Row %d (%s): invalid std dev, skipping", pos + 1, ticker)
            continue

        sector = frame.at[idx, "Sector"]
        sector = str(sector).strip() if pd.notna(sector) and str(sector).strip() else "Unknown"
        series = (
            tuple((m, float(history.at[idx, m])) for m in months)
            if history is not None
            else ()
        )
        records.append(InstrumentRecord(
            ticker=ticker,
            sector=sector,
            current_price=float(price),
            volatility=float(stdev) / 100.0,
            history=series,
        ))

    logger.info("Loaded %d of %d universe rows", len(records), len(frame))
    return records


def load_universe(path: str | Path) -> list[InstrumentRecord]:
    """Read the universe CSV at *path*."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Universe file not found: {path}")
    frame = pd.read_csv(path, dtype=str, skipinitialspace=True, skip_blank_lines=True)
    return parse_universe(frame)
