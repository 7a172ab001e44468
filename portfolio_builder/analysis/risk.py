"""Covariance estimation from per-instrument volatility.

The universe only carries one annualised volatility figure per instrument,
so pairwise co-movement is modelled with a single uniform correlation:

    C[i, i] = sigma_i ** 2
    C[i, j] = sigma_i * sigma_j * rho      (i != j)

This is a modelling assumption, not a historically estimated correlation
structure.
"""

from __future__ import annotations

from typing import Iterable

import numpy as np

DEFAULT_CORRELATION = 0.3


def build_covariance(
    volatilities: Iterable[float], correlation: float = DEFAULT_CORRELATION
) -> np.ndarray:
    """Covariance matrix for the given volatilities (decimal fractions)."""
    sigma = np.asarray(list(volatilities), dtype=float).reshape(-1)
    if not -1.0 <= correlation <= 1.0:
        raise ValueError("correlation must be between -1 and 1")
    cov = np.outer(sigma, sigma) * correlation
    np.fill_diagonal(cov, sigma ** 2)
    return cov


def covariance_to_correlation(cov: np.ndarray) -> np.ndarray:
    """Correlation matrix implied by *cov*; zero-variance rows get 0 off-diagonal."""
    cov = np.asarray(cov, dtype=float)
    vols = np.sqrt(np.clip(np.diag(cov), 0.0, None))
    std_outer = np.outer(vols, vols)
    with np.errstate(divide="ignore", invalid="ignore"):
        corr = np.where(std_outer > 0, cov / std_outer, 0.0)
    np.fill_diagonal(corr, 1.0)
    return np.clip(corr, -1.0, 1.0)


def portfolio_variance(weights: np.ndarray, cov: np.ndarray) -> float:
    """w' C w."""
    w = np.asarray(weights, dtype=float)
    return float(w @ np.asarray(cov, dtype=float) @ w)


def portfolio_volatility(weights: np.ndarray, cov: np.ndarray) -> float:
    return float(np.sqrt(max(portfolio_variance(weights, cov), 0.0)))
