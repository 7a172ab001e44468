"""Allocation strategies: (returns, covariance) -> weight vector.

Two families share the :class:`WeightStrategy` interface:

* Compatibility strategies reproduce the legacy allocation behaviour
  exactly.  Minimum variance and risk parity are equal-weight stand-ins and
  the "Sharpe Ratio Optimized" portfolio weights instruments by their
  positive expected return.
* Solver strategies compute the real thing: long-only minimum variance and
  maximum Sharpe via SLSQP, and Lopez de Prado's Hierarchical Risk Parity.

Either family can be handed to the pipeline without changing the allocator
or the metrics layer.
"""

from __future__ import annotations

import numpy as np
from scipy.cluster.hierarchy import leaves_list, linkage
from scipy.optimize import minimize
from scipy.spatial.distance import squareform

from portfolio_builder.analysis.base import WeightStrategy
from portfolio_builder.analysis.risk import covariance_to_correlation
from portfolio_builder.utils.logger import setup_logger

logger = setup_logger("strategies")

_VAR_FLOOR = 1e-12

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def equal_weights(n: int) -> np.ndarray:
    if n <= 0:
        return np.array([], dtype=float)
    return np.full(n, 1.0 / n)


def _normalize(weights: np.ndarray) -> np.ndarray:
    """Clip to long-only and rescale to sum to one (equal weight if degenerate)."""
    w = np.where(np.isfinite(weights), weights, 0.0)
    w = np.clip(w, 0.0, None)
    total = float(w.sum())
    if total <= 0.0:
        return equal_weights(w.size)
    return w / total


def _slsqp(objective, n: int, ftol: float = 1e-12) -> np.ndarray | None:
    bounds = tuple((0.0, 1.0) for _ in range(n))
    sum_to_one = {"type": "eq", "fun": lambda w: np.sum(w) - 1.0}
    w0 = np.ones(n) / n
    res = minimize(
        objective, w0, method="SLSQP", bounds=bounds,
        constraints=[sum_to_one], options={"maxiter": 1000, "ftol": ftol},
    )
    if not res.success or not np.all(np.isfinite(res.x)):
        logger.warning("SLSQP did not converge: %s", res.message)
        return None
    return res.x


# =========================================================================
# 1. Compatibility strategies
# =========================================================================


class EqualWeightMinimumVariance(WeightStrategy):
    """Minimum-variance placeholder: every instrument gets 1/n."""

    @property
    def name(self) -> str:
        return "Minimum Variance"

    def compute(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        return equal_weights(covariance.shape[0])


class ReturnWeighted(WeightStrategy):
    """Weights proportional to max(0, expected return).

    Non-finite returns count as zero. Falls back to equal weight when no
    instrument has a positive return.
    """

    @property
    def name(self) -> str:
        return "Sharpe Ratio Optimized"

    def compute(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        positive = np.maximum(np.where(np.isfinite(returns), returns, 0.0), 0.0)
        total = float(positive.sum())
        if total <= 0.0:
            return equal_weights(returns.size)
        return positive / total


class EqualWeightRiskParity(WeightStrategy):
    """Hierarchical-risk-parity placeholder: every instrument gets 1/n."""

    @property
    def name(self) -> str:
        return "Hierarchical Risk Parity"

    def compute(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        return equal_weights(covariance.shape[0])


# =========================================================================
# 2. Solver strategies
# =========================================================================


class MinimumVarianceSolver(WeightStrategy):
    """Long-only global minimum-variance portfolio (min w' C w, sum w = 1)."""

    @property
    def name(self) -> str:
        return "Minimum Variance (Optimized)"

    def compute(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        n = covariance.shape[0]
        if n == 1:
            return np.array([1.0])

        def variance_obj(w: np.ndarray) -> float:
            return float(w @ covariance @ w)

        weights = _slsqp(variance_obj, n)
        return equal_weights(n) if weights is None else _normalize(weights)


class MaximumSharpeSolver(WeightStrategy):
    """Long-only tangency portfolio: maximise (w'mu - rf) / sqrt(w' C w)."""

    def __init__(self, risk_free_rate: float = 0.0) -> None:
        self.risk_free_rate = risk_free_rate

    @property
    def name(self) -> str:
        return "Maximum Sharpe (Optimized)"

    def compute(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        n = returns.size
        if n == 1:
            return np.array([1.0])
        rf = self.risk_free_rate

        # maximise Sharpe  =>  minimise negative Sharpe
        def neg_sharpe(w: np.ndarray) -> float:
            ret = w @ returns
            vol = np.sqrt(w @ covariance @ w)
            if vol < 1e-12:
                return 1e6
            return -(ret - rf) / vol

        weights = _slsqp(neg_sharpe, n)
        return equal_weights(n) if weights is None else _normalize(weights)


class HierarchicalRiskParitySolver(WeightStrategy):
    """Hierarchical Risk Parity (Lopez de Prado, 2016).

    1. Correlation distance d = sqrt(0.5 * (1 - corr))
    2. Single-linkage hierarchical clustering
    3. Quasi-diagonal ordering of the dendrogram leaves
    4. Recursive bisection, splitting weight inversely to cluster variance
    """

    @property
    def name(self) -> str:
        return "Hierarchical Risk Parity (Optimized)"

    @staticmethod
    def _cluster_variance(cov: np.ndarray, members: list[int]) -> float:
        sub = cov[np.ix_(members, members)]
        ivp = 1.0 / np.maximum(np.diag(sub), _VAR_FLOOR)
        ivp = ivp / ivp.sum()
        return max(float(ivp @ sub @ ivp), _VAR_FLOOR)

    @staticmethod
    def quasi_diagonal_order(cov: np.ndarray) -> list[int]:
        n = cov.shape[0]
        if n <= 2:
            return list(range(n))
        corr = covariance_to_correlation(cov)
        dist = np.sqrt(np.clip(0.5 * (1.0 - corr), 0.0, None))
        link = linkage(squareform(dist, checks=False), method="single")
        return [int(i) for i in leaves_list(link)]

    def compute(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        n = covariance.shape[0]
        if n == 1:
            return np.array([1.0])

        order = self.quasi_diagonal_order(covariance)
        weights = np.ones(n)
        clusters = [order]
        while clusters:
            cluster = clusters.pop(0)
            if len(cluster) <= 1:
                continue
            mid = len(cluster) // 2
            left, right = cluster[:mid], cluster[mid:]
            left_var = self._cluster_variance(covariance, left)
            right_var = self._cluster_variance(covariance, right)
            alpha = 1.0 - left_var / (left_var + right_var)
            weights[left] *= alpha
            weights[right] *= 1.0 - alpha
            clusters.extend([left, right])

        return _normalize(weights)


COMPAT_STRATEGIES = (EqualWeightMinimumVariance, ReturnWeighted, EqualWeightRiskParity)


def compat_strategies() -> list[WeightStrategy]:
    """The three strategies in their fixed reporting order."""
    return [cls() for cls in COMPAT_STRATEGIES]
