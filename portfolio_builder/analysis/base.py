"""Base class for all weight strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np


class WeightStrategy(ABC):
    """Interface every allocation strategy must implement.

    To create a new strategy:
    1. Define a class in portfolio_builder/analysis/ that extends WeightStrategy
    2. Implement name and compute()
    3. Add it to a strategy set in configs/settings.yaml under strategies.sets
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name, also used as the key in portfolio summaries."""
        ...

    @abstractmethod
    def compute(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        """Produce a long-only weight vector.

        Args:
            returns: Expected return per instrument, shape (n,).
            covariance: Covariance matrix, shape (n, n).

        Returns:
            Non-negative weights summing to 1.0, shape (n,). Empty when n == 0.
        """
        ...

    def __call__(self, returns: np.ndarray, covariance: np.ndarray) -> np.ndarray:
        returns = np.asarray(returns, dtype=float).reshape(-1)
        covariance = np.asarray(covariance, dtype=float)
        n = returns.size
        if covariance.shape != (n, n):
            raise ValueError(
                f"covariance shape {covariance.shape} does not match {n} returns"
            )
        if n == 0:
            return np.array([], dtype=float)
        return self.compute(returns, covariance)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
