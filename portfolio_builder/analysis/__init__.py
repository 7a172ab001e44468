from .base import WeightStrategy
from .returns import estimate_expected_return, estimate_expected_returns
from .risk import build_covariance
from .strategies import (
    EqualWeightMinimumVariance,
    ReturnWeighted,
    EqualWeightRiskParity,
    MinimumVarianceSolver,
    MaximumSharpeSolver,
    HierarchicalRiskParitySolver,
    compat_strategies,
)
from .allocation import allocate_shares
from .metrics import summarize_portfolio
from .profiling import InvestorType, classify_investor, sharpe_insight
