"""Jinja2-based markdown report renderer."""

from __future__ import annotations
from pathlib import Path

import numpy as np
from jinja2 import Environment, FileSystemLoader

from portfolio_builder.analysis.profiling import sharpe_insight
from portfolio_builder.config import Paths
from portfolio_builder.pipeline.context import GenerationResult


def _finite(val) -> float | None:
    if val is None:
        return None
    try:
        val = float(val)
    except (TypeError, ValueError):
        return None
    return None if np.isnan(val) or np.isinf(val) else val


def fmt_money(val, currency="₹") -> str:
    num = _finite(val)
    if num is None:
        return "N/A" if val is None else str(val)
    sign = "-" if num < 0 else ""
    return f"{sign}{currency}{abs(num):,.2f}"


def fmt_pct(val, digits: int = 2) -> str:
    """Decimal fraction -> percent string (0.1234 -> 12.34%)."""
    num = _finite(val)
    if num is None:
        return "N/A"
    return f"{num * 100:.{digits}f}%"


def fmt_points(val, digits: int = 2) -> str:
    """Value already in percent points (12.34 -> 12.34%)."""
    num = _finite(val)
    if num is None:
        return "N/A"
    return f"{num:.{digits}f}%"


def fmt_ratio(val) -> str:
    num = _finite(val)
    if num is None:
        return "N/A"
    return f"{num:.2f}"


class ReportRenderer:
    """Render a GenerationResult into markdown using Jinja2 templates."""

    def __init__(self, template_dir: Path | None = None, currency: str = "₹"):
        tpl_dir = template_dir or Paths.REPORTS_TEMPLATES
        self.currency = currency
        self.env = Environment(
            loader=FileSystemLoader(str(tpl_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["fmt_money"] = lambda v: fmt_money(v, self.currency)
        self.env.filters["fmt_pct"] = fmt_pct
        self.env.filters["fmt_points"] = fmt_points
        self.env.filters["fmt_ratio"] = fmt_ratio
        self.env.globals["sharpe_insight"] = sharpe_insight

    def render(self, template_name: str, result: GenerationResult) -> str:
        template = self.env.get_template(template_name)
        return template.render(result=result, profile=result.profile, now=result.started_at)
