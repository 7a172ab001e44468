"""Tests for portfolio_builder.reports -- formatting filters, markdown and JSON output."""

import json

import pytest

from portfolio_builder.models import InstrumentRecord
from portfolio_builder.pipeline.engine import build_portfolios
from portfolio_builder.reports.generator import ReportGenerator
from portfolio_builder.reports.renderer import (
    ReportRenderer,
    fmt_money,
    fmt_pct,
    fmt_points,
    fmt_ratio,
)


class TestFilters:

    def test_fmt_money(self):
        assert fmt_money(1234567.891) == "₹1,234,567.89"
        assert fmt_money(-50, "$") == "-$50.00"
        assert fmt_money(None) == "N/A"

    def test_fmt_pct(self):
        assert fmt_pct(0.1234) == "12.34%"
        assert fmt_pct(0.1, 0) == "10%"
        assert fmt_pct(float("nan")) == "N/A"

    def test_fmt_points(self):
        assert fmt_points(48.0) == "48.00%"

    def test_fmt_ratio_none_is_na(self):
        assert fmt_ratio(None) == "N/A"
        assert fmt_ratio(1.23456) == "1.23"


class TestRenderer:

    @pytest.fixture
    def result(self, sample_universe, profile):
        return build_portfolios(sample_universe, profile)

    def test_report_sections(self, result):
        md = ReportRenderer().render("portfolio.md.j2", result)
        assert "# Portfolio Recommendations" in md
        assert "Moderate Investor" in md
        for name in ("Minimum Variance", "Sharpe Ratio Optimized", "Hierarchical Risk Parity"):
            assert f"## {name}" in md
        assert "₹100,000.00" in md

    def test_holdings_table_lists_bought_tickers(self, result):
        md = ReportRenderer().render("portfolio.md.j2", result)
        for row in result.portfolios[0].holdings():
            assert f"| {row['ticker']} |" in md

    def test_sector_exposure_sorted_descending(self, result):
        md = ReportRenderer().render("portfolio.md.j2", result)
        section = md.split("## Minimum Variance\n", 1)[1].split("### Sector Exposure", 1)[1]
        section = section.split("\n\n", 2)[1]
        rows = [line for line in section.splitlines() if line.startswith("| ") and "%" in line]
        values = [float(line.rsplit("|", 2)[1].strip().rstrip("%")) for line in rows]
        assert values == sorted(values, reverse=True)
        assert len(values) == len(result.portfolios[0].sector_exposure)

    def test_currency_override(self, result):
        md = ReportRenderer(currency="$").render("portfolio.md.j2", result)
        assert "$100,000.00" in md

    def test_undefined_sharpe_rendered(self, profile):
        flat = [InstrumentRecord("ZERO", "Cash", 10.0, 0.0, history=(("2025-01", 10.0),))]
        result = build_portfolios(flat, profile)
        md = ReportRenderer().render("portfolio.md.j2", result)
        assert "N/A (undefined)" in md
        assert "no measured risk" in md

    def test_failure_rendered(self, profile):
        result = build_portfolios([], profile)
        md = ReportRenderer().render("portfolio.md.j2", result)
        assert "Portfolio generation failed" in md
        assert "No valid instrument data available" in md


class TestReportGenerator:

    def test_save_writes_markdown_and_json(self, tmp_path, sample_universe, profile):
        result = build_portfolios(sample_universe, profile)
        report_path, json_path = ReportGenerator(output_dir=tmp_path).save(result)

        assert report_path.exists() and json_path.exists()
        assert report_path.name == f"portfolio_{result.run_id}.md"
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["ok"] is True
        assert [p["strategy"] for p in data["portfolios"]] == [p.strategy for p in result.portfolios]

    def test_json_keeps_undefined_sharpe_as_null(self, tmp_path, profile):
        flat = [InstrumentRecord("ZERO", "Cash", 10.0, 0.0)]
        result = build_portfolios(flat, profile)
        _, json_path = ReportGenerator(output_dir=tmp_path).save(result)
        data = json.loads(json_path.read_text(encoding="utf-8"))
        assert data["portfolios"][0]["sharpe_ratio"] is None
