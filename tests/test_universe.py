"""Tests for portfolio_builder.data_sources.universe -- CSV loading and row validation."""

import math

import pandas as pd
import pytest

from portfolio_builder.config import Paths
from portfolio_builder.data_sources.universe import (
    REQUIRED_COLUMNS,
    load_universe,
    month_columns,
    parse_universe,
)


class TestMonthColumns:

    def test_sorted_chronologically(self):
        cols = ["Ticker", "2025-03", "2024-12", "Sector", "2025-01"]
        assert month_columns(cols) == ["2024-12", "2025-01", "2025-03"]

    def test_ignores_non_month_labels(self):
        assert month_columns(["Current Price", "2025", "2025-1", "Std Dev (%)"]) == []


class TestLoadUniverse:

    def test_malformed_rows_are_dropped(self, universe_csv):
        records = load_universe(universe_csv)
        assert [r.ticker for r in records] == ["AAA", "BBB", "CCC"]

    def test_volatility_converted_from_percent(self, universe_csv):
        records = {r.ticker: r for r in load_universe(universe_csv)}
        assert records["AAA"].volatility == pytest.approx(0.20)
        assert records["BBB"].volatility == pytest.approx(0.355)

    def test_history_in_chronological_order(self, universe_csv):
        aaa = load_universe(universe_csv)[0]
        assert aaa.history == (("2025-01", 105.0), ("2025-02", 110.0), ("2025-03", 115.0))

    def test_blank_month_cell_is_nan(self, universe_csv):
        bbb = load_universe(universe_csv)[1]
        assert math.isnan(bbb.history[0][1])
        assert bbb.history[1] == ("2025-02", 52.0)

    def test_missing_sector_becomes_unknown(self, universe_csv):
        ccc = load_universe(universe_csv)[2]
        assert ccc.sector == "Unknown"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_universe(tmp_path / "nope.csv")

    def test_sample_universe_file_loads(self):
        records = load_universe(Paths.DATA_RAW / "sample_universe.csv")
        assert len(records) == 18
        assert all(r.is_valid for r in records)


class TestParseUniverse:

    def test_missing_required_columns_raise(self):
        frame = pd.DataFrame({"Ticker": ["A"], "Current Price": [10]})
        with pytest.raises(ValueError, match="Sector"):
            parse_universe(frame)

    def test_whitespace_in_headers_is_tolerated(self):
        frame = pd.DataFrame({
            " Sector ": ["Tech"], "Ticker": [" AAA "], "Current Price ": ["12.5"],
            "Std Dev (%)": ["10"], " 2025-01": ["13"],
        })
        records = parse_universe(frame)
        assert records[0].ticker == "AAA"
        assert records[0].current_price == pytest.approx(12.5)
        assert records[0].history == (("2025-01", 13.0),)

    def test_no_month_columns_gives_empty_history(self):
        frame = pd.DataFrame({c: [v] for c, v in zip(REQUIRED_COLUMNS, ["Tech", "X", "10", "5"])})
        assert parse_universe(frame)[0].history == ()

    def test_non_default_index(self):
        frame = pd.DataFrame(
            {c: [v, v] for c, v in zip(REQUIRED_COLUMNS, ["Tech", "X", "10", "5"])},
            index=[10, 20],
        )
        assert len(parse_universe(frame)) == 2
