#!/usr/bin/env python3
"""Portfolio Builder: rank an instrument universe and allocate capital.

Usage:
    python main.py build data/raw/sample_universe.csv --amount 100000 --horizon 3 \\
        --risk-tolerance 0.08 --objective growth            # three portfolios + report
    python main.py build universe.csv --amount 50000 --horizon 5 \\
        --risk-tolerance 0.1 --objective 1 --strategies optimized
    python main.py build universe.csv --amount 50000 --horizon 2 \\
        --risk-tolerance 0.04 --objective income --json     # raw JSON to stdout
    python main.py classify --horizon 5 --risk-tolerance 0.1 --objective growth
    python main.py rank universe.csv --horizon 3 --top-n 10
"""

import argparse
import json
import sys

from portfolio_builder.analysis.profiling import classify_investor
from portfolio_builder.config import SETTINGS, Paths, engine_setting, log_level
from portfolio_builder.data_sources.universe import load_universe
from portfolio_builder.models import RiskProfile
from portfolio_builder.pipeline.context import BuildContext, PortfolioGenerationError
from portfolio_builder.pipeline.engine import build_portfolios
from portfolio_builder.pipeline import steps as S
from portfolio_builder.pipeline.registry import get_registry
from portfolio_builder.reports.generator import ReportGenerator
from portfolio_builder.utils.logger import set_level, setup_logger

logger = setup_logger("main", log_level())

DEFAULT_UNIVERSE = Paths.DATA_RAW / "sample_universe.csv"


def _override(value, key: str, default):
    """CLI value when given (0 included), else the engine setting."""
    return value if value is not None else engine_setting(key, default)


def _profile_from_args(args, amount: float = 1.0) -> RiskProfile:
    try:
        return RiskProfile(
            investment_amount=amount,
            horizon_years=args.horizon,
            risk_tolerance=args.risk_tolerance,
            objective=args.objective,
        )
    except ValueError as e:
        print(f"Invalid investor profile: {e}")
        sys.exit(1)


def _load(path: str):
    try:
        return load_universe(path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Cannot load universe: {e}")
        sys.exit(1)


# ============================================================
# COMMANDS
# ============================================================

def cmd_build(args):
    """Build one portfolio per strategy and print/save the report."""
    profile = _profile_from_args(args, amount=args.amount)
    universe = _load(args.universe)

    rf = _override(args.risk_free_rate, "risk_free_rate", 0.0698)
    try:
        strategies = get_registry().get_strategies(args.strategies, risk_free_rate=rf)
    except KeyError as e:
        print(e.args[0])
        sys.exit(1)

    result = build_portfolios(
        universe,
        profile,
        risk_free_rate=rf,
        top_n=_override(args.top_n, "top_n", 15),
        correlation=engine_setting("correlation", 0.3),
        strategies=strategies,
        max_workers=_override(args.workers, "max_workers", 1),
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        report_cfg = SETTINGS.get("report", {})
        generator = ReportGenerator(
            template=report_cfg.get("template", "portfolio.md.j2"),
            currency=report_cfg.get("currency", "₹"),
        )
        if args.no_save:
            print(generator.render(result))
        else:
            report_path, json_path = generator.save(result)
            print(f"\nReport saved: {report_path}")
            print(f"Data saved:   {json_path}")
            print(report_path.read_text(encoding="utf-8"))

    if not result.ok:
        print(f"\nPortfolio generation failed: {result.error}")
        sys.exit(1)


def cmd_classify(args):
    """Show the investor archetype for a profile."""
    profile = _profile_from_args(args)
    print(classify_investor(profile).value)


def cmd_rank(args):
    """List the highest expected-return instruments for a horizon."""
    universe = _load(args.universe)
    ctx = BuildContext(
        universe=universe,
        profile=_profile_from_args(args, amount=1.0),
        strategies=[],
        risk_free_rate=0.0,
        top_n=_override(args.top_n, "top_n", 15),
    )
    try:
        for step in (S.filter_instruments, S.estimate_returns, S.select_top_instruments):
            step(ctx)
    except PortfolioGenerationError as e:
        print(f"Ranking failed: {e}")
        sys.exit(1)

    print(f"\n{'#':>3}  {'Ticker':12s} {'Sector':24s} {'Price':>12s} {'Vol':>8s} {'Exp. Return':>12s}")
    print("-" * 76)
    for rank, (record, est) in enumerate(zip(ctx.selected, ctx.returns), 1):
        print(
            f"{rank:>3}  {record.ticker:12s} {record.sector[:24]:24s} "
            f"{record.current_price:>12,.2f} {record.volatility:>8.2%} {est:>12.2%}"
        )


def main():
    parser = argparse.ArgumentParser(
        description="Portfolio Builder: ranked shortlist + integer-share allocation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--log-level", default="", help="Override configured log level")
    sub = parser.add_subparsers(dest="command", help="Commands")

    # build
    p = sub.add_parser("build", help="Build portfolios from a universe CSV")
    p.add_argument("universe", nargs="?", default=str(DEFAULT_UNIVERSE),
                   help="Universe CSV path (default: data/raw/sample_universe.csv)")
    p.add_argument("--amount", type=float, required=True, help="Capital to invest")
    p.add_argument("--horizon", type=int, required=True, help="Holding period in years")
    p.add_argument("--risk-tolerance", type=float, default=0.05,
                   help="Risk tolerance as a fraction, 0.0 to 0.2 (default: 0.05)")
    p.add_argument("--objective", default="balanced",
                   help="growth | income | balanced (or 1 | 2 | 3)")
    p.add_argument("--strategies", default=None, choices=get_registry().names(),
                   help="Strategy set (default from settings)")
    p.add_argument("--top-n", type=int, default=None, help="Instruments to invest in")
    p.add_argument("--risk-free-rate", type=float, default=None, help="Annual risk-free rate")
    p.add_argument("--workers", type=int, default=None, help="Threads for strategy evaluation")
    p.add_argument("--json", action="store_true", help="Print the result as JSON")
    p.add_argument("--no-save", action="store_true", help="Print the report without saving")
    p.set_defaults(func=cmd_build)

    # classify
    p = sub.add_parser("classify", help="Classify an investor profile")
    p.add_argument("--horizon", type=int, required=True)
    p.add_argument("--risk-tolerance", type=float, default=0.05)
    p.add_argument("--objective", default="balanced")
    p.set_defaults(func=cmd_classify)

    # rank
    p = sub.add_parser("rank", help="Rank instruments by expected return")
    p.add_argument("universe", nargs="?", default=str(DEFAULT_UNIVERSE))
    p.add_argument("--horizon", type=int, required=True)
    p.add_argument("--top-n", type=int, default=None)
    p.add_argument("--risk-tolerance", type=float, default=0.0, help=argparse.SUPPRESS)
    p.add_argument("--objective", default="balanced", help=argparse.SUPPRESS)
    p.set_defaults(func=cmd_rank)

    args = parser.parse_args()
    set_level(args.log_level or log_level())
    if args.command is None:
        parser.print_help()
        sys.exit(0)
    args.func(args)


if __name__ == "__main__":
    main()
