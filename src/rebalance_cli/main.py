"""
Command line entry point for the Vanguard rebalancer.

Reads a holdings download, computes per-account targets and prints the
number of shares to buy or sell for each fund.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import List, Optional

from holdings_base import (
    AccountNotFoundError,
    AllocationConfigError,
    EquityRetrievalError,
    PlacementInvariantError,
    QuoteRetrievalError,
    ReportFormatError,
    UnsupportedSymbolError,
)
from rebalance_config import AppConfig, PercentPolicyConfig, load_config
from allocation_engine import AllocationPolicy, OutsideAssets, RebalanceRequest
from .formatter import format_rebalance, write_csv, write_text_report
from .logger import configure_root_logger
from .service import RebalanceRunner

logger = logging.getLogger(__name__)

RUN_ERRORS = (
    AccountNotFoundError,
    AllocationConfigError,
    EquityRetrievalError,
    PlacementInvariantError,
    QuoteRetrievalError,
    ReportFormatError,
    UnsupportedSymbolError,
    FileNotFoundError,
    ValueError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vanguard-rebalance",
        description="Return the number of Vanguard fund shares that should be bought or sold",
    )
    parser.add_argument("report", help="CSV download file from Vanguard with holdings")

    retirement = parser.add_argument_group(
        "retirement allocation",
        "Any percentage given replaces the configured allocation; omitted parts count as 0",
    )
    retirement.add_argument("-s", "--stock-percent", type=float, help="Percentage to allocate in stocks")
    retirement.add_argument("-b", "--bond-percent", type=float, help="Percentage to allocate in bonds")
    retirement.add_argument("--inflation-percent", type=float,
                            help="Percentage to allocate in inflation protected securities")
    retirement.add_argument("--retirement-year", type=int,
                            help="Derive the retirement allocation from the glide path for this year")

    brokerage = parser.add_argument_group(
        "brokerage allocation",
        "Any percentage given replaces the configured allocation; omitted parts count as 0",
    )
    brokerage.add_argument("--brokerage-stock-percent", type=float, help="Brokerage percentage in stocks")
    brokerage.add_argument("--brokerage-bond-percent", type=float, help="Brokerage percentage in bonds")
    brokerage.add_argument("--brokerage-inflation-percent", type=float,
                           help="Brokerage percentage in inflation protected securities")
    brokerage.add_argument("--include-brokerage", action="store_true",
                           help="Place the brokerage account together with the retirement accounts")

    accounts = parser.add_argument_group("accounts")
    accounts.add_argument("--brokerage-acct", type=int, help="Brokerage account number")
    accounts.add_argument("--roth-acct", type=int, help="Roth IRA account number")
    accounts.add_argument("--trad-acct", type=int, help="Traditional IRA account number")
    accounts.add_argument("--add-brokerage", type=float, default=0.0,
                          help="Cash added to (negative: withdrawn from) the brokerage account")
    accounts.add_argument("--add-roth", type=float, default=0.0, help="Cash added to the Roth IRA account")
    accounts.add_argument("--add-trad", type=float, default=0.0, help="Cash added to the traditional IRA account")
    accounts.add_argument("--age", type=int, help="Age used for the traditional IRA minimum distribution")

    parser.add_argument("--config", help="Path to a YAML configuration file")
    parser.add_argument("--output", nargs="?", const=".", metavar="DIR",
                        help="Also write the report to a timestamped file in DIR (default: current directory)")
    parser.add_argument("--csv", metavar="PATH", help="Also write the rebalance as CSV to PATH")
    parser.add_argument("--no-quotes", action="store_true",
                        help="Do not retrieve missing quotes; purchases of unquoted funds are shown in dollars")
    return parser


def _policy(defaults: PercentPolicyConfig, stock: Optional[float], bond: Optional[float],
            inflation: Optional[float]) -> AllocationPolicy:
    """
    Configured policy, or the command line triple when any part of it is given.

    Command line values replace the configured triple as a whole; parts left
    out default to 0.
    """
    if stock is None and bond is None and inflation is None:
        return AllocationPolicy.from_config(defaults)
    return AllocationPolicy(stock=stock or 0.0, bond=bond or 0.0, inflation=inflation or 0.0)


def build_request(args: argparse.Namespace, config: AppConfig, today: Optional[date] = None) -> RebalanceRequest:
    allocation = config.allocation

    if args.retirement_year is not None:
        retirement_policy = AllocationPolicy.from_retirement_year(args.retirement_year, allocation.glide_path, today)
    else:
        retirement_policy = _policy(allocation.retirement, args.stock_percent, args.bond_percent,
                                    args.inflation_percent)

    brokerage_policy = _policy(allocation.brokerage, args.brokerage_stock_percent, args.brokerage_bond_percent,
                               args.brokerage_inflation_percent)

    return RebalanceRequest(
        retirement_policy=retirement_policy,
        brokerage_policy=brokerage_policy,
        brokerage_add=args.add_brokerage,
        roth_add=args.add_roth,
        traditional_add=args.add_trad,
        outside_assets=OutsideAssets.from_config(config.outside_assets),
        include_brokerage_in_pool=args.include_brokerage or allocation.include_brokerage_in_retirement_pool,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    retirement_percents = (args.stock_percent, args.bond_percent, args.inflation_percent)
    if args.retirement_year is not None and any(value is not None for value in retirement_percents):
        parser.error("--retirement-year cannot be combined with retirement percentage options")

    if args.brokerage_acct is None and args.roth_acct is None and args.trad_acct is None:
        parser.error("at least one of --brokerage-acct, --roth-acct or --trad-acct is required")

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    configure_root_logger(config.logging)

    try:
        request = build_request(args, config)
        runner = RebalanceRunner(config)
        rebalance = asyncio.run(runner.run(
            args.report,
            request,
            brokerage_account=args.brokerage_acct,
            traditional_account=args.trad_acct,
            roth_account=args.roth_acct,
            age=args.age,
            fetch_quotes=not args.no_quotes,
        ))
    except RUN_ERRORS as e:
        logger.error(f"Rebalance failed: {e}")
        return 1

    report = format_rebalance(rebalance)
    print(report)

    try:
        if args.output is not None:
            write_text_report(report, args.output)
        if args.csv:
            write_csv(rebalance, args.csv)
    except OSError as e:
        logger.error(f"Failed to write output: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
