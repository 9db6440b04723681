"""Orchestration of one rebalance run: report, quotes, equity, calculation"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from holdings_base import EquityClient, QuoteClient, VanguardHoldings, VanguardRebalance
from rebalance_config import AppConfig
from allocation_engine import (
    RebalanceCalculator,
    RebalanceRequest,
    calculate_minimum_distribution,
    eoy_traditional_value,
    load_distribution_table,
)
from market_connector import AlpacaEquityClient, YahooQuoteClient
from .report_parser import parse_report


class RebalanceRunner:
    """
    Runs the full rebalance for one holdings report.

    Quote and equity clients are created from configuration unless given,
    so tests can pass in stubs.
    """

    def __init__(self, config: AppConfig, quote_client: Optional[QuoteClient] = None,
                 equity_client: Optional[EquityClient] = None, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.quote_client = quote_client or YahooQuoteClient(config.quotes, logger=self.logger)
        self.equity_client = equity_client or AlpacaEquityClient(config.equity, logger=self.logger)
        self.calculator = RebalanceCalculator(config, logger=self.logger)

    async def run(self, report_path: str | Path, request: RebalanceRequest,
                  brokerage_account: Optional[int] = None, traditional_account: Optional[int] = None,
                  roth_account: Optional[int] = None, age: Optional[int] = None,
                  fetch_quotes: bool = True, today: Optional[date] = None) -> VanguardRebalance:
        today = today or date.today()

        # Step 1: Parse holdings for the requested accounts
        self.logger.info(f"Reading holdings report {report_path}")
        holdings = parse_report(
            report_path,
            brokerage_account=brokerage_account,
            traditional_account=traditional_account,
            roth_account=roth_account,
        )

        # Step 2: Fill quotes the report did not carry
        if fetch_quotes:
            holdings.quotes = await self.quote_client.add_missing_quotes(holdings.quotes)
        else:
            self.logger.info("Quote retrieval disabled, missing quotes stay at 1.0")

        # Step 3: Equity held at the external brokerage counts as outside US stock
        if holdings.brokerage is not None:
            equity = await self.equity_client.get_equity()
            request = request.model_copy(update={
                "external_brokerage_equity": request.external_brokerage_equity + equity
            })

        # Step 4: Targets and trades
        rebalance = self.calculator.calculate(holdings, request)

        # Step 5: Required minimum distribution
        if age is not None:
            rebalance.minimum_distribution = await self.minimum_distribution(holdings, age, today, fetch_quotes)

        return rebalance

    async def minimum_distribution(self, holdings: VanguardHoldings, age: int, today: date,
                                   fetch_quotes: bool = True) -> float:
        """Distribution due this year from last year's closing traditional IRA value"""
        if holdings.traditional_ira is None:
            self.logger.warning("Age given without a traditional IRA account, no minimum distribution")
            return 0.0

        table = load_distribution_table(self.config.distribution.table_path)
        if age not in table:
            return calculate_minimum_distribution(age, 0.0, table)

        if fetch_quotes:
            eoy_quotes = await self.quote_client.eoy_quotes(today.year - 1)
        else:
            eoy_quotes = holdings.quotes

        value = eoy_traditional_value(holdings, eoy_quotes, today)
        if value is None:
            self.logger.warning("Using current traditional IRA value for the minimum distribution")
            value = holdings.traditional_ira.managed_value()

        distribution = calculate_minimum_distribution(age, value, table)
        self.logger.info(
            f"Minimum distribution at age {age}: ${distribution:,.2f} of ${value:,.2f}",
            extra={'account': 'traditional_ira'}
        )
        return distribution
