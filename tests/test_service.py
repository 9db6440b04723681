"""Tests for the rebalance runner."""

from datetime import date

import pytest

from conftest import (
    BROKERAGE_ACCOUNT,
    ROTH_ACCOUNT,
    TRADITIONAL_ACCOUNT,
    StubEquityClient,
    StubQuoteClient,
)
from allocation_engine import RebalanceRequest
from holdings_base import AccountNotFoundError
from rebalance_cli import RebalanceRunner

TODAY = date(2026, 3, 1)


@pytest.fixture
def quote_client():
    return StubQuoteClient(price=100.0, eoy_price=50.0)


@pytest.fixture
def equity_client():
    return StubEquityClient(equity=3000.0)


@pytest.fixture
def runner(default_config, quote_client, equity_client):
    return RebalanceRunner(default_config, quote_client=quote_client, equity_client=equity_client)


class TestRebalanceRunner:
    @pytest.mark.asyncio
    async def test_full_run(self, runner, report_path, quote_client, equity_client):
        rebalance = await runner.run(
            report_path,
            RebalanceRequest(),
            brokerage_account=BROKERAGE_ACCOUNT,
            traditional_account=TRADITIONAL_ACCOUNT,
            roth_account=ROTH_ACCOUNT,
            age=75,
            today=TODAY,
        )

        assert equity_client.calls == 1
        assert rebalance.brokerage.target.outside_stock == pytest.approx(3000.0)
        assert rebalance.roth_ira.target.managed_value() == pytest.approx(5000.0)
        assert rebalance.traditional_ira.target.managed_value() == pytest.approx(15000.0)
        # VV was quoted in the report, VO was not
        assert rebalance.brokerage.purchase.vv == pytest.approx(
            (rebalance.brokerage.target.vv - 2000.0) / 200.0
        )
        assert rebalance.brokerage.purchase.vo == pytest.approx(rebalance.brokerage.target.vo / 100.0)
        # (80 BND + 110 VXUS) at $50 plus $1,500 cash, over 24.6
        assert rebalance.minimum_distribution == pytest.approx(11000.0 / 24.6)
        assert all(year == 2025 for _, year in quote_client.requested if year is not None)

    @pytest.mark.asyncio
    async def test_without_quotes(self, runner, report_path, quote_client):
        rebalance = await runner.run(
            report_path,
            RebalanceRequest(),
            traditional_account=TRADITIONAL_ACCOUNT,
            age=75,
            fetch_quotes=False,
            today=TODAY,
        )

        assert quote_client.requested == []
        assert rebalance.traditional_ira.purchase.vo == pytest.approx(rebalance.traditional_ira.target.vo)
        assert rebalance.minimum_distribution == pytest.approx((80 * 75.0 + 110 * 60.0 + 1500.0) / 24.6)

    @pytest.mark.asyncio
    async def test_no_brokerage_skips_equity(self, runner, report_path, equity_client):
        rebalance = await runner.run(report_path, RebalanceRequest(), roth_account=ROTH_ACCOUNT, today=TODAY)

        assert equity_client.calls == 0
        assert rebalance.minimum_distribution is None

    @pytest.mark.asyncio
    async def test_age_without_traditional_account(self, runner, report_path):
        rebalance = await runner.run(report_path, RebalanceRequest(), roth_account=ROTH_ACCOUNT, age=80,
                                     today=TODAY)
        assert rebalance.minimum_distribution == 0.0

    @pytest.mark.asyncio
    async def test_age_below_table(self, runner, report_path, quote_client):
        rebalance = await runner.run(report_path, RebalanceRequest(), traditional_account=TRADITIONAL_ACCOUNT,
                                     age=65, today=TODAY)

        assert rebalance.minimum_distribution == 0.0
        assert all(year is None for _, year in quote_client.requested)

    @pytest.mark.asyncio
    async def test_unknown_account(self, runner, report_path):
        with pytest.raises(AccountNotFoundError):
            await runner.run(report_path, RebalanceRequest(), traditional_account=12345678, today=TODAY)
