"""Shared fixtures for the rebalancer tests."""

import pytest

from holdings_base import ShareValues, Symbol, QuoteClient, EquityClient
from rebalance_config import AppConfig


HOLDINGS_HEADER = "Account Number,Investment Name,Symbol,Shares,Share Price,Total Value,"
TRANSACTIONS_HEADER = (
    "Account Number,Trade Date,Settlement Date,Transaction Type,Transaction Description,"
    "Investment Name,Symbol,Shares,Share Price,Principal Amount,Commissions and Fees,"
    "Net Amount,Accrued Interest,Account Type,"
)

REPORT_CSV = "\n".join([
    HOLDINGS_HEADER,
    "11111111,VANGUARD FEDERAL MONEY MARKET,VMFXX,2000.00,1.00,2000.00,",
    "11111111,VANGUARD LARGE-CAP ETF,VV,10.0000,200.00,2000.00,",
    "11111111,SOME OTHER FUND,QQQ,5.0000,400.00,2000.00,",
    "22222222,VANGUARD TOTAL BOND MARKET ETF,BND,100.0000,75.00,7500.00,",
    "22222222,VANGUARD TOTAL INTERNATIONAL STOCK ETF,VXUS,100.0000,60.00,6000.00,",
    "22222222,VANGUARD FEDERAL MONEY MARKET,VMFXX,1500.00,1.00,1500.00,",
    "33333333,VANGUARD EMERGING MARKETS ETF,VWO,50.0000,40.00,2000.00,",
    "33333333,VANGUARD FEDERAL MONEY MARKET,VMFXX,3000.00,1.00,3000.00,",
    "",
    "",
    "",
    TRANSACTIONS_HEADER,
    "22222222,2026-02-03,2026-02-04,Buy,Buy,VANGUARD TOTAL BOND MARKET ETF,BND,20.0000,75.00,-1500.00,0.0,-1500.00,0.0,CASH,",
    "22222222,2026-01-15,2026-01-16,Sell,Sell,VANGUARD TOTAL INTERNATIONAL STOCK ETF,VXUS,-10.0000,60.00,600.00,0.0,600.00,0.0,CASH,",
    "22222222,2025-12-10,2025-12-11,Buy,Buy,VANGUARD TOTAL INTERNATIONAL STOCK ETF,VXUS,10.0000,58.00,-580.00,0.0,-580.00,0.0,CASH,",
    "33333333,2026-01-20,2026-01-21,Buy,Buy,VANGUARD EMERGING MARKETS ETF,VWO,5.0000,40.00,-200.00,0.0,-200.00,0.0,CASH,",
    "",
]) + "\n"

BROKERAGE_ACCOUNT = 11111111
TRADITIONAL_ACCOUNT = 22222222
ROTH_ACCOUNT = 33333333


class StubQuoteClient(QuoteClient):
    """Quote client returning fixed prices and recording what was asked"""

    def __init__(self, price: float = 100.0, eoy_price: float = 50.0):
        self.price = price
        self.eoy_price = eoy_price
        self.requested = []

    async def get_quote(self, symbol: Symbol) -> float:
        self.requested.append((symbol, None))
        return self.price

    async def get_eoy_quote(self, symbol: Symbol, year: int) -> float:
        self.requested.append((symbol, year))
        return self.eoy_price


class StubEquityClient(EquityClient):
    def __init__(self, equity: float = 0.0):
        self.equity = equity
        self.calls = 0

    async def get_equity(self) -> float:
        self.calls += 1
        return self.equity


@pytest.fixture
def default_config():
    return AppConfig()


@pytest.fixture
def report_path(tmp_path):
    """Holdings download with a brokerage, traditional and Roth account."""
    path = tmp_path / "OfxDownload.csv"
    path.write_text(REPORT_CSV, encoding="utf-8")
    return path


@pytest.fixture
def cash_only_roth():
    return ShareValues(vmfxx=5000.0)


@pytest.fixture
def cash_only_traditional():
    return ShareValues(vmfxx=15000.0)
