"""Tests for parsing the Vanguard holdings download."""

import csv
import io
from datetime import date

import pytest

from conftest import (
    BROKERAGE_ACCOUNT,
    HOLDINGS_HEADER,
    REPORT_CSV,
    ROTH_ACCOUNT,
    TRADITIONAL_ACCOUNT,
)
from holdings_base import AccountNotFoundError, ReportFormatError, Symbol
from rebalance_cli import parse_report, parse_report_rows


def _rows(text):
    return list(csv.reader(io.StringIO(text)))


class TestParseReport:
    def test_all_accounts(self, report_path):
        holdings = parse_report(
            report_path,
            brokerage_account=BROKERAGE_ACCOUNT,
            traditional_account=TRADITIONAL_ACCOUNT,
            roth_account=ROTH_ACCOUNT,
        )

        assert holdings.brokerage.vv == pytest.approx(2000.0)
        assert holdings.brokerage.vmfxx == pytest.approx(2000.0)
        assert holdings.traditional_ira.bnd == pytest.approx(7500.0)
        assert holdings.traditional_ira.vxus == pytest.approx(6000.0)
        assert holdings.roth_ira.vwo == pytest.approx(2000.0)
        assert holdings.roth_ira.total_value() == pytest.approx(5000.0)

    def test_unsupported_symbols_are_skipped(self, report_path):
        holdings = parse_report(report_path, brokerage_account=BROKERAGE_ACCOUNT)
        assert holdings.brokerage.total_value() == pytest.approx(4000.0)

    def test_quotes_from_share_price(self, report_path):
        quotes = parse_report(report_path, roth_account=ROTH_ACCOUNT).quotes

        assert quotes.vv == pytest.approx(200.0)
        assert quotes.bnd == pytest.approx(75.0)
        assert quotes.vwo == pytest.approx(40.0)
        assert quotes.vo == 1.0

    def test_only_requested_accounts_are_present(self, report_path):
        holdings = parse_report(report_path, roth_account=ROTH_ACCOUNT)
        assert holdings.brokerage is None
        assert holdings.traditional_ira is None

    def test_traditional_shares_and_transactions(self, report_path):
        holdings = parse_report(report_path, traditional_account=TRADITIONAL_ACCOUNT)

        assert holdings.traditional_shares.bnd == pytest.approx(100.0)
        assert holdings.traditional_shares.vxus == pytest.approx(100.0)
        assert len(holdings.transactions) == 3
        assert holdings.transactions[0].trade_date == date(2026, 2, 3)
        assert holdings.transactions[0].symbol is Symbol.BND

        eoy = holdings.eoy_traditional_shares(date(2026, 3, 1))
        assert eoy.bnd == pytest.approx(80.0)
        assert eoy.vxus == pytest.approx(110.0)

    def test_no_traditional_account_no_transactions(self, report_path):
        holdings = parse_report(report_path, roth_account=ROTH_ACCOUNT)
        assert holdings.transactions == []
        assert holdings.traditional_shares is None

    def test_missing_account_lists_possible_accounts(self, report_path):
        with pytest.raises(AccountNotFoundError) as exc_info:
            parse_report(report_path, roth_account=99999999)

        message = str(exc_info.value)
        assert "Roth IRA account number not found" in message
        assert str(BROKERAGE_ACCOUNT) in message
        assert str(ROTH_ACCOUNT) in message

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_report(tmp_path / "missing.csv")


class TestParseReportRows:
    def test_values_summed_per_account(self):
        text = "\n".join([
            HOLDINGS_HEADER,
            "1,VANGUARD LARGE-CAP ETF,VV,1,100.00,100.00,",
            "1,VANGUARD LARGE-CAP ETF,VV,2,100.00,\"1,200.00\",",
        ])
        holdings = parse_report_rows(_rows(text), roth_account=1)
        assert holdings.roth_ira.vv == pytest.approx(1300.0)

    def test_blank_symbol_rows_ignored(self):
        text = "\n".join([
            HOLDINGS_HEADER,
            "1,SETTLEMENT FUND,,0,0,500.00,",
            "1,VANGUARD MID-CAP ETF,VO,1,250.00,250.00,",
        ])
        holdings = parse_report_rows(_rows(text), roth_account=1)
        assert holdings.roth_ira.total_value() == pytest.approx(250.0)

    def test_no_header_raises(self):
        with pytest.raises(ReportFormatError):
            parse_report_rows([["a", "b"], []])

    def test_header_missing_columns_raises(self):
        text = "Account Number,Symbol,Shares,Price,Value\n1,VV,1,2,3\n"
        with pytest.raises(ReportFormatError, match="missing"):
            parse_report_rows(_rows(text), roth_account=1)

    def test_bad_number_reports_line(self):
        text = "\n".join([HOLDINGS_HEADER, "1,VANGUARD LARGE-CAP ETF,VV,one,100.00,100.00,"])
        with pytest.raises(ReportFormatError, match="Line 2"):
            parse_report_rows(_rows(text), roth_account=1)

    def test_report_fixture_parses_without_accounts(self):
        holdings = parse_report_rows(_rows(REPORT_CSV))
        assert holdings.brokerage is None
        assert holdings.roth_ira is None
