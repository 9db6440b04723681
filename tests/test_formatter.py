"""Tests for report rendering."""

import csv
from datetime import datetime

import pytest

from holdings_base import AccountHoldings, AccountType, ShareValues, VanguardRebalance
from rebalance_cli import (
    format_account_holdings,
    format_rebalance,
    format_share_values,
    write_csv,
    write_text_report,
)


@pytest.fixture
def rebalance():
    quotes = ShareValues.new_quote()
    result = VanguardRebalance()
    result.add_retirement_target(ShareValues(vv=1000.0, bnd=1000.0))
    result.add_account_holdings(
        AccountHoldings.from_target(ShareValues(vmfxx=1000.0), ShareValues(vv=1000.0), quotes),
        AccountType.ROTH_IRA,
    )
    result.add_account_holdings(
        AccountHoldings.from_target(ShareValues(vmfxx=1000.0), ShareValues(bnd=1000.0), quotes),
        AccountType.TRADITIONAL_IRA,
    )
    return result


class TestFormatting:
    def test_share_values_table(self):
        text = format_share_values(ShareValues(vv=1333.333, vmfxx=10.0))
        lines = text.splitlines()

        assert lines[0] == "Symbol         Value"
        assert lines[2] == "VV               1333.33"
        assert "Cash             10.00" in lines
        assert "Total            1343.33" in lines
        assert lines[-2] == "Stock:Bond:Infl  100.0:0.0:0.0"

    def test_account_holdings_table(self, rebalance):
        text = format_account_holdings(rebalance.roth_ira)
        lines = text.splitlines()

        assert lines[0] == "Symbol   Purchase/Sell  Current         Target"
        assert lines[2].startswith("VV       1000.00        $0.00           $1000.00")
        assert lines[-2].startswith("Stock:Bond:Inflation    0.0:0.0:0.0     100.0:0.0:0.0")

    def test_rebalance_sections_in_order(self, rebalance):
        text = format_rebalance(rebalance)

        assert text.startswith("DESCRIPTIONS:\nVV: US large cap\n")
        assert text.index("Retirement target:") < text.index("Traditional IRA:") < text.index("Roth IRA:")
        assert "Brokerage:" not in text
        assert "Minimum distribution" not in text

    def test_minimum_distribution_line(self, rebalance):
        rebalance.minimum_distribution = 1234.5
        assert "Minimum distribution:  $1,234.50" in format_rebalance(rebalance)


class TestWriters:
    def test_text_report_file_name(self, tmp_path):
        path = write_text_report("report", tmp_path, now=datetime(2026, 10, 16, 9, 5))

        assert path.name == "2026-10-16_09:05_vanguard_rebalance.txt"
        assert path.read_text(encoding="utf-8") == "report"

    def test_csv_rows(self, rebalance, tmp_path):
        path = write_csv(rebalance, tmp_path / "rebalance.csv")

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 22
        assert rows[0] == {
            "account": "traditional_ira",
            "symbol": "VV",
            "purchase": "0.00",
            "current": "0.00",
            "target": "0.00",
        }
        roth_vv = next(row for row in rows if row["account"] == "roth_ira" and row["symbol"] == "VV")
        assert roth_vv["purchase"] == "1000.00"
        assert roth_vv["target"] == "1000.00"
