"""Text and CSV rendering of rebalance results"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from holdings_base import (
    DISPLAY_ORDER,
    AccountHoldings,
    ShareValues,
    VanguardRebalance,
    all_stock_descriptions,
)

logger = logging.getLogger(__name__)

REPORT_FILE_SUFFIX = "_vanguard_rebalance.txt"
REPORT_TIMESTAMP_FORMAT = "%Y-%m-%d_%H:%M"
CSV_COLUMNS = ["account", "symbol", "purchase", "current", "target"]

SHARE_VALUES_RULE = "-" * 31
SHARE_VALUES_END = "=" * 31
ACCOUNT_RULE = "-" * 54
ACCOUNT_END = "=" * 54


def _percent_split(values: ShareValues) -> str:
    stock, bond, inflation = values.percent_stock_bond_infl()
    return f"{stock:.1f}:{bond:.1f}:{inflation:.1f}"


def format_share_values(values: ShareValues) -> str:
    lines = ["Symbol         Value", SHARE_VALUES_RULE]
    for symbol in DISPLAY_ORDER:
        lines.append(f"{symbol.value:<17}{values.value(symbol):.2f}")
    lines.extend([
        SHARE_VALUES_RULE,
        f"{'Cash':<17}{values.vmfxx:.2f}",
        f"{'Total':<17}{values.total_value():.2f}",
        f"{'Outside stock':<17}{values.outside_stock:.2f}",
        f"{'Outside bond':<17}{values.outside_bond:.2f}",
        f"{'Stock:Bond:Infl':<17}{_percent_split(values)}",
        SHARE_VALUES_END,
    ])
    return "\n".join(lines)


def format_account_holdings(holdings: AccountHoldings) -> str:
    """
    Table of shares to buy (positive) or sell (negative) next to the
    current and target dollar values of every symbol.
    """
    current, target, purchase = holdings.current, holdings.target, holdings.purchase
    lines = ["Symbol   Purchase/Sell  Current         Target", ACCOUNT_RULE]
    for symbol in DISPLAY_ORDER:
        lines.append(
            f"{symbol.value:<9}{purchase.value(symbol):<15.2f}"
            f"${current.value(symbol):<15.2f}${target.value(symbol):<15.2f}"
        )
    lines.extend([
        ACCOUNT_RULE,
        f"{'Cash':<24}${current.vmfxx:<15.2f}${target.vmfxx:<15.2f}",
        f"{'Total':<24}${current.total_value():<15.2f}",
        f"{'Outside stock':<24}${current.outside_stock:<15.2f}${target.outside_stock:<15.2f}",
        f"{'Outside bond':<24}${current.outside_bond:<15.2f}${target.outside_bond:<15.2f}",
        f"{'Stock:Bond:Inflation':<24}{_percent_split(current):<16}{_percent_split(target):<15}",
        ACCOUNT_END,
    ])
    return "\n".join(lines)


def format_rebalance(rebalance: VanguardRebalance) -> str:
    """Full report: symbol descriptions, combined retirement target, then each account"""
    sections: List[str] = []
    if rebalance.retirement_target is not None:
        sections.append(f"Retirement target:\n{format_share_values(rebalance.retirement_target)}")
    for account_type, holdings in rebalance.accounts():
        sections.append(f"{account_type.label}:\n{format_account_holdings(holdings)}")
    if rebalance.minimum_distribution is not None:
        sections.append(f"Minimum distribution:  ${rebalance.minimum_distribution:,.2f}")

    return f"DESCRIPTIONS:\n{all_stock_descriptions()}\n\n" + "\n\n".join(sections)


def report_file_name(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"{now.strftime(REPORT_TIMESTAMP_FORMAT)}{REPORT_FILE_SUFFIX}"


def write_text_report(text: str, directory: str | Path = ".", now: Optional[datetime] = None) -> Path:
    """Write the rendered report to a timestamped file and return its path"""
    os.makedirs(directory, exist_ok=True)
    path = Path(directory) / report_file_name(now)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Wrote rebalance report to {path}")
    return path


def write_csv(rebalance: VanguardRebalance, path: str | Path) -> Path:
    """One row per account and symbol with the purchase, current and target amounts"""
    path = Path(path)
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for account_type, holdings in rebalance.accounts():
            for symbol in DISPLAY_ORDER:
                writer.writerow([
                    account_type.value,
                    symbol.value,
                    f"{holdings.purchase.value(symbol):.2f}",
                    f"{holdings.current.value(symbol):.2f}",
                    f"{holdings.target.value(symbol):.2f}",
                ])
    logger.info(f"Wrote rebalance CSV to {path}")
    return path
