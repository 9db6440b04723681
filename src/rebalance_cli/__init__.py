"""Command line application for the Vanguard rebalancer."""

from .formatter import (
    format_share_values,
    format_account_holdings,
    format_rebalance,
    write_text_report,
    write_csv,
)
from .report_parser import parse_report, parse_report_rows
from .service import RebalanceRunner

__version__ = "1.0.0"

__all__ = [
    "format_share_values",
    "format_account_holdings",
    "format_rebalance",
    "write_text_report",
    "write_csv",
    "parse_report",
    "parse_report_rows",
    "RebalanceRunner",
    "__version__",
]
