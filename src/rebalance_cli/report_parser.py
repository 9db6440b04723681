"""
Parser for the Vanguard holdings/transactions CSV download.

The download holds two sections. The holdings section starts with a header
row containing ``Account Number``, ``Symbol``, ``Shares``, ``Share Price``
and ``Total Value``; the transactions section starts with a header row
containing ``Trade Date``. Rows with fewer than five columns (blank lines,
disclaimers) are ignored.
"""
import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from holdings_base import (
    AccountNotFoundError,
    AccountType,
    ReportFormatError,
    ShareValues,
    Transaction,
    UnsupportedSymbol,
    VanguardHoldings,
    parse_symbol,
)

logger = logging.getLogger(__name__)

MIN_COLUMNS = 5
TRADE_DATE_FORMAT = "%Y-%m-%d"
HOLDINGS_COLUMNS = ("Account Number", "Symbol", "Shares", "Share Price", "Total Value")
TRANSACTION_COLUMNS = ("Account Number", "Trade Date", "Symbol", "Shares")


def parse_report(csv_path: str | Path, brokerage_account: Optional[int] = None,
                 traditional_account: Optional[int] = None,
                 roth_account: Optional[int] = None) -> VanguardHoldings:
    """Read the download file and build holdings for the requested accounts"""
    with open(csv_path, 'r', newline='', encoding='utf-8-sig') as f:
        return parse_report_rows(
            csv.reader(f),
            brokerage_account=brokerage_account,
            traditional_account=traditional_account,
            roth_account=roth_account,
        )


def parse_report_rows(rows: Iterable[List[str]], brokerage_account: Optional[int] = None,
                      traditional_account: Optional[int] = None,
                      roth_account: Optional[int] = None) -> VanguardHoldings:
    accounts: Dict[int, ShareValues] = {}
    quotes = ShareValues.new_quote()
    traditional_shares: Optional[ShareValues] = None
    transactions: List[Transaction] = []

    header: List[str] = []
    transaction_header: List[str] = []
    holdings_section = True

    for line_number, row in enumerate(rows, start=1):
        if len(row) < MIN_COLUMNS:
            continue
        row = [value.strip() for value in row]

        if "Trade Date" in row:
            holdings_section = False
            transaction_header = row
            continue

        if holdings_section:
            if not header:
                header = row
                continue
            record = _row_to_record(header, row, HOLDINGS_COLUMNS)
            if record is None:
                continue

            account_number = _parse_int(record["Account Number"], line_number)
            account = accounts.setdefault(account_number, ShareValues())
            symbol = parse_symbol(record["Symbol"])
            if isinstance(symbol, UnsupportedSymbol):
                continue
            shares = _parse_float(record["Shares"], line_number)
            share_price = _parse_float(record["Share Price"], line_number)
            total_value = _parse_float(record["Total Value"], line_number)

            account.set_value(symbol, account.value(symbol) + total_value)
            quotes.set_value(symbol, share_price)

            if traditional_account is not None and account_number == traditional_account:
                if traditional_shares is None:
                    traditional_shares = ShareValues()
                traditional_shares.set_value(symbol, traditional_shares.value(symbol) + shares)
        else:
            if not transaction_header:
                continue
            record = _row_to_record(transaction_header, row, TRANSACTION_COLUMNS)
            if record is None:
                continue

            account_number = _parse_int(record["Account Number"], line_number)
            if traditional_account is None or account_number != traditional_account:
                continue

            transactions.append(Transaction(
                account_number=account_number,
                trade_date=_parse_date(record["Trade Date"], line_number),
                symbol=parse_symbol(record["Symbol"]),
                shares=_parse_float(record["Shares"], line_number),
            ))

    if not header:
        raise ReportFormatError("No holdings header row found in the report")

    logger.info(f"Parsed {len(accounts)} accounts and {len(transactions)} traditional IRA transactions")

    holdings = VanguardHoldings(
        quotes=quotes,
        transactions=transactions,
        traditional_shares=traditional_shares,
    )
    requested = (
        (AccountType.BROKERAGE, brokerage_account),
        (AccountType.TRADITIONAL_IRA, traditional_account),
        (AccountType.ROTH_IRA, roth_account),
    )
    for account_type, account_number in requested:
        if account_number is None:
            continue
        if account_number not in accounts:
            raise AccountNotFoundError(
                f"{account_type.label} account number not found within the download file\n"
                f"Input account: {account_number}\n"
                f"Possible accounts: {sorted(accounts)}"
            )
        holdings.add_holding(accounts[account_number], account_type)

    return holdings


def _row_to_record(header: List[str], row: List[str], required: Tuple[str, ...]) -> Optional[Dict[str, str]]:
    """Map header names to row values; None when the row has no usable symbol"""
    record = dict(zip(header, row))
    if any(name not in record for name in required):
        raise ReportFormatError(f"Report header is missing one of {required}: {header}")
    if len(record["Symbol"]) <= 1:
        return None
    return record


def _parse_int(value: str, line_number: int) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ReportFormatError(f"Line {line_number}: invalid account number '{value}'") from e


def _parse_float(value: str, line_number: int) -> float:
    try:
        return float(value.replace('$', '').replace(',', ''))
    except ValueError as e:
        raise ReportFormatError(f"Line {line_number}: invalid number '{value}'") from e


def _parse_date(value: str, line_number: int):
    try:
        return datetime.strptime(value, TRADE_DATE_FORMAT).date()
    except ValueError as e:
        raise ReportFormatError(f"Line {line_number}: invalid trade date '{value}'") from e
