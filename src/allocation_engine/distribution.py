"""Required minimum distribution from the traditional IRA"""

import logging
from datetime import date
from importlib import resources
from pathlib import Path
from typing import Dict, Mapping, Optional
from holdings_base import ShareValues, VanguardHoldings

logger = logging.getLogger(__name__)

BUNDLED_TABLE = "uniform_lifetime_table.csv"


def calculate_minimum_distribution(age: int, traditional_value: float, table: Mapping[int, float]) -> float:
    """Required annual distribution; 0.0 when the age is not in the table"""
    divisor = table.get(age)
    if divisor is None:
        logger.debug(f"No distribution period for age {age}")
        return 0.0
    return traditional_value / divisor


def parse_distribution_table(text: str) -> Dict[int, float]:
    """
    Parse a two-column age/divisor table.

    Columns may be separated by commas, tabs or spaces. Rows that do not
    start with an integer age (headers, notes) are skipped.
    """
    table: Dict[int, float] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        columns = line.replace(",", " ").split()
        if len(columns) < 2:
            continue
        try:
            age = int(columns[0].strip())
            divisor = float(columns[1].strip())
        except ValueError:
            continue
        if divisor <= 0:
            raise ValueError(f"Distribution period for age {age} must be positive, got {divisor}")
        table[age] = divisor
    return table


def load_distribution_table(path: Optional[str | Path] = None) -> Dict[int, float]:
    """Load the age/divisor table from ``path`` or the bundled uniform lifetime table"""
    if path is None:
        text = resources.files(__package__).joinpath("data", BUNDLED_TABLE).read_text(encoding="utf-8")
        source = BUNDLED_TABLE
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    table = parse_distribution_table(text)
    logger.debug(f"Loaded {len(table)} distribution periods from {source}")
    return table


def eoy_traditional_value(holdings: VanguardHoldings, eoy_quotes: ShareValues, as_of: date) -> Optional[float]:
    """Traditional IRA value at the end of last year, or None if it cannot be reconstructed"""
    eoy_shares = holdings.eoy_traditional_shares(as_of)
    if eoy_shares is None:
        return None
    return eoy_shares.multiply(eoy_quotes).managed_value()
