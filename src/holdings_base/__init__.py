from .base_client import QuoteClient, EquityClient
from .models import (
    # Symbol models
    Symbol,
    UnsupportedSymbol,
    AnySymbol,
    SYMBOL_DESCRIPTIONS,
    DISPLAY_ORDER,
    STOCK_SYMBOLS,
    BOND_SYMBOLS,
    INFLATION_SYMBOLS,
    parse_symbol,
    all_stock_descriptions,
    # Holdings models
    ShareValues,
    AccountType,
    Transaction,
    FrozenShareValues,
    AccountHoldings,
    # Aggregates
    VanguardHoldings,
    VanguardRebalance,
)
from .exceptions import (
    AllocationConfigError,
    UnsupportedSymbolError,
    PlacementInvariantError,
    AccountNotFoundError,
    ReportFormatError,
    QuoteRetrievalError,
    EquityRetrievalError,
)

__version__ = "1.0.0"

__all__ = [
    "QuoteClient",
    "EquityClient",
    "Symbol",
    "UnsupportedSymbol",
    "AnySymbol",
    "SYMBOL_DESCRIPTIONS",
    "DISPLAY_ORDER",
    "STOCK_SYMBOLS",
    "BOND_SYMBOLS",
    "INFLATION_SYMBOLS",
    "parse_symbol",
    "all_stock_descriptions",
    "ShareValues",
    "AccountType",
    "Transaction",
    "FrozenShareValues",
    "AccountHoldings",
    "VanguardHoldings",
    "VanguardRebalance",
    "AllocationConfigError",
    "UnsupportedSymbolError",
    "PlacementInvariantError",
    "AccountNotFoundError",
    "ReportFormatError",
    "QuoteRetrievalError",
    "EquityRetrievalError",
    "__version__",
]
