import logging
import operator
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .exceptions import UnsupportedSymbolError

logger = logging.getLogger(__name__)

# Symbol models
class Symbol(str, Enum):
    """Tickers supported by the allocation math"""
    VV = "VV"
    VO = "VO"
    VB = "VB"
    VTC = "VTC"
    BND = "BND"
    VXUS = "VXUS"
    VWO = "VWO"
    BNDX = "BNDX"
    VTIP = "VTIP"
    VTI = "VTI"
    VTIVX = "VTIVX"
    VMFXX = "VMFXX"

    @property
    def field_name(self) -> str:
        """Name of the ShareValues field holding this symbol"""
        return self.value.lower()

    @property
    def description(self) -> str:
        return f"{self.value}: {SYMBOL_DESCRIPTIONS[self]}"

class UnsupportedSymbol(BaseModel):
    """Ticker outside the supported set, kept only so it can be reported"""
    model_config = ConfigDict(frozen=True)

    ticker: str

AnySymbol = Union[Symbol, UnsupportedSymbol]

SYMBOL_DESCRIPTIONS: Dict[Symbol, str] = {
    Symbol.VV: "US large cap",
    Symbol.VO: "US mid cap",
    Symbol.VB: "US small cap",
    Symbol.VTC: "US total corporate bond",
    Symbol.BND: "US total bond",
    Symbol.VXUS: "Total international stock",
    Symbol.VWO: "Emerging markets stock",
    Symbol.BNDX: "Total international bond",
    Symbol.VTIP: "Inflation protected securities",
    Symbol.VTI: "Total domestic stock",
    Symbol.VTIVX: "2045 Retirement fund",
    Symbol.VMFXX: "Federal money market",
}

# Order used for every printed table
DISPLAY_ORDER: Tuple[Symbol, ...] = (
    Symbol.VV,
    Symbol.VO,
    Symbol.VB,
    Symbol.VTC,
    Symbol.BND,
    Symbol.VXUS,
    Symbol.VWO,
    Symbol.BNDX,
    Symbol.VTIP,
    Symbol.VTI,
    Symbol.VTIVX,
)

STOCK_SYMBOLS = frozenset({Symbol.VV, Symbol.VO, Symbol.VB, Symbol.VXUS, Symbol.VWO, Symbol.VTI})
BOND_SYMBOLS = frozenset({Symbol.BND, Symbol.VTC, Symbol.BNDX})
INFLATION_SYMBOLS = frozenset({Symbol.VTIP})


def parse_symbol(ticker: str) -> AnySymbol:
    """Map a raw ticker to a Symbol, or to UnsupportedSymbol with a warning"""
    ticker = ticker.strip().upper()
    try:
        return Symbol(ticker)
    except ValueError:
        logger.warning(f"{ticker} is not supported within this algorithm")
        return UnsupportedSymbol(ticker=ticker)


def all_stock_descriptions() -> str:
    """Descriptions of every displayed symbol, one per line"""
    return "\n".join(symbol.description for symbol in DISPLAY_ORDER)


# Holdings vector
class ShareValues(BaseModel):
    """
    Per-symbol amounts for the supported ETFs.

    The same shape holds dollar holdings, per-share quotes, or the number of
    shares to trade. ``outside_stock`` and ``outside_bond`` carry value held
    outside the managed accounts that still counts toward the allocation.
    """
    vv: float = 0.0
    vo: float = 0.0
    vb: float = 0.0
    vtc: float = 0.0
    bnd: float = 0.0
    vxus: float = 0.0
    vwo: float = 0.0
    bndx: float = 0.0
    vtip: float = 0.0
    vti: float = 0.0
    vtivx: float = 0.0
    vmfxx: float = 0.0
    outside_stock: float = 0.0
    outside_bond: float = 0.0

    @classmethod
    def new_quote(cls) -> "ShareValues":
        """Quotes default to 1.0 so a missing quote turns a share count into dollars"""
        return cls(**{name: 1.0 for name in cls.model_fields})

    def value(self, symbol: AnySymbol) -> float:
        if isinstance(symbol, UnsupportedSymbol):
            raise UnsupportedSymbolError(f"Value retrieval not supported for {symbol.ticker}")
        return getattr(self, symbol.field_name)

    def set_value(self, symbol: AnySymbol, value: float) -> None:
        """Set a symbol's amount in place; unsupported symbols are skipped"""
        if isinstance(symbol, UnsupportedSymbol):
            logger.warning(f"Ignoring {value:.2f} for unsupported symbol {symbol.ticker}")
            return
        setattr(self, symbol.field_name, value)

    def with_value(self, symbol: AnySymbol, value: float) -> "ShareValues":
        updated = self.model_copy()
        updated.set_value(symbol, value)
        return updated

    def _combine(self, other: "ShareValues", operation: Callable[[float, float], float]) -> "ShareValues":
        return ShareValues(**{
            name: operation(getattr(self, name), getattr(other, name))
            for name in type(self).model_fields
        })

    def add(self, other: "ShareValues") -> "ShareValues":
        return self._combine(other, operator.add)

    def subtract(self, other: "ShareValues") -> "ShareValues":
        return self._combine(other, operator.sub)

    def divide(self, other: "ShareValues") -> "ShareValues":
        """Elementwise division; a zero field in ``other`` raises ZeroDivisionError"""
        return self._combine(other, operator.truediv)

    def multiply(self, other: "ShareValues") -> "ShareValues":
        """Elementwise product, e.g. share counts times quotes gives dollar values"""
        return self._combine(other, operator.mul)

    def __add__(self, other: "ShareValues") -> "ShareValues":
        return self.add(other)

    def __sub__(self, other: "ShareValues") -> "ShareValues":
        return self.subtract(other)

    def __truediv__(self, other: "ShareValues") -> "ShareValues":
        return self.divide(other)

    def __mul__(self, other: "ShareValues") -> "ShareValues":
        return self.multiply(other)

    def isclose(self, other: "ShareValues", abs_tol: float = 1e-6) -> bool:
        return all(
            abs(getattr(self, name) - getattr(other, name)) <= abs_tol
            for name in type(self).model_fields
        )

    def total_value(self) -> float:
        """Sum of every field, cash and outside value included"""
        return sum(getattr(self, name) for name in type(self).model_fields)

    def managed_value(self) -> float:
        """Sum of the symbol fields only, i.e. what is held inside the account"""
        return sum(getattr(self, symbol.field_name) for symbol in Symbol)

    def percent_stock_bond_infl(self) -> Tuple[float, float, float]:
        """
        Stock, bond and inflation-protected percentages.

        Cash is left out of the denominator, outside stock and bond are
        counted. An empty portfolio returns (0.0, 0.0, 0.0).
        """
        total_stock = sum(self.value(symbol) for symbol in STOCK_SYMBOLS) + self.outside_stock
        total_bond = sum(self.value(symbol) for symbol in BOND_SYMBOLS) + self.outside_bond
        total_inflation = sum(self.value(symbol) for symbol in INFLATION_SYMBOLS)
        total = self.total_value() - self.vmfxx

        if total == 0:
            return 0.0, 0.0, 0.0

        return (
            total_stock / total * 100.0,
            total_bond / total * 100.0,
            total_inflation / total * 100.0,
        )


# Account models
class AccountType(str, Enum):
    """Managed account kinds"""
    BROKERAGE = "brokerage"
    TRADITIONAL_IRA = "traditional_ira"
    ROTH_IRA = "roth_ira"

    @property
    def label(self) -> str:
        return {
            AccountType.BROKERAGE: "Brokerage",
            AccountType.TRADITIONAL_IRA: "Traditional IRA",
            AccountType.ROTH_IRA: "Roth IRA",
        }[self]

class Transaction(BaseModel):
    """Single row from the transactions section of the holdings report"""
    account_number: int
    trade_date: date
    symbol: AnySymbol
    shares: float

class FrozenShareValues(ShareValues):
    """Read-only ShareValues held by a finished rebalance"""
    model_config = ConfigDict(frozen=True)

class AccountHoldings(BaseModel):
    """Current, target and purchase/sale amounts for one account; the vectors are frozen copies"""
    model_config = ConfigDict(frozen=True)

    current: ShareValues
    target: ShareValues
    purchase: ShareValues

    @field_validator("current", "target", "purchase", mode="after")
    @classmethod
    def freeze_values(cls, v: ShareValues) -> ShareValues:
        if isinstance(v, FrozenShareValues):
            return v
        return FrozenShareValues(**v.model_dump())

    @classmethod
    def from_target(cls, current: ShareValues, target: ShareValues, quotes: ShareValues) -> "AccountHoldings":
        """Build the triple with purchase = (target - current) / quotes"""
        purchase = target.subtract(current).divide(quotes)
        return cls(current=current, target=target, purchase=purchase)

# Aggregates
class VanguardHoldings(BaseModel):
    """Holdings of every managed account parsed from one report"""
    brokerage: Optional[ShareValues] = None
    traditional_ira: Optional[ShareValues] = None
    roth_ira: Optional[ShareValues] = None
    quotes: ShareValues = Field(default_factory=ShareValues.new_quote)
    transactions: List[Transaction] = Field(default_factory=list)
    traditional_shares: Optional[ShareValues] = None

    def holdings(self, account_type: AccountType) -> Optional[ShareValues]:
        return getattr(self, account_type.value)

    def add_holding(self, holding: ShareValues, account_type: AccountType) -> None:
        setattr(self, account_type.value, holding)

    def eoy_traditional_shares(self, as_of: date) -> Optional[ShareValues]:
        """
        Reconstruct traditional IRA share counts at the end of last year.

        Transactions dated after December 31 of the previous year are
        reversed from the current share counts. Returns None when there is no
        traditional account or no transaction history to work from.
        """
        if self.traditional_shares is None:
            return None

        if not self.transactions:
            logger.warning("No transactions found to calculate end of year holdings for minimum distribution")
            return None

        year_end = date(as_of.year - 1, 12, 31)
        eoy_shares = self.traditional_shares.model_copy()
        history_reaches_year_end = False

        for transaction in self.transactions:
            if transaction.trade_date > year_end:
                if isinstance(transaction.symbol, UnsupportedSymbol):
                    continue
                current = eoy_shares.value(transaction.symbol)
                eoy_shares.set_value(transaction.symbol, current - transaction.shares)
            else:
                history_reaches_year_end = True

        if not history_reaches_year_end:
            logger.warning(
                "Possibly not enough history in the downloaded report to accurately "
                "calculate end of year holdings"
            )

        return eoy_shares

class VanguardRebalance(BaseModel):
    """Rebalance result for every present account"""
    brokerage: Optional[AccountHoldings] = None
    traditional_ira: Optional[AccountHoldings] = None
    roth_ira: Optional[AccountHoldings] = None
    retirement_target: Optional[ShareValues] = None
    minimum_distribution: Optional[float] = None

    def add_account_holdings(self, account_holdings: AccountHoldings, account_type: AccountType) -> None:
        setattr(self, account_type.value, account_holdings)

    def add_retirement_target(self, retirement_target: ShareValues) -> None:
        self.retirement_target = retirement_target

    def account(self, account_type: AccountType) -> Optional[AccountHoldings]:
        return getattr(self, account_type.value)

    def accounts(self) -> List[Tuple[AccountType, AccountHoldings]]:
        """Present accounts in display order"""
        ordered = (AccountType.TRADITIONAL_IRA, AccountType.ROTH_IRA, AccountType.BROKERAGE)
        return [
            (account_type, self.account(account_type))
            for account_type in ordered
            if self.account(account_type) is not None
        ]
