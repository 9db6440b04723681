from abc import ABC, abstractmethod
from .models import Symbol, ShareValues

class QuoteClient(ABC):
    """Abstract base class for stock quote providers"""

    @abstractmethod
    async def get_quote(self, symbol: Symbol) -> float:
        """Get the latest closing price for a symbol"""
        pass

    @abstractmethod
    async def get_eoy_quote(self, symbol: Symbol, year: int) -> float:
        """Get the last closing price of the given calendar year"""
        pass

    async def add_missing_quotes(self, quotes: ShareValues) -> ShareValues:
        """Replace every quote still at the 1.0 default with a retrieved price"""
        filled = quotes
        for symbol in quoted_symbols():
            if filled.value(symbol) == 1.0:
                filled = filled.with_value(symbol, await self.get_quote(symbol))
        return filled

    async def eoy_quotes(self, year: int) -> ShareValues:
        """Year-end prices for every quoted symbol"""
        quotes = ShareValues.new_quote()
        for symbol in quoted_symbols():
            quotes.set_value(symbol, await self.get_eoy_quote(symbol, year))
        return quotes

class EquityClient(ABC):
    """Abstract base class for external brokerage account equity"""

    @abstractmethod
    async def get_equity(self) -> float:
        """Get total account equity in USD"""
        pass


def quoted_symbols():
    """Symbols with a market price; the money market fund is fixed at 1.0"""
    return [symbol for symbol in Symbol if symbol is not Symbol.VMFXX]
