from .client import YahooQuoteClient, AlpacaEquityClient, parse_chart_closes
from .models import CachedQuote

__version__ = "1.0.0"

__all__ = [
    "YahooQuoteClient",
    "AlpacaEquityClient",
    "parse_chart_closes",
    "CachedQuote",
    "__version__",
]
