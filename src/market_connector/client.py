"""Quote and external equity clients over HTTP"""

import os
import logging
from typing import Any, Dict, List, Optional, Tuple
from datetime import datetime, timezone
import aiohttp

try:
    from holdings_base import (
        QuoteClient,
        EquityClient,
        Symbol,
        QuoteRetrievalError,
        EquityRetrievalError,
    )
    from rebalance_config import get_config, QuoteConfig, EquityConfig
    from .models import CachedQuote
except ImportError as e:
    raise ImportError(
        f"Failed to import required packages: {e}. "
        "Ensure holdings-base and rebalance-config packages are installed."
    )

USER_AGENT = "Mozilla/5.0 (vanguard-rebalance)"


def parse_chart_closes(symbol: str, data: Dict[str, Any]) -> List[Tuple[datetime, float]]:
    """Extract (timestamp, close) pairs from a chart API response, skipping empty bars"""
    chart = data.get("chart") or {}
    if chart.get("error"):
        raise QuoteRetrievalError(f"Quote API error for {symbol}: {chart['error']}")

    results = chart.get("result") or []
    if not results:
        raise QuoteRetrievalError(f"No chart data returned for {symbol}")

    result = results[0]
    timestamps = result.get("timestamp") or []
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    closes = quotes[0].get("close") or []

    return [
        (datetime.fromtimestamp(ts, tz=timezone.utc), float(close))
        for ts, close in zip(timestamps, closes)
        if close is not None
    ]


class YahooQuoteClient(QuoteClient):
    """Latest and year-end closing prices from the Yahoo chart API"""

    def __init__(self, config: Optional[QuoteConfig] = None, session: Optional[aiohttp.ClientSession] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or get_config().quotes
        self.session = session
        self.logger = logger or logging.getLogger(__name__)

        # Quote cache: (symbol, year or None) -> CachedQuote
        self._quote_cache: Dict[Tuple[str, Optional[int]], CachedQuote] = {}

    async def get_quote(self, symbol: Symbol) -> float:
        """Get the latest closing price for a symbol"""
        cached = self._quote_cache.get((symbol.value, None))
        if cached:
            return cached.price

        closes = await self._fetch_closes(symbol, {"range": "1d", "interval": "1m"})
        if not closes:
            raise QuoteRetrievalError(f"No closing prices returned for {symbol.value}")

        price = closes[-1][1]
        self._quote_cache[(symbol.value, None)] = CachedQuote(symbol=symbol.value, price=price, cached_at=datetime.now())
        self.logger.info(f"Retrieved quote for {symbol.value}: ${price:.2f}")
        return price

    async def get_eoy_quote(self, symbol: Symbol, year: int) -> float:
        """Last close between the configured December day and December 31 of ``year``"""
        cached = self._quote_cache.get((symbol.value, year))
        if cached:
            return cached.price

        # US Eastern standard time is UTC-5 at year end
        start = datetime(year, 12, self.config.eoy_window_start_day, 5, 0, 1, tzinfo=timezone.utc)
        stop = datetime(year + 1, 1, 1, 4, 59, 59, tzinfo=timezone.utc)
        params = {
            "period1": str(int(start.timestamp())),
            "period2": str(int(stop.timestamp())),
            "interval": "1d",
        }

        closes = await self._fetch_closes(symbol, params)
        if not closes:
            raise QuoteRetrievalError(f"No year end {year} closing price for {symbol.value}")

        price = closes[-1][1]
        self._quote_cache[(symbol.value, year)] = CachedQuote(symbol=symbol.value, price=price, cached_at=datetime.now())
        self.logger.info(f"Retrieved {year} year end quote for {symbol.value}: ${price:.2f}")
        return price

    async def _fetch_closes(self, symbol: Symbol, params: Dict[str, str]) -> List[Tuple[datetime, float]]:
        url = f"{self.config.base_url}/{symbol.value}"
        self.logger.debug(f"Requesting {url} with {params}")

        try:
            if self.session is not None:
                data = await self._get_json(self.session, url, params)
            else:
                async with aiohttp.ClientSession(headers={"User-Agent": USER_AGENT}) as session:
                    data = await self._get_json(session, url, params)
        except aiohttp.ClientError as e:
            self.logger.error(f"HTTP error getting quote for {symbol.value}: {e}")
            raise QuoteRetrievalError(f"HTTP error getting quote for {symbol.value}: {e}") from e

        return parse_chart_closes(symbol.value, data)

    async def _get_json(self, session: aiohttp.ClientSession, url: str, params: Dict[str, str]) -> Dict[str, Any]:
        async with session.get(
            url,
            params=params,
            timeout=aiohttp.ClientTimeout(total=self.config.request_timeout_seconds)
        ) as response:
            if response.status != 200:
                response_text = await response.text()
                raise QuoteRetrievalError(f"Quote API returned status {response.status}: {response_text}")

            data = await response.json()
            if not isinstance(data, dict):
                raise QuoteRetrievalError("Quote API response must be a JSON object")
            return data


class AlpacaEquityClient(EquityClient):
    """Account equity from the Alpaca trading API"""

    def __init__(self, config: Optional[EquityConfig] = None, session: Optional[aiohttp.ClientSession] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config or get_config().equity
        self.session = session
        self.logger = logger or logging.getLogger(__name__)
        self.key_id = os.getenv(self.config.key_id_env, '')
        self.secret_key = os.getenv(self.config.secret_key_env, '')

    def has_credentials(self) -> bool:
        return bool(self.key_id and self.secret_key)

    async def get_equity(self) -> float:
        """Account equity in USD, or 0.0 when no API credentials are configured"""
        if not self.has_credentials():
            self.logger.debug(
                f"{self.config.key_id_env}/{self.config.secret_key_env} not set, external equity is 0"
            )
            return 0.0

        url = f"{self.config.base_url}/v2/account"
        headers = {
            'APCA-API-KEY-ID': self.key_id,
            'APCA-API-SECRET-KEY': self.secret_key,
        }

        try:
            if self.session is not None:
                data = await self._get_json(self.session, url, headers)
            else:
                async with aiohttp.ClientSession() as session:
                    data = await self._get_json(session, url, headers)
        except aiohttp.ClientError as e:
            self.logger.error(f"HTTP error getting account equity: {e}")
            raise EquityRetrievalError(f"HTTP error getting account equity: {e}") from e

        try:
            equity = float(data['equity'])
        except (KeyError, TypeError, ValueError) as e:
            raise EquityRetrievalError(f"Account response has no usable equity field: {data}") from e

        self.logger.info(f"Retrieved external brokerage equity: ${equity:,.2f}")
        return equity

    async def _get_json(self, session: aiohttp.ClientSession, url: str, headers: Dict[str, str]) -> Dict[str, Any]:
        async with session.get(
            url,
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.config.request_timeout_seconds)
        ) as response:
            if response.status != 200:
                response_text = await response.text()
                raise EquityRetrievalError(f"Account API returned status {response.status}: {response_text}")

            data = await response.json()
            if not isinstance(data, dict):
                raise EquityRetrievalError("Account API response must be a JSON object")
            return data
