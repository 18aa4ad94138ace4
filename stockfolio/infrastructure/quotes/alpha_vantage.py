"""
Alpha Vantage quote source.

Fetches last-traded prices through the ``GLOBAL_QUOTE`` endpoint. Prices are
cached per symbol for a short time, symbols are fetched in small concurrent
batches with a pause in between, and the remaining batches are skipped once
the provider reports its call frequency limit.
"""

import asyncio
import math
from collections.abc import Iterable
from threading import RLock
from typing import Any

import requests
from cachetools import TTLCache
from loguru import logger

from stockfolio.core.constants import (
    ALPHA_VANTAGE_BASE_URL,
    QUOTE_BATCH_DELAY_SECONDS,
    QUOTE_BATCH_SIZE,
    QUOTE_CACHE_MAX_SYMBOLS,
    QUOTE_CACHE_TTL_SECONDS,
    REQUEST_TIMEOUT_SECONDS,
)
from stockfolio.core.exceptions.portfolio import (
    ConfigurationError,
    ExternalSourceError,
    QuoteRateLimitError,
)
from stockfolio.core.interfaces.quotes import IQuoteSource

_RATE_LIMIT_KEYS = ("Note", "Information")


def unique_symbols(symbols: Iterable[str]) -> list[str]:
    """Trim, upper-case and deduplicate symbols, keeping first-seen order."""
    return list(
        dict.fromkeys(
            symbol.strip().upper()
            for symbol in symbols
            if isinstance(symbol, str) and symbol.strip()
        )
    )


class AlphaVantageQuoteSource(IQuoteSource):
    """Quote source backed by the Alpha Vantage REST API."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = ALPHA_VANTAGE_BASE_URL,
        batch_size: int = QUOTE_BATCH_SIZE,
        batch_delay_seconds: float = QUOTE_BATCH_DELAY_SECONDS,
        cache_ttl_seconds: float = QUOTE_CACHE_TTL_SECONDS,
        request_timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the quote source.

        Args:
            api_key: Alpha Vantage access key; fetching fails without one
            base_url: Query endpoint
            batch_size: Symbols fetched concurrently per batch
            batch_delay_seconds: Pause between batches
            cache_ttl_seconds: How long a fetched price is reused
            request_timeout_seconds: Per-request HTTP timeout
            session: Optional preconfigured requests session
        """
        if batch_size < 1:
            raise ConfigurationError(f"batch_size must be at least 1, got {batch_size}")

        self.api_key = api_key
        self.base_url = base_url
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self.request_timeout_seconds = request_timeout_seconds
        self.session = session or requests.Session()
        self._cache: TTLCache[str, float] = TTLCache(
            maxsize=QUOTE_CACHE_MAX_SYMBOLS, ttl=cache_ttl_seconds
        )
        self._cache_lock = RLock()

    def fetch_price(self, symbol: str) -> float:
        """Fetch the last-traded price of one symbol, using the cache when fresh.

        Args:
            symbol: Ticker symbol

        Returns:
            Positive last-traded price

        Raises:
            ConfigurationError: If no API key is configured
            QuoteRateLimitError: If the provider reports its call frequency limit
            ExternalSourceError: If the request fails or returns no usable price
        """
        symbol = symbol.strip().upper()

        with self._cache_lock:
            cached = self._cache.get(symbol)
        if cached is not None:
            logger.debug(f"Using cached price for {symbol}: ${cached}")
            return cached

        if not self.api_key:
            raise ConfigurationError("Alpha Vantage API key is not configured")

        payload = self._request_quote(symbol)
        price = self._parse_price(symbol, payload)

        with self._cache_lock:
            self._cache[symbol] = price
        logger.debug(f"Fetched price for {symbol}: ${price}")
        return price

    async def fetch_prices(self, symbols: Iterable[str]) -> dict[str, float]:
        """Fetch prices for many symbols in rate-limited batches.

        Failed symbols are left out of the result. Once a batch hits the rate
        limit no further batches are requested.

        Args:
            symbols: Ticker symbols; duplicates and case differences are folded

        Returns:
            Partial mapping of upper-cased symbol to price
        """
        pending = unique_symbols(symbols)
        prices: dict[str, float] = {}
        if not pending:
            return prices

        if not self.api_key:
            logger.error("Alpha Vantage API key is not configured; skipping price refresh")
            return prices

        loop = asyncio.get_event_loop()

        for start in range(0, len(pending), self.batch_size):
            batch = pending[start : start + self.batch_size]
            logger.debug(f"Fetching prices for batch: {', '.join(batch)}")

            results = await asyncio.gather(
                *(loop.run_in_executor(None, self.fetch_price, symbol) for symbol in batch),
                return_exceptions=True,
            )

            rate_limited = False
            for symbol, result in zip(batch, results, strict=True):
                if isinstance(result, QuoteRateLimitError):
                    rate_limited = True
                    logger.warning(f"Rate limit reached while fetching {symbol}: {result}")
                elif isinstance(result, ExternalSourceError | ConfigurationError):
                    logger.warning(f"Skipping {symbol}: {result}")
                elif isinstance(result, BaseException):
                    raise result
                else:
                    prices[symbol] = result

            remaining = len(pending) - (start + len(batch))
            if rate_limited:
                if remaining:
                    logger.warning(f"Skipping {remaining} remaining symbols after rate limit")
                break
            if remaining:
                await asyncio.sleep(self.batch_delay_seconds)

        logger.info(f"Fetched {len(prices)}/{len(pending)} prices")
        return prices

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    def _request_quote(self, symbol: str) -> dict[str, Any]:
        """Issue the GLOBAL_QUOTE request and decode the JSON body."""
        params = {"function": "GLOBAL_QUOTE", "symbol": symbol, "apikey": self.api_key}
        try:
            response = self.session.get(
                self.base_url, params=params, timeout=self.request_timeout_seconds
            )
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise ExternalSourceError(f"Quote request failed for {symbol}: {e}", symbol) from e
        except ValueError as e:
            raise ExternalSourceError(f"Invalid JSON in quote for {symbol}: {e}", symbol) from e

        if not isinstance(payload, dict):
            raise ExternalSourceError(f"Unexpected quote payload for {symbol}", symbol)
        return payload

    @staticmethod
    def _parse_price(symbol: str, payload: dict[str, Any]) -> float:
        """Extract ``Global Quote.05. price`` from a decoded response."""
        if "Error Message" in payload:
            raise ExternalSourceError(
                f"API error for {symbol}: {payload['Error Message']}", symbol
            )

        for key in _RATE_LIMIT_KEYS:
            if key in payload:
                raise QuoteRateLimitError(f"API limit for {symbol}: {payload[key]}", symbol)

        quote = payload.get("Global Quote")
        raw_price = quote.get("05. price") if isinstance(quote, dict) else None
        if not raw_price:
            raise ExternalSourceError(f"No price data found for {symbol}", symbol)

        try:
            price = float(raw_price)
        except (TypeError, ValueError) as e:
            raise ExternalSourceError(f"Invalid price for {symbol}: {raw_price!r}", symbol) from e

        if not math.isfinite(price) or price <= 0:
            raise ExternalSourceError(f"Invalid price for {symbol}: {raw_price!r}", symbol)
        return price
