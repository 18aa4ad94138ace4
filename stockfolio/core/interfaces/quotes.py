"""
Quote source interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable


class IQuoteSource(ABC):
    """Abstract interface for last-traded price providers."""

    @abstractmethod
    def fetch_price(self, symbol: str) -> float:
        """Fetch the last-traded price of one symbol.

        Raises:
            ExternalSourceError: If the price cannot be obtained
        """
        pass

    @abstractmethod
    async def fetch_prices(self, symbols: Iterable[str]) -> dict[str, float]:
        """Fetch prices for many symbols.

        The result may be partial: symbols that failed or were skipped because
        of rate limiting are simply absent. Never raises for individual symbols.
        """
        pass
