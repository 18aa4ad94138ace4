"""
Custom exception hierarchy for the portfolio tracker.

This module defines domain-specific exceptions for better error handling.
Ledger commands never let these escape: they are carried back to the caller
inside a CommandResult. Quote and persistence errors are absorbed by the
tracker controller.
"""


class TrackerException(Exception):
    """Base exception for all portfolio tracker errors."""

    pass


class ValidationError(TrackerException):
    """Raised when command input validation fails."""

    pass


class ConfigurationError(TrackerException):
    """Raised when configuration is invalid or incomplete."""

    pass


class PortfolioError(TrackerException):
    """Raised when a portfolio operation cannot be applied."""

    pass


class HoldingNotFoundError(PortfolioError):
    """Raised when a command references a holding that does not exist."""

    def __init__(self, holding_id: str):
        self.holding_id = holding_id
        super().__init__(f"Holding not found: {holding_id}")


class InsufficientSharesError(ValidationError):
    """Raised when a sale asks for more shares than the holding has."""

    def __init__(self, requested: float, available: float, ticker: str = ""):
        self.requested = requested
        self.available = available
        self.ticker = ticker
        super().__init__(
            f"Cannot sell {requested} shares of {ticker or 'holding'}: only {available} held"
        )


class ExternalSourceError(TrackerException):
    """Raised when a quote fetch fails."""

    def __init__(self, message: str, symbol: str | None = None):
        self.symbol = symbol
        super().__init__(message)


class QuoteRateLimitError(ExternalSourceError):
    """Raised when the quote provider reports its call frequency limit."""

    pass


class PersistenceError(TrackerException):
    """Raised when a snapshot cannot be read, written or decoded."""

    pass
