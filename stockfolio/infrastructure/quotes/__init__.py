"""
Quote source implementations.
"""

from .alpha_vantage import AlphaVantageQuoteSource, unique_symbols

__all__ = ["AlphaVantageQuoteSource", "unique_symbols"]
