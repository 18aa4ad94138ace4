"""
Portfolio metrics and quote reconciliation.

This module merges fetched quotes into holdings and recomputes the aggregate
totals of a snapshot. It never fetches anything itself.
"""

from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from stockfolio.core.enums import GainLossConvention
from stockfolio.core.types.financial import (
    ZERO,
    calculate_percentage_change,
    is_finite_number,
    round_percentage,
    round_price,
)

from .holding import Holding
from .portfolio_core import PortfolioSnapshot


def normalize_quotes(quotes: Mapping[str, Any]) -> dict[str, float]:
    """Keep only usable quotes, keyed by upper-cased ticker.

    Entries whose price is not a finite positive number are dropped, so a bad
    quote behaves exactly like a missing one.
    """
    usable: dict[str, float] = {}
    for ticker, price in quotes.items():
        if not isinstance(ticker, str) or not ticker.strip():
            continue
        if is_finite_number(price) and price > ZERO:
            usable[ticker.strip().upper()] = float(price)
    return usable


def reprice_holdings(
    holdings: Iterable[Holding],
    quotes: Mapping[str, float],
    convention: GainLossConvention,
) -> tuple[Holding, ...]:
    """Apply quotes to holdings, falling back to each holding's last price.

    Args:
        holdings: Holdings to reprice
        quotes: Normalized ticker -> price mapping (may be partial or empty)
        convention: How unrealized gain/loss is expressed

    Returns:
        New holdings with current price, market value and unrealized gain/loss set
    """
    return tuple(
        holding.with_price(quotes.get(holding.ticker, holding.current_price), convention)
        for holding in holdings
    )


class PortfolioMetrics:
    """Aggregate calculations over a snapshot's holdings."""

    def __init__(self, snapshot: PortfolioSnapshot) -> None:
        self.snapshot = snapshot

    def total_portfolio_value(self) -> float:
        """Sum of market values across all holdings (cash excluded)."""
        return sum((holding.market_value for holding in self.snapshot.holdings), ZERO)

    def total_unrealized_gain_loss(self) -> float:
        """Aggregate unrealized gain/loss under the snapshot's convention.

        ABSOLUTE sums currency amounts. PERCENTAGE takes the arithmetic mean of
        per-holding percentages (not value-weighted); an empty portfolio is ZERO.
        """
        amounts = [holding.unrealized_gain_loss for holding in self.snapshot.holdings]
        if not amounts:
            return ZERO
        if self.snapshot.convention.is_percentage:
            return sum(amounts) / len(amounts)
        return sum(amounts, ZERO)

    def performance_against(self, initial_cash: float) -> float:
        """Percent change of total value (holdings plus cash) versus ``initial_cash``."""
        return calculate_percentage_change(self.snapshot.total_value_with_cash, initial_cash)

    def summary(self) -> dict[str, Any]:
        """Dashboard figures, rounded for display."""
        snapshot = self.snapshot
        unrealized = snapshot.total_unrealized_gain_loss
        return {
            "initial_cash": round_price(snapshot.initial_cash),
            "remaining_cash": round_price(snapshot.remaining_cash),
            "total_invested": round_price(snapshot.initial_cash - snapshot.remaining_cash),
            "total_cost_basis": round_price(snapshot.total_cost_basis),
            "total_portfolio_value": round_price(snapshot.total_portfolio_value),
            "total_value_with_cash": round_price(snapshot.total_value_with_cash),
            "total_unrealized_gain_loss": (
                round_percentage(unrealized)
                if snapshot.convention.is_percentage
                else round_price(unrealized)
            ),
            "total_realized_gain_loss": round_price(snapshot.total_realized_gain_loss),
            "total_portfolio_performance": round_percentage(
                snapshot.total_portfolio_performance
            ),
            "holdings": snapshot.holdings_count,
            "priced_holdings": sum(1 for holding in snapshot.holdings if holding.is_priced),
            "convention": snapshot.convention.value,
        }


def recalculate_totals(snapshot: PortfolioSnapshot) -> PortfolioSnapshot:
    """Recompute total value and total unrealized gain/loss from the holdings."""
    metrics = PortfolioMetrics(snapshot)
    return replace(
        snapshot,
        total_portfolio_value=metrics.total_portfolio_value(),
        total_unrealized_gain_loss=metrics.total_unrealized_gain_loss(),
    )


def merge_quotes(snapshot: PortfolioSnapshot, quotes: Mapping[str, Any]) -> PortfolioSnapshot:
    """Merge quotes into a snapshot and refresh every derived figure.

    Applying the same quotes twice yields the same result as applying them once.
    """
    holdings = reprice_holdings(snapshot.holdings, normalize_quotes(quotes), snapshot.convention)
    return recalculate_totals(replace(snapshot, holdings=holdings))


def portfolio_summary(snapshot: PortfolioSnapshot) -> dict[str, Any]:
    """Return the dashboard figures for a snapshot."""
    return PortfolioMetrics(snapshot).summary()
