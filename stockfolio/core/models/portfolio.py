"""
Ledger engine - the public portfolio commands.

Every command takes the current ``PortfolioSnapshot`` and returns a
``CommandResult``. Commands are pure: they do no I/O, never mutate their
input and never raise for bad input or unknown holdings. A rejected command
hands back the unchanged snapshot together with a ``ValidationError`` or
``HoldingNotFoundError``.

Composition:
- portfolio_trading: the individual state transitions
- portfolio_metrics: quote merging and aggregate totals
- portfolio_helpers: snapshot-aware validation and holding creation
"""

from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from stockfolio.core.enums import GainLossConvention
from stockfolio.core.exceptions.portfolio import ValidationError
from stockfolio.core.utils.decorators import ledger_command, validate_inputs

from . import portfolio_trading as trading
from .command import CommandResult
from .portfolio_core import PortfolioSnapshot
from .portfolio_metrics import merge_quotes, recalculate_totals


@ledger_command
@validate_inputs
def set_initial_cash(snapshot: PortfolioSnapshot, amount: float) -> PortfolioSnapshot:
    """Set up or edit the initial cash balance.

    On an inactive snapshot (initial cash 0) this is first-time setup and
    remaining cash becomes ``amount`` too. On an active snapshot only initial
    cash and the performance figure change.
    """
    if snapshot.is_active:
        return trading.revise_initial_cash(snapshot, amount)
    return trading.open_cash(snapshot, amount)


@ledger_command
@validate_inputs
def buy_stock(
    snapshot: PortfolioSnapshot,
    ticker: str,
    shares: float,
    price_per_share: float,
    purchase_date: datetime | None = None,
    holding_id: str | None = None,
) -> PortfolioSnapshot:
    """Record a purchase as a new holding.

    Args:
        snapshot: Current snapshot
        ticker: Ticker symbol, trimmed and upper-cased
        shares: Number of shares bought (> 0)
        price_per_share: Purchase price per share (> 0)
        purchase_date: When the lot was bought (defaults to now, UTC)
        holding_id: Optional explicit identifier; generated when omitted

    Returns:
        Snapshot with the holding appended and remaining cash reduced by its
        cost basis, clamped at 0
    """
    return recalculate_totals(
        trading.buy(snapshot, ticker, shares, price_per_share, purchase_date, holding_id)
    )


@ledger_command
@validate_inputs
def edit_stock(
    snapshot: PortfolioSnapshot,
    holding_id: str,
    ticker: str,
    shares: float,
    price_per_share: float,
    purchase_date: datetime | None = None,
) -> PortfolioSnapshot:
    """Correct a holding's ticker, shares, price or purchase date.

    The difference between old and new cost basis is settled against
    remaining cash (clamped at 0).
    """
    return recalculate_totals(
        trading.edit(snapshot, holding_id, ticker, shares, price_per_share, purchase_date)
    )


@ledger_command
@validate_inputs
def sell_stock(
    snapshot: PortfolioSnapshot,
    holding_id: str,
    shares_sold: float,
    sale_price_per_share: float,
    date_sold: datetime | None = None,
) -> PortfolioSnapshot:
    """Sell some or all shares of a holding.

    Args:
        snapshot: Current snapshot
        holding_id: Holding to sell from
        shares_sold: Shares sold, 0 < shares_sold <= held shares
        sale_price_per_share: Price received per share (> 0)
        date_sold: When the sale happened; recorded in the log only

    Returns:
        Snapshot with proceeds added to cash and realized gain/loss accumulated
    """
    return recalculate_totals(trading.sell(snapshot, holding_id, shares_sold, sale_price_per_share))


@ledger_command
@validate_inputs
def delete_stock(snapshot: PortfolioSnapshot, holding_id: str) -> PortfolioSnapshot:
    """Unwind a holding at its original cost."""
    return recalculate_totals(trading.delete(snapshot, holding_id))


@ledger_command
def apply_quotes(snapshot: PortfolioSnapshot, quotes: Mapping[str, Any]) -> PortfolioSnapshot:
    """Merge a ticker -> price mapping into the holdings.

    Tickers missing from ``quotes`` (or quoted with a non-positive price)
    keep their last-known price, 0 if they were never priced.
    """
    if not isinstance(quotes, Mapping):
        raise ValidationError(f"quotes must be a mapping, got {type(quotes).__name__}")
    return merge_quotes(snapshot, quotes)


@ledger_command
@validate_inputs
def change_convention(
    snapshot: PortfolioSnapshot, convention: GainLossConvention
) -> PortfolioSnapshot:
    """Switch the unrealized gain/loss convention and recompute every derived figure."""
    return merge_quotes(replace(snapshot, convention=convention), {})


__all__ = [
    "CommandResult",
    "PortfolioSnapshot",
    "apply_quotes",
    "buy_stock",
    "change_convention",
    "delete_stock",
    "edit_stock",
    "sell_stock",
    "set_initial_cash",
]
