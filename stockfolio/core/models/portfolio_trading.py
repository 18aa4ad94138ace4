"""
Portfolio trading transitions.

Each function takes a snapshot plus already-validated command inputs and
returns the next snapshot, raising ``ValidationError`` or
``HoldingNotFoundError`` when the command cannot be applied. None of them
touch the aggregate totals; ``stockfolio.core.models.portfolio`` recomputes
those after every transition.
"""

from dataclasses import replace
from datetime import datetime

from loguru import logger

from stockfolio.core.exceptions.portfolio import ValidationError
from stockfolio.core.types.financial import (
    ZERO,
    calculate_realized_gain_loss,
    clamp_non_negative,
)

from .holding import Holding
from .portfolio_core import PortfolioSnapshot
from .portfolio_helpers import HoldingFactory, LedgerValidator
from .portfolio_metrics import PortfolioMetrics


def open_cash(snapshot: PortfolioSnapshot, amount: float) -> PortfolioSnapshot:
    """First-time setup: initial and remaining cash both become ``amount``."""
    return replace(
        snapshot,
        initial_cash=amount,
        remaining_cash=amount,
        total_portfolio_performance=ZERO,
    )


def revise_initial_cash(snapshot: PortfolioSnapshot, amount: float) -> PortfolioSnapshot:
    """Edit initial cash of an active portfolio.

    Remaining cash and holdings are untouched; only the performance figure is
    recomputed against the new amount.

    Raises:
        ValidationError: If ``amount`` is zero (performance would be undefined)
    """
    if amount == ZERO:
        raise ValidationError("Initial cash of an active portfolio cannot be edited to 0")

    return replace(
        snapshot,
        initial_cash=amount,
        total_portfolio_performance=PortfolioMetrics(snapshot).performance_against(amount),
    )


def buy(
    snapshot: PortfolioSnapshot,
    ticker: str,
    shares: float,
    price_per_share: float,
    purchase_date: datetime | None,
    holding_id: str | None,
) -> PortfolioSnapshot:
    """Append a new holding and pay for it out of remaining cash.

    Overspending is absorbed: remaining cash is clamped at 0 rather than the
    purchase being rejected.
    """
    if holding_id is not None:
        LedgerValidator.validate_new_holding_id(snapshot, holding_id)

    holding = HoldingFactory.create(
        ticker=ticker,
        shares=shares,
        price_per_share=price_per_share,
        purchase_date=purchase_date,
        holding_id=holding_id,
    )

    if holding.cost_basis > snapshot.remaining_cash:
        logger.warning(
            f"Purchase of {ticker} costs {holding.cost_basis:.2f} but only "
            f"{snapshot.remaining_cash:.2f} cash remains; clamping cash at 0"
        )

    return replace(
        snapshot,
        holdings=(*snapshot.holdings, holding),
        remaining_cash=clamp_non_negative(snapshot.remaining_cash - holding.cost_basis),
    )


def edit(
    snapshot: PortfolioSnapshot,
    holding_id: str,
    ticker: str,
    shares: float,
    price_per_share: float,
    purchase_date: datetime | None,
) -> PortfolioSnapshot:
    """Replace a holding in place and settle the cost difference in cash.

    The holding keeps its id and last-known current price; its cost basis is
    recomputed from the new shares and price.
    """
    index, old = LedgerValidator.require_holding(snapshot, holding_id)

    updated = Holding.open(
        holding_id=old.id,
        ticker=ticker,
        shares=shares,
        price_per_share=price_per_share,
        purchase_date=purchase_date or old.purchase_date,
    ).with_price(old.current_price, snapshot.convention)

    cash_difference = old.cost_basis - updated.cost_basis
    holdings = list(snapshot.holdings)
    holdings[index] = updated

    return replace(
        snapshot,
        holdings=tuple(holdings),
        remaining_cash=clamp_non_negative(snapshot.remaining_cash + cash_difference),
    )


def sell(
    snapshot: PortfolioSnapshot,
    holding_id: str,
    shares_sold: float,
    sale_price_per_share: float,
) -> PortfolioSnapshot:
    """Sell part or all of a holding at ``sale_price_per_share``.

    Proceeds go to remaining cash and the realized gain/loss (against the
    average cost per share) is added to the running total. A full sale removes
    the holding; a partial one keeps its per-share cost basis.

    Raises:
        HoldingNotFoundError: If the holding does not exist
        InsufficientSharesError: If more shares are sold than held
    """
    index, holding = LedgerValidator.require_holding(snapshot, holding_id)
    closes_holding = LedgerValidator.validate_sale_size(holding, shares_sold)

    if closes_holding:
        # Sell exactly what is held so float slack never leaves dust behind
        shares_sold = holding.shares

    proceeds = shares_sold * sale_price_per_share
    realized = calculate_realized_gain_loss(
        sale_price_per_share, holding.cost_basis_per_share, shares_sold
    )

    holdings = list(snapshot.holdings)
    if closes_holding:
        del holdings[index]
    else:
        remaining = holding.reduced_by(shares_sold)
        holdings[index] = remaining.with_price(remaining.current_price, snapshot.convention)

    return replace(
        snapshot,
        holdings=tuple(holdings),
        remaining_cash=snapshot.remaining_cash + proceeds,
        total_realized_gain_loss=snapshot.total_realized_gain_loss + realized,
    )


def delete(snapshot: PortfolioSnapshot, holding_id: str) -> PortfolioSnapshot:
    """Remove a holding, refunding its full cost basis (not its market value)."""
    index, holding = LedgerValidator.require_holding(snapshot, holding_id)

    holdings = list(snapshot.holdings)
    del holdings[index]

    return replace(
        snapshot,
        holdings=tuple(holdings),
        remaining_cash=snapshot.remaining_cash + holding.cost_basis,
    )
