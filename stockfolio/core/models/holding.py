"""
Holding domain model.

A holding is one purchased (and not fully sold) lot of a ticker. Holdings are
immutable; every ledger transition builds a new instance with
``dataclasses.replace`` or one of the helpers below.
"""

from dataclasses import dataclass, replace
from datetime import datetime

from stockfolio.core.enums import GainLossConvention
from stockfolio.core.exceptions.portfolio import ValidationError
from stockfolio.core.types.financial import (
    ZERO,
    calculate_cost_basis,
    calculate_market_value,
    calculate_percentage_change,
)


@dataclass(frozen=True)
class Holding:
    """A tracked lot of shares of one ticker with its acquisition cost.

    ``current_price``, ``market_value`` and ``unrealized_gain_loss`` use a
    default-zero sentinel until the first quote arrives; ``is_priced`` tells
    the two states apart.
    """

    id: str
    ticker: str
    shares: float
    price_per_share: float
    cost_basis: float
    purchase_date: datetime
    current_price: float = ZERO
    market_value: float = ZERO
    unrealized_gain_loss: float = ZERO

    def __post_init__(self) -> None:
        """Validate holding data after initialization."""
        if not self.id:
            raise ValidationError("Holding id must not be empty")
        if not self.ticker:
            raise ValidationError("Holding ticker must not be empty")
        if self.shares <= ZERO:
            raise ValidationError(f"Shares must be positive, got {self.shares}")
        if self.price_per_share <= ZERO:
            raise ValidationError(f"Price per share must be positive, got {self.price_per_share}")
        if self.cost_basis < ZERO:
            raise ValidationError(f"Cost basis must be non-negative, got {self.cost_basis}")
        if self.current_price < ZERO:
            raise ValidationError(f"Current price must be non-negative, got {self.current_price}")

    @property
    def is_priced(self) -> bool:
        """Whether a quote has ever been applied to this holding."""
        return self.current_price > ZERO

    @property
    def cost_basis_per_share(self) -> float:
        """Average acquisition cost per share."""
        return self.cost_basis / self.shares

    def with_price(self, current_price: float, convention: GainLossConvention) -> "Holding":
        """Return a copy priced at ``current_price`` with derived fields recomputed.

        Args:
            current_price: Latest known price (ZERO keeps the holding unpriced)
            convention: How unrealized gain/loss is expressed

        Returns:
            New Holding with market value and unrealized gain/loss refreshed
        """
        market_value = calculate_market_value(self.shares, current_price)

        if current_price == ZERO:
            unrealized = ZERO
        elif convention.is_percentage:
            unrealized = calculate_percentage_change(current_price, self.price_per_share)
        else:
            unrealized = market_value - self.cost_basis

        return replace(
            self,
            current_price=current_price,
            market_value=market_value,
            unrealized_gain_loss=unrealized,
        )

    def reduced_by(self, shares_sold: float) -> "Holding":
        """Return a copy with ``shares_sold`` removed, per-share cost basis preserved.

        The derived price fields are left for the caller to recompute.
        """
        remaining_shares = self.shares - shares_sold
        return replace(
            self,
            shares=remaining_shares,
            cost_basis=self.cost_basis_per_share * remaining_shares,
        )

    @classmethod
    def open(
        cls,
        holding_id: str,
        ticker: str,
        shares: float,
        price_per_share: float,
        purchase_date: datetime,
    ) -> "Holding":
        """Create a fresh, unpriced holding with cost basis = shares * price."""
        return cls(
            id=holding_id,
            ticker=ticker,
            shares=shares,
            price_per_share=price_per_share,
            cost_basis=calculate_cost_basis(shares, price_per_share),
            purchase_date=purchase_date,
        )
