"""Helper classes shared by the ledger transitions."""

import uuid
from datetime import UTC, datetime

from stockfolio.core.constants import SHARE_TOLERANCE
from stockfolio.core.exceptions.portfolio import (
    HoldingNotFoundError,
    InsufficientSharesError,
    ValidationError,
)
from stockfolio.core.types.financial import safe_float_comparison

from .holding import Holding
from .portfolio_core import PortfolioSnapshot


class LedgerValidator:
    """Centralized validation helper for ledger commands.

    Input-level checks (positive numbers, ticker shape) happen in the
    ``validate_inputs`` decorator; the checks here need the snapshot.
    """

    @staticmethod
    def require_holding(snapshot: PortfolioSnapshot, holding_id: str) -> tuple[int, Holding]:
        """Locate a holding by id.

        Args:
            snapshot: Snapshot to search
            holding_id: Identifier of the holding

        Returns:
            Index of the holding and the holding itself

        Raises:
            HoldingNotFoundError: If no holding has that id
        """
        index = snapshot.index_of(holding_id)
        if index == -1:
            raise HoldingNotFoundError(holding_id)
        return index, snapshot.holdings[index]

    @staticmethod
    def validate_new_holding_id(snapshot: PortfolioSnapshot, holding_id: str) -> None:
        """Reject an identifier that is already in use.

        Raises:
            ValidationError: If the id collides with an existing holding
        """
        if snapshot.find_holding(holding_id) is not None:
            raise ValidationError(f"Holding id already exists: {holding_id}")

    @staticmethod
    def validate_sale_size(holding: Holding, shares_sold: float) -> bool:
        """Check a sale against the shares held.

        Args:
            holding: Holding being sold from
            shares_sold: Shares requested (already validated positive)

        Returns:
            True when the sale closes the holding entirely

        Raises:
            InsufficientSharesError: If more shares are requested than held
        """
        if shares_sold > holding.shares + SHARE_TOLERANCE:
            raise InsufficientSharesError(
                requested=shares_sold, available=holding.shares, ticker=holding.ticker
            )
        return shares_sold >= holding.shares or safe_float_comparison(
            holding.shares, shares_sold, SHARE_TOLERANCE
        )


class HoldingFactory:
    """Creates holdings with fresh identifiers."""

    @staticmethod
    def new_id() -> str:
        """Generate an opaque, unique holding identifier."""
        return uuid.uuid4().hex

    @staticmethod
    def create(
        ticker: str,
        shares: float,
        price_per_share: float,
        purchase_date: datetime | None = None,
        holding_id: str | None = None,
    ) -> Holding:
        """Create a new, unpriced holding."""
        return Holding.open(
            holding_id=holding_id or HoldingFactory.new_id(),
            ticker=ticker,
            shares=shares,
            price_per_share=price_per_share,
            purchase_date=purchase_date or datetime.now(UTC),
        )
