"""
Portfolio snapshot state.

This module holds the immutable aggregate root of the ledger. A snapshot is
never modified in place: ledger commands return a new snapshot and the tracker
controller swaps its reference to it.
"""

from dataclasses import dataclass, field, replace

from stockfolio.core.enums import GainLossConvention
from stockfolio.core.types.financial import ZERO

from .holding import Holding


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Complete immutable state of the portfolio at one instant.

    Attributes:
        initial_cash: Cash the user started with (editable later)
        remaining_cash: Uninvested cash, never negative
        holdings: Open lots in purchase order, ids unique
        total_portfolio_value: Sum of holding market values, cash excluded
        total_unrealized_gain_loss: Sum (absolute) or mean (percentage) of
            per-holding unrealized gain/loss
        total_realized_gain_loss: Running total of gains locked in by sales
        total_portfolio_performance: Percent of total value (with cash) versus
            initial cash, recomputed when initial cash is edited
        convention: Unrealized gain/loss convention in force
        version: Bumped by every applied ledger command
    """

    initial_cash: float = ZERO
    remaining_cash: float = ZERO
    holdings: tuple[Holding, ...] = field(default_factory=tuple)
    total_portfolio_value: float = ZERO
    total_unrealized_gain_loss: float = ZERO
    total_realized_gain_loss: float = ZERO
    total_portfolio_performance: float = ZERO
    convention: GainLossConvention = GainLossConvention.ABSOLUTE
    version: int = 0

    @classmethod
    def empty(
        cls, convention: GainLossConvention = GainLossConvention.ABSOLUTE
    ) -> "PortfolioSnapshot":
        """Create the zero-cash snapshot a new session starts from."""
        return cls(convention=convention)

    @property
    def is_active(self) -> bool:
        """A portfolio is active once initial cash has been set."""
        return self.initial_cash != ZERO

    @property
    def holdings_count(self) -> int:
        return len(self.holdings)

    @property
    def total_value_with_cash(self) -> float:
        """Market value of all holdings plus remaining cash."""
        return self.total_portfolio_value + self.remaining_cash

    @property
    def total_cost_basis(self) -> float:
        return sum((holding.cost_basis for holding in self.holdings), ZERO)

    @property
    def tickers(self) -> list[str]:
        """Unique tickers of the current holdings, in first-seen order."""
        return list(dict.fromkeys(holding.ticker for holding in self.holdings))

    def find_holding(self, holding_id: str) -> Holding | None:
        for holding in self.holdings:
            if holding.id == holding_id:
                return holding
        return None

    def index_of(self, holding_id: str) -> int:
        """Position of a holding in ``holdings``, or -1 when absent."""
        for index, holding in enumerate(self.holdings):
            if holding.id == holding_id:
                return index
        return -1

    def bumped(self, previous_version: int) -> "PortfolioSnapshot":
        """Return a copy stamped with the version after ``previous_version``."""
        return replace(self, version=previous_version + 1)
