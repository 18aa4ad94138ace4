"""
Unit tests for the Holding domain model.
"""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime

import pytest

from stockfolio.core.enums import GainLossConvention
from stockfolio.core.exceptions.portfolio import ValidationError
from stockfolio.core.models.holding import Holding

PURCHASED = datetime(2024, 1, 15, tzinfo=UTC)


def make_holding(**overrides: object) -> Holding:
    values: dict[str, object] = {
        "holding_id": "h1",
        "ticker": "AAPL",
        "shares": 2.0,
        "price_per_share": 100.0,
        "purchase_date": PURCHASED,
    }
    values.update(overrides)
    return Holding.open(**values)  # type: ignore[arg-type]


class TestHoldingCreation:
    """Test holding construction and invariants."""

    def test_should_open_unpriced_holding(self) -> None:
        """Test a new holding has exact cost basis and zeroed price fields."""
        holding = make_holding()

        assert holding.cost_basis == 200.0
        assert holding.current_price == 0.0
        assert holding.market_value == 0.0
        assert holding.unrealized_gain_loss == 0.0
        assert not holding.is_priced

    def test_should_be_immutable(self) -> None:
        """Test holdings cannot be modified in place."""
        holding = make_holding()

        with pytest.raises(FrozenInstanceError):
            holding.shares = 5.0  # type: ignore[misc]

    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("shares", 0.0, "Shares must be positive"),
            ("shares", -1.0, "Shares must be positive"),
            ("price_per_share", 0.0, "Price per share must be positive"),
            ("ticker", "", "ticker must not be empty"),
            ("holding_id", "", "id must not be empty"),
        ],
    )
    def test_should_reject_invalid_fields(self, field: str, value: object, message: str) -> None:
        """Test invariant violations raise ValidationError."""
        with pytest.raises(ValidationError, match=message):
            make_holding(**{field: value})

    def test_should_report_cost_basis_per_share(self) -> None:
        """Test the average cost per share."""
        holding = make_holding(shares=4.0, price_per_share=25.0)

        assert holding.cost_basis_per_share == 25.0


class TestHoldingPricing:
    """Test applying a current price."""

    def test_should_price_with_absolute_convention(self) -> None:
        """Test market value and absolute unrealized gain."""
        holding = make_holding(shares=1.0, price_per_share=100.0)

        priced = holding.with_price(120.0, GainLossConvention.ABSOLUTE)

        assert priced.current_price == 120.0
        assert priced.market_value == 120.0
        assert priced.unrealized_gain_loss == 20.0
        assert priced.is_priced
        assert holding.current_price == 0.0

    def test_should_price_with_percentage_convention(self) -> None:
        """Test percentage unrealized gain relative to purchase price."""
        holding = make_holding(shares=1.0, price_per_share=100.0)

        priced = holding.with_price(120.0, GainLossConvention.PERCENTAGE)

        assert priced.market_value == 120.0
        assert priced.unrealized_gain_loss == pytest.approx(20.0)

    def test_should_keep_unpriced_holding_at_zero(self) -> None:
        """Test a zero price yields zero gain/loss rather than a -100% loss."""
        holding = make_holding()

        for convention in GainLossConvention:
            priced = holding.with_price(0.0, convention)
            assert priced.market_value == 0.0
            assert priced.unrealized_gain_loss == 0.0


class TestHoldingReduction:
    """Test partial reductions after a sale."""

    def test_should_preserve_cost_basis_per_share(self) -> None:
        """Test cost basis is rescaled proportionally."""
        holding = make_holding(shares=3.0, price_per_share=10.0)

        reduced = holding.reduced_by(1.0)

        assert reduced.shares == 2.0
        assert reduced.cost_basis == pytest.approx(20.0)
        assert reduced.cost_basis / reduced.shares == pytest.approx(
            holding.cost_basis / holding.shares
        )
        assert reduced.id == holding.id
