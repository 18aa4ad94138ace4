"""
Snapshot serialization.

Snapshots are stored as JSON documents with camelCase keys (``initialCash``,
``stocks``, ``pricePerShare`` ...). Dates are ISO-8601 strings and round-trip
exactly. Documents that lack the newer fields (``version``, ``convention``,
price fields) load with defaults.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from stockfolio.core.constants import SNAPSHOT_FORMAT_VERSION
from stockfolio.core.enums import GainLossConvention
from stockfolio.core.exceptions.portfolio import PersistenceError, TrackerException
from stockfolio.core.models.holding import Holding
from stockfolio.core.models.portfolio_core import PortfolioSnapshot


class _Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class HoldingDocument(_Document):
    """Serialized form of a Holding."""

    id: str
    ticker: str
    shares: float = Field(gt=0)
    price_per_share: float = Field(gt=0)
    cost_basis: float = Field(ge=0)
    purchase_date: datetime
    current_price: float = 0.0
    market_value: float = 0.0
    unrealized_gain_loss: float = 0.0

    @field_validator("current_price", "market_value", "unrealized_gain_loss", mode="before")
    @classmethod
    def _missing_price_is_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value

    @classmethod
    def from_holding(cls, holding: Holding) -> "HoldingDocument":
        return cls(
            id=holding.id,
            ticker=holding.ticker,
            shares=holding.shares,
            price_per_share=holding.price_per_share,
            cost_basis=holding.cost_basis,
            purchase_date=holding.purchase_date,
            current_price=holding.current_price,
            market_value=holding.market_value,
            unrealized_gain_loss=holding.unrealized_gain_loss,
        )

    def to_holding(self) -> Holding:
        return Holding(
            id=self.id,
            ticker=self.ticker.strip().upper(),
            shares=self.shares,
            price_per_share=self.price_per_share,
            cost_basis=self.cost_basis,
            purchase_date=self.purchase_date,
            current_price=self.current_price,
            market_value=self.market_value,
            unrealized_gain_loss=self.unrealized_gain_loss,
        )


class SnapshotDocument(_Document):
    """Serialized form of a PortfolioSnapshot."""

    format_version: int = SNAPSHOT_FORMAT_VERSION
    initial_cash: float = Field(default=0.0, ge=0)
    remaining_cash: float = Field(default=0.0, ge=0)
    holdings: list[HoldingDocument] = Field(default_factory=list, alias="stocks")
    total_portfolio_value: float = 0.0
    total_unrealized_gain_loss: float = 0.0
    total_realized_gain_loss: float = 0.0
    total_portfolio_performance: float = 0.0
    convention: GainLossConvention = GainLossConvention.ABSOLUTE
    version: int = Field(default=0, ge=0)

    @classmethod
    def from_snapshot(cls, snapshot: PortfolioSnapshot) -> "SnapshotDocument":
        return cls(
            initial_cash=snapshot.initial_cash,
            remaining_cash=snapshot.remaining_cash,
            holdings=[HoldingDocument.from_holding(holding) for holding in snapshot.holdings],
            total_portfolio_value=snapshot.total_portfolio_value,
            total_unrealized_gain_loss=snapshot.total_unrealized_gain_loss,
            total_realized_gain_loss=snapshot.total_realized_gain_loss,
            total_portfolio_performance=snapshot.total_portfolio_performance,
            convention=snapshot.convention,
            version=snapshot.version,
        )

    def to_snapshot(self) -> PortfolioSnapshot:
        holdings = tuple(document.to_holding() for document in self.holdings)
        ids = [holding.id for holding in holdings]
        if len(set(ids)) != len(ids):
            raise PersistenceError("Snapshot contains duplicate holding ids")

        return PortfolioSnapshot(
            initial_cash=self.initial_cash,
            remaining_cash=self.remaining_cash,
            holdings=holdings,
            total_portfolio_value=self.total_portfolio_value,
            total_unrealized_gain_loss=self.total_unrealized_gain_loss,
            total_realized_gain_loss=self.total_realized_gain_loss,
            total_portfolio_performance=self.total_portfolio_performance,
            convention=self.convention,
            version=self.version,
        )


def serialize_snapshot(snapshot: PortfolioSnapshot, indent: int | None = None) -> str:
    """Encode a snapshot as a JSON document.

    Args:
        snapshot: Snapshot to encode
        indent: Pretty-print indentation, None for compact output

    Returns:
        JSON text
    """
    return SnapshotDocument.from_snapshot(snapshot).model_dump_json(by_alias=True, indent=indent)


def deserialize_snapshot(data: str | bytes) -> PortfolioSnapshot:
    """Decode a JSON document produced by ``serialize_snapshot``.

    Args:
        data: JSON text or UTF-8 bytes

    Returns:
        The decoded snapshot

    Raises:
        PersistenceError: If the document is malformed or violates holding invariants
    """
    try:
        document = SnapshotDocument.model_validate_json(data)
    except ValidationError as e:
        raise PersistenceError(
            f"Invalid portfolio snapshot: {e.error_count()} error(s): {e}"
        ) from e

    if document.format_version > SNAPSHOT_FORMAT_VERSION:
        raise PersistenceError(
            f"Snapshot format {document.format_version} is newer than supported "
            f"({SNAPSHOT_FORMAT_VERSION})"
        )

    try:
        return document.to_snapshot()
    except PersistenceError:
        raise
    except TrackerException as e:
        raise PersistenceError(f"Invalid holding in snapshot: {e}") from e
