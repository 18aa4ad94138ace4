"""
Portfolio tracker controller.

``PortfolioTracker`` is the single owner of the authoritative snapshot. It
routes user commands through the ledger engine, persists every applied change
and merges quote refreshes into whatever snapshot is current when the quotes
arrive (last writer wins).
"""

import asyncio
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from loguru import logger

from stockfolio.config import TrackerSettings, configure_logging
from stockfolio.core.constants import DEFAULT_STORAGE_KEY
from stockfolio.core.enums import GainLossConvention
from stockfolio.core.exceptions.portfolio import (
    ExternalSourceError,
    PersistenceError,
    TrackerException,
)
from stockfolio.core.interfaces.quotes import IQuoteSource
from stockfolio.core.interfaces.storage import ISnapshotStore
from stockfolio.core.models import portfolio as ledger
from stockfolio.core.models.command import CommandResult
from stockfolio.core.models.portfolio_core import PortfolioSnapshot
from stockfolio.core.models.portfolio_metrics import portfolio_summary
from stockfolio.infrastructure.export import export_backup, export_csv, restore_backup
from stockfolio.infrastructure.quotes import AlphaVantageQuoteSource
from stockfolio.infrastructure.storage import (
    FileSnapshotStore,
    deserialize_snapshot,
    serialize_snapshot,
)


class PortfolioTracker:
    """State container for one user's portfolio.

    Command methods return True when the ledger applied the command and False
    when it was rejected; ``last_error`` then says why. Quote and persistence
    failures are logged and never raised.
    """

    def __init__(
        self,
        store: ISnapshotStore,
        quote_source: IQuoteSource | None = None,
        convention: GainLossConvention = GainLossConvention.ABSOLUTE,
        storage_key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self.store = store
        self.quote_source = quote_source
        self.convention = convention
        self.storage_key = storage_key
        self.last_error: TrackerException | None = None
        self._snapshot = PortfolioSnapshot.empty(convention)
        self._refreshed_holdings_count: int | None = None

    @property
    def snapshot(self) -> PortfolioSnapshot:
        return self._snapshot

    # Persistence
    def load(self) -> PortfolioSnapshot:
        """Replace the in-memory snapshot with the stored one.

        A missing snapshot starts an empty portfolio. An unreadable one is
        logged and the session continues with an empty in-memory portfolio.
        """
        try:
            data = self.store.read(self.storage_key)
            snapshot = deserialize_snapshot(data) if data is not None else None
        except PersistenceError as e:
            logger.error(f"Could not load saved portfolio, starting empty: {e}")
            snapshot = None

        if snapshot is None:
            self._snapshot = PortfolioSnapshot.empty(self.convention)
        else:
            self._snapshot = self._conform(snapshot)
            logger.info(
                f"Loaded portfolio with {snapshot.holdings_count} holdings "
                f"(version {snapshot.version})"
            )
        self._refreshed_holdings_count = None
        return self._snapshot

    def save(self) -> bool:
        """Write the current snapshot to the store; False if the write failed."""
        try:
            self.store.write(self.storage_key, serialize_snapshot(self._snapshot).encode("utf-8"))
        except PersistenceError as e:
            logger.error(f"Could not save portfolio, continuing in memory: {e}")
            return False
        return True

    def clear(self) -> None:
        """Forget the portfolio, both in memory and in the store."""
        try:
            self.store.delete(self.storage_key)
        except PersistenceError as e:
            logger.error(f"Could not clear stored portfolio: {e}")
        self._snapshot = PortfolioSnapshot.empty(self.convention)
        self._refreshed_holdings_count = None

    # Ledger commands
    def set_initial_cash(self, amount: float) -> bool:
        return self._commit(ledger.set_initial_cash(self._snapshot, amount))

    def buy_stock(
        self,
        ticker: str,
        shares: float,
        price_per_share: float,
        purchase_date: datetime | None = None,
    ) -> bool:
        return self._commit(
            ledger.buy_stock(self._snapshot, ticker, shares, price_per_share, purchase_date)
        )

    def edit_stock(
        self,
        holding_id: str,
        ticker: str,
        shares: float,
        price_per_share: float,
        purchase_date: datetime | None = None,
    ) -> bool:
        return self._commit(
            ledger.edit_stock(
                self._snapshot, holding_id, ticker, shares, price_per_share, purchase_date
            )
        )

    def sell_stock(
        self,
        holding_id: str,
        shares_sold: float,
        sale_price_per_share: float,
        date_sold: datetime | None = None,
    ) -> bool:
        return self._commit(
            ledger.sell_stock(
                self._snapshot, holding_id, shares_sold, sale_price_per_share, date_sold
            )
        )

    def delete_stock(self, holding_id: str) -> bool:
        return self._commit(ledger.delete_stock(self._snapshot, holding_id))

    def apply_quotes(self, quotes: Mapping[str, Any]) -> bool:
        return self._commit(ledger.apply_quotes(self._snapshot, quotes))

    # Quote refresh
    async def refresh_prices(self) -> int:
        """Fetch quotes for the current holdings and merge them in.

        Returns:
            Number of quotes received (0 when nothing was fetched)
        """
        if self.quote_source is None or not self._snapshot.holdings:
            return 0

        requested_at = self._snapshot.version
        tickers = self._snapshot.tickers
        try:
            quotes = await self.quote_source.fetch_prices(tickers)
        except ExternalSourceError as e:
            logger.error(f"Price refresh failed, keeping last known prices: {e}")
            return 0

        self._refreshed_holdings_count = self._snapshot.holdings_count
        if not quotes:
            logger.warning(f"No prices received for {len(tickers)} tickers")
            return 0

        if self._snapshot.version != requested_at:
            logger.debug(
                f"Merging quotes requested at version {requested_at} "
                f"into version {self._snapshot.version}"
            )
        self.apply_quotes(quotes)
        return len(quotes)

    async def refresh_if_holdings_changed(self) -> int:
        """Refresh only when the number of holdings changed since the last refresh."""
        if self._refreshed_holdings_count == self._snapshot.holdings_count:
            return 0
        return await self.refresh_prices()

    async def auto_refresh(self, interval_seconds: float, max_cycles: int | None = None) -> None:
        """Refresh prices every ``interval_seconds`` until cancelled or ``max_cycles`` ran."""
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            await self.refresh_prices()
            cycles += 1
            if max_cycles is None or cycles < max_cycles:
                await asyncio.sleep(interval_seconds)

    # Backup and reporting
    def export_backup(self) -> str:
        return export_backup(self._snapshot)

    def restore_backup(self, text: str | bytes) -> bool:
        """Replace the whole portfolio with a backup; False if the backup is invalid."""
        try:
            snapshot = restore_backup(text)
        except PersistenceError as e:
            self.last_error = e
            logger.error(f"Backup rejected: {e}")
            return False

        self._snapshot = self._conform(snapshot)
        self._refreshed_holdings_count = None
        self.last_error = None
        self.save()
        return True

    def export_csv(self) -> str:
        return export_csv(self._snapshot)

    def summary(self) -> dict[str, Any]:
        return portfolio_summary(self._snapshot)

    def _conform(self, snapshot: PortfolioSnapshot) -> PortfolioSnapshot:
        """Recompute a loaded snapshot under this deployment's convention."""
        if snapshot.convention == self.convention:
            return snapshot
        logger.info(
            f"Converting snapshot from {snapshot.convention.value} "
            f"to {self.convention.value} gain/loss"
        )
        return ledger.change_convention(snapshot, self.convention).snapshot

    def _commit(self, result: CommandResult) -> bool:
        if not result.applied:
            self.last_error = result.error
            return False

        self.last_error = None
        self._snapshot = result.snapshot
        self.save()
        return True


def build_tracker(settings: TrackerSettings | None = None) -> PortfolioTracker:
    """Wire a tracker with file storage and the Alpha Vantage quote source."""
    settings = settings or TrackerSettings()
    configure_logging(settings.log_level)
    quote_source = AlphaVantageQuoteSource(
        api_key=settings.alpha_vantage_api_key,
        base_url=settings.quote_base_url,
        batch_size=settings.quote_batch_size,
        batch_delay_seconds=settings.quote_batch_delay_seconds,
        cache_ttl_seconds=settings.quote_cache_ttl_seconds,
        request_timeout_seconds=settings.request_timeout_seconds,
    )
    tracker = PortfolioTracker(
        store=FileSnapshotStore(settings.storage_dir),
        quote_source=quote_source,
        convention=settings.gain_loss_convention,
        storage_key=settings.storage_key,
    )
    tracker.load()
    return tracker
