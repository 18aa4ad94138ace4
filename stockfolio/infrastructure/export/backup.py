"""
Full-snapshot backup and restore.

A backup is the pretty-printed JSON snapshot document, so anything the
persistence layer can read a backup can restore, and vice versa.
"""

from loguru import logger

from stockfolio.core.models.portfolio_core import PortfolioSnapshot
from stockfolio.infrastructure.storage.serialization import (
    deserialize_snapshot,
    serialize_snapshot,
)

BACKUP_INDENT = 2


def export_backup(snapshot: PortfolioSnapshot) -> str:
    """Export the complete snapshot as indented JSON text."""
    return serialize_snapshot(snapshot, indent=BACKUP_INDENT)


def restore_backup(text: str | bytes) -> PortfolioSnapshot:
    """Parse a backup produced by ``export_backup``.

    Raises:
        PersistenceError: If the backup is malformed
    """
    snapshot = deserialize_snapshot(text)
    logger.info(
        f"Restored backup with {snapshot.holdings_count} holdings "
        f"(version {snapshot.version})"
    )
    return snapshot
