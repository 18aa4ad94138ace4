"""
Snapshot persistence interfaces.
"""

from abc import ABC, abstractmethod


class ISnapshotStore(ABC):
    """Abstract key-value byte store holding serialized portfolio snapshots.

    Whole-value reads and writes only; no transactions.
    """

    @abstractmethod
    def read(self, key: str) -> bytes | None:
        """Return the stored bytes for ``key``, or None when nothing is stored.

        Raises:
            PersistenceError: If the store cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, data: bytes) -> None:
        """Replace the value stored under ``key``.

        Raises:
            PersistenceError: If the store cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        pass
