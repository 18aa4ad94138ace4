"""
In-memory snapshot store for tests and throwaway sessions.
"""

from stockfolio.core.interfaces.storage import ISnapshotStore


class MemorySnapshotStore(ISnapshotStore):
    """Dict-backed key-value byte store; contents vanish with the process."""

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def read(self, key: str) -> bytes | None:
        return self._data.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._data[key] = bytes(data)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data
