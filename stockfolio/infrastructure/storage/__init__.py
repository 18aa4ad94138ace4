"""
Snapshot persistence: stores and the JSON document format.
"""

from .file_store import FileSnapshotStore
from .memory_store import MemorySnapshotStore
from .serialization import deserialize_snapshot, serialize_snapshot

__all__ = [
    "FileSnapshotStore",
    "MemorySnapshotStore",
    "deserialize_snapshot",
    "serialize_snapshot",
]
