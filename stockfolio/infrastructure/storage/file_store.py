"""
File-backed snapshot store.

One JSON file per key inside a directory. Writes go to a temporary file first
and are moved into place, so a crash mid-write leaves the previous snapshot
intact.
"""

import contextlib
import os
import re
import tempfile
from pathlib import Path

from loguru import logger

from stockfolio.core.exceptions.portfolio import PersistenceError
from stockfolio.core.interfaces.storage import ISnapshotStore

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileSnapshotStore(ISnapshotStore):
    """Key-value byte store persisted as ``<directory>/<key>.json`` files."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Resolve the file backing ``key``.

        Raises:
            PersistenceError: If the key contains path separators or other
                characters unsafe for a file name
        """
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise PersistenceError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def read(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        tmp_path: Path | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=self.directory, prefix=f".{key}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None:
                with contextlib.suppress(OSError):
                    tmp_path.unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {len(data)} bytes to {path}")

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to delete {path}: {e}") from e
