"""
Unit tests for snapshot stores.
"""

from pathlib import Path

import pytest

from stockfolio.core.exceptions.portfolio import PersistenceError
from stockfolio.infrastructure.storage import FileSnapshotStore, MemorySnapshotStore


class TestFileSnapshotStore:
    """Test the file-backed store."""

    def test_should_return_none_for_missing_key(self, tmp_path: Path) -> None:
        store = FileSnapshotStore(tmp_path / "data")

        assert store.read("portfolio_data") is None

    def test_should_write_and_read_back(self, tmp_path: Path) -> None:
        """Test written bytes are read back unchanged and the directory is created."""
        # Arrange
        store = FileSnapshotStore(tmp_path / "nested" / "dir")

        # Act
        store.write("portfolio_data", b'{"initialCash": 5}')

        # Assert
        assert store.read("portfolio_data") == b'{"initialCash": 5}'
        expected = tmp_path / "nested" / "dir" / "portfolio_data.json"
        assert store.path_for("portfolio_data") == expected
        assert store.path_for("portfolio_data").exists()

    def test_should_overwrite_without_leaving_temp_files(self, tmp_path: Path) -> None:
        store = FileSnapshotStore(tmp_path)

        store.write("k", b"first")
        store.write("k", b"second")

        assert store.read("k") == b"second"
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    def test_should_delete_key(self, tmp_path: Path) -> None:
        store = FileSnapshotStore(tmp_path)
        store.write("k", b"data")

        store.delete("k")
        store.delete("k")

        assert store.read("k") is None

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", ".", "..", "with space"])
    def test_should_reject_unsafe_keys(self, tmp_path: Path, key: str) -> None:
        store = FileSnapshotStore(tmp_path)

        with pytest.raises(PersistenceError, match="Invalid storage key"):
            store.read(key)

    def test_should_wrap_os_errors(self, tmp_path: Path) -> None:
        """Test an unreadable path surfaces as PersistenceError."""
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        store = FileSnapshotStore(blocker)

        with pytest.raises(PersistenceError, match="Failed to write"):
            store.write("k", b"data")


    def test_should_remove_temp_file_when_replace_fails(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test a failed move leaves neither the target nor a temp file behind."""
        # Arrange
        store = FileSnapshotStore(tmp_path)

        def failing_replace(src: object, dst: object) -> None:
            raise OSError("device busy")

        monkeypatch.setattr(
            "stockfolio.infrastructure.storage.file_store.os.replace", failing_replace
        )

        # Act
        with pytest.raises(PersistenceError, match="Failed to write"):
            store.write("k", b"data")

        # Assert
        assert list(tmp_path.iterdir()) == []


class TestMemorySnapshotStore:
    """Test the in-memory store."""

    def test_should_store_bytes_per_key(self) -> None:
        store = MemorySnapshotStore()

        store.write("a", b"1")
        store.write("b", b"2")

        assert store.read("a") == b"1"
        assert store.read("b") == b"2"
        assert "a" in store
        assert store.read("missing") is None

    def test_should_delete_key(self) -> None:
        store = MemorySnapshotStore()
        store.write("a", b"1")

        store.delete("a")
        store.delete("a")

        assert "a" not in store
