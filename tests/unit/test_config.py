"""
Unit tests for tracker settings and logging setup.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from stockfolio.config import TrackerSettings, configure_logging
from stockfolio.core.enums import GainLossConvention


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "ALPHA_VANTAGE_API_KEY",
        "STOCKFOLIO_ALPHA_VANTAGE_API_KEY",
        "STOCKFOLIO_QUOTE_BATCH_SIZE",
        "STOCKFOLIO_STORAGE_DIR",
        "STOCKFOLIO_STORAGE_KEY",
        "STOCKFOLIO_GAIN_LOSS_CONVENTION",
        "STOCKFOLIO_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestTrackerSettings:
    """Test loading settings from the environment."""

    def test_should_use_defaults(self) -> None:
        settings = TrackerSettings()

        assert settings.alpha_vantage_api_key is None
        assert settings.quote_base_url == "https://www.alphavantage.co/query"
        assert settings.quote_batch_size == 5
        assert settings.quote_batch_delay_seconds == 2.0
        assert settings.storage_dir == Path(".stockfolio")
        assert settings.storage_key == "portfolio_data"
        assert settings.gain_loss_convention is GainLossConvention.ABSOLUTE
        assert settings.log_level == "INFO"

    def test_should_read_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test STOCKFOLIO_* variables override the defaults."""
        # Arrange
        monkeypatch.setenv("STOCKFOLIO_QUOTE_BATCH_SIZE", "2")
        monkeypatch.setenv("STOCKFOLIO_STORAGE_DIR", "/tmp/folio")
        monkeypatch.setenv("STOCKFOLIO_GAIN_LOSS_CONVENTION", "pct")
        monkeypatch.setenv("STOCKFOLIO_LOG_LEVEL", "debug")

        # Act
        settings = TrackerSettings()

        # Assert
        assert settings.quote_batch_size == 2
        assert settings.storage_dir == Path("/tmp/folio")
        assert settings.gain_loss_convention is GainLossConvention.PERCENTAGE
        assert settings.log_level == "DEBUG"

    def test_should_read_conventional_api_key_variable(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ALPHA_VANTAGE_API_KEY", "secret")

        assert TrackerSettings().alpha_vantage_api_key == "secret"

    def test_should_read_api_key_from_env_file(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("STOCKFOLIO_ALPHA_VANTAGE_API_KEY=from-file\n")

        assert TrackerSettings().alpha_vantage_api_key == "from-file"

    def test_should_reject_unknown_convention(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOCKFOLIO_GAIN_LOSS_CONVENTION", "relative")

        with pytest.raises(ValidationError):
            TrackerSettings()

    def test_should_reject_zero_batch_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("STOCKFOLIO_QUOTE_BATCH_SIZE", "0")

        with pytest.raises(ValidationError):
            TrackerSettings()


class TestConfigureLogging:
    def test_should_replace_sinks(self) -> None:
        """Test logging can be reconfigured repeatedly."""
        configure_logging("debug")
        configure_logging("WARNING")
