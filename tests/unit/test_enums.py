"""
Unit tests for core enumerations.
"""

import pytest

from stockfolio.core.enums import GainLossConvention


class TestGainLossConvention:
    """Test suite for GainLossConvention."""

    def test_should_have_string_values(self) -> None:
        """Test enum values used in stored snapshots."""
        assert GainLossConvention.ABSOLUTE.value == "absolute"
        assert GainLossConvention.PERCENTAGE.value == "percentage"
        assert GainLossConvention("percentage") is GainLossConvention.PERCENTAGE

    def test_should_report_percentage_flag(self) -> None:
        """Test the is_percentage helper."""
        assert GainLossConvention.PERCENTAGE.is_percentage
        assert not GainLossConvention.ABSOLUTE.is_percentage

    def test_should_label_export_column(self) -> None:
        """Test CSV column labels follow the convention."""
        assert GainLossConvention.ABSOLUTE.column_label == "Unrealized Gain/Loss"
        assert GainLossConvention.PERCENTAGE.column_label == "Unrealized Gain/Loss %"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("absolute", GainLossConvention.ABSOLUTE),
            (" ABS ", GainLossConvention.ABSOLUTE),
            ("amount", GainLossConvention.ABSOLUTE),
            ("Percentage", GainLossConvention.PERCENTAGE),
            ("pct", GainLossConvention.PERCENTAGE),
            ("%", GainLossConvention.PERCENTAGE),
        ],
    )
    def test_should_parse_from_string(self, raw: str, expected: GainLossConvention) -> None:
        """Test case-insensitive parsing."""
        assert GainLossConvention.from_string(raw) is expected

    def test_should_reject_unknown_convention(self) -> None:
        """Test unknown names raise ValueError listing the supported ones."""
        with pytest.raises(ValueError, match="absolute, percentage"):
            GainLossConvention.from_string("weighted")
