"""
Unrealized gain/loss conventions.

A deployment picks exactly one convention. It travels with the snapshot so the
ledger, the summary and the CSV export all express gain/loss the same way.
"""

from enum import StrEnum


class GainLossConvention(StrEnum):
    """How unrealized gain/loss is expressed and aggregated."""

    ABSOLUTE = "absolute"  # market value - cost basis, summed across holdings
    PERCENTAGE = "percentage"  # (current - purchase) / purchase * 100, averaged

    @property
    def is_percentage(self) -> bool:
        """Check whether figures are percentages rather than currency."""
        return self == GainLossConvention.PERCENTAGE

    @property
    def column_label(self) -> str:
        """Column header used in tabular exports."""
        if self.is_percentage:
            return "Unrealized Gain/Loss %"
        return "Unrealized Gain/Loss"

    @classmethod
    def from_string(cls, value: str) -> "GainLossConvention":
        """
        Convert string to GainLossConvention, case-insensitively.

        Args:
            value: String representation ("absolute", "pct", "%", ...)

        Returns:
            Corresponding GainLossConvention

        Raises:
            ValueError: If the value names no known convention
        """
        value_lower = value.strip().lower()

        if value_lower in ["absolute", "abs", "amount"]:
            return cls.ABSOLUTE
        elif value_lower in ["percentage", "percent", "pct", "%"]:
            return cls.PERCENTAGE
        else:
            raise ValueError(
                f"Unsupported gain/loss convention: {value}. "
                f"Supported conventions: {', '.join([c.value for c in cls])}"
            )
