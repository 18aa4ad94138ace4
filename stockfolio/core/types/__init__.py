"""
Core type definitions and utilities.
"""

# Re-export financial utilities for easy access
from .financial import (
    HUNDRED,
    PERCENTAGE_DECIMALS,
    PRICE_DECIMALS,
    ZERO,
    calculate_cost_basis,
    calculate_market_value,
    calculate_percentage_change,
    calculate_realized_gain_loss,
    clamp_non_negative,
    is_finite_number,
    round_percentage,
    round_price,
    safe_float_comparison,
)

__all__ = [
    # Utility functions
    "is_finite_number",
    "round_price",
    "round_percentage",
    "calculate_cost_basis",
    "calculate_market_value",
    "calculate_realized_gain_loss",
    "calculate_percentage_change",
    "clamp_non_negative",
    "safe_float_comparison",
    # Constants
    "PERCENTAGE_DECIMALS",
    "PRICE_DECIMALS",
    "ZERO",
    "HUNDRED",
]
