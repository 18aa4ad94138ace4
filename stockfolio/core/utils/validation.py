"""
Validation utilities for ledger commands.

Provides consistent validation across the application.
"""

from datetime import datetime
from typing import Any

from stockfolio.core.enums import GainLossConvention
from stockfolio.core.exceptions.portfolio import ValidationError
from stockfolio.core.types.financial import is_finite_number


def validate_ticker(ticker: Any, param_name: str = "ticker") -> str:
    """Validate a ticker symbol and normalize it to upper case.

    Args:
        ticker: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The trimmed, upper-cased ticker

    Raises:
        ValidationError: If the ticker is not a non-empty string
    """
    if not isinstance(ticker, str):
        raise ValidationError(f"{param_name} must be a string, got {type(ticker).__name__}")

    normalized = ticker.strip().upper()
    if not normalized:
        raise ValidationError(f"{param_name} must not be empty")
    return normalized


def validate_positive(value: Any, param_name: str) -> float:
    """Validate that a numeric value is finite and positive.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value as float

    Raises:
        ValidationError: If value is not a finite positive number
    """
    if not is_finite_number(value):
        raise ValidationError(f"{param_name} must be a finite number, got {value!r}")
    if value <= 0:
        raise ValidationError(f"{param_name} must be positive, got {value}")
    return float(value)


def validate_non_negative(value: Any, param_name: str) -> float:
    """Validate that a numeric value is finite and not negative.

    Raises:
        ValidationError: If value is negative, NaN, infinite or not a number
    """
    if not is_finite_number(value):
        raise ValidationError(f"{param_name} must be a finite number, got {value!r}")
    if value < 0:
        raise ValidationError(f"{param_name} must be non-negative, got {value}")
    return float(value)


def validate_date(value: Any, param_name: str = "date") -> datetime:
    """Validate that a value is a datetime.

    Raises:
        ValidationError: If value is not a datetime instance
    """
    if not isinstance(value, datetime):
        raise ValidationError(f"{param_name} must be a datetime, got {type(value).__name__}")
    return value


def validate_holding_id(value: Any, param_name: str = "holding_id") -> str:
    """Validate an opaque holding identifier."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{param_name} must be a non-empty string, got {value!r}")
    return value


def validate_convention(value: Any, param_name: str = "convention") -> GainLossConvention:
    """Validate a gain/loss convention given as enum or string.

    Raises:
        ValidationError: If the value names no known convention
    """
    if isinstance(value, GainLossConvention):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"{param_name} must be a string, got {type(value).__name__}")
    try:
        return GainLossConvention.from_string(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e
