"""
Financial arithmetic helpers for the portfolio ledger.

The ledger keeps full float precision internally so that invariants such as
``cost_basis == shares * price_per_share`` hold exactly. Rounding is applied only
when figures leave the ledger for display or export.

Precision Trade-offs:
- Float64 provides ~15-16 significant decimal digits, ample for a personal
  portfolio
- Comparisons of derived values (per-share cost basis after a partial sale)
  must use ``safe_float_comparison``
"""

import math

# Display precision (number of decimal places)
PRICE_DECIMALS = 2  # USD prices and money amounts
PERCENTAGE_DECIMALS = 2

# Common financial values as float constants
ZERO = 0.0
HUNDRED = 100.0


def is_finite_number(value: object) -> bool:
    """Check that a value is a real, finite number (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def round_price(price: float) -> float:
    """Round a price or money amount to cents."""
    return round(price, PRICE_DECIMALS)


def round_percentage(percentage: float) -> float:
    """Round percentage to display precision."""
    return round(percentage, PERCENTAGE_DECIMALS)


def calculate_cost_basis(shares: float, price_per_share: float) -> float:
    """Calculate the acquisition cost of a lot.

    Not rounded: the ledger relies on exact equality with ``shares * price``.

    Args:
        shares: Number of shares
        price_per_share: Purchase price per share

    Returns:
        Cost basis as float
    """
    return shares * price_per_share


def calculate_market_value(shares: float, current_price: float) -> float:
    """Calculate the market value of a lot at the current price."""
    return shares * current_price


def calculate_realized_gain_loss(
    sale_price_per_share: float, cost_basis_per_share: float, shares_sold: float
) -> float:
    """Calculate profit or loss locked in by a sale.

    Args:
        sale_price_per_share: Price received per share
        cost_basis_per_share: Average acquisition cost per share
        shares_sold: Number of shares sold

    Returns:
        Realized gain (positive) or loss (negative)
    """
    return (sale_price_per_share - cost_basis_per_share) * shares_sold


def calculate_percentage_change(current: float, reference: float) -> float:
    """Calculate the percentage change of ``current`` against ``reference``.

    Returns ZERO when the reference is zero instead of dividing by it.
    """
    if reference == ZERO:
        return ZERO
    return (current - reference) / reference * HUNDRED


def clamp_non_negative(value: float) -> float:
    """Clamp a cash amount at a floor of zero."""
    return max(ZERO, value)


def safe_float_comparison(a: float, b: float, tolerance: float = 1e-9) -> bool:
    """Compare floats with tolerance for precision issues.

    Args:
        a: First float to compare
        b: Second float to compare
        tolerance: Acceptable difference (default: 1e-9)

    Returns:
        True if floats are equal within tolerance

    Examples:
        >>> safe_float_comparison(0.1 + 0.2, 0.3)
        True
        >>> safe_float_comparison(100.01, 100.02, 0.001)
        False
    """
    return abs(a - b) < tolerance
