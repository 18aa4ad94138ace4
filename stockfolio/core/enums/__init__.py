"""
Core enumerations for the portfolio tracker.
"""

from .gain_loss import GainLossConvention

__all__ = ["GainLossConvention"]
