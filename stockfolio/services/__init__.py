"""
Application services.
"""

from .tracker import PortfolioTracker, build_tracker

__all__ = ["PortfolioTracker", "build_tracker"]
