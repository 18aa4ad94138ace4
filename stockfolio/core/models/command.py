"""
Ledger command outcome.
"""

from dataclasses import dataclass

from stockfolio.core.exceptions.portfolio import TrackerException

from .portfolio_core import PortfolioSnapshot


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a ledger command.

    When the command is rejected ``snapshot`` is the unchanged input snapshot
    and ``error`` says why; callers decide how to surface it.
    """

    snapshot: PortfolioSnapshot
    error: TrackerException | None = None

    @property
    def applied(self) -> bool:
        return self.error is None
