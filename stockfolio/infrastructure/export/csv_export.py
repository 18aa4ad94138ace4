"""
Tabular portfolio report.

Renders one CSV row per holding followed by a summary block. The report is a
derived view over a snapshot; nothing in it is read back.
"""

from datetime import UTC, date, datetime

import pandas as pd

from stockfolio.core.models.portfolio_core import PortfolioSnapshot
from stockfolio.core.types.financial import PRICE_DECIMALS

HOLDING_COLUMNS = [
    "Ticker",
    "Shares",
    "Cost Per Share",
    "Total Cost",
    "Current Price",
    "Market Value",
    "Unrealized Gain/Loss",
    "Purchase Date",
]

_NUMERIC_COLUMNS = HOLDING_COLUMNS[1:7]


def _money(value: float) -> str:
    return f"{value:.{PRICE_DECIMALS}f}"


def holdings_frame(snapshot: PortfolioSnapshot) -> pd.DataFrame:
    """Build a DataFrame with one numeric row per holding.

    The gain/loss column is renamed after the snapshot's convention
    ("Unrealized Gain/Loss" or "Unrealized Gain/Loss %").
    """
    rows = [
        {
            "Ticker": holding.ticker,
            "Shares": holding.shares,
            "Cost Per Share": holding.price_per_share,
            "Total Cost": holding.cost_basis,
            "Current Price": holding.current_price,
            "Market Value": holding.market_value,
            "Unrealized Gain/Loss": holding.unrealized_gain_loss,
            "Purchase Date": holding.purchase_date.date(),
        }
        for holding in snapshot.holdings
    ]
    frame = pd.DataFrame(rows, columns=HOLDING_COLUMNS)
    return frame.rename(columns={"Unrealized Gain/Loss": snapshot.convention.column_label})


def summary_rows(snapshot: PortfolioSnapshot) -> list[tuple[str, str]]:
    """Label/value pairs for the summary block of the report."""
    percentage = snapshot.convention.is_percentage
    unrealized = _money(snapshot.total_unrealized_gain_loss) + ("%" if percentage else "")
    return [
        ("Initial Cash", _money(snapshot.initial_cash)),
        ("Remaining Cash", _money(snapshot.remaining_cash)),
        ("Total Invested", _money(snapshot.initial_cash - snapshot.remaining_cash)),
        ("Total Portfolio Value", _money(snapshot.total_portfolio_value)),
        ("Total Unrealized Gain/Loss", unrealized),
        ("Total Realized Gain/Loss", _money(snapshot.total_realized_gain_loss)),
        ("Total Portfolio Performance", _money(snapshot.total_portfolio_performance) + "%"),
    ]


def export_csv(snapshot: PortfolioSnapshot) -> str:
    """Render the holdings table and summary block as CSV text.

    Args:
        snapshot: Snapshot to report on

    Returns:
        CSV text with money values at two decimals and ISO purchase dates
    """
    frame = holdings_frame(snapshot)
    label = snapshot.convention.column_label
    numeric_columns = [
        label if column == "Unrealized Gain/Loss" else column for column in _NUMERIC_COLUMNS
    ]

    formatted = frame.copy()
    for column in numeric_columns:
        formatted[column] = frame[column].map(_money)
    if snapshot.convention.is_percentage:
        formatted[label] = formatted[label] + "%"
    formatted["Purchase Date"] = frame["Purchase Date"].map(lambda value: value.isoformat())

    table = formatted.to_csv(index=False, lineterminator="\n")
    summary = "\n".join(f"{name},{value}" for name, value in summary_rows(snapshot))
    return f"{table}\nPortfolio Summary\n\n{summary}\n"


def export_filename(today: date | None = None) -> str:
    """Default download name, e.g. ``portfolio_export_2024-01-15.csv``."""
    today = today or datetime.now(UTC).date()
    return f"portfolio_export_{today.isoformat()}.csv"
