"""Session bankroll, statistics and hand history."""

from blackjack_sim.statistics.session import (
    EquityPoint,
    HandHistoryEntry,
    HandRecord,
    RoundOutcomeSummary,
    SessionLedger,
    SessionStats,
    SessionSummary,
    equity_curve,
)

__all__ = [
    "EquityPoint",
    "HandHistoryEntry",
    "HandRecord",
    "RoundOutcomeSummary",
    "SessionLedger",
    "SessionStats",
    "SessionSummary",
    "equity_curve",
]
