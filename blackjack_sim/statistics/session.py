"""Session bankroll, win/loss statistics and the per-round history log."""

import time
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum
from typing import Iterable, Sequence

from blackjack_sim.cards import Card
from blackjack_sim.hand import HandResult


class RoundOutcomeSummary(Enum):
    """Round-level outcome, distinct from any single hand's result."""

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"

    @classmethod
    def from_results(cls, results: Iterable[HandResult]) -> "RoundOutcomeSummary":
        """Compare hands won (blackjacks included) against hands lost."""
        results = list(results)
        wins = sum(1 for r in results if r.is_win)
        losses = sum(1 for r in results if r == HandResult.LOSE)
        if wins > losses:
            return cls.WIN
        if losses > wins:
            return cls.LOSE
        return cls.PUSH

    @property
    def message(self) -> str:
        """Return the table message announcing this outcome."""
        return {
            RoundOutcomeSummary.WIN: "You Win!",
            RoundOutcomeSummary.LOSE: "Dealer Wins!",
            RoundOutcomeSummary.PUSH: "Round Complete",
        }[self]


@dataclass(frozen=True)
class SessionStats:
    """
    Cumulative statistics for a login session.

    Immutable: every update returns a new instance.
    """

    hands_played: int = 0
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    blackjacks: int = 0
    current_streak: int = 0
    best_streak: int = 0
    worst_streak: int = 0
    decisions: int = 0
    correct_decisions: int = 0

    def apply_round(self, results: Sequence[HandResult]) -> "SessionStats":
        """
        Fold one settled round into the statistics.

        Blackjacks count as wins. The streak extends (or flips to +/-1) when
        the round has more wins than losses or vice versa, and stays flat
        otherwise.
        """
        wins = sum(1 for r in results if r.is_win)
        losses = sum(1 for r in results if r == HandResult.LOSE)
        pushes = sum(1 for r in results if r == HandResult.PUSH)
        blackjacks = sum(1 for r in results if r == HandResult.BLACKJACK)

        streak = self.current_streak
        if wins > losses:
            streak = streak + 1 if streak >= 0 else 1
        elif losses > wins:
            streak = streak - 1 if streak <= 0 else -1

        return replace(
            self,
            hands_played=self.hands_played + len(results),
            wins=self.wins + wins,
            losses=self.losses + losses,
            pushes=self.pushes + pushes,
            blackjacks=self.blackjacks + blackjacks,
            current_streak=streak,
            best_streak=max(self.best_streak, streak),
            worst_streak=min(self.worst_streak, streak),
        )

    def record_decision(self, followed_strategy: bool) -> "SessionStats":
        """Count a player decision and whether it matched basic strategy."""
        return replace(
            self,
            decisions=self.decisions + 1,
            correct_decisions=self.correct_decisions + int(followed_strategy),
        )

    @property
    def win_rate(self) -> float:
        """Return wins as a percentage of hands played."""
        if self.hands_played == 0:
            return 0.0
        return self.wins / self.hands_played * 100

    @property
    def strategy_accuracy(self) -> float:
        """Return the percentage of decisions that matched basic strategy."""
        if self.decisions == 0:
            return 0.0
        return self.correct_decisions / self.decisions * 100


@dataclass(frozen=True)
class HandRecord:
    """Final state of one player hand, as stored in the history."""

    spot_index: int
    cards: tuple[Card, ...]
    bet: int
    result: HandResult


@dataclass(frozen=True)
class HandHistoryEntry:
    """
    One completed round.

    player_cards and result describe the round's first hand; hands holds
    every hand that was played.
    """

    hand_number: int
    player_cards: tuple[Card, ...]
    dealer_cards: tuple[Card, ...]
    result: HandResult
    profit_or_loss: Decimal
    timestamp: float
    hands: tuple[HandRecord, ...] = field(default_factory=tuple)
    outcome: RoundOutcomeSummary = RoundOutcomeSummary.PUSH


@dataclass(frozen=True)
class EquityPoint:
    """Cumulative profit after a history entry."""

    hand_number: int
    hand_profit: Decimal
    cumulative_profit: Decimal


def equity_curve(history: Iterable[HandHistoryEntry]) -> list[EquityPoint]:
    """Running profit/loss series over the hand history."""
    cumulative = Decimal("0")
    points = []
    for entry in history:
        cumulative += entry.profit_or_loss
        points.append(
            EquityPoint(
                hand_number=entry.hand_number,
                hand_profit=entry.profit_or_loss,
                cumulative_profit=cumulative,
            )
        )
    return points


@dataclass(frozen=True)
class SessionSummary:
    """End-of-session report."""

    stats: SessionStats
    starting_bankroll: Decimal
    ending_bankroll: Decimal

    @property
    def net_profit(self) -> Decimal:
        """Return the bankroll change over the session."""
        return self.ending_bankroll - self.starting_bankroll

    @property
    def win_rate(self) -> float:
        """Return the session win rate percentage."""
        return self.stats.win_rate


class SessionLedger:
    """
    Bankroll, statistics and hand history for the logged-in player.

    The round engine is the only writer: it debits wagers as they are placed
    and records each settled round once.
    """

    def __init__(
        self,
        bankroll: Decimal,
        stats: SessionStats | None = None,
        history: Sequence[HandHistoryEntry] = (),
    ) -> None:
        self._bankroll = Decimal(bankroll)
        self._session_start = self._bankroll
        self._stats = stats or SessionStats()
        self._history: list[HandHistoryEntry] = list(history)

    @property
    def bankroll(self) -> Decimal:
        """Return the current bankroll."""
        return self._bankroll

    @property
    def stats(self) -> SessionStats:
        """Return the cumulative statistics."""
        return self._stats

    @property
    def history(self) -> tuple[HandHistoryEntry, ...]:
        """Return the hand history, oldest first."""
        return tuple(self._history)

    def can_afford(self, amount: int | Decimal) -> bool:
        """Check whether the bankroll covers an additional wager."""
        return Decimal(amount) <= self._bankroll

    def debit(self, amount: int | Decimal) -> None:
        """Take a wager off the bankroll."""
        amount = Decimal(amount)
        if amount > self._bankroll:
            raise ValueError("Debit exceeds bankroll")
        self._bankroll -= amount

    def credit(self, amount: int | Decimal) -> None:
        """Return winnings, pushes or refunds to the bankroll."""
        self._bankroll += Decimal(amount)

    def record_decision(self, followed_strategy: bool) -> None:
        """Track a player decision against the basic strategy advice."""
        self._stats = self._stats.record_decision(followed_strategy)

    def record_round(
        self,
        hands: Sequence[HandRecord],
        dealer_cards: Sequence[Card],
        total_wagered: int | Decimal,
        total_payout: int | Decimal,
        timestamp: float | None = None,
    ) -> HandHistoryEntry:
        """
        Update statistics and append one history entry for a settled round.

        Returns the new history entry.
        """
        if not hands:
            raise ValueError("A settled round must contain at least one hand")

        results = [hand.result for hand in hands]
        self._stats = self._stats.apply_round(results)

        entry = HandHistoryEntry(
            hand_number=self._stats.hands_played,
            player_cards=hands[0].cards,
            dealer_cards=tuple(dealer_cards),
            result=hands[0].result,
            profit_or_loss=Decimal(total_payout) - Decimal(total_wagered),
            timestamp=time.time() if timestamp is None else timestamp,
            hands=tuple(hands),
            outcome=RoundOutcomeSummary.from_results(results),
        )
        self._history.append(entry)
        return entry

    def start_session(self) -> None:
        """Open a new login session; best and worst streaks carry over, the current one restarts."""
        self._stats = replace(self._stats, current_streak=0)

    def reset(self, bankroll: Decimal) -> None:
        """Start over with a fresh bankroll, zeroed stats and no history."""
        self._bankroll = Decimal(bankroll)
        self._session_start = self._bankroll
        self._stats = SessionStats()
        self._history.clear()

    def summary(self) -> SessionSummary:
        """Summarize the session since the ledger was opened or reset."""
        return SessionSummary(
            stats=self._stats,
            starting_bankroll=self._session_start,
            ending_bankroll=self._bankroll,
        )

    def __repr__(self) -> str:
        return f"SessionLedger(bankroll={self._bankroll}, hands_played={self._stats.hands_played})"
