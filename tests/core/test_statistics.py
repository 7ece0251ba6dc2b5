"""Tests for session statistics and the ledger."""

from decimal import Decimal

import pytest

from blackjack_sim.hand import HandResult
from blackjack_sim.statistics import (
    HandRecord,
    RoundOutcomeSummary,
    SessionLedger,
    SessionStats,
    equity_curve,
)
from tests.helpers import cards

W, L, P, BJ = HandResult.WIN, HandResult.LOSE, HandResult.PUSH, HandResult.BLACKJACK


def record(result, bet=100, spot=0, labels=("10S", "9H")):
    return HandRecord(spot_index=spot, cards=tuple(cards(*labels)), bet=bet, result=result)


class TestSessionStats:
    """Tests for SessionStats."""

    def test_initial(self):
        """Stats start at zero."""
        stats = SessionStats()
        assert stats.hands_played == 0
        assert stats.win_rate == 0.0
        assert stats.strategy_accuracy == 0.0

    def test_counts_per_hand(self):
        """Every hand counts once in its category."""
        stats = SessionStats().apply_round([W, L, P, BJ])
        assert stats.hands_played == 4
        assert stats.wins == 2
        assert stats.losses == 1
        assert stats.pushes == 1
        assert stats.blackjacks == 1

    def test_streak_extends(self):
        """Consecutive winning rounds extend the streak."""
        stats = SessionStats().apply_round([W]).apply_round([BJ]).apply_round([W, L, W])
        assert stats.current_streak == 3
        assert stats.best_streak == 3

    def test_streak_flips(self):
        """A losing round after wins flips the streak to -1."""
        stats = SessionStats().apply_round([W]).apply_round([W]).apply_round([L])
        assert stats.current_streak == -1
        assert stats.best_streak == 2
        assert stats.worst_streak == -1

    def test_streak_flat_on_tie(self):
        """Pushes and even rounds leave the streak alone."""
        stats = SessionStats().apply_round([L]).apply_round([P]).apply_round([W, L])
        assert stats.current_streak == -1
        assert stats.worst_streak == -1

    def test_losing_streak(self):
        """Losing rounds extend the negative streak."""
        stats = SessionStats().apply_round([L]).apply_round([L]).apply_round([L, P])
        assert stats.current_streak == -3
        assert stats.worst_streak == -3
        assert stats.best_streak == 0

    def test_immutable(self):
        """apply_round returns a new instance."""
        stats = SessionStats()
        stats.apply_round([W])
        assert stats.hands_played == 0

    def test_win_rate(self):
        """Win rate is wins over hands played."""
        stats = SessionStats().apply_round([W, L, L, BJ])
        assert stats.win_rate == pytest.approx(50.0)

    def test_strategy_accuracy(self):
        """Accuracy counts decisions matching basic strategy."""
        stats = SessionStats().record_decision(True).record_decision(False)
        assert stats.decisions == 2
        assert stats.strategy_accuracy == pytest.approx(50.0)


class TestRoundOutcomeSummary:
    """Tests for the round-level outcome."""

    def test_from_results(self):
        """More wins than losses is a winning round."""
        assert RoundOutcomeSummary.from_results([W, L, BJ]) == RoundOutcomeSummary.WIN
        assert RoundOutcomeSummary.from_results([L, P]) == RoundOutcomeSummary.LOSE
        assert RoundOutcomeSummary.from_results([W, L]) == RoundOutcomeSummary.PUSH

    def test_messages(self):
        """Outcomes carry the table message."""
        assert RoundOutcomeSummary.WIN.message == "You Win!"
        assert RoundOutcomeSummary.LOSE.message == "Dealer Wins!"
        assert RoundOutcomeSummary.PUSH.message == "Round Complete"


class TestSessionLedger:
    """Tests for SessionLedger."""

    @pytest.fixture
    def ledger(self):
        return SessionLedger(Decimal("1000"))

    def test_debit_and_credit(self, ledger):
        """Wagers come off and payouts go back on."""
        ledger.debit(100)
        assert ledger.bankroll == Decimal("900")
        ledger.credit(Decimal("250"))
        assert ledger.bankroll == Decimal("1150")

    def test_overdraw_rejected(self, ledger):
        """Cannot debit more than the bankroll."""
        with pytest.raises(ValueError):
            ledger.debit(1001)
        assert ledger.bankroll == Decimal("1000")

    def test_can_afford(self, ledger):
        """can_afford checks against the bankroll."""
        assert ledger.can_afford(1000)
        assert not ledger.can_afford(1001)

    def test_record_round(self, ledger):
        """A settled round adds one history entry with its net result."""
        ledger.debit(200)
        ledger.credit(200)
        entry = ledger.record_round(
            [record(W), record(L, spot=2, labels=("10C", "6D", "KH"))],
            dealer_cards=cards("10H", "8D"),
            total_wagered=200,
            total_payout=200,
            timestamp=123.0,
        )

        assert entry.hand_number == 2
        assert entry.player_cards == tuple(cards("10S", "9H"))
        assert entry.result == W
        assert entry.profit_or_loss == Decimal("0")
        assert entry.outcome == RoundOutcomeSummary.PUSH
        assert len(entry.hands) == 2
        assert ledger.history == (entry,)
        assert ledger.stats.hands_played == 2

    def test_record_round_requires_hands(self, ledger):
        """An empty round is rejected."""
        with pytest.raises(ValueError):
            ledger.record_round([], dealer_cards=[], total_wagered=0, total_payout=0)

    def test_history_is_snapshot(self, ledger):
        """The history tuple does not change under later rounds."""
        before = ledger.history
        ledger.record_round([record(W)], cards("10H", "8D"), 100, 200)
        assert before == ()
        assert len(ledger.history) == 1

    def test_reset(self, ledger):
        """reset restores the bankroll and clears stats and history."""
        ledger.debit(100)
        ledger.record_round([record(L)], cards("10H", "8D"), 100, 0)
        ledger.reset(Decimal("5000"))
        assert ledger.bankroll == Decimal("5000")
        assert ledger.stats == SessionStats()
        assert ledger.history == ()

    def test_start_session_restarts_streak(self, ledger):
        """A new session zeroes the current streak; best and worst carry over."""
        ledger.record_round([record(W)], cards("10H", "8D"), 100, 200)
        ledger.record_round([record(W)], cards("10H", "8D"), 100, 200)
        ledger.record_round([record(L)], cards("10H", "8D"), 100, 0)
        ledger.record_round([record(L)], cards("10H", "8D"), 100, 0)
        ledger.start_session()

        assert ledger.stats.current_streak == 0
        assert ledger.stats.best_streak == 2
        assert ledger.stats.worst_streak == -2
        assert ledger.stats.hands_played == 4
        assert len(ledger.history) == 4

    def test_summary(self, ledger):
        """Summary reports net profit since the ledger opened."""
        ledger.debit(100)
        ledger.credit(250)
        ledger.record_round([record(BJ)], cards("10H", "8D"), 100, 250)
        summary = ledger.summary()
        assert summary.net_profit == Decimal("150")
        assert summary.win_rate == pytest.approx(100.0)


class TestEquityCurve:
    """Tests for the cumulative profit series."""

    def test_curve(self):
        """Points accumulate profit in history order."""
        ledger = SessionLedger(Decimal("1000"))
        ledger.record_round([record(W)], cards("10H", "8D"), 100, 200)
        ledger.record_round([record(L)], cards("10H", "8D"), 100, 0)
        ledger.record_round([record(BJ)], cards("10H", "8D"), 100, 250)

        points = equity_curve(ledger.history)
        assert [p.hand_profit for p in points] == [100, -100, 150]
        assert [p.cumulative_profit for p in points] == [100, 0, 150]
        assert [p.hand_number for p in points] == [1, 2, 3]

    def test_empty(self):
        """No history, no points."""
        assert equity_curve([]) == []
