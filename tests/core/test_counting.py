"""Tests for Hi-Lo counting and count state."""

import pytest

from blackjack_sim.cards import Card, Rank, Suit, build_deck
from blackjack_sim.counting import (
    CountState,
    decks_remaining,
    hi_lo_value,
    true_count,
)
from tests.helpers import cards


class TestHiLo:
    """Tests for Hi-Lo counting system."""

    def test_full_deck_sums_to_zero(self, hilo):
        """Verify Hi-Lo is balanced (full deck = 0)."""
        assert hilo.full_deck_sum == 0
        assert hilo.total(build_deck()) == 0

    def test_is_balanced(self, hilo):
        """Test system reports as balanced."""
        assert hilo.is_balanced
        assert hilo.name == "Hi-Lo"

    def test_low_cards_positive(self):
        """Test low cards (2-6) are +1."""
        for rank in [Rank.TWO, Rank.THREE, Rank.FOUR, Rank.FIVE, Rank.SIX]:
            assert hi_lo_value(Card(rank, Suit.SPADES)) == 1

    def test_neutral_cards_zero(self):
        """Test neutral cards (7-9) are 0."""
        for rank in [Rank.SEVEN, Rank.EIGHT, Rank.NINE]:
            assert hi_lo_value(Card(rank, Suit.SPADES)) == 0

    def test_high_cards_negative(self):
        """Test high cards (10-A) are -1."""
        for rank in [Rank.TEN, Rank.JACK, Rank.QUEEN, Rank.KING, Rank.ACE]:
            assert hi_lo_value(Card(rank, Suit.SPADES)) == -1

    def test_deck_composition(self, hilo):
        """20 low, 12 neutral and 20 high cards per deck."""
        values = [hilo.value(card) for card in build_deck()]
        assert values.count(1) == 20
        assert values.count(0) == 12
        assert values.count(-1) == 20


class TestCountState:
    """Tests for the immutable running count."""

    def test_initial_state(self):
        """A new state starts at zero with no history."""
        state = CountState()
        assert state.running_count == 0
        assert state.cards_seen == 0

    def test_record_returns_new_state(self):
        """record() leaves the original state untouched."""
        state = CountState()
        new_state = state.record(Card(Rank.TWO, Suit.CLUBS))
        assert state.running_count == 0
        assert new_state.running_count == 1
        assert new_state.cards_seen == 1

    def test_history_entries(self):
        """Each entry records its delta and the running count after it."""
        state = CountState()
        for card in cards("2C", "KH", "5D", "8S"):
            state = state.record(card, timestamp=1.0)

        assert state.running_count == 1
        assert [e.delta for e in state.history] == [1, -1, 1, 0]
        assert [e.running_count_after for e in state.history] == [1, 0, 1, 1]
        assert state.history[-1].card == Card(Rank.EIGHT, Suit.SPADES)
        assert state.history[0].timestamp == 1.0

    def test_full_deck_returns_to_zero(self):
        """Counting a whole deck ends at zero."""
        state = CountState()
        for card in build_deck():
            state = state.record(card)
        assert state.running_count == 0
        assert state.cards_seen == 52


class TestTrueCount:
    """Tests for true count arithmetic."""

    def test_decks_remaining(self):
        """Decks remaining is shoe size / 52."""
        assert decks_remaining(312) == 6.0
        assert decks_remaining(26) == 0.5
        assert decks_remaining(0) == 0.0

    def test_true_count(self):
        """True count divides by decks remaining."""
        assert true_count(4, 4.0) == 1.0
        assert true_count(-6, 2.0) == -3.0
        assert true_count(3, 0.5) == pytest.approx(6.0)

    def test_true_count_no_decks(self):
        """An empty shoe has a true count of zero."""
        assert true_count(5, 0.0) == 0.0
