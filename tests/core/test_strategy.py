"""Tests for basic strategy advice."""

import pytest
from hypothesis import given

from blackjack_sim.strategy import Action, BasicStrategy, recommend
from blackjack_sim.strategy.basic import DEALER_UPCARDS
from tests.helpers import card_strategy, cards, hand_strategy


def advise(player, dealer):
    """Recommend for card labels."""
    player_cards = cards(*player.split())
    return recommend(player_cards, cards(dealer)[0])


class TestRecommend:
    """Tests for recommend() on concrete hands."""

    @pytest.mark.parametrize(
        "player,dealer,expected",
        [
            ("8S 8H", "10C", Action.SPLIT),
            ("AS AH", "6C", Action.SPLIT),
            ("10S 6H", "10C", Action.HIT),
            ("10S 6H", "6C", Action.STAND),
            ("5S 6H", "AC", Action.DOUBLE),
            ("KS QH", "6C", Action.STAND),
            ("5S 5H", "9C", Action.DOUBLE),
            ("5S 5H", "10C", Action.HIT),
            ("9S 9H", "7C", Action.STAND),
            ("9S 9H", "8C", Action.SPLIT),
            ("AS 7H", "9C", Action.HIT),
            ("AS 7H", "8C", Action.STAND),
            ("AS 7H", "3C", Action.DOUBLE),
            ("10S 2H", "3C", Action.HIT),
            ("10S 2H", "4C", Action.STAND),
            ("4S 4H", "5C", Action.SPLIT),
            ("4S 4H", "4C", Action.HIT),
        ],
    )
    def test_two_card_hands(self, player, dealer, expected):
        """Table lookups for two-card hands."""
        assert advise(player, dealer) == expected

    def test_soft_19_vs_6_doubles(self):
        """Two-card soft 19 against a 6 doubles."""
        assert advise("AS 8H", "6C") == Action.DOUBLE

    def test_soft_19_three_cards_stands(self):
        """Soft 19 that can no longer double stands."""
        assert advise("AS 5H 3D", "6C") == Action.STAND

    def test_hard_11_three_cards_hits(self):
        """Double falls back to hit after the first two cards."""
        assert advise("2S 4H 5D", "6C") == Action.HIT

    def test_soft_13_vs_5_doubles_any_size(self):
        """Soft 13 against a 5 doubles regardless of card count."""
        assert advise("AS 2H", "5C") == Action.DOUBLE
        assert advise("AS AH AD", "5C") == Action.DOUBLE

    def test_soft_13_vs_6_three_cards_hits(self):
        """Soft 13 against a 6 only doubles on two cards."""
        assert advise("AS 2H", "6C") == Action.DOUBLE
        assert advise("AS AH AD", "6C") == Action.HIT

    def test_three_card_pair_not_split(self):
        """Only two-card pairs are split."""
        assert advise("3S 3H 2C", "2D") == Action.HIT

    def test_mixed_tens_stand(self):
        """Mixed ten-valued pairs stand."""
        assert advise("KS 10H", "5C") == Action.STAND

    def test_soft_hand_with_extra_aces(self):
        """10,A,A,A is hard 13."""
        assert advise("10S AS AH AC", "2C") == Action.STAND
        assert advise("10S AS AH AC", "7C") == Action.HIT

    @given(hand=hand_strategy(min_cards=2, max_cards=5), dealer=card_strategy())
    def test_deterministic(self, hand, dealer):
        """The same input always gives the same single action."""
        first = recommend(hand.cards, dealer)
        assert recommend(hand.cards, dealer) == first
        assert first in (Action.HIT, Action.STAND, Action.DOUBLE, Action.SPLIT)

    @given(hand=hand_strategy(min_cards=3, max_cards=5), dealer=card_strategy())
    def test_multi_card_hands_never_split(self, hand, dealer):
        """Hands past two cards are never told to split."""
        assert recommend(hand.cards, dealer) != Action.SPLIT


class TestBasicStrategy:
    """Tests for the lookup tables."""

    def test_hard_table_complete(self, basic_strategy):
        """Every hard total 4-21 has an entry for every upcard."""
        for total in range(4, 22):
            for dealer in DEALER_UPCARDS:
                assert (total, dealer) in basic_strategy.hard_table

    def test_soft_table_range(self, basic_strategy):
        """Soft entries cover 13-20."""
        totals = {total for total, _ in basic_strategy.soft_table}
        assert totals == set(range(13, 21))

    def test_pair_table_values(self, basic_strategy):
        """Pairs are keyed by the paired card's value."""
        values = {value for value, _ in basic_strategy.pair_table}
        assert values == {2, 3, 4, 5, 6, 7, 8, 9, 10, 11}

    def test_conditional_resolution(self, basic_strategy):
        """Conditional doubles resolve by hand size."""
        assert basic_strategy.get_action(11, 6, can_double=True) == Action.DOUBLE
        assert basic_strategy.get_action(11, 6, can_double=False) == Action.HIT
        assert basic_strategy.get_action(18, 4, is_soft=True, can_double=False) == Action.HIT
        assert basic_strategy.get_action(19, 6, is_soft=True, can_double=False) == Action.STAND

    def test_totals_outside_tables(self, basic_strategy):
        """Unlisted totals fall back to stand on 17+ and hit below."""
        assert basic_strategy.get_action(22, 6) == Action.STAND
        assert basic_strategy.get_action(3, 6) == Action.HIT

    def test_labels(self):
        """Actions carry player-facing labels."""
        assert Action.DOUBLE.label == "Double Down"
        assert str(Action.SPLIT) == "Split"
