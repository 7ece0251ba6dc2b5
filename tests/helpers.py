"""Card builders, stacked shoes and hypothesis strategies shared by tests."""

from decimal import Decimal
from typing import Sequence

from hypothesis import strategies as st

from blackjack_sim.cards import Card, Rank, Suit
from blackjack_sim.game import BlackjackTable
from blackjack_sim.hand import Hand
from blackjack_sim.statistics import SessionLedger
from config import TableConfig


def cards(*labels: str) -> list[Card]:
    """Build cards from labels like 'AS', '10h', 'Kd'."""
    return [Card.from_string(label) for label in labels]


def make_hand(*labels: str, bet: int = 0) -> Hand:
    """Build a hand from card labels."""
    return Hand(cards=cards(*labels), bet=bet)


def stacked(*labels: str):
    """
    Shuffler that puts the given cards on top of the shoe in draw order.

    The remaining cards keep their unshuffled order below them, so the
    shoe still passes its integrity check. Once the stacked cards run out
    the next draws are KS, QS, JS, 10S, 9S...
    """
    top = cards(*labels)

    def shuffler(shoe_cards: Sequence[Card]) -> list[Card]:
        rest = list(shoe_cards)
        for card in top:
            rest.remove(card)
        return rest + list(reversed(top))

    return shuffler


def make_table(
    *labels: str,
    num_spots: int = 1,
    num_decks: int = 1,
    bankroll: str = "10000",
) -> BlackjackTable:
    """A table with a stacked shoe, ready for betting."""
    table = BlackjackTable(
        table_config=TableConfig(num_spots=num_spots, starting_bankroll=Decimal(bankroll)),
        ledger=SessionLedger(Decimal(bankroll)),
        shuffler=stacked(*labels),
    )
    table.select_deck_count(num_decks)
    return table


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(rank, suit)


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    return Hand(cards=draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards)))
