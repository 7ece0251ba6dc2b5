"""Multi-deck shoe construction, shuffling and integrity checking."""

import logging
from random import Random
from typing import Iterable, Iterator, Sequence

from blackjack_sim.cards import Card, build_deck
from blackjack_sim.counting.hilo import HI_LO
from blackjack_sim.counting.state import decks_remaining
from blackjack_sim.errors import ShoeEmpty

logger = logging.getLogger(__name__)


def build_shoe(num_decks: int) -> list[Card]:
    """Concatenate num_decks canonical decks, unshuffled."""
    if num_decks < 1:
        raise ValueError("Shoe must have at least 1 deck")
    cards: list[Card] = []
    for _ in range(num_decks):
        cards.extend(build_deck())
    return cards


def shuffle(cards: Sequence[Card], rng: Random | None = None) -> list[Card]:
    """
    Return a uniformly shuffled copy of cards (Fisher-Yates).

    The input sequence is left untouched.
    """
    rng = rng or Random()
    shuffled = list(cards)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def integrity_check(cards: Iterable[Card]) -> bool:
    """Check that the Hi-Lo tags of a fresh shoe sum to zero."""
    cards = list(cards)
    total = HI_LO.total(cards)
    logger.debug("Shoe integrity check: Hi-Lo sum for %d cards = %d", len(cards), total)
    return total == 0


class Shoe:
    """
    The drawable stack of cards for a playing session.

    Cards are drawn from the tail of the sequence ("top of shoe").
    """

    def __init__(self, cards: Iterable[Card]) -> None:
        self._cards: list[Card] = list(cards)
        self._total_cards = len(self._cards)

    def draw(self) -> Card:
        """Remove and return the top card of the shoe."""
        if not self._cards:
            raise ShoeEmpty("Cannot draw from empty shoe")
        return self._cards.pop()

    def has_enough_cards(self, num_hands: int) -> bool:
        """Check that a full round for num_hands player hands can be dealt."""
        return len(self._cards) >= num_hands * 2 + 2

    def is_balanced(self) -> bool:
        """Run the Hi-Lo integrity check on the remaining cards."""
        return integrity_check(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    @property
    def cards_dealt(self) -> int:
        """Return the number of cards dealt."""
        return self._total_cards - len(self._cards)

    @property
    def total_cards(self) -> int:
        """Return the number of cards the shoe started with."""
        return self._total_cards

    @property
    def decks_remaining(self) -> float:
        """Return the estimated number of decks remaining."""
        return decks_remaining(len(self._cards))

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"Shoe(cards_remaining={len(self._cards)})"
