"""Abstract base class for card counting systems."""

from abc import ABC, abstractmethod
from typing import Iterable, Mapping

from blackjack_sim.cards import Card, Rank


class CountingSystem(ABC):
    """
    Abstract base class for card counting tag systems.

    A system only knows how to tag cards. The running count itself lives in
    an immutable CountState so it can be threaded through the round.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the counting system."""
        ...

    @property
    @abstractmethod
    def tag_values(self) -> Mapping[Rank, int]:
        """
        Return the tag value mapping for this system.

        Maps each Rank to its count value.
        """
        ...

    def value(self, card: Card) -> int:
        """Return the tag value of a single card."""
        return self.tag_values[card.rank]

    def total(self, cards: Iterable[Card]) -> int:
        """Return the summed tag value of a sequence of cards."""
        return sum(self.value(card) for card in cards)

    @property
    def full_deck_sum(self) -> int:
        """
        Calculate the sum of tag values for a full 52-card deck.

        For balanced systems, this should be 0.
        """
        # Each rank appears 4 times in a deck (once per suit)
        return sum(self.tag_values[rank] * 4 for rank in Rank)

    @property
    def is_balanced(self) -> bool:
        """Return whether the tags sum to 0 over a complete deck."""
        return self.full_deck_sum == 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
