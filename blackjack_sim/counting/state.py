"""Running count state and true count arithmetic."""

import time
from dataclasses import dataclass, field

from blackjack_sim.cards import Card
from blackjack_sim.counting.hilo import hi_lo_value

CARDS_PER_DECK = 52


@dataclass(frozen=True, slots=True)
class CountEntry:
    """One counted card in the count history."""

    card: Card
    delta: int
    running_count_after: int
    timestamp: float


@dataclass(frozen=True)
class CountState:
    """
    Immutable Hi-Lo running count with its append-only history.

    A new state is built once per shoe; every visible card goes through
    record() exactly once.
    """

    running_count: int = 0
    history: tuple[CountEntry, ...] = field(default_factory=tuple)

    def record(self, card: Card, timestamp: float | None = None) -> "CountState":
        """Return a new state with the card's Hi-Lo tag applied."""
        delta = hi_lo_value(card)
        running = self.running_count + delta
        entry = CountEntry(
            card=card,
            delta=delta,
            running_count_after=running,
            timestamp=time.time() if timestamp is None else timestamp,
        )
        return CountState(running_count=running, history=self.history + (entry,))

    @property
    def cards_seen(self) -> int:
        """Return the number of cards counted."""
        return len(self.history)


def decks_remaining(shoe_size: int) -> float:
    """Return the fractional number of decks left in a shoe of shoe_size cards."""
    return shoe_size / CARDS_PER_DECK


def true_count(running_count: int, decks_left: float) -> float:
    """Return running count per remaining deck, or 0 when no decks remain."""
    if decks_left <= 0:
        return 0.0
    return running_count / decks_left
