"""Card counting: Hi-Lo tags, running count state and true count."""

from blackjack_sim.counting.base import CountingSystem
from blackjack_sim.counting.hilo import HiLoSystem, hi_lo_value
from blackjack_sim.counting.state import (
    CountEntry,
    CountState,
    decks_remaining,
    true_count,
)

__all__ = [
    "CountingSystem",
    "HiLoSystem",
    "hi_lo_value",
    "CountEntry",
    "CountState",
    "decks_remaining",
    "true_count",
]
