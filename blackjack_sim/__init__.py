"""Blackjack simulator rules engine - UI and storage agnostic core."""

from blackjack_sim.cards import Card, Rank, Suit
from blackjack_sim.hand import Hand
from blackjack_sim.shoe import Shoe

__all__ = [
    "Card",
    "Rank",
    "Suit",
    "Hand",
    "Shoe",
]
