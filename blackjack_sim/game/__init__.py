"""Round engine, events and table snapshots."""

from blackjack_sim.game.events import GameEvent, EventType
from blackjack_sim.game.state import RoundPhase
from blackjack_sim.game.snapshot import RevealStep, TableSnapshot
from blackjack_sim.game.engine import BlackjackTable

__all__ = [
    "GameEvent",
    "EventType",
    "RoundPhase",
    "RevealStep",
    "TableSnapshot",
    "BlackjackTable",
]
