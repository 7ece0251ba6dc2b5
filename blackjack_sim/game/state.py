"""Round phase enumeration."""

from enum import Enum, auto


class RoundPhase(Enum):
    """
    Round state machine phases.

    Flow: DECK_SELECTION → BETTING → DEALING → PLAYER_TURN → DEALER_TURN
    → SETTLEMENT → COMPLETE → BETTING ...
    """

    # No playable shoe yet (or the last one failed its integrity check)
    DECK_SELECTION = auto()

    # Bets being placed on spots
    BETTING = auto()

    # Initial two cards to every hand and the dealer
    DEALING = auto()

    # Player acts on the active hand
    PLAYER_TURN = auto()

    # Dealer reveals the hole card and draws
    DEALER_TURN = auto()

    # Hands compared and paid
    SETTLEMENT = auto()

    # Round finished, ready for next
    COMPLETE = auto()

    # Shoe exhausted, session summary
    SESSION_OVER = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()
