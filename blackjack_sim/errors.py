"""Exception taxonomy for the rules engine."""


class BlackjackError(Exception):
    """Base class for every error raised by the rules engine."""


class InvalidBet(BlackjackError):
    """Bet is non-numeric, not positive, or exceeds the bankroll."""


class IllegalAction(BlackjackError):
    """Action not allowed for the active hand or the current phase."""


class InsufficientShoe(BlackjackError):
    """Not enough cards left in the shoe to deal a full round."""


class ShoeIntegrityFailure(BlackjackError):
    """Freshly shuffled shoe failed the Hi-Lo balance check."""

    def __init__(self, hi_lo_sum: int, num_cards: int) -> None:
        super().__init__(
            f"Shoe integrity check failed: Hi-Lo sum {hi_lo_sum} over {num_cards} cards"
        )
        self.hi_lo_sum = hi_lo_sum
        self.num_cards = num_cards


class ShoeEmpty(BlackjackError, IndexError):
    """Draw attempted on an empty shoe."""


class StorageError(BlackjackError):
    """Persisted player data could not be read or written."""
