"""Immutable views of the table handed to the presentation layer."""

from dataclasses import dataclass
from decimal import Decimal

from blackjack_sim.cards import Card
from blackjack_sim.counting import CountEntry
from blackjack_sim.game.state import RoundPhase
from blackjack_sim.hand import Hand, HandResult, HandStatus
from blackjack_sim.statistics import (
    EquityPoint,
    HandHistoryEntry,
    RoundOutcomeSummary,
    SessionStats,
)
from blackjack_sim.strategy import Action


@dataclass(frozen=True)
class RevealStep:
    """
    One card becoming visible (or placed face down) during a command.

    Steps are produced in draw order so callers can pace their rendering;
    they carry no state-mutation semantics of their own.
    """

    card: Card
    target: str  # "player" or "dealer"
    spot_index: int | None
    hand_index: int | None
    face_up: bool
    running_count: int
    shoe_size: int


@dataclass(frozen=True)
class HandView:
    """Rendering view of a player hand."""

    cards: tuple[Card, ...]
    bet: int
    value: int
    display: str
    is_soft: bool
    status: HandStatus
    result: HandResult | None
    is_split_hand: bool
    is_doubled: bool
    is_active: bool

    @classmethod
    def from_hand(cls, hand: Hand, is_active: bool = False) -> "HandView":
        """Build a view of a hand."""
        info = hand.info
        return cls(
            cards=tuple(hand.cards),
            bet=hand.bet,
            value=info.value,
            display=info.display,
            is_soft=info.is_soft,
            status=hand.status,
            result=hand.result,
            is_split_hand=hand.is_split_hand,
            is_doubled=hand.is_doubled,
            is_active=is_active,
        )


@dataclass(frozen=True)
class SpotView:
    """Rendering view of a betting spot and its hands."""

    index: int
    hands: tuple[HandView, ...]

    @property
    def total_bet(self) -> int:
        """Return the chips on this spot across all its hands."""
        return sum(hand.bet for hand in self.hands)

    @property
    def has_bet(self) -> bool:
        """Check whether the spot is in play this round."""
        return bool(self.hands)


@dataclass(frozen=True)
class DealerView:
    """Rendering view of the dealer hand; the hole card is None while hidden."""

    cards: tuple[Card | None, ...]
    hole_card_hidden: bool
    value: int
    display: str

    @property
    def up_card(self) -> Card | None:
        """Return the face-up second card, once dealt."""
        if len(self.cards) < 2:
            return None
        return self.cards[1]


@dataclass(frozen=True)
class TableSnapshot:
    """Everything a renderer or persistence layer needs after a command."""

    phase: RoundPhase
    message: str
    num_decks: int | None
    shoe_size: int
    dealer: DealerView
    spots: tuple[SpotView, ...]
    active_hand: tuple[int, int] | None
    running_count: int
    true_count: float
    decks_remaining: float
    count_history: tuple[CountEntry, ...]
    bankroll: Decimal
    stats: SessionStats
    hand_history: tuple[HandHistoryEntry, ...]
    equity_curve: tuple[EquityPoint, ...]
    recommended_action: Action | None
    allowed_actions: frozenset[Action]
    bet_suggestions: tuple[int, ...]
    outcome: RoundOutcomeSummary | None

    @property
    def total_bet(self) -> int:
        """Return all chips currently on the table."""
        return sum(spot.total_bet for spot in self.spots)
