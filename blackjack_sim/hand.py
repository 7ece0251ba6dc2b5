"""Hand evaluation for blackjack."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

from blackjack_sim.cards import Card


class HandStatus(Enum):
    """Play status of a hand within a round."""

    OPEN = "open"
    STANDING = "standing"
    BUSTED = "busted"
    BLACKJACK = "blackjack"
    DOUBLED = "doubled"


class HandResult(Enum):
    """Settled outcome of a single hand."""

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"
    BLACKJACK = "blackjack"

    @property
    def is_win(self) -> bool:
        """Blackjack counts as a win for streak purposes."""
        return self in (HandResult.WIN, HandResult.BLACKJACK)


@dataclass(frozen=True)
class HandInfo:
    """Display and strategy view of a hand's totals."""

    display: str
    value: int
    is_soft: bool
    is_bust: bool
    hard_total: int
    soft_total: int | None = None


def card_value(card: Card) -> int:
    """Return the blackjack value of a card (J/Q/K = 10, A = 11)."""
    return card.value


def hand_value(cards: Sequence[Card]) -> int:
    """
    Calculate the best hand value.

    Aces start at 11 and are converted to 1 one at a time while the
    total exceeds 21.
    """
    total = 0
    aces = 0

    for card in cards:
        total += card_value(card)
        if card.is_ace:
            aces += 1

    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total


def hand_info(cards: Sequence[Card]) -> HandInfo:
    """
    Evaluate hard and soft totals for display and strategy.

    A hand is soft when one Ace can count as 11 (the rest as 1) without
    busting; both totals are then displayed, e.g. "17 / 7".
    """
    if not cards:
        return HandInfo(display="0", value=0, is_soft=False, is_bust=False, hard_total=0)

    value_without_aces = 0
    ace_count = 0
    for card in cards:
        if card.is_ace:
            ace_count += 1
        else:
            value_without_aces += card_value(card)

    if ace_count == 0:
        total = value_without_aces
        return HandInfo(
            display=str(total),
            value=total,
            is_soft=False,
            is_bust=total > 21,
            hard_total=total,
        )

    hard_total = value_without_aces + ace_count
    soft_total = value_without_aces + 11 + (ace_count - 1)

    if soft_total <= 21:
        return HandInfo(
            display=f"{soft_total} / {hard_total}",
            value=soft_total,
            is_soft=True,
            is_bust=False,
            hard_total=hard_total,
            soft_total=soft_total,
        )

    return HandInfo(
        display=str(hard_total),
        value=hard_total,
        is_soft=False,
        is_bust=hard_total > 21,
        hard_total=hard_total,
    )


def is_pair(cards: Sequence[Card]) -> bool:
    """Two cards of the same rank, or any two ten-valued cards."""
    if len(cards) != 2:
        return False
    first, second = cards
    return first.rank == second.rank or (first.is_ten_value and second.is_ten_value)


def can_split(cards: Sequence[Card]) -> bool:
    """Structural split eligibility; bankroll and hand limits live in the engine."""
    return is_pair(cards)


@dataclass
class Hand:
    """A player's (or the dealer's) hand within a single round."""

    cards: list[Card] = field(default_factory=list)
    bet: int = 0
    status: HandStatus = HandStatus.OPEN
    result: HandResult | None = None
    is_split_hand: bool = False
    is_doubled: bool = False

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    @property
    def value(self) -> int:
        """Return the best hand value."""
        return hand_value(self.cards)

    @property
    def info(self) -> HandInfo:
        """Return the hard/soft breakdown of the hand."""
        return hand_info(self.cards)

    @property
    def is_soft(self) -> bool:
        """Check if the hand holds an Ace counted as 11."""
        return self.info.is_soft

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    @property
    def is_natural(self) -> bool:
        """Check for 21 on the first two cards of an unsplit hand."""
        return len(self.cards) == 2 and self.value == 21 and not self.is_split_hand

    @property
    def is_pair(self) -> bool:
        """Check if the hand is a splittable pair."""
        return is_pair(self.cards)

    @property
    def is_complete(self) -> bool:
        """A hand is complete once it leaves the OPEN status."""
        return self.status != HandStatus.OPEN

    @property
    def can_double(self) -> bool:
        """Check if the hand is eligible to double down (ignoring bankroll)."""
        return not self.is_complete and len(self.cards) == 2

    @property
    def num_cards(self) -> int:
        """Return the number of cards in the hand."""
        return len(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) for card in self.cards)
        info = self.info
        value_str = f"({info.display})"
        if self.status == HandStatus.BLACKJACK:
            value_str = "(BLACKJACK)"
        elif info.is_bust:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value}, bet={self.bet})"
