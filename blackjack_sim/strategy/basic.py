"""Basic strategy tables for blackjack."""

from enum import Enum, auto
from typing import Mapping, Sequence

from blackjack_sim.cards import Card
from blackjack_sim.hand import card_value, hand_info, is_pair


class Action(Enum):
    """Possible player actions."""

    HIT = auto()
    STAND = auto()
    DOUBLE = auto()
    SPLIT = auto()

    # Conditional actions (fallback if the hand holds more than two cards)
    DOUBLE_OR_HIT = auto()
    DOUBLE_OR_STAND = auto()

    @property
    def label(self) -> str:
        """Return the player-facing name of the action."""
        return _LABELS[self]

    def __str__(self) -> str:
        return self.label


_LABELS = {
    Action.HIT: "Hit",
    Action.STAND: "Stand",
    Action.DOUBLE: "Double Down",
    Action.SPLIT: "Split",
    Action.DOUBLE_OR_HIT: "Double Down/Hit",
    Action.DOUBLE_OR_STAND: "Double Down/Stand",
}

# Dealer upcards: 2, 3, 4, 5, 6, 7, 8, 9, 10, A(11)
DEALER_UPCARDS = range(2, 12)


class BasicStrategy:
    """
    Basic strategy lookup tables for a dealer that stands on 17.

    Pre-computed dictionaries for O(1) lookup. Evaluation order is pairs,
    then soft totals, then hard totals.
    """

    def __init__(self) -> None:
        self._hard_table = self._build_hard_table()
        self._soft_table = self._build_soft_table()
        self._pair_table = self._build_pair_table()

    def get_action(
        self,
        player_total: int,
        dealer_upcard: int,
        is_soft: bool = False,
        is_pair: bool = False,
        pair_value: int | None = None,
        can_double: bool = True,
    ) -> Action:
        """
        Get the basic strategy action.

        Args:
            player_total: Player's best hand total
            dealer_upcard: Dealer's upcard value (2-11, Ace=11)
            is_soft: Whether the hand is soft
            is_pair: Whether the hand is a two-card pair
            pair_value: Blackjack value of the paired card (Ace=11)
            can_double: Whether the hand still has exactly two cards

        Returns:
            The recommended action (never a conditional one)
        """
        if is_pair and pair_value is not None:
            action = self._pair_table.get((pair_value, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double)

        if is_soft:
            action = self._soft_table.get((player_total, dealer_upcard))
            if action:
                return self._resolve_action(action, can_double)

        action = self._hard_table.get((player_total, dealer_upcard))
        if action:
            return self._resolve_action(action, can_double)

        # Totals outside the tables
        if player_total >= 17:
            return Action.STAND
        return Action.HIT

    def _resolve_action(self, action: Action, can_double: bool) -> Action:
        """Resolve conditional actions based on the hand size."""
        if action == Action.DOUBLE_OR_HIT:
            return Action.DOUBLE if can_double else Action.HIT
        if action == Action.DOUBLE_OR_STAND:
            return Action.DOUBLE if can_double else Action.STAND
        return action

    def _build_hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Build hard totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        D = Action.DOUBLE_OR_HIT

        table: dict[tuple[int, int], Action] = {}

        # Hard 4-8: Always hit
        for total in range(4, 9):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = H

        # Hard 9
        for dealer in DEALER_UPCARDS:
            table[(9, dealer)] = D if 3 <= dealer <= 6 else H

        # Hard 10
        for dealer in DEALER_UPCARDS:
            table[(10, dealer)] = D if dealer <= 9 else H

        # Hard 11
        for dealer in DEALER_UPCARDS:
            table[(11, dealer)] = D

        # Hard 12
        for dealer in DEALER_UPCARDS:
            table[(12, dealer)] = S if 4 <= dealer <= 6 else H

        # Hard 13-16
        for total in range(13, 17):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S if dealer <= 6 else H

        # Hard 17+: Always stand
        for total in range(17, 22):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = S

        return table

    def _build_soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Build soft totals strategy table."""
        H = Action.HIT
        S = Action.STAND
        Dx = Action.DOUBLE
        D = Action.DOUBLE_OR_HIT
        Ds = Action.DOUBLE_OR_STAND

        table: dict[tuple[int, int], Action] = {}

        # Soft 13-14 (A,2 / A,3): double vs 5 with any hand size, vs 6 on two cards
        for total in (13, 14):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = H
            table[(total, 5)] = Dx
            table[(total, 6)] = D

        # Soft 15-16 (A,4 / A,5)
        for total in (15, 16):
            for dealer in DEALER_UPCARDS:
                table[(total, dealer)] = D if 4 <= dealer <= 6 else H

        # Soft 17 (A,6)
        for dealer in DEALER_UPCARDS:
            table[(17, dealer)] = D if 3 <= dealer <= 6 else H

        # Soft 18 (A,7)
        for dealer in DEALER_UPCARDS:
            if dealer <= 6:
                table[(18, dealer)] = D
            elif dealer in (7, 8):
                table[(18, dealer)] = S
            else:
                table[(18, dealer)] = H

        # Soft 19 (A,8)
        for dealer in DEALER_UPCARDS:
            table[(19, dealer)] = S
        table[(19, 6)] = Ds

        # Soft 20 (A,9): Always stand
        for dealer in DEALER_UPCARDS:
            table[(20, dealer)] = S

        return table

    def _build_pair_table(self) -> Mapping[tuple[int, int], Action]:
        """Build pair splitting strategy table, keyed by paired card value."""
        H = Action.HIT
        S = Action.STAND
        P = Action.SPLIT
        Dx = Action.DOUBLE

        table: dict[tuple[int, int], Action] = {}

        for dealer in DEALER_UPCARDS:
            # Aces and 8s: Always split
            table[(11, dealer)] = P
            table[(8, dealer)] = P

            # 10s: Never split
            table[(10, dealer)] = S

            # 5s: Played as hard 10
            table[(5, dealer)] = Dx if dealer <= 9 else H

            # 9s: Split vs 2-6, 8, 9
            table[(9, dealer)] = P if dealer <= 6 or dealer in (8, 9) else S

            # 7s
            table[(7, dealer)] = P if dealer <= 7 else H

            # 6s
            table[(6, dealer)] = P if dealer <= 6 else H

            # 4s
            table[(4, dealer)] = P if dealer in (5, 6) else H

            # 2s and 3s
            table[(2, dealer)] = P if dealer <= 7 else H
            table[(3, dealer)] = P if dealer <= 7 else H

        return table

    @property
    def hard_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the hard totals strategy table."""
        return self._hard_table

    @property
    def soft_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the soft totals strategy table."""
        return self._soft_table

    @property
    def pair_table(self) -> Mapping[tuple[int, int], Action]:
        """Return the pair splitting strategy table."""
        return self._pair_table


_DEFAULT_STRATEGY = BasicStrategy()


def recommend(player_cards: Sequence[Card], dealer_up_card: Card) -> Action:
    """Return the basic strategy action for a hand against the dealer up-card."""
    info = hand_info(player_cards)
    pair = len(player_cards) == 2 and is_pair(player_cards)
    return _DEFAULT_STRATEGY.get_action(
        player_total=info.value,
        dealer_upcard=card_value(dealer_up_card),
        is_soft=info.is_soft,
        is_pair=pair,
        pair_value=card_value(player_cards[0]) if pair else None,
        can_double=len(player_cards) == 2,
    )
