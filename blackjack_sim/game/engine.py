"""Multi-spot blackjack round engine with a state machine."""

import functools
import logging
from decimal import Decimal
from random import Random
from typing import Any, Callable, Iterator, NoReturn, Sequence

from transitions import Machine

from blackjack_sim.cards import Card
from blackjack_sim.counting import CountState
from blackjack_sim.counting import true_count as compute_true_count
from blackjack_sim.counting.hilo import HI_LO
from blackjack_sim.errors import (
    BlackjackError,
    IllegalAction,
    InsufficientShoe,
    InvalidBet,
    ShoeIntegrityFailure,
)
from blackjack_sim.game.events import EventEmitter, EventHandler, EventType
from blackjack_sim.game.snapshot import (
    DealerView,
    HandView,
    RevealStep,
    SpotView,
    TableSnapshot,
)
from blackjack_sim.game.state import RoundPhase
from blackjack_sim.hand import Hand, HandResult, HandStatus, hand_info
from blackjack_sim.hand import can_split as cards_can_split
from blackjack_sim.shoe import Shoe, build_shoe, integrity_check, shuffle
from blackjack_sim.statistics import (
    HandRecord,
    RoundOutcomeSummary,
    SessionLedger,
    equity_curve,
)
from blackjack_sim.strategy import Action, recommend
from config import TableConfig, config

logger = logging.getLogger(__name__)

Shuffler = Callable[[Sequence[Card]], list[Card]]


def _command(method: Callable[..., None]) -> Callable[..., tuple[RevealStep, ...]]:
    """
    Run an inbound command to completion.

    Collects the reveal steps the command produced and, once it finishes,
    announces ledger changes so persistence happens after the transition.
    """

    @functools.wraps(method)
    def wrapper(self: "BlackjackTable", *args: Any, **kwargs: Any) -> tuple[RevealStep, ...]:
        self._steps = []
        self._ledger_dirty = False
        try:
            method(self, *args, **kwargs)
        finally:
            if self._ledger_dirty:
                self.events.emit_new(
                    EventType.LEDGER_CHANGED,
                    bankroll=self.ledger.bankroll,
                    hands_played=self.ledger.stats.hands_played,
                )
        self.events.emit_new(EventType.STATE_CHANGED, phase=self.phase.name)
        return tuple(self._steps)

    return wrapper


class BlackjackTable:
    """
    Blackjack table engine using a state machine.

    Owns the shoe, the running count, the current round's hands and the
    player's ledger. Every public command either completes its transition
    or raises before touching any state. The one exception is a shoe that
    runs dry mid-round, which voids the round with every wager refunded
    and raises InsufficientShoe from COMPLETE.
    """

    # State machine states
    STATES = [p.name.lower() for p in RoundPhase]

    # State machine transitions
    TRANSITIONS = [
        {
            "trigger": "shoe_ready",
            "source": ["deck_selection", "betting", "complete", "session_over"],
            "dest": "betting",
        },
        {"trigger": "start_dealing", "source": "betting", "dest": "dealing"},
        {
            "trigger": "abort_round",
            "source": ["betting", "player_turn", "dealer_turn"],
            "dest": "complete",
        },
        {"trigger": "open_player_turn", "source": "dealing", "dest": "player_turn"},
        {"trigger": "next_hand", "source": "player_turn", "dest": "player_turn"},
        {"trigger": "open_dealer_turn", "source": "player_turn", "dest": "dealer_turn"},
        {"trigger": "settle_round", "source": ["dealing", "dealer_turn"], "dest": "settlement"},
        {"trigger": "finish_round", "source": "settlement", "dest": "complete"},
        {"trigger": "next_round", "source": "complete", "dest": "betting"},
        {"trigger": "exhaust_shoe", "source": "complete", "dest": "session_over"},
        {"trigger": "reset_shoe", "source": "*", "dest": "deck_selection"},
    ]

    def __init__(
        self,
        table_config: TableConfig | None = None,
        ledger: SessionLedger | None = None,
        rng: Random | None = None,
        shuffler: Shuffler | None = None,
    ) -> None:
        """
        Initialize a table waiting for deck selection.

        Args:
            table_config: Table constants (uses the global config if not provided)
            ledger: Player bankroll/stats/history (fresh bankroll if not provided)
            rng: Random number generator for reproducible shuffles
            shuffler: Replaces the Fisher-Yates shuffle, e.g. to stack a shoe
        """
        self.config = table_config or config.table
        self.ledger = ledger or SessionLedger(self.config.starting_bankroll)
        self._rng = rng or Random()
        self._shuffler: Shuffler = shuffler or (lambda cards: shuffle(cards, self._rng))

        self.shoe: Shoe | None = None
        self.num_decks: int | None = None
        self.count = CountState()
        self.events = EventEmitter()
        self.message = "Choose number of decks."
        self.outcome: RoundOutcomeSummary | None = None

        self.spots: list[list[Hand]] = []
        self.dealer_hand = Hand()
        self._hole_hidden = True
        self._active: tuple[int, int] | None = None
        self._steps: list[RevealStep] = []
        self._ledger_dirty = False
        self._clear_round()

        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="deck_selection",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def phase(self) -> RoundPhase:
        """Get current round phase as enum."""
        return RoundPhase[self._machine_state.upper()]  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: EventHandler,
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to table events."""
        self.events.subscribe(handler, event_type)

    # ------------------------------------------------------------------
    # Inbound commands
    # ------------------------------------------------------------------

    @_command
    def select_deck_count(self, num_decks: int) -> None:
        """
        Build, shuffle and verify a new shoe of num_decks decks.

        Resets the running count. A shoe that fails the Hi-Lo balance check
        is discarded and the table stays in deck selection.
        """
        if not self._between_rounds():
            self._reject("Cannot change the shoe during a round")
        if isinstance(num_decks, bool) or not isinstance(num_decks, int) or num_decks < 1:
            self._reject("Deck count must be a positive integer")

        cards = self._shuffler(build_shoe(num_decks))
        if not integrity_check(cards):
            failure = ShoeIntegrityFailure(hi_lo_sum=HI_LO.total(cards), num_cards=len(cards))
            logger.error("%s", failure)
            self.shoe = None
            self.num_decks = None
            self.count = CountState()
            self._clear_round()
            self.message = "CRITICAL ERROR: Deck integrity check failed. Please restart the game."
            self.reset_shoe()
            self.events.emit_new(
                EventType.SHOE_INTEGRITY_FAILED,
                hi_lo_sum=failure.hi_lo_sum,
                num_cards=failure.num_cards,
            )
            raise failure

        self.shoe = Shoe(cards)
        self.num_decks = num_decks
        self.count = CountState()
        self._clear_round()
        self.message = "Shoe prepared! Place your bets."
        self.shoe_ready()

        logger.info("New %d-deck shoe prepared (%d cards)", num_decks, len(cards))
        self.events.emit_new(EventType.DECK_SELECTED, num_decks=num_decks)
        self.events.emit_new(EventType.SHOE_SHUFFLED, cards=len(cards))

    @_command
    def place_bet(self, spot_index: int, amount: int | str) -> None:
        """
        Place (or replace) the bet on a spot; the bankroll is debited now.

        Raises:
            InvalidBet: amount is non-numeric, not positive, or exceeds the bankroll
            IllegalAction: not betting, or no such spot
        """
        if self.phase != RoundPhase.BETTING:
            self._reject("Bets can only be placed before the deal")
        self._check_spot(spot_index)

        value = _parse_bet(amount)
        if value is None or value <= 0:
            self._reject("Please enter a valid bet amount.", InvalidBet, amount=str(amount))

        existing = self.spots[spot_index][0].bet if self.spots[spot_index] else 0
        if not self.ledger.can_afford(value - existing):
            self._reject(
                "Bet amount cannot exceed your bankroll.",
                InvalidBet,
                EventType.INSUFFICIENT_FUNDS,
                required=value,
                available=self.ledger.bankroll + existing,
            )

        if existing:
            self.ledger.credit(existing)
        self.ledger.debit(value)
        self.spots[spot_index] = [Hand(bet=value)]
        self._ledger_dirty = True

        self.events.emit_new(EventType.BET_PLACED, spot=spot_index, amount=value)
        self._emit_bankroll()

    @_command
    def remove_bet(self, spot_index: int) -> None:
        """Take the bet back off a spot and refund it."""
        if self.phase != RoundPhase.BETTING:
            self._reject("Bets can only be removed before the deal")
        self._check_spot(spot_index)
        if not self.spots[spot_index]:
            self._reject("No bet on this spot", spot=spot_index)

        refund = self.spots[spot_index][0].bet
        self.spots[spot_index] = []
        self.ledger.credit(refund)
        self._ledger_dirty = True

        self.events.emit_new(EventType.BET_REMOVED, spot=spot_index, amount=refund)
        self._emit_bankroll()

    @_command
    def deal(self) -> None:
        """
        Deal the opening cards and resolve naturals.

        Cards go round-robin: first card to every hand then the dealer's hole
        card, second card to every hand then the dealer's up card.

        Raises:
            InvalidBet: no bets on the table
            InsufficientShoe: not enough cards for the round; bets are refunded
                and the round aborts to COMPLETE
        """
        if self.phase != RoundPhase.BETTING:
            self._reject("Cannot deal in current phase")
        if not self._has_bets():
            self._reject("Place a bet before dealing.", InvalidBet)

        shoe = self._require_shoe()
        num_hands = sum(len(spot) for spot in self.spots)
        if not shoe.has_enough_cards(num_hands):
            self._abort_for_shoe(num_hands * 2 + 2)

        self.start_dealing()
        self.events.emit_new(EventType.ROUND_STARTED, hands=num_hands)

        for position in range(2):
            for spot_index, spot in enumerate(self.spots):
                if spot:
                    self._deal_to_player(spot_index, 0)
            self._deal_to_dealer(face_up=position == 1)

        dealer_natural = self.dealer_hand.is_natural

        for spot_index, hand_index, hand in self._iter_hands():
            if hand.is_natural:
                hand.status = HandStatus.BLACKJACK
                hand.result = HandResult.PUSH if dealer_natural else HandResult.BLACKJACK
                self.events.emit_new(EventType.PLAYER_BLACKJACK, spot=spot_index, hand=hand_index)

        if dealer_natural:
            self._reveal_hole_card()
            self.events.emit_new(EventType.DEALER_BLACKJACK)
            for _, _, hand in self._iter_hands():
                if not hand.is_complete:
                    hand.status = HandStatus.STANDING
                    hand.result = HandResult.LOSE

        if all(hand.is_complete for _, _, hand in self._iter_hands()):
            self._settle()
            return

        self.open_player_turn()
        self._activate_next_hand()

    @_command
    def hit(self) -> None:
        """Draw one card into the active hand."""
        spot_index, hand_index, hand = self._require_active()
        self._require_cards(1)
        self._record_decision(Action.HIT, hand)

        self._deal_to_player(spot_index, hand_index)
        value = hand.value
        self.events.emit_new(
            EventType.PLAYER_HIT, spot=spot_index, hand=hand_index, hand_value=value
        )

        if value > 21:
            hand.status = HandStatus.BUSTED
            hand.result = HandResult.LOSE
            self.events.emit_new(EventType.PLAYER_BUSTS, spot=spot_index, hand=hand_index)
        elif value == 21:
            hand.status = HandStatus.STANDING

        if hand.is_complete:
            self._activate_next_hand()

    @_command
    def stand(self) -> None:
        """Keep the active hand as it is."""
        spot_index, hand_index, hand = self._require_active()
        self._record_decision(Action.STAND, hand)

        hand.status = HandStatus.STANDING
        self.events.emit_new(
            EventType.PLAYER_STAND, spot=spot_index, hand=hand_index, hand_value=hand.value
        )
        self._activate_next_hand()

    @_command
    def double_down(self) -> None:
        """Double the active two-card hand's bet and draw exactly one card."""
        spot_index, hand_index, hand = self._require_active()
        if not hand.can_double:
            self._reject("Can only double on the first two cards")
        if not self.ledger.can_afford(hand.bet):
            self._reject(
                "Insufficient funds to double",
                event_type=EventType.INSUFFICIENT_FUNDS,
                required=hand.bet,
                available=self.ledger.bankroll,
            )
        self._require_cards(1)
        self._record_decision(Action.DOUBLE, hand)

        self.ledger.debit(hand.bet)
        hand.bet *= 2
        hand.is_doubled = True
        self._emit_bankroll()

        self._deal_to_player(spot_index, hand_index)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            spot=spot_index,
            hand=hand_index,
            hand_value=hand.value,
            new_bet=hand.bet,
        )

        if hand.is_busted:
            hand.status = HandStatus.BUSTED
            hand.result = HandResult.LOSE
            self.events.emit_new(EventType.PLAYER_BUSTS, spot=spot_index, hand=hand_index)
        else:
            hand.status = HandStatus.DOUBLED

        self._activate_next_hand()

    @_command
    def split(self) -> None:
        """
        Split the active pair into two hands, each receiving one new card.

        Split Aces receive their one card and are both complete.
        """
        spot_index, hand_index, hand = self._require_active()
        if not cards_can_split(hand.cards):
            self._reject("Cannot split")
        if len(self.spots[spot_index]) >= self.config.max_hands_per_spot:
            self._reject("Max splits reached", spot=spot_index)
        if not self.ledger.can_afford(hand.bet):
            self._reject(
                "Insufficient funds to split",
                event_type=EventType.INSUFFICIENT_FUNDS,
                required=hand.bet,
                available=self.ledger.bankroll,
            )
        self._require_cards(2)
        self._record_decision(Action.SPLIT, hand)

        self.ledger.debit(hand.bet)
        self._emit_bankroll()

        split_aces = hand.cards[0].is_ace
        new_hand = Hand(cards=[hand.cards.pop()], bet=hand.bet, is_split_hand=True)
        hand.is_split_hand = True
        self.spots[spot_index].insert(hand_index + 1, new_hand)

        self._deal_to_player(spot_index, hand_index)
        self._deal_to_player(spot_index, hand_index + 1)

        self.events.emit_new(
            EventType.PLAYER_SPLIT,
            spot=spot_index,
            hand1_value=hand.value,
            hand2_value=new_hand.value,
            hands=len(self.spots[spot_index]),
        )

        for split_hand in (hand, new_hand):
            if split_aces or split_hand.value == 21:
                split_hand.status = HandStatus.STANDING

        if hand.is_complete:
            self._activate_next_hand()
        else:
            num_hands = len(self.spots[spot_index])
            self.message = (
                f"Playing hand {hand_index + 1} of {num_hands} at spot {spot_index + 1}."
            )

    @_command
    def start_new_round(self) -> None:
        """
        Return to betting for the next round.

        Raises:
            InsufficientShoe: the shoe cannot cover another round; the
                session moves to SESSION_OVER
        """
        if self.phase != RoundPhase.COMPLETE:
            self._reject("Round is still in progress")

        if self.shoe is None or not self.shoe.has_enough_cards(1):
            self.message = "Shoe exhausted. Session over."
            self.exhaust_shoe()
            summary = self.ledger.summary()
            logger.info(
                "Session over after %d hands, net %s",
                summary.stats.hands_played,
                summary.net_profit,
            )
            self.events.emit_new(
                EventType.SESSION_ENDED,
                hands_played=summary.stats.hands_played,
                net_profit=summary.net_profit,
            )
            raise InsufficientShoe("Not enough cards remaining for another round")

        self._clear_round()
        self.message = "Place your bets for the next hand!"
        self.next_round()

    @_command
    def new_game(self) -> None:
        """Reset bankroll, stats and history, and go back to deck selection."""
        self.ledger.reset(self.config.starting_bankroll)
        self._ledger_dirty = True
        self.shoe = None
        self.num_decks = None
        self.count = CountState()
        self._clear_round()
        self.message = "New game started. Choose number of decks."
        self.reset_shoe()

        self.events.emit_new(EventType.GAME_RESET, bankroll=self.ledger.bankroll)
        self._emit_bankroll()

    @_command
    def load_player(self, ledger: SessionLedger) -> None:
        """Seat a different player's ledger between rounds."""
        if not self._between_rounds():
            self._reject("Cannot change player during a round")

        self.ledger = ledger
        logger.info("Player seated with bankroll %s", ledger.bankroll)
        self._emit_bankroll()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def active_hand(self) -> Hand | None:
        """Get the hand the player is acting on."""
        if self._active is None:
            return None
        spot_index, hand_index = self._active
        return self.spots[spot_index][hand_index]

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.phase == RoundPhase.PLAYER_TURN and self.active_hand is not None

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.can_hit

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed."""
        hand = self.active_hand
        if not self.can_hit or hand is None or not hand.can_double:
            return False
        return self.ledger.can_afford(hand.bet)

    @property
    def can_split(self) -> bool:
        """Check if splitting is allowed."""
        hand = self.active_hand
        if not self.can_hit or hand is None or self._active is None:
            return False
        if not cards_can_split(hand.cards):
            return False
        if len(self.spots[self._active[0]]) >= self.config.max_hands_per_spot:
            return False
        return self.ledger.can_afford(hand.bet)

    @property
    def recommended_action(self) -> Action | None:
        """Basic strategy advice for the active hand against the up-card."""
        hand = self.active_hand
        if not self.can_hit or hand is None or len(self.dealer_hand.cards) < 2:
            return None
        return recommend(hand.cards, self.dealer_hand.cards[1])

    @property
    def true_count(self) -> float:
        """Return the running count per remaining deck."""
        return compute_true_count(self.count.running_count, self.decks_remaining)

    @property
    def decks_remaining(self) -> float:
        """Return the decks left in the shoe."""
        return self.shoe.decks_remaining if self.shoe is not None else 0.0

    def snapshot(self) -> TableSnapshot:
        """Build an immutable view of the whole table."""
        allowed = set()
        if self.can_hit:
            allowed.update((Action.HIT, Action.STAND))
        if self.can_double:
            allowed.add(Action.DOUBLE)
        if self.can_split:
            allowed.add(Action.SPLIT)

        spots = tuple(
            SpotView(
                index=spot_index,
                hands=tuple(
                    HandView.from_hand(hand, is_active=self._active == (spot_index, hand_index))
                    for hand_index, hand in enumerate(spot)
                ),
            )
            for spot_index, spot in enumerate(self.spots)
        )

        return TableSnapshot(
            phase=self.phase,
            message=self.message,
            num_decks=self.num_decks,
            shoe_size=len(self.shoe) if self.shoe is not None else 0,
            dealer=self._dealer_view(),
            spots=spots,
            active_hand=self._active,
            running_count=self.count.running_count,
            true_count=self.true_count,
            decks_remaining=self.decks_remaining,
            count_history=self.count.history,
            bankroll=self.ledger.bankroll,
            stats=self.ledger.stats,
            hand_history=self.ledger.history,
            equity_curve=tuple(equity_curve(self.ledger.history)),
            recommended_action=self.recommended_action,
            allowed_actions=frozenset(allowed),
            bet_suggestions=self.config.bet_suggestions,
            outcome=self.outcome,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reject(
        self,
        message: str,
        error: type[BlackjackError] = IllegalAction,
        event_type: EventType = EventType.INVALID_ACTION,
        **data: Any,
    ) -> NoReturn:
        """Announce a rejected command and raise without touching state."""
        logger.debug("Rejected in %s: %s", self.phase.name, message)
        self.events.emit_new(event_type, message=message, **data)
        raise error(message)

    def _check_spot(self, spot_index: int) -> None:
        if not 0 <= spot_index < len(self.spots):
            self._reject(f"No betting spot {spot_index}", spot=spot_index)

    def _has_bets(self) -> bool:
        return any(self.spots)

    def _between_rounds(self) -> bool:
        """No chips are at risk: betting with an empty table, or no round open."""
        if self.phase == RoundPhase.BETTING:
            return not self._has_bets()
        return self.phase in (
            RoundPhase.DECK_SELECTION,
            RoundPhase.COMPLETE,
            RoundPhase.SESSION_OVER,
        )

    def _clear_round(self) -> None:
        """Fresh spots and dealer hand for a new round."""
        self.spots = [[] for _ in range(self.config.num_spots)]
        self.dealer_hand = Hand()
        self._hole_hidden = True
        self._active = None
        self.outcome = None

    def _iter_hands(self) -> Iterator[tuple[int, int, Hand]]:
        """Yield (spot, hand, Hand) in play order."""
        for spot_index, spot in enumerate(self.spots):
            for hand_index, hand in enumerate(spot):
                yield spot_index, hand_index, hand

    def _require_active(self) -> tuple[int, int, Hand]:
        if self.phase != RoundPhase.PLAYER_TURN or self._active is None:
            self._reject("No hand to act on")
        spot_index, hand_index = self._active
        return spot_index, hand_index, self.spots[spot_index][hand_index]

    def _record_decision(self, action: Action, hand: Hand) -> None:
        advice = recommend(hand.cards, self.dealer_hand.cards[1])
        self.ledger.record_decision(advice == action)
        self._ledger_dirty = True

    def _emit_bankroll(self) -> None:
        self._ledger_dirty = True
        self.events.emit_new(EventType.BANKROLL_CHANGED, bankroll=self.ledger.bankroll)

    def _require_shoe(self) -> Shoe:
        if self.shoe is None:
            self._reject("Choose number of decks first")
        return self.shoe

    def _require_cards(self, needed: int) -> None:
        """Void the round unless the shoe holds the next needed cards."""
        if len(self._require_shoe()) < needed:
            self._abort_for_shoe(needed)

    def _abort_for_shoe(self, cards_needed: int) -> NoReturn:
        """
        Void the round when the shoe runs short.

        The hole card is turned over first. Every wager on the table (split
        and doubled stakes included) is refunded and the round ends in
        COMPLETE with nothing recorded in stats or history.
        """
        shoe = self._require_shoe()
        self._reveal_hole_card()
        refund = sum(hand.bet for _, _, hand in self._iter_hands())
        self.ledger.credit(refund)
        self._clear_round()
        self.message = "Not enough cards remaining!"
        self.abort_round()

        logger.info(
            "Shoe exhausted: %d cards left, %d needed, %s refunded",
            len(shoe),
            cards_needed,
            refund,
        )
        self.events.emit_new(
            EventType.SHOE_EXHAUSTED,
            cards_remaining=len(shoe),
            cards_needed=cards_needed,
            refunded=refund,
        )
        self._emit_bankroll()
        raise InsufficientShoe(f"{len(shoe)} cards left, {cards_needed} needed")

    def _draw(self) -> Card:
        return self._require_shoe().draw()

    def _deal_to_player(self, spot_index: int, hand_index: int) -> Card:
        card = self._draw()
        self.spots[spot_index][hand_index].add_card(card)
        self._reveal(card, "player", spot_index, hand_index)
        return card

    def _deal_to_dealer(self, face_up: bool = True) -> Card:
        card = self._draw()
        self.dealer_hand.add_card(card)
        self._reveal(card, "dealer", None, len(self.dealer_hand.cards) - 1, face_up=face_up)
        return card

    def _reveal(
        self,
        card: Card,
        target: str,
        spot_index: int | None,
        hand_index: int | None,
        face_up: bool = True,
    ) -> None:
        """Count a card as it becomes visible and record the reveal step."""
        if face_up:
            self.count = self.count.record(card)
        shoe = self._require_shoe()
        self._steps.append(
            RevealStep(
                card=card,
                target=target,
                spot_index=spot_index,
                hand_index=hand_index,
                face_up=face_up,
                running_count=self.count.running_count,
                shoe_size=len(shoe),
            )
        )
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            target=target,
            spot=spot_index,
            hand=hand_index,
        )

    def _reveal_hole_card(self) -> None:
        """Turn over and count the dealer's hole card, once per round."""
        if not self._hole_hidden or not self.dealer_hand.cards:
            return
        self._hole_hidden = False
        hole = self.dealer_hand.cards[0]
        self._reveal(hole, "dealer", None, 0)
        self.events.emit_new(
            EventType.DEALER_REVEALS, card=str(hole), hand_value=self.dealer_hand.value
        )

    def _activate_next_hand(self) -> None:
        """Move the cursor to the next open hand, or hand over to the dealer."""
        for spot_index, hand_index, hand in self._iter_hands():
            if not hand.is_complete:
                self._active = (spot_index, hand_index)
                if self.phase == RoundPhase.PLAYER_TURN:
                    self.next_hand()
                self.message = f"Your turn! Playing hand at spot {spot_index + 1}."
                self.events.emit_new(
                    EventType.ACTIVE_HAND_CHANGED, spot=spot_index, hand=hand_index
                )
                return

        self._active = None
        self._play_dealer()

    def _play_dealer(self) -> None:
        """Reveal the hole card and draw to the stand threshold."""
        self.open_dealer_turn()
        self.message = "Dealer's turn..."
        self._reveal_hole_card()

        if any(hand.value <= 21 for _, _, hand in self._iter_hands()):
            while self.dealer_hand.value < self.config.dealer_stand_threshold:
                self._require_cards(1)
                self._deal_to_dealer()
                self.events.emit_new(EventType.DEALER_HITS, hand_value=self.dealer_hand.value)

            if self.dealer_hand.is_busted:
                self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
            else:
                self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)
        else:
            self.message = "All players busted. Dealer reveals cards."

        self._settle()

    def _payout(self, hand: Hand) -> Decimal:
        """Amount returned to the bankroll for a settled hand (stake included)."""
        bet = Decimal(hand.bet)
        if hand.result == HandResult.BLACKJACK:
            return bet * (1 + self.config.blackjack_payout)
        if hand.result == HandResult.WIN:
            return bet * 2
        if hand.result == HandResult.PUSH:
            return bet
        return Decimal("0")

    def _settle(self) -> None:
        """Compare every hand with the dealer, pay out once and record the round."""
        self.settle_round()
        self._reveal_hole_card()

        dealer_value = self.dealer_hand.value
        total_wagered = 0
        total_payout = Decimal("0")
        records = []

        for spot_index, hand_index, hand in self._iter_hands():
            if hand.result is None:
                player_value = hand.value
                if dealer_value > 21 or player_value > dealer_value:
                    hand.result = HandResult.WIN
                elif player_value < dealer_value:
                    hand.result = HandResult.LOSE
                else:
                    hand.result = HandResult.PUSH

            payout = self._payout(hand)
            total_wagered += hand.bet
            total_payout += payout
            records.append(
                HandRecord(
                    spot_index=spot_index,
                    cards=tuple(hand.cards),
                    bet=hand.bet,
                    result=hand.result,
                )
            )
            self.events.emit_new(
                EventType.HAND_SETTLED,
                spot=spot_index,
                hand=hand_index,
                result=hand.result.value,
                payout=payout,
            )

        self.ledger.credit(total_payout)
        self._emit_bankroll()

        entry = self.ledger.record_round(
            records,
            dealer_cards=self.dealer_hand.cards,
            total_wagered=total_wagered,
            total_payout=total_payout,
        )
        self.outcome = entry.outcome
        self.message = entry.outcome.message
        self.finish_round()

        logger.info(
            "Round settled: %d hands, wagered %s, paid %s, bankroll %s",
            len(records),
            total_wagered,
            total_payout,
            self.ledger.bankroll,
        )
        self.events.emit_new(
            EventType.ROUND_ENDED,
            outcome=entry.outcome.value,
            result=entry.profit_or_loss,
            bankroll=self.ledger.bankroll,
        )

    def _dealer_view(self) -> DealerView:
        cards: list[Card | None] = list(self.dealer_hand.cards)
        visible = list(self.dealer_hand.cards)
        if self._hole_hidden and cards:
            cards[0] = None
            visible = visible[1:]
        info = hand_info(visible)
        return DealerView(
            cards=tuple(cards),
            hole_card_hidden=self._hole_hidden and bool(cards),
            value=info.value,
            display=info.display,
        )

    def __repr__(self) -> str:
        return (
            f"BlackjackTable(phase={self.phase.name}, bankroll={self.ledger.bankroll}, "
            f"shoe={len(self.shoe) if self.shoe is not None else 0})"
        )


def _parse_bet(amount: object) -> int | None:
    """Return a whole bet amount, or None when the input is not one."""
    if isinstance(amount, bool):
        return None
    try:
        if isinstance(amount, str):
            value = int(amount.strip())
        else:
            value = int(amount)  # type: ignore[call-overload]
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(amount, str) and value != amount:
        return None
    return value
