"""Login session wiring between a player's persisted data and a table."""

import logging
from random import Random

from blackjack_sim.game.engine import BlackjackTable, Shuffler
from blackjack_sim.game.events import EventType, GameEvent
from blackjack_sim.statistics import SessionLedger, SessionSummary
from blackjack_sim.storage import PlayerSnapshot, SnapshotStore, get_snapshot_store
from config import AppConfig, config

logger = logging.getLogger(__name__)


class PlayerSession:
    """
    One logged-in player at one table.

    The table's ledger is seeded from the store on login and saved back
    every time the table reports a ledger change, so bankroll, stats and
    history survive a restart.
    """

    def __init__(
        self,
        store: SnapshotStore | None = None,
        app_config: AppConfig | None = None,
        rng: Random | None = None,
        shuffler: Shuffler | None = None,
    ) -> None:
        self.config = app_config or config
        self.store = store or get_snapshot_store(self.config)
        self._rng = rng
        self._shuffler = shuffler
        self.identity: str | None = None
        self.table: BlackjackTable | None = None

    @property
    def is_logged_in(self) -> bool:
        return self.table is not None

    def login(self, identity: str) -> BlackjackTable:
        """
        Log a player in and seat them at a fresh table.

        Unknown players start with the default bankroll, and their initial
        snapshot is saved immediately.
        """
        identity = identity.strip()
        if not identity:
            raise ValueError("Player name cannot be empty")
        if self.is_logged_in:
            self.logout()

        snapshot = self.store.load(identity)
        if snapshot is None:
            ledger = SessionLedger(self.config.table.starting_bankroll)
            self.store.save(identity, PlayerSnapshot.from_ledger(ledger))
            logger.info("Created player %r", identity)
        else:
            ledger = snapshot.to_ledger()
            ledger.start_session()
            logger.info("Player %r logged in with bankroll %s", identity, ledger.bankroll)

        table = BlackjackTable(
            table_config=self.config.table,
            ledger=ledger,
            rng=self._rng,
            shuffler=self._shuffler,
        )
        table.subscribe(self._on_ledger_changed, EventType.LEDGER_CHANGED)

        self.identity = identity
        self.table = table
        return table

    def save(self) -> None:
        """Persist the current player's ledger."""
        if self.identity is None or self.table is None:
            raise RuntimeError("No player logged in")
        self.store.save(self.identity, PlayerSnapshot.from_ledger(self.table.ledger))

    def logout(self) -> SessionSummary:
        """Save and close the session, returning its summary."""
        if self.identity is None or self.table is None:
            raise RuntimeError("No player logged in")
        self.save()
        summary = self.table.ledger.summary()
        self.table.events.unsubscribe(self._on_ledger_changed, EventType.LEDGER_CHANGED)

        logger.info("Player %r logged out, net %s", self.identity, summary.net_profit)
        self.identity = None
        self.table = None
        return summary

    def _on_ledger_changed(self, event: GameEvent) -> None:
        self.save()
