"""Player snapshot persistence with memory, JSON file and Redis backends."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import asdict
from decimal import Decimal
from pathlib import Path
from typing import Any

import redis
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from blackjack_sim.cards import Card, Rank, Suit
from blackjack_sim.errors import StorageError
from blackjack_sim.hand import HandResult
from blackjack_sim.statistics import (
    HandHistoryEntry,
    HandRecord,
    RoundOutcomeSummary,
    SessionLedger,
    SessionStats,
)
from config import AppConfig, config

logger = logging.getLogger(__name__)


class CardModel(BaseModel):
    """Serialized card."""

    model_config = ConfigDict(frozen=True)

    rank: Rank
    suit: Suit

    @classmethod
    def from_card(cls, card: Card) -> "CardModel":
        return cls(rank=card.rank, suit=card.suit)

    def to_card(self) -> Card:
        return Card(self.rank, self.suit)


def _cards_in(cards: tuple[Card, ...]) -> list[CardModel]:
    return [CardModel.from_card(card) for card in cards]


def _cards_out(cards: list[CardModel]) -> tuple[Card, ...]:
    return tuple(card.to_card() for card in cards)


class HandRecordModel(BaseModel):
    """Serialized final state of one hand."""

    spot_index: int = Field(..., ge=0)
    cards: list[CardModel]
    bet: int = Field(..., ge=1)
    result: HandResult


class HistoryEntryModel(BaseModel):
    """Serialized round history entry."""

    hand_number: int = Field(..., ge=1)
    player_cards: list[CardModel]
    dealer_cards: list[CardModel]
    result: HandResult
    profit_or_loss: Decimal
    timestamp: float
    hands: list[HandRecordModel] = Field(default_factory=list)
    outcome: RoundOutcomeSummary = RoundOutcomeSummary.PUSH

    @classmethod
    def from_entry(cls, entry: HandHistoryEntry) -> "HistoryEntryModel":
        return cls(
            hand_number=entry.hand_number,
            player_cards=_cards_in(entry.player_cards),
            dealer_cards=_cards_in(entry.dealer_cards),
            result=entry.result,
            profit_or_loss=entry.profit_or_loss,
            timestamp=entry.timestamp,
            hands=[
                HandRecordModel(
                    spot_index=hand.spot_index,
                    cards=_cards_in(hand.cards),
                    bet=hand.bet,
                    result=hand.result,
                )
                for hand in entry.hands
            ],
            outcome=entry.outcome,
        )

    def to_entry(self) -> HandHistoryEntry:
        return HandHistoryEntry(
            hand_number=self.hand_number,
            player_cards=_cards_out(self.player_cards),
            dealer_cards=_cards_out(self.dealer_cards),
            result=self.result,
            profit_or_loss=self.profit_or_loss,
            timestamp=self.timestamp,
            hands=tuple(
                HandRecord(
                    spot_index=hand.spot_index,
                    cards=_cards_out(hand.cards),
                    bet=hand.bet,
                    result=hand.result,
                )
                for hand in self.hands
            ),
            outcome=self.outcome,
        )


class StatsModel(BaseModel):
    """Serialized session statistics."""

    hands_played: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    pushes: int = Field(default=0, ge=0)
    blackjacks: int = Field(default=0, ge=0)
    current_streak: int = 0
    best_streak: int = Field(default=0, ge=0)
    worst_streak: int = Field(default=0, le=0)
    decisions: int = Field(default=0, ge=0)
    correct_decisions: int = Field(default=0, ge=0)


class PlayerSnapshot(BaseModel):
    """Everything persisted for one player between sessions."""

    bankroll: Decimal = Field(..., ge=0)
    stats: StatsModel = Field(default_factory=StatsModel)
    hand_history: list[HistoryEntryModel] = Field(default_factory=list)

    @classmethod
    def from_ledger(cls, ledger: SessionLedger) -> "PlayerSnapshot":
        """Capture a ledger's bankroll, stats and history."""
        return cls(
            bankroll=ledger.bankroll,
            stats=StatsModel(**asdict(ledger.stats)),
            hand_history=[HistoryEntryModel.from_entry(e) for e in ledger.history],
        )

    def to_ledger(self) -> SessionLedger:
        """Rebuild a ledger from the snapshot."""
        return SessionLedger(
            self.bankroll,
            stats=SessionStats(**self.stats.model_dump()),
            history=[entry.to_entry() for entry in self.hand_history],
        )


class SnapshotStore(ABC):
    """Abstract player snapshot store keyed by player identity."""

    @abstractmethod
    def save(self, identity: str, snapshot: PlayerSnapshot) -> None:
        """Persist a player's snapshot, replacing any previous one."""
        ...

    @abstractmethod
    def load(self, identity: str) -> PlayerSnapshot | None:
        """Load a player's snapshot, or None for an unknown player."""
        ...

    @abstractmethod
    def delete(self, identity: str) -> None:
        """Forget a player."""
        ...


def _validate(identity: str, raw: str | bytes | dict[str, Any]) -> PlayerSnapshot:
    try:
        if isinstance(raw, dict):
            return PlayerSnapshot.model_validate(raw)
        return PlayerSnapshot.model_validate_json(raw)
    except ValidationError as e:
        raise StorageError(f"Corrupt snapshot for player {identity!r}") from e


class InMemorySnapshotStore(SnapshotStore):
    """In-memory store for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._snapshots: dict[str, str] = {}

    def save(self, identity: str, snapshot: PlayerSnapshot) -> None:
        self._snapshots[identity] = snapshot.model_dump_json()

    def load(self, identity: str) -> PlayerSnapshot | None:
        raw = self._snapshots.get(identity)
        if raw is None:
            return None
        return _validate(identity, raw)

    def delete(self, identity: str) -> None:
        self._snapshots.pop(identity, None)

    def __contains__(self, identity: str) -> bool:
        return identity in self._snapshots


class JsonFileSnapshotStore(SnapshotStore):
    """
    Snapshots for every player kept in a single JSON file.

    The file maps player identity to snapshot and is rewritten on each save.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path or config.storage.json_path).expanduser()

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read player data from {self.path}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Player data in {self.path} is not a mapping")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise StorageError(f"Cannot write player data to {self.path}") from e

    def save(self, identity: str, snapshot: PlayerSnapshot) -> None:
        data = self._read()
        data[identity] = snapshot.model_dump(mode="json")
        self._write(data)
        logger.debug("Saved player %r to %s", identity, self.path)

    def load(self, identity: str) -> PlayerSnapshot | None:
        raw = self._read().get(identity)
        if raw is None:
            return None
        logger.debug("Loaded player %r from %s", identity, self.path)
        return _validate(identity, raw)

    def delete(self, identity: str) -> None:
        data = self._read()
        if data.pop(identity, None) is not None:
            self._write(data)


class RedisSnapshotStore(SnapshotStore):
    """Redis-backed snapshot store."""

    def __init__(self, redis_client: "redis.Redis", prefix: str | None = None) -> None:
        self._redis = redis_client
        self._prefix = prefix if prefix is not None else config.storage.key_prefix

    def _key(self, identity: str) -> str:
        """Get Redis key for a player."""
        return f"{self._prefix}{identity}"

    def save(self, identity: str, snapshot: PlayerSnapshot) -> None:
        try:
            self._redis.set(self._key(identity), snapshot.model_dump_json())
        except redis.RedisError as e:
            raise StorageError(f"Cannot save player {identity!r}") from e
        logger.debug("Saved player %r to redis", identity)

    def load(self, identity: str) -> PlayerSnapshot | None:
        try:
            raw = self._redis.get(self._key(identity))
        except redis.RedisError as e:
            raise StorageError(f"Cannot load player {identity!r}") from e
        if raw is None:
            return None
        return _validate(identity, raw)

    def delete(self, identity: str) -> None:
        try:
            self._redis.delete(self._key(identity))
        except redis.RedisError as e:
            raise StorageError(f"Cannot delete player {identity!r}") from e


def get_snapshot_store(app_config: AppConfig | None = None) -> SnapshotStore:
    """
    Create the snapshot store selected by STORAGE_BACKEND.

    Falls back to the in-memory store when Redis is configured but
    unreachable.
    """
    cfg = app_config or config
    backend = cfg.storage.backend

    if backend == "json":
        return JsonFileSnapshotStore(cfg.storage.json_path)

    if backend == "redis":
        client = redis.Redis.from_url(cfg.redis.url)
        try:
            client.ping()
        except redis.ConnectionError:
            logger.warning("Redis at %s unreachable, using in-memory store", cfg.redis.url)
            return InMemorySnapshotStore()
        return RedisSnapshotStore(client, cfg.storage.key_prefix)

    if backend != "memory":
        raise ValueError(f"Unknown storage backend: {backend}")
    return InMemorySnapshotStore()
