"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Literal


def _parse_spots() -> int:
    """Parse TABLE_SPOTS environment variable (1 or 3 betting spots)."""
    spots = int(os.getenv("TABLE_SPOTS", "3"))
    if spots not in (1, 3):
        raise ValueError("TABLE_SPOTS must be 1 or 3")
    return spots


def _default_player_data_path() -> str:
    return os.getenv(
        "PLAYER_DATA_PATH",
        str(Path.home() / ".blackjack_sim_players.json"),
    )


@dataclass(frozen=True)
class TableConfig:
    """Table constants and house rules."""

    starting_bankroll: Decimal = field(
        default_factory=lambda: Decimal(os.getenv("STARTING_BANKROLL", "10000"))
    )
    num_spots: int = field(default_factory=_parse_spots)
    bet_suggestions: tuple[int, ...] = (25, 50, 100)
    deck_choices: tuple[int, ...] = (2, 6)
    max_splits_per_spot: int = 3  # 4 hands per spot
    dealer_stand_threshold: int = 17
    blackjack_payout: Decimal = Decimal("1.5")

    @property
    def max_hands_per_spot(self) -> int:
        """Return the most hands a single spot may hold after splitting."""
        return self.max_splits_per_spot + 1


@dataclass(frozen=True)
class RedisConfig:
    """Redis connection configuration."""

    host: str = field(default_factory=lambda: os.getenv("REDIS_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.getenv("REDIS_PORT", "6379")))
    db: int = field(default_factory=lambda: int(os.getenv("REDIS_DB", "0")))
    password: str | None = field(default_factory=lambda: os.getenv("REDIS_PASSWORD"))

    @property
    def url(self) -> str:
        """Build Redis connection URL."""
        auth = f":{self.password}@" if self.password else ""
        return f"redis://{auth}{self.host}:{self.port}/{self.db}"


@dataclass(frozen=True)
class StorageConfig:
    """Player snapshot storage configuration."""

    backend: Literal["memory", "json", "redis"] = field(
        default_factory=lambda: os.getenv("STORAGE_BACKEND", "memory")  # type: ignore[arg-type]
    )
    json_path: str = field(default_factory=_default_player_data_path)
    key_prefix: str = "blackjack:player:"


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper())
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    table: TableConfig = field(default_factory=TableConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def configure_logging(app_config: AppConfig | None = None) -> None:
    """Apply the configured log level to the root logger."""
    cfg = (app_config or config).logging
    level = logging.DEBUG if (app_config or config).debug else cfg.level
    logging.basicConfig(level=level, format=cfg.format)


# Global configuration instance
config = AppConfig()
