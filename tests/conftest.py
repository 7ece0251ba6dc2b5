"""Pytest fixtures for blackjack simulator tests."""

from decimal import Decimal
from random import Random

import pytest

from blackjack_sim.counting import HiLoSystem
from blackjack_sim.game import BlackjackTable
from blackjack_sim.hand import Hand
from blackjack_sim.storage import InMemorySnapshotStore
from blackjack_sim.strategy import BasicStrategy
from config import TableConfig
from tests.helpers import make_hand


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def table_config():
    """Single-spot table rules."""
    return TableConfig(num_spots=1, starting_bankroll=Decimal("10000"))


@pytest.fixture
def table(table_config, rng):
    """A table with a freshly shuffled 6-deck shoe, in betting."""
    t = BlackjackTable(table_config=table_config, rng=rng)
    t.select_deck_count(6)
    return t


@pytest.fixture
def store():
    """An empty in-memory snapshot store."""
    return InMemorySnapshotStore()


@pytest.fixture
def empty_hand():
    """An empty player hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return make_hand("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return make_hand("AS", "6H")


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return make_hand("10S", "6H")


@pytest.fixture
def pair_8s_hand():
    """A pair of 8s hand."""
    return make_hand("8S", "8H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return make_hand("10S", "6H", "KC")


@pytest.fixture
def hilo():
    """Hi-Lo counting system."""
    return HiLoSystem()


@pytest.fixture
def basic_strategy():
    """Basic strategy tables."""
    return BasicStrategy()
