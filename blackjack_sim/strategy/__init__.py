"""Basic strategy advice."""

from blackjack_sim.strategy.basic import Action, BasicStrategy, recommend

__all__ = [
    "Action",
    "BasicStrategy",
    "recommend",
]
