"""
Combat module for the crawler simulator.

Contains the rule model, the single-fight resolver and the outcome
simulation that ranks loadouts.
"""

from .simulation import (
    CombatOutcome,
    OutcomeScore,
    SimulationOptions,
    is_better_score,
    is_perfect_score,
    simulate_combat,
    simulate_combat_outcome,
)

__all__ = [
    "CombatOutcome",
    "OutcomeScore",
    "SimulationOptions",
    "is_better_score",
    "is_perfect_score",
    "simulate_combat",
    "simulate_combat_outcome",
]
