"""
Exploration risk: the chance that the next random ambush or trap kills the
adventurer outright.
"""

from .lethal import ExplorationLethalChances, compute_exploration_lethal_chances

__all__ = [
    "ExplorationLethalChances",
    "compute_exploration_lethal_chances",
]
