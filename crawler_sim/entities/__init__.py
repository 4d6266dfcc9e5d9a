"""
Entities module for the crawler simulator.

Immutable snapshots of the adventurer, its equipment and the things it
meets: beasts, obstacles and the game settings.
"""

from .adventurer import Adventurer, Equipment
from .encounter import Beast, Obstacle, Settings
from .snapshot import Snapshot, load_snapshot
from .stats import Stats

__all__ = [
    "Adventurer",
    "Beast",
    "Equipment",
    "Obstacle",
    "Settings",
    "Snapshot",
    "Stats",
    "load_snapshot",
]
