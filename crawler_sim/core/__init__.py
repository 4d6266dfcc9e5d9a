"""
Core system module for the crawler simulator.

This module contains the fundamental components the engine is built on,
including game constants, lookup tables, configuration, the deterministic
random stream, logging and error handling.
"""

from .config import EngineConfig, load_config
from .constants import (
    ARMOR_SLOTS,
    EQUIPMENT_SLOTS,
    ItemType,
    Slot,
    StatsMode,
)
from .content import GameTables, load_tables
from .rng import DeterministicRng

__all__ = [
    "ARMOR_SLOTS",
    "EQUIPMENT_SLOTS",
    "DeterministicRng",
    "EngineConfig",
    "GameTables",
    "ItemType",
    "Slot",
    "StatsMode",
    "load_config",
    "load_tables",
]
