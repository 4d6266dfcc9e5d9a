"""
Shared fixtures for the crawler simulator tests.

Item ids follow the standard tables: 1-6 are magic weapons, chest armor
starts at 19 (cloth 19-23, hide 24-28, metal 29-33) and every other armor
slot follows in blocks of fifteen.
"""

import pytest

from crawler_sim.core.config import EngineConfig
from crawler_sim.core.constants import Slot
from crawler_sim.core.content import default_tables
from crawler_sim.entities.adventurer import Adventurer, Equipment
from crawler_sim.entities.encounter import Beast
from crawler_sim.entities.stats import Stats
from crawler_sim.items.item import Item

# First id of each armor slot block.
ARMOR_BASE = {
    Slot.CHEST: 19,
    Slot.HEAD: 34,
    Slot.WAIST: 49,
    Slot.FOOT: 64,
    Slot.HAND: 79,
}
MATERIAL_OFFSET = {"cloth": 0, "hide": 5, "metal": 10}


def _armor_set(material: str, xp: int = 100, tier: int = 1) -> dict[str, Item]:
    return {
        slot.value: Item(id=base + MATERIAL_OFFSET[material] + tier - 1, xp=xp)
        for slot, base in ARMOR_BASE.items()
    }


def _make_adventurer(
    health: int = 100,
    xp: int = 0,
    stats: Stats | None = None,
    item_specials_seed: int = 0,
    **equipped: Item,
) -> Adventurer:
    return Adventurer(
        health=health,
        xp=xp,
        stats=stats or Stats(),
        equipment=Equipment(**equipped),
        item_specials_seed=item_specials_seed,
    )


@pytest.fixture
def armor_set():
    """Factory: one armor piece of a material in every armor slot."""
    return _armor_set


@pytest.fixture
def make_adventurer():
    """Factory for adventurer snapshots."""
    return _make_adventurer


@pytest.fixture
def tables():
    return default_tables()


@pytest.fixture
def config():
    """A configuration small enough for fast tests."""
    return EngineConfig(monte_carlo_samples=2_000, exploration_samples_per_slot=200)


@pytest.fixture
def magic_beast():
    """A level 10 tier 1 magic beast wearing cloth, with 100 health."""
    return Beast(id=1, level=10, health=100)


@pytest.fixture
def metal_adventurer():
    """
    Wears metal, which magic beasts hit hard.

    Against ``magic_beast`` the adventurer needs two hits and survives the
    beast's regular hit (25) but not its critical one (100).
    """
    return _make_adventurer(health=30, weapon=Item(id=1, xp=400), **_armor_set("metal"))


@pytest.fixture
def hide_bag():
    """A full hide set, which shrugs off magic."""
    return list(_armor_set("hide").values())
