"""
Tests for applying selections to the adventurer and the bag.
"""

import pytest

from crawler_sim.core.constants import Slot
from crawler_sim.entities.stats import Stats
from crawler_sim.gear.selection import (
    apply_gear_set,
    build_updated_bag,
    changed_slots,
    describe_selection,
    selection_signature,
)
from crawler_sim.items.item import EMPTY_ITEM, Item


@pytest.fixture
def strength_tables(tables):
    """Tables where every suffix grants one strength."""
    return tables.model_copy(
        update={"suffix_boosts": {i: {"strength": 1} for i in range(1, 19)}}
    )


@pytest.fixture
def boosted_adventurer(make_adventurer):
    """Wields a level 15 weapon whose suffix grants one of the five strength."""
    return make_adventurer(
        stats=Stats(strength=5),
        item_specials_seed=42,
        weapon=Item(id=7, xp=225),
        chest=Item(id=19, xp=4),
    )


def test_empty_selection_is_identity(boosted_adventurer, tables):
    assert apply_gear_set(boosted_adventurer, {}, tables) is boosted_adventurer


def test_changed_slots_ignore_equipped_items(boosted_adventurer):
    selection = {Slot.WEAPON: Item(id=7, xp=225), Slot.CHEST: Item(id=24)}
    assert changed_slots(boosted_adventurer, selection) == [Slot.CHEST]


def test_apply_gear_set_moves_boosts(boosted_adventurer, strength_tables):
    """Test that suffix boosts leave with the old item and come with the new."""
    swapped = apply_gear_set(
        boosted_adventurer, {Slot.WEAPON: Item(id=1, xp=225)}, strength_tables
    )
    assert swapped.equipment.weapon == Item(id=1, xp=225)
    assert swapped.stats.strength == 5

    plain = apply_gear_set(boosted_adventurer, {Slot.WEAPON: Item(id=1, xp=1)}, strength_tables)
    assert plain.stats.strength == 4

    unequipped = apply_gear_set(boosted_adventurer, {Slot.WEAPON: EMPTY_ITEM}, strength_tables)
    assert unequipped.equipment.weapon.is_empty
    assert unequipped.stats.strength == 4


def test_build_updated_bag_swaps_items(boosted_adventurer):
    """Test that no item ends up both equipped and carried."""
    bag = [Item(id=24, xp=9), Item(id=24, xp=9), Item(id=1)]
    updated = build_updated_bag(boosted_adventurer, bag, {Slot.CHEST: Item(id=24, xp=9)})
    assert updated == [Item(id=24, xp=9), Item(id=1), Item(id=19, xp=4)]
    assert bag == [Item(id=24, xp=9), Item(id=24, xp=9), Item(id=1)]


def test_build_updated_bag_unchanged_selection(boosted_adventurer):
    bag = [Item(id=1)]
    assert build_updated_bag(boosted_adventurer, bag, {Slot.CHEST: Item(id=19, xp=4)}) == bag


def test_selection_signature_is_order_independent():
    a = {Slot.WEAPON: Item(id=1), Slot.HEAD: Item(id=34, xp=4)}
    b = {Slot.HEAD: Item(id=34, xp=4), Slot.WEAPON: Item(id=1)}
    assert selection_signature(a) == selection_signature(b)
    assert selection_signature(a) != selection_signature({Slot.WEAPON: Item(id=1)})


def test_describe_selection(tables):
    assert describe_selection({Slot.CHEST: Item(id=19)}, tables) == [
        f"chest:{tables.name_of(19)}#19"
    ]
