"""
Tests for the rule model.
"""

import pytest

from crawler_sim.combat.rules import (
    ability_based_damage_reduction,
    ability_based_percentage,
    apply_damage_reduction,
    beast_combat_critical_chance,
    calculate_attack_damage,
    calculate_beast_damage,
    calculate_obstacle_damage,
    elemental_adjusted_damage,
    encounter_critical_chance,
    encounter_level_range,
    js_round,
    neck_reduction,
    power,
)
from crawler_sim.core.constants import ItemType
from crawler_sim.entities.encounter import Beast
from crawler_sim.items.item import EMPTY_ITEM, Item


def test_power():
    assert power(10, 1) == 50
    assert power(10, 5) == 10


@pytest.mark.parametrize(
    "attack, armor, expected",
    [
        (ItemType.MAGIC, ItemType.METAL, 15),
        (ItemType.MAGIC, ItemType.HIDE, 5),
        (ItemType.MAGIC, ItemType.CLOTH, 10),
        (ItemType.BLADE, ItemType.CLOTH, 15),
        (ItemType.BLADE, ItemType.METAL, 5),
        (ItemType.BLUDGEON, ItemType.HIDE, 15),
        (ItemType.BLUDGEON, ItemType.CLOTH, 5),
        (ItemType.MAGIC, ItemType.NONE, 10),
    ],
)
def test_elemental_matchups(attack, armor, expected):
    """Test that strong hits deal half again and weak hits half."""
    assert elemental_adjusted_damage(10, attack, armor) == expected


def test_unarmed_attack_deals_minimum(make_adventurer, magic_beast, tables):
    adventurer = make_adventurer()
    assert calculate_attack_damage(None, adventurer, magic_beast, tables) == (4, 4)
    assert calculate_attack_damage(EMPTY_ITEM, adventurer, magic_beast, tables) == (4, 4)


def test_raw_attack_without_beast(make_adventurer, tables):
    adventurer = make_adventurer()
    roll = calculate_attack_damage(Item(id=1, xp=100), adventurer, None, tables)
    assert roll == (50, 100)


def test_attack_against_beast(make_adventurer, tables):
    """Test a blade weapon against a cloth-armored beast."""
    adventurer = make_adventurer()
    beast = Beast(id=1, level=1, health=10)
    roll = calculate_attack_damage(Item(id=7, xp=100), adventurer, beast, tables)
    # 50 power, strong against cloth: 75, minus beast armor 5.
    assert roll.base == 70
    assert roll.critical == 145


def test_attack_never_below_floor(make_adventurer, tables):
    adventurer = make_adventurer()
    beast = Beast(id=1, level=50, health=10)
    roll = calculate_attack_damage(Item(id=6, xp=1), adventurer, beast, tables)
    assert roll == (4, 4)


def test_beast_damage_by_armor(make_adventurer, magic_beast, tables):
    """Test a level 10 magic beast against level 10 tier 1 chest pieces."""
    adventurer = make_adventurer()
    unarmored = calculate_beast_damage(magic_beast, adventurer, EMPTY_ITEM, tables)
    cloth = calculate_beast_damage(magic_beast, adventurer, Item(id=19, xp=100), tables)
    hide = calculate_beast_damage(magic_beast, adventurer, Item(id=24, xp=100), tables)
    metal = calculate_beast_damage(magic_beast, adventurer, Item(id=29, xp=100), tables)
    assert unarmored == (75, 150)
    assert cloth == (2, 50)
    assert hide == (2, 2)
    assert metal == (25, 100)


def test_matching_neck_reduces_damage(make_adventurer, magic_beast, tables):
    armor = Item(id=29, xp=100)
    necklace = Item(id=94, xp=100)
    assert neck_reduction(armor, necklace, tables) == 15
    assert neck_reduction(armor, Item(id=95, xp=100), tables) == 0
    adventurer = make_adventurer(neck=necklace)
    assert calculate_beast_damage(magic_beast, adventurer, armor, tables) == (10, 85)


def test_obstacle_damage(tables):
    assert calculate_obstacle_damage(1, 10, EMPTY_ITEM, EMPTY_ITEM, tables) == (50, 100)
    # Cloth is neutral against magic: 50 - 50 armor hits the floor.
    armor = Item(id=19, xp=100)
    assert calculate_obstacle_damage(1, 10, armor, EMPTY_ITEM, tables) == (4, 50)
    assert calculate_obstacle_damage(1, 10, armor, Item(id=95, xp=100), tables) == (4, 35)


def test_critical_chances():
    assert beast_combat_critical_chance(1) == 0.05
    assert beast_combat_critical_chance(10) == 0.2
    assert beast_combat_critical_chance(30) == 0.35
    assert encounter_critical_chance(10) == 0.1
    assert encounter_critical_chance(300) == 1.0


def test_ability_based_percentage():
    assert ability_based_percentage(100, 5) == 50
    assert ability_based_percentage(100, 10) == 100
    assert ability_based_percentage(100, 0) == 0


def test_ability_based_damage_reduction():
    """Test the smoothstep curve at its ends and midpoint."""
    assert ability_based_damage_reduction(100, 0) == 0
    assert ability_based_damage_reduction(100, 5) == 50
    assert ability_based_damage_reduction(100, 10) == 100
    assert ability_based_damage_reduction(100, 20) == 100


def test_apply_damage_reduction():
    assert apply_damage_reduction(100, 50) == 50
    assert apply_damage_reduction(0, 50) == 0
    assert apply_damage_reduction(10.4, 0) == 10
    assert apply_damage_reduction(7, 100) == 0


def test_js_round_rounds_half_up():
    assert js_round(2.5) == 3
    assert js_round(2.4) == 2
    assert js_round(-0.5) == 0


@pytest.mark.parametrize(
    "level, expected",
    [
        (1, (1, 3)),
        (19, (1, 57)),
        (20, (11, 70)),
        (30, (21, 110)),
        (40, (41, 160)),
        (50, (81, 230)),
    ],
)
def test_encounter_level_range(level, expected):
    assert encounter_level_range(level) == expected
