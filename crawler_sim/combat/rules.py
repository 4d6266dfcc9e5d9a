"""
Rule model for the simulator.

Stateless functions that turn item, beast and obstacle data into damage
numbers: power, elemental matchups, affix bonuses, critical hits, jewellery
bonuses and the defensive stat modes. Everything here is pure; randomness is
applied by the resolver and the samplers.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, NamedTuple

from crawler_sim.core.constants import (
    MIN_BEAST_DAMAGE,
    MIN_HERO_DAMAGE,
    MIN_OBSTACLE_DAMAGE,
    NECK_BONUS_PERCENT_PER_LEVEL,
    RING_BONUS_PERCENT_PER_LEVEL,
    SPECIAL_PREFIX_BONUS_PERCENT,
    SPECIAL_SUFFIX_BONUS_PERCENT,
    ItemType,
)
from crawler_sim.core.content import GameTables, default_tables
from crawler_sim.items.item import Item, calculate_level
from crawler_sim.items.loot import item_specials

if TYPE_CHECKING:
    from crawler_sim.entities.adventurer import Adventurer
    from crawler_sim.entities.encounter import Beast

_STRONG: frozenset[tuple[ItemType, ItemType]] = frozenset(
    {
        (ItemType.MAGIC, ItemType.METAL),
        (ItemType.BLADE, ItemType.CLOTH),
        (ItemType.BLUDGEON, ItemType.HIDE),
    }
)
_WEAK: frozenset[tuple[ItemType, ItemType]] = frozenset(
    {
        (ItemType.MAGIC, ItemType.HIDE),
        (ItemType.BLADE, ItemType.METAL),
        (ItemType.BLUDGEON, ItemType.CLOTH),
    }
)

_REDUCTION_SCALE = 1_000_000


class DamageRoll(NamedTuple):
    """Damage of a regular and of a critical hit."""

    base: int
    critical: int


def js_round(value: float) -> int:
    """Rounds half up, the way the game client does."""
    return math.floor(value + 0.5)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def clamp_percentage(value: float) -> float:
    return clamp(value, 0, 100)


def power(level: int, tier: int) -> int:
    """Attack or armor power of something at ``level`` and ``tier``."""
    return level * (6 - tier)


def item_power(item: Item, tables: GameTables | None = None) -> int:
    if item.is_empty:
        return 0
    tables = tables or default_tables()
    return power(item.level, tables.tier_of(item.id))


def elemental_adjusted_damage(
    base_attack: int, attack_type: ItemType, armor_type: ItemType
) -> int:
    """
    Adjusts an attack for the elemental matchup.

    Magic beats metal, blade beats cloth and bludgeon beats hide; each is
    weak against the remaining material. Strong hits deal half again as much,
    weak hits half as much.
    """
    effect = base_attack // 2
    if (attack_type, armor_type) in _STRONG:
        return base_attack + effect
    if (attack_type, armor_type) in _WEAK:
        return base_attack - effect
    return base_attack


def affix_bonus(base_power: int, prefix_match: bool, suffix_match: bool) -> int:
    """Extra damage for matching affixes."""
    bonus = 0
    if prefix_match:
        bonus += base_power * SPECIAL_PREFIX_BONUS_PERCENT // 100
    if suffix_match:
        bonus += base_power * SPECIAL_SUFFIX_BONUS_PERCENT // 100
    return bonus


def _ring_bonus(amount: int, ring: Item, ring_id: int) -> int:
    if ring_id == 0 or ring.id != ring_id or amount <= 0:
        return 0
    return amount * RING_BONUS_PERCENT_PER_LEVEL * ring.level // 100


def neck_reduction(armor: Item, neck: Item, tables: GameTables | None = None) -> int:
    """
    Returns the damage a matching neck piece removes for a given armor piece.

    A neck piece only helps the armor material it is paired with.
    """
    if armor.is_empty or neck.is_empty:
        return 0
    tables = tables or default_tables()
    if tables.neck_armor_match.get(neck.id) != tables.type_of(armor.id):
        return 0
    return item_power(armor, tables) * neck.level * NECK_BONUS_PERCENT_PER_LEVEL // 100


# ----------------------------------------------------------------------
# Hero attacks
# ----------------------------------------------------------------------


def calculate_attack_damage(
    weapon: Item | None,
    adventurer: Adventurer,
    beast: Beast | None,
    tables: GameTables | None = None,
) -> DamageRoll:
    """
    Computes the damage the adventurer deals with a weapon.

    Args:
        weapon (Item | None): The weapon, None or an empty item means unarmed.
        adventurer (Adventurer): The attacker, for strength, ring and specials seed.
        beast (Beast | None): The target, None for raw damage with no armor.
        tables (GameTables | None): Lookup tables.

    Returns:
        DamageRoll: Regular and critical damage.

    """
    if weapon is None or weapon.is_empty:
        return DamageRoll(MIN_HERO_DAMAGE, MIN_HERO_DAMAGE)

    tables = tables or default_tables()
    base_attack = item_power(weapon, tables)
    strength = adventurer.stats.strength
    ring = adventurer.equipment.ring

    if beast is None:
        strength_bonus = base_attack * strength // 10
        ring_bonus = _ring_bonus(base_attack, ring, tables.titanium_ring_id)
        return DamageRoll(
            base_attack + strength_bonus,
            base_attack * 2 + strength_bonus + ring_bonus,
        )

    beast_armor = power(beast.level, beast.resolved_tier(tables))
    elemental = elemental_adjusted_damage(
        base_attack, tables.type_of(weapon.id), tables.beast_armor_of(beast.id)
    )
    strength_bonus = elemental * strength * 10 // 100 if strength > 0 else 0

    special_bonus = 0
    if beast.specials_active:
        specials = item_specials(weapon, adventurer.item_specials_seed)
        special_bonus = affix_bonus(
            base_attack,
            specials.prefix is not None and specials.prefix == beast.special_prefix,
            specials.suffix is not None and specials.suffix == beast.special_suffix,
        )
        special_bonus += _ring_bonus(special_bonus, ring, tables.platinum_ring_id)

    attack = elemental + strength_bonus + special_bonus
    base = max(MIN_HERO_DAMAGE, attack - beast_armor)
    critical = max(MIN_HERO_DAMAGE, attack + elemental - beast_armor)
    critical += _ring_bonus(elemental, ring, tables.titanium_ring_id)
    return DamageRoll(base, critical)


# ----------------------------------------------------------------------
# Incoming damage
# ----------------------------------------------------------------------


def beast_damage_against(
    base_attack: int,
    attack_type: ItemType,
    armor: Item,
    neck: Item,
    prefix_match: bool = False,
    suffix_match: bool = False,
    tables: GameTables | None = None,
) -> DamageRoll:
    """
    Damage a beast attack of ``base_attack`` power deals to one armor piece.

    Unarmoured slots take half again the beast's power. Armor applies the
    elemental matchup, adds any affix bonus, subtracts its own power and
    finally a matching neck piece removes a share of the armor power.
    """
    if armor.is_empty:
        elemental = base_attack * 3 // 2
        base = max(MIN_BEAST_DAMAGE, elemental)
        return DamageRoll(base, max(MIN_BEAST_DAMAGE, base + elemental))

    tables = tables or default_tables()
    armor_value = item_power(armor, tables)
    elemental = elemental_adjusted_damage(base_attack, attack_type, tables.type_of(armor.id))
    attack = elemental + affix_bonus(base_attack, prefix_match, suffix_match)
    reduction = neck_reduction(armor, neck, tables)

    base = max(MIN_BEAST_DAMAGE, attack - armor_value)
    critical = max(MIN_BEAST_DAMAGE, attack + elemental - armor_value)
    return DamageRoll(
        max(MIN_BEAST_DAMAGE, base - reduction),
        max(MIN_BEAST_DAMAGE, critical - reduction),
    )


def calculate_beast_damage(
    beast: Beast,
    adventurer: Adventurer,
    armor: Item,
    tables: GameTables | None = None,
) -> DamageRoll:
    """Damage ``beast`` deals when it hits ``armor``."""
    tables = tables or default_tables()
    prefix_match = suffix_match = False
    if beast.specials_active and not armor.is_empty:
        specials = item_specials(armor, adventurer.item_specials_seed)
        prefix_match = specials.prefix is not None and specials.prefix == beast.special_prefix
        suffix_match = specials.suffix is not None and specials.suffix == beast.special_suffix
    return beast_damage_against(
        power(beast.level, beast.resolved_tier(tables)),
        tables.beast_type_of(beast.id),
        armor,
        adventurer.equipment.neck,
        prefix_match,
        suffix_match,
        tables,
    )


def calculate_obstacle_damage(
    obstacle_id: int,
    level: int,
    armor: Item,
    neck: Item,
    tables: GameTables | None = None,
) -> DamageRoll:
    """
    Damage an obstacle deals when it hits ``armor``, before stat mitigation.

    The neck piece applies after the armor and can only lower damage down to
    the obstacle floor.
    """
    tables = tables or default_tables()
    attack = power(level, tables.obstacle_tiers[obstacle_id])
    armor_type = tables.type_of(armor.id) if not armor.is_empty else ItemType.NONE
    armor_value = item_power(armor, tables)
    elemental = elemental_adjusted_damage(attack, tables.obstacle_types[obstacle_id], armor_type)

    base = max(MIN_OBSTACLE_DAMAGE, elemental - armor_value)
    critical = max(MIN_OBSTACLE_DAMAGE, elemental * 2 - armor_value)
    reduction = neck_reduction(armor, neck, tables)
    if reduction:
        base = max(MIN_OBSTACLE_DAMAGE, base - reduction)
        critical = max(MIN_OBSTACLE_DAMAGE, critical - reduction)
    return DamageRoll(base, critical)


# ----------------------------------------------------------------------
# Chances and mitigation
# ----------------------------------------------------------------------


def hero_critical_chance(luck: int) -> float:
    """Luck is the critical hit chance in percent."""
    return clamp_percentage(luck) / 100


def beast_combat_critical_chance(adventurer_level: int) -> float:
    return clamp(adventurer_level * 2, 5, 35) / 100


def encounter_critical_chance(adventurer_level: int, multiplier: int = 1) -> float:
    """Critical chance of a beast or obstacle met while exploring."""
    return min(1.0, adventurer_level * multiplier / 100)


def ability_based_percentage(adventurer_xp: int, relevant_stat: int) -> int:
    """
    Chance in percent to avoid a threat with a defensive stat.

    Returns 100 once the stat reaches the adventurer level.
    """
    level = calculate_level(adventurer_xp)
    if relevant_stat >= level:
        return 100
    return relevant_stat * 100 // level


def ability_based_damage_reduction(adventurer_xp: int, relevant_stat: int) -> int:
    """
    Damage reduction in percent granted by a defensive stat.

    A smoothstep on stat / level, so the first few points matter less than
    the last ones.
    """
    level = calculate_level(adventurer_xp)
    ratio = min(_REDUCTION_SCALE * relevant_stat / level, _REDUCTION_SCALE)
    r2 = ratio * ratio / _REDUCTION_SCALE
    r3 = r2 * ratio / _REDUCTION_SCALE
    smooth = 3 * r2 - 2 * r3
    return math.floor(100 * smooth / _REDUCTION_SCALE)


def apply_damage_reduction(damage: float, reduction_percent: float) -> int:
    if damage <= 0:
        return 0
    clamped = clamp_percentage(reduction_percent)
    if clamped <= 0:
        return max(0, js_round(damage))
    return max(0, math.floor(js_round(damage) * (100 - clamped) / 100))


def encounter_level_range(adventurer_level: int) -> tuple[int, int]:
    """
    Returns the inclusive level range of beasts and obstacles met while exploring.

    Encounters scale to three times the adventurer level, and are shifted up
    by 10, 20, 40 and 80 levels from adventurer levels 20, 30, 40 and 50.
    """
    base_max = max(1, adventurer_level * 3)
    if adventurer_level >= 50:
        offset = 80
    elif adventurer_level >= 40:
        offset = 40
    elif adventurer_level >= 30:
        offset = 20
    elif adventurer_level >= 20:
        offset = 10
    else:
        offset = 0
    return 1 + offset, base_max + offset
