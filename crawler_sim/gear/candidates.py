"""
Candidate generation.

For every slot, collects the equipped item and the bag items that fit it,
then prunes items that can never be part of an optimal loadout against the
current beast.
"""

from functools import cmp_to_key

from crawler_sim.combat.rules import calculate_attack_damage, calculate_beast_damage
from crawler_sim.core.constants import EQUIPMENT_SLOTS, ItemType, Slot
from crawler_sim.core.content import GameTables, default_tables
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast
from crawler_sim.items.item import Item

Candidates = dict[Slot, list[Item]]


def _dedupe(items: list[Item]) -> list[Item]:
    seen: set[tuple[int, int]] = set()
    unique: list[Item] = []
    for item in items:
        key = (item.id, item.xp)
        if key not in seen:
            seen.add(key)
            unique.append(item)
    return unique


def _sort_key(slot: Slot, adventurer: Adventurer, beast: Beast, tables: GameTables):
    """Equipped item first, then best-first by the slot's own metric."""
    equipped = adventurer.equipment.get(slot)

    def compare(a: Item, b: Item) -> int:
        if a == equipped and b != equipped:
            return -1
        if b == equipped and a != equipped:
            return 1
        if slot == Slot.WEAPON:
            return (
                calculate_attack_damage(b, adventurer, beast, tables).base
                - calculate_attack_damage(a, adventurer, beast, tables).base
            )
        if slot.is_armor:
            return (
                calculate_beast_damage(beast, adventurer, a, tables).base
                - calculate_beast_damage(beast, adventurer, b, tables).base
            )
        tier_a, tier_b = tables.tier_of(a.id), tables.tier_of(b.id)
        if tier_a != tier_b:
            return tier_b - tier_a
        return b.xp - a.xp

    return cmp_to_key(compare)


def _best_weapons(
    items: list[Item], adventurer: Adventurer, beast: Beast, tables: GameTables
) -> list[Item]:
    best_damage = None
    best: list[Item] = []
    for item in items:
        damage = calculate_attack_damage(item, adventurer, beast, tables).base
        if best_damage is None or damage > best_damage:
            best_damage = damage
            best = [item]
        elif damage == best_damage:
            best.append(item)
    return best


def _best_armor_per_type(
    items: list[Item], adventurer: Adventurer, beast: Beast, tables: GameTables
) -> list[Item]:
    """
    Keeps one item per armor material: the one taking the least damage,
    ties going to the higher tier number and then the higher xp.
    """
    best: dict[ItemType, tuple[Item, int, int]] = {}
    for item in items:
        item_type = tables.type_of(item.id)
        damage = calculate_beast_damage(beast, adventurer, item, tables).base
        tier = tables.tier_of(item.id)
        current = best.get(item_type)
        if current is None or damage < current[1]:
            best[item_type] = (item, damage, tier)
            continue
        _, best_damage, best_tier = current
        if damage == best_damage and (
            tier > best_tier or (tier == best_tier and item.xp > current[0].xp)
        ):
            best[item_type] = (item, damage, tier)
    return [entry[0] for entry in best.values()]


def build_candidates(
    adventurer: Adventurer,
    bag: list[Item],
    beast: Beast,
    tables: GameTables | None = None,
) -> Candidates:
    """
    Builds the pruned candidate list of every slot.

    Args:
        adventurer (Adventurer): The adventurer snapshot.
        bag (list[Item]): Items carried but not equipped.
        beast (Beast): The beast the loadout is optimized against.
        tables (GameTables | None): Lookup tables.

    Returns:
        Candidates: Slot to candidate items, the equipped item first when it
            survives pruning. Slots with no alternatives hold just the
            equipped item.

    """
    tables = tables or default_tables()
    pools: Candidates = {slot: [adventurer.equipment.get(slot)] for slot in EQUIPMENT_SLOTS}
    for item in bag:
        slot = tables.slot_of(item.id)
        if slot is not None:
            pools[slot].append(item)

    candidates: Candidates = {}
    for slot in EQUIPMENT_SLOTS:
        key = _sort_key(slot, adventurer, beast, tables)
        ordered = sorted(_dedupe(pools[slot]), key=key)
        if slot == Slot.WEAPON:
            candidates[slot] = _best_weapons(ordered, adventurer, beast, tables)
        elif slot.is_armor:
            candidates[slot] = sorted(
                _best_armor_per_type(ordered, adventurer, beast, tables), key=key
            )
        else:
            candidates[slot] = ordered
    return candidates
