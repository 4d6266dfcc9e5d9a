"""
Selection algebra.

A selection is a partial mapping from slot to item: a proposed change set
relative to the adventurer's current equipment. Selections are never
mutated; they are applied to produce a derived adventurer and bag.
"""

from typing import TypeAlias

from crawler_sim.core.constants import EQUIPMENT_SLOTS, Slot
from crawler_sim.core.content import GameTables
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.items.item import Item
from crawler_sim.items.loot import add_item_boosts, remove_item_boosts

Selection: TypeAlias = dict[Slot, Item]


def changed_slots(adventurer: Adventurer, selection: Selection) -> list[Slot]:
    """Slots whose selected item differs from the equipped one, in slot order."""
    return [
        slot
        for slot in EQUIPMENT_SLOTS
        if slot in selection and selection[slot] != adventurer.equipment.get(slot)
    ]


def apply_gear_set(
    adventurer: Adventurer, selection: Selection, tables: GameTables | None = None
) -> Adventurer:
    """
    Returns the adventurer with the selection equipped.

    Stat boosts granted by item suffixes follow the items: the boosts of
    each replaced item are removed and those of the new item added.
    """
    seed = adventurer.item_specials_seed
    stats = adventurer.stats
    changes: dict[Slot, Item] = {}

    for slot in changed_slots(adventurer, selection):
        current = adventurer.equipment.get(slot)
        desired = selection[slot]
        if not current.is_empty:
            stats = remove_item_boosts(current, seed, stats, tables)
        if not desired.is_empty:
            stats = add_item_boosts(desired, seed, stats, tables)
        changes[slot] = desired

    if not changes:
        return adventurer
    return adventurer.model_copy(
        update={"equipment": adventurer.equipment.with_items(changes), "stats": stats}
    )


def remove_item_once(items: list[Item], target: Item) -> list[Item]:
    try:
        index = items.index(target)
    except ValueError:
        return items
    return items[:index] + items[index + 1 :]


def build_updated_bag(
    adventurer: Adventurer, bag: list[Item], selection: Selection
) -> list[Item]:
    """
    Returns the bag after applying the selection.

    Each newly equipped item leaves the bag once and the item it replaces is
    appended, so no item is ever both equipped and carried.
    """
    updated = list(bag)
    for slot in changed_slots(adventurer, selection):
        desired = selection[slot]
        current = adventurer.equipment.get(slot)
        if not desired.is_empty:
            updated = remove_item_once(updated, desired)
        if not current.is_empty:
            updated.append(current)
    return updated


def selection_signature(selection: Selection) -> str:
    """Order independent key used to deduplicate selections."""
    return "|".join(
        sorted(f"{slot.value}:{item.id}:{item.xp}" for slot, item in selection.items())
    )


def describe_selection(selection: Selection, tables: GameTables | None = None) -> list[str]:
    return [f"{slot.value}:{item.label(tables)}" for slot, item in selection.items()]
