"""
Armor material presets.

Equips a whole set of one armor material in a single step, together with
the neck piece that reinforces that material.
"""

from pydantic import BaseModel, ConfigDict

from crawler_sim.combat.rules import item_power
from crawler_sim.core.constants import ARMOR_SLOTS, GearPreset, Slot
from crawler_sim.core.content import GameTables, default_tables
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.gear.selection import (
    Selection,
    apply_gear_set,
    build_updated_bag,
    changed_slots,
)
from crawler_sim.items.item import Item


class GearPresetResult(BaseModel):
    """The adventurer and bag after applying a preset."""

    model_config = ConfigDict(frozen=True)

    adventurer: Adventurer
    bag: list[Item]


def _owned(adventurer: Adventurer, bag: list[Item], slot: Slot, tables: GameTables) -> list[Item]:
    items = [item for item in bag if tables.slot_of(item.id) == slot]
    equipped = adventurer.equipment.get(slot)
    if not equipped.is_empty:
        items.insert(0, equipped)
    return items


def _best_for_material(items: list[Item], preset: GearPreset, tables: GameTables) -> Item | None:
    matching = [item for item in items if tables.type_of(item.id) == preset.armor_type]
    if matching:
        return max(
            matching,
            key=lambda item: (item_power(item, tables), item.level, item.xp, item.id),
        )
    if items:
        return max(items, key=lambda item: (item.level, item.xp, item.id))
    return None


def _best_neck(items: list[Item], preset: GearPreset, tables: GameTables) -> Item | None:
    matching = [
        item for item in items if tables.neck_armor_match.get(item.id) == preset.armor_type
    ]
    pool = matching or items
    if not pool:
        return None
    return max(pool, key=lambda item: (item.level, item.xp, item.id))


def apply_gear_preset(
    adventurer: Adventurer,
    bag: list[Item],
    preset: GearPreset | str,
    tables: GameTables | None = None,
) -> GearPresetResult | None:
    """
    Equips the best owned armor of one material.

    For every armor slot the highest-power item of the preset material is
    chosen, or the highest-level item when the adventurer owns none of that
    material. The neck piece matching the material is preferred as well.

    Args:
        adventurer (Adventurer): The adventurer snapshot.
        bag (list[Item]): Items carried but not equipped.
        preset (GearPreset | str): cloth, hide or metal.
        tables (GameTables | None): Lookup tables.

    Returns:
        GearPresetResult | None: None when the preset changes nothing.

    """
    tables = tables or default_tables()
    preset = GearPreset(preset)

    selection: Selection = {}
    for slot in ARMOR_SLOTS:
        best = _best_for_material(_owned(adventurer, bag, slot, tables), preset, tables)
        if best is not None:
            selection[slot] = best
    neck = _best_neck(_owned(adventurer, bag, Slot.NECK, tables), preset, tables)
    if neck is not None:
        selection[Slot.NECK] = neck

    if not changed_slots(adventurer, selection):
        return None
    return GearPresetResult(
        adventurer=apply_gear_set(adventurer, selection, tables),
        bag=build_updated_bag(adventurer, bag, selection),
    )
