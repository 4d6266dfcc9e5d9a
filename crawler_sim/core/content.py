"""
Lookup tables mapping numeric identifiers to game data.

Item, beast and obstacle identifiers imply their slot, tier and elemental
type. The tables are plain data: ``GameTables.default()`` builds the
standard set and ``load_tables`` reads an override from JSON, so the engine
never hard-codes identifier ranges in its control flow.
"""

import json
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crawler_sim.core.constants import (
    ENCOUNTER_ID_COUNT,
    MAX_TIER,
    ItemType,
    Slot,
)

_WEAPON_NAMES: dict[ItemType, list[str]] = {
    ItemType.MAGIC: ["Ghost Wand", "Grave Wand", "Bone Wand", "Wand", "Grimoire", "Book"],
    ItemType.BLADE: ["Katana", "Falchion", "Scimitar", "Long Sword", "Short Sword", "Dagger"],
    ItemType.BLUDGEON: ["Warhammer", "Quarterstaff", "Maul", "Mace", "Club", "Stick"],
}

# Tier 1 first, per armor material.
_ARMOR_NAMES: dict[Slot, dict[ItemType, list[str]]] = {
    Slot.CHEST: {
        ItemType.CLOTH: ["Divine Robe", "Silk Robe", "Linen Robe", "Robe", "Shirt"],
        ItemType.HIDE: ["Demon Husk", "Dragonskin Armor", "Studded Leather Armor", "Hard Leather Armor", "Leather Armor"],
        ItemType.METAL: ["Holy Chestplate", "Ornate Chestplate", "Plate Mail", "Chain Mail", "Ring Mail"],
    },
    Slot.HEAD: {
        ItemType.CLOTH: ["Crown", "Divine Hood", "Silk Hood", "Linen Hood", "Hood"],
        ItemType.HIDE: ["Demon Crown", "Dragons Crown", "War Cap", "Leather Cap", "Cap"],
        ItemType.METAL: ["Ancient Helm", "Ornate Helm", "Great Helm", "Full Helm", "Helm"],
    },
    Slot.WAIST: {
        ItemType.CLOTH: ["Brightsilk Sash", "Silk Sash", "Wool Sash", "Linen Sash", "Sash"],
        ItemType.HIDE: ["Demonhide Belt", "Dragonskin Belt", "Studded Leather Belt", "Hard Leather Belt", "Leather Belt"],
        ItemType.METAL: ["Ornate Belt", "War Belt", "Plated Belt", "Mesh Belt", "Heavy Belt"],
    },
    Slot.FOOT: {
        ItemType.CLOTH: ["Divine Slippers", "Silk Slippers", "Wool Shoes", "Linen Shoes", "Shoes"],
        ItemType.HIDE: ["Demonhide Boots", "Dragonskin Boots", "Studded Leather Boots", "Hard Leather Boots", "Leather Boots"],
        ItemType.METAL: ["Holy Greaves", "Ornate Greaves", "Greaves", "Chain Boots", "Heavy Boots"],
    },
    Slot.HAND: {
        ItemType.CLOTH: ["Divine Gloves", "Silk Gloves", "Wool Gloves", "Linen Gloves", "Gloves"],
        ItemType.HIDE: ["Demons Hands", "Dragonskin Gloves", "Studded Leather Gloves", "Hard Leather Gloves", "Leather Gloves"],
        ItemType.METAL: ["Holy Gauntlets", "Ornate Gauntlets", "Gauntlets", "Chain Gloves", "Heavy Gloves"],
    },
}

_ARMOR_BASE_IDS: dict[Slot, int] = {
    Slot.CHEST: 19,
    Slot.HEAD: 34,
    Slot.WAIST: 49,
    Slot.FOOT: 64,
    Slot.HAND: 79,
}

_SUFFIX_BOOSTS: list[tuple[str, dict[str, int]]] = [
    ("of Power", {"strength": 3}),
    ("of Giant", {"vitality": 3}),
    ("of Titans", {"strength": 2, "charisma": 1}),
    ("of Skill", {"dexterity": 3}),
    ("of Perfection", {"strength": 1, "dexterity": 1, "vitality": 1}),
    ("of Brilliance", {"intelligence": 3}),
    ("of Enlightenment", {"wisdom": 3}),
    ("of Protection", {"vitality": 2, "dexterity": 1}),
    ("of Anger", {"strength": 2, "dexterity": 1}),
    ("of Rage", {"strength": 1, "charisma": 1, "wisdom": 1}),
    ("of Fury", {"vitality": 1, "charisma": 1, "intelligence": 1}),
    ("of Vitriol", {"intelligence": 2, "wisdom": 1}),
    ("of the Fox", {"dexterity": 2, "charisma": 1}),
    ("of Detection", {"wisdom": 2, "dexterity": 1}),
    ("of Reflection", {"intelligence": 1, "wisdom": 2}),
    ("of the Twins", {"charisma": 3}),
    ("of Shadows", {}),
    ("of the Void", {}),
]

_ENCOUNTER_TYPES = (ItemType.MAGIC, ItemType.BLADE, ItemType.BLUDGEON)
_BEAST_ARMOR = {
    ItemType.MAGIC: ItemType.CLOTH,
    ItemType.BLADE: ItemType.HIDE,
    ItemType.BLUDGEON: ItemType.METAL,
}


class GameTables(BaseModel):
    """Identifier lookup tables for items, beasts and obstacles."""

    model_config = ConfigDict(frozen=True)

    item_slots: dict[int, Slot] = Field(
        description="Equipment slot of each item id.",
    )
    item_types: dict[int, ItemType] = Field(
        description="Attack type, armor material or jewellery kind of each item id.",
    )
    item_tiers: dict[int, int] = Field(
        description="Tier of each item id, 1 is best.",
    )
    item_names: dict[int, str] = Field(
        default_factory=dict,
        description="Display name of each item id.",
    )
    neck_armor_match: dict[int, ItemType] = Field(
        default_factory=dict,
        description="Armor material each neck item reinforces.",
    )
    titanium_ring_id: int = Field(default=0, description="Ring that boosts critical hits.")
    platinum_ring_id: int = Field(default=0, description="Ring that boosts affix bonuses.")
    gold_ring_id: int = Field(default=0, description="Ring that boosts gold rewards.")
    beast_types: dict[int, ItemType] = Field(
        description="Attack type of each beast id.",
    )
    beast_armor_types: dict[int, ItemType] = Field(
        description="Armor material of each beast id.",
    )
    beast_tiers: dict[int, int] = Field(
        description="Tier of each beast id.",
    )
    obstacle_types: dict[int, ItemType] = Field(
        description="Attack type of each obstacle id.",
    )
    obstacle_tiers: dict[int, int] = Field(
        description="Tier of each obstacle id.",
    )
    suffix_names: dict[int, str] = Field(
        default_factory=dict,
        description="Name of each item suffix index.",
    )
    suffix_boosts: dict[int, dict[str, int]] = Field(
        default_factory=dict,
        description="Stat points granted by each item suffix index.",
    )

    def model_post_init(self, _) -> None:
        """
        Validate the tables.

        Raises:
            AssertionError: If the tables are inconsistent.

        """
        assert set(self.item_types) == set(self.item_slots), "Every item needs a slot and a type."
        assert set(self.item_tiers) == set(self.item_slots), "Every item needs a tier."
        assert all(1 <= t <= MAX_TIER for t in self.item_tiers.values()), "Item tiers must be 1-5."
        assert set(self.beast_tiers) == set(self.beast_types), "Every beast needs a tier."
        assert set(self.obstacle_tiers) == set(self.obstacle_types), "Every obstacle needs a tier."

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def slot_of(self, item_id: int) -> Slot | None:
        return self.item_slots.get(item_id)

    def type_of(self, item_id: int) -> ItemType:
        return self.item_types.get(item_id, ItemType.NONE)

    def tier_of(self, item_id: int) -> int:
        """Returns the item tier, empty slots count as the weakest tier."""
        return self.item_tiers.get(item_id, MAX_TIER)

    def name_of(self, item_id: int) -> str:
        if item_id == 0:
            return "None"
        return self.item_names.get(item_id, f"Item{item_id}")

    def items_for_slot(self, slot: Slot) -> list[int]:
        return sorted(i for i, s in self.item_slots.items() if s == slot)

    # ------------------------------------------------------------------
    # Encounters
    # ------------------------------------------------------------------

    @property
    def beast_ids(self) -> list[int]:
        return sorted(self.beast_types)

    @property
    def obstacle_ids(self) -> list[int]:
        return sorted(self.obstacle_types)

    def beast_type_of(self, beast_id: int) -> ItemType:
        return self.beast_types.get(beast_id, ItemType.NONE)

    def beast_armor_of(self, beast_id: int) -> ItemType:
        return self.beast_armor_types.get(beast_id, ItemType.NONE)

    def beast_tier_of(self, beast_id: int) -> int:
        return self.beast_tiers.get(beast_id, MAX_TIER)

    @classmethod
    def default(cls) -> "GameTables":
        """Returns the standard tables."""
        return default_tables()


def _encounter_type(encounter_id: int) -> ItemType:
    return _ENCOUNTER_TYPES[min(2, (encounter_id - 1) // 25)]


def _encounter_tier(encounter_id: int) -> int:
    return ((encounter_id - 1) % 25) // 5 + 1


@lru_cache(maxsize=1)
def default_tables() -> GameTables:
    """
    Builds the standard lookup tables.

    Items 1-18 are weapons (six per attack type), 19-93 are armor in blocks of
    fifteen per slot (five tiers each of cloth, hide and metal), 94-96 are neck
    pieces and 97-99 are rings. Beasts and obstacles 1-75 come in three blocks
    of twenty-five (magic, blade, bludgeon) with five ids per tier.
    """
    slots: dict[int, Slot] = {}
    types: dict[int, ItemType] = {}
    tiers: dict[int, int] = {}
    names: dict[int, str] = {}

    for item_id in range(1, 19):
        item_type = _ENCOUNTER_TYPES[(item_id - 1) // 6]
        offset = (item_id - 1) % 6
        slots[item_id] = Slot.WEAPON
        types[item_id] = item_type
        tiers[item_id] = min(MAX_TIER, offset + 1)
        names[item_id] = _WEAPON_NAMES[item_type][offset]

    for slot, base in _ARMOR_BASE_IDS.items():
        for relative in range(15):
            item_id = base + relative
            item_type = (ItemType.CLOTH, ItemType.HIDE, ItemType.METAL)[relative // 5]
            slots[item_id] = slot
            types[item_id] = item_type
            tiers[item_id] = relative % 5 + 1
            names[item_id] = _ARMOR_NAMES[slot][item_type][relative % 5]

    for item_id, name in ((94, "Necklace"), (95, "Amulet"), (96, "Pendant")):
        slots[item_id] = Slot.NECK
        types[item_id] = ItemType.NECKLACE
        tiers[item_id] = 1
        names[item_id] = name

    for item_id, name in ((97, "Titanium Ring"), (98, "Platinum Ring"), (99, "Gold Ring")):
        slots[item_id] = Slot.RING
        types[item_id] = ItemType.RING
        tiers[item_id] = 1
        names[item_id] = name

    encounter_ids = range(1, ENCOUNTER_ID_COUNT + 1)
    beast_types = {i: _encounter_type(i) for i in encounter_ids}

    return GameTables(
        item_slots=slots,
        item_types=types,
        item_tiers=tiers,
        item_names=names,
        neck_armor_match={94: ItemType.METAL, 95: ItemType.CLOTH, 96: ItemType.HIDE},
        titanium_ring_id=97,
        platinum_ring_id=98,
        gold_ring_id=99,
        beast_types=beast_types,
        beast_armor_types={i: _BEAST_ARMOR[t] for i, t in beast_types.items()},
        beast_tiers={i: _encounter_tier(i) for i in encounter_ids},
        obstacle_types={i: _encounter_type(i) for i in encounter_ids},
        obstacle_tiers={i: _encounter_tier(i) for i in encounter_ids},
        suffix_names={i + 1: name for i, (name, _) in enumerate(_SUFFIX_BOOSTS)},
        suffix_boosts={i + 1: boosts for i, (_, boosts) in enumerate(_SUFFIX_BOOSTS)},
    )


def load_tables(path: Path | str) -> GameTables:
    """
    Loads lookup tables from a JSON file.

    Args:
        path (Path | str): The JSON file to read. Keys of the id maps may be
            strings, they are coerced to integers.

    Raises:
        ValueError: If the file is missing or the tables are invalid.

    Returns:
        GameTables: The validated tables.

    """
    filepath = Path(path)
    try:
        if not filepath.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not data:
            raise ValueError(f"Empty data in {filepath}")
        return GameTables.model_validate(data)
    except (json.JSONDecodeError, FileNotFoundError, ValidationError, AssertionError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e
