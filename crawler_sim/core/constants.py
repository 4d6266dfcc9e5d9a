"""
Constants and enumerations for the simulator.

Defines the equipment slots, elemental and armor types, defensive stat modes
and the numeric rule constants shared by the combat, gear and exploration
modules.
"""

from enum import Enum


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().capitalize()


class Slot(NiceEnum):
    """Defines the equipment positions an adventurer can fill."""

    WEAPON = "weapon"
    CHEST = "chest"
    HEAD = "head"
    WAIST = "waist"
    FOOT = "foot"
    HAND = "hand"
    NECK = "neck"
    RING = "ring"

    @property
    def is_armor(self) -> bool:
        """Returns True for the five slots that mitigate beast damage."""
        return self in ARMOR_SLOTS

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this slot."""
        return {
            Slot.WEAPON: "🗡️",
            Slot.CHEST: "🥋",
            Slot.HEAD: "⛑️",
            Slot.WAIST: "🎗️",
            Slot.FOOT: "👢",
            Slot.HAND: "🧤",
            Slot.NECK: "📿",
            Slot.RING: "💍",
        }.get(self, "❔")


class ItemType(NiceEnum):
    """Defines the elemental attack types and armor materials."""

    NONE = "None"
    MAGIC = "Magic"
    BLADE = "Blade"
    BLUDGEON = "Bludgeon"
    CLOTH = "Cloth"
    HIDE = "Hide"
    METAL = "Metal"
    NECKLACE = "Necklace"
    RING = "Ring"

    @property
    def is_weapon(self) -> bool:
        return self in (ItemType.MAGIC, ItemType.BLADE, ItemType.BLUDGEON)

    @property
    def is_armor(self) -> bool:
        return self in (ItemType.CLOTH, ItemType.HIDE, ItemType.METAL)

    @property
    def color(self) -> str:
        """Returns the color string associated with this item type."""
        return {
            ItemType.MAGIC: "bold magenta",
            ItemType.BLADE: "bold red",
            ItemType.BLUDGEON: "bold yellow",
            ItemType.CLOTH: "cyan",
            ItemType.HIDE: "green",
            ItemType.METAL: "bright_white",
        }.get(self, "dim white")

    def colorize(self, message: str) -> str:
        """Applies item type color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class StatsMode(NiceEnum):
    """Defines how defensive stats protect the adventurer."""

    DODGE = "Dodge"
    REDUCTION = "Reduction"


class GearPreset(NiceEnum):
    """Defines the armor material presets."""

    CLOTH = "cloth"
    HIDE = "hide"
    METAL = "metal"

    @property
    def armor_type(self) -> ItemType:
        return {
            GearPreset.CLOTH: ItemType.CLOTH,
            GearPreset.HIDE: ItemType.HIDE,
            GearPreset.METAL: ItemType.METAL,
        }[self]


# Search order used by gear suggestion and selection signatures.
EQUIPMENT_SLOTS: tuple[Slot, ...] = (
    Slot.WEAPON,
    Slot.HEAD,
    Slot.CHEST,
    Slot.WAIST,
    Slot.HAND,
    Slot.FOOT,
    Slot.NECK,
    Slot.RING,
)

ARMOR_SLOTS: tuple[Slot, ...] = (
    Slot.HEAD,
    Slot.CHEST,
    Slot.WAIST,
    Slot.HAND,
    Slot.FOOT,
)

# Order in which a beast picks the armor piece it hits during a fight.
COMBAT_TARGET_SLOTS: tuple[Slot, ...] = (
    Slot.CHEST,
    Slot.HEAD,
    Slot.WAIST,
    Slot.FOOT,
    Slot.HAND,
)

# Order in which exploration sampling walks the armor slots.
EXPLORATION_SLOT_ORDER: tuple[Slot, ...] = (
    Slot.HAND,
    Slot.HEAD,
    Slot.CHEST,
    Slot.WAIST,
    Slot.FOOT,
)

# Damage floors.
MIN_HERO_DAMAGE = 4
MIN_BEAST_DAMAGE = 2
MIN_OBSTACLE_DAMAGE = 4

# Affixes.
SPECIAL_UNLOCK_LEVEL = 15
SPECIAL_PREFIX_POOL = 69
SPECIAL_SUFFIX_POOL = 18
SPECIAL_PREFIX_BONUS_PERCENT = 25
SPECIAL_SUFFIX_BONUS_PERCENT = 50

# Jewellery bonuses, percent per item level.
RING_BONUS_PERCENT_PER_LEVEL = 3
NECK_BONUS_PERCENT_PER_LEVEL = 3

# Encounters.
ENCOUNTER_ID_COUNT = 75
MAX_TIER = 5
