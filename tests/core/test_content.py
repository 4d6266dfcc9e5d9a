"""
Tests for the lookup tables.
"""

import json

import pytest

from crawler_sim.core.constants import ItemType, Slot
from crawler_sim.core.content import GameTables, default_tables, load_tables


def test_item_slots(tables):
    assert tables.slot_of(1) == Slot.WEAPON
    assert tables.slot_of(19) == Slot.CHEST
    assert tables.slot_of(34) == Slot.HEAD
    assert tables.slot_of(79) == Slot.HAND
    assert tables.slot_of(94) == Slot.NECK
    assert tables.slot_of(99) == Slot.RING
    assert tables.slot_of(0) is None


def test_item_types_and_tiers(tables):
    """Test that armor blocks go cloth, hide, metal with tiers 1-5."""
    assert tables.type_of(19) == ItemType.CLOTH
    assert tables.type_of(24) == ItemType.HIDE
    assert tables.type_of(29) == ItemType.METAL
    assert tables.tier_of(19) == 1
    assert tables.tier_of(23) == 5
    assert tables.type_of(7) == ItemType.BLADE
    assert tables.tier_of(7) == 1


def test_unknown_items_are_weakest(tables):
    assert tables.tier_of(0) == 5
    assert tables.type_of(0) == ItemType.NONE


def test_beasts_come_in_blocks(tables):
    """Test beast types in blocks of 25 and tiers in blocks of 5."""
    assert len(tables.beast_ids) == 75
    assert tables.beast_type_of(1) == ItemType.MAGIC
    assert tables.beast_type_of(26) == ItemType.BLADE
    assert tables.beast_type_of(75) == ItemType.BLUDGEON
    assert tables.beast_tier_of(1) == 1
    assert tables.beast_tier_of(6) == 2
    assert tables.beast_tier_of(25) == 5
    assert tables.beast_tier_of(26) == 1
    assert tables.beast_armor_of(1) == ItemType.CLOTH


def test_neck_pieces_reinforce_one_material(tables):
    assert tables.neck_armor_match[94] == ItemType.METAL
    assert tables.neck_armor_match[95] == ItemType.CLOTH
    assert tables.neck_armor_match[96] == ItemType.HIDE


def test_items_for_slot(tables):
    assert tables.items_for_slot(Slot.CHEST) == list(range(19, 34))


def test_load_tables_round_trips_through_json(tmp_path, tables):
    path = tmp_path / "tables.json"
    path.write_text(tables.model_dump_json(), encoding="utf-8")
    loaded = load_tables(path)
    assert loaded.slot_of(19) == Slot.CHEST
    assert loaded.beast_tier_of(6) == 2


def test_load_tables_rejects_inconsistent_tables(tmp_path, tables):
    data = json.loads(tables.model_dump_json())
    data["item_tiers"].pop("1")
    path = tmp_path / "tables.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    with pytest.raises(ValueError):
        load_tables(path)


def test_default_tables_are_shared():
    assert GameTables.default() is default_tables()
