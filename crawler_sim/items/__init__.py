"""
Items module for the crawler simulator.

Contains the item model and the helpers that derive item specials and the
stat boosts they grant.
"""

from .item import EMPTY_ITEM, Item, calculate_level

__all__ = ["EMPTY_ITEM", "Item", "calculate_level"]
