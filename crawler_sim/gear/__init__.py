"""
Gear optimization: candidate pruning, loadout scoring, the two-phase search
and armor presets.
"""
