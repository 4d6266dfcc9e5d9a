"""
Exploration lethal-chance estimator.

Samples random beasts and obstacles across the encounter level range and
counts how often a single hit would take the adventurer's remaining health.
Each of the five armor slots is equally likely to be hit, so every slot
gets the same number of samples. One seeded stream feeds the ambush pass
and then the trap pass, which keeps the result reproducible.
"""

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.combat.rules import (
    ability_based_damage_reduction,
    ability_based_percentage,
    apply_damage_reduction,
    beast_damage_against,
    calculate_obstacle_damage,
    clamp_percentage,
    encounter_critical_chance,
    encounter_level_range,
    js_round,
    power,
)
from crawler_sim.core.config import EngineConfig
from crawler_sim.core.constants import (
    EXPLORATION_SLOT_ORDER,
    MIN_BEAST_DAMAGE,
    MIN_OBSTACLE_DAMAGE,
    SPECIAL_PREFIX_POOL,
    SPECIAL_SUFFIX_POOL,
    SPECIAL_UNLOCK_LEVEL,
    StatsMode,
)
from crawler_sim.core.content import GameTables, default_tables
from crawler_sim.core.error_handling import ErrorHandler, ErrorSeverity
from crawler_sim.core.logging import log_debug
from crawler_sim.core.rng import DeterministicRng
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Settings
from crawler_sim.items.item import Item


class ExplorationLethalChances(BaseModel):
    """Chance in percent that the next ambush or trap is lethal."""

    model_config = ConfigDict(frozen=True)

    ambush_lethal_percent: float = Field(default=0.0, ge=0, le=100)
    trap_lethal_percent: float = Field(default=0.0, ge=0, le=100)


NO_RISK = ExplorationLethalChances()


def _mitigate(damage: int, base_reduction: float, stat_reduction: float, floor: int) -> int:
    mitigated = damage
    if base_reduction > 0:
        mitigated = apply_damage_reduction(mitigated, base_reduction)
    if stat_reduction > 0:
        mitigated = apply_damage_reduction(mitigated, stat_reduction)
    return max(floor, js_round(mitigated))


def _stat_defenses(adventurer: Adventurer, stat: int, settings: Settings) -> tuple[float, float]:
    """Returns the dodge probability and the damage reduction percent of a stat."""
    if settings.stats_mode == StatsMode.DODGE:
        return clamp_percentage(ability_based_percentage(adventurer.xp, stat)) / 100, 0
    return 0.0, clamp_percentage(ability_based_damage_reduction(adventurer.xp, stat))


def _ambush_lethal_count(
    armor: Item,
    adventurer: Adventurer,
    settings: Settings,
    level_range: tuple[int, int],
    samples: int,
    rng: DeterministicRng,
    config: EngineConfig,
    tables: GameTables,
) -> int:
    low, high = level_range
    level_count = max(1, high - low + 1)
    beast_ids = tables.beast_ids
    neck = adventurer.equipment.neck
    armor_specials = (
        not armor.is_empty
        and adventurer.item_specials_seed != 0
        and armor.level >= SPECIAL_UNLOCK_LEVEL
    )
    critical_chance = encounter_critical_chance(
        max(1, adventurer.level), config.critical_hit_ambush_multiplier
    )
    avoid_chance, stat_reduction = _stat_defenses(adventurer, adventurer.stats.wisdom, settings)
    base_reduction = clamp_percentage(settings.base_damage_reduction)
    health = max(0, adventurer.health)

    lethal = 0
    for _ in range(samples):
        beast_id = beast_ids[rng.randrange(len(beast_ids))]
        level = low + rng.randrange(level_count)
        prefix_match = suffix_match = False
        if level >= SPECIAL_UNLOCK_LEVEL and armor_specials:
            prefix_match = rng.random() < 1 / SPECIAL_PREFIX_POOL
            suffix_match = rng.random() < 1 / SPECIAL_SUFFIX_POOL
        if avoid_chance > 0 and rng.random() < avoid_chance:
            continue

        roll = beast_damage_against(
            power(level, tables.beast_tier_of(beast_id)),
            tables.beast_type_of(beast_id),
            armor,
            neck,
            prefix_match,
            suffix_match,
            tables,
        )
        damage = roll.critical if rng.random() < critical_chance else roll.base
        if _mitigate(damage, base_reduction, stat_reduction, MIN_BEAST_DAMAGE) >= health:
            lethal += 1
    return lethal


def _trap_lethal_count(
    armor: Item,
    adventurer: Adventurer,
    settings: Settings,
    level_range: tuple[int, int],
    samples: int,
    rng: DeterministicRng,
    config: EngineConfig,
    tables: GameTables,
) -> int:
    low, high = level_range
    level_count = max(1, high - low + 1)
    obstacle_ids = tables.obstacle_ids
    neck = adventurer.equipment.neck
    critical_chance = encounter_critical_chance(
        max(1, adventurer.level), config.critical_hit_level_multiplier
    )
    dodge_chance, stat_reduction = _stat_defenses(
        adventurer, adventurer.stats.intelligence, settings
    )
    base_reduction = clamp_percentage(settings.base_damage_reduction)
    health = max(0, adventurer.health)

    lethal = 0
    for _ in range(samples):
        obstacle_id = obstacle_ids[rng.randrange(len(obstacle_ids))]
        level = low + rng.randrange(level_count)
        if dodge_chance > 0 and rng.random() < dodge_chance:
            continue

        roll = calculate_obstacle_damage(obstacle_id, level, armor, neck, tables)
        damage = roll.critical if rng.random() < critical_chance else roll.base
        if _mitigate(damage, base_reduction, stat_reduction, MIN_OBSTACLE_DAMAGE) >= health:
            lethal += 1
    return lethal


def _percent(lethal: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(lethal / total * 100, 2)


def _compute(
    adventurer: Adventurer,
    settings: Settings,
    samples_per_slot: int,
    config: EngineConfig,
    tables: GameTables,
) -> ExplorationLethalChances:
    level_range = encounter_level_range(max(1, adventurer.level))
    seed = (
        adventurer.xp
        + adventurer.health
        + adventurer.item_specials_seed
        + level_range[0]
        + level_range[1]
        + settings.base_damage_reduction
    )
    rng = DeterministicRng(seed)
    total = samples_per_slot * len(EXPLORATION_SLOT_ORDER)

    ambush = sum(
        _ambush_lethal_count(
            adventurer.equipment.get(slot),
            adventurer,
            settings,
            level_range,
            samples_per_slot,
            rng,
            config,
            tables,
        )
        for slot in EXPLORATION_SLOT_ORDER
    )
    trap = sum(
        _trap_lethal_count(
            adventurer.equipment.get(slot),
            adventurer,
            settings,
            level_range,
            samples_per_slot,
            rng,
            config,
            tables,
        )
        for slot in EXPLORATION_SLOT_ORDER
    )
    result = ExplorationLethalChances(
        ambush_lethal_percent=_percent(ambush, total),
        trap_lethal_percent=_percent(trap, total),
    )
    log_debug(
        "Computed exploration lethal chances",
        {
            "seed": seed,
            "levels": level_range,
            "ambush": result.ambush_lethal_percent,
            "trap": result.trap_lethal_percent,
        },
    )
    return result


def compute_exploration_lethal_chances(
    adventurer: Adventurer | None,
    settings: Settings | None,
    samples_per_slot: int | None = None,
    config: EngineConfig | None = None,
    tables: GameTables | None = None,
    error_handler: ErrorHandler | None = None,
) -> ExplorationLethalChances:
    """
    Estimates the chance that the next ambush or trap is lethal.

    Args:
        adventurer (Adventurer | None): The adventurer snapshot.
        settings (Settings | None): Game settings, decide dodge or reduction.
        samples_per_slot (int | None): Samples per armor slot, the engine
            config decides when None.
        config (EngineConfig | None): Engine configuration.
        tables (GameTables | None): Lookup tables.
        error_handler (ErrorHandler | None): Records a failed estimate, a
            private handler is used when None.

    Returns:
        ExplorationLethalChances: Both percentages rounded to two decimals,
            zero when an input is missing or the estimate failed.

    """
    if adventurer is None or settings is None:
        return NO_RISK

    config = config or EngineConfig()
    tables = tables or default_tables()
    samples = samples_per_slot or config.exploration_samples_per_slot
    error_handler = error_handler or ErrorHandler()
    return error_handler.safe_execute(
        lambda: _compute(adventurer, settings, samples, config, tables),
        NO_RISK,
        "Failed to compute exploration lethal chances",
        ErrorSeverity.MEDIUM,
        {"xp": adventurer.xp, "health": adventurer.health},
    )
