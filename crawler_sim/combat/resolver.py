"""
Combat resolver.

Turns an adventurer and a beast into discrete damage distributions, then
plays a single fight out against a random stream. Both the Monte Carlo
aggregator and the exact solver work from the same ``Encounter``.
"""

from dataclasses import dataclass
from typing import NamedTuple

from crawler_sim.combat.rules import (
    ability_based_damage_reduction,
    ability_based_percentage,
    apply_damage_reduction,
    beast_combat_critical_chance,
    calculate_attack_damage,
    calculate_beast_damage,
    clamp_percentage,
    hero_critical_chance,
    js_round,
)
from crawler_sim.core.constants import COMBAT_TARGET_SLOTS, MIN_BEAST_DAMAGE, StatsMode
from crawler_sim.core.content import GameTables, default_tables
from crawler_sim.core.rng import DeterministicRng
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings

PROBABILITY_EPSILON = 1e-12
DEFAULT_MAX_ROUNDS = 500


class DamageOption(NamedTuple):
    damage: int
    probability: float


class CombatSample(NamedTuple):
    """The result of one simulated fight."""

    won: bool
    one_turn_kill: bool
    damage_dealt: int
    damage_taken: int
    rounds: int


@dataclass(frozen=True)
class Encounter:
    """Everything needed to play a fight, precomputed from the snapshots."""

    hero_options: tuple[DamageOption, ...]
    beast_options: tuple[DamageOption, ...]
    opening_options: tuple[DamageOption, ...]
    hero_hp: int
    beast_hp: int
    first_strike: bool
    max_rounds: int = DEFAULT_MAX_ROUNDS

    @property
    def min_hero_damage(self) -> int:
        return min((o.damage for o in self.hero_options if o.damage > 0), default=0)

    @property
    def min_beast_damage(self) -> int:
        return min((o.damage for o in self.beast_options if o.damage > 0), default=0)


def _aggregate(pairs: list[tuple[int, float]]) -> tuple[DamageOption, ...]:
    totals: dict[int, float] = {}
    for damage, probability in pairs:
        if probability <= PROBABILITY_EPSILON:
            continue
        totals[damage] = totals.get(damage, 0.0) + probability
    return tuple(DamageOption(d, p) for d, p in totals.items())


def hero_damage_options(
    adventurer: Adventurer, beast: Beast, tables: GameTables | None = None
) -> tuple[DamageOption, ...]:
    """Regular and critical hits of the equipped weapon, weighted by luck."""
    roll = calculate_attack_damage(adventurer.equipment.weapon, adventurer, beast, tables)
    critical_chance = hero_critical_chance(adventurer.stats.luck)
    options = _aggregate(
        [(roll.base, 1 - critical_chance), (roll.critical, critical_chance)]
    )
    return options or (DamageOption(roll.base, 1.0),)


def beast_damage_options(
    adventurer: Adventurer, beast: Beast, tables: GameTables | None = None
) -> tuple[DamageOption, ...]:
    """
    Beast hits spread evenly over the five armor slots, regular or critical.
    """
    tables = tables or default_tables()
    critical_chance = beast_combat_critical_chance(adventurer.level)
    slot_weight = 1 / len(COMBAT_TARGET_SLOTS)
    pairs: list[tuple[int, float]] = []
    for slot in COMBAT_TARGET_SLOTS:
        roll = calculate_beast_damage(beast, adventurer, adventurer.equipment.get(slot), tables)
        pairs.append((roll.base, (1 - critical_chance) * slot_weight))
        pairs.append((roll.critical, critical_chance * slot_weight))
    return _aggregate(pairs)


def opening_strike_options(
    adventurer: Adventurer,
    beast_options: tuple[DamageOption, ...],
    settings: Settings | None,
) -> tuple[DamageOption, ...]:
    """
    Damage of the free strike a beast gets when the adventurer changes gear.

    Without settings the strike is unmitigated. With settings, wisdom either
    dodges the strike or reduces it, on top of the base damage reduction.
    """
    if settings is None:
        return beast_options

    wisdom = adventurer.stats.wisdom
    avoid_chance = 0.0
    stat_reduction = 0
    if settings.stats_mode == StatsMode.DODGE:
        avoid_chance = clamp_percentage(ability_based_percentage(adventurer.xp, wisdom)) / 100
    else:
        stat_reduction = clamp_percentage(ability_based_damage_reduction(adventurer.xp, wisdom))

    pairs: list[tuple[int, float]] = [(0, avoid_chance)]
    for option in beast_options:
        damage = apply_damage_reduction(option.damage, settings.base_damage_reduction)
        if stat_reduction > 0:
            damage = apply_damage_reduction(damage, stat_reduction)
        damage = max(MIN_BEAST_DAMAGE, js_round(damage))
        pairs.append((damage, option.probability * (1 - avoid_chance)))
    return _aggregate(pairs)


def build_encounter(
    adventurer: Adventurer,
    beast: Beast,
    first_strike: bool = False,
    settings: Settings | None = None,
    max_rounds: int = DEFAULT_MAX_ROUNDS,
    tables: GameTables | None = None,
) -> Encounter | None:
    """
    Precomputes the damage distributions of a fight.

    Args:
        adventurer (Adventurer): The adventurer snapshot.
        beast (Beast): The beast being fought.
        first_strike (bool): Whether the beast strikes before the first round.
        settings (Settings | None): Game settings used to mitigate the opening strike.
        max_rounds (int): Rounds after which the fight counts as lost.
        tables (GameTables | None): Lookup tables.

    Returns:
        Encounter | None: None when either side is already dead.

    """
    if adventurer.health <= 0 or beast.health <= 0:
        return None

    tables = tables or default_tables()
    hero_options = hero_damage_options(adventurer, beast, tables)
    beast_options = beast_damage_options(adventurer, beast, tables)
    if not hero_options or not beast_options:
        return None

    beast_hp = adventurer.beast_health if adventurer.beast_health > 0 else beast.health
    return Encounter(
        hero_options=hero_options,
        beast_options=beast_options,
        opening_options=opening_strike_options(adventurer, beast_options, settings),
        hero_hp=adventurer.health,
        beast_hp=beast_hp,
        first_strike=first_strike,
        max_rounds=max_rounds,
    )


def sample_damage(options: tuple[DamageOption, ...], rng: DeterministicRng) -> int:
    if len(options) == 1:
        return options[0].damage
    roll = rng.random()
    cumulative = 0.0
    for option in options:
        cumulative += option.probability
        if roll <= cumulative + PROBABILITY_EPSILON:
            return option.damage
    return options[-1].damage


def resolve_encounter(encounter: Encounter, rng: DeterministicRng) -> CombatSample:
    """
    Plays one fight to the end.

    The adventurer attacks first each round unless the beast has the opening
    strike. A fight still running after ``max_rounds`` counts as a loss.
    """
    hero_hp = encounter.hero_hp
    beast_hp = encounter.beast_hp
    rounds = 0
    dealt = 0
    taken = 0
    one_turn_kill = False

    if encounter.first_strike:
        damage = sample_damage(encounter.opening_options, rng)
        taken += damage
        hero_hp -= damage
        if hero_hp <= 0:
            one_turn_kill = True

    while hero_hp > 0 and beast_hp > 0 and rounds < encounter.max_rounds:
        damage = sample_damage(encounter.hero_options, rng)
        dealt += damage
        rounds += 1
        beast_hp -= damage
        if beast_hp <= 0:
            break

        damage = sample_damage(encounter.beast_options, rng)
        taken += damage
        hero_hp -= damage
        if hero_hp <= 0:
            if rounds == 1:
                one_turn_kill = True
            break

    won = hero_hp > 0 and beast_hp <= 0
    return CombatSample(
        won=won,
        one_turn_kill=one_turn_kill and not won,
        damage_dealt=dealt,
        damage_taken=taken,
        rounds=rounds,
    )
