"""
Combat outcome simulation.

Reduces many fights into an outcome distribution. Two solvers share the
same ``Encounter``: an exact memoized recursion over (hero hp, beast hp,
round), used when the state space is small, and a seeded Monte Carlo
aggregator used otherwise or when the exact solver runs out of budget.
"""

import math
import sys
from collections import Counter
from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from crawler_sim.combat.resolver import (
    PROBABILITY_EPSILON,
    Encounter,
    build_encounter,
    resolve_encounter,
)
from crawler_sim.core.config import EngineConfig
from crawler_sim.core.content import GameTables
from crawler_sim.core.error_handling import SimulationOverflowError
from crawler_sim.core.logging import log_debug, log_info
from crawler_sim.core.rng import DeterministicRng, seed_from
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings

SimulationMethod = Literal["auto", "exact", "monte_carlo"]


class OutcomeScore(BaseModel):
    """The five numbers loadouts are ranked by."""

    model_config = ConfigDict(frozen=True)

    win_rate: float = Field(default=0.0, ge=0, le=100, description="Win chance in percent.")
    mode_damage_taken: int = Field(default=0, description="Most likely damage taken.")
    mode_damage_dealt: int = Field(default=0, description="Most likely damage dealt.")
    max_damage_taken: int = Field(default=0, description="Worst case damage taken.")
    max_damage_dealt: int = Field(default=0, description="Best case damage dealt.")


class CombatOutcome(BaseModel):
    """Full summary of a simulated fight distribution."""

    model_config = ConfigDict(frozen=True)

    has_outcome: bool = False
    win_rate: float = 0.0
    otk_rate: float = Field(default=0.0, description="Chance in percent to die in the first exchange.")
    mode_damage_dealt: int = 0
    min_damage_dealt: int = 0
    max_damage_dealt: int = 0
    mode_damage_taken: int = 0
    min_damage_taken: int = 0
    max_damage_taken: int = 0
    mode_rounds: int = 0
    min_rounds: int = 0
    max_rounds: int = 0
    computed_via: Literal["exact", "monte_carlo"] | None = None

    @property
    def score(self) -> OutcomeScore:
        return OutcomeScore(
            win_rate=self.win_rate,
            mode_damage_taken=self.mode_damage_taken,
            mode_damage_dealt=self.mode_damage_dealt,
            max_damage_taken=self.max_damage_taken,
            max_damage_dealt=self.max_damage_dealt,
        )


NO_OUTCOME = CombatOutcome()


class SimulationOptions(BaseModel):
    """Per-call simulation switches."""

    model_config = ConfigDict(frozen=True)

    first_strike: bool = Field(
        default=False,
        description="Whether the beast strikes before the first round.",
    )
    method: SimulationMethod | None = Field(
        default=None,
        description="Solver override, the engine config decides when None.",
    )
    samples: int | None = Field(
        default=None,
        description="Monte Carlo sample override.",
        ge=1,
    )
    seed: int | None = Field(
        default=None,
        description="Random seed, derived from the snapshot when None.",
    )
    settings: Settings | None = Field(
        default=None,
        description="Game settings used to mitigate the opening strike.",
    )


# ----------------------------------------------------------------------
# Ranking
# ----------------------------------------------------------------------


def is_better_score(candidate: OutcomeScore, current: OutcomeScore) -> bool:
    """
    Returns True if ``candidate`` strictly outranks ``current``.

    Higher win rate first, then lower modal damage taken, higher modal damage
    dealt, lower worst-case damage taken and finally higher best-case damage
    dealt.
    """
    if candidate.win_rate != current.win_rate:
        return candidate.win_rate > current.win_rate
    if candidate.mode_damage_taken != current.mode_damage_taken:
        return candidate.mode_damage_taken < current.mode_damage_taken
    if candidate.mode_damage_dealt != current.mode_damage_dealt:
        return candidate.mode_damage_dealt > current.mode_damage_dealt
    if candidate.max_damage_taken != current.max_damage_taken:
        return candidate.max_damage_taken < current.max_damage_taken
    if candidate.max_damage_dealt != current.max_damage_dealt:
        return candidate.max_damage_dealt > current.max_damage_dealt
    return False


def is_perfect_score(score: OutcomeScore) -> bool:
    return score.win_rate >= 100


# ----------------------------------------------------------------------
# Distribution helpers
# ----------------------------------------------------------------------


def distribution_stats(distribution: dict[int, float]) -> tuple[int, int, int]:
    """
    Returns (min, mode, max) of a value -> weight mapping.

    Ties on the mode go to the lowest value.
    """
    low = math.inf
    high = 0
    mode = 0
    best = 0.0
    for value, weight in distribution.items():
        if weight <= PROBABILITY_EPSILON:
            continue
        low = min(low, value)
        high = max(high, value)
        if weight > best + PROBABILITY_EPSILON or (
            abs(weight - best) <= PROBABILITY_EPSILON and value < mode
        ):
            best = weight
            mode = value
    return (
        int(low) if low != math.inf else 0,
        mode if best > PROBABILITY_EPSILON else 0,
        int(high),
    )


def _add(distribution: dict[int, float], value: int, weight: float) -> None:
    if weight <= PROBABILITY_EPSILON:
        return
    distribution[value] = distribution.get(value, 0.0) + weight


def _combine(
    target: dict[int, float], source: dict[int, float], offset: int, weight: float
) -> None:
    if weight <= PROBABILITY_EPSILON:
        return
    for value, probability in source.items():
        _add(target, value + offset, probability * weight)


def _build_outcome(
    win: float,
    otk: float,
    total: float,
    dealt: dict[int, float],
    taken: dict[int, float],
    rounds: dict[int, float],
    via: Literal["exact", "monte_carlo"],
) -> CombatOutcome:
    if total <= PROBABILITY_EPSILON:
        return NO_OUTCOME
    min_dealt, mode_dealt, max_dealt = distribution_stats(dealt)
    min_taken, mode_taken, max_taken = distribution_stats(taken)
    min_rounds, mode_rounds, max_rounds = distribution_stats(rounds)
    return CombatOutcome(
        has_outcome=True,
        win_rate=round(win / total * 100, 1),
        otk_rate=round(otk / total * 100, 1),
        mode_damage_dealt=mode_dealt,
        min_damage_dealt=min_dealt,
        max_damage_dealt=max_dealt,
        mode_damage_taken=mode_taken,
        min_damage_taken=min_taken,
        max_damage_taken=max_taken,
        mode_rounds=mode_rounds,
        min_rounds=min_rounds,
        max_rounds=max_rounds,
        computed_via=via,
    )


# ----------------------------------------------------------------------
# Monte Carlo
# ----------------------------------------------------------------------


def monte_carlo_outcome(encounter: Encounter, samples: int, seed: int) -> CombatOutcome:
    """
    Samples ``samples`` fights from a seeded stream and summarizes them.

    Args:
        encounter (Encounter): The precomputed fight.
        samples (int): Number of fights to play.
        seed (int): Random seed; equal seeds give equal outcomes.

    Returns:
        CombatOutcome: The summarized distribution.

    """
    rng = DeterministicRng(seed)
    iterations = max(1, int(samples))
    wins = 0
    otks = 0
    dealt: Counter[int] = Counter()
    taken: Counter[int] = Counter()
    rounds: Counter[int] = Counter()

    for _ in range(iterations):
        sample = resolve_encounter(encounter, rng)
        if sample.won:
            wins += 1
        elif sample.one_turn_kill:
            otks += 1
        dealt[sample.damage_dealt] += 1
        taken[sample.damage_taken] += 1
        rounds[sample.rounds] += 1

    return _build_outcome(
        wins, otks, iterations, dict(dealt), dict(taken), dict(rounds), "monte_carlo"
    )


# ----------------------------------------------------------------------
# Exact solver
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class ComplexityEstimate:
    hero_states: int
    beast_states: int
    branching_factor: int
    estimated_transitions: int
    weighted_complexity: int

    def exceeds(self, budget: int) -> bool:
        if self.weighted_complexity >= budget or self.estimated_transitions >= budget:
            return True
        extreme = budget / 4
        return self.hero_states >= extreme or self.beast_states >= extreme


def estimate_complexity(encounter: Encounter) -> ComplexityEstimate:
    """Rough upper bound on the states the exact solver will visit."""
    min_beast = max(1, encounter.min_beast_damage)
    min_hero = max(1, encounter.min_hero_damage)
    hero_states = max(1, min(encounter.max_rounds, math.ceil(encounter.hero_hp / min_beast)))
    beast_states = max(1, math.ceil(encounter.beast_hp / min_hero))
    branching = max(1, len(encounter.hero_options) * len(encounter.beast_options))
    transitions = hero_states * beast_states * branching
    rounds = max(1, min(encounter.max_rounds, hero_states + beast_states))
    weighted = round(transitions * max(1.0, math.log2(rounds + 1)))
    return ComplexityEstimate(hero_states, beast_states, branching, transitions, weighted)


@dataclass
class _StateOutcome:
    win: float = 0.0
    lethal: float = 0.0
    dealt: dict[int, float] = field(default_factory=dict)
    taken: dict[int, float] = field(default_factory=dict)
    rounds: dict[int, float] = field(default_factory=dict)


def _terminal(won: bool) -> _StateOutcome:
    return _StateOutcome(
        win=1.0 if won else 0.0,
        lethal=0.0 if won else 1.0,
        dealt={0: 1.0},
        taken={0: 1.0},
        rounds={0: 1.0},
    )


class _ExactSolver:
    def __init__(self, encounter: Encounter, max_state_visits: int) -> None:
        self.encounter = encounter
        self.max_state_visits = max_state_visits
        self.memo: dict[tuple[int, int, int], _StateOutcome] = {}
        self.visited = 0

    def solve(self, hero_hp: int, beast_hp: int, rounds: int) -> _StateOutcome:
        if hero_hp <= 0:
            return _terminal(False)
        if beast_hp <= 0:
            return _terminal(True)
        if rounds >= self.encounter.max_rounds:
            return _terminal(False)

        key = (hero_hp, beast_hp, rounds)
        cached = self.memo.get(key)
        if cached is not None:
            return cached

        self.visited += 1
        if self.visited > self.max_state_visits:
            raise SimulationOverflowError(
                f"Combat simulation visited more than {self.max_state_visits} states."
            )

        out = _StateOutcome()
        for hero_damage, hero_p in self.encounter.hero_options:
            if hero_p <= PROBABILITY_EPSILON:
                continue
            remaining_beast = beast_hp - hero_damage
            if remaining_beast <= 0:
                out.win += hero_p
                _add(out.dealt, hero_damage, hero_p)
                _add(out.taken, 0, hero_p)
                _add(out.rounds, rounds + 1, hero_p)
                continue

            for beast_damage, beast_p in self.encounter.beast_options:
                p = hero_p * beast_p
                if p <= PROBABILITY_EPSILON:
                    continue
                remaining_hero = hero_hp - beast_damage
                if remaining_hero <= 0 or rounds + 1 >= self.encounter.max_rounds:
                    out.lethal += p
                    _add(out.dealt, hero_damage, p)
                    _add(out.taken, beast_damage, p)
                    _add(out.rounds, rounds + 1, p)
                    continue

                nxt = self.solve(remaining_hero, remaining_beast, rounds + 1)
                out.win += p * nxt.win
                out.lethal += p * nxt.lethal
                _combine(out.dealt, nxt.dealt, hero_damage, p)
                _combine(out.taken, nxt.taken, beast_damage, p)
                _combine(out.rounds, nxt.rounds, 0, p)

        self.memo[key] = out
        return out

    def solve_with_opening(self) -> _StateOutcome:
        encounter = self.encounter
        out = _StateOutcome()
        for damage, p in encounter.opening_options:
            if p <= PROBABILITY_EPSILON:
                continue
            remaining = encounter.hero_hp - damage
            if remaining <= 0:
                out.lethal += p
                _add(out.dealt, 0, p)
                _add(out.taken, damage, p)
                _add(out.rounds, 0, p)
                continue
            nxt = self.solve(remaining, encounter.beast_hp, 0)
            out.win += p * nxt.win
            out.lethal += p * nxt.lethal
            _combine(out.dealt, nxt.dealt, 0, p)
            _combine(out.taken, nxt.taken, damage, p)
            _combine(out.rounds, nxt.rounds, 0, p)
        return out

    def otk_probability(self) -> float:
        """Chance to die before or right after the adventurer's first swing."""
        encounter = self.encounter

        def lethal_chance(hero_hp: int) -> float:
            return sum(p for d, p in encounter.beast_options if d >= hero_hp)

        def first_exchange(hero_hp: int) -> float:
            chance = lethal_chance(hero_hp)
            return sum(
                p * chance
                for d, p in encounter.hero_options
                if encounter.beast_hp - d > 0
            )

        if not encounter.first_strike:
            return first_exchange(encounter.hero_hp)

        probability = 0.0
        for damage, p in encounter.opening_options:
            remaining = encounter.hero_hp - damage
            if remaining <= 0:
                probability += p
            else:
                probability += p * first_exchange(remaining)
        return probability


def exact_outcome(encounter: Encounter, max_state_visits: int = 80_000) -> CombatOutcome:
    """
    Computes the fight distribution exactly.

    Raises:
        SimulationOverflowError: If more than ``max_state_visits`` states are needed.
        RecursionError: If the fight is too long for the interpreter stack.

    """
    solver = _ExactSolver(encounter, max_state_visits)
    root = solver.solve_with_opening() if encounter.first_strike else solver.solve(
        encounter.hero_hp, encounter.beast_hp, 0
    )
    return _build_outcome(
        root.win,
        solver.otk_probability(),
        root.win + root.lethal,
        root.dealt,
        root.taken,
        root.rounds,
        "exact",
    )


# ----------------------------------------------------------------------
# Entry points
# ----------------------------------------------------------------------


def snapshot_seed(adventurer: Adventurer, beast: Beast, first_strike: bool) -> int:
    """Seed derived from the snapshot so equal inputs replay equal fights."""
    return seed_from(adventurer.model_dump_json(), beast.model_dump_json(), first_strike)


def _simulate_encounter(
    encounter: Encounter,
    method: SimulationMethod,
    samples: int,
    seed: int,
    max_state_visits: int,
) -> CombatOutcome:
    if method == "monte_carlo":
        return monte_carlo_outcome(encounter, samples, seed)

    if method == "auto":
        estimate = estimate_complexity(encounter)
        if estimate.exceeds(max_state_visits):
            log_debug(
                "Exact combat simulation skipped due to estimated complexity",
                {
                    "hero_states": estimate.hero_states,
                    "beast_states": estimate.beast_states,
                    "weighted_complexity": estimate.weighted_complexity,
                },
            )
            return monte_carlo_outcome(encounter, samples, seed)

    recursion_limit = sys.getrecursionlimit()
    needed = encounter.max_rounds * 2 + 200
    try:
        if recursion_limit < needed:
            sys.setrecursionlimit(needed)
        return exact_outcome(encounter, max_state_visits)
    except (SimulationOverflowError, RecursionError) as e:
        log_info(
            "Exact combat simulation exceeded its budget, using Monte Carlo",
            {"reason": type(e).__name__},
        )
        return monte_carlo_outcome(encounter, samples, seed)
    finally:
        if recursion_limit < needed:
            sys.setrecursionlimit(recursion_limit)


def simulate_combat(
    adventurer: Adventurer | None,
    beast: Beast | None,
    options: SimulationOptions | None = None,
    config: EngineConfig | None = None,
    tables: GameTables | None = None,
) -> CombatOutcome:
    """
    Simulates a fight and returns its full outcome distribution.

    Args:
        adventurer (Adventurer | None): The adventurer snapshot.
        beast (Beast | None): The beast being fought.
        options (SimulationOptions | None): Opening strike, solver and seed.
        config (EngineConfig | None): Engine configuration.
        tables (GameTables | None): Lookup tables.

    Returns:
        CombatOutcome: The outcome, ``has_outcome`` is False when no fight is possible.

    """
    if adventurer is None or beast is None:
        return NO_OUTCOME
    options = options or SimulationOptions()
    config = config or EngineConfig()
    encounter = build_encounter(
        adventurer,
        beast,
        first_strike=options.first_strike,
        settings=options.settings,
        max_rounds=config.max_rounds,
        tables=tables,
    )
    if encounter is None:
        return NO_OUTCOME

    seed = options.seed
    if seed is None:
        seed = snapshot_seed(adventurer, beast, options.first_strike)
    return _simulate_encounter(
        encounter,
        options.method or config.simulation_method,
        options.samples or config.monte_carlo_samples,
        seed,
        config.max_exact_state_visits,
    )


def simulate_combat_outcome(
    adventurer: Adventurer | None,
    beast: Beast | None,
    options: SimulationOptions | None = None,
    config: EngineConfig | None = None,
    tables: GameTables | None = None,
) -> OutcomeScore:
    """Simulates a fight and returns the score loadouts are ranked by."""
    return simulate_combat(adventurer, beast, options, config, tables).score
