"""
Command line entry point for the crawler simulator.

Reads a JSON snapshot holding the adventurer, the bag, the beast and the
game settings, runs one of the engine operations on it and prints the result
as rich tables:

    crawler-sim combat snapshot.json
    crawler-sim gear snapshot.json --workers 4
    crawler-sim gear snapshot.json --preset metal
    crawler-sim explore snapshot.json
"""

import argparse
import logging
from typing import Optional

from rich.table import Table

from crawler_sim.combat.simulation import CombatOutcome, SimulationOptions, simulate_combat
from crawler_sim.core.config import EngineConfig, load_config
from crawler_sim.core.constants import EQUIPMENT_SLOTS, GearPreset
from crawler_sim.core.content import GameTables, default_tables, load_tables
from crawler_sim.core.logging import log_error, setup_logging
from crawler_sim.core.utils import cprint, crule
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.snapshot import Snapshot, load_snapshot
from crawler_sim.exploration.lethal import compute_exploration_lethal_chances
from crawler_sim.gear.presets import apply_gear_preset
from crawler_sim.gear.search import suggest_best_combat_gear
from crawler_sim.items.loot import special_name
from crawler_sim.workers.pool import WorkerPool


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="crawler-sim",
        description="Combat outcome simulation and gear optimization.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--config", help="JSON engine configuration file.")
    parser.add_argument("--tables", help="JSON lookup tables file.")

    sub = parser.add_subparsers(dest="command", required=True)

    combat = sub.add_parser("combat", help="Simulate the fight against the snapshot beast.")
    combat.add_argument("snapshot", help="Snapshot JSON file.")
    combat.add_argument(
        "--first-strike",
        action="store_true",
        help="The beast strikes before the first round.",
    )
    combat.add_argument(
        "--method",
        choices=["auto", "exact", "monte_carlo"],
        default=None,
        help="Solver override.",
    )

    gear = sub.add_parser("gear", help="Suggest the best loadout against the snapshot beast.")
    gear.add_argument("snapshot", help="Snapshot JSON file.")
    gear.add_argument(
        "--workers",
        type=int,
        default=0,
        help="Worker processes for the loadout search (0 evaluates inline).",
    )
    gear.add_argument(
        "--exhaustive",
        action="store_true",
        help="Score every combination without the single-slot phase.",
    )
    gear.add_argument(
        "--preset",
        choices=[preset.value for preset in GearPreset],
        default=None,
        help="Equip a full armor material set instead of searching.",
    )

    explore = sub.add_parser("explore", help="Estimate exploration lethal chances.")
    explore.add_argument("snapshot", help="Snapshot JSON file.")
    explore.add_argument("--samples", type=int, default=None, help="Samples per armor slot.")
    return parser


def outcome_table(outcome: CombatOutcome) -> Table:
    table = Table(title="Combat outcome", pad_edge=False)
    table.add_column("Metric", style="bold")
    table.add_column("Min", justify="right")
    table.add_column("Mode", justify="right")
    table.add_column("Max", justify="right")
    table.add_row(
        "Damage dealt",
        str(outcome.min_damage_dealt),
        str(outcome.mode_damage_dealt),
        str(outcome.max_damage_dealt),
    )
    table.add_row(
        "Damage taken",
        str(outcome.min_damage_taken),
        str(outcome.mode_damage_taken),
        str(outcome.max_damage_taken),
    )
    table.add_row(
        "Rounds",
        str(outcome.min_rounds),
        str(outcome.mode_rounds),
        str(outcome.max_rounds),
    )
    return table


def equipment_table(title: str, adventurer: Adventurer, tables: GameTables) -> Table:
    table = Table(title=title, pad_edge=False)
    table.add_column("Slot")
    table.add_column("Item")
    table.add_column("Level", justify="right")
    for slot in EQUIPMENT_SLOTS:
        item = adventurer.equipment.get(slot)
        name = "-"
        if not item.is_empty:
            name = tables.type_of(item.id).colorize(
                special_name(item, adventurer.item_specials_seed, tables)
            )
        table.add_row(
            f"{slot.emoji} {slot.display_name}",
            name,
            str(item.level) if not item.is_empty else "",
        )
    return table


def run_combat(
    args: argparse.Namespace, snapshot: Snapshot, config: EngineConfig, tables: GameTables
) -> int:
    if snapshot.beast is None:
        log_error("The snapshot has no beast to fight", {"snapshot": args.snapshot})
        return 1
    options = SimulationOptions(
        first_strike=args.first_strike,
        method=args.method,
        settings=snapshot.settings,
    )
    outcome = simulate_combat(snapshot.adventurer, snapshot.beast, options, config, tables)
    if not outcome.has_outcome:
        cprint("[yellow]No fight: one side is already dead.[/]")
        return 0
    crule(f"Against {snapshot.beast.name or f'beast #{snapshot.beast.id}'}", style="bold green")
    cprint(
        f"Win rate [bold]{outcome.win_rate:.2f}%[/], "
        f"one-turn kill [bold]{outcome.otk_rate:.2f}%[/] "
        f"(computed via {outcome.computed_via})"
    )
    cprint(outcome_table(outcome))
    return 0


def run_gear(
    args: argparse.Namespace, snapshot: Snapshot, config: EngineConfig, tables: GameTables
) -> int:
    if args.preset is not None:
        preset = apply_gear_preset(snapshot.adventurer, snapshot.bag, args.preset, tables)
        if preset is None:
            cprint("[yellow]The preset changes nothing.[/]")
            return 0
        cprint(equipment_table(f"{args.preset.capitalize()} preset", preset.adventurer, tables))
        return 0

    if snapshot.beast is None:
        log_error("The snapshot has no beast to optimize against", {"snapshot": args.snapshot})
        return 1

    pool: Optional[WorkerPool] = None
    if args.workers > 0:
        pool = WorkerPool(max_workers=args.workers, config=config).start()
    try:
        suggestion = suggest_best_combat_gear(
            snapshot.adventurer,
            snapshot.bag,
            snapshot.beast,
            pool=pool,
            config=config,
            tables=tables,
            settings=snapshot.settings,
            exhaustive=args.exhaustive,
        )
    finally:
        if pool is not None:
            pool.shutdown()

    if suggestion is None:
        cprint("[green]The current loadout is already the best.[/]")
        return 0
    changed = ", ".join(slot.display_name for slot in suggestion.changed_slots)
    cprint(f"Change [bold]{changed}[/] for a {suggestion.score.win_rate:.2f}% win rate")
    cprint(equipment_table("Suggested loadout", suggestion.adventurer, tables))
    return 0


def run_explore(
    args: argparse.Namespace, snapshot: Snapshot, config: EngineConfig, tables: GameTables
) -> int:
    chances = compute_exploration_lethal_chances(
        snapshot.adventurer,
        snapshot.settings,
        samples_per_slot=args.samples,
        config=config,
        tables=tables,
    )
    table = Table(title="Exploration risk", pad_edge=False)
    table.add_column("Encounter")
    table.add_column("Lethal chance", justify="right")
    table.add_row("Ambush", f"{chances.ambush_lethal_percent:.2f}%")
    table.add_row("Trap", f"{chances.trap_lethal_percent:.2f}%")
    cprint(table)
    return 0


COMMANDS = {
    "combat": run_combat,
    "gear": run_gear,
    "explore": run_explore,
}


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        config = load_config(args.config) if args.config else EngineConfig.from_env()
        tables = load_tables(args.tables) if args.tables else default_tables()
        snapshot = load_snapshot(args.snapshot)
    except ValueError as e:
        log_error("Could not load input", {"error": e})
        return 2

    return COMMANDS[args.command](args, snapshot, config, tables)


if __name__ == "__main__":
    raise SystemExit(main())
