"""
Change scheduler.

Decides when a snapshot is worth recomputing. Each request is reduced to a
structural hash of the fields that can change the outcome; unchanged
requests are skipped, changed ones wait out a debounce window and then run
under a fresh, monotonically increasing run id. Results from any run other
than the latest are dropped.
"""

import asyncio
import hashlib
import time
from concurrent.futures import Executor
from typing import Any, Callable, Generic, Optional, TypeVar

from crawler_sim.core.logging import log_debug
from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings
from crawler_sim.items.item import Item

S = TypeVar("S")
R = TypeVar("R")


def _digest(parts: list[Any]) -> str:
    return hashlib.sha1("|".join(str(p) for p in parts).encode("utf-8")).hexdigest()


def _equipment_parts(adventurer: Adventurer) -> list[str]:
    return [f"{slot.value}={item.id}:{item.level}" for slot, item in adventurer.equipment.items()]


def combat_state_hash(
    adventurer: Adventurer,
    bag: list[Item],
    beast: Beast,
    first_strike: bool = False,
    settings: Settings | None = None,
) -> str:
    """
    Hashes exactly the fields that affect a combat outcome.

    Item xp only matters through the item level, so xp gains that do not
    level an item up hash the same.
    """
    stats = adventurer.stats
    parts: list[Any] = [
        adventurer.health,
        adventurer.level,
        adventurer.beast_health,
        adventurer.item_specials_seed,
        stats.strength,
        stats.wisdom,
        stats.luck,
        *_equipment_parts(adventurer),
        "bag",
        *sorted(f"{item.id}:{item.level}" for item in bag),
        "beast",
        beast.id,
        beast.level,
        beast.health,
        beast.tier,
        beast.special_prefix,
        beast.special_suffix,
        first_strike,
    ]
    if settings is not None:
        parts += [settings.base_damage_reduction, settings.stats_mode.value]
    return _digest(parts)


def exploration_state_hash(adventurer: Adventurer, settings: Settings | None) -> str:
    """Hashes the fields that affect exploration lethal chances."""
    stats = adventurer.stats
    parts: list[Any] = [
        adventurer.health,
        adventurer.xp,
        adventurer.item_specials_seed,
        stats.wisdom,
        stats.intelligence,
        *_equipment_parts(adventurer),
    ]
    if settings is not None:
        parts += [settings.base_damage_reduction, settings.stats_mode.value]
    return _digest(parts)


class ChangeScheduler(Generic[S, R]):
    """
    Debounced, latest-request-wins recomputation of a snapshot.

    Args:
        compute (Callable[[S], R]): The computation to run on a snapshot.
        hasher (Callable[[S], str]): Structural hash of a snapshot.
        debounce_seconds (float): Quiet period before a change is computed.
        clock (Callable[[], float]): Monotonic clock, injectable for tests.

    """

    def __init__(
        self,
        compute: Callable[[S], R],
        hasher: Callable[[S], str],
        debounce_seconds: float = 0.15,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.compute = compute
        self.hasher = hasher
        self.debounce_seconds = debounce_seconds
        self.clock = clock
        self.run_id = 0
        self.result: Optional[R] = None
        self._last_hash: Optional[str] = None
        self._pending: Optional[S] = None
        self._deadline = 0.0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def request(self, snapshot: S) -> Optional[int]:
        """
        Registers a new snapshot.

        Returns:
            Optional[int]: The new run id, or None if the snapshot hashes the
                same as the latest request and that run has not failed.

        """
        key = self.hasher(snapshot)
        if key == self._last_hash:
            return None
        self._last_hash = key
        self.run_id += 1
        self._pending = snapshot
        self._deadline = self.clock() + self.debounce_seconds
        log_debug("Scheduled recomputation", {"run_id": self.run_id})
        return self.run_id

    def take_due(self) -> Optional[tuple[int, S]]:
        """Returns the pending run once its debounce window has elapsed."""
        if self._pending is None or self.clock() < self._deadline:
            return None
        snapshot = self._pending
        self._pending = None
        return self.run_id, snapshot

    def complete(self, run_id: int, result: R) -> bool:
        """
        Applies a result if it belongs to the latest run.

        Returns:
            bool: False when the result is stale and was dropped.

        """
        if run_id != self.run_id:
            log_debug("Dropping stale result", {"run_id": run_id, "current_run_id": self.run_id})
            return False
        self.result = result
        return True

    def fail(self, run_id: int) -> None:
        """
        Marks a run as failed so the same snapshot can be requested again.
        """
        if run_id == self.run_id:
            self._last_hash = None
        log_debug("Recomputation failed", {"run_id": run_id, "current_run_id": self.run_id})

    def _run(self, run_id: int, snapshot: S) -> R:
        try:
            return self.compute(snapshot)
        except Exception:
            self.fail(run_id)
            raise

    def poll(self) -> Optional[R]:
        """Runs the pending computation if it is due and returns its result."""
        due = self.take_due()
        if due is None:
            return None
        run_id, snapshot = due
        result = self._run(run_id, snapshot)
        return result if self.complete(run_id, result) else None

    async def settle(self, executor: Optional[Executor] = None) -> Optional[R]:
        """
        Waits out the debounce window and computes off the event loop.

        Requests arriving while a computation runs start a new run; the
        finished one is then stale and the loop continues with the latest.
        """
        loop = asyncio.get_running_loop()
        while self._pending is not None:
            delay = self._deadline - self.clock()
            if delay > 0:
                await asyncio.sleep(delay)
                continue
            due = self.take_due()
            if due is None:
                continue
            run_id, snapshot = due
            try:
                result = await loop.run_in_executor(executor, self.compute, snapshot)
            except Exception:
                self.fail(run_id)
                raise
            self.complete(run_id, result)
        return self.result
