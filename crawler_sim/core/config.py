"""
Engine configuration.

All tunables that are policy rather than game rules live here: sample
counts, complexity budgets, parallelism thresholds and debounce windows.
"""

import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

ENV_PREFIX = "CRAWLER_SIM_"


class EngineConfig(BaseModel):
    """Tunable engine parameters."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    monte_carlo_samples: int = Field(
        default=10_000,
        description="Number of fights sampled by the Monte Carlo aggregator.",
        ge=1,
    )
    exploration_samples_per_slot: int = Field(
        default=20_000,
        description="Number of encounters sampled per armor slot during exploration.",
        ge=1,
    )
    max_rounds: int = Field(
        default=500,
        description="Rounds after which an unfinished fight counts as a loss.",
        ge=1,
    )
    max_exact_state_visits: int = Field(
        default=80_000,
        description="State budget for the exact solver before falling back to sampling.",
        ge=1,
    )
    simulation_method: Literal["auto", "exact", "monte_carlo"] = Field(
        default="auto",
        description="Which combat solver to use.",
    )
    parallel_min_selections: int = Field(
        default=64,
        description="Minimum number of loadouts before evaluation is spread over workers.",
        ge=1,
    )
    worker_fraction: float = Field(
        default=0.5,
        description="Fraction of the CPU count used for worker processes.",
        gt=0,
        le=1,
    )
    max_workers: int | None = Field(
        default=None,
        description="Hard cap on worker processes, None to derive it from the CPU count.",
        ge=1,
    )
    debounce_seconds: float = Field(
        default=0.15,
        description="Quiet period before a changed combat snapshot is recomputed.",
        ge=0,
    )
    exploration_debounce_seconds: float = Field(
        default=0.05,
        description="Quiet period before a changed exploration snapshot is recomputed.",
        ge=0,
    )
    critical_hit_level_multiplier: int = Field(
        default=1,
        description="Level multiplier for encounter critical chance.",
        ge=0,
    )
    critical_hit_ambush_multiplier: int = Field(
        default=1,
        description="Level multiplier for ambush critical chance.",
        ge=0,
    )

    def resolve_worker_count(self, cpu_count: int | None = None) -> int:
        """
        Returns the number of worker processes to start.

        Args:
            cpu_count (int | None): Override for ``os.cpu_count()``.

        Returns:
            int: At least one worker.

        """
        cpus = cpu_count if cpu_count is not None else (os.cpu_count() or 1)
        workers = max(1, int(cpus * self.worker_fraction))
        if self.max_workers is not None:
            workers = min(workers, self.max_workers)
        return workers

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "EngineConfig":
        """
        Builds a configuration from ``CRAWLER_SIM_*`` environment variables.

        Unknown variables are ignored; values are validated by pydantic.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls.model_validate(values)


def load_config(path: Path | str) -> EngineConfig:
    """
    Loads an engine configuration from a JSON file.

    Args:
        path (Path | str): The JSON file to read.

    Raises:
        ValueError: If the file is missing or does not hold a valid config.

    Returns:
        EngineConfig: The validated configuration.

    """
    filepath = Path(path)
    try:
        if not filepath.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected object in {filepath}, got {type(data).__name__}")
        return EngineConfig.model_validate(data)
    except (json.JSONDecodeError, FileNotFoundError, ValidationError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e
