"""
Snapshots read from disk.

A snapshot bundles everything one request needs: the adventurer, the items
in the bag, the beast being fought and the game settings.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from crawler_sim.entities.adventurer import Adventurer
from crawler_sim.entities.encounter import Beast, Settings
from crawler_sim.items.item import Item


class Snapshot(BaseModel):
    """The state a command works on."""

    model_config = ConfigDict(frozen=True)

    adventurer: Adventurer
    bag: list[Item] = Field(default_factory=list)
    beast: Beast | None = None
    settings: Settings | None = None


def load_snapshot(path: Path | str) -> Snapshot:
    """
    Loads a snapshot from a JSON file.

    Args:
        path (Path | str): The JSON file to read.

    Raises:
        ValueError: If the file is missing or does not hold a valid snapshot.

    Returns:
        Snapshot: The validated snapshot.

    """
    filepath = Path(path)
    try:
        if not filepath.is_file():
            raise FileNotFoundError(f"File not found: {filepath}")
        with open(filepath, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected object in {filepath}, got {type(data).__name__}")
        return Snapshot.model_validate(data)
    except (json.JSONDecodeError, FileNotFoundError, ValidationError) as e:
        raise ValueError(f"File {filepath} raised an error: {e}") from e
