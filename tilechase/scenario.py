"""
Scenario loading for scripted follower runs.

A scenario is a small JSON file describing a map and how the player moves on
it, so the follower and the hook economy can be exercised without a live
game client:
- An ASCII map (``#`` blocked, ``.`` open, ``P`` player start)
- Optional directional walls on individual tiles
- A player path, one scene position per tick (the last one is held)
- Whether the hook is worn, the inventory coin count and starting ledger

Scenario file structure:
```json
{
  "name": "Harbour",
  "description": "...",
  "plane": 0,
  "base": [3200, 3200],
  "map": ["#####", "#P..#", "#####"],
  "walls": [{"tile": [2, 1], "sides": ["east"]}],
  "player_path": [[1, 1], [2, 1]],
  "hook_equipped": true,
  "inventory_coins": 0,
  "ledger": {"wear_ticks": 0, "debt": 0}
}
```

Usage:
    loader = ScenarioLoader()
    scenario = loader.load("harbour")
    environment = ScriptedEnvironment(scenario)
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .config import Config
from .economy import LedgerSnapshot
from .environment import CollisionGrid, WorldPoint, find_marker, grid_from_ascii
from .follower import FollowerTickReport


class WallSpec(BaseModel):
    """Directional blockers on one scene tile."""

    tile: Tuple[int, int]
    sides: List[str] = Field(default_factory=list)


class ScenarioDefinition(BaseModel):
    """Validated contents of a scenario file."""

    name: str
    description: str = ""
    plane: int = 0
    base: Tuple[int, int] = (0, 0)
    map: List[str]
    walls: List[WallSpec] = Field(default_factory=list)
    player_path: List[Tuple[int, int]] = Field(default_factory=list)
    hook_equipped: bool = True
    inventory_coins: int = 0
    ledger: Optional[LedgerSnapshot] = None

    def build_grid(self) -> CollisionGrid:
        return grid_from_ascii(
            self.map,
            walls=[(wall.tile, wall.sides) for wall in self.walls],
            base_x=self.base[0],
            base_y=self.base[1],
            plane=self.plane,
        )


class ScenarioLoader:
    """Load and validate follower scenarios from JSON files.

    Directory structure:
    - Default: {PROJECT_ROOT}/examples/scenarios/
    - Override via constructor: ScenarioLoader(Path("/custom/scenarios"))
    - Scenario files: {scenario_name}.json
    """

    def __init__(self, scenarios_dir: Optional[Path] = None):
        self.scenarios_dir = scenarios_dir or Config.SCENARIOS_DIR

    def load(self, scenario_name: str) -> ScenarioDefinition:
        """Load a scenario by name.

        Raises:
            FileNotFoundError: If scenario file doesn't exist in scenarios_dir
            ValueError: If required fields are missing or the map is malformed
            json.JSONDecodeError: If file contains invalid JSON
        """
        scenario_path = self.scenarios_dir / f"{scenario_name}.json"

        if not scenario_path.exists():
            raise FileNotFoundError(
                f"Scenario '{scenario_name}' not found at {scenario_path}"
            )

        data = json.loads(scenario_path.read_text())
        return self.parse(data)

    def parse(self, data: Dict[str, Any]) -> ScenarioDefinition:
        self._validate_scenario(data)
        scenario = ScenarioDefinition.model_validate(data)

        if not scenario.player_path:
            start = find_marker(scenario.map, "P")
            if start is None:
                raise ValueError("Scenario needs a 'P' on the map or a player_path")
            scenario = scenario.model_copy(update={"player_path": [start]})

        # Build once so map and wall errors surface at load time
        scenario.build_grid()
        return scenario

    def _validate_scenario(self, data: Dict[str, Any]) -> None:
        required = ["name", "map"]
        missing = [field for field in required if field not in data]

        if missing:
            raise ValueError(f"Scenario missing required fields: {missing}")

        if not data["map"]:
            raise ValueError("Scenario map must have at least one row")


class ScriptedEnvironment:
    """A ``FollowerEnvironment`` that replays a scenario's player path.

    Register ``advance`` as a session tick listener to move the player along
    the path after each tick.
    """

    def __init__(self, scenario: ScenarioDefinition):
        self.scenario = scenario
        self.grid = scenario.build_grid()
        self.equipped = scenario.hook_equipped
        self.coins = scenario.inventory_coins
        self._index = 0

    def collision_grid(self) -> Optional[CollisionGrid]:
        return self.grid

    def player_position(self) -> Optional[WorldPoint]:
        if not self.scenario.player_path:
            return None
        x, y = self.scenario.player_path[self._index]
        return self.grid.to_world(x, y)

    def hook_equipped(self) -> bool:
        return self.equipped

    def inventory_coins(self) -> int:
        return self.coins

    def advance(self, tick: int, report: FollowerTickReport) -> None:
        if self._index < len(self.scenario.player_path) - 1:
            self._index += 1


def load_scenario(scenario_name: str) -> ScenarioDefinition:
    """Convenience function to load a scenario from the default directory."""
    loader = ScenarioLoader()
    return loader.load(scenario_name)
