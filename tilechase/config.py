"""
Tilechase Configuration

Loads configuration from environment variables with sensible defaults.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Pathfinding
    MAX_SEARCH_DEPTH: int = int(os.getenv("MAX_SEARCH_DEPTH", "20"))
    SCENE_SIZE: int = int(os.getenv("SCENE_SIZE", "104"))

    # Follower behaviour
    # Chebyshev distance beyond which the follower snaps next to its goal
    TELEPORT_DISTANCE: int = int(os.getenv("TELEPORT_DISTANCE", "15"))
    FAREWELL_TICKS: int = int(os.getenv("FAREWELL_TICKS", "3"))

    # Tick timing (the host runs logical ticks every 600ms)
    TICK_LENGTH_MS: int = int(os.getenv("TICK_LENGTH_MS", "600"))
    DEFAULT_TICK_COUNT: int = int(os.getenv("DEFAULT_TICK_COUNT", "50"))

    # Hook economy
    HOOK_DURABILITY_TICKS: int = int(os.getenv("HOOK_DURABILITY_TICKS", "60000"))
    REPAIR_COST: int = int(os.getenv("REPAIR_COST", "1000000"))
    PENALTY_PER_SECOND: int = int(os.getenv("PENALTY_PER_SECOND", "100"))
    SAVE_INTERVAL_TICKS: int = int(os.getenv("SAVE_INTERVAL_TICKS", "16"))

    # Ledger persistence (JsonLedgerStore)
    LEDGER_PATH: str = os.getenv("LEDGER_PATH", "tilechase_ledger.json")

    # Project Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    SCENARIOS_DIR: Path = PROJECT_ROOT / "examples" / "scenarios"

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors for unusable values."""
        positive = {
            "MAX_SEARCH_DEPTH": cls.MAX_SEARCH_DEPTH,
            "SCENE_SIZE": cls.SCENE_SIZE,
            "TELEPORT_DISTANCE": cls.TELEPORT_DISTANCE,
            "TICK_LENGTH_MS": cls.TICK_LENGTH_MS,
            "HOOK_DURABILITY_TICKS": cls.HOOK_DURABILITY_TICKS,
            "SAVE_INTERVAL_TICKS": cls.SAVE_INTERVAL_TICKS,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive (got {value})")

        if cls.FAREWELL_TICKS < 0:
            raise ValueError(f"FAREWELL_TICKS cannot be negative (got {cls.FAREWELL_TICKS})")

        if cls.REPAIR_COST < 0 or cls.PENALTY_PER_SECOND < 0:
            raise ValueError("REPAIR_COST and PENALTY_PER_SECOND cannot be negative")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "Tilechase Configuration:",
            f"  Search depth: {cls.MAX_SEARCH_DEPTH} (scene {cls.SCENE_SIZE}x{cls.SCENE_SIZE})",
            f"  Teleport distance: {cls.TELEPORT_DISTANCE}",
            f"  Tick length: {cls.TICK_LENGTH_MS}ms",
            f"  Hook durability: {cls.HOOK_DURABILITY_TICKS} ticks",
            f"  Repair cost: {cls.REPAIR_COST} gp (+{cls.PENALTY_PER_SECOND} gp/s when broken)",
            f"  Ledger: {cls.LEDGER_PATH}",
        ]
        return "\n".join(lines)
