"""
Tilechase - a tile-grid follower for a game client plugin.

An "insurance agent" follower chases the player (or a dropped coin pile)
across a directional collision grid one tile per logical tick, while a small
hook-durability economy decides when the follower is needed.

No host object model required. Collision data, positions and inventory are
injected per tick.
"""

__version__ = "0.1.0"

# Pathfinding and grid
from .environment import (
    CollisionGrid,
    CollisionGridState,
    Direction,
    GridShapeError,
    MovementFlag,
    SearchOutcome,
    SearchResult,
    WorldPoint,
    find_next_step,
    grid_from_ascii,
    render_ascii_window,
    search,
)

# Follower
from .follower import (
    FollowerController,
    FollowerEvent,
    FollowerMotion,
    FollowerState,
    FollowerTickReport,
    PositionPair,
    interpolate,
    to_orientation,
)

# Economy and persistence
from .economy import (
    DurabilityLedger,
    LedgerSnapshot,
    Notice,
    NoticeKind,
    PaymentOutcome,
    PaymentTracker,
)
from .persistence import InMemoryLedgerStore, JsonLedgerStore, LedgerStore

# Session driver and scenarios
from .session import FollowerEnvironment, FollowerSession, OverheadText
from .scenario import ScenarioDefinition, ScenarioLoader, ScriptedEnvironment, load_scenario

__all__ = [
    # Grid
    "CollisionGrid",
    "CollisionGridState",
    "Direction",
    "GridShapeError",
    "MovementFlag",
    "WorldPoint",
    "grid_from_ascii",
    "render_ascii_window",
    # Pathfinding
    "SearchOutcome",
    "SearchResult",
    "find_next_step",
    "search",
    # Follower
    "FollowerController",
    "FollowerEvent",
    "FollowerMotion",
    "FollowerState",
    "FollowerTickReport",
    "PositionPair",
    "interpolate",
    "to_orientation",
    # Economy
    "DurabilityLedger",
    "LedgerSnapshot",
    "Notice",
    "NoticeKind",
    "PaymentOutcome",
    "PaymentTracker",
    # Persistence
    "LedgerStore",
    "InMemoryLedgerStore",
    "JsonLedgerStore",
    # Session
    "FollowerEnvironment",
    "FollowerSession",
    "OverheadText",
    # Scenarios
    "ScenarioDefinition",
    "ScenarioLoader",
    "ScriptedEnvironment",
    "load_scenario",
]
