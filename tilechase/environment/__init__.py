"""Tile grid, coordinates and pathfinding for the follower."""

from .schemas import CollisionGridState, TileFlags, WorldPoint
from .grid import (
    SEARCH_ORDER,
    CollisionGrid,
    Direction,
    GridShapeError,
    MovementFlag,
)
from .pathfinding import (
    SearchNode,
    SearchOutcome,
    SearchResult,
    find_next_step,
    search,
)
from .helpers import find_marker, grid_from_ascii, render_ascii_window

__all__ = [
    "WorldPoint",
    "CollisionGridState",
    "TileFlags",
    "SEARCH_ORDER",
    "CollisionGrid",
    "Direction",
    "GridShapeError",
    "MovementFlag",
    "SearchNode",
    "SearchOutcome",
    "SearchResult",
    "find_next_step",
    "search",
    "find_marker",
    "grid_from_ascii",
    "render_ascii_window",
]
