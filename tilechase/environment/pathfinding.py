"""Breadth-first follower pathfinding over a directional collision grid.

The follower only ever needs to close to adjacency with its goal (the goal is
usually an occupied player tile) and only ever takes one step per tick, since
the goal may move before the next tick. The search therefore:

- stops at the first dequeued node that is on, or next to, the goal,
- refuses to expand nodes deeper than ``max_depth`` (a far goal is treated
  as unreachable rather than searched for at length),
- reports the first step away from the start instead of the whole route.

Coordinates outside the loaded scene are an expected, transient condition near
region boundaries and produce ``SearchOutcome.UNRESOLVED`` rather than an error.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Deque, List, Optional, Set, Tuple

from ..config import Config
from .grid import SEARCH_ORDER, CollisionGrid
from .schemas import WorldPoint


class SearchOutcome(str, Enum):
    FOUND = "found"
    ALREADY_ADJACENT = "already_adjacent"
    NO_PATH = "no_path"
    UNRESOLVED = "unresolved"


@dataclass
class SearchNode:
    """A tile reached by the search, linked back towards the start."""

    x: int
    y: int
    parent: Optional["SearchNode"] = None
    depth: int = 0

    def child(self, x: int, y: int) -> "SearchNode":
        return SearchNode(x, y, self, self.depth + 1)

    def first_step(self) -> "SearchNode":
        """Walk back to the node whose parent is the root."""
        step = self
        while step.parent is not None and step.parent.parent is not None:
            step = step.parent
        return step

    def trail(self) -> List[Tuple[int, int]]:
        """Scene coordinates from the root to this node, inclusive."""
        coords: List[Tuple[int, int]] = []
        node: Optional[SearchNode] = self
        while node is not None:
            coords.append((node.x, node.y))
            node = node.parent
        coords.reverse()
        return coords


@dataclass
class SearchResult:
    outcome: SearchOutcome
    first_step: Optional[WorldPoint] = None
    path: List[WorldPoint] = field(default_factory=list)
    expanded: int = 0

    @property
    def reached(self) -> bool:
        return self.outcome in (SearchOutcome.FOUND, SearchOutcome.ALREADY_ADJACENT)


def _is_solution(node: SearchNode, goal_x: int, goal_y: int) -> bool:
    if node.x == goal_x and node.y == goal_y:
        return True
    return abs(node.x - goal_x) <= 1 and abs(node.y - goal_y) <= 1


def search(
    grid: CollisionGrid,
    start: WorldPoint,
    goal: WorldPoint,
    *,
    max_depth: Optional[int] = None,
    on_expand: Optional[Callable[[SearchNode], None]] = None,
) -> SearchResult:
    """Search from ``start`` towards ``goal`` and describe what was found.

    ``on_expand`` is called with every node whose neighbours are examined,
    which lets tests and debug views count or trace the work done.
    """
    if max_depth is None:
        max_depth = Config.MAX_SEARCH_DEPTH
    start_scene = grid.to_scene(start)
    goal_scene = grid.to_scene(goal)
    if start_scene is None or goal_scene is None:
        return SearchResult(outcome=SearchOutcome.UNRESOLVED)

    goal_x, goal_y = goal_scene
    root = SearchNode(*start_scene)
    visited: Set[Tuple[int, int]] = {start_scene}
    queue: Deque[SearchNode] = deque([root])
    expanded = 0
    solution: Optional[SearchNode] = None

    while queue:
        current = queue.popleft()

        if _is_solution(current, goal_x, goal_y):
            solution = current
            break

        if current.depth >= max_depth:
            continue

        expanded += 1
        if on_expand is not None:
            on_expand(current)

        for direction in SEARCH_ORDER:
            nx, ny = current.x + direction.dx, current.y + direction.dy
            if not grid.in_bounds(nx, ny):
                continue
            if (nx, ny) in visited:
                continue
            if grid.can_move(current.x, current.y, direction):
                visited.add((nx, ny))
                queue.append(current.child(nx, ny))

    if solution is None:
        return SearchResult(outcome=SearchOutcome.NO_PATH, expanded=expanded)

    path = [grid.to_world(x, y) for x, y in solution.trail()]
    if solution is root:
        return SearchResult(
            outcome=SearchOutcome.ALREADY_ADJACENT, path=path, expanded=expanded
        )

    step = solution.first_step()
    return SearchResult(
        outcome=SearchOutcome.FOUND,
        first_step=grid.to_world(step.x, step.y),
        path=path,
        expanded=expanded,
    )


def find_next_step(
    grid: CollisionGrid,
    start: WorldPoint,
    goal: WorldPoint,
    *,
    max_depth: Optional[int] = None,
) -> Optional[WorldPoint]:
    """Return the first tile of a shortest walk towards ``goal``.

    None covers every case where there is no step to take: the start is
    already next to the goal, no route exists within ``max_depth`` steps, or
    either point is off the loaded scene.
    """
    return search(grid, start, goal, max_depth=max_depth).first_step
