"""Tick-driven follower that chases a moving goal across a collision grid.

The controller owns the follower's position and is the only writer of it.
``tick()`` runs once per logical tick and commits at most one tile of
movement; ``render_position()`` may be called any number of times between
ticks by a renderer and only reads state.

Lifecycle::

    INACTIVE --goal appears--> ACTIVE --goal satisfied--> DEPARTING --farewell done--> INACTIVE

Position history is a single optional ``PositionPair`` so "previous set but
current missing" cannot be represented.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from .config import Config
from .environment import CollisionGrid, WorldPoint, find_next_step


def _now_ms() -> float:
    return time.monotonic() * 1000.0


# Offsets tried, in order, when placing the follower next to its goal.
SPAWN_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

ORIENTATION_UNITS = 2048


class FollowerState(str, Enum):
    INACTIVE = "inactive"
    ACTIVE = "active"
    DEPARTING = "departing"


class FollowerMotion(str, Enum):
    IDLE = "idle"
    WALKING = "walking"


class FollowerEvent(str, Enum):
    NONE = "none"
    SPAWNED = "spawned"
    TELEPORTED = "teleported"
    STEPPED = "stepped"
    BLOCKED = "blocked"
    HOLDING = "holding"
    DEPARTING = "departing"
    DESPAWNED = "despawned"


@dataclass(frozen=True)
class PositionPair:
    """Last two committed tiles and when the latest one was committed (ms)."""

    previous: WorldPoint
    current: WorldPoint
    committed_at: float

    @classmethod
    def snapped(cls, point: WorldPoint, now: float) -> "PositionPair":
        return cls(previous=point, current=point, committed_at=now)

    def advanced(self, point: WorldPoint, now: float) -> "PositionPair":
        return PositionPair(previous=self.current, current=point, committed_at=now)


@dataclass(frozen=True)
class FollowerTickReport:
    state: FollowerState
    event: FollowerEvent
    position: Optional[WorldPoint] = None
    motion: FollowerMotion = FollowerMotion.IDLE
    facing: Optional[float] = None


def interpolate(
    pair: PositionPair, elapsed_ms: float, tick_length_ms: float
) -> Tuple[float, float]:
    """Linear position between ``pair.previous`` and ``pair.current``.

    Progress is clamped to [0, 1] so a late frame lands exactly on the
    current tile instead of overshooting it.
    """
    if tick_length_ms <= 0:
        progress = 1.0
    else:
        progress = min(max(elapsed_ms / tick_length_ms, 0.0), 1.0)
    start, end = pair.previous, pair.current
    x = start.x + (end.x - start.x) * progress
    y = start.y + (end.y - start.y) * progress
    return x, y


def heading(source: WorldPoint, target: WorldPoint) -> float:
    """Angle in radians from ``source`` to ``target`` (east = 0, north = pi/2)."""
    return math.atan2(target.y - source.y, target.x - source.x)


def to_orientation(theta: float) -> int:
    """Convert a heading to the host's 2048-step orientation (0 = south, clockwise)."""
    return int(1536 - (theta * 1024 / math.pi)) & (ORIENTATION_UNITS - 1)


class FollowerController:
    """Per-tick state machine steering a single follower towards its goal."""

    def __init__(
        self,
        *,
        max_search_depth: Optional[int] = None,
        teleport_distance: Optional[int] = None,
        tick_length_ms: Optional[int] = None,
        farewell_ticks: Optional[int] = None,
        clock: Callable[[], float] = _now_ms,
        pathfinder: Callable[..., Optional[WorldPoint]] = find_next_step,
    ):
        self.max_search_depth = (
            Config.MAX_SEARCH_DEPTH if max_search_depth is None else max_search_depth
        )
        self.teleport_distance = (
            Config.TELEPORT_DISTANCE if teleport_distance is None else teleport_distance
        )
        self.tick_length_ms = Config.TICK_LENGTH_MS if tick_length_ms is None else tick_length_ms
        self.farewell_ticks = Config.FAREWELL_TICKS if farewell_ticks is None else farewell_ticks
        self._clock = clock
        self._pathfinder = pathfinder

        self.state = FollowerState.INACTIVE
        self.motion = FollowerMotion.IDLE
        self.facing: Optional[float] = None
        self._pair: Optional[PositionPair] = None
        self._farewell_remaining = 0

    # ------------------------------------------------------------------
    # Read-only views (safe from the render callback)
    # ------------------------------------------------------------------

    @property
    def positions(self) -> Optional[PositionPair]:
        return self._pair

    @property
    def current_position(self) -> Optional[WorldPoint]:
        return self._pair.current if self._pair else None

    @property
    def previous_position(self) -> Optional[WorldPoint]:
        return self._pair.previous if self._pair else None

    @property
    def last_step_at(self) -> Optional[float]:
        return self._pair.committed_at if self._pair else None

    @property
    def is_active(self) -> bool:
        return self.state is not FollowerState.INACTIVE

    @property
    def orientation(self) -> Optional[int]:
        return None if self.facing is None else to_orientation(self.facing)

    def render_position(self, now: Optional[float] = None) -> Optional[Tuple[float, float]]:
        """Interpolated (x, y) in world tile units, or None when nothing to draw."""
        pair = self._pair
        if pair is None:
            return None
        now = self._clock() if now is None else now
        return interpolate(pair, now - pair.committed_at, self.tick_length_ms)

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------

    def spawn(self, point: WorldPoint, now: Optional[float] = None) -> None:
        """Place the follower at ``point`` (replacing any existing one)."""
        self.despawn()
        self.state = FollowerState.ACTIVE
        self.snap_to(point, now)

    def despawn(self) -> None:
        self.state = FollowerState.INACTIVE
        self.motion = FollowerMotion.IDLE
        self.facing = None
        self._pair = None
        self._farewell_remaining = 0

    def snap_to(self, point: WorldPoint, now: Optional[float] = None) -> None:
        """Jump to ``point`` with no interpolation from the old tile."""
        if not self.is_active:
            return
        now = self._clock() if now is None else now
        self._pair = PositionPair.snapped(point, now)

    def move_to(self, point: WorldPoint, now: Optional[float] = None) -> None:
        """Commit ``point`` as the next tile; renders slide in from the old one."""
        if not self.is_active:
            return
        now = self._clock() if now is None else now
        if self._pair is None:
            self._pair = PositionPair.snapped(point, now)
            return
        self._pair = self._pair.advanced(point, now)

    def face(self, target: WorldPoint) -> None:
        current = self.current_position
        if current is None:
            return
        self.facing = heading(current, target)

    def spawn_tile(self, goal: WorldPoint, grid: Optional[CollisionGrid]) -> WorldPoint:
        """Pick a walkable tile next to ``goal``, defaulting to the west side."""
        fallback = goal.offset(*SPAWN_OFFSETS[0])
        if grid is None:
            return fallback
        for dx, dy in SPAWN_OFFSETS:
            candidate = goal.offset(dx, dy)
            scene = grid.to_scene(candidate)
            if scene is not None and not grid.is_fully_blocked(*scene):
                return candidate
        return fallback

    # ------------------------------------------------------------------
    # Logical tick
    # ------------------------------------------------------------------

    def tick(
        self,
        goal: Optional[WorldPoint],
        grid: Optional[CollisionGrid],
        *,
        goal_satisfied: bool = False,
    ) -> FollowerTickReport:
        """Advance the follower by one logical tick.

        Args:
            goal: Tile to approach (player or task location); None when unknown
            grid: Collision snapshot for the goal's plane; None when unavailable
            goal_satisfied: True once the follower is no longer needed

        Returns:
            FollowerTickReport describing what happened this tick
        """
        now = self._clock()

        if self.state is FollowerState.DEPARTING:
            return self._tick_departing(goal, now)

        if self.state is FollowerState.INACTIVE:
            if goal is None or goal_satisfied:
                return self._report(FollowerEvent.NONE)
            self.spawn(self.spawn_tile(goal, grid), now)
            self.face(goal)
            return self._report(FollowerEvent.SPAWNED)

        if goal_satisfied:
            self.state = FollowerState.DEPARTING
            self._farewell_remaining = self.farewell_ticks
            return self._tick_departing(goal, now, started=True)

        self._hold(now)
        self.motion = FollowerMotion.IDLE
        if goal is None:
            return self._report(FollowerEvent.HOLDING)

        current = self._pair.current
        distance = current.distance_to(goal)

        if distance > self.teleport_distance:
            self.snap_to(self.spawn_tile(goal, grid), now)
            self.face(goal)
            return self._report(FollowerEvent.TELEPORTED)

        if distance <= 1:
            self.face(goal)
            return self._report(FollowerEvent.HOLDING)

        step = None
        if grid is not None:
            step = self._pathfinder(grid, current, goal, max_depth=self.max_search_depth)

        if step is None:
            self.face(goal)
            return self._report(FollowerEvent.BLOCKED)

        self.move_to(step, now)
        self.motion = FollowerMotion.WALKING
        self.facing = heading(self._pair.previous, self._pair.current)
        return self._report(FollowerEvent.STEPPED)

    def _tick_departing(
        self, goal: Optional[WorldPoint], now: float, *, started: bool = False
    ) -> FollowerTickReport:
        if not started:
            self._farewell_remaining -= 1
        if self._farewell_remaining <= 0:
            self.despawn()
            return self._report(FollowerEvent.DESPAWNED)
        self._hold(now)
        self.motion = FollowerMotion.IDLE
        if goal is not None:
            self.face(goal)
        return self._report(FollowerEvent.DEPARTING)

    def _hold(self, now: float) -> None:
        if self._pair is not None:
            self._pair = PositionPair.snapped(self._pair.current, now)

    def _report(self, event: FollowerEvent) -> FollowerTickReport:
        return FollowerTickReport(
            state=self.state,
            event=event,
            position=self.current_position,
            motion=self.motion,
            facing=self.facing,
        )
