"""Directional collision grid for the loaded scene.

The host exposes one flag array per plane. Each entry is a bitmask of
``MovementFlag`` values describing which exits of the tile are walled off and
whether the tile itself is impassable. ``CollisionGrid`` wraps one plane of
that data together with the scene origin so world coordinates can be mapped
onto array indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import List, Optional, Sequence, Tuple

from ..config import Config
from .schemas import WorldPoint


class GridShapeError(ValueError):
    """Raised when a flag array is empty or ragged."""


class MovementFlag(IntFlag):
    """Movement blocker bits, laid out like the host's collision flags."""

    NORTH_WEST = 0x1
    NORTH = 0x2
    NORTH_EAST = 0x4
    EAST = 0x8
    SOUTH_EAST = 0x10
    SOUTH = 0x20
    SOUTH_WEST = 0x40
    WEST = 0x80
    OBJECT = 0x100
    FLOOR_DECORATION = 0x40000
    FLOOR = 0x200000
    FULL = OBJECT | FLOOR_DECORATION | FLOOR


class Direction(Enum):
    """Cardinal moves: (dx, dy, outgoing flag, incoming flag on the neighbour)."""

    NORTH = (0, 1, MovementFlag.NORTH, MovementFlag.SOUTH)
    SOUTH = (0, -1, MovementFlag.SOUTH, MovementFlag.NORTH)
    WEST = (-1, 0, MovementFlag.WEST, MovementFlag.EAST)
    EAST = (1, 0, MovementFlag.EAST, MovementFlag.WEST)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def exit_flag(self) -> MovementFlag:
        return self.value[2]

    @property
    def entry_flag(self) -> MovementFlag:
        return self.value[3]

    @classmethod
    def from_name(cls, name: str) -> "Direction":
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown direction '{name}'") from exc


# Expansion order for the search. Only affects the shape of equal-length paths.
SEARCH_ORDER: Tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.WEST,
    Direction.EAST,
)


@dataclass(frozen=True)
class CollisionGrid:
    """One plane of collision flags, indexed ``flags[x][y]``.

    ``base_x``/``base_y`` are the world coordinates of scene tile (0, 0).
    Instances are treated as read-only snapshots; build a new one each tick.
    """

    flags: Tuple[Tuple[int, ...], ...]
    base_x: int = 0
    base_y: int = 0
    plane: int = 0

    def __post_init__(self) -> None:
        if not self.flags or not self.flags[0]:
            raise GridShapeError("Collision grid needs at least one tile")
        column_height = len(self.flags[0])
        for x, column in enumerate(self.flags):
            if len(column) != column_height:
                raise GridShapeError(
                    f"Column {x} has {len(column)} tiles, expected {column_height}"
                )

    @classmethod
    def from_columns(
        cls,
        columns: Sequence[Sequence[int]],
        *,
        base_x: int = 0,
        base_y: int = 0,
        plane: int = 0,
    ) -> "CollisionGrid":
        """Build a grid from any ``[x][y]`` nested sequence (lists from the host)."""
        return cls(
            flags=tuple(tuple(int(v) for v in column) for column in columns),
            base_x=base_x,
            base_y=base_y,
            plane=plane,
        )

    @classmethod
    def open(
        cls,
        width: Optional[int] = None,
        height: Optional[int] = None,
        *,
        base_x: int = 0,
        base_y: int = 0,
        plane: int = 0,
    ) -> "CollisionGrid":
        """Return a grid with no blockers at all (square ``Config.SCENE_SIZE`` by default)."""
        width = Config.SCENE_SIZE if width is None else width
        height = width if height is None else height
        return cls.from_columns(
            [[0] * height for _ in range(width)],
            base_x=base_x,
            base_y=base_y,
            plane=plane,
        )

    @property
    def width(self) -> int:
        return len(self.flags)

    @property
    def height(self) -> int:
        return len(self.flags[0])

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def flag_at(self, x: int, y: int) -> int:
        return self.flags[x][y]

    def is_fully_blocked(self, x: int, y: int) -> bool:
        return bool(self.flags[x][y] & MovementFlag.FULL)

    def can_move(self, x: int, y: int, direction: Direction) -> bool:
        """Return True when a single step from (x, y) in ``direction`` is legal.

        Both ends are checked: a wall can be recorded on either side of the
        shared edge, and the destination must not be fully blocked. The caller
        is responsible for the bounds check on the destination.
        """
        nx, ny = x + direction.dx, y + direction.dy
        here = self.flags[x][y]
        there = self.flags[nx][ny]
        if here & direction.exit_flag:
            return False
        if there & direction.entry_flag:
            return False
        return not there & MovementFlag.FULL

    def to_scene(self, point: WorldPoint) -> Optional[Tuple[int, int]]:
        """Map a world point to scene indices, or None when it is not loaded."""
        if point.plane != self.plane:
            return None
        x = point.x - self.base_x
        y = point.y - self.base_y
        if not self.in_bounds(x, y):
            return None
        return x, y

    def to_world(self, x: int, y: int) -> WorldPoint:
        return WorldPoint(x=self.base_x + x, y=self.base_y + y, plane=self.plane)

    def with_flags(self, updates: dict[Tuple[int, int], int]) -> "CollisionGrid":
        """Return a copy with the given scene tiles' flags OR-ed in."""
        columns: List[List[int]] = [list(column) for column in self.flags]
        for (x, y), flag in updates.items():
            columns[x][y] |= int(flag)
        return CollisionGrid.from_columns(
            columns, base_x=self.base_x, base_y=self.base_y, plane=self.plane
        )
