"""Pydantic schemas for tile coordinates and grid snapshots.

``WorldPoint`` is the value passed between the pathfinder, the follower and
the session. ``CollisionGridState`` mirrors the dataclass in ``grid.py`` but
stays serializable so a scene can be saved alongside a scenario or a debug
dump.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:  # pragma: no cover
    from .grid import CollisionGrid


class WorldPoint(BaseModel):
    """A tile in world coordinates on a given plane."""

    model_config = ConfigDict(frozen=True)

    x: int
    y: int
    plane: int = Field(0, description="Vertical level; paths never cross planes")

    def distance_to(self, other: "WorldPoint") -> int:
        """Chebyshev distance, or ``sys.maxsize`` when the planes differ."""
        if self.plane != other.plane:
            return sys.maxsize
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def offset(self, dx: int, dy: int) -> "WorldPoint":
        return WorldPoint(x=self.x + dx, y=self.y + dy, plane=self.plane)

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.plane})"


class TileFlags(BaseModel):
    """Non-zero flag bitmask for one scene tile."""

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    flags: int = Field(..., description="MovementFlag bitmask")


class CollisionGridState(BaseModel):
    """Sparse, serializable snapshot of a ``CollisionGrid``."""

    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    base_x: int = 0
    base_y: int = 0
    plane: int = 0
    tiles: List[TileFlags] = Field(
        default_factory=list,
        description="Tiles with a non-zero bitmask; every other tile is clear",
    )

    @classmethod
    def from_grid(cls, grid: "CollisionGrid") -> "CollisionGridState":
        tiles = [
            TileFlags(x=x, y=y, flags=value)
            for x, column in enumerate(grid.flags)
            for y, value in enumerate(column)
            if value
        ]
        return cls(
            width=grid.width,
            height=grid.height,
            base_x=grid.base_x,
            base_y=grid.base_y,
            plane=grid.plane,
            tiles=tiles,
        )

    def to_grid(self) -> "CollisionGrid":
        from .grid import CollisionGrid

        columns = [[0] * self.height for _ in range(self.width)]
        for tile in self.tiles:
            if tile.x >= self.width or tile.y >= self.height:
                raise ValueError(f"Flag entry ({tile.x}, {tile.y}) lies outside the grid")
            columns[tile.x][tile.y] |= tile.flags
        return CollisionGrid.from_columns(
            columns, base_x=self.base_x, base_y=self.base_y, plane=self.plane
        )
