"""Utilities for building and inspecting collision grids."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .grid import CollisionGrid, Direction, MovementFlag
from .schemas import WorldPoint


_BLOCKED_CHARS = {"#"}
_OPEN_CHARS = {".", " ", "P", "A", "$"}


def grid_from_ascii(
    rows: Sequence[str],
    *,
    walls: Optional[Iterable[Tuple[Tuple[int, int], Iterable[str]]]] = None,
    base_x: int = 0,
    base_y: int = 0,
    plane: int = 0,
) -> CollisionGrid:
    """Build a ``CollisionGrid`` from a text map.

    The first row is the northernmost (highest ``y``), matching how maps are
    usually drawn. ``#`` is a fully blocked tile; ``.``, space and the marker
    letters ``P``, ``A`` and ``$`` are open. ``walls`` adds directional blockers
    as ``((x, y), ["north", "east"])`` pairs in scene coordinates; each side is
    only recorded on the tile it is listed for.
    """
    if not rows:
        raise ValueError("ASCII map must have at least one row")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError("ASCII map rows must all have the same length")

    height = len(rows)
    columns: List[List[int]] = [[0] * height for _ in range(width)]
    for row_index, row in enumerate(rows):
        y = height - 1 - row_index
        for x, char in enumerate(row):
            if char in _BLOCKED_CHARS:
                columns[x][y] = int(MovementFlag.FULL)
            elif char not in _OPEN_CHARS:
                raise ValueError(f"Unknown map character {char!r} at ({x}, {y})")

    for (x, y), sides in walls or ():
        if not (0 <= x < width and 0 <= y < height):
            raise ValueError(f"Wall tile ({x}, {y}) lies outside the map")
        for side in sides:
            columns[x][y] |= int(Direction.from_name(side).exit_flag)

    return CollisionGrid.from_columns(columns, base_x=base_x, base_y=base_y, plane=plane)


def find_marker(rows: Sequence[str], marker: str) -> Optional[Tuple[int, int]]:
    """Return the scene (x, y) of the first ``marker`` character in a text map."""
    height = len(rows)
    for row_index, row in enumerate(rows):
        x = row.find(marker)
        if x != -1:
            return x, height - 1 - row_index
    return None


_DEFAULT_MARKER_SYMBOLS: Dict[str, str] = {
    "player": "P ",
    "follower": "A ",
    "payment": "$ ",
    "path": "· ",
}


def render_ascii_window(
    grid: CollisionGrid,
    center: WorldPoint,
    *,
    radius: int,
    markers: Optional[Mapping[str, Iterable[WorldPoint]]] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> str:
    """Render a square window of the grid around ``center``.

    ``markers`` maps a marker kind (``player``, ``follower``, ``payment``,
    ``path``) to the points drawn with it; earlier kinds in the mapping win
    when two land on the same tile. Fully blocked tiles are ``██``, tiles with
    only directional walls are ``+ ``. Returns an empty string when ``center``
    is off the loaded scene.
    """
    scene_center = grid.to_scene(center)
    if scene_center is None:
        return ""

    radius = max(int(radius), 0)
    mapping = {**_DEFAULT_MARKER_SYMBOLS}
    if symbols:
        mapping.update(symbols)

    placed: Dict[Tuple[int, int], str] = {}
    for kind, points in (markers or {}).items():
        for point in points:
            scene = grid.to_scene(point)
            if scene is not None and scene not in placed:
                placed[scene] = mapping.get(kind, "??")

    cx, cy = scene_center
    min_x = max(0, cx - radius)
    max_x = min(grid.width - 1, cx + radius)
    min_y = max(0, cy - radius)
    max_y = min(grid.height - 1, cy + radius)

    lines: List[str] = []
    for y in range(max_y, min_y - 1, -1):
        row_chars: List[str] = []
        for x in range(min_x, max_x + 1):
            if (x, y) in placed:
                row_chars.append(placed[(x, y)])
            elif grid.is_fully_blocked(x, y):
                row_chars.append("██")
            elif grid.flag_at(x, y):
                row_chars.append("+ ")
            else:
                row_chars.append(". ")
        lines.append("".join(row_chars))

    return "\n".join(lines)
