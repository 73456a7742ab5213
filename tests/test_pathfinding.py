"""Tests for the breadth-first follower pathfinder."""

from tilechase.config import Config
from tilechase.environment import (
    CollisionGrid,
    MovementFlag,
    SearchOutcome,
    WorldPoint,
    find_next_step,
    grid_from_ascii,
    search,
)


def wp(x: int, y: int, plane: int = 0) -> WorldPoint:
    return WorldPoint(x=x, y=y, plane=plane)


def test_open_grid_first_step_is_a_shortest_move():
    grid = CollisionGrid.open(5)

    step = find_next_step(grid, wp(0, 0), wp(4, 4))

    assert step in (wp(1, 0), wp(0, 1))


def test_each_step_shortens_the_remaining_walk_by_one():
    grid = CollisionGrid.open(12)
    goal = wp(9, 6)
    position = wp(1, 2)

    remaining = len(search(grid, position, goal).path) - 1
    while remaining > 0:
        step = find_next_step(grid, position, goal)
        assert step is not None
        assert abs(step.x - position.x) + abs(step.y - position.y) == 1
        position = step
        new_remaining = len(search(grid, position, goal).path) - 1
        assert new_remaining == remaining - 1
        remaining = new_remaining

    assert position.distance_to(goal) <= 1


def test_already_adjacent_returns_without_expanding():
    grid = CollisionGrid.open(5)
    expanded = []

    result = search(grid, wp(0, 0), wp(1, 1), on_expand=expanded.append)

    assert result.outcome is SearchOutcome.ALREADY_ADJACENT
    assert result.reached
    assert result.first_step is None
    assert result.expanded == 0
    assert expanded == []
    assert find_next_step(grid, wp(0, 0), wp(1, 1)) is None


def test_start_on_goal_counts_as_adjacent():
    grid = CollisionGrid.open(5)

    result = search(grid, wp(2, 2), wp(2, 2))

    assert result.outcome is SearchOutcome.ALREADY_ADJACENT
    assert result.path == [wp(2, 2)]


def test_outgoing_north_wall_is_never_crossed():
    grid = CollisionGrid.open(7).with_flags({(2, 2): MovementFlag.NORTH})

    result = search(grid, wp(2, 2), wp(2, 5))

    assert result.outcome is SearchOutcome.FOUND
    assert result.first_step in (wp(1, 2), wp(3, 2))
    for a, b in zip(result.path, result.path[1:]):
        assert not (a == wp(2, 2) and b == wp(2, 3))


def test_wall_recorded_on_the_far_side_also_blocks():
    # Only the northern tile carries the wall (on its south face).
    grid = CollisionGrid.open(7).with_flags({(2, 3): MovementFlag.SOUTH})

    step = find_next_step(grid, wp(2, 2), wp(2, 5))

    assert step is not None
    assert step != wp(2, 3)


def test_fully_blocked_tiles_are_routed_around():
    grid = grid_from_ascii(
        [
            ".....",
            ".###.",
            ".#...",
            ".###.",
            ".....",
        ]
    )
    # Start inside the pocket at (2, 2); the only exit is east along y=2.
    result = search(grid, wp(2, 2), wp(0, 4))

    assert result.outcome is SearchOutcome.FOUND
    assert result.first_step == wp(3, 2)
    for point in result.path:
        assert not grid.is_fully_blocked(point.x, point.y)


def test_blocked_goal_tile_is_approached_to_adjacency():
    grid = CollisionGrid.open(6).with_flags({(4, 4): MovementFlag.OBJECT})

    result = search(grid, wp(0, 0), wp(4, 4))

    assert result.outcome is SearchOutcome.FOUND
    assert result.path[-1].distance_to(wp(4, 4)) == 1
    assert wp(4, 4) not in result.path


def test_enclosed_goal_yields_no_path():
    grid = grid_from_ascii(
        [
            ".......",
            ".#####.",
            ".#...#.",
            ".#...#.",
            ".#...#.",
            ".#####.",
            ".......",
        ]
    )

    result = search(grid, wp(0, 0), wp(3, 3))

    assert result.outcome is SearchOutcome.NO_PATH
    assert result.first_step is None
    assert result.expanded > 0


def test_depth_bound_on_a_straight_corridor():
    grid = CollisionGrid.open(30, 1)

    # Adjacent to x=21 means reaching x=20: exactly 20 steps.
    assert find_next_step(grid, wp(0, 0), wp(21, 0)) == wp(1, 0)
    # Needs 21 steps: pruned.
    assert find_next_step(grid, wp(0, 0), wp(22, 0)) is None
    assert find_next_step(grid, wp(0, 0), wp(22, 0), max_depth=21) == wp(1, 0)


def test_default_depth_comes_from_config(monkeypatch):
    grid = CollisionGrid.open(30, 1)
    monkeypatch.setattr(Config, "MAX_SEARCH_DEPTH", 21)

    assert find_next_step(grid, wp(0, 0), wp(22, 0)) == wp(1, 0)
    assert search(grid, wp(0, 0), wp(23, 0)).outcome is SearchOutcome.NO_PATH


def test_depth_bound_when_the_goal_is_close_but_walled_off():
    rows = ["..#.."] * 11 + ["....."]
    grid = grid_from_ascii(rows)
    start, goal = wp(0, 11), wp(4, 11)

    assert start.distance_to(goal) == 4
    assert search(grid, start, goal).outcome is SearchOutcome.NO_PATH

    step = find_next_step(grid, start, goal, max_depth=30)
    assert step in (wp(0, 10), wp(1, 11))


def test_unresolvable_points_return_without_searching():
    grid = CollisionGrid.open(10)
    calls = []

    off_scene = search(grid, wp(0, 0), wp(50, 50), on_expand=calls.append)
    other_plane = search(grid, wp(0, 0), wp(5, 5, plane=1), on_expand=calls.append)
    start_off = search(grid, wp(-1, 0), wp(5, 5), on_expand=calls.append)

    assert off_scene.outcome is SearchOutcome.UNRESOLVED
    assert other_plane.outcome is SearchOutcome.UNRESOLVED
    assert start_off.outcome is SearchOutcome.UNRESOLVED
    assert calls == []


def test_world_coordinates_are_mapped_through_the_scene_origin():
    grid = CollisionGrid.open(10, base_x=3200, base_y=3100, plane=1)

    step = find_next_step(grid, wp(3200, 3100, 1), wp(3200, 3105, 1))

    assert step == wp(3200, 3101, 1)


def test_search_is_deterministic():
    grid = grid_from_ascii(
        [
            "........",
            "..##....",
            "...#....",
            "........",
        ]
    )
    results = {find_next_step(grid, wp(0, 0), wp(6, 3)) for _ in range(5)}

    assert len(results) == 1


def test_pathfinder_does_not_mutate_the_grid():
    grid = CollisionGrid.open(6).with_flags({(2, 2): MovementFlag.FULL})
    before = grid.flags

    search(grid, wp(0, 0), wp(5, 5))

    assert grid.flags == before
