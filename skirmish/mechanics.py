"""
Deterministic Combat Mechanics.

Provides adjacency, the breadth-first reachability search used for
movement, and attack target selection. Nothing here mutates the grid.
"""

from collections import deque
from typing import Iterator, Optional, Tuple

from skirmish.state import Grid, Pos


# Step priority: up, left, right, down (reading order of the neighbours)
MOVES = [(-1, 0), (0, -1), (0, 1), (1, 0)]


def neighbors(grid: Grid, pos: Pos) -> Iterator[Pos]:
    """Yield in-bounds orthogonal neighbours in step priority order."""
    r, c = pos
    for dr, dc in MOVES:
        npos = (r + dr, c + dc)
        if grid.in_bounds(npos):
            yield npos


def enemy_in_range(grid: Grid, pos: Pos, enemy: int) -> bool:
    """Check if any orthogonal neighbour holds a unit of the enemy faction."""
    return any(grid.kind_at(n) == enemy for n in neighbors(grid, pos))


def find_nearest_target_cell(
    grid: Grid,
    origin: Pos,
    enemy: int
) -> Optional[Tuple[Pos, int]]:
    """
    Level-order BFS over open cells starting at origin.

    Returns (cell, depth) for the first dequeued cell adjacent to an enemy,
    or None if no such cell is reachable. The origin must itself be open.
    """
    if not grid.is_open(origin):
        return None

    queue = deque([(origin, 0)])
    visited = {origin}

    while queue:
        pos, depth = queue.popleft()

        if enemy_in_range(grid, pos, enemy):
            return pos, depth

        for npos in neighbors(grid, pos):
            if npos in visited or not grid.is_open(npos):
                continue
            visited.add(npos)
            queue.append((npos, depth + 1))

    return None


def choose_step(grid: Grid, pos: Pos, enemy: int) -> Optional[Pos]:
    """
    Pick the first step for the unit at pos.

    Each open neighbour roots its own search; the step whose search ends
    with the smallest (depth, target row, target col) wins, and earlier
    directions win exact ties. Returns None when no target is reachable.
    """
    best_key = None
    best_step = None

    for step in neighbors(grid, pos):
        if not grid.is_open(step):
            continue

        found = find_nearest_target_cell(grid, step, enemy)
        if found is None:
            continue

        (target_r, target_c), depth = found
        key = (depth, target_r, target_c)
        if best_key is None or key < best_key:
            best_key = key
            best_step = step

    return best_step


def choose_attack_target(grid: Grid, pos: Pos, enemy: int) -> Optional[Pos]:
    """Adjacent enemy with the fewest hit points, ties in reading order."""
    target = None
    target_hp = None

    # neighbours already come out in reading order, so strict < keeps the first
    for npos in neighbors(grid, pos):
        cell = grid.cell_at(npos)
        if cell.kind != enemy:
            continue
        if target_hp is None or cell.hp < target_hp:
            target = npos
            target_hp = cell.hp

    return target
