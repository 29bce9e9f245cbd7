"""Distance field — breadth-first step counts toward a target cell.

A distance field is a ``(HEIGHT, WIDTH)`` ``int32`` grid holding, for
every cell, the minimum number of orthogonal steps needed to reach the
target.  ``0`` marks the target itself and ``UNREACHABLE`` (-1) marks
walls and cells cut off from the target.  Movement cost is uniform:
only walls block.
"""

from __future__ import annotations

from collections import deque

import numpy as np
from numpy.typing import NDArray

from creepsim.room.grid import DIRECTIONS, HEIGHT, WIDTH, in_bounds
from creepsim.room.terrain import Terrain, TerrainType

UNREACHABLE = -1


def build_distance_field(terrain: Terrain, tx: int, ty: int) -> NDArray[np.int32]:
    """Compute the step count from every cell to ``(tx, ty)``.

    The target does not need to be validated by the caller: an
    out-of-bounds target, or one sitting on a wall, yields a field that
    is ``UNREACHABLE`` everywhere.

    Args:
        terrain: Room terrain.
        tx: Target column.
        ty: Target row.

    Returns:
        A new ``(HEIGHT, WIDTH)`` int32 array indexed ``[y, x]``.
    """
    dist = np.full((HEIGHT, WIDTH), UNREACHABLE, dtype=np.int32)
    if not in_bounds(tx, ty):
        return dist
    cells = terrain.cells
    if cells[ty, tx] == TerrainType.WALL:
        return dist

    dist[ty, tx] = 0
    frontier: deque[tuple[int, int]] = deque([(tx, ty)])

    while frontier:
        x, y = frontier.popleft()
        d = dist[y, x] + 1
        for dx, dy in DIRECTIONS:
            nx, ny = x + dx, y + dy
            if not in_bounds(nx, ny):
                continue
            # First visit wins: FIFO order guarantees it is the shortest
            if dist[ny, nx] != UNREACHABLE:
                continue
            if cells[ny, nx] == TerrainType.WALL:
                continue
            dist[ny, nx] = d
            frontier.append((nx, ny))

    return dist
