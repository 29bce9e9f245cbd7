"""Greedy descent over a distance field."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from creepsim.room.grid import DIRECTIONS, in_bounds
from creepsim.room.terrain import Terrain, TerrainType


def step_toward(
    terrain: Terrain,
    dist: NDArray[np.int32],
    x: int,
    y: int,
) -> tuple[int, int]:
    """Return the cell a creep at ``(x, y)`` should move to this tick.

    Picks the orthogonal neighbour with the smallest distance strictly
    below the current one.  Neighbours are examined north, east, south,
    west and an exact tie keeps the earlier one.  A creep already on the
    target, on an unreachable cell, or with no downhill neighbour stays
    where it is.

    Args:
        terrain: Room terrain.
        dist: Distance field for the creep's target.
        x: Current column.
        y: Current row.

    Returns:
        The ``(x, y)`` to move to (possibly unchanged).
    """
    here = int(dist[y, x])
    if here <= 0:
        return x, y

    best_x, best_y, best_d = x, y, here
    for dx, dy in DIRECTIONS:
        nx, ny = x + dx, y + dy
        if not in_bounds(nx, ny):
            continue
        if terrain.cells[ny, nx] == TerrainType.WALL:
            continue
        nd = int(dist[ny, nx])
        if 0 <= nd < best_d:
            best_x, best_y, best_d = nx, ny, nd

    return best_x, best_y
