"""Grid geometry — fixed 50x50 room addressing.

Every room is a square of ``WIDTH`` x ``HEIGHT`` cells.  Arrays that
describe a room (terrain, distance fields) are stored as NumPy grids of
shape ``(HEIGHT, WIDTH)`` and indexed ``grid[y, x]``; the linear index
``y * WIDTH + x`` matches the flattened layout of those grids and of the
exported terrain string.
"""

from __future__ import annotations

WIDTH = 50
HEIGHT = 50
AREA = WIDTH * HEIGHT

# Orthogonal offsets in examination order: north, east, south, west
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (0, -1),
    (1, 0),
    (0, 1),
    (-1, 0),
)


def idx(x: int, y: int) -> int:
    """Return the linear index of cell ``(x, y)``."""
    return y * WIDTH + x


def in_bounds(x: int, y: int) -> bool:
    """Return True if ``(x, y)`` lies inside the room."""
    return 0 <= x < WIDTH and 0 <= y < HEIGHT


def neighbours(x: int, y: int) -> list[tuple[int, int]]:
    """Return the in-bounds orthogonal neighbours of ``(x, y)``.

    Neighbours are listed north, east, south, west; out-of-bounds
    positions are skipped.

    Args:
        x: Column index.
        y: Row index.

    Returns:
        List of ``(x, y)`` tuples.
    """
    result: list[tuple[int, int]] = []
    for dx, dy in DIRECTIONS:
        nx, ny = x + dx, y + dy
        if in_bounds(nx, ny):
            result.append((nx, ny))
    return result
