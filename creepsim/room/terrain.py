"""Terrain — the immutable cell-kind grid of a room.

Terrain arrives as a 2500-character string of digits (``'0'`` plain,
``'1'`` wall, ``'2'`` swamp) and is decoded once at load time into a
read-only ``uint8`` NumPy grid.  Swamp is kept for display and
inspection but costs the same to cross as plain ground.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

import numpy as np
from numpy.typing import NDArray

from creepsim.room.errors import RoomLoadError
from creepsim.room.grid import AREA, HEIGHT, WIDTH, in_bounds


class TerrainType(IntEnum):
    """Kind of ground a cell is made of."""

    PLAIN = 0
    WALL = 1
    SWAMP = 2


_VALID_CODES = frozenset("012")
_VALID_KINDS = [int(kind) for kind in TerrainType]


@dataclass(frozen=True, eq=False)
class Terrain:
    """Read-only terrain grid for one room.

    Attributes:
        cells: ``(HEIGHT, WIDTH)`` array of ``TerrainType`` values,
            indexed ``cells[y, x]``.  A private, non-writeable copy of
            the array the terrain was built from.
    """

    cells: NDArray[np.uint8]

    def __post_init__(self) -> None:
        raw = np.asarray(self.cells)
        if raw.shape != (HEIGHT, WIDTH):
            msg = f"terrain shape {raw.shape} != {(HEIGHT, WIDTH)}"
            raise RoomLoadError(msg)
        known = np.isin(raw, _VALID_KINDS)
        if not known.all():
            bad = sorted({v.item() for v in np.unique(raw[~known])})
            msg = f"terrain contains unknown kinds: {bad!r}"
            raise RoomLoadError(msg)
        cells = np.array(raw, dtype=np.uint8)
        cells.flags.writeable = False
        object.__setattr__(self, "cells", cells)

    @classmethod
    def filled(cls, kind: TerrainType = TerrainType.PLAIN) -> Terrain:
        """Return a terrain where every cell is ``kind``."""
        return cls(np.full((HEIGHT, WIDTH), int(kind), dtype=np.uint8))

    def kind_at(self, x: int, y: int) -> TerrainType:
        """Return the terrain kind at ``(x, y)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {WIDTH}x{HEIGHT}"
            raise IndexError(msg)
        return TerrainType(int(self.cells[y, x]))

    def is_walkable(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` is in bounds and not a wall."""
        return in_bounds(x, y) and self.cells[y, x] != TerrainType.WALL

    def with_cells(self, positions: list[tuple[int, int]], kind: TerrainType) -> Terrain:
        """Return a copy of this terrain with ``positions`` set to ``kind``.

        Raises:
            IndexError: If any position is out of bounds.
        """
        cells = self.cells.copy()
        for x, y in positions:
            if not in_bounds(x, y):
                msg = f"({x}, {y}) out of bounds for {WIDTH}x{HEIGHT}"
                raise IndexError(msg)
            cells[y, x] = int(kind)
        return Terrain(cells)

    def encode(self) -> str:
        """Return the digit-string form accepted by ``decode_terrain``."""
        return "".join(str(int(v)) for v in self.cells.ravel())


def decode_terrain(text: str) -> Terrain:
    """Decode an exported terrain string.

    Args:
        text: Exactly ``WIDTH * HEIGHT`` characters, each ``'0'``,
            ``'1'`` or ``'2'``, in row-major order.

    Returns:
        The decoded Terrain.

    Raises:
        RoomLoadError: If the length is wrong or an unknown code appears.
    """
    if len(text) != AREA:
        msg = f"terrain length {len(text)} != {AREA}"
        raise RoomLoadError(msg)
    bad = set(text) - _VALID_CODES
    if bad:
        msg = f"terrain contains unknown codes: {sorted(bad)!r}"
        raise RoomLoadError(msg)

    flat = np.frombuffer(text.encode("ascii"), dtype=np.uint8) - ord("0")
    return Terrain(flat.astype(np.uint8).reshape(HEIGHT, WIDTH))
