"""WorldState — owns all mutable simulation state and the tick transition.

Each tick every creep either walks one cell down the distance field of
its target or, if it is already standing on the target, is retargeted
to another energy source.  Distance fields are cached per target and
shared between creeps heading for the same source.

The world is single-threaded: ``step`` must not be called concurrently
with itself.  Hosts that drive it from several threads must serialise
calls (see ``SimulationDriver``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from loguru import logger

from creepsim.pathing.distance_field import build_distance_field
from creepsim.pathing.movement import step_toward
from creepsim.room.grid import HEIGHT, WIDTH, in_bounds
from creepsim.room.terrain import TerrainType
from creepsim.sim.creep import Creep, Target
from creepsim.sim.energy import EnergyLedger
from creepsim.sim.snapshot import Snapshot

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    import numpy as np
    from numpy.typing import NDArray

    from creepsim.room.room import RoomDescription
    from creepsim.room.terrain import Terrain

DEFAULT_SPAWN = (32, 38)
DEFAULT_CREEP_ID = "creep1"


@dataclass
class DistanceFieldCache:
    """Distance fields keyed by target id.

    Each entry remembers the exact target it was built for; a lookup
    only reuses an entry whose target matches, so a field can never be
    used for a target it was not computed from.

    Attributes:
        terrain: Terrain every field is computed over.
        entries: Target id to ``(target, field)``.  Fields are read-only.
    """

    terrain: Terrain
    entries: dict[str, tuple[Target, NDArray[np.int32]]] = field(
        default_factory=dict,
        repr=False,
    )

    def field_for(self, target: Target) -> NDArray[np.int32]:
        """Return the field for ``target``, building it if needed."""
        cached = self.entries.get(target.id)
        if cached is not None and cached[0] == target:
            return cached[1]

        dist = build_distance_field(self.terrain, target.x, target.y)
        dist.flags.writeable = False
        self.entries[target.id] = (target, dist)
        logger.debug(
            "Built distance field for {} at ({}, {})",
            target.id,
            target.x,
            target.y,
        )
        return dist

    def get(self, target_id: str) -> NDArray[np.int32] | None:
        """Return the cached field for ``target_id`` without building."""
        cached = self.entries.get(target_id)
        return cached[1] if cached is not None else None

    def retain(self, target_ids: Iterable[str]) -> None:
        """Evict every entry whose id is not in ``target_ids``."""
        keep = set(target_ids)
        for target_id in list(self.entries):
            if target_id not in keep:
                del self.entries[target_id]


@dataclass(frozen=True)
class CellInfo:
    """Everything known about one cell, for inspection.

    Attributes:
        x: Column.
        y: Row.
        terrain: Terrain kind of the cell.
        sources: Ids of sources on the cell.
        structures: Ids of structures on the cell.
        controller: Controller id if it sits on the cell.
        creeps: Ids of creeps on the cell.
        distances: Step count to each cached target, by target id.
    """

    x: int
    y: int
    terrain: TerrainType
    sources: tuple[str, ...]
    structures: tuple[str, ...]
    controller: str | None
    creeps: tuple[str, ...]
    distances: Mapping[str, int]


@dataclass
class WorldState:
    """Complete mutable state of one simulated room.

    Attributes:
        room: Static room description.
        energy: Structure energy ledger.
        creeps: All creeps, stepped in list order.
        tick: Number of ticks stepped so far.
        fields: Distance-field cache shared by all creeps.
    """

    room: RoomDescription
    energy: EnergyLedger = field(init=False)
    creeps: list[Creep] = field(default_factory=list)
    tick: int = 0
    fields: DistanceFieldCache = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Seed the energy ledger and field cache from the room."""
        self.energy = EnergyLedger.from_room(self.room)
        self.fields = DistanceFieldCache(terrain=self.room.terrain)
        for creep in self.creeps:
            if creep.target is not None:
                self.fields.field_for(creep.target)

    @classmethod
    def from_room(
        cls,
        room: RoomDescription,
        spawn: tuple[int, int] = DEFAULT_SPAWN,
        creep_id: str = DEFAULT_CREEP_ID,
    ) -> WorldState:
        """Build a world with a single creep at ``spawn``.

        Args:
            room: Validated room description.
            spawn: Starting ``(x, y)`` of the creep.
            creep_id: Id given to the creep.

        Returns:
            A world at tick 0.
        """
        world = cls(room=room)
        world.spawn_creep(creep_id, *spawn)
        logger.info(
            "World {} ready: {} creep(s), {} structure(s)",
            room.name,
            len(world.creeps),
            len(room.structures),
        )
        return world

    @property
    def terrain(self) -> Terrain:
        """Terrain of the room."""
        return self.room.terrain

    def spawn_creep(self, creep_id: str, x: int, y: int) -> Creep:
        """Add a creep targeting the first listed source.

        Args:
            creep_id: Unique creep id.
            x: Starting column.
            y: Starting row.

        Returns:
            The new Creep (also appended to ``self.creeps``).

        Raises:
            ValueError: If ``creep_id`` is already taken.
            IndexError: If ``(x, y)`` is outside the room.
        """
        if any(c.id == creep_id for c in self.creeps):
            msg = f"duplicate creep id {creep_id!r}"
            raise ValueError(msg)
        if not in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {WIDTH}x{HEIGHT}"
            raise IndexError(msg)

        target = None
        if self.room.sources:
            first = self.room.sources[0]
            target = Target(id=first.id, x=first.x, y=first.y)
            self.fields.field_for(target)
        creep = Creep(id=creep_id, x=x, y=y, target=target)
        self.creeps.append(creep)
        return creep

    def step(self) -> Snapshot:
        """Advance the world by exactly one tick.

        Returns:
            Snapshot of the state after the tick.
        """
        self.tick += 1

        for creep in self.creeps:
            if creep.target is None:
                continue
            if creep.at_target:
                self._retarget(creep)
            else:
                dist = self.fields.field_for(creep.target)
                creep.x, creep.y = step_toward(self.terrain, dist, creep.x, creep.y)

        self.fields.retain(c.target.id for c in self.creeps if c.target is not None)
        return Snapshot.from_world(self)

    def snapshot(self) -> Snapshot:
        """Return a snapshot of the current state without stepping."""
        return Snapshot.from_world(self)

    def distance_field(self, target_id: str) -> NDArray[np.int32] | None:
        """Return the cached, read-only distance field for a target."""
        return self.fields.get(target_id)

    def inspect(self, x: int, y: int) -> CellInfo:
        """Describe the cell at ``(x, y)``.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        kind = self.terrain.kind_at(x, y)
        controller = self.room.controller
        return CellInfo(
            x=x,
            y=y,
            terrain=kind,
            sources=tuple(s.id for s in self.room.sources if (s.x, s.y) == (x, y)),
            structures=tuple(
                s.id for s in self.room.structures if (s.x, s.y) == (x, y)
            ),
            controller=controller.id if (controller.x, controller.y) == (x, y) else None,
            creeps=tuple(c.id for c in self.creeps if (c.x, c.y) == (x, y)),
            distances=MappingProxyType(
                {tid: int(entry[1][y, x]) for tid, entry in self.fields.entries.items()},
            ),
        )

    def _retarget(self, creep: Creep) -> None:
        """Route ``creep`` to the first source other than its current one.

        With no alternative source the creep stays parked on its target.
        """
        current = creep.target_id
        for source in self.room.sources:
            if source.id != current:
                creep.target = Target(id=source.id, x=source.x, y=source.y)
                self.fields.field_for(creep.target)
                logger.debug(
                    "Tick {}: {} retargeted {} -> {}",
                    self.tick,
                    creep.id,
                    current,
                    source.id,
                )
                return
