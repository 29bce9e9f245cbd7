"""Snapshot — an immutable per-tick copy of world state.

Snapshots hold plain values only, so they can be handed to another
thread or serialised without touching the world that produced them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from creepsim.sim.world import WorldState


@dataclass(frozen=True)
class CreepView:
    """Position and target of one creep."""

    id: str
    x: int
    y: int
    target_id: str


@dataclass(frozen=True)
class StructureView:
    """Energy level of one structure."""

    id: str
    energy: int
    energy_capacity: int


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time view of the world.

    Attributes:
        tick: Tick the snapshot was taken after.
        room_name: Name of the simulated room.
        creeps: One entry per creep, in world order.
        structures: One entry per room structure, in export order.
    """

    tick: int
    room_name: str
    creeps: tuple[CreepView, ...]
    structures: tuple[StructureView, ...]

    @classmethod
    def from_world(cls, world: WorldState) -> Snapshot:
        """Copy the current state of ``world``."""
        structures = []
        for s in world.room.structures:
            energy = world.energy.get(s.id)
            structures.append(
                StructureView(
                    id=s.id,
                    energy=energy.energy,
                    energy_capacity=energy.capacity,
                ),
            )
        return cls(
            tick=world.tick,
            room_name=world.room.name,
            creeps=tuple(
                CreepView(id=c.id, x=c.x, y=c.y, target_id=c.target_id)
                for c in world.creeps
            ),
            structures=tuple(structures),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase wire record for this snapshot."""
        return {
            "tick": self.tick,
            "roomName": self.room_name,
            "creeps": [
                {"id": c.id, "x": c.x, "y": c.y, "targetId": c.target_id}
                for c in self.creeps
            ],
            "structures": [
                {"id": s.id, "energy": s.energy, "energyCapacity": s.energy_capacity}
                for s in self.structures
            ],
        }
