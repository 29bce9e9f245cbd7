"""Structure energy state.

Each structure holds some amount of energy up to a capacity fixed by
its kind.  The ledger is seeded from the room description with every
energy-bearing structure full and everything else at 0/0.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from creepsim.room.room import RoomDescription, Structure


@dataclass
class StructureEnergy:
    """Energy held by one structure.

    Attributes:
        energy: Current stored energy.
        capacity: Maximum storable energy.
    """

    energy: int = 0
    capacity: int = 0

    @property
    def free_capacity(self) -> int:
        """Room left before the structure is full."""
        return self.capacity - self.energy

    @classmethod
    def for_structure(cls, structure: Structure) -> StructureEnergy:
        """Return the initial energy state for ``structure`` (full)."""
        capacity = structure.type.energy_capacity
        return cls(energy=capacity, capacity=capacity)


@dataclass
class EnergyLedger:
    """Mapping from structure id to its energy state."""

    entries: dict[str, StructureEnergy] = field(default_factory=dict)

    @classmethod
    def from_room(cls, room: RoomDescription) -> EnergyLedger:
        """Seed a ledger with one full entry per room structure."""
        return cls(
            entries={s.id: StructureEnergy.for_structure(s) for s in room.structures},
        )

    def get(self, structure_id: str) -> StructureEnergy:
        """Return a copy of the energy state, ``0/0`` if unknown."""
        entry = self.entries.get(structure_id)
        if entry is None:
            return StructureEnergy()
        return StructureEnergy(entry.energy, entry.capacity)

    def deposit(self, structure_id: str, amount: int) -> int:
        """Add up to ``amount`` energy, clamped at capacity.

        Args:
            structure_id: Structure to fill.
            amount: Energy offered (must be >= 0).

        Returns:
            Energy actually stored.

        Raises:
            KeyError: If the structure is not in the ledger.
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            msg = f"deposit amount must be >= 0, got {amount}"
            raise ValueError(msg)
        entry = self.entries[structure_id]
        moved = min(amount, entry.free_capacity)
        entry.energy += moved
        return moved

    def withdraw(self, structure_id: str, amount: int) -> int:
        """Remove up to ``amount`` energy, clamped at zero.

        Args:
            structure_id: Structure to drain.
            amount: Energy requested (must be >= 0).

        Returns:
            Energy actually removed.

        Raises:
            KeyError: If the structure is not in the ledger.
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            msg = f"withdraw amount must be >= 0, got {amount}"
            raise ValueError(msg)
        entry = self.entries[structure_id]
        moved = min(amount, entry.energy)
        entry.energy -= moved
        return moved
