"""Creep — a single agent walking between energy sources."""

from __future__ import annotations

from dataclasses import dataclass

NO_TARGET = "none"


@dataclass(frozen=True)
class Target:
    """A routing target: an energy source's id and position."""

    id: str
    x: int
    y: int


@dataclass
class Creep:
    """A creep agent.

    Attributes:
        id: Unique creep id.
        x: Current column position.
        y: Current row position.
        target: Where the creep is routed, or None if no source exists.
    """

    id: str
    x: int
    y: int
    target: Target | None = None

    @property
    def target_id(self) -> str:
        """Id of the current target, ``"none"`` when there is none."""
        return self.target.id if self.target is not None else NO_TARGET

    @property
    def at_target(self) -> bool:
        """Return True if the creep stands on its target cell."""
        return (
            self.target is not None
            and self.x == self.target.x
            and self.y == self.target.y
        )
