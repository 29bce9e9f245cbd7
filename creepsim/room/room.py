"""Room description — the static room export the engine is built from.

A room export is a JSON record with the room name, terrain string,
energy sources, controller and structures.  It is loaded once at
startup, validated fully, and never mutated afterwards.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from loguru import logger

from creepsim.room.errors import RoomLoadError
from creepsim.room.terrain import Terrain, decode_terrain


class StructureType(Enum):
    """Closed set of structure kinds, keyed by their export tag."""

    SPAWN = "spawn"
    EXTENSION = "extension"
    TOWER = "tower"
    CONTAINER = "container"
    STORAGE = "storage"
    LINK = "link"
    ROAD = "road"
    WALL = "constructedWall"
    RAMPART = "rampart"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str) -> StructureType:
        """Return the kind for an export tag, OTHER if unrecognised."""
        try:
            return cls(tag)
        except ValueError:
            return cls.OTHER

    @property
    def energy_capacity(self) -> int:
        """Energy a structure of this kind can hold."""
        return ENERGY_CAPACITY[self]


ENERGY_CAPACITY: dict[StructureType, int] = {
    StructureType.SPAWN: 300,
    StructureType.EXTENSION: 50,
    StructureType.TOWER: 1000,
    StructureType.CONTAINER: 2000,
    StructureType.STORAGE: 100_000,
    StructureType.LINK: 800,
    StructureType.ROAD: 0,
    StructureType.WALL: 0,
    StructureType.RAMPART: 0,
    StructureType.OTHER: 0,
}


@dataclass(frozen=True)
class Source:
    """An energy source the creeps travel between."""

    id: str
    x: int
    y: int
    energy_capacity: int


@dataclass(frozen=True)
class Controller:
    """The room controller."""

    id: str
    x: int
    y: int
    level: int


@dataclass(frozen=True)
class Structure:
    """A static room fixture.

    Attributes:
        id: Unique structure id.
        type: Parsed structure kind.
        tag: The raw type tag from the export (kept for round-tripping
            tags that parse as ``StructureType.OTHER``).
        x: Column position.
        y: Row position.
        hits: Hit points at export time.
    """

    id: str
    type: StructureType
    tag: str
    x: int
    y: int
    hits: int


@dataclass(frozen=True, eq=False)
class RoomDescription:
    """Immutable description of one room.

    Attributes:
        name: Room name, e.g. ``"W1N1"``.
        terrain: Decoded terrain grid.
        sources: Energy sources, in export order.
        controller: The room controller.
        structures: Structures, in export order.
        time: Game time the export was taken at.
        exits: Direction to neighbouring room name; informational only.
    """

    name: str
    terrain: Terrain
    sources: tuple[Source, ...]
    controller: Controller
    structures: tuple[Structure, ...] = ()
    time: int = 0
    exits: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RoomDescription:
        """Build a room description from a parsed export record.

        Args:
            data: Mapping with camelCase keys as found in the export.

        Returns:
            A validated RoomDescription.

        Raises:
            RoomLoadError: If a required key is missing, a value has the
                wrong type, or the terrain is malformed.
        """
        try:
            terrain = decode_terrain(data["terrain"])
            sources = tuple(
                Source(
                    id=str(s["id"]),
                    x=int(s["x"]),
                    y=int(s["y"]),
                    energy_capacity=int(s["energyCapacity"]),
                )
                for s in data["sources"]
            )
            c = data["controller"]
            controller = Controller(
                id=str(c["id"]),
                x=int(c["x"]),
                y=int(c["y"]),
                level=int(c["level"]),
            )
            structures = tuple(
                Structure(
                    id=str(s["id"]),
                    type=StructureType.from_tag(str(s["type"])),
                    tag=str(s["type"]),
                    x=int(s["x"]),
                    y=int(s["y"]),
                    hits=int(s["hits"]),
                )
                for s in data.get("structures", [])
            )
            return cls(
                name=str(data["roomName"]),
                terrain=terrain,
                sources=sources,
                controller=controller,
                structures=structures,
                time=int(data.get("time", 0)),
                exits=dict(data.get("exits") or {}),
            )
        except RoomLoadError:
            raise
        except (KeyError, TypeError, ValueError) as exc:
            msg = f"malformed room description: {exc!r}"
            raise RoomLoadError(msg) from exc

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase export record for this room."""
        return {
            "roomName": self.name,
            "time": self.time,
            "terrain": self.terrain.encode(),
            "sources": [
                {"id": s.id, "x": s.x, "y": s.y, "energyCapacity": s.energy_capacity}
                for s in self.sources
            ],
            "controller": {
                "id": self.controller.id,
                "x": self.controller.x,
                "y": self.controller.y,
                "level": self.controller.level,
            },
            "structures": [
                {"id": s.id, "type": s.tag, "x": s.x, "y": s.y, "hits": s.hits}
                for s in self.structures
            ],
            "exits": dict(self.exits),
        }


def load_room(path: str | Path) -> RoomDescription:
    """Load a room export from a JSON file.

    Args:
        path: Path to the export file.

    Returns:
        The validated RoomDescription.

    Raises:
        FileNotFoundError: If the file does not exist.
        RoomLoadError: If the file is not valid JSON or fails validation.
    """
    path = Path(path)
    raw = path.read_text(encoding="utf-8").strip()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"{path}: invalid JSON: {exc}"
        raise RoomLoadError(msg) from exc
    if not isinstance(data, dict):
        msg = f"{path}: expected a JSON object, got {type(data).__name__}"
        raise RoomLoadError(msg)

    room = RoomDescription.from_dict(data)
    logger.info(
        "Loaded room {} ({} sources, {} structures) from {}",
        room.name,
        len(room.sources),
        len(room.structures),
        path,
    )
    return room
