"""Shared fixtures for the creepsim test suite."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from creepsim.room.grid import AREA
from creepsim.room.room import RoomDescription
from creepsim.room.terrain import Terrain
from creepsim.sim.world import WorldState

RoomFactory = Callable[..., dict[str, Any]]


@pytest.fixture
def plain_terrain() -> Terrain:
    """A 50x50 room with no walls."""
    return Terrain.filled()


@pytest.fixture
def make_room_dict() -> RoomFactory:
    """Build an export record; keyword args override the defaults."""

    def _make(**overrides: Any) -> dict[str, Any]:
        data: dict[str, Any] = {
            "roomName": "W1N1",
            "time": 1234,
            "terrain": "0" * AREA,
            "sources": [{"id": "a", "x": 25, "y": 25, "energyCapacity": 3000}],
            "controller": {"id": "ctrl", "x": 10, "y": 10, "level": 2},
            "structures": [
                {"id": "spawn1", "type": "spawn", "x": 30, "y": 38, "hits": 5000},
                {"id": "ext1", "type": "extension", "x": 31, "y": 40, "hits": 1000},
                {"id": "road1", "type": "road", "x": 30, "y": 30, "hits": 5000},
            ],
        }
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def plain_room(make_room_dict: RoomFactory) -> RoomDescription:
    """An all-plain room with one source at (25, 25)."""
    return RoomDescription.from_dict(make_room_dict())


@pytest.fixture
def two_source_room(make_room_dict: RoomFactory) -> RoomDescription:
    """An all-plain room with sources "a" at (25, 25) and "b" at (5, 5)."""
    return RoomDescription.from_dict(
        make_room_dict(
            sources=[
                {"id": "a", "x": 25, "y": 25, "energyCapacity": 3000},
                {"id": "b", "x": 5, "y": 5, "energyCapacity": 3000},
            ],
        ),
    )


@pytest.fixture
def world(plain_room: RoomDescription) -> WorldState:
    """Reference world: one creep at (32, 38) heading for source "a"."""
    return WorldState.from_room(plain_room)
