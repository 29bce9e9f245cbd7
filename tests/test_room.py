"""Tests for creepsim.room — grid geometry, terrain and room loading."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import numpy as np
import pytest

from creepsim.room.errors import RoomLoadError
from creepsim.room.grid import AREA, HEIGHT, WIDTH, idx, in_bounds, neighbours
from creepsim.room.room import (
    ENERGY_CAPACITY,
    RoomDescription,
    StructureType,
    load_room,
)
from creepsim.room.terrain import Terrain, TerrainType, decode_terrain

RoomFactory = Callable[..., dict[str, Any]]


class TestGrid:
    """Tests for grid addressing."""

    def test_dimensions(self) -> None:
        assert WIDTH == 50
        assert HEIGHT == 50
        assert AREA == 2500

    def test_idx_is_row_major(self) -> None:
        assert idx(0, 0) == 0
        assert idx(49, 0) == 49
        assert idx(0, 1) == 50
        assert idx(49, 49) == 2499

    def test_in_bounds(self) -> None:
        assert in_bounds(0, 0)
        assert in_bounds(49, 49)
        assert not in_bounds(-1, 0)
        assert not in_bounds(50, 0)
        assert not in_bounds(0, 50)

    def test_neighbours_order(self) -> None:
        assert neighbours(10, 10) == [(10, 9), (11, 10), (10, 11), (9, 10)]

    def test_neighbours_corner(self) -> None:
        assert neighbours(0, 0) == [(1, 0), (0, 1)]


class TestTerrain:
    """Tests for terrain decoding."""

    def test_decode_maps_codes(self) -> None:
        text = ("012" * 834)[:AREA]
        terrain = decode_terrain(text)
        assert terrain.cells.size == AREA
        assert terrain.cells.dtype == np.uint8
        assert terrain.cells.ravel().tolist() == [int(ch) for ch in text]

    def test_decode_layout(self) -> None:
        text = ["0"] * AREA
        text[idx(7, 3)] = "1"
        text[idx(2, 40)] = "2"
        terrain = decode_terrain("".join(text))
        assert terrain.kind_at(7, 3) is TerrainType.WALL
        assert terrain.kind_at(2, 40) is TerrainType.SWAMP
        assert terrain.kind_at(0, 0) is TerrainType.PLAIN

    @pytest.mark.parametrize("length", [0, 2499, 2501])
    def test_wrong_length_is_fatal(self, length: int) -> None:
        with pytest.raises(RoomLoadError):
            decode_terrain("0" * length)

    def test_unknown_code_is_fatal(self) -> None:
        with pytest.raises(RoomLoadError):
            decode_terrain("3" + "0" * (AREA - 1))

    def test_cells_read_only(self, plain_terrain: Terrain) -> None:
        with pytest.raises(ValueError):
            plain_terrain.cells[0, 0] = 1

    def test_encode_inverts_decode(self) -> None:
        text = ("0012" * 625)
        assert decode_terrain(text).encode() == text

    def test_walkable(self, plain_terrain: Terrain) -> None:
        terrain = plain_terrain.with_cells([(3, 3)], TerrainType.WALL)
        terrain = terrain.with_cells([(4, 4)], TerrainType.SWAMP)
        assert not terrain.is_walkable(3, 3)
        assert terrain.is_walkable(4, 4)
        assert not terrain.is_walkable(-1, 4)
        # Original is untouched
        assert plain_terrain.is_walkable(3, 3)

    def test_owns_a_copy_of_its_cells(self) -> None:
        base = np.zeros(AREA, dtype=np.uint8)
        terrain = Terrain(base.reshape(HEIGHT, WIDTH))
        base[0] = TerrainType.WALL
        assert terrain.kind_at(0, 0) is TerrainType.PLAIN
        assert not np.shares_memory(terrain.cells, base)

    def test_converts_to_uint8(self) -> None:
        terrain = Terrain(np.ones((HEIGHT, WIDTH), dtype=np.int64))
        assert terrain.cells.dtype == np.uint8
        assert terrain.kind_at(3, 3) is TerrainType.WALL

    @pytest.mark.parametrize("value", [3, 7, -1])
    def test_unknown_kind_rejected(self, value: int) -> None:
        cells = np.zeros((HEIGHT, WIDTH), dtype=np.int64)
        cells[10, 10] = value
        with pytest.raises(RoomLoadError):
            Terrain(cells)

    def test_wrong_shape_rejected(self) -> None:
        with pytest.raises(RoomLoadError):
            Terrain(np.zeros(AREA, dtype=np.uint8))

    @pytest.mark.parametrize("position", [(-1, 0), (0, -1), (50, 0), (0, 50)])
    def test_with_cells_out_of_bounds(
        self,
        plain_terrain: Terrain,
        position: tuple[int, int],
    ) -> None:
        with pytest.raises(IndexError):
            plain_terrain.with_cells([position], TerrainType.WALL)
        assert plain_terrain.kind_at(49, 0) is TerrainType.PLAIN

    def test_kind_at_out_of_bounds(self, plain_terrain: Terrain) -> None:
        with pytest.raises(IndexError):
            plain_terrain.kind_at(50, 0)


class TestStructureType:
    """Tests for the structure kind enum and capacity table."""

    def test_capacity_table(self) -> None:
        assert StructureType.SPAWN.energy_capacity == 300
        assert StructureType.EXTENSION.energy_capacity == 50
        assert StructureType.TOWER.energy_capacity == 1000
        assert StructureType.CONTAINER.energy_capacity == 2000
        assert StructureType.STORAGE.energy_capacity == 100000
        assert StructureType.LINK.energy_capacity == 800
        assert StructureType.ROAD.energy_capacity == 0

    def test_every_kind_has_a_capacity(self) -> None:
        assert set(ENERGY_CAPACITY) == set(StructureType)

    def test_from_tag(self) -> None:
        assert StructureType.from_tag("constructedWall") is StructureType.WALL
        assert StructureType.from_tag("observer") is StructureType.OTHER


class TestRoomDescription:
    """Tests for parsing and loading room exports."""

    def test_from_dict(self, make_room_dict: RoomFactory) -> None:
        room = RoomDescription.from_dict(make_room_dict())
        assert room.name == "W1N1"
        assert room.time == 1234
        assert [s.id for s in room.sources] == ["a"]
        assert room.controller.level == 2
        assert room.structures[0].type is StructureType.SPAWN
        assert room.exits == {}

    def test_unknown_structure_tag_kept(self, make_room_dict: RoomFactory) -> None:
        room = RoomDescription.from_dict(
            make_room_dict(
                structures=[
                    {"id": "o1", "type": "observer", "x": 1, "y": 1, "hits": 500},
                ],
            ),
        )
        assert room.structures[0].type is StructureType.OTHER
        assert room.to_dict()["structures"][0]["type"] == "observer"

    def test_bad_terrain_length(self, make_room_dict: RoomFactory) -> None:
        with pytest.raises(RoomLoadError):
            RoomDescription.from_dict(make_room_dict(terrain="0" * 100))

    def test_missing_key(self, make_room_dict: RoomFactory) -> None:
        data = make_room_dict()
        del data["controller"]
        with pytest.raises(RoomLoadError):
            RoomDescription.from_dict(data)

    def test_to_dict_round_trip(self, make_room_dict: RoomFactory) -> None:
        data = make_room_dict(exits={"1": "W1N2"})
        assert RoomDescription.from_dict(data).to_dict() == data

    def test_load_room(self, tmp_path: Path, make_room_dict: RoomFactory) -> None:
        path = tmp_path / "roomExport.json"
        path.write_text(json.dumps(make_room_dict()) + "\n")
        room = load_room(path)
        assert room.name == "W1N1"
        assert room.terrain.cells.size == AREA

    def test_load_room_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "roomExport.json"
        path.write_text("{not json")
        with pytest.raises(RoomLoadError):
            load_room(path)

    def test_load_room_not_object(self, tmp_path: Path) -> None:
        path = tmp_path / "roomExport.json"
        path.write_text("[]")
        with pytest.raises(RoomLoadError):
            load_room(path)

    def test_load_room_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_room(tmp_path / "nope.json")
