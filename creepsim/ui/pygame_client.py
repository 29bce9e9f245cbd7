"""Pygame 2D viewer for the creep simulation.

Draws the room terrain, sources, controller, structures (with an energy
fill) and creeps in a window.  The world is stepped through a
``SimulationDriver`` at a configurable tick rate while the display
refreshes at the Pygame frame rate.  Hovering a cell shows what the
world knows about it in the side panel.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import pygame

if TYPE_CHECKING:
    from creepsim.simulation.driver import SimulationDriver
    from creepsim.sim.world import CellInfo

from creepsim.room.grid import HEIGHT, WIDTH
from creepsim.room.room import StructureType
from creepsim.room.terrain import TerrainType

# Colour palette
_BG = (15, 23, 36)
_TERRAIN_COLOURS: dict[TerrainType, tuple[int, int, int]] = {
    TerrainType.PLAIN: (15, 23, 36),
    TerrainType.WALL: (0, 0, 0),
    TerrainType.SWAMP: (19, 43, 26),
}
_SOURCE = (241, 196, 15)
_CONTROLLER = (155, 89, 182)
_ENERGY = (241, 196, 15)
_CREEP = (46, 204, 113)
_TEXT = (200, 200, 200)

_STRUCTURE_COLOURS: dict[StructureType, tuple[int, int, int]] = {
    StructureType.SPAWN: (220, 220, 220),
    StructureType.EXTENSION: (180, 180, 180),
    StructureType.TOWER: (150, 150, 170),
    StructureType.CONTAINER: (120, 100, 80),
    StructureType.STORAGE: (110, 110, 130),
    StructureType.LINK: (90, 140, 170),
    StructureType.ROAD: (60, 60, 60),
    StructureType.WALL: (17, 17, 17),
    StructureType.RAMPART: (40, 120, 60),
    StructureType.OTHER: (90, 90, 90),
}


class PygameRenderer:
    """Renders a driven world into a Pygame window.

    Attributes:
        driver: Driver that owns the world and the pause gate.
        cell_size: Pixel size of each grid cell.
        screen: The Pygame display surface.
    """

    # Speed presets in ticks per second
    _SPEED_STEPS: ClassVar[list[float]] = [
        0.5,
        1.0,
        3.0,
        5.0,
        10.0,
        20.0,
        30.0,
        60.0,
        120.0,
    ]

    def __init__(
        self,
        driver: SimulationDriver,
        cell_size: int = 12,
        ticks_per_second: float = 20.0,
    ) -> None:
        """Initialise the renderer.

        Args:
            driver: The simulation driver to step and render.
            cell_size: Pixel width/height per grid cell.
            ticks_per_second: Simulation ticks per real-time second.
        """
        self.driver = driver
        self.cell_size = cell_size
        self.ticks_per_second = ticks_per_second
        self._speed_index = self._nearest_speed(ticks_per_second)
        self._tick_accumulator = 0.0
        self._hover: tuple[int, int] | None = None

        self._panel_width = 240
        self._win_w = WIDTH * cell_size + self._panel_width
        self._win_h = HEIGHT * cell_size

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption(f"creepsim - {driver.world.room.name}")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True

    def _nearest_speed(self, tps: float) -> int:
        """Return the index of the closest speed preset."""
        return min(
            range(len(self._SPEED_STEPS)),
            key=lambda i: abs(self._SPEED_STEPS[i] - tps),
        )

    def run(self, fps: int = 30) -> None:
        """Main loop: handle events, step sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            if not self.driver.paused:
                self._tick_accumulator += self.ticks_per_second * dt
                steps = int(self._tick_accumulator)
                self._tick_accumulator -= steps
                for _ in range(steps):
                    self.driver.tick()
            self._draw()

        pygame.quit()

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.MOUSEMOTION:
                mx, my = event.pos
                cx, cy = mx // self.cell_size, my // self.cell_size
                self._hover = (cx, cy) if cx < WIDTH and cy < HEIGHT else None
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                elif event.key == pygame.K_SPACE:
                    self.driver.toggle_pause()
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._speed_index = min(
                        len(self._SPEED_STEPS) - 1,
                        self._speed_index + 1,
                    )
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]
                elif event.key == pygame.K_MINUS:
                    self._speed_index = max(0, self._speed_index - 1)
                    self.ticks_per_second = self._SPEED_STEPS[self._speed_index]

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_terrain()
        self._draw_structures()
        self._draw_sources()
        self._draw_creeps()
        self._draw_info_panel()
        pygame.display.flip()

    def _draw_terrain(self) -> None:
        cs = self.cell_size
        cells = self.driver.world.terrain.cells
        for y in range(HEIGHT):
            for x in range(WIDTH):
                colour = _TERRAIN_COLOURS[TerrainType(int(cells[y, x]))]
                pygame.draw.rect(self.screen, colour, (x * cs, y * cs, cs, cs))

    def _draw_sources(self) -> None:
        """Draw sources as yellow dots and the controller as a square."""
        cs = self.cell_size
        room = self.driver.world.room
        for s in room.sources:
            centre = (s.x * cs + cs // 2, s.y * cs + cs // 2)
            pygame.draw.circle(self.screen, _SOURCE, centre, max(2, int(cs * 0.35)))
        c = room.controller
        inset = int(cs * 0.2)
        pygame.draw.rect(
            self.screen,
            _CONTROLLER,
            (c.x * cs + inset, c.y * cs + inset, cs - 2 * inset, cs - 2 * inset),
        )

    def _draw_structures(self) -> None:
        """Draw structures with an inner fill scaled by stored energy."""
        cs = self.cell_size
        world = self.driver.world
        for s in world.room.structures:
            rect = pygame.Rect(s.x * cs, s.y * cs, cs, cs)
            pygame.draw.rect(self.screen, _STRUCTURE_COLOURS[s.type], rect)
            energy = world.energy.get(s.id)
            if energy.capacity <= 0:
                continue
            fill = max(0.0, min(energy.energy / energy.capacity, 1.0))
            radius = int(cs * 0.35 * fill)
            if radius > 0:
                pygame.draw.circle(self.screen, _ENERGY, rect.center, radius)

    def _draw_creeps(self) -> None:
        cs = self.cell_size
        radius = max(2, cs // 3)
        for creep in self.driver.world.creeps:
            centre = (creep.x * cs + cs // 2, creep.y * cs + cs // 2)
            pygame.draw.circle(self.screen, _CREEP, centre, radius)

    def _draw_info_panel(self) -> None:
        """Draw a stats panel on the right side of the window."""
        world = self.driver.world
        panel_x = WIDTH * self.cell_size + 10
        y = 10

        lines = [
            f"Room: {world.room.name}",
            f"Tick: {world.tick}",
            f"Speed: {self.ticks_per_second:.1f} t/s",
            f"{'PAUSED' if self.driver.paused else 'RUNNING'}",
            "",
            "--- Creeps ---",
        ]
        lines += [f"{c.id} ({c.x},{c.y}) -> {c.target_id}" for c in world.creeps]

        if self._hover is not None:
            lines += ["", "--- Cell ---", *_describe(world.inspect(*self._hover))]

        lines += [
            "",
            "--- Controls ---",
            "SPACE: pause",
            "+/-: speed",
            "ESC: quit",
        ]

        for line in lines:
            surf = self.font.render(line, True, _TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18


def _describe(info: CellInfo) -> list[str]:
    """Return panel lines for an inspected cell."""
    lines = [f"({info.x},{info.y}) {info.terrain.name.lower()}"]
    if info.controller:
        lines.append(f"controller {info.controller}")
    lines += [f"source {sid}" for sid in info.sources]
    lines += [f"structure {sid}" for sid in info.structures]
    lines += [f"creep {cid}" for cid in info.creeps]
    lines += [f"dist[{tid}] = {d}" for tid, d in info.distances.items()]
    return lines
