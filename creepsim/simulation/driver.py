"""SimulationDriver — steps a world at a fixed rate and fans out snapshots.

The driver is the only thing that calls ``WorldState.step``.  It owns
the pause gate: while paused it simply does not step, so world time
stands still.  Viewers are plain callables that receive JSON-ready
message dicts:

- ``{"type": "room", "room": {...}}`` once, on connect.
- ``{"type": "snap", "snap": {...}}`` every ``snap_every_ticks`` ticks.

Viewers may send ``{"type": "pause"}`` / ``{"type": "resume"}`` back
through ``handle_message``.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from creepsim.sim.snapshot import Snapshot
    from creepsim.sim.world import WorldState

Viewer = Callable[[dict[str, Any]], None]


class SimulationDriver:
    """Serialises ticks of one world and broadcasts the results.

    Attributes:
        world: The world being driven.
        tick_interval: Seconds between ticks in ``run``.
        snap_every_ticks: Broadcast cadence in stepped ticks.
    """

    def __init__(
        self,
        world: WorldState,
        tick_interval: float = 0.05,
        snap_every_ticks: int = 1,
    ) -> None:
        """Initialise the driver.

        Args:
            world: The world to step.
            tick_interval: Seconds between ticks when running.
            snap_every_ticks: Broadcast a snapshot every N stepped ticks.

        Raises:
            ValueError: If ``tick_interval`` or ``snap_every_ticks`` is
                not positive.
        """
        if tick_interval <= 0:
            msg = f"tick_interval must be > 0, got {tick_interval}"
            raise ValueError(msg)
        if snap_every_ticks < 1:
            msg = f"snap_every_ticks must be >= 1, got {snap_every_ticks}"
            raise ValueError(msg)

        self.world = world
        self.tick_interval = tick_interval
        self.snap_every_ticks = snap_every_ticks
        self._paused = False
        self._stepped = 0
        self._viewers: list[Viewer] = []
        self._step_lock = threading.Lock()
        self._viewer_lock = threading.Lock()
        # Held while delivering; orders room messages before snapshots
        self._broadcast_lock = threading.RLock()
        self._stop_requested = threading.Event()

    # -- pause gate --

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        """Stop advancing world time until ``resume`` is called."""
        if not self._paused:
            logger.info("Paused at tick {}", self.world.tick)
        self._paused = True

    def resume(self) -> None:
        """Resume advancing world time."""
        if self._paused:
            logger.info("Resumed at tick {}", self.world.tick)
        self._paused = False

    def toggle_pause(self) -> bool:
        """Flip the pause gate and return the new state."""
        if self._paused:
            self.resume()
        else:
            self.pause()
        return self._paused

    # -- viewers --

    @property
    def viewer_count(self) -> int:
        with self._viewer_lock:
            return len(self._viewers)

    def connect(self, viewer: Viewer) -> None:
        """Send a viewer the room description, then register it.

        A viewer never receives a snapshot before its room message.  If
        sending the room fails the viewer is not registered.
        """
        message = {"type": "room", "room": self.world.room.to_dict()}
        with self._broadcast_lock:
            if not self._send(viewer, message):
                return
            with self._viewer_lock:
                self._viewers.append(viewer)
        logger.info("Viewer connected ({} total)", self.viewer_count)

    def disconnect(self, viewer: Viewer) -> None:
        """Unregister a viewer; unknown viewers are ignored."""
        with self._viewer_lock:
            if viewer not in self._viewers:
                return
            self._viewers.remove(viewer)
        logger.info("Viewer disconnected ({} left)", self.viewer_count)

    def handle_message(self, raw: str | bytes | dict[str, Any]) -> None:
        """Apply a control message from a viewer.

        Malformed or unknown messages are logged and ignored.

        Args:
            raw: JSON text, or an already-decoded message dict.
        """
        msg: Any = raw
        if isinstance(raw, (str, bytes)):
            try:
                msg = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring malformed message: {!r}", raw)
                return
        kind = msg.get("type") if isinstance(msg, dict) else None
        if kind == "pause":
            self.pause()
        elif kind == "resume":
            self.resume()
        else:
            logger.warning("Ignoring unknown message: {!r}", msg)

    # -- stepping --

    def tick(self) -> Snapshot | None:
        """Step the world once unless paused.

        Returns:
            The new snapshot, or None if the driver is paused.
        """
        if self._paused:
            return None
        with self._step_lock:
            snap = self.world.step()
            self._stepped += 1
            due = self._stepped % self.snap_every_ticks == 0
        if due:
            self.broadcast({"type": "snap", "snap": snap.to_dict()})
        return snap

    def broadcast(self, message: dict[str, Any]) -> None:
        """Send ``message`` to every connected viewer."""
        with self._broadcast_lock:
            with self._viewer_lock:
                viewers = list(self._viewers)
            for viewer in viewers:
                self._send(viewer, message)

    def run(self, max_ticks: int | None = None) -> int:
        """Drive ticks at ``tick_interval`` until stopped.

        Paused intervals do not count toward ``max_ticks``.

        Args:
            max_ticks: Stop after this many stepped ticks (None = forever).

        Returns:
            Number of ticks stepped during this call.
        """
        stepped = 0
        deadline = time.monotonic()
        try:
            while not self._stop_requested.is_set():
                if max_ticks is not None and stepped >= max_ticks:
                    break
                if self.tick() is not None:
                    stepped += 1
                deadline += self.tick_interval
                delay = deadline - time.monotonic()
                if delay > 0:
                    self._stop_requested.wait(delay)
                else:
                    # Behind schedule: resync rather than burst
                    deadline = time.monotonic()
        finally:
            self._stop_requested.clear()
        return stepped

    def stop(self) -> None:
        """Make ``run`` return after the current tick.

        A stop requested before ``run`` starts makes it return at once.
        """
        self._stop_requested.set()

    def _send(self, viewer: Viewer, message: dict[str, Any]) -> bool:
        """Deliver ``message``; drop the viewer and return False on failure."""
        try:
            viewer(message)
        except Exception:
            logger.exception("Viewer failed; dropping it")
            self.disconnect(viewer)
            return False
        return True
