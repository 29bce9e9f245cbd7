"""Config — load driver and world parameters from YAML files.

Tick rate, snapshot cadence, the starting creep and logging level live
in YAML and are parsed into a typed dataclass here.  The room itself is
not part of the config; it is loaded from its own export file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        ticks_per_second: Rate at which the driver steps the world.
        snap_every_ticks: Broadcast a snapshot every N stepped ticks.
        spawn_x: Starting column of the initial creep.
        spawn_y: Starting row of the initial creep.
        creep_id: Id of the initial creep.
        log_level: Minimum level written to the log sink.
    """

    ticks_per_second: float = 20.0
    snap_every_ticks: int = 1
    spawn_x: int = 32
    spawn_y: int = 38
    creep_id: str = "creep1"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Reject rates and cadences the driver cannot run with."""
        if self.ticks_per_second <= 0:
            msg = f"ticks_per_second must be > 0, got {self.ticks_per_second}"
            raise ValueError(msg)
        if self.snap_every_ticks < 1:
            msg = f"snap_every_ticks must be >= 1, got {self.snap_every_ticks}"
            raise ValueError(msg)

    @property
    def tick_interval(self) -> float:
        """Seconds between two ticks."""
        return 1.0 / self.ticks_per_second

    @property
    def spawn(self) -> tuple[int, int]:
        """Starting ``(x, y)`` of the initial creep."""
        return self.spawn_x, self.spawn_y

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If ``ticks_per_second`` is not positive or
                ``snap_every_ticks`` is below 1.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            ticks_per_second=float(
                data.get("ticks_per_second", cls.ticks_per_second),
            ),
            snap_every_ticks=int(
                data.get("snap_every_ticks", cls.snap_every_ticks),
            ),
            spawn_x=int(data.get("spawn_x", cls.spawn_x)),
            spawn_y=int(data.get("spawn_y", cls.spawn_y)),
            creep_id=str(data.get("creep_id", cls.creep_id)),
            log_level=str(data.get("log_level", cls.log_level)).upper(),
        )
