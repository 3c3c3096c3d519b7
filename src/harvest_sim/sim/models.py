"""Simulation data models.

Every type here is a frozen dataclass: a :class:`SimState` is an immutable
snapshot and :func:`~harvest_sim.sim.engine.tick` returns a new one built with
:func:`dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from harvest_sim.errors import InvalidConfig, require_positive


class OperatorStatus(str, Enum):
    """What the operator panel shows for the machine."""

    IDLE = "Idle"
    HARVESTING = "Harvesting"
    UNLOADING = "Unloading"
    ALARM = "Alarm"
    """Display-only: loss is above the alarm threshold while harvesting continues."""


@dataclass(frozen=True)
class MachineConfig:
    """Combine and crop parameters."""

    tank_capacity_kg: float = 8000.0
    """Grain tank capacity in kg."""

    unload_rate_kg_per_min: float = 3600.0
    """Auger unload rate in kg/min."""

    optimal_min_kmh: float = 5.0
    optimal_max_kmh: float = 6.0
    warn_max_kmh: float = 7.0
    """Upper bound of the yellow speed band; loss rises noticeably beyond it."""

    alarm_min_kmh: float = 8.0
    """Speeds at or above this are in the red band."""

    yield_kg_per_m2: float = 0.6
    """Standing crop density (0.6 kg/m² = 6 t/ha)."""

    loss_warn_pct: float | None = 1.5
    loss_alarm_pct: float | None = 2.0

    def __post_init__(self) -> None:
        require_positive("tank_capacity_kg", self.tank_capacity_kg)
        require_positive("unload_rate_kg_per_min", self.unload_rate_kg_per_min)
        if self.yield_kg_per_m2 < 0:
            raise InvalidConfig(f"yield_kg_per_m2 must be >= 0, got {self.yield_kg_per_m2!r}")
        if not self.optimal_min_kmh <= self.optimal_max_kmh <= self.warn_max_kmh <= self.alarm_min_kmh:
            raise InvalidConfig(
                "speed thresholds must satisfy optimal_min <= optimal_max <= warn_max <= alarm_min"
            )

    @property
    def alarm_threshold_pct(self) -> float:
        """Loss percentage at which status switches to Alarm."""
        return 2.0 if self.loss_alarm_pct is None else self.loss_alarm_pct


@dataclass(frozen=True)
class FieldConfig:
    """Rectangular field used by the engine's abstract back-and-forth pose."""

    width_m: float = 600.0
    height_m: float = 400.0
    header_width_m: float = 7.5
    """Cutting swath width, also the spacing between passes."""

    def __post_init__(self) -> None:
        require_positive("header_width_m", self.header_width_m)
        require_positive("width_m", self.width_m)
        require_positive("height_m", self.height_m)

    @property
    def max_lanes(self) -> int:
        """Highest lane index before the lane counter wraps to 0."""
        return max(0, int((self.height_m - 20.0) // self.header_width_m))


@dataclass(frozen=True)
class Pose:
    """Field-local position in metres plus heading in degrees (0 = +x)."""

    x: float = 10.0
    y: float = 10.0
    heading_deg: float = 0.0


@dataclass(frozen=True)
class Metrics:
    """Operator-facing harvesting metrics."""

    speed_kmh: float = 0.0
    distance_m: float = 0.0
    throughput_kg_per_s: float = 0.0
    """Captured (not lost) grain flow into the tank."""

    harvesting_rate_t_per_h: float = 0.0
    harvesting_rate_kg_per_min: float = 0.0
    tank_kg: float = 0.0
    tank_fill_pct: float = 0.0
    loss_pct: float = 0.0
    loss_kg_per_ha: float = 0.0
    area_harvested_ha: float = 0.0
    moving_time_s: float = 0.0
    """Simulated seconds spent moving while harvesting."""


@dataclass(frozen=True)
class UnloadSummary:
    """Snapshot emitted once per completed unload cycle."""

    total_harvested_kg: float
    avg_loss_pct: float
    area_ha: float
    avg_speed_kmh: float


@dataclass(frozen=True)
class Controls:
    """Operator inputs for one tick."""

    target_speed_kmh: float = 5.5
    running: bool = False


@dataclass(frozen=True)
class SimState:
    """Complete simulation snapshot."""

    status: OperatorStatus = OperatorStatus.IDLE
    field: FieldConfig = FieldConfig()
    machine: MachineConfig = MachineConfig()
    pose: Pose = Pose()
    lane_index: int = 0
    going_right: bool = True
    metrics: Metrics = Metrics()
    time_scale: float = 1.0
    summary: UnloadSummary | None = None
    """Set only on the tick that completes an unload; cleared on the next tick."""

    def __post_init__(self) -> None:
        require_positive("time_scale", self.time_scale)
