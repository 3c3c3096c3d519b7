"""HarvestSession — per-frame driver for the engine, autopilot and lane follower.

The caller owns the scheduler and invokes :meth:`HarvestSession.frame` once per
animation frame.  The engine's cumulative ``distance_m`` is the single source of
truth for travel: after each tick the lane follower is advanced by exactly the
distance the engine reported for that tick, so the map position and the
metrics never drift apart and the machine stays put while unloading.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from harvest_sim.field.follower import FollowerFrame, LaneFollower
from harvest_sim.field.models import Lane
from harvest_sim.sim.autopilot import SpeedProfile
from harvest_sim.sim.engine import create_initial_state, tick
from harvest_sim.sim.models import Controls, FieldConfig, MachineConfig, SimState, UnloadSummary
from harvest_sim.timing import clamp_frame_ms

_logger = logging.getLogger(__name__)

DEFAULT_TARGET_KMH = 5.5


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a presentation layer needs to draw one frame."""

    state: SimState
    running: bool
    target_speed_kmh: float
    autopilot: bool
    follower: FollowerFrame | None
    last_summary: UnloadSummary | None
    """Most recent unload summary; kept until reset so it can be displayed."""


class HarvestSession:
    """Single machine, single field simulation session.

    Parameters
    ----------
    field, machine:
        Engine configuration; defaults when None.
    lanes:
        Lanes from :func:`~harvest_sim.field.lanes.generate_lanes`; may be
        loaded later with :meth:`load_lanes`.
    autopilot:
        Target-speed generator used while autopilot is enabled.
    autopilot_enabled:
        Whether the autopilot drives the speed instead of :meth:`set_speed`.
    """

    def __init__(
        self,
        field: FieldConfig | None = None,
        machine: MachineConfig | None = None,
        lanes: Sequence[Lane] | None = None,
        autopilot: SpeedProfile | None = None,
        autopilot_enabled: bool = True,
    ) -> None:
        self._field = field
        self._machine = machine
        self.state = create_initial_state(field, machine)
        self.running = False
        self.target_speed_kmh = DEFAULT_TARGET_KMH
        self.autopilot = autopilot or SpeedProfile(initial_speed_kmh=DEFAULT_TARGET_KMH)
        self.autopilot_enabled = autopilot_enabled
        self.lanes: Sequence[Lane] = lanes if lanes is not None else []
        self.follower = LaneFollower()
        self.last_summary: UnloadSummary | None = None
        self._follower_frame: FollowerFrame | None = None

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def start(self) -> None:
        self.running = True

    def pause(self) -> None:
        self.running = False

    def reset(self) -> None:
        """Back to the initial snapshot; lanes stay loaded, the follower rewinds."""
        self.state = create_initial_state(self._field, self._machine)
        self.running = False
        self.target_speed_kmh = DEFAULT_TARGET_KMH
        self.last_summary = None
        self.follower.reset()
        self.autopilot.reset()
        self._follower_frame = None

    def set_speed(self, speed_kmh: float) -> None:
        if speed_kmh < 0:
            raise ValueError(f"speed_kmh must be >= 0, got {speed_kmh!r}")
        self.target_speed_kmh = speed_kmh

    def set_time_scale(self, time_scale: float) -> None:
        """Raises :class:`~harvest_sim.errors.InvalidConfig` unless *time_scale* > 0."""
        self.state = replace(self.state, time_scale=time_scale)

    def enable_autopilot(self, enabled: bool) -> None:
        self.autopilot_enabled = enabled

    def load_lanes(self, lanes: Sequence[Lane]) -> None:
        """Switch to a new lane set; the follower restarts at the first lane."""
        self.lanes = lanes
        self._follower_frame = None

    # ------------------------------------------------------------------
    # Frame driver
    # ------------------------------------------------------------------

    def frame(self, delta_ms: float) -> SessionSnapshot:
        """Advance one animation frame of *delta_ms* real time (clamped)."""
        dt_ms = clamp_frame_ms(delta_ms)

        if self.autopilot_enabled and self.running:
            speed = self.autopilot.update(dt_ms, self.state.time_scale)
        else:
            self.autopilot.current_kmh = self.target_speed_kmh
            speed = self.target_speed_kmh

        prev = self.state
        self.state = tick(dt_ms, prev, Controls(target_speed_kmh=speed, running=self.running))

        if self.state.status is not prev.status:
            _logger.info("Status %s -> %s", prev.status.value, self.state.status.value)
        if self.state.summary is not None:
            self.last_summary = self.state.summary
            _logger.info(
                "Unload complete: %.0f kg, avg loss %.2f%%, area %.3f ha",
                self.last_summary.total_harvested_kg,
                self.last_summary.avg_loss_pct,
                self.last_summary.area_ha,
            )

        if self.lanes:
            travelled = self.state.metrics.distance_m - prev.metrics.distance_m
            self._follower_frame = self.follower.advance(self.lanes, travelled)

        return self.snapshot()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            running=self.running,
            target_speed_kmh=self.target_speed_kmh,
            autopilot=self.autopilot_enabled,
            follower=self._follower_frame,
            last_summary=self.last_summary,
        )
