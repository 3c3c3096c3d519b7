"""Simulation engine — pure state transition for one combine on one field.

``tick(dt_ms, state, controls)`` takes one :class:`SimState` snapshot and returns
the next.  The input snapshot is never mutated.

Per tick:

1. Scale elapsed time by ``state.time_scale``.
2. Not running (and not unloading) → Idle, no movement.
3. Running (and not unloading) → advance the back-and-forth pose, accumulate
   distance and area, apply the loss model, fill the tank, pick
   Harvesting / Alarm, and switch to Unloading once the tank is full.
4. Unloading → machine stopped, tank drains; once empty a one-shot
   :class:`UnloadSummary` is emitted and harvesting resumes.
"""

from __future__ import annotations

import math
from dataclasses import replace

from harvest_sim.sim.loss import compute_loss_pct
from harvest_sim.sim.models import (
    Controls,
    FieldConfig,
    MachineConfig,
    Metrics,
    OperatorStatus,
    Pose,
    SimState,
    UnloadSummary,
)

UNLOAD_EPSILON_KG = 0.01
"""Tank mass at or below which an unload cycle counts as complete."""

EDGE_MARGIN_M = 10.0
"""Distance from the field edge at which the machine turns onto the next lane."""


def kmh_to_mps(kmh: float) -> float:
    return kmh / 3.6


def create_initial_state(
    field: FieldConfig | None = None,
    machine: MachineConfig | None = None,
    time_scale: float = 1.0,
) -> SimState:
    """Return the reset snapshot: Idle, empty tank, bottom-left corner heading east."""
    return SimState(
        status=OperatorStatus.IDLE,
        field=field or FieldConfig(),
        machine=machine or MachineConfig(),
        pose=Pose(x=EDGE_MARGIN_M, y=EDGE_MARGIN_M, heading_deg=0.0),
        time_scale=time_scale,
    )


def tick(dt_ms: float, state: SimState, controls: Controls) -> SimState:
    """Advance *state* by *dt_ms* milliseconds of wall time.

    Args:
        dt_ms: Elapsed wall time; multiplied by ``state.time_scale``.
        state: Current snapshot.
        controls: Target speed and run flag for this tick.

    Returns:
        A new :class:`SimState`.

    Raises:
        ValueError: If *dt_ms* is negative or non-finite, or the target speed is negative.
    """
    if not math.isfinite(dt_ms) or dt_ms < 0:
        raise ValueError(f"dt_ms must be a finite value >= 0, got {dt_ms!r}")
    if controls.target_speed_kmh < 0:
        raise ValueError(f"target_speed_kmh must be >= 0, got {controls.target_speed_kmh!r}")

    dt_s = dt_ms / 1000.0 * state.time_scale
    speed_kmh = controls.target_speed_kmh if controls.running else 0.0

    status = state.status
    pose = state.pose
    lane_index = state.lane_index
    going_right = state.going_right
    metrics = state.metrics

    if status is OperatorStatus.UNLOADING:
        pass
    elif not controls.running:
        status = OperatorStatus.IDLE
        metrics = replace(
            metrics,
            throughput_kg_per_s=0.0,
            harvesting_rate_t_per_h=0.0,
            harvesting_rate_kg_per_min=0.0,
        )
    else:
        pose, lane_index, going_right = _advance_pose(
            state.field, pose, lane_index, going_right, kmh_to_mps(speed_kmh) * dt_s
        )
        metrics, status = _harvest(state.field, state.machine, metrics, speed_kmh, dt_s)

    summary = None
    if status is OperatorStatus.UNLOADING:
        metrics, status, summary = _unload(state.machine, metrics, dt_s)

    displayed = 0.0 if status is OperatorStatus.UNLOADING else speed_kmh
    return replace(
        state,
        status=status,
        pose=pose,
        lane_index=lane_index,
        going_right=going_right,
        metrics=replace(metrics, speed_kmh=displayed),
        summary=summary,
    )


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _fill_pct(tank_kg: float, capacity_kg: float) -> float:
    return min(100.0, max(0.0, tank_kg / capacity_kg * 100.0))


def _advance_pose(
    field: FieldConfig,
    pose: Pose,
    lane_index: int,
    going_right: bool,
    step_m: float,
) -> tuple[Pose, int, bool]:
    """Move *step_m* along the current pass; turn onto the next pass at either edge."""
    x = pose.x + (step_m if going_right else -step_m)
    y = min(field.height_m - 5.0, EDGE_MARGIN_M + lane_index * field.header_width_m)
    heading = 0.0 if going_right else 180.0

    right_edge = field.width_m - EDGE_MARGIN_M
    if going_right and x >= right_edge:
        x = right_edge
        going_right = False
        lane_index += 1
        heading = 180.0
    elif not going_right and x <= EDGE_MARGIN_M:
        x = EDGE_MARGIN_M
        going_right = True
        lane_index += 1
        heading = 0.0

    if lane_index > field.max_lanes:
        lane_index = 0
        y = EDGE_MARGIN_M

    return Pose(x=x, y=y, heading_deg=heading), lane_index, going_right


def _harvest(
    field: FieldConfig,
    machine: MachineConfig,
    metrics: Metrics,
    speed_kmh: float,
    dt_s: float,
) -> tuple[Metrics, OperatorStatus]:
    speed_mps = kmh_to_mps(speed_kmh)
    travelled_m = speed_mps * dt_s
    swept_m2 = travelled_m * field.header_width_m

    potential_kg_s = speed_mps * field.header_width_m * machine.yield_kg_per_m2
    loss_pct = compute_loss_pct(speed_kmh, machine.optimal_max_kmh, machine.alarm_min_kmh)
    captured_kg_s = potential_kg_s * (1.0 - loss_pct / 100.0)

    tank_kg = min(machine.tank_capacity_kg, metrics.tank_kg + captured_kg_s * dt_s)

    updated = replace(
        metrics,
        distance_m=metrics.distance_m + travelled_m,
        area_harvested_ha=metrics.area_harvested_ha + max(0.0, swept_m2) / 10_000.0,
        moving_time_s=metrics.moving_time_s + (dt_s if speed_mps > 0 else 0.0),
        throughput_kg_per_s=captured_kg_s,
        harvesting_rate_t_per_h=captured_kg_s * 3.6,
        harvesting_rate_kg_per_min=captured_kg_s * 60.0,
        loss_pct=loss_pct,
        loss_kg_per_ha=machine.yield_kg_per_m2 * 10_000.0 * (loss_pct / 100.0),
        tank_kg=tank_kg,
        tank_fill_pct=_fill_pct(tank_kg, machine.tank_capacity_kg),
    )

    if tank_kg >= machine.tank_capacity_kg:
        return updated, OperatorStatus.UNLOADING
    if loss_pct >= machine.alarm_threshold_pct:
        return updated, OperatorStatus.ALARM
    return updated, OperatorStatus.HARVESTING


def _unload(
    machine: MachineConfig,
    metrics: Metrics,
    dt_s: float,
) -> tuple[Metrics, OperatorStatus, UnloadSummary | None]:
    """Drain the tank; emit the summary and resume harvesting once it is empty."""
    drained = max(0.0, metrics.tank_kg - machine.unload_rate_kg_per_min / 60.0 * dt_s)
    metrics = replace(
        metrics,
        throughput_kg_per_s=0.0,
        harvesting_rate_t_per_h=0.0,
        harvesting_rate_kg_per_min=0.0,
        tank_kg=drained,
        tank_fill_pct=_fill_pct(drained, machine.tank_capacity_kg),
    )
    if drained > UNLOAD_EPSILON_KG:
        return metrics, OperatorStatus.UNLOADING, None

    avg_speed = (
        metrics.distance_m / metrics.moving_time_s * 3.6 if metrics.moving_time_s > 0 else 0.0
    )
    summary = UnloadSummary(
        total_harvested_kg=machine.tank_capacity_kg,
        avg_loss_pct=metrics.loss_pct,
        area_ha=metrics.area_harvested_ha,
        avg_speed_kmh=avg_speed,
    )
    metrics = replace(metrics, tank_kg=0.0, tank_fill_pct=0.0)
    return metrics, OperatorStatus.HARVESTING, summary
