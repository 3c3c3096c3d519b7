"""Grain-loss model and speed/loss banding."""

from __future__ import annotations

from enum import Enum

from harvest_sim.sim.models import MachineConfig

LOSS_CAP_PCT = 12.0
"""Upper clamp for the loss percentage."""

_KNEE_KMH = 7.0


class SpeedBand(str, Enum):
    LOW = "low"
    OPTIMAL = "optimal"
    WARNING = "warning"
    ALARM = "alarm"


class LossLevel(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ALARM = "alarm"


def compute_loss_pct(
    speed_kmh: float,
    optimal_max_kmh: float = 6.0,
    alarm_min_kmh: float = 8.0,
) -> float:
    """Percentage of potential throughput lost at *speed_kmh*.

    Piecewise, continuous at the default breakpoints (6, 7, 8 km/h):

    * up to *optimal_max_kmh*: flat 1.0 %
    * up to 7 km/h: gentle quadratic rise, reaching 1.5 % at 7 km/h
    * up to *alarm_min_kmh*: steeper linear rise, reaching 3.0 % at 8 km/h
    * beyond: 2 % per km/h, clamped at :data:`LOSS_CAP_PCT`
    """
    if speed_kmh <= optimal_max_kmh:
        return 1.0
    if speed_kmh < _KNEE_KMH:
        t = speed_kmh - optimal_max_kmh
        return 1.0 + 0.5 * t * t
    if speed_kmh < alarm_min_kmh:
        return 1.5 + 1.5 * (speed_kmh - _KNEE_KMH)
    return min(LOSS_CAP_PCT, 3.0 + 2.0 * (speed_kmh - alarm_min_kmh))


def classify_speed(speed_kmh: float, machine: MachineConfig) -> SpeedBand:
    """Colour band for a travel speed (below optimal counts as LOW, not an error)."""
    if speed_kmh >= machine.alarm_min_kmh:
        return SpeedBand.ALARM
    if speed_kmh > machine.optimal_max_kmh:
        return SpeedBand.WARNING
    if speed_kmh < machine.optimal_min_kmh:
        return SpeedBand.LOW
    return SpeedBand.OPTIMAL


def classify_loss(loss_pct: float, machine: MachineConfig) -> LossLevel:
    if loss_pct >= machine.alarm_threshold_pct:
        return LossLevel.ALARM
    if machine.loss_warn_pct is not None and loss_pct >= machine.loss_warn_pct:
        return LossLevel.WARNING
    return LossLevel.OK
