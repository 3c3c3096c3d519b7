"""Combine simulation engine.

Public API
----------
tick                 - pure state transition
create_initial_state - reset snapshot
compute_loss_pct     - piecewise grain-loss model
SpeedProfile         - autopilot target-speed generator
HarvestSession       - per-frame driver wiring engine, autopilot and lane follower
"""

from harvest_sim.sim.autopilot import SpeedProfile
from harvest_sim.sim.engine import create_initial_state, tick
from harvest_sim.sim.loss import LossLevel, SpeedBand, classify_loss, classify_speed, compute_loss_pct
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
from harvest_sim.sim.session import HarvestSession, SessionSnapshot

__all__ = [
    "Controls",
    "FieldConfig",
    "HarvestSession",
    "LossLevel",
    "MachineConfig",
    "Metrics",
    "OperatorStatus",
    "Pose",
    "SessionSnapshot",
    "SimState",
    "SpeedBand",
    "SpeedProfile",
    "UnloadSummary",
    "classify_loss",
    "classify_speed",
    "compute_loss_pct",
    "create_initial_state",
    "tick",
]
