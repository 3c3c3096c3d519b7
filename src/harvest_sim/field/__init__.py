"""Field lane decomposition and lane following."""

from harvest_sim.field.follower import FollowerControls, FollowerFrame, LaneFollower
from harvest_sim.field.lanes import generate_lanes
from harvest_sim.field.models import Lane
from harvest_sim.field.projection import LocalProjector

__all__ = [
    "FollowerControls",
    "FollowerFrame",
    "Lane",
    "LaneFollower",
    "LocalProjector",
    "generate_lanes",
]
