"""LaneFollower — maps accumulated travel distance onto a position along the lanes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from harvest_sim.field.models import Lane, LonLat
from harvest_sim.timing import clamp_frame_ms


@dataclass(frozen=True)
class FollowerControls:
    """Per-frame inputs for :meth:`LaneFollower.step`."""

    running: bool = False
    speed_kmh: float = 0.0
    time_scale: float = 1.0


@dataclass(frozen=True)
class FollowerFrame:
    """Where the machine is along the lane set after one step."""

    lane_index: int
    distance_into_lane: float
    """Metres from the start of the current lane, within ``[0, lane length]``."""

    position: LonLat | None
    """``(lon, lat)``; None when there are no lanes."""

    heading_deg: float
    """Compass bearing of travel (0 = north)."""

    finished: bool = False
    """True once the follower holds at the end of the final lane."""


class LaneFollower:
    """Stateful walker over an ordered lane list.

    Holds ``(lane_index, distance_into_lane)``.  Distance carries over from one
    lane to the next; at the end of the final lane the follower holds there.
    Passing a different lane list object resets the accumulator.

    Args:
        look_ahead_m: Distance ahead on the lane used to sample the heading.
    """

    def __init__(self, look_ahead_m: float = 5.0) -> None:
        self.look_ahead_m = look_ahead_m
        self.lane_index = 0
        self.distance_into_lane = 0.0
        self._lanes: Sequence[Lane] | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self) -> None:
        self.lane_index = 0
        self.distance_into_lane = 0.0

    def step(
        self,
        lanes: Sequence[Lane],
        controls: FollowerControls,
        delta_ms: float,
    ) -> FollowerFrame:
        """Advance by one animation frame of *delta_ms* (clamped) real time."""
        travelled_m = 0.0
        if controls.running:
            dt_s = clamp_frame_ms(delta_ms) / 1000.0
            travelled_m = (controls.speed_kmh / 3.6) * controls.time_scale * dt_s
        return self.advance(lanes, travelled_m)

    def advance(self, lanes: Sequence[Lane], distance_m: float) -> FollowerFrame:
        """Move *distance_m* metres further along *lanes* and return the new frame."""
        if lanes is not self._lanes:
            self._lanes = lanes
            self.reset()

        if not lanes:
            return FollowerFrame(lane_index=0, distance_into_lane=0.0, position=None, heading_deg=0.0)

        index = self.lane_index
        dist = self.distance_into_lane + max(0.0, distance_m)
        length = lanes[index].length_m
        while dist > length and index < len(lanes) - 1:
            dist -= length
            index += 1
            length = lanes[index].length_m

        dist = min(dist, length)
        self.lane_index = index
        self.distance_into_lane = dist

        lane = lanes[index]
        return FollowerFrame(
            lane_index=index,
            distance_into_lane=dist,
            position=lane.point_at(dist),
            heading_deg=lane.heading_at(dist, self.look_ahead_m),
            finished=index == len(lanes) - 1 and dist >= length,
        )
