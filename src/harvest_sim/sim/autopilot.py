"""Autopilot speed profile — synthesises an operator's target speed over time.

Not part of the engine contract: it is one swappable source of
``target_speed_kmh`` for :func:`~harvest_sim.sim.engine.tick`.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass(frozen=True)
class SegmentKind:
    """One kind of driving segment and how likely it is to be picked."""

    name: str
    probability: float
    speed_range_kmh: tuple[float, float]
    duration_range_s: tuple[float, float]


# Mostly cruising near the optimum, with occasional pushes into the yellow band
# and rare overspeed into the red band.
DEFAULT_SEGMENTS: tuple[SegmentKind, ...] = (
    SegmentKind("cruise", 0.70, (5.2, 5.8), (8.0, 15.0)),
    SegmentKind("push", 0.22, (7.2, 8.2), (5.0, 11.0)),
    SegmentKind("overspeed", 0.08, (8.5, 9.5), (3.0, 8.0)),
)


class SpeedProfile:
    """Randomised cruise/push/overspeed segments with bounded acceleration.

    Segment time counts down in *simulated* time (scaled by ``time_scale``) while
    the speed ramps toward the segment target at *accel_kmh_per_s* per *real*
    second, so higher time scales cycle segments faster without jumping speed.

    Parameters
    ----------
    initial_speed_kmh:
        Speed before the first update.
    accel_kmh_per_s:
        Maximum speed change per real second.
    segments:
        Segment kinds to draw from; probabilities should sum to 1.
    rng:
        Random source, injectable for reproducible tests.
    """

    def __init__(
        self,
        initial_speed_kmh: float = 5.5,
        accel_kmh_per_s: float = 0.5,
        segments: tuple[SegmentKind, ...] = DEFAULT_SEGMENTS,
        rng: random.Random | None = None,
    ) -> None:
        if not segments:
            raise ValueError("At least one segment kind is required")
        self._segments = segments
        self._accel = accel_kmh_per_s
        self._rng = rng or random.Random()
        self._initial_kmh = initial_speed_kmh
        self.current_kmh = initial_speed_kmh
        self.desired_kmh = initial_speed_kmh
        self.segment: SegmentKind = segments[0]
        self.remaining_s = 0.0
        self.pick_next_segment()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Back to the initial speed with a freshly drawn segment."""
        self.current_kmh = self._initial_kmh
        self.desired_kmh = self._initial_kmh
        self.pick_next_segment()

    def pick_next_segment(self) -> SegmentKind:
        """Draw a new segment kind, target speed and duration."""
        r = self._rng.random()
        cumulative = 0.0
        chosen = self._segments[-1]
        for kind in self._segments:
            cumulative += kind.probability
            if r < cumulative:
                chosen = kind
                break

        lo, hi = chosen.speed_range_kmh
        self.desired_kmh = lo + self._rng.random() * (hi - lo)
        lo, hi = chosen.duration_range_s
        self.remaining_s = lo + self._rng.random() * (hi - lo)
        self.segment = chosen
        return chosen

    def update(self, dt_ms: float, time_scale: float = 1.0) -> float:
        """Advance by *dt_ms* of real time and return the current speed in km/h."""
        self.remaining_s -= dt_ms / 1000.0 * time_scale
        if self.remaining_s <= 0:
            self.pick_next_segment()

        delta = self._accel * (dt_ms / 1000.0)
        if self.current_kmh < self.desired_kmh:
            self.current_kmh = min(self.desired_kmh, self.current_kmh + delta)
        elif self.current_kmh > self.desired_kmh:
            self.current_kmh = max(self.desired_kmh, self.current_kmh - delta)
        return self.current_kmh
