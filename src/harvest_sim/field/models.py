"""Field and lane data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from shapely.geometry import LineString

from harvest_sim.field.projection import LocalProjector, compass_bearing

LonLat = tuple[float, float]


@dataclass(frozen=True)
class Lane:
    """One straight (or clipped) coverage pass across the field.

    Coordinates are geographic ``(lon, lat)`` pairs in driving order.  Length,
    bearing and interpolation are computed on the local plane of *projector*.
    """

    coords: tuple[LonLat, ...]
    """Two or more ``(lon, lat)`` points, first = where the pass starts."""

    projector: LocalProjector = field(repr=False, compare=False)
    """Projection the lane was built on."""

    def __post_init__(self) -> None:
        if len(self.coords) < 2:
            raise ValueError("A lane needs at least two coordinates")

    @cached_property
    def line(self) -> LineString:
        """The lane as a shapely line in local metres."""
        return LineString([self.projector.to_local(lon, lat) for lon, lat in self.coords])

    @property
    def length_m(self) -> float:
        return self.line.length

    @property
    def bearing_deg(self) -> float:
        """Compass bearing from the first to the last coordinate."""
        (x1, y1), (x2, y2) = self.line.coords[0], self.line.coords[-1]
        return compass_bearing(x1, y1, x2, y2)

    @property
    def start(self) -> LonLat:
        return self.coords[0]

    @property
    def end(self) -> LonLat:
        return self.coords[-1]

    def reversed(self) -> Lane:
        return Lane(coords=tuple(reversed(self.coords)), projector=self.projector)

    def point_at(self, distance_m: float) -> LonLat:
        """``(lon, lat)`` at *distance_m* along the lane (clamped to the lane)."""
        pt = self.line.interpolate(max(0.0, min(self.length_m, distance_m)))
        return self.projector.to_lonlat(pt.x, pt.y)

    def heading_at(self, distance_m: float, look_ahead_m: float = 5.0) -> float:
        """Bearing from the point at *distance_m* to a point *look_ahead_m* further on.

        The look-ahead is clamped to the lane end; at the very end the bearing is
        taken from a point *look_ahead_m* behind instead.
        """
        length = self.length_m
        here = max(0.0, min(length, distance_m))
        ahead = min(length, here + look_ahead_m)
        if ahead - here > 1e-9:
            a, b = self.line.interpolate(here), self.line.interpolate(ahead)
            return compass_bearing(a.x, a.y, b.x, b.y)
        behind = max(0.0, here - look_ahead_m)
        if here - behind > 1e-9:
            a, b = self.line.interpolate(behind), self.line.interpolate(here)
            return compass_bearing(a.x, a.y, b.x, b.y)
        return self.bearing_deg
