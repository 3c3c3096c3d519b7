"""Local planar projection for field-sized areas.

Lane geometry is done in metres on a plane tangent to the field.  An
equirectangular projection around the field centre is accurate to well under a
metre over a few kilometres, which is all a field needs.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

EARTH_RADIUS_M = 6_371_008.8


@dataclass(frozen=True)
class LocalProjector:
    """Convert between (lon, lat) degrees and east/north metres around an origin."""

    lon0: float
    lat0: float

    @classmethod
    def centred_on(cls, coords: Iterable[tuple[float, float]]) -> LocalProjector:
        """Projector whose origin is the centre of the bounding box of *coords*."""
        pts = list(coords)
        if not pts:
            raise ValueError("At least one coordinate is required")
        lons = [p[0] for p in pts]
        lats = [p[1] for p in pts]
        return cls(lon0=(min(lons) + max(lons)) / 2.0, lat0=(min(lats) + max(lats)) / 2.0)

    @property
    def _cos_lat0(self) -> float:
        return math.cos(math.radians(self.lat0))

    def to_local(self, lon: float, lat: float) -> tuple[float, float]:
        """(lon, lat) degrees → (east, north) metres."""
        x = math.radians(lon - self.lon0) * self._cos_lat0 * EARTH_RADIUS_M
        y = math.radians(lat - self.lat0) * EARTH_RADIUS_M
        return x, y

    def to_lonlat(self, x: float, y: float) -> tuple[float, float]:
        """(east, north) metres → (lon, lat) degrees."""
        lon = self.lon0 + math.degrees(x / (self._cos_lat0 * EARTH_RADIUS_M))
        lat = self.lat0 + math.degrees(y / EARTH_RADIUS_M)
        return lon, lat


def compass_bearing(x1: float, y1: float, x2: float, y2: float) -> float:
    """Bearing in degrees from point 1 to point 2 on the local plane.

    0 = north, 90 = east; result in ``[-180, 180]``.  Coincident points give 0.
    """
    return math.degrees(math.atan2(x2 - x1, y2 - y1))
