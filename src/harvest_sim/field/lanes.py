"""Lane generation — decompose a field polygon into boustrophedon coverage lanes.

Algorithm:
1. Project the ``(lon, lat)`` ring onto a local metre plane.
2. Pick the lane bearing from the bounding box (wider → north-south lanes,
   taller → east-west lanes) unless one is given.
3. Lay a long baseline through the centroid along that bearing.
4. Shift it sideways by whole multiples of the header width, scanning outward
   from the centroid on both sides, and keep the clipped pieces whose midpoint
   lies inside the field, at least :data:`BOUNDARY_CLEARANCE_M` from its edge.
   A side stops once more than :data:`EMPTY_STREAK_LIMIT` consecutive shifts
   keep nothing.
5. Sort the pieces across the field and reverse every other one so each lane
   starts next to where the previous lane ended.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from shapely.affinity import translate
from shapely.geometry import LineString, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.validation import explain_validity, make_valid

from harvest_sim.errors import InvalidConfig, require_positive
from harvest_sim.field.models import Lane, LonLat
from harvest_sim.field.projection import LocalProjector

_logger = logging.getLogger(__name__)

BASELINE_HALF_LENGTH_M = 10_000.0
"""Half-length of the baseline; far longer than any field."""

EMPTY_STREAK_LIMIT = 20
"""Consecutive empty offsets after which a scan direction is abandoned."""

BOUNDARY_CLEARANCE_M = 1e-6
"""Minimum distance from the field boundary for a piece midpoint to count as inside."""


def generate_lanes(
    polygon: Sequence[LonLat],
    header_width_m: float,
    *,
    bearing_deg: float | None = None,
    max_offsets: int = 400,
    min_segment_m: float = 10.0,
) -> list[Lane]:
    """Split *polygon* into parallel lanes *header_width_m* apart.

    Args:
        polygon: ``(lon, lat)`` ring.  Closed (first == last) or not; it is
            closed automatically.
        header_width_m: Swath width and lane spacing in metres.
        bearing_deg: Lane direction override (0 = north, 90 = east).
        max_offsets: Maximum number of header widths scanned on each side of
            the centroid.
        min_segment_m: Pieces this short or shorter are dropped.

    Returns:
        Lanes in traversal order, alternating direction.  Empty for a
        degenerate polygon.

    Raises:
        InvalidConfig: If *header_width_m* is not a finite value > 0, or
            *max_offsets* is negative.
    """
    header = require_positive("header_width_m", header_width_m)
    if max_offsets < 0:
        raise InvalidConfig(f"max_offsets must be >= 0, got {max_offsets!r}")

    ring = _closed_ring(polygon)
    if len(ring) < 4:
        return []

    projector = LocalProjector.centred_on(ring)
    area = _field_area(Polygon([projector.to_local(lon, lat) for lon, lat in ring]))
    if area is None:
        return []

    if bearing_deg is None:
        minx, miny, maxx, maxy = area.bounds
        bearing_deg = 0.0 if (maxx - minx) >= (maxy - miny) else 90.0

    rad = math.radians(bearing_deg)
    along = (math.sin(rad), math.cos(rad))
    across = _sort_axis(rad)

    inner = area.buffer(-BOUNDARY_CLEARANCE_M)
    c = area.centroid
    base = LineString([
        (c.x - along[0] * BASELINE_HALF_LENGTH_M, c.y - along[1] * BASELINE_HALF_LENGTH_M),
        (c.x + along[0] * BASELINE_HALF_LENGTH_M, c.y + along[1] * BASELINE_HALF_LENGTH_M),
    ])

    # (across position, along position, piece)
    pieces: list[tuple[float, float, LineString]] = []
    for offsets in (range(0, max_offsets + 1), range(-1, -max_offsets - 1, -1)):
        empty_streak = 0
        for i in offsets:
            shifted = translate(base, xoff=across[0] * i * header, yoff=across[1] * i * header)
            kept = 0
            for piece in _line_parts(area.intersection(shifted)):
                if piece.length <= min_segment_m:
                    continue
                mid = piece.interpolate(0.5, normalized=True)
                if not inner.contains(mid):
                    continue
                piece = _orient(piece, along)
                pieces.append((
                    mid.x * across[0] + mid.y * across[1],
                    mid.x * along[0] + mid.y * along[1],
                    piece,
                ))
                kept += 1

            empty_streak = 0 if kept else empty_streak + 1
            if empty_streak > EMPTY_STREAK_LIMIT:
                break

    pieces.sort(key=lambda p: (p[0], p[1]))

    lanes: list[Lane] = []
    for idx, (_, _, piece) in enumerate(pieces):
        lane = Lane(
            coords=tuple(projector.to_lonlat(x, y) for x, y in piece.coords),
            projector=projector,
        )
        lanes.append(lane.reversed() if idx % 2 == 1 else lane)

    _logger.debug(
        "Generated %d lanes (bearing %.1f°, header %.2f m)", len(lanes), bearing_deg, header
    )
    return lanes


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _closed_ring(polygon: Sequence[LonLat]) -> list[LonLat]:
    ring = [(float(p[0]), float(p[1])) for p in polygon]
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def _field_area(poly: Polygon) -> BaseGeometry | None:
    """Return a valid polygonal area, or None when nothing usable remains."""
    if not poly.is_valid:
        _logger.warning("Field polygon is invalid (%s); repairing", explain_validity(poly))
        poly = make_valid(poly)
    if poly.is_empty or poly.area <= 0:
        return None
    return poly


def _line_parts(geom: BaseGeometry) -> list[LineString]:
    """Flatten an intersection result into its line pieces (points are dropped)."""
    if geom.is_empty:
        return []
    if isinstance(geom, LineString):
        return [geom]
    parts: list[LineString] = []
    for sub in getattr(geom, "geoms", ()):
        parts.extend(_line_parts(sub))
    return parts


def _sort_axis(rad: float) -> tuple[float, float]:
    """Unit vector across lanes of bearing *rad*.

    Points east for mostly north-south lanes and north for mostly east-west ones,
    so lanes are ordered west to east or south to north.
    """
    x, y = math.cos(rad), -math.sin(rad)
    if abs(y) > abs(x):
        return (x, y) if y > 0 else (-x, -y)
    return (x, y) if x >= 0 else (-x, -y)


def _orient(piece: LineString, along: tuple[float, float]) -> LineString:
    """Make *piece* run in the *along* direction."""
    (x1, y1), (x2, y2) = piece.coords[0], piece.coords[-1]
    if (x2 - x1) * along[0] + (y2 - y1) * along[1] < 0:
        return LineString(list(piece.coords)[::-1])
    return piece
