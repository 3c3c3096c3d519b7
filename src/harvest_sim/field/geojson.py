"""GeoJSON (RFC 7946) in and out for field polygons and lanes.

Coordinates are ``[lon, lat]``, the same order lanes use internally.
"""

from __future__ import annotations

from collections.abc import Sequence

from harvest_sim.field.models import Lane, LonLat

# Demo field used when no polygon is supplied.
DEMO_FIELD: tuple[LonLat, ...] = (
    (27.364657, 37.656833),
    (27.368453, 37.657979),
    (27.369767, 37.656383),
    (27.365448, 37.655095),
    (27.364657, 37.656833),
)


def polygon_from_geojson(data: dict) -> list[LonLat]:
    """Return the outer ring of the first Polygon in *data*.

    Accepts a FeatureCollection, a Feature, or a bare Polygon geometry.

    Raises:
        ValueError: If no Polygon geometry with a ring is found.
    """
    if not isinstance(data, dict):
        raise ValueError("GeoJSON must be an object")

    kind = data.get("type")
    if kind == "FeatureCollection":
        for feature in data.get("features", []):
            try:
                return polygon_from_geojson(feature)
            except ValueError:
                continue
        raise ValueError("FeatureCollection contains no Polygon feature")
    if kind == "Feature":
        return polygon_from_geojson(data.get("geometry") or {})
    if kind == "Polygon":
        rings = data.get("coordinates") or []
        if not rings or not rings[0]:
            raise ValueError("Polygon has no outer ring")
        return [(float(p[0]), float(p[1])) for p in rings[0]]
    raise ValueError(f"Unsupported GeoJSON type: {kind!r}")


def lanes_to_geojson(lanes: Sequence[Lane]) -> dict:
    """Export *lanes* as a FeatureCollection of LineStrings, in traversal order."""
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "id": idx,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [list(c) for c in lane.coords],
                },
                "properties": {
                    "index": idx,
                    "length_m": round(lane.length_m, 2),
                    "bearing_deg": round(lane.bearing_deg, 2),
                },
            }
            for idx, lane in enumerate(lanes)
        ],
    }
