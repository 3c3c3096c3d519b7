"""Shared fixtures: rectangular test fields built on a known local projection."""

from __future__ import annotations

import pytest

from harvest_sim.field.lanes import generate_lanes
from harvest_sim.field.projection import LocalProjector

ORIGIN = LocalProjector(lon0=27.0, lat0=37.0)


def make_rect(width_m: float, height_m: float) -> list[tuple[float, float]]:
    """Closed lon/lat ring of a *width_m* (east-west) x *height_m* rectangle centred on ORIGIN."""
    hw, hh = width_m / 2.0, height_m / 2.0
    corners = [(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh), (-hw, -hh)]
    return [ORIGIN.to_lonlat(x, y) for x, y in corners]


def make_ring(points_m: list[tuple[float, float]]) -> list[tuple[float, float]]:
    """Lon/lat ring from local metre coordinates (not closed)."""
    return [ORIGIN.to_lonlat(x, y) for x, y in points_m]


@pytest.fixture
def rect_lanes():
    """41 north-south lanes, 100 m each, over a 310 x 100 m rectangle (7.5 m header)."""
    return generate_lanes(make_rect(310.0, 100.0), 7.5)


@pytest.fixture(name="make_rect")
def make_rect_fixture():
    return make_rect


@pytest.fixture(name="make_ring")
def make_ring_fixture():
    return make_ring
