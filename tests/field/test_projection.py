"""Local equirectangular projection."""

from __future__ import annotations

import math

import pytest

from harvest_sim.field.projection import EARTH_RADIUS_M, LocalProjector, compass_bearing


def test_origin_maps_to_zero():
    proj = LocalProjector(lon0=27.0, lat0=37.0)
    assert proj.to_local(27.0, 37.0) == (0.0, 0.0)


def test_round_trip():
    proj = LocalProjector(lon0=27.36, lat0=37.65)
    lon, lat = proj.to_lonlat(412.5, -288.0)
    x, y = proj.to_local(lon, lat)
    assert x == pytest.approx(412.5, abs=1e-6)
    assert y == pytest.approx(-288.0, abs=1e-6)


def test_one_degree_of_latitude():
    proj = LocalProjector(lon0=0.0, lat0=0.0)
    _, y = proj.to_local(0.0, 1.0)
    assert y == pytest.approx(EARTH_RADIUS_M * math.pi / 180)


def test_longitude_shrinks_with_latitude():
    equator = LocalProjector(lon0=0.0, lat0=0.0).to_local(1.0, 0.0)[0]
    sixty = LocalProjector(lon0=0.0, lat0=60.0).to_local(1.0, 60.0)[0]
    assert sixty == pytest.approx(equator / 2)


def test_centred_on_bbox():
    proj = LocalProjector.centred_on([(10.0, 40.0), (12.0, 41.0), (11.0, 44.0)])
    assert proj.lon0 == 11.0
    assert proj.lat0 == 42.0


def test_centred_on_requires_points():
    with pytest.raises(ValueError):
        LocalProjector.centred_on([])


@pytest.mark.parametrize(
    "dx, dy, expected",
    [(0, 1, 0.0), (1, 0, 90.0), (0, -1, 180.0), (-1, 0, -90.0), (1, 1, 45.0)],
)
def test_compass_bearing(dx, dy, expected):
    assert compass_bearing(0.0, 0.0, dx, dy) == pytest.approx(expected)
