"""POST /api/lanes."""

from __future__ import annotations

import pytest

from harvest_sim.field.geojson import DEMO_FIELD
from tests.conftest import make_rect


def test_rectangle_lanes(client):
    resp = client.post("/api/lanes", json={"polygon": make_rect(310.0, 100.0), "header_width_m": 7.5})
    assert resp.status_code == 200
    data = resp.json()
    assert data["count"] == 41
    assert len(data["lanes"]) == 41
    assert data["total_length_m"] == pytest.approx(4100.0, abs=1e-3)
    first = data["lanes"][0]
    assert first["index"] == 0
    assert first["bearing_deg"] == pytest.approx(0.0, abs=1e-6)
    assert len(first["coordinates"][0]) == 2


def test_demo_field_has_lanes(client):
    resp = client.post("/api/lanes", json={"polygon": [list(p) for p in DEMO_FIELD]})
    assert resp.status_code == 200
    assert resp.json()["count"] > 0


def test_bearing_override(client):
    resp = client.post(
        "/api/lanes",
        json={"polygon": make_rect(310.0, 100.0), "bearing_deg": 90.0},
    )
    assert resp.json()["count"] == 13


def test_degenerate_polygon_gives_empty_list(client):
    resp = client.post("/api/lanes", json={"polygon": [[27.0, 37.0], [27.001, 37.0], [27.002, 37.0]]})
    assert resp.status_code == 200
    assert resp.json() == {"count": 0, "total_length_m": 0.0, "lanes": []}


def test_invalid_header_width_is_422(client):
    resp = client.post("/api/lanes", json={"polygon": make_rect(100.0, 100.0), "header_width_m": 0})
    assert resp.status_code == 422


def test_too_short_polygon_is_422(client):
    resp = client.post("/api/lanes", json={"polygon": [[27.0, 37.0], [27.001, 37.0]]})
    assert resp.status_code == 422
