"""/api/session endpoints."""

from __future__ import annotations

import pytest

from tests.web.conftest import manual_controls


def test_initial_session_is_idle(client):
    data = client.get("/api/session").json()
    assert data["status"] == "Idle"
    assert data["running"] is False
    assert data["autopilot"] is True
    assert data["time_scale"] == 1.0
    assert data["metrics"]["tank_kg"] == 0.0
    assert data["summary"] is None
    assert data["position"] is None


def test_frame_while_paused_does_not_move(client):
    data = client.post("/api/session/frame", json={"delta_ms": 200}).json()
    assert data["status"] == "Idle"
    assert data["metrics"]["distance_m"] == 0.0
    assert data["position"]["lane_index"] == 0
    assert data["position"]["distance_into_lane"] == 0.0


def test_start_and_frame_harvests(client):
    manual_controls(client, 5.5)
    assert client.post("/api/session/start").json()["running"] is True

    data = client.post("/api/session/frame", json={"delta_ms": 200}).json()
    assert data["status"] == "Harvesting"
    assert data["speed_band"] == "optimal"
    assert data["loss_level"] == "ok"
    assert data["metrics"]["speed_kmh"] == 5.5
    assert data["metrics"]["distance_m"] == pytest.approx(5.5 / 3.6 * 0.2)
    assert data["metrics"]["tank_kg"] > 0
    pos = data["position"]
    assert pos["distance_into_lane"] == pytest.approx(data["metrics"]["distance_m"])
    assert pos["lon"] is not None
    assert pos["lat"] is not None
    assert pos["finished"] is False


def test_frame_delta_is_clamped(client):
    manual_controls(client, 5.5)
    client.post("/api/session/start")
    data = client.post("/api/session/frame", json={"delta_ms": 5000}).json()
    assert data["metrics"]["distance_m"] == pytest.approx(5.5 / 3.6 * 0.2)


def test_overspeed_raises_alarm(client):
    manual_controls(client, 9.0)
    client.post("/api/session/start")
    data = client.post("/api/session/frame", json={}).json()
    assert data["status"] == "Alarm"
    assert data["speed_band"] == "alarm"
    assert data["loss_level"] == "alarm"


def test_pause_returns_to_idle(client):
    manual_controls(client, 5.5)
    client.post("/api/session/start")
    client.post("/api/session/frame", json={})
    assert client.post("/api/session/pause").json()["running"] is False
    data = client.post("/api/session/frame", json={}).json()
    assert data["status"] == "Idle"
    assert data["metrics"]["speed_kmh"] == 0.0


def test_reset_clears_progress(client):
    manual_controls(client, 5.5)
    client.post("/api/session/start")
    client.post("/api/session/frame", json={})
    data = client.post("/api/session/reset").json()
    assert data["running"] is False
    assert data["metrics"]["distance_m"] == 0.0
    assert data["position"] is None


def test_time_scale_control(client):
    data = client.post("/api/session/controls", json={"time_scale": 10}).json()
    assert data["time_scale"] == 10.0


@pytest.mark.parametrize(
    "body",
    [{"time_scale": 0}, {"time_scale": -1}, {"target_speed_kmh": -1}],
)
def test_invalid_controls_are_422(client, body):
    resp = client.post("/api/session/controls", json=body)
    assert resp.status_code == 422


def test_negative_delta_is_422(client):
    resp = client.post("/api/session/frame", json={"delta_ms": -5})
    assert resp.status_code == 422
