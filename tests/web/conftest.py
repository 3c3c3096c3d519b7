"""Shared fixtures for web tests."""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

import harvest_sim.web.app as web_app
from harvest_sim.web.app import app


@pytest.fixture
def client(monkeypatch):
    """FastAPI test client over a fresh session built from default config."""
    for name in list(os.environ):
        if name.startswith("HARVEST_SIM_"):
            monkeypatch.delenv(name)
    monkeypatch.setattr(web_app, "_session", None)
    with TestClient(app) as c:
        yield c


def manual_controls(client, speed_kmh: float = 5.5) -> dict:
    """Switch the session to a fixed manual speed and return the response body."""
    resp = client.post(
        "/api/session/controls",
        json={"autopilot": False, "target_speed_kmh": speed_kmh},
    )
    assert resp.status_code == 200
    return resp.json()
