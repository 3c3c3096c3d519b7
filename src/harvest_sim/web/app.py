"""FastAPI JSON API over one in-process harvest session."""

from __future__ import annotations

import logging
from dataclasses import asdict

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from harvest_sim.config import describe, load_field_config, load_machine_config
from harvest_sim.errors import InvalidConfig
from harvest_sim.field.geojson import DEMO_FIELD
from harvest_sim.field.lanes import generate_lanes
from harvest_sim.sim.loss import classify_loss, classify_speed
from harvest_sim.sim.session import HarvestSession, SessionSnapshot
from harvest_sim.web.schemas import (
    ControlsRequest,
    FrameRequest,
    HealthResponse,
    LaneRecord,
    LanesRequest,
    LanesResponse,
    MetricsRecord,
    PositionRecord,
    SessionResponse,
    SummaryRecord,
)

load_dotenv()  # loads .env from the working directory; must run before env vars are consumed

_logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(title="Harvest Simulator", version=VERSION)


def _new_session() -> HarvestSession:
    field = load_field_config()
    machine = load_machine_config()
    lanes = generate_lanes(DEMO_FIELD, field.header_width_m)
    _logger.info("Session created with %d demo lanes, machine=%s", len(lanes), describe(machine))
    return HarvestSession(field=field, machine=machine, lanes=lanes)


_session: HarvestSession | None = None


def get_session() -> HarvestSession:
    global _session
    if _session is None:
        _session = _new_session()
    return _session


def _to_response(snap: SessionSnapshot) -> SessionResponse:
    state = snap.state
    m = state.metrics
    summary = snap.last_summary
    frame = snap.follower
    position = None
    if frame is not None:
        lon, lat = frame.position if frame.position is not None else (None, None)
        position = PositionRecord(
            lane_index=frame.lane_index,
            distance_into_lane=frame.distance_into_lane,
            lon=lon,
            lat=lat,
            heading_deg=frame.heading_deg,
            finished=frame.finished,
        )
    return SessionResponse(
        status=state.status.value,
        running=snap.running,
        autopilot=snap.autopilot,
        target_speed_kmh=snap.target_speed_kmh,
        time_scale=state.time_scale,
        speed_band=classify_speed(m.speed_kmh, state.machine).value,
        loss_level=classify_loss(m.loss_pct, state.machine).value,
        metrics=MetricsRecord(
            speed_kmh=m.speed_kmh,
            distance_m=m.distance_m,
            throughput_kg_per_s=m.throughput_kg_per_s,
            harvesting_rate_t_per_h=m.harvesting_rate_t_per_h,
            harvesting_rate_kg_per_min=m.harvesting_rate_kg_per_min,
            tank_kg=m.tank_kg,
            tank_fill_pct=m.tank_fill_pct,
            loss_pct=m.loss_pct,
            loss_kg_per_ha=m.loss_kg_per_ha,
            area_harvested_ha=m.area_harvested_ha,
        ),
        summary=SummaryRecord(**asdict(summary)) if summary is not None else None,
        position=position,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.post("/api/lanes", response_model=LanesResponse)
def lanes(req: LanesRequest) -> LanesResponse:
    """Decompose a field polygon into ordered coverage lanes."""
    try:
        result = generate_lanes(
            req.polygon,
            req.header_width_m,
            bearing_deg=req.bearing_deg,
            max_offsets=req.max_offsets,
            min_segment_m=req.min_segment_m,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    records = [
        LaneRecord(
            index=i,
            coordinates=list(lane.coords),
            length_m=lane.length_m,
            bearing_deg=lane.bearing_deg,
        )
        for i, lane in enumerate(result)
    ]
    return LanesResponse(
        count=len(records),
        total_length_m=sum(r.length_m for r in records),
        lanes=records,
    )


@app.get("/api/session", response_model=SessionResponse)
def session_state() -> SessionResponse:
    return _to_response(get_session().snapshot())


@app.post("/api/session/start", response_model=SessionResponse)
def session_start() -> SessionResponse:
    session = get_session()
    session.start()
    return _to_response(session.snapshot())


@app.post("/api/session/pause", response_model=SessionResponse)
def session_pause() -> SessionResponse:
    session = get_session()
    session.pause()
    return _to_response(session.snapshot())


@app.post("/api/session/reset", response_model=SessionResponse)
def session_reset() -> SessionResponse:
    session = get_session()
    session.reset()
    return _to_response(session.snapshot())


@app.post("/api/session/controls", response_model=SessionResponse)
def session_controls(req: ControlsRequest) -> SessionResponse:
    session = get_session()
    try:
        if req.target_speed_kmh is not None:
            session.set_speed(req.target_speed_kmh)
        if req.time_scale is not None:
            session.set_time_scale(req.time_scale)
    except InvalidConfig as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if req.autopilot is not None:
        session.enable_autopilot(req.autopilot)
    return _to_response(session.snapshot())


@app.post("/api/session/frame", response_model=SessionResponse)
def session_frame(req: FrameRequest) -> SessionResponse:
    """Advance the session by one frame (delta clamped to 200 ms)."""
    return _to_response(get_session().frame(req.delta_ms))
