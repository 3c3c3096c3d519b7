"""Pydantic request/response schemas for the JSON API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class LanesRequest(BaseModel):
    polygon: list[tuple[float, float]] = Field(min_length=3)
    """``[lon, lat]`` ring; closed automatically if needed."""
    header_width_m: float = 7.5
    bearing_deg: float | None = None
    max_offsets: int = 400
    min_segment_m: float = 10.0


class LaneRecord(BaseModel):
    index: int
    coordinates: list[tuple[float, float]]
    length_m: float
    bearing_deg: float


class LanesResponse(BaseModel):
    count: int
    total_length_m: float
    lanes: list[LaneRecord]


class ControlsRequest(BaseModel):
    target_speed_kmh: float | None = Field(default=None, ge=0)
    time_scale: float | None = Field(default=None, gt=0)
    autopilot: bool | None = None


class FrameRequest(BaseModel):
    delta_ms: float = Field(default=200.0, ge=0)


class MetricsRecord(BaseModel):
    speed_kmh: float
    distance_m: float
    throughput_kg_per_s: float
    harvesting_rate_t_per_h: float
    harvesting_rate_kg_per_min: float
    tank_kg: float
    tank_fill_pct: float
    loss_pct: float
    loss_kg_per_ha: float
    area_harvested_ha: float


class SummaryRecord(BaseModel):
    total_harvested_kg: float
    avg_loss_pct: float
    area_ha: float
    avg_speed_kmh: float


class PositionRecord(BaseModel):
    lane_index: int
    distance_into_lane: float
    lon: float | None
    lat: float | None
    heading_deg: float
    finished: bool


class SessionResponse(BaseModel):
    status: str
    running: bool
    autopilot: bool
    target_speed_kmh: float
    time_scale: float
    speed_band: str
    loss_level: str
    metrics: MetricsRecord
    summary: SummaryRecord | None
    position: PositionRecord | None
