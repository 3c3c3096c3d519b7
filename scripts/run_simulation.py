"""Headless simulation run — drives a HarvestSession with a fixed frame rate.

Usage:
    uv run python scripts/run_simulation.py
    uv run python scripts/run_simulation.py --field field.geojson --header-width 9
    uv run python scripts/run_simulation.py --minutes 30 --time-scale 20 --speed 6.5 --no-autopilot
    uv run python scripts/run_simulation.py --lanes-out lanes.geojson -v

Machine and field parameters come from HARVEST_SIM_* environment variables
(see harvest_sim.config); a .env file in the working directory is honoured.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from harvest_sim.config import load_field_config, load_machine_config  # noqa: E402
from harvest_sim.errors import InvalidConfig  # noqa: E402
from harvest_sim.field.geojson import DEMO_FIELD, lanes_to_geojson, polygon_from_geojson  # noqa: E402
from harvest_sim.field.lanes import generate_lanes  # noqa: E402
from harvest_sim.sim.autopilot import SpeedProfile  # noqa: E402
from harvest_sim.sim.loss import classify_loss  # noqa: E402
from harvest_sim.sim.session import HarvestSession, SessionSnapshot  # noqa: E402


def _format_line(sim_s: float, snap: SessionSnapshot) -> str:
    s = snap.state
    m = s.metrics
    where = "-"
    if snap.follower is not None and snap.follower.position is not None:
        lon, lat = snap.follower.position
        where = f"lane {snap.follower.lane_index} @ {lat:.5f},{lon:.5f}"
    return (
        f"t={sim_s:7.0f}s  {s.status.value:<10}  {m.speed_kmh:4.1f} km/h  "
        f"tank {m.tank_kg:6.0f} kg ({m.tank_fill_pct:3.0f}%)  "
        f"loss {m.loss_pct:4.1f}% [{classify_loss(m.loss_pct, s.machine).value}]  "
        f"area {m.area_harvested_ha:6.3f} ha  {where}"
    )


def main() -> None:
    ap = argparse.ArgumentParser(description="Run the combine harvester simulation headless")
    ap.add_argument("--field", type=Path, default=None, help="GeoJSON file with the field polygon")
    ap.add_argument("--header-width", type=float, default=None, help="Header width in metres")
    ap.add_argument("--bearing", type=float, default=None, help="Lane bearing override in degrees")
    ap.add_argument("--minutes", type=float, default=10.0, help="Simulated minutes to run")
    ap.add_argument("--time-scale", type=float, default=5.0, help="Simulated seconds per real second")
    ap.add_argument("--fps", type=float, default=30.0, help="Frames per real second")
    ap.add_argument("--speed", type=float, default=5.5, help="Target speed (km/h) without autopilot")
    ap.add_argument("--no-autopilot", action="store_true", help="Hold --speed instead of the autopilot")
    ap.add_argument("--seed", type=int, default=None, help="Autopilot random seed")
    ap.add_argument("--report-every", type=float, default=60.0, help="Simulated seconds between lines")
    ap.add_argument("--lanes-out", type=Path, default=None, help="Write generated lanes as GeoJSON")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        field_cfg = load_field_config()
        machine = load_machine_config()
    except InvalidConfig as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)

    polygon = list(DEMO_FIELD)
    if args.field is not None:
        try:
            polygon = polygon_from_geojson(json.loads(args.field.read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            print(f"Cannot read field polygon from {args.field}: {exc}", file=sys.stderr)
            sys.exit(1)

    header = args.header_width if args.header_width is not None else field_cfg.header_width_m
    try:
        lanes = generate_lanes(polygon, header, bearing_deg=args.bearing)
    except InvalidConfig as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)
    print(f"Lanes     : {len(lanes)} ({sum(lane.length_m for lane in lanes):.0f} m total)")

    if args.lanes_out is not None:
        args.lanes_out.write_text(json.dumps(lanes_to_geojson(lanes), indent=2), encoding="utf-8")
        print(f"Lanes file: {args.lanes_out}")

    session = HarvestSession(
        field=field_cfg,
        machine=machine,
        lanes=lanes,
        autopilot=SpeedProfile(rng=random.Random(args.seed)),
        autopilot_enabled=not args.no_autopilot,
    )
    try:
        session.set_speed(args.speed)
        session.set_time_scale(args.time_scale)
    except ValueError as exc:
        print(f"Invalid option: {exc}", file=sys.stderr)
        sys.exit(2)
    session.start()

    frame_ms = 1000.0 / args.fps
    total_s = args.minutes * 60.0
    sim_s = 0.0
    next_report = 0.0
    summaries = 0
    covered = False

    while sim_s < total_s:
        snap = session.frame(frame_ms)
        sim_s += frame_ms / 1000.0 * args.time_scale
        if snap.state.summary is not None:
            summaries += 1
            s = snap.state.summary
            print(
                f"  [unload #{summaries}] {s.total_harvested_kg:.0f} kg, "
                f"avg loss {s.avg_loss_pct:.1f}%, avg speed {s.avg_speed_kmh:.1f} km/h, "
                f"area {s.area_ha:.3f} ha"
            )
        if not covered and snap.follower is not None and snap.follower.finished:
            covered = True
            print(f"Field covered at t={sim_s:.0f}s")
        if sim_s >= next_report:
            print(_format_line(sim_s, snap))
            next_report += args.report_every

    print(_format_line(sim_s, session.snapshot()))
    print(f"Unload cycles completed: {summaries}")


if __name__ == "__main__":
    main()
