"""LaneFollower stepping over a lane set."""

from __future__ import annotations

import random

import pytest

from harvest_sim.field.follower import FollowerControls, LaneFollower

GO = FollowerControls(running=True, speed_kmh=36.0, time_scale=1.0)


def test_stopped_follower_does_not_move(rect_lanes):
    follower = LaneFollower()
    frame = follower.step(rect_lanes, FollowerControls(running=False, speed_kmh=36.0), 200)
    assert frame.lane_index == 0
    assert frame.distance_into_lane == 0.0
    assert frame.position == pytest.approx(rect_lanes[0].start)


def test_step_distance_from_speed(rect_lanes):
    # 36 km/h = 10 m/s, 200 ms → 2 m
    frame = LaneFollower().step(rect_lanes, GO, 200)
    assert frame.distance_into_lane == pytest.approx(2.0)
    assert frame.heading_deg == pytest.approx(0.0, abs=1e-6)


def test_step_delta_is_clamped(rect_lanes):
    frame = LaneFollower().step(rect_lanes, GO, 10_000)
    assert frame.distance_into_lane == pytest.approx(2.0)


def test_time_scale_multiplies_distance(rect_lanes):
    controls = FollowerControls(running=True, speed_kmh=36.0, time_scale=4.0)
    frame = LaneFollower().step(rect_lanes, controls, 100)
    assert frame.distance_into_lane == pytest.approx(4.0)


def test_distance_carries_into_next_lane(rect_lanes):
    follower = LaneFollower()
    frame = follower.advance(rect_lanes, 150.0)
    assert frame.lane_index == 1
    assert frame.distance_into_lane == pytest.approx(50.0)
    assert abs(abs(frame.heading_deg) - 180.0) < 1e-6
    assert frame.position == pytest.approx(rect_lanes[1].point_at(50.0))
    assert not frame.finished


def test_holds_at_end_of_final_lane(rect_lanes):
    follower = LaneFollower()
    frame = follower.advance(rect_lanes, 1_000_000.0)
    assert frame.lane_index == len(rect_lanes) - 1
    assert frame.distance_into_lane == pytest.approx(rect_lanes[-1].length_m)
    assert frame.position == pytest.approx(rect_lanes[-1].end)
    assert frame.finished

    again = follower.advance(rect_lanes, 10.0)
    assert again.lane_index == frame.lane_index
    assert again.distance_into_lane == frame.distance_into_lane


def test_random_steps_keep_invariants(rect_lanes):
    rng = random.Random(42)
    follower = LaneFollower()
    last_index = 0
    for _ in range(2000):
        controls = FollowerControls(
            running=rng.random() > 0.1,
            speed_kmh=rng.uniform(0.0, 40.0),
            time_scale=rng.choice([1.0, 2.0, 5.0, 10.0]),
        )
        frame = follower.step(rect_lanes, controls, rng.uniform(0.0, 400.0))
        assert 0 <= frame.lane_index < len(rect_lanes)
        assert frame.lane_index >= last_index
        assert 0.0 <= frame.distance_into_lane <= rect_lanes[frame.lane_index].length_m + 1e-9
        last_index = frame.lane_index


def test_new_lane_list_resets(rect_lanes):
    follower = LaneFollower()
    follower.advance(rect_lanes, 250.0)
    assert follower.lane_index == 2

    frame = follower.advance(list(rect_lanes), 5.0)
    assert frame.lane_index == 0
    assert frame.distance_into_lane == pytest.approx(5.0)


def test_empty_lanes_have_no_position():
    follower = LaneFollower()
    frame = follower.step([], GO, 200)
    assert frame.position is None
    assert frame.lane_index == 0
    assert not frame.finished


def test_reset(rect_lanes):
    follower = LaneFollower()
    follower.advance(rect_lanes, 420.0)
    follower.reset()
    assert follower.lane_index == 0
    assert follower.distance_into_lane == 0.0
