"""
Unit tests for active_steering.policy — base curve + friction adjustment + clamp.

Run:
    python -m pytest tests/test_policy.py -v
"""

import sys
import os
import logging

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from active_steering.calibration import SteeringCalibration
from active_steering.curve import Curve
from active_steering.errors import ConfigurationError
from active_steering.policy import SteeringPolicy, SteerAngles, friction_adjustment_wanted


def _with_friction(**overrides):
    values = dict(
        friction_breakpoints=(100.0, 50.0, 0.0),
        front_adjustments=(0.0, 2.0, 5.0),
        rear_adjustments=(0.0, 1.0, 3.0),
    )
    values.update(overrides)
    return SteeringCalibration(**values)


# ── base curves ──────────────────────────────────────────────────────────

def test_default_calibration_speed_50():
    policy = SteeringPolicy.from_calibration(SteeringCalibration())
    angles = policy.compute_angles(50)
    assert isinstance(angles, SteerAngles)
    assert abs(angles.front - 42.8889) < 1e-3
    assert abs(angles.rear - 9.6667) < 1e-3


def test_default_calibration_fast_and_stopped():
    policy = SteeringPolicy.from_calibration(SteeringCalibration())
    assert policy.compute_angles(150) == (33.0, 0.0)
    assert policy.compute_angles(0) == (44.0, 18.0)


def test_adjustment_off_by_default():
    policy = SteeringPolicy.from_calibration(SteeringCalibration())
    assert not policy.friction_adjustment_enabled
    assert set(policy.curves()) == {"front", "rear"}


def test_friction_ignored_when_adjustment_off():
    policy = SteeringPolicy.from_calibration(SteeringCalibration())
    for speed in (0, 33, 50, 87.5, 200):
        base = policy.compute_angles(speed)
        assert policy.compute_angles(speed, 0.0) == base
        assert policy.compute_angles(speed, 100.0) == base


def test_adjustment_off_skips_friction_table_validation():
    # repeated friction breakpoints do not matter while every adjustment is zero
    calib = SteeringCalibration(
        friction_breakpoints=(10.0, 10.0),
        front_adjustments=(0.0, 0.0),
        rear_adjustments=(0.0, 0.0),
    )
    policy = SteeringPolicy.from_calibration(calib)
    assert not policy.friction_adjustment_enabled


# ── friction adjustment ──────────────────────────────────────────────────

def test_wanted_detects_any_nonzero():
    assert not friction_adjustment_wanted(SteeringCalibration())
    assert friction_adjustment_wanted(_with_friction())
    assert friction_adjustment_wanted(SteeringCalibration(
        friction_breakpoints=(0.0,), front_adjustments=(0.0,), rear_adjustments=(-0.5,)))


def test_adjustment_added_to_base():
    policy = SteeringPolicy.from_calibration(_with_friction())
    assert policy.friction_adjustment_enabled
    base = SteeringPolicy.from_calibration(SteeringCalibration()).compute_angles(80)
    angles = policy.compute_angles(80, 75.0)
    assert abs(angles.front - (base.front + 1.0)) < 1e-9
    assert abs(angles.rear - (base.rear + 0.5)) < 1e-9


def test_adjustment_skipped_without_friction_reading():
    policy = SteeringPolicy.from_calibration(_with_friction())
    base = SteeringPolicy.from_calibration(SteeringCalibration()).compute_angles(80)
    assert policy.compute_angles(80) == base


def test_adjustment_flat_outside_friction_table():
    policy = SteeringPolicy.from_calibration(_with_friction())
    high = policy.compute_angles(80, 500.0)
    low = policy.compute_angles(80, -10.0)
    assert abs(high.front - 40.0) < 1e-9
    assert abs(low.front - 45.0) < 1e-9


# ── clamp ────────────────────────────────────────────────────────────────

def test_clamped_to_max():
    policy = SteeringPolicy.from_calibration(_with_friction(front_adjustments=(0.0, 10.0, 20.0)))
    assert policy.compute_angles(0, 0.0).front == 46.0


def test_clamped_to_min():
    policy = SteeringPolicy.from_calibration(_with_friction(rear_adjustments=(0.0, -4.0, -9.0)))
    assert policy.compute_angles(100, 0.0).rear == 0.0


def test_output_always_within_bounds():
    policy = SteeringPolicy.from_calibration(_with_friction(
        front_adjustments=(-80.0, 3.0, 60.0), rear_adjustments=(50.0, -2.0, -70.0)))
    lo, hi = policy.angle_bounds
    for speed in (-1e6, -25, 0, 12.5, 50, 99, 100, 101, 1e6):
        for friction in (None, -1e3, 0, 25, 50, 99, 100, 1e3):
            front, rear = policy.compute_angles(speed, friction)
            assert lo <= front <= hi
            assert lo <= rear <= hi


def test_custom_clamp_bounds():
    policy = SteeringPolicy.from_calibration(SteeringCalibration(angle_min_deg=5.0, angle_max_deg=30.0))
    assert policy.angle_bounds == (5.0, 30.0)
    assert policy.compute_angles(0) == (30.0, 18.0)
    assert policy.compute_angles(150) == (30.0, 5.0)


# ── construction errors ──────────────────────────────────────────────────

def test_front_length_mismatch():
    calib = SteeringCalibration(front_angles=(44.0, 42.0, 40.0, 35.0))
    with pytest.raises(ConfigurationError) as info:
        SteeringPolicy.from_calibration(calib)
    assert info.value.problems == [
        'The number of elements in the "front_speeds" and "front_angles" arrays do not match.'
    ]


def test_all_table_errors_collected():
    calib = SteeringCalibration(
        front_angles=(44.0,),
        rear_speeds=(25.0, 25.0, 100.0),
        friction_breakpoints=(0.0, 1.0),
        angle_min_deg=50.0,
    )
    with pytest.raises(ConfigurationError) as info:
        SteeringPolicy.from_calibration(calib)
    problems = info.value.problems
    assert len(problems) == 4
    assert "front_speeds" in problems[0]
    assert "rear_speeds" in problems[1]
    assert "Friction-Based Adjustment" in problems[2]
    assert "angle_min_deg" in problems[3]


def test_friction_curve_errors_reported_when_enabled():
    with pytest.raises(ConfigurationError) as info:
        SteeringPolicy.from_calibration(_with_friction(friction_breakpoints=(100.0, 100.0, 0.0)))
    assert len(info.value.problems) == 2


def test_direct_construction_checks():
    front = Curve.from_points([0, 10], [10, 0])
    with pytest.raises(ConfigurationError):
        SteeringPolicy(front, front, front_adjustment_curve=front)
    with pytest.raises(ConfigurationError):
        SteeringPolicy(front, front, angle_min=10, angle_max=5)


@pytest.mark.parametrize("bounds", [
    {"angle_min": float("nan")},
    {"angle_max": float("inf")},
    {"angle_min": float("-inf"), "angle_max": float("nan")},
])
def test_direct_construction_rejects_non_finite_bounds(bounds):
    front = Curve.from_points([0, 10], [10, 0])
    with pytest.raises(ConfigurationError):
        SteeringPolicy(front, front, **bounds)


def test_non_finite_bound_reported_with_table_errors():
    calib = SteeringCalibration(front_angles=(44.0,), angle_max_deg=float("nan"))
    with pytest.raises(ConfigurationError) as info:
        SteeringPolicy.from_calibration(calib)
    problems = info.value.problems
    assert len(problems) == 2
    assert "angle_max_deg must be a finite number." in problems[1]


def test_unordered_curve_warns(caplog):
    front = Curve.from_points([0, 50, 20], [10, 5, 0], name="front")
    rear = Curve.from_points([0, 50], [3, 1], name="rear")
    with caplog.at_level(logging.WARNING, logger="policy"):
        SteeringPolicy(front, rear)
    assert "'front'" in caplog.text
    assert "'rear'" not in caplog.text


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
