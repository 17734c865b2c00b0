"""
Unit tests for active_steering.controller — setup, fail-static and ticking
against the simulated vehicle.

Run:
    python -m pytest tests/test_controller.py -v
"""

import sys
import os
import math

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from active_steering import main_loop
from active_steering.calibration import SteeringCalibration
from active_steering.controller import SteeringController, SEE_DIAGNOSTIC
from active_steering.host.simulated import make_default_vehicle, ramp_profile
from active_steering.memory import allocate_pool, SharedState
from active_steering.state_machine import State


def _running(calib=None, speed=50.0, shared=None):
    host = make_default_vehicle()
    host.speed = speed
    controller = SteeringController(host, calib or SteeringCalibration(), shared=shared)
    assert controller.setup() == State.RUNNING
    return host, controller


def _steer_degrees(host):
    return [math.degrees(w.max_steer_angle) for w in host.wheels]


# ── setup ────────────────────────────────────────────────────────────────

def test_setup_binds_wheels_in_order():
    host, controller = _running()
    assert host.controller.name == "Control Seat"
    assert [w.name for w in host.wheels] == ["Wheel FL", "Wheel FR", "Wheel RL", "Wheel RR"]
    assert controller.policy is not None
    assert host.diagnostic == controller.banner


def test_setup_runs_once():
    host, controller = _running()
    assert controller.setup() == State.RUNNING


def test_length_mismatch_never_runs():
    host = make_default_vehicle()
    host.speed = 50.0
    calib = SteeringCalibration(front_angles=(44.0, 42.0, 40.0, 35.0))
    controller = SteeringController(host, calib)
    assert controller.setup() == State.SETUP_FAILED
    assert controller.policy is None
    assert host.diagnostic.startswith("There are currently 1 setup errors:\n\n")
    assert '"front_speeds" and "front_angles"' in host.diagnostic


def test_binding_and_calibration_errors_accumulate():
    host = make_default_vehicle()
    del host.suspensions[0]
    calib = SteeringCalibration(
        rear_angles=(18.0,),
        friction_breakpoints=(0.0, 1.0),
    )
    controller = SteeringController(host, calib)
    assert controller.setup() == State.SETUP_FAILED
    assert controller.setup_errors.count == 3
    assert "Only supports 4 suspensions." in host.diagnostic
    assert "There are currently 3 setup errors" in host.diagnostic


def test_binding_error_alone_blocks_policy():
    host = make_default_vehicle()
    host.controllers = [c for c in host.controllers if c.name != "Control Seat"]
    controller = SteeringController(host, SteeringCalibration())
    assert controller.setup() == State.SETUP_FAILED
    assert controller.policy is None
    assert "No valid ship controller found on craft." in host.diagnostic


def test_unreadable_calibration_file(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{", encoding="utf-8")
    host = make_default_vehicle()
    controller = SteeringController.from_calibration_file(host, str(bad))
    assert controller.setup() == State.SETUP_FAILED
    assert "not valid JSON" in host.diagnostic


def test_clamp_and_table_errors_reported_together(tmp_path):
    path = tmp_path / "calib.json"
    path.write_text(
        '{"angle_min_deg": 50, "angle_max_deg": 10, "front_angles": [44, 42, 40, 35]}',
        encoding="utf-8",
    )
    host = make_default_vehicle()
    controller = SteeringController.from_calibration_file(host, str(path))
    assert controller.setup() == State.SETUP_FAILED
    assert controller.setup_errors.count == 2
    assert '"front_speeds" and "front_angles"' in host.diagnostic
    assert "angle_min_deg (50) is greater than angle_max_deg (10)." in host.diagnostic


def test_nan_clamp_bound_fails_setup(tmp_path):
    path = tmp_path / "calib.json"
    path.write_text('{"angle_max_deg": NaN}', encoding="utf-8")
    host = make_default_vehicle()
    controller = SteeringController.from_calibration_file(host, str(path))
    assert controller.setup() == State.SETUP_FAILED
    assert controller.policy is None
    assert "angle_max_deg must be a finite number." in host.diagnostic


# ── tick ─────────────────────────────────────────────────────────────────

def test_tick_sends_radians_front_and_rear():
    host, controller = _running(speed=50.0)
    angles = controller.tick()
    assert abs(angles.front - 42.8889) < 1e-3
    assert abs(angles.rear - 9.6667) < 1e-3
    fl, fr, rl, rr = (w.max_steer_angle for w in host.wheels)
    assert fl == fr == pytest.approx(angles.front * math.pi / 180.0)
    assert rl == rr == pytest.approx(angles.rear * math.pi / 180.0)
    assert host.last_echo == controller.banner


def test_tick_follows_speed_changes():
    host, controller = _running(speed=0.0)
    controller.tick()
    assert _steer_degrees(host) == pytest.approx([44.0, 44.0, 18.0, 18.0])
    host.speed = 150.0
    controller.tick()
    assert _steer_degrees(host) == pytest.approx([33.0, 33.0, 0.0, 0.0])


def test_tick_after_failed_setup_does_nothing():
    host = make_default_vehicle()
    host.speed = 50.0
    controller = SteeringController(host, SteeringCalibration(rear_speeds=(1.0,)))
    controller.setup()
    host.diagnostic = ""
    for _ in range(3):
        assert controller.tick() is None
    assert host.diagnostic.startswith("There are currently 1 setup errors")
    assert host.last_echo == SEE_DIAGNOSTIC
    assert controller.state == State.SETUP_FAILED


def test_tick_without_setup_sets_up_first():
    host = make_default_vehicle()
    host.speed = 0.0
    controller = SteeringController(host, SteeringCalibration())
    assert controller.tick() == (44.0, 18.0)
    assert controller.state == State.RUNNING


def test_disabled_sends_nothing():
    host, controller = _running(SteeringCalibration(enabled=False))
    assert controller.tick() is None
    assert _steer_degrees(host) == [0.0, 0.0, 0.0, 0.0]


def test_friction_read_only_when_adjustment_on():
    calib = SteeringCalibration(
        friction_breakpoints=(100.0, 50.0, 0.0),
        front_adjustments=(0.0, 2.0, 5.0),
        rear_adjustments=(0.0, 1.0, 3.0),
    )
    host, controller = _running(calib, speed=80.0)
    for wheel, friction in zip(host.wheels, (70.0, 80.0, 70.0, 80.0)):
        wheel.friction = friction
    angles = controller.tick()
    assert angles.front == pytest.approx(41.0)
    assert angles.rear == pytest.approx(2.5)


def test_tick_publishes_telemetry():
    shared = SharedState(allocate_pool())
    host, controller = _running(speed=0.0, shared=shared)
    controller.tick()
    speed, friction, front, rear, valid = shared.get_telemetry()
    assert (speed, friction, front, rear, valid) == (0.0, None, 44.0, 18.0, True)
    assert shared.get_diagnostic() == controller.banner


def test_ramp_profile_shape():
    profile = ramp_profile(max_speed=100.0, period_sec=10.0)
    assert profile(0.0) == 0.0
    assert profile(5.0) == pytest.approx(100.0)
    assert profile(2.5) == pytest.approx(50.0)
    assert profile(10.0) == 0.0


# ── main loop ────────────────────────────────────────────────────────────

def test_main_loop_runs_briefly(tmp_path):
    assert main_loop.main(["--seconds", "0.05", "--hz", "200", "--log-dir", str(tmp_path)]) == 0
    assert len(list(tmp_path.glob("*.log"))) == 1


def test_main_loop_bad_calibration(tmp_path):
    path = tmp_path / "c.json"
    path.write_text('{"front_angles": [1, 2]}', encoding="utf-8")
    argv = ["--calibration", str(path), "--seconds", "0.02", "--hz", "200",
            "--log-dir", str(tmp_path / "logs")]
    assert main_loop.main(argv) == 1


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
