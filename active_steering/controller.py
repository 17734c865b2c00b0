"""
SteeringController: setup once, then one ``tick()`` per host update.

setup()
  - bind the host (controller seat + four ordered wheels)
  - build the steering policy from calibration
  - any problem -> SETUP_FAILED, all problems listed on the diagnostic display

tick()
  - SETUP_FAILED: re-report the diagnostic, do nothing else
  - RUNNING: speed (+ average friction if needed) -> policy -> wheels
"""
from typing import Optional

from active_steering import __version__
from active_steering.calibration import SteeringCalibration, load_calibration
from active_steering.errors import ConfigurationError, SetupErrors
from active_steering.logger import get_logger
from active_steering.memory.shared_state import SharedState
from active_steering.motion import driver
from active_steering.policy import SteerAngles, SteeringPolicy
from active_steering.state_machine import Event, State, StateMachine

log = get_logger("controller")

SEE_DIAGNOSTIC = ('Check the diagnostic display for a list of errors. '
                  'Click on "Edit Text" to see the whole message.')


class SteeringController:
    def __init__(self, host, calibration: SteeringCalibration,
                 shared: Optional[SharedState] = None):
        self._host = host
        self._calibration = calibration
        self._shared = shared
        self._sm = StateMachine()
        self._errors = SetupErrors()
        self._policy: Optional[SteeringPolicy] = None

    @classmethod
    def from_calibration_file(cls, host, path: Optional[str] = None,
                              shared: Optional[SharedState] = None) -> "SteeringController":
        """Load calibration from *path*; an unreadable file becomes a setup error."""
        try:
            calibration = load_calibration(path)
        except ConfigurationError as exc:
            controller = cls(host, SteeringCalibration(), shared=shared)
            controller._errors.absorb(exc)
            return controller
        return cls(host, calibration, shared=shared)

    @property
    def state(self) -> State:
        return self._sm.state

    @property
    def policy(self) -> Optional[SteeringPolicy]:
        return self._policy

    @property
    def setup_errors(self) -> SetupErrors:
        return self._errors

    @property
    def banner(self) -> str:
        return "Running active steering v" + __version__

    def setup(self) -> State:
        """Bind and build once. Calling again after the first run is a no-op."""
        if self._sm.state is not State.SETUP:
            return self._sm.state

        try:
            self._host.bind(self._calibration.controller_name)
        except ConfigurationError as exc:
            self._errors.absorb(exc)

        try:
            policy = SteeringPolicy.from_calibration(self._calibration)
        except ConfigurationError as exc:
            self._errors.absorb(exc)
        else:
            if not self._errors:
                self._policy = policy

        if self._errors:
            for problem in self._errors.problems:
                log.error("Setup error: %s", problem)
            self._sm.dispatch(Event.SETUP_ERROR)
            self._report_errors()
        else:
            self._sm.dispatch(Event.SETUP_SUCCEEDED)
            self._host.write_diagnostic(self.banner)
            if self._shared is not None:
                self._shared.set_diagnostic(self.banner)
            log.info("Setup complete, steering %s",
                     "enabled" if self._calibration.enabled else "disabled")
        log.info("State: %s -> %s", State.SETUP.value, self._sm.state.value)
        return self._sm.state

    def tick(self) -> Optional[SteerAngles]:
        """Run one update. Returns the angles sent, or None if nothing was sent."""
        if self._sm.state is State.SETUP:
            self.setup()
        if self._sm.state is State.SETUP_FAILED:
            self._report_errors()
            return None
        if not self._calibration.enabled:
            self._host.echo(self.banner)
            return None

        speed = float(self._host.get_vehicle_speed())
        friction = None
        if self._policy.friction_adjustment_enabled:
            friction = driver.average_wheel_friction(self._host)

        angles = self._policy.compute_angles(speed, friction)
        driver.set_wheel_steering_degrees(self._host, angles.front, angles.rear)

        if self._shared is not None:
            self._shared.set_telemetry(speed, friction, angles.front, angles.rear)
        log.debug("speed=%.2f friction=%s front=%.2f rear=%.2f",
                  speed, friction, angles.front, angles.rear)
        self._host.echo(self.banner)
        return angles

    def _report_errors(self) -> None:
        report = self._errors.report()
        self._host.echo(SEE_DIAGNOSTIC)
        self._host.write_diagnostic(report)
        if self._shared is not None:
            self._shared.set_diagnostic(report)
