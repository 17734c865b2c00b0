"""
SimulatedVehicle: a stand-in host for the demo loop and tests.

No physics. Speed comes from a profile callable (elapsed seconds -> speed)
or is set directly; friction is a per-suspension number; steer commands
are recorded on the suspension blocks.
"""
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import numpy as np

from active_steering.errors import ConfigurationError
from active_steering.host.binding import classify_suspensions, select_controller
from active_steering.host.interface import VehicleHost
from active_steering.logger import get_logger

log = get_logger("simulated_host")


@dataclass
class ControllerBlock:
    name: str
    block_definition: str = "MyObjectBuilder_Cockpit/CockpitSeat"
    center_of_mass: Sequence[float] = (0.0, 0.0, 0.0)
    # 4x4 world matrix; rows 0..2 are right, up, backward
    world_matrix: np.ndarray = field(default_factory=lambda: np.eye(4))


@dataclass
class SuspensionBlock:
    name: str
    position: Sequence[float]
    friction: float = 50.0
    max_steer_angle: float = 0.0  # radians, last command


class SimulatedVehicle(VehicleHost):
    """In-memory host. ``wheels`` is only filled after a successful ``bind``."""

    def __init__(
        self,
        controllers: List[ControllerBlock],
        suspensions: List[SuspensionBlock],
        speed_profile: Optional[Callable[[float], float]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.controllers = controllers
        self.suspensions = suspensions
        self.controller: Optional[ControllerBlock] = None
        self.wheels: List[SuspensionBlock] = []
        self.speed = 0.0
        self.diagnostic = ""
        self.last_echo = ""
        self._speed_profile = speed_profile
        self._clock = clock
        self._t0 = clock()

    def bind(self, controller_name: str) -> None:
        problems = []
        try:
            self.controller = select_controller(self.controllers, controller_name)
        except ConfigurationError as exc:
            problems.extend(exc.problems)
        # wheel classification needs the controller's frame
        if self.controller is not None:
            try:
                order = classify_suspensions(
                    [s.position for s in self.suspensions],
                    self.controller.center_of_mass,
                    self.controller.world_matrix,
                )
                self.wheels = [self.suspensions[i] for i in order]
            except ConfigurationError as exc:
                problems.extend(exc.problems)
        if problems:
            raise ConfigurationError(*problems)
        log.info("Bound to %r with wheels %s", self.controller.name, [w.name for w in self.wheels])

    def get_vehicle_speed(self) -> float:
        if self._speed_profile is not None:
            self.speed = float(self._speed_profile(self._clock() - self._t0))
        return self.speed

    def get_wheel_friction(self, wheel_index: int) -> float:
        return self.wheels[wheel_index].friction

    def set_steer_angle(self, wheel_index: int, angle_rad: float) -> None:
        self.wheels[wheel_index].max_steer_angle = angle_rad

    def write_diagnostic(self, text: str) -> None:
        self.diagnostic = text

    def echo(self, text: str) -> None:
        self.last_echo = text


def ramp_profile(max_speed: float = 110.0, period_sec: float = 20.0) -> Callable[[float], float]:
    """Triangle wave 0 -> max_speed -> 0 over *period_sec*."""
    def profile(t: float) -> float:
        phase = (t % period_sec) / period_sec
        return max_speed * (1.0 - abs(2.0 * phase - 1.0))
    return profile


def make_default_vehicle(speed_profile: Optional[Callable[[float], float]] = None,
                         friction: float = 50.0) -> SimulatedVehicle:
    """A driver's seat, a passenger seat and four wheels 1.25 m x 2 m apart."""
    controllers = [
        ControllerBlock("Passenger Seat", "MyObjectBuilder_Cockpit/PassengerSeatSmallNew"),
        ControllerBlock("Control Seat"),
    ]
    suspensions = [
        SuspensionBlock("Wheel RR", (1.25, 0.0, 2.0), friction),
        SuspensionBlock("Wheel FL", (-1.25, 0.0, -2.0), friction),
        SuspensionBlock("Wheel RL", (-1.25, 0.0, 2.0), friction),
        SuspensionBlock("Wheel FR", (1.25, 0.0, -2.0), friction),
    ]
    return SimulatedVehicle(controllers, suspensions, speed_profile=speed_profile)
