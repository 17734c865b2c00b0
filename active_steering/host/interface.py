"""
VehicleHost: the engine-side collaborator the controller talks to.

Implementations wrap a real game host or a simulation. Wheel indices are
always front-left, front-right, rear-left, rear-right (0..3); ``bind`` is
where a host works that order out.
"""

from active_steering.logger import get_logger

log = get_logger("host")


class VehicleHost:
    """Interface for the host engine. Speeds in host units, angles in radians."""

    def bind(self, controller_name: str) -> None:
        """Find the driver's controller and order the four wheels.

        Raise ConfigurationError if the vehicle cannot be bound.
        """
        raise NotImplementedError

    def get_vehicle_speed(self) -> float:
        raise NotImplementedError

    def get_wheel_friction(self, wheel_index: int) -> float:
        raise NotImplementedError

    def set_steer_angle(self, wheel_index: int, angle_rad: float) -> None:
        raise NotImplementedError

    def write_diagnostic(self, text: str) -> None:
        """Replace the contents of the diagnostic display."""
        log.info("diagnostic: %s", text)

    def echo(self, text: str) -> None:
        """Short status line (one per tick)."""
        log.debug("echo: %s", text)
