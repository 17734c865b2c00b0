"""active_steering.host: engine interface, binding helpers and a simulated vehicle."""

from active_steering.host.interface import VehicleHost
from active_steering.host.binding import select_controller, classify_suspensions
from active_steering.host.simulated import (
    SimulatedVehicle,
    ControllerBlock,
    SuspensionBlock,
    make_default_vehicle,
    ramp_profile,
)

__all__ = [
    "VehicleHost",
    "select_controller",
    "classify_suspensions",
    "SimulatedVehicle",
    "ControllerBlock",
    "SuspensionBlock",
    "make_default_vehicle",
    "ramp_profile",
]
