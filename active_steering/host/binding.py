"""
Host binding helpers: pick the driver's controller and sort the four
suspension units into front-left, front-right, rear-left, rear-right.

Body frame follows the host's world matrix rows: +X right, +Z backward.
So a wheel with body X < 0 is on the left and body Z < 0 is at the front.
"""
from typing import Optional, Sequence, Tuple

import numpy as np

from active_steering.errors import ConfigurationError

# Seats that cannot drive the vehicle.
PASSENGER_SEAT_DEFINITIONS = (
    "MyObjectBuilder_Cockpit/PassengerSeatSmallOffset",
    "MyObjectBuilder_Cockpit/PassengerSeatSmallNew",
)

FRONT_LEFT, FRONT_RIGHT, REAR_LEFT, REAR_RIGHT = 0, 1, 2, 3
SLOT_NAMES = ("front-left", "front-right", "rear-left", "rear-right")


def select_controller(controllers: Sequence, preferred_name: Optional[str] = None):
    """Return the controller named *preferred_name*, else the first non-passenger seat.

    Each controller needs ``name`` and ``block_definition`` attributes.
    """
    if preferred_name:
        for c in controllers:
            if c.name == preferred_name:
                return c
    usable = [c for c in controllers if c.block_definition not in PASSENGER_SEAT_DEFINITIONS]
    if not usable:
        raise ConfigurationError("No valid ship controller found on craft.")
    return usable[0]


def body_offsets(positions, center_of_mass, world_matrix) -> np.ndarray:
    """World positions -> body-frame offsets from the centre of mass (N x 3)."""
    pos = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    com = np.asarray(center_of_mass, dtype=np.float64).reshape(3)
    rot = np.asarray(world_matrix, dtype=np.float64)[:3, :3]
    # rows of rot are the body axes in world space
    return (pos - com) @ rot.T


def classify_suspensions(positions, center_of_mass, world_matrix) -> Tuple[int, int, int, int]:
    """Return indices into *positions* ordered FL, FR, RL, RR."""
    if len(positions) != 4:
        raise ConfigurationError("Only supports 4 suspensions.")

    slots = [None, None, None, None]
    for i, (x, _, z) in enumerate(body_offsets(positions, center_of_mass, world_matrix)):
        if x == 0 or z == 0:
            raise ConfigurationError(
                f"Suspension {i} sits on the vehicle's centre line and cannot be "
                "classified as left/right or front/rear."
            )
        slot = (FRONT_LEFT if z < 0 else REAR_LEFT) + (0 if x < 0 else 1)
        if slots[slot] is not None:
            raise ConfigurationError(
                f"Suspensions {slots[slot]} and {i} are both in the {SLOT_NAMES[slot]} position."
            )
        slots[slot] = i
    return tuple(slots)
