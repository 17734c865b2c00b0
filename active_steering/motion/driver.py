"""
Thin layer over the host's wheel interface: average friction in, steer
angles out. Wheel order is fixed by the host binding:
front-left, front-right, rear-left, rear-right.
"""
import math

WHEEL_COUNT = 4
FRONT_WHEELS = (0, 1)
REAR_WHEELS = (2, 3)


def average_wheel_friction(host, wheel_count: int = WHEEL_COUNT) -> float:
    """Unweighted mean of every wheel's friction."""
    total = 0.0
    for i in range(wheel_count):
        total += float(host.get_wheel_friction(i))
    return total / wheel_count


def set_wheel_steering_degrees(host, front_deg: float, rear_deg: float,
                               wheel_count: int = WHEEL_COUNT) -> None:
    """Send front_deg to the front pair and rear_deg to the rear pair, in radians."""
    for i in range(wheel_count):
        angle_deg = front_deg if i in FRONT_WHEELS else rear_deg
        host.set_steer_angle(i, angle_deg * math.pi / 180.0)
