"""Apply calibration limits: clamp steer angles."""


def clamp_angle(angle_deg: float, min_deg: float = 0.0, max_deg: float = 46.0) -> float:
    """Clamp a steer angle to [min_deg, max_deg]."""
    return max(min_deg, min(max_deg, angle_deg))


def clamp_pair(front_deg: float, rear_deg: float, min_deg: float, max_deg: float) -> tuple:
    """Clamp front and rear independently to the same bounds."""
    return (clamp_angle(front_deg, min_deg, max_deg), clamp_angle(rear_deg, min_deg, max_deg))
