# Motion: wheel driver and angle limits.
from . import driver
from .limits import clamp_angle, clamp_pair

__all__ = ["driver", "clamp_angle", "clamp_pair"]
