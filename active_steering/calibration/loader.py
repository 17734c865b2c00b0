"""
Load steering calibration from JSON. Exposes front/rear speed->angle tables,
the optional friction adjustment tables, clamp bounds and controller name.
Default calibration file is next to this file.
"""
import json
import math
import os
from dataclasses import dataclass, fields
from typing import List, Optional, Tuple

from active_steering.errors import ConfigurationError
from active_steering.logger import get_logger

log = get_logger("calibration")

_CALIB_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CALIBRATION_FILE = os.path.join(_CALIB_DIR, "steering_curves.json")

_TABLE_KEYS = (
    "front_speeds",
    "front_angles",
    "rear_speeds",
    "rear_angles",
    "friction_breakpoints",
    "front_adjustments",
    "rear_adjustments",
)


def _load_json(path: str) -> dict:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Calibration file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Calibration file {path} must hold a JSON object.")
    return data


@dataclass(frozen=True)
class SteeringCalibration:
    """Everything the steering policy and host binding need, loaded once."""

    # Front wheels: speeds are x, angles (degrees) are y
    front_speeds: Tuple[float, ...] = (25.0, 70.0, 80.0, 95.0, 100.0)
    front_angles: Tuple[float, ...] = (44.0, 42.0, 40.0, 35.0, 33.0)
    # Rear wheels
    rear_speeds: Tuple[float, ...] = (25.0, 70.0, 100.0)
    rear_angles: Tuple[float, ...] = (18.0, 3.0, 0.0)
    # Friction-based adjustment; all zeroes leaves the feature off
    friction_breakpoints: Tuple[float, ...] = (0.0,)
    front_adjustments: Tuple[float, ...] = (0.0,)
    rear_adjustments: Tuple[float, ...] = (0.0,)
    angle_min_deg: float = 0.0
    angle_max_deg: float = 46.0
    controller_name: str = "Control Seat"
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "SteeringCalibration":
        """Build from a parsed JSON object. Missing keys keep their defaults.

        All problems are gathered and raised together as one ConfigurationError.
        """
        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            log.warning("Ignoring unknown calibration key %r", key)

        problems: List[str] = []
        kwargs = {}
        for key in _TABLE_KEYS:
            if key not in data:
                continue
            raw = data[key]
            if not isinstance(raw, list):
                problems.append(f'"{key}" must be a list of numbers.')
                continue
            try:
                kwargs[key] = tuple(_number(v) for v in raw)
            except (TypeError, ValueError):
                problems.append(f'"{key}" must only contain numbers.')

        for key in ("angle_min_deg", "angle_max_deg"):
            if key in data:
                try:
                    kwargs[key] = _number(data[key])
                except (TypeError, ValueError):
                    problems.append(f'"{key}" must be a number.')

        if "controller_name" in data:
            kwargs["controller_name"] = str(data["controller_name"])
        if "enabled" in data:
            if not isinstance(data["enabled"], bool):
                problems.append('"enabled" must be true or false.')
            else:
                kwargs["enabled"] = data["enabled"]

        if problems:
            raise ConfigurationError(*problems)
        # clamp bounds are checked with the tables when the policy is built
        return cls(**kwargs)

    def check_clamp_bounds(self) -> None:
        for name in ("angle_min_deg", "angle_max_deg"):
            if not math.isfinite(getattr(self, name)):
                raise ConfigurationError(f"{name} must be a finite number.")
        if self.angle_min_deg > self.angle_max_deg:
            raise ConfigurationError(
                f"angle_min_deg ({self.angle_min_deg:g}) is greater than "
                f"angle_max_deg ({self.angle_max_deg:g})."
            )


def _number(value) -> float:
    # bool is an int subclass; true/false in a table is a typo, not 1/0
    if isinstance(value, bool):
        raise TypeError("boolean is not a calibration number")
    return float(value)


def load_calibration(path: Optional[str] = None) -> SteeringCalibration:
    """Read calibration from *path* (default: steering_curves.json next to this file).

    A missing file gives the built-in defaults.
    """
    path = path or DEFAULT_CALIBRATION_FILE
    data = _load_json(path)
    if not data:
        log.warning("No calibration at %s, using defaults", path)
        return SteeringCalibration()
    calib = SteeringCalibration.from_dict(data)
    log.info("Calibration loaded from %s", path)
    return calib
