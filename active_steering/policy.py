"""
Steering policy: speed -> (front, rear) steer angles in degrees.

Two stages:
  1. Base curves map vehicle speed to an angle (ASCENDING lookup).
  2. Optional adjustment curves map average wheel friction to an angle
     offset (DESCENDING lookup) which is added to the base angle.
Both sums are then clamped to [angle_min, angle_max].

Whether stage 2 runs is decided once, when the policy is built: it is on
only if some adjustment value in the calibration is non-zero.
"""
import math
from typing import NamedTuple, Optional

from active_steering.calibration import SteeringCalibration
from active_steering.curve import Curve, EvaluationDirection, evaluate
from active_steering.errors import ConfigurationError, SetupErrors
from active_steering.logger import get_logger
from active_steering.motion.limits import clamp_pair

log = get_logger("policy")

ASC = EvaluationDirection.ASCENDING
DESC = EvaluationDirection.DESCENDING


class SteerAngles(NamedTuple):
    front: float
    rear: float


def friction_adjustment_wanted(calibration: SteeringCalibration) -> bool:
    """True iff any front or rear adjustment value is non-zero."""
    total = 0.0
    for front, rear in zip(calibration.front_adjustments, calibration.rear_adjustments):
        total += abs(front) + abs(rear)
    return total > 0.0


class SteeringPolicy:
    """Owns the four curves and the clamp bounds. Immutable once built."""

    def __init__(
        self,
        front_curve: Curve,
        rear_curve: Curve,
        front_adjustment_curve: Optional[Curve] = None,
        rear_adjustment_curve: Optional[Curve] = None,
        angle_min: float = 0.0,
        angle_max: float = 46.0,
    ):
        if (front_adjustment_curve is None) != (rear_adjustment_curve is None):
            raise ConfigurationError("Front and rear adjustment curves must be given together.")
        if not (math.isfinite(angle_min) and math.isfinite(angle_max)):
            raise ConfigurationError("Clamp bounds must be finite numbers.")
        if angle_min > angle_max:
            raise ConfigurationError(
                f"angle_min ({angle_min:g}) is greater than angle_max ({angle_max:g})."
            )
        self._front = front_curve
        self._rear = rear_curve
        self._front_adj = front_adjustment_curve
        self._rear_adj = rear_adjustment_curve
        self._angle_min = float(angle_min)
        self._angle_max = float(angle_max)
        self._friction_adjustment = front_adjustment_curve is not None

        _warn_if_unordered(front_curve, ASC)
        _warn_if_unordered(rear_curve, ASC)
        if self._friction_adjustment:
            _warn_if_unordered(front_adjustment_curve, DESC)
            _warn_if_unordered(rear_adjustment_curve, DESC)

    @classmethod
    def from_calibration(cls, calibration: SteeringCalibration) -> "SteeringPolicy":
        """Build every curve from *calibration*.

        Problems are collected across all tables and raised together as one
        ConfigurationError so the operator can fix them in a single pass.
        """
        errors = SetupErrors()
        front = _build(errors, calibration.front_speeds, calibration.front_angles,
                       "front", "front_speeds", "front_angles")
        rear = _build(errors, calibration.rear_speeds, calibration.rear_angles,
                      "rear", "rear_speeds", "rear_angles")

        n = len(calibration.friction_breakpoints)
        if n != len(calibration.front_adjustments) or n != len(calibration.rear_adjustments):
            errors.add("The number of elements in the Friction-Based Adjustment arrays do not all match.")
        try:
            calibration.check_clamp_bounds()
        except ConfigurationError as exc:
            errors.absorb(exc)
        errors.raise_if_any()

        front_adj = rear_adj = None
        if friction_adjustment_wanted(calibration):
            front_adj = _build(errors, calibration.friction_breakpoints, calibration.front_adjustments,
                               "front_adjustment", "friction_breakpoints", "front_adjustments")
            rear_adj = _build(errors, calibration.friction_breakpoints, calibration.rear_adjustments,
                              "rear_adjustment", "friction_breakpoints", "rear_adjustments")
            errors.raise_if_any()

        policy = cls(front, rear, front_adj, rear_adj,
                     calibration.angle_min_deg, calibration.angle_max_deg)
        log.info("Steering policy built (friction adjustment %s)",
                 "on" if policy.friction_adjustment_enabled else "off")
        return policy

    @property
    def friction_adjustment_enabled(self) -> bool:
        return self._friction_adjustment

    @property
    def angle_bounds(self) -> tuple:
        return (self._angle_min, self._angle_max)

    def curves(self) -> dict:
        """Name -> (Curve, direction) for every curve in use."""
        out = {"front": (self._front, ASC), "rear": (self._rear, ASC)}
        if self._friction_adjustment:
            out["front_adjustment"] = (self._front_adj, DESC)
            out["rear_adjustment"] = (self._rear_adj, DESC)
        return out

    def compute_angles(self, speed: float, average_friction: Optional[float] = None) -> SteerAngles:
        front = evaluate(self._front, speed, ASC)
        rear = evaluate(self._rear, speed, ASC)

        if self._friction_adjustment and average_friction is not None:
            front += evaluate(self._front_adj, average_friction, DESC)
            rear += evaluate(self._rear_adj, average_friction, DESC)

        front, rear = clamp_pair(front, rear, self._angle_min, self._angle_max)
        return SteerAngles(front, rear)


def _build(errors: SetupErrors, xs, ys, name: str, x_label: str, y_label: str) -> Optional[Curve]:
    try:
        return Curve.from_points(xs, ys, name=name, x_label=x_label, y_label=y_label)
    except ConfigurationError as exc:
        errors.absorb(exc)
        return None


def _warn_if_unordered(curve: Curve, direction: EvaluationDirection) -> None:
    if not curve.is_ordered_for(direction):
        log.warning("Curve %r breakpoints %s are not %s; lookups past the first "
                    "out-of-order point will not interpolate",
                    curve.name, list(curve.breakpoints), direction.name.lower())
