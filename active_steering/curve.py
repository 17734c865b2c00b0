"""
Piecewise-linear calibration curves.

A ``Curve`` is a small lookup table of breakpoints (x) and values (y). At
construction we precompute, for every segment i between breakpoint i and
i+1:

    slope[i]     = (y[i+1] - y[i]) / (x[i+1] - x[i])
    intercept[i] = y[i] - slope[i] * x[i]

``evaluate(curve, x, direction)`` scans the breakpoints in stored order and
stops at the first one that passes the direction's test:

  - ASCENDING  : x <= breakpoint  (speed tables, breakpoints increase)
  - DESCENDING : x >= breakpoint  (friction tables, breakpoints fall to 0)

The first breakpoint returns its value as-is; any later one uses the segment
that ends there. When nothing passes, the last value is returned. Both ends
therefore extrapolate flat, which keeps the steer angle bounded when the car
goes faster than the table covers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

import numpy as np

from active_steering.errors import ConfigurationError


class EvaluationDirection(Enum):
    ASCENDING = 1
    DESCENDING = -1

    def admits(self, x: float, bound: float) -> bool:
        """True when *x* falls on the table side of *bound* for this direction."""
        if self is EvaluationDirection.ASCENDING:
            return x <= bound
        return x >= bound


@dataclass(frozen=True)
class Curve:
    """Immutable calibration table. Build with ``Curve.from_points``."""

    breakpoints: Tuple[float, ...]
    values: Tuple[float, ...]
    slopes: Tuple[float, ...]
    intercepts: Tuple[float, ...]
    name: str = "curve"

    @classmethod
    def from_points(
        cls,
        breakpoints: Sequence[float],
        values: Sequence[float],
        name: str = "curve",
        x_label: str = "breakpoints",
        y_label: str = "values",
    ) -> "Curve":
        """Validate the paired tables and precompute segment slopes/intercepts.

        Raises ConfigurationError on mismatched lengths, empty tables,
        non-finite numbers or two equal adjacent breakpoints.
        """
        if len(breakpoints) != len(values):
            raise ConfigurationError(
                f'The number of elements in the "{x_label}" and "{y_label}" arrays do not match.'
            )
        if len(breakpoints) == 0:
            raise ConfigurationError(f'The "{x_label}" and "{y_label}" arrays are empty.')

        xs = np.asarray(breakpoints, dtype=np.float64)
        ys = np.asarray(values, dtype=np.float64)
        if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
            raise ConfigurationError(
                f'The "{x_label}" and "{y_label}" arrays must only contain finite numbers.'
            )

        widths = np.diff(xs)
        repeated = np.flatnonzero(widths == 0)
        if repeated.size:
            i = int(repeated[0])
            raise ConfigurationError(
                f'The "{x_label}" array repeats the value {xs[i]:g} at positions {i} and {i + 1}.'
            )

        slopes = np.diff(ys) / widths
        intercepts = ys[:-1] - slopes * xs[:-1]
        return cls(
            breakpoints=tuple(float(v) for v in xs),
            values=tuple(float(v) for v in ys),
            slopes=tuple(float(v) for v in slopes),
            intercepts=tuple(float(v) for v in intercepts),
            name=name,
        )

    def __len__(self) -> int:
        return len(self.breakpoints)

    def is_ordered_for(self, direction: EvaluationDirection) -> bool:
        """True if breakpoints rise (ASCENDING) or fall (DESCENDING) strictly."""
        steps = np.diff(np.asarray(self.breakpoints))
        if direction is EvaluationDirection.ASCENDING:
            return bool(np.all(steps > 0))
        return bool(np.all(steps < 0))

    def evaluate(self, x: float, direction: EvaluationDirection = EvaluationDirection.ASCENDING) -> float:
        return evaluate(self, x, direction)


def evaluate(
    curve: Curve,
    x: float,
    direction: EvaluationDirection = EvaluationDirection.ASCENDING,
) -> float:
    """Look up *x* on *curve*; see the module docstring for the boundary rules."""
    result = curve.values[0]
    for i, bound in enumerate(curve.breakpoints):
        if direction.admits(x, bound):
            if i == 0:
                return curve.values[0]
            return curve.slopes[i - 1] * x + curve.intercepts[i - 1]
        result = curve.values[i]
    return result


def sample(
    curve: Curve,
    points: int = 50,
    direction: EvaluationDirection = EvaluationDirection.ASCENDING,
    margin: float = 0.1,
) -> Tuple[np.ndarray, np.ndarray]:
    """Evaluate *curve* on an even grid spanning its breakpoints.

    The grid is widened by *margin* (fraction of the span, at least 1.0 unit)
    on both sides so the flat ends are visible. Returns ``(xs, ys)``.
    """
    lo, hi = min(curve.breakpoints), max(curve.breakpoints)
    pad = max((hi - lo) * margin, 1.0)
    xs = np.linspace(lo - pad, hi + pad, max(2, int(points)))
    ys = np.array([evaluate(curve, float(x), direction) for x in xs], dtype=np.float64)
    return xs, ys

