"""Print front/rear steer angles over a speed range for a calibration file.

Handy when tuning steering_curves.json: shows where each curve flattens
out and where the clamp kicks in.

Usage:
    python scripts/print_steering_table.py
    python scripts/print_steering_table.py --calibration my_car.json --max-speed 120 --step 5
    python scripts/print_steering_table.py --friction 30
"""

import argparse
import os
import sys

import numpy as np

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

from active_steering.calibration import load_calibration
from active_steering.errors import ConfigurationError
from active_steering.policy import SteeringPolicy


def main():
    parser = argparse.ArgumentParser(description="Print the steering table for a calibration")
    parser.add_argument("--calibration", default=None, help="calibration JSON (default: built-in)")
    parser.add_argument("--min-speed", type=float, default=0.0)
    parser.add_argument("--max-speed", type=float, default=110.0)
    parser.add_argument("--step", type=float, default=10.0)
    parser.add_argument("--friction", type=float, default=None,
                        help="average wheel friction (only used if adjustment is enabled)")
    args = parser.parse_args()

    if args.step <= 0:
        print("--step must be positive", file=sys.stderr)
        return 2

    try:
        policy = SteeringPolicy.from_calibration(load_calibration(args.calibration))
    except ConfigurationError as exc:
        print(f"There are currently {len(exc.problems)} setup errors:\n", file=sys.stderr)
        for problem in exc.problems:
            print(problem + "\n", file=sys.stderr)
        return 1

    lo, hi = policy.angle_bounds
    print(f"clamp [{lo:g}, {hi:g}] deg, friction adjustment "
          f"{'on' if policy.friction_adjustment_enabled else 'off'}")
    print(f"{'speed':>8}  {'front':>8}  {'rear':>8}")
    for speed in np.arange(args.min_speed, args.max_speed + args.step / 2, args.step):
        angles = policy.compute_angles(float(speed), args.friction)
        print(f"{speed:8.1f}  {angles.front:8.2f}  {angles.rear:8.2f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
