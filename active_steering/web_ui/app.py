"""
Flask application: status surface for the steering controller.

Provides:
  - ``/``            plain-text diagnostic (setup error report or running banner).
  - ``/api/status``  state, telemetry from the last tick, setup errors.
  - ``/api/curves``  sampled calibration curves for plotting.
"""

import math
from typing import Optional

from flask import Flask, Response, jsonify, request

from active_steering import __version__
from active_steering.curve import sample
from active_steering.logger import get_logger
from active_steering.memory.shared_state import SharedState

_log = get_logger("web_ui")

MAX_CURVE_POINTS = 500

# Module-level refs set by create_app; used by the routes.
_shared: Optional[SharedState] = None
_controller = None  # the SteeringController instance


def _finite(value, digits: int = 3):
    """Round for JSON; NaN, inf and missing readings become null."""
    if value is None or not math.isfinite(value):
        return None
    return round(value, digits)


def create_app(shared: SharedState, controller=None) -> Flask:
    """Create and configure the Flask application.

    Parameters
    ----------
    shared : SharedState
        Telemetry and diagnostic text written by the controller loop.
    controller : SteeringController, optional
        For state, setup errors and curves.
    """
    global _shared, _controller
    _shared = shared
    _controller = controller

    app = Flask(__name__)

    @app.route("/")
    def index():
        text = _shared.get_diagnostic() if _shared else ""
        return Response(text, mimetype="text/plain")

    @app.route("/api/status")
    def api_status():
        speed, friction, front, rear, valid = (
            _shared.get_telemetry() if _shared else (0.0, None, 0.0, 0.0, False)
        )
        state_name = "unknown"
        errors = []
        friction_adjustment = False
        if _controller is not None:
            state_name = _controller.state.value
            errors = _controller.setup_errors.problems
            if _controller.policy is not None:
                friction_adjustment = _controller.policy.friction_adjustment_enabled
        return jsonify({
            "state": state_name,
            "app_version": __version__,
            "telemetry": {
                "speed": _finite(speed),
                "average_friction": _finite(friction),
                "front_angle_deg": _finite(front),
                "rear_angle_deg": _finite(rear),
                "valid": valid,
            },
            "ticks": _shared.tick_count if _shared else 0,
            "friction_adjustment": friction_adjustment,
            "setup_error_count": len(errors),
            "setup_errors": errors,
        })

    @app.route("/api/curves")
    def api_curves():
        if _controller is None or _controller.policy is None:
            state_name = _controller.state.value if _controller is not None else "unknown"
            return jsonify({"error": "No curves available", "state": state_name}), 409
        try:
            points = int(request.args.get("points", 50))
        except ValueError:
            return jsonify({"error": "points must be an integer"}), 400
        if not 2 <= points <= MAX_CURVE_POINTS:
            return jsonify({"error": f"points must be between 2 and {MAX_CURVE_POINTS}"}), 400

        out = {}
        for name, (curve, direction) in _controller.policy.curves().items():
            xs, ys = sample(curve, points, direction)
            out[name] = {
                "direction": direction.name.lower(),
                "breakpoints": list(curve.breakpoints),
                "values": list(curve.values),
                "x": xs.round(4).tolist(),
                "y": ys.round(4).tolist(),
            }
        _log.debug("API curves sampled with %d points", points)
        return jsonify({"angle_bounds": list(_controller.policy.angle_bounds), "curves": out})

    return app
