"""
Main loop: load calibration, bind the (simulated) vehicle, set up the
controller, optionally start the Web UI, then tick at a fixed rate.

Run from the repo root:
    python -m active_steering.main_loop --web

Then open http://localhost:5000/api/status in your browser.
"""

import argparse
import logging
import threading
import time
from typing import List, Optional

from active_steering.logger import get_logger, setup_logging, teardown_logging
from active_steering.controller import SteeringController
from active_steering.host.simulated import make_default_vehicle, ramp_profile
from active_steering.memory import allocate_pool, SharedState
from active_steering.state_machine import State

log = get_logger("main_loop")

# Flask/werkzeug access logs still go to the file
logging.getLogger("werkzeug").setLevel(logging.WARNING)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Speed-based active steering (simulated vehicle)")
    parser.add_argument("--calibration", default=None,
                        help="calibration JSON (default: built-in steering_curves.json)")
    parser.add_argument("--hz", type=float, default=60.0, help="tick rate")
    parser.add_argument("--seconds", type=float, default=0.0,
                        help="stop after this long (0 = run until Ctrl-C)")
    parser.add_argument("--max-speed", type=float, default=110.0,
                        help="peak of the simulated speed ramp")
    parser.add_argument("--friction", type=float, default=50.0,
                        help="simulated friction on every wheel")
    parser.add_argument("--web", action="store_true", help="serve the status Web UI")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--log-dir", default=None,
                        help="directory for the run log (default: ~/logs_active_steering)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    log_file = setup_logging(args.log_dir)
    try:
        return _run(args, log_file)
    finally:
        teardown_logging()


def _run(args: argparse.Namespace, log_file) -> int:
    if args.hz <= 0:
        log.error("--hz must be positive, got %s", args.hz)
        return 2

    # ------------------------------------------------------------------
    # 1. Load calibration and bind the vehicle
    # ------------------------------------------------------------------
    host = make_default_vehicle(ramp_profile(args.max_speed), friction=args.friction)
    shared = SharedState(allocate_pool())
    controller = SteeringController.from_calibration_file(host, args.calibration, shared=shared)
    controller.setup()

    # ------------------------------------------------------------------
    # 2. Start Web UI (Flask) in a background thread
    # ------------------------------------------------------------------
    if args.web:
        from active_steering.web_ui.app import create_app
        app = create_app(shared=shared, controller=controller)
        flask_thread = threading.Thread(
            target=lambda: app.run(host="0.0.0.0", port=args.port, threaded=True, use_reloader=False),
            name="ActiveSteering-Flask", daemon=True,
        )
        flask_thread.start()
        log.info("Web UI started on http://0.0.0.0:%d", args.port)

    # ------------------------------------------------------------------
    # 3. Main loop
    # ------------------------------------------------------------------
    tick_sec = 1.0 / args.hz
    started = time.monotonic()
    log.info("Main loop running at %.0f Hz. State: %s. Log file: %s",
             args.hz, controller.state.value, log_file)
    try:
        while True:
            t0 = time.monotonic()
            controller.tick()
            if args.seconds and t0 - started >= args.seconds:
                break
            elapsed = time.monotonic() - t0
            time.sleep(max(0.0, tick_sec - elapsed))
    except KeyboardInterrupt:
        log.info("Shutting down...")

    log.info("Bye.")
    return 0 if controller.state is State.RUNNING else 1


if __name__ == "__main__":
    raise SystemExit(main())
