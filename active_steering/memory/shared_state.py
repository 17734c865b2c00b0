"""
SharedState: thread-safe wrapper around MemoryPool.

The controller loop writes, the web UI thread reads. One lock per logical
resource; getters return plain snapshots so callers never see a half
written tick.
"""

import math
import threading
from typing import Optional, Tuple

import numpy as np

from active_steering.memory.pool import (
    MemoryPool,
    IDX_SPEED,
    IDX_FRICTION,
    IDX_FRONT,
    IDX_REAR,
    IDX_VALID,
)


class SharedState:
    """Thread-safe accessor for the telemetry buffer and diagnostic text.

    Parameters
    ----------
    pool : MemoryPool
        The pre-allocated buffer pool (from ``allocate_pool()``).
    """

    def __init__(self, pool: MemoryPool) -> None:
        self._pool = pool
        self._lock_telemetry = threading.Lock()
        self._lock_diagnostic = threading.Lock()
        self._diagnostic = ""
        self._ticks = 0

    # ── telemetry ────────────────────────────────────────────────────

    def set_telemetry(
        self,
        speed: float,
        friction: Optional[float],
        front_deg: float,
        rear_deg: float,
    ) -> None:
        """Write one tick's values into the pre-allocated array under lock."""
        with self._lock_telemetry:
            buf = self._pool.telemetry
            buf[IDX_SPEED] = speed
            buf[IDX_FRICTION] = np.nan if friction is None else friction
            buf[IDX_FRONT] = front_deg
            buf[IDX_REAR] = rear_deg
            buf[IDX_VALID] = 1.0
            self._ticks += 1

    def get_telemetry(self) -> Tuple[float, Optional[float], float, float, bool]:
        """Return a snapshot ``(speed, friction, front_deg, rear_deg, valid)``.

        ``friction`` is None when it was not measured on the last tick.
        """
        with self._lock_telemetry:
            buf = self._pool.telemetry
            friction = float(buf[IDX_FRICTION])
            return (
                float(buf[IDX_SPEED]),
                None if math.isnan(friction) else friction,
                float(buf[IDX_FRONT]),
                float(buf[IDX_REAR]),
                bool(buf[IDX_VALID] > 0),
            )

    @property
    def tick_count(self) -> int:
        with self._lock_telemetry:
            return self._ticks

    # ── diagnostic text ──────────────────────────────────────────────

    def set_diagnostic(self, text: str) -> None:
        with self._lock_diagnostic:
            self._diagnostic = str(text)

    def get_diagnostic(self) -> str:
        with self._lock_diagnostic:
            return self._diagnostic
