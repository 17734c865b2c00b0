"""
Memory pool: pre-allocate the telemetry buffer at startup.

Call allocate_pool() once before the controller and web UI start. The
controller writes into the buffer every tick; nothing in the tick path
allocates a new array.
"""

from dataclasses import dataclass
import numpy as np

# ---------------------------------------------------------------------------
# Telemetry layout: 5 floats  [speed, friction, front_deg, rear_deg, valid]
#   index 1 : average wheel friction, NaN when not measured this tick
#   index 4 : valid flag (1.0 = at least one tick has run)
# ---------------------------------------------------------------------------
TELEMETRY_LEN: int = 5
IDX_SPEED, IDX_FRICTION, IDX_FRONT, IDX_REAR, IDX_VALID = range(TELEMETRY_LEN)


@dataclass
class MemoryPool:
    """Container for the pre-allocated buffers.

    Callers write into the arrays in-place and never reassign the attributes.
    """

    telemetry: np.ndarray


def allocate_pool() -> MemoryPool:
    """Allocate every shared buffer once and return a MemoryPool."""
    telemetry = np.zeros(TELEMETRY_LEN, dtype=np.float64)
    telemetry[IDX_FRICTION] = np.nan
    return MemoryPool(telemetry=telemetry)
