"""active_steering.memory: pre-allocated telemetry buffer and thread-safe shared state."""

from active_steering.memory.pool import allocate_pool, MemoryPool, TELEMETRY_LEN
from active_steering.memory.shared_state import SharedState

__all__ = [
    "allocate_pool",
    "MemoryPool",
    "SharedState",
    "TELEMETRY_LEN",
]
