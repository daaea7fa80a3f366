"""Draw engine: spin schedule, reveal timeline and winner confirmation."""

from .engine import DrawEngine, DrawState
from .schedule import SPIN_DURATION_MS, build_tick_schedule
from .timeline import CancellationToken, Timeline

__all__ = [
    "CancellationToken",
    "DrawEngine",
    "DrawState",
    "SPIN_DURATION_MS",
    "Timeline",
    "build_tick_schedule",
]
