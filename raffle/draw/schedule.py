"""Timing constants and the tick schedule of a spin."""

from __future__ import annotations

SPIN_DURATION_MS = 10_000
FAST_PHASE_MS = 7_000
DECEL_PHASE_MS = 3_000
FAST_INTERVAL_MS = 35
DECEL_STEPS = 12
# Shape of the slowdown curve; larger values brake later and harder.
DECEL_EXPONENT = 1.8

# Reveal offsets, relative to the decisive draw.
REVEAL_COLOR_TRANSITION_MS = 1_000
REVEAL_ZOOM_MS = 3_000
REVEAL_CONFIRM_READY_MS = 4_000


def build_tick_schedule() -> tuple[float, ...]:
    """Return the instants (ms after spin start) at which the display changes.

    The fast segment ticks every :data:`FAST_INTERVAL_MS` from 0 until
    :data:`FAST_PHASE_MS` (200 ticks). The deceleration segment adds
    :data:`DECEL_STEPS` ticks at ``7000 + 3000 * (i / 12) ** 1.8`` whose gaps
    grow towards the end of the :data:`SPIN_DURATION_MS` window.
    """
    ticks: list[float] = []
    current = 0
    while current < FAST_PHASE_MS:
        ticks.append(float(current))
        current += FAST_INTERVAL_MS

    for step in range(DECEL_STEPS):
        progress = step / DECEL_STEPS
        ticks.append(FAST_PHASE_MS + DECEL_PHASE_MS * progress**DECEL_EXPONENT)
    return tuple(ticks)


__all__ = [
    "DECEL_EXPONENT",
    "DECEL_PHASE_MS",
    "DECEL_STEPS",
    "FAST_INTERVAL_MS",
    "FAST_PHASE_MS",
    "REVEAL_COLOR_TRANSITION_MS",
    "REVEAL_CONFIRM_READY_MS",
    "REVEAL_ZOOM_MS",
    "SPIN_DURATION_MS",
    "build_tick_schedule",
]
