"""Frame-driven, cancellable timeline of delayed effects."""

from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Optional


class CancellationToken:
    """Flag shared by every effect queued on a timeline."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


@dataclass(order=True)
class _Event:
    at: float
    seq: int
    label: str = field(compare=False)
    callback: Callable[[float], None] = field(compare=False)


class Timeline:
    """Queue of effects keyed by their offset from the first frame.

    The host calls :meth:`advance` once per rendering frame with a monotonic
    timestamp. The first call anchors the timeline; each call then fires, in
    offset order, every effect whose offset is at or before the elapsed time.
    Effects with equal offsets fire in the order they were scheduled, and an
    effect scheduled from inside a callback fires on the same frame if it is
    already due. Nothing fires once the token is cancelled.
    """

    def __init__(self, token: Optional[CancellationToken] = None) -> None:
        self.token = token or CancellationToken()
        self._events: list[_Event] = []
        self._seq = itertools.count()
        self._origin: Optional[float] = None
        self._elapsed = 0.0

    def schedule(self, at_ms: float, label: str, callback: Callable[[float], None]) -> None:
        """Queue ``callback`` to run at ``at_ms`` after the anchor frame.

        The callback receives the elapsed time of the frame that fires it.
        """
        if self.token.cancelled:
            return
        heapq.heappush(self._events, _Event(float(at_ms), next(self._seq), label, callback))

    def advance(self, now_ms: float) -> float:
        """Fire every due effect and return the elapsed time of this frame."""
        if self.token.cancelled:
            return self._elapsed
        if self._origin is None:
            self._origin = float(now_ms)
        self._elapsed = max(self._elapsed, float(now_ms) - self._origin)
        while self._events and self._events[0].at <= self._elapsed:
            if self.token.cancelled:
                break
            event = heapq.heappop(self._events)
            event.callback(self._elapsed)
        return self._elapsed

    def cancel(self) -> None:
        """Cancel every pending effect; calling it again has no effect."""
        self.token.cancel()
        self._events.clear()

    @property
    def cancelled(self) -> bool:
        return self.token.cancelled

    @property
    def pending(self) -> list[str]:
        """Labels of the effects still queued, in firing order."""
        return [event.label for event in sorted(self._events)]

    @property
    def elapsed(self) -> float:
        return self._elapsed


__all__ = ["CancellationToken", "Timeline"]
