"""Timed selection and reveal of a raffle winner."""

from __future__ import annotations

import logging
import random
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from ..errors import DrawPreconditionError, DrawStateError
from ..ledger.inventory import decrement_quantity, remove_participant, selected_prize
from ..ledger.winners import commit_winner, next_timestamp
from ..models import Participant, Winner
from ..page_flow import next_page_after_confirm
from .schedule import (
    REVEAL_COLOR_TRANSITION_MS,
    REVEAL_CONFIRM_READY_MS,
    REVEAL_ZOOM_MS,
    SPIN_DURATION_MS,
    build_tick_schedule,
)
from .timeline import Timeline

if TYPE_CHECKING:
    from ..page_flow import PageFlowGuard
    from ..store import SessionStore

logger = logging.getLogger(__name__)


class DrawState(str, Enum):
    IDLE = "idle"
    SPINNING = "spinning"
    REVEALING = "revealing"
    SETTLED = "settled"


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


class DrawEngine:
    """Run one draw cycle at a time against a :class:`~raffle.store.SessionStore`.

    The engine never sleeps. The host drives it by calling :meth:`advance`
    with a monotonic millisecond timestamp on every rendering frame; spin
    ticks, the decisive draw and the reveal steps all fire from there.

    Parameters
    ----------
    store : SessionStore
        Store owning the participant pool, prizes and winners.
    guard : Optional[PageFlowGuard], default: None
        When given, a confirmed draw asks it to re-evaluate navigation.
    rng : Optional[random.Random], default: None
        Random source for display picks and the decisive draw. Pass a seeded
        instance to make a draw reproducible.
    wall_clock : Optional[Callable[[], int]], default: None
        Epoch-millisecond clock stamped on confirmed winners.
    on_display : Optional[Callable[[Participant], None]], default: None
        Called with every participant put on screen.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        guard: Optional[PageFlowGuard] = None,
        rng: Optional[random.Random] = None,
        wall_clock: Optional[Callable[[], int]] = None,
        on_display: Optional[Callable[[Participant], None]] = None,
    ) -> None:
        self._store = store
        self._guard = guard
        self._rng = rng or random.Random()
        self._wall_clock = wall_clock or _wall_clock_ms
        self._on_display = on_display

        self._state = DrawState.IDLE
        self._cycle: Optional[Timeline] = None
        self._generation = store.generation
        self._schedule: tuple[float, ...] = ()
        self._displayed: Optional[Participant] = None
        self._provisional: Optional[Participant] = None
        self._tick_count = 0
        self._spin_count = 0
        self._color_transition = False
        self._zoom = False
        self._confirm_ready = False

    # -------- read-only view --------
    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def displayed(self) -> Optional[Participant]:
        return self._displayed

    @property
    def provisional_winner(self) -> Optional[Participant]:
        return self._provisional

    @property
    def schedule(self) -> tuple[float, ...]:
        """Tick instants of the current spin."""
        return self._schedule

    @property
    def tick_count(self) -> int:
        """Ticks fired during the current spin."""
        return self._tick_count

    @property
    def spin_count(self) -> int:
        """Spins started by this engine, re-draws included."""
        return self._spin_count

    @property
    def is_spinning(self) -> bool:
        return self._state is DrawState.SPINNING

    @property
    def color_transition(self) -> bool:
        return self._color_transition

    @property
    def zoom(self) -> bool:
        return self._zoom

    @property
    def can_confirm(self) -> bool:
        return self._state is DrawState.SETTLED and self._provisional is not None

    @property
    def can_redraw(self) -> bool:
        return self.can_confirm

    # -------- commands --------
    def start(self) -> None:
        """Begin a spin from ``IDLE``.

        Raises
        ------
        DrawStateError
            If a draw cycle is already in flight.
        DrawPreconditionError
            If the participant pool is empty. Nothing changes in that case.
        """
        if self._state is not DrawState.IDLE:
            raise DrawStateError(f"Cannot start a draw while {self._state.value}")
        self._begin_spin()

    def redraw(self) -> None:
        """Discard the provisional winner and spin again with a fresh schedule."""
        if not self.can_redraw:
            raise DrawStateError("Re-draw is only possible once a winner has settled")
        discarded = self._provisional
        self._begin_spin()
        logger.info(f"Discarded provisional winner '{discarded.id}' for a re-draw")

    def advance(self, now_ms: float) -> None:
        """Frame callback; fires every tick and reveal step that is due."""
        if self._cycle is None:
            return
        if self._store.generation != self._generation:
            logger.info("Session was reset mid-draw; cancelling the draw cycle")
            self.cancel()
            return
        self._cycle.advance(now_ms)

    def confirm(self) -> Winner:
        """Commit the settled provisional winner.

        The winner is appended to the winner ledger, the participant leaves
        the pool and the selected prize loses one unit, all in one store
        transaction. The engine then returns to ``IDLE``.

        Raises
        ------
        DrawStateError
            If no winner has settled, the session was reset, or the selected
            prize is missing or exhausted. The ledgers are left untouched.
        """
        if not self.can_confirm:
            raise DrawStateError("There is no settled winner to confirm")
        if self._store.generation != self._generation:
            self.cancel()
            raise DrawStateError("The session was reset during the draw")

        participant = self._provisional
        with self._store.transaction() as state:
            prize = selected_prize(state)
            if prize is None:
                raise DrawStateError("No prize is selected for this draw")
            if not prize.is_available:
                raise DrawStateError(f"Prize '{prize.id}' has no units left")
            timestamp = next_timestamp(state, self._wall_clock())
            winner = Winner(
                id=f"winner-{timestamp}",
                participant_id=participant.id,
                full_name=participant.full_name,
                position=participant.position,
                prize_id=prize.id,
                prize_name=prize.name,
                timestamp=timestamp,
            )
            commit_winner(state, winner)
            remove_participant(state, participant.id)
            decrement_quantity(state, prize.id)

        logger.info(
            f"Confirmed '{winner.participant_id}' as winner of '{winner.prize_id}'"
        )
        self._clear_cycle()
        if self._guard is not None:
            self._guard.enter(next_page_after_confirm(self._store.state))
        return winner

    def cancel(self) -> None:
        """Drop the current cycle and every pending effect. Idempotent."""
        if self._cycle is not None:
            self._cycle.cancel()
            logger.debug("Draw cycle cancelled")
        self._clear_cycle()

    # -------- internals --------
    def _begin_spin(self) -> None:
        if not self._store.state.participants:
            raise DrawPreconditionError("Cannot start a draw without participants")

        if self._cycle is not None:
            self._cycle.cancel()
        self._clear_cycle()

        self._generation = self._store.generation
        self._schedule = build_tick_schedule()
        cycle = Timeline()
        for offset in self._schedule:
            cycle.schedule(offset, "tick", self._on_tick)
        cycle.schedule(SPIN_DURATION_MS, "decisive", self._on_decisive)
        self._cycle = cycle
        self._state = DrawState.SPINNING
        self._spin_count += 1
        self._show(self._pick())
        logger.debug(
            f"Spin {self._spin_count} started over {len(self._store.state.participants)} participants"
        )

    def _clear_cycle(self) -> None:
        self._cycle = None
        self._state = DrawState.IDLE
        self._provisional = None
        self._tick_count = 0
        self._color_transition = False
        self._zoom = False
        self._confirm_ready = False

    def _pick(self) -> Optional[Participant]:
        pool = self._store.state.participants
        if not pool:
            return None
        return pool[self._rng.randrange(len(pool))]

    def _show(self, participant: Optional[Participant]) -> None:
        if participant is None:
            return
        self._displayed = participant
        if self._on_display is not None:
            self._on_display(participant)

    def _on_tick(self, elapsed: float) -> None:
        self._tick_count += 1
        self._show(self._pick())

    def _on_decisive(self, elapsed: float) -> None:
        pool_size = len(self._store.state.participants)
        winner = self._pick()
        if winner is None:
            logger.warning("Participant pool emptied during the spin; cancelling the draw")
            self.cancel()
            return
        self._provisional = winner
        self._show(winner)
        self._state = DrawState.REVEALING
        logger.info(
            f"Decisive draw picked '{winner.id}' from {pool_size} participants"
        )

        cycle = self._cycle
        cycle.schedule(elapsed + REVEAL_COLOR_TRANSITION_MS, "color_transition", self._on_color_transition)
        cycle.schedule(elapsed + REVEAL_ZOOM_MS, "zoom", self._on_zoom)
        cycle.schedule(elapsed + REVEAL_CONFIRM_READY_MS, "confirm_ready", self._on_confirm_ready)

    def _on_color_transition(self, elapsed: float) -> None:
        self._color_transition = True

    def _on_zoom(self, elapsed: float) -> None:
        self._zoom = True

    def _on_confirm_ready(self, elapsed: float) -> None:
        self._confirm_ready = True
        self._state = DrawState.SETTLED


__all__ = ["DrawEngine", "DrawState"]
