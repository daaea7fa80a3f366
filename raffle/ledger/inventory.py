"""Prize and participant inventory of a raffle session."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from ..models import Participant, Prize, SessionAggregate

if TYPE_CHECKING:
    from ..store import SessionStore

logger = logging.getLogger(__name__)


# -------- derived queries --------
def available_prizes(aggregate: SessionAggregate) -> list[Prize]:
    """Return prizes with units left, in configuration order."""
    return [prize for prize in aggregate.prizes if prize.quantity > 0]


def selected_prize(aggregate: SessionAggregate) -> Optional[Prize]:
    """Resolve ``selected_prize_id``; ``None`` when unset or dangling."""
    if aggregate.selected_prize_id is None:
        return None
    return find_prize(aggregate, aggregate.selected_prize_id)


def find_prize(aggregate: SessionAggregate, prize_id: str) -> Optional[Prize]:
    for prize in aggregate.prizes:
        if prize.id == prize_id:
            return prize
    return None


# -------- mutations on an aggregate --------
def set_participants(aggregate: SessionAggregate, participants: Iterable[Participant]) -> None:
    aggregate.participants = list(participants)


def remove_participant(aggregate: SessionAggregate, participant_id: str) -> None:
    aggregate.participants = [p for p in aggregate.participants if p.id != participant_id]


def set_prizes(aggregate: SessionAggregate, prizes: Iterable[Prize]) -> None:
    aggregate.prizes = list(prizes)
    drop_stale_selection(aggregate)


def add_prize(aggregate: SessionAggregate, prize: Prize) -> None:
    if find_prize(aggregate, prize.id) is not None:
        raise ValueError(f"Prize '{prize.id}' is already configured")
    aggregate.prizes = [*aggregate.prizes, prize]


def update_prize(aggregate: SessionAggregate, prize_id: str, **changes: Any) -> None:
    """Replace fields of a prize; unknown ids are ignored.

    Raises
    ------
    ValueError
        If the change would break ``0 <= quantity <= initial_quantity``.
    """
    aggregate.prizes = [
        dataclasses.replace(prize, **changes) if prize.id == prize_id else prize
        for prize in aggregate.prizes
    ]
    drop_stale_selection(aggregate)


def remove_prize(aggregate: SessionAggregate, prize_id: str) -> None:
    aggregate.prizes = [prize for prize in aggregate.prizes if prize.id != prize_id]
    drop_stale_selection(aggregate)


def decrement_quantity(aggregate: SessionAggregate, prize_id: str) -> None:
    """Take one unit from a prize, clamping at zero; unknown ids are ignored."""
    aggregate.prizes = [
        dataclasses.replace(prize, quantity=max(0, prize.quantity - 1))
        if prize.id == prize_id
        else prize
        for prize in aggregate.prizes
    ]
    drop_stale_selection(aggregate)


def select_prize(aggregate: SessionAggregate, prize_id: Optional[str]) -> None:
    """Point the session at the prize to draw next.

    Raises
    ------
    ValueError
        If ``prize_id`` is not an available prize.
    """
    if prize_id is not None:
        prize = find_prize(aggregate, prize_id)
        if prize is None or not prize.is_available:
            raise ValueError(f"Prize '{prize_id}' is not available")
    aggregate.selected_prize_id = prize_id


def drop_stale_selection(aggregate: SessionAggregate) -> None:
    """Clear ``selected_prize_id`` unless it points at a prize with units left."""
    if aggregate.selected_prize_id is None:
        return
    prize = selected_prize(aggregate)
    if prize is None or not prize.is_available:
        logger.debug(f"Clearing selection of exhausted prize '{aggregate.selected_prize_id}'")
        aggregate.selected_prize_id = None


class InventoryLedger:
    """Store-bound facade over the inventory functions.

    Every call is saved implicitly through :meth:`SessionStore.transaction`.
    """

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def set_participants(self, participants: Iterable[Participant]) -> None:
        with self._store.transaction() as state:
            set_participants(state, participants)

    def remove_participant(self, participant_id: str) -> None:
        with self._store.transaction() as state:
            remove_participant(state, participant_id)

    def set_prizes(self, prizes: Iterable[Prize]) -> None:
        with self._store.transaction() as state:
            set_prizes(state, prizes)

    def add_prize(self, prize: Prize) -> None:
        with self._store.transaction() as state:
            add_prize(state, prize)

    def update_prize(self, prize_id: str, **changes: Any) -> None:
        with self._store.transaction() as state:
            update_prize(state, prize_id, **changes)

    def remove_prize(self, prize_id: str) -> None:
        with self._store.transaction() as state:
            remove_prize(state, prize_id)

    def decrement_quantity(self, prize_id: str) -> None:
        with self._store.transaction() as state:
            decrement_quantity(state, prize_id)

    def select_prize(self, prize_id: Optional[str]) -> None:
        with self._store.transaction() as state:
            select_prize(state, prize_id)

    def available_prizes(self) -> list[Prize]:
        return available_prizes(self._store.state)

    def selected_prize(self) -> Optional[Prize]:
        return selected_prize(self._store.state)

    @property
    def participants(self) -> list[Participant]:
        return list(self._store.state.participants)


__all__ = [
    "InventoryLedger",
    "add_prize",
    "available_prizes",
    "decrement_quantity",
    "drop_stale_selection",
    "find_prize",
    "remove_participant",
    "remove_prize",
    "select_prize",
    "selected_prize",
    "set_participants",
    "set_prizes",
    "update_prize",
]
