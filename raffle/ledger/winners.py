"""Append-only record of confirmed winners."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from ..models import SessionAggregate, Winner

if TYPE_CHECKING:
    from ..store import SessionStore


def commit_winner(aggregate: SessionAggregate, winner: Winner) -> None:
    aggregate.winners = [*aggregate.winners, winner]


def next_timestamp(aggregate: SessionAggregate, now_ms: int) -> int:
    """Return a confirmation time strictly after the last committed winner."""
    if aggregate.winners:
        return max(int(now_ms), aggregate.winners[-1].timestamp + 1)
    return int(now_ms)


def group_by_prize(winners: Iterable[Winner]) -> dict[str, list[Winner]]:
    """Group winners by prize name.

    Groups are ordered by the timestamp of their first winner, i.e. the order
    in which prizes were drawn; winners keep commit order inside a group.
    """
    groups: dict[str, list[Winner]] = {}
    for winner in winners:
        groups.setdefault(winner.prize_name, []).append(winner)
    ordered = sorted(groups.items(), key=lambda item: item[1][0].timestamp)
    return dict(ordered)


class WinnerLedger:
    """Store-bound view over ``SessionAggregate.winners``."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def commit(self, winner: Winner) -> None:
        with self._store.transaction() as state:
            commit_winner(state, winner)

    def by_prize(self) -> dict[str, list[Winner]]:
        return group_by_prize(self._store.state.winners)

    def __len__(self) -> int:
        return len(self._store.state.winners)

    def __iter__(self):
        return iter(list(self._store.state.winners))


__all__ = ["WinnerLedger", "commit_winner", "group_by_prize", "next_timestamp"]
