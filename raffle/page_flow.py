"""Screen admission rules for the raffle presentation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Union

from .ledger.inventory import available_prizes, selected_prize
from .models import Page, SessionAggregate

if TYPE_CHECKING:
    from .store import SessionStore

logger = logging.getLogger(__name__)

_DRAW_PAGES = (Page.PRIZE_SELECTION, Page.LOTTERY)


def resolve_page(aggregate: SessionAggregate, requested: Union[Page, str]) -> Page:
    """Return the screen to show when ``requested`` is entered.

    Rules are evaluated in order and the first match wins:

    1. An unconfigured session always shows ``config``.
    2. Prize selection and the draw need participants and prizes; otherwise
       the session is sent back to ``config``.
    3. Prize selection with every prize exhausted shows ``winners``.
    4. The draw without a resolvable selected prize goes back to ``config``.

    Any other request is admitted as is.
    """
    page = Page(requested)
    if not aggregate.is_configured:
        return Page.CONFIG
    if page in _DRAW_PAGES and (not aggregate.participants or not aggregate.prizes):
        return Page.CONFIG
    if page is Page.PRIZE_SELECTION and not available_prizes(aggregate):
        return Page.WINNERS
    if page is Page.LOTTERY and selected_prize(aggregate) is None:
        return Page.CONFIG
    return page


def next_page_after_confirm(aggregate: SessionAggregate) -> Page:
    """Screen requested once a draw has been confirmed.

    Drawing continues while both prizes and participants remain; otherwise the
    session moves on to the winners summary.
    """
    if available_prizes(aggregate) and aggregate.participants:
        return Page.PRIZE_SELECTION
    return Page.WINNERS


class PageFlowGuard:
    """Admits or redirects screen entries and records the admitted page."""

    def __init__(self, store: SessionStore) -> None:
        self._store = store

    def enter(self, requested: Union[Page, str]) -> Page:
        requested = Page(requested)
        admitted = resolve_page(self._store.state, requested)
        if admitted is not requested:
            logger.info(f"Redirecting '{requested.value}' to '{admitted.value}'")
        if self._store.state.current_page is not admitted:
            self._store.set_current_page(admitted)
        return admitted

    def resume(self) -> Page:
        """Re-enter the persisted page, e.g. right after a reload."""
        return self.enter(self._store.state.current_page)

    @property
    def current_page(self) -> Page:
        return self._store.state.current_page


__all__ = ["PageFlowGuard", "next_page_after_confirm", "resolve_page"]
