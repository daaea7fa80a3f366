"""Input bindings of the lottery screen."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .draw import DrawEngine, DrawState
from .models import Page, Winner
from .page_flow import PageFlowGuard
from .store import SessionStore
from .workflows import reset_session

logger = logging.getLogger(__name__)

REDRAW_KEY = "F8"
RESET_KEY = "F9"


class LotteryScreen:
    """Keyboard and pointer surface of the drawing screen.

    ``F8`` re-draws once a winner has settled, ``F9`` opens the reset
    confirmation from anywhere, and a click either starts the first spin or
    confirms the settled winner.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        engine: Optional[DrawEngine] = None,
        guard: Optional[PageFlowGuard] = None,
    ) -> None:
        self._store = store
        self.guard = guard or PageFlowGuard(store)
        self.engine = engine or DrawEngine(store, guard=self.guard)
        self.reset_prompt_open = False
        self._started = False
        self._shortcuts: dict[str, tuple[Callable[[], None], Callable[[], bool]]] = {
            REDRAW_KEY: (self.engine.redraw, lambda: self.engine.can_redraw),
            RESET_KEY: (self.open_reset_prompt, lambda: True),
        }

    def mount(self) -> Page:
        """Enter the lottery screen; returns the page actually admitted."""
        self._started = False
        return self.guard.enter(Page.LOTTERY)

    def unmount(self) -> None:
        self.engine.cancel()

    def frame(self, now_ms: float) -> None:
        self.engine.advance(now_ms)

    def key_enabled(self, key: str) -> bool:
        binding = self._shortcuts.get(key)
        return binding is not None and binding[1]()

    def handle_key(self, key: str) -> bool:
        """Dispatch a key press; returns ``True`` when a shortcut ran."""
        binding = self._shortcuts.get(key)
        if binding is None:
            return False
        action, enabled = binding
        if not enabled():
            return False
        action()
        return True

    def click(self) -> Optional[Winner]:
        """Start the first spin, or confirm the settled winner."""
        if not self._started and self.engine.state is DrawState.IDLE:
            self.engine.start()
            self._started = True
            return None
        if self.engine.can_confirm:
            return self.engine.confirm()
        return None

    def open_reset_prompt(self) -> None:
        self.reset_prompt_open = True

    def cancel_reset(self) -> None:
        self.reset_prompt_open = False

    def confirm_reset(self) -> Page:
        self.reset_prompt_open = False
        self._started = False
        return reset_session(self._store, self.engine)


__all__ = ["LotteryScreen", "REDRAW_KEY", "RESET_KEY"]
