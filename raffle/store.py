"""Durable session store holding the raffle aggregate."""

from __future__ import annotations

import copy
import json
import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from dotenv import load_dotenv

from .errors import StorageError
from .ledger.inventory import drop_stale_selection
from .models import Page, SessionAggregate
from .storage import KeyValueBackend, default_storage

logger = logging.getLogger(__name__)

load_dotenv()
DEFAULT_STORAGE_KEY = os.getenv("RAFFLE_STORAGE_KEY", "lottery-storage")
STORAGE_VERSION = 0


class SessionStore:
    """Explicit owner of the session aggregate and its persistence.

    Consumers receive the store by reference and mutate the aggregate only
    through :meth:`transaction`, which applies changes to a draft copy and
    swaps it in (and saves it) when the block completes without raising.
    """

    def __init__(
        self,
        storage: KeyValueBackend,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        state: Optional[SessionAggregate] = None,
    ) -> None:
        self._storage = storage
        self._key = key
        self._state = state if state is not None else SessionAggregate.initial()
        self._draft: Optional[SessionAggregate] = None
        self._generation = 0

    @classmethod
    def open(
        cls,
        storage: Optional[KeyValueBackend] = None,
        *,
        key: str = DEFAULT_STORAGE_KEY,
    ) -> "SessionStore":
        """Load the persisted session or start from the initial aggregate.

        Parameters
        ----------
        storage : Optional[KeyValueBackend], default: None
            Backend to read from and write to. When omitted the default
            durable -> session -> memory chain is used.
        key : str
            Storage key addressing the session payload.
        """
        store = cls(storage if storage is not None else default_storage(), key=key)
        loaded = store.load()
        if loaded is not None:
            store._state = loaded
        return store

    @property
    def state(self) -> SessionAggregate:
        """Current aggregate (the draft while a transaction is open)."""
        return self._draft if self._draft is not None else self._state

    @property
    def storage(self) -> KeyValueBackend:
        return self._storage

    @property
    def key(self) -> str:
        return self._key

    @property
    def generation(self) -> int:
        """Counter bumped by :meth:`reset`; lets callers detect a wiped session."""
        return self._generation

    def load(self) -> Optional[SessionAggregate]:
        """Read the persisted aggregate, or ``None`` when absent or unreadable."""
        try:
            raw = self._storage.get_item(self._key)
        except StorageError as exc:
            logger.warning(f"Could not read session '{self._key}': {exc}")
            return None
        if raw is None:
            return None
        try:
            envelope = json.loads(raw)
            aggregate = SessionAggregate.from_json(envelope["state"])
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable session payload '{self._key}': {exc}")
            return None
        drop_stale_selection(aggregate)
        return aggregate

    def save(self, aggregate: Optional[SessionAggregate] = None) -> None:
        """Persist ``aggregate`` (the current state by default).

        Storage failures never propagate; the aggregate stays in memory.
        """
        if aggregate is not None:
            self._state = aggregate
        payload = json.dumps(
            {"state": self._state.to_json(), "version": STORAGE_VERSION},
            ensure_ascii=False,
        )
        try:
            self._storage.set_item(self._key, payload)
        except StorageError as exc:
            logger.warning(f"Session kept in memory only, save failed: {exc}")

    def clear(self) -> None:
        """Remove the persisted payload from every storage tier."""
        self._storage.remove_item(self._key)

    @contextmanager
    def transaction(self) -> Iterator[SessionAggregate]:
        """Yield a draft of the aggregate and commit it atomically.

        Nested calls share the outer draft, so a sequence of ledger
        operations inside one block is persisted with a single save or not at
        all.
        """
        if self._draft is not None:
            yield self._draft
            return
        draft = copy.deepcopy(self._state)
        self._draft = draft
        try:
            yield draft
        finally:
            self._draft = None
        self._state = draft
        self.save()

    def set_current_page(self, page: Page) -> None:
        with self.transaction() as state:
            state.current_page = Page(page)

    def set_is_configured(self, configured: bool) -> None:
        """Flag the session as configured.

        Raises
        ------
        ValueError
            If ``configured`` is true while participants or prizes are missing.
        """
        with self.transaction() as state:
            if configured and (not state.participants or not state.prizes):
                raise ValueError("A session needs participants and prizes to be configured")
            state.is_configured = bool(configured)

    def reset(self) -> None:
        """Wipe the session: initial aggregate in memory and no payload in any tier."""
        if self._draft is not None:
            raise RuntimeError("Cannot reset the session inside a transaction")
        self._state = SessionAggregate.initial()
        self._generation += 1
        self.clear()
        logger.info(f"Session '{self._key}' reset")


__all__ = ["DEFAULT_STORAGE_KEY", "SessionStore"]
