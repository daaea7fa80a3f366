"""Ordered fallback over several key-value backends."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..errors import StorageError
from .backends import (
    KeyValueBackend,
    MemoryBackend,
    durable_backend,
    session_backend,
)

logger = logging.getLogger(__name__)


class TieredStorage(KeyValueBackend):
    """Try each backend in order until one accepts the operation.

    Reads are answered by the first reachable tier, even when it does not
    hold the key; lower tiers are only consulted when a tier fails.
    Writes land in the first tier that accepts them; landing in a volatile
    tier logs a warning because the session will not survive a reload.
    Removal is attempted on every tier so that a value written before a
    backend change cannot be resurrected later.
    """

    name = "tiered"

    def __init__(self, backends: Iterable[KeyValueBackend]) -> None:
        self._backends: list[KeyValueBackend] = list(backends)
        if not self._backends:
            raise ValueError("TieredStorage requires at least one backend")
        self._degraded = False

    @property
    def backends(self) -> Sequence[KeyValueBackend]:
        return tuple(self._backends)

    def get_item(self, key: str) -> Optional[str]:
        for backend in self._backends:
            try:
                value = backend.get_item(key)
            except StorageError as exc:
                logger.debug(f"Skipping {backend.name} tier on read: {exc}")
                continue
            logger.debug(f"Read '{key}' from {backend.name} tier (found={value is not None})")
            return value
        return None

    def set_item(self, key: str, value: str) -> None:
        last_error: Optional[StorageError] = None
        for backend in self._backends:
            try:
                backend.set_item(key, value)
            except StorageError as exc:
                logger.debug(f"Skipping {backend.name} tier on write: {exc}")
                last_error = exc
                continue
            if backend.volatile and not self._degraded:
                logger.warning("Storage not available, data will be lost on reload")
            self._degraded = backend.volatile
            return
        raise StorageError(f"No storage tier accepted '{key}'") from last_error

    def remove_item(self, key: str) -> None:
        for backend in self._backends:
            try:
                backend.remove_item(key)
            except StorageError as exc:
                logger.debug(f"Could not purge {backend.name} tier: {exc}")


def default_storage(database_url: Optional[str] = None) -> TieredStorage:
    """Build the durable -> session -> memory chain.

    Tiers that cannot even be constructed are left out of the chain; the
    memory tier is always present.
    """
    backends: list[KeyValueBackend] = []
    for factory in (lambda: durable_backend(database_url), session_backend):
        try:
            backends.append(factory())
        except StorageError as exc:
            logger.warning(f"Storage tier disabled: {exc}")
    backends.append(MemoryBackend())
    return TieredStorage(backends)


__all__ = ["TieredStorage", "default_storage"]
