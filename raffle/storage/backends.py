"""Key-value backends the session store can persist into."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..db.engine import durable_engine, get_sessionmaker, process_engine
from ..db.utils import dt_iso
from ..errors import StorageError
from ..models import Base, SessionState

logger = logging.getLogger(__name__)


class KeyValueBackend(ABC):
    """Minimal string key-value capability shared by every storage tier.

    Implementations raise :class:`~raffle.errors.StorageError` when the
    underlying medium is unavailable; a missing key is not an error.
    """

    name: str = "backend"
    volatile: bool = False
    """``True`` when values do not survive re-creating the store."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...


class SqlBackend(KeyValueBackend):
    """Backend storing values as rows of the ``session_state`` table."""

    def __init__(
        self,
        session_factory: sessionmaker,
        *,
        name: str = "sql",
    ) -> None:
        self._session_factory = session_factory
        self.name = name

    @classmethod
    def from_engine(cls, engine, *, name: str = "sql", create_schema: bool = True):
        """Build a backend bound to ``engine``.

        Parameters
        ----------
        engine : Engine
            SQLAlchemy engine of the target database.
        name : str, default: "sql"
            Label used in log messages.
        create_schema : bool, default: True
            Create the ``session_state`` table when it does not exist yet.
            Deployments managed by Alembic may pass ``False``.

        Raises
        ------
        StorageError
            If the schema cannot be created.
        """
        if create_schema:
            try:
                Base.metadata.create_all(engine, tables=[SessionState.__table__])
            except SQLAlchemyError as exc:
                raise StorageError(f"{name} storage is unavailable: {exc}") from exc
        return cls(get_sessionmaker(engine), name=name)

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self._session_factory() as session:
                row = session.get(SessionState, key)
                return None if row is None else row.value
        except SQLAlchemyError as exc:
            raise StorageError(f"{self.name} storage read failed: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(SessionState, key)
                if row is None:
                    row = SessionState(key=key, value=value)
                    session.add(row)
                else:
                    row.value = value
                session.flush()
                logger.debug(f"Saved '{key}' to {self.name} tier at {dt_iso(row.updated_at)}")
        except SQLAlchemyError as exc:
            raise StorageError(f"{self.name} storage write failed: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            with self._session_factory.begin() as session:
                row = session.get(SessionState, key)
                if row is not None:
                    session.delete(row)
        except SQLAlchemyError as exc:
            raise StorageError(f"{self.name} storage remove failed: {exc}") from exc


class MemoryBackend(KeyValueBackend):
    """Last-resort tier holding values in a dict; never fails."""

    name = "memory"
    volatile = True

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


def durable_backend(database_url: Optional[str] = None) -> SqlBackend:
    """Return the tier backed by the configured ``DB_URL`` database."""
    try:
        engine = durable_engine(database_url)
    except SQLAlchemyError as exc:
        raise StorageError(f"durable storage is unavailable: {exc}") from exc
    return SqlBackend.from_engine(engine, name="durable")


def session_backend() -> SqlBackend:
    """Return the tier backed by the process-wide in-memory database."""
    return SqlBackend.from_engine(process_engine(), name="session")


__all__ = [
    "KeyValueBackend",
    "MemoryBackend",
    "SqlBackend",
    "durable_backend",
    "session_backend",
]
