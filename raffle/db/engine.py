from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import os
from pathlib import Path
from dotenv import load_dotenv
from .utils import resolve_sqlite_url

# Get DB url
load_dotenv()
# Project root directory (repo root)
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./raffle.db"), ROOT_DIR
)

# In-memory database shared by every connection of this process. It outlives
# individual stores (a reload) but not the interpreter (a restart).
PROCESS_SQLITE_URL = "sqlite+pysqlite://"


from typing import Optional


def make_engine(database_url: Optional[str] = None, echo: bool = False):
    url = database_url or DEFAULT_SQLITE_URL
    engine = create_engine(
        url,
        echo=echo,
        future=True,
    )
    return engine


_durable_engines: dict = {}


def durable_engine(database_url: Optional[str] = None):
    """Return the engine for ``database_url``, created once per process.

    Every store opened on the same database shares one connection pool.
    """
    url = database_url or DEFAULT_SQLITE_URL
    engine = _durable_engines.get(url)
    if engine is None:
        engine = _durable_engines[url] = make_engine(url)
    return engine


def dispose_engines() -> None:
    """Dispose every cached durable engine; later calls build fresh ones."""
    while _durable_engines:
        _, engine = _durable_engines.popitem()
        engine.dispose()


_process_engine = None


def process_engine():
    """Return the lazily created engine behind the session-scoped tier."""
    global _process_engine
    if _process_engine is None:
        _process_engine = create_engine(
            PROCESS_SQLITE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            future=True,
        )
    return _process_engine


def get_sessionmaker(engine):
    return sessionmaker(
        bind=engine,
        expire_on_commit=False,  # Keep rows readable after the write transaction closes
        future=True,
    )
