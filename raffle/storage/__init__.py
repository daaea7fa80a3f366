"""Storage tiers for the durable session store."""

from .backends import (
    KeyValueBackend,
    MemoryBackend,
    SqlBackend,
    durable_backend,
    session_backend,
)
from .tiered import TieredStorage, default_storage

__all__ = [
    "KeyValueBackend",
    "MemoryBackend",
    "SqlBackend",
    "TieredStorage",
    "default_storage",
    "durable_backend",
    "session_backend",
]
