from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .session_state import SessionState  # noqa: F401
from .domain import (  # noqa: F401
    Page,
    Participant,
    Prize,
    SessionAggregate,
    Winner,
)

__all__ = [
    "Base",
    "SessionState",
    "Page",
    "Participant",
    "Prize",
    "SessionAggregate",
    "Winner",
]
