"""Key-value table backing the SQL storage tiers."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class SessionState(Base):
    """One serialized session payload addressed by its storage key."""

    __tablename__ = "session_state"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    """Storage key the payload is addressed by (``lottery-storage`` by default)."""

    value: Mapped[str] = mapped_column(Text, nullable=False)
    """JSON document produced by :meth:`SessionAggregate.to_json`."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    """Timestamp bumped on every save."""

    def __repr__(self) -> str:
        return f"<SessionState key={self.key!r} bytes={len(self.value or '')}>"
