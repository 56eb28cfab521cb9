"""Database model backing the local progress cache."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, UniqueConstraint, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import PK_TYPE, Base


class ProgressEntry(Base):
    """One cached key/value pair belonging to a cache scope.

    A scope stands for a single browser session or device, so separate
    scopes never observe each other's entries.
    """

    __tablename__ = "progress_entries"

    id: Mapped[int] = mapped_column(PK_TYPE, primary_key=True, autoincrement=True)
    """Primary key."""

    scope: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    """Identifier of the device/session owning the entry."""

    key: Mapped[str] = mapped_column(String(50), nullable=False)
    """Cache key, e.g. ``teamId`` or ``round2Drawn``."""

    value: Mapped[str] = mapped_column(String(255), nullable=False)
    """Cached value, always stored as text."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    """Timestamp of the last write."""

    __table_args__ = (
        UniqueConstraint("scope", "key", name="progress_entries_scope_key_key"),
    )

    def __init__(self, *, scope: str, key: str, value: str) -> None:
        self.scope = scope
        self.key = key
        self.value = value

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<ProgressEntry(scope={scope}, key={key}, value={value})>".format(
            scope=self.scope,
            key=self.key,
            value=self.value,
        )

    @classmethod
    def get(cls, session: Session, scope: str, key: str) -> Optional["ProgressEntry"]:
        """Return the entry stored under ``key`` for ``scope``, if any."""
        return session.scalar(select(cls).where(cls.scope == scope, cls.key == key))

    @classmethod
    def for_scope(cls, session: Session, scope: str) -> list["ProgressEntry"]:
        """Return every entry belonging to ``scope`` ordered by key."""
        stmt = select(cls).where(cls.scope == scope).order_by(cls.key)
        return list(session.scalars(stmt))
