"""
SQLAlchemy ORM models for FamilyBoard.
One shopping list row per household storage key.
"""
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ShoppingListRecord(Base):
    """Persisted shopping list, items stored as a JSON document."""
    __tablename__ = "shopping_lists"

    storage_key: Mapped[str] = mapped_column(String(128), primary_key=True)
    items: Mapped[list] = mapped_column(JSON, default=list)
    last_generated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )
