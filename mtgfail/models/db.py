"""
SQLAlchemy ORM models for persistent storage.

The document store keeps one JSON body per (collection, key).
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class DocumentDB(Base):
    """
    A single stored document.

    Card documents live in the "cards" collection, keyed by normalized name.
    """

    __tablename__ = "documents"
    __table_args__ = (UniqueConstraint("collection", "key", name="uq_collection_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection: Mapped[str] = mapped_column(String(64), index=True)
    key: Mapped[str] = mapped_column(String(255), index=True)
    body: Mapped[dict[str, Any]] = mapped_column(JSON)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<DocumentDB(collection={self.collection}, key={self.key})>"
