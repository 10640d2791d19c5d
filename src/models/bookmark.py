"""Bookmark model."""
from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin

# Largest value of a PostgreSQL INTEGER column
MAX_ID = 2**31 - 1


class Bookmark(Base, TimestampMixin):
    """A catalog entry; `url` is unique across all bookmarks."""

    __tablename__ = "bookmarks"
    __table_args__ = (
        # Supports the time-descending listing scan (id breaks ties)
        Index("ix_bookmarks_created_at_id", "created_at", "id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text)
    url: Mapped[str] = mapped_column(String(2048), unique=True)

    def __repr__(self) -> str:
        return f"Bookmark(id={self.id!r}, url={self.url!r})"
