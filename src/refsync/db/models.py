"""SQLAlchemy ORM models for the local library database.

Tables:
- items: Regular bibliographic items and notes
- attachments: Link attachments on items
"""

import json
import random
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..utils import html_to_text
from .schemas import CreatorSchema, CreatorType, ItemType

# Alphabet used for item keys (no 0/1/O to keep keys readable)
KEY_ALPHABET = "23456789ABCDEFGHIJKLMNPQRSTUVWXYZ"


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_key() -> str:
    """Generate an 8-character item key."""
    return "".join(random.choices(KEY_ALPHABET, k=8))


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Item(Base):
    """Library item - a bibliographic record or a note."""

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(8), unique=True, default=generate_key)
    item_type: Mapped[str] = mapped_column(
        String(30), default=ItemType.JOURNAL_ARTICLE.value, index=True
    )

    # Bibliographic fields
    title: Mapped[str] = mapped_column(String(1000), default="")
    short_title: Mapped[Optional[str]] = mapped_column(String(500))
    abstract: Mapped[Optional[str]] = mapped_column(Text)
    date: Mapped[Optional[str]] = mapped_column(String(50))
    publication: Mapped[Optional[str]] = mapped_column(String(500))
    volume: Mapped[Optional[str]] = mapped_column(String(50))
    issue: Mapped[Optional[str]] = mapped_column(String(50))
    pages: Mapped[Optional[str]] = mapped_column(String(50))
    publisher: Mapped[Optional[str]] = mapped_column(String(500))
    url: Mapped[Optional[str]] = mapped_column(Text)
    doi: Mapped[Optional[str]] = mapped_column(String(200))
    extra: Mapped[Optional[str]] = mapped_column(Text)
    citation_key: Mapped[Optional[str]] = mapped_column(String(200), index=True)
    creators: Mapped[Optional[str]] = mapped_column(Text)  # JSON array
    tags: Mapped[Optional[str]] = mapped_column(Text)  # JSON array
    collections: Mapped[Optional[str]] = mapped_column(Text)  # JSON array

    # Notes
    note: Mapped[Optional[str]] = mapped_column(Text)  # HTML body
    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("items.id"), index=True
    )

    # Sync tracking
    notion_page_id: Mapped[Optional[str]] = mapped_column(String(36), index=True)

    # Timestamps
    date_added: Mapped[str] = mapped_column(String(32), default=utc_now)
    date_modified: Mapped[str] = mapped_column(String(32), default=utc_now, onupdate=utc_now)

    # Relationships
    attachments: Mapped[list["Attachment"]] = relationship(
        "Attachment",
        back_populates="item",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    # Sanitized child note text, set during a sync and never persisted
    notes_text = None

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, type={self.item_type}, title='{self.title}')>"

    def is_note(self) -> bool:
        return self.item_type == ItemType.NOTE.value

    def is_regular_item(self) -> bool:
        return not self.is_note()

    # Helper methods for JSON fields
    def get_creators(self) -> list[CreatorSchema]:
        """Get creators in credit order."""
        if self.creators:
            return [CreatorSchema(**c) for c in json.loads(self.creators)]
        return []

    def set_creators(self, creators: list[CreatorSchema]) -> None:
        """Set creators from a list."""
        self.creators = (
            json.dumps([c.model_dump(mode="json") for c in creators]) if creators else None
        )

    def get_creators_of_type(self, creator_type: CreatorType) -> list[CreatorSchema]:
        return [c for c in self.get_creators() if c.creator_type == creator_type]

    def get_tags(self) -> list[str]:
        """Get tags as list."""
        if self.tags:
            return json.loads(self.tags)
        return []

    def set_tags(self, tags: list[str]) -> None:
        """Set tags from list."""
        self.tags = json.dumps(tags) if tags else None

    def has_tag(self, tag: str) -> bool:
        return tag in self.get_tags()

    def get_collections(self) -> list[str]:
        """Get collection names as list."""
        if self.collections:
            return json.loads(self.collections)
        return []

    def set_collections(self, collections: list[str]) -> None:
        """Set collection names from list."""
        self.collections = json.dumps(collections) if collections else None

    def get_year(self) -> Optional[int]:
        """Extract a four-digit year from the free-form date."""
        if not self.date:
            return None
        for token in self.date.replace("/", "-").replace(",", " ").replace("-", " ").split():
            if len(token) == 4 and token.isdigit():
                return int(token)
        return None

    def get_display_title(self) -> str:
        """Title for lists and messages; notes use their first line of text."""
        if self.is_note():
            text = html_to_text(self.note or "").strip()
            return text.splitlines()[0][:80] if text else "(empty note)"
        return self.title or self.short_title or f"Item {self.id}"


class Attachment(Base):
    """Link attachment - a titled URL stored on an item."""

    __tablename__ = "attachments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    date_added: Mapped[str] = mapped_column(String(32), default=utc_now)

    # Relationships
    item: Mapped["Item"] = relationship("Item", back_populates="attachments")

    def __repr__(self) -> str:
        return f"<Attachment(id={self.id}, item_id={self.item_id}, title='{self.title}')>"
