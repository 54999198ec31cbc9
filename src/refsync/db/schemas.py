"""Pydantic schemas for data validation.

These schemas define the structure of library items and notes as they
enter the local database.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ItemType(str, Enum):
    """Bibliographic item types."""

    JOURNAL_ARTICLE = "journalArticle"
    BOOK = "book"
    BOOK_SECTION = "bookSection"
    CONFERENCE_PAPER = "conferencePaper"
    THESIS = "thesis"
    REPORT = "report"
    PREPRINT = "preprint"
    WEBPAGE = "webpage"
    DOCUMENT = "document"
    NOTE = "note"


class CreatorType(str, Enum):
    """Role of a creator on an item."""

    AUTHOR = "author"
    EDITOR = "editor"
    TRANSLATOR = "translator"
    CONTRIBUTOR = "contributor"


# ============================================================================
# Item Schemas
# ============================================================================


class CreatorSchema(BaseModel):
    """A person credited on an item."""

    first_name: str = ""
    last_name: str = Field(..., min_length=1)
    creator_type: CreatorType = CreatorType.AUTHOR

    @classmethod
    def parse(cls, value: str, creator_type: CreatorType = CreatorType.AUTHOR) -> "CreatorSchema":
        """Parse "Last, First" (or a single name) into a creator."""
        last, _, first = value.partition(",")
        return cls(
            first_name=first.strip(),
            last_name=last.strip(),
            creator_type=creator_type,
        )

    @property
    def full_name(self) -> str:
        if self.first_name:
            return f"{self.last_name}, {self.first_name}"
        return self.last_name


class ItemCreate(BaseModel):
    """Schema for creating a regular (non-note) item."""

    item_type: ItemType = ItemType.JOURNAL_ARTICLE
    title: str = Field(..., min_length=1, description="Item title")
    short_title: Optional[str] = None
    abstract: Optional[str] = None
    date: Optional[str] = Field(None, description="Free-form date, e.g. '2021-03' or 'March 2021'")
    publication: Optional[str] = Field(None, description="Journal, book or site name")
    volume: Optional[str] = None
    issue: Optional[str] = None
    pages: Optional[str] = None
    publisher: Optional[str] = None
    url: Optional[str] = None
    doi: Optional[str] = None
    extra: Optional[str] = None
    citation_key: Optional[str] = None
    creators: list[CreatorSchema] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    collections: list[str] = Field(default_factory=list)

    @field_validator("item_type")
    @classmethod
    def reject_note_type(cls, v: ItemType) -> ItemType:
        if v == ItemType.NOTE:
            raise ValueError("Use NoteCreate to add notes")
        return v

    @field_validator("tags", "collections")
    @classmethod
    def strip_names(cls, v: list[str]) -> list[str]:
        return [name.strip() for name in v if name.strip()]


class NoteCreate(BaseModel):
    """Schema for creating a note item."""

    parent_id: Optional[int] = Field(None, description="Parent item, None for a standalone note")
    note: str = Field(..., description="Note body as HTML")
