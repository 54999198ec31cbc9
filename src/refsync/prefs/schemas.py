"""Schemas for preferences."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Pref(str, Enum):
    """Preference keys."""

    NOTION_TOKEN = "notion_token"
    NOTION_DATABASE_ID = "notion_database_id"
    PAGE_TITLE_FORMAT = "page_title_format"
    QUICK_COPY_FORMAT = "export.quickCopy.setting"


class PageTitleFormat(str, Enum):
    """What goes into the title property of a Notion page."""

    ITEM_AUTHOR_DATE_CITATION = "item_author_date_citation"
    ITEM_CITATION_KEY = "item_citation_key"
    ITEM_FULL_CITATION = "item_full_citation"
    ITEM_IN_TEXT_CITATION = "item_in_text_citation"
    ITEM_SHORT_TITLE = "item_short_title"
    ITEM_TITLE = "item_title"


class PreferenceResponse(BaseModel):
    """Response schema for a preference."""

    key: Pref
    value: Optional[str] = None
    description: Optional[str] = None
    options: Optional[list[str]] = None
    secret: bool = False

    @property
    def display_value(self) -> str:
        if self.value is None:
            return "-"
        if self.secret:
            return self.value[:4] + "…" if len(self.value) > 4 else "…"
        return self.value
