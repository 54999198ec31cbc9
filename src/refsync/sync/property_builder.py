"""Build Notion page properties for a library item.

Only properties that the target database declares, with the same type,
are emitted. The page title goes to the database's title property,
whatever it is called.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..citation import format_author_date_citation, format_citation, format_in_text_citation
from ..constants import RICH_TEXT_CHUNK_LENGTH, RICH_TEXT_MAX_CHUNKS, SELECT_NAME_MAX_LENGTH
from ..db.models import Item
from ..db.schemas import CreatorType
from ..prefs import PageTitleFormat
from ..utils import unique

DatabaseProperties = dict[str, dict[str, Any]]


@dataclass(frozen=True)
class PropertyDefinition:
    """A database property this builder knows how to fill."""

    name: str
    type: str
    build: Callable[[], Any]


def build_rich_text(text: Optional[str]) -> list[dict[str, Any]]:
    """Split text into rich text objects within Notion's length limits."""
    if not text:
        return []
    chunks = [
        text[start : start + RICH_TEXT_CHUNK_LENGTH]
        for start in range(0, len(text), RICH_TEXT_CHUNK_LENGTH)
    ]
    return [{"text": {"content": chunk}} for chunk in chunks[:RICH_TEXT_MAX_CHUNKS]]


def build_select_name(name: str) -> str:
    """Notion option names can't contain commas."""
    return name.replace(",", ";")[:SELECT_NAME_MAX_LENGTH]


def build_date(value: Optional[str]) -> Optional[dict[str, str]]:
    if not value:
        return None
    return {"start": value}


def humanize_item_type(item_type: str) -> str:
    """``journalArticle`` -> ``Journal Article``."""
    return re.sub(r"(?<!^)(?=[A-Z])", " ", item_type).title()


class PropertyBuilder:
    """Maps one item onto the properties of a Notion database."""

    def __init__(
        self,
        citation_format: str,
        database_properties: DatabaseProperties,
        item: Item,
        page_title_format: PageTitleFormat,
    ):
        self.citation_format = citation_format
        self.database_properties = database_properties
        self.item = item
        self.page_title_format = page_title_format

    # ========================================================================
    # Field values
    # ========================================================================

    def get_title(self) -> str:
        return self.item.title or self.item.short_title or ""

    def get_short_title(self) -> str:
        return self.item.short_title or ""

    def get_full_citation(self) -> str:
        return format_citation(self.item, self.citation_format)

    def get_in_text_citation(self) -> str:
        return format_in_text_citation(self.item, self.citation_format)

    def get_page_title(self) -> str:
        fmt = self.page_title_format
        if fmt == PageTitleFormat.ITEM_AUTHOR_DATE_CITATION:
            return format_author_date_citation(self.item)
        if fmt == PageTitleFormat.ITEM_CITATION_KEY:
            return self.item.citation_key or self.get_title()
        if fmt == PageTitleFormat.ITEM_FULL_CITATION:
            return self.get_full_citation()
        if fmt == PageTitleFormat.ITEM_IN_TEXT_CITATION:
            return self.get_in_text_citation()
        if fmt == PageTitleFormat.ITEM_SHORT_TITLE:
            return self.item.short_title or self.get_title()
        return self.get_title()

    def get_creator_names(self, creator_type: CreatorType) -> str:
        return "; ".join(c.full_name for c in self.item.get_creators_of_type(creator_type))

    def get_zotero_uri(self) -> str:
        return f"zotero://select/library/items/{self.item.key}"

    # ========================================================================
    # Property definitions
    # ========================================================================

    def definitions(self) -> list[PropertyDefinition]:
        item = self.item
        return [
            PropertyDefinition("Abstract", "rich_text", lambda: build_rich_text(item.abstract)),
            PropertyDefinition(
                "Authors",
                "rich_text",
                lambda: build_rich_text(self.get_creator_names(CreatorType.AUTHOR)),
            ),
            PropertyDefinition(
                "Citation Key", "rich_text", lambda: build_rich_text(item.citation_key)
            ),
            PropertyDefinition(
                "Collections",
                "multi_select",
                lambda: [
                    {"name": build_select_name(name)}
                    for name in unique(item.get_collections())
                ],
            ),
            PropertyDefinition("Date", "rich_text", lambda: build_rich_text(item.date)),
            PropertyDefinition("Date Added", "date", lambda: build_date(item.date_added)),
            PropertyDefinition("Date Modified", "date", lambda: build_date(item.date_modified)),
            PropertyDefinition("DOI", "rich_text", lambda: build_rich_text(item.doi)),
            PropertyDefinition(
                "Editors",
                "rich_text",
                lambda: build_rich_text(self.get_creator_names(CreatorType.EDITOR)),
            ),
            PropertyDefinition("Extra", "rich_text", lambda: build_rich_text(item.extra)),
            PropertyDefinition(
                "Full Citation", "rich_text", lambda: build_rich_text(self.get_full_citation())
            ),
            PropertyDefinition(
                "In-Text Citation",
                "rich_text",
                lambda: build_rich_text(self.get_in_text_citation()),
            ),
            PropertyDefinition(
                "Item Type",
                "select",
                lambda: {"name": build_select_name(humanize_item_type(item.item_type))},
            ),
            PropertyDefinition("Notes", "rich_text", lambda: build_rich_text(item.notes_text)),
            PropertyDefinition(
                "Short Title", "rich_text", lambda: build_rich_text(self.get_short_title())
            ),
            PropertyDefinition(
                "Tags",
                "multi_select",
                lambda: [
                    {"name": build_select_name(tag)} for tag in unique(item.get_tags())
                ],
            ),
            PropertyDefinition("Title", "rich_text", lambda: build_rich_text(self.get_title())),
            PropertyDefinition("URL", "url", lambda: item.url or None),
            PropertyDefinition("Year", "number", item.get_year),
            PropertyDefinition("Zotero URI", "url", self.get_zotero_uri),
        ]

    def get_title_property_name(self) -> Optional[str]:
        for name, schema in self.database_properties.items():
            if schema.get("type") == "title":
                return name
        return None

    def has_property(self, name: str, property_type: str) -> bool:
        schema = self.database_properties.get(name)
        return schema is not None and schema.get("type") == property_type

    def build(self) -> dict[str, Any]:
        """Build the properties payload for a page create/update call."""
        properties: dict[str, Any] = {}

        title_name = self.get_title_property_name()
        if title_name:
            properties[title_name] = {"title": build_rich_text(self.get_page_title())}

        for definition in self.definitions():
            if definition.name == title_name:
                continue
            if self.has_property(definition.name, definition.type):
                properties[definition.name] = {definition.type: definition.build()}

        return properties


def build_properties(
    citation_format: str,
    database_properties: DatabaseProperties,
    item: Item,
    page_title_format: PageTitleFormat,
) -> dict[str, Any]:
    """Build the Notion properties for an item."""
    return PropertyBuilder(
        citation_format=citation_format,
        database_properties=database_properties,
        item=item,
        page_title_format=page_title_format,
    ).build()
