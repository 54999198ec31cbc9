"""Tests for building Notion page properties."""

from refsync.constants import APA_STYLE
from refsync.db.schemas import ItemType
from refsync.prefs import PageTitleFormat
from refsync.sync.property_builder import (
    build_properties,
    build_rich_text,
    build_select_name,
    humanize_item_type,
)


def title_of(properties: dict, name: str = "Name") -> str:
    return "".join(part["text"]["content"] for part in properties[name]["title"])


class TestHelpers:
    """Tests for property value helpers."""

    def test_rich_text_empty(self):
        assert build_rich_text("") == []
        assert build_rich_text(None) == []

    def test_rich_text_chunked(self):
        """Test that long text is split into 2000 character chunks."""
        chunks = build_rich_text("a" * 4500)
        assert [len(c["text"]["content"]) for c in chunks] == [2000, 2000, 500]

    def test_rich_text_chunk_limit(self):
        chunks = build_rich_text("a" * (2000 * 101))
        assert len(chunks) == 100

    def test_select_name(self):
        assert build_select_name("Smith, John") == "Smith; John"
        assert len(build_select_name("x" * 150)) == 100

    def test_humanize_item_type(self):
        assert humanize_item_type("journalArticle") == "Journal Article"
        assert humanize_item_type("book") == "Book"


class TestBuildProperties:
    """Tests for build_properties."""

    def test_only_declared_properties(self, created_item, database_properties):
        """Test that properties the database lacks are left out."""
        properties = build_properties(
            APA_STYLE, database_properties, created_item, PageTitleFormat.ITEM_TITLE
        )

        assert set(properties) == {"Name", "Authors", "Notes", "Tags", "Year", "URL"}
        assert title_of(properties) == "Deep learning"
        assert properties["Authors"] == {
            "rich_text": [
                {"text": {"content": "LeCun, Yann; Bengio, Yoshua; Hinton, Geoffrey"}}
            ]
        }
        assert properties["Tags"] == {
            "multi_select": [{"name": "machine learning"}, {"name": "review"}]
        }
        assert properties["Year"] == {"number": 2015}
        assert properties["URL"] == {"url": "https://www.nature.com/articles/nature14539"}
        assert properties["Notes"] == {"rich_text": []}

    def test_type_mismatch_skipped(self, created_item):
        """Test that a same-named property of another type is left alone."""
        schema = {
            "Title": {"type": "title"},
            "Year": {"type": "rich_text"},
        }
        properties = build_properties(APA_STYLE, schema, created_item, PageTitleFormat.ITEM_TITLE)

        assert set(properties) == {"Title"}
        assert title_of(properties, "Title") == "Deep learning"

    def test_notes_text_included(self, created_item, database_properties):
        created_item.notes_text = "First\n---\nSecond\n---\n"

        properties = build_properties(
            APA_STYLE, database_properties, created_item, PageTitleFormat.ITEM_TITLE
        )

        assert properties["Notes"] == {
            "rich_text": [{"text": {"content": "First\n---\nSecond\n---\n"}}]
        }

    def test_all_known_properties(self, created_item):
        schema = {
            "Name": {"type": "title"},
            "Citation Key": {"type": "rich_text"},
            "Collections": {"type": "multi_select"},
            "DOI": {"type": "rich_text"},
            "Full Citation": {"type": "rich_text"},
            "In-Text Citation": {"type": "rich_text"},
            "Item Type": {"type": "select"},
            "Zotero URI": {"type": "url"},
            "Date Added": {"type": "date"},
        }
        properties = build_properties(APA_STYLE, schema, created_item, PageTitleFormat.ITEM_TITLE)

        assert properties["Citation Key"]["rich_text"][0]["text"]["content"] == "lecun2015deep"
        assert properties["Collections"] == {"multi_select": [{"name": "Thesis"}]}
        assert properties["DOI"]["rich_text"][0]["text"]["content"] == "10.1038/nature14539"
        assert properties["In-Text Citation"]["rich_text"][0]["text"]["content"] == (
            "(LeCun et al., 2015)"
        )
        assert properties["Item Type"] == {"select": {"name": "Journal Article"}}
        assert properties["Zotero URI"] == {
            "url": f"zotero://select/library/items/{created_item.key}"
        }
        assert properties["Date Added"] == {"date": {"start": created_item.date_added}}

    def test_no_title_property(self, created_item):
        properties = build_properties(
            APA_STYLE, {"Year": {"type": "number"}}, created_item, PageTitleFormat.ITEM_TITLE
        )
        assert properties == {"Year": {"number": 2015}}


class TestPageTitleFormat:
    """Tests for the page title formats."""

    schema = {"Name": {"type": "title"}}

    def build_title(self, item, fmt: PageTitleFormat) -> str:
        return title_of(build_properties(APA_STYLE, self.schema, item, fmt))

    def test_citation_key(self, created_item):
        assert self.build_title(created_item, PageTitleFormat.ITEM_CITATION_KEY) == "lecun2015deep"

    def test_citation_key_falls_back_to_title(self, make_item):
        item = make_item("No Key")
        assert self.build_title(item, PageTitleFormat.ITEM_CITATION_KEY) == "No Key"

    def test_in_text_citation(self, created_item):
        assert self.build_title(created_item, PageTitleFormat.ITEM_IN_TEXT_CITATION) == (
            "(LeCun et al., 2015)"
        )

    def test_author_date(self, created_item):
        assert self.build_title(created_item, PageTitleFormat.ITEM_AUTHOR_DATE_CITATION) == (
            "LeCun et al. (2015) Deep learning"
        )

    def test_full_citation(self, created_item):
        title = self.build_title(created_item, PageTitleFormat.ITEM_FULL_CITATION)
        assert title.startswith("LeCun, Y., Bengio, Y., & Hinton, G. (2015).")

    def test_short_title(self, make_item):
        item = make_item("A Very Long Title", short_title="Long", item_type=ItemType.BOOK)
        assert self.build_title(item, PageTitleFormat.ITEM_SHORT_TITLE) == "Long"
        assert self.build_title(make_item("Plain"), PageTitleFormat.ITEM_SHORT_TITLE) == "Plain"
