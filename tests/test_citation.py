"""Tests for citation formatting."""

import logging

from refsync.citation import (
    format_author_date_citation,
    format_citation,
    format_in_text_citation,
    style_id,
)
from refsync.constants import APA_STYLE
from refsync.db.schemas import CreatorSchema, CreatorType, ItemType


class TestStyleId:
    """Tests for style_id."""

    def test_quick_copy_setting(self):
        assert style_id(APA_STYLE) == "apa"

    def test_bare_url(self):
        assert style_id("http://www.zotero.org/styles/chicago-note-bibliography/") == (
            "chicago-note-bibliography"
        )


class TestFormatCitation:
    """Tests for bibliography entries."""

    def test_journal_article(self, created_item):
        """Test a full journal article reference."""
        assert format_citation(created_item, APA_STYLE) == (
            "LeCun, Y., Bengio, Y., & Hinton, G. (2015). Deep learning. "
            "Nature, 521(7553), 436-444. https://doi.org/10.1038/nature14539"
        )

    def test_edited_book(self, make_item, editor_creator):
        item = make_item(
            "Handbook",
            item_type=ItemType.BOOK,
            date="2020",
            publisher="MIT Press",
            creators=[editor_creator],
        )
        assert format_citation(item, APA_STYLE) == "Doe, J. (Ed.). (2020). Handbook. MIT Press."

    def test_no_creators_no_date(self, make_item):
        item = make_item("Untitled Report", item_type=ItemType.REPORT, creators=[])
        assert format_citation(item, APA_STYLE) == "Untitled Report. (n.d.)."

    def test_url_used_without_doi(self, make_item):
        item = make_item(
            "A Page", item_type=ItemType.WEBPAGE, date="2021", url="https://example.com/page"
        )
        assert format_citation(item, APA_STYLE) == (
            "Lovelace, A. (2021). A Page. https://example.com/page"
        )

    def test_title_punctuation_kept(self, make_item):
        item = make_item("Is it?", date="2001")
        assert format_citation(item, APA_STYLE) == "Lovelace, A. (2001). Is it?"

    def test_hyphenated_and_middle_initials(self, make_item):
        item = make_item(
            "Essays",
            date="1960",
            creators=[
                CreatorSchema(first_name="Jean-Paul", last_name="Sartre"),
                CreatorSchema(first_name="Simone L.", last_name="Beauvoir"),
            ],
        )
        assert format_citation(item, APA_STYLE).startswith(
            "Sartre, J.-P., & Beauvoir, S. L. (1960)."
        )

    def test_long_author_list_elided(self, make_item):
        creators = [CreatorSchema(first_name="A", last_name=f"Author{i}") for i in range(1, 22)]
        item = make_item("Big Team", date="2019", creators=creators)

        citation = format_citation(item, APA_STYLE)

        assert "Author19, A., . . . Author21, A." in citation
        assert "Author20" not in citation

    def test_unsupported_style_falls_back(self, created_item, caplog):
        """Test that other styles are rendered as APA."""
        with caplog.at_level(logging.DEBUG, logger="refsync.citation"):
            citation = format_citation(
                created_item, "bibliography=http://www.zotero.org/styles/nature"
            )

        assert citation == format_citation(created_item, APA_STYLE)
        assert "nature is not supported" in caplog.text


class TestInTextCitation:
    """Tests for in-text and author-date citations."""

    def test_three_authors(self, created_item):
        assert format_in_text_citation(created_item, APA_STYLE) == "(LeCun et al., 2015)"

    def test_two_authors(self, make_item):
        item = make_item(
            "Pair",
            date="2010",
            creators=[
                CreatorSchema(first_name="A", last_name="Smith"),
                CreatorSchema(first_name="B", last_name="Doe"),
            ],
        )
        assert format_in_text_citation(item, APA_STYLE) == "(Smith & Doe, 2010)"

    def test_editors_used_without_authors(self, make_item, editor_creator):
        item = make_item("Handbook", date="2020", creators=[editor_creator])
        assert format_in_text_citation(item, APA_STYLE) == "(Doe, 2020)"

    def test_no_creators_uses_title(self, make_item):
        item = make_item("Anonymous Pamphlet", short_title="Pamphlet", creators=[])
        assert format_in_text_citation(item, APA_STYLE) == '("Pamphlet", n.d.)'

    def test_author_date(self, created_item):
        assert format_author_date_citation(created_item) == "LeCun et al. (2015) Deep learning"

    def test_author_date_without_creators(self, make_item):
        item = make_item("Untitled", date="1999", creators=[])
        assert format_author_date_citation(item) == "(1999) Untitled"

    def test_translators_ignored(self, make_item):
        item = make_item(
            "Translated",
            date="2000",
            creators=[
                CreatorSchema(first_name="T", last_name="Ranslator", creator_type=CreatorType.TRANSLATOR),
                CreatorSchema(first_name="A", last_name="Uthor"),
            ],
        )
        assert format_in_text_citation(item, APA_STYLE) == "(Uthor, 2000)"
