"""Pytest configuration and shared fixtures.

This module provides fixtures for testing refsync, including an
in-memory library database, sample items, and Notion API mocks.
"""

import io
import itertools
from typing import Callable
from unittest.mock import MagicMock

import pytest
from notion_client.errors import APIErrorCode, APIResponseError
from rich.console import Console

from refsync.config import Config, reset_config
from refsync.db.models import Item
from refsync.db.schemas import CreatorSchema, CreatorType, ItemCreate, ItemType, NoteCreate
from refsync.db.sqlite import Database, reset_db
from refsync.prefs import Pref, PreferenceStore


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's Notion settings out of tests."""
    monkeypatch.delenv("NOTION_TOKEN", raising=False)
    monkeypatch.delenv("NOTION_DATABASE_ID", raising=False)
    reset_config()
    reset_db()
    yield
    reset_config()
    reset_db()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture
def empty_config(tmp_path) -> Config:
    """Configuration with no Notion fallbacks."""
    return Config(db_path=tmp_path / "library.db", notion_token=None, notion_database_id=None)


@pytest.fixture
def prefs(db: Database, empty_config: Config) -> PreferenceStore:
    """Preference store backed by the test database."""
    return PreferenceStore(db, config=empty_config)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_item_data() -> ItemCreate:
    """Create sample item data for testing."""
    return ItemCreate(
        item_type=ItemType.JOURNAL_ARTICLE,
        title="Deep learning",
        date="2015-05-28",
        publication="Nature",
        volume="521",
        issue="7553",
        pages="436-444",
        doi="10.1038/nature14539",
        url="https://www.nature.com/articles/nature14539",
        citation_key="lecun2015deep",
        creators=[
            CreatorSchema(first_name="Yann", last_name="LeCun"),
            CreatorSchema(first_name="Yoshua", last_name="Bengio"),
            CreatorSchema(first_name="Geoffrey", last_name="Hinton"),
        ],
        tags=["machine learning", "review"],
        collections=["Thesis"],
    )


@pytest.fixture
def created_item(db: Database, sample_item_data: ItemCreate) -> Item:
    """Create and return an item in the database."""
    return db.create_item(sample_item_data)


@pytest.fixture
def make_item(db: Database) -> Callable[..., Item]:
    """Factory for quickly adding items with a given title."""

    def _make(title: str, **kwargs) -> Item:
        creators = kwargs.pop(
            "creators", [CreatorSchema(first_name="Ada", last_name="Lovelace")]
        )
        return db.create_item(ItemCreate(title=title, creators=creators, **kwargs))

    return _make


@pytest.fixture
def make_note(db: Database) -> Callable[..., Item]:
    """Factory for adding notes."""

    def _make(parent_id, html: str) -> Item:
        return db.create_note(NoteCreate(parent_id=parent_id, note=html))

    return _make


@pytest.fixture
def editor_creator() -> CreatorSchema:
    return CreatorSchema(first_name="Jane", last_name="Doe", creator_type=CreatorType.EDITOR)


# ============================================================================
# Mock Notion API Fixtures
# ============================================================================


def make_page_response(page_id: str) -> dict:
    """A full page response as returned by pages.create/update."""
    return {
        "object": "page",
        "id": page_id,
        "url": f"https://www.notion.so/{page_id.replace('-', '')}",
        "properties": {},
    }


@pytest.fixture
def database_properties() -> dict:
    """Schema of the test Notion database."""
    return {
        "Name": {"id": "title", "name": "Name", "type": "title", "title": {}},
        "Authors": {"id": "a1", "name": "Authors", "type": "rich_text", "rich_text": {}},
        "Notes": {"id": "n1", "name": "Notes", "type": "rich_text", "rich_text": {}},
        "Tags": {"id": "t1", "name": "Tags", "type": "multi_select", "multi_select": {}},
        "Year": {"id": "y1", "name": "Year", "type": "number", "number": {}},
        "URL": {"id": "u1", "name": "URL", "type": "url", "url": {}},
    }


@pytest.fixture
def mock_notion(database_properties: dict) -> MagicMock:
    """Notion client whose calls succeed with full page responses."""
    counter = itertools.count(1)

    notion = MagicMock()
    notion.databases.retrieve.return_value = {
        "object": "database",
        "id": "db-123",
        "properties": database_properties,
    }
    notion.pages.create.side_effect = lambda **kwargs: make_page_response(
        f"new-page-{next(counter)}"
    )
    notion.pages.update.side_effect = lambda **kwargs: make_page_response(kwargs["page_id"])
    return notion


@pytest.fixture
def api_error() -> Callable[[APIErrorCode], APIResponseError]:
    """Factory for Notion API errors with a given code."""

    class FakeAPIResponseError(APIResponseError):
        def __init__(self, code: APIErrorCode):
            Exception.__init__(self, f"Notion error: {code.value}")
            self.code = code
            self.status = 404 if code == APIErrorCode.ObjectNotFound else 400

    return FakeAPIResponseError


@pytest.fixture
def notion_prefs(prefs: PreferenceStore) -> PreferenceStore:
    """Preferences with the Notion token and database configured."""
    prefs.set(Pref.NOTION_TOKEN, "secret_token")
    prefs.set(Pref.NOTION_DATABASE_ID, "db-123")
    return prefs


@pytest.fixture
def console() -> Console:
    """Console that writes to a buffer."""
    return Console(file=io.StringIO(), width=120)
