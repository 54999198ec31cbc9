"""Sync jobs: save a batch of library items to a Notion database.

A job resolves the requested items, reads preferences and the database
schema once, then saves the items one at a time. The first failure ends
the job and is reported through the progress window.
"""

import logging
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from notion_client import Client
from notion_client.errors import APIErrorCode, APIResponseError
from rich.console import Console

from ..constants import APA_STYLE, NOTE_SEPARATOR
from ..db.models import Item
from ..db.sqlite import Database, get_db
from ..prefs import PageTitleFormat, Pref, PreferenceStore
from ..utils import html_to_text, unique
from .client import MissingReadCapabilityError, get_notion_client
from .item_data import get_notion_page_id, save_notion_link_attachment, save_notion_tag
from .notion_utils import FullPage, is_notion_error_with_code, to_page_result
from .progress import ProgressWindow
from .property_builder import DatabaseProperties, build_properties

logger = logging.getLogger(__name__)


class ItemSyncState(str, Enum):
    """Where an item of a batch is in the sync."""

    PENDING = "pending"
    SYNCING = "syncing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncJobParams:
    """Everything a sync job needs, gathered before the first item."""

    citation_format: str
    database_id: str
    database_properties: DatabaseProperties
    items: list[Item]
    notion: Client
    page_title_format: PageTitleFormat
    progress_window: ProgressWindow
    db: Database


class ItemSyncError(Exception):
    """Wraps a failure with the item that was being synced."""

    def __init__(self, cause: BaseException, item: Item):
        super().__init__(f"Failed to sync item with ID {item.id} due to {cause}")
        self.cause = cause
        self.item = item


def perform_sync_job(
    item_ids: Iterable[int],
    db: Optional[Database] = None,
    console: Optional[Console] = None,
) -> bool:
    """Save the given items to Notion.

    Failures are logged and shown in the progress window, never raised.

    Args:
        item_ids: IDs of the items to sync; repeats are ignored
        db: Library database (uses global if not provided)
        console: Console the progress window renders to

    Returns:
        False if the job failed, True otherwise
    """
    ids = unique(item_ids)
    if not ids:
        return True

    db = db or get_db()
    items = db.get_items(ids)
    if not items:
        return True

    progress_window = ProgressWindow(len(items), console=console)

    try:
        sync_job = prepare_sync_job(db=db, items=items, progress_window=progress_window)

        sync_job.perform()

        progress_window.complete()
        return True
    except Exception as error:
        cause: BaseException = error
        failed_item: Optional[Item] = None

        if isinstance(error, ItemSyncError):
            cause = error.cause
            failed_item = error.item

        error_message = str(cause)

        logger.error(error_message)
        if cause.__traceback__ is not None:
            logger.error(
                "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
            )

        progress_window.fail(error_message, failed_item)
        return False
    finally:
        progress_window.close()


def prepare_sync_job(
    db: Database, items: list[Item], progress_window: ProgressWindow
) -> "SyncJob":
    """Read preferences and the database schema for a job."""
    prefs = PreferenceStore(db)
    notion = get_notion_client(prefs)
    database_id = prefs.get_required(Pref.NOTION_DATABASE_ID)
    database_properties = retrieve_database_properties(notion, database_id)
    citation_format = get_citation_format(prefs)
    page_title_format = get_page_title_format(prefs)

    return SyncJob(
        SyncJobParams(
            citation_format=citation_format,
            database_id=database_id,
            database_properties=database_properties,
            items=items,
            notion=notion,
            page_title_format=page_title_format,
            progress_window=progress_window,
            db=db,
        )
    )


def get_citation_format(prefs: PreferenceStore) -> str:
    citation_format = prefs.get(Pref.QUICK_COPY_FORMAT)

    if isinstance(citation_format, str) and citation_format:
        return citation_format

    return APA_STYLE


def get_page_title_format(prefs: PreferenceStore) -> PageTitleFormat:
    return prefs.get(Pref.PAGE_TITLE_FORMAT) or PageTitleFormat.ITEM_TITLE


def retrieve_database_properties(notion: Client, database_id: str) -> DatabaseProperties:
    database = notion.databases.retrieve(database_id=database_id)
    return database["properties"]


class SyncJob:
    """Saves a batch of items, stopping at the first failure."""

    def __init__(self, params: SyncJobParams):
        self.citation_format = params.citation_format
        self.database_id = params.database_id
        self.database_properties = params.database_properties
        self.items = params.items
        self.notion = params.notion
        self.page_title_format = params.page_title_format
        self.progress_window = params.progress_window
        self.db = params.db
        self.states = [ItemSyncState.PENDING] * len(self.items)

    @staticmethod
    def sanitize(html: str) -> str:
        return html_to_text(html)

    def perform(self) -> None:
        """Sync every item in order.

        Raises:
            ItemSyncError: For the first item that fails; later items are left pending
        """
        for index, item in enumerate(self.items):
            step = index + 1
            logger.info("Syncing item %d of %d with ID %s", step, len(self.items), item.id)

            self.progress_window.update_text(step)
            self.states[index] = ItemSyncState.SYNCING

            try:
                if item.is_note():
                    # Notes are saved as part of their parent
                    parent = self._get_parent(item)
                    if parent:
                        self.sync_item_and_notes(parent)
                else:
                    self.sync_item_and_notes(item)
            except Exception as error:
                self.states[index] = ItemSyncState.FAILED
                raise ItemSyncError(error, item) from error

            self.states[index] = ItemSyncState.SUCCEEDED
            self.progress_window.update_progress(step)

    def _get_parent(self, note: Item) -> Optional[Item]:
        if note.parent_id is None:
            return None
        parent = self.db.get_item(note.parent_id)
        if parent is None or parent.is_note():
            logger.debug("Skipping note %s: parent %s not found", note.id, note.parent_id)
            return None
        return parent

    def sync_item_and_notes(self, item: Item) -> None:
        """Fold the item's notes into it, then save it."""
        text = ""
        for note_item in self.db.get_items(self.db.get_notes(item.id)):
            text += note_item.note or ""
            text += NOTE_SEPARATOR

        item.notes_text = self.sanitize(text)
        self.sync_regular_item(item)

    def sync_regular_item(self, item: Item) -> None:
        response = self.save_item_to_database(item)

        save_notion_tag(self.db, item)

        page = to_page_result(response)
        if isinstance(page, FullPage):
            save_notion_link_attachment(self.db, item, page)
        else:
            raise MissingReadCapabilityError()

    def save_item_to_database(self, item: Item) -> dict[str, Any]:
        """Update the item's page, or create one if it has none.

        A stored page that Notion no longer has is replaced by a new page.
        """
        page_id = get_notion_page_id(self.db, item)

        properties = build_properties(
            citation_format=self.citation_format,
            database_properties=self.database_properties,
            item=item,
            page_title_format=self.page_title_format,
        )

        if page_id:
            try:
                logger.debug("Updating page %s for item %s", page_id, item.id)
                return self.notion.pages.update(page_id=page_id, properties=properties)
            except APIResponseError as error:
                if not is_notion_error_with_code(error, APIErrorCode.ObjectNotFound):
                    raise
                logger.debug("Page %s not found, creating a new page", page_id)

        logger.debug("Creating page for item %s", item.id)
        return self.notion.pages.create(
            parent={"database_id": self.database_id},
            properties=properties,
        )
